"""Application configuration dataclasses.

Frozen dataclasses with sensible defaults for each subsystem.
Values can be overridden at construction time; ``AuditConfig.from_env``
fills the build metadata and collector URL from environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from dataclasses import field


@dataclass(frozen=True)
class DedupConfig:
    """Burst suppression for repeated identical events."""

    window_seconds: float = 1.5
    max_keys: int = 200


@dataclass(frozen=True)
class QueueConfig:
    """Storage keys and persistence bound for the durable queue."""

    storage_key: str = "avis_audit_queue"
    enabled_storage_key: str = "avis_audit_enabled"
    max_persisted: int = 100


@dataclass(frozen=True)
class DeliveryConfig:
    """Collector endpoint and retry policy."""

    endpoint_url: str = "http://localhost:8080/webhook/audit-logs"
    request_timeout_seconds: float = 8.0
    max_retries: int = 3
    flush_interval_seconds: float = 5.0


@dataclass(frozen=True)
class BuildInfo:
    """Build metadata stamped on every event."""

    environment: str = "production"
    app_version: str = "1.0.0"


@dataclass(frozen=True)
class AuditConfig:
    """Top-level settings for one audit pipeline."""

    dedup: DedupConfig = field(default_factory=DedupConfig)
    queue: QueueConfig = field(default_factory=QueueConfig)
    delivery: DeliveryConfig = field(default_factory=DeliveryConfig)
    build: BuildInfo = field(default_factory=BuildInfo)
    log_network_changes: bool = True

    @classmethod
    def from_env(cls) -> AuditConfig:
        """Build a config from ``AUDIT_*`` environment variables."""
        delivery = DeliveryConfig()
        endpoint = _env("AUDIT_ENDPOINT_URL")
        if endpoint:
            delivery = DeliveryConfig(endpoint_url=endpoint)
        return cls(
            delivery=delivery,
            build=BuildInfo(
                environment=_env("AUDIT_ENVIRONMENT") or BuildInfo.environment,
                app_version=_env("AUDIT_APP_VERSION") or BuildInfo.app_version,
            ),
        )


def _env(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    stripped = raw.strip()
    return stripped if stripped else None
