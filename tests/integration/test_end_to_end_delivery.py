"""End-to-end delivery: real HTTP transport, file persistence, restarts."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from auditrelay.config import AuditConfig
from auditrelay.config import DeliveryConfig
from auditrelay.connectivity import ConnectivityMonitor
from auditrelay.events import IdentityContext
from auditrelay.pipeline import AuditPipeline
from auditrelay.storage import FileKeyValueStore


def _config(url: str, *, max_retries: int = 3) -> AuditConfig:
    return AuditConfig(
        delivery=DeliveryConfig(
            endpoint_url=url,
            request_timeout_seconds=2.0,
            flush_interval_seconds=0.05,
            max_retries=max_retries,
        ),
        log_network_changes=False,
    )


async def _wait_until(predicate, *, timeout: float = 3.0, interval: float = 0.02) -> bool:
    deadline = asyncio.get_running_loop().time() + timeout
    while asyncio.get_running_loop().time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(interval)
    return False


class TestEndToEndDelivery:
    async def test_eager_delivery_reaches_collector(self, collector, tmp_path: Path):
        store = FileKeyValueStore(tmp_path / "audit.json")
        async with AuditPipeline(
            config=_config(collector.url),
            store=store,
            connectivity=ConnectivityMonitor(online=True),
            route="/admin/users",
        ) as pipeline:
            pipeline.set_user_context(
                IdentityContext(
                    user_id="kc-1", username="dana", client_id=12, session_id="ses_1_aaaaaa"
                )
            )
            pipeline.log("USER_CREATE", {"entity_id": "42", "result": "success"})
            assert await _wait_until(lambda: pipeline.queue_size() == 0)

        body, headers = collector.received[0]
        assert body["client_id"] == 12
        assert body["username"] == "dana"
        assert body["details"]["action"] == "USER_CREATE"
        assert body["details"]["dashboard"] == "org_admin"
        assert body["timestamp"].endswith("Z")
        assert headers["Idempotency-Key"]

    async def test_backlog_survives_restart_and_drains(self, collector, tmp_path: Path):
        store_path = tmp_path / "audit.json"
        collector.default = 503

        first = AuditPipeline(
            config=_config(collector.url, max_retries=50),
            store=FileKeyValueStore(store_path),
            connectivity=ConnectivityMonitor(online=False),
        )
        await first.init()
        first.log("REPORT_GENERATE", {"entity_id": "r-1"})
        first.log("REPORT_DOWNLOAD", {"entity_id": "r-1"})
        assert await _wait_until(
            lambda: any(e.attempts >= 1 for e in first.queue.snapshot())
        )
        await first.shutdown()

        persisted = json.loads(json.loads(store_path.read_text())["avis_audit_queue"])
        assert [row["payload"]["details"]["action"] for row in persisted] == [
            "REPORT_GENERATE",
            "REPORT_DOWNLOAD",
        ]

        collector.default = 200
        received_before = len(collector.received)
        second = AuditPipeline(
            config=_config(collector.url),
            store=FileKeyValueStore(store_path),
            connectivity=ConnectivityMonitor(online=True),
        )
        async with second:
            assert second.queue_size() == 2
            assert await _wait_until(lambda: second.queue_size() == 0)

        actions = [body["details"]["action"] for body, _ in collector.received[received_before:]]
        assert actions == ["REPORT_GENERATE", "REPORT_DOWNLOAD"]

    async def test_poison_event_is_not_retried(self, collector, tmp_path: Path):
        collector.default = 422
        async with AuditPipeline(
            config=_config(collector.url),
            store=FileKeyValueStore(tmp_path / "audit.json"),
            connectivity=ConnectivityMonitor(online=True),
        ) as pipeline:
            pipeline.log("IMPORT", {"meta": {"rows": 10}})
            assert await _wait_until(lambda: pipeline.queue_size() == 0)
            await asyncio.sleep(0.15)

        assert len(collector.received) == 1
