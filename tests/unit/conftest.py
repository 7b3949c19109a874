"""Unit test fixtures: isolated pipelines wired to in-memory fakes."""

from __future__ import annotations

import pytest

from auditrelay.config import AuditConfig
from auditrelay.config import DedupConfig
from auditrelay.config import DeliveryConfig
from auditrelay.connectivity import ConnectivityMonitor
from auditrelay.events import Deduplicator
from auditrelay.observability import reset_delivery_stats
from auditrelay.pipeline import AuditPipeline
from auditrelay.storage import MemoryKeyValueStore
from tests.helpers.fakes import FakeSender
from tests.helpers.fakes import ManualClock


@pytest.fixture(autouse=True)
def _clean_delivery_stats():
    reset_delivery_stats()
    yield
    reset_delivery_stats()


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def sender() -> FakeSender:
    return FakeSender()


@pytest.fixture()
def connectivity() -> ConnectivityMonitor:
    """Starts offline so queued entries stay put until a flush."""
    return ConnectivityMonitor(online=False)


@pytest.fixture()
def config() -> AuditConfig:
    return AuditConfig(
        delivery=DeliveryConfig(
            endpoint_url="http://collector.test/audit",
            request_timeout_seconds=0.5,
            flush_interval_seconds=60.0,
        ),
        log_network_changes=False,
    )


@pytest.fixture()
async def pipeline(config, store, sender, connectivity, clock):
    """Yield an un-started pipeline; shut down afterwards."""
    p = AuditPipeline(
        config=config,
        store=store,
        sender=sender,
        connectivity=connectivity,
        deduplicator=Deduplicator(
            DedupConfig().window_seconds,
            max_keys=DedupConfig().max_keys,
            clock=clock,
        ),
        route="/admin/users",
    )
    yield p
    await p.shutdown()
