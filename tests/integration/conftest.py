"""Integration fixtures: local collector."""

from __future__ import annotations

import pytest

from tests.integration.collector import RecordingCollector


@pytest.fixture()
def collector():
    server = RecordingCollector().start()
    yield server
    server.stop()
