"""Summarize, and optionally flush, a persisted audit backlog.

Usage:
    uv run python scripts/inspect_backlog.py --store var/audit-store.json
    uv run python scripts/inspect_backlog.py --store var/audit-store.json \
      --flush --endpoint https://collector.example/webhook/audit-logs
"""

from __future__ import annotations

import argparse
import asyncio
import json
from collections import Counter

from auditrelay.config import AuditConfig
from auditrelay.config import DeliveryConfig
from auditrelay.config import QueueConfig
from auditrelay.delivery import DeliveryEngine
from auditrelay.delivery import UrllibHttpSender
from auditrelay.queue import DurableQueue
from auditrelay.storage import FileKeyValueStore


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("--store", required=True)
    parser.add_argument("--storage-key", default=QueueConfig.storage_key)
    parser.add_argument("--flush", action="store_true")
    parser.add_argument("--endpoint", default=None)
    return parser.parse_args()


def _summarize(queue: DurableQueue) -> dict:
    entries = queue.snapshot()
    return {
        "size": len(entries),
        "by_action": dict(Counter(e.payload.details.action for e in entries)),
        "by_attempts": {
            str(k): v for k, v in sorted(Counter(e.attempts for e in entries).items())
        },
        "oldest_created_at": min((e.created_at for e in entries), default=None),
    }


async def _main() -> int:
    args = _parse_args()
    queue = DurableQueue(
        FileKeyValueStore(args.store),
        QueueConfig(storage_key=args.storage_key),
    )
    await queue.restore()
    report = {"before": _summarize(queue)}

    if args.flush:
        endpoint = args.endpoint or AuditConfig.from_env().delivery.endpoint_url
        engine = DeliveryEngine(
            queue,
            UrllibHttpSender(endpoint),
            DeliveryConfig(endpoint_url=endpoint),
        )
        await engine.flush()
        report["after"] = _summarize(queue)

    print(json.dumps(report, indent=2, sort_keys=True, ensure_ascii=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(_main()))
