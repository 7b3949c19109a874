"""HTTP transport to the audit collector."""

from __future__ import annotations

import asyncio
import json
from typing import Any
from typing import Protocol
from urllib.error import HTTPError
from urllib.error import URLError
from urllib.request import Request
from urllib.request import urlopen


class HttpSender(Protocol):
    """Protocol for collector transports.

    ``post`` returns the HTTP status of the response, whatever it is.
    Network-level failures raise ``TransportError``.
    """

    async def post(
        self,
        payload: dict[str, Any],
        *,
        event_id: str,
        timeout_seconds: float,
    ) -> int: ...


class TransportError(Exception):
    """Raised by senders when no HTTP response was obtained."""


def is_delivered(status: int) -> bool:
    """Whether *status* resolves an entry.

    Success and redirect count as delivered.  Any 4xx is a rejection of
    the payload itself and retrying cannot fix it, so it resolves the
    entry too.  Only 5xx is retryable.
    """
    return status < 500


class UrllibHttpSender(HttpSender):
    """POSTs JSON envelopes with ``urllib`` on a worker thread."""

    def __init__(self, endpoint_url: str) -> None:
        self._endpoint_url = endpoint_url

    async def post(
        self,
        payload: dict[str, Any],
        *,
        event_id: str,
        timeout_seconds: float,
    ) -> int:
        return await asyncio.to_thread(
            self._post_sync,
            payload,
            event_id=event_id,
            timeout_seconds=timeout_seconds,
        )

    def _post_sync(
        self,
        payload: dict[str, Any],
        *,
        event_id: str,
        timeout_seconds: float,
    ) -> int:
        request = Request(
            url=self._endpoint_url,
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "Idempotency-Key": event_id,
            },
            method="POST",
        )
        try:
            with urlopen(request, timeout=timeout_seconds) as response:
                return int(response.status)
        except HTTPError as exc:
            return int(exc.code)
        except URLError as exc:
            raise TransportError(f"collector network error: {exc.reason}") from exc
        except OSError as exc:
            raise TransportError(f"collector IO error: {exc}") from exc
