"""Queue entry model."""

from __future__ import annotations

import random
import string
import time

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from auditrelay.events.schemas import Envelope

_BASE36 = string.ascii_lowercase + string.digits


def _now_ms() -> int:
    return int(time.time() * 1000)


def new_entry_id() -> str:
    """Return an id of the form ``<epoch-ms>-<7 base36 chars>``."""
    return f"{_now_ms()}-{''.join(random.choices(_BASE36, k=7))}"


class QueueEntry(BaseModel):
    """One undelivered event plus its retry bookkeeping.

    Only ``attempts`` changes after construction.  Persisted with the
    ``createdAt`` alias.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        default_factory=new_entry_id,
        description="Event identity, also sent as the idempotency key.",
    )
    payload: Envelope
    attempts: int = Field(default=0, ge=0)
    created_at: int = Field(
        default_factory=_now_ms,
        alias="createdAt",
        description="Unix epoch milliseconds when the entry was queued.",
    )
