"""Shared field types for the I/O schemas."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Timestamps are stored as naive UTC; aware inputs are converted on the way in.
NaiveUTCDatetime = Annotated[datetime, AfterValidator(_to_naive_utc)]
