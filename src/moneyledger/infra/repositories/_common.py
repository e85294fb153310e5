"""Helpers shared by the SQLModel stores."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from ...money import quantize


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands datetimes back naive; they were written as UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def as_money(value: Optional[Decimal]) -> Optional[Decimal]:
    if value is None:
        return None
    return quantize(Decimal(value))
