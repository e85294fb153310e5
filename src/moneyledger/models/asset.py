"""Storage row for assets."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class AssetRow(SQLModel, table=True):
    """Persisted asset with its running balance."""

    __tablename__: ClassVar[str] = "asset"

    id: str = Field(primary_key=True, max_length=32)
    name: str = Field(nullable=False, max_length=128)
    asset_type: str = Field(default="other", max_length=32)
    initial_balance: Decimal = Field(default=Decimal("0"), max_digits=16, decimal_places=2)
    balance: Decimal = Field(default=Decimal("0"), max_digits=16, decimal_places=2)
    # Optimistic concurrency token, bumped on every write
    version: int = Field(default=1, nullable=False)
    updated_at: Optional[datetime] = Field(default=None)
