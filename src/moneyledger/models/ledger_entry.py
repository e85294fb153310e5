"""Storage row for ledger entries."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class LedgerEntryRow(SQLModel, table=True):
    """A stored income or expense movement.

    Removal is recorded in ``removed_at`` so a repeated delete can be told
    apart from an id that never existed.
    """

    __tablename__: ClassVar[str] = "ledger_entry"

    id: str = Field(primary_key=True, max_length=32)
    kind: str = Field(nullable=False, max_length=16, description="income | expense")
    amount: Decimal = Field(nullable=False, max_digits=16, decimal_places=2)
    asset_id: Optional[str] = Field(default=None, foreign_key="asset.id", index=True)
    created_at: datetime = Field(nullable=False, index=True)
    description: str = Field(default="", max_length=255)
    category: Optional[str] = Field(default=None, max_length=64)
    debt_id: Optional[str] = Field(default=None, foreign_key="debt.id", index=True)
    removed_at: Optional[datetime] = Field(default=None, index=True)
