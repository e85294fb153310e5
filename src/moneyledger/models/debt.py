"""Storage row for debts."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class DebtRow(SQLModel, table=True):
    """Persisted liability. Archived rows are kept, never deleted."""

    __tablename__: ClassVar[str] = "debt"

    id: str = Field(primary_key=True, max_length=32)
    name: str = Field(nullable=False, max_length=80, index=True)
    balance: Decimal = Field(nullable=False, max_digits=16, decimal_places=2)
    original_amount: Decimal = Field(nullable=False, max_digits=16, decimal_places=2)
    debt_type: str = Field(default="other", max_length=32)
    interest_rate: Decimal = Field(
        default=Decimal("0"),
        max_digits=9,
        decimal_places=4,
        description="Percent per month",
    )
    minimum_payment: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=2)
    due_date: Optional[date] = Field(default=None)
    is_archived: bool = Field(default=False, nullable=False, index=True)
    archived_at: Optional[datetime] = Field(default=None)
    version: int = Field(default=1, nullable=False)
    updated_at: Optional[datetime] = Field(default=None)
