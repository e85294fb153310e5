"""SQLModel implementation of the debt store."""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, select

from ...domain.models import Debt, DebtType, utcnow
from ...exceptions import NotFoundError, StaleWriteError, ValidationError
from ...models.debt import DebtRow
from ..database import SessionFactory
from ._common import as_money, as_utc

logger = logging.getLogger(__name__)


def row_to_debt(row: DebtRow) -> Debt:
    return Debt(
        id=row.id,
        name=row.name,
        balance=as_money(row.balance) or Decimal("0.00"),
        original_amount=as_money(row.original_amount) or Decimal("0.00"),
        debt_type=DebtType(row.debt_type),
        interest_rate=Decimal(row.interest_rate),
        minimum_payment=as_money(row.minimum_payment),
        due_date=row.due_date,
        is_archived=row.is_archived,
        archived_at=as_utc(row.archived_at),
        version=row.version,
    )


def _debt_values(debt: Debt) -> dict[str, object]:
    if debt.balance < 0:
        raise ValidationError(f"Debt {debt.id!r} balance cannot be negative")
    return {
        "name": debt.name,
        "balance": as_money(debt.balance),
        "original_amount": as_money(debt.original_amount),
        "debt_type": DebtType(debt.debt_type).value,
        "interest_rate": Decimal(debt.interest_rate),
        "minimum_payment": as_money(debt.minimum_payment),
        "due_date": debt.due_date,
        "is_archived": debt.is_archived,
        "archived_at": debt.archived_at,
    }


def write_debt(session: Session, debt: Debt, *, now: Optional[datetime] = None) -> Debt:
    """Insert or update *debt* inside an open session.

    Archiving is one-way: saving an unarchived copy of an archived row raises
    :class:`ValidationError`.
    """

    now = now or utcnow()
    values = _debt_values(debt)
    stored = session.get(DebtRow, debt.id)
    if debt.version == 0:
        if stored is not None:
            raise StaleWriteError("Debt", debt.id, debt.version)
        session.add(DebtRow(id=debt.id, version=1, updated_at=now, **values))
        session.flush()
        return dataclasses.replace(debt, version=1)

    if stored is None:
        raise NotFoundError("Debt", debt.id)
    if stored.is_archived and not debt.is_archived:
        raise ValidationError(f"Debt {debt.id!r} is archived and cannot be reopened")

    statement = (
        update(DebtRow)
        .where(DebtRow.id == debt.id)  # type: ignore[arg-type]
        .where(DebtRow.version == debt.version)  # type: ignore[arg-type]
        .values(version=debt.version + 1, updated_at=now, **values)
    )
    result = session.exec(statement)  # type: ignore[call-overload]
    if result.rowcount != 1:
        logger.warning("Stale debt write rejected", extra={"debt_id": debt.id})
        raise StaleWriteError("Debt", debt.id, debt.version)
    return dataclasses.replace(debt, version=debt.version + 1)


class SQLModelDebtStore:
    """SQLModel-based debt store implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get(self, debt_id: str) -> Optional[Debt]:
        """Retrieve a debt by ID."""
        with self.session_factory() as session:
            row = session.get(DebtRow, debt_id)
            return row_to_debt(row) if row else None

    def save(self, debt: Debt) -> Debt:
        """Write a debt row."""
        with self.session_factory() as session:
            return write_debt(session, debt)

    def list_active(self) -> list[Debt]:
        """List debts that are not archived, by name."""
        with self.session_factory() as session:
            statement = (
                select(DebtRow)
                .where(DebtRow.is_archived == False)  # noqa: E712
                .order_by(DebtRow.name, DebtRow.id)  # type: ignore[arg-type]
            )
            return [row_to_debt(row) for row in session.exec(statement).all()]

    def list_archived(self) -> list[Debt]:
        """List paid-off debts, most recently archived first."""
        with self.session_factory() as session:
            statement = (
                select(DebtRow)
                .where(DebtRow.is_archived == True)  # noqa: E712
                .order_by(DebtRow.archived_at.desc())  # type: ignore[union-attr]
            )
            return [row_to_debt(row) for row in session.exec(statement).all()]
