"""SQLModel implementation of the ledger store."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, select

from ...domain.models import EntryKind, LedgerEntry, utcnow
from ...exceptions import DoubleRevertError, NotFoundError, ValidationError
from ...models.ledger_entry import LedgerEntryRow
from ..database import SessionFactory
from ._common import as_money, as_utc

logger = logging.getLogger(__name__)


def row_to_entry(row: LedgerEntryRow) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,
        kind=EntryKind(row.kind),
        amount=as_money(row.amount),
        asset_id=row.asset_id,
        created_at=as_utc(row.created_at),
        description=row.description,
        category=row.category,
        debt_id=row.debt_id,
    )


def entry_to_row(entry: LedgerEntry) -> LedgerEntryRow:
    return LedgerEntryRow(
        id=entry.id,
        kind=EntryKind(entry.kind).value,
        amount=as_money(entry.amount),
        asset_id=entry.asset_id,
        created_at=entry.created_at,
        description=entry.description,
        category=entry.category,
        debt_id=entry.debt_id,
    )


def insert_entry(session: Session, entry: LedgerEntry) -> LedgerEntry:
    """Insert a new entry inside an open session. Entries are never updated."""

    if session.get(LedgerEntryRow, entry.id) is not None:
        raise ValidationError(f"Ledger entry {entry.id!r} already exists")
    session.add(entry_to_row(entry))
    session.flush()
    return entry


def mark_removed(session: Session, entry_id: str, *, now: Optional[datetime] = None) -> None:
    """Tombstone an entry inside an open session.

    Only a live entry can be removed, so two racing deletes cannot both
    succeed.
    """

    statement = (
        update(LedgerEntryRow)
        .where(LedgerEntryRow.id == entry_id)  # type: ignore[arg-type]
        .where(LedgerEntryRow.removed_at == None)  # noqa: E711
        .values(removed_at=now or utcnow())
    )
    result = session.exec(statement)  # type: ignore[call-overload]
    if result.rowcount == 1:
        return
    if session.get(LedgerEntryRow, entry_id) is None:
        raise NotFoundError("LedgerEntry", entry_id)
    raise DoubleRevertError(entry_id)


class SQLModelLedgerStore:
    """SQLModel-based ledger store implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get(self, entry_id: str) -> Optional[LedgerEntry]:
        """Retrieve a live entry by ID."""
        with self.session_factory() as session:
            row = session.get(LedgerEntryRow, entry_id)
            if row is None or row.removed_at is not None:
                return None
            return row_to_entry(row)

    def is_removed(self, entry_id: str) -> bool:
        """True when the entry existed and has been removed."""
        with self.session_factory() as session:
            row = session.get(LedgerEntryRow, entry_id)
            return row is not None and row.removed_at is not None

    def append(self, entry: LedgerEntry) -> LedgerEntry:
        """Store a new entry."""
        with self.session_factory() as session:
            return insert_entry(session, entry)

    def remove(self, entry_id: str) -> None:
        """Remove an entry. Balance reverts are the caller's job."""
        with self.session_factory() as session:
            mark_removed(session, entry_id)

    def list_for_asset(self, asset_id: str) -> list[LedgerEntry]:
        """List surviving entries tied to an asset, oldest first."""
        with self.session_factory() as session:
            statement = (
                select(LedgerEntryRow)
                .where(LedgerEntryRow.asset_id == asset_id)
                .where(LedgerEntryRow.removed_at == None)  # noqa: E711
                .order_by(LedgerEntryRow.created_at, LedgerEntryRow.id)  # type: ignore[arg-type]
            )
            return [row_to_entry(row) for row in session.exec(statement).all()]

    def list_for_debt(self, debt_id: str) -> list[LedgerEntry]:
        """List surviving payment entries recorded against a debt."""
        with self.session_factory() as session:
            statement = (
                select(LedgerEntryRow)
                .where(LedgerEntryRow.debt_id == debt_id)
                .where(LedgerEntryRow.removed_at == None)  # noqa: E711
                .order_by(LedgerEntryRow.created_at, LedgerEntryRow.id)  # type: ignore[arg-type]
            )
            return [row_to_entry(row) for row in session.exec(statement).all()]
