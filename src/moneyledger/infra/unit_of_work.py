"""All-or-nothing writes spanning several stores.

Each function here opens one session from the factory and writes every row of
its unit of work inside it. The factory commits on success and rolls back on
any exception, so either every row lands or none does.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from ..domain.models import Asset, LedgerEntry, PaymentResult, utcnow
from .database import SessionFactory
from .repositories.asset import write_asset
from .repositories.debt import write_debt
from .repositories.ledger import insert_entry, mark_removed

logger = logging.getLogger(__name__)


def commit_payment(session_factory: SessionFactory, result: PaymentResult) -> PaymentResult:
    """Persist the debt update, the ledger entry and the funding asset together."""

    now = utcnow()
    with session_factory() as session:
        debt = write_debt(session, result.debt, now=now)
        entry = insert_entry(session, result.ledger_entry)
        asset: Optional[Asset] = None
        if result.asset is not None:
            asset = write_asset(session, result.asset, now=now)
    logger.info(
        "Committed debt payment",
        extra={"debt_id": debt.id, "entry_id": entry.id, "archived": debt.is_archived},
    )
    return dataclasses.replace(result, debt=debt, ledger_entry=entry, asset=asset)


def commit_entry(session_factory: SessionFactory, asset: Asset, entry: LedgerEntry) -> Asset:
    """Persist a new entry together with the balance it produced."""

    with session_factory() as session:
        insert_entry(session, entry)
        stored = write_asset(session, asset)
    return stored


def commit_removal(session_factory: SessionFactory, asset: Asset, entry_id: str) -> Asset:
    """Remove an entry together with the balance revert it caused."""

    with session_factory() as session:
        mark_removed(session, entry_id)
        stored = write_asset(session, asset)
    return stored
