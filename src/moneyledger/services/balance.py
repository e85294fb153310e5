"""Balance mutations for assets.

Every income or expense movement goes through :class:`BalanceMutator`. It
keeps ``asset.balance == initial_balance + Σincome − Σexpense`` over the
surviving ledger entries, and guarantees each entry is reverted at most once.
"""

from __future__ import annotations

import dataclasses
import logging
from decimal import Decimal
from typing import Iterable, Optional

from ..domain.models import Asset, EntryKind, LedgerEntry
from ..exceptions import DoubleRevertError, ValidationError
from ..money import MoneyInput, non_negative, quantize

logger = logging.getLogger(__name__)


class BalanceMutator:
    """Apply and revert ledger movements against an asset balance.

    Operations are pure state transitions: they return a new :class:`Asset`
    and leave the argument untouched, so callers can discard the result when
    the surrounding write fails. The only state kept here is the set of entry
    ids that have already been reverted.
    """

    def __init__(self, reverted_ids: Optional[Iterable[str]] = None):
        self._reverted: set[str] = set(reverted_ids or ())

    def is_reverted(self, entry_id: str) -> bool:
        return entry_id in self._reverted

    def release(self, entry_id: str) -> None:
        """Forget a revert whose write was rolled back, so it can be retried."""

        self._reverted.discard(entry_id)

    def apply_income(self, asset: Asset, amount: MoneyInput) -> Asset:
        return self._adjust(asset, non_negative(amount), operation="apply_income")

    def apply_expense(self, asset: Asset, amount: MoneyInput) -> Asset:
        # Overdraft is allowed: a card or account may go below zero.
        return self._adjust(asset, -non_negative(amount), operation="apply_expense")

    def revert_income(self, asset: Asset, amount: MoneyInput, *, entry_id: str) -> Asset:
        return self._revert(asset, -non_negative(amount), entry_id, operation="revert_income")

    def revert_expense(self, asset: Asset, amount: MoneyInput, *, entry_id: str) -> Asset:
        return self._revert(asset, non_negative(amount), entry_id, operation="revert_expense")

    def apply_entry(self, asset: Asset, entry: LedgerEntry) -> Asset:
        """Apply a stored entry according to its kind."""

        self._check_owner(asset, entry)
        if entry.kind == EntryKind.INCOME:
            return self.apply_income(asset, entry.amount)
        return self.apply_expense(asset, entry.amount)

    def revert_entry(self, asset: Asset, entry: LedgerEntry) -> Asset:
        """Undo exactly the amount *entry* originally applied."""

        self._check_owner(asset, entry)
        if entry.kind == EntryKind.INCOME:
            return self.revert_income(asset, entry.amount, entry_id=entry.id)
        return self.revert_expense(asset, entry.amount, entry_id=entry.id)

    def _revert(self, asset: Asset, delta: Decimal, entry_id: str, *, operation: str) -> Asset:
        if not entry_id:
            raise ValidationError("entry_id is required to revert a movement")
        if entry_id in self._reverted:
            logger.warning(
                "Rejected double revert",
                extra={"asset_id": asset.id, "entry_id": entry_id, "operation": operation},
            )
            raise DoubleRevertError(entry_id)
        updated = self._adjust(asset, delta, operation=operation)
        self._reverted.add(entry_id)
        return updated

    def _adjust(self, asset: Asset, delta: Decimal, *, operation: str) -> Asset:
        delta = quantize(delta)
        new_balance = quantize(asset.balance + delta)
        logger.debug(
            "Balance %s on %s: %s -> %s",
            operation,
            asset.id,
            asset.balance,
            new_balance,
            extra={"asset_id": asset.id, "operation": operation, "delta": delta},
        )
        return dataclasses.replace(asset, balance=new_balance)

    @staticmethod
    def _check_owner(asset: Asset, entry: LedgerEntry) -> None:
        if entry.asset_id != asset.id:
            raise ValidationError(
                f"Ledger entry {entry.id!r} belongs to asset {entry.asset_id!r}, not {asset.id!r}"
            )
