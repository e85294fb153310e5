"""Store-backed ledger operations.

Creating an entry and moving the asset balance, or removing an entry and
reverting the balance, each happen as one unit of work.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from functools import partial
from typing import Callable, Optional, Union

from ..config import BaseConfig
from ..domain.models import Asset, EntryKind, LedgerEntry, new_id, utcnow
from ..domain.repositories import AssetStore, ChangeNotifier, LedgerStore
from ..exceptions import DoubleRevertError, NotFoundError, ValidationError
from ..infra.database import SessionFactory
from ..infra.repositories import SQLModelAssetStore, SQLModelLedgerStore
from ..infra.unit_of_work import commit_entry, commit_removal
from ..money import MoneyInput, positive_cents, quantize
from .alerts import LOW_BALANCE_CRITICAL, LOW_BALANCE_WARNING, dispatch, low_balance_alert
from .balance import BalanceMutator

logger = logging.getLogger(__name__)

EntryCommitter = Callable[[Asset, LedgerEntry], Asset]
RemovalCommitter = Callable[[Asset, str], Asset]


@dataclass(frozen=True, slots=True)
class EntryResult:
    asset: Asset
    entry: LedgerEntry


def _parse_kind(kind: Union[EntryKind, str]) -> EntryKind:
    if isinstance(kind, EntryKind):
        return kind
    try:
        return EntryKind(str(kind).strip().lower())
    except ValueError as exc:
        raise ValidationError(f"Invalid ledger entry kind: {kind!r}") from exc


class LedgerService:
    """Record and delete income/expense entries against stored assets."""

    def __init__(
        self,
        *,
        assets: AssetStore,
        ledger: LedgerStore,
        commit_entry: EntryCommitter,
        commit_removal: RemovalCommitter,
        mutator: Optional[BalanceMutator] = None,
        notifier: Optional[ChangeNotifier] = None,
        low_balance_warning: MoneyInput = LOW_BALANCE_WARNING,
        low_balance_critical: MoneyInput = LOW_BALANCE_CRITICAL,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.assets = assets
        self.ledger = ledger
        self._commit_entry = commit_entry
        self._commit_removal = commit_removal
        self.mutator = mutator or BalanceMutator()
        self.notifier = notifier
        self.low_balance_warning = low_balance_warning
        self.low_balance_critical = low_balance_critical
        self.clock = clock

    @classmethod
    def with_sqlmodel(
        cls,
        session_factory: SessionFactory,
        *,
        config: Optional[BaseConfig] = None,
        notifier: Optional[ChangeNotifier] = None,
    ) -> "LedgerService":
        """Wire the service to the SQLModel stores sharing *session_factory*."""

        thresholds = {}
        if config is not None:
            thresholds = {
                "low_balance_warning": config.LOW_BALANCE_WARNING,
                "low_balance_critical": config.LOW_BALANCE_CRITICAL,
            }
        return cls(
            assets=SQLModelAssetStore(session_factory),
            ledger=SQLModelLedgerStore(session_factory),
            commit_entry=partial(commit_entry, session_factory),
            commit_removal=partial(commit_removal, session_factory),
            notifier=notifier,
            **thresholds,
        )

    def _load_asset(self, asset_id: str) -> Asset:
        asset = self.assets.get(asset_id)
        if asset is None:
            raise NotFoundError("Asset", asset_id)
        return asset

    def record_entry(
        self,
        asset_id: str,
        kind: Union[EntryKind, str],
        amount: MoneyInput,
        description: str = "",
        category: Optional[str] = None,
    ) -> EntryResult:
        """Create an entry and apply it to the asset balance in one write."""

        entry_kind = _parse_kind(kind)
        value = positive_cents(amount)
        asset = self._load_asset(asset_id)

        entry = LedgerEntry(
            id=new_id(),
            kind=entry_kind,
            amount=value,
            asset_id=asset.id,
            created_at=self.clock(),
            description=description,
            category=category,
        )
        updated = self.mutator.apply_entry(asset, entry)
        stored = self._commit_entry(updated, entry)
        logger.info(
            "Recorded %s entry",
            entry_kind.value,
            extra={"entry_id": entry.id, "asset_id": asset.id, "amount": value, "balance": stored.balance},
        )

        if entry_kind == EntryKind.EXPENSE:
            dispatch(
                self.notifier,
                low_balance_alert(
                    stored,
                    warning_threshold=self.low_balance_warning,
                    critical_threshold=self.low_balance_critical,
                ),
            )
        return EntryResult(asset=stored, entry=entry)

    def delete_entry(self, entry_id: str) -> Optional[Asset]:
        """Remove an entry and revert exactly the amount it applied.

        Returns the updated asset, or ``None`` for an entry not tied to one.
        Deleting the same entry twice raises :class:`DoubleRevertError`.
        """

        entry = self.ledger.get(entry_id)
        if entry is None:
            if self.ledger.is_removed(entry_id) or self.mutator.is_reverted(entry_id):
                raise DoubleRevertError(entry_id)
            raise NotFoundError("LedgerEntry", entry_id)

        if entry.asset_id is None:
            self.ledger.remove(entry.id)
            logger.info("Removed unlinked entry", extra={"entry_id": entry.id})
            return None

        asset = self._load_asset(entry.asset_id)
        reverted = self.mutator.revert_entry(asset, entry)
        try:
            stored = self._commit_removal(reverted, entry.id)
        except Exception:
            self.mutator.release(entry.id)
            raise
        logger.info(
            "Deleted %s entry",
            entry.kind.value,
            extra={"entry_id": entry.id, "asset_id": asset.id, "balance": stored.balance},
        )
        return stored

    def recompute_balance(self, asset_id: str) -> Decimal:
        """Balance implied by the surviving entries: initial + income - expense."""

        asset = self._load_asset(asset_id)
        total = asset.initial_balance
        for entry in self.ledger.list_for_asset(asset_id):
            total += entry.amount if entry.kind == EntryKind.INCOME else -entry.amount
        return quantize(total)

    def audit(self, asset_id: str) -> bool:
        """True when the stored balance matches the ledger."""

        asset = self._load_asset(asset_id)
        expected = self.recompute_balance(asset_id)
        if asset.balance != expected:
            logger.error(
                "Asset balance drifted from ledger",
                extra={"asset_id": asset_id, "stored": asset.balance, "expected": expected},
            )
            return False
        return True
