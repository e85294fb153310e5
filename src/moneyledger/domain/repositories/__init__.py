"""Collaborator protocols consumed by the core."""

from .asset import AssetStore
from .debt import DebtStore
from .ledger import LedgerStore
from .notifier import ChangeNotifier

__all__ = [
    "AssetStore",
    "ChangeNotifier",
    "DebtStore",
    "LedgerStore",
]
