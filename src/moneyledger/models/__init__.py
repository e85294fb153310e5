"""SQLModel table exports."""

from .asset import AssetRow
from .debt import DebtRow
from .ledger_entry import LedgerEntryRow

__all__ = [
    "AssetRow",
    "DebtRow",
    "LedgerEntryRow",
]
