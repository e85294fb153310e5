"""SQLModel store implementations."""

from .asset import SQLModelAssetStore
from .debt import SQLModelDebtStore
from .ledger import SQLModelLedgerStore

__all__ = [
    "SQLModelAssetStore",
    "SQLModelDebtStore",
    "SQLModelLedgerStore",
]
