"""Ledger store protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ..models import LedgerEntry


class LedgerStore(Protocol):
    """Append-only persistence for ledger entries."""

    def get(self, entry_id: str) -> Optional[LedgerEntry]:
        """Retrieve an entry by ID, ``None`` when unknown or removed."""
        ...

    def append(self, entry: LedgerEntry) -> LedgerEntry:
        """Store a new entry."""
        ...

    def remove(self, entry_id: str) -> None:
        """Remove an entry.

        Callers revert the entry's balance effect before or atomically with
        the removal.
        """
        ...

    def list_for_asset(self, asset_id: str) -> list[LedgerEntry]:
        """List the surviving entries tied to an asset."""
        ...

    def is_removed(self, entry_id: str) -> bool:
        """True when the entry existed and has since been removed."""
        ...
