"""Error taxonomy for the money-integrity core."""

from __future__ import annotations


class MoneyLedgerError(Exception):
    """Base exception for all moneyledger errors."""


class ValidationError(MoneyLedgerError, ValueError):
    """Raised for non-finite, negative, NaN or otherwise disallowed input.

    No partial mutation has happened when this is raised.
    """


class DoubleRevertError(MoneyLedgerError):
    """Raised when a ledger entry is reverted a second time."""

    def __init__(self, entry_id: str):
        super().__init__(f"Ledger entry {entry_id!r} has already been reverted")
        self.entry_id = entry_id


class NotFoundError(MoneyLedgerError, LookupError):
    """Raised when a referenced asset, debt or entry does not exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} {entity_id!r} not found")
        self.entity = entity
        self.entity_id = entity_id


class StaleWriteError(MoneyLedgerError):
    """Raised when a save is based on an outdated version of a row."""

    def __init__(self, entity: str, entity_id: str, expected_version: int):
        super().__init__(
            f"{entity} {entity_id!r} was modified concurrently "
            f"(expected version {expected_version})"
        )
        self.entity = entity
        self.entity_id = entity_id
        self.expected_version = expected_version
