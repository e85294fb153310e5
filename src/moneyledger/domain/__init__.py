"""Domain records and collaborator protocols."""

from .models import (
    Asset,
    AssetType,
    Debt,
    DebtType,
    EntryKind,
    LedgerEntry,
    Notification,
    PaymentRecord,
    PaymentResult,
    PaymentType,
    Severity,
    Strategy,
)

__all__ = [
    "Asset",
    "AssetType",
    "Debt",
    "DebtType",
    "EntryKind",
    "LedgerEntry",
    "Notification",
    "PaymentRecord",
    "PaymentResult",
    "PaymentType",
    "Severity",
    "Strategy",
]
