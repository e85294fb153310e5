"""Money-integrity core: balance ledger and debt payoff engine."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, TestingConfig
from .domain.models import (
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
from .exceptions import (
    DoubleRevertError,
    MoneyLedgerError,
    NotFoundError,
    StaleWriteError,
    ValidationError,
)
from .services.balance import BalanceMutator
from .services.ledger_service import LedgerService
from .services.payments import PaymentRecorder
from .services.payoff import PayoffProjection, PayoffSimulator
from .services.strategy import PlannedPayment, StrategyPlanner, minimum_payment

__all__ = [
    "Asset",
    "AssetType",
    "BalanceMutator",
    "BaseConfig",
    "Debt",
    "DebtType",
    "DevConfig",
    "DoubleRevertError",
    "EntryKind",
    "LedgerEntry",
    "LedgerService",
    "MoneyLedgerError",
    "NotFoundError",
    "Notification",
    "PaymentRecord",
    "PaymentRecorder",
    "PaymentResult",
    "PaymentType",
    "PayoffProjection",
    "PayoffSimulator",
    "PlannedPayment",
    "Severity",
    "StaleWriteError",
    "Strategy",
    "StrategyPlanner",
    "TestingConfig",
    "ValidationError",
    "minimum_payment",
]
