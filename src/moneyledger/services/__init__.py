"""Service module exports."""

from . import alerts, balance, ledger_service, payments, payoff, strategy
from .balance import BalanceMutator
from .ledger_service import LedgerService
from .payments import PaymentRecorder
from .payoff import PayoffProjection, PayoffSimulator
from .strategy import DebtOverview, PlannedPayment, StrategyPlanner, minimum_payment

__all__ = [
    "alerts",
    "balance",
    "ledger_service",
    "payments",
    "payoff",
    "strategy",
    "BalanceMutator",
    "DebtOverview",
    "LedgerService",
    "PaymentRecorder",
    "PayoffProjection",
    "PayoffSimulator",
    "PlannedPayment",
    "StrategyPlanner",
    "minimum_payment",
]
