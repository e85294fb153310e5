"""Domain records for the ledger and the debt payoff engine.

These are the strictly typed objects the services operate on. Storage rows
live in :mod:`moneyledger.models` and are converted at the store boundary.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional


def new_id() -> str:
    """Return a fresh identifier for a domain record."""

    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssetType(str, Enum):
    CASH = "cash"
    BANK_ACCOUNT = "bank_account"
    CREDIT_CARD = "credit_card"
    INVESTMENT = "investment"
    OTHER = "other"


class EntryKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class DebtType(str, Enum):
    CREDIT_CARD = "credit_card"
    LOAN = "loan"
    MORTGAGE = "mortgage"
    STUDENT_LOAN = "student_loan"
    OTHER = "other"


class PaymentType(str, Enum):
    REGULAR = "regular"
    EXTRA = "extra"
    INTEREST_ONLY = "interest_only"


class Strategy(str, Enum):
    """Debt repayment orderings."""

    AVALANCHE = "avalanche"  # highest interest rate first
    SNOWBALL = "snowball"  # smallest balance first


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(slots=True)
class Asset:
    """Something that holds money: a wallet, an account, a card.

    ``balance`` is derived state: ``initial_balance`` plus surviving income
    minus surviving expenses. Only the balance mutator changes it.
    """

    id: str
    name: str
    asset_type: AssetType
    initial_balance: Decimal
    balance: Decimal
    version: int = 0


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """A single income or expense movement. Immutable once created."""

    id: str
    kind: EntryKind
    amount: Decimal
    asset_id: Optional[str]
    created_at: datetime
    description: str = ""
    category: Optional[str] = None
    debt_id: Optional[str] = None


@dataclass(slots=True)
class Debt:
    """An outstanding liability.

    ``interest_rate`` is a percentage applied once per simulation period
    (monthly): ``3.5`` means 3.5 % of the balance accrues each month.
    """

    id: str
    name: str
    balance: Decimal
    original_amount: Decimal
    debt_type: DebtType = DebtType.OTHER
    interest_rate: Decimal = Decimal("0")
    minimum_payment: Optional[Decimal] = None
    due_date: Optional[date] = None
    is_archived: bool = False
    archived_at: Optional[datetime] = None
    version: int = 0


@dataclass(frozen=True, slots=True)
class PaymentRecord:
    """Input to the payment recorder; not persisted on its own."""

    debt_id: str
    amount: Decimal
    payment_type: PaymentType = PaymentType.REGULAR
    description: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PaymentResult:
    """All records touched by one debt payment.

    The persistence collaborator writes every record here in one transaction
    or none of them.
    """

    debt: Debt
    ledger_entry: LedgerEntry
    payment: PaymentRecord
    asset: Optional[Asset] = None


@dataclass(frozen=True, slots=True)
class Notification:
    message: str
    severity: Severity
    context: dict[str, str] = field(default_factory=dict)
