"""Debt payoff projections.

The simulator walks a debt forward month by month:

1. ``interest = balance * interest_rate / 100``
2. ``balance = balance + interest - monthly_payment``
3. once the balance drops below one currency unit it is cleared and the
   projection has converged.

``interest_rate`` is taken as already expressed per simulation step (a
monthly percentage); callers holding an annual rate divide by twelve before
building the :class:`~moneyledger.domain.models.Debt`. A payment that never
outpaces interest runs until ``max_months`` and comes back with
``converged=False`` instead of raising.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator, Optional

from ..config import BaseConfig
from ..domain.models import Debt
from ..exceptions import ValidationError
from ..money import ZERO, MoneyInput, non_negative, positive, quantize, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_MAX_MONTHS = 1000
# Balances below one currency unit count as paid off.
PAYOFF_EPSILON = Decimal("1")
_HUNDRED = Decimal("100")


@dataclass(frozen=True, slots=True)
class PayoffProjection:
    """Outcome of simulating a fixed monthly payment against one debt."""

    monthly_payment: Decimal
    months_to_pay_off: int
    total_interest: Decimal
    total_paid: Decimal
    converged: bool


@dataclass(frozen=True, slots=True)
class AmortizationRow:
    """One simulated month."""

    month: int
    payment: Decimal
    interest: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True, slots=True)
class ExtraPaymentImpact:
    """Effect of a one-off lump sum on top of the regular payment.

    ``months_saved`` and ``interest_saved`` are ``None`` when the projection
    without the lump sum never converges; there is no finite baseline then.
    """

    new_balance: Decimal
    months_saved: Optional[int]
    interest_saved: Optional[Decimal]
    converged: bool


@dataclass(frozen=True, slots=True)
class DebtProgress:
    debt_id: str
    original_amount: Decimal
    remaining: Decimal
    amount_paid: Decimal
    percent_paid: Decimal


@dataclass(slots=True)
class _Step:
    month: int
    interest: Decimal
    payment: Decimal
    balance: Decimal


class PayoffSimulator:
    """Project how long a debt takes to clear under a fixed payment."""

    def __init__(self, max_months: int = DEFAULT_MAX_MONTHS):
        if max_months <= 0:
            raise ValidationError(f"max_months must be positive, got {max_months}")
        self.max_months = max_months

    @classmethod
    def from_config(cls, config: BaseConfig) -> "PayoffSimulator":
        return cls(max_months=config.MAX_PAYOFF_MONTHS)

    def simulate(self, debt: Debt, monthly_payment: MoneyInput) -> PayoffProjection:
        """Return months to payoff and interest cost for *monthly_payment*."""

        payment = positive(monthly_payment, field="monthly_payment")
        rate = self._rate(debt)
        start_balance = non_negative(debt.balance, field="balance")

        total_interest = ZERO
        months = 0
        converged = start_balance < PAYOFF_EPSILON
        for step in self._iterate(start_balance, rate, payment):
            total_interest += step.interest
            months = step.month
            converged = step.balance == ZERO

        if not converged:
            logger.info(
                "Payoff projection did not converge",
                extra={
                    "debt_id": debt.id,
                    "monthly_payment": payment,
                    "max_months": self.max_months,
                },
            )

        return PayoffProjection(
            monthly_payment=quantize(payment),
            months_to_pay_off=months,
            # Rounded once here; per-month rounding would compound.
            total_interest=quantize(total_interest),
            total_paid=quantize(start_balance + total_interest),
            converged=converged,
        )

    def schedule(self, debt: Debt, monthly_payment: MoneyInput) -> list[AmortizationRow]:
        """Return the month-by-month trajectory behind :meth:`simulate`."""

        payment = positive(monthly_payment, field="monthly_payment")
        rate = self._rate(debt)
        start_balance = non_negative(debt.balance, field="balance")
        return [
            AmortizationRow(
                month=step.month,
                payment=quantize(step.payment),
                interest=quantize(step.interest),
                remaining_balance=quantize(step.balance),
            )
            for step in self._iterate(start_balance, rate, payment)
        ]

    def simulate_extra_payment(
        self, debt: Debt, monthly_payment: MoneyInput, extra_payment: MoneyInput
    ) -> ExtraPaymentImpact:
        """Compare the projection with and without a lump sum paid today."""

        extra = non_negative(extra_payment, field="extra_payment")
        baseline = self.simulate(debt, monthly_payment)
        new_balance = max(ZERO, quantize(to_decimal(debt.balance, field="balance") - extra))
        with_extra = self.simulate(dataclasses.replace(debt, balance=new_balance), monthly_payment)

        if not baseline.converged:
            return ExtraPaymentImpact(
                new_balance=new_balance,
                months_saved=None,
                interest_saved=None,
                converged=with_extra.converged,
            )
        return ExtraPaymentImpact(
            new_balance=new_balance,
            months_saved=max(0, baseline.months_to_pay_off - with_extra.months_to_pay_off),
            interest_saved=max(ZERO, baseline.total_interest - with_extra.total_interest),
            converged=with_extra.converged,
        )

    def _iterate(self, balance: Decimal, rate: Decimal, payment: Decimal) -> Iterator[_Step]:
        if balance < PAYOFF_EPSILON:
            return
        month = 0
        while month < self.max_months:
            interest = balance * rate / _HUNDRED
            due = balance + interest
            balance = due - payment
            month += 1
            if balance < PAYOFF_EPSILON:
                yield _Step(month=month, interest=interest, payment=min(payment, due), balance=ZERO)
                return
            yield _Step(month=month, interest=interest, payment=payment, balance=balance)

    @staticmethod
    def _rate(debt: Debt) -> Decimal:
        rate = to_decimal(debt.interest_rate, field="interest_rate")
        if rate < 0:
            raise ValidationError(f"interest_rate must be >= 0, got {rate}")
        return rate


def debt_progress(debt: Debt) -> DebtProgress:
    """How much of the original amount has been paid down."""

    original = to_decimal(debt.original_amount, field="original_amount")
    remaining = to_decimal(debt.balance, field="balance")
    paid = max(ZERO, original - remaining)
    if original > 0:
        percent = min(_HUNDRED, max(ZERO, paid / original * _HUNDRED))
    else:
        percent = ZERO
    return DebtProgress(
        debt_id=debt.id,
        original_amount=quantize(original),
        remaining=quantize(remaining),
        amount_paid=quantize(paid),
        percent_paid=quantize(percent),
    )
