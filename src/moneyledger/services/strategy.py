"""Debt repayment planning (snowball and avalanche)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Union

from ..domain.models import Debt, Strategy
from ..exceptions import ValidationError
from ..money import ZERO, MoneyInput, non_negative, quantize, to_decimal
from .payoff import PayoffProjection, PayoffSimulator

logger = logging.getLogger(__name__)

MINIMUM_PAYMENT_RATE = Decimal("0.02")
MINIMUM_PAYMENT_FLOOR = Decimal("50")


@dataclass(frozen=True, slots=True)
class PlannedPayment:
    """Monthly payment assigned to one debt by a plan."""

    debt: Debt
    assigned_payment: Decimal
    minimum_payment: Decimal
    extra_payment: Decimal
    priority: int


@dataclass(frozen=True, slots=True)
class StrategySummary:
    strategy: Strategy
    payments: list[PlannedPayment]
    projections: dict[str, PayoffProjection]
    total_months: int
    total_interest: Decimal
    interest_saved: Decimal
    all_converged: bool


@dataclass(frozen=True, slots=True)
class StrategyComparison:
    avalanche: StrategySummary
    snowball: StrategySummary
    recommended: Strategy


@dataclass(frozen=True, slots=True)
class DebtOverview:
    """Totals across the open debts, assuming only minimums are paid."""

    debt_count: int
    total_debt: Decimal
    total_minimum_payments: Decimal
    highest_interest_debt: Optional[Debt]
    smallest_debt: Optional[Debt]
    estimated_months: int
    total_interest: Decimal
    all_converged: bool


def minimum_payment(balance: MoneyInput) -> Decimal:
    """Default minimum payment: 2 % of the balance, never below 50."""

    amount = non_negative(balance, field="balance")
    return quantize(max(amount * MINIMUM_PAYMENT_RATE, MINIMUM_PAYMENT_FLOOR))


def effective_minimum(debt: Debt) -> Decimal:
    """The debt's own minimum payment when set, otherwise the default rule."""

    if debt.minimum_payment is not None:
        explicit = to_decimal(debt.minimum_payment, field="minimum_payment")
        if explicit > 0:
            return quantize(explicit)
    return minimum_payment(debt.balance)


def parse_strategy(value: Union[Strategy, str]) -> Strategy:
    if isinstance(value, Strategy):
        return value
    try:
        return Strategy(str(value).strip().lower())
    except ValueError as exc:
        raise ValidationError(f"Invalid debt payoff strategy: {value!r}") from exc


def _avalanche_key(debt: Debt) -> tuple:
    # Highest rate first, larger balance breaks ties.
    return (-to_decimal(debt.interest_rate), -to_decimal(debt.balance), debt.name, debt.id)


def _snowball_key(debt: Debt) -> tuple:
    # Smallest balance first, higher rate breaks ties.
    return (to_decimal(debt.balance), -to_decimal(debt.interest_rate), debt.name, debt.id)


class StrategyPlanner:
    """Rank debts and split a monthly extra budget across them.

    Planning never mutates the debts it is given.
    """

    def __init__(self, simulator: Optional[PayoffSimulator] = None):
        self.simulator = simulator or PayoffSimulator()

    def order(self, debts: Iterable[Debt], strategy: Union[Strategy, str]) -> list[Debt]:
        """Return the payable debts in repayment order."""

        chosen = parse_strategy(strategy)
        payable = [d for d in debts if not d.is_archived and to_decimal(d.balance) > 0]
        key = _avalanche_key if chosen is Strategy.AVALANCHE else _snowball_key
        return sorted(payable, key=key)

    def plan(
        self,
        debts: Iterable[Debt],
        extra_budget: MoneyInput,
        strategy: Union[Strategy, str],
    ) -> list[PlannedPayment]:
        """Assign every debt its minimum and the whole extra budget to the first.

        No assignment exceeds the debt's remaining balance.
        """

        extra = quantize(non_negative(extra_budget, field="extra_budget"))
        ordered = self.order(debts, strategy)

        planned: list[PlannedPayment] = []
        for index, debt in enumerate(ordered):
            balance = quantize(to_decimal(debt.balance))
            minimum = effective_minimum(debt)
            wanted = minimum + (extra if index == 0 else ZERO)
            assigned = min(wanted, balance)
            planned.append(
                PlannedPayment(
                    debt=debt,
                    assigned_payment=assigned,
                    minimum_payment=minimum,
                    extra_payment=max(ZERO, assigned - min(minimum, balance)),
                    priority=index + 1,
                )
            )

        logger.debug(
            "Planned %d debts with %s",
            len(planned),
            parse_strategy(strategy).value,
            extra={"extra_budget": extra, "order": [p.debt.id for p in planned]},
        )
        return planned

    def summarize(
        self,
        debts: Iterable[Debt],
        extra_budget: MoneyInput,
        strategy: Union[Strategy, str],
    ) -> StrategySummary:
        """Simulate a plan: months until every debt clears and interest cost."""

        debt_list = list(debts)
        chosen = parse_strategy(strategy)
        payments = self.plan(debt_list, extra_budget, chosen)

        projections: dict[str, PayoffProjection] = {}
        baseline_interest = ZERO
        for item in payments:
            projections[item.debt.id] = self.simulator.simulate(item.debt, item.assigned_payment)
            minimum_only = min(item.minimum_payment, quantize(to_decimal(item.debt.balance)))
            baseline_interest += self.simulator.simulate(item.debt, minimum_only).total_interest

        total_interest = sum((p.total_interest for p in projections.values()), ZERO)
        return StrategySummary(
            strategy=chosen,
            payments=payments,
            projections=projections,
            # Debts are paid in parallel, so the plan ends with the slowest one.
            total_months=max((p.months_to_pay_off for p in projections.values()), default=0),
            total_interest=total_interest,
            interest_saved=max(ZERO, baseline_interest - total_interest),
            all_converged=all(p.converged for p in projections.values()),
        )

    def interest_saved(
        self,
        debts: Iterable[Debt],
        extra_budget: MoneyInput,
        strategy: Union[Strategy, str],
    ) -> Decimal:
        """Interest avoided by the plan compared with paying only minimums."""

        return self.summarize(debts, extra_budget, strategy).interest_saved

    def overview(self, debts: Iterable[Debt]) -> DebtOverview:
        """Summarize the open debts: totals, the costliest and the smallest."""

        by_rate = self.order(debts, Strategy.AVALANCHE)
        by_balance = sorted(by_rate, key=_snowball_key)
        minimums = self.summarize(by_rate, 0, Strategy.AVALANCHE)
        return DebtOverview(
            debt_count=len(by_rate),
            total_debt=quantize(sum((to_decimal(d.balance) for d in by_rate), ZERO)),
            total_minimum_payments=sum((p.assigned_payment for p in minimums.payments), ZERO),
            highest_interest_debt=by_rate[0] if by_rate else None,
            smallest_debt=by_balance[0] if by_balance else None,
            estimated_months=minimums.total_months,
            total_interest=minimums.total_interest,
            all_converged=minimums.all_converged,
        )

    def compare(self, debts: Iterable[Debt], extra_budget: MoneyInput) -> StrategyComparison:
        """Run both strategies and recommend one.

        A plan that pays everything off beats one that does not; otherwise the
        cheaper plan wins and ties go to avalanche.
        """

        debt_list = list(debts)
        avalanche = self.summarize(debt_list, extra_budget, Strategy.AVALANCHE)
        snowball = self.summarize(debt_list, extra_budget, Strategy.SNOWBALL)

        def rank(summary: StrategySummary) -> tuple:
            return (not summary.all_converged, summary.total_interest)

        recommended = Strategy.SNOWBALL if rank(snowball) < rank(avalanche) else Strategy.AVALANCHE
        logger.info(
            "Compared payoff strategies",
            extra={
                "recommended": recommended.value,
                "avalanche_interest": avalanche.total_interest,
                "snowball_interest": snowball.total_interest,
            },
        )
        return StrategyComparison(avalanche=avalanche, snowball=snowball, recommended=recommended)
