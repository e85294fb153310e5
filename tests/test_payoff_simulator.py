"""Tests for debt payoff projections.

These cover the month-by-month simulation behind every payoff figure:
- Interest accrual on the running balance
- Convergence below one currency unit
- The iteration cap for payments that never outpace interest
- One-off extra payments and progress tracking
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from moneyledger.config import TestingConfig
from moneyledger.exceptions import ValidationError
from moneyledger.services.payoff import PayoffSimulator, debt_progress

from tests.conftest import assert_money_equal, make_debt


class TestSimulate:
    """Tests for PayoffSimulator.simulate."""

    def test_first_month_accrues_interest_then_pays(self):
        """10000 at 3.5 % with 1000/month: interest 350, then 9350 remaining."""
        simulator = PayoffSimulator()
        debt = make_debt("10000", interest_rate="3.5")

        first = simulator.schedule(debt, 1000)[0]

        assert first.month == 1
        assert_money_equal(first.interest, "350")
        assert_money_equal(first.payment, "1000")
        assert_money_equal(first.remaining_balance, "9350")

    def test_converging_payment(self):
        simulator = PayoffSimulator()
        debt = make_debt("10000", interest_rate="3.5")

        projection = simulator.simulate(debt, 1000)

        assert projection.converged is True
        assert 12 <= projection.months_to_pay_off <= 14
        assert projection.total_interest > 0
        assert_money_equal(projection.total_paid, Decimal("10000") + projection.total_interest)

    def test_payment_below_interest_hits_cap(self):
        """5 % of 10000 is 500 per month, so paying 400 never converges."""
        simulator = PayoffSimulator()
        debt = make_debt("10000", interest_rate="5")

        projection = simulator.simulate(debt, 400)

        assert projection.converged is False
        assert projection.months_to_pay_off == 1000

    def test_runaway_balance_still_reports_totals(self):
        """At 6 % the balance outgrows 28 digits long before the cap."""
        simulator = PayoffSimulator()
        debt = make_debt("10000", interest_rate="6")

        projection = simulator.simulate(debt, 400)

        assert projection.converged is False
        assert projection.months_to_pay_off == 1000
        assert projection.total_interest > Decimal("1e28")
        assert projection.total_paid > projection.total_interest
        assert projection.total_interest.as_tuple().exponent == -2
        assert projection.total_paid.as_tuple().exponent == -2

    def test_cap_follows_config(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MONEYLEDGER_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("MONEYLEDGER_MAX_PAYOFF_MONTHS", "240")
        simulator = PayoffSimulator.from_config(TestingConfig())
        assert simulator.max_months == 240

        short = PayoffSimulator(max_months=12)
        projection = short.simulate(make_debt("10000", interest_rate="1"), 100)
        assert projection.converged is False
        assert projection.months_to_pay_off == 12

    def test_zero_rate_divides_evenly(self):
        simulator = PayoffSimulator()
        debt = make_debt("1000", interest_rate="0")

        projection = simulator.simulate(debt, 100)

        assert projection.converged is True
        assert projection.months_to_pay_off == 10
        assert_money_equal(projection.total_interest, "0")
        assert_money_equal(projection.total_paid, "1000")

    def test_remainder_below_one_counts_as_paid(self):
        simulator = PayoffSimulator()
        debt = make_debt("1000", interest_rate="0")

        projection = simulator.simulate(debt, "999.50")

        assert projection.converged is True
        assert projection.months_to_pay_off == 1

    def test_cleared_debt_needs_no_months(self):
        simulator = PayoffSimulator()
        debt = make_debt("0", interest_rate="2")

        projection = simulator.simulate(debt, 100)

        assert projection.converged is True
        assert projection.months_to_pay_off == 0
        assert_money_equal(projection.total_interest, "0")

    def test_larger_payment_is_faster_and_cheaper(self):
        simulator = PayoffSimulator()
        debt = make_debt("15000", interest_rate="4")

        fast = simulator.simulate(debt, 1500)
        slow = simulator.simulate(debt, 900)

        assert fast.converged and slow.converged
        assert fast.months_to_pay_off < slow.months_to_pay_off
        assert fast.total_interest < slow.total_interest

    def test_debt_is_not_modified(self):
        simulator = PayoffSimulator()
        debt = make_debt("2000", interest_rate="1.5")

        simulator.simulate(debt, 300)

        assert_money_equal(debt.balance, "2000")

    @pytest.mark.parametrize("payment", [0, -10, float("nan"), float("inf"), "ten"])
    def test_invalid_payment_rejected(self, payment):
        simulator = PayoffSimulator()
        with pytest.raises(ValidationError):
            simulator.simulate(make_debt("1000", interest_rate="1"), payment)

    def test_negative_rate_rejected(self):
        simulator = PayoffSimulator()
        with pytest.raises(ValidationError):
            simulator.simulate(make_debt("1000", interest_rate="-1"), 100)

    def test_non_positive_cap_rejected(self):
        with pytest.raises(ValidationError):
            PayoffSimulator(max_months=0)


class TestSchedule:
    """Tests for the amortization rows."""

    def test_last_row_pays_only_what_is_due(self):
        simulator = PayoffSimulator()
        debt = make_debt("1000", interest_rate="0")

        rows = simulator.schedule(debt, 300)

        assert [row.month for row in rows] == [1, 2, 3, 4]
        assert_money_equal(rows[2].remaining_balance, "100")
        assert_money_equal(rows[-1].payment, "100")
        assert_money_equal(rows[-1].remaining_balance, "0")

    def test_schedule_agrees_with_simulation(self):
        simulator = PayoffSimulator()
        debt = make_debt("5000", interest_rate="2")

        rows = simulator.schedule(debt, 400)
        projection = simulator.simulate(debt, 400)

        assert len(rows) == projection.months_to_pay_off
        assert rows[-1].remaining_balance == 0


class TestExtraPayment:
    """Tests for one-off lump sums."""

    def test_lump_sum_saves_time_and_interest(self):
        simulator = PayoffSimulator()
        debt = make_debt("5000", interest_rate="2")

        impact = simulator.simulate_extra_payment(debt, 500, 1000)

        assert_money_equal(impact.new_balance, "4000")
        assert impact.converged is True
        assert impact.months_saved > 0
        assert impact.interest_saved > 0

    def test_lump_sum_covering_balance_clears_debt(self):
        simulator = PayoffSimulator()
        debt = make_debt("5000", interest_rate="2")
        baseline = simulator.simulate(debt, 500)

        impact = simulator.simulate_extra_payment(debt, 500, 20000)

        assert_money_equal(impact.new_balance, "0")
        assert impact.months_saved == baseline.months_to_pay_off
        assert_money_equal(impact.interest_saved, baseline.total_interest)

    def test_no_savings_without_finite_baseline(self):
        simulator = PayoffSimulator()
        debt = make_debt("10000", interest_rate="5")

        impact = simulator.simulate_extra_payment(debt, 400, 1000)

        assert impact.months_saved is None
        assert impact.interest_saved is None

    def test_runaway_baseline(self):
        simulator = PayoffSimulator()
        debt = make_debt("10000", interest_rate="6")

        impact = simulator.simulate_extra_payment(debt, 400, 500)

        assert_money_equal(impact.new_balance, "9500")
        assert impact.converged is False
        assert impact.months_saved is None

    def test_negative_lump_sum_rejected(self):
        simulator = PayoffSimulator()
        with pytest.raises(ValidationError):
            simulator.simulate_extra_payment(make_debt("1000"), 100, -5)


class TestDebtProgress:
    """Tests for paid-down progress."""

    def test_progress_from_original_amount(self):
        debt = make_debt("10000")
        debt.balance = Decimal("2500")

        progress = debt_progress(debt)

        assert_money_equal(progress.amount_paid, "7500")
        assert_money_equal(progress.remaining, "2500")
        assert_money_equal(progress.percent_paid, "75")

    def test_zero_original_amount(self):
        progress = debt_progress(make_debt("0"))

        assert_money_equal(progress.percent_paid, "0")
        assert_money_equal(progress.amount_paid, "0")
