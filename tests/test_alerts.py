"""Alert threshold tests."""

from __future__ import annotations

import logging

from moneyledger.domain.models import Notification, Severity
from moneyledger.services.alerts import budget_alert, dispatch, low_balance_alert

from tests.conftest import make_asset


def test_healthy_balance_has_no_alert():
    assert low_balance_alert(make_asset("100")) is None


def test_balance_below_warning():
    alert = low_balance_alert(make_asset("99.99", name="Nequi"))

    assert alert.severity is Severity.MEDIUM
    assert "Nequi" in alert.message


def test_balance_below_critical():
    alert = low_balance_alert(make_asset("49.99"))
    assert alert.severity is Severity.CRITICAL


def test_overdrawn_balance_is_critical():
    alert = low_balance_alert(make_asset("-10"))
    assert alert.severity is Severity.CRITICAL


def test_custom_thresholds():
    asset = make_asset("400")

    assert low_balance_alert(asset, warning_threshold=500, critical_threshold=450).severity is Severity.CRITICAL
    assert low_balance_alert(asset, warning_threshold=300, critical_threshold=100) is None


def test_budget_levels():
    assert budget_alert("food", 69, 100) is None
    assert budget_alert("food", 70, 100).severity is Severity.MEDIUM
    assert budget_alert("food", 90, 100).severity is Severity.HIGH
    assert budget_alert("food", 100, 100).severity is Severity.CRITICAL


def test_budget_exceeded_message():
    alert = budget_alert("transport", "125.50", "100")
    assert "25.50" in alert.message
    assert alert.context["category"] == "transport"


def test_zero_budget_never_alerts():
    assert budget_alert("misc", 10, 0) is None


def test_dispatch_skips_missing_pieces():
    received = []
    dispatch(None, Notification(message="x", severity=Severity.LOW))
    dispatch(received.append, None)
    assert received == []


def test_dispatch_logs_failing_notifier(caplog):
    def broken(notification):
        raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR, logger="moneyledger"):
        dispatch(broken, Notification(message="x", severity=Severity.HIGH))

    assert "Change notifier failed" in caplog.text
