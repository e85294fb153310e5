"""Threshold alerts for balances and budgets."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from ..domain.models import Asset, Notification, Severity
from ..domain.repositories import ChangeNotifier
from ..money import MoneyInput, non_negative, quantize, to_decimal

logger = logging.getLogger(__name__)

LOW_BALANCE_WARNING = Decimal("100")
LOW_BALANCE_CRITICAL = Decimal("50")

# (percent of budget used, severity), checked top-down
BUDGET_THRESHOLDS = (
    (Decimal("100"), Severity.CRITICAL),
    (Decimal("90"), Severity.HIGH),
    (Decimal("70"), Severity.MEDIUM),
)


def low_balance_alert(
    asset: Asset,
    *,
    warning_threshold: MoneyInput = LOW_BALANCE_WARNING,
    critical_threshold: MoneyInput = LOW_BALANCE_CRITICAL,
) -> Optional[Notification]:
    """Return an alert when *asset* has dropped below the warning threshold."""

    warning = to_decimal(warning_threshold, field="warning_threshold")
    critical = to_decimal(critical_threshold, field="critical_threshold")
    if asset.balance >= warning:
        return None
    severity = Severity.CRITICAL if asset.balance < critical else Severity.MEDIUM
    return Notification(
        message=f"Low balance on {asset.name}: {quantize(asset.balance)}",
        severity=severity,
        context={"asset_id": asset.id, "balance": str(quantize(asset.balance))},
    )


def budget_alert(category: str, spent: MoneyInput, budget: MoneyInput) -> Optional[Notification]:
    """Return an alert once spending in *category* crosses 70 % of *budget*."""

    spent_amount = non_negative(spent, field="spent")
    budget_amount = to_decimal(budget, field="budget")
    if budget_amount <= 0:
        return None

    used = spent_amount / budget_amount * Decimal("100")
    for threshold, severity in BUDGET_THRESHOLDS:
        if used >= threshold:
            if severity is Severity.CRITICAL:
                message = f"Budget exceeded for {category} by {quantize(spent_amount - budget_amount)}"
            else:
                message = f"{quantize(used)}% of the {category} budget used"
            return Notification(
                message=message,
                severity=severity,
                context={"category": category, "percent_used": str(quantize(used))},
            )
    return None


def dispatch(notifier: Optional[ChangeNotifier], notification: Optional[Notification]) -> None:
    """Send *notification* if there is one.

    Alerts are advisory: a failing notifier is logged and does not undo the
    operation that triggered it.
    """

    if notifier is None or notification is None:
        return
    try:
        notifier(notification)
    except Exception:
        logger.exception(
            "Change notifier failed",
            extra={"severity": notification.severity.value},
        )
