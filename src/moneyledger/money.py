"""Decimal helpers shared by the ledger and the payoff engine."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Union

from .exceptions import ValidationError

MoneyInput = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0")
# Money columns hold 16 digits with 2 decimals, so 14 integer digits at most.
MAX_EXPONENT = 13


def to_decimal(value: MoneyInput, *, field: str = "amount") -> Decimal:
    """Coerce *value* to a finite Decimal or raise ``ValidationError``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather than
    its binary expansion. Booleans are rejected even though they are ints, and
    so are magnitudes of 10**14 and above.
    """

    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number, got {value!r}")
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, float):
            result = Decimal(str(value))
        else:
            result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a number, got {value!r}") from exc
    if not result.is_finite():
        raise ValidationError(f"{field} must be finite, got {value!r}")
    if result and result.adjusted() > MAX_EXPONENT:
        raise ValidationError(f"{field} is out of range, got {value!r}")
    return result


def quantize(value: Decimal) -> Decimal:
    """Round to cents using half-up rounding.

    Precision grows with the value so projected balances that outgrow the
    default 28 digits still round instead of raising.
    """

    precision = max(28, value.adjusted() + 3) if value else 28
    return value.quantize(CENT, rounding=ROUND_HALF_UP, context=Context(prec=precision))


def non_negative(value: MoneyInput, *, field: str = "amount") -> Decimal:
    amount = to_decimal(value, field=field)
    if amount < 0:
        raise ValidationError(f"{field} must be >= 0, got {amount}")
    return amount


def positive(value: MoneyInput, *, field: str = "amount") -> Decimal:
    amount = to_decimal(value, field=field)
    if amount <= 0:
        raise ValidationError(f"{field} must be > 0, got {amount}")
    return amount


def positive_cents(value: MoneyInput, *, field: str = "amount") -> Decimal:
    """Round to cents first, then require the result to be above zero."""

    return positive(quantize(to_decimal(value, field=field)), field=field)
