"""Debt payment recording.

A payment touches up to three records: the debt balance, a new expense entry
and, when the money comes out of a tracked asset, that asset's balance.
:class:`PaymentRecorder` computes all of them without side effects and hands
them back as one :class:`~moneyledger.domain.models.PaymentResult`; the
persistence collaborator writes that result in a single transaction.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Callable, Optional, Protocol, Union

from ..domain.models import (
    Asset,
    Debt,
    EntryKind,
    LedgerEntry,
    PaymentRecord,
    PaymentResult,
    PaymentType,
    new_id,
    utcnow,
)
from ..domain.repositories import AssetStore, DebtStore
from ..exceptions import NotFoundError, ValidationError
from ..money import ZERO, MoneyInput, positive_cents, quantize, to_decimal
from .balance import BalanceMutator

logger = logging.getLogger(__name__)

DEBT_PAYMENT_CATEGORY = "debt_payment"


class PaymentCommitter(Protocol):
    """Writes a payment result atomically (all records or none)."""

    def __call__(self, result: PaymentResult) -> PaymentResult:  # pragma: no cover - interface
        ...


def parse_payment_type(value: Union[PaymentType, str]) -> PaymentType:
    if isinstance(value, PaymentType):
        return value
    try:
        return PaymentType(str(value).strip().lower())
    except ValueError as exc:
        raise ValidationError(f"Invalid payment type: {value!r}") from exc


def default_description(debt: Debt, payment_type: PaymentType) -> str:
    return f"Pago {payment_type.value} - {debt.name}"


class PaymentRecorder:
    """Turn a debt payment into a debt update plus a ledger entry."""

    def __init__(
        self,
        mutator: Optional[BalanceMutator] = None,
        *,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.mutator = mutator or BalanceMutator()
        self.clock = clock

    def make_payment(
        self,
        debt: Debt,
        amount: MoneyInput,
        payment_type: Union[PaymentType, str] = PaymentType.REGULAR,
        description: Optional[str] = None,
        *,
        asset: Optional[Asset] = None,
    ) -> PaymentResult:
        """Compute the records for paying *amount* towards *debt*.

        The debt balance is clamped at zero and a debt that reaches zero is
        archived. Neither *debt* nor *asset* is modified; the returned result
        holds updated copies.
        """

        value = positive_cents(amount)
        kind = parse_payment_type(payment_type)
        if debt.is_archived:
            raise ValidationError(f"Debt {debt.id!r} is archived and cannot receive payments")

        now = self.clock()
        new_balance = max(ZERO, quantize(to_decimal(debt.balance, field="balance") - value))
        changes: dict[str, object] = {"balance": new_balance}
        if new_balance == ZERO:
            changes["is_archived"] = True
            changes["archived_at"] = now
        updated_debt = dataclasses.replace(debt, **changes)

        entry = LedgerEntry(
            id=new_id(),
            kind=EntryKind.EXPENSE,
            amount=value,
            asset_id=asset.id if asset is not None else None,
            created_at=now,
            description=description or default_description(debt, kind),
            category=DEBT_PAYMENT_CATEGORY,
            debt_id=debt.id,
        )
        updated_asset = self.mutator.apply_entry(asset, entry) if asset is not None else None

        logger.info(
            "Debt payment prepared",
            extra={
                "debt_id": debt.id,
                "amount": value,
                "payment_type": kind.value,
                "new_balance": new_balance,
                "archived": updated_debt.is_archived,
            },
        )
        return PaymentResult(
            debt=updated_debt,
            ledger_entry=entry,
            payment=PaymentRecord(
                debt_id=debt.id,
                amount=value,
                payment_type=kind,
                description=entry.description,
            ),
            asset=updated_asset,
        )

    def record(
        self,
        payment: PaymentRecord,
        *,
        debts: DebtStore,
        committer: PaymentCommitter,
        assets: Optional[AssetStore] = None,
        asset_id: Optional[str] = None,
    ) -> PaymentResult:
        """Load the debt (and funding asset), build the result and commit it.

        Nothing is written when loading or validation fails; when the
        committer raises, the error propagates and the caller must treat the
        payment as not recorded.
        """

        debt = debts.get(payment.debt_id)
        if debt is None:
            raise NotFoundError("Debt", payment.debt_id)

        asset = None
        if asset_id is not None:
            if assets is None:
                raise ValidationError("An asset store is required to pay from an asset")
            asset = assets.get(asset_id)
            if asset is None:
                raise NotFoundError("Asset", asset_id)

        result = self.make_payment(
            debt,
            payment.amount,
            payment.payment_type,
            payment.description,
            asset=asset,
        )
        committed = committer(result)
        logger.info(
            "Debt payment committed",
            extra={"debt_id": debt.id, "entry_id": result.ledger_entry.id},
        )
        return committed
