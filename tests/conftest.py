"""Pytest configuration and shared fixtures for moneyledger tests.

This module provides database fixtures, domain object factories, and helper
utilities for testing the ledger and payoff engine without touching a real
database.
"""

from __future__ import annotations

import tempfile
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from moneyledger.models import AssetRow, DebtRow, LedgerEntryRow  # noqa: F401
from moneyledger.domain.models import Asset, AssetType, Debt, DebtType, new_id
from moneyledger.infra.database import create_session_factory
from moneyledger.infra.repositories import (
    SQLModelAssetStore,
    SQLModelDebtStore,
    SQLModelLedgerStore,
)

FIXED_NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session scopes, as the stores expect."""
    return create_session_factory(db_engine)


@pytest.fixture
def asset_store(session_factory) -> SQLModelAssetStore:
    return SQLModelAssetStore(session_factory)


@pytest.fixture
def debt_store(session_factory) -> SQLModelDebtStore:
    return SQLModelDebtStore(session_factory)


@pytest.fixture
def ledger_store(session_factory) -> SQLModelLedgerStore:
    return SQLModelLedgerStore(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


def make_asset(
    balance: str | Decimal = "0",
    name: str = "Cuenta Banco",
    asset_type: AssetType = AssetType.BANK_ACCOUNT,
    asset_id: str | None = None,
) -> Asset:
    """Build an unsaved asset whose initial balance equals its balance."""
    amount = Decimal(str(balance))
    return Asset(
        id=asset_id or new_id(),
        name=name,
        asset_type=asset_type,
        initial_balance=amount,
        balance=amount,
    )


def make_debt(
    balance: str | Decimal = "1000",
    interest_rate: str | Decimal = "0",
    name: str = "Tarjeta",
    minimum_payment: str | Decimal | None = None,
    debt_type: DebtType = DebtType.CREDIT_CARD,
    debt_id: str | None = None,
) -> Debt:
    """Build an unsaved debt; ``original_amount`` starts equal to the balance."""
    amount = Decimal(str(balance))
    return Debt(
        id=debt_id or new_id(),
        name=name,
        balance=amount,
        original_amount=amount,
        debt_type=debt_type,
        interest_rate=Decimal(str(interest_rate)),
        minimum_payment=Decimal(str(minimum_payment)) if minimum_payment is not None else None,
    )


@pytest.fixture
def asset_factory(asset_store):
    """Factory for creating and persisting assets.

    Returns:
        Callable: Function that creates stored Asset instances
    """

    def _create_asset(balance: str = "5000", name: str = "Cuenta Banco", **kwargs) -> Asset:
        return asset_store.save(make_asset(balance=balance, name=name, **kwargs))

    return _create_asset


@pytest.fixture
def debt_factory(debt_store):
    """Factory for creating and persisting debts.

    Returns:
        Callable: Function that creates stored Debt instances
    """

    def _create_debt(balance: str = "1000", interest_rate: str = "0", name: str = "Tarjeta", **kwargs) -> Debt:
        return debt_store.save(
            make_debt(balance=balance, interest_rate=interest_rate, name=name, **kwargs)
        )

    return _create_debt


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_money_equal(actual: Decimal, expected: str | Decimal) -> None:
    """Assert exact equality of money values, ignoring trailing zeros.

    Raises:
        AssertionError: If values differ by any amount
    """
    assert isinstance(actual, Decimal), f"Expected Decimal, got {type(actual).__name__}"
    assert actual == Decimal(str(expected)), f"Expected {expected}, got {actual}"
