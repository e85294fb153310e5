"""Debt store protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ..models import Debt


class DebtStore(Protocol):
    """Persistence for debts."""

    def get(self, debt_id: str) -> Optional[Debt]:
        """Retrieve a debt by ID, ``None`` when unknown."""
        ...

    def save(self, debt: Debt) -> Debt:
        """Write a debt and return the stored copy."""
        ...

    def list_active(self) -> list[Debt]:
        """List debts that are not archived."""
        ...
