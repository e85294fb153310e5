"""Asset store protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ..models import Asset


class AssetStore(Protocol):
    """Persistence for asset balances."""

    def get(self, asset_id: str) -> Optional[Asset]:
        """Retrieve an asset by ID, ``None`` when unknown."""
        ...

    def save(self, asset: Asset) -> Asset:
        """Atomically write a single asset row and return the stored copy.

        Implementations reject writes based on a stale ``version``.
        """
        ...
