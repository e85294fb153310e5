"""SQLModel implementation of the asset store."""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session

from ...domain.models import Asset, AssetType, utcnow
from ...exceptions import NotFoundError, StaleWriteError
from ...models.asset import AssetRow
from ..database import SessionFactory
from ._common import as_money

logger = logging.getLogger(__name__)


def row_to_asset(row: AssetRow) -> Asset:
    return Asset(
        id=row.id,
        name=row.name,
        asset_type=AssetType(row.asset_type),
        initial_balance=as_money(row.initial_balance) or Decimal("0.00"),
        balance=as_money(row.balance) or Decimal("0.00"),
        version=row.version,
    )


def _asset_values(asset: Asset) -> dict[str, object]:
    return {
        "name": asset.name,
        "asset_type": AssetType(asset.asset_type).value,
        "initial_balance": as_money(asset.initial_balance),
        "balance": as_money(asset.balance),
    }


def write_asset(session: Session, asset: Asset, *, now: Optional[datetime] = None) -> Asset:
    """Insert or update *asset* inside an open session.

    ``version == 0`` means the asset was never stored. Updates only apply when
    the stored version still matches; otherwise :class:`StaleWriteError`.
    """

    now = now or utcnow()
    values = _asset_values(asset)
    if asset.version == 0:
        if session.get(AssetRow, asset.id) is not None:
            raise StaleWriteError("Asset", asset.id, asset.version)
        session.add(AssetRow(id=asset.id, version=1, updated_at=now, **values))
        session.flush()
        return dataclasses.replace(asset, version=1, balance=values["balance"])

    statement = (
        update(AssetRow)
        .where(AssetRow.id == asset.id)  # type: ignore[arg-type]
        .where(AssetRow.version == asset.version)  # type: ignore[arg-type]
        .values(version=asset.version + 1, updated_at=now, **values)
    )
    result = session.exec(statement)  # type: ignore[call-overload]
    if result.rowcount != 1:
        if session.get(AssetRow, asset.id) is None:
            raise NotFoundError("Asset", asset.id)
        logger.warning("Stale asset write rejected", extra={"asset_id": asset.id})
        raise StaleWriteError("Asset", asset.id, asset.version)
    return dataclasses.replace(asset, version=asset.version + 1, balance=values["balance"])


class SQLModelAssetStore:
    """SQLModel-based asset store implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get(self, asset_id: str) -> Optional[Asset]:
        """Retrieve an asset by ID."""
        with self.session_factory() as session:
            row = session.get(AssetRow, asset_id)
            return row_to_asset(row) if row else None

    def save(self, asset: Asset) -> Asset:
        """Write a single asset row."""
        with self.session_factory() as session:
            return write_asset(session, asset)
