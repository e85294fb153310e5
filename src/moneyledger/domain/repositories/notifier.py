"""Change notification callback."""

from __future__ import annotations

from typing import Protocol

from ..models import Notification


class ChangeNotifier(Protocol):
    """Receives threshold alerts. Any callable taking a Notification fits."""

    def __call__(self, notification: Notification) -> None:  # pragma: no cover - interface
        ...
