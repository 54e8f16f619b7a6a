"""
Интерфейсы (порты) для контекста уведомлений.
"""

from __future__ import annotations

from typing import List, Protocol

from ..shared_kernel import EntityId
from .domain import AppNotification


class INotificationRepository(Protocol):
    """Интерфейс репозитория для уведомлений."""

    async def list(self) -> List[AppNotification]: ...
    async def add(self, notification: AppNotification) -> None: ...
    async def mark_read(self, notification_id: EntityId) -> bool: ...
    async def replace_all(self, notifications: List[AppNotification]) -> None: ...
