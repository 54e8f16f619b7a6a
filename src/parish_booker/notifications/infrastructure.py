"""
Инфраструктурный слой контекста уведомлений.
"""

from typing import List

from ..shared_kernel import EntityId
from ..storage import AppStore, StorageKeys
from . import interfaces as ports
from .domain import AppNotification


class StoreNotificationRepository(ports.INotificationRepository):
    """Общая лента уведомлений поверх ``AppStore``."""

    def __init__(self, store: AppStore):
        self._store = store

    async def list(self) -> List[AppNotification]:
        return await self._store.read_collection(StorageKeys.NOTIFICATIONS, AppNotification)

    async def add(self, notification: AppNotification) -> None:
        notifications = await self.list()
        notifications.append(notification)
        await self.replace_all(notifications)

    async def mark_read(self, notification_id: EntityId) -> bool:
        notifications = await self.list()
        for notification in notifications:
            if notification.id == notification_id:
                notification.read = True
                await self.replace_all(notifications)
                return True
        return False

    async def replace_all(self, notifications: List[AppNotification]) -> None:
        await self._store.write_collection(StorageKeys.NOTIFICATIONS, notifications)
