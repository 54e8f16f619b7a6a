"""
Прикладной слой контекста уведомлений.

Лента уведомлений общая для всех; каждый получатель видит только свою
часть (администраторы - еще и адресованное ADMIN). Новые уведомления
не доставляются мгновенно: клиент периодически опрашивает ленту через
``NotificationPoller``.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional

from ..logging_config import StdLogger
from ..shared_kernel import EntityId, ILogger, Outcome, UserRole
from ..storage import AppStore, StorageKeys
from . import interfaces as ports
from .domain import AppNotification, NewNotification

DEFAULT_POLL_INTERVAL = 10.0


class NotificationApplicationService:
    """Сервис приложения для ленты уведомлений."""

    def __init__(
        self,
        store: AppStore,
        notifications: ports.INotificationRepository,
        logger: Optional[ILogger] = None,
    ):
        """Инициализирует сервис."""
        self._store = store
        self._notifications = notifications
        self._logger = logger or StdLogger("notifications")

    async def append(self, notification: NewNotification) -> AppNotification:
        """Добавляет уведомление в ленту как непрочитанное."""
        stored = AppNotification.from_new(notification)
        async with self._store.unit_of_work(StorageKeys.NOTIFICATIONS):
            await self._notifications.add(stored)

        self._logger.debug(
            "Добавлено уведомление",
            notification_id=stored.id,
            recipient=stored.user_id,
            notification_type=stored.type.value,
        )
        return stored

    async def list_for(self, recipient_id: EntityId, role: UserRole) -> List[AppNotification]:
        """Уведомления получателя, начиная с самых новых."""
        async with self._store.unit_of_work(StorageKeys.NOTIFICATIONS):
            notifications = await self._notifications.list()

        visible = [n for n in notifications if n.is_visible_to(recipient_id, role)]
        return sorted(visible, key=lambda n: n.created_at, reverse=True)

    async def unread_count(self, recipient_id: EntityId, role: UserRole) -> int:
        """Количество непрочитанных уведомлений получателя."""
        return sum(1 for n in await self.list_for(recipient_id, role) if not n.read)

    async def mark_read(self, notification_id: EntityId) -> Outcome:
        """Отмечает уведомление прочитанным."""
        async with self._store.unit_of_work(StorageKeys.NOTIFICATIONS):
            found = await self._notifications.mark_read(notification_id)

        if not found:
            self._logger.debug("Уведомление не найдено", notification_id=notification_id)
            return Outcome.NOT_FOUND
        return Outcome.APPLIED

    async def clear_for(self, recipient_id: EntityId, role: UserRole) -> int:
        """
        Удаляет все уведомления, которые видит получатель.

        Уведомления других получателей не затрагиваются.

        Returns:
            Количество удаленных уведомлений
        """
        async with self._store.unit_of_work(StorageKeys.NOTIFICATIONS):
            notifications = await self._notifications.list()
            remaining = [n for n in notifications if not n.is_visible_to(recipient_id, role)]
            removed = len(notifications) - len(remaining)
            if removed:
                await self._notifications.replace_all(remaining)

        self._logger.info("Лента очищена", recipient=recipient_id, removed=removed)
        return removed


OnUpdate = Callable[[List[AppNotification]], Awaitable[None]]


class NotificationPoller:
    """
    Периодический опрос ленты уведомлений получателя.

    После ``start()`` лента запрашивается сразу и затем каждые
    ``interval`` секунд; результат передается в ``on_update``.
    ``stop()`` отменяет фоновую задачу, его можно вызывать повторно.
    """

    def __init__(
        self,
        service: NotificationApplicationService,
        recipient_id: EntityId,
        role: UserRole,
        on_update: OnUpdate,
        interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[ILogger] = None,
    ):
        if interval <= 0:
            raise ValueError("Интервал опроса должен быть положительным")
        self._service = service
        self._recipient_id = recipient_id
        self._role = role
        self._on_update = on_update
        self._interval = interval
        self._logger = logger or StdLogger("notifications.poller")
        self._task: Optional["asyncio.Task[None]"] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh(self) -> List[AppNotification]:
        """Запрашивает ленту немедленно и передает ее в ``on_update``."""
        notifications = await self._service.list_for(self._recipient_id, self._role)
        await self._on_update(notifications)
        return notifications

    def start(self) -> None:
        """Запускает фоновый опрос."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._poll_loop())
        self._logger.debug("Опрос уведомлений запущен", recipient=self._recipient_id)

    async def stop(self) -> None:
        """Останавливает фоновый опрос и дожидается завершения задачи."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self._logger.debug("Опрос уведомлений остановлен", recipient=self._recipient_id)

    async def __aenter__(self) -> "NotificationPoller":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.stop()
        return False

    async def _poll_loop(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(self._interval)
