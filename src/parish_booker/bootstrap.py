"""
Сборка приложения.

Создает хранилище, репозитории и сервисы всех контекстов и связывает
их через шину событий.
"""

from dataclasses import dataclass
from functools import partial
from typing import Optional

from .booking.application import BookingApplicationService
from .booking.domain import BookingCreated, BookingStatusChanged
from .booking.infrastructure import InMemoryEventBus, StoreBookingRepository
from .config import Settings, get_settings
from .identity.application import AuthApplicationService, ConfigApplicationService
from .identity.domain import User
from .identity.infrastructure import (
    StoreConfigRepository,
    StoreSessionRepository,
    StoreUserRepository,
)
from .inventory.application import RoomApplicationService
from .inventory.infrastructure import StoreRoomRepository
from .logging_config import StdLogger, configure_logging
from .notifications.application import (
    NotificationApplicationService,
    NotificationPoller,
    OnUpdate,
)
from .notifications.event_handlers import on_booking_created, on_booking_status_changed
from .notifications.infrastructure import StoreNotificationRepository
from .storage import AppStore, InMemoryKeyValueStore, JsonFileKeyValueStore
from .storage.interfaces import IKeyValueStore


@dataclass
class Application:
    """Настроенные компоненты приложения."""

    settings: Settings
    store: AppStore
    event_bus: InMemoryEventBus
    auth: AuthApplicationService
    config: ConfigApplicationService
    rooms: RoomApplicationService
    bookings: BookingApplicationService
    notifications: NotificationApplicationService

    def notification_poller(self, user: User, on_update: OnUpdate) -> NotificationPoller:
        """Создает опрос ленты уведомлений для пользователя."""
        return NotificationPoller(
            self.notifications,
            recipient_id=user.id,
            role=user.role,
            on_update=on_update,
            interval=self.settings.notification_poll_interval,
        )


async def bootstrap_app(
    settings: Optional[Settings] = None,
    kv_store: Optional[IKeyValueStore] = None,
) -> Application:
    """Создает и настраивает все компоненты приложения."""
    settings = settings or get_settings()
    configure_logging(settings)
    logger = StdLogger()

    # 1. Хранилище: явно переданное, файловое или в памяти
    if kv_store is None:
        if settings.data_dir is not None:
            kv_store = JsonFileKeyValueStore(settings.data_dir)
        else:
            kv_store = InMemoryKeyValueStore()
    store = AppStore(kv_store, latency_seconds=settings.latency_seconds)
    await store.initialize()

    # 2. Репозитории и сервисы
    booking_repo = StoreBookingRepository(store)
    event_bus = InMemoryEventBus()

    notifications = NotificationApplicationService(
        store, StoreNotificationRepository(store)
    )
    bookings = BookingApplicationService(store, booking_repo, event_bus)
    rooms = RoomApplicationService(
        store,
        StoreRoomRepository(store),
        # Репозиторий бронирований передаем в контекст залов для каскадного удаления
        bookings=booking_repo,
    )
    auth = AuthApplicationService(
        store, StoreUserRepository(store), StoreSessionRepository(store)
    )
    config = ConfigApplicationService(store, StoreConfigRepository(store))

    # 3. Подписываем обработчики на события
    event_bus.subscribe(BookingCreated, partial(on_booking_created, service=notifications))
    event_bus.subscribe(
        BookingStatusChanged, partial(on_booking_status_changed, service=notifications)
    )

    logger.info(
        "Приложение запущено",
        storage=type(kv_store).__name__,
        data_dir=str(settings.data_dir) if settings.data_dir else None,
    )
    return Application(
        settings=settings,
        store=store,
        event_bus=event_bus,
        auth=auth,
        config=config,
        rooms=rooms,
        bookings=bookings,
        notifications=notifications,
    )
