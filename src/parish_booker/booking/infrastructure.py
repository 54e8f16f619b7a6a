"""
Инфраструктурный слой контекста бронирования.

Содержит репозиторий бронирований поверх ``AppStore`` и шину событий в памяти.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from ..logging_config import StdLogger
from ..shared_kernel import DomainEvent, EntityId, ILogger
from ..storage import AppStore, StorageKeys
from . import interfaces as ports
from .domain import Booking


class StoreBookingRepository(ports.IBookingRepository):
    """Репозиторий бронирований поверх ``AppStore``."""

    def __init__(self, store: AppStore):
        self._store = store

    async def list(self) -> List[Booking]:
        """Все бронирования в порядке добавления."""
        return await self._store.read_collection(StorageKeys.BOOKINGS, Booking)

    async def add(self, booking: Booking) -> None:
        bookings = await self.list()
        if any(b.id == booking.id for b in bookings):
            raise ValueError(f"Booking with id {booking.id} already exists")
        bookings.append(booking)
        await self._save(bookings)

    async def get_by_id(self, booking_id: EntityId) -> Optional[Booking]:
        return next((b for b in await self.list() if b.id == booking_id), None)

    async def update(self, booking: Booking) -> bool:
        bookings = await self.list()
        for index, existing in enumerate(bookings):
            if existing.id == booking.id:
                bookings[index] = booking
                await self._save(bookings)
                return True
        return False

    async def delete_by_room(self, room_id: EntityId) -> int:
        bookings = await self.list()
        remaining = [b for b in bookings if b.room_id != room_id]
        removed = len(bookings) - len(remaining)
        if removed:
            await self._save(remaining)
        return removed

    async def _save(self, bookings: List[Booking]) -> None:
        await self._store.write_collection(StorageKeys.BOOKINGS, bookings)


class InMemoryEventBus(ports.IEventBus):
    """Реализация шины событий в памяти."""

    def __init__(self, logger: Optional[ILogger] = None):
        self._subscribers: Dict[Type[DomainEvent], List[Callable[[Any], Awaitable[Any]]]] = {}
        self._logger = logger or StdLogger("events")

    async def publish(self, event: DomainEvent) -> None:
        """
        Публикует событие.

        Обработчики вызываются последовательно. Ошибка обработчика
        логируется и пробрасывается дальше, чтобы единица работы
        отменила изменения.
        """
        event_type = type(event)
        if event_type not in self._subscribers:
            self._logger.debug(f"No subscribers for event type {event_type.__name__}")
            return

        self._logger.info(
            f"Publishing event: {event_type.__name__}",
            event=event.model_dump(mode="json"),
        )

        for handler in self._subscribers[event_type]:
            try:
                await handler(event)
            except Exception as e:
                self._logger.error(
                    f"Error in event handler for {event_type.__name__}",
                    error=str(e),
                    event=event.model_dump(mode="json"),
                )
                raise

    def subscribe(
        self, event_type: Type[DomainEvent], handler: Callable[[Any], Awaitable[Any]]
    ) -> None:
        """Подписывает обработчик на события указанного типа."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)
        self._logger.debug(f"Subscribed handler to {event_type.__name__} events")
