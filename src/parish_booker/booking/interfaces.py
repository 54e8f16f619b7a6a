"""
Интерфейсы (порты) для контекста бронирования.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, List, Protocol, Type, TypeVar

from ..shared_kernel import DomainEvent, EntityId
from .domain import Booking

T_Event = TypeVar("T_Event", bound=DomainEvent)


class IEventBus(Protocol):
    """Интерфейс для шины событий."""

    async def publish(self, event: DomainEvent) -> None: ...
    def subscribe(
        self, event_type: Type[T_Event], handler: Callable[[T_Event], Awaitable[Any]]
    ) -> None: ...


class IBookingRepository(Protocol):
    """Интерфейс репозитория для бронирований."""

    async def list(self) -> List[Booking]: ...
    async def add(self, booking: Booking) -> None: ...
    async def get_by_id(self, booking_id: EntityId) -> Booking | None: ...
    async def update(self, booking: Booking) -> bool: ...
    async def delete_by_room(self, room_id: EntityId) -> int: ...
