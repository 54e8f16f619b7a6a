"""
Интерфейсы (порты) для контекста залов.
"""

from __future__ import annotations

from typing import List, Protocol

from ..shared_kernel import EntityId
from .domain import Room


class IRoomRepository(Protocol):
    """Интерфейс репозитория для залов."""

    async def list(self) -> List[Room]: ...
    async def get_by_id(self, room_id: EntityId) -> Room | None: ...
    async def add(self, room: Room) -> None: ...
    async def update(self, room: Room) -> bool: ...
    async def delete(self, room_id: EntityId) -> bool: ...


class IRoomBookingsCleaner(Protocol):
    """
    Удаление бронирований зала.

    Реализуется репозиторием бронирований; нужен для каскадного
    удаления зала.
    """

    async def delete_by_room(self, room_id: EntityId) -> int: ...
