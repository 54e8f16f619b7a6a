"""
Инфраструктурный слой контекста залов.
"""

from typing import List, Optional

from ..shared_kernel import EntityId
from ..storage import AppStore, StorageKeys
from . import interfaces as ports
from .domain import Room


class StoreRoomRepository(ports.IRoomRepository):
    """Репозиторий залов поверх ``AppStore``."""

    def __init__(self, store: AppStore):
        self._store = store

    async def list(self) -> List[Room]:
        return await self._store.read_collection(StorageKeys.ROOMS, Room)

    async def get_by_id(self, room_id: EntityId) -> Optional[Room]:
        return next((r for r in await self.list() if r.id == room_id), None)

    async def add(self, room: Room) -> None:
        rooms = await self.list()
        if any(r.id == room.id for r in rooms):
            raise ValueError(f"Room with id {room.id} already exists")
        rooms.append(room)
        await self._store.write_collection(StorageKeys.ROOMS, rooms)

    async def update(self, room: Room) -> bool:
        rooms = await self.list()
        for index, existing in enumerate(rooms):
            if existing.id == room.id:
                rooms[index] = room
                await self._store.write_collection(StorageKeys.ROOMS, rooms)
                return True
        return False

    async def delete(self, room_id: EntityId) -> bool:
        rooms = await self.list()
        remaining = [r for r in rooms if r.id != room_id]
        if len(remaining) == len(rooms):
            return False
        await self._store.write_collection(StorageKeys.ROOMS, remaining)
        return True
