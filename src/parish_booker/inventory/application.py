"""
Прикладной слой контекста залов.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..logging_config import StdLogger
from ..shared_kernel import EntityId, Err, ILogger, Ok, Outcome, Result, ValidationError
from ..storage import AppStore, StorageKeys
from . import interfaces as ports
from .domain import Room

# DTO для входящих данных


class CreateRoomRequest(BaseModel):
    """Запрос на создание или изменение зала."""

    name: str
    capacity: int
    features: List[str] = Field(default_factory=list)
    image_url: str = ""

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("El nombre del salón es obligatorio.")
        return v.strip()

    @field_validator("capacity")
    @classmethod
    def capacity_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("La capacidad debe ser mayor que cero.")
        return v

    @field_validator("features")
    @classmethod
    def drop_blank_features(cls, v: List[str]) -> List[str]:
        return [feature.strip() for feature in v if feature.strip()]


# Сервисы приложения


class RoomApplicationService:
    """Сервис приложения для управления залами."""

    def __init__(
        self,
        store: AppStore,
        rooms: ports.IRoomRepository,
        bookings: ports.IRoomBookingsCleaner,
        logger: Optional[ILogger] = None,
    ):
        """Инициализирует сервис."""
        self._store = store
        self._rooms = rooms
        self._bookings = bookings
        self._logger = logger or StdLogger("inventory")

    async def list_rooms(self) -> List[Room]:
        """Возвращает все залы в порядке добавления."""
        async with self._store.unit_of_work(StorageKeys.ROOMS):
            return await self._rooms.list()

    async def get_room(self, room_id: EntityId) -> Optional[Room]:
        """Возвращает зал по идентификатору."""
        async with self._store.unit_of_work(StorageKeys.ROOMS):
            return await self._rooms.get_by_id(room_id)

    async def create_room(
        self,
        name: str,
        capacity: int,
        features: Optional[List[str]] = None,
        image_url: str = "",
    ) -> Result[Room]:
        """Создает новый зал."""
        try:
            request = CreateRoomRequest(
                name=name,
                capacity=capacity,
                features=features or [],
                image_url=image_url,
            )
        except PydanticValidationError as e:
            return Err(ValidationError.from_pydantic(e))

        room = Room.create(
            name=request.name,
            capacity=request.capacity,
            features=request.features,
            image_url=request.image_url,
        )
        async with self._store.unit_of_work(StorageKeys.ROOMS):
            await self._rooms.add(room)

        self._logger.info("Создан зал", room_id=room.id, room_name=room.name)
        return Ok(room)

    async def update_room(self, room: Room) -> Result[Outcome]:
        """
        Полностью перезаписывает зал с тем же идентификатором.

        Значения проверяются по тем же правилам, что и при создании.
        """
        try:
            request = CreateRoomRequest(
                name=room.name,
                capacity=room.capacity,
                features=room.features,
                image_url=room.image_url,
            )
            room = Room(
                id=room.id,
                name=request.name,
                capacity=request.capacity,
                features=request.features,
                image_url=request.image_url,
            )
        except PydanticValidationError as e:
            return Err(ValidationError.from_pydantic(e))

        async with self._store.unit_of_work(StorageKeys.ROOMS):
            updated = await self._rooms.update(room)

        if not updated:
            self._logger.debug("Обновление зала: зал не найден", room_id=room.id)
            return Ok(Outcome.NOT_FOUND)
        self._logger.info("Зал обновлен", room_id=room.id)
        return Ok(Outcome.APPLIED)

    async def delete_room(self, room_id: EntityId) -> Outcome:
        """
        Удаляет зал вместе со всеми его бронированиями.

        Обе коллекции меняются в одной единице работы: после возврата
        ни одно бронирование не ссылается на удаленный зал.
        """
        async with self._store.unit_of_work(StorageKeys.ROOMS, StorageKeys.BOOKINGS):
            # Сначала бронирования, чтобы не оставить ссылок на удаленный зал
            removed_bookings = await self._bookings.delete_by_room(room_id)
            deleted = await self._rooms.delete(room_id)

        self._logger.info(
            "Удаление зала",
            room_id=room_id,
            room_found=deleted,
            removed_bookings=removed_bookings,
        )
        return Outcome.APPLIED if deleted else Outcome.NOT_FOUND
