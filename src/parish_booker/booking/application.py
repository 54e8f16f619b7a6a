"""
Прикладной слой контекста бронирования.

Содержит сервис приложения, который координирует жизненный цикл
бронирований: создание заявки, смену статуса, правку администратором,
а также выборки для календаря и расчет занятости.
"""

import datetime as dt
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..logging_config import StdLogger
from ..shared_kernel import (
    BookingStatus,
    EntityId,
    Err,
    ILogger,
    Ok,
    Outcome,
    Result,
    ValidationError,
    today,
)
from ..storage import AppStore, StorageKeys
from . import interfaces as ports
from .availability import SlotStatus, active_bookings, occupancy
from .domain import CLOSING_HOUR, OPENING_HOUR, Booking
from .schedule import MonthReport, bookings_for_day, month_report

REQUIRED_FIELDS = "Todos los campos son obligatorios."
UNKNOWN_STATUS = "Estado de reserva desconocido."

DateLike = Union[str, dt.date]

# DTO для входящих данных


class CreateBookingRequest(BaseModel):
    """
    Запрос на создание бронирования.

    Те же правила проверяются при правке бронирования администратором.
    """

    room_id: EntityId
    room_name: str
    user_id: EntityId
    user_name: str
    date: dt.date
    time: dt.time
    duration_hours: int
    purpose: str

    @field_validator("room_id", "room_name", "user_id", "user_name", "purpose")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError(REQUIRED_FIELDS)
        return v

    @field_validator("time")
    @classmethod
    def within_operating_hours(cls, v: dt.time) -> dt.time:
        opening = dt.time(OPENING_HOUR, 0)
        closing = dt.time(CLOSING_HOUR, 0)
        if not opening <= v <= closing:
            raise ValueError(
                f"La hora debe estar entre {opening:%H:%M} y {closing:%H:%M}."
            )
        return v

    @field_validator("duration_hours")
    @classmethod
    def at_least_one_hour(cls, v: int) -> int:
        if v < 1:
            raise ValueError("La duración debe ser de al menos 1 hora.")
        return v


# Сервисы приложения


class BookingApplicationService:
    """Сервис приложения для работы с бронированиями."""

    def __init__(
        self,
        store: AppStore,
        bookings: ports.IBookingRepository,
        event_bus: ports.IEventBus,
        logger: Optional[ILogger] = None,
    ):
        """Инициализирует сервис."""
        self._store = store
        self._bookings = bookings
        self._event_bus = event_bus
        self._logger = logger or StdLogger("booking")

    async def create_booking(
        self,
        room_id: EntityId,
        user_id: EntityId,
        date: DateLike,
        time: Union[str, dt.time],
        duration_hours: int,
        purpose: str,
        room_name: str,
        user_name: str,
    ) -> Result[Booking]:
        """
        Создает заявку на бронирование в статусе PENDING.

        Доступность зала не проверяется. Администраторы получают
        уведомление о новой заявке.
        """
        try:
            request = CreateBookingRequest(
                room_id=room_id,
                room_name=room_name,
                user_id=user_id,
                user_name=user_name,
                date=date,
                time=time,
                duration_hours=duration_hours,
                purpose=purpose,
            )
        except PydanticValidationError as e:
            return Err(ValidationError.from_pydantic(e))

        async with self._store.unit_of_work(StorageKeys.BOOKINGS):
            booking = Booking.create(
                room_id=request.room_id,
                room_name=request.room_name,
                user_id=request.user_id,
                user_name=request.user_name,
                date=request.date,
                time=request.time,
                duration_hours=request.duration_hours,
                purpose=request.purpose,
            )
            await self._bookings.add(booking)
            await self._publish_events(booking)

        self._logger.info(
            "Создана заявка на бронирование",
            booking_id=booking.id,
            room_id=booking.room_id,
            user_id=booking.user_id,
        )
        return Ok(booking)

    async def set_status(
        self, booking_id: EntityId, new_status: Union[str, BookingStatus]
    ) -> Result[Outcome]:
        """
        Меняет статус бронирования и уведомляет автора заявки.

        Неизвестный идентификатор не считается ошибкой.
        """
        try:
            new_status = BookingStatus(new_status)
        except ValueError:
            return Err(ValidationError(UNKNOWN_STATUS, field="status"))

        async with self._store.unit_of_work(StorageKeys.BOOKINGS):
            booking = await self._bookings.get_by_id(booking_id)
            if booking is None:
                self._logger.debug("Смена статуса: бронирование не найдено", booking_id=booking_id)
                return Ok(Outcome.NOT_FOUND)

            booking.change_status(new_status)
            await self._bookings.update(booking)
            await self._publish_events(booking)

        self._logger.info(
            "Статус бронирования изменен", booking_id=booking_id, status=new_status.value
        )
        return Ok(Outcome.APPLIED)

    async def update_booking(self, booking: Booking) -> Result[Outcome]:
        """
        Полностью перезаписывает бронирование (правка администратором).

        Запись проверяется заново: копия, полученная через ``model_copy``,
        может содержать непроверенные значения. Уведомления не отправляются.
        """
        try:
            booking = _validated(booking)
        except PydanticValidationError as e:
            return Err(ValidationError.from_pydantic(e))

        async with self._store.unit_of_work(StorageKeys.BOOKINGS):
            updated = await self._bookings.update(booking)

        if not updated:
            self._logger.debug("Правка: бронирование не найдено", booking_id=booking.id)
            return Ok(Outcome.NOT_FOUND)
        self._logger.info("Бронирование изменено", booking_id=booking.id)
        return Ok(Outcome.APPLIED)

    async def get_booking(self, booking_id: EntityId) -> Optional[Booking]:
        """Возвращает бронирование по идентификатору."""
        async with self._store.unit_of_work(StorageKeys.BOOKINGS):
            return await self._bookings.get_by_id(booking_id)

    async def list_bookings(
        self,
        status: Optional[BookingStatus] = None,
        user_id: Optional[EntityId] = None,
    ) -> List[Booking]:
        """Возвращает бронирования, начиная с самых новых, с фильтрацией."""
        async with self._store.unit_of_work(StorageKeys.BOOKINGS):
            bookings = await self._bookings.list()

        if status is not None:
            bookings = [b for b in bookings if b.status == status]
        if user_id is not None:
            bookings = [b for b in bookings if b.user_id == user_id]

        # sorted стабилен и при reverse=True
        return sorted(bookings, key=lambda b: b.created_at, reverse=True)

    async def pending_count(self) -> int:
        """Количество заявок, ожидающих решения."""
        return len(await self.list_bookings(status=BookingStatus.PENDING))

    async def occupancy(self, room_id: EntityId, on_date: DateLike) -> Dict[int, SlotStatus]:
        """Занятость зала по часам на указанную дату."""
        on_date = _as_date(on_date)
        async with self._store.unit_of_work(StorageKeys.BOOKINGS):
            bookings = await self._bookings.list()
        return occupancy(room_id, on_date, bookings)

    async def active_bookings(self, room_id: EntityId, on_date: DateLike) -> List[Booking]:
        """Неотклоненные бронирования зала на дату."""
        on_date = _as_date(on_date)
        async with self._store.unit_of_work(StorageKeys.BOOKINGS):
            bookings = await self._bookings.list()
        return active_bookings(room_id, on_date, bookings)

    async def day_agenda(self, on_date: DateLike) -> List[Booking]:
        """Бронирования всех залов на день, по времени начала."""
        on_date = _as_date(on_date)
        async with self._store.unit_of_work(StorageKeys.BOOKINGS):
            bookings = await self._bookings.list()
        return bookings_for_day(bookings, on_date)

    async def month_report(self, year: int, month: int) -> MonthReport:
        """Отчет о бронированиях за месяц."""
        async with self._store.unit_of_work(StorageKeys.BOOKINGS):
            bookings = await self._bookings.list()
        return month_report(bookings, year, month, generated_on=today())

    async def _publish_events(self, booking: Booking) -> None:
        for event in booking.pull_domain_events():
            await self._event_bus.publish(event)


def _validated(booking: Booking) -> Booking:
    CreateBookingRequest(
        room_id=booking.room_id,
        room_name=booking.room_name,
        user_id=booking.user_id,
        user_name=booking.user_name,
        date=booking.date,
        time=booking.time,
        duration_hours=booking.duration_hours,
        purpose=booking.purpose,
    )
    return Booking.model_validate(booking.model_dump())


def _as_date(value: DateLike) -> dt.date:
    if isinstance(value, dt.date):
        return value
    return dt.date.fromisoformat(value)
