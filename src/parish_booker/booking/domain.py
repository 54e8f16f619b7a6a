"""
Доменная модель контекста бронирования.

Содержит агрегат бронирования и доменные события его жизненного цикла.
"""

import datetime as dt
from typing import List

from pydantic import Field, PrivateAttr, field_serializer, field_validator

from ..shared_kernel import (
    BookingStatus,
    DomainEvent,
    EntityId,
    Record,
    as_utc,
    generate_id,
    now,
)

# Часы работы: первый и последний час, с которого можно начать бронирование
OPENING_HOUR = 8
CLOSING_HOUR = 22


class BookingCreated(DomainEvent):
    """Событие создания заявки на бронирование."""

    booking_id: EntityId
    room_id: EntityId
    room_name: str
    user_id: EntityId
    user_name: str
    date: dt.date


class BookingStatusChanged(DomainEvent):
    """Событие смены статуса бронирования."""

    booking_id: EntityId
    user_id: EntityId
    room_name: str
    date: dt.date
    previous_status: BookingStatus
    new_status: BookingStatus


class Booking(Record):
    """
    Бронирование зала.

    ``room_name`` и ``user_name`` - копии на момент создания, а не живые
    ссылки: после переименования или удаления зала запись продолжает
    показывать прежнее название.
    """

    id: EntityId
    room_id: EntityId
    room_name: str
    user_id: EntityId
    user_name: str
    date: dt.date
    time: dt.time
    duration_hours: int = Field(..., ge=1)
    purpose: str
    status: BookingStatus = BookingStatus.PENDING
    created_at: dt.datetime = Field(default_factory=now)

    _domain_events: List[DomainEvent] = PrivateAttr(default_factory=list)

    @field_validator("time")
    @classmethod
    def truncate_to_minutes(cls, value: dt.time) -> dt.time:
        # Хранится только HH:MM
        return value.replace(second=0, microsecond=0)

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, value: dt.datetime) -> dt.datetime:
        return as_utc(value)

    @field_serializer("time")
    def serialize_time(self, value: dt.time) -> str:
        return value.strftime("%H:%M")

    @property
    def domain_events(self) -> List[DomainEvent]:
        """Возвращает список доменных событий."""
        return list(self._domain_events)

    def pull_domain_events(self) -> List[DomainEvent]:
        """Возвращает накопленные события и очищает список."""
        events = list(self._domain_events)
        self._domain_events.clear()
        return events

    @property
    def start_hour(self) -> int:
        """Час начала; минуты не учитываются."""
        return self.time.hour

    @property
    def end_hour(self) -> int:
        """Час окончания (не включительно)."""
        return self.start_hour + self.duration_hours

    def covers_hour(self, hour: int) -> bool:
        """Проверяет, попадает ли час в интервал [начало, начало + длительность)."""
        return self.start_hour <= hour < self.end_hour

    def change_status(self, new_status: BookingStatus) -> None:
        """
        Меняет статус бронирования.

        Ограничений на переходы нет: администратор может, например,
        снова одобрить отклоненную заявку.
        """
        previous_status = self.status
        self.status = new_status
        self._domain_events.append(
            BookingStatusChanged(
                booking_id=self.id,
                user_id=self.user_id,
                room_name=self.room_name,
                date=self.date,
                previous_status=previous_status,
                new_status=new_status,
            )
        )

    @classmethod
    def create(
        cls,
        room_id: EntityId,
        room_name: str,
        user_id: EntityId,
        user_name: str,
        date: dt.date,
        time: dt.time,
        duration_hours: int,
        purpose: str,
    ) -> "Booking":
        """Создает новую заявку в статусе PENDING."""
        booking = cls(
            id=generate_id("booking"),
            room_id=room_id,
            room_name=room_name,
            user_id=user_id,
            user_name=user_name,
            date=date,
            time=time,
            duration_hours=duration_hours,
            purpose=purpose,
            status=BookingStatus.PENDING,
        )

        booking._domain_events.append(
            BookingCreated(
                booking_id=booking.id,
                room_id=room_id,
                room_name=room_name,
                user_id=user_id,
                user_name=user_name,
                date=date,
            )
        )

        return booking
