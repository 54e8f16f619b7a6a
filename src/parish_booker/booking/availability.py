"""
Расчет занятости зала по часам.

Результат носит справочный характер: он подсказывает пользователю
свободные часы, но не мешает создать пересекающуюся заявку.
"""

import datetime as dt
from enum import Enum
from typing import Dict, Iterable, List

from ..shared_kernel import BookingStatus, EntityId
from .domain import CLOSING_HOUR, OPENING_HOUR, Booking


class SlotStatus(str, Enum):
    """Состояние часового слота."""

    FREE = "FREE"
    PENDING = "PENDING"
    APPROVED = "APPROVED"


def operating_hours() -> List[int]:
    """Часы работы, включая последний: 8, 9, ..., 22."""
    return list(range(OPENING_HOUR, CLOSING_HOUR + 1))


def active_bookings(
    room_id: EntityId, on_date: dt.date, bookings: Iterable[Booking]
) -> List[Booking]:
    """Бронирования зала на дату, кроме отклоненных, в исходном порядке."""
    return [
        booking
        for booking in bookings
        if booking.room_id == room_id
        and booking.date == on_date
        and booking.status != BookingStatus.REJECTED
    ]


def occupancy(
    room_id: EntityId, on_date: dt.date, bookings: Iterable[Booking]
) -> Dict[int, SlotStatus]:
    """
    Возвращает состояние каждого часа работы зала на указанную дату.

    Пересечения бронирований не проверяются: если час покрывают
    несколько заявок, статус берется у первой найденной.
    """
    day_bookings = active_bookings(room_id, on_date, bookings)

    slots: Dict[int, SlotStatus] = {}
    for hour in operating_hours():
        booking = next((b for b in day_bookings if b.covers_hour(hour)), None)
        slots[hour] = SlotStatus.FREE if booking is None else SlotStatus(booking.status.value)
    return slots
