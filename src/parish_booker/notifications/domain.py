"""
Доменная модель контекста уведомлений.
"""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from ..shared_kernel import (
    ADMIN_RECIPIENT,
    BookingStatus,
    EntityId,
    Record,
    UserRole,
    as_utc,
    generate_id,
    now,
)


class NotificationType(str, Enum):
    """Типы уведомлений."""

    BOOKING_REQUEST = "BOOKING_REQUEST"
    BOOKING_STATUS_CHANGE = "BOOKING_STATUS_CHANGE"


class NewNotification(BaseModel):
    """Уведомление до добавления в ленту: без id, признака прочтения и времени."""

    user_id: EntityId  # Идентификатор получателя или ADMIN для всех администраторов
    title: str
    message: str
    type: NotificationType


class AppNotification(Record):
    """Уведомление в ленте получателя."""

    id: EntityId
    user_id: EntityId
    title: str
    message: str
    read: bool = False
    created_at: dt.datetime = Field(default_factory=now)
    type: NotificationType

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, value: dt.datetime) -> dt.datetime:
        return as_utc(value)

    @classmethod
    def from_new(cls, notification: NewNotification) -> "AppNotification":
        return cls(
            id=generate_id("notif"),
            user_id=notification.user_id,
            title=notification.title,
            message=notification.message,
            type=notification.type,
        )

    def is_visible_to(self, recipient_id: EntityId, role: UserRole) -> bool:
        """
        Лента получателя: его личные уведомления, а для администратора
        еще и адресованные ADMIN.
        """
        return self.user_id == recipient_id or (
            role == UserRole.ADMIN and self.user_id == ADMIN_RECIPIENT
        )


def booking_request_notification(
    user_name: str, room_name: str, date: dt.date
) -> NewNotification:
    """Уведомление администраторам о новой заявке."""
    return NewNotification(
        user_id=ADMIN_RECIPIENT,
        title="Nueva Solicitud",
        message=f'{user_name} solicitó el salón "{room_name}" para el {date.isoformat()}.',
        type=NotificationType.BOOKING_REQUEST,
    )


def status_change_notification(
    user_id: EntityId, room_name: str, date: dt.date, status: BookingStatus
) -> NewNotification:
    """Уведомление автору заявки о смене статуса."""
    # Все, что не одобрено, сообщается как отказ
    if status == BookingStatus.APPROVED:
        label, icon = "APROBADA", "✅"
    else:
        label, icon = "RECHAZADA", "❌"

    return NewNotification(
        user_id=user_id,
        title=f"Reserva {label}",
        message=(
            f'{icon} Tu solicitud para "{room_name}" el {date.isoformat()} '
            f"ha sido {label.lower()}."
        ),
        type=NotificationType.BOOKING_STATUS_CHANGE,
    )
