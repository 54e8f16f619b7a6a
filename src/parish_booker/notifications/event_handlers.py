from ..booking.domain import BookingCreated, BookingStatusChanged
from .application import NotificationApplicationService
from .domain import booking_request_notification, status_change_notification


async def on_booking_created(
    event: BookingCreated, service: "NotificationApplicationService"
) -> None:
    """Обработчик события создания заявки: уведомляет администраторов."""
    await service.append(
        booking_request_notification(event.user_name, event.room_name, event.date)
    )


async def on_booking_status_changed(
    event: BookingStatusChanged, service: "NotificationApplicationService"
) -> None:
    """Обработчик смены статуса: уведомляет автора заявки."""
    await service.append(
        status_change_notification(
            event.user_id, event.room_name, event.date, event.new_status
        )
    )
