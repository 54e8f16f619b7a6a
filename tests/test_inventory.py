"""
Тесты контекста залов.
"""

import asyncio

from parish_booker.bootstrap import bootstrap_app
from parish_booker.shared_kernel import Outcome


async def _book(app, room_id, room_name="Sala", date="2024-05-10", time="10:00"):
    result = await app.bookings.create_booking(
        room_id=room_id,
        user_id="u2",
        date=date,
        time=time,
        duration_hours=1,
        purpose="Catequesis",
        room_name=room_name,
        user_name="Juan Pérez",
    )
    return result.value


class TestRoomApplicationService:
    """Тесты сервиса управления залами."""

    async def test_seeded_room(self, app):
        rooms = await app.rooms.list_rooms()

        assert [r.id for r in rooms] == ["room-1"]
        assert rooms[0].name == "Salón Parroquial Principal"
        assert rooms[0].capacity == 50

    async def test_create_room(self, app):
        """Новый зал добавляется в конец списка."""
        # Действие
        result = await app.rooms.create_room(
            "Salón Juvenil", 15, features=["Sillas", "  ", "Mesa "]
        )

        # Проверка
        assert result.is_ok
        room = result.value
        assert room.id.startswith("room-")
        assert room.features == ["Sillas", "Mesa"]
        rooms = await app.rooms.list_rooms()
        assert [r.id for r in rooms] == ["room-1", room.id]

    async def test_create_room_requires_name(self, app):
        result = await app.rooms.create_room("  ", 10)

        assert not result.is_ok
        assert result.error.message == "El nombre del salón es obligatorio."
        assert len(await app.rooms.list_rooms()) == 1

    async def test_create_room_requires_positive_capacity(self, app):
        result = await app.rooms.create_room("Capilla", 0)

        assert not result.is_ok
        assert result.error.message == "La capacidad debe ser mayor que cero."
        assert result.error.field == "capacity"

    async def test_concurrent_creates_are_all_kept(self, settings):
        """Параллельное создание залов не теряет ни одной записи."""
        slow_app = await bootstrap_app(settings.model_copy(update={"latency_seconds": 0.001}))

        await asyncio.gather(*(slow_app.rooms.create_room(f"Sala {i}", 10) for i in range(5)))

        assert len(await slow_app.rooms.list_rooms()) == 6

    async def test_update_room(self, app):
        # Подготовка
        room = await app.rooms.get_room("room-1")

        # Действие
        result = await app.rooms.update_room(room.model_copy(update={"capacity": 80}))

        # Проверка
        assert result.value == Outcome.APPLIED
        assert (await app.rooms.get_room("room-1")).capacity == 80

    async def test_update_unknown_room(self, app):
        room = await app.rooms.get_room("room-1")

        result = await app.rooms.update_room(room.model_copy(update={"id": "room-missing"}))

        assert result.value == Outcome.NOT_FOUND
        assert [r.id for r in await app.rooms.list_rooms()] == ["room-1"]

    async def test_invalid_update_is_rejected_and_not_stored(self, app):
        """Некорректная правка не записывается, список залов остается читаемым."""
        # Подготовка
        room = await app.rooms.get_room("room-1")

        # Действие
        result = await app.rooms.update_room(room.model_copy(update={"capacity": 0}))

        # Проверка
        assert not result.is_ok
        assert result.error.message == "La capacidad debe ser mayor que cero."
        (stored,) = await app.rooms.list_rooms()
        assert stored.capacity == 50

    async def test_update_with_blank_name_is_rejected(self, app):
        room = await app.rooms.get_room("room-1")

        result = await app.rooms.update_room(room.model_copy(update={"name": "  "}))

        assert not result.is_ok
        assert (await app.rooms.get_room("room-1")).name == room.name

    async def test_delete_room_cascades_to_bookings(self, app):
        """Удаление зала удаляет его бронирования и не трогает чужие."""
        # Подготовка
        other = (await app.rooms.create_room("Salón Juvenil", 15)).value
        kept = await _book(app, "room-1", "Salón Parroquial Principal")
        await _book(app, other.id, other.name)
        await _book(app, other.id, other.name, time="12:00")

        # Действие
        outcome = await app.rooms.delete_room(other.id)

        # Проверка
        assert outcome == Outcome.APPLIED
        assert await app.rooms.get_room(other.id) is None
        bookings = await app.bookings.list_bookings()
        assert [b.id for b in bookings] == [kept.id]

    async def test_delete_unknown_room(self, app):
        outcome = await app.rooms.delete_room("room-missing")

        assert outcome == Outcome.NOT_FOUND
        assert len(await app.rooms.list_rooms()) == 1

    async def test_delete_unknown_room_purges_orphan_bookings(self, app):
        """Бронирования несуществующего зала удаляются вместе с ним."""
        await _book(app, "room-ghost", "Sala antigua")

        outcome = await app.rooms.delete_room("room-ghost")

        assert outcome == Outcome.NOT_FOUND
        assert await app.bookings.list_bookings() == []
