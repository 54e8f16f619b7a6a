"""
Тесты постоянного хранилища.
"""

import asyncio
import json

import pytest
from parish_booker.inventory.domain import Room
from parish_booker.shared_kernel import StorageCorruptedError
from parish_booker.storage import (
    DEFAULT_SEED,
    AppStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    StorageKeys,
)


class TestInitialize:
    """Тесты начального заполнения."""

    async def test_seeds_empty_store(self):
        """Пустое хранилище заполняется всеми начальными коллекциями."""
        # Подготовка
        kv = InMemoryKeyValueStore()
        store = AppStore(kv)

        # Действие
        seeded = await store.initialize()

        # Проверка
        assert sorted(seeded) == sorted(DEFAULT_SEED.keys())
        assert not await kv.contains(StorageKeys.CURRENT_USER)
        rooms = await store.read_collection(StorageKeys.ROOMS, Room)
        assert [r.id for r in rooms] == ["room-1"]
        assert rooms[0].features == ["Proyector", "Aire Acondicionado", "Pizarrón", "Sillas"]

    async def test_does_not_overwrite_existing_keys(self):
        """Существующие данные, даже пустые коллекции, не перезаписываются."""
        # Подготовка
        kv = InMemoryKeyValueStore({StorageKeys.ROOMS: "[]"})
        store = AppStore(kv)

        # Действие
        seeded = await store.initialize()

        # Проверка
        assert StorageKeys.ROOMS not in seeded
        assert await store.read_collection(StorageKeys.ROOMS, Room) == []

    async def test_second_initialize_is_noop(self):
        store = AppStore()
        await store.initialize()

        assert await store.initialize() == []

    async def test_seed_is_not_shared_between_stores(self):
        """Изменения в одном хранилище не затрагивают начальные данные."""
        first = AppStore()
        await first.initialize()
        await first.write_collection(StorageKeys.ROOMS, [])

        second = AppStore()
        await second.initialize()

        assert len(await second.read_collection(StorageKeys.ROOMS, Room)) == 1


class TestReadCollection:
    """Тесты чтения коллекций."""

    async def test_missing_key_is_empty_collection(self):
        store = AppStore()

        assert await store.read_collection(StorageKeys.ROOMS, Room) == []

    async def test_blank_value_is_empty_collection(self):
        store = AppStore(InMemoryKeyValueStore({StorageKeys.ROOMS: "  "}))

        assert await store.read_collection(StorageKeys.ROOMS, Room) == []

    async def test_invalid_json_raises(self):
        """Некорректный JSON не подменяется пустой коллекцией."""
        # Подготовка
        store = AppStore(InMemoryKeyValueStore({StorageKeys.ROOMS: "{not json"}))

        # Действие / Проверка
        with pytest.raises(StorageCorruptedError) as exc_info:
            await store.read_collection(StorageKeys.ROOMS, Room)
        assert exc_info.value.key == StorageKeys.ROOMS

    async def test_not_a_list_raises(self):
        store = AppStore(InMemoryKeyValueStore({StorageKeys.ROOMS: '{"id": "room-1"}'}))

        with pytest.raises(StorageCorruptedError):
            await store.read_collection(StorageKeys.ROOMS, Room)

    async def test_invalid_record_raises(self):
        raw = json.dumps([{"id": "room-1", "name": "Sala", "capacity": "muchos"}])
        store = AppStore(InMemoryKeyValueStore({StorageKeys.ROOMS: raw}))

        with pytest.raises(StorageCorruptedError):
            await store.read_collection(StorageKeys.ROOMS, Room)

    async def test_records_are_stored_in_camel_case(self):
        """Поля сохраняются в camelCase и читаются обратно."""
        # Подготовка
        kv = InMemoryKeyValueStore()
        store = AppStore(kv)
        room = Room(id="room-9", name="Capilla", capacity=20, image_url="http://img")

        # Действие
        await store.write_collection(StorageKeys.ROOMS, [room])

        # Проверка
        raw = json.loads(await kv.get(StorageKeys.ROOMS))
        assert raw[0]["imageUrl"] == "http://img"
        assert await store.read_collection(StorageKeys.ROOMS, Room) == [room]


class TestUnitOfWork:
    """Тесты единицы работы."""

    async def test_rollback_on_exception(self):
        """Исключение внутри блока восстанавливает все затронутые коллекции."""
        # Подготовка
        store = AppStore()
        await store.initialize()
        before = await store.kv.get(StorageKeys.ROOMS)

        # Действие
        with pytest.raises(RuntimeError):
            async with store.unit_of_work(StorageKeys.ROOMS, StorageKeys.BOOKINGS):
                await store.write_collection(StorageKeys.ROOMS, [])
                await store.write_collection(StorageKeys.BOOKINGS, [])
                raise RuntimeError("сбой")

        # Проверка
        assert await store.kv.get(StorageKeys.ROOMS) == before

    async def test_rollback_removes_keys_created_inside(self):
        store = AppStore()

        with pytest.raises(RuntimeError):
            async with store.unit_of_work(StorageKeys.ROOMS):
                await store.write_collection(StorageKeys.ROOMS, [])
                raise RuntimeError("сбой")

        assert not await store.kv.contains(StorageKeys.ROOMS)

    async def test_locks_released_after_exit(self):
        store = AppStore()

        with pytest.raises(RuntimeError):
            async with store.unit_of_work(StorageKeys.ROOMS, StorageKeys.USERS):
                raise RuntimeError("сбой")

        assert not store.lock_for(StorageKeys.ROOMS).locked()
        assert not store.lock_for(StorageKeys.USERS).locked()

    async def test_keys_are_sorted_and_unique(self):
        store = AppStore()

        uow = store.unit_of_work(StorageKeys.USERS, StorageKeys.BOOKINGS, StorageKeys.USERS)

        assert uow.keys == sorted({StorageKeys.USERS, StorageKeys.BOOKINGS})

    async def test_concurrent_writers_do_not_lose_updates(self):
        """Чтение-изменение-запись под блокировкой не теряет изменений."""
        # Подготовка
        store = AppStore(latency_seconds=0.001)
        await store.initialize()

        async def add_room(index):
            async with store.unit_of_work(StorageKeys.ROOMS):
                rooms = await store.read_collection(StorageKeys.ROOMS, Room)
                await asyncio.sleep(0)
                rooms.append(Room(id=f"room-x{index}", name=f"Sala {index}", capacity=10))
                await store.write_collection(StorageKeys.ROOMS, rooms)

        # Действие
        await asyncio.gather(*(add_room(i) for i in range(10)))

        # Проверка
        rooms = await store.read_collection(StorageKeys.ROOMS, Room)
        assert len(rooms) == 11


class TestJsonFileKeyValueStore:
    """Тесты файлового хранилища."""

    async def test_set_get_delete(self, tmp_path):
        # Подготовка
        kv = JsonFileKeyValueStore(tmp_path / "data")

        # Действие
        await kv.set(StorageKeys.ROOMS, "[]")

        # Проверка
        assert await kv.contains(StorageKeys.ROOMS)
        assert await kv.get(StorageKeys.ROOMS) == "[]"
        assert (tmp_path / "data" / "app_rooms.json").exists()
        assert not list((tmp_path / "data").glob("*.tmp"))

        await kv.delete(StorageKeys.ROOMS)
        assert await kv.get(StorageKeys.ROOMS) is None
        assert not await kv.contains(StorageKeys.ROOMS)

    async def test_rejects_unsafe_keys(self, tmp_path):
        kv = JsonFileKeyValueStore(tmp_path)

        with pytest.raises(ValueError):
            await kv.get("../etc/passwd")

    async def test_data_survives_new_store_instance(self, tmp_path):
        """Данные, записанные одним экземпляром, видны другому."""
        first = AppStore(JsonFileKeyValueStore(tmp_path))
        await first.initialize()
        await first.write_collection(
            StorageKeys.ROOMS, [Room(id="room-2", name="Salón Juvenil", capacity=15)]
        )

        second = AppStore(JsonFileKeyValueStore(tmp_path))
        assert await second.initialize() == []
        rooms = await second.read_collection(StorageKeys.ROOMS, Room)
        assert [r.name for r in rooms] == ["Salón Juvenil"]
