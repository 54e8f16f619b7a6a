"""
Инфраструктурный слой хранилища.

Содержит реализации хранилища "ключ - значение" (в памяти и в JSON-файлах),
объект ``AppStore`` с типизированным доступом к коллекциям и единицу
работы ``StoreUnitOfWork``.
"""

import asyncio
import copy
import json
import os
import re
from pathlib import Path
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    NoReturn,
    Optional,
    Sequence,
    Type,
    TypeVar,
)

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..logging_config import StdLogger
from ..shared_kernel import ILogger, Record, StorageCorruptedError
from . import interfaces as ports
from .domain import DEFAULT_SEED

T = TypeVar("T", bound=BaseModel)

_KEY_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")


class InMemoryKeyValueStore(ports.IKeyValueStore):
    """Реализация хранилища в памяти."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def contains(self, key: str) -> bool:
        return key in self._data


class JsonFileKeyValueStore(ports.IKeyValueStore):
    """Хранилище, где каждому ключу соответствует файл ``<key>.json``."""

    def __init__(self, directory: os.PathLike):
        """
        Инициализирует хранилище.

        Args:
            directory: Каталог с данными; создается при первой записи
        """
        self._directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Недопустимый ключ хранилища: {key!r}")
        return self._directory / f"{key}.json"

    async def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    async def set(self, key: str, value: str) -> None:
        path = self._path(key)
        # Создаем директорию, если она не существует
        self._directory.mkdir(parents=True, exist_ok=True)

        # Пишем во временный файл и атомарно подменяем основной
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(value)
        os.replace(tmp_path, path)

    async def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    async def contains(self, key: str) -> bool:
        return self._path(key).exists()


class AppStore:
    """
    Постоянное хранилище приложения.

    Отвечает за сериализацию коллекций, начальное заполнение и
    блокировки: у каждой коллекции свой ``asyncio.Lock``, изменения
    выполняются внутри ``unit_of_work`` целиком.
    """

    def __init__(
        self,
        kv_store: Optional[ports.IKeyValueStore] = None,
        logger: Optional[ILogger] = None,
        latency_seconds: float = 0.0,
    ):
        self._kv = kv_store or InMemoryKeyValueStore()
        self._logger = logger or StdLogger("storage")
        self._latency_seconds = latency_seconds
        self._locks: Dict[str, asyncio.Lock] = {}

    @property
    def kv(self) -> ports.IKeyValueStore:
        return self._kv

    async def initialize(self, seed: Mapping[str, Any] = DEFAULT_SEED) -> List[str]:
        """
        Заполняет отсутствующие ключи начальными данными.

        Уже существующие данные не перезаписываются.

        Returns:
            Список ключей, которые были заполнены
        """
        seeded = []
        for key, value in seed.items():
            if await self._kv.contains(key):
                continue
            await self._kv.set(key, json.dumps(copy.deepcopy(value), ensure_ascii=False))
            seeded.append(key)

        if seeded:
            self._logger.info("Хранилище заполнено начальными данными", keys=seeded)
        return seeded

    def unit_of_work(self, *keys: str) -> "StoreUnitOfWork":
        """Создает единицу работы над указанными коллекциями."""
        return StoreUnitOfWork(self, keys, self._logger)

    def lock_for(self, key: str) -> asyncio.Lock:
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    async def simulate_latency(self) -> None:
        if self._latency_seconds > 0:
            await asyncio.sleep(self._latency_seconds)

    # Чтение и запись

    async def read_collection(self, key: str, model_class: Type[T]) -> List[T]:
        """Загружает коллекцию записей; отсутствующий ключ - пустая коллекция."""
        raw = await self._load(key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            self._fail(key, f"ожидался массив, получен {type(raw).__name__}")
        try:
            return [model_class.model_validate(item) for item in raw]
        except PydanticValidationError as e:
            self._fail(key, str(e))

    async def write_collection(self, key: str, items: Iterable[Record]) -> None:
        """Сохраняет коллекцию записей целиком."""
        await self._dump(key, [item.to_storage() for item in items])

    async def read_object(self, key: str, model_class: Type[T]) -> Optional[T]:
        """Загружает одиночный объект или ``None``, если ключа нет."""
        raw = await self._load(key)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            self._fail(key, f"ожидался объект, получен {type(raw).__name__}")
        try:
            return model_class.model_validate(raw)
        except PydanticValidationError as e:
            self._fail(key, str(e))

    async def write_object(self, key: str, item: Record) -> None:
        """Сохраняет одиночный объект."""
        await self._dump(key, item.to_storage())

    async def delete(self, key: str) -> None:
        await self._kv.delete(key)

    async def _load(self, key: str) -> Any:
        raw_data = await self._kv.get(key)
        if raw_data is None or not raw_data.strip():
            return None
        try:
            return json.loads(raw_data)
        except json.JSONDecodeError as e:
            self._fail(key, f"некорректный JSON: {e}")

    async def _dump(self, key: str, data: Any) -> None:
        await self._kv.set(key, json.dumps(data, ensure_ascii=False))

    def _fail(self, key: str, reason: str) -> NoReturn:
        self._logger.critical("Повреждены данные хранилища", key=key, reason=reason)
        raise StorageCorruptedError(key, reason)


class StoreUnitOfWork:
    """
    Единица работы над несколькими коллекциями.

    На входе захватывает блокировки коллекций (в отсортированном порядке,
    чтобы исключить взаимоблокировки) и запоминает их исходные значения.
    При исключении внутри блока значения восстанавливаются.
    """

    def __init__(self, store: AppStore, keys: Sequence[str], logger: ILogger):
        self._store = store
        self._keys = sorted(set(keys))
        self._logger = logger
        self._acquired: List[asyncio.Lock] = []
        self._snapshot: Dict[str, Optional[str]] = {}

    @property
    def keys(self) -> List[str]:
        return list(self._keys)

    async def __aenter__(self) -> "StoreUnitOfWork":
        try:
            for key in self._keys:
                lock = self._store.lock_for(key)
                await lock.acquire()
                self._acquired.append(lock)
        except BaseException:
            self._release()
            raise

        try:
            await self._store.simulate_latency()
            self._snapshot = {key: await self._store.kv.get(key) for key in self._keys}
        except BaseException:
            self._release()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        try:
            if exc_type is None:
                self._logger.debug("StoreUnitOfWork committed", keys=self._keys)
            else:
                await self.rollback()
        finally:
            self._release()
        return False  # Пробрасываем исключение дальше, если оно было

    async def rollback(self) -> None:
        """Восстанавливает значения коллекций на момент входа."""
        for key, value in self._snapshot.items():
            if value is None:
                await self._store.kv.delete(key)
            else:
                await self._store.kv.set(key, value)
        self._logger.warning("StoreUnitOfWork rolled back", keys=self._keys)

    def _release(self) -> None:
        while self._acquired:
            self._acquired.pop().release()
