"""
Модуль постоянного хранилища.

Отвечает за:
- Сериализацию коллекций пользователей, залов, бронирований и уведомлений
- Начальное заполнение данных при первом запуске
- Блокировки коллекций и атомарность изменений
"""

from . import domain, infrastructure, interfaces
from .domain import DEFAULT_SEED, StorageKeys
from .infrastructure import (
    AppStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    StoreUnitOfWork,
)

__all__ = [
    "domain",
    "infrastructure",
    "interfaces",
    "AppStore",
    "DEFAULT_SEED",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "StorageKeys",
    "StoreUnitOfWork",
]
