"""
Инфраструктурный слой контекста пользователей и настроек.

Репозитории читают и пишут коллекции через ``AppStore``. Блокировки
захватывают сервисы приложения, репозитории их не трогают.
"""

from typing import List, Optional

from ..shared_kernel import EntityId
from ..storage import AppStore, StorageKeys
from ..storage.domain import SEED_CONFIG
from . import interfaces as ports
from .domain import AppConfig, StoredUser, User


class StoreUserRepository(ports.IUserRepository):
    """Репозиторий пользователей поверх ``AppStore``."""

    def __init__(self, store: AppStore):
        self._store = store

    async def list(self) -> List[StoredUser]:
        return await self._store.read_collection(StorageKeys.USERS, StoredUser)

    async def add(self, user: StoredUser) -> None:
        users = await self.list()
        if any(u.id == user.id for u in users):
            raise ValueError(f"User with id {user.id} already exists")
        users.append(user)
        await self._store.write_collection(StorageKeys.USERS, users)

    async def get_by_id(self, user_id: EntityId) -> Optional[StoredUser]:
        return next((u for u in await self.list() if u.id == user_id), None)

    async def find_by_username(self, username: str) -> Optional[StoredUser]:
        return next((u for u in await self.list() if u.matches_username(username)), None)

    async def update(self, user: StoredUser) -> bool:
        users = await self.list()
        for index, existing in enumerate(users):
            if existing.id == user.id:
                users[index] = user
                await self._store.write_collection(StorageKeys.USERS, users)
                return True
        return False


class StoreSessionRepository(ports.ISessionRepository):
    """Текущая сессия: один пользователь без пароля или ничего."""

    def __init__(self, store: AppStore):
        self._store = store

    async def get(self) -> Optional[User]:
        return await self._store.read_object(StorageKeys.CURRENT_USER, User)

    async def set(self, user: User) -> None:
        # Пароль не должен попасть в сессию
        if isinstance(user, StoredUser):
            user = user.to_public()
        await self._store.write_object(StorageKeys.CURRENT_USER, user)

    async def clear(self) -> None:
        await self._store.delete(StorageKeys.CURRENT_USER)


class StoreConfigRepository(ports.IConfigRepository):
    """Настройки приложения поверх ``AppStore``."""

    def __init__(self, store: AppStore):
        self._store = store

    async def get(self) -> Optional[AppConfig]:
        return await self._store.read_object(StorageKeys.CONFIG, AppConfig)

    async def set(self, config: AppConfig) -> None:
        await self._store.write_object(StorageKeys.CONFIG, config)


def default_config() -> AppConfig:
    """Настройки по умолчанию, если в хранилище их нет."""
    return AppConfig.model_validate(SEED_CONFIG)
