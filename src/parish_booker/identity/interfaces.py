"""
Интерфейсы (порты) для контекста пользователей и настроек.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from ..shared_kernel import EntityId
from .domain import AppConfig, StoredUser, User


class IUserRepository(Protocol):
    """Интерфейс репозитория для пользователей."""

    async def list(self) -> List[StoredUser]: ...
    async def add(self, user: StoredUser) -> None: ...
    async def get_by_id(self, user_id: EntityId) -> StoredUser | None: ...
    async def find_by_username(self, username: str) -> StoredUser | None: ...
    async def update(self, user: StoredUser) -> bool: ...


class ISessionRepository(Protocol):
    """Интерфейс хранилища текущей сессии."""

    async def get(self) -> User | None: ...
    async def set(self, user: User) -> None: ...
    async def clear(self) -> None: ...


class IConfigRepository(Protocol):
    """Интерфейс хранилища настроек приложения."""

    async def get(self) -> Optional[AppConfig]: ...
    async def set(self, config: AppConfig) -> None: ...
