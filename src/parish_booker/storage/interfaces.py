"""
Интерфейсы (порты) постоянного хранилища.
"""

from typing import Optional, Protocol


class IKeyValueStore(Protocol):
    """
    Интерфейс долговременного хранилища "ключ - строка".

    Значения хранятся уже сериализованными в JSON; разбором и
    проверкой занимается ``AppStore``.
    """

    async def get(self, key: str) -> Optional[str]: ...
    async def set(self, key: str, value: str) -> None: ...
    async def delete(self, key: str) -> None: ...
    async def contains(self, key: str) -> bool: ...
