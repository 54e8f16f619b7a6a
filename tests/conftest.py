"""
Конфигурация тестов для pytest.
Добавляет каталог src в PYTHONPATH и предоставляет общие фикстуры.
"""
import sys
from pathlib import Path

import pytest

# Добавляем каталог с исходным кодом в PYTHONPATH
src_dir = str(Path(__file__).parent.parent / "src")
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from parish_booker.bootstrap import bootstrap_app  # noqa: E402
from parish_booker.config import Settings  # noqa: E402
from parish_booker.storage import InMemoryKeyValueStore  # noqa: E402


@pytest.fixture
def settings():
    """Настройки для тестов: данные в памяти, без задержек."""
    return Settings(
        data_dir=None,
        latency_seconds=0.0,
        notification_poll_interval=0.01,
        log_level="WARNING",
    )


@pytest.fixture
async def app(settings):
    """Приложение поверх хранилища в памяти с начальными данными."""
    return await bootstrap_app(settings, kv_store=InMemoryKeyValueStore())


@pytest.fixture
async def admin(app):
    """Администратор из начальных данных."""
    result = await app.auth.login("admin", "password")
    return result.value


@pytest.fixture
async def user(app):
    """Обычный пользователь из начальных данных."""
    result = await app.auth.login("user", "password")
    return result.value
