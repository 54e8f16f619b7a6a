"""
Настройки приложения.

Значения берутся из переменных окружения с префиксом ``PARISH_BOOKER_``
(например, ``PARISH_BOOKER_DATA_DIR``); без них используются значения
по умолчанию, подходящие для локального запуска и тестов.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Настройки приложения с поддержкой переменных окружения."""

    model_config = SettingsConfigDict(env_prefix="PARISH_BOOKER_", extra="ignore")

    # Хранилище: без каталога данные живут только в памяти процесса
    data_dir: Optional[Path] = None
    # Искусственная задержка операций хранилища, секунды
    latency_seconds: float = Field(default=0.0, ge=0)

    # Период опроса ленты уведомлений, секунды
    notification_poll_interval: float = Field(default=10.0, gt=0)

    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"


@lru_cache()
def get_settings() -> Settings:
    """Возвращает закешированный экземпляр настроек."""
    return Settings()
