"""
Конфигурация логирования.

Настраивает стандартный ``logging`` через ``dictConfig`` и предоставляет
адаптер ``StdLogger``, реализующий порт ``ILogger``.
"""

import logging
import logging.config
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from .config import Settings
from .shared_kernel import ILogger

ROOT_LOGGER_NAME = "parish_booker"


class ContextJsonFormatter(JsonFormatter):
    """JSON-форматтер, добавляющий уровень и имя логгера."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    """Строит словарь конфигурации для ``logging.config.dictConfig``."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            },
            "json": {
                "()": ContextJsonFormatter,
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": settings.log_format,
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            ROOT_LOGGER_NAME: {
                "handlers": ["console"],
                "level": settings.log_level.upper(),
                "propagate": False,
            },
        },
    }


def configure_logging(settings: Settings) -> None:
    """Применяет конфигурацию логирования."""
    logging.config.dictConfig(build_logging_config(settings))


class StdLogger(ILogger):
    """
    Реализация ``ILogger`` поверх стандартного ``logging``.

    Именованные аргументы попадают в запись лога как ``extra`` и
    выводятся JSON-форматтером отдельными полями.
    """

    def __init__(self, name: str = ROOT_LOGGER_NAME):
        if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        self._logger = logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(message, extra=_extra(kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, extra=_extra(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, extra=_extra(kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(message, extra=_extra(kwargs))

    def critical(self, message: str, **kwargs: Any) -> None:
        self._logger.critical(message, extra=_extra(kwargs))


# Имена, которые нельзя передавать в extra: они уже есть у LogRecord
_RESERVED = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


def _extra(context: Dict[str, Any]) -> Dict[str, Any]:
    return {
        (f"ctx_{key}" if key in _RESERVED else key): value
        for key, value in context.items()
    }
