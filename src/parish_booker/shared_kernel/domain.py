"""
Основные доменные типы и утилиты общего ядра.
"""

import time as _time
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Generic, Optional, TypeVar, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

# Общие типы идентификаторов
EntityId = str

# Получатель-заглушка: уведомление видно всем администраторам
ADMIN_RECIPIENT = "ADMIN"


def now() -> datetime:
    """Возвращает текущую дату и время (UTC)."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Приводит время к UTC-aware; наивное время считается UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def today() -> date:
    """Возвращает текущую дату."""
    return date.today()


def generate_id(prefix: str) -> EntityId:
    """
    Генерирует новый идентификатор вида ``<prefix>-<ms>-<suffix>``.

    Миллисекунды в начале позволяют сортировать записи по времени
    создания, случайный суффикс исключает совпадения внутри одной
    миллисекунды.
    """
    return f"{prefix}-{int(_time.time() * 1000)}-{uuid4().hex[:9]}"


class Record(BaseModel):
    """
    Базовая модель для всех хранимых записей.

    В хранилище поля сохраняются в camelCase (``roomId``, ``createdAt``),
    в Python-коде используются обычные snake_case имена.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_storage(self) -> dict:
        """Возвращает JSON-совместимое представление записи."""
        return self.model_dump(mode="json", by_alias=True)


class DomainEvent(BaseModel):
    """Базовый класс для всех доменных событий."""

    event_id: str = Field(default_factory=lambda: uuid4().hex)
    occurred_on: datetime = Field(default_factory=now)


# Общие перечисления
class UserRole(str, Enum):
    """Роли пользователей."""

    ADMIN = "ADMIN"
    USER = "USER"


class BookingStatus(str, Enum):
    """Статусы бронирования."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @property
    def label(self) -> str:
        """Человекочитаемое название статуса."""
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    BookingStatus.PENDING: "Pendiente",
    BookingStatus.APPROVED: "Aprobada",
    BookingStatus.REJECTED: "Rechazada",
}


class Outcome(str, Enum):
    """
    Результат команды над записью по идентификатору.

    Устаревший идентификатор не считается ошибкой: команда просто
    ничего не делает и возвращает ``NOT_FOUND``.
    """

    APPLIED = "APPLIED"
    NOT_FOUND = "NOT_FOUND"


# Результат операций с валидацией
@dataclass(frozen=True)
class ValidationError:
    """Ошибка валидации, которую можно показать пользователю как есть."""

    message: str
    field: Optional[str] = None

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Берет первую ошибку из исключения pydantic."""
        error = exc.errors()[0]
        # Для ValueError из валидаторов берем исходный текст без префикса pydantic
        cause = (error.get("ctx") or {}).get("error")
        message = str(cause) if cause is not None else error["msg"]
        location = error.get("loc") or ()
        return cls(message=message, field=str(location[0]) if location else None)


T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Успешный результат."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    """Неуспешный результат."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[ValidationError]]


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class BusinessRuleValidationException(DomainException):
    """Исключение при нарушении бизнес-правил."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_error(self) -> ValidationError:
        return ValidationError(message=self.message, field=self.field)


class StorageCorruptedError(DomainException):
    """Сохраненные данные не удается прочитать или разобрать."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Данные по ключу '{key}' повреждены: {reason}")
        self.key = key
        self.reason = reason
