"""
Общее ядро (Shared Kernel) системы бронирования залов.

Содержит общие типы данных и утилиты, используемые в различных ограниченных контекстах.
"""

from .domain import (
    ADMIN_RECIPIENT,
    BookingStatus,
    BusinessRuleValidationException,
    DomainEvent,
    # Исключения
    DomainException,
    # Базовые типы
    EntityId,
    Err,
    Ok,
    Outcome,
    Record,
    Result,
    StorageCorruptedError,
    # Перечисления
    UserRole,
    ValidationError,
    generate_id,
    # Утилиты
    as_utc,
    now,
    today,
)
from .interfaces import ILogger

__all__ = [
    # Базовые типы
    "EntityId",
    "ADMIN_RECIPIENT",
    "generate_id",
    "Record",
    "DomainEvent",
    # Результаты
    "Ok",
    "Err",
    "Result",
    "Outcome",
    "ValidationError",
    # Перечисления
    "UserRole",
    "BookingStatus",
    # Исключения
    "DomainException",
    "BusinessRuleValidationException",
    "StorageCorruptedError",
    # Порты
    "ILogger",
    # Утилиты
    "as_utc",
    "now",
    "today",
]
