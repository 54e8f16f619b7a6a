"""
Модуль контекста залов (Inventory Context).

Отвечает за:
- Создание, изменение и удаление залов
- Каскадное удаление бронирований удаленного зала
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
]
