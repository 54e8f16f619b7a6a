"""
Модуль контекста пользователей (Identity Context).

Отвечает за:
- Вход, регистрацию и выход пользователей
- Смену пароля
- Настройки оформления приложения
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
]
