"""
Модуль контекста уведомлений (Notifications Context).

Отвечает за внутреннюю ленту уведомлений:
- Уведомления администраторам о новых заявках
- Уведомления авторам о решении по заявке
- Отметку о прочтении и очистку ленты
- Периодический опрос ленты клиентом
"""

from . import application, domain, event_handlers, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "event_handlers",
    "infrastructure",
    "interfaces",
]
