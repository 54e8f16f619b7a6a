"""
Parish Booker: бронирование залов прихода.

Пакет разделен на ограниченные контексты:
- identity: пользователи, сессия и настройки оформления
- inventory: залы
- booking: заявки на бронирование и календарь
- notifications: лента уведомлений
- storage: постоянное хранилище

Точка входа для сборки приложения - ``bootstrap.bootstrap_app``.
"""

__version__ = "0.1.0"
