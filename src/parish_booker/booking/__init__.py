"""
Модуль контекста бронирования (Booking Context).

Отвечает за жизненный цикл бронирований залов, включая:
- Создание заявок и смену их статуса
- Правку бронирований администратором
- Расчет занятости зала по часам
- Календарные выборки и месячный отчет
"""

from . import application, availability, domain, infrastructure, interfaces, schedule

__all__ = [
    "domain",
    "application",
    "availability",
    "infrastructure",
    "interfaces",
    "schedule",
]
