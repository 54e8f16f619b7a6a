"""
Календарные выборки и месячный отчет по бронированиям.
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .domain import Booking

MONTH_NAMES = [
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
]

REPORT_COLUMNS = ("Fecha", "Hora", "Dur", "Salón", "Usuario", "Estado", "Motivo")


@dataclass(frozen=True)
class ReportRow:
    """Строка месячного отчета."""

    date: str
    time: str
    duration: str
    room_name: str
    user_name: str
    status: str
    purpose: str

    def as_tuple(self) -> Tuple[str, ...]:
        return (
            self.date,
            self.time,
            self.duration,
            self.room_name,
            self.user_name,
            self.status,
            self.purpose,
        )


@dataclass(frozen=True)
class MonthReport:
    """Отчет о бронированиях за месяц."""

    year: int
    month: int
    generated_on: dt.date
    rows: List[ReportRow] = field(default_factory=list)

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    @property
    def title(self) -> str:
        return f"Reporte de Reservas - {self.month_name} {self.year}"

    @property
    def file_name(self) -> str:
        return f"Reservas_{self.month_name}_{self.year}.pdf"

    @property
    def columns(self) -> Tuple[str, ...]:
        return REPORT_COLUMNS

    @property
    def is_empty(self) -> bool:
        return not self.rows


def bookings_for_day(bookings: Iterable[Booking], on_date: dt.date) -> List[Booking]:
    """Бронирования на день, упорядоченные по времени начала."""
    return sorted((b for b in bookings if b.date == on_date), key=lambda b: b.time)


def bookings_for_month(bookings: Iterable[Booking], year: int, month: int) -> List[Booking]:
    """Бронирования за месяц в исходном порядке."""
    return [b for b in bookings if b.date.year == year and b.date.month == month]


def month_report(
    bookings: Iterable[Booking], year: int, month: int, generated_on: dt.date
) -> MonthReport:
    """Строит отчет за месяц: строки упорядочены по дате, затем по времени."""
    if not 1 <= month <= 12:
        raise ValueError(f"Некорректный номер месяца: {month}")

    month_bookings = sorted(
        bookings_for_month(bookings, year, month), key=lambda b: (b.date, b.time)
    )
    rows = [
        ReportRow(
            date=b.date.isoformat(),
            time=b.time.strftime("%H:%M"),
            duration=f"{b.duration_hours}h",
            room_name=b.room_name,
            user_name=b.user_name,
            status=b.status.label,
            purpose=b.purpose,
        )
        for b in month_bookings
    ]
    return MonthReport(year=year, month=month, generated_on=generated_on, rows=rows)
