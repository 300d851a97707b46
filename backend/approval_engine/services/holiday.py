# ruff: noqa: TC003
from __future__ import annotations

from datetime import date
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field


class HolidayInfo(BaseModel):
    """A company-wide non-working day."""

    date: date
    name: str = Field(min_length=1, max_length=255)


@runtime_checkable
class HolidayService(Protocol):
    """Interface for the Holiday Service."""

    async def list_holiday_dates(self, start_date: date, end_date: date) -> set[date]:
        """Return holiday dates within the inclusive range."""
        ...


class InMemoryHolidayService:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._holidays: dict[date, HolidayInfo] = {}

    def seed(self, holiday: HolidayInfo) -> None:
        """Seed a holiday for testing."""
        self._holidays[holiday.date] = holiday

    async def list_holiday_dates(self, start_date: date, end_date: date) -> set[date]:
        """Return holiday dates within the inclusive range."""
        return {d for d in self._holidays if start_date <= d <= end_date}


_holiday_service: HolidayService = InMemoryHolidayService()


def get_holiday_service() -> HolidayService:
    """Return the configured Holiday Service."""
    return _holiday_service


def set_holiday_service(service: HolidayService) -> None:
    """Override the service (for testing or production wiring)."""
    global _holiday_service
    _holiday_service = service
