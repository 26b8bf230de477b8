"""Shared test fixtures and helpers."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

import pytest

from barber_booking.config import settings
from barber_booking.schemas.booking_schema import Booking, BookingStatus, Service, StaffMember
from barber_booking.tools import booking as store
from barber_booking.tools import services

# Week used throughout the tests: Sunday 2026-10-18 .. Saturday 2026-10-24.
SUNDAY = (2026, 10, 18)
MONDAY = (2026, 10, 19)
TUESDAY = (2026, 10, 20)
THURSDAY = (2026, 10, 22)
SATURDAY = (2026, 10, 24)


def at(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    """Aware datetime in the business timezone."""
    return datetime(year, month, day, hour, minute, second, tzinfo=settings.business.tzinfo)


def make_service(minutes: int = 30, service_id: Optional[str] = None, price: str = "35.00") -> Service:
    return Service(
        id=service_id or f"svc-{minutes}",
        name=f"{minutes}-minute service",
        price=Decimal(price),
        duration_minutes=minutes,
    )


def make_booking(
    start: datetime,
    minutes: int = 30,
    staff_id: str = "joao",
    status: BookingStatus = BookingStatus.CONFIRMED,
    booking_id: str = "BK-TEST",
    price: str = "35.00",
    phone: str = "85991234567",
) -> Booking:
    service = make_service(minutes, price=price)
    return Booking(
        id=booking_id,
        staff_id=staff_id,
        service_id=service.id,
        start=start,
        status=status,
        client_name="Test Client",
        client_phone=phone,
        service=service,
    )


@pytest.fixture(autouse=True)
def clean_store():
    store.reset()
    services.reset()
    yield
    store.reset()
    services.reset()


@pytest.fixture
def staff():
    return StaffMember(id="joao", name="João")


@pytest.fixture
def other_staff():
    return StaffMember(id="rafael", name="Rafael")


@pytest.fixture
def haircut():
    return make_service(30, "haircut")


@pytest.fixture
def now():
    """Sunday evening before the test week: every weekday slot is in the future."""
    return at(*SUNDAY, 20, 0)
