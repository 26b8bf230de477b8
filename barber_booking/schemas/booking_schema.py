"""Service, staff and booking data models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from barber_booking.utils import PHONE_DIGITS, localize, normalize_phone


class Period(str, Enum):
    """Half-day period a customer books into."""

    MORNING = "morning"
    AFTERNOON = "afternoon"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Service(BaseModel):
    """A service on the menu. Immutable once a booking references it."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: Decimal = Field(ge=0)
    duration_minutes: int = Field(gt=0)


class StaffMember(BaseModel):
    """A barber who takes bookings."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    photo_url: Optional[str] = None
    specialties: tuple[str, ...] = ()


class Booking(BaseModel):
    """A booking row as returned by the data layer, service joined in."""

    id: str
    staff_id: str
    service_id: str
    start: datetime
    status: BookingStatus = BookingStatus.PENDING
    client_name: str
    client_phone: str
    created_at: Optional[datetime] = None
    service: Optional[Service] = None

    @field_validator("start")
    @classmethod
    def _localize_start(cls, value: datetime) -> datetime:
        return localize(value)

    @field_validator("client_phone")
    @classmethod
    def _digits_only(cls, value: str) -> str:
        return normalize_phone(value)

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED


class BookingRequest(BaseModel):
    """Validated booking submission from a customer."""

    client_name: str = Field(min_length=1)
    client_phone: str
    service_id: str = Field(min_length=1)
    staff_id: str = Field(min_length=1)
    start: datetime
    period: Period

    @field_validator("client_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("client name is required")
        return value

    @field_validator("client_phone")
    @classmethod
    def _valid_phone(cls, value: str) -> str:
        digits = normalize_phone(value)
        if len(digits) != PHONE_DIGITS:
            raise ValueError(
                f"phone must have {PHONE_DIGITS} digits including area code, got {len(digits)}"
            )
        return digits

    @field_validator("start")
    @classmethod
    def _localize_start(cls, value: datetime) -> datetime:
        return localize(value)

