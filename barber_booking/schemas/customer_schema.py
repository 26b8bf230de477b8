"""Per-session booking selection state."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from barber_booking.schemas.booking_schema import Period, Service, StaffMember


@dataclass
class BookingDraft:
    """
    Selections made so far in one booking session.

    The slot list is only meaningful once service, staff and date are all
    chosen; until then the draft yields no slots.
    """
    service: Optional[Service] = None
    staff: Optional[StaffMember] = None
    day: Optional[date] = None
    period: Period = Period.MORNING
    slot: Optional[datetime] = None
    client_name: Optional[str] = None
    client_phone: Optional[str] = None

    def is_ready_for_slots(self) -> bool:
        return self.service is not None and self.staff is not None and self.day is not None

    def missing_fields(self) -> list[str]:
        """Required fields still unset, in the order a form would ask for them."""
        required = [
            ("client_name", self.client_name),
            ("client_phone", self.client_phone),
            ("service", self.service),
            ("staff", self.staff),
            ("slot", self.slot),
        ]
        return [name for name, value in required if not value]
