"""Text for booking confirmations, reminders and slot alternatives.

Only the text and a share link are built here; sending them is up to the caller.
"""

from datetime import datetime
from typing import Optional
from urllib.parse import quote

from barber_booking.config import settings
from barber_booking.schemas.booking_schema import Booking, Service, StaffMember
from barber_booking.utils import format_phone, localize, now_local

SHARE_URL = "https://wa.me/{phone}?text={text}"


def build_confirmation_message(booking: Booking, service: Service, staff: StaffMember) -> str:
    """New-booking summary sent to the shop for confirmation."""
    start = localize(booking.start)
    lines = [
        "*New booking*",
        "",
        f"*Client:* {booking.client_name}",
        f"*Phone:* {format_phone(booking.client_phone)}",
        f"*Service:* {service.name}",
        f"*Price:* R$ {service.price:.2f}",
        f"*Duration:* {service.duration_minutes} minutes",
        f"*Barber:* {staff.name}",
        f"*Date:* {start:%d/%m/%Y}",
        f"*Time:* {start:%H:%M}",
        "",
        "_Awaiting your confirmation!_",
    ]
    return "\n".join(lines)


def build_reminder_message(booking: Booking, service: Service, staff: StaffMember) -> str:
    start = localize(booking.start)
    lines = [
        "*Booking reminder*",
        "",
        f"Hi {booking.client_name}! Your appointment at {settings.business.name} is coming up:",
        "",
        f"*Service:* {service.name}",
        f"*Barber:* {staff.name}",
        f"*Time:* {start:%H:%M}",
        "",
        "_See you soon!_",
    ]
    return "\n".join(lines)


def build_alternatives_message(requested: datetime, alternatives: list[datetime]) -> str:
    """Offer other slots after a submission lost its slot."""
    requested = localize(requested)
    lines = [f"The {requested:%d/%m at %H:%M} slot was just taken."]
    if alternatives:
        lines.append("Still open:")
        lines.extend(f"  {localize(slot):%d/%m %H:%M}" for slot in alternatives[:3])
    else:
        lines.append("No other times are open in that period. Please try another day.")
    return "\n".join(lines)


def build_share_link(text: str, phone: Optional[str] = None) -> str:
    """Messaging link that opens a chat with ``text`` prefilled.

    Defaults to the shop's own number.
    """
    return SHARE_URL.format(
        phone=phone or settings.business.whatsapp_number,
        text=quote(text, safe=""),
    )


def reminder_due(
    booking: Booking, now: Optional[datetime] = None, lead_minutes: Optional[int] = None
) -> bool:
    """True when the booking is today and exactly ``lead_minutes`` whole minutes away."""
    if booking.is_cancelled:
        return False
    lead = settings.business.reminder_lead_minutes if lead_minutes is None else lead_minutes
    now = now_local(now)
    start = localize(booking.start)
    if start.date() != now.date():
        return False
    minutes_until = int((start - now).total_seconds() // 60)
    return minutes_until == lead
