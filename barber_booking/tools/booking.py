"""
In-memory booking store.

Stands in for the relational appointments table. Submissions are re-checked
against a freshly read snapshot with the same detector used to display
slots, and the insert itself re-runs the overlap check under a lock: that
lock is the uniqueness guarantee a real storage layer has to provide.
"""

import threading
import uuid
from datetime import date, datetime, timedelta
from typing import Optional, TypedDict

from pydantic import ValidationError

from barber_booking.config import settings
from barber_booking.logging_context import booking_request, get_request_logger
from barber_booking.schemas.booking_schema import (
    Booking,
    BookingRequest,
    BookingStatus,
    Period,
)
from barber_booking.scheduling.conflicts import effective_duration, find_conflicts, is_available
from barber_booking.tools.services import get_service
from barber_booking.tools.staff import get_staff
from barber_booking.utils import localize, normalize_phone, now_local

logger = get_request_logger(__name__)


class BookingResult(TypedDict, total=False):
    """Result from create_booking, cancel_booking or confirm_booking."""

    success: bool
    message: str
    booking_id: str
    details: Booking
    refresh: bool


SLOT_TAKEN_MESSAGE = "This time is no longer available. Please choose another time."

ALLOWED_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
}

_bookings: dict[str, Booking] = {}
_lock = threading.Lock()


def submit_booking(
    name: str,
    phone: str,
    service_id: str,
    staff_id: str,
    start: Optional[datetime],
    period: Period,
    now: Optional[datetime] = None,
) -> BookingResult:
    """Validate raw form input and create the booking."""
    missing = [
        field_name
        for field_name, value in [
            ("name", name),
            ("phone", phone),
            ("service", service_id),
            ("staff", staff_id),
        ]
        if not value or not value.strip()
    ]
    if start is None:
        missing.append("time")
    if missing:
        return {
            "success": False,
            "message": f"Please fill in all required fields: {', '.join(missing)}.",
        }

    try:
        request = BookingRequest(
            client_name=name,
            client_phone=phone,
            service_id=service_id,
            staff_id=staff_id,
            start=start,
            period=period,
        )
    except ValidationError as exc:
        problems = "; ".join(err["msg"] for err in exc.errors())
        logger.info("Booking form rejected: %s", problems)
        return {"success": False, "message": f"Invalid booking details: {problems}."}

    return create_booking(request, now=now)


def create_booking(request: BookingRequest, now: Optional[datetime] = None) -> BookingResult:
    """Re-check the requested slot against fresh data and insert the booking."""
    with booking_request() as request_id:
        return _create_booking(request, now, request_id)


def _create_booking(
    request: BookingRequest, now: Optional[datetime], request_id: str
) -> BookingResult:
    service = get_service(request.service_id)
    staff = get_staff(request.staff_id)
    if service is None or staff is None:
        unknown = "service" if service is None else "staff member"
        return {"success": False, "message": f"Unknown {unknown}."}

    now = now_local(now)
    snapshot = list_bookings(staff_id=staff.id)
    if not is_available(request.start, service, staff, request.period, snapshot, now):
        logger.info(
            "Slot %s with %s rejected at submit time", request.start.isoformat(), staff.id
        )
        return {"success": False, "message": SLOT_TAKEN_MESSAGE, "refresh": True}

    booking = Booking(
        id=f"BK-{uuid.uuid4().hex[:6].upper()}",
        staff_id=staff.id,
        service_id=service.id,
        start=request.start,
        status=BookingStatus.PENDING,
        client_name=request.client_name,
        client_phone=request.client_phone,
        created_at=now,
        service=service,
    )

    with _lock:
        conflicts = find_conflicts(
            booking.start, effective_duration(service), staff.id, list(_bookings.values())
        )
        if conflicts:
            logger.warning(
                "Insert for %s lost the race to %s", booking.start.isoformat(), conflicts[0].id
            )
            return {"success": False, "message": SLOT_TAKEN_MESSAGE, "refresh": True}
        _bookings[booking.id] = booking

    logger.info(
        "Booking created: %s (%s) for %s with %s at %s",
        booking.id, request_id, booking.client_name, staff.name, booking.start.isoformat(),
    )
    return {
        "success": True,
        "booking_id": booking.id,
        "message": (
            f"Booking received. Reference: {booking.id}. {service.name} with {staff.name} "
            f"on {booking.start:%d/%m/%Y} at {booking.start:%H:%M}."
        ),
        "details": booking,
    }


def insert_booking(booking: Booking) -> Booking:
    """Store a booking row as-is, bypassing availability checks (data import)."""
    if booking.service is None:
        booking = booking.model_copy(update={"service": get_service(booking.service_id)})
    with _lock:
        _bookings[booking.id] = booking
    return booking


def get_booking(booking_id: str) -> Optional[Booking]:
    return _bookings.get(booking_id)


def list_bookings(
    staff_id: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    include_cancelled: bool = True,
) -> list[Booking]:
    """Bookings filtered by staff and [start, end), ordered by start time."""
    start = localize(start) if start else None
    end = localize(end) if end else None
    rows = [
        b for b in list(_bookings.values())
        if (staff_id is None or b.staff_id == staff_id)
        and (start is None or b.start >= start)
        and (end is None or b.start < end)
        and (include_cancelled or not b.is_cancelled)
    ]
    return sorted(rows, key=lambda b: b.start)


def _set_status(booking_id: str, target: BookingStatus) -> BookingResult:
    with _lock:
        booking = _bookings.get(booking_id)
        if booking is None:
            return {"success": False, "message": f"Booking {booking_id} not found."}
        if target not in ALLOWED_TRANSITIONS[booking.status]:
            return {
                "success": False,
                "message": (
                    f"Booking {booking_id} is {booking.status.value} "
                    f"and cannot become {target.value}."
                ),
            }
        booking = booking.model_copy(update={"status": target})
        _bookings[booking_id] = booking
    logger.info("Booking %s: %s", booking_id, target.value)
    return {
        "success": True,
        "booking_id": booking_id,
        "message": f"Booking {booking_id} has been {target.value}.",
        "details": booking,
    }


def confirm_booking(booking_id: str) -> BookingResult:
    return _set_status(booking_id, BookingStatus.CONFIRMED)


def cancel_booking(booking_id: str) -> BookingResult:
    """Cancel a booking; its slot becomes free again."""
    return _set_status(booking_id, BookingStatus.CANCELLED)


def confirm_pending(day: date) -> list[str]:
    """Confirm every pending booking on ``day``. Returns the confirmed IDs."""
    tz = settings.business.tzinfo
    start = datetime.combine(day, datetime.min.time(), tzinfo=tz)
    pending = [
        b.id for b in list_bookings(start=start, end=start + timedelta(days=1))
        if b.status == BookingStatus.PENDING
    ]
    return [bid for bid in pending if confirm_booking(bid)["success"]]


def find_bookings_by_phone(phone: str, now: Optional[datetime] = None) -> list[Booking]:
    """A client's upcoming bookings, looked up by digits-only phone."""
    digits = normalize_phone(phone)
    if not digits:
        return []
    return [
        b for b in list_bookings(start=now_local(now))
        if b.client_phone == digits
    ]


def purge_older_than(now: Optional[datetime] = None, weeks: Optional[int] = None) -> int:
    """Delete bookings that started before the retention cutoff. Returns how many."""
    if weeks is None:
        weeks = settings.business.retention_weeks
    cutoff = now_local(now) - timedelta(weeks=weeks)
    with _lock:
        stale = [bid for bid, b in _bookings.items() if b.start < cutoff]
        for bid in stale:
            del _bookings[bid]
    logger.info("Purged %d booking(s) older than %s", len(stale), cutoff.isoformat())
    return len(stale)


def reset() -> None:
    """Clear all bookings. Used by test fixtures for isolation."""
    with _lock:
        _bookings.clear()
