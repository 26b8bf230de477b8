"""
Conflict detection for a candidate booking start.

A candidate is available when it is in the future, starts inside the
chosen period's window, ends by the window's close, and does not overlap
any active booking of the same staff member.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from barber_booking.config import settings
from barber_booking.schemas.booking_schema import Booking, Period, Service, StaffMember
from barber_booking.scheduling.business_hours import period_window
from barber_booking.utils import localize

logger = logging.getLogger(__name__)

# A 75-minute service is scheduled as a 1h30 block.
ROUNDED_DURATIONS: dict[int, int] = {75: 90}
DEFAULT_BOOKING_MINUTES = 30


def effective_duration(service: Service) -> int:
    """Minutes a service occupies on the calendar."""
    minutes = service.duration_minutes
    return ROUNDED_DURATIONS.get(minutes, minutes)


def booking_duration(booking: Booking) -> int:
    if booking.service is None:
        return DEFAULT_BOOKING_MINUTES
    return effective_duration(booking.service)


def occupied_interval(booking: Booking) -> tuple[datetime, datetime]:
    """Half-open [start, end) interval a booking blocks."""
    start = localize(booking.start)
    return start, start + timedelta(minutes=booking_duration(booking))


def intervals_overlap(
    start: datetime, end: datetime, other_start: datetime, other_end: datetime
) -> bool:
    """True when [start, end) collides with [other_start, other_end)."""
    return (
        (other_start <= start < other_end)
        or (other_start < end <= other_end)
        or (start <= other_start and end >= other_end)
    )


def _blocks(booking: Booking, staff_id: str, include_cancelled: bool) -> bool:
    if booking.staff_id != staff_id:
        return False
    return include_cancelled or not booking.is_cancelled


def find_conflicts(
    start: datetime,
    duration_minutes: int,
    staff_id: str,
    bookings: Iterable[Booking],
    include_cancelled: Optional[bool] = None,
    exclude_booking: Optional[str] = None,
) -> list[Booking]:
    """Return the bookings of ``staff_id`` that overlap the given interval."""
    if include_cancelled is None:
        include_cancelled = settings.scheduling.cancelled_blocks_slot
    start = localize(start)
    end = start + timedelta(minutes=duration_minutes)
    conflicts = []
    for booking in bookings:
        if booking.id == exclude_booking or not _blocks(booking, staff_id, include_cancelled):
            continue
        other_start, other_end = occupied_interval(booking)
        if intervals_overlap(start, end, other_start, other_end):
            conflicts.append(booking)
    return conflicts


def rejection_reason(
    candidate_start: datetime,
    service: Optional[Service],
    staff: Optional[StaffMember],
    period: Period,
    existing_bookings: Iterable[Booking],
    now: datetime,
) -> Optional[str]:
    """Why a candidate start cannot be booked, or None when it can."""
    if service is None or staff is None:
        return "service or staff not selected"

    candidate_start = localize(candidate_start)
    if candidate_start <= localize(now):
        return "start is in the past"

    window = period_window(candidate_start.weekday(), period)
    if window is None:
        return "closed on this day"

    wall_clock = candidate_start.time().replace(tzinfo=None)
    if not window.start <= wall_clock < window.end:
        return f"outside {Period(period).value} hours"

    closing = window.closes_at(candidate_start.date(), candidate_start.tzinfo)
    duration = effective_duration(service)
    if candidate_start + timedelta(minutes=duration) > closing:
        return f"service would end after {window.end:%H:%M}"

    conflicts = find_conflicts(candidate_start, duration, staff.id, existing_bookings)
    if conflicts:
        return f"overlaps booking {conflicts[0].id}"
    return None


def is_available(
    candidate_start: datetime,
    service: Optional[Service],
    staff: Optional[StaffMember],
    period: Period,
    existing_bookings: Iterable[Booking],
    now: datetime,
) -> bool:
    """Check whether ``staff`` can take ``service`` starting at ``candidate_start``."""
    reason = rejection_reason(candidate_start, service, staff, period, existing_bookings, now)
    if reason is not None:
        logger.debug("Slot %s unavailable: %s", candidate_start.isoformat(), reason)
        return False
    return True
