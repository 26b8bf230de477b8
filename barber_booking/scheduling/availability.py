"""
Slot calculation: which start times a customer is offered.

Candidates are generated every 30 minutes across the chosen period's
window and each one is passed through the conflict detector. On the
current day the first candidate is pushed to the next half-hour mark
after ``now``, so the result shrinks as the day goes on.
"""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Optional, Sequence, TypedDict

from barber_booking.config import settings
from barber_booking.schemas.booking_schema import Booking, Period, Service, StaffMember
from barber_booking.scheduling.business_hours import period_window
from barber_booking.scheduling.conflicts import effective_duration, is_available
from barber_booking.utils import localize

logger = logging.getLogger(__name__)

SLOT_STEP_MINUTES = 30


class DateAvailability(TypedDict):
    """Summary of availability for a single date."""

    date: str
    day_name: str
    slot_count: int


def round_up_to_step(moment: datetime, step: int = SLOT_STEP_MINUTES) -> datetime:
    """Round the minute up to the next multiple of ``step``; seconds are dropped.

    10:47 -> 11:00, 10:30 -> 10:30, 10:30:59 -> 10:30.
    """
    minutes = math.ceil(moment.minute / step) * step
    base = moment.replace(minute=0, second=0, microsecond=0)
    return base + timedelta(minutes=minutes)


def list_slots(
    day: date,
    service: Optional[Service],
    staff: Optional[StaffMember],
    period: Period,
    existing_bookings: Sequence[Booking],
    now: datetime,
) -> list[datetime]:
    """Ordered start times ``staff`` can take ``service`` on ``day`` in ``period``."""
    if service is None or staff is None:
        return []

    window = period_window(day.weekday(), period)
    if window is None:
        return []

    tz = settings.business.tzinfo
    now = localize(now)
    cursor = window.opens_at(day, tz)
    closing = window.closes_at(day, tz)

    if day == now.date() and now > cursor:
        cursor = round_up_to_step(now)

    duration = timedelta(minutes=effective_duration(service))
    staff_bookings = [b for b in existing_bookings if b.staff_id == staff.id]
    slots: list[datetime] = []
    while cursor < closing:
        if cursor + duration <= closing and is_available(
            cursor, service, staff, period, staff_bookings, now
        ):
            slots.append(cursor)
        cursor = cursor + timedelta(minutes=SLOT_STEP_MINUTES)

    logger.debug(
        "%d slot(s) for %s / %s on %s (%s)",
        len(slots), staff.name, service.name, day.isoformat(), Period(period).value,
    )
    return slots


def list_day_slots(
    day: date,
    service: Optional[Service],
    staff: Optional[StaffMember],
    existing_bookings: Sequence[Booking],
    now: datetime,
) -> dict[Period, list[datetime]]:
    """Slots for both periods of a day."""
    return {
        period: list_slots(day, service, staff, period, existing_bookings, now)
        for period in Period
    }


def get_available_dates(
    service: Service,
    staff: StaffMember,
    existing_bookings: Sequence[Booking],
    now: datetime,
    days: Optional[int] = None,
    limit: int = 5,
) -> list[DateAvailability]:
    """The next dates (today included) with at least one open slot."""
    if days is None:
        days = settings.business.booking_horizon_days
    today = localize(now).date()
    results: list[DateAvailability] = []
    for offset in range(days):
        day = today + timedelta(days=offset)
        per_period = list_day_slots(day, service, staff, existing_bookings, now)
        count = sum(len(slots) for slots in per_period.values())
        if count:
            results.append(
                {
                    "date": day.isoformat(),
                    "day_name": day.strftime("%A"),
                    "slot_count": count,
                }
            )
        if len(results) >= limit:
            break
    return results


def next_available(
    service: Service,
    staff: StaffMember,
    existing_bookings: Sequence[Booking],
    now: datetime,
    days: Optional[int] = None,
) -> Optional[datetime]:
    """Earliest offerable start within the booking horizon."""
    if days is None:
        days = settings.business.booking_horizon_days
    today = localize(now).date()
    for offset in range(days):
        day = today + timedelta(days=offset)
        for slots in list_day_slots(day, service, staff, existing_bookings, now).values():
            if slots:
                return slots[0]
    return None
