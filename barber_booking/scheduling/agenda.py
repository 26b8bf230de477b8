"""Staff calendar views: a half-hour day grid and a Sunday-start week."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Optional

from barber_booking.config import settings
from barber_booking.schemas.booking_schema import Booking
from barber_booking.scheduling.business_hours import DAY_CLOSES, DAY_OPENS
from barber_booking.scheduling.conflicts import occupied_interval
from barber_booking.utils import localize

CELL_MINUTES = 30


class AgendaMode(str, Enum):
    ALL = "all"
    BOOKED = "booked"
    EMPTY = "empty"


@dataclass
class AgendaCell:
    start: datetime
    booking: Optional[Booking] = None

    @property
    def is_free(self) -> bool:
        return self.booking is None


def _cell_starts(day: date) -> list[datetime]:
    tz = settings.business.tzinfo
    cursor = datetime.combine(day, DAY_OPENS, tzinfo=tz)
    last = datetime.combine(day, DAY_CLOSES, tzinfo=tz)
    starts = []
    while cursor <= last:
        starts.append(cursor)
        cursor += timedelta(minutes=CELL_MINUTES)
    return starts


def day_agenda(
    day: date,
    staff_id: str,
    bookings: Iterable[Booking],
    mode: AgendaMode = AgendaMode.ALL,
) -> list[AgendaCell]:
    """Half-hour cells from opening to the last start mark for one barber.

    A cell holds the active booking whose occupied interval covers the
    cell's start time.
    """
    active = [
        b for b in bookings
        if b.staff_id == staff_id and not b.is_cancelled and localize(b.start).date() == day
    ]
    intervals = [(occupied_interval(b), b) for b in active]

    cells = []
    for start in _cell_starts(day):
        owner = next((b for (b_start, b_end), b in intervals if b_start <= start < b_end), None)
        cells.append(AgendaCell(start=start, booking=owner))

    if mode == AgendaMode.BOOKED:
        return [c for c in cells if not c.is_free]
    if mode == AgendaMode.EMPTY:
        return [c for c in cells if c.is_free]
    return cells


def week_range(day: date) -> tuple[date, date]:
    """First (Sunday) and last (Saturday) date of the week containing ``day``."""
    days_since_sunday = (day.weekday() + 1) % 7
    start = day - timedelta(days=days_since_sunday)
    return start, start + timedelta(days=6)


def week_agenda(day: date, bookings: Iterable[Booking]) -> dict[date, list[Booking]]:
    """Bookings of the week containing ``day``, grouped by date and sorted by start."""
    start, end = week_range(day)
    grouped: dict[date, list[Booking]] = {start + timedelta(days=i): [] for i in range(7)}
    for booking in bookings:
        booking_day = localize(booking.start).date()
        if start <= booking_day <= end:
            grouped[booking_day].append(booking)
    for items in grouped.values():
        items.sort(key=lambda b: b.start)
    return grouped
