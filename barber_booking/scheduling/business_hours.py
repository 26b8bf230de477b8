"""
Weekly opening hours shared by the slot calculator and the conflict detector.

The shop runs two half-day periods. Monday, Wednesday, Friday and Saturday
are "extended" days with a longer afternoon; Tuesday and Thursday close the
afternoon at 18:00; Sunday is closed.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Optional

from barber_booking.schemas.booking_schema import Period


class DayType(str, Enum):
    CLOSED = "closed"
    REGULAR = "regular"
    EXTENDED = "extended"


@dataclass(frozen=True)
class PeriodWindow:
    """Opening window for one period: starts may fall in [start, end), services must end by end."""

    start: time
    end: time

    def opens_at(self, day: date, tzinfo=None) -> datetime:
        return datetime.combine(day, self.start, tzinfo=tzinfo)

    def closes_at(self, day: date, tzinfo=None) -> datetime:
        return datetime.combine(day, self.end, tzinfo=tzinfo)


# Keyed by datetime.weekday(): Monday == 0 ... Sunday == 6
WEEKLY_SCHEDULE: dict[int, DayType] = {
    0: DayType.EXTENDED,
    1: DayType.REGULAR,
    2: DayType.EXTENDED,
    3: DayType.REGULAR,
    4: DayType.EXTENDED,
    5: DayType.EXTENDED,
    6: DayType.CLOSED,
}

PERIOD_WINDOWS: dict[tuple[DayType, Period], PeriodWindow] = {
    (DayType.EXTENDED, Period.MORNING): PeriodWindow(time(8, 0), time(12, 0)),
    (DayType.EXTENDED, Period.AFTERNOON): PeriodWindow(time(14, 0), time(20, 30)),
    (DayType.REGULAR, Period.MORNING): PeriodWindow(time(8, 0), time(12, 0)),
    (DayType.REGULAR, Period.AFTERNOON): PeriodWindow(time(14, 0), time(18, 0)),
}

# Earliest opening and latest closing across the week, for calendar grids.
DAY_OPENS = time(8, 0)
DAY_CLOSES = time(20, 30)


def day_type(day_of_week: int) -> DayType:
    """Classify a ``weekday()`` number."""
    try:
        return WEEKLY_SCHEDULE[day_of_week]
    except KeyError:
        raise ValueError(f"day_of_week must be 0-6, got {day_of_week}") from None


def is_open(day: date) -> bool:
    return day_type(day.weekday()) != DayType.CLOSED


def period_window(day_of_week: int, period: Period) -> Optional[PeriodWindow]:
    """Opening window for a weekday and period, or None when closed."""
    kind = day_type(day_of_week)
    if kind == DayType.CLOSED:
        return None
    return PERIOD_WINDOWS[(kind, Period(period))]


def windows_for(day: date) -> dict[Period, PeriodWindow]:
    """All open periods on a calendar date, morning first."""
    result: dict[Period, PeriodWindow] = {}
    for period in Period:
        window = period_window(day.weekday(), period)
        if window is not None:
            result[period] = window
    return result
