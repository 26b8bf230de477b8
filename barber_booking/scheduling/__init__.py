from barber_booking.scheduling.availability import (
    get_available_dates,
    list_day_slots,
    list_slots,
    next_available,
    round_up_to_step,
)
from barber_booking.scheduling.business_hours import DayType, PeriodWindow, period_window
from barber_booking.scheduling.conflicts import (
    effective_duration,
    find_conflicts,
    is_available,
    occupied_interval,
)

__all__ = [
    "list_slots",
    "list_day_slots",
    "get_available_dates",
    "next_available",
    "round_up_to_step",
    "period_window",
    "PeriodWindow",
    "DayType",
    "is_available",
    "find_conflicts",
    "effective_duration",
    "occupied_interval",
]
