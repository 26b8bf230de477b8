"""
Dashboard statistics for the shop.

Counts and revenue for a reporting window (a day, the Sunday-start week,
or everything from the reference day on), month-to-date confirmed totals,
and a per-barber breakdown. Revenue only counts confirmed bookings.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterable

from barber_booking.config import settings
from barber_booking.schemas.booking_schema import Booking, BookingStatus, StaffMember
from barber_booking.scheduling.agenda import week_range
from barber_booking.utils import localize

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class StatsScope(str, Enum):
    TODAY = "today"
    WEEK = "week"
    ALL = "all"


@dataclass
class StaffStats:
    name: str
    total: int = 0
    confirmed: int = 0
    revenue: Decimal = ZERO
    monthly_revenue: Decimal = ZERO
    monthly_bookings: int = 0


@dataclass
class BookingStats:
    """Aggregated figures for one reporting window."""

    total: int = 0
    confirmed: int = 0
    cancelled: int = 0
    pending: int = 0
    revenue: Decimal = ZERO
    average_ticket: Decimal = ZERO
    monthly_revenue: Decimal = ZERO
    monthly_bookings: int = 0
    staff: dict[str, StaffStats] = field(default_factory=dict)


def _price(booking: Booking) -> Decimal:
    return booking.service.price if booking.service is not None else ZERO


def scope_range(reference_day: date, scope: StatsScope) -> tuple[date, date]:
    """Inclusive first and last date covered by ``scope``."""
    scope = StatsScope(scope)
    if scope == StatsScope.TODAY:
        return reference_day, reference_day
    if scope == StatsScope.WEEK:
        return week_range(reference_day)
    try:
        year_later = reference_day.replace(year=reference_day.year + 1)
    except ValueError:  # Feb 29
        year_later = reference_day + timedelta(days=365)
    return reference_day, year_later


def _month_range(reference_day: date) -> tuple[date, date]:
    first = reference_day.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    return first, next_month - timedelta(days=1)


class StatsCalculator:
    """Calculates dashboard statistics from a list of bookings."""

    def calculate(
        self,
        bookings: Iterable[Booking],
        staff: Iterable[StaffMember],
        reference_day: date,
        scope: StatsScope = StatsScope.TODAY,
    ) -> BookingStats:
        bookings = list(bookings)
        first, last = scope_range(reference_day, scope)
        month_first, month_last = _month_range(reference_day)

        stats = BookingStats(staff={m.id: StaffStats(name=m.name) for m in staff})

        for booking in bookings:
            day = localize(booking.start).date()
            per_staff = stats.staff.get(booking.staff_id)
            confirmed = booking.status == BookingStatus.CONFIRMED

            if first <= day <= last:
                stats.total += 1
                if confirmed:
                    stats.confirmed += 1
                    stats.revenue += _price(booking)
                elif booking.status == BookingStatus.CANCELLED:
                    stats.cancelled += 1
                else:
                    stats.pending += 1
                if per_staff is not None:
                    per_staff.total += 1
                    if confirmed:
                        per_staff.confirmed += 1
                        per_staff.revenue += _price(booking)

            if confirmed and month_first <= day <= month_last:
                stats.monthly_bookings += 1
                stats.monthly_revenue += _price(booking)
                if per_staff is not None:
                    per_staff.monthly_bookings += 1
                    per_staff.monthly_revenue += _price(booking)

        if stats.confirmed:
            stats.average_ticket = (stats.revenue / stats.confirmed).quantize(Decimal("0.01"))
        logger.debug(
            "Stats %s..%s: %d bookings, revenue %s", first, last, stats.total, stats.revenue
        )
        return stats

    def format_report(self, stats: BookingStats, reference_day: date, scope: StatsScope) -> str:
        """Format statistics into a human-readable report."""
        first, last = scope_range(reference_day, scope)
        lines = [
            "=" * 60,
            f"{settings.business.name.upper()} - {StatsScope(scope).value.upper()} REPORT",
            f"{first:%d/%m/%Y} - {last:%d/%m/%Y}",
            "=" * 60,
            "",
            "BOOKINGS",
            f"  Total:                  {stats.total}",
            f"  Confirmed:              {stats.confirmed}",
            f"  Pending:                {stats.pending}",
            f"  Cancelled:              {stats.cancelled}",
            "",
            "REVENUE",
            f"  Confirmed revenue:      R$ {stats.revenue:.2f}",
            f"  Average ticket:         R$ {stats.average_ticket:.2f}",
            f"  Month to date:          R$ {stats.monthly_revenue:.2f}"
            f"  ({stats.monthly_bookings} bookings)",
            "",
            "BY BARBER",
        ]
        for member in stats.staff.values():
            lines.append(
                f"  {member.name:<22} {member.total:>3} booked  {member.confirmed:>3} confirmed"
                f"  R$ {member.revenue:.2f}"
            )
        lines.append("=" * 60)
        return "\n".join(lines)
