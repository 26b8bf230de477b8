"""
Command-line entry point for the booking engine.

Runs against the in-memory store, pre-loaded with a sample day of bookings
for the next Monday so the output is meaningful without a database.

Usage:
    python main.py slots --service haircut --staff joao --period afternoon
    python main.py agenda --staff joao
    python main.py stats --scope week
    python main.py cleanup
    python main.py console [--scenario race]
"""

import argparse
import logging
import sys
from datetime import date, timedelta
from typing import Optional

from barber_booking.config import settings
from barber_booking.reports.stats import StatsCalculator, StatsScope
from barber_booking.schemas.booking_schema import Period
from barber_booking.scheduling.agenda import AgendaMode, day_agenda
from barber_booking.scheduling.availability import list_slots
from barber_booking.tools import booking as store
from barber_booking.tools.services import get_service, match_service
from barber_booking.tools.staff import get_all_staff, get_staff
from barber_booking.utils import now_local

logger = logging.getLogger(__name__)


def _demo_day(raw: Optional[str]) -> date:
    from console_demo import next_weekday, seed_bookings

    day = date.fromisoformat(raw) if raw else next_weekday(now_local().date(), 0)
    seed_bookings(day)
    return day


def _cmd_slots(args: argparse.Namespace) -> int:
    day = _demo_day(args.date)
    service = get_service(match_service(args.service) or args.service)
    staff = get_staff(args.staff)
    if service is None or staff is None:
        print("Unknown service or staff member.", file=sys.stderr)
        return 2
    slots = list_slots(
        day, service, staff, Period(args.period),
        store.list_bookings(staff_id=staff.id), now_local(),
    )
    print(f"{service.name} with {staff.name} on {day:%A %d/%m/%Y} ({args.period}):")
    print("  " + (", ".join(f"{s:%H:%M}" for s in slots) or "no open times"))
    return 0


def _cmd_agenda(args: argparse.Namespace) -> int:
    day = _demo_day(args.date)
    store.confirm_pending(day)
    staff = get_staff(args.staff)
    if staff is None:
        print(f"Unknown staff member: {args.staff}", file=sys.stderr)
        return 2
    print(f"{staff.name} - {day:%A %d/%m/%Y}")
    for cell in day_agenda(day, staff.id, store.list_bookings(), AgendaMode(args.mode)):
        who = cell.booking.client_name if cell.booking else "-"
        print(f"  {cell.start:%H:%M}  {who}")
    return 0


def _cmd_stats(args: argparse.Namespace) -> int:
    day = _demo_day(args.date)
    calculator = StatsCalculator()
    scope = StatsScope(args.scope)
    stats = calculator.calculate(store.list_bookings(), get_all_staff(), day, scope)
    print(calculator.format_report(stats, day, scope))
    return 0


def _cmd_cleanup(args: argparse.Namespace) -> int:
    from console_demo import seed_bookings

    weeks = settings.business.retention_weeks if args.weeks is None else args.weeks
    # Sample day just past the cutoff, plus the upcoming demo day which must survive.
    seed_bookings(now_local().date() - timedelta(weeks=weeks, days=1), prefix="OLD")
    _demo_day(None)
    removed = store.purge_older_than(weeks=weeks)
    print(f"Removed {removed} booking(s) older than {weeks} week(s); {len(store.list_bookings())} kept.")
    return 0


def _cmd_console(args: argparse.Namespace) -> int:
    from console_demo import ConsoleSession

    ConsoleSession().run_scenario(args.scenario)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="barber-booking", description=settings.business.name)
    sub = parser.add_subparsers(dest="command", required=True)

    slots = sub.add_parser("slots", help="List open start times")
    slots.add_argument("--date", help="YYYY-MM-DD (default: next Monday)")
    slots.add_argument("--service", default="haircut")
    slots.add_argument("--staff", default="joao")
    slots.add_argument("--period", choices=[p.value for p in Period], default="morning")
    slots.set_defaults(func=_cmd_slots)

    agenda = sub.add_parser("agenda", help="Show a barber's day grid")
    agenda.add_argument("--date")
    agenda.add_argument("--staff", default="joao")
    agenda.add_argument("--mode", choices=[m.value for m in AgendaMode], default="all")
    agenda.set_defaults(func=_cmd_agenda)

    stats = sub.add_parser("stats", help="Print the dashboard report")
    stats.add_argument("--date")
    stats.add_argument("--scope", choices=[s.value for s in StatsScope], default="today")
    stats.set_defaults(func=_cmd_stats)

    cleanup = sub.add_parser(
        "cleanup", help="Delete bookings past the retention window from a seeded sample store"
    )
    cleanup.add_argument("--weeks", type=int, default=None)
    cleanup.set_defaults(func=_cmd_cleanup)

    console = sub.add_parser("console", help="Play the console demo")
    console.add_argument("--scenario", default="booking")
    console.set_defaults(func=_cmd_console)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger.debug("Running command %s", args.command)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
