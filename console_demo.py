"""
Offline console demo of the booking engine.

Walks through a customer booking against the in-memory store using the
real slot calculator, conflict detector and message templates. No
database, no network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario race
    python console_demo.py --scenario agenda
"""

import argparse
import sys
from datetime import date, datetime, time, timedelta
from typing import Optional

from barber_booking.config import settings
from barber_booking.messages.message_templates import (
    build_alternatives_message,
    build_confirmation_message,
    build_share_link,
)
from barber_booking.schemas.booking_schema import Booking, BookingStatus, Period
from barber_booking.schemas.customer_schema import BookingDraft
from barber_booking.scheduling.agenda import day_agenda
from barber_booking.scheduling.availability import list_slots
from barber_booking.tools import booking as store
from barber_booking.tools.services import get_service, match_service
from barber_booking.tools.staff import get_staff
from barber_booking.utils import now_local

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


def next_weekday(start: date, weekday: int) -> date:
    """First date strictly after ``start`` falling on ``weekday`` (Monday == 0)."""
    days_ahead = (weekday - start.weekday() - 1) % 7 + 1
    return start + timedelta(days=days_ahead)


def seed_bookings(day: date, prefix: str = "SEED") -> list[Booking]:
    """Load a plausible day of existing bookings into the store."""
    tz = settings.business.tzinfo
    rows = [
        (1, "joao", "haircut", time(8, 30), BookingStatus.CONFIRMED, "Pedro Alves"),
        (2, "joao", "full-grooming", time(14, 0), BookingStatus.CONFIRMED, "Marcos Lima"),
        (3, "joao", "beard", time(16, 0), BookingStatus.PENDING, "Tiago Rocha"),
        (4, "joao", "haircut", time(17, 0), BookingStatus.CANCELLED, "Caio Nunes"),
        (5, "rafael", "coloring", time(9, 0), BookingStatus.CONFIRMED, "Bruno Dias"),
        (6, "lucas", "kids-cut", time(10, 0), BookingStatus.PENDING, "Ana Souza"),
    ]
    seeded = []
    for number, staff_id, service_id, at, status, client in rows:
        seeded.append(
            store.insert_booking(
                Booking(
                    id=f"{prefix}-{number}",
                    staff_id=staff_id,
                    service_id=service_id,
                    start=datetime.combine(day, at, tzinfo=tz),
                    status=status,
                    client_name=client,
                    client_phone="85988887777",
                )
            )
        )
    return seeded


class ConsoleSession:
    """Plays a booking session in the terminal."""

    SCENARIOS: dict[str, str] = {
        "booking": "Book a haircut and beard with João",
        "race": "Another client takes the chosen slot before submit",
        "agenda": "Show João's day agenda",
    }

    def __init__(self, now: Optional[datetime] = None) -> None:
        self.now = now_local(now)
        self.day = next_weekday(self.now.date(), 0)
        self.draft = BookingDraft()

    def shop_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[{settings.business.name}]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {title}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def run_scenario(self, scenario: str) -> None:
        if scenario not in self.SCENARIOS:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return
        store.reset()
        seed_bookings(self.day)
        self._banner(f"BOOKING DEMO - {self.SCENARIOS[scenario]}")
        if scenario == "agenda":
            self._show_agenda("joao")
        else:
            self._book(race=scenario == "race")

    def run(self) -> None:
        self.run_scenario("booking")

    def _select(self) -> list[datetime]:
        self.draft.service = get_service(match_service("corte e barba") or "haircut")
        self.draft.staff = get_staff("joao")
        self.draft.day = self.day
        self.draft.period = Period.AFTERNOON
        self.draft.client_name = "Lucas Ferreira"
        self.draft.client_phone = "(85) 99123-4567"
        self.system_log(
            f"Selected {self.draft.service.name} with {self.draft.staff.name} "
            f"on {self.day:%A %d/%m}, {self.draft.period.value}"
        )
        return self._refresh_slots()

    def _refresh_slots(self) -> list[datetime]:
        snapshot = store.list_bookings(staff_id=self.draft.staff.id)
        slots = list_slots(
            self.draft.day, self.draft.service, self.draft.staff,
            self.draft.period, snapshot, self.now,
        )
        self.shop_say("Open times: " + ", ".join(f"{s:%H:%M}" for s in slots))
        return slots

    def _submit(self) -> dict:
        return store.submit_booking(
            self.draft.client_name,
            self.draft.client_phone,
            self.draft.service.id,
            self.draft.staff.id,
            self.draft.slot,
            self.draft.period,
            now=self.now,
        )

    def _book(self, race: bool) -> None:
        slots = self._select()
        if not slots:
            self.shop_say("Nothing open in that period.")
            return
        self.draft.slot = slots[0]
        print(f"\n{BLUE}[Client] {RESET}I'll take {self.draft.slot:%H:%M}.")

        if race:
            rival = store.submit_booking(
                "Rival Client", "85977776666", self.draft.service.id,
                self.draft.staff.id, self.draft.slot, self.draft.period, now=self.now,
            )
            self.system_log(f"Rival submission: {rival['message']}")

        result = self._submit()
        if not result["success"]:
            self.shop_say(result["message"])
            if result.get("refresh"):
                slots = self._refresh_slots()
                self.shop_say(build_alternatives_message(self.draft.slot, slots))
                if not slots:
                    return
                self.draft.slot = slots[0]
                print(f"\n{BLUE}[Client] {RESET}Then {self.draft.slot:%H:%M}, please.")
                result = self._submit()
            if not result["success"]:
                self.shop_say(result["message"])
                return

        self.shop_say(result["message"])
        booking = result["details"]
        text = build_confirmation_message(booking, self.draft.service, self.draft.staff)
        print(f"\n{YELLOW}{text}{RESET}")
        self.system_log(f"Share link: {build_share_link(text)[:80]}...")

    def _show_agenda(self, staff_id: str) -> None:
        staff = get_staff(staff_id)
        self.shop_say(f"{staff.name} on {self.day:%A %d/%m}:")
        for cell in day_agenda(self.day, staff_id, store.list_bookings()):
            label = f"{DIM}free{RESET}"
            if cell.booking is not None:
                label = f"{cell.booking.client_name} ({cell.booking.service_id}, {cell.booking.status.value})"
            print(f"  {cell.start:%H:%M}  {label}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Barbershop booking console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default="booking",
        help="Scenario to play",
    )
    args = parser.parse_args(argv)
    ConsoleSession().run_scenario(args.scenario)
    return 0


if __name__ == "__main__":
    sys.exit(main())
