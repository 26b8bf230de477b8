"""Tests for import chains, re-exports and the command-line entry points."""

import pytest

from tests.conftest import SUNDAY, at


class TestImports:
    def test_scheduling_reexports(self):
        from barber_booking.scheduling import (
            find_conflicts,
            get_available_dates,
            is_available,
            list_slots,
        )
        assert callable(find_conflicts)
        assert callable(get_available_dates)
        assert callable(is_available)
        assert callable(list_slots)

    def test_reports_reexports(self):
        from barber_booking.reports import StatsCalculator, StatsScope
        assert StatsScope.WEEK == "week"
        assert StatsCalculator is not None

    def test_customer_schema(self):
        from barber_booking.schemas.customer_schema import BookingDraft
        draft = BookingDraft()
        assert not draft.is_ready_for_slots()
        assert "service" in draft.missing_fields()


class TestConsoleDemo:
    def test_race_scenario_offers_alternatives(self, capsys):
        from console_demo import ConsoleSession

        ConsoleSession(now=at(*SUNDAY, 20)).run_scenario("race")
        out = capsys.readouterr().out
        assert "no longer available" in out
        assert "Still open:" in out
        assert "Booking received" in out

    def test_booking_scenario(self, capsys):
        from console_demo import ConsoleSession

        ConsoleSession(now=at(*SUNDAY, 20)).run_scenario("booking")
        out = capsys.readouterr().out
        assert "*New booking*" in out
        assert "Lucas Ferreira" in out

    def test_agenda_scenario(self, capsys):
        from console_demo import ConsoleSession

        ConsoleSession(now=at(*SUNDAY, 20)).run_scenario("agenda")
        out = capsys.readouterr().out
        assert "Marcos Lima" in out
        assert "Caio Nunes" not in out

    def test_unknown_scenario(self, capsys):
        from console_demo import ConsoleSession

        ConsoleSession(now=at(*SUNDAY, 20)).run_scenario("nope")
        assert "Unknown scenario" in capsys.readouterr().out


class TestMain:
    @pytest.mark.parametrize(
        "argv",
        [
            ["slots", "--date", "2027-01-04", "--service", "corte", "--period", "afternoon"],
            ["agenda", "--date", "2027-01-04", "--mode", "booked"],
            ["stats", "--date", "2027-01-04", "--scope", "week"],
            ["cleanup", "--weeks", "2"],
        ],
    )
    def test_commands_succeed(self, argv, capsys):
        import main

        assert main.main(argv) == 0
        assert capsys.readouterr().out

    def test_unknown_staff(self, capsys):
        import main

        assert main.main(["agenda", "--date", "2027-01-04", "--staff", "nobody"]) == 2

    def test_cleanup_purges_only_past_sample_day(self, capsys):
        import main

        assert main.main(["cleanup", "--weeks", "1"]) == 0
        out = capsys.readouterr().out
        assert "Removed 6 booking(s) older than 1 week(s); 6 kept." in out
