"""Tests for request-id log correlation."""

import logging

from barber_booking.logging_context import (
    RequestIdFilter,
    booking_request,
    get_request_id,
    get_request_logger,
    new_request_id,
    set_request_id,
)
from barber_booking.schemas.booking_schema import Period
from barber_booking.tools.booking import submit_booking

from tests.conftest import MONDAY, SUNDAY, at


class TestBookingRequest:
    def test_scope_restores_previous_id(self):
        outside = get_request_id()
        with booking_request() as request_id:
            assert request_id.startswith("REQ-")
            assert get_request_id() == request_id
        assert get_request_id() == outside

    def test_explicit_id_and_set_inside_scope(self):
        with booking_request("REQ-outer"):
            set_request_id("REQ-changed")
            assert get_request_id() == "REQ-changed"
        assert get_request_id() != "REQ-changed"

    def test_new_ids_are_unique(self):
        assert new_request_id() != new_request_id()

    def test_filter_stamps_record(self):
        with booking_request("REQ-abc"):
            record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
            assert RequestIdFilter().filter(record)
        assert record.request_id == "REQ-abc"

    def test_filter_attached_once(self):
        logger = get_request_logger("barber_booking.test")
        get_request_logger("barber_booking.test")
        assert sum(isinstance(f, RequestIdFilter) for f in logger.filters) == 1


class TestSubmissionTagging:
    def test_submission_logs_share_one_id(self, caplog):
        outside = get_request_id()
        with caplog.at_level(logging.INFO, logger="barber_booking.tools.booking"):
            result = submit_booking(
                "Lucas", "85991234567", "haircut", "joao",
                at(*MONDAY, 10), Period.MORNING, now=at(*SUNDAY, 20),
            )
        assert result["success"]
        created = [r for r in caplog.records if "Booking created" in r.getMessage()]
        assert len(created) == 1
        assert created[0].request_id.startswith("REQ-")
        assert get_request_id() == outside
