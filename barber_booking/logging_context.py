"""Request IDs for following one booking submission through the logs.

A submission touches the store, the conflict detector and the slot
calculator. Wrapping it in ``booking_request()`` tags every record logged
along the way with the same ``REQ-`` id, including the DEBUG lines that
say why a slot was refused, so a lost race can be read back as one unit.

Usage:
    from barber_booking.logging_context import booking_request, get_request_logger

    logger = get_request_logger(__name__)
    with booking_request() as request_id:
        logger.info("Re-checking slot")  # record.request_id == request_id
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

# "-" outside a submission, so the root format never hits a missing key.
_request_id: ContextVar[str] = ContextVar("request_id", default="-")


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def get_request_id() -> str:
    return _request_id.get()


def new_request_id() -> str:
    """A fresh ``REQ-xxxxxxxx`` id; not installed."""
    return f"REQ-{uuid.uuid4().hex[:8]}"


@contextmanager
def booking_request(request_id: Optional[str] = None) -> Iterator[str]:
    """Tag log records with a request id for the duration of the block.

    The previous id is restored on exit, so nested or back-to-back
    submissions on one thread do not bleed into each other.
    """
    token = _request_id.set(request_id or new_request_id())
    try:
        yield _request_id.get()
    finally:
        _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Copies the current request id onto each record as ``request_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    """Module logger whose records carry ``request_id`` even without root handlers set up."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
