"""Shared utilities: phone handling and business-local time."""

import re
from datetime import datetime
from typing import Optional

from barber_booking.config import settings

PHONE_DIGITS = 11


def normalize_phone(value: str) -> str:
    """Strip everything except digits. The result is the lookup/storage key.

    Examples:
        >>> normalize_phone("(85) 99401-5283")
        '85994015283'
        >>> normalize_phone("+55 85 9 9401 5283")
        '5585994015283'
    """
    return re.sub(r"[^\d]", "", value)


def is_valid_phone(value: str) -> bool:
    """A phone is valid when it carries exactly an area code plus 9 digits."""
    return len(normalize_phone(value)) == PHONE_DIGITS


def format_phone(value: str) -> str:
    """Group digits for display as ``(AA) PPPPP-SSSS``.

    Works progressively on partial input, so it can be applied while the
    number is being typed. Never use the result for comparison.
    """
    digits = normalize_phone(value)
    if len(digits) <= 2:
        return digits
    if len(digits) <= 7:
        return f"({digits[:2]}) {digits[2:]}"
    return f"({digits[:2]}) {digits[2:7]}-{digits[7:11]}"


def localize(moment: datetime) -> datetime:
    """Return ``moment`` as an aware datetime in the business timezone.

    Naive values are taken to already be business-local wall-clock time.
    """
    tz = settings.business.tzinfo
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def now_local(now: Optional[datetime] = None) -> datetime:
    """Current business-local time, or ``now`` localized when given."""
    if now is None:
        return datetime.now(settings.business.tzinfo)
    return localize(now)
