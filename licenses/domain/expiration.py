"""
License expiration classification.

Bare dates are decomposed field by field so that a date string is never
shifted by a time zone conversion.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from core.domain.value_objects import ExpirationStatus

NO_EXPIRATION_SENTINEL = "N/A"
EXPIRING_SOON_DAYS = 30
DEFAULT_DISPLAY_FORMAT = "%d/%m/%Y"

_BARE_DATE_RE = re.compile(r"^(\d{4})([-/])(\d{1,2})\2(\d{1,2})$")

STATUS_LABELS = {
    ExpirationStatus.PERPETUAL: "Perpetual",
    ExpirationStatus.EXPIRED: "Expired",
    ExpirationStatus.EXPIRING_SOON: "Expiring soon",
}


def parse_expiration_date(value: Optional[str], tz: Optional[tzinfo] = None) -> Optional[date]:
    """
    Parse an expiration date string.

    Args:
        value: ``YYYY-MM-DD``, ``YYYY/MM/DD`` or an ISO-8601 datetime
        tz: Time zone aware datetimes are converted to before taking the date

    Returns:
        The calendar date, or None when absent, the no-expiration
        sentinel, or unparseable
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text or text == NO_EXPIRATION_SENTINEL:
        return None

    match = _BARE_DATE_RE.match(text)
    if match:
        year, _, month, day = match.groups()
        try:
            return date(int(year), int(month), int(day))
        except ValueError:
            return None

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None and tz is not None:
        parsed = parsed.astimezone(tz)
    return parsed.date()


def classify_expiration(
    value: Optional[str],
    today: date,
    window_days: int = EXPIRING_SOON_DAYS,
    tz: Optional[tzinfo] = None,
) -> ExpirationStatus:
    """
    Classify an expiration date relative to ``today``.

    Args:
        value: Raw expiration date
        today: Local calendar date
        window_days: Days ahead (inclusive) that count as expiring soon
        tz: Time zone for aware datetimes

    Returns:
        ExpirationStatus
    """
    expires_on = parse_expiration_date(value, tz)
    if expires_on is None:
        return ExpirationStatus.PERPETUAL
    if expires_on < today:
        return ExpirationStatus.EXPIRED
    if expires_on <= today + timedelta(days=window_days):
        return ExpirationStatus.EXPIRING_SOON
    return ExpirationStatus.VALID


@dataclass(frozen=True)
class ExpirationInfo:
    """Expiration status together with what the screen shows for it."""

    status: ExpirationStatus
    expires_on: Optional[date]
    label: str

    @classmethod
    def describe(
        cls,
        value: Optional[str],
        today: date,
        window_days: int = EXPIRING_SOON_DAYS,
        tz: Optional[tzinfo] = None,
        display_format: str = DEFAULT_DISPLAY_FORMAT,
    ) -> "ExpirationInfo":
        """Classify ``value`` and build its display label."""
        status = classify_expiration(value, today, window_days, tz)
        expires_on = parse_expiration_date(value, tz)
        if status == ExpirationStatus.VALID:
            label = expires_on.strftime(display_format)
        else:
            label = STATUS_LABELS[status]
        return cls(status=status, expires_on=expires_on, label=label)
