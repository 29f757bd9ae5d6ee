"""Time helpers for metadata expiry.

Metadata documents express their lifetime with two optional root attributes:

- ``cacheDuration``: an xs:duration relative to the moment the document is read
- ``validUntil``: an absolute xs:dateTime

``get_expire_time`` combines them into a single absolute expiration
timestamp (seconds since the epoch, 0 meaning "no expiration").
"""

import calendar
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..utils.exceptions import InvalidTimestampError

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(
    r"^(?P<sign>-)?P"
    r"(?:(?P<years>\d+)Y)?"
    r"(?:(?P<months>\d+)M)?"
    r"(?:(?P<days>\d+)D)?"
    r"(?:T"
    r"(?:(?P<hours>\d+)H)?"
    r"(?:(?P<minutes>\d+)M)?"
    r"(?:(?P<seconds>\d+(?:\.\d+)?)S)?"
    r")?$"
)
_FRACTION_RE = re.compile(r"\.(\d+)")


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def current_timestamp(now: Optional[datetime] = None) -> int:
    """Return the current time as whole seconds since the epoch.

    Args:
        now: Override for the current time (timezone-aware)
    """
    return int((now or now_utc()).timestamp())


def _add_months(base: datetime, months: int) -> datetime:
    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    day = min(base.day, calendar.monthrange(year, month)[1])
    return base.replace(year=year, month=month, day=day)


def parse_duration(duration: str, base: Optional[datetime] = None) -> datetime:
    """Apply an xs:duration to a base time.

    Years and months use calendar arithmetic (the day is clamped to the end
    of the target month); days and time components are exact.

    Args:
        duration: Duration such as ``PT604800S``, ``P1Y2M``, ``-P1D``
        base: Time the duration is measured from (default: now, UTC)

    Returns:
        Timezone-aware datetime ``base + duration``

    Raises:
        InvalidTimestampError: If the duration is not a valid xs:duration or
            the result falls outside the supported date range

    Example:
        >>> base = datetime(2024, 1, 31, tzinfo=timezone.utc)
        >>> parse_duration("P1M", base)
        datetime.datetime(2024, 2, 29, 0, 0, tzinfo=datetime.timezone.utc)
    """
    match = _DURATION_RE.match(duration.strip())
    parts = match.groupdict() if match else {}
    components = {k: v for k, v in parts.items() if k != "sign" and v is not None}
    if not components or duration.strip().endswith("T"):
        raise InvalidTimestampError(
            f"Invalid duration: '{duration}'. "
            f"Fix: Use an ISO 8601 duration such as PT604800S or P7D."
        )

    sign = -1 if parts["sign"] else 1
    base = base or now_utc()

    months = int(components.get("years", 0)) * 12 + int(components.get("months", 0))
    try:
        result = _add_months(base, sign * months)
        delta = timedelta(
            days=int(components.get("days", 0)),
            hours=int(components.get("hours", 0)),
            minutes=int(components.get("minutes", 0)),
            seconds=float(components.get("seconds", 0)),
        )
        return result + sign * delta
    except (ValueError, OverflowError) as e:
        raise InvalidTimestampError(
            f"Duration out of range: '{duration}' from {base.isoformat()}. "
            f"Fix: Use a cacheDuration that ends before the year 9999."
        ) from e


def parse_datetime(value: str) -> datetime:
    """Parse an xs:dateTime value.

    Args:
        value: Timestamp such as ``2030-01-01T00:00:00Z``. A value without
            timezone is taken as UTC.

    Returns:
        Timezone-aware datetime

    Raises:
        InvalidTimestampError: If the value is not a valid timestamp
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat accepts at most microsecond precision
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidTimestampError(
            f"Invalid timestamp: '{value}'. "
            f"Fix: Use an xs:dateTime value such as 2030-01-01T00:00:00Z."
        ) from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def get_expire_time(
    cache_duration: Optional[str],
    valid_until: Optional[str],
    now: Optional[datetime] = None,
) -> int:
    """Compute the expiration timestamp from cacheDuration and validUntil.

    cacheDuration is measured from ``now``. When validUntil is present it is
    used unless the cacheDuration window ends even earlier, so the more
    restrictive of the two always applies.

    Args:
        cache_duration: cacheDuration attribute value or None
        valid_until: validUntil attribute value or None
        now: Override for the current time

    Returns:
        Expiration as seconds since the epoch, or 0 when neither is given

    Raises:
        InvalidTimestampError: If either value cannot be parsed
    """
    expire_time = 0

    if cache_duration:
        expire_time = int(parse_duration(cache_duration, now).timestamp())

    if valid_until:
        valid_until_time = int(parse_datetime(valid_until).timestamp())
        if expire_time == 0 or expire_time > valid_until_time:
            expire_time = valid_until_time

    logger.debug(
        f"Expire time: {expire_time} "
        f"(cacheDuration={cache_duration}, validUntil={valid_until})"
    )
    return expire_time
