"""EDN instant formatting and parsing utilities."""

from __future__ import annotations

from datetime import date, datetime, time, timezone

from datomic_flare.exceptions import EDNParseError

# Datomic reads instants with millisecond precision.
INSTANT_FORMAT = "%Y-%m-%dT%H:%M:%S"


def to_utc(value: date | datetime) -> datetime:
    """Normalize a date or datetime to an aware UTC datetime.

    Naive datetimes are assumed to already be in UTC. A plain date is
    midnight UTC of that day.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, time(0, 0))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_instant(value: date | datetime) -> str:
    """Format a date or datetime as the text inside an ``#inst`` literal.

    Milliseconds are truncated, never rounded, and the offset is always
    written as ``+00:00``:

        >>> format_instant(datetime(2023, 9, 28, 23, 59, 59, 999999))
        '2023-09-28T23:59:59.999+00:00'
    """
    dt = to_utc(value)
    millis = dt.microsecond // 1000
    return f"{dt.strftime(INSTANT_FORMAT)}.{millis:03d}+00:00"


# Tried after fromisoformat, for offsets it does not accept
_FALLBACK_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%d")


def parse_datetime(value: str, pos: int | None = None) -> datetime:
    """Read the text of an ``#inst`` literal as an aware UTC datetime.

    ``Z`` and ``-00:00`` both mean UTC. Values without an offset are taken
    to be UTC already.

    Raises:
        EDNParseError: If ``value`` is not an RFC 3339 instant; ``pos`` is
            reported in the message when given.
    """
    text = value
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    elif text.endswith("-00:00"):
        text = f"{text[:-6]}+00:00"

    try:
        return to_utc(datetime.fromisoformat(text))
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return to_utc(datetime.strptime(value, fmt))
        except ValueError:
            continue

    where = "" if pos is None else f" at position {pos}"
    raise EDNParseError(f"Invalid #inst value {value!r}{where}")
