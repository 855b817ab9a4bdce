from __future__ import annotations

import re
from datetime import datetime

_RFC3339_RE = re.compile(
    r"(?P<date>[0-9]{4}-[0-9]{2}-[0-9]{2})[Tt ]"
    r"(?P<time>[0-9]{2}:[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]+))?"
    r"(?P<offset>[Zz]|[+-][0-9]{2}:[0-9]{2})"
)


def parse_rfc3339(text: str) -> datetime:
    """
    Parse an RFC 3339 timestamp and keep its offset as given.
    Sysmon writes SystemTime with 7 fractional digits ("...00.1234567Z");
    anything past microseconds is truncated.

    A leap second (":60") cannot be held by datetime; it is folded onto the
    last representable instant of the preceding second (":59.999999").
    """
    match = _RFC3339_RE.fullmatch(text) if isinstance(text, str) else None
    if not match:
        raise ValueError(f"Not an RFC 3339 timestamp: {text!r}")

    second = match.group("second")
    fraction = match.group("fraction")
    offset = match.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"

    if second == "60":
        second, fraction = "59", "999999"

    normalized = f"{match.group('date')}T{match.group('time')}:{second}"
    if fraction:
        normalized += "." + fraction[:6].ljust(6, "0")
    return datetime.fromisoformat(normalized + offset)


def to_rfc3339(dt: datetime) -> str:
    if dt.tzinfo is None:
        raise ValueError("Timestamp has no offset")
    return dt.isoformat()
