"""Time utilities shared across snrwatch components."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Tuple

from snrwatch.util.errors import TimestampError

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"

_EPOCH_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_ISO_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[T ](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?P<frac>\.\d+)?"
    r"(?P<tz>Z|[+-]\d{2}:?\d{2})?$"
)


def utc_now_str() -> str:
    """Return the current UTC timestamp as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def normalize_timestamp(token: Any) -> Tuple[float, str]:
    """Convert an rtl_433 time value to ``(epoch_seconds, display_form)``.

    Accepts the ISO-like form written by ``-M time:iso`` (naive values are
    local time) and the bare epoch form written by ``-M time:unix``. JSON
    numbers are taken as epoch seconds.
    """

    if isinstance(token, bool):
        raise TimestampError(f"invalid time value {token!r}")
    if isinstance(token, (int, float)):
        try:
            epoch = float(token)
        except OverflowError as exc:
            raise TimestampError(f"epoch time out of range {token!r}") from exc
        return epoch, _display_epoch(epoch, token)
    if not isinstance(token, str):
        raise TimestampError(f"invalid time value {token!r}")

    text = token.strip()
    if _EPOCH_RE.match(text):
        epoch = float(text)
        return epoch, _display_epoch(epoch, token)

    match = _ISO_RE.match(text)
    if match is None:
        raise TimestampError(f"unrecognized time format {token!r}")
    try:
        dt = datetime.strptime(f"{match.group('date')} {match.group('time')}", "%Y-%m-%d %H:%M:%S")
    except ValueError as exc:
        raise TimestampError(f"invalid date-time {token!r}: {exc}") from exc
    tz_text = match.group("tz")
    if tz_text:
        try:
            dt = dt.replace(tzinfo=_parse_offset(tz_text))
        except ValueError as exc:
            raise TimestampError(f"invalid UTC offset in {token!r}: {exc}") from exc
    try:
        epoch = dt.timestamp()
    except (OverflowError, OSError, ValueError) as exc:
        raise TimestampError(f"date-time out of range {token!r}") from exc
    frac = match.group("frac")
    if frac:
        epoch += float(frac)
    return epoch, text


def _parse_offset(text: str) -> timezone:
    if text == "Z":
        return timezone.utc
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    hours, minutes = int(digits[:2]), int(digits[2:])
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _display_epoch(epoch: float, token: Any) -> str:
    try:
        return datetime.fromtimestamp(epoch).strftime(DISPLAY_FORMAT)
    except (OverflowError, OSError, ValueError) as exc:
        raise TimestampError(f"epoch time out of range {token!r}") from exc
