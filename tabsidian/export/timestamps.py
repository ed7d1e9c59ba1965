"""Export timestamps and coarse relative-time labels."""

from __future__ import annotations

import datetime as _dt
import math
from typing import Dict, Optional

_UTC = _dt.timezone.utc


def resolve_now(now: object = None) -> _dt.datetime:
    """Return `now` as an aware datetime; the wall clock is read only when `now` is None."""
    if now is None:
        return _dt.datetime.now(_UTC)
    parsed = to_datetime(now)
    if parsed is None:
        raise ValueError(f"Unsupported clock value: {now!r}")
    return parsed


def to_datetime(value: object) -> Optional[_dt.datetime]:
    """Coerce epoch milliseconds, ISO strings or datetimes into an aware datetime."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, _dt.datetime):
        return value if value.tzinfo is not None else value.astimezone()
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return _dt.datetime.fromtimestamp(value / 1000.0, tz=_UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value.strip():
        try:
            parsed = _dt.datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=_UTC)
    return None


def iso_utc(moment: _dt.datetime) -> str:
    utc = moment.astimezone(_UTC)
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"


def export_timestamp(now: _dt.datetime, tz: Optional[_dt.tzinfo] = None) -> Dict[str, str]:
    local = now.astimezone(tz) if tz is not None else now.astimezone()
    return {
        "iso": iso_utc(now),
        "formattedTimestamp": local.strftime("%Y-%m-%dT%H-%M-%S"),
        "localDate": local.strftime("%Y-%m-%d"),
        "localTime": local.strftime("%H:%M:%S"),
    }


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def relative_time(then: Optional[_dt.datetime], now: _dt.datetime) -> str:
    if then is None:
        return ""
    seconds = (now - then).total_seconds()
    if seconds < 60:
        return "just now"
    minutes = _round_half_up(seconds / 60)
    if minutes < 60:
        return _plural(minutes, "minute")
    hours = _round_half_up(seconds / 3600)
    if hours < 24:
        return _plural(hours, "hour")
    return _plural(_round_half_up(seconds / 86400), "day")
