"""HH:MM:SS.mmm timestamp helpers shared with the ASR wire format.

Hours are unbounded; minutes and seconds are zero-padded to two digits and
milliseconds to three. Malformed components parse to 0 instead of raising.
"""

import math


def _to_number(part: str) -> float:
    try:
        value = float(part)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def time_to_ms(ts: str) -> int:
    """Convert 'HH:MM:SS.mmm' to integer milliseconds; 0 if not three fields."""
    parts = (ts or "").split(":")
    if len(parts) != 3:
        return 0
    hours, minutes, seconds = (_to_number(p) for p in parts)
    return _round_half_up((hours * 3600 + minutes * 60 + seconds) * 1000)


def ms_to_time(ms: float) -> str:
    """Convert milliseconds to 'HH:MM:SS.mmm'. Negative input clamps to zero."""
    total_ms = max(0, _round_half_up(ms))
    total_seconds, milli = divmod(total_ms, 1000)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{milli:03d}"


def time_to_seconds(ts: str) -> float:
    """Lenient parse used by alignment: missing or bad components count as 0.

    Components are read positionally as hours, minutes, seconds, so a
    truncated 'HH:MM' yields hours and minutes only.
    """
    parts = (ts or "").split(":")
    values = [_to_number(p) for p in parts[:3]]
    values += [0.0] * (3 - len(values))
    hours, minutes, seconds = values
    return hours * 3600 + minutes * 60 + seconds
