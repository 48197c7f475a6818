"""Time coercion into Astronomy Engine times; string parsing via rms-julian."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone

import astronomy
import julian

from astrokit.config import get_leapsecs_path
from astrokit.constants import SECONDS_PER_DAY

logger = logging.getLogger(__name__)

# Leap seconds loaded once at first use.
_leapsecs_loaded = False


def _ensure_leapsecs() -> None:
    """Load leap seconds for rms-julian if not already loaded.

    Uses JULIAN_LEAPSECS when set; otherwise, or when that file cannot be read,
    falls back to rms-julian's bundled LSK.
    """
    global _leapsecs_loaded
    if _leapsecs_loaded:
        return
    julian.set_ut_model('SPICE')
    path = get_leapsecs_path()
    if path is not None:
        try:
            julian.load_lsk(path)
            _leapsecs_loaded = True
            return
        except (OSError, KeyError, ValueError) as e:
            logger.info(
                'Leap seconds from %s not used (%s); using rms-julian bundled LSK.',
                path,
                e,
            )
    julian.load_lsk()
    _leapsecs_loaded = True


def time_from_day_sec(day: int, sec: float) -> astronomy.Time:
    """Convert UTC (day, sec) since 2000-01-01 to an engine time.

    Parameters:
        day: Days since 2000-01-01 (rms-julian convention, midnight based).
        sec: Seconds within that day.

    Returns:
        Engine time; its UT origin is 2000-01-01 12:00, hence the half-day shift.
    """
    return astronomy.Time(day + sec / SECONDS_PER_DAY - 0.5)


def parse_time(string: str) -> astronomy.Time | None:
    """Parse a date/time string into an engine time.

    Parameters:
        string: Any date/time format accepted by rms-julian; a trailing ISO 'Z'
            is accepted as UTC.

    Returns:
        Engine time, or None on parse failure.
    """
    _ensure_leapsecs()
    candidates = [string]
    stripped = string.strip()
    if stripped.endswith(('Z', 'z')):
        candidates.append(stripped[:-1])
    year_hms = re.fullmatch(r'(\d{4})\s+(\d{1,2}:\d{2}:\d{2})', stripped)
    if year_hms is not None:
        year, hms = year_hms.groups()
        candidates.append(f'{year}-01-01 {hms}')
    for candidate in candidates:
        try:
            result = julian.day_sec_from_string(candidate)
        except (ValueError, TypeError, LookupError, OSError):
            continue
        return time_from_day_sec(int(result[0]), float(result[1]))
    return None


def to_time(value: astronomy.Time | datetime | str | float) -> astronomy.Time:
    """Coerce a caller-supplied time into an engine time.

    Parameters:
        value: Engine time (returned as is), datetime (naive values are UTC),
            date/time string, or UT days since J2000.

    Returns:
        Engine time.

    Raises:
        ValueError: If a string cannot be parsed.
        TypeError: For unsupported value types.
    """
    if isinstance(value, astronomy.Time):
        return value
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return astronomy.Time.Make(
            value.year,
            value.month,
            value.day,
            value.hour,
            value.minute,
            value.second + value.microsecond / 1e6,
        )
    if isinstance(value, str):
        parsed = parse_time(value)
        if parsed is None:
            raise ValueError(f'Invalid date/time string: {value!r}')
        return parsed
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return astronomy.Time(float(value))
    raise TypeError(f'Unsupported time value: {value!r}')


def days_between(start: astronomy.Time, stop: astronomy.Time) -> float:
    """Signed interval stop - start in UT days."""
    return stop.ut - start.ut


def ephemeris_seconds(time: astronomy.Time) -> float:
    """Seconds past J2000 in TT, used as SPICE ephemeris time (TDB within 2 ms)."""
    return time.tt * SECONDS_PER_DAY
