"""Configuration: enumeration cap, propagation step, and leap seconds from environment."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

# Env var overrides with sensible defaults.
DEFAULT_MAX_EVENTS = 10000
DEFAULT_MAX_STEP_DAYS = 10.0


def get_max_events() -> int:
    """Return the cap on events collected by one enumeration (ASTROKIT_MAX_EVENTS).

    Returns:
        Positive integer; the default when the variable is unset or invalid.
    """
    raw = os.environ.get('ASTROKIT_MAX_EVENTS', '').strip()
    if not raw:
        return DEFAULT_MAX_EVENTS
    try:
        value = int(raw)
    except ValueError:
        logger.warning('ASTROKIT_MAX_EVENTS=%r is not an integer; using %d', raw, DEFAULT_MAX_EVENTS)
        return DEFAULT_MAX_EVENTS
    if value <= 0:
        logger.warning('ASTROKIT_MAX_EVENTS=%d must be positive; using %d', value, DEFAULT_MAX_EVENTS)
        return DEFAULT_MAX_EVENTS
    return value


def get_max_step_days() -> float:
    """Return the longest single gravity-simulation step in days (ASTROKIT_MAX_STEP_DAYS).

    The engine integrator advances by one step per update, so long intervals are
    split into sub-steps no longer than this value.

    Returns:
        Positive step length in days.
    """
    raw = os.environ.get('ASTROKIT_MAX_STEP_DAYS', '').strip()
    if not raw:
        return DEFAULT_MAX_STEP_DAYS
    try:
        value = float(raw)
    except ValueError:
        logger.warning(
            'ASTROKIT_MAX_STEP_DAYS=%r is not a number; using %g', raw, DEFAULT_MAX_STEP_DAYS
        )
        return DEFAULT_MAX_STEP_DAYS
    if not value > 0.0:
        logger.warning(
            'ASTROKIT_MAX_STEP_DAYS=%g must be positive; using %g', value, DEFAULT_MAX_STEP_DAYS
        )
        return DEFAULT_MAX_STEP_DAYS
    return value


def get_leapsecs_path() -> str | None:
    """Return path to a NAIF LSK leap seconds file for rms-julian, if configured.

    Returns:
        JULIAN_LEAPSECS value, or None to use the rms-julian bundled LSK.
    """
    path = os.environ.get('JULIAN_LEAPSECS', '').strip()
    return path or None
