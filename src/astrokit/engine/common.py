"""Shared engine state: the process-wide engine and the user-star calculation slot."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

import astronomy

from astrokit.engine.adapter import AstronomyEngine

# The engine keeps user-defined stars in global slots; one slot serves every FixedStar.
STAR_SLOT = astronomy.Body.Star1


@dataclass
class StarSlotState:
    """Guard for the shared engine star slot.

    The slot is not reentrant: define-then-query must happen while holding lock.
    """

    lock: threading.Lock = field(default_factory=threading.Lock)


_engine: Any = AstronomyEngine()
_star_slot = StarSlotState()


def get_engine() -> Any:
    """Return the engine used when callers do not pass one explicitly."""
    return _engine


def set_engine(engine: Any) -> Any:
    """Replace the process-wide engine; returns the previous one."""
    global _engine
    previous = _engine
    _engine = engine
    return previous


def get_star_slot() -> StarSlotState:
    """Return the global star-slot state."""
    return _star_slot
