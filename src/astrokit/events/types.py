"""Immutable event values produced by the engine's search primitives."""

from __future__ import annotations

import enum
from dataclasses import dataclass

import astronomy


class ApsisKind(enum.Enum):
    """Closest or farthest approach."""

    PERICENTER = 'pericenter'
    APOCENTER = 'apocenter'

    @property
    def lunar_name(self) -> str:
        """Perigee/apogee for the Moon."""
        return 'Perigee' if self is ApsisKind.PERICENTER else 'Apogee'

    @property
    def solar_name(self) -> str:
        """Perihelion/aphelion for planets."""
        return 'Perihelion' if self is ApsisKind.PERICENTER else 'Aphelion'


class NodeKind(enum.Enum):
    """Direction of the Moon's crossing of the ecliptic plane."""

    ASCENDING = 'ascending'
    DESCENDING = 'descending'


class MoonPhase(enum.IntEnum):
    """Lunar quarter, numbered as the engine numbers them."""

    NEW = 0
    FIRST_QUARTER = 1
    FULL = 2
    THIRD_QUARTER = 3

    @property
    def longitude(self) -> float:
        """Moon-Sun ecliptic longitude difference for this phase (degrees)."""
        return 90.0 * self.value

    @property
    def title(self) -> str:
        """Display name, e.g. 'First Quarter'."""
        return _PHASE_TITLES[self]


_PHASE_TITLES = {
    MoonPhase.NEW: 'New Moon',
    MoonPhase.FIRST_QUARTER: 'First Quarter',
    MoonPhase.FULL: 'Full Moon',
    MoonPhase.THIRD_QUARTER: 'Third Quarter',
}


class EclipseKind(enum.Enum):
    """Eclipse type; penumbral applies to lunar eclipses only, annular to solar."""

    PENUMBRAL = 'penumbral'
    PARTIAL = 'partial'
    ANNULAR = 'annular'
    TOTAL = 'total'


@dataclass(frozen=True)
class Apsis:
    """Lunar or planetary apsis."""

    kind: ApsisKind
    time: astronomy.Time
    distance_au: float
    distance_km: float


@dataclass(frozen=True)
class LunarNode:
    """The Moon crossing the ecliptic plane."""

    kind: NodeKind
    time: astronomy.Time


@dataclass(frozen=True)
class MoonQuarter:
    """Time of a new, first quarter, full, or third quarter moon."""

    phase: MoonPhase
    time: astronomy.Time


@dataclass(frozen=True)
class LunarEclipse:
    """Lunar eclipse with semi-durations of each phase in minutes (0 when absent)."""

    kind: EclipseKind
    peak: astronomy.Time
    obscuration: float
    penumbral_minutes: float
    partial_minutes: float
    total_minutes: float


@dataclass(frozen=True)
class GlobalSolarEclipse:
    """Solar eclipse seen anywhere on Earth.

    latitude/longitude locate the shadow center and are set only for total
    and annular eclipses.
    """

    kind: EclipseKind
    peak: astronomy.Time
    obscuration: float | None
    distance_km: float
    latitude: float | None
    longitude: float | None


@dataclass(frozen=True)
class EclipseEvent:
    """One contact of a local solar eclipse and the Sun's altitude then."""

    time: astronomy.Time
    altitude: float


@dataclass(frozen=True)
class LocalSolarEclipse:
    """Solar eclipse seen from one observer; the total phases are None unless total/annular."""

    kind: EclipseKind
    obscuration: float
    partial_begin: EclipseEvent
    total_begin: EclipseEvent | None
    peak: EclipseEvent
    total_end: EclipseEvent | None
    partial_end: EclipseEvent


@dataclass(frozen=True)
class Transit:
    """Transit of Mercury or Venus; separation in arcminutes at peak."""

    body: astronomy.Body
    start: astronomy.Time
    peak: astronomy.Time
    finish: astronomy.Time
    separation: float

    @property
    def duration_days(self) -> float:
        """First to last contact in days."""
        return self.finish.ut - self.start.ut
