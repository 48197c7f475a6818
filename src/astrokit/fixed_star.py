"""Fixed stars defined by J2000 catalog coordinates.

The engine computes user-defined stars only through a small pool of global body
slots. All FixedStar instances share one slot, so each calculation binds the
star to the slot and queries it inside one critical section.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Union

import astronomy

from astrokit.coordinates import EclipticCoordinates, EquatorialCoordinates, HorizontalCoordinates
from astrokit.engine import frames
from astrokit.engine.common import STAR_SLOT, get_engine, get_star_slot
from astrokit.time_utils import to_time

logger = logging.getLogger(__name__)

TimeLike = Union[astronomy.Time, datetime, str, float]


@dataclass(frozen=True)
class FixedStar:
    """A star at fixed J2000 RA (hours), Dec (degrees), and distance (light-years >= 1)."""

    name: str
    ra_hours: float
    dec_deg: float
    distance_ly: float
    engine: Any = None

    def _engine(self) -> Any:
        return get_engine() if self.engine is None else self.engine

    def _bind(self, eng: Any) -> None:
        """Define this star in the shared slot. Caller holds the slot lock."""
        eng.define_star(STAR_SLOT, self.ra_hours, self.dec_deg, self.distance_ly)

    def equatorial(
        self,
        t: TimeLike,
        observer: astronomy.Observer | None = None,
        of_date: bool = False,
    ) -> EquatorialCoordinates:
        """Apparent RA/Dec seen by observer (default: sea level at 0°N 0°E).

        Parameters:
            t: Time of observation.
            observer: Geographic location.
            of_date: Use the true equator and equinox of date instead of J2000.
        """
        time = to_time(t)
        obs = astronomy.Observer(0.0, 0.0, 0.0) if observer is None else observer
        eng = self._engine()
        with get_star_slot().lock:
            self._bind(eng)
            return eng.equator(STAR_SLOT, time, obs, of_date, True)

    def ecliptic(self, t: TimeLike) -> EclipticCoordinates:
        """Geocentric J2000 ecliptic coordinates, corrected for aberration."""
        time = to_time(t)
        eng = self._engine()
        with get_star_slot().lock:
            self._bind(eng)
            geo = eng.geo_vector(STAR_SLOT, time, True)
        return frames.equatorial_to_ecliptic(geo)

    def ecliptic_longitude(self, t: TimeLike) -> float:
        """Geocentric ecliptic longitude in [0, 360) degrees."""
        return self.ecliptic(t).longitude_deg

    def horizon(
        self,
        t: TimeLike,
        observer: astronomy.Observer,
        refraction: astronomy.Refraction = astronomy.Refraction.Normal,
    ) -> HorizontalCoordinates:
        """Altitude and azimuth for observer, from of-date topocentric coordinates."""
        time = to_time(t)
        eng = self._engine()
        with get_star_slot().lock:
            self._bind(eng)
            eq = eng.equator(STAR_SLOT, time, observer, True, True)
        return eng.horizon(time, observer, eq.ra_hours, eq.dec_deg, refraction)

    def __str__(self) -> str:
        return self.name
