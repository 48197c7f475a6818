"""Approximate ephemeris for bodies without an analytic model.

Positions come from the nearest reference epoch, propagated to the requested time
through the engine's gravity simulator. Geocentric positions are simple vector
differences with Earth: no light-time or aberration correction is applied, so
apparent positions are off by the body's motion during the light travel time.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Any, Union

import astronomy

from astrokit.anchors import Anchor, ReferenceEpochTable, chiron_epochs, within_short_circuit
from astrokit.config import get_max_step_days
from astrokit.constants import FINITE_DIFF_DAYS
from astrokit.coordinates import EclipticCoordinates, EquatorialCoordinates, HorizontalCoordinates
from astrokit.engine import frames
from astrokit.engine.common import get_engine
from astrokit.propagation import propagation_session, step_count
from astrokit.time_utils import days_between, to_time
from astrokit.vectors import StateVector, Vector3, central_difference

logger = logging.getLogger(__name__)

TimeLike = Union[astronomy.Time, datetime, str, float]


class ApproximateEphemeris:
    """Positions of one body from a table of reference epochs.

    Every query is independent: it opens a fresh propagation session at the
    nearest anchor, so results do not depend on earlier queries. Failures from
    propagation, frame rotation, or Earth's position propagate unchanged; a
    failed time may be retried by the caller, optionally at an adjusted time.
    """

    def __init__(
        self,
        name: str,
        epochs: ReferenceEpochTable,
        engine: Any = None,
        origin: astronomy.Body = astronomy.Body.Sun,
    ) -> None:
        self.name = name
        self.epochs = epochs
        self.origin = origin
        self._engine = engine

    @property
    def engine(self) -> Any:
        """Engine in use: the one given at construction or the process-wide one."""
        return get_engine() if self._engine is None else self._engine

    def nearest_anchor(self, t: TimeLike) -> Anchor:
        """Reference epoch closest to t (earlier one on an exact tie)."""
        return self.epochs.nearest_anchor(to_time(t))

    def _propagate(
        self, anchor: Anchor, time: astronomy.Time, steps: int | None = None
    ) -> StateVector:
        with propagation_session(self.origin, anchor.time, anchor.state, self.engine) as session:
            return session.advance_to(time, steps)

    def heliocentric_position(self, t: TimeLike) -> Vector3:
        """Heliocentric J2000 position (AU).

        Within one day of an anchor the stored anchor position is returned
        unchanged; otherwise the anchor is propagated to t.
        """
        time = to_time(t)
        anchor = self.epochs.nearest_anchor(time)
        if within_short_circuit(anchor, time):
            logger.debug('%s at %s: using anchor %s directly', self.name, time, anchor.time)
            return dataclasses.replace(anchor.state.position, time=time)
        return self._propagate(anchor, time).position

    def geocentric_position(self, t: TimeLike) -> Vector3:
        """Geocentric J2000 position (AU): heliocentric body minus heliocentric Earth."""
        time = to_time(t)
        body = self.heliocentric_position(time)
        earth = self.engine.helio_vector(astronomy.Body.Earth, time)
        return body - earth

    def geocentric_state(self, t: TimeLike) -> StateVector:
        """Geocentric J2000 position (AU) and velocity (AU/day).

        The body's velocity is a central difference of propagated positions at
        t - 1 s and t + 1 s, both integrated from the anchor nearest t (the
        anchor short-circuit is bypassed so both samples come from the
        integrator). Both samples use the same number of integration steps,
        so their truncation errors cancel in the difference. One second keeps
        the difference's own truncation error negligible while the position
        difference (~1e-8 AU) still carries about seven significant digits in
        double precision. Earth's velocity is the engine's instantaneous
        heliocentric velocity.
        """
        time = to_time(t)
        anchor = self.epochs.nearest_anchor(time)
        position = self.geocentric_position(time)
        steps = step_count(days_between(anchor.time, time), get_max_step_days())
        before = self._propagate(anchor, time.AddDays(-FINITE_DIFF_DAYS), steps).position
        after = self._propagate(anchor, time.AddDays(FINITE_DIFF_DAYS), steps).position
        body_velocity = central_difference(before, after, FINITE_DIFF_DAYS, time)
        earth = self.engine.helio_state(astronomy.Body.Earth, time)
        return StateVector(position, body_velocity - earth.velocity, time)

    def equatorial(self, t: TimeLike) -> EquatorialCoordinates:
        """Geocentric J2000 right ascension (hours), declination (degrees), distance (AU)."""
        return frames.equatorial_spherical(self.geocentric_position(t))

    def ecliptic(self, t: TimeLike) -> EclipticCoordinates:
        """Geocentric J2000 ecliptic longitude, latitude (degrees), and distance (AU)."""
        return frames.equatorial_to_ecliptic(self.geocentric_position(t))

    def ecliptic_longitude(self, t: TimeLike) -> float:
        """Geocentric ecliptic longitude in [0, 360) degrees."""
        return self.ecliptic(t).longitude_deg

    def ecliptic_latitude(self, t: TimeLike) -> float:
        """Geocentric ecliptic latitude in [-90, 90] degrees."""
        return self.ecliptic(t).latitude_deg

    def horizon(
        self,
        t: TimeLike,
        observer: astronomy.Observer,
        refraction: astronomy.Refraction = astronomy.Refraction.Normal,
    ) -> HorizontalCoordinates:
        """Altitude and azimuth for an observer, from the J2000 equatorial position."""
        time = to_time(t)
        eq = self.equatorial(time)
        return self.engine.horizon(time, observer, eq.ra_hours, eq.dec_deg, refraction)

    def __repr__(self) -> str:
        return f'ApproximateEphemeris({self.name!r}, {len(self.epochs)} epochs)'


def chiron(engine: Any = None) -> ApproximateEphemeris:
    """Approximate ephemeris of 2060 Chiron from JPL Horizons states (2000-2040)."""
    return ApproximateEphemeris('Chiron', chiron_epochs(), engine)
