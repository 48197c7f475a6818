"""Astronomy Engine adapter: positions, gravity simulation, horizon, and event searches.

Every engine call made by astrokit goes through an AstronomyEngine instance, so a
different engine (or a test double) can be substituted with set_engine().
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Sequence

import astronomy

from astrokit.constants import KM_PER_AU
from astrokit.coordinates import EquatorialCoordinates, HorizontalCoordinates
from astrokit.engine.gravsim import GravitySimulation
from astrokit.errors import (
    EngineQueryFailure,
    InitializationFailure,
    SearchFailure,
    SearchNotFound,
)
from astrokit.events.types import (
    Apsis,
    ApsisKind,
    EclipseEvent,
    EclipseKind,
    GlobalSolarEclipse,
    LocalSolarEclipse,
    LunarEclipse,
    LunarNode,
    MoonPhase,
    MoonQuarter,
    NodeKind,
    Transit,
)
from astrokit.vectors import StateVector, Vector3

logger = logging.getLogger(__name__)

# Searches that give up after their own horizon raise a plain astronomy.Error
# with this wording, e.g. "Failed to find lunar eclipse within 12 full moons."
_NOT_FOUND = re.compile(r'^Failed to find .+ within ')

_ENGINE_APSIS = {kind: astronomy.ApsisKind[kind.name.title()] for kind in ApsisKind}
_ENGINE_NODE = {kind: astronomy.NodeEventKind[kind.name.title()] for kind in NodeKind}


def _vector(raw: astronomy.Vector) -> Vector3:
    return Vector3(raw.x, raw.y, raw.z, raw.t)


def _search(label: str, start: astronomy.Time, func: Callable[..., Any], *args: Any) -> Any:
    """Run one engine search, separating "nothing found" from solver errors.

    Raises:
        SearchNotFound: If the engine gave up within its search horizon.
        SearchFailure: For any other engine error, including internal ones.
    """
    try:
        return func(*args)
    except astronomy.Error as e:
        if type(e) is astronomy.Error and _NOT_FOUND.match(str(e)):
            raise SearchNotFound(f'No {label} found after {start}: {e}') from e
        raise SearchFailure(f'{label} search from {start} failed: {e}') from e


def _eclipse_kind(raw: Any) -> EclipseKind:
    name = raw.name.upper()
    if name not in EclipseKind.__members__:
        raise SearchFailure(f'Engine reported eclipse kind {raw.name}')
    return EclipseKind[name]


def _eclipse_event(raw: Any) -> EclipseEvent | None:
    if raw is None:
        return None
    return EclipseEvent(time=raw.time, altitude=raw.altitude)


def _apsis(raw: Any) -> Apsis:
    return Apsis(
        kind=ApsisKind[raw.kind.name.upper()],
        time=raw.time,
        distance_au=raw.dist_au,
        distance_km=raw.dist_au * KM_PER_AU,
    )


def _node(raw: Any) -> LunarNode:
    name = raw.kind.name.upper()
    if name not in NodeKind.__members__:
        raise SearchFailure(f'Engine reported node kind {raw.kind.name}')
    return LunarNode(kind=NodeKind[name], time=raw.time)


def _quarter(raw: Any) -> MoonQuarter:
    try:
        phase = MoonPhase(raw.quarter)
    except ValueError as e:
        raise SearchFailure(f'Engine reported quarter {raw.quarter}') from e
    return MoonQuarter(phase=phase, time=raw.time)


def _lunar_eclipse(raw: Any) -> LunarEclipse:
    return LunarEclipse(
        kind=_eclipse_kind(raw.kind),
        peak=raw.peak,
        obscuration=raw.obscuration,
        penumbral_minutes=raw.sd_penum,
        partial_minutes=raw.sd_partial,
        total_minutes=raw.sd_total,
    )


def _global_solar_eclipse(raw: Any) -> GlobalSolarEclipse:
    kind = _eclipse_kind(raw.kind)
    centered = kind in (EclipseKind.TOTAL, EclipseKind.ANNULAR)
    return GlobalSolarEclipse(
        kind=kind,
        peak=raw.peak,
        obscuration=raw.obscuration,
        distance_km=raw.distance,
        latitude=raw.latitude if centered else None,
        longitude=raw.longitude if centered else None,
    )


def _local_solar_eclipse(raw: Any) -> LocalSolarEclipse:
    return LocalSolarEclipse(
        kind=_eclipse_kind(raw.kind),
        obscuration=raw.obscuration,
        partial_begin=_eclipse_event(raw.partial_begin),
        total_begin=_eclipse_event(raw.total_begin),
        peak=_eclipse_event(raw.peak),
        total_end=_eclipse_event(raw.total_end),
        partial_end=_eclipse_event(raw.partial_end),
    )


def _transit(body: astronomy.Body, raw: Any) -> Transit:
    return Transit(
        body=body,
        start=raw.start,
        peak=raw.peak,
        finish=raw.finish,
        separation=raw.separation,
    )


class AstronomyEngine:
    """Ephemeris engine backed by the astronomy-engine package."""

    # Positions

    def helio_vector(self, body: astronomy.Body, time: astronomy.Time) -> Vector3:
        """Heliocentric J2000 position of a major body (AU)."""
        try:
            return _vector(astronomy.HelioVector(body, time))
        except astronomy.Error as e:
            raise EngineQueryFailure(f'Heliocentric position of {body} failed: {e}') from e

    def helio_state(self, body: astronomy.Body, time: astronomy.Time) -> StateVector:
        """Heliocentric J2000 position (AU) and velocity (AU/day) of a major body."""
        try:
            raw = astronomy.HelioState(body, time)
        except astronomy.Error as e:
            raise EngineQueryFailure(f'Heliocentric state of {body} failed: {e}') from e
        return StateVector.from_components((raw.x, raw.y, raw.z), (raw.vx, raw.vy, raw.vz), raw.t)

    def geo_vector(
        self, body: astronomy.Body, time: astronomy.Time, aberration: bool = True
    ) -> Vector3:
        """Geocentric J2000 position of a body, optionally corrected for aberration."""
        try:
            return _vector(astronomy.GeoVector(body, time, aberration))
        except astronomy.Error as e:
            raise EngineQueryFailure(f'Geocentric position of {body} failed: {e}') from e

    def equator(
        self,
        body: astronomy.Body,
        time: astronomy.Time,
        observer: astronomy.Observer,
        of_date: bool = False,
        aberration: bool = True,
    ) -> EquatorialCoordinates:
        """Topocentric RA/Dec of a body, J2000 or of-date."""
        try:
            raw = astronomy.Equator(body, time, observer, of_date, aberration)
        except astronomy.Error as e:
            raise EngineQueryFailure(f'Equatorial coordinates of {body} failed: {e}') from e
        return EquatorialCoordinates(ra_hours=raw.ra, dec_deg=raw.dec, distance_au=raw.dist, time=time)

    def horizon(
        self,
        time: astronomy.Time,
        observer: astronomy.Observer,
        ra_hours: float,
        dec_deg: float,
        refraction: astronomy.Refraction,
    ) -> HorizontalCoordinates:
        """Altitude/azimuth of an of-date RA/Dec for an observer."""
        try:
            raw = astronomy.Horizon(time, observer, ra_hours, dec_deg, refraction)
        except astronomy.Error as e:
            raise EngineQueryFailure(f'Horizon transform failed: {e}') from e
        return HorizontalCoordinates(
            azimuth_deg=raw.azimuth,
            altitude_deg=raw.altitude,
            ra_hours=raw.ra,
            dec_deg=raw.dec,
        )

    # Gravity simulation and user-defined stars

    def open_simulation(
        self,
        origin: astronomy.Body,
        time: astronomy.Time,
        states: Sequence[StateVector],
    ) -> GravitySimulation:
        """Start a gravity simulation tracking states (relative to origin) from time."""
        return GravitySimulation(origin, time, states)

    def define_star(
        self, slot: astronomy.Body, ra_hours: float, dec_deg: float, distance_ly: float
    ) -> None:
        """Bind J2000 coordinates to a user-star slot (Body.Star1 ... Body.Star8)."""
        try:
            astronomy.DefineStar(slot, ra_hours, dec_deg, distance_ly)
        except astronomy.Error as e:
            raise InitializationFailure(f'Star slot {slot} could not be defined: {e}') from e

    # Event searches

    def search_lunar_apsis(self, start: astronomy.Time) -> Apsis:
        """Next lunar perigee or apogee at/after start."""
        return _apsis(_search('lunar apsis', start, astronomy.SearchLunarApsis, start))

    def next_lunar_apsis(self, prior: Apsis) -> Apsis:
        """Lunar apsis following prior, which must have come from this engine's search."""
        raw = astronomy.Apsis(prior.time, _ENGINE_APSIS[prior.kind], prior.distance_au)
        return _apsis(_search('lunar apsis', prior.time, astronomy.NextLunarApsis, raw))

    def search_planet_apsis(self, body: astronomy.Body, start: astronomy.Time) -> Apsis:
        """Next perihelion or aphelion of a planet at/after start."""
        return _apsis(
            _search(f'{body.name} apsis', start, astronomy.SearchPlanetApsis, body, start)
        )

    def next_planet_apsis(self, body: astronomy.Body, prior: Apsis) -> Apsis:
        """Perihelion or aphelion of body following prior."""
        raw = astronomy.Apsis(prior.time, _ENGINE_APSIS[prior.kind], prior.distance_au)
        return _apsis(
            _search(f'{body.name} apsis', prior.time, astronomy.NextPlanetApsis, body, raw)
        )

    def search_moon_node(self, start: astronomy.Time) -> LunarNode:
        """Next ecliptic crossing of the Moon at/after start."""
        return _node(_search('lunar node', start, astronomy.SearchMoonNode, start))

    def next_moon_node(self, prior: LunarNode) -> LunarNode:
        """Lunar node following prior; the engine requires ascending and descending to alternate."""
        raw = astronomy.NodeEventInfo(_ENGINE_NODE[prior.kind], prior.time)
        return _node(_search('lunar node', prior.time, astronomy.NextMoonNode, raw))

    def search_moon_quarter(self, start: astronomy.Time) -> MoonQuarter:
        """Next lunar quarter at/after start."""
        return _quarter(_search('moon quarter', start, astronomy.SearchMoonQuarter, start))

    def next_moon_quarter(self, prior: MoonQuarter) -> MoonQuarter:
        raw = astronomy.MoonQuarter(int(prior.phase), prior.time)
        return _quarter(_search('moon quarter', prior.time, astronomy.NextMoonQuarter, raw))

    def search_lunar_eclipse(self, start: astronomy.Time) -> LunarEclipse:
        """Next lunar eclipse peaking at/after start."""
        return _lunar_eclipse(
            _search('lunar eclipse', start, astronomy.SearchLunarEclipse, start)
        )

    def next_lunar_eclipse(self, prior: LunarEclipse) -> LunarEclipse:
        return _lunar_eclipse(
            _search('lunar eclipse', prior.peak, astronomy.NextLunarEclipse, prior.peak)
        )

    def search_global_solar_eclipse(self, start: astronomy.Time) -> GlobalSolarEclipse:
        """Next solar eclipse visible anywhere on Earth, peaking at/after start."""
        return _global_solar_eclipse(
            _search('global solar eclipse', start, astronomy.SearchGlobalSolarEclipse, start)
        )

    def next_global_solar_eclipse(self, prior: GlobalSolarEclipse) -> GlobalSolarEclipse:
        return _global_solar_eclipse(
            _search(
                'global solar eclipse', prior.peak, astronomy.NextGlobalSolarEclipse, prior.peak
            )
        )

    def search_local_solar_eclipse(
        self, start: astronomy.Time, observer: astronomy.Observer
    ) -> LocalSolarEclipse:
        """Next solar eclipse visible from observer, peaking at/after start."""
        return _local_solar_eclipse(
            _search(
                'local solar eclipse', start, astronomy.SearchLocalSolarEclipse, start, observer
            )
        )

    def next_local_solar_eclipse(
        self, prior: LocalSolarEclipse, observer: astronomy.Observer
    ) -> LocalSolarEclipse:
        """Solar eclipse visible from observer following prior (chained from its peak)."""
        peak = prior.peak.time
        return _local_solar_eclipse(
            _search(
                'local solar eclipse', peak, astronomy.NextLocalSolarEclipse, peak, observer
            )
        )

    def search_transit(self, body: astronomy.Body, start: astronomy.Time) -> Transit:
        """Next transit of Mercury or Venus starting at/after start."""
        return _transit(
            body, _search(f'{body.name} transit', start, astronomy.SearchTransit, body, start)
        )

    def next_transit(self, prior: Transit) -> Transit:
        body = prior.body
        return _transit(
            body,
            _search(f'{body.name} transit', prior.peak, astronomy.NextTransit, body, prior.peak),
        )
