"""Recurring event families, each a PeriodicEventCursor over one engine search.

The first event comes from the engine's search primitive; each later one from
the engine's matching next-in-series primitive, which knows how far past the
prior event to resume.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, TypeVar, Union

import astronomy

from astrokit.constants import PLANETS, TRANSIT_BODIES
from astrokit.engine.common import get_engine
from astrokit.events.cursor import PeriodicEventCursor
from astrokit.events.types import (
    Apsis,
    ApsisKind,
    GlobalSolarEclipse,
    LocalSolarEclipse,
    LunarEclipse,
    LunarNode,
    MoonPhase,
    MoonQuarter,
    NodeKind,
    Transit,
)
from astrokit.time_utils import to_time

E = TypeVar('E')
TimeLike = Union[astronomy.Time, datetime, str, float]

APSIS_CYCLE = (ApsisKind.PERICENTER, ApsisKind.APOCENTER)
NODE_CYCLE = (NodeKind.ASCENDING, NodeKind.DESCENDING)
QUARTER_CYCLE = tuple(MoonPhase)


def _engine(engine: Any) -> Any:
    return get_engine() if engine is None else engine


def lunar_apsides(engine: Any = None) -> PeriodicEventCursor[Apsis]:
    """Alternating lunar perigees and apogees."""
    eng = _engine(engine)
    return PeriodicEventCursor(
        eng.search_lunar_apsis,
        lambda e: e.time,
        name='lunar apsis',
        kind_of=lambda e: e.kind,
        kind_cycle=APSIS_CYCLE,
        following=eng.next_lunar_apsis,
    )


def planet_apsides(body: astronomy.Body, engine: Any = None) -> PeriodicEventCursor[Apsis]:
    """Alternating perihelia and aphelia of a planet.

    Raises:
        ValueError: If body is not a planet.
    """
    if body.name not in PLANETS:
        raise ValueError(f'{body.name} is not a planet')
    eng = _engine(engine)
    return PeriodicEventCursor(
        lambda start: eng.search_planet_apsis(body, start),
        lambda e: e.time,
        name=f'{body.name} apsis',
        kind_of=lambda e: e.kind,
        kind_cycle=APSIS_CYCLE,
        following=lambda prior: eng.next_planet_apsis(body, prior),
    )


def lunar_nodes(engine: Any = None) -> PeriodicEventCursor[LunarNode]:
    """Alternating ascending and descending crossings of the ecliptic by the Moon."""
    eng = _engine(engine)
    return PeriodicEventCursor(
        eng.search_moon_node,
        lambda e: e.time,
        name='lunar node',
        kind_of=lambda e: e.kind,
        kind_cycle=NODE_CYCLE,
        following=eng.next_moon_node,
    )


def moon_quarters(engine: Any = None) -> PeriodicEventCursor[MoonQuarter]:
    """New, first quarter, full, and third quarter moons, cycling in that order."""
    eng = _engine(engine)
    return PeriodicEventCursor(
        eng.search_moon_quarter,
        lambda e: e.time,
        name='moon quarter',
        kind_of=lambda e: e.phase,
        kind_cycle=QUARTER_CYCLE,
        following=eng.next_moon_quarter,
    )


def lunar_eclipses(engine: Any = None) -> PeriodicEventCursor[LunarEclipse]:
    """Lunar eclipses, ordered by peak time."""
    eng = _engine(engine)
    return PeriodicEventCursor(
        eng.search_lunar_eclipse,
        lambda e: e.peak,
        name='lunar eclipse',
        following=eng.next_lunar_eclipse,
    )


def global_solar_eclipses(engine: Any = None) -> PeriodicEventCursor[GlobalSolarEclipse]:
    """Solar eclipses visible anywhere on Earth, ordered by peak time."""
    eng = _engine(engine)
    return PeriodicEventCursor(
        eng.search_global_solar_eclipse,
        lambda e: e.peak,
        name='global solar eclipse',
        following=eng.next_global_solar_eclipse,
    )


def local_solar_eclipses(
    observer: astronomy.Observer, engine: Any = None
) -> PeriodicEventCursor[LocalSolarEclipse]:
    """Solar eclipses visible from observer, ordered by the time of the peak phase."""
    eng = _engine(engine)
    return PeriodicEventCursor(
        lambda start: eng.search_local_solar_eclipse(start, observer),
        lambda e: e.peak.time,
        name='local solar eclipse',
        following=lambda prior: eng.next_local_solar_eclipse(prior, observer),
    )


def transits(body: astronomy.Body, engine: Any = None) -> PeriodicEventCursor[Transit]:
    """Transits of Mercury or Venus across the Sun, ordered by peak time.

    Raises:
        ValueError: If body is neither Mercury nor Venus.
    """
    if body.name not in TRANSIT_BODIES:
        raise ValueError(f'Transits are only defined for Mercury and Venus, not {body.name}')
    eng = _engine(engine)
    return PeriodicEventCursor(
        lambda start: eng.search_transit(body, start),
        lambda e: e.peak,
        name=f'{body.name} transit',
        following=eng.next_transit,
    )


def between(
    cursor: PeriodicEventCursor[E],
    start: TimeLike,
    stop: TimeLike,
    check_kinds: bool = False,
) -> list[E]:
    """Enumerate a family over [start, stop), optionally asserting its kind cycle.

    Parameters:
        cursor: Family cursor, e.g. moon_quarters().
        start: Range start (inclusive); engine time, datetime, or string.
        stop: Range end (exclusive).
        check_kinds: Also verify alternation / quarter order with check_sequence().

    Returns:
        Events in increasing time order.
    """
    events = cursor.enumerate(to_time(start), to_time(stop))
    if check_kinds:
        cursor.check_sequence(events)
    return events
