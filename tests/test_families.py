"""Tests for event family cursors over scripted engine searches."""

from __future__ import annotations

import math

import astronomy
import pytest

from astrokit.errors import SearchFailure
from astrokit.events import families
from astrokit.events.types import (
    Apsis,
    ApsisKind,
    EclipseEvent,
    EclipseKind,
    LocalSolarEclipse,
    LunarEclipse,
    MoonPhase,
    MoonQuarter,
    Transit,
)

SYNODIC_QUARTER = 29.530588 / 4.0
MARS_HALF_ORBIT = 686.980 / 2.0
RESUME = 1e-3


class ScriptedEngine:
    """Searches with regular spacing.

    Records every start time asked of a search, and the time of every prior
    event handed to a next-in-series method. The next_* methods resume just
    after the prior event, as the engine's own primitives do.
    """

    def __init__(self) -> None:
        self.starts: list[float] = []
        self.priors: list[float] = []

    def _next_slot(self, start: astronomy.Time, period: float, offset: float = 0.0) -> int:
        self.starts.append(start.ut)
        return math.ceil((start.ut - offset) / period)

    def _resume(self, prior: astronomy.Time) -> astronomy.Time:
        self.priors.append(prior.ut)
        return prior.AddDays(RESUME)

    def search_moon_quarter(self, start: astronomy.Time) -> MoonQuarter:
        k = self._next_slot(start, SYNODIC_QUARTER)
        return MoonQuarter(MoonPhase(k % 4), astronomy.Time(k * SYNODIC_QUARTER))

    def next_moon_quarter(self, prior: MoonQuarter) -> MoonQuarter:
        return self.search_moon_quarter(self._resume(prior.time))

    def search_lunar_apsis(self, start: astronomy.Time) -> Apsis:
        k = self._next_slot(start, 13.8)
        kind = ApsisKind.PERICENTER if k % 2 == 0 else ApsisKind.APOCENTER
        return Apsis(kind, astronomy.Time(k * 13.8), 0.0025, 3.7e5)

    def next_lunar_apsis(self, prior: Apsis) -> Apsis:
        return self.search_lunar_apsis(self._resume(prior.time))

    def search_planet_apsis(self, body: astronomy.Body, start: astronomy.Time) -> Apsis:
        k = self._next_slot(start, MARS_HALF_ORBIT)
        kind = ApsisKind.PERICENTER if k % 2 == 0 else ApsisKind.APOCENTER
        return Apsis(kind, astronomy.Time(k * MARS_HALF_ORBIT), 1.5, 2.2e8)

    def next_planet_apsis(self, body: astronomy.Body, prior: Apsis) -> Apsis:
        return self.search_planet_apsis(body, self._resume(prior.time))

    def search_lunar_eclipse(self, start: astronomy.Time) -> LunarEclipse:
        k = self._next_slot(start, 177.0, offset=3.0)
        return LunarEclipse(EclipseKind.PARTIAL, astronomy.Time(3.0 + k * 177.0), 0.1, 90.0, 40.0, 0.0)

    def next_lunar_eclipse(self, prior: LunarEclipse) -> LunarEclipse:
        return self.search_lunar_eclipse(self._resume(prior.peak))

    def search_local_solar_eclipse(
        self, start: astronomy.Time, observer: astronomy.Observer
    ) -> LocalSolarEclipse:
        k = self._next_slot(start, 400.0)
        peak = astronomy.Time(k * 400.0)

        def _event(dt: float) -> EclipseEvent:
            return EclipseEvent(peak.AddDays(dt), 30.0)

        return LocalSolarEclipse(
            EclipseKind.PARTIAL, 0.4, _event(-0.05), None, _event(0.0), None, _event(0.05)
        )

    def next_local_solar_eclipse(
        self, prior: LocalSolarEclipse, observer: astronomy.Observer
    ) -> LocalSolarEclipse:
        return self.search_local_solar_eclipse(self._resume(prior.peak.time), observer)

    def search_transit(self, body: astronomy.Body, start: astronomy.Time) -> Transit:
        k = self._next_slot(start, 2500.0)
        peak = astronomy.Time(k * 2500.0)
        return Transit(body, peak.AddDays(-0.1), peak, peak.AddDays(0.1), 5.0)

    def next_transit(self, prior: Transit) -> Transit:
        return self.search_transit(prior.body, self._resume(prior.peak))


@pytest.fixture
def scripted() -> ScriptedEngine:
    return ScriptedEngine()


def test_moon_quarters_cycle(scripted: ScriptedEngine) -> None:
    """Quarters come in order; each later one is found from the prior quarter."""

    cursor = families.moon_quarters(scripted)
    events = families.between(cursor, 0.5, 60.0, check_kinds=True)

    assert [e.phase for e in events][:5] == [
        MoonPhase.FIRST_QUARTER,
        MoonPhase.FULL,
        MoonPhase.THIRD_QUARTER,
        MoonPhase.NEW,
        MoonPhase.FIRST_QUARTER,
    ]
    assert scripted.starts[0] == 0.5
    assert scripted.priors == [e.time.ut for e in events]


def test_lunar_apsides_alternate(scripted: ScriptedEngine) -> None:
    """Perigee and apogee alternate."""

    events = families.between(families.lunar_apsides(scripted), 0.0, 100.0, check_kinds=True)

    assert len(events) == 8
    assert events[0].kind is ApsisKind.PERICENTER


def test_planet_apsides_chain_from_prior(scripted: ScriptedEngine) -> None:
    """Planet apsides after the first come from the prior apsis of the same planet."""

    events = families.between(
        families.planet_apsides(astronomy.Body.Mars, scripted), 1.0, 1100.0, check_kinds=True
    )

    assert [e.time.ut for e in events] == pytest.approx(
        [MARS_HALF_ORBIT, 2 * MARS_HALF_ORBIT, 3 * MARS_HALF_ORBIT]
    )
    assert scripted.priors == pytest.approx([e.time.ut for e in events])


def test_planet_apsides_rejects_non_planets() -> None:
    """The Moon and the Sun have no heliocentric apsides."""

    with pytest.raises(ValueError):
        families.planet_apsides(astronomy.Body.Moon)
    with pytest.raises(ValueError):
        families.planet_apsides(astronomy.Body.Sun)


def test_lunar_eclipses_use_peak_time(scripted: ScriptedEngine) -> None:
    """Eclipses are ordered and bounded by their peak."""

    events = families.between(families.lunar_eclipses(scripted), 0.0, 300.0)

    assert [e.peak.ut for e in events] == [3.0, 180.0]


def test_local_solar_eclipses_use_peak_event_time(scripted: ScriptedEngine) -> None:
    """Local eclipses are bounded by the time of the peak contact."""

    observer = astronomy.Observer(30.0, -97.0, 150.0)
    cursor = families.local_solar_eclipses(observer, scripted)
    events = families.between(cursor, 1.0, 1200.0)

    assert [e.peak.time.ut for e in events] == pytest.approx([400.0, 800.0])
    assert cursor.time_of(events[0]) is events[0].peak.time


def test_transits_only_for_inner_planets(scripted: ScriptedEngine) -> None:
    """Transits are defined for Mercury and Venus only."""

    events = families.between(families.transits(astronomy.Body.Venus, scripted), 1.0, 6000.0)
    assert [e.peak.ut for e in events] == [2500.0, 5000.0]
    assert events[0].duration_days == pytest.approx(0.2)

    with pytest.raises(ValueError):
        families.transits(astronomy.Body.Mars, scripted)


def test_out_of_order_kinds_detected() -> None:
    """check_kinds rejects a family whose sub-kinds do not cycle."""

    class _Broken(ScriptedEngine):
        def search_moon_quarter(self, start: astronomy.Time) -> MoonQuarter:
            quarter = super().search_moon_quarter(start)
            return MoonQuarter(MoonPhase.FULL, quarter.time)

    with pytest.raises(SearchFailure):
        families.between(families.moon_quarters(_Broken()), 0.5, 60.0, check_kinds=True)
