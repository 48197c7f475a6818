"""Shared fixtures: a deterministic stand-in engine for unit tests."""

from __future__ import annotations

import math
import threading
import time as _time
from typing import Sequence

import astronomy
import pytest

from astrokit.coordinates import EquatorialCoordinates, HorizontalCoordinates
from astrokit.errors import InitializationFailure, NotInitialized, PropagationFailure
from astrokit.vectors import StateVector, Vector3

EARTH_PERIOD_DAYS = 365.25


class FakeSimulation:
    """Small bodies move in straight lines: x(t) = x0 + v * (t - t0)."""

    def __init__(
        self,
        time: astronomy.Time,
        states: Sequence[StateVector],
        fail_on_update: int | None = None,
    ) -> None:
        self.epoch = time
        self.states = list(states)
        self.current = time
        self.update_times: list[astronomy.Time] = []
        self.freed = 0
        self.fail_on_update = fail_on_update

    def _state_at(self, state: StateVector, time: astronomy.Time) -> StateVector:
        dt = time.ut - self.epoch.ut
        pos = state.position.as_array() + state.velocity.as_array() * dt
        return StateVector.from_components(pos, state.velocity.as_array(), time)

    def update(self, time: astronomy.Time) -> list[StateVector]:
        if self.freed:
            raise NotInitialized('freed')
        if self.fail_on_update is not None and len(self.update_times) + 1 == self.fail_on_update:
            self.update_times.append(time)
            raise PropagationFailure('injected failure')
        self.update_times.append(time)
        self.current = time
        return [self._state_at(s, time) for s in self.states]

    def body_state(self, body: astronomy.Body) -> StateVector:
        return StateVector.from_components((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), self.current)

    def time(self) -> astronomy.Time:
        return self.current

    def num_bodies(self) -> int:
        return len(self.states)

    def free(self) -> None:
        self.freed += 1


class FakeEngine:
    """Earth on a circular 1 AU orbit in the equatorial plane; linear small-body motion."""

    def __init__(self) -> None:
        self.simulations: list[FakeSimulation] = []
        self.fail_open = False
        self.fail_on_update: int | None = None
        self.horizon_calls: list[tuple[float, float]] = []
        self.slot: tuple[float, float, float] | None = None
        self.slot_mismatches = 0
        self._lock = threading.Lock()

    def _earth_angle(self, time: astronomy.Time) -> float:
        return 2.0 * math.pi * time.ut / EARTH_PERIOD_DAYS

    def helio_vector(self, body: astronomy.Body, time: astronomy.Time) -> Vector3:
        a = self._earth_angle(time)
        return Vector3(math.cos(a), math.sin(a), 0.0, time)

    def helio_state(self, body: astronomy.Body, time: astronomy.Time) -> StateVector:
        a = self._earth_angle(time)
        w = 2.0 * math.pi / EARTH_PERIOD_DAYS
        return StateVector.from_components(
            (math.cos(a), math.sin(a), 0.0), (-w * math.sin(a), w * math.cos(a), 0.0), time
        )

    def open_simulation(
        self, origin: astronomy.Body, time: astronomy.Time, states: Sequence[StateVector]
    ) -> FakeSimulation:
        if self.fail_open:
            raise InitializationFailure('injected open failure')
        sim = FakeSimulation(time, states, self.fail_on_update)
        self.simulations.append(sim)
        return sim

    def horizon(
        self,
        time: astronomy.Time,
        observer: astronomy.Observer,
        ra_hours: float,
        dec_deg: float,
        refraction: astronomy.Refraction,
    ) -> HorizontalCoordinates:
        self.horizon_calls.append((ra_hours, dec_deg))
        return HorizontalCoordinates(
            azimuth_deg=ra_hours * 15.0, altitude_deg=dec_deg, ra_hours=ra_hours, dec_deg=dec_deg
        )

    def define_star(
        self, slot: astronomy.Body, ra_hours: float, dec_deg: float, distance_ly: float
    ) -> None:
        if distance_ly < 1.0:
            raise InitializationFailure('distance too small')
        self.slot = (ra_hours, dec_deg, distance_ly)

    def _read_slot(self) -> tuple[float, float, float]:
        assert self.slot is not None
        seen = self.slot
        # Give other threads a chance to overwrite the slot mid-query.
        _time.sleep(0.0005)
        if self.slot != seen:
            with self._lock:
                self.slot_mismatches += 1
        return seen

    def equator(
        self,
        body: astronomy.Body,
        time: astronomy.Time,
        observer: astronomy.Observer,
        of_date: bool = False,
        aberration: bool = True,
    ) -> EquatorialCoordinates:
        ra, dec, dist = self._read_slot()
        return EquatorialCoordinates(ra_hours=ra, dec_deg=dec, distance_au=dist * 63241.077, time=time)

    def geo_vector(
        self, body: astronomy.Body, time: astronomy.Time, aberration: bool = True
    ) -> Vector3:
        ra, dec, dist = self._read_slot()
        r = dist * 63241.077
        ra_rad = math.radians(ra * 15.0)
        dec_rad = math.radians(dec)
        return Vector3(
            r * math.cos(dec_rad) * math.cos(ra_rad),
            r * math.cos(dec_rad) * math.sin(ra_rad),
            r * math.sin(dec_rad),
            time,
        )


@pytest.fixture
def fake_engine() -> FakeEngine:
    """Fresh deterministic engine."""
    return FakeEngine()


@pytest.fixture
def j2000() -> astronomy.Time:
    """2000-01-01 12:00 UT."""
    return astronomy.Time(0.0)
