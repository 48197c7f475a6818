"""Owning wrapper around one Astronomy Engine gravity simulator."""

from __future__ import annotations

import logging
from typing import Sequence

import astronomy

from astrokit.errors import InitializationFailure, NotInitialized, PropagationFailure
from astrokit.vectors import StateVector

logger = logging.getLogger(__name__)


def _to_engine_state(state: StateVector, time: astronomy.Time) -> astronomy.StateVector:
    return astronomy.StateVector(
        state.position.x,
        state.position.y,
        state.position.z,
        state.velocity.x,
        state.velocity.y,
        state.velocity.z,
        time,
    )


def _from_engine_state(raw: astronomy.StateVector) -> StateVector:
    return StateVector.from_components((raw.x, raw.y, raw.z), (raw.vx, raw.vy, raw.vz), raw.t)


class GravitySimulation:
    """One engine simulator tracking the major planets plus caller-supplied small bodies.

    The engine performs a single integration step per update; callers keep steps
    short. free() drops the simulator; any later call raises NotInitialized.
    """

    def __init__(
        self,
        origin: astronomy.Body,
        time: astronomy.Time,
        states: Sequence[StateVector],
    ) -> None:
        """Create the simulator at time with small-body states relative to origin.

        Raises:
            InitializationFailure: If the engine rejects the origin, time, or states.
        """
        try:
            self._sim: astronomy.GravitySimulator | None = astronomy.GravitySimulator(
                origin, time, [_to_engine_state(s, time) for s in states]
            )
        except astronomy.Error as e:
            raise InitializationFailure(f'Gravity simulation could not start: {e}') from e
        self._num_bodies = len(states)

    def _require(self) -> astronomy.GravitySimulator:
        if self._sim is None:
            raise NotInitialized('Gravity simulation has been freed')
        return self._sim

    def update(self, time: astronomy.Time) -> list[StateVector]:
        """Take one integration step to time; return small-body states relative to origin."""
        sim = self._require()
        try:
            raw = sim.Update(time)
        except astronomy.Error as e:
            raise PropagationFailure(f'Gravity simulation update failed: {e}') from e
        return [_from_engine_state(s) for s in raw]

    def body_state(self, body: astronomy.Body) -> StateVector:
        """Current state of a major body relative to the origin."""
        sim = self._require()
        try:
            raw = sim.SolarSystemBodyState(body)
        except astronomy.Error as e:
            raise PropagationFailure(f'Body state for {body} unavailable: {e}') from e
        return _from_engine_state(raw)

    def time(self) -> astronomy.Time:
        """Simulator clock."""
        return self._require().Time()

    def num_bodies(self) -> int:
        """Number of small bodies tracked."""
        self._require()
        return self._num_bodies

    def free(self) -> None:
        """Release the simulator. Safe to call more than once."""
        if self._sim is not None:
            logger.debug('Freeing gravity simulation (%d bodies)', self._num_bodies)
        self._sim = None
