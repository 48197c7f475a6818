"""Propagation sessions: scoped ownership of one engine gravity simulation."""

from __future__ import annotations

import contextlib
import logging
import math
import threading
from typing import Any, Iterator

import astronomy

from astrokit.config import get_max_step_days
from astrokit.engine.common import get_engine
from astrokit.errors import InitializationFailure, NotInitialized, PropagationFailure
from astrokit.time_utils import days_between
from astrokit.vectors import StateVector

logger = logging.getLogger(__name__)


def step_count(span_days: float, max_step_days: float) -> int:
    """Number of equal integration steps covering span_days, each no longer than max_step_days."""
    return max(1, math.ceil(abs(span_days) / max_step_days))


class PropagationSession:
    """A gravity simulation tracking one small body relative to an origin body.

    Create sessions with open() and release them exactly once, preferably with
    ``with PropagationSession.open(...) as session:``.

    Advances are cumulative: advance_to integrates from the session's current
    state, not from the original epoch, so a round trip (out and back) does not
    return exactly to the starting state; truncation error accumulates with each
    call. Sessions are meant for a single owner; an internal lock serializes
    calls but does not make interleaved use from several threads meaningful.
    """

    def __init__(
        self,
        simulation: Any,
        origin: astronomy.Body,
        epoch: astronomy.Time,
        max_step_days: float,
    ) -> None:
        """Wrap an already-created simulation (use open() instead)."""
        self._sim = simulation
        self._origin = origin
        self._time = epoch
        self._max_step_days = max_step_days
        self._direction = 1.0
        self._lock = threading.Lock()

    @classmethod
    def open(
        cls,
        origin: astronomy.Body,
        epoch: astronomy.Time,
        initial_state: StateVector,
        engine: Any = None,
        max_step_days: float | None = None,
    ) -> PropagationSession:
        """Start a session at epoch with the small body's state relative to origin.

        Parameters:
            origin: Body the states are measured from (e.g. Body.Sun).
            epoch: Simulation start time.
            initial_state: Small-body position (AU) and velocity (AU/day).
            engine: Engine to use; defaults to the process-wide engine.
            max_step_days: Longest single integration step; defaults to config.

        Raises:
            InitializationFailure: If the state is not finite or the engine refuses it.
        """
        if not initial_state.is_finite():
            raise InitializationFailure(f'Initial state at {epoch} is not finite')
        step = get_max_step_days() if max_step_days is None else max_step_days
        if not step > 0.0:
            raise InitializationFailure(f'max_step_days must be positive, got {step}')
        eng = get_engine() if engine is None else engine
        simulation = eng.open_simulation(origin, epoch, [initial_state])
        logger.debug('Opened propagation session at %s (origin %s)', epoch, origin)
        return cls(simulation, origin, epoch, step)

    def _require(self) -> Any:
        if self._sim is None:
            raise NotInitialized('Propagation session has been released')
        return self._sim

    @property
    def origin(self) -> astronomy.Body:
        """Body the returned states are relative to."""
        return self._origin

    @property
    def current_time(self) -> astronomy.Time:
        """Time of the last successfully reached target."""
        self._require()
        return self._time

    @property
    def body_count(self) -> int:
        """Number of small bodies tracked (always 1 for sessions opened here)."""
        return self._require().num_bodies()

    @property
    def direction(self) -> float:
        """+1.0 when advance_by moves forward in time, -1.0 when reversed."""
        return self._direction

    @property
    def max_step_days(self) -> float:
        """Longest single integration step used when advance_to picks the step count."""
        return self._max_step_days

    def advance_to(self, target: astronomy.Time, steps: int | None = None) -> StateVector:
        """Move the session clock to target and return the small body's state.

        The direction follows the sign of target - current_time. The interval
        is split into equal steps no longer than max_step_days. On failure the
        clock stays at the last step reached and the session remains usable.

        Parameters:
            target: Time to reach.
            steps: Exact number of equal steps to take instead. Runs to nearby
                targets that must share one truncation error (finite
                differences) pass the same count.

        Raises:
            ValueError: If steps is given and less than 1.
            NotInitialized: If the session was released.
            PropagationFailure: If the engine fails to advance.
        """
        if steps is not None and steps < 1:
            raise ValueError(f'steps must be at least 1, got {steps}')
        with self._lock:
            sim = self._require()
            start = self._time
            span = days_between(start, target)
            nsteps = step_count(span, self._max_step_days) if steps is None else steps
            states: list[StateVector] = []
            for k in range(1, nsteps + 1):
                step_time = target if k == nsteps else start.AddDays(span * k / nsteps)
                try:
                    states = sim.update(step_time)
                except PropagationFailure:
                    logger.warning(
                        'Propagation from %s to %s stopped at %s (step %d of %d)',
                        start,
                        target,
                        self._time,
                        k,
                        nsteps,
                    )
                    raise
                self._time = step_time
            if not states:
                raise PropagationFailure('Gravity simulation returned no small-body state')
            return states[0]

    def advance_by(self, days: float) -> StateVector:
        """Advance by days in the current direction (see reverse_direction)."""
        current = self.current_time
        return self.advance_to(current.AddDays(self._direction * days))

    def reverse_direction(self) -> None:
        """Flip the direction used by advance_by; time and state are unchanged."""
        self._require()
        self._direction = -self._direction

    def body_state(self, body: astronomy.Body) -> StateVector:
        """State of a major body relative to origin at the current time."""
        with self._lock:
            return self._require().body_state(body)

    def release(self) -> None:
        """Free the engine handle. Further queries raise NotInitialized."""
        with self._lock:
            if self._sim is None:
                return
            self._sim.free()
            self._sim = None
            logger.debug('Released propagation session at %s', self._time)

    @property
    def released(self) -> bool:
        """True once release() has run."""
        return self._sim is None

    def __enter__(self) -> PropagationSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __copy__(self) -> PropagationSession:
        raise TypeError('PropagationSession owns an engine handle and cannot be copied')

    def __deepcopy__(self, memo: dict[int, Any]) -> PropagationSession:
        raise TypeError('PropagationSession owns an engine handle and cannot be copied')

    def __repr__(self) -> str:
        state = 'released' if self._sim is None else f'time={self._time}'
        return f'PropagationSession(origin={self._origin}, {state})'


@contextlib.contextmanager
def propagation_session(
    origin: astronomy.Body,
    epoch: astronomy.Time,
    initial_state: StateVector,
    engine: Any = None,
    max_step_days: float | None = None,
) -> Iterator[PropagationSession]:
    """Open a session for the duration of a with-block and always release it."""
    session = PropagationSession.open(origin, epoch, initial_state, engine, max_step_days)
    try:
        yield session
    finally:
        session.release()
