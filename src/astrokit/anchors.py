"""Reference epochs: pre-computed states used as integration starting points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import astronomy

from astrokit.constants import SHORT_CIRCUIT_DAYS
from astrokit.vectors import StateVector


@dataclass(frozen=True)
class Anchor:
    """One reference epoch: heliocentric J2000 state (AU, AU/day) at time."""

    time: astronomy.Time
    state: StateVector


class ReferenceEpochTable:
    """Immutable, strictly time-ordered set of anchors for one body."""

    def __init__(self, anchors: Sequence[Anchor]) -> None:
        """Validate and store anchors.

        Raises:
            ValueError: If anchors is empty or times are not strictly increasing.
        """
        if not anchors:
            raise ValueError('Reference epoch table needs at least one anchor')
        for prev, cur in zip(anchors, anchors[1:]):
            if not cur.time.ut > prev.time.ut:
                raise ValueError(
                    f'Anchor times must be strictly increasing: {prev.time} then {cur.time}'
                )
        self._anchors = tuple(anchors)

    def __len__(self) -> int:
        return len(self._anchors)

    def __iter__(self) -> Iterator[Anchor]:
        return iter(self._anchors)

    def __getitem__(self, index: int) -> Anchor:
        return self._anchors[index]

    def nearest_anchor(self, time: astronomy.Time) -> Anchor:
        """Anchor minimizing |anchor.time - time| (UT days).

        Ties (a time exactly midway between two anchors) go to the anchor that
        comes first in table order, i.e. the earlier one.
        """
        best = self._anchors[0]
        best_gap = abs(best.time.ut - time.ut)
        for anchor in self._anchors[1:]:
            gap = abs(anchor.time.ut - time.ut)
            if gap < best_gap:
                best, best_gap = anchor, gap
        return best


def within_short_circuit(anchor: Anchor, time: astronomy.Time) -> bool:
    """True when time is close enough to anchor to use its stored state unchanged."""
    return abs(anchor.time.ut - time.ut) < SHORT_CIRCUIT_DAYS


def _anchor(year: int, position: tuple[float, float, float], velocity: tuple[float, float, float]) -> Anchor:
    time = astronomy.Time.Make(year, 1, 1, 0, 0, 0.0)
    return Anchor(time, StateVector.from_components(position, velocity, time))


def chiron_epochs() -> ReferenceEpochTable:
    """2060 Chiron reference states, JPL Horizons, heliocentric ICRF/J2000, AU and AU/day."""
    return ReferenceEpochTable(
        [
            _anchor(
                2000,
                (-3.532082802845036, -8.673587566387649, -2.935491685233997),
                (4.970678433106630e-03, -3.627773229067521e-03, -8.262541278709376e-04),
            ),
            _anchor(
                2010,
                (13.19148992863117, -9.058771972133892, -2.018744306999665),
                (3.172737184697467e-03, 2.077241872967885e-03, 8.475052013853388e-04),
            ),
            _anchor(
                2020,
                (18.74979015626275, 0.9060856547258316, 1.445166327129911),
                (-5.188250744254794e-05, 2.988627504002276e-03, 9.318734038577373e-04),
            ),
            _anchor(
                2030,
                (13.13185175469694, 10.45171373019759, 4.086005508618447),
                (-2.967275252793649e-03, 1.899724574528414e-03, 4.099535209360336e-04),
            ),
            _anchor(
                2040,
                (-1.878330124332237, 10.99286850835428, 3.325776674355994),
                (-4.676386182330938e-03, -2.507129241195810e-03, -1.075315590956888e-03),
            ),
        ]
    )
