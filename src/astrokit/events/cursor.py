"""Bounded enumeration of recurring events from a "find next occurrence" search."""

from __future__ import annotations

import logging
from typing import Callable, Generic, Hashable, Iterator, Sequence, TypeVar

import astronomy

from astrokit.config import get_max_events
from astrokit.errors import SearchFailure

logger = logging.getLogger(__name__)

E = TypeVar('E')


class PeriodicEventCursor(Generic[E]):
    """Turn one search primitive into next / next-after / range enumeration.

    The search must return the first event at or after its start time. To step
    past a known event the cursor calls following(event) when given, usually
    the engine's own next-in-series primitive. Otherwise the search restarts
    at the event time plus skip_days, which must be shorter than the shortest
    gap between consecutive events.

    Enumeration ends only because each search returns a strictly later event;
    that is checked on every step and the number of events is capped, so a
    misbehaving search raises SearchFailure instead of looping forever.
    """

    def __init__(
        self,
        search: Callable[[astronomy.Time], E],
        time_of: Callable[[E], astronomy.Time],
        skip_days: float = 0.0,
        name: str = 'event',
        kind_of: Callable[[E], Hashable] | None = None,
        kind_cycle: Sequence[Hashable] = (),
        max_events: int | None = None,
        following: Callable[[E], E] | None = None,
    ) -> None:
        """Bind a family's search and how to read its events.

        Parameters:
            search: Finds the first event at/after a time.
            time_of: Extracts the event time (possibly nested, e.g. peak.time).
            skip_days: Offset from a prior event to restart the search; unused
                when following is given.
            name: Family name for messages and logs.
            kind_of: Extracts the event sub-kind, for check_sequence().
            kind_cycle: Sub-kinds in the order they must repeat.
            max_events: Enumeration cap; defaults to ASTROKIT_MAX_EVENTS.
            following: Finds the event after a given event of this family.
        """
        if skip_days < 0.0:
            raise ValueError(f'skip_days must not be negative, got {skip_days}')
        self.name = name
        self._search = search
        self._time_of = time_of
        self._skip_days = skip_days
        self._kind_of = kind_of
        self._kind_cycle = tuple(kind_cycle)
        self._max_events = max_events
        self._following = following

    def time_of(self, event: E) -> astronomy.Time:
        """Time of an event of this family."""
        return self._time_of(event)

    def next(self, start: astronomy.Time) -> E:
        """First event at or after start.

        Raises:
            SearchNotFound: If the search finds nothing.
            SearchFailure: If the search fails or returns an event before start.
        """
        event = self._search(start)
        if self._time_of(event).ut < start.ut:
            raise SearchFailure(
                f'{self.name} search from {start} returned an earlier event at {self._time_of(event)}'
            )
        return event

    def next_after(self, event: E) -> E:
        """First event strictly after a prior event of the same family.

        Raises:
            SearchNotFound: If the search finds nothing.
            SearchFailure: If the search fails or does not move forward in time.
        """
        prior = self._time_of(event)
        if self._following is not None:
            following = self._following(event)
        else:
            following = self._search(prior.AddDays(self._skip_days))
        if not self._time_of(following).ut > prior.ut:
            raise SearchFailure(
                f'{self.name} search did not advance past {prior} '
                f'(returned {self._time_of(following)})'
            )
        return following

    def enumerate(self, start: astronomy.Time, stop: astronomy.Time) -> list[E]:
        """All events with start <= time < stop, in increasing time order.

        Any failing step aborts the whole enumeration; events collected so far
        are discarded and the error propagates.

        Raises:
            SearchNotFound: If a search step finds nothing.
            SearchFailure: If a step fails, does not advance, or the cap is exceeded.
        """
        limit = get_max_events() if self._max_events is None else self._max_events
        events: list[E] = []
        current = self.next(start)
        while self._time_of(current).ut < stop.ut:
            if len(events) >= limit:
                raise SearchFailure(
                    f'{self.name} enumeration from {start} to {stop} exceeded {limit} events'
                )
            events.append(current)
            current = self.next_after(current)
        logger.debug('%s: %d events from %s to %s', self.name, len(events), start, stop)
        return events

    def iterate(self, start: astronomy.Time) -> Iterator[E]:
        """Lazily yield events from start onward, without an end or a cap."""
        current = self.next(start)
        while True:
            yield current
            current = self.next_after(current)

    def check_sequence(self, events: Sequence[E]) -> None:
        """Verify that event kinds follow this family's cycle.

        Alternating families (apsides, nodes) use a two-element cycle; moon
        quarters use four. The first event may start anywhere in the cycle.

        Raises:
            SearchFailure: If a kind is out of order.
        """
        if self._kind_of is None or not self._kind_cycle or not events:
            return
        cycle = self._kind_cycle
        first = self._kind_of(events[0])
        if first not in cycle:
            raise SearchFailure(f'{self.name}: unexpected kind {first!r}')
        index = cycle.index(first)
        for event in events[1:]:
            index = (index + 1) % len(cycle)
            kind = self._kind_of(event)
            if kind != cycle[index]:
                raise SearchFailure(
                    f'{self.name}: expected {cycle[index]!r} at {self._time_of(event)}, got {kind!r}'
                )
