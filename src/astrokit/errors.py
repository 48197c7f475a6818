"""Error taxonomy for engine sessions, frame conversions, and event searches."""

from __future__ import annotations


class AstroKitError(RuntimeError):
    """Base class for all astrokit calculation failures."""


class InitializationFailure(AstroKitError):
    """An engine resource (gravity simulation, star slot) could not be set up.

    No handle exists after this error; there is nothing to release.
    """


class PropagationFailure(AstroKitError):
    """A live gravity simulation failed to advance or report a state.

    The session stays usable; the caller may retry with another target time.
    """


class NotInitialized(PropagationFailure):
    """A session was queried after it was released."""


class FrameConversionFailure(AstroKitError):
    """A frame rotation or Cartesian/spherical conversion rejected its input."""


class SearchNotFound(AstroKitError):
    """An event search found no occurrence within its own horizon."""


class SearchFailure(AstroKitError):
    """An event search failed for a reason other than not finding an event.

    Raised for solver errors, non-monotonic results, exceeded enumeration caps,
    and broken kind sequences.
    """


class EngineQueryFailure(AstroKitError):
    """A plain engine position or horizon query failed."""
