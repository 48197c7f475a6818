"""Approximate minor-body ephemerides and periodic event enumeration.

This package provides two layers on top of Astronomy Engine:
- Approximate ephemeris: positions of bodies without an analytic model, propagated
  from reference epochs through the engine's gravity simulator
- Periodic events: bounded enumeration of apsides, nodes, moon quarters, eclipses,
  and transits from the engine's "find next occurrence" searches

Frame rotations use SPICE via cspyce; time strings are parsed with rms-julian.
"""

from astrokit.anchors import Anchor, ReferenceEpochTable
from astrokit.approximate import ApproximateEphemeris, chiron
from astrokit.errors import (
    AstroKitError,
    EngineQueryFailure,
    FrameConversionFailure,
    InitializationFailure,
    NotInitialized,
    PropagationFailure,
    SearchFailure,
    SearchNotFound,
)
from astrokit.events.cursor import PeriodicEventCursor
from astrokit.fixed_star import FixedStar
from astrokit.propagation import PropagationSession, propagation_session
from astrokit.vectors import StateVector, Vector3

__all__: list[str] = [
    'Anchor',
    'ApproximateEphemeris',
    'AstroKitError',
    'EngineQueryFailure',
    'FixedStar',
    'FrameConversionFailure',
    'InitializationFailure',
    'NotInitialized',
    'PeriodicEventCursor',
    'PropagationFailure',
    'PropagationSession',
    'ReferenceEpochTable',
    'SearchFailure',
    'SearchNotFound',
    'StateVector',
    'Vector3',
    'chiron',
    'propagation_session',
]
