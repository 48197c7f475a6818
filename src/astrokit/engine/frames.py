"""Frame rotation and spherical conversion through SPICE (cspyce).

J2000 and ECLIPJ2000 are SPICE built-in inertial frames, so no kernels are needed.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import cspyce

from astrokit.constants import DEGREES_PER_CIRCLE, DEGREES_PER_HOUR_RA
from astrokit.coordinates import EclipticCoordinates, EquatorialCoordinates
from astrokit.errors import FrameConversionFailure
from astrokit.time_utils import ephemeris_seconds
from astrokit.vectors import Vector3

if TYPE_CHECKING:
    import astronomy

DPR = 180.0 / math.pi

# cspyce maps SPICE errors onto these built-in exception types.
_SPICE_ERRORS = (RuntimeError, ValueError, KeyError, OSError)


def rotation_eqj_ecl(time: astronomy.Time) -> list[list[float]]:
    """Rotation matrix from J2000 mean equator to J2000 mean ecliptic.

    The rotation is fixed; the time only feeds SPICE's ephemeris-time argument.

    Raises:
        FrameConversionFailure: If SPICE rejects the frame request.
    """
    try:
        return [list(row) for row in cspyce.pxform('J2000', 'ECLIPJ2000', ephemeris_seconds(time))]
    except _SPICE_ERRORS as e:
        raise FrameConversionFailure(f'J2000 to ECLIPJ2000 rotation failed: {e}') from e


def rotate(matrix: list[list[float]], vector: Vector3) -> Vector3:
    """Apply a 3x3 rotation to a vector, keeping its time."""
    try:
        rotated = cspyce.mxv(matrix, [vector.x, vector.y, vector.z])
    except _SPICE_ERRORS as e:
        raise FrameConversionFailure(f'Vector rotation failed: {e}') from e
    return Vector3.from_array(rotated, vector.time)


def ecliptic_spherical(vector: Vector3) -> EclipticCoordinates:
    """Convert an ecliptic-frame Cartesian vector to longitude, latitude, distance.

    Longitude is atan2(y, x) shifted into [0, 360); latitude is asin(z / r).

    Raises:
        FrameConversionFailure: If the vector has zero length or is not finite.
    """
    r = vector.length()
    if not math.isfinite(r) or r == 0.0:
        raise FrameConversionFailure(f'Cannot convert vector of length {r} to spherical coordinates')
    longitude = math.atan2(vector.y, vector.x) * DPR
    if longitude < 0.0:
        longitude += DEGREES_PER_CIRCLE
    latitude = math.asin(max(-1.0, min(1.0, vector.z / r))) * DPR
    return EclipticCoordinates(longitude_deg=longitude, latitude_deg=latitude, distance_au=r)


def equatorial_spherical(vector: Vector3) -> EquatorialCoordinates:
    """Convert a J2000 equatorial Cartesian vector to RA (hours), Dec (degrees), distance.

    Raises:
        FrameConversionFailure: If the vector has zero length or SPICE rejects it.
    """
    r = vector.length()
    if not math.isfinite(r) or r == 0.0:
        raise FrameConversionFailure(f'Cannot convert vector of length {r} to RA/Dec')
    try:
        rng, ra, dec = cspyce.recrad([vector.x, vector.y, vector.z])
    except _SPICE_ERRORS as e:
        raise FrameConversionFailure(f'RA/Dec conversion failed: {e}') from e
    return EquatorialCoordinates(
        ra_hours=ra * DPR / DEGREES_PER_HOUR_RA,
        dec_deg=dec * DPR,
        distance_au=float(rng),
        time=vector.time,
    )


def equatorial_to_ecliptic(vector: Vector3) -> EclipticCoordinates:
    """Rotate a J2000 equatorial vector into the ecliptic and convert to spherical."""
    return ecliptic_spherical(rotate(rotation_eqj_ecl(vector.time), vector))
