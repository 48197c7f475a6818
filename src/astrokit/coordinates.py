"""Angular coordinate results: equatorial, ecliptic, and horizontal."""

from __future__ import annotations

from dataclasses import dataclass

import astronomy


@dataclass(frozen=True)
class EquatorialCoordinates:
    """Right ascension (hours, [0, 24)), declination (degrees), distance (AU)."""

    ra_hours: float
    dec_deg: float
    distance_au: float
    time: astronomy.Time


@dataclass(frozen=True)
class EclipticCoordinates:
    """Ecliptic longitude ([0, 360) degrees), latitude (degrees), distance (AU)."""

    longitude_deg: float
    latitude_deg: float
    distance_au: float


@dataclass(frozen=True)
class HorizontalCoordinates:
    """Azimuth and altitude (degrees) with the refracted RA/Dec used to compute them."""

    azimuth_deg: float
    altitude_deg: float
    ra_hours: float
    dec_deg: float
