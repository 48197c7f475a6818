"""Immutable position and state vectors (AU, AU/day, J2000 equatorial)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import astronomy
import numpy as np


@dataclass(frozen=True)
class Vector3:
    """Cartesian vector at a time; components in AU unless stated otherwise."""

    x: float
    y: float
    z: float
    time: astronomy.Time

    @classmethod
    def from_array(cls, values: Sequence[float] | np.ndarray, time: astronomy.Time) -> Vector3:
        """Build from a length-3 sequence or array."""
        return cls(float(values[0]), float(values[1]), float(values[2]), time)

    def as_array(self) -> np.ndarray:
        """Return components as a float64 array of shape (3,)."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def length(self) -> float:
        """Euclidean norm."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def is_finite(self) -> bool:
        """True when all components are finite."""
        return bool(np.all(np.isfinite(self.as_array())))

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z, self.time)


@dataclass(frozen=True)
class StateVector:
    """Position (AU) and velocity (AU/day) at one time."""

    position: Vector3
    velocity: Vector3
    time: astronomy.Time

    @classmethod
    def from_components(
        cls,
        position: Sequence[float],
        velocity: Sequence[float],
        time: astronomy.Time,
    ) -> StateVector:
        """Build from two length-3 sequences sharing one time."""
        return cls(
            Vector3.from_array(position, time),
            Vector3.from_array(velocity, time),
            time,
        )

    def as_array(self) -> np.ndarray:
        """Return a length-6 array: position (3) then velocity (3)."""
        return np.concatenate([self.position.as_array(), self.velocity.as_array()])

    def is_finite(self) -> bool:
        """True when position and velocity are finite."""
        return self.position.is_finite() and self.velocity.is_finite()

    def __sub__(self, other: StateVector) -> StateVector:
        return StateVector(
            self.position - other.position,
            self.velocity - other.velocity,
            self.time,
        )


def central_difference(
    before: Vector3, after: Vector3, half_step_days: float, time: astronomy.Time
) -> Vector3:
    """Velocity from positions at time - h and time + h: (after - before) / 2h.

    Parameters:
        before: Position at time - half_step_days.
        after: Position at time + half_step_days.
        half_step_days: The half step h in days.
        time: Time stamp for the result.

    Returns:
        Velocity in AU/day.
    """
    rate = (after.as_array() - before.as_array()) / (2.0 * half_step_days)
    return Vector3.from_array(rate, time)
