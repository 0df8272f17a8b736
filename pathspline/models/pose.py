"""
@Author: Vaishanth Srinivasan
@License: MIT

@Description: This module defines the planar value types shared by every
path: a 2D vector and a waypoint pose (position + heading).
"""

from dataclasses import dataclass
import math
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Vector2D:
    """
    Immutable 2D vector.

    Attributes:
        x: X component
        y: Y component
    """
    x: float
    y: float

    @classmethod
    def from_angle(cls, angle: float, magnitude: float = 1.0) -> 'Vector2D':
        """Vector of the given magnitude pointing at `angle` radians (CCW from +x)."""
        return cls(magnitude * math.cos(angle), magnitude * math.sin(angle))

    def __add__(self, other: 'Vector2D') -> 'Vector2D':
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vector2D') -> 'Vector2D':
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> 'Vector2D':
        return Vector2D(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __truediv__(self, k: float) -> 'Vector2D':
        return Vector2D(self.x / k, self.y / k)

    def __neg__(self) -> 'Vector2D':
        return Vector2D(-self.x, -self.y)

    def neg(self) -> 'Vector2D':
        return -self

    def dot(self, other: 'Vector2D') -> float:
        return self.x * other.x + self.y * other.y

    def z_prod(self, other: 'Vector2D') -> float:
        """
        Z component of the 3D cross product (self, 0) x (other, 0).

        Positive when `other` is counter-clockwise from `self`.
        """
        return self.x * other.y - self.y * other.x

    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    def sq_dist(self, other: 'Vector2D') -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def dist(self, other: 'Vector2D') -> float:
        return math.sqrt(self.sq_dist(other))

    def normalized(self) -> 'Vector2D':
        """
        Unit vector in the same direction.

        The zero vector normalizes to itself instead of producing NaN.
        """
        n = self.norm()
        if n == 0.0:
            return Vector2D(0.0, 0.0)
        return Vector2D(self.x / n, self.y / n)

    def right_normal(self) -> 'Vector2D':
        """This vector rotated by -90 degrees."""
        return Vector2D(self.y, -self.x)

    def left_normal(self) -> 'Vector2D':
        """This vector rotated by +90 degrees."""
        return Vector2D(-self.y, self.x)

    def angle(self) -> float:
        return math.atan2(self.y, self.x)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y])

    @staticmethod
    def are_collinear(a: 'Vector2D', b: 'Vector2D', c: 'Vector2D',
                      tolerance: float = 1e-9) -> bool:
        """
        Check whether three points lie on one line.

        Uses the sine of the angle at `a`: the points are collinear when
        |(b - a) x (c - a)| <= tolerance * |b - a| * |c - a|. Coincident
        points count as collinear.

        Args:
            a, b, c: Points to test
            tolerance: Relative tolerance on the cross product

        Returns:
            True if the points are collinear within tolerance
        """
        ab = b - a
        ac = c - a
        scale = ab.norm() * ac.norm()
        if scale == 0.0:
            return True
        return abs(ab.z_prod(ac)) <= tolerance * scale

    def __repr__(self) -> str:
        return f"Vector2D({self.x:.4f}, {self.y:.4f})"


@dataclass(frozen=True)
class Pose:
    """
    A waypoint: position plus the heading the path must pass through it with.

    Attributes:
        x: X position
        y: Y position
        heading: Direction of travel in radians, counter-clockwise from +x
    """
    x: float
    y: float
    heading: float = 0.0

    @property
    def position(self) -> Vector2D:
        return Vector2D(self.x, self.y)

    @property
    def direction(self) -> Vector2D:
        """Unit vector along the heading."""
        return Vector2D.from_angle(self.heading)

    def __repr__(self) -> str:
        return f"Pose(x={self.x:.3f}, y={self.y:.3f}, heading={self.heading:.3f}rad)"
