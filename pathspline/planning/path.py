"""
Path interface module.

Controllers consume any Path through the same queries: point and tangent
at a normalized travel fraction s in [0, 1], the closest s to a position,
and the signed lateral error (level set) with its gradient.
"""

from abc import ABC, abstractmethod

from ..exceptions import ConstructionError, DomainError
from ..models.pose import Vector2D


def check_parameter(s: float) -> float:
    """
    Validate a path parameter.

    Raises:
        DomainError: If s is NaN or outside [0, 1]
    """
    if not 0.0 <= s <= 1.0:
        raise DomainError(f"Path parameter {s} outside [0, 1]")
    return s


class Path(ABC):
    """
    A planar curve parameterized by travel fraction s in [0, 1].

    Subclasses provide the geometry; the path-following quantities
    (level set, normal, error gradient) are derived from it here.
    """

    @property
    @abstractmethod
    def length(self) -> float:
        """Total (approximate) arc length."""

    @abstractmethod
    def point(self, s: float) -> Vector2D:
        """Point at travel fraction s."""

    @abstractmethod
    def tangent(self, s: float) -> Vector2D:
        """Unit tangent at travel fraction s."""

    @abstractmethod
    def closest_point(self, r: Vector2D, guess: float = 0.0) -> float:
        """Travel fraction of the point on the path nearest to r."""

    def curvature(self, s: float) -> float:
        """Signed curvature at s; straight paths keep the default of 0."""
        check_parameter(s)
        return 0.0

    def level_set(self, r: Vector2D, s: float) -> float:
        """
        Signed lateral distance from r to the path point at s.

        The sign is that of tangent x (path point - r): positive when r
        lies to the right of the direction of travel, negative to the
        left, zero on the path or on the tangent line through point(s).

        Args:
            r: Query position
            s: Path parameter, normally closest_point(r)

        Returns:
            Signed distance
        """
        path_pt = self.point(s)
        path_tangent = self.tangent(s)
        pt_path_vec = (r - path_pt).normalized().neg()
        z = path_tangent.z_prod(pt_path_vec)
        sign = (z > 0.0) - (z < 0.0)
        return sign * r.dist(path_pt)

    def normal(self, s: float) -> Vector2D:
        """Tangent at s rotated by -90 degrees: the direction in which level_set grows."""
        return self.tangent(s).right_normal()

    def error_gradient(self, r: Vector2D, s: float) -> Vector2D:
        """Gradient of level_set with respect to r, evaluated at the foot point s."""
        return self.normal(s)


class LinePath(Path):
    """
    Straight path from `start` to `end`.

    Projections whose foot point lies beyond either end are reported
    as off path rather than clamped.
    """

    def __init__(self, start: Vector2D, end: Vector2D):
        if start == end:
            raise ConstructionError("LinePath needs two distinct points")
        self.start = start
        self.end = end
        self._delta = end - start
        self._length = self._delta.norm()

    @property
    def length(self) -> float:
        return self._length

    def point(self, s: float) -> Vector2D:
        check_parameter(s)
        return self.start + self._delta * s

    def tangent(self, s: float) -> Vector2D:
        check_parameter(s)
        return self._delta / self._length

    def closest_point(self, r: Vector2D, guess: float = 0.0) -> float:
        s = (r - self.start).dot(self._delta) / (self._length * self._length)
        if not 0.0 <= s <= 1.0:
            raise DomainError(f"Point {r} projects outside the line (s={s:.4f})")
        return s

    def __repr__(self) -> str:
        return f"LinePath({self.start} -> {self.end})"
