"""
Circular-arc approximation module.

A short stretch of a segment is replaced by the circle through three
samples of it (or by a straight chord when the samples are collinear), so
that nearest-point queries become closed-form projections.

GEOMETRY:
- Circle through a, b, c: with b' = b - a and c' = c - a,
  d = 2 (b'x c'y - b'y c'x), the center is a + ((c'y |b'|^2 - b'y |c'|^2) / d,
  (b'x |c'|^2 - c'x |b'|^2) / d).
- The sweep is signed: positive when a -> b -> c turns counter-clockwise.
- A foot point on the supporting circle belongs to the arc only if its
  angle, measured from the start angle in the sweep direction, lies
  within |sweep|.
"""

import math
from typing import Optional, Union

from ..models.pose import Vector2D
from .mathutil import lerp, normalize_angle


class CircularArc:
    """
    Arc of a circle, traversed from `start_angle` through `sweep` radians.

    Attributes:
        center: Circle center
        radius: Circle radius
        start_angle: Angle of the arc start as seen from the center
        sweep: Signed angular span (positive = counter-clockwise)
        mid_fraction: Arc fraction of the middle sample the arc was fitted to
    """

    def __init__(self, center: Vector2D, radius: float,
                 start_angle: float, sweep: float,
                 mid_fraction: float = 0.5):
        self.center = center
        self.radius = radius
        self.start_angle = start_angle
        self.sweep = sweep
        self.mid_fraction = mid_fraction

    @classmethod
    def from_three_points(cls, a: Vector2D, b: Vector2D, c: Vector2D) -> 'CircularArc':
        """
        Build the arc that starts at `a`, passes through `b` and ends at `c`.

        The points must not be collinear; callers check that first.
        """
        bp = b - a
        cp = c - a
        d = 2.0 * bp.z_prod(cp)
        if d == 0.0:
            raise ValueError("Cannot fit a circle through collinear points")

        b2 = bp.dot(bp)
        c2 = cp.dot(cp)
        center = a + Vector2D((cp.y * b2 - bp.y * c2) / d,
                              (bp.x * c2 - cp.x * b2) / d)
        radius = a.dist(center)

        start = (a - center).angle()
        mid = (b - center).angle()
        end = (c - center).angle()

        if d > 0:
            sweep = normalize_angle(end - start)
            mid_offset = normalize_angle(mid - start)
        else:
            sweep = -normalize_angle(start - end)
            mid_offset = normalize_angle(start - mid)

        mid_fraction = mid_offset / abs(sweep) if sweep != 0.0 else 0.5
        return cls(center, radius, start, sweep, mid_fraction)

    @property
    def length(self) -> float:
        return self.radius * abs(self.sweep)

    @property
    def curvature(self) -> float:
        """Signed curvature, positive for counter-clockwise arcs."""
        return math.copysign(1.0 / self.radius, self.sweep)

    def point_at(self, fraction: float) -> Vector2D:
        """Point at `fraction` of the way along the arc."""
        angle = self.start_angle + fraction * self.sweep
        return self.center + Vector2D.from_angle(angle, self.radius)

    def tangent_at(self, fraction: float) -> Vector2D:
        """Unit direction of travel at `fraction`."""
        radial = Vector2D.from_angle(self.start_angle + fraction * self.sweep)
        return radial.left_normal() if self.sweep > 0 else radial.right_normal()

    def project(self, r: Vector2D, tolerance: float = 1e-9) -> Optional[float]:
        """
        Closest point on the arc to `r`, as an arc fraction in [0, 1].

        Args:
            r: Query point
            tolerance: Angular slack at both ends of the span

        Returns:
            The fraction, or None if the foot point on the supporting
            circle falls outside the arc's angular span
        """
        v = r - self.center
        if v.x == 0.0 and v.y == 0.0:
            # Every point of the arc is equally close
            return 0.0

        theta = v.angle()
        if self.sweep > 0:
            delta = normalize_angle(theta - self.start_angle)
        else:
            delta = normalize_angle(self.start_angle - theta)

        span = abs(self.sweep)
        if delta <= span + tolerance:
            return min(delta / span, 1.0) if span > 0 else 0.0
        if delta >= 2 * math.pi - tolerance:
            return 0.0
        return None

    def __repr__(self) -> str:
        return (f"CircularArc(center={self.center}, radius={self.radius:.4f}, "
                f"sweep={self.sweep:.4f})")


class Chord:
    """
    Straight line piece from `start` to `end`.

    Used where the curve samples are collinear and a circle is undefined,
    or where subdivision hit its depth limit.
    """

    def __init__(self, start: Vector2D, end: Vector2D, mid_fraction: float = 0.5):
        self.start = start
        self.end = end
        self.mid_fraction = mid_fraction

    @classmethod
    def from_three_points(cls, a: Vector2D, b: Vector2D, c: Vector2D) -> 'Chord':
        """Chord from `a` to `c`; `b` only fixes where the middle sample falls."""
        chord = cls(a, c)
        mid = chord.project(b, tolerance=math.inf)
        chord.mid_fraction = 0.5 if mid is None else mid
        return chord

    @property
    def length(self) -> float:
        return self.start.dist(self.end)

    @property
    def curvature(self) -> float:
        return 0.0

    def point_at(self, fraction: float) -> Vector2D:
        return Vector2D(lerp(self.start.x, self.end.x, fraction),
                        lerp(self.start.y, self.end.y, fraction))

    def tangent_at(self, fraction: float) -> Vector2D:
        return (self.end - self.start).normalized()

    def project(self, r: Vector2D, tolerance: float = 1e-9) -> Optional[float]:
        """
        Closest point on the chord to `r`, as a fraction in [0, 1].

        Returns None when the scalar foot point lies outside [0, 1]
        by more than `tolerance`.
        """
        d = self.end - self.start
        sq_len = d.dot(d)
        if sq_len == 0.0:
            return 0.0

        foot = (r - self.start).dot(d) / sq_len
        if -tolerance <= foot <= 1.0 + tolerance:
            return min(max(foot, 0.0), 1.0)
        return None

    def __repr__(self) -> str:
        return f"Chord({self.start} -> {self.end})"


Shape = Union[CircularArc, Chord]


class ArcPiece:
    """
    One leaf of a segment's arc decomposition.

    Ties a shape to the polynomial interval it was sampled from and to
    its share of the segment's length.

    Attributes:
        shape: The CircularArc or Chord
        t_begin: Polynomial parameter at the start of the piece
        t_end: Polynomial parameter at the end of the piece
        begin: Segment length fraction at the start of the piece
        end: Segment length fraction at the end of the piece
    """

    __slots__ = ('shape', 't_begin', 't_end', 'begin', 'end', '_quadratic')

    def __init__(self, shape: Shape, t_begin: float, t_end: float,
                 begin: float = 0.0, end: float = 1.0):
        self.shape = shape
        self.t_begin = t_begin
        self.t_end = t_end
        self.begin = begin
        self.end = end
        self._quadratic = self._quadratic_is_monotone()

    def with_range(self, begin: float, end: float) -> 'ArcPiece':
        """Copy of this piece covering [begin, end] of the segment length."""
        return ArcPiece(self.shape, self.t_begin, self.t_end, begin, end)

    @property
    def length(self) -> float:
        return self.shape.length

    @property
    def is_chord(self) -> bool:
        return isinstance(self.shape, Chord)

    def __contains__(self, w: float) -> bool:
        return self.begin <= w <= self.end

    def parameter_at(self, fraction: float) -> float:
        """
        Polynomial parameter for an arc fraction.

        Interpolates quadratically through the three samples the piece was
        fitted to: (0, t_begin), (mid_fraction, t_mid), (1, t_end). Falls
        back to linear when the quadratic would not be monotone.
        """
        if not self._quadratic:
            return lerp(self.t_begin, self.t_end, fraction)

        m = self.shape.mid_fraction
        t_mid = 0.5 * (self.t_begin + self.t_end)
        l0 = (fraction - m) * (fraction - 1.0) / m
        l1 = fraction * (fraction - 1.0) / (m * (m - 1.0))
        l2 = fraction * (fraction - m) / (1.0 - m)
        return self.t_begin * l0 + t_mid * l1 + self.t_end * l2

    def _quadratic_is_monotone(self) -> bool:
        m = self.shape.mid_fraction
        if not 1e-6 < m < 1.0 - 1e-6:
            return False
        t_mid = 0.5 * (self.t_begin + self.t_end)

        def slope(f: float) -> float:
            return (self.t_begin * (2 * f - m - 1.0) / m
                    + t_mid * (2 * f - 1.0) / (m * (m - 1.0))
                    + self.t_end * (2 * f - m) / (1.0 - m))

        # A quadratic's slope is linear, so checking both ends covers [0, 1]
        return slope(0.0) > 0 and slope(1.0) > 0

    def local_fraction(self, fraction: float) -> float:
        """Segment length fraction for an arc fraction."""
        return lerp(self.begin, self.end, fraction)

    def __repr__(self) -> str:
        return (f"ArcPiece({self.shape!r}, t=[{self.t_begin:.5f}, {self.t_end:.5f}], "
                f"w=[{self.begin:.5f}, {self.end:.5f}])")


def fit_arc(a: Vector2D, b: Vector2D, c: Vector2D,
            collinear_tolerance: float = 1e-9) -> Shape:
    """
    Approximate the curve through three ordered samples.

    Returns:
        A Chord if the samples are collinear within tolerance,
        otherwise the CircularArc through them
    """
    if Vector2D.are_collinear(a, b, c, collinear_tolerance):
        return Chord.from_three_points(a, b, c)
    return CircularArc.from_three_points(a, b, c)
