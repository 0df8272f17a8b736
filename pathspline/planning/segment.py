"""
Spline segment module.

One segment joins two consecutive waypoints with a natural quintic per
axis, then decomposes itself into short circular arcs so that lengths
and nearest points can be computed in closed form.

Parameters used in this module:
- u: native polynomial parameter in [0, 1] (not proportional to distance)
- w: segment length fraction in [0, 1], built from the arc lengths
- s: global path parameter; the segment owns [begin_s, end_s]
"""

import bisect
import logging
from typing import List, Optional, Tuple

from ..models.config import SplineConfig
from ..models.pose import Pose, Vector2D
from .arc import ArcPiece, Chord, Shape, fit_arc
from .mathutil import inv_lerp, lerp
from .polynomial import QuinticPolynomial, fit_quintic

logger = logging.getLogger(__name__)


class SplineSegment:
    """
    Quintic Hermite piece between two waypoints.

    Attributes:
        start: Waypoint at u = 0
        end: Waypoint at u = 1
        x_poly: Quintic for the x axis
        y_poly: Quintic for the y axis
        pieces: Ordered arc approximations tiling u in [0, 1]
        length: Sum of the arc lengths
        begin_s: Global path parameter where this segment starts
        end_s: Global path parameter where this segment ends
    """

    def __init__(self, start: Pose, end: Pose,
                 config: Optional[SplineConfig] = None):
        """
        Fit the segment and build its arc table.

        Args:
            start: First waypoint
            end: Second waypoint
            config: Subdivision thresholds (defaults if None)
        """
        self.config = config or SplineConfig()
        self.start = start
        self.end = end

        start_dir = start.direction
        end_dir = end.direction
        self.x_poly: QuinticPolynomial = fit_quintic(start.x, end.x, start_dir.x, end_dir.x)
        self.y_poly: QuinticPolynomial = fit_quintic(start.y, end.y, start_dir.y, end_dir.y)

        leaves = self._subdivide()
        self.length = sum(piece.length for piece in leaves)
        self.pieces: Tuple[ArcPiece, ...] = tuple(self._normalize(leaves))
        self._piece_ends = [piece.end for piece in self.pieces]

        self._begin_s = 0.0
        self._end_s = 1.0

        logger.debug("Segment %s -> %s: %d pieces (%d chords), length %.4f",
                     start, end, len(self.pieces),
                     sum(1 for p in self.pieces if p.is_chord), self.length)

    # ------------------------------------------------------------------
    # Global range
    # ------------------------------------------------------------------

    @property
    def begin_s(self) -> float:
        return self._begin_s

    @property
    def end_s(self) -> float:
        return self._end_s

    def _assign_range(self, begin_s: float, end_s: float):
        """Set the global share. Only the owning Spline calls this, once."""
        self._begin_s = begin_s
        self._end_s = end_s

    def __contains__(self, s: float) -> bool:
        return self._begin_s <= s <= self._end_s

    # ------------------------------------------------------------------
    # Polynomial-parameter geometry
    # ------------------------------------------------------------------

    def position(self, u: float) -> Vector2D:
        return Vector2D(self.x_poly(u), self.y_poly(u))

    def velocity(self, u: float) -> Vector2D:
        """Derivative vector (x'(u), y'(u)); not unit length."""
        return Vector2D(self.x_poly.derivative(u), self.y_poly.derivative(u))

    def poly_curvature(self, u: float) -> float:
        """
        Signed curvature at polynomial parameter u.

        k = (x'y'' - y'x'') / (x'^2 + y'^2)^1.5

        Returns:
            Curvature in 1/distance; 0.0 at a zero-speed point
        """
        dx = self.x_poly.derivative(u)
        dy = self.y_poly.derivative(u)
        ddx = self.x_poly.second_derivative(u)
        ddy = self.y_poly.second_derivative(u)

        speed_sq = dx * dx + dy * dy
        if speed_sq <= self.config.speed_epsilon:
            return 0.0
        return (dx * ddy - dy * ddx) / speed_sq ** 1.5

    # ------------------------------------------------------------------
    # Arc decomposition
    # ------------------------------------------------------------------

    def _subdivide(self) -> List[ArcPiece]:
        """
        Split u in [0, 1] into arcs short and flat enough to stand in for the curve.

        Intervals are processed from an explicit stack, left half on top,
        so leaves come out in order of increasing u. An interval at
        max_depth is taken as a chord without further checks.
        """
        cfg = self.config
        leaves: List[ArcPiece] = []
        capped = 0
        stack: List[Tuple[float, float, int]] = [(0.0, 1.0, 0)]

        while stack:
            t_begin, t_end, depth = stack.pop()
            t_mid = 0.5 * (t_begin + t_end)
            p_begin = self.position(t_begin)
            p_mid = self.position(t_mid)
            p_end = self.position(t_end)

            if depth >= cfg.max_depth:
                capped += 1
                leaves.append(ArcPiece(Chord.from_three_points(p_begin, p_mid, p_end),
                                       t_begin, t_end))
                continue

            shape: Shape = fit_arc(p_begin, p_mid, p_end, cfg.collinear_tolerance)
            if isinstance(shape, Chord):
                # The chord alone misses back-and-forth motion between the samples
                span = max(p_begin.dist(p_mid) + p_mid.dist(p_end),
                           self._simpson_length(t_begin, t_end))
                covered = self._runs_along(shape, t_begin, t_mid, t_end)
            else:
                span = shape.length
                covered = True

            dk = abs(self.poly_curvature(t_end) - self.poly_curvature(t_begin))
            if covered and span <= cfg.max_arc_length and dk <= cfg.max_curvature_change:
                leaves.append(ArcPiece(shape, t_begin, t_end))
            else:
                stack.append((t_mid, t_end, depth + 1))
                stack.append((t_begin, t_mid, depth + 1))

        if capped:
            logger.warning("Subdivision of segment %s -> %s hit max depth %d on %d intervals",
                           self.start, self.end, cfg.max_depth, capped)
        return leaves

    def _runs_along(self, chord: Chord, *ts: float) -> bool:
        """
        Check that the curve moves from chord.start towards chord.end.

        The middle sample must fall strictly inside the chord and the
        velocity at every sample must point along it. A curve that stops
        and reverses on its own line fails this, so the overshoot past
        either end is never left uncovered.
        """
        if not 0.0 < chord.mid_fraction < 1.0:
            return False
        d = chord.end - chord.start
        return all(self.velocity(t).dot(d) > 0.0 for t in ts)

    def _simpson_length(self, t_begin: float, t_end: float) -> float:
        """Simpson estimate of the curve length over [t_begin, t_end] from the speed."""
        t_mid = 0.5 * (t_begin + t_end)
        return (t_end - t_begin) / 6.0 * (self.velocity(t_begin).norm()
                                          + 4.0 * self.velocity(t_mid).norm()
                                          + self.velocity(t_end).norm())

    def _normalize(self, leaves: List[ArcPiece]) -> List[ArcPiece]:
        """Give each piece its share of the segment length as a [begin, end] range."""
        count = len(leaves)
        pieces = []
        accum = 0.0
        for i, leaf in enumerate(leaves):
            if self.length > 0:
                share = leaf.length / self.length
            else:
                share = 1.0 / count
            end = 1.0 if i == count - 1 else accum + share
            pieces.append(leaf.with_range(accum, end))
            accum = end
        return pieces

    # ------------------------------------------------------------------
    # Global-parameter queries
    # ------------------------------------------------------------------

    def local_fraction(self, s: float) -> float:
        """Segment length fraction w for a global parameter s."""
        return inv_lerp(self._begin_s, self._end_s, s)

    def piece_for(self, w: float) -> ArcPiece:
        """Arc piece whose [begin, end] contains the length fraction w."""
        idx = bisect.bisect_left(self._piece_ends, w)
        return self.pieces[min(idx, len(self.pieces) - 1)]

    def parameter_at(self, s: float) -> float:
        """Polynomial parameter u for a global parameter s owned by this segment."""
        w = self.local_fraction(s)
        piece = self.piece_for(w)
        fraction = inv_lerp(piece.begin, piece.end, w)
        return piece.parameter_at(fraction)

    def point(self, s: float) -> Vector2D:
        return self.position(self.parameter_at(s))

    def tangent(self, s: float) -> Vector2D:
        return self.velocity(self.parameter_at(s)).normalized()

    def curvature(self, s: float) -> float:
        return self.poly_curvature(self.parameter_at(s))

    def project(self, r: Vector2D) -> Optional[Tuple[float, float]]:
        """
        Nearest point of this segment's arcs to r.

        Args:
            r: Query point

        Returns:
            (squared distance, global s) of the best accepted arc foot
            point, or None if no arc accepted the projection
        """
        best: Optional[Tuple[float, float]] = None
        for piece in self.pieces:
            tol = (self.config.chord_tolerance if piece.is_chord
                   else self.config.angle_tolerance)
            fraction = piece.shape.project(r, tol)
            if fraction is None:
                continue
            sq_dist = piece.shape.point_at(fraction).sq_dist(r)
            if best is None or sq_dist < best[0]:
                w = piece.local_fraction(fraction)
                best = (sq_dist, lerp(self._begin_s, self._end_s, w))
        return best

    def __repr__(self) -> str:
        return (f"SplineSegment({self.start} -> {self.end}, length={self.length:.4f}, "
                f"s=[{self._begin_s:.4f}, {self._end_s:.4f}])")
