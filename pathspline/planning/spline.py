"""
Waypoint spline module.

Builds a smooth path through an ordered list of poses: one natural
quintic segment per consecutive waypoint pair, each decomposed into
short circular arcs. The exposed parameter s in [0, 1] is normalized by
arc length at both levels (arc within segment, segment within path), so
equal steps in s are approximately equal distances travelled.

HOW A QUERY IS ANSWERED:

    s  --(segment with begin_s <= s <= end_s)-->  segment fraction w
       --(arc piece with begin <= w <= end)----->  arc fraction
       --(quadratic through the arc's samples)-->  polynomial u
       --(x_poly(u), y_poly(u))----------------->  point

Closest-point search runs the other way: every arc projects the query in
closed form, the nearest accepted foot point wins, and its arc fraction
is mapped back up to s.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import minimize_scalar

from ..exceptions import ConstructionError, DomainError
from ..models.config import SplineConfig
from ..models.pose import Pose, Vector2D
from .path import Path, check_parameter
from .segment import SplineSegment

logger = logging.getLogger(__name__)


class Spline(Path):
    """
    Smooth path through waypoints with matched position and heading.

    Curvature is zero at every waypoint on both sides, so it is
    continuous across joints only in that trivial sense; position and
    heading are matched exactly.

    Attributes:
        waypoints: The poses the path passes through
        config: Subdivision and projection settings
        segments: One SplineSegment per consecutive waypoint pair
    """

    def __init__(self, waypoints: Sequence[Pose],
                 config: Optional[SplineConfig] = None):
        """
        Build every segment, its arc table and the global length table.

        Args:
            waypoints: At least two poses, in travel order
            config: Optional SplineConfig (defaults if None)

        Raises:
            ConstructionError: If fewer than two waypoints are given or
                a segment cannot be fitted
        """
        waypoints = tuple(waypoints)
        if len(waypoints) < 2:
            raise ConstructionError(
                f"A spline needs at least 2 waypoints, got {len(waypoints)}"
            )

        self.waypoints: Tuple[Pose, ...] = waypoints
        self.config = config or SplineConfig()

        segments = [SplineSegment(waypoints[i], waypoints[i + 1], self.config)
                    for i in range(len(waypoints) - 1)]
        self._length = sum(seg.length for seg in segments)
        self._assign_ranges(segments)
        self.segments: Tuple[SplineSegment, ...] = tuple(segments)

        logger.debug("Spline built: %d segments, %d arc pieces, length %.4f",
                     len(self.segments), self.piece_count, self._length)

    def _assign_ranges(self, segments: List[SplineSegment]):
        """Share [0, 1] between segments in proportion to their lengths."""
        count = len(segments)
        accum = 0.0
        for i, seg in enumerate(segments):
            if self._length > 0:
                share = seg.length / self._length
            else:
                share = 1.0 / count
            end = 1.0 if i == count - 1 else accum + share
            seg._assign_range(accum, end)
            accum = end

    # ------------------------------------------------------------------
    # Basic geometry
    # ------------------------------------------------------------------

    @property
    def length(self) -> float:
        return self._length

    @property
    def piece_count(self) -> int:
        return sum(len(seg.pieces) for seg in self.segments)

    def segment_for(self, s: float) -> SplineSegment:
        """
        Segment owning the global parameter s.

        Raises:
            DomainError: If s is outside [0, 1]
        """
        check_parameter(s)
        for seg in self.segments:
            if s in seg:
                return seg
        raise DomainError(f"No segment claims s={s}")

    def point(self, s: float) -> Vector2D:
        return self.segment_for(s).point(s)

    def tangent(self, s: float) -> Vector2D:
        return self.segment_for(s).tangent(s)

    def curvature(self, s: float) -> float:
        return self.segment_for(s).curvature(s)

    def sample(self, num_points: int = 100) -> np.ndarray:
        """
        Points at evenly spaced s.

        Args:
            num_points: Number of samples (at least 2)

        Returns:
            Array of shape (num_points, 2)
        """
        s_values = np.linspace(0.0, 1.0, max(num_points, 2))
        return np.array([self.point(float(s)).as_tuple() for s in s_values])

    # ------------------------------------------------------------------
    # Closest point
    # ------------------------------------------------------------------

    def closest_point(self, r: Vector2D, guess: float = 0.0) -> float:
        """
        Travel fraction of the nearest path point to r.

        Uses the exhaustive arc scan; `guess` is accepted for interface
        compatibility and ignored.

        Raises:
            DomainError: If no arc accepted the projection (r is off path,
                typically beyond one of the path ends)
        """
        return self.closest_point_arcs(r)

    def closest_point_arcs(self, r: Vector2D) -> float:
        """
        Project r on every arc of every segment and keep the nearest foot point.

        Raises:
            DomainError: If no arc accepted the projection
        """
        best: Optional[Tuple[float, float]] = None
        for seg in self.segments:
            candidate = seg.project(r)
            if candidate is not None and (best is None or candidate[0] < best[0]):
                best = candidate

        if best is None:
            raise DomainError(f"Point {r} outside projection domain")
        return best[1]

    def closest_point_gradient(self, r: Vector2D, guess: float) -> float:
        """
        Refine the nearest travel fraction with a bounded Brent search.

        Minimizes |point(t) - r|^2 over [guess - w, guess + w] clipped to
        [0, 1], where w is config.gradient_window. Finds a local minimum
        only, so the guess must be near the answer.

        Args:
            r: Query point
            guess: Starting estimate of s

        Returns:
            The minimizing s
        """
        check_parameter(guess)
        window = self.config.gradient_window
        lo = max(0.0, guess - window)
        hi = min(1.0, guess + window)

        result = minimize_scalar(
            lambda t: self.point(float(t)).sq_dist(r),
            bounds=(lo, hi),
            method='bounded',
            options={'xatol': self.config.gradient_xatol},
        )
        if not result.success:
            logger.warning("Brent search around s=%.4f did not converge: %s",
                           guess, result.message)
        return float(min(max(result.x, 0.0), 1.0))

    def __repr__(self) -> str:
        return (f"Spline(waypoints={len(self.waypoints)}, "
                f"segments={len(self.segments)}, length={self._length:.3f})")


def build(waypoints: Sequence[Pose], config: Optional[SplineConfig] = None) -> Spline:
    """
    Build a Spline through the given waypoints (convenience wrapper).

    Args:
        waypoints: At least two poses
        config: Optional SplineConfig

    Returns:
        The constructed Spline

    Raises:
        ConstructionError: If the waypoint list is malformed
    """
    return Spline(waypoints, config)


if __name__ == "__main__":
    import math

    spline = build([
        Pose(0.0, 0.0, 0.0),
        Pose(5.0, 5.0, math.pi / 2),
        Pose(0.0, 10.0, math.pi),
    ])

    print(spline)
    print(f"Arc pieces: {spline.piece_count}")
    for s in (0.0, 0.25, 0.5, 0.75, 1.0):
        print(f"s={s:.2f}  point={spline.point(s)}  tangent={spline.tangent(s)}  "
              f"curvature={spline.curvature(s):.4f}")

    query = Vector2D(4.0, 4.0)
    s_closest = spline.closest_point(query)
    print(f"\nClosest s to {query}: {s_closest:.4f}")
    print(f"Level set: {spline.level_set(query, s_closest):.4f}")
    print(f"Normal: {spline.normal(s_closest)}")
