"""
Unit tests for spline segments: fitting, curvature and arc decomposition.

Run with: pytest test/test_segment.py
"""

import pytest
import logging
import math
import numpy as np
from pathspline.models.config import SplineConfig
from pathspline.models.pose import Pose, Vector2D
from pathspline.planning.arc import CircularArc
from pathspline.planning.segment import SplineSegment


@pytest.fixture
def curved_segment():
    """Quarter-turn segment from heading east to heading north."""
    return SplineSegment(Pose(0.0, 0.0, 0.0), Pose(4.0, 4.0, math.pi / 2))


def _distance_to_shape(piece, p: Vector2D) -> float:
    """Distance from p to the supporting circle or line of a piece."""
    shape = piece.shape
    if isinstance(shape, CircularArc):
        return abs(p.dist(shape.center) - shape.radius)
    d = shape.end - shape.start
    if d.norm() == 0.0:
        return p.dist(shape.start)
    return abs(d.z_prod(p - shape.start)) / d.norm()


class TestSegmentFit:
    """Tests for waypoint matching."""

    def test_endpoints_match_waypoints(self, curved_segment):
        """Test position at u=0 and u=1."""
        assert curved_segment.position(0.0).dist(Vector2D(0.0, 0.0)) < 1e-9
        assert curved_segment.position(1.0).dist(Vector2D(4.0, 4.0)) < 1e-9

    def test_end_directions_match_headings(self, curved_segment):
        """Test the derivative is the unit heading vector at both ends."""
        v0 = curved_segment.velocity(0.0)
        v1 = curved_segment.velocity(1.0)

        assert v0.dist(Vector2D(1.0, 0.0)) < 1e-9
        assert v1.dist(Vector2D(0.0, 1.0)) < 1e-9

    def test_zero_end_curvature(self, curved_segment):
        """Test the natural boundary condition gives zero curvature at the ends."""
        assert abs(curved_segment.poly_curvature(0.0)) < 1e-9
        assert abs(curved_segment.poly_curvature(1.0)) < 1e-9


class TestCurvature:
    """Tests for signed curvature."""

    def test_left_turn_is_positive(self, curved_segment):
        """Test a counter-clockwise turn has positive curvature mid-segment."""
        assert curved_segment.poly_curvature(0.5) > 0

    def test_right_turn_is_negative(self):
        """Test a clockwise turn has negative curvature mid-segment."""
        seg = SplineSegment(Pose(0.0, 0.0, 0.0), Pose(4.0, -4.0, -math.pi / 2))
        assert seg.poly_curvature(0.5) < 0

    def test_straight_segment_has_zero_curvature(self):
        """Test a straight segment is flat everywhere."""
        seg = SplineSegment(Pose(0.0, 0.0, 0.0), Pose(10.0, 0.0, 0.0))

        for u in np.linspace(0.0, 1.0, 11):
            assert seg.poly_curvature(float(u)) == 0.0

    def test_zero_speed_sentinel(self):
        """Test curvature below the speed threshold is reported as 0, not NaN."""
        seg = SplineSegment(Pose(0.0, 0.0, 0.0), Pose(4.0, 4.0, math.pi / 2),
                            SplineConfig(speed_epsilon=1e12))

        assert seg.poly_curvature(0.5) == 0.0

    def test_cusp_segment_stays_finite(self):
        """Test a segment that stops and reverses along its own line."""
        # Same position at both ends: x(u) runs forward, back, forward again
        seg = SplineSegment(Pose(0.0, 0.0, 0.0), Pose(0.0, 0.0, 0.0))

        for u in np.linspace(0.0, 1.0, 101):
            assert math.isfinite(seg.poly_curvature(float(u)))
        assert seg.length > 0
        assert all(piece.is_chord for piece in seg.pieces)

    def test_reversing_segment_chords_are_monotone(self):
        """Test every chord on a segment that doubles back is run in one direction."""
        # Heading points away from the next waypoint: x(u) overshoots past both ends
        seg = SplineSegment(Pose(0.0, 0.0, 0.0), Pose(-5.0, 0.0, 0.0))

        for piece in seg.pieces:
            shape = piece.shape
            if shape.length < 1e-9:
                continue
            assert 0.0 < shape.mid_fraction < 1.0
            d = shape.end - shape.start
            for u in (piece.t_begin, 0.5 * (piece.t_begin + piece.t_end), piece.t_end):
                assert seg.velocity(u).dot(d) >= 0.0

    def test_reversing_segment_length_counts_overshoot(self):
        """Test the length includes the travel past each end and back."""
        seg = SplineSegment(Pose(0.0, 0.0, 0.0), Pose(-5.0, 0.0, 0.0))
        us = np.linspace(0.0, 1.0, 20001)
        xs = np.array([seg.position(float(u)).x for u in us])
        travelled = np.sum(np.abs(np.diff(xs)))

        assert seg.length > 5.1
        assert abs(seg.length - travelled) < 1e-6


class TestArcDecomposition:
    """Tests for the adaptive subdivision into arcs."""

    def test_pieces_tile_polynomial_range(self, curved_segment):
        """Test the pieces cover u in [0, 1] exactly once, in order."""
        pieces = curved_segment.pieces

        assert pieces[0].t_begin == 0.0
        assert pieces[-1].t_end == 1.0
        for prev, nxt in zip(pieces, pieces[1:]):
            assert prev.t_end == nxt.t_begin
            assert prev.t_begin < prev.t_end

    def test_length_fractions_partition_unit_interval(self, curved_segment):
        """Test begin/end are contiguous, monotonic and end exactly at 1."""
        pieces = curved_segment.pieces

        assert pieces[0].begin == 0.0
        assert pieces[-1].end == 1.0
        for prev, nxt in zip(pieces, pieces[1:]):
            assert prev.end == nxt.begin
            assert prev.begin <= prev.end

    def test_fractions_proportional_to_length(self, curved_segment):
        """Test each piece's share equals its length over the segment length."""
        for piece in curved_segment.pieces[:-1]:
            share = piece.end - piece.begin
            assert abs(share - piece.length / curved_segment.length) < 1e-9

    def test_pieces_respect_thresholds(self, curved_segment):
        """Test every accepted piece is short and nearly constant in curvature."""
        cfg = curved_segment.config
        for piece in curved_segment.pieces:
            assert piece.length <= cfg.max_arc_length + 1e-12
            dk = abs(curved_segment.poly_curvature(piece.t_end)
                     - curved_segment.poly_curvature(piece.t_begin))
            assert dk <= cfg.max_curvature_change + 1e-12

    def test_chord_error_is_bounded(self, curved_segment):
        """Test the curve never strays far from the arc standing in for it."""
        worst = 0.0
        for piece in curved_segment.pieces:
            for f in (0.25, 0.75):
                u = piece.t_begin + f * (piece.t_end - piece.t_begin)
                worst = max(worst, _distance_to_shape(piece, curved_segment.position(u)))

        # Sagitta-order bound for 0.1-long arcs
        assert worst < 1e-3

    def test_length_close_to_polyline(self, curved_segment):
        """Test arc length agrees with a dense polyline estimate."""
        us = np.linspace(0.0, 1.0, 20001)
        pts = np.array([curved_segment.position(float(u)).as_tuple() for u in us])
        polyline = np.sum(np.linalg.norm(np.diff(pts, axis=0), axis=1))

        assert abs(curved_segment.length - polyline) < 1e-3

    def test_depth_cap_accepts_chords(self, caplog):
        """Test subdivision stops at max_depth and falls back to chords."""
        caplog.set_level(logging.WARNING, logger="pathspline.planning.segment")
        seg = SplineSegment(Pose(0.0, 0.0, 0.0), Pose(4.0, 4.0, math.pi / 2),
                            SplineConfig(max_depth=3))

        assert len(seg.pieces) == 8
        assert all(piece.is_chord for piece in seg.pieces)
        assert "max depth" in caplog.text

    def test_straight_segment_uses_chords(self):
        """Test collinear samples produce chords and a bounded piece count."""
        seg = SplineSegment(Pose(0.0, 0.0, 0.0), Pose(10.0, 0.0, 0.0))

        assert all(piece.is_chord for piece in seg.pieces)
        assert len(seg.pieces) < 1000
        assert abs(seg.length - 10.0) < 1e-9


class TestSegmentQueries:
    """Tests for queries by global parameter on a stand-alone segment."""

    def test_point_at_ends(self, curved_segment):
        """Test the default range [0, 1] maps onto the waypoints."""
        assert curved_segment.point(0.0).dist(Vector2D(0.0, 0.0)) < 1e-9
        assert curved_segment.point(1.0).dist(Vector2D(4.0, 4.0)) < 1e-9

    def test_uniform_spacing(self, curved_segment):
        """Test equal steps in s give nearly equal distances along the curve."""
        n = 50
        pts = [curved_segment.point(i / n) for i in range(n + 1)]
        steps = [a.dist(b) for a, b in zip(pts, pts[1:])]
        expected = curved_segment.length / n

        for step in steps:
            assert abs(step - expected) < 0.05 * expected

    def test_project_returns_distance_and_parameter(self, curved_segment):
        """Test projection of an on-curve point."""
        target = curved_segment.point(0.4)
        sq_dist, s = curved_segment.project(target)

        assert sq_dist < 1e-8
        assert abs(s - 0.4) < 1e-3

    def test_containment(self, curved_segment):
        """Test a stand-alone segment owns the whole unit range."""
        assert 0.0 in curved_segment
        assert 1.0 in curved_segment
        assert 1.5 not in curved_segment
