"""
Smoke tests for the plotting helpers.

Run with: pytest test/test_visualizer.py
"""

import matplotlib
matplotlib.use("Agg")

import pytest
import math
from pathspline import LinePath, Pose, Vector2D, build
from pathspline.visualizer import plot_comparison, plot_curvature_profile, plot_spline


@pytest.fixture
def spline():
    """Small two-segment spline."""
    return build([
        Pose(0.0, 0.0, 0.0),
        Pose(4.0, 2.0, math.pi / 4),
        Pose(6.0, 6.0, math.pi / 2),
    ])


class TestPlots:
    """Tests that every plot renders and saves without a display."""

    def test_plot_spline(self, spline, tmp_path):
        out = tmp_path / "spline.png"
        q = spline.point(0.3) + spline.normal(0.3) * 0.3
        fig = plot_spline(spline, show_arcs=True, query_points=[q],
                          num_points=50, save_path=str(out), show=False)

        assert fig is not None
        assert out.exists()

    def test_plot_comparison(self, spline, tmp_path):
        out = tmp_path / "compare.png"
        line = LinePath(Vector2D(0.0, 0.0), Vector2D(6.0, 6.0))
        plot_comparison({"Spline": spline, "Line": line}, num_points=50,
                        save_path=str(out), show=False)

        assert out.exists()

    def test_plot_curvature_profile(self, spline, tmp_path):
        out = tmp_path / "curvature.png"
        plot_curvature_profile(spline, num_points=50, save_path=str(out), show=False)

        assert out.exists()
