"""
Visualization module for spline paths.

This module provides functions to visualize a path, its circular-arc
decomposition, closest-point queries and the curvature profile.
"""

import matplotlib.pyplot as plt
import matplotlib.patches as patches
import numpy as np
from typing import Dict, List, Optional, Sequence

from ..models.pose import Pose, Vector2D
from ..planning.arc import CircularArc
from ..planning.path import Path
from ..planning.spline import Spline


def plot_spline(spline: Spline,
                show_arcs: bool = False,
                query_points: Optional[Sequence[Vector2D]] = None,
                num_points: int = 400,
                title: str = "Waypoint Spline",
                save_path: Optional[str] = None,
                show: bool = True):
    """
    Visualize a spline with its waypoints and optional closest-point queries.

    Args:
        spline: Path to draw
        show_arcs: Overlay the circular-arc decomposition
        query_points: Optional positions to project onto the path
        num_points: Number of samples along the curve
        title: Plot title
        save_path: Optional path to save figure
        show: Whether to display the plot

    Returns:
        The matplotlib Figure
    """
    fig, ax = plt.subplots(figsize=(12, 8))

    # Plot the sampled curve
    samples = spline.sample(num_points)
    ax.plot(samples[:, 0], samples[:, 1], 'b-', linewidth=2, label='Spline', zorder=4)

    if show_arcs:
        _plot_arcs(ax, spline)

    _plot_waypoints(ax, spline.waypoints)

    # Plot projections of query points
    if query_points:
        for i, q in enumerate(query_points):
            s = spline.closest_point(q)
            foot = spline.point(s)
            error = spline.level_set(q, s)
            ax.plot(q.x, q.y, 'ko', markersize=6,
                    label='Query' if i == 0 else '', zorder=6)
            ax.plot([q.x, foot.x], [q.y, foot.y], 'k:', linewidth=1, zorder=5)
            ax.annotate(f"s={s:.3f}\ne={error:+.3f}", (q.x, q.y),
                        textcoords='offset points', xytext=(6, 6), fontsize=8)

    ax.set_xlabel('X Position (m)', fontsize=12)
    ax.set_ylabel('Y Position (m)', fontsize=12)
    ax.set_title(f"{title} (length {spline.length:.2f} m)", fontsize=14, fontweight='bold')
    ax.legend(loc='best')
    ax.grid(True, alpha=0.3)
    ax.set_aspect('equal')

    plt.tight_layout()
    _finish(fig, save_path, show)
    return fig


def _plot_waypoints(ax, waypoints: Sequence[Pose], arrow_length: Optional[float] = None):
    """Plot waypoints as squares with heading arrows."""
    xs = [wp.x for wp in waypoints]
    ys = [wp.y for wp in waypoints]
    ax.plot(xs, ys, 'rs', markersize=10, label='Waypoints', zorder=5)

    if arrow_length is None:
        span = max(np.ptp(xs), np.ptp(ys), 1.0)
        arrow_length = 0.05 * span

    for wp in waypoints:
        d = wp.direction * arrow_length
        ax.arrow(wp.x, wp.y, d.x, d.y, width=0.15 * arrow_length,
                 color='red', alpha=0.7, length_includes_head=True, zorder=5)


def _plot_arcs(ax, spline: Spline):
    """Plot arc pieces alternating in colour; chords dashed."""
    colors = ['#2E86AB', '#A23B72']
    for seg in spline.segments:
        for i, piece in enumerate(seg.pieces):
            shape = piece.shape
            color = colors[i % len(colors)]
            if isinstance(shape, CircularArc):
                theta1 = np.degrees(shape.start_angle)
                theta2 = np.degrees(shape.start_angle + shape.sweep)
                lo, hi = min(theta1, theta2), max(theta1, theta2)
                arc = patches.Arc(shape.center.as_tuple(), 2 * shape.radius, 2 * shape.radius,
                                  theta1=lo, theta2=hi, color=color, linewidth=3, alpha=0.6)
                ax.add_patch(arc)
            else:
                ax.plot([shape.start.x, shape.end.x], [shape.start.y, shape.end.y],
                        color=color, linestyle='--', linewidth=3, alpha=0.6)


def plot_comparison(paths_dict: Dict[str, Path],
                    num_points: int = 200,
                    title: str = "Path Comparison",
                    save_path: Optional[str] = None,
                    show: bool = True):
    """
    Compare multiple paths on the same plot.

    Args:
        paths_dict: Dictionary mapping labels to paths
        num_points: Samples per path
        title: Plot title
        save_path: Optional save path
        show: Whether to display

    Returns:
        The matplotlib Figure
    """
    fig, ax = plt.subplots(figsize=(12, 8))

    colors = ['blue', 'green', 'orange', 'purple', 'cyan']
    styles = ['-', '--', '-.', ':']
    s_values = np.linspace(0.0, 1.0, num_points)

    for i, (name, path) in enumerate(paths_dict.items()):
        pts = [path.point(float(s)) for s in s_values]
        ax.plot([p.x for p in pts], [p.y for p in pts],
                color=colors[i % len(colors)], linestyle=styles[i % len(styles)],
                linewidth=2, label=f"{name} ({path.length:.1f} m)", zorder=4)

    ax.set_xlabel('X Position (m)', fontsize=12)
    ax.set_ylabel('Y Position (m)', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.legend(loc='best')
    ax.grid(True, alpha=0.3)
    ax.set_aspect('equal')

    plt.tight_layout()
    _finish(fig, save_path, show)
    return fig


def plot_curvature_profile(path: Path,
                           num_points: int = 400,
                           title: str = "Curvature Along Path",
                           save_path: Optional[str] = None,
                           show: bool = True):
    """
    Plot signed curvature against distance travelled.

    Args:
        path: Path to analyse
        num_points: Number of samples
        title: Plot title
        save_path: Optional save path
        show: Whether to display

    Returns:
        The matplotlib Figure
    """
    s_values = np.linspace(0.0, 1.0, num_points)
    curvatures: List[float] = [path.curvature(float(s)) for s in s_values]
    distances = s_values * path.length

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(distances, curvatures, 'b-', linewidth=2)
    ax.axhline(0.0, color='k', linewidth=0.8, alpha=0.5)
    ax.fill_between(distances, curvatures, alpha=0.3)

    ax.set_xlabel('Distance Along Path (m)', fontsize=12)
    ax.set_ylabel('Curvature (1/m)', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    _finish(fig, save_path, show)
    return fig


def _finish(fig, save_path: Optional[str], show: bool):
    if save_path:
        fig.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"Figure saved to {save_path}")

    if show:
        plt.show()
    else:
        plt.close(fig)


if __name__ == "__main__":
    import math
    from ..planning.spline import build

    spline = build([
        Pose(0.0, 0.0, 0.0),
        Pose(4.0, 2.0, math.pi / 4),
        Pose(6.0, 6.0, math.pi / 2),
    ])

    plot_spline(spline, show_arcs=True,
                query_points=[Vector2D(3.0, 2.5), Vector2D(6.5, 4.0)])
    plot_curvature_profile(spline)
