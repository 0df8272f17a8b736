"""
Spline construction and query demo.

Builds a path through a handful of poses, prints the queries a control
loop makes every cycle, then plots the path with its arc decomposition
and curvature profile.
"""

import sys
sys.path.append('..')

import math
import numpy as np
from pathspline import Pose, Vector2D, LinePath, build
from pathspline.planning.mathutil import to_heading
from pathspline.visualizer import plot_spline, plot_comparison, plot_curvature_profile


def run_demo():
    """Build a spline and exercise every query."""

    print("=" * 80)
    print("WAYPOINT SPLINE DEMO")
    print("=" * 80)

    waypoints = [
        Pose(0.0, 0.0, 0.0),
        Pose(6.0, 1.0, math.pi / 6),
        Pose(9.0, 6.0, math.pi / 2),
        Pose(6.0, 10.0, math.pi),
    ]

    print("\n[1/3] Building spline...")
    spline = build(waypoints)
    print(f"   [OK] {spline}")
    print(f"   [OK] Arc pieces: {spline.piece_count}")
    for i, seg in enumerate(spline.segments):
        print(f"   Segment {i}: length {seg.length:.3f} m, "
              f"s in [{seg.begin_s:.3f}, {seg.end_s:.3f}], {len(seg.pieces)} pieces")

    print("\n[2/3] Sampling queries...")
    for s in np.linspace(0.0, 1.0, 6):
        p = spline.point(float(s))
        t = spline.tangent(float(s))
        k = spline.curvature(float(s))
        print(f"   s={s:.2f}  point=({p.x:7.3f}, {p.y:7.3f})  "
              f"heading={math.degrees(to_heading(t.angle())):7.2f} deg  curvature={k:+.4f}")

    queries = [Vector2D(3.0, 1.5), Vector2D(8.0, 3.0), Vector2D(8.5, 8.0)]
    for q in queries:
        s = spline.closest_point(q)
        s_brent = spline.closest_point_gradient(q, s)
        error = spline.level_set(q, s)
        n = spline.normal(s)
        print(f"   query=({q.x:.1f}, {q.y:.1f})  s={s:.5f}  s_brent={s_brent:.5f}  "
              f"level_set={error:+.4f}  normal=({n.x:+.3f}, {n.y:+.3f})")

    print("\n[3/3] Creating visualization...")
    plot_spline(spline, show_arcs=True, query_points=queries,
                save_path='spline_demo.png', show=False)
    plot_curvature_profile(spline, save_path='spline_curvature.png', show=False)

    direct = LinePath(waypoints[0].position, waypoints[-1].position)
    plot_comparison({'Spline': spline, 'Direct': direct},
                    save_path='spline_vs_direct.png', show=True)

    print("\n" + "=" * 80)
    print("DEMO COMPLETE")
    print("=" * 80)


if __name__ == "__main__":
    run_demo()
