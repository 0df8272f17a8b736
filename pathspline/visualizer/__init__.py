"""
Visualization module for spline paths.
"""

from .visualizer import (
    plot_spline,
    plot_comparison,
    plot_curvature_profile,
)

__all__ = [
    'plot_spline',
    'plot_comparison',
    'plot_curvature_profile',
]
