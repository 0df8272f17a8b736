"""
SPLINE CONFIGURATION MODULE

@Author: Vaishanth Srinivasan
@Description: Tolerances and thresholds that control how a spline is
decomposed into circular arcs and how projections are searched.
"""

from dataclasses import dataclass, fields

from ..exceptions import ConstructionError


@dataclass(frozen=True)
class SplineConfig:
    """
    Construction and query settings for a Spline.

    The defaults give arcs no longer than 0.1 distance units, which keeps
    the projection round trip well inside 1e-3 of the path parameter for
    paths a few metres long.

    Attributes:
        max_arc_length: Longest arc accepted as a leaf of the subdivision
        max_curvature_change: Largest |k(end) - k(begin)| accepted over one arc
        max_depth: Subdivision depth at which an interval is taken as a chord
        collinear_tolerance: Relative cross-product tolerance for collinear samples
        speed_epsilon: Squared speed below which curvature is reported as 0
        angle_tolerance: Slack (radians) when testing a foot point against an arc span
        chord_tolerance: Slack when testing a foot point against a chord's [0, 1]
        gradient_window: Half width of the Brent search bracket around the guess
        gradient_xatol: Absolute parameter tolerance of the Brent search
    """

    # --- SUBDIVISION ---
    max_arc_length: float = 0.1
    max_curvature_change: float = 0.1
    max_depth: int = 20
    collinear_tolerance: float = 1e-9

    # --- NUMERICS ---
    speed_epsilon: float = 1e-12

    # --- PROJECTION ---
    angle_tolerance: float = 1e-9
    chord_tolerance: float = 1e-9
    gradient_window: float = 0.25
    gradient_xatol: float = 1e-8

    def __post_init__(self):
        """Reject settings that would make subdivision or projection ill-defined."""
        for name in ('max_arc_length', 'max_curvature_change',
                     'gradient_window', 'gradient_xatol'):
            if getattr(self, name) <= 0:
                raise ConstructionError(f"{name} must be positive, got {getattr(self, name)}")

        if self.max_depth < 1:
            raise ConstructionError(f"max_depth must be at least 1, got {self.max_depth}")

        for name in ('collinear_tolerance', 'speed_epsilon',
                     'angle_tolerance', 'chord_tolerance'):
            if getattr(self, name) < 0:
                raise ConstructionError(f"{name} must not be negative, got {getattr(self, name)}")

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
