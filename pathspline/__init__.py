"""
pathspline

A Python library for smooth waypoint paths with arc-length
parameterization and closed-form closest-point queries for path following.
"""

__version__ = "0.1.0"
__author__ = "Vaishanth Srinivasan"
__license__ = "MIT"

# Import main classes for easy access
from .exceptions import PathError, ConstructionError, DomainError
from .models.pose import Pose, Vector2D
from .models.config import SplineConfig
from .planning.path import Path, LinePath
from .planning.spline import Spline, build

__all__ = [
    'PathError',
    'ConstructionError',
    'DomainError',
    'Pose',
    'Vector2D',
    'SplineConfig',
    'Path',
    'LinePath',
    'Spline',
    'build',
]
