"""Value types and configuration for path construction."""

from .pose import Pose, Vector2D
from .config import SplineConfig

__all__ = ['Pose', 'Vector2D', 'SplineConfig']
