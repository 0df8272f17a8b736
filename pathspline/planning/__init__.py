"""
Planning module: quintic fitting, arc decomposition and path queries.
"""

from .polynomial import QuinticPolynomial, fit_quintic
from .arc import CircularArc, Chord, ArcPiece, fit_arc
from .segment import SplineSegment
from .path import Path, LinePath
from .spline import Spline, build

__all__ = [
    'QuinticPolynomial',
    'fit_quintic',
    'CircularArc',
    'Chord',
    'ArcPiece',
    'fit_arc',
    'SplineSegment',
    'Path',
    'LinePath',
    'Spline',
    'build',
]
