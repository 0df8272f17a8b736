"""
Scalar helpers for interpolation and angle wrapping.
"""

import math


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation: a at t=0, b at t=1."""
    return (b - a) * t + a


def inv_lerp(a: float, b: float, value: float) -> float:
    """
    Inverse of lerp: where `value` falls between a and b.

    A zero-width interval maps everything to 0.
    """
    if b == a:
        return 0.0
    return (value - a) / (b - a)


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [0, 2*pi)."""
    a = math.fmod(angle, 2 * math.pi)
    if a < 0:
        a += 2 * math.pi
    # fmod of a tiny negative number can round up to exactly 2*pi
    if a >= 2 * math.pi:
        a = 0.0
    return a


def to_heading(angle: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    a = normalize_angle(angle)
    if a > math.pi:
        a -= 2 * math.pi
    return a
