"""
Quintic polynomial module.

Each spline segment is one quintic per axis over u in [0, 1], fitted to
match position and unit heading direction at both ends with zero second
derivative ("natural" ends).
"""

import numpy as np
from typing import Sequence
from scipy.linalg import lu_factor, lu_solve

from ..exceptions import ConstructionError


# Rows are the boundary conditions, columns the coefficients c5..c0:
# p(1), p(0), p'(1), p'(0), p''(1), p''(0)
FIT_MATRIX = np.array([
    [ 1.0,  1.0, 1.0, 1.0, 1.0, 1.0],
    [ 0.0,  0.0, 0.0, 0.0, 0.0, 1.0],
    [ 5.0,  4.0, 3.0, 2.0, 1.0, 0.0],
    [ 0.0,  0.0, 0.0, 0.0, 1.0, 0.0],
    [20.0, 12.0, 6.0, 2.0, 0.0, 0.0],
    [ 0.0,  0.0, 0.0, 2.0, 0.0, 0.0],
])
FIT_MATRIX.setflags(write=False)

# Factored once and shared by every segment and axis
_FIT_LU, _FIT_PIV = lu_factor(FIT_MATRIX)
_FIT_LU.setflags(write=False)


class QuinticPolynomial:
    """
    Degree-5 polynomial p(u) = c5*u^5 + c4*u^4 + ... + c0.

    Attributes:
        coefficients: Read-only array [c5, c4, c3, c2, c1, c0]
    """

    DEGREE = 5

    def __init__(self, coefficients: Sequence[float]):
        """
        Args:
            coefficients: Six coefficients, highest power first
        """
        coeffs = np.array(coefficients, dtype=float)
        if coeffs.shape != (self.DEGREE + 1,):
            raise ValueError(f"Quintic needs {self.DEGREE + 1} coefficients, got {coeffs.shape}")
        coeffs.setflags(write=False)
        self._coefficients = coeffs

        d1 = np.polyder(coeffs)
        d2 = np.polyder(d1)
        d1.setflags(write=False)
        d2.setflags(write=False)
        self._d1 = d1
        self._d2 = d2

    @property
    def coefficients(self) -> np.ndarray:
        return self._coefficients

    def __call__(self, u: float) -> float:
        return float(np.polyval(self._coefficients, u))

    value = __call__

    def derivative(self, u: float) -> float:
        """First derivative dp/du."""
        return float(np.polyval(self._d1, u))

    def second_derivative(self, u: float) -> float:
        """Second derivative d2p/du2."""
        return float(np.polyval(self._d2, u))

    def __repr__(self) -> str:
        terms = ", ".join(f"{c:.4g}" for c in self._coefficients)
        return f"QuinticPolynomial([{terms}])"


def fit_quintic(start: float, end: float,
                start_slope: float, end_slope: float) -> QuinticPolynomial:
    """
    Fit the natural quintic through two boundary values.

    Args:
        start: p(0)
        end: p(1)
        start_slope: p'(0), the heading direction component at the start
        end_slope: p'(1), the heading direction component at the end

    Returns:
        Polynomial with p''(0) = p''(1) = 0

    Raises:
        ConstructionError: If the shared fit matrix is singular
    """
    if np.any(np.diag(_FIT_LU) == 0.0):
        raise ConstructionError("Quintic fit matrix is singular")

    rhs = np.array([end, start, end_slope, start_slope, 0.0, 0.0])
    coeffs = lu_solve((_FIT_LU, _FIT_PIV), rhs)

    if not np.all(np.isfinite(coeffs)):
        raise ConstructionError(
            f"Non-finite quintic coefficients for boundary values {rhs.tolist()}"
        )
    return QuinticPolynomial(coeffs)
