"""
Unit tests for quintic fitting.

Run with: pytest test/test_polynomial.py
"""

import pytest
import math
import numpy as np
from pathspline.planning.polynomial import FIT_MATRIX, QuinticPolynomial, fit_quintic


class TestQuinticPolynomial:
    """Tests for polynomial evaluation."""

    def test_evaluation(self):
        """Test value and derivatives of u^5 + u."""
        p = QuinticPolynomial([1, 0, 0, 0, 1, 0])

        assert abs(p(2.0) - 34.0) < 1e-12
        assert abs(p.value(2.0) - 34.0) < 1e-12
        assert abs(p.derivative(2.0) - (5 * 16 + 1)) < 1e-12
        assert abs(p.second_derivative(2.0) - 20 * 8) < 1e-12

    def test_wrong_coefficient_count(self):
        """Test that a non-quintic coefficient list is rejected."""
        with pytest.raises(ValueError):
            QuinticPolynomial([1.0, 2.0, 3.0])

    def test_coefficients_are_read_only(self):
        """Test the coefficient array cannot be modified."""
        p = QuinticPolynomial([0, 0, 0, 0, 1, 0])

        with pytest.raises(ValueError):
            p.coefficients[0] = 5.0

    def test_shared_matrix_is_read_only(self):
        """Test the shared fit matrix cannot be modified."""
        assert FIT_MATRIX.shape == (6, 6)
        with pytest.raises(ValueError):
            FIT_MATRIX[0, 0] = 2.0


class TestFitQuintic:
    """Tests for the natural quintic boundary fit."""

    @pytest.mark.parametrize("start,end,slope0,slope1", [
        (0.0, 10.0, 1.0, 1.0),
        (3.0, -2.0, math.cos(2.0), math.cos(0.3)),
        (1.0, 1.0, 0.0, -1.0),
    ])
    def test_boundary_conditions(self, start, end, slope0, slope1):
        """Test value, slope and zero second derivative at both ends."""
        p = fit_quintic(start, end, slope0, slope1)

        assert abs(p(0.0) - start) < 1e-9
        assert abs(p(1.0) - end) < 1e-9
        assert abs(p.derivative(0.0) - slope0) < 1e-9
        assert abs(p.derivative(1.0) - slope1) < 1e-9
        assert abs(p.second_derivative(0.0)) < 1e-9
        assert abs(p.second_derivative(1.0)) < 1e-9

    def test_known_coefficients(self):
        """Test the closed-form solution for a 10 m straight run with unit slopes."""
        p = fit_quintic(0.0, 10.0, 1.0, 1.0)

        expected = np.array([54.0, -135.0, 90.0, 0.0, 1.0, 0.0])
        assert np.allclose(p.coefficients, expected, atol=1e-9)

    def test_constant_axis(self):
        """Test an axis with no motion fits the zero polynomial."""
        p = fit_quintic(2.0, 2.0, 0.0, 0.0)

        assert np.allclose(p.coefficients, [0, 0, 0, 0, 0, 2.0], atol=1e-12)
