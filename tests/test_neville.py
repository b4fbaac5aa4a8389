"""Test module for mathviz.neville

The tests are run using pytest.
These tests ensure that Neville interpolation reproduces its samples and
low degree polynomials, and that degenerate datasets are rejected.
"""

import logging
import math

import numpy as np
import pytest

from mathviz.common import DegenerateDatasetError
from mathviz.neville import NevilleInterpolator

###############################################################################
# Evaluation Tests
###############################################################################


class TestNevilleEvaluate:
    """Test class for NevilleInterpolator.evaluate()."""

    def test_parabola_example(self):
        """Test samples of y=x^2 at -2, 0, 2 evaluated at x=1."""
        interp = NevilleInterpolator([-2.0, 0.0, 2.0], [4.0, 0.0, 4.0])

        assert interp.evaluate(1.0) == pytest.approx(1.0, abs=1e-9)

    def test_exact_on_samples(self):
        """Test that every sample point is reproduced."""
        xs = [-3.0, -1.0, 0.5, 2.0, 4.5]
        ys = [2.0, -1.0, 3.5, 0.25, -2.0]
        interp = NevilleInterpolator(xs, ys)

        for x, y in zip(xs, ys):
            assert interp.evaluate(x) == pytest.approx(y, abs=1e-9)

    @pytest.mark.parametrize("x", [-5.0, -0.3, 0.0, 1.7, 3.0, 10.0])
    def test_reproduces_polynomial(self, x):
        """Test that 4 samples of a cubic reproduce it anywhere."""
        coeffs = [0.5, -2.0, 1.0, 3.0]  # 0.5x^3 - 2x^2 + x + 3
        xs = [-2.0, 0.0, 1.0, 3.0]
        interp = NevilleInterpolator(xs, np.polyval(coeffs, xs))

        assert interp.evaluate(x) == pytest.approx(float(np.polyval(coeffs, x)), abs=1e-9)

    def test_unsorted_x_values(self):
        """Test that the order of the samples does not matter."""
        interp_sorted = NevilleInterpolator([-2.0, 0.0, 2.0], [4.0, 0.0, 4.0])
        interp_shuffled = NevilleInterpolator([2.0, -2.0, 0.0], [4.0, 4.0, 0.0])

        for x in (-1.5, 0.3, 3.0):
            assert interp_shuffled.evaluate(x) == pytest.approx(interp_sorted.evaluate(x), abs=1e-12)

    def test_single_point_is_constant(self):
        """Test that a single sample defines a constant."""
        interp = NevilleInterpolator([1.0], [7.5])

        assert interp.evaluate(-100.0) == 7.5
        assert interp.evaluate(3.0) == 7.5

    def test_callable(self):
        """Test that the interpolator can be called like a function."""
        interp = NevilleInterpolator([0.0, 1.0], [1.0, 3.0])

        assert interp(0.5) == pytest.approx(2.0)

    def test_nan_propagates(self):
        """Test that NaN input yields NaN instead of an error."""
        interp = NevilleInterpolator([0.0, 1.0], [1.0, 3.0])

        assert math.isnan(interp.evaluate(math.nan))


###############################################################################
# Derivative Tests
###############################################################################


class TestNevilleDerivative:
    """Test class for NevilleInterpolator.evaluate_derivative()."""

    def test_parabola_derivative(self):
        """Test d/dx x^2 = 2x from three samples."""
        interp = NevilleInterpolator([-2.0, 0.0, 2.0], [4.0, 0.0, 4.0])

        for x in (-3.0, -1.0, 0.0, 0.5, 2.0):
            assert interp.evaluate_derivative(x) == pytest.approx(2.0 * x, abs=1e-9)

    @pytest.mark.parametrize("x", [-2.0, -0.7, 0.0, 1.3, 4.0])
    def test_reproduces_polynomial_derivative(self, x):
        """Test the derivative of a quartic from 5 samples."""
        coeffs = [0.25, -1.0, 0.5, 2.0, -1.0]
        xs = [-3.0, -1.0, 0.0, 2.0, 3.5]
        interp = NevilleInterpolator(xs, np.polyval(coeffs, xs))

        expected = float(np.polyval(np.polyder(coeffs), x))
        assert interp.evaluate_derivative(x) == pytest.approx(expected, abs=1e-8)

    def test_single_point_derivative(self):
        """Test that a constant has derivative 0."""
        assert NevilleInterpolator([2.0], [5.0]).evaluate_derivative(1.0) == 0.0

    def test_matches_finite_difference(self):
        """Test the derivative against a central difference quotient."""
        interp = NevilleInterpolator([-2.0, -0.5, 1.0, 2.5], [1.0, -1.0, 2.0, 0.0])
        h = 1e-6
        for x in (-1.0, 0.2, 1.8):
            numeric = (interp.evaluate(x + h) - interp.evaluate(x - h)) / (2 * h)
            assert interp.evaluate_derivative(x) == pytest.approx(numeric, abs=1e-6)


###############################################################################
# Dataset Tests
###############################################################################


class TestNevilleDataset:
    """Test class for dataset handling and validation."""

    def test_empty_dataset(self):
        """Test that evaluating without samples fails."""
        interp = NevilleInterpolator()

        assert len(interp) == 0
        with pytest.raises(DegenerateDatasetError, match="at least one"):
            interp.evaluate(0.0)
        with pytest.raises(DegenerateDatasetError, match="at least one"):
            interp.evaluate_derivative(0.0)

    def test_duplicate_x(self):
        """Test that duplicate x-values are rejected."""
        with pytest.raises(DegenerateDatasetError, match="pairwise distinct"):
            NevilleInterpolator([0.0, 1.0, 0.0], [1.0, 2.0, 3.0])

    def test_length_mismatch(self):
        """Test that x- and y-values must pair up."""
        with pytest.raises(DegenerateDatasetError, match="equal length"):
            NevilleInterpolator([0.0, 1.0], [1.0])

    def test_non_finite_x(self):
        """Test that NaN x-values are rejected."""
        with pytest.raises(DegenerateDatasetError, match="finite"):
            NevilleInterpolator([0.0, math.nan], [1.0, 2.0])

    def test_degenerate_is_value_error(self):
        """Test that DegenerateDatasetError can be handled as ValueError."""
        with pytest.raises(ValueError):
            NevilleInterpolator([1.0, 1.0], [1.0, 1.0])

    def test_set_dataset_replaces_and_copies(self):
        """Test that a new dataset replaces the old one and is copied."""
        xs = [0.0, 1.0]
        ys = [0.0, 1.0]
        interp = NevilleInterpolator(xs, ys)
        xs.append(2.0)
        ys.append(4.0)

        assert len(interp) == 2
        assert interp.xs == (0.0, 1.0)

        interp.set_dataset([-2.0, 0.0, 2.0], [4.0, 0.0, 4.0])
        assert len(interp) == 3
        assert interp.ys == (4.0, 0.0, 4.0)
        assert interp.evaluate(1.0) == pytest.approx(1.0)

    def test_failed_set_keeps_previous_dataset(self):
        """Test that an invalid dataset leaves the interpolator unchanged."""
        interp = NevilleInterpolator([0.0, 1.0], [0.0, 1.0])

        with pytest.raises(DegenerateDatasetError):
            interp.set_dataset([0.0, 0.0], [1.0, 2.0])
        assert interp.xs == (0.0, 1.0)

    def test_large_dataset_warns(self, caplog):
        """Test that large datasets are accepted but logged."""
        xs = list(range(12))
        with caplog.at_level(logging.WARNING, logger="mathviz.neville"):
            interp = NevilleInterpolator(xs, [x * 0.5 for x in xs])

        assert len(interp) == 12
        assert "oscillate" in caplog.text
        assert interp.evaluate(3.0) == pytest.approx(1.5, abs=1e-9)
