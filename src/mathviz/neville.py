"""Polynomial interpolation through a small set of sample points using Neville's algorithm."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from mathviz.common import DegenerateDatasetError, Number
from mathviz.consts import NEVILLE_RECOMMENDED_MAX_POINTS

logger = logging.getLogger(__name__)


class NevilleInterpolator:
    """
    Evaluates the unique polynomial of degree n-1 through n sample points (x_i, y_i).

    The polynomial is never formed explicitly. Neville's tableau combines pairs
    of lower degree interpolants

        Q[i..i+k](x) = ((x - x[i+k]) * Q[i..i+k-1](x) - (x - x[i]) * Q[i+1..i+k](x)) / (x[i] - x[i+k])

    for k = 1 .. n-1, Q[0..n-1](x) is the result. Evaluation costs O(n^2).

    Keep the dataset small (a handful of points). High degree interpolation
    through many points oscillates strongly between and beyond the samples
    (Runge's phenomenon). Larger datasets are accepted but logged as a warning.

    The x-values need not be sorted but must be pairwise distinct and finite.
    """

    def __init__(self, xs: Optional[Sequence[Number]] = None, ys: Optional[Sequence[Number]] = None):
        self._xs: List[float] = []
        self._ys: List[float] = []
        if xs is not None or ys is not None:
            self.set_dataset([] if xs is None else xs, [] if ys is None else ys)

    def set_dataset(self, xs: Sequence[Number], ys: Sequence[Number]) -> None:
        """
        Replace the sample points, the sequences are copied.

        An empty dataset is accepted, evaluating it raises DegenerateDatasetError.

        Raises:
            DegenerateDatasetError: If xs and ys differ in length, an x-value is
                not finite or two x-values are equal
        """
        new_xs = [float(x) for x in xs]
        new_ys = [float(y) for y in ys]
        if len(new_xs) != len(new_ys):
            raise DegenerateDatasetError(
                f"x- and y-values must have equal length, got {len(new_xs)} and {len(new_ys)}."
            )
        seen = set()
        for x in new_xs:
            if not math.isfinite(x):
                raise DegenerateDatasetError(f"x-values must be finite, got {x}.")
            if x in seen:
                raise DegenerateDatasetError(f"x-values must be pairwise distinct, {x} occurs twice.")
            seen.add(x)
        if len(new_xs) > NEVILLE_RECOMMENDED_MAX_POINTS:
            logger.warning(
                "Interpolating %d points, polynomials above degree %d tend to oscillate",
                len(new_xs),
                NEVILLE_RECOMMENDED_MAX_POINTS - 1,
            )
        self._xs = new_xs
        self._ys = new_ys

    @property
    def xs(self) -> Tuple[float, ...]:
        """The x-values of the dataset."""
        return tuple(self._xs)

    @property
    def ys(self) -> Tuple[float, ...]:
        """The y-values of the dataset."""
        return tuple(self._ys)

    def __len__(self) -> int:
        return len(self._xs)

    def _check_dataset(self) -> None:
        if not self._xs:
            raise DegenerateDatasetError("Interpolation requires at least one sample point.")

    def evaluate(self, x: float) -> float:
        """
        Value of the interpolating polynomial at x.

        Raises:
            DegenerateDatasetError: If the dataset is empty
        """
        self._check_dataset()
        xs = self._xs
        q = list(self._ys)
        n = len(xs)
        for k in range(1, n):
            for i in range(n - k):
                q[i] = ((x - xs[i + k]) * q[i] - (x - xs[i]) * q[i + 1]) / (xs[i] - xs[i + k])
        return q[0]

    def evaluate_derivative(self, x: float) -> float:
        """
        First derivative of the interpolating polynomial at x.

        Differentiating the tableau recurrence gives

            Q'[i..i+k] = (Q[i..i+k-1] + (x - x[i+k]) * Q'[i..i+k-1]
                          - Q[i+1..i+k] - (x - x[i]) * Q'[i+1..i+k]) / (x[i] - x[i+k])

        which is carried alongside the values, starting from Q'[i] = 0. A single
        point yields the derivative 0 of the constant polynomial.

        Raises:
            DegenerateDatasetError: If the dataset is empty
        """
        self._check_dataset()
        xs = self._xs
        q = list(self._ys)
        n = len(xs)
        dq = [0.0] * n
        for k in range(1, n):
            for i in range(n - k):
                x_lo, x_hi = xs[i], xs[i + k]
                denom = x_lo - x_hi
                dq[i] = (q[i] + (x - x_hi) * dq[i] - q[i + 1] - (x - x_lo) * dq[i + 1]) / denom
                q[i] = ((x - x_hi) * q[i] - (x - x_lo) * q[i + 1]) / denom
        return dq[0]

    def __call__(self, x: float) -> float:
        return self.evaluate(x)

    def __repr__(self) -> str:
        return f"NevilleInterpolator(xs={self._xs}, ys={self._ys})"
