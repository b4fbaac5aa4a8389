"""Adaptive, clipping plot sampling of scalar functions."""

from __future__ import annotations

import math
from typing import Callable, Iterator, NamedTuple, Protocol, Union, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from mathviz.common import UnsupportedError
from mathviz.consts import PLOT_SAMPLE_PIXELS
from mathviz.geom import Viewport

###############################################################################
# Types
###############################################################################


@runtime_checkable
class ScalarFunction(Protocol):
    """Anything that evaluates y = f(x)."""

    def evaluate(self, x: float) -> float:
        """Value of the function at x, NaN where undefined."""


@runtime_checkable
class DifferentiableFunction(ScalarFunction, Protocol):
    """A ScalarFunction which also provides its first derivative."""

    def evaluate_derivative(self, x: float) -> float:
        """First derivative of the function at x."""


FunctionLike = Union[ScalarFunction, Callable[[float], float]]


class PlotPoint(NamedTuple):
    """
    One sample of a plot in abstract coordinates.

    pen_down=False starts a new subpath at this point (moveTo), pen_down=True
    connects it to the previous point (lineTo).
    """

    x: float
    y: float
    pen_down: bool


###############################################################################
# AdaptivePlotSampler
###############################################################################
class AdaptivePlotSampler:
    """
    Turns a scalar function and a Viewport into a pen-annotated point sequence.

    Samples are spaced a few pixels apart on screen, so the number of points
    depends on the on-screen width of the graph rather than its domain width.
    Values are clipped to [viewport.bottom, viewport.top]. NaN counts as
    clipped to the top. A sample is disconnected (pen_down=False) from its
    predecessor if either of them was clipped, so runs of clipped samples show
    up as isolated moveTo points and never join valid parts of the graph.
    """

    def __init__(self, sample_pixels: float = PLOT_SAMPLE_PIXELS):
        if not sample_pixels > 0.0:
            raise ValueError(f"sample_pixels must be positive, got {sample_pixels}.")
        self._sample_pixels = sample_pixels

    @staticmethod
    def round_step(delta: float) -> float:
        """
        Round a sampling step to a "nice" granularity.

        Steps >= 10 are rounded to integers, smaller steps to the nearest
        multiple of 0.1, 0.01 or 0.001 depending on their magnitude. Steps
        below 0.001 are kept.
        """
        if delta >= 10.0:
            return float(math.floor(delta + 0.5))
        for tier in (0.1, 0.01, 0.001):
            if delta >= tier:
                return math.floor(delta / tier + 0.5) * tier
        return delta

    def sample_step(self, px_per_unit_x: float) -> float:
        """Step in x between two samples for the given horizontal resolution."""
        return self.round_step(self._sample_pixels / px_per_unit_x)

    @staticmethod
    def _resolve(function: FunctionLike, derivative: bool) -> Callable[[float], float]:
        if derivative:
            if isinstance(function, DifferentiableFunction):
                return function.evaluate_derivative
            raise UnsupportedError(f"{type(function).__name__} does not provide a derivative.")
        if isinstance(function, ScalarFunction):
            return function.evaluate
        if callable(function):
            return function
        raise TypeError(f"Expected a ScalarFunction or callable, got {type(function).__name__}.")

    def sample(self, function: FunctionLike, viewport: Viewport, derivative: bool = False) -> Iterator[PlotPoint]:
        """
        Lazily sample function over [viewport.left, viewport.right].

        The first sample is at viewport.left, followed by samples at multiples
        of sample_step() strictly below viewport.right, and a final sample at
        viewport.right. Nothing is cached, the same arguments always yield the
        same sequence.

        Args:
            function: ScalarFunction or plain callable
            viewport: Graph range and resolution
            derivative: Plot the first derivative instead, requires a DifferentiableFunction

        Raises:
            UnsupportedError: If derivative is requested from a function without one
        """
        evaluate = self._resolve(function, derivative)
        return self._generate(evaluate, viewport)

    def _generate(self, evaluate: Callable[[float], float], viewport: Viewport) -> Iterator[PlotPoint]:
        left, right = viewport.left, viewport.right
        top, bottom = viewport.top, viewport.bottom
        delta = self.sample_step(viewport.px_per_unit_x)

        def clip(y: float):
            if math.isnan(y):
                return top, True
            if y < bottom:
                return bottom, True
            if y > top:
                return top, True
            return y, False

        y, was_clipped = clip(float(evaluate(left)))
        yield PlotPoint(left, y, False)
        if right == left:
            return

        # stop short of right to avoid a near duplicate of the final sample
        limit = right - 1e-9 * delta
        i = 1
        x = left + delta
        while x < limit:
            y, clipped = clip(float(evaluate(x)))
            yield PlotPoint(x, y, not (clipped or was_clipped))
            was_clipped = clipped
            i += 1
            x = left + i * delta

        y, clipped = clip(float(evaluate(right)))
        yield PlotPoint(right, y, not (clipped or was_clipped))

    def sample_to_array(
        self, function: FunctionLike, viewport: Viewport, derivative: bool = False
    ) -> NDArray[np.float64]:
        """
        Sample function into an array of shape (n, 3) with columns (x, y, pen_down).

        pen_down is stored as 1.0 (lineTo) or 0.0 (moveTo).
        """
        points = list(self.sample(function, viewport, derivative))
        result = np.empty((len(points), 3), dtype=np.float64)
        for idx, point in enumerate(points):
            result[idx, 0] = point.x
            result[idx, 1] = point.y
            result[idx, 2] = 1.0 if point.pen_down else 0.0
        return result
