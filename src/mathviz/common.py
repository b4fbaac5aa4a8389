"""Central module containing shared types and the error taxonomy of mathviz."""

from __future__ import annotations

from typing import Sequence, Tuple, Union

###############################################################################
# Types
###############################################################################

Number = Union[int, float]

# Anything that can be turned into a 2D point: Vector2, (x, y) tuple or list
PointLike = Union[Tuple[Number, Number], Sequence[Number]]


###############################################################################
# Errors
###############################################################################


class MathVizError(Exception):
    """Base class of all errors raised by mathviz."""


class OutOfRangeError(MathVizError, ValueError):
    """A curve parameter lies outside the domain an operation is defined on.

    Raised e.g. when subdividing a cubic Bezier curve at t outside [0, 1].
    """


class DegenerateDatasetError(MathVizError, ValueError):
    """An interpolation dataset cannot define a unique polynomial.

    Raised for empty datasets, mismatched x/y lengths and duplicate x-values.
    """


class UnsupportedError(MathVizError, NotImplementedError):
    """A requested evaluation is not available for the given function."""
