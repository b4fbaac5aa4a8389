"""Cubic Bezier curve model: evaluation, arc length, subdivision and polygonization."""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray
from scipy.integrate import quad
from scipy.optimize import brentq

from mathviz.common import OutOfRangeError, PointLike
from mathviz.consts import ARC_LENGTH_QUAD_LIMIT, ARC_LENGTH_TABLE_SIZE, ARC_LENGTH_TOLERANCE
from mathviz.geom import BoundingBox, Vector2

logger = logging.getLogger(__name__)


def _bernstein_basis(t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Cubic Bernstein polynomials at t, shape t.shape + (4,)."""
    omt = 1.0 - t
    return np.stack((omt**3, 3.0 * omt**2 * t, 3.0 * omt * t**2, t**3), axis=-1)


def _bernstein_derivative_basis(t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Weights of the control point differences in B'(t), shape t.shape + (3,)."""
    omt = 1.0 - t
    return np.stack((3.0 * omt**2, 6.0 * omt * t, 3.0 * t**2), axis=-1)


###############################################################################
# CubicBezierCurve
###############################################################################
class CubicBezierCurve:
    """
    Cubic Bezier curve defined by four control points P0, P1, P2, P3.

        B(t) = (1-t)^3*P0 + 3*(1-t)^2*t*P1 + 3*(1-t)*t^2*P2 + t^3*P3

    The curve runs from P0 (t=0) to P3 (t=1). Evaluation is not restricted to
    [0, 1], values outside that range follow the polynomial extension.

    Control points are mutable via set_control_point(), every mutation drops
    the cached arc-length table.
    """

    def __init__(
        self,
        p0: PointLike = (0.0, 0.0),
        p1: PointLike = (0.0, 0.0),
        p2: PointLike = (0.0, 0.0),
        p3: PointLike = (0.0, 0.0),
    ):
        self._points = [Vector2.of(p0), Vector2.of(p1), Vector2.of(p2), Vector2.of(p3)]
        self._length_table: Optional[Tuple[NDArray[np.float64], NDArray[np.float64]]] = None

    @classmethod
    def from_points(cls, points: Sequence[PointLike]) -> CubicBezierCurve:
        """Create a curve from a sequence of exactly four control points."""
        if len(points) != 4:
            raise ValueError(f"A cubic Bezier curve requires 4 control points, got {len(points)}.")
        return cls(points[0], points[1], points[2], points[3])

    ###########################################################################
    # Control points
    ###########################################################################

    @property
    def control_points(self) -> Tuple[Vector2, Vector2, Vector2, Vector2]:
        """The control points as tuple (P0, P1, P2, P3)."""
        return (self._points[0], self._points[1], self._points[2], self._points[3])

    @property
    def p0(self) -> Vector2:
        """Vector2: Start point."""
        return self._points[0]

    @property
    def p1(self) -> Vector2:
        """Vector2: First control point."""
        return self._points[1]

    @property
    def p2(self) -> Vector2:
        """Vector2: Second control point."""
        return self._points[2]

    @property
    def p3(self) -> Vector2:
        """Vector2: End point."""
        return self._points[3]

    def set_control_point(self, index: int, point: PointLike) -> None:
        """
        Replace one control point.

        Args:
            index: Index of the control point, 0..3
            point: New position

        Raises:
            IndexError: If index is not in 0..3
        """
        if not 0 <= index <= 3:
            raise IndexError(f"Control point index must be in 0..3, got {index}.")
        self._points[index] = Vector2.of(point)
        self._length_table = None

    def as_array(self) -> NDArray[np.float64]:
        """The control points as array of shape (4, 2)."""
        return np.array([p.to_tuple() for p in self._points], dtype=np.float64)

    def copy(self) -> CubicBezierCurve:
        """An independent curve with the same control points."""
        return CubicBezierCurve(*self._points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CubicBezierCurve):
            return NotImplemented
        return self._points == other._points

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        p0, p1, p2, p3 = (p.to_tuple() for p in self._points)
        return f"CubicBezierCurve(p0={p0}, p1={p1}, p2={p2}, p3={p3})"

    ###########################################################################
    # Evaluation
    ###########################################################################

    def position(self, t: float) -> Vector2:
        """
        Evaluate the curve B(t) in Bernstein form.

        Args:
            t: Curve parameter, any real number

        Returns:
            Vector2: the point on the curve
        """
        p0, p1, p2, p3 = self._points
        omt = 1.0 - t
        omt2 = omt * omt
        t2 = t * t
        b0 = omt2 * omt
        b1 = 3.0 * omt2 * t
        b2 = 3.0 * omt * t2
        b3 = t2 * t
        return Vector2(
            b0 * p0.x + b1 * p1.x + b2 * p2.x + b3 * p3.x,
            b0 * p0.y + b1 * p1.y + b2 * p2.y + b3 * p3.y,
        )

    def x_at(self, t: float) -> float:
        """x-coordinate of B(t)."""
        return self.position(t).x

    def y_at(self, t: float) -> float:
        """y-coordinate of B(t)."""
        return self.position(t).y

    def tangent(self, t: float) -> Vector2:
        """
        Evaluate the first derivative of the curve.

            B'(t) = 3*(1-t)^2*(P1-P0) + 6*(1-t)*t*(P2-P1) + 3*t^2*(P3-P2)

        Args:
            t: Curve parameter, any real number

        Returns:
            Vector2: the (unnormalized) tangent vector B'(t)
        """
        p0, p1, p2, p3 = self._points
        omt = 1.0 - t
        c0 = 3.0 * omt * omt
        c1 = 6.0 * omt * t
        c2 = 3.0 * t * t
        return Vector2(
            c0 * (p1.x - p0.x) + c1 * (p2.x - p1.x) + c2 * (p3.x - p2.x),
            c0 * (p1.y - p0.y) + c1 * (p2.y - p1.y) + c2 * (p3.y - p2.y),
        )

    def positions(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        """Evaluate B(t) for an array of parameters, returns shape (len(t), 2)."""
        return _bernstein_basis(np.asarray(t, dtype=np.float64)) @ self.as_array()

    def tangents(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        """Evaluate B'(t) for an array of parameters, returns shape (len(t), 2)."""
        deltas = np.diff(self.as_array(), axis=0)
        return _bernstein_derivative_basis(np.asarray(t, dtype=np.float64)) @ deltas

    def polygonize(self, steps: int) -> NDArray[np.float64]:
        """
        Polygonize the curve into line segments at uniformly spaced parameters.

        Args:
            steps: Number of segments to divide the curve into

        Returns:
            NDArray[np.float64] of shape (steps+1, 2) containing the points from B(0) to B(1)
        """
        if steps < 1:
            raise ValueError(f"At least one step is required to polygonize a curve, got {steps}.")
        result = self.positions(np.linspace(0.0, 1.0, steps + 1, dtype=np.float64))
        # Pin the end points to the control points
        result[0] = self._points[0].to_tuple()
        result[-1] = self._points[3].to_tuple()
        return result

    def _tangent_coefficients(self) -> Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
        """Coefficients (a, b, c) of B'(t) = 3*(a*t^2 + b*t + c), each of shape (2,)."""
        deltas = np.diff(self.as_array(), axis=0)
        a = deltas[0] - 2.0 * deltas[1] + deltas[2]
        b = 2.0 * (deltas[1] - deltas[0])
        c = deltas[0]
        return a, b, c

    def bounding_box(self) -> BoundingBox:
        """
        Tight axis-aligned bounding box of the curve over t in [0, 1].

        Extrema are found at the end points and at the roots in (0, 1) of each
        tangent component, which is a quadratic a*t^2 + b*t + c.
        """
        a, b, c = self._tangent_coefficients()

        params = [0.0, 1.0]
        for axis in range(2):
            # np.roots strips leading zero coefficients (linear or constant tangent)
            for root in np.roots([a[axis], b[axis], c[axis]]):
                if np.isreal(root) and 0.0 < root.real < 1.0:
                    params.append(float(root.real))

        points = self.positions(np.array(params, dtype=np.float64))
        xmin, ymin = points.min(axis=0)
        xmax, ymax = points.max(axis=0)
        return BoundingBox(float(xmin), float(ymin), float(xmax), float(ymax))

    ###########################################################################
    # Arc length
    ###########################################################################

    def _speed(self, u: float) -> float:
        return self.tangent(u).length

    def _speed_minima(self, t_lo: float, t_hi: float) -> List[float]:
        """
        Parameters in (t_lo, t_hi) where the speed |B'| is stationary.

        These are the real roots of B'(t).B''(t), a cubic in t. A cusp, where
        B' vanishes and |B'| has a kink, is always among them.
        """
        a, b, c = self._tangent_coefficients()
        coefficients = [2.0 * a @ a, 3.0 * a @ b, b @ b + 2.0 * a @ c, b @ c]
        breakpoints = []
        for root in np.roots(coefficients):
            if abs(root.imag) <= 1e-7 * max(1.0, abs(root.real)) and t_lo < root.real < t_hi:
                breakpoints.append(float(root.real))
        return sorted(breakpoints)

    def _integrate_speed(self, t_start: float, t_end: float, tolerance: float = ARC_LENGTH_TOLERANCE) -> float:
        """Integral of |B'(u)| for u from t_start to t_end, negative if t_end < t_start."""
        if t_end < t_start:
            return -self._integrate_speed(t_end, t_start, tolerance)
        if t_end == t_start:
            return 0.0
        breakpoints = self._speed_minima(t_start, t_end)
        value, _ = quad(
            self._speed,
            t_start,
            t_end,
            epsabs=0.0,
            epsrel=tolerance,
            limit=ARC_LENGTH_QUAD_LIMIT,
            points=breakpoints or None,
        )
        return float(value)

    def arc_length(self, t: float = 1.0, tolerance: Optional[float] = None) -> float:
        """
        Arc length of the curve restricted to [0, t].

        There is no closed form for the length of a general cubic Bezier curve,
        the value is an approximation computed by adaptive Gauss-Kronrod
        quadrature (scipy.integrate.quad) of |B'(u)| over [0, t]. The interval
        is split where the speed is stationary, so cusps with B' = 0 lie on
        subinterval borders instead of inside. The requested relative
        tolerance defaults to ARC_LENGTH_TOLERANCE, well below 1e-6.

        Args:
            t: Upper integration bound, negative values give a negative length
            tolerance: Relative tolerance of the quadrature, defaults to ARC_LENGTH_TOLERANCE

        Returns:
            float: the approximated arc length
        """
        tolerance = ARC_LENGTH_TOLERANCE if tolerance is None else tolerance
        if not tolerance > 0.0:
            raise ValueError(f"The arc length tolerance must be positive, got {tolerance}.")
        return self._integrate_speed(0.0, t, tolerance)

    def _get_length_table(self) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Cached monotone table of (t, arc length up to t) over [0, 1]."""
        if self._length_table is None:
            params = np.linspace(0.0, 1.0, ARC_LENGTH_TABLE_SIZE + 1, dtype=np.float64)
            lengths = np.zeros_like(params)
            for i in range(1, params.shape[0]):
                lengths[i] = lengths[i - 1] + self._integrate_speed(float(params[i - 1]), float(params[i]))
            logger.debug("Built arc-length table with %d entries, total length %g", params.shape[0], lengths[-1])
            self._length_table = (params, lengths)
        return self._length_table

    def t_at_length(self, length: float) -> float:
        """
        Parameter t in [0, 1] at which the arc length from B(0) equals length.

        Uses the cached arc-length table to bracket the parameter and refines
        it inside the bracket. Lengths beyond the curve are clamped to t=0 and
        t=1 respectively.
        """
        params, lengths = self._get_length_table()
        total = lengths[-1]
        if length <= 0.0 or total <= 0.0:
            return 0.0
        if length >= total:
            return 1.0

        idx = int(np.searchsorted(lengths, length, side="left"))
        t_lo, t_hi = float(params[idx - 1]), float(params[idx])
        base = float(lengths[idx - 1])

        def residual(u: float) -> float:
            return base + self._integrate_speed(t_lo, u) - length

        if residual(t_hi) <= 0.0:
            return t_hi
        return float(brentq(residual, t_lo, t_hi, xtol=1e-12))

    ###########################################################################
    # Subdivision
    ###########################################################################

    def subdivide(self, t: float) -> SubdivisionResult:
        """Split the curve at t, see CurveSubdivider.subdivide()."""
        return CurveSubdivider.subdivide(self, t)


###############################################################################
# CurveSubdivider
###############################################################################
class SubdivisionResult(NamedTuple):
    """The two halves of a subdivided curve, covering [0, t] and [t, 1]."""

    left: CubicBezierCurve
    right: CubicBezierCurve


class CurveSubdivider:
    """Exact subdivision of cubic Bezier curves using de Casteljau's construction."""

    @staticmethod
    def subdivide(curve: CubicBezierCurve, t: float) -> SubdivisionResult:
        """
        Split a cubic Bezier curve at parameter t into two independent curves.

        Adjacent control points are repeatedly interpolated at t:

            P0    P1    P2    P3
              P01   P12   P23
                P012  P123
                  P0123

        The left curve is (P0, P01, P012, P0123), the right curve is
        (P0123, P123, P23, P3). Both share B(t) = P0123 as common end point.

        Args:
            curve: The curve to split, left unchanged
            t: Split parameter in [0, 1]

        Returns:
            SubdivisionResult: (left, right)

        Raises:
            OutOfRangeError: If t is outside [0, 1] or not a number
        """
        if not 0.0 <= t <= 1.0:
            raise OutOfRangeError(f"Subdivision parameter must be in [0, 1], got {t}.")

        p0, p1, p2, p3 = curve.control_points

        p01 = p0.lerp(p1, t)
        p12 = p1.lerp(p2, t)
        p23 = p2.lerp(p3, t)

        p012 = p01.lerp(p12, t)
        p123 = p12.lerp(p23, t)

        p0123 = p012.lerp(p123, t)

        return SubdivisionResult(
            left=CubicBezierCurve(p0, p01, p012, p0123),
            right=CubicBezierCurve(p0123, p123, p23, p3),
        )
