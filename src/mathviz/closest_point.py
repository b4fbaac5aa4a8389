"""Closest point on a cubic Bezier curve to an arbitrary point."""

from __future__ import annotations

import logging
import math
from typing import List, Tuple

import numpy as np
from scipy.optimize import brentq

from mathviz.bezier import CubicBezierCurve
from mathviz.common import PointLike
from mathviz.consts import CLOSEST_POINT_SCAN_SAMPLES, CLOSEST_POINT_TOLERANCE
from mathviz.geom import Vector2

logger = logging.getLogger(__name__)


class ClosestPointSolver:
    """
    Find the parameter t in [0, 1] minimizing |B(t) - p| for a cubic Bezier curve.

    The squared distance is stationary where the degree 5 polynomial

        f(t) = (B(t) - p) . B'(t)

    vanishes. The solver

    1. scans f at scan_samples + 1 uniformly spaced parameters to bracket sign changes,
    2. refines every bracketed root with Brent's method (bisection safeguarded) to tolerance,
    3. adds the end points t=0 and t=1 as candidates,
    4. returns the candidate with the smallest true distance, preferring the smaller t on ties.

    Known limitation: two roots of f inside the same scan interval do not produce
    a sign change and are skipped. If the global minimum is one of them, a local
    minimum or an end point is returned instead. Increase scan_samples for curves
    with tight loops close to the query point.
    """

    def __init__(self, scan_samples: int = CLOSEST_POINT_SCAN_SAMPLES, tolerance: float = CLOSEST_POINT_TOLERANCE):
        if scan_samples < 1:
            raise ValueError(f"scan_samples must be >= 1, got {scan_samples}.")
        if not tolerance > 0.0:
            raise ValueError(f"tolerance must be positive, got {tolerance}.")
        self._scan_samples = scan_samples
        self._tolerance = tolerance

    @property
    def scan_samples(self) -> int:
        """int: Number of uniform intervals used to bracket roots."""
        return self._scan_samples

    @property
    def tolerance(self) -> float:
        """float: Tolerance in t of the refined roots."""
        return self._tolerance

    @staticmethod
    def _stationary(t: float, curve: CubicBezierCurve, point: Vector2) -> float:
        return (curve.position(t) - point).dot(curve.tangent(t))

    def _candidates(self, curve: CubicBezierCurve, point: Vector2) -> List[float]:
        params = np.linspace(0.0, 1.0, self._scan_samples + 1, dtype=np.float64)
        # scalar evaluation keeps the bracket signs identical to what brentq sees
        values = [self._stationary(float(t), curve, point) for t in params]

        candidates = [0.0]
        brackets = 0
        for i in range(self._scan_samples):
            f_lo, f_hi = values[i], values[i + 1]
            if f_lo == 0.0:
                candidates.append(float(params[i]))
            elif f_lo * f_hi < 0.0:
                brackets += 1
                root = brentq(
                    self._stationary,
                    float(params[i]),
                    float(params[i + 1]),
                    args=(curve, point),
                    xtol=self._tolerance,
                )
                candidates.append(float(root))
        candidates.append(1.0)
        logger.debug("Closest point scan: %d brackets, %d candidates", brackets, len(candidates))
        return candidates

    def closest_point(self, curve: CubicBezierCurve, point: PointLike) -> float:
        """
        Parameter of the point on the curve closest to point.

        Never raises for a valid curve: if no interior root is bracketed the
        nearer end point is returned. A degenerate curve whose control points
        all coincide returns 0.0.

        Args:
            curve: The cubic Bezier curve
            point: The query point

        Returns:
            float: t in [0, 1]
        """
        point = Vector2.of(point)
        p0, p1, p2, p3 = curve.control_points
        if p0 == p1 == p2 == p3:
            return 0.0

        best_t = 0.0
        best_dist = math.inf
        for t in sorted(self._candidates(curve, point)):
            dist = curve.position(t).distance_to(point)
            # strict comparison keeps the smaller t on ties
            if dist < best_dist:
                best_t, best_dist = t, dist
        return best_t

    def closest_point_on_curve(self, curve: CubicBezierCurve, point: PointLike) -> Tuple[float, Vector2, float]:
        """
        Closest point on the curve as (t, B(t), distance to point).
        """
        point = Vector2.of(point)
        t = self.closest_point(curve, point)
        nearest = curve.position(t)
        return t, nearest, nearest.distance_to(point)


_DEFAULT_SOLVER = ClosestPointSolver()


def closest_point(curve: CubicBezierCurve, point: PointLike) -> float:
    """Parameter t in [0, 1] of the closest point, using the default solver settings."""
    return _DEFAULT_SOLVER.closest_point(curve, point)


def closest_point_on_curve(curve: CubicBezierCurve, point: PointLike) -> Tuple[float, Vector2, float]:
    """(t, B(t), distance) of the closest point, using the default solver settings."""
    return _DEFAULT_SOLVER.closest_point_on_curve(curve, point)
