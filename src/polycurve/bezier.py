"""Bezier curve control point utilities: polygonization, subdivision and polyline length."""

from __future__ import annotations

from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

BezierPoints = Union[Sequence[Tuple[float, float]], NDArray[np.float64]]


class BezierCurve:
    """Class to handle quadratic and cubic Bezier curve operations on raw control points.

    Provides methods for polygonizing Bezier curves into point sequences and for
    exact subdivision (de Casteljau) into two curves of the same degree.
    """

    @staticmethod
    def _as_xy_array(points: BezierPoints, count: int) -> NDArray[np.float64]:
        if isinstance(points, np.ndarray) and points.dtype == np.float64:
            points_array = points
        else:
            points_array = np.asarray(points, dtype=np.float64)
        if points_array.ndim != 2 or points_array.shape[1] < 2:
            raise ValueError("Bezier control points require (x, y) formatted points.")
        if points_array.shape[0] != count:
            raise ValueError(f"Expected {count} control points, got {points_array.shape[0]}.")
        return points_array[:, :2]

    @classmethod
    def polygonize_quadratic_curve(cls, points: BezierPoints, steps: int) -> NDArray[np.float64]:
        """
        Polygonize a quadratic Bezier curve into line segments.
        Uses direct evaluation with vectorized NumPy operations.

        Args:
            points: Control points, exactly 3 points: start, control, end
            steps: Number of segments to divide the curve into

        Returns:
            NDArray[np.float64] of shape (steps+1, 2) containing the polygonized points (x, y)
        """
        points_array = cls._as_xy_array(points, 3)
        t = np.linspace(0.0, 1.0, steps + 1, dtype=np.float64)

        # Quadratic Bezier basis functions
        omt = 1.0 - t
        omt2 = omt * omt
        t2 = t * t

        result = np.empty((steps + 1, 2), dtype=np.float64)
        result[:, 0] = omt2 * points_array[0, 0] + 2.0 * omt * t * points_array[1, 0] + t2 * points_array[2, 0]
        result[:, 1] = omt2 * points_array[0, 1] + 2.0 * omt * t * points_array[1, 1] + t2 * points_array[2, 1]
        return result

    @classmethod
    def polygonize_cubic_curve(cls, points: BezierPoints, steps: int) -> NDArray[np.float64]:
        """
        Polygonize a cubic Bezier curve into line segments.
        Uses direct evaluation with vectorized NumPy operations.

        Args:
            points: Control points, exactly 4 points: start, control1, control2, end
            steps: Number of segments to divide the curve into

        Returns:
            NDArray[np.float64] of shape (steps+1, 2) containing the polygonized points (x, y)
        """
        points_array = cls._as_xy_array(points, 4)
        t = np.linspace(0.0, 1.0, steps + 1, dtype=np.float64)

        # Cubic Bezier basis functions
        omt = 1.0 - t
        omt2 = omt * omt
        omt3 = omt2 * omt
        t2 = t * t
        t3 = t2 * t

        result = np.empty((steps + 1, 2), dtype=np.float64)
        result[:, 0] = (
            omt3 * points_array[0, 0]
            + 3.0 * omt2 * t * points_array[1, 0]
            + 3.0 * omt * t2 * points_array[2, 0]
            + t3 * points_array[3, 0]
        )
        result[:, 1] = (
            omt3 * points_array[0, 1]
            + 3.0 * omt2 * t * points_array[1, 1]
            + 3.0 * omt * t2 * points_array[2, 1]
            + t3 * points_array[3, 1]
        )
        return result

    @classmethod
    def polygonize_curve(cls, points: BezierPoints, steps: int) -> NDArray[np.float64]:
        """Polygonize a quadratic (3 points) or cubic (4 points) Bezier curve, see polygonize_*_curve."""
        if len(points) == 3:
            return cls.polygonize_quadratic_curve(points, steps)
        return cls.polygonize_cubic_curve(points, steps)

    @classmethod
    def split_quadratic_curve(
        cls, points: BezierPoints, t: float
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """
        Split a quadratic Bezier curve at parameter _t_ using de Casteljau's algorithm.

        Both returned curves are quadratic and together trace exactly the original curve:
        the first one covers [0, t], the second one covers [t, 1].

        Args:
            points: Control points, exactly 3 points: start, control, end
            t: Split parameter, usually in [0, 1]; other values extrapolate

        Returns:
            Tuple of two (3, 2) arrays with the control points of the left and right curve
        """
        p0, p1, p2 = cls._as_xy_array(points, 3)

        # First level
        p01 = p0 + (p1 - p0) * t
        p12 = p1 + (p2 - p1) * t
        # Second level is the point on the curve
        p012 = p01 + (p12 - p01) * t

        left = np.array([p0, p01, p012], dtype=np.float64)
        right = np.array([p012, p12, p2], dtype=np.float64)
        return left, right

    @classmethod
    def split_cubic_curve(cls, points: BezierPoints, t: float) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """
        Split a cubic Bezier curve at parameter _t_ using de Casteljau's algorithm.

        Both returned curves are cubic and together trace exactly the original curve:
        the first one covers [0, t], the second one covers [t, 1].

        Args:
            points: Control points, exactly 4 points: start, control1, control2, end
            t: Split parameter, usually in [0, 1]; other values extrapolate

        Returns:
            Tuple of two (4, 2) arrays with the control points of the left and right curve
        """
        p0, p1, p2, p3 = cls._as_xy_array(points, 4)

        # First level
        p01 = p0 + (p1 - p0) * t
        p12 = p1 + (p2 - p1) * t
        p23 = p2 + (p3 - p2) * t
        # Second level
        p012 = p01 + (p12 - p01) * t
        p123 = p12 + (p23 - p12) * t
        # Third level is the point on the curve
        p0123 = p012 + (p123 - p012) * t

        left = np.array([p0, p01, p012, p0123], dtype=np.float64)
        right = np.array([p0123, p123, p23, p3], dtype=np.float64)
        return left, right

    @staticmethod
    def polyline_lengths(polyline: NDArray[np.float64]) -> NDArray[np.float64]:
        """
        Cumulative lengths along a polyline.

        Args:
            polyline: (n, 2) array of points

        Returns:
            NDArray[np.float64] of shape (n,) starting with 0.0, last entry is the total length
        """
        cumulative = np.zeros(polyline.shape[0], dtype=np.float64)
        if polyline.shape[0] > 1:
            deltas = np.diff(polyline[:, :2], axis=0)
            cumulative[1:] = np.cumsum(np.hypot(deltas[:, 0], deltas[:, 1]))
        return cumulative

    @classmethod
    def curve_length(cls, points: BezierPoints, steps: int) -> float:
        """Approximate arc length of a quadratic or cubic Bezier curve by polygonizing with _steps_."""
        return float(cls.polyline_lengths(cls.polygonize_curve(points, steps))[-1])
