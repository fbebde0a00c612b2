"""Handling 2D geometry primitives shared by the curve segments"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from polycurve.common import AffineTrafo, Point2D, TANGENT_EPS


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def transform_point(affine_trafo: AffineTrafo, point: Sequence[Union[int, float]]) -> Point2D:
        """
        Perform an affine transformation on the given 2D point.

        The given _affine_trafo_ is a list of 6 floats, performing an affine transformation.
        The transformation is defined as:
            | x' | = | a00 a01 b0 |   | x |
            | y' | = | a10 a11 b1 | * | y |
            | 1  | = |  0   0  1  |   | 1 |
        with
            affine_trafo = [a00, a01, a10, a11, b0, b1]
        See also shapely - Affine Transformations

        Args:
            affine_trafo (Tuple/List[float]): Affine transformation - [a00, a01, a10, a11, b0, b1]
            point (Tuple/List[float]): 2D point - (x, y)

        Returns:
            Tuple[float, float]: the transformed point
        """
        x_new = float(affine_trafo[0] * point[0] + affine_trafo[1] * point[1] + affine_trafo[4])
        y_new = float(affine_trafo[2] * point[0] + affine_trafo[3] * point[1] + affine_trafo[5])
        return (x_new, y_new)

    @staticmethod
    def transform_points(affine_trafo: AffineTrafo, points: Sequence[Sequence[float]]) -> List[Point2D]:
        """Apply _affine_trafo_ to each of the given points and return them as new list."""
        return [GeomMath.transform_point(affine_trafo, point) for point in points]

    @staticmethod
    def normalize(vector: Sequence[float], eps: float = TANGENT_EPS) -> Optional[Point2D]:
        """
        Scale the given vector to unit length.

        Args:
            vector (Tuple/List[float]): 2D vector - (x, y)
            eps (float, optional): vectors shorter than this count as zero. Defaults to TANGENT_EPS.

        Returns:
            Optional[Tuple[float, float]]: the unit vector, or None for a zero-length vector
        """
        norm = math.hypot(vector[0], vector[1])
        if norm <= eps or not math.isfinite(norm):
            return None
        return (float(vector[0]) / norm, float(vector[1]) / norm)

    @staticmethod
    def lerp(p0: Sequence[float], p1: Sequence[float], ratio: float) -> Point2D:
        """Linear interpolation between _p0_ (ratio=0) and _p1_ (ratio=1)."""
        return (
            float(p0[0] + (p1[0] - p0[0]) * ratio),
            float(p0[1] + (p1[1] - p0[1]) * ratio),
        )

    @staticmethod
    def clamp_fraction(value: float) -> float:
        """
        Clamp _value_ to [0, 1].

        NaN compares false against every bound and would pass min/max unchanged,
        it maps to 0.0 instead.
        """
        if not value > 0.0:
            return 0.0
        return min(float(value), 1.0)


###############################################################################
# CurvePoint
###############################################################################
@dataclass(frozen=True)
class CurvePoint:
    """
    A point on a curve together with the curve direction at that point.

    Attributes:
        position (Tuple[float, float]): The location (x, y) on the curve.
        tangent (Tuple[float, float]): The unit tangent (x, y) in direction of travel.
    """

    position: Point2D
    tangent: Point2D

    def __str__(self):
        """Returns a string representation of the CurvePoint instance."""
        return f"CurvePoint(position={self.position}, tangent={self.tangent})"
