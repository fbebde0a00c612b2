"""Quadratic and cubic Bezier curve segments addressable by arc length."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from polycurve.bezier import BezierCurve
from polycurve.common import DEFAULT_SAMPLER_STEPS, PARAMETER_EPS, TANGENT_EPS, AffineTrafo, Point2D
from polycurve.draw import DrawTarget, PointLike, SvgPathTarget
from polycurve.geom import CurvePoint, GeomMath
from polycurve.polynomial import Polynomial2D
from polycurve.sampler import UniformPolynomialCurveSampler

logger = logging.getLogger(__name__)

# Returned by draw(): (start_point, start_tangent, end_point, end_tangent)
DrawResult = Tuple[Point2D, Point2D, Point2D, Point2D]


###############################################################################
# BezierOverlayInfo
###############################################################################
@dataclass(frozen=True)
class BezierOverlayInfo:
    """
    Geometry needed to display editing handles of a segment in another coordinate space.

    Attributes:
        curve (SvgPathTarget): The transformed curve, starting with a move_to.
        start_point (Tuple[float, float]): The transformed start point.
        end_point (Tuple[float, float]): The transformed end point.
        control_points (List[Tuple[float, float]]): The transformed interior control points.
        handle_lines (SvgPathTarget): Lines connecting end points with their control points.
    """

    curve: SvgPathTarget
    start_point: Point2D
    end_point: Point2D
    control_points: List[Point2D]
    handle_lines: SvgPathTarget


###############################################################################
# PolynomialSegment
###############################################################################
class PolynomialSegment(ABC):
    """
    A single Bezier curve segment with arc length based addressing.

    A segment is immutable: control points, polynomial and length are fixed at
    construction. Distance based queries (get_point, draw with a range) use a
    UniformPolynomialCurveSampler which is built on first use and cached.
    Parameter based queries (eval, tangent) evaluate the polynomial directly.

    The lazy sampler is created by a single check-and-store without locking.
    Segments shared between threads would need a one-time initialization
    guard around the sampler property.
    """

    POINT_COUNT: ClassVar[int]

    def __init__(self, points: Sequence[PointLike], steps: int = DEFAULT_SAMPLER_STEPS):
        """
        Args:
            points: Control points (x, y), POINT_COUNT of them
            steps (int, optional): Sampler resolution used for the length and distance lookups.
                Defaults to DEFAULT_SAMPLER_STEPS.

        Raises:
            ValueError: If the number of points is wrong, a coordinate is not finite or steps < 1
        """
        points_array = np.array([(float(p[0]), float(p[1])) for p in points], dtype=np.float64).reshape(-1, 2)
        if points_array.shape[0] != self.POINT_COUNT:
            raise ValueError(
                f"{type(self).__name__} needs exactly {self.POINT_COUNT} points, got {points_array.shape[0]}."
            )
        if not np.all(np.isfinite(points_array)):
            raise ValueError(f"{type(self).__name__} control points must be finite: {points_array.tolist()}")
        if steps < 1:
            raise ValueError(f"Sampler steps must be at least 1, got {steps}.")
        points_array.setflags(write=False)

        # Largest coordinate offset of a control point from the start point
        extent = float(np.max(np.abs(points_array - points_array[0])))

        self._points: NDArray[np.float64] = points_array
        self._steps: int = steps
        self._curve: Polynomial2D = Polynomial2D(points_array)
        self._single_point: bool = extent == 0.0
        self._tangent_eps: float = TANGENT_EPS * extent
        self._sampler: Optional[UniformPolynomialCurveSampler] = None

        if self._single_point:
            # Bernstein sums of equal points do not cancel exactly in floating point
            self._length: float = 0.0
            logger.debug("Degenerate %s at %s with zero length", type(self).__name__, self.points[0])
        else:
            self._length = BezierCurve.curve_length(points_array, steps)

    ###########################################################################
    # Properties
    ###########################################################################

    @property
    def points(self) -> List[Point2D]:
        """List of the control points (x, y)."""
        return [(float(x), float(y)) for x, y in self._points]

    @property
    def points_array(self) -> NDArray[np.float64]:
        """Read-only (POINT_COUNT, 2) array of the control points."""
        return self._points

    @property
    def curve(self) -> Polynomial2D:
        """Polynomial2D: The polynomial evaluating this segment."""
        return self._curve

    @property
    def length(self) -> float:
        """float: The arc length of the segment, 0.0 for coincident control points."""
        return self._length

    @property
    def arc_length(self) -> float:
        """float: Same as length."""
        return self._length

    @property
    def steps(self) -> int:
        """int: Sampler resolution of this segment."""
        return self._steps

    @property
    def is_single_point(self) -> bool:
        """bool: True if all control points coincide, the segment then has length 0.0."""
        return self._single_point

    @property
    def tangent_eps(self) -> float:
        """float: Derivatives shorter than this are treated as zero, scaled to the size of the segment."""
        return self._tangent_eps

    @property
    def sampler(self) -> UniformPolynomialCurveSampler:
        """UniformPolynomialCurveSampler: The distance lookup table, built on first access."""
        if self._sampler is None:
            self._sampler = UniformPolynomialCurveSampler(self, self._steps)
        return self._sampler

    ###########################################################################
    # Evaluation
    ###########################################################################

    def eval(self, t: float) -> CurvePoint:
        """
        Evaluate the polynomial at the given t value.

        No sampling is involved; t outside [0, 1] extrapolates the curve.
        """
        return CurvePoint(position=self._curve.eval(t), tangent=self.tangent(t))

    def tangent(self, t: float) -> Point2D:
        """
        Unit tangent of the curve at the given t value.

        At a cusp the derivative vanishes and the direction of the nearest
        non-degenerate parameter (probed in steps of 1 / steps inside [0, 1],
        forward first) is used instead. A segment whose control points all
        coincide has the tangent (1, 0).
        """
        if self._single_point:
            return (1.0, 0.0)
        tangent = GeomMath.normalize(self._curve.eval_derivative(t), self._tangent_eps)
        if tangent is not None:
            return tangent
        return self._fallback_tangent(t)

    def _fallback_tangent(self, t: float) -> Point2D:
        delta = 1.0 / self._steps
        for k in range(1, self._steps + 1):
            for probe in (t + k * delta, t - k * delta):
                if 0.0 <= probe <= 1.0:
                    tangent = GeomMath.normalize(self._curve.eval_derivative(probe), self._tangent_eps)
                    if tangent is not None:
                        return tangent

        # No speed at any probe: use the chord of the control polygon
        start = self._points[0]
        for point in self._points[::-1]:
            tangent = GeomMath.normalize(point - start, self._tangent_eps)
            if tangent is not None:
                return tangent
        return (1.0, 0.0)

    def get_point(self, distance: float) -> CurvePoint:
        """
        Point at the given fraction of the arc length.

        Args:
            distance (float): Fraction of the arc length, 0 = start, 1 = end. Clamped to [0, 1],
                NaN is treated as 0.

        Returns:
            CurvePoint: position and unit tangent interpolated by the sampler
        """
        distance = GeomMath.clamp_fraction(distance)
        if self._single_point:
            return CurvePoint(position=self.points[0], tangent=self.tangent(0.0))
        return self.sampler.point_at_distance(self._length * distance)

    def transform_points(self, matrix: AffineTrafo) -> List[Point2D]:
        """
        Control points transformed by the affine transformation _matrix_.

        Args:
            matrix: Affine transformation [a00, a01, a10, a11, b0, b1], see GeomMath.transform_point

        Returns:
            List[Tuple[float, float]]: the transformed control points, the segment is not changed
        """
        return GeomMath.transform_points(matrix, self._points)

    def polygonize(self, steps: Optional[int] = None) -> NDArray[np.float64]:
        """Polyline of the curve as (steps + 1, 2) array; steps defaults to the sampler resolution."""
        return BezierCurve.polygonize_curve(self._points, steps or self._steps)

    ###########################################################################
    # Subdivision
    ###########################################################################

    @classmethod
    @abstractmethod
    def split_points(
        cls, points: Union[Sequence[PointLike], NDArray[np.float64]], t: float
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Control points of the two curves covering [0, t] and [t, 1] of the curve given by _points_."""

    def split(self, t: float) -> Tuple[PolynomialSegment, PolynomialSegment]:
        """
        Split the curve into two separate segments at the given t value.

        The two resulting segments form the same overall shape as the original
        curve. Their lengths are sampled anew since arc length does not split
        proportionally to t.
        """
        left, right = self.split_points(self._points, t)
        return type(self)(*left, steps=self._steps), type(self)(*right, steps=self._steps)

    ###########################################################################
    # Drawing
    ###########################################################################

    @staticmethod
    @abstractmethod
    def _draw_curve(target: DrawTarget, points: Sequence[PointLike]) -> None:
        """Emit the curve primitive for _points_, the current point is points[0]."""

    @staticmethod
    @abstractmethod
    def _draw_handle_lines(target: DrawTarget, points: Sequence[PointLike]) -> None:
        """Emit the lines connecting the end points with their control points."""

    def draw(self, target: DrawTarget, start: float = 0.0, end: float = 1.0, move: bool = True) -> DrawResult:
        """
        Draw the part of the curve between two arc length fractions.

        The range boundaries are converted to parameters by the sampler and the
        sub-curve is cut out exactly by two splits, so the emitted curve has the
        same degree as this segment. Fractions are clamped to [0, 1], NaN is
        treated as 0.

        Args:
            target (DrawTarget): Receives the move_to and curve primitives.
            start (float, optional): Start as fraction of the arc length. Defaults to 0.0.
            end (float, optional): End as fraction of the arc length. Defaults to 1.0.
                An end before start draws the empty range at start.
            move (bool, optional): Emit a move_to to the first point. Defaults to True.

        Returns:
            Tuple of (start_point, start_tangent, end_point, end_tangent) of the drawn part
        """
        start_t = 0.0
        end_t = 1.0
        points_array: NDArray[np.float64] = self._points

        start = GeomMath.clamp_fraction(start)
        end = max(GeomMath.clamp_fraction(end), start)

        # A single point segment is drawn as it is, any sub-range is the same point
        if not self._single_point and (start != 0.0 or end != 1.0):
            sampler = self.sampler
            start_t = sampler.distance_to_t(self._length * start)
            end_t = sampler.distance_to_t(self._length * end)

            # The tail covers [start_t, 1], rescale end_t into its parameter range
            remaining = 1.0 - start_t
            relative_end_t = (end_t - start_t) / remaining if remaining > PARAMETER_EPS else 0.0

            _, tail = self.split_points(self._points, start_t)
            points_array, _ = self.split_points(tail, relative_end_t)

        points = [(float(x), float(y)) for x, y in points_array]
        if move:
            target.move_to(points[0])
        self._draw_curve(target, points)

        return points[0], self.tangent(start_t), points[-1], self.tangent(end_t)

    def overlay_info(self, matrix: AffineTrafo) -> BezierOverlayInfo:
        """
        Geometry for drawing the curve with its editing handles in the space given by _matrix_.

        Args:
            matrix: Affine transformation [a00, a01, a10, a11, b0, b1]

        Returns:
            BezierOverlayInfo: transformed curve, end points, control points and handle lines
        """
        points = self.transform_points(matrix)

        curve = SvgPathTarget()
        curve.move_to(points[0])
        self._draw_curve(curve, points)

        handle_lines = SvgPathTarget()
        self._draw_handle_lines(handle_lines, points)

        return BezierOverlayInfo(
            curve=curve,
            start_point=points[0],
            end_point=points[-1],
            control_points=points[1:-1],
            handle_lines=handle_lines,
        )

    def __repr__(self):
        return f"{type(self).__name__}({', '.join(f'({x:g}, {y:g})' for x, y in self.points)})"

    def __eq__(self, other):
        if not isinstance(other, PolynomialSegment) or type(self) is not type(other):
            return NotImplemented
        return self._steps == other._steps and np.array_equal(self._points, other._points)

    def __hash__(self):
        return hash((type(self).__name__, self._steps, self._points.tobytes()))


###############################################################################
# QuadBezierSegment
###############################################################################
class QuadBezierSegment(PolynomialSegment):
    """Quadratic Bezier segment defined by start, control and end point."""

    POINT_COUNT: ClassVar[int] = 3

    def __init__(self, p0: PointLike, p1: PointLike, p2: PointLike, steps: int = DEFAULT_SAMPLER_STEPS):
        super().__init__((p0, p1, p2), steps)

    @classmethod
    def split_points(
        cls, points: Union[Sequence[PointLike], NDArray[np.float64]], t: float
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        return BezierCurve.split_quadratic_curve(points, t)

    @staticmethod
    def _draw_curve(target: DrawTarget, points: Sequence[PointLike]) -> None:
        target.quadratic_curve_to(points[1], points[2])

    @staticmethod
    def _draw_handle_lines(target: DrawTarget, points: Sequence[PointLike]) -> None:
        target.move_to(points[0])
        target.line_to(points[1])
        target.line_to(points[2])


###############################################################################
# CubicBezierSegment
###############################################################################
class CubicBezierSegment(PolynomialSegment):
    """Cubic Bezier segment defined by start, two control points and end point."""

    POINT_COUNT: ClassVar[int] = 4

    def __init__(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        p0: PointLike,
        p1: PointLike,
        p2: PointLike,
        p3: PointLike,
        steps: int = DEFAULT_SAMPLER_STEPS,
    ):
        super().__init__((p0, p1, p2, p3), steps)

    @classmethod
    def split_points(
        cls, points: Union[Sequence[PointLike], NDArray[np.float64]], t: float
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        return BezierCurve.split_cubic_curve(points, t)

    @staticmethod
    def _draw_curve(target: DrawTarget, points: Sequence[PointLike]) -> None:
        target.cubic_curve_to(points[1], points[2], points[3])

    @staticmethod
    def _draw_handle_lines(target: DrawTarget, points: Sequence[PointLike]) -> None:
        target.move_to(points[0])
        target.line_to(points[1])
        target.move_to(points[2])
        target.line_to(points[3])


###############################################################################
# Functions
###############################################################################
_SEGMENT_TYPES = {
    QuadBezierSegment.POINT_COUNT: QuadBezierSegment,
    CubicBezierSegment.POINT_COUNT: CubicBezierSegment,
}


def segment_from_points(points: Sequence[PointLike], steps: int = DEFAULT_SAMPLER_STEPS) -> PolynomialSegment:
    """
    Create a quadratic (3 points) or cubic (4 points) segment.

    Args:
        points: Control points (x, y)
        steps (int, optional): Sampler resolution. Defaults to DEFAULT_SAMPLER_STEPS.

    Returns:
        PolynomialSegment: QuadBezierSegment or CubicBezierSegment

    Raises:
        ValueError: If neither 3 nor 4 points are given
    """
    points = list(points)
    if len(points) not in _SEGMENT_TYPES:
        logger.warning(
            "Incorrect number of points provided to Bezier curve: %d. Needs exactly three or four points.",
            len(points),
        )
        raise ValueError(f"Bezier segments need 3 or 4 points, got {len(points)}.")
    segment_type = _SEGMENT_TYPES[len(points)]
    return segment_type(*points, steps=steps)
