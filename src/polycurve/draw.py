"""Draw targets receiving the primitives emitted by curve segments."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np
import shapely.geometry
import svgwrite.path
from numpy.typing import NDArray

from polycurve.bezier import BezierCurve
from polycurve.common import CurveCmds, Point2D

PointLike = Sequence[float]


###############################################################################
# DrawTarget
###############################################################################
class DrawTarget(ABC):
    """
    Minimal path building interface a segment draws into.

    Implementations map the primitives onto a concrete backend, e.g. a canvas,
    an SVG writer or a polyline for a rasterizer.
    """

    @abstractmethod
    def move_to(self, point: PointLike) -> None:
        """Start a new subpath at _point_."""

    @abstractmethod
    def line_to(self, point: PointLike) -> None:
        """Straight line from the current point to _point_."""

    @abstractmethod
    def quadratic_curve_to(self, control: PointLike, point: PointLike) -> None:
        """Quadratic Bezier curve from the current point to _point_."""

    @abstractmethod
    def cubic_curve_to(self, control1: PointLike, control2: PointLike, point: PointLike) -> None:
        """Cubic Bezier curve from the current point to _point_."""


def _as_point(point: PointLike) -> Point2D:
    return (float(point[0]), float(point[1]))


###############################################################################
# SvgPathTarget
###############################################################################
class SvgPathTarget(DrawTarget):
    """
    Records the emitted primitives as absolute SVG path commands.

    The recorded commands are available as list of (command, points) tuples,
    as SVG path string and as svgwrite path element.
    """

    def __init__(self):
        self._commands: List[Tuple[CurveCmds, Tuple[Point2D, ...]]] = []

    @property
    def commands(self) -> List[Tuple[CurveCmds, Tuple[Point2D, ...]]]:
        """List of the recorded (command, points) tuples, command is one of M, L, Q, C."""
        return list(self._commands)

    def move_to(self, point: PointLike) -> None:
        self._commands.append(("M", (_as_point(point),)))

    def line_to(self, point: PointLike) -> None:
        self._commands.append(("L", (_as_point(point),)))

    def quadratic_curve_to(self, control: PointLike, point: PointLike) -> None:
        self._commands.append(("Q", (_as_point(control), _as_point(point))))

    def cubic_curve_to(self, control1: PointLike, control2: PointLike, point: PointLike) -> None:
        self._commands.append(("C", (_as_point(control1), _as_point(control2), _as_point(point))))

    def clear(self) -> None:
        """Remove all recorded commands."""
        self._commands.clear()

    def path_string(self, round_func: Optional[Callable[[float], float]] = None, precision: int = 10) -> str:
        """
        The recorded commands as SVG path string, e.g. "M 0 0 Q 100 0 100 100".

        Args:
            round_func (Optional[Callable], optional):
                a function that takes a float and returns a float. Defaults to None.
            precision (int, optional): significant digits per coordinate. Defaults to 10.

        Returns:
            str: the SVG path string
        """
        ret_commands = []
        for command, points in self._commands:
            ret_commands.append(command)
            for point in points:
                for value in point:
                    if round_func:
                        value = round_func(value)
                    ret_commands.append(f"{value:.{precision}g}")
        return " ".join(ret_commands)

    def to_svg_path(self, **extra) -> svgwrite.path.Path:
        """
        Create a svgwrite path element from the recorded commands.

        Args:
            **extra: additional SVG attributes, e.g. stroke="black", fill="none"

        Returns:
            svgwrite.path.Path: the path element, ready to be added to a svgwrite.Drawing
        """
        return svgwrite.path.Path(d=self.path_string(), **extra)


###############################################################################
# PolylineTarget
###############################################################################
class PolylineTarget(DrawTarget):
    """
    Flattens the emitted primitives into polylines.

    Each move_to starts a new polyline. Curves are polygonized with a fixed
    number of steps per primitive. A line_to or curve without preceding
    move_to starts at its first point like a canvas path does.
    """

    def __init__(self, steps: int = 16):
        """
        Args:
            steps (int, optional): Number of line segments per curve primitive. Defaults to 16.
        """
        if steps < 1:
            raise ValueError(f"PolylineTarget needs at least one step per curve, got {steps}.")
        self._steps = steps
        self._polylines: List[List[NDArray[np.float64]]] = []

    @property
    def steps(self) -> int:
        """int: Number of line segments per curve primitive."""
        return self._steps

    def _current_point(self, fallback: PointLike) -> Point2D:
        if not self._polylines:
            self.move_to(fallback)
        last = self._polylines[-1][-1]
        return (float(last[-1, 0]), float(last[-1, 1]))

    def move_to(self, point: PointLike) -> None:
        self._polylines.append([np.array([_as_point(point)], dtype=np.float64)])

    def line_to(self, point: PointLike) -> None:
        if not self._polylines:
            self.move_to(point)
            return
        self._polylines[-1].append(np.array([_as_point(point)], dtype=np.float64))

    def quadratic_curve_to(self, control: PointLike, point: PointLike) -> None:
        start = self._current_point(control)
        polyline = BezierCurve.polygonize_quadratic_curve([start, _as_point(control), _as_point(point)], self._steps)
        self._polylines[-1].append(polyline[1:])

    def cubic_curve_to(self, control1: PointLike, control2: PointLike, point: PointLike) -> None:
        start = self._current_point(control1)
        polyline = BezierCurve.polygonize_cubic_curve(
            [start, _as_point(control1), _as_point(control2), _as_point(point)], self._steps
        )
        self._polylines[-1].append(polyline[1:])

    @property
    def polylines(self) -> List[NDArray[np.float64]]:
        """One (n, 2) array per subpath."""
        return [np.concatenate(chunks, axis=0) for chunks in self._polylines]

    def length(self) -> float:
        """Total length of all polylines."""
        return float(sum(BezierCurve.polyline_lengths(polyline)[-1] for polyline in self.polylines))

    def to_shapely(self) -> Union[shapely.geometry.LineString, shapely.geometry.MultiLineString]:
        """
        Convert the polylines into a shapely geometry.

        Subpaths with a single point are skipped as they have no extent.

        Returns:
            LineString for a single subpath, MultiLineString otherwise
        """
        lines = [polyline for polyline in self.polylines if polyline.shape[0] > 1]
        if len(lines) == 1:
            return shapely.geometry.LineString(lines[0])
        return shapely.geometry.MultiLineString(lines)
