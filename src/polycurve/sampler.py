"""Arc length sampling of polynomial curve segments.

The parameter t of a Bezier curve does not advance linearly with the distance
travelled along the curve. The sampler evaluates a segment at uniformly spaced
t values once, accumulates the chord lengths between consecutive samples and
afterwards maps between distance and t by binary search plus linear
interpolation inside the bracketing interval.

Accuracy is controlled by the number of steps: the table holds steps + 1
samples and the interpolation error shrinks quadratically with the step count
and grows with the local curvature of the segment.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Tuple

import numpy as np
from numpy.typing import NDArray

from polycurve.bezier import BezierCurve
from polycurve.common import DEFAULT_SAMPLER_STEPS
from polycurve.geom import CurvePoint, GeomMath

if TYPE_CHECKING:
    from polycurve.segment import PolynomialSegment

logger = logging.getLogger(__name__)


class UniformPolynomialCurveSampler:
    """
    Distance <-> parameter lookup table for a single PolynomialSegment.

    The table is built eagerly in the constructor; segments create their
    sampler lazily on the first distance based query and keep it for their
    whole (immutable) lifetime.
    """

    def __init__(self, segment: PolynomialSegment, steps: int = DEFAULT_SAMPLER_STEPS):
        """
        Sample the given segment.

        Args:
            segment (PolynomialSegment): The segment to sample.
            steps (int, optional): Number of uniform t-intervals. Defaults to DEFAULT_SAMPLER_STEPS.

        Raises:
            ValueError: If steps is smaller than 1
        """
        if steps < 1:
            raise ValueError(f"Sampler needs at least one step, got {steps}.")
        self._steps = steps

        self._t_values: NDArray[np.float64] = np.linspace(0.0, 1.0, steps + 1, dtype=np.float64)
        if segment.is_single_point:
            self._positions: NDArray[np.float64] = np.repeat(segment.points_array[:1], steps + 1, axis=0)
            self._tangents: NDArray[np.float64] = np.repeat(
                np.array([segment.tangent(0.0)], dtype=np.float64), steps + 1, axis=0
            )
        else:
            self._positions = BezierCurve.polygonize_curve(segment.points_array, steps)
            self._tangents = self._sample_tangents(segment, self._t_values)
        self._distances: NDArray[np.float64] = BezierCurve.polyline_lengths(self._positions)

        for array in (self._t_values, self._positions, self._distances, self._tangents):
            array.setflags(write=False)

        logger.debug("Sampled %r with %d steps, length=%g", segment, steps, self.length)

    @staticmethod
    def _sample_tangents(segment: PolynomialSegment, t_values: NDArray[np.float64]) -> NDArray[np.float64]:
        derivatives = segment.curve.eval_derivative_array(t_values)
        norms = np.hypot(derivatives[:, 0], derivatives[:, 1])
        tangents = np.empty_like(derivatives)
        regular = norms > segment.tangent_eps
        tangents[regular] = derivatives[regular] / norms[regular, np.newaxis]
        # Cusps and degenerate samples take the segment's fallback direction
        for index in np.flatnonzero(~regular):
            tangents[index] = segment.tangent(float(t_values[index]))
        return tangents

    ###########################################################################
    # Properties
    ###########################################################################

    @property
    def steps(self) -> int:
        """int: Number of uniform t-intervals, the table holds steps + 1 samples."""
        return self._steps

    @property
    def length(self) -> float:
        """float: The sampled arc length of the segment."""
        return float(self._distances[-1])

    @property
    def t_values(self) -> NDArray[np.float64]:
        """Read-only array of the sampled parameters, shape (steps + 1,)."""
        return self._t_values

    @property
    def distances(self) -> NDArray[np.float64]:
        """Read-only array of the cumulative distances, shape (steps + 1,)."""
        return self._distances

    @property
    def positions(self) -> NDArray[np.float64]:
        """Read-only array of the sampled positions, shape (steps + 1, 2)."""
        return self._positions

    @property
    def tangents(self) -> NDArray[np.float64]:
        """Read-only array of the sampled unit tangents, shape (steps + 1, 2)."""
        return self._tangents

    ###########################################################################
    # Lookups
    ###########################################################################

    def _bracket(self, distance: float) -> Tuple[int, float]:
        """Index i of the sample interval [i, i+1] containing _distance_ and the ratio inside it."""
        length = self.length
        # NaN fails the comparison and maps to the start
        if length <= 0.0 or not distance > 0.0:
            return 0, 0.0
        if distance >= length:
            return self._steps - 1, 1.0

        index = int(np.searchsorted(self._distances, distance, side="right")) - 1
        index = min(max(index, 0), self._steps - 1)
        d0 = self._distances[index]
        d1 = self._distances[index + 1]
        if d1 <= d0:
            return index, 0.0
        return index, float((distance - d0) / (d1 - d0))

    def distance_to_t(self, distance: float) -> float:
        """
        Parameter t of the point at the given arc length _distance_ from the start.

        Distances outside [0, length] are clamped, i.e. the result is always in [0, 1].
        """
        index, ratio = self._bracket(distance)
        t0 = self._t_values[index]
        t1 = self._t_values[index + 1]
        if ratio >= 1.0:
            return float(t1)
        return float(t0 + (t1 - t0) * ratio)

    def t_to_distance(self, t: float) -> float:
        """Arc length from the start up to parameter _t_ (clamped to [0, 1], NaN is treated as 0)."""
        t = GeomMath.clamp_fraction(t)
        scaled = t * self._steps
        index = min(int(scaled), self._steps - 1)
        ratio = scaled - index
        d0 = self._distances[index]
        d1 = self._distances[index + 1]
        return float(d0 + (d1 - d0) * ratio)

    def point_at_distance(self, distance: float) -> CurvePoint:
        """
        Position and tangent at the given arc length _distance_ from the start.

        Both values are linearly interpolated between the bracketing samples and
        not re-evaluated from the polynomial. Distances outside [0, length] are clamped.
        """
        index, ratio = self._bracket(distance)
        if ratio >= 1.0:
            index, ratio = index + 1, 0.0

        p0 = self._positions[index]
        t0 = self._tangents[index]
        if ratio == 0.0:
            return CurvePoint(position=(float(p0[0]), float(p0[1])), tangent=(float(t0[0]), float(t0[1])))

        p1 = self._positions[index + 1]
        t1 = self._tangents[index + 1]
        tangent = GeomMath.normalize(GeomMath.lerp(t0, t1, ratio))
        if tangent is None:
            # Opposite tangents on both sides of a cusp cancel out, take the closer one
            closer = t0 if ratio < 0.5 else t1
            tangent = (float(closer[0]), float(closer[1]))
        return CurvePoint(position=GeomMath.lerp(p0, p1, ratio), tangent=tangent)

    def __repr__(self):
        return f"UniformPolynomialCurveSampler(steps={self._steps}, length={self.length:g})"
