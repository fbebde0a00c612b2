"""Polynomial representation of quadratic and cubic Bezier curves."""

from __future__ import annotations

from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from polycurve.common import Point2D

# Bernstein to power basis conversion: row k holds the weights of P0..Pn for t^k
_QUADRATIC_BASIS: NDArray[np.float64] = np.array(
    [
        [1.0, 0.0, 0.0],
        [-2.0, 2.0, 0.0],
        [1.0, -2.0, 1.0],
    ],
    dtype=np.float64,
)

_CUBIC_BASIS: NDArray[np.float64] = np.array(
    [
        [1.0, 0.0, 0.0, 0.0],
        [-3.0, 3.0, 0.0, 0.0],
        [3.0, -6.0, 3.0, 0.0],
        [-1.0, 3.0, -3.0, 1.0],
    ],
    dtype=np.float64,
)


class Polynomial2D:
    """
    2D parametric polynomial of degree 2 or 3 built from Bezier control points.

    The Bernstein form
        B(t) = sum_i binom(n, i) * (1-t)^(n-i) * t^i * P_i
    is expanded once into power basis coefficients c_k so that
        B(t)  = sum_k c_k * t^k
        B'(t) = sum_k k * c_k * t^(k-1)
    are evaluated with Horner's scheme in O(1).

    The parameter t is not range checked: values outside [0, 1] extrapolate
    the polynomial, which is used for sub-range math during splitting.
    """

    __slots__ = ("_coefficients", "_cx", "_cy", "_dx", "_dy")

    def __init__(self, points: Union[Sequence[Tuple[float, float]], NDArray[np.float64]]):
        """
        Build the polynomial from Bezier control points.

        Args:
            points: 3 control points (quadratic) or 4 control points (cubic) as (x, y)

        Raises:
            ValueError: If the number of points is neither 3 nor 4
        """
        points_array = np.asarray(points, dtype=np.float64)
        if points_array.ndim != 2 or points_array.shape[1] < 2:
            raise ValueError("Polynomial2D requires (x, y) formatted control points.")
        if points_array.shape[0] == 3:
            basis = _QUADRATIC_BASIS
        elif points_array.shape[0] == 4:
            basis = _CUBIC_BASIS
        else:
            raise ValueError(f"Polynomial2D supports 3 or 4 control points, got {points_array.shape[0]}.")

        self._coefficients: NDArray[np.float64] = basis @ points_array[:, :2]
        self._coefficients.setflags(write=False)

        # Plain float copies keep scalar evaluation free of numpy overhead
        self._cx = [float(c) for c in self._coefficients[:, 0]]
        self._cy = [float(c) for c in self._coefficients[:, 1]]
        self._dx = [k * self._cx[k] for k in range(1, len(self._cx))]
        self._dy = [k * self._cy[k] for k in range(1, len(self._cy))]

    @property
    def degree(self) -> int:
        """int: The polynomial degree (2 = quadratic, 3 = cubic)."""
        return len(self._cx) - 1

    @property
    def coefficients(self) -> NDArray[np.float64]:
        """Read-only (degree + 1, 2) array of power basis coefficients, constant term first."""
        return self._coefficients

    @staticmethod
    def _horner(coefficients: Sequence[float], t: float) -> float:
        value = coefficients[-1]
        for coefficient in reversed(coefficients[:-1]):
            value = value * t + coefficient
        return value

    def eval(self, t: float) -> Point2D:
        """Position (x, y) of the curve at parameter _t_."""
        return (self._horner(self._cx, t), self._horner(self._cy, t))

    def eval_derivative(self, t: float) -> Point2D:
        """First derivative (dx/dt, dy/dt) of the curve at parameter _t_, not normalized."""
        return (self._horner(self._dx, t), self._horner(self._dy, t))

    def eval_array(self, ts: NDArray[np.float64]) -> NDArray[np.float64]:
        """
        Vectorized evaluation of the curve positions.

        Args:
            ts: 1D array of parameter values

        Returns:
            NDArray[np.float64] of shape (len(ts), 2) containing the positions
        """
        ts = np.asarray(ts, dtype=np.float64)
        result = np.empty((ts.shape[0], 2), dtype=np.float64)
        result[:, 0] = np.polynomial.polynomial.polyval(ts, self._cx)
        result[:, 1] = np.polynomial.polynomial.polyval(ts, self._cy)
        return result

    def eval_derivative_array(self, ts: NDArray[np.float64]) -> NDArray[np.float64]:
        """Vectorized evaluation of the first derivative, shape (len(ts), 2)."""
        ts = np.asarray(ts, dtype=np.float64)
        result = np.empty((ts.shape[0], 2), dtype=np.float64)
        result[:, 0] = np.polynomial.polynomial.polyval(ts, self._dx)
        result[:, 1] = np.polynomial.polynomial.polyval(ts, self._dy)
        return result

    def __repr__(self):
        return f"Polynomial2D(degree={self.degree}, cx={self._cx}, cy={self._cy})"
