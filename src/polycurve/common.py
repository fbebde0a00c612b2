"""Central module containing types and tunable constants for curve segment handling."""

from __future__ import annotations

from typing import Literal, Sequence, Tuple, Union

###############################################################################
# Types
###############################################################################

Point2D = Tuple[float, float]

# Affine transformation [a00, a01, a10, a11, b0, b1], see GeomMath.transform_point
AffineTrafo = Sequence[Union[int, float]]

CurveCmds = Literal[  # Type-Definition for the drawing primitives emitted by a segment
    # MoveTo (2) - start a new subpath and move the current point to (x,y)
    "M",
    # LineTo (2) - draw a straight line from the current point to (x,y)
    "L",
    # Quadratic Bezier To (4) - draw a quadratic Bezier curve with one control point and an endpoint (x,y)
    "Q",
    # Cubic Bezier To (6) - draw a cubic Bezier curve with two control points and an endpoint (x,y)
    "C",
]


###############################################################################
# Consts
###############################################################################

# Number of uniform t-intervals sampled per segment, i.e. the sampler table holds
# DEFAULT_SAMPLER_STEPS + 1 entries. Interpolation error of distance lookups
# shrinks quadratically with this value; 100 keeps the error well below a
# pixel for curves a few thousand units long.
DEFAULT_SAMPLER_STEPS: int = 100

# Relative to the extent of the control polygon: derivatives shorter than
# TANGENT_EPS * extent are treated as zero (cusp) when normalizing tangents.
# Also the absolute limit for normalizing unit length vectors.
TANGENT_EPS: float = 1.0e-12

# Remaining parameter ranges below this value are treated as empty
PARAMETER_EPS: float = 1.0e-12
