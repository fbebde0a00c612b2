"""Test module for polycurve.geom

The tests are run using pytest.
These tests ensure that all functions and interfaces in src/polycurve/geom.py
remain working correctly after changes and refactoring.
"""

import dataclasses
import math

import pytest

from polycurve.geom import CurvePoint, GeomMath

###############################################################################
# GeomMath Tests
###############################################################################


class TestGeomMath:
    """Test class for GeomMath functionality."""

    def test_transform_point_identity(self):
        """Test point transformation with identity matrix."""
        affine_trafo = [1, 0, 0, 1, 0, 0]
        point = (10.0, 20.0)

        result = GeomMath.transform_point(affine_trafo, point)

        assert result == (10.0, 20.0)

    def test_transform_point_translation(self):
        """Test point transformation with translation."""
        affine_trafo = [1, 0, 0, 1, 5.0, 10.0]

        result = GeomMath.transform_point(affine_trafo, (10.0, 20.0))

        assert result == (15.0, 30.0)

    def test_transform_point_rotation_scale_translation(self):
        """Test point transformation with scaling, rotation, and translation."""
        # Scale by 2, rotate 90 degrees, translate by (5, 10)
        affine_trafo = [0, -2, 2, 0, 5.0, 10.0]

        result = GeomMath.transform_point(affine_trafo, (10.0, 20.0))

        # x' = 0*10 + (-2)*20 + 5 = -35
        # y' = 2*10 + 0*20 + 10 = 30
        assert result == (-35.0, 30.0)

    def test_transform_points_keeps_order(self):
        """Test that transform_points transforms every point and keeps the order."""
        points = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]

        result = GeomMath.transform_points([3, 0, 0, 3, 1, 1], points)

        assert result == [(1.0, 1.0), (4.0, 1.0), (4.0, 4.0)]
        assert points == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]  # input untouched

    def test_normalize(self):
        """Test scaling of a vector to unit length."""
        result = GeomMath.normalize((3.0, 4.0))

        assert result == pytest.approx((0.6, 0.8))

    def test_normalize_zero_vector(self):
        """A zero vector has no direction."""
        assert GeomMath.normalize((0.0, 0.0)) is None
        assert GeomMath.normalize((1e-15, 0.0)) is None

    def test_lerp(self):
        """Test linear interpolation including the end points."""
        assert GeomMath.lerp((0.0, 0.0), (10.0, 20.0), 0.0) == (0.0, 0.0)
        assert GeomMath.lerp((0.0, 0.0), (10.0, 20.0), 0.25) == (2.5, 5.0)
        assert GeomMath.lerp((0.0, 0.0), (10.0, 20.0), 1.0) == (10.0, 20.0)

    @pytest.mark.parametrize(
        "value, expected",
        [
            (-0.5, 0.0),
            (0.0, 0.0),
            (0.25, 0.25),
            (1.0, 1.0),
            (3.0, 1.0),
            (math.inf, 1.0),
            (-math.inf, 0.0),
            (math.nan, 0.0),
        ],
    )
    def test_clamp_fraction(self, value, expected):
        """Fractions are clamped to [0, 1], NaN maps to 0."""
        assert GeomMath.clamp_fraction(value) == expected


###############################################################################
# CurvePoint Tests
###############################################################################


class TestCurvePoint:
    """Test class for the CurvePoint value type."""

    def test_fields(self):
        """Test field access."""
        point = CurvePoint(position=(1.0, 2.0), tangent=(0.0, 1.0))

        assert point.position == (1.0, 2.0)
        assert point.tangent == (0.0, 1.0)

    def test_immutable(self):
        """CurvePoints are values and cannot be changed."""
        point = CurvePoint(position=(1.0, 2.0), tangent=(0.0, 1.0))

        with pytest.raises(dataclasses.FrozenInstanceError):
            point.position = (0.0, 0.0)  # type: ignore[misc]

    def test_equality(self):
        """Two CurvePoints with the same values are equal."""
        assert CurvePoint((1.0, 2.0), (1.0, 0.0)) == CurvePoint((1.0, 2.0), (1.0, 0.0))
        assert CurvePoint((1.0, 2.0), (1.0, 0.0)) != CurvePoint((1.0, 2.0), (0.0, 1.0))

    def test_str(self):
        """Test the string representation."""
        point = CurvePoint(position=(1.0, 2.0), tangent=(0.0, 1.0))

        assert str(point) == "CurvePoint(position=(1.0, 2.0), tangent=(0.0, 1.0))"
