"""Test module for sliderpath.circular_arc

The tests are run using pytest.
These tests ensure that circle fitting and arc sampling keep working
correctly after changes and refactoring.
"""

import math

import numpy as np
import pytest

from sliderpath.circular_arc import CircularArcApproximator, CircularArcProperties
from sliderpath.geom import Vec2

###############################################################################
# CircularArcProperties Tests
###############################################################################


class TestCircularArcProperties:
    """Test the circle through three points."""

    def test_half_circle(self):
        """(0,0), (5,5), (10,0) lie on the circle around (5,0) with radius 5."""
        props = CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(5.0, 5.0), Vec2(10.0, 0.0))

        assert props is not None
        assert props.centre.x == pytest.approx(5.0)
        assert props.centre.y == pytest.approx(0.0)
        assert props.radius == pytest.approx(5.0)
        assert props.theta_start == pytest.approx(math.pi)
        assert props.theta_range == pytest.approx(math.pi)
        assert props.direction == -1.0
        assert props.length == pytest.approx(5.0 * math.pi)

    def test_counter_clockwise_quarter(self):
        """A quarter circle drawn counter-clockwise keeps direction +1."""
        r = 10.0
        b = Vec2(r * math.cos(math.pi / 4), r * math.sin(math.pi / 4))
        props = CircularArcProperties.from_points(Vec2(r, 0.0), b, Vec2(0.0, r))

        assert props is not None
        assert props.direction == 1.0
        assert props.centre.x == pytest.approx(0.0, abs=1e-9)
        assert props.centre.y == pytest.approx(0.0, abs=1e-9)
        assert props.theta_start == pytest.approx(0.0, abs=1e-9)
        assert props.theta_range == pytest.approx(math.pi / 2)

    def test_major_arc(self):
        """An arc passing the far side of the circle sweeps more than pi."""
        # Start at angle 0, pass through angle -pi/2 and end at pi/2 (clockwise, 3/4 of the circle)
        props = CircularArcProperties.from_points(Vec2(1.0, 0.0), Vec2(0.0, -1.0), Vec2(0.0, 1.0))

        assert props is not None
        assert props.theta_range == pytest.approx(1.5 * math.pi)
        assert props.direction == -1.0

    def test_collinear_points(self):
        """Collinear points do not define a circle."""
        assert CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(5.0, 0.0), Vec2(10.0, 0.0)) is None

    def test_coincident_points(self):
        """Two equal points do not define a circle."""
        assert CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(5.0, 5.0), Vec2(5.0, 5.0)) is None

    def test_point_at_distance_passes_through_middle_point(self):
        """Half way along the half circle lies its top."""
        props = CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(5.0, 5.0), Vec2(10.0, 0.0))

        middle = props.point_at_distance(props.length / 2.0)
        end = props.point_at_distance(props.length)

        assert middle.x == pytest.approx(5.0)
        assert middle.y == pytest.approx(5.0)
        assert end.x == pytest.approx(10.0)
        assert end.y == pytest.approx(0.0, abs=1e-9)

    def test_point_count(self):
        """The sample count keeps the chord deviation below the tolerance."""
        props = CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(5.0, 5.0), Vec2(10.0, 0.0))

        # pi / (2 * acos(1 - 0.1 / 5)) = 7.84...
        assert props.point_count(0.1) == 8

    def test_point_count_tiny_radius(self):
        """Arcs smaller than the tolerance are sampled with two points."""
        props = CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(0.01, 0.01), Vec2(0.02, 0.0))

        assert props is not None
        assert props.point_count(0.1) == 2


###############################################################################
# CircularArcApproximator Tests
###############################################################################


class TestCircularArcApproximator:
    """Test sampling of arcs into polylines."""

    def test_samples_lie_on_circle(self):
        """All samples are at radius distance from the centre."""
        props = CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(5.0, 5.0), Vec2(10.0, 0.0))

        result = CircularArcApproximator.approximate(props)

        distances = np.hypot(result[:, 0] - props.centre.x, result[:, 1] - props.centre.y)
        np.testing.assert_allclose(distances, props.radius, rtol=1e-12)

    def test_samples_run_from_start_to_end(self):
        """The first sample is the start point, the last one the end point."""
        props = CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(5.0, 5.0), Vec2(10.0, 0.0))

        result = CircularArcApproximator.approximate(props)

        assert result.shape == (8, 2)
        np.testing.assert_allclose(result[0], [0.0, 0.0], atol=1e-9)
        np.testing.assert_allclose(result[-1], [10.0, 0.0], atol=1e-9)
        assert np.all(result[1:-1, 1] > 0.0)

    def test_finer_tolerance_gives_more_samples(self):
        """A smaller tolerance samples the arc more densely."""
        props = CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(100.0, 80.0), Vec2(250.0, 10.0))

        coarse = CircularArcApproximator.approximate(props, tolerance=1.0)
        fine = CircularArcApproximator.approximate(props, tolerance=0.01)

        assert fine.shape[0] > coarse.shape[0] >= 2

    def test_sample_distances(self):
        """Distances run evenly from zero to the total length."""
        props = CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(5.0, 5.0), Vec2(10.0, 0.0))

        distances = CircularArcApproximator.sample_distances(props, props.length)

        assert distances.shape == (8,)
        assert distances[0] == 0.0
        assert distances[-1] == props.length
        assert np.all(np.diff(distances) > 0.0)

    def test_sample_distances_non_positive_length(self):
        """A non-positive length is a single sample at distance zero."""
        props = CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(5.0, 5.0), Vec2(10.0, 0.0))

        np.testing.assert_array_equal(CircularArcApproximator.sample_distances(props, 0.0), [0.0])
        np.testing.assert_array_equal(CircularArcApproximator.sample_distances(props, -3.0), [0.0])

    def test_sample_distances_long_length_is_bounded(self):
        """Lengths of many turns are sampled with at most one turn's worth of points."""
        props = CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(5.0, 5.0), Vec2(10.0, 0.0))

        distances = CircularArcApproximator.sample_distances(props, 5e7)

        assert distances.shape == (props.point_count(0.1, 2.0 * math.pi),)
        assert distances[0] == 0.0
        assert distances[-1] == 5e7
        assert np.all(np.diff(distances) > 0.0)


###############################################################################
# Numerical Robustness Tests
###############################################################################


class TestCircularArcRobustness:
    """Test points whose circle is too large for floating point."""

    def test_nearly_collinear_points(self):
        """A tiny bend over a long distance is treated as a straight line."""
        props = CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(5000.0, 1.3e-11), Vec2(10000.0, 0.0))

        assert props is None

    def test_overflowing_coordinates(self):
        """Coordinates whose squares overflow do not define a circle."""
        props = CircularArcProperties.from_points(Vec2(0.0, 0.0), Vec2(1e200, 1e200), Vec2(2e200, 0.0))

        assert props is None

    @pytest.mark.parametrize("radius", [1e18, math.inf, math.nan])
    def test_point_count_huge_radius(self, radius):
        """If the angle per chord rounds to zero two points are used."""
        props = CircularArcProperties(0.0, math.pi, 1.0, radius, Vec2(0.0, 0.0))

        assert props.point_count(0.1) == 2
        assert props.point_count(0.1, 2.0 * math.pi) == 2
