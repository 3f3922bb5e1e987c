"""Circular arc through three points, analytic and discretized."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from sliderpath.common import CIRCULAR_ARC_TOLERANCE, LENGTH_EPSILON
from sliderpath.geom import Vec2

###############################################################################
# CircularArcProperties
###############################################################################


@dataclass(frozen=True)
class CircularArcProperties:
    """
    Describes the arc of a circle running from a start angle over an angular range.

    Attributes:
        theta_start (float): Angle of the start point as seen from the centre.
        theta_range (float): Angle swept from the start to the end point, in [0, 2*pi).
        direction (float): +1.0 for counter-clockwise, -1.0 for clockwise.
        radius (float): Radius of the circle.
        centre (Vec2): Centre of the circle.
    """

    theta_start: float
    theta_range: float
    direction: float
    radius: float
    centre: Vec2

    @classmethod
    def from_points(
        cls, a: Vec2, b: Vec2, c: Vec2, epsilon: float = LENGTH_EPSILON
    ) -> Optional[CircularArcProperties]:
        """
        The arc starting at _a_, passing through _b_ and ending at _c_.

        Returns:
            Optional[CircularArcProperties]: None if the three points are
                (nearly) collinear or the circle through them cannot be
                represented with finite floats.
        """
        # Degenerate triangle: a circle through the points would be huge or undefined
        cross = abs((b.y - a.y) * (c.x - a.x) - (b.x - a.x) * (c.y - a.y))
        if cross <= epsilon:
            return None

        # Nearly collinear relative to the triangle's size, the radius would dwarf the points' spread
        longest_sq = max((b - a).length_squared(), (c - b).length_squared(), (c - a).length_squared())
        if cross <= epsilon * longest_sq:
            return None

        d = 2.0 * (a.x * (b - c).y + b.x * (c - a).y + c.x * (a - b).y)
        if d == 0.0 or not math.isfinite(d):
            return None
        a_sq = a.length_squared()
        b_sq = b.length_squared()
        c_sq = c.length_squared()

        centre = Vec2(
            (a_sq * (b - c).y + b_sq * (c - a).y + c_sq * (a - b).y) / d,
            (a_sq * (c - b).x + b_sq * (a - c).x + c_sq * (b - a).x) / d,
        )

        d_a = a - centre
        d_c = c - centre
        radius = d_a.length()
        if not (math.isfinite(centre.x) and math.isfinite(centre.y) and math.isfinite(radius)):
            return None

        theta_start = math.atan2(d_a.y, d_a.x)
        theta_end = math.atan2(d_c.y, d_c.x)
        while theta_end < theta_start:
            theta_end += 2.0 * math.pi

        direction = 1.0
        theta_range = theta_end - theta_start

        # Draw towards the side of AC on which B lies
        a_to_c = c - a
        ortho_a_to_c = Vec2(a_to_c.y, -a_to_c.x)
        if ortho_a_to_c.dot(b - a) < 0.0:
            direction = -direction
            theta_range = 2.0 * math.pi - theta_range

        return cls(theta_start, theta_range, direction, radius, centre)

    @property
    def length(self) -> float:
        """float: Arc length from the start to the end point."""
        return self.theta_range * self.radius

    def point_count(self, tolerance: float = CIRCULAR_ARC_TOLERANCE, theta_range: Optional[float] = None) -> int:
        """
        Number of samples needed so that no chord deviates more than _tolerance_ from the arc.

        The angle per chord meeting the tolerance is 2 * acos(1 - tolerance / radius).
        Arcs whose diameter is below the tolerance are sampled with 2 points,
        and so are arcs on circles so large that the angle per chord rounds to zero.
        """
        if theta_range is None:
            theta_range = self.theta_range
        if 2.0 * self.radius <= tolerance:
            return 2
        divisor = 2.0 * math.acos(1.0 - tolerance / self.radius)
        if not divisor > 0.0:
            return 2
        count = theta_range / divisor
        if not math.isfinite(count):
            return 2
        return max(2, int(math.ceil(count)))

    def points_at_distances(self, distances: NDArray[np.float64]) -> NDArray[np.float64]:
        """Positions on the circle at the given arc-length distances from the start point."""
        theta = self.theta_start + self.direction * (np.asarray(distances, dtype=np.float64) / self.radius)
        result = np.empty((theta.shape[0], 2), dtype=np.float64)
        result[:, 0] = self.centre.x + self.radius * np.cos(theta)
        result[:, 1] = self.centre.y + self.radius * np.sin(theta)
        return result

    def point_at_distance(self, distance: float) -> Vec2:
        """Position on the circle at arc-length _distance_ from the start point."""
        return Vec2.from_array(self.points_at_distances(np.array([distance], dtype=np.float64))[0])


###############################################################################
# CircularArcApproximator
###############################################################################


class CircularArcApproximator:
    """Class to approximate circular arcs by polylines."""

    @staticmethod
    def approximate(
        properties: CircularArcProperties, tolerance: float = CIRCULAR_ARC_TOLERANCE
    ) -> NDArray[np.float64]:
        """
        Sample the arc from its start to its end point.

        Returns:
            NDArray[np.float64] of shape (n, 2) with n >= 2
        """
        amount_points = properties.point_count(tolerance)
        fract = np.arange(amount_points, dtype=np.float64) / float(amount_points - 1)
        theta = properties.theta_start + fract * (properties.direction * properties.theta_range)

        result = np.empty((amount_points, 2), dtype=np.float64)
        result[:, 0] = properties.centre.x + properties.radius * np.cos(theta)
        result[:, 1] = properties.centre.y + properties.radius * np.sin(theta)
        return result

    @staticmethod
    def sample_distances(
        properties: CircularArcProperties, total_length: float, tolerance: float = CIRCULAR_ARC_TOLERANCE
    ) -> NDArray[np.float64]:
        """
        Arc-length distances at which an arc of _total_length_ is sampled.

        The arc continues past its end point when _total_length_ exceeds
        properties.length. The sample count follows the same tolerance rule as
        approximate() for at most one full turn of the circle, so longer arcs
        are sampled more sparsely. The last distance is always _total_length_.
        """
        if total_length <= 0.0:
            return np.zeros(1, dtype=np.float64)
        swept = min(total_length / properties.radius, 2.0 * math.pi)
        amount_points = properties.point_count(tolerance, swept)
        distances = np.arange(amount_points, dtype=np.float64) * (total_length / float(amount_points - 1))
        distances[-1] = total_length
        return distances
