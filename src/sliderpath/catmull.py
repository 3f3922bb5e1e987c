"""Catmull-Rom spline approximation."""

from __future__ import annotations

from typing import List

import numpy as np
from numpy.typing import NDArray

from sliderpath.common import CATMULL_DETAIL


class CatmullApproximator:
    """Class to approximate Catmull-Rom splines by polylines of fixed resolution."""

    @staticmethod
    def find_points(
        v1: NDArray[np.float64],
        v2: NDArray[np.float64],
        v3: NDArray[np.float64],
        v4: NDArray[np.float64],
        t: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        """
        Evaluate the Catmull-Rom span between _v2_ and _v3_.

        P(t) = 0.5 * (2*v2 + (-v1 + v3)*t + (2*v1 - 5*v2 + 4*v3 - v4)*t^2 + (-v1 + 3*v2 - 3*v3 + v4)*t^3)

        Args:
            v1, v2, v3, v4: Neighbouring control points, each of shape (2,)
            t: Parameter values of shape (k,)

        Returns:
            NDArray[np.float64] of shape (k, 2)
        """
        t = t[:, np.newaxis]
        t2 = t * t
        t3 = t2 * t
        return 0.5 * (
            2.0 * v2
            + (-v1 + v3) * t
            + (2.0 * v1 - 5.0 * v2 + 4.0 * v3 - v4) * t2
            + (-v1 + 3.0 * v2 - 3.0 * v3 + v4) * t3
        )

    @classmethod
    def approximate(cls, points: NDArray[np.float64], detail: int = CATMULL_DETAIL) -> NDArray[np.float64]:
        """
        Approximate a Catmull-Rom spline through _points_.

        Each span between consecutive points is sampled in _detail_ equal steps
        of t, including both ends of every step. At the ends of the spline the
        missing neighbours are taken from the span itself: the first point
        serves as its own predecessor and the last neighbour is mirrored
        (2*v3 - v2).

        Args:
            points: Control points of shape (n_points, 2)
            detail: Number of steps per span

        Returns:
            NDArray[np.float64] of shape ((n_points - 1) * (detail + 1), 2).
            A single control point is returned as is.
        """
        count = points.shape[0]
        if count < 2:
            return points.copy()

        t = np.arange(detail + 1, dtype=np.float64) / float(detail)
        spans: List[NDArray[np.float64]] = []

        for i in range(count - 1):
            v2 = points[i]
            v1 = points[i - 1] if i > 0 else v2
            v3 = points[i + 1]
            v4 = points[i + 2] if i + 2 < count else 2.0 * v3 - v2
            spans.append(cls.find_points(v1, v2, v3, v4, t))

        return np.concatenate(spans)
