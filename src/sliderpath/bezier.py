"""Bezier curve approximation using adaptive De Casteljau subdivision."""

from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np
from numpy.typing import NDArray

from sliderpath.common import BEZIER_TOLERANCE, MAX_BEZIER_SUBDIVISIONS

logger = logging.getLogger(__name__)


class BezierApproximator:
    """Class to approximate Bezier curves of arbitrary degree by polylines.

    The control polygon is refined until it is flat enough to be used directly.
    All methods operate on float64 arrays of shape (n_points, 2).
    """

    @staticmethod
    def is_flat_enough(points: NDArray[np.float64], tolerance: float = BEZIER_TOLERANCE) -> bool:
        """
        Check whether a control polygon approximates its curve well enough.

        A polygon is flat enough if for every interior point the second
        difference |p[i-1] - 2*p[i] + p[i+1]|^2 does not exceed 4 * tolerance^2.
        """
        if points.shape[0] < 3:
            return True
        second_diff = points[:-2] - 2.0 * points[1:-1] + points[2:]
        limit = tolerance * tolerance * 4.0
        return not bool(np.any(np.einsum("ij,ij->i", second_diff, second_diff) > limit))

    @staticmethod
    def subdivide(points: NDArray[np.float64]) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """
        Split a Bezier curve at t=0.5 using De Casteljau's algorithm.

        Args:
            points: Control points of shape (count, 2)

        Returns:
            Tuple of (left, right) control points, each of shape (count, 2)
        """
        count = points.shape[0]
        midpoints = points.copy()
        left = np.empty_like(points)
        right = np.empty_like(points)

        for i in range(count - 1, 0, -1):
            left[count - i - 1] = midpoints[0]
            right[i] = midpoints[i]
            midpoints[:i] = (midpoints[:i] + midpoints[1 : i + 1]) / 2.0

        left[count - 1] = midpoints[0]
        right[0] = midpoints[0]
        return left, right

    @classmethod
    def approximate_flat(cls, points: NDArray[np.float64]) -> NDArray[np.float64]:
        """
        Piecewise-linear approximation of a flat control polygon.

        Returns the first control point followed by count-2 points obtained by
        smoothing the subdivided polygon with weights (1, 2, 1) / 4. The last
        control point is not included.
        """
        count = points.shape[0]
        left, right = cls.subdivide(points)
        combined = np.concatenate([left, right[1:]])

        output = np.empty((max(count - 1, 1), 2), dtype=np.float64)
        output[0] = points[0]
        if count > 2:
            idx = 2 * np.arange(1, count - 1)
            output[1:] = 0.25 * (combined[idx - 1] + 2.0 * combined[idx] + combined[idx + 1])
        return output

    @classmethod
    def approximate(
        cls,
        points: NDArray[np.float64],
        tolerance: float = BEZIER_TOLERANCE,
        max_subdivisions: int = MAX_BEZIER_SUBDIVISIONS,
    ) -> NDArray[np.float64]:
        """
        Approximate a Bezier curve by a polyline.

        The curve is refined depth-first using an explicit stack instead of
        recursion. Parts of the curve whose control polygon is flat enough are
        converted directly; all others are subdivided into two halves with the
        same number of control points.

        Args:
            points: Control points of shape (n_points, 2)
            tolerance: Flatness tolerance
            max_subdivisions: Subdivision budget. When it is spent, the remaining
                control polygons are converted as if they were flat.

        Returns:
            NDArray[np.float64] of shape (k, 2) starting at the first and ending at the
            last control point
        """
        if points.shape[0] < 2:
            return points.copy()

        pieces: List[NDArray[np.float64]] = []
        to_flatten: List[NDArray[np.float64]] = [points]
        subdivisions = 0
        exhausted = False

        while to_flatten:
            parent = to_flatten.pop()

            if cls.is_flat_enough(parent, tolerance):
                pieces.append(cls.approximate_flat(parent))
                continue

            if subdivisions >= max_subdivisions:
                exhausted = True
                pieces.append(cls.approximate_flat(parent))
                continue

            left, right = cls.subdivide(parent)
            subdivisions += 1
            # Left child on top so the curve is emitted from start to end
            to_flatten.append(right)
            to_flatten.append(left)

        if exhausted:
            logger.warning(
                "Bezier subdivision budget of %d exhausted for %d control points, approximation may be coarse",
                max_subdivisions,
                points.shape[0],
            )

        pieces.append(points[-1:])
        return np.concatenate(pieces)
