"""Path construction from typed control points."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from sliderpath.bezier import BezierApproximator
from sliderpath.catmull import CatmullApproximator
from sliderpath.circular_arc import CircularArcApproximator, CircularArcProperties
from sliderpath.common import PathType
from sliderpath.curve_support import DEFAULT_TOLERANCES, CurveTolerances
from sliderpath.geom import GeomMath, PathControlPoint, Vec2

logger = logging.getLogger(__name__)


class PathBuilder:
    """Turns a sequence of typed control points into a single polyline."""

    @staticmethod
    def approximate_segment(
        points: NDArray[np.float64], kind: PathType, tolerances: CurveTolerances = DEFAULT_TOLERANCES
    ) -> NDArray[np.float64]:
        """
        Approximate one segment of control points by a polyline.

        Args:
            points: Control points of the segment, shape (n_points, 2)
            kind: Curve type of the segment
            tolerances: Approximation tolerances

        Returns:
            NDArray[np.float64] of shape (k, 2)
        """
        if kind == PathType.LINEAR:
            return points

        if kind == PathType.CATMULL:
            return CatmullApproximator.approximate(points, tolerances.catmull_detail)

        if kind == PathType.PERFECT_CURVE and points.shape[0] == 3:
            properties = CircularArcProperties.from_points(
                Vec2.from_array(points[0]),
                Vec2.from_array(points[1]),
                Vec2.from_array(points[2]),
                tolerances.length_epsilon,
            )
            if properties is not None:
                return CircularArcApproximator.approximate(properties, tolerances.circular_arc_tolerance)
            logger.debug("Perfect curve through (nearly) collinear points %s, approximating as Bezier", points.tolist())

        # Bezier, and perfect curves that are not a proper arc of three points
        return BezierApproximator.approximate(
            points, tolerances.bezier_tolerance, tolerances.max_bezier_subdivisions
        )

    @classmethod
    def calculate_path(
        cls, control_points: Sequence[PathControlPoint], tolerances: CurveTolerances = DEFAULT_TOLERANCES
    ) -> NDArray[np.float64]:
        """
        Approximate the whole path described by _control_points_.

        A segment runs from a control point up to the next control point that
        starts a new segment, or up to the last control point. Consecutive
        segments share their boundary point. The segment type is taken from its
        first control point; an untyped first control point means LINEAR.
        Consecutive identical vertices are removed from the result.

        Returns:
            NDArray[np.float64] of shape (n_points, 2). Empty input yields shape (0, 2).
        """
        if not control_points:
            return np.empty((0, 2), dtype=np.float64)

        vertices = GeomMath.as_points_array([cp.position for cp in control_points])
        last_idx = len(control_points) - 1
        pieces: List[NDArray[np.float64]] = []
        start = 0

        for i, control_point in enumerate(control_points):
            if control_point.segment_start is None and i < last_idx:
                continue

            kind = control_points[start].segment_start or PathType.LINEAR
            pieces.append(cls.approximate_segment(vertices[start : i + 1], kind, tolerances))

            # The current vertex starts the next segment
            start = i

        return GeomMath.remove_consecutive_duplicates(np.concatenate(pieces))

    @staticmethod
    def single_arc(
        control_points: Sequence[PathControlPoint], tolerances: CurveTolerances = DEFAULT_TOLERANCES
    ) -> Optional[CircularArcProperties]:
        """
        The circular arc of a path consisting of a single perfect curve.

        Returns:
            Optional[CircularArcProperties]: The arc if the path is exactly three
                control points forming one non-degenerate PERFECT_CURVE segment,
                None otherwise.
        """
        if len(control_points) != 3:
            return None
        if control_points[0].segment_start != PathType.PERFECT_CURVE or control_points[1].segment_start is not None:
            return None
        a, b, c = (cp.position for cp in control_points)
        return CircularArcProperties.from_points(a, b, c, tolerances.length_epsilon)
