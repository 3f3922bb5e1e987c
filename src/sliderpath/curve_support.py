"""Supporting utilities and configuration for Curve.

This module contains the approximation tolerances and the construction of
the cumulative-length table including its correction to the expected length.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from sliderpath.common import (
    BEZIER_TOLERANCE,
    CATMULL_DETAIL,
    CIRCULAR_ARC_TOLERANCE,
    LENGTH_EPSILON,
    MAX_BEZIER_SUBDIVISIONS,
)
from sliderpath.geom import GeomMath, PathControlPoint

logger = logging.getLogger(__name__)

###############################################################################
# CurveTolerances
###############################################################################


@dataclass(frozen=True)
class CurveTolerances:
    """Tolerances and sampling budgets used while approximating a curve.

    Attributes:
        bezier_tolerance: Flatness tolerance of Bezier control polygons.
        catmull_detail: Number of linear steps per Catmull-Rom span.
        circular_arc_tolerance: Maximum distance between a circular arc and its chords.
        length_epsilon: Lengths closer than this are considered equal.
        max_bezier_subdivisions: Subdivisions per Bezier segment before the
            remaining control polygons are accepted as they are.
    """

    bezier_tolerance: float = BEZIER_TOLERANCE
    catmull_detail: int = CATMULL_DETAIL
    circular_arc_tolerance: float = CIRCULAR_ARC_TOLERANCE
    length_epsilon: float = LENGTH_EPSILON
    max_bezier_subdivisions: int = MAX_BEZIER_SUBDIVISIONS

    def __post_init__(self):
        if self.bezier_tolerance <= 0.0:
            raise ValueError(f"bezier_tolerance must be positive, got {self.bezier_tolerance}")
        if self.catmull_detail < 1:
            raise ValueError(f"catmull_detail must be at least 1, got {self.catmull_detail}")
        if self.circular_arc_tolerance <= 0.0:
            raise ValueError(f"circular_arc_tolerance must be positive, got {self.circular_arc_tolerance}")
        if self.length_epsilon < 0.0:
            raise ValueError(f"length_epsilon must not be negative, got {self.length_epsilon}")
        if self.max_bezier_subdivisions < 0:
            raise ValueError(f"max_bezier_subdivisions must not be negative, got {self.max_bezier_subdivisions}")

    def to_dict(self) -> dict:
        """Convert tolerances to a dictionary for serialization."""
        return {
            "bezier_tolerance": self.bezier_tolerance,
            "catmull_detail": self.catmull_detail,
            "circular_arc_tolerance": self.circular_arc_tolerance,
            "length_epsilon": self.length_epsilon,
            "max_bezier_subdivisions": self.max_bezier_subdivisions,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CurveTolerances":
        """Create CurveTolerances from a dictionary."""
        return cls(
            bezier_tolerance=float(data.get("bezier_tolerance", BEZIER_TOLERANCE)),
            catmull_detail=int(data.get("catmull_detail", CATMULL_DETAIL)),
            circular_arc_tolerance=float(data.get("circular_arc_tolerance", CIRCULAR_ARC_TOLERANCE)),
            length_epsilon=float(data.get("length_epsilon", LENGTH_EPSILON)),
            max_bezier_subdivisions=int(data.get("max_bezier_subdivisions", MAX_BEZIER_SUBDIVISIONS)),
        )


DEFAULT_TOLERANCES = CurveTolerances()


###############################################################################
# CurveLengthTable
###############################################################################


class CurveLengthTable:
    """Builds the cumulative-length table of a polyline and corrects it to an expected length."""

    @staticmethod
    def calculate(
        control_points: Sequence[PathControlPoint],
        path: NDArray[np.float64],
        expected_length: float,
        length_epsilon: float = LENGTH_EPSILON,
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """
        Compute the cumulative lengths of _path_ and fit them to _expected_length_.

        The calculated length of a discretized path generally differs from the
        length declared for the slider. The tail of the path is truncated or
        extended along its last segment so that the final cumulative length
        matches the expected length.

        Two inputs are accepted inexactly:
        - If the last two control points coincide and the expected length is
          longer than the path, the path is not extended and the table ends at
          the calculated length.
        - If the expected length is zero or negative, a single vertex with
          length 0.0 remains.

        Args:
            control_points: The control points the path was built from.
            path: Polyline of shape (n_points, 2) without consecutive duplicates.
            expected_length: The declared length of the path.
            length_epsilon: Lengths closer than this are considered equal.

        Returns:
            Tuple of (path, lengths) with len(path) == len(lengths). The given
            path array is never modified.
        """
        if path.shape[0] == 0:
            return path, np.empty(0, dtype=np.float64)

        lengths = GeomMath.cumulative_lengths(path)
        calculated_length = float(lengths[-1])

        if abs(expected_length - calculated_length) <= length_epsilon:
            return path, lengths

        if (
            len(control_points) >= 2
            and control_points[-1].position == control_points[-2].position
            and expected_length > calculated_length
        ):
            logger.debug("Last control points coincide, path of length %s is not extended", calculated_length)
            return path, lengths

        # The last length always needs correcting
        retained = lengths[:-1]
        end_idx = path.shape[0] - 1

        if calculated_length > expected_length:
            # Drop the vertices that lie entirely beyond the expected length
            end_idx = int(np.searchsorted(retained, expected_length, side="right"))
            retained = retained[:end_idx]
            logger.debug("Truncating path from %d to %d vertices", path.shape[0], end_idx + 1)

        if end_idx == 0:
            return path[:1], np.zeros(1, dtype=np.float64)

        new_path = path[: end_idx + 1].copy()
        direction = new_path[end_idx] - new_path[end_idx - 1]
        norm = float(np.hypot(direction[0], direction[1]))
        if norm > 0.0:
            direction = direction / norm
        new_path[end_idx] = new_path[end_idx - 1] + direction * (expected_length - retained[-1])

        new_lengths = np.empty(end_idx + 1, dtype=np.float64)
        new_lengths[:end_idx] = retained
        new_lengths[end_idx] = expected_length
        return new_path, new_lengths
