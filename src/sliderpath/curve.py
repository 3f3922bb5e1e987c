"""Slider curve with arc-length parameterized position queries."""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from sliderpath.circular_arc import CircularArcApproximator, CircularArcProperties
from sliderpath.common import PathType
from sliderpath.curve_support import DEFAULT_TOLERANCES, CurveLengthTable, CurveTolerances
from sliderpath.geom import GeomMath, PathControlPoint, Vec2
from sliderpath.path_builder import PathBuilder

logger = logging.getLogger(__name__)


class Curve:
    """Piecewise-linear approximation of a slider path together with its cumulative lengths.

    A curve is built once from its control points and queried many times. The
    vertices and lengths are exposed as read-only arrays and no method changes
    them after construction, so a curve can be shared between threads.

    A path consisting of a single circular arc keeps its analytic description:
    positions are then computed on the circle itself and the vertices are
    samples of that circle.

    Attributes:
        _path: Vertices of shape (n_points, 2)
        _lengths: Cumulative arc length at each vertex, shape (n_points,)
        _arc: Analytic arc for single perfect-curve paths, None otherwise
        _length_epsilon: Lengths closer than this are considered equal
    """

    _path: NDArray[np.float64]
    _lengths: NDArray[np.float64]
    _arc: Optional[CircularArcProperties]
    _length_epsilon: float

    def __init__(
        self,
        path: NDArray[np.float64],
        lengths: NDArray[np.float64],
        arc: Optional[CircularArcProperties] = None,
        length_epsilon: float = DEFAULT_TOLERANCES.length_epsilon,
    ):
        """
        Initialize a Curve from an already corrected path and length table.

        Use Curve.build() to create a curve from control points.

        Raises:
            ValueError: If path and lengths do not match, or if lengths do not
                start at 0.0 and never decrease.
        """
        if path.ndim != 2 or path.shape[1] != 2:
            raise ValueError(f"path must have shape (n, 2), got {path.shape}")
        if lengths.shape != (path.shape[0],):
            raise ValueError(f"lengths must have shape ({path.shape[0]},), got {lengths.shape}")
        if lengths.shape[0] > 0:
            if lengths[0] != 0.0:
                raise ValueError(f"lengths must start at 0.0, got {lengths[0]}")
            if not np.all(np.diff(lengths) >= 0.0):
                raise ValueError("lengths must be non-decreasing")

        self._path = GeomMath.read_only(path)
        self._lengths = GeomMath.read_only(lengths)
        self._arc = arc
        self._length_epsilon = length_epsilon

    @classmethod
    def build(
        cls,
        control_points: Sequence[PathControlPoint],
        expected_length: float,
        tolerances: CurveTolerances = DEFAULT_TOLERANCES,
    ) -> Curve:
        """
        Build the curve described by _control_points_ with the declared _expected_length_.

        Args:
            control_points: Ordered control points; the first one usually carries the path type.
            expected_length: Declared length of the path. The approximation is
                truncated or extended to match it.
            tolerances: Approximation tolerances

        Returns:
            Curve: the curve
        """
        if not control_points:
            logger.debug("Building curve without control points")
            empty = np.empty((0, 2), dtype=np.float64)
            return cls(empty, np.empty(0, dtype=np.float64), None, tolerances.length_epsilon)

        arc = PathBuilder.single_arc(control_points, tolerances)
        if arc is not None:
            total_length = max(float(expected_length), 0.0)
            lengths = CircularArcApproximator.sample_distances(arc, total_length, tolerances.circular_arc_tolerance)
            path = arc.points_at_distances(lengths)
            return cls(path, lengths, arc, tolerances.length_epsilon)

        path = PathBuilder.calculate_path(control_points, tolerances)
        path, lengths = CurveLengthTable.calculate(control_points, path, expected_length, tolerances.length_epsilon)
        return cls(path, lengths, None, tolerances.length_epsilon)

    @classmethod
    def from_positions(
        cls,
        positions: Union[Sequence[Tuple[float, float]], Sequence[Vec2], NDArray[np.float64]],
        kind: PathType,
        expected_length: float,
        tolerances: CurveTolerances = DEFAULT_TOLERANCES,
    ) -> Curve:
        """Build a curve whose positions all belong to one segment of type _kind_."""
        points = GeomMath.as_points_array(positions)
        control_points = [
            PathControlPoint(Vec2.from_array(point), kind if i == 0 else None) for i, point in enumerate(points)
        ]
        return cls.build(control_points, expected_length, tolerances)

    @property
    def path(self) -> NDArray[np.float64]:
        """
        The vertices of this curve as a read-only array of shape (n_points, 2).
        """
        return self._path

    @property
    def lengths(self) -> NDArray[np.float64]:
        """
        The cumulative arc length at each vertex as a read-only array of shape (n_points,).
        """
        return self._lengths

    @property
    def arc(self) -> Optional[CircularArcProperties]:
        """The analytic arc if this curve is a single circular arc, None otherwise."""
        return self._arc

    @property
    def is_empty(self) -> bool:
        """True if the curve has no vertices."""
        return self._path.shape[0] == 0

    @property
    def total_length(self) -> float:
        """float: The length of the curve, 0.0 for an empty curve."""
        if self._lengths.shape[0] == 0:
            return 0.0
        return float(self._lengths[-1])

    @property
    def start_position(self) -> Vec2:
        """The first vertex, or the origin for an empty curve."""
        return self.point_at_distance(0.0)

    @property
    def end_position(self) -> Vec2:
        """The position at the total length, or the origin for an empty curve."""
        return self.point_at_distance(self.total_length)

    def __len__(self) -> int:
        return self._path.shape[0]

    def __str__(self):
        kind = "arc" if self._arc is not None else "polyline"
        return f"Curve({kind}, vertices={len(self)}, total_length={self.total_length})"

    def points_at_distances(self, distances: Union[Sequence[float], NDArray[np.float64]]) -> NDArray[np.float64]:
        """
        Positions at the given arc-length distances from the start of the curve.

        Distances before the start or past the end of the curve map to the first
        and last vertex respectively. Between two vertices the position is
        interpolated linearly. If the two vertices are (nearly) at the same
        distance, the earlier one is returned.

        Args:
            distances: Distances of shape (k,)

        Returns:
            NDArray[np.float64] of shape (k, 2). All positions are (0, 0) for an empty curve.
        """
        dists = np.asarray(distances, dtype=np.float64).reshape(-1)
        count = self._path.shape[0]

        if count == 0:
            return np.zeros((dists.shape[0], 2), dtype=np.float64)

        if self._arc is not None:
            return self._arc.points_at_distances(np.clip(dists, 0.0, self.total_length))

        idx = np.searchsorted(self._lengths, dists, side="left")
        result = np.empty((dists.shape[0], 2), dtype=np.float64)

        before = idx == 0
        after = idx >= count
        inner = ~(before | after)
        result[before] = self._path[0]
        result[after] = self._path[-1]

        i1 = idx[inner]
        i0 = i1 - 1
        d0 = self._lengths[i0]
        d1 = self._lengths[i1]
        p0 = self._path[i0]
        p1 = self._path[i1]

        # Avoid dividing by an almost-zero span
        close = np.abs(d1 - d0) <= self._length_epsilon
        span = np.where(close, 1.0, d1 - d0)
        weight = (dists[inner] - d0) / span
        result[inner] = np.where(close[:, np.newaxis], p0, p0 + (p1 - p0) * weight[:, np.newaxis])
        return result

    def point_at_distance(self, distance: float) -> Vec2:
        """
        Position at arc-length _distance_ from the start of the curve.

        See points_at_distances() for the handling of distances outside the curve.
        """
        return Vec2.from_array(self.points_at_distances(np.array([distance], dtype=np.float64))[0])

    def positions_at(self, progresses: Union[Sequence[float], NDArray[np.float64]]) -> NDArray[np.float64]:
        """Positions at the given fractions of the total length, each clamped to [0, 1]."""
        progress = np.clip(np.asarray(progresses, dtype=np.float64).reshape(-1), 0.0, 1.0)
        return self.points_at_distances(progress * self.total_length)

    def position_at(self, progress: float) -> Vec2:
        """Position at fraction _progress_ of the total length, clamped to [0, 1]."""
        return Vec2.from_array(self.positions_at(np.array([progress], dtype=np.float64))[0])
