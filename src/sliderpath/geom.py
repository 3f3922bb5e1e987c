"""Handling geometries"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from sliderpath.common import PathType


###############################################################################
# Vec2
###############################################################################
@dataclass(frozen=True)
class Vec2:
    """
    Represents a 2D point or vector.

    Equality is exact float comparison. It is used to detect duplicated
    control points, so no tolerance is applied.

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
    """

    x: float
    y: float

    @classmethod
    def zero(cls) -> Vec2:
        """The origin (0, 0)."""
        return cls(0.0, 0.0)

    @classmethod
    def from_array(cls, values: Union[Sequence[float], NDArray[np.float64]]) -> Vec2:
        """Create a Vec2 from the first two entries of a sequence or array row."""
        return cls(float(values[0]), float(values[1]))

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vec2:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vec2:
        return Vec2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def dot(self, other: Vec2) -> float:
        """Dot product of this vector and _other_."""
        return self.x * other.x + self.y * other.y

    def length_squared(self) -> float:
        """Squared euclidean length."""
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def normalize(self) -> Vec2:
        """
        Return the unit vector pointing in the same direction.

        The zero vector has no direction and is returned unchanged.
        """
        length = self.length()
        if length == 0.0:
            return Vec2.zero()
        return Vec2(self.x / length, self.y / length)

    def to_tuple(self) -> Tuple[float, float]:
        """The vector as Tuple (x, y)."""
        return (self.x, self.y)

    def __str__(self):
        return f"Vec2(x={self.x}, y={self.y})"


###############################################################################
# PathControlPoint
###############################################################################
@dataclass(frozen=True)
class PathControlPoint:
    """
    An authored anchor of a slider path.

    Attributes:
        position (Vec2): Position of the anchor.
        segment_start (Optional[PathType]): If set, a new segment of this type
            starts at this anchor. Also used to split a segment at a duplicated anchor.
    """

    position: Vec2
    segment_start: Optional[PathType] = None

    def __post_init__(self):
        if not isinstance(self.position, Vec2):
            object.__setattr__(self, "position", Vec2.from_array(self.position))

    def to_dict(self) -> dict:
        """Convert the control point to a dictionary for serialization."""
        return {
            "x": self.position.x,
            "y": self.position.y,
            "segment_start": None if self.segment_start is None else self.segment_start.name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PathControlPoint:
        """Create a PathControlPoint from a dictionary.

        Raises:
            ValueError: If segment_start does not name a PathType.
        """
        kind_name = data.get("segment_start")
        kind = None
        if kind_name is not None:
            try:
                kind = PathType[kind_name]
            except KeyError as err:
                raise ValueError(f"Unknown path type '{kind_name}'") from err
        return cls(Vec2(float(data.get("x", 0.0)), float(data.get("y", 0.0))), kind)


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to polyline handling."""

    @staticmethod
    def as_points_array(
        points: Union[Sequence[Tuple[float, float]], Sequence[Vec2], NDArray[np.float64]],
    ) -> NDArray[np.float64]:
        """
        Convert the given points into a float64 array of shape (n_points, 2).

        Args:
            points: a sequence of (x, y), a sequence of Vec2 or an array of shape (n, 2).

        Returns:
            NDArray[np.float64]: the points

        Raises:
            ValueError: If the points cannot be arranged as (n, 2).
        """
        if isinstance(points, np.ndarray):
            arr = points.astype(np.float64, copy=False)
        elif len(points) == 0:
            return np.empty((0, 2), dtype=np.float64)
        elif isinstance(points[0], Vec2):
            arr = np.array([p.to_tuple() for p in points], dtype=np.float64)
        else:
            arr = np.asarray(points, dtype=np.float64)

        if arr.ndim != 2 or arr.shape[1] != 2:
            raise ValueError(f"points must have shape (n, 2), got {arr.shape}")
        return arr

    @staticmethod
    def remove_consecutive_duplicates(points: NDArray[np.float64]) -> NDArray[np.float64]:
        """Remove points exactly equal to their predecessor, keeping the first one."""
        if points.shape[0] < 2:
            return points
        keep = np.ones(points.shape[0], dtype=bool)
        keep[1:] = np.any(points[1:] != points[:-1], axis=1)
        return points[keep]

    @staticmethod
    def cumulative_lengths(points: NDArray[np.float64]) -> NDArray[np.float64]:
        """
        Running arc length at each vertex of a polyline.

        Returns:
            NDArray[np.float64]: shape (n_points,), starting with 0.0.
                An empty polyline gives an empty array.
        """
        if points.shape[0] == 0:
            return np.empty(0, dtype=np.float64)
        diffs = np.diff(points, axis=0)
        segment_lengths = np.hypot(diffs[:, 0], diffs[:, 1])
        lengths = np.empty(points.shape[0], dtype=np.float64)
        lengths[0] = 0.0
        np.cumsum(segment_lengths, out=lengths[1:])
        return lengths

    @staticmethod
    def read_only(array: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return a non-writeable view of the given array."""
        view = array.view()
        view.flags.writeable = False
        return view
