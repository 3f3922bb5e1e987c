"""Central module containing path type definitions and numeric constants."""

from __future__ import annotations

from enum import Enum, auto

import numpy as np

###############################################################################
# Enums
###############################################################################


class PathType(Enum):
    """Enum to define the curve type a path segment is approximated with."""

    LINEAR = auto()
    BEZIER = auto()
    CATMULL = auto()
    PERFECT_CURVE = auto()


###############################################################################
# Consts
###############################################################################

# Maximum deviation of a flat Bezier control polygon from its curve
BEZIER_TOLERANCE: float = 0.25

# Number of linear steps per Catmull-Rom span
CATMULL_DETAIL: int = 50

# Maximum distance between a circular arc and its chords
CIRCULAR_ARC_TOLERANCE: float = 0.1

# Lengths and areas closer than this are considered equal (float32 machine epsilon)
LENGTH_EPSILON: float = float(np.finfo(np.float32).eps)

# Upper bound for Bezier subdivisions of a single segment
MAX_BEZIER_SUBDIVISIONS: int = 1 << 16
