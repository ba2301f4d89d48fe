"""
Vector helpers for hand geometry.

All vectors are 3-element numpy arrays in millimetres, right-handed with +y up.
Angles are returned in degrees in the range [0, 180].
"""
import math

import numpy as np

UP = np.array([0.0, 1.0, 0.0])
DOWN = np.array([0.0, -1.0, 0.0])

_EPS = 1e-9


def as_vector(value) -> np.ndarray:
    """Convert a sequence (or an object with x/y/z attributes) to a float vector."""
    if hasattr(value, "x") and hasattr(value, "y") and hasattr(value, "z"):
        return np.array([value.x, value.y, value.z], dtype=float)
    return np.asarray(value, dtype=float).reshape(3)


def distance(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(a - b))


def sq_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Squared Euclidean distance. Avoids the square root for contact checks."""
    d = a - b
    return float(np.dot(d, d))


def normalize(v: np.ndarray) -> np.ndarray:
    length = np.linalg.norm(v)
    if length <= _EPS:
        return np.zeros(3)
    return v / length


def angle_between(v1: np.ndarray, v2: np.ndarray) -> float:
    """Unsigned angle between two vectors in degrees. Zero vectors give 0."""
    mag = np.linalg.norm(v1) * np.linalg.norm(v2)
    if mag <= _EPS:
        return 0.0
    cos = float(np.dot(v1, v2) / mag)
    cos = max(min(cos, 1.0), -1.0)
    return math.degrees(math.acos(cos))


def signed_projection(w: np.ndarray, axis: np.ndarray) -> float:
    """
    Length of the projection of w onto axis, signed by which side of the
    plane perpendicular to axis the point w lies on.

    A degenerate axis yields 0.
    """
    unit = normalize(axis)
    if not unit.any():
        return 0.0
    return float(np.dot(w, unit))
