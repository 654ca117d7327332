"""
Track node - A single user-placed station along the coaster centerline.

Defines:
- Pose (position, forward direction, derived normal)
- Banking and heart-line offset
- Per-node deltas to the predecessor (precomputed by the editor)
- Carried smoothing state and smoothed comfort forces
"""

from dataclasses import dataclass
from typing import Optional
import numpy as np


# Primary reference axis for normal derivation (world up)
WORLD_UP = np.array([0.0, 1.0, 0.0])

# Used when the direction is (anti)parallel to WORLD_UP
FALLBACK_AXIS = np.array([0.0, 0.0, -1.0])

# |cos| above this counts as parallel to the reference axis
PARALLEL_TOLERANCE = 1e-6


def as_vec3(value) -> np.ndarray:
    """Coerce a sequence of three numbers to a float 3-vector."""
    vec = np.asarray(value, dtype=float).reshape(3)
    return vec.copy()


def normalize(vec: np.ndarray) -> np.ndarray:
    """Return vec scaled to unit length.

    A zero vector yields NaNs; callers guarantee non-degenerate input.
    """
    return vec / np.linalg.norm(vec)


@dataclass(eq=False)
class TrackNode:
    """One station of the track.

    Positions lie on the heart-line reference; the exported curve anchor is
    shifted along ``normal`` by ``heartline_offset``. All ``*_from_last``
    angular deltas and ``roll`` are in radians.

    Usage:
        node = TrackNode([0, 0, 1], [0, 0, 1])
        node.update_norm()
    """
    position: np.ndarray
    direction: np.ndarray
    roll: float = 0.0                 # Banking, radians
    heartline_offset: float = 0.0     # Heart-line distance along normal
    shape_a: float = 0.0              # Lead-in shaping
    shape_b: float = 0.0              # Lead-out shaping

    # Derived by update_norm()
    normal: Optional[np.ndarray] = None

    # Arc length from track start (set externally)
    total_length: float = 0.0

    # Deltas to the previous node (set externally)
    angle_from_last: float = 0.0
    track_angle_from_last: float = 0.0
    pitch_from_last: float = 0.0
    yaw_from_last: float = 0.0
    heart_dist_from_last: float = 0.0

    # Carried smoothing seeds
    roll_speed: float = 0.0
    smooth_speed: float = 0.0

    # Outputs of force smoothing
    smooth_normal: float = 0.0
    smooth_lateral: float = 0.0

    def __post_init__(self):
        self.position = as_vec3(self.position)
        self.direction = as_vec3(self.direction)
        if self.normal is not None:
            self.normal = as_vec3(self.normal)

    @property
    def unit_direction(self) -> np.ndarray:
        """Forward tangent scaled to unit length."""
        return normalize(self.direction)

    @property
    def lateral(self) -> np.ndarray:
        """Unit vector to the rider's side (direction x normal).

        Raises:
            RuntimeError: If update_norm() has not been called
        """
        if self.normal is None:
            raise RuntimeError("update_norm() must be called before using lateral")
        return np.cross(self.unit_direction, self.normal)

    def update_norm(self) -> np.ndarray:
        """Derive ``normal`` from ``direction``.

        Projects the world up axis onto the plane orthogonal to the
        direction. Falls back to FALLBACK_AXIS for vertical directions.
        Only ``normal`` is touched, and the result depends on ``direction``
        alone, so repeated calls give the same vector.

        Returns:
            The derived unit normal
        """
        d = self.unit_direction
        reference = WORLD_UP
        if abs(float(np.dot(d, reference))) > 1.0 - PARALLEL_TOLERANCE:
            reference = FALLBACK_AXIS

        projected = reference - np.dot(reference, d) * d
        self.normal = normalize(projected)
        return self.normal

    def heart_position(self) -> np.ndarray:
        """Position shifted along the normal by the heart-line offset."""
        if self.normal is None:
            raise RuntimeError("update_norm() must be called before heart_position()")
        return self.position + self.normal * self.heartline_offset

    def get_state(self) -> dict:
        """Get node state for serialization.

        Returns:
            Dictionary of plain Python values
        """
        return {
            "position": self.position.tolist(),
            "direction": self.direction.tolist(),
            "normal": None if self.normal is None else self.normal.tolist(),
            "roll": self.roll,
            "heartline_offset": self.heartline_offset,
            "shape_a": self.shape_a,
            "shape_b": self.shape_b,
            "total_length": self.total_length,
            "angle_from_last": self.angle_from_last,
            "track_angle_from_last": self.track_angle_from_last,
            "pitch_from_last": self.pitch_from_last,
            "yaw_from_last": self.yaw_from_last,
            "heart_dist_from_last": self.heart_dist_from_last,
            "roll_speed": self.roll_speed,
            "smooth_speed": self.smooth_speed,
            "smooth_normal": self.smooth_normal,
            "smooth_lateral": self.smooth_lateral,
        }
