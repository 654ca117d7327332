"""
Curve segment - One cubic Bezier piece of the exported curve.
"""

from dataclasses import dataclass
import math
import numpy as np


def as_float32_vec3(value) -> np.ndarray:
    """Coerce to a float32 3-vector (the precision of the wire format)."""
    return np.array(value, dtype=np.float32).reshape(3)


@dataclass(eq=False)
class CurveSegment:
    """A single exported Bezier vertex.

    ``control_point1`` leads toward the next segment, ``control_point2``
    back toward the previous one; both bracket ``anchor``. Values are
    stored as float32 so they serialize without rounding.
    """
    control_point1: np.ndarray
    control_point2: np.ndarray
    anchor: np.ndarray
    roll: float = 0.0
    relative_roll: bool = False     # roll is a delta from the previous segment
    continuous_roll: bool = True

    def __post_init__(self):
        self.control_point1 = as_float32_vec3(self.control_point1)
        self.control_point2 = as_float32_vec3(self.control_point2)
        self.anchor = as_float32_vec3(self.anchor)
        self.roll = float(np.float32(self.roll))

    @property
    def equal_distance(self) -> bool:
        """Whether both control points sit at the same distance from the anchor.

        The tolerance grows with the coordinate magnitude, since float32
        rounding of the stored points scales with it.
        """
        d1 = float(np.linalg.norm(self.control_point1 - self.anchor))
        d2 = float(np.linalg.norm(self.control_point2 - self.anchor))
        scale = max(1.0, float(np.max(np.abs(self.anchor))))
        return math.isclose(d1, d2, rel_tol=1e-6, abs_tol=1e-6 * scale)

    def get_state(self) -> dict:
        """Get segment state for serialization."""
        return {
            "control_point1": self.control_point1.tolist(),
            "control_point2": self.control_point2.tolist(),
            "anchor": self.anchor.tolist(),
            "roll": self.roll,
            "relative_roll": self.relative_roll,
            "continuous_roll": self.continuous_roll,
            "equal_distance": self.equal_distance,
        }
