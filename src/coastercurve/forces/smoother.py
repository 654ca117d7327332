"""
Ride force smoother - Comfort force estimates per track node.

Provides:
- Smoothed normal/lateral force proxies from angular deltas
- Carried roll/forward speed state threaded node to node
"""

from dataclasses import dataclass
from typing import Tuple
import logging
import math

from coastercurve.track.node import TrackNode
from coastercurve.track.sequence import NodeSequence


logger = logging.getLogger(__name__)


@dataclass
class SmootherConfig:
    """Force smoothing configuration.

    The two gains are calibrated against reference values of the
    desktop tool rather than derived from first principles.
    """
    gravity: float = 9.80665

    # Gain on the curvature term of the normal force
    normal_gain: float = 17.4533

    # Gain on the yaw term of the lateral force
    lateral_gain: float = 0.9284

    # Node sampling rate used to turn spacing into forward speed
    sample_rate_hz: float = 1000.0

    # Weight of a new speed sample in the running forward speed (0-1)
    speed_smoothing: float = 0.1


@dataclass
class ForceCarry:
    """State carried from one node to the next.

    Attributes:
        roll_speed: Roll rate of the previous transition (rad/m)
        smooth_speed: Filtered forward speed (m/s)
    """
    roll_speed: float = 0.0
    smooth_speed: float = 0.0

    def advance(
        self,
        previous: TrackNode | None,
        node: TrackNode,
        config: SmootherConfig,
    ) -> "ForceCarry":
        """Carry for the node after ``node``.

        Args:
            previous: Node before ``node`` (None at the track start)
            node: Node just processed
            config: Smoother configuration

        Returns:
            New carry; self is not modified
        """
        if previous is None or node.heart_dist_from_last <= 0.0:
            return ForceCarry(self.roll_speed, self.smooth_speed)

        roll_speed = (node.roll - previous.roll) / node.heart_dist_from_last
        sample = node.heart_dist_from_last * config.sample_rate_hz

        if self.smooth_speed == 0.0:
            smooth_speed = sample
        else:
            alpha = config.speed_smoothing
            smooth_speed = self.smooth_speed + alpha * (sample - self.smooth_speed)

        return ForceCarry(roll_speed, smooth_speed)


class RideForceSmoother:
    """Computes smoothed comfort forces for single nodes.

    The calculation only looks at one node: its deltas to the previous
    node, its heart-line offset and shaping, and the roll/forward speed
    seeds already stored on it. Threading the seeds along the track is
    the caller's job (see smooth_track).

    Usage:
        smoother = RideForceSmoother()
        normal, lateral = smoother.calc_smooth_forces(node)
    """

    def __init__(self, config: SmootherConfig | None = None):
        """Initialize smoother.

        Args:
            config: Smoother configuration. Uses defaults if None.
        """
        self.config = config or SmootherConfig()

    def calc_smooth_forces(self, node: TrackNode) -> Tuple[float, float]:
        """Compute and store ``smooth_normal`` and ``smooth_lateral``.

        Angular deltas and roll are read in radians. A zero
        heart distance is a caller precondition violation.

        Args:
            node: Node to annotate

        Returns:
            Tuple of (smooth_normal, smooth_lateral)
        """
        g = self.config.gravity
        dist = node.heart_dist_from_last
        lever = node.heartline_offset

        # Angular rates in rad/m
        rate = node.angle_from_last / dist
        cos_roll = math.cos(node.roll)
        sin_roll = math.sin(node.roll)
        lateral_rate = (
            node.yaw_from_last * cos_roll - node.pitch_from_last * sin_roll
        ) / dist

        # Carried state: roll rate at the current forward speed (rad/s)
        roll_rate = node.roll_speed * node.smooth_speed

        normal = (
            node.shape_a * rate * lever * lever * self.config.normal_gain / g
            - roll_rate * roll_rate * lever / g
        )
        lateral = (
            node.shape_b * lateral_rate * lever * lever * self.config.lateral_gain / g
            + node.smooth_speed * node.smooth_speed * lateral_rate / g
        )

        node.smooth_normal = normal
        node.smooth_lateral = lateral
        return normal, lateral


def smooth_track(
    sequence: NodeSequence,
    config: SmootherConfig | None = None,
    carry: ForceCarry | None = None,
) -> ForceCarry:
    """Run the smoother over a sequence, threading the carried state.

    The first node has no predecessor and keeps zero forces.

    Args:
        sequence: Nodes with deltas filled in
        config: Smoother configuration
        carry: Initial carried state

    Returns:
        Carry after the final node, for continuing on a later sequence
    """
    smoother = RideForceSmoother(config)
    carry = carry or ForceCarry()
    previous: TrackNode | None = None

    for node in sequence:
        if previous is None:
            node.smooth_normal = 0.0
            node.smooth_lateral = 0.0
        else:
            node.roll_speed = carry.roll_speed
            node.smooth_speed = carry.smooth_speed
            smoother.calc_smooth_forces(node)
        carry = carry.advance(previous, node, smoother.config)
        previous = node

    logger.debug("Smoothed forces for %d nodes", len(sequence))
    return carry
