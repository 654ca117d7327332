"""
Curve exporter - Convert track nodes into Bezier curve segments.

Provides:
- Heart-line anchor placement in the export frame
- Control point levers from arc length and angular delta
- Absolute/relative roll encoding
- A driver that walks a NodeSequence window by window
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging
import math
import numpy as np

from coastercurve.export.segment import CurveSegment
from coastercurve.track.node import TrackNode
from coastercurve.track.sequence import NodeSequence


logger = logging.getLogger(__name__)

# Curve parameter width of one node span
DEFAULT_SPAN_STEP = 0.1


@dataclass
class ExportConfig:
    """Curve export configuration."""
    # Lever per unit of curve parameter and unit of chord, calibrated so a
    # node span exported over [0, DEFAULT_SPAN_STEP] gets about a third
    # of its length
    lever_scale: float = 3.336527

    # Upper bound on any lever, as a fraction of the arc length
    max_lever_fraction: float = 0.5

    # Roll deltas below this keep a relative encoding going (radians)
    roll_threshold: float = math.radians(1.0)

    # Target engine uses a left-handed frame: mirror z on output
    flip_z: bool = True


def wrap_angle(angle: float) -> float:
    """Wrap an angle in radians into (-pi, pi]."""
    wrapped = math.fmod(angle + math.pi, 2.0 * math.pi)
    if wrapped <= 0.0:
        wrapped += 2.0 * math.pi
    return wrapped - math.pi


def chord_ratio(angle: float) -> float:
    """Chord over arc length for a circular arc turning by ``angle`` radians."""
    half = 0.5 * abs(angle)
    if half < 1e-12:
        return 1.0
    return math.sin(half) / half


class CurveExporter:
    """Builds CurveSegment records from consecutive track nodes.

    Each call handles one node transition: the segment's anchor sits on
    the current node's heart-line point and its control points lie on the
    current node's tangent, one on each side, so consecutive segments
    share a tangent direction at every anchor.

    Usage:
        exporter = CurveExporter()
        segments = []
        exporter.export_node(segments, last, current, next_node, anchor, 0.0, 1.0)
    """

    def __init__(self, config: ExportConfig | None = None):
        """Initialize exporter.

        Args:
            config: Export configuration. Uses defaults if None.
        """
        self.config = config or ExportConfig()

    def to_export_frame(self, vec: np.ndarray) -> np.ndarray:
        """Map a world-space vector into the target engine's frame."""
        out = np.array(vec, dtype=float)
        if self.config.flip_z:
            out[2] = -out[2]
        return out

    def lever_length(
        self,
        arc: float,
        angle: float,
        shaping: float,
        t0: float,
        t1: float,
    ) -> float:
        """Length of both control point offsets.

        The lever is the chord of the span, scaled by the parameter range
        [t0, t1] the call covers and by the node shaping. The chord of a
        circular arc shrinks as the turn sharpens, so sharper turns get a
        shorter lever; a straight span uses the full arc length.

        Args:
            arc: Arc length of the span in meters
            angle: Angular delta across the span in radians
            shaping: Node shaping factor (0 = neutral)
            t0: Start of the covered parameter range
            t1: End of the covered parameter range

        Returns:
            Lever length in meters
        """
        chord = arc * chord_ratio(angle)
        lever = (t1 - t0) * self.config.lever_scale * chord * (1.0 + shaping)
        return min(lever, self.config.max_lever_fraction * arc)

    def encode_roll(
        self,
        segments: List[CurveSegment],
        last: TrackNode,
        current: TrackNode,
    ) -> Tuple[float, bool]:
        """Choose between absolute and relative roll.

        Args:
            segments: Output so far (the last entry is the previous segment)
            last: Previous node
            current: Node being exported

        Returns:
            Tuple of (roll value, is_relative)
        """
        delta = current.roll - last.roll

        # Beyond +-pi the absolute angle no longer identifies the winding
        ambiguous = abs(current.roll) > math.pi or abs(delta) > math.pi

        previous_relative = bool(segments) and segments[-1].relative_roll
        keep_relative = previous_relative and abs(delta) < self.config.roll_threshold

        if ambiguous or keep_relative:
            return delta, True
        return wrap_angle(current.roll), False

    def export_node(
        self,
        segments: List[CurveSegment],
        last: TrackNode,
        current: TrackNode,
        next_node: Optional[TrackNode],
        anchor: TrackNode,
        t0: float,
        t1: float,
    ) -> int:
        """Append the segment(s) for the transition last -> current.

        Nodes must have normals derived and lengths/deltas filled in;
        a zero heart distance gives undefined output. Both control points
        sit at the same distance from the anchor, so ``next_node`` does
        not change the geometry of this segment.

        Args:
            segments: Caller-owned output list, appended to
            last: Previous node
            current: Node whose anchor is exported
            next_node: Following node, or None at the end of the track
            anchor: Node holding the export origin
            t0: Start of the covered parameter range
            t1: End of the covered parameter range

        Returns:
            Number of segments appended
        """
        arc = current.total_length - last.total_length
        if arc <= 0.0:
            arc = current.heart_dist_from_last

        point = self.to_export_frame(current.heart_position() - anchor.heart_position())
        tangent = self.to_export_frame(current.unit_direction)

        shaping = 0.5 * (current.shape_a + current.shape_b)
        lever = self.lever_length(arc, current.angle_from_last, shaping, t0, t1)

        roll, relative = self.encode_roll(segments, last, current)

        segment = CurveSegment(
            control_point1=point + tangent * lever,
            control_point2=point - tangent * lever,
            anchor=point,
            roll=roll,
            relative_roll=relative,
        )
        segments.append(segment)

        logger.debug(
            "Exported segment %d: anchor=%s lever=%.4f roll=%.4f%s%s",
            len(segments) - 1,
            segment.anchor.tolist(),
            lever,
            roll,
            " (relative)" if relative else "",
            "" if next_node is not None else " (last)",
        )
        return 1


def export_track(
    sequence: NodeSequence,
    config: ExportConfig | None = None,
    t0: float = 0.0,
    t1: float = DEFAULT_SPAN_STEP,
    anchor_index: int = 0,
) -> List[CurveSegment]:
    """Export every node transition of a sequence.

    Args:
        sequence: Nodes with normals and deltas filled in
        config: Export configuration
        t0: Start of the parameter range covered by each span
        t1: End of the parameter range covered by each span
        anchor_index: Index of the node holding the export origin

    Returns:
        One CurveSegment per transition, in track order
    """
    exporter = CurveExporter(config)
    segments: List[CurveSegment] = []

    for window in sequence.windows(anchor_index):
        last, current, next_node, anchor = window.resolve(sequence)
        exporter.export_node(segments, last, current, next_node, anchor, t0, t1)

    logger.info("Exported %d curve segments from %d nodes", len(segments), len(sequence))
    return segments
