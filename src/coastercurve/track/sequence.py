"""
Node sequence - Ordered arena of track nodes.

Contains:
- NodeSequence: list-backed node storage addressed by integer index
- NodeWindow: last/current/next/anchor indices for one node transition
- derive_deltas: fills the per-node deltas an editor would precompute
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple
import logging
import math
import numpy as np

from coastercurve.errors import NodeSequenceError
from coastercurve.track.node import TrackNode


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeWindow:
    """Indices of the nodes taking part in one export step.

    ``next`` is None for the final transition of the sequence.
    """
    last: int
    current: int
    next: Optional[int]
    anchor: int

    def resolve(
        self,
        sequence: "NodeSequence",
    ) -> Tuple[TrackNode, TrackNode, Optional[TrackNode], TrackNode]:
        """Look the indices up in a sequence.

        Args:
            sequence: Sequence the window was produced from

        Returns:
            Tuple of (last, current, next, anchor) nodes
        """
        next_node = sequence[self.next] if self.next is not None else None
        return (
            sequence[self.last],
            sequence[self.current],
            next_node,
            sequence[self.anchor],
        )


class NodeSequence:
    """Ordered collection of track nodes.

    Nodes are owned by the sequence and referred to by index, so the
    exporter can walk the track as a sliding window without holding
    object references between calls.

    Usage:
        seq = NodeSequence()
        seq.add_node(TrackNode(...))
        seq.update_norms()

        for window in seq.windows():
            last, current, next_node, anchor = window.resolve(seq)
    """

    def __init__(self, nodes: List[TrackNode] | None = None):
        """Initialize sequence.

        Args:
            nodes: Initial nodes, in track order
        """
        self._nodes: List[TrackNode] = list(nodes) if nodes else []

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, index: int) -> TrackNode:
        return self._nodes[index]

    def __iter__(self) -> Iterator[TrackNode]:
        return iter(self._nodes)

    @property
    def nodes(self) -> List[TrackNode]:
        """Nodes in track order."""
        return self._nodes

    @property
    def length(self) -> float:
        """Arc length up to the final node."""
        if not self._nodes:
            return 0.0
        return self._nodes[-1].total_length

    def add_node(self, node: TrackNode) -> int:
        """Append a node.

        Args:
            node: Node to add

        Returns:
            Index of the new node
        """
        self._nodes.append(node)
        return len(self._nodes) - 1

    def update_norms(self) -> None:
        """Derive the normal of every node."""
        for node in self._nodes:
            node.update_norm()

    def windows(self, anchor_index: int = 0) -> Iterator[NodeWindow]:
        """Iterate over every node transition.

        Args:
            anchor_index: Index of the node carrying the export origin

        Yields:
            One NodeWindow per transition i-1 -> i
        """
        count = len(self._nodes)
        for i in range(1, count):
            yield NodeWindow(
                last=i - 1,
                current=i,
                next=i + 1 if i + 1 < count else None,
                anchor=anchor_index,
            )

    def validate(self) -> None:
        """Check the preconditions the exporter relies on.

        The exporter itself does not check its input; this is for callers
        that build sequences from untrusted data.

        Raises:
            NodeSequenceError: On a zero direction, non-positive spacing
                or decreasing total length
        """
        if len(self._nodes) < 2:
            raise NodeSequenceError("At least two nodes are required for export")

        for i, node in enumerate(self._nodes):
            if np.linalg.norm(node.direction) < 1e-9:
                raise NodeSequenceError(f"Node {i} has a zero-length direction")
            if i == 0:
                continue
            if node.heart_dist_from_last <= 0.0:
                raise NodeSequenceError(
                    f"Node {i} has non-positive heart distance {node.heart_dist_from_last}"
                )
            if node.total_length < self._nodes[i - 1].total_length:
                raise NodeSequenceError(f"Node {i} total length decreases")

    def get_state(self) -> dict:
        """Get sequence state for serialization."""
        return {
            "num_nodes": len(self._nodes),
            "length_m": self.length,
            "nodes": [n.get_state() for n in self._nodes],
        }


def _pitch_yaw(direction: np.ndarray) -> Tuple[float, float]:
    """Pitch and yaw of a unit direction in radians."""
    pitch = math.asin(float(np.clip(direction[1], -1.0, 1.0)))
    yaw = math.atan2(float(direction[0]), float(direction[2]))
    return pitch, yaw


def _wrap_radians(angle: float) -> float:
    """Wrap an angle into (-pi, pi]."""
    while angle > math.pi:
        angle -= 2.0 * math.pi
    while angle <= -math.pi:
        angle += 2.0 * math.pi
    return angle


def derive_deltas(sequence: NodeSequence) -> None:
    """Fill lengths and angular deltas from node poses.

    This is the bookkeeping an editor does before handing nodes to the
    exporter. Normals are derived first when missing.

    Args:
        sequence: Nodes to annotate in place
    """
    cumulative = 0.0
    previous: Optional[TrackNode] = None

    for node in sequence:
        if node.normal is None:
            node.update_norm()

        if previous is None:
            node.total_length = 0.0
            node.heart_dist_from_last = 0.0
            node.angle_from_last = 0.0
            node.track_angle_from_last = 0.0
            node.pitch_from_last = 0.0
            node.yaw_from_last = 0.0
            previous = node
            continue

        dist = float(np.linalg.norm(node.heart_position() - previous.heart_position()))
        cumulative += dist

        d0 = previous.unit_direction
        d1 = node.unit_direction
        angle = math.acos(float(np.clip(np.dot(d0, d1), -1.0, 1.0)))

        pitch0, yaw0 = _pitch_yaw(d0)
        pitch1, yaw1 = _pitch_yaw(d1)
        roll_delta = node.roll - previous.roll

        node.heart_dist_from_last = dist
        node.total_length = cumulative
        node.angle_from_last = angle
        node.track_angle_from_last = math.hypot(angle, roll_delta)
        node.pitch_from_last = pitch1 - pitch0
        node.yaw_from_last = _wrap_radians(yaw1 - yaw0)

        previous = node

    logger.debug("Derived deltas for %d nodes, length %.3f m", len(sequence), cumulative)
