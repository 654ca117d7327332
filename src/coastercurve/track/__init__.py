"""
Track module - Node model and node sequence handling.

This module contains:
- TrackNode: A single station with pose, banking and deltas
- NodeSequence: Ordered node arena with sliding export windows
- NodeWindow: last/current/next/anchor indices for one transition
- load_nodes: JSON node file reader
"""

from coastercurve.track.node import TrackNode
from coastercurve.track.sequence import NodeSequence, NodeWindow, derive_deltas
from coastercurve.track.loader import load_nodes

__all__ = [
    "TrackNode",
    "NodeSequence",
    "NodeWindow",
    "derive_deltas",
    "load_nodes",
]
