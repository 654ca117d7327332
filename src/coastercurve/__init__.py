"""
coastercurve - Track geometry export for coaster design tools.

This package turns user-placed coaster track nodes into a continuous curve:
- Track nodes with pose, banking, heart-line offset and per-node deltas
- Bezier curve export with tangent continuity and roll encoding
- Smoothed ride comfort forces per node
- Binary curve format for external renderers/simulators
"""

__version__ = "0.1.0"

from coastercurve.track.node import TrackNode
from coastercurve.track.sequence import NodeSequence
from coastercurve.export.segment import CurveSegment
from coastercurve.export.exporter import CurveExporter, export_track
from coastercurve.export.writer import CurveWriter
from coastercurve.forces.smoother import RideForceSmoother

__all__ = [
    "TrackNode",
    "NodeSequence",
    "CurveSegment",
    "CurveExporter",
    "export_track",
    "CurveWriter",
    "RideForceSmoother",
    "__version__",
]
