"""
Export module - Bezier curve export and the binary export format.

This module contains:
- CurveSegment: One exported Bezier vertex
- CurveExporter: Node transition to curve segment conversion
- CurveWriter: 50-byte-record binary serialization
"""

from coastercurve.export.segment import CurveSegment
from coastercurve.export.exporter import CurveExporter, ExportConfig, export_track
from coastercurve.export.writer import CurveWriter, WriterConfig, read_segments

__all__ = [
    "CurveSegment",
    "CurveExporter",
    "ExportConfig",
    "export_track",
    "CurveWriter",
    "WriterConfig",
    "read_segments",
]
