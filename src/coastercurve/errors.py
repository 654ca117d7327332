"""
Exception hierarchy for coastercurve.

Numeric code (export, force smoothing) never raises on bad input: degenerate
nodes are a caller precondition. Only validation helpers and I/O raise.
"""


class CoasterCurveError(Exception):
    """Base class for all coastercurve errors."""


class NodeSequenceError(CoasterCurveError):
    """Node input failed validation or could not be loaded."""


class ExportError(CoasterCurveError):
    """Base class for failures while exporting a curve."""


class CurveWriteError(ExportError):
    """Writing the binary curve to its sink failed.

    Raised before the writer reports success, so a caller never sees a
    partially written export as complete.
    """


class CurveFormatError(CoasterCurveError):
    """Binary curve data is malformed (e.g. not a whole number of records)."""
