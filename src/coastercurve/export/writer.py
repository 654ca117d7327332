"""
Binary curve writer - Serialize curve segments for the target engine.

Binary format (flat concatenation of records, no header):
- Big-endian byte order throughout
- Record: 50 bytes
  - 10 float32: control_point1 xyz, control_point2 xyz, anchor xyz, roll
  - 1 byte continuous-roll flag (0xFF / 0x00)
  - 1 byte relative-roll flag (0xFF / 0x00)
  - 1 byte equal-distance control point flag (0xFF / 0x00)
  - 7 zero bytes
The reader derives the record count from the stream length.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List, Sequence
import logging
import os
import struct
import tempfile

from coastercurve.errors import CurveFormatError, CurveWriteError
from coastercurve.export.segment import CurveSegment


logger = logging.getLogger(__name__)

# Format constants
RECORD_FORMAT = ">10f3B7x"
RECORD_SIZE = struct.calcsize(RECORD_FORMAT)  # 50 bytes
FLAG_SET = 0xFF
FLAG_CLEAR = 0x00


def _flag(value: bool) -> int:
    return FLAG_SET if value else FLAG_CLEAR


def pack_segment(segment: CurveSegment) -> bytes:
    """Encode one segment as a 50-byte record.

    Args:
        segment: Segment to encode

    Returns:
        Record bytes
    """
    cp1 = segment.control_point1
    cp2 = segment.control_point2
    anchor = segment.anchor
    return struct.pack(
        RECORD_FORMAT,
        cp1[0], cp1[1], cp1[2],
        cp2[0], cp2[1], cp2[2],
        anchor[0], anchor[1], anchor[2],
        segment.roll,
        _flag(segment.continuous_roll),
        _flag(segment.relative_roll),
        _flag(segment.equal_distance),
    )


def read_segments(data: bytes) -> List[CurveSegment]:
    """Decode a byte string of records back into segments.

    Args:
        data: Concatenated records

    Returns:
        Segments in stream order

    Raises:
        CurveFormatError: If the length is not a whole number of records
            or a flag byte is neither 0x00 nor 0xFF
    """
    if len(data) % RECORD_SIZE != 0:
        raise CurveFormatError(
            f"Curve data length {len(data)} is not a multiple of {RECORD_SIZE}"
        )

    segments = []
    for i, values in enumerate(struct.iter_unpack(RECORD_FORMAT, data)):
        flags = values[10:13]
        if any(f not in (FLAG_SET, FLAG_CLEAR) for f in flags):
            raise CurveFormatError(f"Record {i} has invalid flag bytes {flags}")

        segments.append(CurveSegment(
            control_point1=values[0:3],
            control_point2=values[3:6],
            anchor=values[6:9],
            roll=values[9],
            continuous_roll=flags[0] == FLAG_SET,
            relative_roll=flags[1] == FLAG_SET,
        ))

    return segments


@dataclass
class WriterConfig:
    """Writer configuration."""
    output_dir: str = "."
    file_suffix: str = ".nlb"


class CurveWriter:
    """Write curve segments in the binary export format.

    The whole sequence is encoded before anything reaches the sink, and
    the sink receives it in a single write. A failing or short write is
    raised as CurveWriteError; success is only reported once every
    record has been handed over.
    """

    def __init__(self, config: WriterConfig | None = None):
        """Initialize writer.

        Args:
            config: Writer configuration
        """
        self.config = config or WriterConfig()

    def encode(self, segments: Sequence[CurveSegment]) -> bytes:
        """Encode segments in order, without skipping any."""
        return b"".join(pack_segment(segment) for segment in segments)

    def write(self, stream: BinaryIO, segments: Sequence[CurveSegment]) -> int:
        """Write segments to a binary stream.

        The stream is neither closed nor retained.

        Args:
            stream: Writable binary stream
            segments: Segments to write

        Returns:
            Number of bytes written

        Raises:
            CurveWriteError: If the stream fails or accepts fewer bytes
        """
        payload = self.encode(segments)

        try:
            written = stream.write(payload)
            stream.flush()
        except (OSError, ValueError) as e:
            raise CurveWriteError(f"Failed to write curve data: {e}") from e

        # Raw streams may report a short write instead of raising
        if written is not None and written != len(payload):
            raise CurveWriteError(
                f"Short write: {written} of {len(payload)} bytes"
            )

        logger.debug("Wrote %d segments (%d bytes)", len(segments), len(payload))
        return len(payload)

    def output_path(self, name: str) -> Path:
        """Path for an export named ``name`` inside output_dir."""
        path = Path(self.config.output_dir) / name
        if not path.suffix:
            path = path.with_suffix(self.config.file_suffix)
        return path

    def write_file(self, path: str | Path, segments: Sequence[CurveSegment]) -> Path:
        """Write segments to a file, replacing it atomically.

        Data goes to a temporary file next to the target which is renamed
        over the target only after a complete write, so a failure leaves
        any existing file untouched.

        Args:
            path: Output file path
            segments: Segments to write

        Returns:
            Path to the written file

        Raises:
            CurveWriteError: If the file cannot be written
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
        except OSError as e:
            raise CurveWriteError(f"Cannot create output for {path}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                self.write(f, segments)
            os.replace(tmp_name, path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise CurveWriteError(f"Failed to write {path}: {e}") from e
        except CurveWriteError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info("Wrote %d curve segments to %s", len(segments), path)
        return path
