"""
coastercurve command line - Export a node file to the binary curve format.

Usage:
    coastercurve nodes.json                       # writes nodes.nlb
    coastercurve nodes.json -o out/track.nlb      # explicit output
    coastercurve nodes.json --derive-deltas       # node file has poses only
    coastercurve nodes.json --forces-csv f.csv    # also dump comfort forces
    coastercurve nodes.json --log-level DEBUG
"""

from pathlib import Path
from typing import List, Optional
import argparse
import csv
import logging
import math
import sys

from coastercurve import __version__
from coastercurve.errors import CoasterCurveError
from coastercurve.export.exporter import DEFAULT_SPAN_STEP, ExportConfig, export_track
from coastercurve.export.writer import CurveWriter, WriterConfig
from coastercurve.forces.smoother import SmootherConfig, smooth_track
from coastercurve.logconfig import LoggingConfig, setup_logging
from coastercurve.track.loader import load_nodes
from coastercurve.track.sequence import NodeSequence, derive_deltas


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="coastercurve",
        description="Export coaster track nodes as a Bezier curve file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument(
        "nodes",
        type=Path,
        help="JSON node file to export"
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Output curve file (default: node file name with .nlb)"
    )
    parser.add_argument(
        "--forces-csv",
        type=Path,
        help="Also write smoothed comfort forces per node to CSV"
    )
    parser.add_argument(
        "--derive-deltas",
        action="store_true",
        help="Compute lengths and angular deltas from node poses"
    )

    # Export settings
    export_group = parser.add_argument_group("Export")
    export_group.add_argument(
        "--t0",
        type=float,
        default=0.0,
        help="Start of the curve parameter range of each node span (default: 0)"
    )
    export_group.add_argument(
        "--t1",
        type=float,
        default=DEFAULT_SPAN_STEP,
        help="End of the curve parameter range of each node span; levers scale "
             f"with t1 - t0 (default: {DEFAULT_SPAN_STEP})"
    )
    export_group.add_argument(
        "--roll-threshold",
        type=float,
        default=1.0,
        help="Roll delta in degrees that ends relative roll encoding (default: 1)"
    )
    export_group.add_argument(
        "--anchor",
        type=int,
        default=0,
        help="Index of the node used as export origin (default: 0)"
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "OFF"],
        default="INFO",
        help="Log level (default: INFO)"
    )
    parser.add_argument(
        "--log-rules",
        help="Per-logger rules, e.g. 'coastercurve.export=DEBUG;coastercurve.forces=off'"
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Log file path (in addition to stdout)"
    )
    return parser


def write_forces_csv(sequence: NodeSequence, path: Path) -> Path:
    """Write per-node smoothed forces to CSV.

    Args:
        sequence: Nodes with forces computed
        path: Output CSV path

    Returns:
        Path to the written file
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["index", "total_length", "smooth_normal", "smooth_lateral"])
        for i, node in enumerate(sequence):
            writer.writerow([
                i,
                f"{node.total_length:.4f}",
                f"{node.smooth_normal:.3f}",
                f"{node.smooth_lateral:.3f}",
            ])
    return path


def run(args: argparse.Namespace) -> Path:
    """Load, export and write according to parsed arguments.

    Returns:
        Path of the written curve file

    Raises:
        CoasterCurveError: On invalid input or a failed write
    """
    sequence = load_nodes(args.nodes)
    sequence.update_norms()
    if args.derive_deltas:
        derive_deltas(sequence)
    sequence.validate()

    export_config = ExportConfig(roll_threshold=math.radians(args.roll_threshold))
    segments = export_track(
        sequence,
        export_config,
        t0=args.t0,
        t1=args.t1,
        anchor_index=args.anchor,
    )

    writer = CurveWriter(WriterConfig(output_dir=str(args.nodes.parent)))
    output = args.output or writer.output_path(args.nodes.stem)
    written = writer.write_file(output, segments)

    if args.forces_csv:
        smooth_track(sequence, SmootherConfig())
        write_forces_csv(sequence, args.forces_csv)
        logger.info("Wrote comfort forces to %s", args.forces_csv)

    return written


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    setup_logging(LoggingConfig(
        level=args.log_level,
        log_file=args.log_file,
        rules=args.log_rules,
    ))

    try:
        output = run(args)
    except CoasterCurveError as e:
        logger.error("Export failed: %s", e)
        return 1
    except OSError as e:
        logger.error("I/O error: %s", e)
        return 1

    logger.info("Export complete: %s", output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
