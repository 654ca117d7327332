#!/usr/bin/env python3
"""
Helix Export Example

This example demonstrates how to:
1. Build a node sequence from track poses
2. Derive lengths and angular deltas
3. Export the sequence as Bezier segments and write the curve file
4. Compute smoothed comfort forces along the track

Run with: python export_helix.py
"""

import math
from pathlib import Path

from coastercurve import CurveWriter, NodeSequence, TrackNode, export_track
from coastercurve.export.writer import read_segments
from coastercurve.forces import smooth_track
from coastercurve.track import derive_deltas


def build_helix(radius=15.0, climb=8.0, turns=1.0, count=48):
    """Build a climbing helix with banking that follows the turn."""
    print("=" * 60)
    print("1. Building Helix")
    print("=" * 60)

    sequence = NodeSequence()
    total_angle = 2 * math.pi * turns
    pitch = math.atan2(climb, radius * total_angle)

    for i in range(count):
        theta = total_angle * i / (count - 1)
        position = [
            radius * math.sin(theta),
            climb * i / (count - 1),
            radius * math.cos(theta) - radius,
        ]
        direction = [
            math.cos(theta) * math.cos(pitch),
            math.sin(pitch),
            -math.sin(theta) * math.cos(pitch),
        ]
        # Bank into the turn, easing in over the first quarter
        roll = -0.6 * min(1.0, 4.0 * i / (count - 1))
        sequence.add_node(TrackNode(position, direction, roll=roll, heartline_offset=1.1))

    sequence.update_norms()
    derive_deltas(sequence)

    print(f"\nNodes: {len(sequence)}")
    print(f"Length: {sequence.length:.1f} m")
    return sequence


def export_sequence(sequence, output):
    """Export and write the curve file."""
    print("\n" + "=" * 60)
    print("2. Exporting Curve")
    print("=" * 60)

    segments = export_track(sequence)
    path = CurveWriter().write_file(output, segments)

    relative = sum(1 for s in segments if s.relative_roll)
    print(f"\nSegments: {len(segments)}")
    print(f"Relative roll segments: {relative}")
    print(f"Wrote {path.stat().st_size} bytes to {path}")

    decoded = read_segments(path.read_bytes())
    print(f"Read back {len(decoded)} segments")


def report_forces(sequence):
    """Smooth comfort forces and print the extremes."""
    print("\n" + "=" * 60)
    print("3. Comfort Forces")
    print("=" * 60)

    smooth_track(sequence)

    peak_normal = max(sequence, key=lambda n: abs(n.smooth_normal))
    peak_lateral = max(sequence, key=lambda n: abs(n.smooth_lateral))

    print(f"\nPeak normal: {peak_normal.smooth_normal:.3f} at {peak_normal.total_length:.1f} m")
    print(f"Peak lateral: {peak_lateral.smooth_lateral:.3f} at {peak_lateral.total_length:.1f} m")


def main():
    sequence = build_helix()
    export_sequence(sequence, Path("helix.nlb"))
    report_forces(sequence)

    print("\n" + "=" * 60)
    print("Helix export example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
