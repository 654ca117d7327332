"""Tests for the coastercurve command line."""

import csv
import json

import pytest

from coastercurve.cli import build_parser, main
from coastercurve.export.writer import read_segments


pytestmark = pytest.mark.usefixtures("reset_logging")


def write_node_file(path, count=4, spacing=2.0):
    nodes = [
        {"position": [0.0, 0.0, spacing * i], "direction": [0.0, 0.0, 1.0], "roll": 0.01 * i}
        for i in range(count)
    ]
    path.write_text(json.dumps({"nodes": nodes}))
    return path


class TestParser:
    """Test argument defaults."""

    def test_defaults(self):
        args = build_parser().parse_args(["nodes.json"])

        assert args.t0 == 0.0
        assert args.t1 == 0.1
        assert args.roll_threshold == 1.0
        assert args.anchor == 0
        assert args.log_level == "INFO"
        assert not args.derive_deltas


class TestMain:
    """Test end-to-end runs."""

    def test_export_default_output(self, tmp_path):
        """Output lands next to the node file with the curve suffix."""
        nodes = write_node_file(tmp_path / "track.json", count=4)

        code = main([str(nodes), "--derive-deltas", "--log-level", "OFF"])

        output = tmp_path / "track.nlb"
        assert code == 0
        assert len(output.read_bytes()) == 50 * 3
        assert len(read_segments(output.read_bytes())) == 3

    def test_explicit_output(self, tmp_path):
        nodes = write_node_file(tmp_path / "track.json", count=6)
        output = tmp_path / "out" / "curve.nlb"

        code = main([str(nodes), "--derive-deltas", "-o", str(output), "--log-level", "OFF"])

        assert code == 0
        assert len(output.read_bytes()) == 50 * 5

    def test_forces_csv(self, tmp_path):
        nodes = write_node_file(tmp_path / "track.json", count=5)
        forces = tmp_path / "forces.csv"

        code = main([str(nodes), "--derive-deltas", "--forces-csv", str(forces), "--log-level", "OFF"])

        with open(forces, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert code == 0
        assert rows[0] == ["index", "total_length", "smooth_normal", "smooth_lateral"]
        assert len(rows) == 6

    def test_missing_deltas_fail(self, tmp_path):
        """Nodes without spacing are rejected before anything is written."""
        nodes = write_node_file(tmp_path / "track.json")

        code = main([str(nodes), "--log-level", "OFF"])

        assert code == 1
        assert not (tmp_path / "track.nlb").exists()

    def test_non_object_entry_fails_cleanly(self, tmp_path):
        """A malformed node entry is reported as an export failure."""
        nodes = tmp_path / "track.json"
        nodes.write_text(json.dumps({"nodes": [1]}))

        code = main([str(nodes), "--log-level", "OFF"])

        assert code == 1

    def test_missing_node_file(self, tmp_path):
        code = main([str(tmp_path / "missing.json"), "--log-level", "OFF"])

        assert code == 1

    def test_log_file_written(self, tmp_path):
        nodes = write_node_file(tmp_path / "track.json")
        log_file = tmp_path / "run.log"

        code = main([str(nodes), "--derive-deltas", "--log-file", str(log_file)])

        assert code == 0
        assert "Export complete" in log_file.read_text(encoding="utf-8")
