"""
Node file loader - Read track nodes from JSON.

File layout:
    {"nodes": [{"position": [x, y, z], "direction": [x, y, z], "roll": 0.0, ...}]}

Any TrackNode field may appear on a node entry; omitted fields keep their
defaults.
"""

from dataclasses import fields
from pathlib import Path
import json
import logging

from coastercurve.errors import NodeSequenceError
from coastercurve.track.node import TrackNode
from coastercurve.track.sequence import NodeSequence


logger = logging.getLogger(__name__)

# Fields that are never read from input
_OUTPUT_FIELDS = {"normal", "smooth_normal", "smooth_lateral"}

_NODE_FIELDS = {f.name for f in fields(TrackNode)} - _OUTPUT_FIELDS


def node_from_dict(data: dict) -> TrackNode:
    """Build a node from a JSON entry.

    Args:
        data: Mapping with at least ``position`` and ``direction``

    Returns:
        New TrackNode

    Raises:
        NodeSequenceError: On a non-object entry or missing or unknown keys
    """
    if not isinstance(data, dict):
        raise NodeSequenceError(f"Node entry must be an object, got {type(data).__name__}")

    missing = {"position", "direction"} - data.keys()
    if missing:
        raise NodeSequenceError(f"Node entry missing {sorted(missing)}")

    unknown = data.keys() - _NODE_FIELDS
    if unknown:
        raise NodeSequenceError(f"Unknown node fields {sorted(unknown)}")

    try:
        return TrackNode(**data)
    except (TypeError, ValueError) as e:
        raise NodeSequenceError(f"Invalid node entry: {e}") from e


def load_nodes(path: str | Path) -> NodeSequence:
    """Load a node sequence from a JSON file.

    Args:
        path: Path to the node file

    Returns:
        NodeSequence in file order

    Raises:
        NodeSequenceError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise NodeSequenceError(f"Cannot read node file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise NodeSequenceError(f"Node file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("nodes"), list):
        raise NodeSequenceError(f"Node file {path} has no 'nodes' list")

    sequence = NodeSequence()
    for entry in data["nodes"]:
        sequence.add_node(node_from_dict(entry))

    logger.info("Loaded %d nodes from %s", len(sequence), path)
    return sequence
