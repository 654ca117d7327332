"""Shared fixtures for the coastercurve tests."""

from logging.handlers import RotatingFileHandler
import logging
import math

import pytest

from coastercurve.logconfig import CATEGORIES, RULES_ENV_VAR
from coastercurve.track.node import TrackNode
from coastercurve.track.sequence import NodeSequence, derive_deltas


@pytest.fixture
def straight_nodes():
    """Anchor, last and current nodes of the single-segment reference case.

    All three ride 10 m above the rail, so the heart-line offsets cancel
    in the exported points.
    """
    anchor = TrackNode([0.0, 0.0, 0.0], [0.0, 0.0, 1.0], 0.0, 10.0, 0.0, 0.0)
    last = TrackNode([0.0, 0.0, 0.0], [0.0, 0.0, 1.0], 0.0, 10.0, 0.0, 0.0)
    current = TrackNode([0.0, 0.0, 1.0], [0.0, 0.0, 1.0], 0.0, 10.0, 0.0, 0.0)

    for node in (anchor, last, current):
        node.update_norm()

    last.total_length = 0.0
    current.total_length = 1.0
    current.track_angle_from_last = 0.1
    current.angle_from_last = 0.1
    current.heart_dist_from_last = 1.0

    return anchor, last, current


@pytest.fixture
def helix_sequence():
    """A quarter turn of a flat curve, 16 nodes, deltas derived."""
    radius = 20.0
    count = 16
    sequence = NodeSequence()
    for i in range(count):
        theta = (math.pi / 2) * i / (count - 1)
        position = [radius * math.sin(theta), 0.0, radius * math.cos(theta) - radius]
        direction = [math.cos(theta), 0.0, -math.sin(theta)]
        sequence.add_node(TrackNode(position, direction, roll=0.2 * theta))

    sequence.update_norms()
    derive_deltas(sequence)
    return sequence


@pytest.fixture
def reset_logging(monkeypatch):
    """Undo handler and level changes made by setup_logging."""
    monkeypatch.delenv(RULES_ENV_VAR, raising=False)
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(logging.WARNING)
    for name in CATEGORIES + ("coastercurve.logconfig",):
        logging.getLogger(name).setLevel(logging.NOTSET)
