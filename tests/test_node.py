"""Tests for the track node model."""

import numpy as np
import pytest

from coastercurve.track.node import TrackNode, FALLBACK_AXIS


class TestNormalDerivation:
    """Test update_norm()."""

    @pytest.mark.parametrize("direction", [
        [0.0, 0.0, 1.0],
        [1.0, 0.0, 0.0],
        [3.0, 4.0, 0.0],
        [0.2, -0.7, 5.0],
        [-1.0, 1.0, -1.0],
    ])
    def test_normal_orthogonal_and_idempotent(self, direction):
        """Normal is orthogonal to direction and stable across calls."""
        node = TrackNode([1.0, 2.0, 3.0], direction)

        first = node.update_norm().copy()
        second = node.update_norm()

        assert np.array_equal(first, second)
        assert abs(np.dot(second, node.direction)) < 1e-5
        assert np.linalg.norm(second) == pytest.approx(1.0)

    def test_level_direction_points_up(self):
        """A level direction gets the world up axis as normal."""
        node = TrackNode([0.0, 0.0, 0.0], [0.0, 0.0, 2.0])
        node.update_norm()

        assert np.allclose(node.normal, [0.0, 1.0, 0.0])

    @pytest.mark.parametrize("direction", [[0.0, 1.0, 0.0], [0.0, -3.0, 0.0]])
    def test_vertical_direction_uses_fallback(self, direction):
        """Vertical directions do not collapse to a zero normal."""
        node = TrackNode([0.0, 0.0, 0.0], direction)
        node.update_norm()

        assert np.all(np.isfinite(node.normal))
        assert np.allclose(node.normal, FALLBACK_AXIS)

    def test_update_norm_only_sets_normal(self):
        """Deriving the normal leaves pose and metrics alone."""
        node = TrackNode([1.0, 2.0, 3.0], [0.0, 0.5, 1.0], roll=0.3, heartline_offset=1.1)
        node.total_length = 12.0
        before = node.get_state()

        node.update_norm()
        after = node.get_state()

        before.pop("normal")
        after.pop("normal")
        assert before == after


class TestTrackNode:
    """Test node construction and helpers."""

    def test_constructor_argument_order(self):
        """Positional arguments map to pose, roll, heart-line and shaping."""
        node = TrackNode([0, 0, 0], [0, 0, 1], 0.5, 20.0, 1.0, 0.5)

        assert node.roll == 0.5
        assert node.heartline_offset == 20.0
        assert node.shape_a == 1.0
        assert node.shape_b == 0.5
        assert node.normal is None

    def test_vectors_coerced_to_arrays(self):
        """Lists become float arrays."""
        node = TrackNode((1, 2, 3), [0, 0, 1])

        assert isinstance(node.position, np.ndarray)
        assert node.position.dtype == float

    def test_heart_position(self):
        """Heart position is offset along the normal."""
        node = TrackNode([0.0, 0.0, 0.0], [1.0, 0.0, 0.0], heartline_offset=1.2)
        node.update_norm()

        assert np.allclose(node.heart_position(), [0.0, 1.2, 0.0])

    def test_lateral_requires_normal(self):
        """Lateral is unavailable before the normal is derived."""
        node = TrackNode([0.0, 0.0, 0.0], [1.0, 0.0, 0.0])

        with pytest.raises(RuntimeError):
            _ = node.lateral

        node.update_norm()
        lateral = node.lateral
        assert abs(np.dot(lateral, node.normal)) < 1e-9
        assert abs(np.dot(lateral, node.unit_direction)) < 1e-9
