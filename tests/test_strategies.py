"""
Tests for greedy spiral search and randomized incremental placement.
"""

import random

import pytest

from treepack.geometry import TREE_TEMPLATE, bounding_box_size, check_all_overlaps
from treepack.strategies import (
    PackingConfig, ROTATIONS, greedy_spiral_packing, random_packing,
    round_half_up, spiral_positions,
)


class TestPackingConfig:

    def test_defaults(self):
        config = PackingConfig.default_mode()
        assert config.ring_step == 20
        assert config.max_radius == 150
        assert config.angle_step == 45
        assert config.rotations == ROTATIONS
        assert config.random_half_extent == 75
        assert config.max_attempts == 1000
        assert config.max_count == 200

    def test_extended_mode_is_wider(self):
        default, extended = PackingConfig.default_mode(), PackingConfig.extended_mode()
        assert extended.max_radius > default.max_radius
        assert extended.max_attempts > default.max_attempts
        extended.validate()

    @pytest.mark.parametrize("overrides", [
        {"ring_step": 0},
        {"max_radius": -1},
        {"angle_step": 0},
        {"rotations": ()},
        {"max_attempts": 0},
        {"max_count": 0},
    ])
    def test_validate_rejects(self, overrides):
        with pytest.raises(ValueError):
            PackingConfig(**overrides).validate()


class TestHelpers:

    @pytest.mark.parametrize("value,expected", [
        (2.5, 3), (-2.5, -2), (14.142, 14), (-14.6, -15), (1e-15, 0), (-0.0, 0),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_spiral_rings(self):
        rings = list(spiral_positions(PackingConfig()))
        assert len(rings) == 8  # radii 0, 20, ..., 140
        assert all(len(ring) == 8 for ring in rings)
        assert rings[0] == [(0, 0)] * 8
        assert rings[1] == [(20, 0), (14, 14), (0, 20), (-14, 14),
                            (-20, 0), (-14, -14), (0, -20), (14, -14)]


class TestGreedySpiral:

    def test_single_shape_at_origin(self):
        shapes = greedy_spiral_packing(1)
        assert len(shapes) == 1
        shape = shapes[0]
        assert (shape.id, shape.x, shape.y) == (1, 0, 0)
        assert shape.rotation in (45, 135, 225, 315)
        best_single = min(max(TREE_TEMPLATE.extent(r)) for r in ROTATIONS)
        assert bounding_box_size(shapes) == pytest.approx(best_single)

    def test_deterministic(self):
        assert greedy_spiral_packing(10) == greedy_spiral_packing(10)

    def test_no_overlaps(self):
        shapes = greedy_spiral_packing(25)
        assert check_all_overlaps(shapes) == []

    def test_ids_in_placement_order(self):
        shapes = greedy_spiral_packing(12)
        ids = [s.id for s in shapes]
        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)

    def test_positions_on_spiral(self):
        candidates = {p for ring in spiral_positions(PackingConfig()) for p in ring}
        for shape in greedy_spiral_packing(15):
            assert (shape.x, shape.y) in candidates
            assert shape.rotation in ROTATIONS

    def test_drops_when_rings_exhausted(self):
        config = PackingConfig(max_radius=1)  # only the ring at radius 0
        shapes = greedy_spiral_packing(3, config)
        assert [s.id for s in shapes] == [1]


class TestRandomPlacement:

    def test_seeded_generator_reproducible(self):
        a = random_packing(20, rng=random.Random(7))
        b = random_packing(20, rng=random.Random(7))
        assert a == b

    def test_config_seed_used_without_rng(self):
        config = PackingConfig(seed=3)
        assert random_packing(15, config) == random_packing(15, config)

    def test_within_window(self):
        for shape in random_packing(30, rng=random.Random(1)):
            assert -75 <= shape.x <= 75
            assert -75 <= shape.y <= 75
            assert shape.x == int(shape.x) and shape.y == int(shape.y)
            assert shape.rotation in ROTATIONS

    def test_no_overlaps(self):
        shapes = random_packing(40, rng=random.Random(5))
        assert check_all_overlaps(shapes) == []

    def test_skips_after_attempt_cap(self):
        # every draw lands on the origin, so only the first shape fits
        config = PackingConfig(random_half_extent=0, max_attempts=5)
        shapes = random_packing(3, config, rng=random.Random(0))
        assert [s.id for s in shapes] == [1]
        assert (shapes[0].x, shapes[0].y) == (0, 0)
