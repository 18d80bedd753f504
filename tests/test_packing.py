"""
Tests for the run_packing entry point, Packing results, scoring and validation.
"""

import random

import pytest

from treepack.geometry import PlacedShape, TREE_TEMPLATE
from treepack.packing import Packing, PackingSolver, run_packing
from treepack.strategies import PackingConfig, ROTATIONS
from treepack.validate import (
    compute_score, validate_packing, validate_shapes,
    print_packing_summary, print_score_summary,
)


@pytest.fixture(scope="module")
def greedy_ten():
    return run_packing(10, "greedy")


class TestRunPacking:

    def test_single_shape_scenario(self):
        packing = run_packing(1, "greedy")
        assert packing.placed_count == 1
        assert packing.is_complete
        shape = packing.shapes[0]
        assert (shape.x, shape.y) == (0, 0)
        best_single = min(max(TREE_TEMPLATE.extent(r)) for r in ROTATIONS)
        assert packing.bounding_box_size == pytest.approx(best_single)
        assert packing.score == pytest.approx(packing.bounding_box_size ** 2)

    def test_greedy_deterministic(self, greedy_ten):
        assert run_packing(10, "greedy").shapes == greedy_ten.shapes

    @pytest.mark.parametrize("strategy", ["greedy", "random"])
    def test_no_overlap_invariant(self, strategy):
        packing = run_packing(30, strategy, rng=random.Random(9))
        result = validate_packing(packing)
        assert result.valid, result.error_message
        assert result.overlaps == []
        assert result.area_overlaps == []

    def test_random_seeded(self):
        a = run_packing(15, "random", rng=random.Random(21))
        b = run_packing(15, "random", rng=random.Random(21))
        assert a.shapes == b.shapes
        assert a.strategy == "random"

    def test_capacity_exhaustion_reported(self):
        packing = run_packing(200, "greedy")
        assert packing.requested == 200
        assert packing.placed_count < 200
        assert not packing.is_complete
        assert packing.dropped_count == 200 - packing.placed_count
        assert len(packing.dropped_ids) == packing.dropped_count
        assert packing.score == pytest.approx(
            packing.bounding_box_size ** 2 / packing.placed_count
        )

    @pytest.mark.parametrize("count", [0, -1, 201, 2.0, True, "10"])
    def test_invalid_count(self, count):
        with pytest.raises(ValueError):
            run_packing(count, "greedy")

    @pytest.mark.parametrize("strategy", ["annealing", "", "GREEDY"])
    def test_unknown_strategy(self, strategy):
        with pytest.raises(ValueError, match="Unknown strategy"):
            run_packing(5, strategy)

    def test_count_limit_follows_config(self):
        config = PackingConfig(max_count=5)
        with pytest.raises(ValueError):
            run_packing(6, "greedy", config)


class TestPacking:

    def test_empty_packing_has_no_score(self):
        packing = Packing(shapes=[], requested=3, strategy="random")
        assert packing.score is None
        assert packing.display_score == 0.0
        assert packing.dropped_ids == [1, 2, 3]

    def test_dropped_ids_gaps(self):
        shapes = [PlacedShape(1, 0, 0, 0), PlacedShape(3, 50, 0, 0)]
        packing = Packing(shapes=shapes, requested=4, strategy="greedy", bounding_box_size=66.0)
        assert packing.dropped_ids == [2, 4]
        assert packing.score == pytest.approx(66.0 ** 2 / 2)


class TestScoring:

    def test_compute_score(self):
        assert compute_score(10.0, 4) == pytest.approx(25.0)
        assert compute_score(0.0, 0) is None


class TestValidation:

    def test_overlapping_shapes_invalid(self):
        result = validate_shapes([PlacedShape(1, 0, 0, 0), PlacedShape(2, 1, 0, 0)])
        assert not result.valid
        assert result.overlaps == [(0, 1)]
        assert "overlap" in result.error_message

    def test_duplicate_ids_invalid(self):
        result = validate_shapes([PlacedShape(1, 0, 0, 0), PlacedShape(1, 100, 0, 0)])
        assert not result.valid
        assert result.duplicate_ids == [1]

    def test_incomplete_is_still_valid(self):
        result = validate_shapes([PlacedShape(2, 0, 0, 0)], requested=3)
        assert result.valid
        assert not result.complete

    def test_stale_bounding_box_flagged(self, greedy_ten):
        stale = Packing(greedy_ten.shapes, greedy_ten.requested, "greedy",
                        bounding_box_size=greedy_ten.bounding_box_size + 1)
        result = validate_packing(stale)
        assert not result.valid
        assert "bounding square" in result.error_message

    def test_summaries_print(self, greedy_ten, capsys):
        print_packing_summary(greedy_ten)
        print_score_summary({10: greedy_ten})
        out = capsys.readouterr().out
        assert "Trees placed: 10/10" in out
        assert "SCORE SUMMARY" in out


class TestPackingSolver:

    def test_solve_all(self):
        solver = PackingSolver("greedy")
        packings = solver.solve_all(max_n=5, verbose=False)
        assert sorted(packings) == [1, 2, 3, 4, 5]
        assert all(p.requested == n for n, p in packings.items())
        assert solver.compute_total_score() == pytest.approx(
            sum(p.score for p in packings.values())
        )

    def test_random_sweep_reproducible(self):
        a = PackingSolver("random", seed=4).solve_all(max_n=4, verbose=False)
        b = PackingSolver("random", seed=4).solve_all(max_n=4, verbose=False)
        assert [p.shapes for p in a.values()] == [p.shapes for p in b.values()]
