import random

import pytest

from treepack.geometry import PlacedShape
from treepack.strategies import ROTATIONS


@pytest.fixture
def make_random_shapes():
    """Factory for reproducible random placements (overlaps allowed)."""
    def _make(n, seed=0, spread=40):
        rng = random.Random(seed)
        return [
            PlacedShape(i + 1, rng.uniform(-spread, spread), rng.uniform(-spread, spread),
                        rng.choice(ROTATIONS))
            for i in range(n)
        ]
    return _make
