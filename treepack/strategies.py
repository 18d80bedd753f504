"""
strategies.py - Placement strategies for the tree packer
Key components:
- Greedy spiral search: rings of candidate positions outward from the origin,
  best-of-ring by resulting bounding square
- Randomized incremental placement: rejection sampling in a fixed window
"""
import math
import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .collision import CollisionIndex
from .geometry import PlacedShape, ShapeTemplate, TREE_TEMPLATE

ROTATIONS = (0, 45, 90, 135, 180, 225, 270, 315)


@dataclass
class PackingConfig:
    # Greedy spiral search
    ring_step: float = 20.0          # radius increment between rings
    max_radius: float = 150.0        # exclusive
    angle_step: float = 45.0         # degrees between samples on a ring
    rotations: Tuple[float, ...] = ROTATIONS

    # Randomized placement
    random_half_extent: float = 75.0  # positions drawn from [-h, h]^2
    max_attempts: int = 1000

    # Request limits
    max_count: int = 200

    seed: Optional[int] = None

    @classmethod
    def default_mode(cls):
        """Search limits of the interactive packer."""
        return cls()

    @classmethod
    def extended_mode(cls):
        """Wider search for large requests; fewer dropped shapes."""
        return cls(
            max_radius=400.0,
            random_half_extent=150.0,
            max_attempts=5000,
            max_count=1000,
        )

    def validate(self):
        if self.ring_step <= 0:
            raise ValueError(f"ring_step must be positive, got {self.ring_step}")
        if self.max_radius <= 0:
            raise ValueError(f"max_radius must be positive, got {self.max_radius}")
        if not 0 < self.angle_step <= 360:
            raise ValueError(f"angle_step must be in (0, 360], got {self.angle_step}")
        if not self.rotations:
            raise ValueError("rotations must not be empty")
        if self.random_half_extent < 0:
            raise ValueError(f"random_half_extent must be >= 0, got {self.random_half_extent}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.max_count < 1:
            raise ValueError(f"max_count must be >= 1, got {self.max_count}")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +inf."""
    return int(math.floor(value + 0.5))


def _frange(start: float, stop: float, step: float) -> Iterator[float]:
    """start, start+step, ... while < stop (no accumulated drift)."""
    i = 0
    value = start
    while value < stop:
        yield value
        i += 1
        value = start + i * step


def spiral_positions(config: PackingConfig) -> Iterator[List[Tuple[int, int]]]:
    """Yield one list of rounded (x, y) candidates per ring, innermost first."""
    for radius in _frange(0.0, config.max_radius, config.ring_step):
        ring = []
        for angle in _frange(0.0, 360.0, config.angle_step):
            rad = math.radians(angle)
            ring.append((round_half_up(radius * math.cos(rad)),
                         round_half_up(radius * math.sin(rad))))
        yield ring


def greedy_spiral_packing(
    count: int,
    config: Optional[PackingConfig] = None,
    template: ShapeTemplate = TREE_TEMPLATE,
    verbose: bool = False
) -> List[PlacedShape]:
    """
    Place shapes one at a time on the first spiral ring that admits them.

    Every admissible (position, rotation) on a ring is scored by the
    bounding square of the placed set plus that candidate; the first
    strictly smallest wins. A shape that no ring admits is dropped.
    """
    if config is None:
        config = PackingConfig()

    index = CollisionIndex(template)
    rings = list(spiral_positions(config))

    for shape_id in range(1, count + 1):
        best = None
        best_poly = None
        best_box = float('inf')

        for ring in rings:
            for x, y in ring:
                for rotation in config.rotations:
                    candidate = PlacedShape(shape_id, x, y, rotation)
                    poly = index.materialize(candidate)
                    if not index.is_admissible(poly):
                        continue
                    box = index.bounding_box_with(poly)
                    if box < best_box:
                        best_box = box
                        best = candidate
                        best_poly = poly
            if best is not None:
                break

        if best is not None:
            index.add(best, best_poly)
        elif verbose:
            print(f"  shape {shape_id}: no admissible position within radius {config.max_radius:g}")

        if verbose and (shape_id % 10 == 0 or shape_id == count):
            print(f"  placed {len(index)}/{shape_id} | side={index.bounding_box_size():.2f}")

    return index.shapes


def random_packing(
    count: int,
    config: Optional[PackingConfig] = None,
    rng: Optional[random.Random] = None,
    template: ShapeTemplate = TREE_TEMPLATE,
    verbose: bool = False
) -> List[PlacedShape]:
    """
    Randomized incremental placement (rejection sampling).

    Each shape draws up to max_attempts uniform candidates and keeps the
    first admissible one. There is no temperature schedule; earlier
    placements are never revisited.
    """
    if config is None:
        config = PackingConfig()
    if rng is None:
        rng = random.Random(config.seed)

    index = CollisionIndex(template)
    h = config.random_half_extent

    for shape_id in range(1, count + 1):
        for _ in range(config.max_attempts):
            candidate = PlacedShape(
                shape_id,
                round_half_up(rng.uniform(-h, h)),
                round_half_up(rng.uniform(-h, h)),
                rng.choice(config.rotations),
            )
            poly = index.materialize(candidate)
            if index.is_admissible(poly):
                index.add(candidate, poly)
                break
        else:
            if verbose:
                print(f"  shape {shape_id}: skipped after {config.max_attempts} attempts")

    if verbose:
        print(f"  placed {len(index)}/{count} | side={index.bounding_box_size():.2f}")

    return index.shapes
