"""
packing.py - Packing entry point for the tree packer

run_packing() is the single call a front end needs: a shape count and a
strategy name in, a Packing (placed shapes, bounding square, score) out.
PackingSolver sweeps one strategy over every count 1..max_n.
"""
import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .geometry import PlacedShape, TREE_TEMPLATE, bounding_box_size
from .strategies import PackingConfig, greedy_spiral_packing, random_packing
from .validate import compute_score


def _run_greedy(count, config, rng, verbose):
    return greedy_spiral_packing(count, config, TREE_TEMPLATE, verbose=verbose)


def _run_random(count, config, rng, verbose):
    return random_packing(count, config, rng, TREE_TEMPLATE, verbose=verbose)


STRATEGIES: Dict[str, Callable[..., List[PlacedShape]]] = {
    "greedy": _run_greedy,
    "random": _run_random,
}

STRATEGY_LABELS = {
    "greedy": "Greedy Spiral",
    # historical label; the strategy is rejection sampling, not annealing
    "random": "Random + Annealing",
}


@dataclass
class Packing:
    shapes: List[PlacedShape]
    requested: int
    strategy: str
    bounding_box_size: float = field(default=0.0)

    @property
    def placed_count(self) -> int:
        return len(self.shapes)

    @property
    def dropped_count(self) -> int:
        return self.requested - self.placed_count

    @property
    def dropped_ids(self) -> List[int]:
        placed = {s.id for s in self.shapes}
        return [i for i in range(1, self.requested + 1) if i not in placed]

    @property
    def is_complete(self) -> bool:
        return self.placed_count == self.requested

    @property
    def score(self) -> Optional[float]:
        """bounding_box_size^2 / placed count; None when nothing was placed."""
        return compute_score(self.bounding_box_size, self.placed_count)

    @property
    def display_score(self) -> float:
        score = self.score
        return 0.0 if score is None else score


def check_request(count: int, strategy: str, config: PackingConfig):
    """Fail fast on a malformed request instead of clamping it."""
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValueError(f"Shape count must be an integer, got {count!r}")
    if not 1 <= count <= config.max_count:
        raise ValueError(f"Shape count must be in [1, {config.max_count}], got {count}")
    if strategy not in STRATEGIES:
        raise ValueError(
            f"Unknown strategy {strategy!r}; expected one of {sorted(STRATEGIES)}"
        )


def run_packing(
    count: int,
    strategy: str = "greedy",
    config: Optional[PackingConfig] = None,
    rng: Optional[random.Random] = None,
    verbose: bool = False
) -> Packing:
    """
    Pack `count` trees with the named strategy.

    "greedy" is deterministic. "random" draws from `rng`, or from a new
    random.Random seeded with config.seed when no generator is given.
    """
    if config is None:
        config = PackingConfig.default_mode()
    config.validate()
    check_request(count, strategy, config)

    if verbose:
        print(f"Packing {count} trees with {STRATEGY_LABELS[strategy]}...")

    shapes = STRATEGIES[strategy](count, config, rng, verbose)
    packing = Packing(
        shapes=shapes,
        requested=count,
        strategy=strategy,
        bounding_box_size=bounding_box_size(shapes),
    )

    if verbose and not packing.is_complete:
        print(f"  {packing.dropped_count} of {count} trees could not be placed")

    return packing


class PackingSolver:
    """
    Runs one strategy for every count 1..max_n.

    Every count is an independent run; with the random strategy the counts
    share one generator seeded from the solver's seed, so a sweep is
    reproducible as a whole.
    """

    def __init__(
        self,
        strategy: str = "greedy",
        config: Optional[PackingConfig] = None,
        seed: Optional[int] = None
    ):
        self.config = config or PackingConfig.default_mode()
        self.strategy = strategy
        self.seed = seed if seed is not None else self.config.seed
        self.rng = random.Random(self.seed)

        self.packings: Dict[int, Packing] = {}

    def solve_single(self, n: int, verbose: bool = False) -> Packing:
        packing = run_packing(n, self.strategy, self.config, rng=self.rng)
        self.packings[n] = packing
        if verbose and (n % 10 == 0 or n <= 10):
            print(f"  n={n}: placed={packing.placed_count} side={packing.bounding_box_size:.2f}")
        return packing

    def solve_all(self, max_n: int = 200, verbose: bool = True) -> Dict[int, Packing]:
        if verbose:
            print(f"Solving n=1 to {max_n} with {STRATEGY_LABELS.get(self.strategy, self.strategy)}...")

        def print_progress(n: int, side: float, total: float):
            width = 30
            filled = int(width * n / max_n)
            bar = "█" * filled + "░" * (width - filled)
            msg = (f"\r[{bar}] n={n}/{max_n} | side={side:.2f} "
                   f"| running score={total:.2f}")
            print(msg, end="", flush=True)

        running_total = 0.0
        for n in range(1, max_n + 1):
            packing = self.solve_single(n)
            running_total += packing.display_score
            if verbose:
                print_progress(n, packing.bounding_box_size, running_total)
        if verbose:
            print()
            print(f"\nTotal score: {self.compute_total_score():.2f}")

        return self.packings

    def compute_total_score(self) -> float:
        """Sum of side^2 / placed over all solved counts."""
        return sum(self.get_score_breakdown().values())

    def get_score_breakdown(self) -> Dict[int, float]:
        return {n: p.display_score for n, p in self.packings.items()}
