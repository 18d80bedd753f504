"""
validate.py - Scoring and validation utilities for the tree packer
"""
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .geometry import (
    PlacedShape, ShapeTemplate, TREE_TEMPLATE,
    bounding_box_size, check_all_overlaps, make_tree_polygon, overlap_area
)


def compute_score(box: float, count: int) -> Optional[float]:
    """box^2 / count; None for an empty packing (no data, not a perfect score)."""
    if count <= 0:
        return None
    return (box ** 2) / count


@dataclass
class ValidationResult:
    valid: bool
    requested: int
    placed: int
    overlaps: List[Tuple[int, int]]
    area_overlaps: List[Tuple[int, int]]
    duplicate_ids: List[int]
    bounding_square: float
    error_message: Optional[str] = None

    @property
    def complete(self) -> bool:
        return self.placed == self.requested


def find_area_overlaps(
    shapes: Sequence[PlacedShape],
    template: ShapeTemplate = TREE_TEMPLATE,
    eps: float = 1e-9
) -> List[Tuple[int, int]]:
    """Pairs whose shapely polygons share more than eps of area."""
    polys = [make_tree_polygon(s, template) for s in shapes]
    pairs = []
    for i in range(len(polys)):
        for j in range(i + 1, len(polys)):
            if overlap_area(polys[i], polys[j]) > eps:
                pairs.append((i, j))
    return pairs


def validate_shapes(
    shapes: Sequence[PlacedShape],
    requested: Optional[int] = None,
    template: ShapeTemplate = TREE_TEMPLATE
) -> ValidationResult:
    """
    Validate a list of placements.

    Overlaps are checked with the same SAT test the strategies use, and
    cross-checked against true polygon intersection areas from shapely.
    An incomplete packing is still valid; the shortfall is reported.
    """
    if requested is None:
        requested = len(shapes)

    overlaps = check_all_overlaps(shapes, template)
    area_overlaps = find_area_overlaps(shapes, template)
    counts = Counter(s.id for s in shapes)
    duplicate_ids = sorted(i for i, c in counts.items() if c > 1)
    out_of_range = [s.id for s in shapes if s.id > requested]

    errors = []
    if overlaps:
        errors.append(f"{len(overlaps)} overlap(s)")
    if area_overlaps:
        errors.append(f"{len(area_overlaps)} positive-area intersection(s)")
    if duplicate_ids:
        errors.append(f"duplicate id(s) {duplicate_ids}")
    if out_of_range:
        errors.append(f"id(s) {out_of_range} exceed requested count {requested}")

    return ValidationResult(
        valid=not errors,
        requested=requested,
        placed=len(shapes),
        overlaps=overlaps,
        area_overlaps=area_overlaps,
        duplicate_ids=duplicate_ids,
        bounding_square=bounding_box_size(shapes, template),
        error_message="; ".join(errors) if errors else None,
    )


def validate_packing(packing) -> ValidationResult:
    """Validate a Packing, also checking its stored bounding square."""
    result = validate_shapes(packing.shapes, packing.requested)
    if abs(result.bounding_square - packing.bounding_box_size) > 1e-9:
        msg = (f"stored bounding square {packing.bounding_box_size:.6f} "
               f"!= recomputed {result.bounding_square:.6f}")
        result.valid = False
        result.error_message = f"{result.error_message}; {msg}" if result.error_message else msg
    return result


def print_packing_summary(packing):
    """Print a single packing's results."""
    print("=" * 60)
    print("PACKING SUMMARY")
    print("=" * 60)
    print(f"Strategy: {packing.strategy}")
    print(f"Trees placed: {packing.placed_count}/{packing.requested}")
    if packing.dropped_count:
        dropped = packing.dropped_ids
        shown = ", ".join(str(i) for i in dropped[:10])
        more = f" (+{len(dropped) - 10} more)" if len(dropped) > 10 else ""
        print(f"Dropped ids: {shown}{more}")
    print(f"Box size: {packing.bounding_box_size:.1f}")
    print(f"Score: {packing.display_score:.2f}")
    print("=" * 60)


def print_score_summary(packings: Dict[int, object]):
    """Print a summary over a sweep of packings keyed by requested count."""
    print("=" * 60)
    print("SCORE SUMMARY")
    print("=" * 60)

    if not packings:
        print("No packings")
        print("=" * 60)
        return

    contributions = {n: p.display_score for n, p in packings.items()}
    total = sum(contributions.values())
    incomplete = [n for n, p in packings.items() if not p.is_complete]

    print(f"Total score: {total:.2f}")
    print(f"Complete packings: {len(packings) - len(incomplete)}/{len(packings)}")
    if incomplete:
        print(f"First incomplete n: {min(incomplete)}")
    print()

    sorted_contrib = sorted(contributions.items(), key=lambda x: x[1], reverse=True)
    print("Top 10 worst contributions:")
    for n, contrib in sorted_contrib[:10]:
        p = packings[n]
        print(f"  n={n:3d}: placed={p.placed_count:3d}, "
              f"side={p.bounding_box_size:.2f}, contrib={contrib:.2f}")
    print("=" * 60)
