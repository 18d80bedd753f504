"""
Tree Packing Optimizer
Packs copies of a fixed tree silhouette into the smallest square:
- SAT overlap test on the tree polygon
- Greedy spiral search (deterministic)
- Randomized incremental placement (seedable)
- Score = side^2 / trees placed
"""

from .geometry import (
    Point,
    ShapeTemplate,
    PlacedShape,
    TREE_TEMPLATE,
    make_tree_template,
    rotate,
    materialize,
    polygons_overlap,
    bounding_box_size,
    compute_bounding_box,
    check_all_overlaps,
    make_tree_polygon,
)

from .collision import (
    CollisionIndex,
    is_admissible,
)

from .strategies import (
    PackingConfig,
    ROTATIONS,
    greedy_spiral_packing,
    random_packing,
)

from .packing import (
    Packing,
    PackingSolver,
    STRATEGIES,
    run_packing,
)

from .validate import (
    compute_score,
    validate_packing,
    validate_shapes,
    print_packing_summary,
    print_score_summary,
)

from .io_utils import (
    format_csv,
    write_csv,
    read_csv,
    export_filename,
)

__version__ = "1.0.0"
