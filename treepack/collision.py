"""
collision.py - Admissibility checks for candidate placements
"""
from typing import List, Optional, Sequence

import numpy as np

from .geometry import (
    PlacedShape, ShapeTemplate, TREE_TEMPLATE,
    materialize, polygons_overlap, polygon_bounds, edge_normals, project
)


def is_admissible(
    candidate: PlacedShape,
    placed: Sequence[PlacedShape],
    template: ShapeTemplate = TREE_TEMPLATE
) -> bool:
    """True if the candidate overlaps none of the placed shapes."""
    poly = materialize(candidate, template)
    for other in placed:
        if polygons_overlap(poly, materialize(other, template)):
            return False
    return True


class CollisionIndex:
    """
    Incremental collision index over accepted placements.

    Each accepted polygon is cached together with its edge normals and its
    own projection interval on each of them, so a candidate is tested
    against every placed shape with one batched SAT pass. The verdicts are
    identical to calling polygons_overlap pair by pair.

    The running extent of everything added makes the hypothetical bounding
    box of placed + candidate a constant-time query.
    """

    def __init__(self, template: ShapeTemplate = TREE_TEMPLATE):
        self.template = template
        self.clear()

    def clear(self):
        self._shapes: List[PlacedShape] = []
        self._polygons: List[np.ndarray] = []
        self._axes: List[np.ndarray] = []
        self._own_min: List[np.ndarray] = []
        self._own_max: List[np.ndarray] = []
        self._stacked = None
        self._extent: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return len(self._shapes)

    @property
    def shapes(self) -> List[PlacedShape]:
        return list(self._shapes)

    def materialize(self, shape: PlacedShape) -> np.ndarray:
        return materialize(shape, self.template)

    def add(self, shape: PlacedShape, polygon: Optional[np.ndarray] = None):
        """Accept a shape; its polygon is computed once here."""
        if polygon is None:
            polygon = self.materialize(shape)
        axes = edge_normals(polygon)
        own = project(polygon, axes)
        self._shapes.append(shape)
        self._polygons.append(polygon)
        self._axes.append(axes)
        self._own_min.append(own.min(axis=0))
        self._own_max.append(own.max(axis=0))
        self._stacked = None

        bounds = np.array(polygon_bounds(polygon))
        if self._extent is None:
            self._extent = bounds
        else:
            self._extent = np.concatenate((
                np.minimum(self._extent[:2], bounds[:2]),
                np.maximum(self._extent[2:], bounds[2:]),
            ))

    def _stack(self):
        if self._stacked is None:
            self._stacked = (
                np.stack(self._polygons),
                np.stack(self._axes),
                np.stack(self._own_min),
                np.stack(self._own_max),
            )
        return self._stacked

    def overlapping(self, polygon: np.ndarray) -> np.ndarray:
        """Boolean mask over added shapes that overlap the polygon."""
        if not self._shapes:
            return np.zeros(0, dtype=bool)
        polys, axes, own_min, own_max = self._stack()

        # candidate's own edge normals
        cand_axes = edge_normals(polygon)
        cand = project(polygon, cand_axes)
        c_min, c_max = cand.min(axis=0), cand.max(axis=0)
        other = project(polys, cand_axes)
        o_min, o_max = other.min(axis=1), other.max(axis=1)
        separated = np.any((c_max <= o_min) | (o_max <= c_min), axis=1)

        # edge normals of every placed shape
        cand = project(polygon, axes)
        c_min, c_max = cand.min(axis=1), cand.max(axis=1)
        separated |= np.any((c_max <= own_min) | (own_max <= c_min), axis=1)
        return ~separated

    def is_admissible(self, polygon: np.ndarray) -> bool:
        return not self.overlapping(polygon).any()

    def bounding_box_with(self, polygon: np.ndarray) -> float:
        """Bounding square side of everything added plus this polygon."""
        min_x, min_y, max_x, max_y = polygon_bounds(polygon)
        if self._extent is not None:
            min_x = min(min_x, self._extent[0])
            min_y = min(min_y, self._extent[1])
            max_x = max(max_x, self._extent[2])
            max_y = max(max_y, self._extent[3])
        return float(max(max_x - min_x, max_y - min_y))

    def bounding_box_size(self) -> float:
        if self._extent is None:
            return 0.0
        min_x, min_y, max_x, max_y = self._extent
        return float(max(max_x - min_x, max_y - min_y))
