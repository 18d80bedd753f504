"""
geometry.py - Core geometry for the tree packer
Tree silhouette: triangle canopy (2s wide, 2s tall) on a trunk (0.8s x s)
Default scale s=8 gives a 16 x 24 shape with the canopy tip at y=-16.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Sequence, Tuple

import numpy as np
from shapely.geometry import Polygon

TREE_SCALE = 8.0


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class ShapeTemplate:
    """Polygon in local coordinates, closed implicitly (last -> first)."""
    points: Tuple[Point, ...]
    _rotations: Dict[float, np.ndarray] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        if len(self.points) < 3:
            raise ValueError(f"Template needs at least 3 points, got {len(self.points)}")
        object.__setattr__(self, "points", tuple(Point(float(x), float(y)) for x, y in self.points))

    @property
    def vertices(self) -> np.ndarray:
        return np.array(self.points, dtype=float)

    def rotated(self, angle_deg: float) -> np.ndarray:
        """Template vertices rotated about the origin (cached per angle)."""
        key = float(angle_deg)
        cached = self._rotations.get(key)
        if cached is None:
            rad = math.radians(key)
            cos_r, sin_r = math.cos(rad), math.sin(rad)
            rot = np.array([[cos_r, -sin_r], [sin_r, cos_r]])
            cached = self.vertices @ rot.T
            cached.setflags(write=False)
            self._rotations[key] = cached
        return cached

    def extent(self, angle_deg: float = 0.0) -> Tuple[float, float]:
        """Width and height of the rotated template."""
        v = self.rotated(angle_deg)
        return (float(v[:, 0].max() - v[:, 0].min()),
                float(v[:, 1].max() - v[:, 1].min()))

    def is_convex(self, eps: float = 1e-9) -> bool:
        poly = Polygon(self.points)
        return abs(poly.convex_hull.area - poly.area) <= eps


def make_tree_template(scale: float = TREE_SCALE) -> ShapeTemplate:
    """Build the tree silhouette (triangle on a rectangular trunk)."""
    s = scale
    return ShapeTemplate((
        Point(0.0, -2 * s),      # tip
        Point(-s, 0.0),          # canopy left
        Point(-0.4 * s, 0.0),    # trunk top left
        Point(-0.4 * s, s),      # trunk bottom left
        Point(0.4 * s, s),       # trunk bottom right
        Point(0.4 * s, 0.0),     # trunk top right
        Point(s, 0.0),           # canopy right
    ))


TREE_TEMPLATE = make_tree_template()


@dataclass(frozen=True)
class PlacedShape:
    """One template instance: 1-based id, translation and rotation in degrees."""
    id: int
    x: float
    y: float
    rotation: float = 0.0

    def __post_init__(self):
        if isinstance(self.id, bool) or not isinstance(self.id, (int, np.integer)) or self.id < 1:
            raise ValueError(f"Shape id must be an integer >= 1, got {self.id!r}")
        object.__setattr__(self, "rotation", self.rotation % 360)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.rotation)


def rotate(point: Point, angle_deg: float) -> Point:
    """Rotate a point about the origin."""
    rad = math.radians(angle_deg)
    cos_r, sin_r = math.cos(rad), math.sin(rad)
    return Point(point.x * cos_r - point.y * sin_r,
                 point.x * sin_r + point.y * cos_r)


def materialize(placement: PlacedShape, template: ShapeTemplate = TREE_TEMPLATE) -> np.ndarray:
    """World-space polygon for a placement, vertices in template order."""
    return template.rotated(placement.rotation) + np.array([placement.x, placement.y])


def polygon_bounds(polygon: np.ndarray) -> Tuple[float, float, float, float]:
    mins = polygon.min(axis=0)
    maxs = polygon.max(axis=0)
    return float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1])


def edge_normals(polygon: np.ndarray) -> np.ndarray:
    """Normal (-ey, ex) of every edge, including the closing edge."""
    edges = np.roll(polygon, -1, axis=0) - polygon
    normals = np.column_stack((-edges[:, 1], edges[:, 0]))
    # zero-length edges would project everything onto a single point
    return normals[np.any(normals != 0, axis=1)]


def project(points: np.ndarray, axes: np.ndarray) -> np.ndarray:
    """
    Dot products of points (..., k, 2) with axes (..., m, 2) -> (..., k, m).

    Written elementwise so batched and single-pair projections round
    identically.
    """
    return (points[..., :, None, 0] * axes[..., None, :, 0]
            + points[..., :, None, 1] * axes[..., None, :, 1])


def polygons_overlap(poly_a: np.ndarray, poly_b: np.ndarray) -> bool:
    """
    Separating Axis Theorem test.

    Axes are the edge normals of both polygons. The polygons are separated
    as soon as one axis yields disjoint projections; intervals that only
    touch count as separated, so shapes sharing an edge do not overlap.
    """
    for source in (poly_a, poly_b):
        axes = edge_normals(source)
        proj_a = project(poly_a, axes)
        proj_b = project(poly_b, axes)
        min_a, max_a = proj_a.min(axis=0), proj_a.max(axis=0)
        min_b, max_b = proj_b.min(axis=0), proj_b.max(axis=0)
        if np.any((max_a <= min_b) | (max_b <= min_a)):
            return False
    return True


def compute_bounding_box(
    shapes: Sequence[PlacedShape],
    template: ShapeTemplate = TREE_TEMPLATE
) -> Tuple[float, float, float, float]:
    if not shapes:
        return (0.0, 0.0, 0.0, 0.0)
    verts = np.vstack([materialize(s, template) for s in shapes])
    return polygon_bounds(verts)


def bounding_square_side(bounds: Tuple[float, float, float, float]) -> float:
    min_x, min_y, max_x, max_y = bounds
    return max(max_x - min_x, max_y - min_y)


def bounding_box_size(
    shapes: Sequence[PlacedShape],
    template: ShapeTemplate = TREE_TEMPLATE
) -> float:
    """Side of the smallest axis-aligned square enclosing all shapes."""
    if not shapes:
        return 0.0
    return bounding_square_side(compute_bounding_box(shapes, template))


def check_all_overlaps(
    shapes: Sequence[PlacedShape],
    template: ShapeTemplate = TREE_TEMPLATE
) -> List[Tuple[int, int]]:
    """Find all overlapping index pairs."""
    polys = [materialize(s, template) for s in shapes]
    overlaps = []
    for i in range(len(polys)):
        for j in range(i + 1, len(polys)):
            if polygons_overlap(polys[i], polys[j]):
                overlaps.append((i, j))
    return overlaps


def to_shapely(polygon: np.ndarray) -> Polygon:
    return Polygon([tuple(p) for p in polygon])


def make_tree_polygon(placement: PlacedShape, template: ShapeTemplate = TREE_TEMPLATE) -> Polygon:
    """Create a Shapely Polygon for a placed shape."""
    return to_shapely(materialize(placement, template))


def overlap_area(p1: Polygon, p2: Polygon) -> float:
    """Intersection area of two shapely polygons (0 when disjoint or touching)."""
    if not p1.intersects(p2) or p1.touches(p2):
        return 0.0
    return p1.intersection(p2).area
