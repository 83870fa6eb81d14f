"""Bounding-box overlap and proximity scoring."""

import math

from ..models import BoundingBox


def intersection_area(a: BoundingBox, b: BoundingBox) -> float:
    """Area of the overlap between two boxes (0 when disjoint)."""
    width = min(a.right, b.right) - max(a.x, b.x)
    height = min(a.bottom, b.bottom) - max(a.y, b.y)
    return max(0.0, width) * max(0.0, height)


def iou(a: BoundingBox, b: BoundingBox) -> float:
    """Intersection-over-Union of two axis-aligned boxes.

    Returns 0.0 when the boxes do not overlap or the union has no area.
    Symmetric in its arguments.
    """
    inter = intersection_area(a, b)
    union = a.area + b.area - inter
    if union <= 0:
        return 0.0
    return max(0.0, min(1.0, inter / union))


def center_distance(a: BoundingBox, b: BoundingBox) -> float:
    """Euclidean distance between box centers."""
    (ax, ay), (bx, by) = a.center, b.center
    return math.hypot(ax - bx, ay - by)


def proximity(a: BoundingBox, b: BoundingBox, scale: float = 100.0) -> float:
    """Positional closeness in (0, 1]; 1.0 for coincident centers.

    Decays with center distance, halving every ``scale`` pixels.
    """
    if scale <= 0:
        return 1.0 if center_distance(a, b) == 0 else 0.0
    return 0.5 ** (center_distance(a, b) / scale)
