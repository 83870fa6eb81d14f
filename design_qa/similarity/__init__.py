"""Text and geometry similarity scoring."""

from .geometry import center_distance, intersection_area, iou, proximity
from .semantic import EmbeddingCache, SemanticSimilarityScorer, cosine_similarity
from .text import dice_similarity, edit_similarity, levenshtein_distance, normalize

__all__ = [
    # Text
    "normalize",
    "levenshtein_distance",
    "edit_similarity",
    "dice_similarity",
    # Geometry
    "iou",
    "intersection_area",
    "center_distance",
    "proximity",
    # Semantic
    "EmbeddingCache",
    "SemanticSimilarityScorer",
    "cosine_similarity",
]
