"""Deterministic feature-hashing embedder.

Produces fixed-length vectors without any model or network access:
normalized word unigrams and character trigrams are hashed into signed
buckets and the result is L2-normalized. Identical text always yields
the identical vector; texts with no shared features are orthogonal.
"""

import hashlib
import time
from typing import Any

import numpy as np

from ..similarity.text import normalize
from .base import Embedder, EmbeddingResult

DEFAULT_DIMENSIONS = 384
WORD_WEIGHT = 1.0
TRIGRAM_WEIGHT = 0.5


class HashingEmbedder(Embedder):
    """Signed feature hashing over words and character trigrams."""

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS, **kwargs: Any) -> None:  # noqa: ARG002
        if dimensions <= 0:
            raise ValueError("dimensions must be positive")
        self.dimensions = dimensions

    def _features(self, text: str) -> list[tuple[str, float]]:
        normalized = normalize(text)
        if not normalized:
            return []

        features = [(f"w:{word}", WORD_WEIGHT) for word in normalized.split(" ")]
        padded = f" {normalized} "
        features.extend(
            (f"c:{padded[i : i + 3]}", TRIGRAM_WEIGHT)
            for i in range(len(padded) - 2)
        )
        return features

    def _bucket(self, feature: str) -> tuple[int, float]:
        digest = hashlib.blake2b(feature.encode("utf-8"), digest_size=8).digest()
        value = int.from_bytes(digest, "little")
        sign = 1.0 if value & 1 else -1.0
        return (value >> 1) % self.dimensions, sign

    def embed_text(self, text: str) -> EmbeddingResult:
        """Embed text; empty or symbol-only text yields an error result."""
        start_time = time.time()
        features = self._features(text)
        if not features:
            return EmbeddingResult(
                text=text,
                embedding=[],
                model="hashing",
                error="Text has no embeddable content",
            )

        vector = np.zeros(self.dimensions, dtype=np.float64)
        for feature, weight in features:
            index, sign = self._bucket(feature)
            vector[index] += sign * weight

        norm = np.linalg.norm(vector)
        if norm == 0:
            return EmbeddingResult(
                text=text,
                embedding=[],
                model="hashing",
                error="Embedding collapsed to zero vector",
            )

        return EmbeddingResult(
            text=text,
            embedding=(vector / norm).tolist(),
            model="hashing",
            processing_time=time.time() - start_time,
        )

    def get_model_info(self) -> dict[str, Any]:
        """Get information about the embedding model."""
        return {
            "provider": "hashing",
            "model": "hashing",
            "dimensions": self.dimensions,
        }
