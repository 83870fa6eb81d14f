"""Embedding-backed semantic text similarity.

The scorer owns an explicit LRU cache of embedding vectors keyed by the
exact input string. Embedding happens in an async prefetch step with
bounded concurrency; scoring itself is synchronous and falls back to a
bigram Dice coefficient whenever a vector is unavailable.
"""

import asyncio
import threading
from collections import OrderedDict
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import numpy as np

from ..qa_logging import LogCategory, get_category_logger
from .text import dice_similarity

if TYPE_CHECKING:
    from ..embeddings.base import Embedder

logger = get_category_logger(LogCategory.EMBEDDINGS)

DEFAULT_CACHE_SIZE = 10000
DEFAULT_MAX_CONCURRENCY = 8


class EmbeddingCache:
    """Thread-safe LRU cache of embedding vectors.

    ``max_size=None`` makes the cache unbounded. Values are pure functions
    of their key, so concurrent writers for the same key are harmless.
    """

    def __init__(self, max_size: int | None = DEFAULT_CACHE_SIZE):
        if max_size is not None and max_size <= 0:
            raise ValueError("max_size must be positive or None")
        self.max_size = max_size
        self._entries: OrderedDict[str, np.ndarray] = OrderedDict()
        self._lock = threading.Lock()

        # Statistics
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: str) -> np.ndarray | None:
        """Return the cached vector and mark it most recently used."""
        with self._lock:
            vector = self._entries.get(key)
            if vector is None:
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return vector

    def set(self, key: str, embedding: Iterable[float]) -> None:
        """Store a vector, evicting the least recently used entry if full."""
        vector = np.asarray(list(embedding), dtype=np.float64)
        vector.flags.writeable = False
        with self._lock:
            self._entries[key] = vector
            self._entries.move_to_end(key)
            if self.max_size is not None:
                while len(self._entries) > self.max_size:
                    self._entries.popitem(last=False)
                    self._evictions += 1

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        """Remove all entries and reset statistics."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hit_rate": self._hits / total if total else 0.0,
            }


def cosine_similarity(vec1: np.ndarray, vec2: np.ndarray) -> float:
    """Cosine similarity clamped to [0, 1]; 0.0 for empty or mismatched vectors."""
    if vec1.size == 0 or vec2.size == 0 or vec1.shape != vec2.shape:
        return 0.0

    norm1 = float(np.linalg.norm(vec1))
    norm2 = float(np.linalg.norm(vec2))
    if norm1 == 0 or norm2 == 0:
        return 0.0

    return max(0.0, min(1.0, float(np.dot(vec1, vec2)) / (norm1 * norm2)))


class SemanticSimilarityScorer:
    """Scores text pairs by embedding cosine similarity.

    Embedding failures never propagate: failed texts are scored with the
    Dice fallback instead. Failures are remembered until the next
    prefetch, which starts a new run and retries them.
    """

    def __init__(
        self,
        embedder: "Embedder | None" = None,
        cache: EmbeddingCache | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ):
        if embedder is None:
            from ..embeddings.hashing import HashingEmbedder

            embedder = HashingEmbedder()
        self.embedder = embedder
        self.cache = cache if cache is not None else EmbeddingCache()
        self.max_concurrency = max(1, max_concurrency)
        self._failed: set[str] = set()
        self._failed_lock = threading.Lock()

    def _record_failure(self, text: str, error: str | None) -> None:
        with self._failed_lock:
            self._failed.add(text)
        logger.warning(f"Embedding failed for {text[:40]!r}, using string fallback: {error}")

    def reset_failures(self) -> None:
        """Forget failed texts so the next lookup retries them."""
        with self._failed_lock:
            self._failed.clear()

    def _is_failed(self, text: str) -> bool:
        with self._failed_lock:
            return text in self._failed

    def _embed_now(self, text: str) -> np.ndarray | None:
        try:
            result = self.embedder.embed_text(text)
        except Exception as e:
            self._record_failure(text, str(e))
            return None

        if not result.success:
            self._record_failure(text, result.error)
            return None

        self.cache.set(text, result.embedding)
        return self.cache.get(text)

    def vector(self, text: str) -> np.ndarray | None:
        """Cached vector for ``text``, embedding synchronously on a miss."""
        if not text or self._is_failed(text):
            return None
        cached = self.cache.get(text)
        if cached is not None:
            return cached
        return self._embed_now(text)

    async def prefetch(self, texts: Iterable[str]) -> int:
        """Embed every uncached, non-empty text with bounded concurrency.

        Each prefetch starts a new run, so texts that failed earlier are
        retried.

        Args:
            texts: Texts that will be scored later.

        Returns:
            Number of texts newly embedded.
        """
        self.reset_failures()
        pending = sorted({t for t in texts if t and t not in self.cache})
        if not pending:
            return 0

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _embed_one(text: str) -> bool:
            async with semaphore:
                vector = await asyncio.to_thread(self._embed_now, text)
            return vector is not None

        outcomes = await asyncio.gather(*(_embed_one(t) for t in pending))
        embedded = sum(1 for ok in outcomes if ok)
        logger.debug(
            f"Prefetched {embedded}/{len(pending)} embeddings",
            extra={"operation": "prefetch", "element_count": len(pending)},
        )
        return embedded

    def similarity(self, a: str | None, b: str | None) -> float:
        """Semantic similarity in [0, 1].

        Returns 0.0 if either text is empty. Falls back to the bigram
        Dice coefficient when either embedding is unavailable.
        """
        if not a or not b:
            return 0.0

        vec_a = self.vector(a)
        vec_b = self.vector(b)
        if vec_a is None or vec_b is None:
            return dice_similarity(a, b)

        return cosine_similarity(vec_a, vec_b)

    async def semantic_similarity(self, a: str | None, b: str | None) -> float:
        """Async convenience: prefetch both texts, then score."""
        await self.prefetch([t for t in (a, b) if t])
        return self.similarity(a, b)
