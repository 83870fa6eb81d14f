"""Base classes and interfaces for text embedding generation."""

import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ..qa_logging import LogCategory, get_category_logger

logger = get_category_logger(LogCategory.EMBEDDINGS)


@dataclass
class EmbeddingResult:
    """Result of an embedding operation."""

    text: str
    embedding: list[float]

    # Metadata
    model: str = ""
    processing_time: float = 0.0
    error: str | None = None

    @property
    def success(self) -> bool:
        """Check if embedding generation was successful."""
        return self.error is None and len(self.embedding) > 0

    @property
    def dimension(self) -> int:
        """Get the dimensionality of the embedding vector."""
        return len(self.embedding)


class Embedder(ABC):
    """Abstract base class for text embedding generators.

    Implementations report failures through ``EmbeddingResult.error``
    instead of raising, so callers can degrade gracefully.
    """

    @abstractmethod
    def embed_text(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text."""
        pass

    def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for multiple texts, in order."""
        return [self.embed_text(text) for text in texts]

    @abstractmethod
    def get_model_info(self) -> dict[str, Any]:
        """Get information about the embedding model."""
        pass


class RetryableEmbedder(Embedder):
    """Base class for embedders that support retry logic."""

    TRANSIENT_ERRORS = (
        "rate limit",
        "timeout",
        "connection",
        "temporary",
        "503",
        "502",
        "429",
    )

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        backoff_factor: float = 2.0,
    ):
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor

    def _calculate_delay(self, attempt: int) -> float:
        """Calculate delay for exponential backoff with jitter."""
        delay = self.base_delay * (self.backoff_factor**attempt)
        delay = min(delay, self.max_delay)

        jitter = random.uniform(0.1, 0.3) * delay
        return delay + jitter

    def _should_retry(self, error: Exception, attempt: int) -> bool:
        """Determine if an error should trigger a retry."""
        if attempt >= self.max_retries:
            return False

        error_str = str(error).lower()
        return any(err in error_str for err in self.TRANSIENT_ERRORS)

    def _embed_with_retry(self, operation_func: Any, *args: Any, **kwargs: Any) -> Any:
        """Execute embedding operation with retry logic."""
        last_error: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                return operation_func(*args, **kwargs)
            except Exception as e:
                last_error = e

                if not self._should_retry(e, attempt):
                    break

                delay = self._calculate_delay(attempt)
                logger.warning(
                    f"Embedding attempt {attempt + 1} failed: {e}. "
                    f"Retrying in {delay:.1f}s..."
                )
                time.sleep(delay)

        assert last_error is not None
        raise last_error
