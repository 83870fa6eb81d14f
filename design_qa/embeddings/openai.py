"""OpenAI embeddings implementation with retry logic."""

import time
from typing import Any, cast

import openai

from .base import EmbeddingResult, RetryableEmbedder


class OpenAIEmbedder(RetryableEmbedder):
    """OpenAI embeddings with exponential-backoff retry."""

    MODELS = {
        "text-embedding-3-small": {"dimensions": 1536, "max_chars": 32000},
        "text-embedding-3-large": {"dimensions": 3072, "max_chars": 32000},
        "text-embedding-ada-002": {"dimensions": 1536, "max_chars": 32000},
    }

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "text-embedding-3-small",
        max_retries: int = 3,
        base_delay: float = 1.0,
        timeout: float = 30.0,
        **kwargs: Any,  # noqa: ARG002
    ) -> None:
        if not api_key:
            raise ValueError("Valid OpenAI API key required")

        if model not in self.MODELS:
            raise ValueError(
                f"Unsupported model: {model}. Available: {list(self.MODELS.keys())}"
            )

        self.model = model
        self.model_config = self.MODELS[model]

        super().__init__(max_retries=max_retries, base_delay=base_delay)

        self.client = openai.OpenAI(api_key=api_key, timeout=timeout)

    def _truncate(self, text: str) -> str:
        max_chars = self.model_config["max_chars"]
        return text if len(text) <= max_chars else text[:max_chars]

    def embed_text(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text."""
        start_time = time.time()
        text = self._truncate(text)

        def _embed() -> EmbeddingResult:
            response = self.client.embeddings.create(
                model=self.model, input=text, encoding_format="float"
            )
            return EmbeddingResult(
                text=text,
                embedding=response.data[0].embedding,
                model=self.model,
                processing_time=time.time() - start_time,
            )

        try:
            result = self._embed_with_retry(_embed)
            return cast(EmbeddingResult, result)
        except Exception as e:
            return EmbeddingResult(
                text=text,
                embedding=[],
                model=self.model,
                processing_time=time.time() - start_time,
                error=str(e),
            )

    def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for multiple texts in one request."""
        if not texts:
            return []

        start_time = time.time()
        inputs = [self._truncate(t) for t in texts]

        def _embed() -> list[EmbeddingResult]:
            response = self.client.embeddings.create(
                model=self.model, input=inputs, encoding_format="float"
            )
            elapsed = time.time() - start_time
            by_index = {item.index: item.embedding for item in response.data}
            return [
                EmbeddingResult(
                    text=text,
                    embedding=by_index.get(i, []),
                    model=self.model,
                    processing_time=elapsed,
                    error=None if i in by_index else "Missing embedding in response",
                )
                for i, text in enumerate(inputs)
            ]

        try:
            return cast(list[EmbeddingResult], self._embed_with_retry(_embed))
        except Exception as e:
            return [
                EmbeddingResult(
                    text=text,
                    embedding=[],
                    model=self.model,
                    processing_time=time.time() - start_time,
                    error=str(e),
                )
                for text in inputs
            ]

    def get_model_info(self) -> dict[str, Any]:
        """Get information about the embedding model."""
        return {
            "provider": "openai",
            "model": self.model,
            "dimensions": self.model_config["dimensions"],
            "max_retries": self.max_retries,
        }
