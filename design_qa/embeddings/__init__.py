"""Embeddings package for generating vector representations of text."""

from .base import Embedder, EmbeddingResult, RetryableEmbedder
from .hashing import HashingEmbedder
from .openai import OpenAIEmbedder
from .registry import EmbedderRegistry, create_embedder

__all__ = [
    "Embedder",
    "EmbeddingResult",
    "RetryableEmbedder",
    "HashingEmbedder",
    "OpenAIEmbedder",
    "EmbedderRegistry",
    "create_embedder",
]
