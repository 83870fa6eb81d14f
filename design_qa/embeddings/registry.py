"""Registry for creating embedder instances from configuration."""

from typing import TYPE_CHECKING, Any

from .base import Embedder
from .hashing import HashingEmbedder
from .openai import OpenAIEmbedder

if TYPE_CHECKING:
    from ..config import EmbeddingConfig
    from ..settings import RuntimeSettings


class EmbedderRegistry:
    """Registry for creating and managing embedders."""

    def __init__(self) -> None:
        self._embedders: dict[str, type[Embedder]] = {}
        self._register_default_embedders()

    def _register_default_embedders(self) -> None:
        """Register default embedder implementations."""
        self.register("hashing", HashingEmbedder)
        self.register("openai", OpenAIEmbedder)

    def register(self, name: str, embedder_class: type[Embedder]) -> None:
        """Register an embedder class."""
        self._embedders[name] = embedder_class

    def get_available_providers(self) -> list[str]:
        """Get list of registered provider names."""
        return list(self._embedders.keys())

    def create_embedder(self, provider: str, config: dict[str, Any]) -> Embedder:
        """Create an embedder instance from provider-specific configuration.

        Raises:
            ValueError: If the provider is unknown or its configuration is invalid.
        """
        if provider not in self._embedders:
            available = self.get_available_providers()
            raise ValueError(
                f"Unknown embedder provider: {provider}. Available: {available}"
            )

        embedder_class = self._embedders[provider]
        try:
            return embedder_class(**config)
        except ValueError as e:
            raise ValueError(f"Failed to create {provider} embedder: {e}") from e


def create_embedder(
    config: "EmbeddingConfig",
    settings: "RuntimeSettings | None" = None,
    registry: EmbedderRegistry | None = None,
) -> Embedder:
    """Build the embedder selected by the embeddings config section."""
    registry = registry or EmbedderRegistry()
    provider_config: dict[str, Any] = {"dimensions": config.dimensions}
    if config.provider == "openai":
        provider_config = {
            "api_key": settings.openai_api_key if settings else None,
            "model": config.model,
        }
    return registry.create_embedder(config.provider, provider_config)
