"""Design-vs-implementation comparison entry point.

Coordinates the comparison of one design frame against one rendered page:
- Embedding prefetch (the only suspension point)
- Element matching
- Attribute diffing
- Quality aggregation
"""

import asyncio
import time
from collections.abc import Sequence

from .config import DesignQAConfig
from .diffing.differ import AttributeDiffer
from .embeddings.registry import create_embedder
from .errors import InvalidElementError
from .matching.matcher import ElementMatcher, TextSimilarity
from .models import BoundingBox, ComparisonResult, DesignElement, RenderedElement
from .qa_logging import get_logger
from .reporting.aggregator import QualityAggregator
from .settings import RuntimeSettings
from .similarity.semantic import EmbeddingCache, SemanticSimilarityScorer

logger = get_logger()


def _validate(
    design_elements: Sequence[DesignElement],
    rendered_elements: Sequence[RenderedElement],
) -> None:
    for index, element in enumerate(design_elements):
        if not isinstance(element, DesignElement):
            raise InvalidElementError(
                f"Design element at index {index} has type "
                f"{type(element).__name__}, expected DesignElement"
            )
        if not isinstance(element.box, BoundingBox):
            raise InvalidElementError(
                "Design element is missing its bounding box", element_id=element.id
            )
    for index, element in enumerate(rendered_elements):
        if not isinstance(element, RenderedElement):
            raise InvalidElementError(
                f"Rendered element at index {index} has type "
                f"{type(element).__name__}, expected RenderedElement"
            )
        if not isinstance(element.box, BoundingBox):
            raise InvalidElementError(
                "Rendered element is missing its bounding box", element_id=element.id
            )


class DesignComparator:
    """Compares normalized design elements against rendered elements.

    Each call to ``compare`` works on its own inputs and returns a fresh
    result; only the embedding cache is shared between calls.
    """

    def __init__(
        self,
        config: DesignQAConfig | None = None,
        settings: RuntimeSettings | None = None,
        text_similarity: TextSimilarity | None = None,
    ):
        """Initialize the comparator.

        Args:
            config: Optional configuration. Defaults to DesignQAConfig().
            settings: Optional runtime settings used to build the embedder.
            text_similarity: Optional text scorer; defaults to a
                SemanticSimilarityScorer built from the embeddings config.
        """
        self.config = config or DesignQAConfig()
        self.settings = settings

        # Lazy-initialize components
        self._text_similarity = text_similarity
        self._matcher: ElementMatcher | None = None
        self._differ: AttributeDiffer | None = None
        self._aggregator: QualityAggregator | None = None

    @property
    def text_similarity(self) -> TextSimilarity:
        """Lazy-initialized text similarity scorer."""
        if self._text_similarity is None:
            emb = self.config.embeddings
            self._text_similarity = SemanticSimilarityScorer(
                embedder=create_embedder(emb, self.settings),
                cache=EmbeddingCache(emb.cache_size),
                max_concurrency=emb.max_concurrency,
            )
        return self._text_similarity

    @property
    def matcher(self) -> ElementMatcher:
        """Lazy-initialized element matcher."""
        if self._matcher is None:
            self._matcher = ElementMatcher(self.text_similarity, self.config.matching)
        return self._matcher

    @property
    def differ(self) -> AttributeDiffer:
        """Lazy-initialized attribute differ."""
        if self._differ is None:
            self._differ = AttributeDiffer(self.config.tolerances)
        return self._differ

    @property
    def aggregator(self) -> QualityAggregator:
        """Lazy-initialized quality aggregator."""
        if self._aggregator is None:
            self._aggregator = QualityAggregator(self.config.readiness)
        return self._aggregator

    async def _prefetch(
        self,
        design_elements: Sequence[DesignElement],
        rendered_elements: Sequence[RenderedElement],
    ) -> None:
        prefetch = getattr(self.text_similarity, "prefetch", None)
        if prefetch is None:
            return
        texts = [d.match_text for d in design_elements]
        texts.extend(r.match_text for r in rendered_elements)
        await prefetch(texts)

    async def compare(
        self,
        design_elements: Sequence[DesignElement],
        rendered_elements: Sequence[RenderedElement],
    ) -> ComparisonResult:
        """Compare design elements with rendered elements.

        Args:
            design_elements: Elements extracted from the design frame.
            rendered_elements: Elements extracted from the rendered page.

        Returns:
            A new ComparisonResult. Empty inputs give a vacuously perfect result.

        Raises:
            InvalidElementError: If any input element is malformed.
        """
        start = time.perf_counter()
        _validate(design_elements, rendered_elements)

        if design_elements and rendered_elements:
            await self._prefetch(design_elements, rendered_elements)

        matched = self.matcher.match(design_elements, rendered_elements)
        pairs = self.differ.diff(matched.pairs)
        result = self.aggregator.aggregate(pairs, rendered_elements)

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Compared {len(design_elements)} design / {len(rendered_elements)} "
            f"rendered elements: overall {result.overall_score:.1f} "
            f"({result.readiness.value})",
            extra={
                "operation": "compare",
                "duration_ms": round(duration_ms, 2),
                "element_count": len(design_elements),
            },
        )
        return result

    def compare_sync(
        self,
        design_elements: Sequence[DesignElement],
        rendered_elements: Sequence[RenderedElement],
    ) -> ComparisonResult:
        """Blocking wrapper around ``compare`` for non-async callers."""
        return asyncio.run(self.compare(design_elements, rendered_elements))


async def compare(
    design_elements: Sequence[DesignElement],
    rendered_elements: Sequence[RenderedElement],
    config: DesignQAConfig | None = None,
) -> ComparisonResult:
    """Compare with a one-off comparator."""
    return await DesignComparator(config).compare(design_elements, rendered_elements)


def compare_sync(
    design_elements: Sequence[DesignElement],
    rendered_elements: Sequence[RenderedElement],
    config: DesignQAConfig | None = None,
) -> ComparisonResult:
    """Blocking variant of :func:`compare`."""
    return DesignComparator(config).compare_sync(design_elements, rendered_elements)
