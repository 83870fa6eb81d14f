"""
Shared fixtures for the design-qa test suite.

Provides:
- Factories for design and rendered elements
- A fixed-value text similarity stub for matcher tests
- A comparator backed by the deterministic hashing embedder
- Figma and DOM snapshot payloads
"""

import logging

import pytest

from design_qa.comparator import DesignComparator
from design_qa.config import DesignQAConfig
from design_qa.embeddings.hashing import HashingEmbedder
from design_qa.models import (
    BoundingBox,
    DesignElement,
    ElementRole,
    RenderedElement,
    StyleAttributes,
)
from design_qa.qa_logging import ROOT_LOGGER_NAME
from design_qa.similarity.semantic import EmbeddingCache, SemanticSimilarityScorer


class StubSimilarity:
    """Text similarity that returns a fixed score for every non-empty pair."""

    def __init__(self, value: float = 0.0):
        self.value = value
        self.calls: list[tuple[str, str]] = []

    def similarity(self, a, b):
        self.calls.append((a, b))
        if not a or not b:
            return 0.0
        return self.value


@pytest.fixture(autouse=True)
def _isolate_package_logger():
    """Let caplog see package records and drop handlers added by setup_logging."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    original_propagate = logger.propagate
    original_level = logger.level
    original_handlers = list(logger.handlers)
    logger.propagate = True
    yield
    for handler in list(logger.handlers):
        if handler not in original_handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(original_level)
    logger.propagate = original_propagate


@pytest.fixture
def make_design():
    """Factory for design elements with design-tool style values."""

    def _make(
        element_id: str = "1:1",
        text: str | None = "Day workshop",
        box: tuple[float, float, float, float] = (100, 100, 200, 40),
        font_family: str | None = "Inter",
        font_size: float | None = 32,
        font_weight: int | None = 700,
        color: str | None = "#1a2b3c",
        role: ElementRole | None = None,
        name: str = "Title",
    ) -> DesignElement:
        return DesignElement(
            id=element_id,
            name=name,
            text=text,
            box=BoundingBox(*box),
            style=StyleAttributes(
                font_family=font_family,
                font_size=font_size,
                font_weight=font_weight,
                color=color,
            ),
            role=role,
            hierarchy=("FRAME:Landing", f"TEXT:{name}"),
        )

    return _make


@pytest.fixture
def make_rendered():
    """Factory for rendered elements with computed CSS strings."""

    def _make(
        element_id: str = "title",
        text: str = "Day workshop",
        box: tuple[float, float, float, float] = (100, 100, 200, 40),
        font_family: str | None = "Inter",
        font_size: str | None = "32px",
        font_weight: str | None = "700",
        color: str | None = "rgb(26, 43, 60)",
        role: ElementRole | None = None,
        tag: str = "h1",
        text_content: str | None = None,
    ) -> RenderedElement:
        return RenderedElement(
            id=element_id,
            tag=tag,
            own_text=text,
            text_content=text if text_content is None else text_content,
            box=BoundingBox(*box),
            style=StyleAttributes(
                font_family=font_family,
                font_size=font_size,
                font_weight=font_weight,
                color=color,
            ),
            role=role,
            hierarchy=("main", tag),
        )

    return _make


@pytest.fixture
def stub_similarity():
    """Factory for fixed-value text similarity stubs."""
    return StubSimilarity


@pytest.fixture
def scorer():
    """Semantic scorer backed by the hashing embedder."""
    return SemanticSimilarityScorer(
        embedder=HashingEmbedder(dimensions=256),
        cache=EmbeddingCache(max_size=1000),
        max_concurrency=4,
    )


@pytest.fixture
def comparator(scorer):
    """Comparator with default config and the hashing scorer."""
    return DesignComparator(DesignQAConfig(), text_similarity=scorer)


@pytest.fixture
def figma_nodes_response():
    """A Figma /nodes response for a frame with a heading, body and button."""
    return {
        "name": "Landing",
        "nodes": {
            "12:34": {
                "document": {
                    "id": "12:34",
                    "name": "Landing",
                    "type": "FRAME",
                    "absoluteBoundingBox": {"x": 1000, "y": 500, "width": 1440, "height": 900},
                    "children": [
                        {
                            "id": "12:35",
                            "name": "Day workshop",
                            "type": "TEXT",
                            "characters": "Day workshop",
                            "absoluteBoundingBox": {"x": 1100, "y": 600, "width": 300, "height": 48},
                            "style": {"fontFamily": "Inter", "fontSize": 32, "fontWeight": 700},
                            "fills": [{"type": "SOLID", "color": {"r": 0.2, "g": 0.4, "b": 0.6, "a": 1}}],
                        },
                        {
                            "id": "12:36",
                            "name": "Content",
                            "type": "GROUP",
                            "absoluteBoundingBox": {"x": 1100, "y": 700, "width": 600, "height": 200},
                            "children": [
                                {
                                    "id": "12:37",
                                    "name": "Body copy",
                                    "type": "TEXT",
                                    "characters": "Join us for a full day of hands-on sessions covering design systems and QA.",
                                    "absoluteBoundingBox": {"x": 1100, "y": 700, "width": 600, "height": 60},
                                    "style": {"fontFamily": "Inter", "fontSize": 16, "fontWeight": 400},
                                    "fills": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0, "a": 1}}],
                                },
                                {
                                    "id": "12:38",
                                    "name": "Button/Primary",
                                    "type": "TEXT",
                                    "characters": "Register",
                                    "absoluteBoundingBox": {"x": 1100, "y": 800, "width": 120, "height": 40},
                                    "style": {"fontFamily": "Inter", "fontSize": 16, "fontWeight": 600},
                                    "fills": [{"type": "SOLID", "color": {"r": 1, "g": 1, "b": 1, "a": 1}}],
                                },
                                {
                                    "id": "12:39",
                                    "name": "Hidden note",
                                    "type": "TEXT",
                                    "visible": False,
                                    "characters": "Draft",
                                    "absoluteBoundingBox": {"x": 1100, "y": 850, "width": 50, "height": 20},
                                },
                                {
                                    "id": "12:40",
                                    "name": "Empty",
                                    "type": "TEXT",
                                    "characters": "   ",
                                    "absoluteBoundingBox": {"x": 1100, "y": 870, "width": 50, "height": 20},
                                },
                            ],
                        },
                    ],
                }
            }
        },
    }


@pytest.fixture
def dom_records():
    """Extraction-script records matching the Figma frame above."""
    return [
        {
            "id": "hero-title",
            "tagName": "h1",
            "text": "Day workshop",
            "textContent": "Day workshop",
            "styles": {
                "fontFamily": '"Inter", sans-serif',
                "fontSize": "32px",
                "fontWeight": "700",
                "color": "rgb(51, 102, 153)",
            },
            "position": {"x": 100, "y": 100, "width": 300, "height": 48},
            "attributes": {"id": "hero-title", "class": "hero"},
            "hierarchy": ["main", "section.hero", "h1#hero-title"],
        },
        {
            "id": "",
            "tagName": "p",
            "text": "Join us for a full day of hands-on sessions covering design systems and QA.",
            "textContent": "Join us for a full day of hands-on sessions covering design systems and QA.",
            "styles": {
                "fontFamily": "Inter, Arial, sans-serif",
                "fontSize": "16px",
                "fontWeight": "400",
                "color": "rgb(0, 0, 0)",
            },
            "position": {"x": 100, "y": 200, "width": 600, "height": 60},
            "attributes": {},
            "hierarchy": ["main", "p"],
        },
        {
            "id": "",
            "tagName": "a",
            "text": "Register",
            "textContent": "Register",
            "styles": {
                "fontFamily": "Inter",
                "fontSize": "16px",
                "fontWeight": "600",
                "color": "rgb(255, 255, 255)",
            },
            "position": {"x": 100, "y": 300, "width": 120, "height": 40},
            "attributes": {"role": "button", "href": "/register"},
            "hierarchy": ["main", "a"],
        },
    ]
