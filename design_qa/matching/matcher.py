"""Cross-domain element matching.

Each design element is paired with the rendered element that maximizes

    geometry_weight * iou + text_weight * text_similarity - role_penalty

and the pair is accepted only if that score exceeds ``min_match_score``.
Assignment is greedy per design element: several design elements may
choose the same rendered element, and no global optimum is sought. In
scenes with duplicate text at different positions the overlap term
usually disambiguates, but an instance far from its design position can
still be matched to the wrong copy.
"""

from dataclasses import dataclass
from typing import Protocol

from ..config import MatchingConfig
from ..models import DesignElement, ElementPair, RenderedElement
from ..qa_logging import LogCategory, get_category_logger
from ..similarity.geometry import iou, proximity

logger = get_category_logger(LogCategory.MATCHER)


class TextSimilarity(Protocol):
    """Anything that scores two strings in [0, 1]."""

    def similarity(self, a: str | None, b: str | None) -> float: ...


@dataclass(frozen=True)
class MatchCandidate:
    """Score breakdown for one design/rendered combination."""

    rendered: RenderedElement
    score: float
    overlap: float
    text_score: float
    role_penalty: float
    proximity: float


@dataclass(frozen=True)
class MatchResult:
    """Pairs in design order; unmatched design elements have no rendered side."""

    pairs: tuple[ElementPair, ...]

    @property
    def matched(self) -> tuple[ElementPair, ...]:
        return tuple(p for p in self.pairs if p.matched)

    @property
    def unmatched(self) -> tuple[DesignElement, ...]:
        return tuple(p.design for p in self.pairs if not p.matched)


class ElementMatcher:
    """Greedy best-match pairing of design elements to rendered elements."""

    def __init__(
        self,
        text_similarity: TextSimilarity,
        config: MatchingConfig | None = None,
    ):
        self.text_similarity = text_similarity
        self.config = config or MatchingConfig()

    def _role_penalty(self, design: DesignElement, rendered: RenderedElement) -> float:
        if design.role is None or rendered.role is None:
            return 0.0
        return self.config.role_penalty if design.role != rendered.role else 0.0

    def score(self, design: DesignElement, rendered: RenderedElement) -> MatchCandidate:
        """Compute the match score of one combination."""
        overlap = iou(design.box, rendered.box)
        text_score = self.text_similarity.similarity(
            design.match_text, rendered.match_text
        )
        penalty = self._role_penalty(design, rendered)
        score = (
            self.config.geometry_weight * overlap
            + self.config.text_weight * text_score
            - penalty
        )
        return MatchCandidate(
            rendered=rendered,
            score=score,
            overlap=overlap,
            text_score=text_score,
            role_penalty=penalty,
            proximity=proximity(design.box, rendered.box),
        )

    def best_match(
        self,
        design: DesignElement,
        rendered_elements: list[RenderedElement] | tuple[RenderedElement, ...],
    ) -> MatchCandidate | None:
        """Best-scoring candidate above the threshold, or None.

        Equal scores are broken by positional proximity, then by order.
        """
        best: MatchCandidate | None = None
        for rendered in rendered_elements:
            candidate = self.score(design, rendered)
            if best is None or candidate.score > best.score or (
                candidate.score == best.score and candidate.proximity > best.proximity
            ):
                best = candidate

        if best is None or best.score <= self.config.min_match_score:
            if best is not None:
                logger.debug(
                    f"No match for {design.id} ({design.match_text[:30]!r}): "
                    f"best score {best.score:.3f} <= {self.config.min_match_score}"
                )
            return None

        logger.debug(
            f"Matched {design.id} -> {best.rendered.id} score={best.score:.3f} "
            f"(iou={best.overlap:.3f}, text={best.text_score:.3f}, "
            f"penalty={best.role_penalty})"
        )
        return best

    def match(
        self,
        design_elements: list[DesignElement] | tuple[DesignElement, ...],
        rendered_elements: list[RenderedElement] | tuple[RenderedElement, ...],
    ) -> MatchResult:
        """Pair every design element with at most one rendered element."""
        pairs = []
        for design in design_elements:
            candidate = self.best_match(design, rendered_elements)
            if candidate is None:
                pairs.append(ElementPair(design=design, rendered=None, match_score=0.0))
            else:
                pairs.append(
                    ElementPair(
                        design=design,
                        rendered=candidate.rendered,
                        match_score=max(0.0, min(1.0, candidate.score)),
                    )
                )

        result = MatchResult(pairs=tuple(pairs))
        logger.info(
            f"Matched {len(result.matched)}/{len(pairs)} design elements",
            extra={"operation": "match", "element_count": len(pairs)},
        )
        return result
