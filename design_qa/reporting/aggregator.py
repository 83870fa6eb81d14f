"""Quality aggregation for comparison results.

This module provides the QualityAggregator class, which rolls per-pair
differences up into category accuracies, summary counts and a
readiness verdict.
"""

from collections.abc import Iterable

from ..config import ReadinessConfig
from ..models import (
    ComparisonResult,
    ComparisonSummary,
    Difference,
    DifferenceKind,
    ElementPair,
    QualityReport,
    Readiness,
    RenderedElement,
    Severity,
)

CONTENT_KINDS = frozenset({DifferenceKind.TEXT, DifferenceKind.MISSING})
TYPOGRAPHY_KINDS = frozenset(
    {DifferenceKind.FONT_FAMILY, DifferenceKind.FONT_SIZE, DifferenceKind.FONT_WEIGHT}
)
COLOR_KINDS = frozenset({DifferenceKind.COLOR})


def _has_kind(pair: ElementPair, kinds: frozenset[DifferenceKind]) -> bool:
    return any(d.kind in kinds for d in pair.differences)


class QualityAggregator:
    """Computes accuracies, summary counts and the readiness verdict.

    Accuracy for a category is the share of design elements with no
    difference in that category, so it always lies in [0, 100]. With no
    design elements every accuracy is vacuously 100.
    """

    def __init__(self, readiness: ReadinessConfig | None = None):
        """Initialize the aggregator.

        Args:
            readiness: Verdict thresholds. Defaults to ReadinessConfig().
        """
        self.readiness = readiness or ReadinessConfig()

    @staticmethod
    def accuracy(total: int, mismatches: int) -> float:
        """Percentage of elements without a mismatch (100 if total is 0)."""
        if total == 0:
            return 100.0
        return 100.0 * (total - mismatches) / total

    def verdict(self, overall_score: float, critical_count: int) -> Readiness:
        """Map an overall score and critical-issue count to a verdict."""
        cfg = self.readiness
        if (
            critical_count <= cfg.production_ready_max_critical
            and overall_score >= cfg.production_ready_min_score
        ):
            return Readiness.PRODUCTION_READY
        if (
            critical_count <= cfg.needs_review_max_critical
            and overall_score >= cfg.needs_review_min_score
        ):
            return Readiness.NEEDS_REVIEW
        return Readiness.NEEDS_MAJOR_FIXES

    def quality(self, pairs: tuple[ElementPair, ...]) -> QualityReport:
        """Category accuracies and verdict for a set of diffed pairs."""
        total = len(pairs)
        matched = sum(1 for p in pairs if p.matched)

        content = self.accuracy(total, sum(1 for p in pairs if _has_kind(p, CONTENT_KINDS)))
        typography = self.accuracy(
            total, sum(1 for p in pairs if _has_kind(p, TYPOGRAPHY_KINDS))
        )
        color = self.accuracy(total, sum(1 for p in pairs if _has_kind(p, COLOR_KINDS)))
        layout = self.accuracy(total, total - matched)
        overall = (content + typography + color + layout) / 4

        critical_count = sum(
            1 for p in pairs for d in p.differences if d.severity == Severity.CRITICAL
        )
        return QualityReport(
            content_accuracy=content,
            typography_accuracy=typography,
            color_accuracy=color,
            layout_accuracy=layout,
            overall_score=overall,
            readiness=self.verdict(overall, critical_count),
        )

    def summary(
        self,
        pairs: tuple[ElementPair, ...],
        rendered_elements: Iterable[RenderedElement] = (),
    ) -> ComparisonSummary:
        """Counts over pairs and the rendered elements nobody matched."""
        differences: list[Difference] = [d for p in pairs for d in p.differences]
        chosen = {id(p.rendered) for p in pairs if p.rendered is not None}
        extra = sum(
            1
            for r in rendered_elements
            if id(r) not in chosen and r.own_text.strip()
        )

        by_severity = {s.value: 0 for s in Severity}
        by_kind = {k.value: 0 for k in DifferenceKind}
        for d in differences:
            by_severity[d.severity.value] += 1
            by_kind[d.kind.value] += 1

        return ComparisonSummary(
            total_elements=len(pairs),
            matched_elements=sum(1 for p in pairs if p.matched),
            missing_elements=sum(1 for p in pairs if not p.matched),
            extra_elements=extra,
            text_mismatches=sum(
                1 for p in pairs if _has_kind(p, frozenset({DifferenceKind.TEXT}))
            ),
            style_mismatches=sum(
                1 for p in pairs if _has_kind(p, TYPOGRAPHY_KINDS | COLOR_KINDS)
            ),
            critical_issues=by_severity[Severity.CRITICAL.value],
            by_severity=by_severity,
            by_kind=by_kind,
        )

    def aggregate(
        self,
        pairs: tuple[ElementPair, ...] | list[ElementPair],
        rendered_elements: Iterable[RenderedElement] = (),
    ) -> ComparisonResult:
        """Build the final comparison result."""
        pairs = tuple(pairs)
        critical = tuple(
            d for p in pairs for d in p.differences if d.severity == Severity.CRITICAL
        )
        return ComparisonResult(
            pairs=pairs,
            critical_issues=critical,
            summary=self.summary(pairs, rendered_elements),
            quality=self.quality(pairs),
        )
