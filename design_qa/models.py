"""Data models for design-vs-implementation comparison.

This module defines the element types produced by the design and DOM
extraction steps, and the pairs, differences and reports produced by
a comparison run. All types are immutable; a comparison result is a
pure function of its inputs.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import InvalidElementError


class ElementRole(Enum):
    """Semantic role inferred for an element."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BUTTON = "button"
    LABEL = "label"
    OTHER = "other"


class DifferenceKind(Enum):
    """Attribute a difference was found on."""

    TEXT = "text"
    FONT_FAMILY = "font-family"
    FONT_SIZE = "font-size"
    FONT_WEIGHT = "font-weight"
    COLOR = "color"
    MISSING = "missing"  # Design element has no rendered counterpart


class Severity(Enum):
    """Severity levels for differences."""

    CRITICAL = "critical"  # Wrong or absent content
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Readiness(Enum):
    """Qualitative verdict for a comparison."""

    PRODUCTION_READY = "production-ready"
    NEEDS_REVIEW = "needs-review"
    NEEDS_MAJOR_FIXES = "needs-major-fixes"


def _require_number(value: Any, name: str, element_id: str | None) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidElementError(
            f"Bounding box field '{name}' must be a number, got {value!r}",
            element_id=element_id,
        )
    if not math.isfinite(value):
        raise InvalidElementError(
            f"Bounding box field '{name}' must be finite, got {value!r}",
            element_id=element_id,
        )
    return float(value)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle in pixel units.

    Design boxes are relative to the frame origin; rendered boxes are in
    absolute document coordinates. Width and height must be non-negative.
    """

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        for name in ("x", "y", "width", "height"):
            _require_number(getattr(self, name), name, None)
        if self.width < 0 or self.height < 0:
            raise InvalidElementError(
                f"Bounding box size must be non-negative, "
                f"got {self.width}x{self.height}"
            )

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(
        cls, data: dict[str, Any] | None, element_id: str | None = None
    ) -> "BoundingBox":
        """Create from dictionary, failing fast on missing or bad geometry."""
        if not isinstance(data, dict):
            raise InvalidElementError(
                "Element is missing its bounding box", element_id=element_id
            )
        missing = [k for k in ("x", "y", "width", "height") if k not in data]
        if missing:
            raise InvalidElementError(
                f"Bounding box is missing field(s): {', '.join(missing)}",
                element_id=element_id,
            )
        values = {
            k: _require_number(data[k], k, element_id)
            for k in ("x", "y", "width", "height")
        }
        if values["width"] < 0 or values["height"] < 0:
            raise InvalidElementError(
                f"Bounding box size must be non-negative, "
                f"got {values['width']}x{values['height']}",
                element_id=element_id,
            )
        return cls(**values)


@dataclass(frozen=True)
class StyleAttributes:
    """Typography and color attributes of an element.

    Design elements carry numeric sizes/weights and hex colors; rendered
    elements carry computed CSS strings ("16px", "700", "rgb(0, 0, 0)").
    The differ parses both forms before comparing.
    """

    font_family: str | None = None
    font_size: float | str | None = None
    font_weight: int | str | None = None
    color: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "font_family": self.font_family,
            "font_size": self.font_size,
            "font_weight": self.font_weight,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "StyleAttributes":
        """Create from dictionary."""
        data = data or {}
        return cls(
            font_family=data.get("font_family"),
            font_size=data.get("font_size"),
            font_weight=data.get("font_weight"),
            color=data.get("color"),
        )


def _role_from(value: str | None) -> ElementRole | None:
    return ElementRole(value) if value else None


@dataclass(frozen=True)
class DesignElement:
    """A text-bearing node extracted from the design tool."""

    id: str
    name: str
    text: str | None
    box: BoundingBox
    style: StyleAttributes = field(default_factory=StyleAttributes)
    role: ElementRole | None = None
    hierarchy: tuple[str, ...] = ()
    node_type: str = "TEXT"

    def __post_init__(self) -> None:
        if not isinstance(self.box, BoundingBox):
            raise InvalidElementError(
                "Design element is missing its bounding box", element_id=self.id
            )

    @property
    def match_text(self) -> str:
        """Text used for matching and content comparison."""
        return self.text or ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "text": self.text,
            "box": self.box.to_dict(),
            "style": self.style.to_dict(),
            "role": self.role.value if self.role else None,
            "hierarchy": list(self.hierarchy),
            "node_type": self.node_type,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DesignElement":
        """Create from dictionary."""
        element_id = str(data.get("id", ""))
        return cls(
            id=element_id,
            name=data.get("name", ""),
            text=data.get("text"),
            box=BoundingBox.from_dict(data.get("box"), element_id=element_id),
            style=StyleAttributes.from_dict(data.get("style")),
            role=_role_from(data.get("role")),
            hierarchy=tuple(data.get("hierarchy", ())),
            node_type=data.get("node_type", "TEXT"),
        )


@dataclass(frozen=True)
class RenderedElement:
    """A visible element extracted from the rendered page.

    ``own_text`` holds only the element's direct text nodes, while
    ``text_content`` includes the text of all descendants.
    """

    id: str
    tag: str
    own_text: str
    text_content: str
    box: BoundingBox
    style: StyleAttributes = field(default_factory=StyleAttributes)
    role: ElementRole | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    hierarchy: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.box, BoundingBox):
            raise InvalidElementError(
                "Rendered element is missing its bounding box", element_id=self.id
            )

    @property
    def match_text(self) -> str:
        """Text used for matching (direct text only)."""
        return self.own_text

    @property
    def display_text(self) -> str:
        """Text used for content comparison."""
        return self.text_content or self.own_text

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "tag": self.tag,
            "own_text": self.own_text,
            "text_content": self.text_content,
            "box": self.box.to_dict(),
            "style": self.style.to_dict(),
            "role": self.role.value if self.role else None,
            "attributes": dict(self.attributes),
            "hierarchy": list(self.hierarchy),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RenderedElement":
        """Create from dictionary."""
        element_id = str(data.get("id", ""))
        return cls(
            id=element_id,
            tag=data.get("tag", ""),
            own_text=data.get("own_text", ""),
            text_content=data.get("text_content", ""),
            box=BoundingBox.from_dict(data.get("box"), element_id=element_id),
            style=StyleAttributes.from_dict(data.get("style")),
            role=_role_from(data.get("role")),
            attributes=dict(data.get("attributes", {})),
            hierarchy=tuple(data.get("hierarchy", ())),
        )


@dataclass(frozen=True)
class Difference:
    """A single discrepancy between a design element and the page."""

    kind: DifferenceKind
    severity: Severity
    expected: str
    actual: str
    description: str
    suggestion: str
    element_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "severity": self.severity.value,
            "expected": self.expected,
            "actual": self.actual,
            "description": self.description,
            "suggestion": self.suggestion,
            "element_id": self.element_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Difference":
        """Create from dictionary."""
        return cls(
            kind=DifferenceKind(data["kind"]),
            severity=Severity(data["severity"]),
            expected=data.get("expected", ""),
            actual=data.get("actual", ""),
            description=data.get("description", ""),
            suggestion=data.get("suggestion", ""),
            element_id=data.get("element_id", ""),
        )


@dataclass(frozen=True)
class ElementPair:
    """A design element with its best rendered match, if any.

    ``match_score`` is the matcher's confidence in [0, 1]; unmatched
    design elements have ``rendered=None`` and a score of 0.
    """

    design: DesignElement
    rendered: RenderedElement | None
    match_score: float
    differences: tuple[Difference, ...] = ()

    @property
    def matched(self) -> bool:
        return self.rendered is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "design": self.design.to_dict(),
            "rendered": self.rendered.to_dict() if self.rendered else None,
            "match_score": self.match_score,
            "differences": [d.to_dict() for d in self.differences],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ElementPair":
        """Create from dictionary."""
        rendered = data.get("rendered")
        return cls(
            design=DesignElement.from_dict(data["design"]),
            rendered=RenderedElement.from_dict(rendered) if rendered else None,
            match_score=data.get("match_score", 0.0),
            differences=tuple(
                Difference.from_dict(d) for d in data.get("differences", [])
            ),
        )


@dataclass(frozen=True)
class ComparisonSummary:
    """Counts describing a comparison run."""

    total_elements: int = 0
    matched_elements: int = 0
    missing_elements: int = 0
    extra_elements: int = 0
    text_mismatches: int = 0
    style_mismatches: int = 0
    critical_issues: int = 0
    by_severity: dict[str, int] = field(default_factory=dict)
    by_kind: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_elements": self.total_elements,
            "matched_elements": self.matched_elements,
            "missing_elements": self.missing_elements,
            "extra_elements": self.extra_elements,
            "text_mismatches": self.text_mismatches,
            "style_mismatches": self.style_mismatches,
            "critical_issues": self.critical_issues,
            "by_severity": dict(self.by_severity),
            "by_kind": dict(self.by_kind),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ComparisonSummary":
        """Create from dictionary."""
        return cls(
            total_elements=data.get("total_elements", 0),
            matched_elements=data.get("matched_elements", 0),
            missing_elements=data.get("missing_elements", 0),
            extra_elements=data.get("extra_elements", 0),
            text_mismatches=data.get("text_mismatches", 0),
            style_mismatches=data.get("style_mismatches", 0),
            critical_issues=data.get("critical_issues", 0),
            by_severity=dict(data.get("by_severity", {})),
            by_kind=dict(data.get("by_kind", {})),
        )


@dataclass(frozen=True)
class QualityReport:
    """Per-category accuracy scores (0-100) and the readiness verdict."""

    content_accuracy: float = 100.0
    typography_accuracy: float = 100.0
    color_accuracy: float = 100.0
    layout_accuracy: float = 100.0
    overall_score: float = 100.0
    readiness: Readiness = Readiness.PRODUCTION_READY

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "content_accuracy": self.content_accuracy,
            "typography_accuracy": self.typography_accuracy,
            "color_accuracy": self.color_accuracy,
            "layout_accuracy": self.layout_accuracy,
            "overall_score": self.overall_score,
            "readiness": self.readiness.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QualityReport":
        """Create from dictionary."""
        return cls(
            content_accuracy=data.get("content_accuracy", 100.0),
            typography_accuracy=data.get("typography_accuracy", 100.0),
            color_accuracy=data.get("color_accuracy", 100.0),
            layout_accuracy=data.get("layout_accuracy", 100.0),
            overall_score=data.get("overall_score", 100.0),
            readiness=Readiness(data.get("readiness", "production-ready")),
        )


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing a design frame against a rendered page."""

    pairs: tuple[ElementPair, ...] = ()
    critical_issues: tuple[Difference, ...] = ()
    summary: ComparisonSummary = field(default_factory=ComparisonSummary)
    quality: QualityReport = field(default_factory=QualityReport)

    @property
    def overall_score(self) -> float:
        return self.quality.overall_score

    @property
    def readiness(self) -> Readiness:
        return self.quality.readiness

    @property
    def matches(self) -> tuple[ElementPair, ...]:
        """Pairs whose design element found a rendered counterpart."""
        return tuple(p for p in self.pairs if p.matched)

    @property
    def differences(self) -> tuple[Difference, ...]:
        """All differences across every pair, in pair order."""
        return tuple(d for p in self.pairs for d in p.differences)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "overall_score": self.overall_score,
            "readiness": self.readiness.value,
            "pairs": [p.to_dict() for p in self.pairs],
            "critical_issues": [d.to_dict() for d in self.critical_issues],
            "summary": self.summary.to_dict(),
            "quality": self.quality.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ComparisonResult":
        """Create from dictionary."""
        return cls(
            pairs=tuple(ElementPair.from_dict(p) for p in data.get("pairs", [])),
            critical_issues=tuple(
                Difference.from_dict(d) for d in data.get("critical_issues", [])
            ),
            summary=ComparisonSummary.from_dict(data.get("summary", {})),
            quality=QualityReport.from_dict(data.get("quality", {})),
        )
