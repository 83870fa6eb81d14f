"""Semantic role inference shared by design and rendered elements.

Roles come from an ordered rule list evaluated top to bottom; the first
rule whose predicate holds decides the role. The same list is applied to
both domains so that matched elements are judged by the same criteria.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from ..models import ElementRole
from .style import parse_font_weight, parse_px

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
BUTTON_INPUT_TYPES = frozenset({"submit", "button", "reset"})
BUTTON_HINTS = frozenset({"button", "btn", "cta"})
HEADING_HINTS = frozenset({"heading", "title", "headline", "h1", "h2", "h3"})

HEADING_MIN_FONT_SIZE_PX = 20.0
HEADING_MIN_FONT_WEIGHT = 600
DISPLAY_MIN_FONT_SIZE_PX = 28.0
LABEL_MAX_TEXT_LENGTH = 45

_HINT_SPLIT = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class RoleFeatures:
    """Domain-neutral inputs to role inference."""

    text: str = ""
    tag: str | None = None
    aria_role: str | None = None
    input_type: str | None = None
    name_hint: str | None = None
    font_size_px: float | None = None
    font_weight: int | None = None

    @property
    def hint_tokens(self) -> frozenset[str]:
        if not self.name_hint:
            return frozenset()
        return frozenset(t for t in _HINT_SPLIT.split(self.name_hint.lower()) if t)


@dataclass(frozen=True)
class RoleRule:
    """A named predicate that assigns a role when it holds."""

    name: str
    role: ElementRole
    predicate: Callable[[RoleFeatures], bool] = field(compare=False)

    def applies(self, features: RoleFeatures) -> bool:
        return self.predicate(features)


def _is_heading_tag(f: RoleFeatures) -> bool:
    return (f.tag or "").lower() in HEADING_TAGS


def _is_button_tag(f: RoleFeatures) -> bool:
    tag = (f.tag or "").lower()
    if tag == "button" or (f.aria_role or "").lower() == "button":
        return True
    return tag == "input" and (f.input_type or "").lower() in BUTTON_INPUT_TYPES


def _is_large_bold(f: RoleFeatures) -> bool:
    return (
        f.font_size_px is not None
        and f.font_weight is not None
        and f.font_size_px >= HEADING_MIN_FONT_SIZE_PX
        and f.font_weight >= HEADING_MIN_FONT_WEIGHT
    )


def _is_display_size(f: RoleFeatures) -> bool:
    return f.font_size_px is not None and f.font_size_px >= DISPLAY_MIN_FONT_SIZE_PX


def _has_text(f: RoleFeatures) -> bool:
    return bool(f.text.strip())


DEFAULT_ROLE_RULES: tuple[RoleRule, ...] = (
    RoleRule("heading_tag", ElementRole.HEADING, _is_heading_tag),
    RoleRule("button_tag", ElementRole.BUTTON, _is_button_tag),
    RoleRule("button_hint", ElementRole.BUTTON, lambda f: bool(f.hint_tokens & BUTTON_HINTS)),
    RoleRule("heading_hint", ElementRole.HEADING, lambda f: bool(f.hint_tokens & HEADING_HINTS)),
    RoleRule("large_bold_text", ElementRole.HEADING, _is_large_bold),
    RoleRule("display_text", ElementRole.HEADING, _is_display_size),
    RoleRule(
        "short_text",
        ElementRole.LABEL,
        lambda f: _has_text(f) and len(f.text.strip()) < LABEL_MAX_TEXT_LENGTH,
    ),
    RoleRule("body_text", ElementRole.PARAGRAPH, _has_text),
)


class RoleClassifier:
    """Evaluates an ordered rule list; falls back to ``ElementRole.OTHER``."""

    def __init__(self, rules: tuple[RoleRule, ...] = DEFAULT_ROLE_RULES):
        self.rules = rules

    def classify(self, features: RoleFeatures) -> ElementRole:
        return self.explain(features)[0]

    def explain(self, features: RoleFeatures) -> tuple[ElementRole, str]:
        """Return the role and the name of the rule that decided it."""
        for rule in self.rules:
            if rule.applies(features):
                return rule.role, rule.name
        return ElementRole.OTHER, "fallback"


def infer_role(
    text: str,
    tag: str | None = None,
    attributes: dict[str, str] | None = None,
    name_hint: str | None = None,
    font_size: float | str | None = None,
    font_weight: int | str | None = None,
    base_font_size: float = 16.0,
) -> ElementRole:
    """Infer a role from raw element properties using the default rules."""
    attributes = attributes or {}
    features = RoleFeatures(
        text=text or "",
        tag=tag,
        aria_role=attributes.get("role"),
        input_type=attributes.get("type"),
        name_hint=name_hint,
        font_size_px=parse_px(font_size, base_font_size),
        font_weight=parse_font_weight(font_weight),
    )
    return RoleClassifier().classify(features)
