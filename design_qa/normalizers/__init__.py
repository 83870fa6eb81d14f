"""Style value parsing and role inference."""

from .roles import (
    DEFAULT_ROLE_RULES,
    RoleClassifier,
    RoleFeatures,
    RoleRule,
    infer_role,
)
from .style import (
    NormalizedStyle,
    StyleNormalizer,
    clean_font_family,
    css_color_to_hex,
    font_families_match,
    parse_font_weight,
    parse_px,
    rgb_to_hex,
)

__all__ = [
    "DEFAULT_ROLE_RULES",
    "RoleClassifier",
    "RoleFeatures",
    "RoleRule",
    "infer_role",
    "NormalizedStyle",
    "StyleNormalizer",
    "clean_font_family",
    "css_color_to_hex",
    "font_families_match",
    "parse_font_weight",
    "parse_px",
    "rgb_to_hex",
]
