"""Unit tests for style value parsing."""

import pytest

from design_qa.models import StyleAttributes
from design_qa.normalizers.style import (
    StyleNormalizer,
    clean_font_family,
    css_color_to_hex,
    font_families_match,
    parse_font_weight,
    parse_px,
    rgb_to_hex,
)


class TestRgbToHex:
    """Tests for design-tool float colors."""

    def test_pure_red(self):
        """Test 0-1 channels scale to 0-255."""
        assert rgb_to_hex({"r": 1, "g": 0, "b": 0}) == "#ff0000"

    def test_alpha_ignored(self):
        """Test alpha does not affect the hex value."""
        assert rgb_to_hex({"r": 0, "g": 0, "b": 0, "a": 0.5}) == "#000000"

    def test_mid_values(self):
        """Test intermediate channels round to the nearest integer."""
        assert rgb_to_hex({"r": 0.2, "g": 0.4, "b": 0.6}) == "#336699"

    def test_out_of_range_clamped(self):
        """Test channels outside [0, 1] are clamped."""
        assert rgb_to_hex({"r": 1.5, "g": -0.2, "b": 1}) == "#ff00ff"

    def test_missing_channels(self):
        """Test missing channels count as zero."""
        assert rgb_to_hex({"g": 1}) == "#00ff00"


class TestCssColorToHex:
    """Tests for CSS color normalization."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("#FF0000", "#ff0000"),
            ("#f00", "#ff0000"),
            ("#f00c", "#ff0000"),
            ("#1a2b3c80", "#1a2b3c"),
            ("rgb(255, 0, 0)", "#ff0000"),
            ("rgb(255,0,0)", "#ff0000"),
            ("rgba(26, 43, 60, 0.5)", "#1a2b3c"),
            ("rgb(255 0 0 / 50%)", "#ff0000"),
            ("rgb(100%, 0%, 0%)", "#ff0000"),
            ("hsl(0, 100%, 50%)", "#ff0000"),
            ("hsla(120, 100%, 25%, 1)", "#008000"),
            ("Red", "#ff0000"),
            ("  white ", "#ffffff"),
        ],
    )
    def test_supported_forms(self, value, expected):
        """Test every supported color syntax."""
        assert css_color_to_hex(value) == expected

    @pytest.mark.parametrize(
        "value", [None, "", "transparent", "#12345", "var(--brand)", "rgb(1, 2)"]
    )
    def test_unparsable(self, value):
        """Test unreadable colors return None."""
        assert css_color_to_hex(value) is None

    def test_hex_and_rgb_agree(self):
        """Test the same color in both notations normalizes identically."""
        assert css_color_to_hex("#FF0000") == css_color_to_hex("rgb(255,0,0)")


class TestParsePx:
    """Tests for font-size parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (16, 16.0),
            (15.5, 15.5),
            ("20px", 20.0),
            ("20", 20.0),
            ("1.5rem", 24.0),
            ("2em", 32.0),
            ("12pt", 16.0),
            (" 18PX ", 18.0),
        ],
    )
    def test_units(self, value, expected):
        """Test supported units convert to pixels."""
        assert parse_px(value) == pytest.approx(expected)

    def test_relative_units_use_base(self):
        """Test rem/em scale with the base font size."""
        assert parse_px("2rem", base_font_size=10) == 20.0

    @pytest.mark.parametrize("value", [None, True, "large", "calc(1rem + 2px)", ""])
    def test_unparsable(self, value):
        """Test unreadable sizes return None."""
        assert parse_px(value) is None


class TestParseFontWeight:
    """Tests for font-weight parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("bold", 700),
            ("Bold", 700),
            ("700", 700),
            (600, 600),
            ("400.0", 400),
            ("normal", 400),
            ("Semi Bold", 600),
            ("extra-bold", 800),
        ],
    )
    def test_supported_forms(self, value, expected):
        """Test keywords and numbers."""
        assert parse_font_weight(value) == expected

    @pytest.mark.parametrize(
        "value", [None, False, "bolder-ish", "", float("inf"), float("nan"), "Infinity"]
    )
    def test_unparsable(self, value):
        """Test unknown weights return None."""
        assert parse_font_weight(value) is None


class TestFontFamilies:
    """Tests for font-family cleaning and matching."""

    def test_clean_first_family(self):
        """Test quotes and fallbacks are removed."""
        assert clean_font_family('"Inter", Arial, sans-serif') == "Inter"
        assert clean_font_family("'Open Sans'") == "Open Sans"
        assert clean_font_family(None) == ""

    def test_substring_match_either_way(self):
        """Test containment in either direction matches."""
        assert font_families_match("Inter", "Inter Variable")
        assert font_families_match("Inter Variable", "inter")

    def test_case_insensitive(self):
        """Test family comparison ignores case."""
        assert font_families_match("INTER", '"inter", sans-serif')

    def test_different_families(self):
        """Test unrelated families do not match."""
        assert not font_families_match("Inter", "Roboto")

    def test_empty_never_matches(self):
        """Test an empty family never matches."""
        assert not font_families_match("", "Inter")
        assert not font_families_match("Inter", None)


class TestStyleNormalizer:
    """Tests for StyleNormalizer."""

    def test_design_style(self):
        """Test numeric design values pass through."""
        style = StyleNormalizer().normalize(
            StyleAttributes(font_family="Inter", font_size=32, font_weight=700, color="#1A2B3C")
        )
        assert style.font_family == "Inter"
        assert style.font_size_px == 32.0
        assert style.font_weight == 700
        assert style.color_hex == "#1a2b3c"

    def test_rendered_style(self):
        """Test computed CSS strings are parsed."""
        style = StyleNormalizer().normalize(
            StyleAttributes(
                font_family='"Inter", sans-serif',
                font_size="2rem",
                font_weight="bold",
                color="rgb(26, 43, 60)",
            )
        )
        assert style.font_family == "Inter"
        assert style.font_size_px == 32.0
        assert style.font_weight == 700
        assert style.color_hex == "#1a2b3c"
        assert style.raw["font_size"] == "2rem"

    def test_missing_values(self):
        """Test absent values normalize to None."""
        style = StyleNormalizer().normalize(StyleAttributes())
        assert style.font_family is None
        assert style.font_size_px is None
        assert style.font_weight is None
        assert style.color_hex is None
