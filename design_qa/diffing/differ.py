"""Attribute-level comparison of matched element pairs.

Every check runs independently, so one pair can yield several
differences. Style values are parsed into comparable forms first; a
rendered value that cannot be parsed is reported as a mismatch. Checks
are skipped only when the design carries no value for the attribute.
"""

from ..config import ToleranceConfig
from ..models import (
    DesignElement,
    Difference,
    DifferenceKind,
    ElementPair,
    RenderedElement,
    Severity,
)
from ..normalizers.style import NormalizedStyle, StyleNormalizer, font_families_match
from ..qa_logging import LogCategory, get_category_logger
from ..similarity.text import normalize

logger = get_category_logger(LogCategory.DIFFER)

MISSING_ACTUAL = "Missing"


def _fmt_number(value: float) -> str:
    return f"{int(value)}" if float(value).is_integer() else f"{value:.2f}".rstrip("0")


def _display(value: object) -> str:
    if value is None or value == "":
        return "(none)"
    return str(value)


def _label(design: DesignElement) -> str:
    role = design.role.value if design.role else "element"
    return f'{role} "{design.text or design.node_type or "element"}"'


class AttributeDiffer:
    """Compares text, typography and color of matched pairs."""

    def __init__(
        self,
        tolerances: ToleranceConfig | None = None,
        normalizer: StyleNormalizer | None = None,
    ):
        self.tolerances = tolerances or ToleranceConfig()
        self.normalizer = normalizer or StyleNormalizer(self.tolerances.base_font_size)

    def missing(self, design: DesignElement) -> Difference:
        """Difference for a design element with no rendered counterpart."""
        expected = design.text or design.node_type
        return Difference(
            kind=DifferenceKind.MISSING,
            severity=Severity.HIGH,
            expected=expected,
            actual=MISSING_ACTUAL,
            description=f"{_label(design)} is present in design but missing on the page",
            suggestion=f'Add missing element: "{expected}"',
            element_id=design.id,
        )

    def diff_pair(self, pair: ElementPair) -> tuple[Difference, ...]:
        """All differences for a pair; one ``missing`` entry if unmatched."""
        if pair.rendered is None:
            return (self.missing(pair.design),)

        design, rendered = pair.design, pair.rendered
        expected_style = self.normalizer.normalize(design.style)
        actual_style = self.normalizer.normalize(rendered.style)

        differences = []
        for check in (
            self._check_text(design, rendered),
            self._check_font_family(design, rendered),
            self._check_font_size(design, expected_style, actual_style),
            self._check_font_weight(design, expected_style, actual_style),
            self._check_color(design, expected_style, actual_style),
        ):
            if check is not None:
                differences.append(check)

        if differences:
            logger.debug(
                f"{design.id} vs {rendered.id}: "
                + ", ".join(d.kind.value for d in differences)
            )
        return tuple(differences)

    def diff(self, pairs: tuple[ElementPair, ...] | list[ElementPair]) -> tuple[ElementPair, ...]:
        """Return copies of ``pairs`` with their differences attached."""
        return tuple(
            ElementPair(
                design=p.design,
                rendered=p.rendered,
                match_score=p.match_score,
                differences=self.diff_pair(p),
            )
            for p in pairs
        )

    def _check_text(
        self, design: DesignElement, rendered: RenderedElement
    ) -> Difference | None:
        if design.text is None:
            return None
        actual = rendered.display_text
        if normalize(design.text) == normalize(actual):
            return None
        return Difference(
            kind=DifferenceKind.TEXT,
            severity=Severity.CRITICAL,
            expected=design.text,
            actual=actual,
            description=(
                f'Mismatch in {design.role.value if design.role else "element"}: '
                f'expected "{design.text}" but found "{actual}"'
            ),
            suggestion=f'Update text content to: "{design.text}"',
            element_id=design.id,
        )

    def _check_font_family(
        self, design: DesignElement, rendered: RenderedElement
    ) -> Difference | None:
        expected = design.style.font_family
        if expected is None:
            return None
        actual = rendered.style.font_family
        if font_families_match(expected, actual):
            return None
        return Difference(
            kind=DifferenceKind.FONT_FAMILY,
            severity=Severity.HIGH,
            expected=expected,
            actual=_display(actual),
            description=f"{_label(design)} uses font-family {_display(actual)} (expected {expected})",
            suggestion=f"Update font-family to: {expected}",
            element_id=design.id,
        )

    def _check_font_size(
        self,
        design: DesignElement,
        expected: NormalizedStyle,
        actual: NormalizedStyle,
    ) -> Difference | None:
        raw_expected = design.style.font_size
        if raw_expected is None:
            return None
        raw_actual = actual.raw.get("font_size")

        if expected.font_size_px is None or actual.font_size_px is None:
            severity = Severity.HIGH
            expected_text = (
                f"{_fmt_number(expected.font_size_px)}px"
                if expected.font_size_px is not None
                else str(raw_expected)
            )
        else:
            delta = abs(expected.font_size_px - actual.font_size_px)
            if delta <= self.tolerances.font_size_px:
                return None
            severity = (
                Severity.MEDIUM
                if delta <= self.tolerances.font_size_high_px
                else Severity.HIGH
            )
            expected_text = f"{_fmt_number(expected.font_size_px)}px"

        return Difference(
            kind=DifferenceKind.FONT_SIZE,
            severity=severity,
            expected=expected_text,
            actual=_display(raw_actual),
            description=(
                f"{_label(design)} has font-size {_display(raw_actual)} "
                f"(expected {expected_text})"
            ),
            suggestion=f"Update font-size to: {expected_text}",
            element_id=design.id,
        )

    def _check_font_weight(
        self,
        design: DesignElement,
        expected: NormalizedStyle,
        actual: NormalizedStyle,
    ) -> Difference | None:
        raw_expected = design.style.font_weight
        if raw_expected is None:
            return None
        raw_actual = actual.raw.get("font_weight")

        if expected.font_weight is not None and actual.font_weight is not None:
            if abs(expected.font_weight - actual.font_weight) <= self.tolerances.font_weight:
                return None

        expected_text = (
            str(expected.font_weight)
            if expected.font_weight is not None
            else str(raw_expected)
        )
        return Difference(
            kind=DifferenceKind.FONT_WEIGHT,
            severity=Severity.MEDIUM,
            expected=expected_text,
            actual=_display(raw_actual),
            description=(
                f"{_label(design)} has font-weight {_display(raw_actual)} "
                f"(expected {expected_text})"
            ),
            suggestion=f"Update font-weight to: {expected_text}",
            element_id=design.id,
        )

    def _check_color(
        self,
        design: DesignElement,
        expected: NormalizedStyle,
        actual: NormalizedStyle,
    ) -> Difference | None:
        raw_expected = design.style.color
        if raw_expected is None:
            return None
        raw_actual = actual.raw.get("color")

        if (
            expected.color_hex is not None
            and actual.color_hex is not None
            and expected.color_hex == actual.color_hex
        ):
            return None

        expected_text = expected.color_hex or str(raw_expected)
        actual_text = actual.color_hex or _display(raw_actual)
        return Difference(
            kind=DifferenceKind.COLOR,
            severity=Severity.MEDIUM,
            expected=expected_text,
            actual=actual_text,
            description=f"{_label(design)} has color {actual_text} (expected {expected_text})",
            suggestion=f"Update color to: {expected_text}",
            element_id=design.id,
        )
