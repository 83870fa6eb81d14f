"""Output reporters for comparison results.

This module provides a color-coded text reporter for terminals and a
JSON reporter for machine consumption.
"""

import json
import sys
from typing import Any, TextIO

from ..models import ComparisonResult, ElementPair, Readiness, Severity


class ConsoleReporter:
    """Text reporter with differences grouped per design element.

    Example output:
        heading "Day workshop" -> h1#title (score 0.87)
          [critical] text: expected "Day workshop" but found "Workshop"
            -> Update text content to: "Day workshop"

        Content 90.0  Typography 100.0  Color 95.0  Layout 100.0
        Overall 96.3 - needs-review
    """

    COLORS = {
        Severity.CRITICAL: "\033[1;31m",  # Bold red
        Severity.HIGH: "\033[0;31m",  # Red
        Severity.MEDIUM: "\033[1;33m",  # Yellow
        Severity.LOW: "\033[0;34m",  # Blue
    }
    VERDICT_COLORS = {
        Readiness.PRODUCTION_READY: "\033[0;32m",  # Green
        Readiness.NEEDS_REVIEW: "\033[1;33m",
        Readiness.NEEDS_MAJOR_FIXES: "\033[0;31m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def __init__(self, stream: TextIO = sys.stdout, use_color: bool | None = None):
        """Initialize the console reporter.

        Args:
            stream: Output stream (default: stdout).
            use_color: Whether to use ANSI colors. Auto-detects if None.
        """
        self.stream = stream
        if use_color is None:
            self.use_color = hasattr(stream, "isatty") and stream.isatty()
        else:
            self.use_color = use_color

    def _c(self, code: str) -> str:
        return code if self.use_color else ""

    def report(self, result: ComparisonResult) -> None:
        """Output every pair with differences, then the scores."""
        for pair in result.pairs:
            if pair.differences:
                self._report_pair(pair)

        if not result.differences:
            print("No differences found", file=self.stream)

        self._print_summary(result)

    def _pair_header(self, pair: ElementPair) -> str:
        design = pair.design
        role = design.role.value if design.role else "element"
        label = f'{role} "{design.text or design.node_type}"'
        if pair.rendered is None:
            return f"{label} -> (not found)"
        rendered = pair.rendered
        target = rendered.tag + (f"#{rendered.id}" if rendered.id else "")
        return f"{label} -> {target} (score {pair.match_score:.2f})"

    def _report_pair(self, pair: ElementPair) -> None:
        reset = self._c(self.RESET)
        dim = self._c(self.DIM)
        print(self._pair_header(pair), file=self.stream)
        for diff in pair.differences:
            color = self._c(self.COLORS.get(diff.severity, ""))
            print(
                f"  {color}[{diff.severity.value}] {diff.kind.value}{reset}: "
                f"{diff.description}",
                file=self.stream,
            )
            print(f"    {dim}-> {diff.suggestion}{reset}", file=self.stream)

    def _print_summary(self, result: ComparisonResult) -> None:
        q = result.quality
        s = result.summary
        reset = self._c(self.RESET)
        verdict_color = self._c(self.VERDICT_COLORS.get(q.readiness, ""))

        print("", file=self.stream)
        print(
            f"Content {q.content_accuracy:.1f}  Typography {q.typography_accuracy:.1f}  "
            f"Color {q.color_accuracy:.1f}  Layout {q.layout_accuracy:.1f}",
            file=self.stream,
        )
        print(
            f"Matched {s.matched_elements}/{s.total_elements} elements, "
            f"{s.missing_elements} missing, {s.extra_elements} extra, "
            f"{s.critical_issues} critical issue(s)",
            file=self.stream,
        )
        print(
            f"Overall {q.overall_score:.1f} - {verdict_color}{q.readiness.value}{reset}",
            file=self.stream,
        )


class JSONReporter:
    """JSON reporter emitting the serialized comparison result."""

    def __init__(self, stream: TextIO = sys.stdout, indent: int | None = 2):
        """Initialize the JSON reporter.

        Args:
            stream: Output stream (default: stdout).
            indent: JSON indentation, None for compact output.
        """
        self.stream = stream
        self.indent = indent

    def report(self, result: ComparisonResult) -> dict[str, Any]:
        """Output the result as JSON and return the serialized dict."""
        output = result.to_dict()
        print(json.dumps(output, indent=self.indent), file=self.stream)
        return output
