"""DOM extraction from a rendered page.

``DomSnapshotParser`` turns the records produced by the in-page
extraction script into RenderedElements. ``DomSnapshotCollector`` drives
a headless Chromium through Playwright to produce those records for a
live URL.
"""

import asyncio
import json
import time
from pathlib import Path
from typing import Any

from playwright.async_api import Browser, Page, Playwright, async_playwright

from ..config import CaptureConfig
from ..errors import CaptureError, DesignQAError, ErrorCategory, InvalidElementError
from ..models import BoundingBox, RenderedElement, StyleAttributes
from ..normalizers.roles import RoleClassifier, RoleFeatures
from ..normalizers.style import clean_font_family, parse_font_weight, parse_px
from ..qa_logging import LogCategory, get_category_logger

logger = get_category_logger(LogCategory.CAPTURE)

# Runs in the page. Returns visible, text-bearing elements with computed
# styles and absolute document coordinates.
EXTRACTION_SCRIPT = """
(maxElements) => {
  const SKIP = new Set(['script', 'style', 'noscript', 'template', 'head', 'meta', 'link', 'title']);
  const hierarchyOf = (el) => {
    const path = [];
    let current = el;
    while (current && current !== document.body && current.tagName) {
      const tag = current.tagName.toLowerCase();
      const id = current.id ? `#${current.id}` : '';
      let classes = '';
      if (typeof current.className === 'string' && current.className.trim()) {
        classes = '.' + current.className.trim().split(/\\s+/).join('.');
      }
      path.unshift(`${tag}${id}${classes}`);
      current = current.parentElement;
    }
    return path;
  };
  const records = [];
  for (const el of Array.from(document.body ? document.body.querySelectorAll('*') : [])) {
    if (records.length >= maxElements) break;
    const tag = el.tagName.toLowerCase();
    if (SKIP.has(tag)) continue;
    const rect = el.getBoundingClientRect();
    const style = window.getComputedStyle(el);
    if (rect.width <= 0 || rect.height <= 0) continue;
    if (style.display === 'none' || style.visibility === 'hidden' || style.opacity === '0') continue;
    const textContent = (el.textContent || '').trim().replace(/\\s+/g, ' ');
    if (!textContent) continue;
    const ownText = Array.from(el.childNodes)
      .filter((n) => n.nodeType === Node.TEXT_NODE)
      .map((n) => (n.textContent || '').trim())
      .filter((t) => t)
      .join(' ');
    const attributes = {};
    for (const attr of Array.from(el.attributes)) attributes[attr.name] = attr.value;
    records.push({
      id: el.id || '',
      tagName: tag,
      text: ownText,
      textContent,
      styles: {
        fontFamily: style.fontFamily,
        fontSize: style.fontSize,
        fontWeight: style.fontWeight,
        color: style.color,
      },
      position: {
        x: Math.round(rect.left + window.scrollX),
        y: Math.round(rect.top + window.scrollY),
        width: Math.round(rect.width),
        height: Math.round(rect.height),
      },
      attributes,
      hierarchy: hierarchyOf(el),
    });
  }
  return records;
}
"""

_BOX_KEYS = ("position", "boundingBox", "rect", "box")


class DomSnapshotParser:
    """Converts extraction-script records into rendered elements."""

    def __init__(
        self,
        classifier: RoleClassifier | None = None,
        base_font_size: float = 16.0,
    ):
        self.classifier = classifier or RoleClassifier()
        self.base_font_size = base_font_size

    def parse_record(self, record: dict[str, Any], index: int) -> RenderedElement:
        """Convert one record; ids fall back to ``<tag>-<index>``.

        Raises:
            InvalidElementError: If the record has no usable bounding box.
        """
        tag = str(record.get("tagName") or record.get("tag") or "").lower()
        element_id = str(record.get("id") or f"{tag or 'element'}-{index}")

        raw_box = next((record[k] for k in _BOX_KEYS if k in record), None)
        box = BoundingBox.from_dict(raw_box, element_id=element_id)

        styles = record.get("styles") or {}
        family = clean_font_family(styles.get("fontFamily"))
        style = StyleAttributes(
            font_family=family or None,
            font_size=styles.get("fontSize"),
            font_weight=styles.get("fontWeight"),
            color=styles.get("color"),
        )

        own_text = str(record.get("text") or "").strip()
        text_content = str(record.get("textContent") or "").strip()
        attributes = {str(k): str(v) for k, v in (record.get("attributes") or {}).items()}

        role = self.classifier.classify(
            RoleFeatures(
                text=own_text,
                tag=tag,
                aria_role=attributes.get("role"),
                input_type=attributes.get("type"),
                font_size_px=parse_px(style.font_size, self.base_font_size),
                font_weight=parse_font_weight(style.font_weight),
            )
        )

        return RenderedElement(
            id=element_id,
            tag=tag,
            own_text=own_text,
            text_content=text_content,
            box=box,
            style=style,
            role=role,
            attributes=attributes,
            hierarchy=tuple(record.get("hierarchy") or ()),
        )

    def parse(self, records: list[dict[str, Any]]) -> list[RenderedElement]:
        """Convert all records in page order."""
        return [self.parse_record(r, i) for i, r in enumerate(records)]


def load_rendered_elements(path: Path | str) -> list[RenderedElement]:
    """Load rendered elements from a JSON snapshot file.

    Accepts a list of records, or an object with an ``elements`` list.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DesignQAError(
            category=ErrorCategory.VALIDATION,
            message=f"Invalid JSON in rendered snapshot: {e}",
            suggestion="Check that the file holds the extraction script output",
            details={"file": str(path)},
        ) from e

    if isinstance(data, dict):
        data = data.get("elements", [])
    if not isinstance(data, list):
        raise InvalidElementError("Rendered snapshot must be a list of element records")
    return DomSnapshotParser().parse(data)


class DomSnapshotCollector:
    """Captures rendered elements from a live URL with Playwright.

    Use as an async context manager so the browser is always closed.
    """

    def __init__(
        self,
        config: CaptureConfig | None = None,
        parser: DomSnapshotParser | None = None,
    ):
        """Initialize the collector.

        Args:
            config: Capture configuration (viewport, waits, limits).
            parser: Optional record parser.
        """
        self.config = config or CaptureConfig()
        self.parser = parser or DomSnapshotParser()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def __aenter__(self) -> "DomSnapshotCollector":
        """Async context manager entry."""
        await self._start_playwright()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self._stop_playwright()

    async def _start_playwright(self) -> None:
        """Start Playwright browser."""
        if self._playwright is None:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless
            )

    async def _stop_playwright(self) -> None:
        """Stop Playwright browser."""
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    async def _navigate(self, page: Page, url: str) -> None:
        """Try each navigation strategy in order, then a bare goto.

        Raises:
            CaptureError: If every attempt fails.
        """
        for strategy in self.config.navigation_strategies:
            try:
                await page.goto(
                    url, wait_until=strategy.wait_until, timeout=strategy.timeout_ms
                )
                return
            except Exception as e:
                logger.debug(f"Navigation with {strategy.wait_until} failed: {e}")

        try:
            await page.goto(url)
        except Exception as e:
            raise CaptureError(url, str(e)) from e

    async def capture_records(self, url: str) -> list[dict[str, Any]]:
        """Load ``url`` and return raw extraction records."""
        if self._browser is None:
            await self._start_playwright()

        context = await self._browser.new_context(
            viewport={
                "width": self.config.viewport_width,
                "height": self.config.viewport_height,
            }
        )
        try:
            page = await context.new_page()
            await self._navigate(page, url)
            await asyncio.sleep(self.config.settle_ms / 1000)
            records = await page.evaluate(EXTRACTION_SCRIPT, self.config.max_elements)
        finally:
            await context.close()

        return list(records or [])[: self.config.max_elements]

    async def collect(self, url: str) -> list[RenderedElement]:
        """Capture and parse the rendered elements of ``url``."""
        start_time = time.time()
        records = await self.capture_records(url)
        elements = self.parser.parse(records)
        logger.info(
            f"Captured {len(elements)} elements from {url}",
            extra={
                "operation": "capture",
                "url": url,
                "element_count": len(elements),
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            },
        )
        return elements
