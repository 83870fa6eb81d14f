"""Design extraction from Figma node documents.

Walks a frame's node tree and emits one DesignElement per non-empty TEXT
node. Boxes are translated so the frame's top-left corner is the origin,
which is the coordinate space of the frame's rendered image.
"""

import json
from pathlib import Path
from typing import Any

from ..errors import (
    DesignQAError,
    DesignSourceError,
    ErrorCategory,
    InvalidElementError,
)
from ..models import BoundingBox, DesignElement, StyleAttributes
from ..normalizers.roles import RoleClassifier, RoleFeatures
from ..normalizers.style import parse_font_weight, parse_px, rgb_to_hex
from ..qa_logging import LogCategory, get_category_logger
from ..similarity.text import normalize

logger = get_category_logger(LogCategory.CAPTURE)


def frame_id_variants(frame_id: str) -> list[str]:
    """The id as given plus its ``:``/``-`` swapped forms (URL vs API style)."""
    variants = [frame_id]
    for alt in (frame_id.replace("-", ":"), frame_id.replace(":", "-")):
        if alt not in variants:
            variants.append(alt)
    return variants


def _find_node(node: dict[str, Any], ids: list[str]) -> dict[str, Any] | None:
    if node.get("id") in ids:
        return node
    for child in node.get("children", []) or []:
        found = _find_node(child, ids)
        if found is not None:
            return found
    return None


def _first_solid_fill(node: dict[str, Any]) -> dict[str, Any] | None:
    for fill in node.get("fills", []) or []:
        if (
            isinstance(fill, dict)
            and fill.get("type") == "SOLID"
            and fill.get("visible", True)
            and isinstance(fill.get("color"), dict)
        ):
            return fill["color"]
    return None


class FigmaFrameParser:
    """Converts a Figma frame document into design elements."""

    def __init__(
        self,
        classifier: RoleClassifier | None = None,
        base_font_size: float = 16.0,
    ):
        self.classifier = classifier or RoleClassifier()
        self.base_font_size = base_font_size

    def resolve_frame(
        self, data: dict[str, Any], frame_id: str | None = None
    ) -> dict[str, Any]:
        """Locate the frame node in a ``nodes`` response, file or bare node.

        Raises:
            DesignSourceError: If the requested frame is not present.
        """
        if not isinstance(data, dict):
            raise DesignQAError(
                category=ErrorCategory.VALIDATION,
                message="Design document must be a JSON object",
            )

        if "nodes" in data:
            nodes = data.get("nodes") or {}
            if frame_id is None:
                if len(nodes) != 1:
                    raise DesignSourceError(
                        "Response contains several nodes; a frame id is required",
                        not_found=True,
                        details={"available": ", ".join(nodes)},
                    )
                entry = next(iter(nodes.values()))
            else:
                entry = None
                for candidate in frame_id_variants(frame_id):
                    if nodes.get(candidate):
                        entry = nodes[candidate]
                        break
            if not entry or not isinstance(entry.get("document"), dict):
                raise DesignSourceError(
                    f'Frame not found in response: "{frame_id}"',
                    not_found=True,
                    details={"available": ", ".join(nodes) or "(none)"},
                )
            return entry["document"]

        root = data["document"] if isinstance(data.get("document"), dict) else data
        if frame_id is None:
            return root

        found = _find_node(root, frame_id_variants(frame_id))
        if found is None:
            raise DesignSourceError(
                f'Frame not found in document: "{frame_id}"', not_found=True
            )
        return found

    def parse(
        self, data: dict[str, Any], frame_id: str | None = None
    ) -> list[DesignElement]:
        """Extract design elements from a Figma response or node.

        Raises:
            DesignSourceError: If the frame cannot be located.
            InvalidElementError: If a TEXT node has no bounding box.
        """
        frame = self.resolve_frame(data, frame_id)
        frame_box = frame.get("absoluteBoundingBox") or {}
        origin = (float(frame_box.get("x", 0) or 0), float(frame_box.get("y", 0) or 0))

        elements: list[DesignElement] = []
        self._walk(frame, origin, [], elements)
        logger.info(
            f"Extracted {len(elements)} text elements from frame "
            f"{frame.get('name', frame.get('id', '?'))}",
            extra={"operation": "figma_extract", "element_count": len(elements)},
        )
        return elements

    def _walk(
        self,
        node: dict[str, Any],
        origin: tuple[float, float],
        parent_hierarchy: list[str],
        out: list[DesignElement],
    ) -> None:
        if node.get("visible", True) is False:
            return

        hierarchy = [*parent_hierarchy, f"{node.get('type', 'UNKNOWN')}:{node.get('name') or 'unnamed'}"]

        if node.get("type") == "TEXT":
            element = self._text_element(node, origin, hierarchy)
            if element is not None:
                out.append(element)
            return

        for child in node.get("children", []) or []:
            if isinstance(child, dict):
                self._walk(child, origin, hierarchy, out)

    def _text_element(
        self,
        node: dict[str, Any],
        origin: tuple[float, float],
        hierarchy: list[str],
    ) -> DesignElement | None:
        characters = (node.get("characters") or "").strip()
        if not characters:
            return None

        node_id = str(node.get("id", ""))
        bounds = node.get("absoluteBoundingBox")
        if not isinstance(bounds, dict):
            raise InvalidElementError(
                f"TEXT node {node.get('name')!r} has no absoluteBoundingBox",
                element_id=node_id,
            )
        absolute = BoundingBox.from_dict(bounds, element_id=node_id)
        box = BoundingBox(
            x=absolute.x - origin[0],
            y=absolute.y - origin[1],
            width=absolute.width,
            height=absolute.height,
        )

        style = node.get("style") or {}
        fill = _first_solid_fill(node)
        attrs = StyleAttributes(
            font_family=style.get("fontFamily"),
            font_size=style.get("fontSize"),
            font_weight=style.get("fontWeight"),
            color=rgb_to_hex(fill) if fill else None,
        )

        name = node.get("name") or ""
        # Text layers are named after their content unless renamed
        name_hint = name if normalize(name) != normalize(characters) else None
        role = self.classifier.classify(
            RoleFeatures(
                text=characters,
                name_hint=name_hint,
                font_size_px=parse_px(attrs.font_size, self.base_font_size),
                font_weight=parse_font_weight(attrs.font_weight),
            )
        )

        return DesignElement(
            id=node_id,
            name=name or "Text",
            text=characters,
            box=box,
            style=attrs,
            role=role,
            hierarchy=tuple(hierarchy),
            node_type="TEXT",
        )


def load_design_elements(
    path: Path | str, frame_id: str | None = None
) -> list[DesignElement]:
    """Load design elements from a JSON file.

    The file may hold a Figma ``nodes`` response, a file or node document,
    or a list of already-normalized design element dicts.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DesignQAError(
            category=ErrorCategory.VALIDATION,
            message=f"Invalid JSON in design file: {e}",
            suggestion="Check that the file holds a Figma nodes response or node document",
            details={"file": str(path)},
        ) from e

    if isinstance(data, list):
        return [DesignElement.from_dict(item) for item in data]
    return FigmaFrameParser().parse(data, frame_id)
