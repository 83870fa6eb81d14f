"""Collaborators that extract elements from design files and live pages."""

from .dom import (
    EXTRACTION_SCRIPT,
    DomSnapshotCollector,
    DomSnapshotParser,
    load_rendered_elements,
)
from .figma import FigmaFrameParser, frame_id_variants, load_design_elements

__all__ = [
    "EXTRACTION_SCRIPT",
    "DomSnapshotCollector",
    "DomSnapshotParser",
    "load_rendered_elements",
    "FigmaFrameParser",
    "frame_id_variants",
    "load_design_elements",
]
