"""Attribute differences between matched elements."""

from .differ import MISSING_ACTUAL, AttributeDiffer

__all__ = ["AttributeDiffer", "MISSING_ACTUAL"]
