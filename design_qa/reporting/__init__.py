"""Aggregation and reporting of comparison results."""

from .aggregator import QualityAggregator
from .console import ConsoleReporter, JSONReporter

__all__ = ["QualityAggregator", "ConsoleReporter", "JSONReporter"]
