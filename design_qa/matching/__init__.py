"""Element matching between design and rendered trees."""

from .matcher import ElementMatcher, MatchCandidate, MatchResult, TextSimilarity

__all__ = ["ElementMatcher", "MatchCandidate", "MatchResult", "TextSimilarity"]
