"""Lexical and semantic search for erwindb."""

from .fuzzy import FuzzyMatch, fuzzy_filter
from .semantic import SemanticSearch

__all__: list[str] = ["FuzzyMatch", "SemanticSearch", "fuzzy_filter"]
