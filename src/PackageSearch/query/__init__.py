"""Query language compiler.

Public entry points for turning a raw query string into a structured,
weighted search request.
"""

from __future__ import annotations

from PackageSearch.query.compiler import CompiledQuery, CompilerSettings, compile_query, compile_search
from PackageSearch.query.filters import compile_filters
from PackageSearch.query.params import SearchDefaults, parse_query, validate
from PackageSearch.query.scoring import ExactMatchOverride, WeightedPower, build_scoring
from PackageSearch.query.tokenizer import discard_qualifiers, tokenize
from PackageSearch.query.weights import normalize

__all__ = [
    "CompiledQuery",
    "CompilerSettings",
    "ExactMatchOverride",
    "SearchDefaults",
    "WeightedPower",
    "build_scoring",
    "compile_filters",
    "compile_query",
    "compile_search",
    "discard_qualifiers",
    "normalize",
    "parse_query",
    "tokenize",
    "validate",
]
