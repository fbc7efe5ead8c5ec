"""Query compiler entry points.

Runs the one-directional pipeline: tokenize -> validate -> normalize weights
-> compile filters -> build match clauses -> build scoring expression. Every
stage returns a new immutable value; nothing is shared across requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from PackageSearch.core.query import NormalizedWeights, ParsedParams
from PackageSearch.query.filters import DEFAULT_FILTER_FIELDS, FilterFields, Predicate, compile_filters
from PackageSearch.query.params import SearchDefaults, parse_query
from PackageSearch.query.scoring import (
    DEFAULT_FIELD_BOOSTS,
    EXACT_MATCH_CONSTANT,
    MatchClause,
    ScoringExpression,
    build_match_clauses,
    build_scoring,
)
from PackageSearch.query.tokenizer import UNKNOWN_FOLD
from PackageSearch.query.weights import ZERO_WEIGHTS_FALLBACK, normalize
from PackageSearch.utils.log import log


@dataclass(frozen=True, slots=True)
class CompilerSettings:
    """Knobs of the compiler, loaded from the ``search`` config section."""

    defaults: SearchDefaults = field(default_factory=SearchDefaults)
    unknown_qualifiers: str = UNKNOWN_FOLD
    zero_weights: str = ZERO_WEIGHTS_FALLBACK
    exact_match_constant: float = EXACT_MATCH_CONSTANT
    field_boosts: Mapping[str, float] = field(default_factory=lambda: DEFAULT_FIELD_BOOSTS)
    filter_fields: FilterFields = DEFAULT_FILTER_FIELDS


@dataclass(frozen=True, slots=True)
class CompiledQuery:
    """Structured request handed to the search index.

    Attributes:
        params: Validated parameters the query was compiled from.
        filters: Conjunctive predicate tree, or None when unfiltered.
        match_clauses: Ordered weighted text-match clauses (empty without text).
        scoring: Relevance expression evaluated per candidate by the index.
        weights: Normalized ranking weights bound into ``scoring``.
        from_: Result offset.
        size: Page size.
    """

    params: ParsedParams
    filters: Predicate | None
    match_clauses: tuple[MatchClause, ...]
    scoring: ScoringExpression
    weights: NormalizedWeights
    from_: int
    size: int


def compile_query(params: ParsedParams, *, settings: CompilerSettings | None = None) -> CompiledQuery:
    """Compile validated parameters into a ``CompiledQuery``."""
    settings = settings or CompilerSettings()
    weights = normalize(
        params.weights,
        fallback=settings.defaults.weights,
        zero_weights=settings.zero_weights,
    )
    compiled = CompiledQuery(
        params=params,
        filters=compile_filters(params, fields=settings.filter_fields),
        match_clauses=build_match_clauses(params.text, boosts=settings.field_boosts),
        scoring=build_scoring(params, weights, exact_constant=settings.exact_match_constant),
        weights=weights,
        from_=params.from_,
        size=params.size,
    )
    log.debug(
        "Compiled query text=%r filters=%s scoring=%s from=%d size=%d",
        params.text,
        compiled.filters,
        type(compiled.scoring).__name__,
        compiled.from_,
        compiled.size,
    )
    return compiled


def compile_search(
    raw: str,
    *,
    from_: Any = None,
    size: Any = None,
    settings: CompilerSettings | None = None,
) -> CompiledQuery:
    """Run the full pipeline on a raw query string.

    Compilation is all-or-nothing: any validation failure raises
    ``InvalidParameter`` before a query object exists.
    """
    settings = settings or CompilerSettings()
    params = parse_query(
        raw,
        from_=from_,
        size=size,
        defaults=settings.defaults,
        unknown=settings.unknown_qualifiers,
    )
    return compile_query(params, settings=settings)
