"""Scoring expression and text-match clause builders.

The relevance formula is described declaratively as a tagged expression
(``ExactMatchOverride`` or ``WeightedPower``) so each backend can render it
in its native form. The expressions also evaluate themselves locally, which
the tests use as the reference semantics:

    blend       = quality*wq + popularity*wp + maintenance*wm
    organic     = relevance * blend ** effect
    exact match = constant + blend
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Final, Mapping, Union

from PackageSearch.core.query import NormalizedWeights, ParsedParams

# Larger than any attainable organic score (relevance * blend ** effect).
EXACT_MATCH_CONSTANT: Final = 100000.0

DEFAULT_FIELD_BOOSTS: Final[Mapping[str, float]] = MappingProxyType(
    {"package.name": 4.0, "package.description": 1.0, "package.keywords": 2.0}
)


@dataclass(frozen=True, slots=True)
class QualitySignals:
    """Per-candidate quality signals stored with the candidate's evaluation."""

    quality: float
    popularity: float
    maintenance: float


@dataclass(frozen=True, slots=True)
class WeightedPower:
    """``relevance * (q*wq + p*wp + m*wm) ** effect``."""

    weights: NormalizedWeights
    effect: float

    def blend(self, signals: QualitySignals) -> float:
        return (
            signals.quality * self.weights.quality
            + signals.popularity * self.weights.popularity
            + signals.maintenance * self.weights.maintenance
        )

    def power(self, signals: QualitySignals) -> float:
        """Return the power term alone; ``effect == 0`` yields exactly 1."""
        return self.blend(signals) ** self.effect

    def evaluate(self, signals: QualitySignals, relevance: float) -> float:
        return relevance * self.power(signals)


@dataclass(frozen=True, slots=True)
class ExactMatchOverride:
    """Force ``constant + blend`` when the raw name equals ``text``.

    Candidates whose name differs fall through to ``fallback``.
    """

    text: str
    constant: float
    fallback: WeightedPower

    @property
    def weights(self) -> NormalizedWeights:
        return self.fallback.weights

    def matches(self, raw_name: str) -> bool:
        return raw_name == self.text

    def evaluate(self, signals: QualitySignals, relevance: float, raw_name: str) -> float:
        if self.matches(raw_name):
            return self.constant + self.fallback.blend(signals)
        return self.fallback.evaluate(signals, relevance)


ScoringExpression = Union[ExactMatchOverride, WeightedPower]


@dataclass(frozen=True, slots=True)
class MatchClause:
    """One weighted multi-field text-match clause.

    Attributes:
        query: Free text to match.
        fields: Index field to boost factor, already suffixed with the
            analyzer sub-field.
        match_type: ``phrase`` or ``cross_fields``.
        analyzer: Search-time analyzer name.
        boost: Clause-level boost.
        slop: Phrase slop, when applicable.
    """

    query: str
    fields: Mapping[str, float]
    match_type: str
    analyzer: str
    boost: float = 1.0
    slop: int | None = None


@dataclass(frozen=True, slots=True)
class _ClauseTemplate:
    suffix: str
    match_type: str
    analyzer: str
    boost: float
    slop: int | None = None


_CLAUSE_TEMPLATES: Final[tuple[_ClauseTemplate, ...]] = (
    # Prefix matches using edge-ngram
    _ClauseTemplate("identifier_edge_ngram", "phrase", "identifier", 3.0, slop=3),
    # Normal term match with an english stemmer
    _ClauseTemplate("identifier_english_docs", "cross_fields", "identifier_english", 3.0),
    # More aggressive english stemmer, lower weight
    _ClauseTemplate("identifier_english_aggressive_docs", "cross_fields", "identifier_english_aggressive", 1.0),
)


def build_match_clauses(
    text: str | None,
    *,
    boosts: Mapping[str, float] = DEFAULT_FIELD_BOOSTS,
) -> tuple[MatchClause, ...]:
    """Build the ordered text-match clauses for free text.

    Args:
        text: Normalized free text; no clauses are built without it.
        boosts: Base field name to boost factor.

    Returns:
        Match clauses in evaluation order.
    """
    if not text:
        return ()
    return tuple(
        MatchClause(
            query=text,
            fields=MappingProxyType({f"{name}.{template.suffix}": boost for name, boost in boosts.items()}),
            match_type=template.match_type,
            analyzer=template.analyzer,
            boost=template.boost,
            slop=template.slop,
        )
        for template in _CLAUSE_TEMPLATES
    )


def build_scoring(
    params: ParsedParams,
    weights: NormalizedWeights,
    *,
    exact_constant: float = EXACT_MATCH_CONSTANT,
) -> ScoringExpression:
    """Build the relevance expression for a request.

    Args:
        params: Validated request parameters.
        weights: Normalized ranking weights.
        exact_constant: Score forced for an exact name match.

    Returns:
        ``ExactMatchOverride`` when exact boosting is on and there is free
        text to compare, otherwise ``WeightedPower``.
    """
    power = WeightedPower(weights=weights, effect=params.score_effect)
    if params.boost_exact and params.text:
        return ExactMatchOverride(text=params.text, constant=exact_constant, fallback=power)
    return power
