"""Elasticsearch request body renderer.

Renders the backend-neutral ``CompiledQuery`` into an Elasticsearch search
body. The scoring expression becomes a painless ``script_score`` under a
``function_score`` query with ``boost_mode: replace``.

Mapping
- Term     -> term
- Terms    -> terms
- Exists   -> exists
- Not      -> bool.must_not
- AllOf    -> bool.filter
- AnyOf    -> bool.should (minimum_should_match 1)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from PackageSearch.query.compiler import CompiledQuery
from PackageSearch.query.filters import AllOf, AnyOf, Exists, Not, Predicate, Term, Terms
from PackageSearch.query.scoring import ExactMatchOverride, MatchClause, ScoringExpression, WeightedPower


@dataclass(frozen=True, slots=True)
class IndexFields:
    """Index field names read by scripts, returned in hits, and highlighted."""

    name_raw: str = "package.name.raw"
    quality: str = "score.detail.quality"
    popularity: str = "score.detail.popularity"
    maintenance: str = "score.detail.maintenance"
    source: tuple[str, ...] = ("package", "flags", "score")
    highlight: tuple[str, ...] = ("package.name", "package.description")
    suggestion_name: str = "package.name"


DEFAULT_INDEX_FIELDS = IndexFields()


def render_search_body(compiled: CompiledQuery, *, fields: IndexFields = DEFAULT_INDEX_FIELDS) -> dict[str, Any]:
    """Render a compiled query into an Elasticsearch ``_search`` body.

    Args:
        compiled: Output of the query compiler.
        fields: Index field names.

    Returns:
        JSON-serializable request body.
    """
    inner: dict[str, Any] = {}
    if compiled.filters is not None:
        inner["filter"] = _filter_list(compiled.filters)
    if compiled.match_clauses:
        inner["should"] = [render_match_clause(clause) for clause in compiled.match_clauses]
        inner["minimum_should_match"] = 1
    else:
        # Without text every candidate keeps a neutral relevance of 1.
        inner["must"] = [{"match_all": {}}]

    body: dict[str, Any] = {
        "size": compiled.size,
        "from": compiled.from_,
        "_source": list(fields.source),
        "query": {
            "function_score": {
                "boost_mode": "replace",
                "query": {"bool": inner},
                "script_score": {"script": render_script(compiled.scoring, fields=fields)},
            }
        },
    }
    if compiled.match_clauses and fields.highlight:
        body["highlight"] = {"fields": {name: {} for name in fields.highlight}}
    return body


def render_suggestions_body(term: str, size: int, *, fields: IndexFields = DEFAULT_INDEX_FIELDS) -> dict[str, Any]:
    """Render a suggestions (as-you-type) query body."""
    name = fields.suggestion_name
    return {
        "size": size,
        "_source": list(fields.source),
        "query": {
            "bool": {
                "should": [
                    # Exact prefix queries get the higher boost
                    {"match": {f"{name}.autocomplete_keyword": {"query": term, "boost": 3}}},
                    # Proximity exact match
                    {"match_phrase": {name: {"query": term, "slop": 0, "boost": 2}}},
                    {"match_phrase": {f"{name}.autocomplete": {"query": term, "slop": 2}}},
                ],
                "minimum_should_match": 1,
            }
        },
        "highlight": {"fields": {f"{name}.autocomplete": {}}},
    }


def render_predicate(predicate: Predicate) -> dict[str, Any]:
    """Render one predicate node into an Elasticsearch query clause."""
    if isinstance(predicate, Term):
        return {"term": {predicate.field: predicate.value}}
    if isinstance(predicate, Terms):
        return {"terms": {predicate.field: list(predicate.values)}}
    if isinstance(predicate, Exists):
        return {"exists": {"field": predicate.field}}
    if isinstance(predicate, Not):
        return {"bool": {"must_not": [render_predicate(predicate.clause)]}}
    if isinstance(predicate, AllOf):
        return {"bool": {"filter": [render_predicate(clause) for clause in predicate.clauses]}}
    if isinstance(predicate, AnyOf):
        return {
            "bool": {
                "should": [render_predicate(clause) for clause in predicate.clauses],
                "minimum_should_match": 1,
            }
        }
    raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")


def render_match_clause(clause: MatchClause) -> dict[str, Any]:
    """Render a text-match clause into a ``multi_match`` query."""
    multi_match: dict[str, Any] = {
        "query": clause.query,
        "operator": "and",
        "fields": [_boosted(name, boost) for name, boost in clause.fields.items()],
        "analyzer": clause.analyzer,
        "type": clause.match_type,
    }
    if clause.slop is not None:
        multi_match["slop"] = clause.slop
    if clause.boost != 1:
        multi_match["boost"] = clause.boost
    return {"multi_match": multi_match}


def render_script(scoring: ScoringExpression, *, fields: IndexFields = DEFAULT_INDEX_FIELDS) -> dict[str, Any]:
    """Render a scoring expression into a painless script with params."""
    blend = (
        f"double blend = doc['{fields.quality}'].value * params.qualityWeight"
        f" + doc['{fields.popularity}'].value * params.popularityWeight"
        f" + doc['{fields.maintenance}'].value * params.maintenanceWeight;"
    )
    organic = "return _score * Math.pow(blend, params.scoreEffect);"

    if isinstance(scoring, ExactMatchOverride):
        power = scoring.fallback
        source = " ".join(
            (
                blend,
                f"if (doc['{fields.name_raw}'].size() > 0 && doc['{fields.name_raw}'].value == params.text)"
                " { return params.exactScore + blend; }",
                organic,
            )
        )
        params = _power_params(power)
        params["text"] = scoring.text
        params["exactScore"] = scoring.constant
    elif isinstance(scoring, WeightedPower):
        source = f"{blend} {organic}"
        params = _power_params(scoring)
    else:
        raise TypeError(f"Unsupported scoring expression: {type(scoring).__name__}")

    return {"lang": "painless", "source": source, "params": params}


def _power_params(power: WeightedPower) -> dict[str, Any]:
    return {
        "scoreEffect": power.effect,
        "qualityWeight": power.weights.quality,
        "popularityWeight": power.weights.popularity,
        "maintenanceWeight": power.weights.maintenance,
    }


def _filter_list(predicate: Predicate) -> list[dict[str, Any]]:
    if isinstance(predicate, AllOf):
        return [render_predicate(clause) for clause in predicate.clauses]
    return [render_predicate(predicate)]


def _boosted(name: str, boost: float) -> str:
    if boost == 1:
        return name
    return f"{name}^{boost:g}"
