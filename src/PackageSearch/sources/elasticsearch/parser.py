"""Elasticsearch response parser (result projector)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Iterator, Mapping

from PackageSearch.core.errors import UpstreamUnavailable
from PackageSearch.core.models import PackageResult


class ProjectedResults(Sequence):
    """Lazy view projecting raw hits into ``PackageResult`` objects.

    Order is the index's ranking order; nothing is re-sorted. Items are built
    on access, so iterating twice yields equal results.
    """

    __slots__ = ("_hits",)

    def __init__(self, hits: Sequence[Mapping[str, Any]]) -> None:
        self._hits = tuple(hits)

    def __len__(self) -> int:
        return len(self._hits)

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return ProjectedResults(self._hits[index])
        return project_hit(self._hits[index])

    def __iter__(self) -> Iterator[PackageResult]:
        for hit in self._hits:
            yield project_hit(hit)

    def __repr__(self) -> str:
        return f"ProjectedResults(len={len(self._hits)})"


def project(hits: Sequence[Mapping[str, Any]]) -> ProjectedResults:
    """Map raw index hits to public results, preserving ranking order."""
    return ProjectedResults(hits)


def project_hit(hit: Mapping[str, Any]) -> PackageResult:
    """Project one raw hit.

    Args:
        hit: Raw hit with ``_source``, ``_score`` and optional ``highlight``.

    Returns:
        Result carrying the record fields, the index relevance number and the
        first highlight fragment, if any.
    """
    source = hit.get("_source")
    if not isinstance(source, Mapping):
        source = {}
    return PackageResult(
        package=_mapping(source.get("package")),
        score=_mapping(source.get("score")),
        flags=_mapping(source.get("flags")),
        search_score=_score(hit.get("_score")),
        highlight=_first_fragment(hit.get("highlight")),
    )


def parse_hits(payload: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Extract the raw hit list from a search response payload."""
    hits = _hits_section(payload).get("hits", [])
    if not isinstance(hits, list):
        raise UpstreamUnavailable("Elasticsearch returned malformed hits")
    return [hit for hit in hits if isinstance(hit, Mapping)]


def parse_total(payload: Mapping[str, Any]) -> int:
    """Extract the total hit count (``int`` or ``{"value": n}`` form)."""
    total = _hits_section(payload).get("total", 0)
    if isinstance(total, Mapping):
        total = total.get("value", 0)
    if isinstance(total, bool) or not isinstance(total, int):
        raise UpstreamUnavailable("Elasticsearch returned a malformed total")
    return total


def _hits_section(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    section = payload.get("hits")
    if not isinstance(section, Mapping):
        raise UpstreamUnavailable("Elasticsearch response has no hits section")
    return section


def _score(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _first_fragment(highlight: Any) -> str | None:
    if not isinstance(highlight, Mapping):
        return None
    for fragments in highlight.values():
        if isinstance(fragments, list) and fragments and isinstance(fragments[0], str):
            return fragments[0]
    return None


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}
