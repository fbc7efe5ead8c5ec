"""Elasticsearch source adapter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from PackageSearch.core.models import SearchResult
from PackageSearch.query.compiler import CompiledQuery
from PackageSearch.sources.elasticsearch.client import ElasticsearchClient
from PackageSearch.sources.elasticsearch.parser import ProjectedResults, parse_hits, parse_total, project
from PackageSearch.sources.elasticsearch.query import (
    DEFAULT_INDEX_FIELDS,
    IndexFields,
    render_search_body,
    render_suggestions_body,
)


@dataclass(slots=True)
class ElasticsearchSource:
    """Elasticsearch-backed index adapter returning public results."""

    client: ElasticsearchClient
    search_index: str = "npms-current"
    score_index: str = "npms-current"
    fields: IndexFields = DEFAULT_INDEX_FIELDS
    name: str = "elasticsearch"

    def search(self, compiled: CompiledQuery, *, timeout: float | None = None) -> SearchResult:
        """Run a compiled query and project the hits.

        Args:
            compiled: Compiled query.
            timeout: Caller deadline in seconds.

        Returns:
            Total hit count plus the projected page of results.
        """
        body = render_search_body(compiled, fields=self.fields)
        payload = self.client.search(self.search_index, body, timeout=timeout)
        return SearchResult(total=parse_total(payload), results=project(parse_hits(payload)))

    def suggestions(self, term: str, *, size: int, timeout: float | None = None) -> ProjectedResults:
        """Fetch as-you-type suggestions for a normalized term."""
        body = render_suggestions_body(term, size, fields=self.fields)
        payload = self.client.search(self.search_index, body, timeout=timeout)
        return project(parse_hits(payload))

    def fetch_scores(
        self,
        names: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> list[Mapping[str, Any] | None]:
        """Fetch stored scores by package name, None for missing packages."""
        docs = self.client.mget(self.score_index, names, source=("score",), timeout=timeout)
        scores: list[Mapping[str, Any] | None] = []
        for doc in docs:
            source = doc.get("_source")
            if not doc.get("found", True) or not isinstance(source, Mapping):
                scores.append(None)
                continue
            score = source.get("score")
            scores.append(score if isinstance(score, Mapping) else None)
        return scores

    def close(self) -> None:
        """Close resources held by the adapter."""
        self.client.close()
