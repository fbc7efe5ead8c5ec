"""Search service layer: compile queries and run them against the index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

from PackageSearch.core.models import PackageResult, SearchResult
from PackageSearch.query.compiler import CompiledQuery, CompilerSettings, compile_search
from PackageSearch.query.params import validate_suggestion
from PackageSearch.utils.log import log


class IndexSource(Protocol):
    """Protocol for the external search index."""

    name: str

    def search(self, compiled: CompiledQuery, *, timeout: float | None = None) -> SearchResult:
        """Run a compiled query."""
        raise NotImplementedError

    def suggestions(self, term: str, *, size: int, timeout: float | None = None) -> Sequence[PackageResult]:
        """Fetch suggestions for a normalized term."""
        raise NotImplementedError

    def close(self) -> None:
        """Close resources held by source."""
        raise NotImplementedError


@dataclass(slots=True)
class SearchService:
    """Application service that compiles query strings and searches the index.

    The service holds no per-request state: every call compiles a fresh
    ``CompiledQuery`` and the source returns a fresh result, so one instance
    may serve concurrent requests.
    """

    source: IndexSource
    settings: CompilerSettings = field(default_factory=CompilerSettings)
    suggestions_size: int = 25
    suggestions_max_size: int = 100

    def compile(self, query: str, *, from_: Any = None, size: Any = None) -> CompiledQuery:
        """Compile a raw query string without contacting the index.

        Raises:
            InvalidParameter: If the query or pagination is invalid.
        """
        return compile_search(query, from_=from_, size=size, settings=self.settings)

    def search(
        self,
        query: str,
        *,
        from_: Any = None,
        size: Any = None,
        timeout: float | None = None,
    ) -> SearchResult:
        """Search packages matching a query string.

        Args:
            query: Raw query string with free text and qualifiers.
            from_: Result offset.
            size: Page size.
            timeout: Caller deadline for the index round trip, in seconds.

        Returns:
            Total hit count and the ranked page of results.

        Raises:
            InvalidParameter: If the query or pagination is invalid. Nothing
                is sent to the index in that case.
            UpstreamUnavailable: If the index is unreachable or errors.
        """
        compiled = self.compile(query, from_=from_, size=size)
        result = self.source.search(compiled, timeout=timeout)
        log.info("Search completed: source=%s total=%d returned=%d", self.source.name, result.total, len(result.results))
        return result

    def suggestions(self, term: Any, *, size: Any = None, timeout: float | None = None) -> Sequence[PackageResult]:
        """Fetch as-you-type suggestions for a partial package name."""
        normalized, resolved_size = validate_suggestion(
            term,
            size=size,
            default_size=self.suggestions_size,
            max_size=self.suggestions_max_size,
        )
        results = self.source.suggestions(normalized, size=resolved_size, timeout=timeout)
        log.info("Suggestions completed: source=%s returned=%d", self.source.name, len(results))
        return results

    def close(self) -> None:
        """Close the index source."""
        self.source.close()
