"""Base classes for output writers.

Separates command control flow from how results are presented, so the
same command can print human-readable text or machine-readable JSON.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from PackageSearch.core.models import PackageInfo, PackageResult, SearchResult


class OutputWriter(ABC):
    """Abstract base class for command output writers."""

    @abstractmethod
    def write_search(self, result: SearchResult, query: str) -> None:
        """Write one page of search results.

        Args:
            result: Total hit count plus ranked results.
            query: Raw query string that produced the results.
        """

    @abstractmethod
    def write_suggestions(self, results: Sequence[PackageResult], term: str) -> None:
        """Write suggestion results for a partial name."""

    @abstractmethod
    def write_info(self, infos: Mapping[str, PackageInfo]) -> None:
        """Write package info keyed by package name."""

    @abstractmethod
    def write_request(self, body: Mapping[str, Any]) -> None:
        """Write a rendered index request body without running it."""

    @abstractmethod
    def finalize(self, action: str) -> None:
        """Finalize output (e.g., flush accumulated documents).

        Args:
            action: The CLI command name (e.g., 'search').
        """
