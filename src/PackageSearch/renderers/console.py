"""Console text output renderers.

Renders search results and package info into human-friendly text.
Provides ConsoleOutputWriter implementation for command output.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping, Sequence

from PackageSearch.core.models import PackageInfo, PackageResult, SearchResult
from PackageSearch.renderers.base import OutputWriter
from PackageSearch.utils.log import log


def _fmt_score(value: Any) -> str:
    """Format a score number for console output, "-" when missing."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "-"
    return f"{value:.2f}"


def render_results_text(results: Iterable[PackageResult], *, start: int = 1) -> str:
    """Render package results into a human-readable text block.

    Args:
        results: Iterable of package results.
        start: Rank number of the first result.

    Returns:
        A formatted string ready to be printed.
    """
    lines: list[str] = []
    for idx, result in enumerate(results, start=start):
        package = result.package
        version = package.get("version")
        title = f"{result.name}@{version}" if version else result.name
        lines.append(f"{idx}. {title}")
        if package.get("description"):
            lines.append(f"   {package['description']}")
        keywords = package.get("keywords") or ()
        if keywords:
            lines.append(f"   Keywords: {', '.join(str(k) for k in keywords)}")

        detail = result.score.get("detail") or {}
        lines.append(
            f"   Score: {_fmt_score(result.score.get('final'))}"
            f"  (q={_fmt_score(detail.get('quality'))}"
            f" p={_fmt_score(detail.get('popularity'))}"
            f" m={_fmt_score(detail.get('maintenance'))})"
            f"  Search: {_fmt_score(result.search_score)}"
        )
        if result.flags:
            lines.append(f"   Flags: {', '.join(sorted(result.flags))}")

        links = package.get("links") or {}
        if links.get("npm"):
            lines.append(f"   npm: {links['npm']}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def render_info_text(infos: Mapping[str, PackageInfo]) -> str:
    """Render package info entries into a human-readable text block."""
    lines: list[str] = []
    for name, info in infos.items():
        detail = info.score.get("detail") or {}
        lines.append(name)
        lines.append(f"   Analyzed: {info.analyzed_at or '-'}")
        lines.append(
            f"   Score: {_fmt_score(info.score.get('final'))}"
            f"  (q={_fmt_score(detail.get('quality'))}"
            f" p={_fmt_score(detail.get('popularity'))}"
            f" m={_fmt_score(detail.get('maintenance'))})"
        )
        metadata = info.collected.get("metadata") or {}
        if metadata.get("description"):
            lines.append(f"   {metadata['description']}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


class ConsoleOutputWriter(OutputWriter):
    """Write results to console via logging."""

    def write_search(self, result: SearchResult, query: str) -> None:
        log.info("query=%s total=%d", query, result.total)
        self._emit(render_results_text(result.results))

    def write_suggestions(self, results: Sequence[PackageResult], term: str) -> None:
        log.info("term=%s returned=%d", term, len(results))
        self._emit(render_results_text(results))

    def write_info(self, infos: Mapping[str, PackageInfo]) -> None:
        self._emit(render_info_text(infos))

    def write_request(self, body: Mapping[str, Any]) -> None:
        self._emit(json.dumps(body, ensure_ascii=False, indent=2))

    def finalize(self, action: str) -> None:
        """No-op for console output."""

    @staticmethod
    def _emit(text: str) -> None:
        for line in text.splitlines():
            log.info(line)
