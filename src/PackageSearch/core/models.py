from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence


@dataclass(frozen=True, slots=True)
class PackageResult:
    """Public search result for one candidate package.

    Attributes:
        package: Canonical package record fields (name, version, description...).
        score: Stored evaluation score (``final`` plus ``detail`` signals).
        flags: Flag markers present on the package (deprecated, insecure...).
        search_score: Relevance number computed by the index for this query.
        highlight: Highlight fragment returned by the index, passed through as is.
    """

    package: Mapping[str, Any]
    score: Mapping[str, Any]
    search_score: float
    flags: Mapping[str, Any] = field(default_factory=dict)
    highlight: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "package", MappingProxyType(dict(self.package)))
        object.__setattr__(self, "score", MappingProxyType(dict(self.score)))
        object.__setattr__(self, "flags", MappingProxyType(dict(self.flags)))

    @property
    def name(self) -> str:
        return str(self.package.get("name", ""))

    def to_dict(self) -> dict[str, Any]:
        """Return the caller-facing mapping (``searchScore`` naming)."""
        out: dict[str, Any] = {
            "package": dict(self.package),
            "score": dict(self.score),
            "searchScore": self.search_score,
        }
        if self.flags:
            out["flags"] = dict(self.flags)
        if self.highlight is not None:
            out["highlight"] = self.highlight
        return out


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Search response: total hit count plus one page of ranked results."""

    total: int
    results: Sequence[PackageResult]

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "results": [result.to_dict() for result in self.results]}


@dataclass(frozen=True, slots=True)
class PackageInfo:
    """Merged package metadata (document store) and score (index).

    Attributes:
        name: Package name.
        analyzed_at: Timestamp string of the last analysis, if known.
        collected: Collected information from all metadata sources.
        evaluation: Detailed evaluation of the package.
        score: Final and per-signal score.
    """

    name: str
    analyzed_at: Optional[str]
    collected: Mapping[str, Any]
    evaluation: Mapping[str, Any]
    score: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "collected", MappingProxyType(dict(self.collected)))
        object.__setattr__(self, "evaluation", MappingProxyType(dict(self.evaluation)))
        object.__setattr__(self, "score", MappingProxyType(dict(self.score)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "analyzedAt": self.analyzed_at,
            "collected": dict(self.collected),
            "evaluation": dict(self.evaluation),
            "score": dict(self.score),
        }
