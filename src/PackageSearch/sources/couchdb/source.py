"""CouchDB source adapter for package metadata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from PackageSearch.sources.couchdb.client import CouchdbClient

DOC_PREFIX = "package!"


@dataclass(slots=True)
class CouchdbSource:
    """Document-store adapter returning analysis documents by package name."""

    client: CouchdbClient
    name: str = "couchdb"

    def fetch_metadata(
        self,
        names: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> list[Mapping[str, Any] | None]:
        """Fetch ``analyzedAt``/``collected``/``evaluation`` for each name.

        Returns:
            One mapping per name, None for packages that were never analyzed.
        """
        docs = self.client.fetch_docs([f"{DOC_PREFIX}{name}" for name in names], timeout=timeout)
        return [_metadata(doc) if doc is not None else None for doc in docs]

    def close(self) -> None:
        self.client.close()


def _metadata(doc: Mapping[str, Any]) -> Mapping[str, Any]:
    return {
        "analyzedAt": doc.get("finishedAt"),
        "collected": doc.get("collected") or {},
        "evaluation": doc.get("evaluation") or {},
    }
