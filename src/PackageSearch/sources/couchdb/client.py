"""CouchDB HTTP client for package metadata documents."""

from __future__ import annotations

from typing import Any, Sequence

import requests

from PackageSearch.core.errors import UpstreamUnavailable
from PackageSearch.sources.http import post_json

DEFAULT_TIMEOUT = 10.0
MAX_ATTEMPTS = 3

HEADERS = {
    "User-Agent": "package-search/0.1",
    "Accept": "application/json",
}


class CouchdbClient:
    """Low-level HTTP client for the CouchDB ``_all_docs`` API."""

    def __init__(
        self,
        base_url: str,
        database: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.database = database
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._session = requests.Session()
        self._session.headers.update(HEADERS)

    def close(self) -> None:
        self._session.close()

    def fetch_docs(self, keys: Sequence[str], *, timeout: float | None = None) -> list[dict[str, Any] | None]:
        """Fetch documents by key, in the order of ``keys``.

        Args:
            keys: Document ids.
            timeout: Caller deadline in seconds.

        Returns:
            One document per key, None where the document does not exist.

        Raises:
            UpstreamUnavailable: If CouchDB fails or reports a row error other
                than ``not_found``.
        """
        payload = post_json(
            self._session,
            f"{self.base_url}/{self.database}/_all_docs?include_docs=true",
            {"keys": list(keys)},
            timeout=timeout or self.timeout,
            max_attempts=self.max_attempts,
            service="couchdb",
        )
        rows = payload.get("rows", [])
        if not isinstance(rows, list):
            raise UpstreamUnavailable("couchdb returned malformed rows")

        docs: list[dict[str, Any] | None] = []
        for row in rows:
            if not isinstance(row, dict):
                raise UpstreamUnavailable("couchdb returned a malformed row")
            doc = row.get("doc")
            if isinstance(doc, dict):
                docs.append(doc)
                continue
            error = row.get("error")
            # Deleted documents come back with a null doc and no error.
            if error == "not_found" or (error is None and doc is None):
                docs.append(None)
                continue
            raise UpstreamUnavailable(f"Unable to retrieve {row.get('key')} from couchdb: {error}")
        return docs
