"""Elasticsearch HTTP client."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import requests

from PackageSearch.core.errors import UpstreamUnavailable
from PackageSearch.sources.http import post_json

DEFAULT_TIMEOUT = 10.0
MAX_ATTEMPTS = 3

HEADERS = {
    "User-Agent": "package-search/0.1",
    "Accept": "application/json",
}


class ElasticsearchClient:
    """Low-level HTTP client for the Elasticsearch REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_attempts: int = MAX_ATTEMPTS,
        api_key: str = "",
    ) -> None:
        """Initialize the client with a reusable HTTP session.

        Args:
            base_url: Cluster URL, e.g. ``http://localhost:9200``.
            timeout: Default per-request timeout in seconds.
            max_attempts: Attempts per request, including the first one.
            api_key: Optional API key sent as ``Authorization: ApiKey``.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max_attempts
        self._session = requests.Session()
        self._session.headers.update(HEADERS)
        if api_key:
            self._session.headers["Authorization"] = f"ApiKey {api_key}"

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def search(self, index: str, body: Mapping[str, Any], *, timeout: float | None = None) -> dict[str, Any]:
        """Run a search request against an index.

        Args:
            index: Index or alias name.
            body: Request body.
            timeout: Caller deadline in seconds; the client default otherwise.

        Returns:
            Raw response payload.

        Raises:
            UpstreamUnavailable: If the cluster is unreachable or errors.
        """
        return self._post(f"/{index}/_search", body, timeout=timeout)

    def mget(
        self,
        index: str,
        ids: Sequence[str],
        *,
        source: Sequence[str] | None = None,
        timeout: float | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch several documents by id, in the order of ``ids``."""
        path = f"/{index}/_mget"
        if source:
            path += "?_source=" + ",".join(source)
        payload = self._post(path, {"ids": list(ids)}, timeout=timeout)
        docs = payload.get("docs", [])
        if not isinstance(docs, list):
            raise UpstreamUnavailable("elasticsearch returned a malformed mget response")
        return [doc if isinstance(doc, dict) else {} for doc in docs]

    def _post(self, path: str, body: Mapping[str, Any], *, timeout: float | None) -> dict[str, Any]:
        return post_json(
            self._session,
            f"{self.base_url}{path}",
            body,
            timeout=timeout or self.timeout,
            max_attempts=self.max_attempts,
            service="elasticsearch",
        )
