"""Error taxonomy shared by the query compiler, sources and CLI.

Every error carries a machine-readable ``code`` and an HTTP-like ``status`` so
that an outer API layer can map it to a response without inspecting types.
"""

from __future__ import annotations

from typing import Any


class SearchError(Exception):
    """Base class for errors surfaced to callers."""

    code = "INTERNAL_ERROR"
    status = 500
    expose = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        """Return a serializable ``{code, message}`` mapping."""
        return {"code": self.code, "message": self.message}


class InvalidParameter(SearchError):
    """A query qualifier or request parameter is malformed or out of bounds.

    Never retried. Raised before any request reaches the index.
    """

    code = "INVALID_PARAMETER"
    status = 400
    expose = True

    def __init__(self, message: str, *, param: str | None = None) -> None:
        super().__init__(message)
        self.param = param

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.param is not None:
            payload["param"] = self.param
        return payload


class NotFound(SearchError):
    """The requested package does not exist in the index or document store."""

    code = "NOT_FOUND"
    status = 404
    expose = True


class UpstreamUnavailable(SearchError):
    """The search index or document store is unreachable or failed."""

    code = "UPSTREAM_UNAVAILABLE"
    status = 502
