"""JSON output renderers.

Renders command results into the caller-facing JSON documents and
provides JsonOutputWriter, which prints them to a text stream.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Mapping, Sequence, TextIO

from PackageSearch.core.models import PackageInfo, PackageResult, SearchResult
from PackageSearch.renderers.base import OutputWriter


def render_json(payload: Any) -> str:
    """Serialize a JSON-compatible payload with stable formatting."""
    return json.dumps(payload, ensure_ascii=False, indent=2)


def search_payload(result: SearchResult) -> dict[str, Any]:
    return result.to_dict()


def suggestions_payload(results: Sequence[PackageResult]) -> list[dict[str, Any]]:
    return [result.to_dict() for result in results]


def info_payload(infos: Mapping[str, PackageInfo]) -> dict[str, Any]:
    return {name: info.to_dict() for name, info in infos.items()}


class JsonOutputWriter(OutputWriter):
    """Accumulate command documents and write them as JSON on finalize.

    A single document is written as is; several documents are written as
    a JSON list.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream
        self.documents: list[Any] = []

    def write_search(self, result: SearchResult, query: str) -> None:
        self.documents.append(search_payload(result))

    def write_suggestions(self, results: Sequence[PackageResult], term: str) -> None:
        self.documents.append(suggestions_payload(results))

    def write_info(self, infos: Mapping[str, PackageInfo]) -> None:
        self.documents.append(info_payload(infos))

    def write_request(self, body: Mapping[str, Any]) -> None:
        self.documents.append(dict(body))

    def finalize(self, action: str) -> None:
        """Write accumulated documents to the stream.

        Args:
            action: The CLI command name.
        """
        if not self.documents:
            return
        payload = self.documents[0] if len(self.documents) == 1 else self.documents
        stream = self.stream or sys.stdout
        stream.write(render_json(payload) + "\n")
        stream.flush()
        self.documents.clear()
