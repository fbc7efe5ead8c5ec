"""Command implementations for PackageSearch CLI.

Encapsulates business logic for each command, separated from CLI
parameter handling and output formatting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from PackageSearch.renderers import OutputWriter
from PackageSearch.services.package import PackageInfoService, validate_package_name
from PackageSearch.services.search import SearchService
from PackageSearch.sources.elasticsearch.query import render_search_body
from PackageSearch.utils.log import log


@dataclass(slots=True)
class SearchCommand:
    """Run one search and hand the page of results to the writer."""

    search_service: SearchService
    output_writer: OutputWriter
    query: str
    from_: int | None = None
    size: int | None = None
    timeout: float | None = None

    def execute(self) -> None:
        log.debug("Running search query=%r from=%s size=%s", self.query, self.from_, self.size)
        result = self.search_service.search(self.query, from_=self.from_, size=self.size, timeout=self.timeout)
        self.output_writer.write_search(result, self.query)


@dataclass(slots=True)
class SuggestionsCommand:
    """Fetch as-you-type suggestions for a partial name."""

    search_service: SearchService
    output_writer: OutputWriter
    term: str
    size: int | None = None
    timeout: float | None = None

    def execute(self) -> None:
        results = self.search_service.suggestions(self.term, size=self.size, timeout=self.timeout)
        self.output_writer.write_suggestions(results, self.term)


@dataclass(slots=True)
class InfoCommand:
    """Look up merged info for one or more packages.

    A single name uses the strict lookup, which fails when the package is
    unknown; several names use the bulk lookup, which skips unknown ones.
    """

    package_service: PackageInfoService
    output_writer: OutputWriter
    names: Sequence[str]
    timeout: float | None = None

    def execute(self) -> None:
        if len(self.names) == 1:
            info = self.package_service.info(self.names[0], timeout=self.timeout)
            infos = {info.name: info}
        else:
            infos = self.package_service.mget(self.names, timeout=self.timeout)
            missing = len({validate_package_name(name) for name in self.names}) - len(infos)
            if missing:
                log.warning("Packages not found: %d", missing)
        self.output_writer.write_info(infos)


@dataclass(slots=True)
class CompileCommand:
    """Compile a query and write the index request body without sending it."""

    search_service: SearchService
    output_writer: OutputWriter
    query: str
    from_: int | None = None
    size: int | None = None

    def execute(self) -> None:
        compiled = self.search_service.compile(self.query, from_=self.from_, size=self.size)
        self.output_writer.write_request(render_search_body(compiled))
