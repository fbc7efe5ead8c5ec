"""Command runner for coordinating CLI execution.

Manages component lifecycle, resource cleanup, logging configuration,
and error handling for command execution.
"""

from __future__ import annotations

from typing import NoReturn, Sequence

import click

from PackageSearch.cli.commands import CompileCommand, InfoCommand, SearchCommand, SuggestionsCommand
from PackageSearch.config import AppConfig
from PackageSearch.core.errors import SearchError
from PackageSearch.renderers import create_output_writer
from PackageSearch.services import create_package_service, create_search_service
from PackageSearch.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management.

    Handles logging configuration, component creation, HTTP session
    cleanup, and error handling for CLI commands.
    """

    def __init__(self, config: AppConfig) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
        """
        self.config = config

    def run_search(
        self,
        action: str,
        *,
        query: str,
        from_: int | None,
        size: int | None,
        output_format: str,
    ) -> None:
        """Execute search command with full resource management.

        Args:
            action: The CLI command name (e.g., 'search').
            query: Raw query string.
            from_: Result offset, None for the configured default.
            size: Page size, None for the configured default.
            output_format: Output format name.

        Raises:
            click.Abort: When the search fails.
        """
        self._configure(action)
        try:
            output_writer = create_output_writer(output_format)
            search_service = create_search_service(self.config)
            try:
                SearchCommand(
                    search_service=search_service,
                    output_writer=output_writer,
                    query=query,
                    from_=from_,
                    size=size,
                    timeout=self.config.search.timeout,
                ).execute()
            finally:
                search_service.close()
            output_writer.finalize(action)
        except Exception as e:  # noqa: BLE001 - cli boundary
            _abort("Search", e)

    def run_suggestions(self, action: str, *, term: str, size: int | None, output_format: str) -> None:
        """Execute suggestions command.

        Raises:
            click.Abort: When the lookup fails.
        """
        self._configure(action)
        try:
            output_writer = create_output_writer(output_format)
            search_service = create_search_service(self.config)
            try:
                SuggestionsCommand(
                    search_service=search_service,
                    output_writer=output_writer,
                    term=term,
                    size=size,
                    timeout=self.config.search.timeout,
                ).execute()
            finally:
                search_service.close()
            output_writer.finalize(action)
        except Exception as e:  # noqa: BLE001 - cli boundary
            _abort("Suggestions", e)

    def run_info(self, action: str, *, names: Sequence[str], output_format: str) -> None:
        """Execute package info command.

        Raises:
            click.Abort: When the lookup fails.
        """
        self._configure(action)
        try:
            output_writer = create_output_writer(output_format)
            package_service = create_package_service(self.config)
            try:
                InfoCommand(
                    package_service=package_service,
                    output_writer=output_writer,
                    names=names,
                    timeout=self.config.search.timeout,
                ).execute()
            finally:
                package_service.close()
            output_writer.finalize(action)
        except Exception as e:  # noqa: BLE001 - cli boundary
            _abort("Info", e)

    def run_compile(self, action: str, *, query: str, from_: int | None, size: int | None) -> None:
        """Compile a query and print the index request body as JSON.

        Nothing is sent to the index.

        Raises:
            click.Abort: When the query is invalid.
        """
        self._configure(action)
        try:
            output_writer = create_output_writer("json")
            search_service = create_search_service(self.config)
            try:
                CompileCommand(
                    search_service=search_service,
                    output_writer=output_writer,
                    query=query,
                    from_=from_,
                    size=size,
                ).execute()
            finally:
                search_service.close()
            output_writer.finalize(action)
        except Exception as e:  # noqa: BLE001 - cli boundary
            _abort("Compile", e)

    def _configure(self, action: str) -> None:
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
            keep=self.config.runtime.keep,
        )


def _abort(label: str, error: Exception) -> NoReturn:
    if isinstance(error, SearchError):
        log.error("%s failed: [%s] %s", label, error.code, error.message)
    else:
        log.error("%s failed: %s", label, error)
    raise click.Abort from error
