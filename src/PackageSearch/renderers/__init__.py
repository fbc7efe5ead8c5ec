"""Output renderers for command results.

Provides the OutputWriter abstraction and its console and JSON
implementations, plus a factory that picks one by format name.
"""

from __future__ import annotations

from PackageSearch.renderers.base import OutputWriter
from PackageSearch.renderers.console import ConsoleOutputWriter, render_info_text, render_results_text
from PackageSearch.renderers.json import JsonOutputWriter, render_json

OUTPUT_FORMATS = ("console", "json")


def create_output_writer(output_format: str) -> OutputWriter:
    """Create output writer for a format name.

    Args:
        output_format: One of ``OUTPUT_FORMATS``.

    Returns:
        Appropriate OutputWriter instance.

    Raises:
        ValueError: If the format is unknown.
    """
    if output_format == "console":
        return ConsoleOutputWriter()
    if output_format == "json":
        return JsonOutputWriter()
    raise ValueError(f"Unsupported output format: {output_format}")


__all__ = [
    "OUTPUT_FORMATS",
    "OutputWriter",
    "ConsoleOutputWriter",
    "JsonOutputWriter",
    "render_info_text",
    "render_json",
    "render_results_text",
    "create_output_writer",
]
