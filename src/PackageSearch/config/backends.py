"""Backend domain configuration: search index and document store."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from PackageSearch.config.common import (
    expect_float,
    expect_int,
    expect_str,
    get_optional_value,
    get_required_value,
    get_section,
)


@dataclass(frozen=True, slots=True)
class ElasticsearchConfig:
    """Store validated search index connection settings."""

    url: str
    search_index: str
    score_index: str
    timeout: float
    max_attempts: int
    api_key_env: str
    api_key: str


@dataclass(frozen=True, slots=True)
class CouchdbConfig:
    """Store validated document store connection settings."""

    url: str
    database: str
    timeout: float
    max_attempts: int


def load_elasticsearch(raw: Mapping[str, Any]) -> ElasticsearchConfig:
    """Load the ``elasticsearch`` section.

    The API key itself never lives in YAML: ``api_key_env`` names the
    environment variable (or ``.env`` entry) that holds it.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "elasticsearch", required=True)
    api_key_env = expect_str(get_optional_value(section, "api_key_env", ""), "elasticsearch.api_key_env")
    return ElasticsearchConfig(
        url=expect_str(get_required_value(section, "url", "elasticsearch.url"), "elasticsearch.url"),
        search_index=expect_str(
            get_optional_value(section, "search_index", "npms-current"),
            "elasticsearch.search_index",
        ),
        score_index=expect_str(
            get_optional_value(section, "score_index", "npms-current"),
            "elasticsearch.score_index",
        ),
        timeout=expect_float(get_optional_value(section, "timeout", 10), "elasticsearch.timeout"),
        max_attempts=expect_int(get_optional_value(section, "max_attempts", 3), "elasticsearch.max_attempts"),
        api_key_env=api_key_env,
        api_key=os.getenv(api_key_env, "").strip() if api_key_env else "",
    )


def check_elasticsearch(config: ElasticsearchConfig) -> None:
    """Validate search index constraints.

    Raises:
        ValueError: If values violate constraints.
    """
    _check_url(config.url, "elasticsearch.url")
    if not config.search_index.strip():
        raise ValueError("elasticsearch.search_index must not be empty")
    if not config.score_index.strip():
        raise ValueError("elasticsearch.score_index must not be empty")
    if config.timeout <= 0:
        raise ValueError("elasticsearch.timeout must be positive")
    if config.max_attempts <= 0:
        raise ValueError("elasticsearch.max_attempts must be positive")


def load_couchdb(raw: Mapping[str, Any]) -> CouchdbConfig:
    """Load the ``couchdb`` section."""
    section = get_section(raw, "couchdb", required=True)
    return CouchdbConfig(
        url=expect_str(get_required_value(section, "url", "couchdb.url"), "couchdb.url"),
        database=expect_str(get_optional_value(section, "database", "npms"), "couchdb.database"),
        timeout=expect_float(get_optional_value(section, "timeout", 10), "couchdb.timeout"),
        max_attempts=expect_int(get_optional_value(section, "max_attempts", 3), "couchdb.max_attempts"),
    )


def check_couchdb(config: CouchdbConfig) -> None:
    """Validate document store constraints."""
    _check_url(config.url, "couchdb.url")
    if not config.database.strip():
        raise ValueError("couchdb.database must not be empty")
    if config.timeout <= 0:
        raise ValueError("couchdb.timeout must be positive")
    if config.max_attempts <= 0:
        raise ValueError("couchdb.max_attempts must be positive")


def _check_url(value: str, config_key: str) -> None:
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"{config_key} must be an http(s) URL")
