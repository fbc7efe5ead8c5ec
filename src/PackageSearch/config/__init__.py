from __future__ import annotations

"""Public configuration API for PackageSearch."""

from PackageSearch.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from PackageSearch.config.backends import CouchdbConfig, ElasticsearchConfig
from PackageSearch.config.runtime import RuntimeConfig
from PackageSearch.config.search import SearchConfig

__all__ = [
    "RuntimeConfig",
    "SearchConfig",
    "ElasticsearchConfig",
    "CouchdbConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
