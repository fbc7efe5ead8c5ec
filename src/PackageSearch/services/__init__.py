"""Service layer for PackageSearch.

Provides the search and package info services and factory functions that
wire them to the configured backends.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from PackageSearch.services.package import PackageInfoService, validate_package_name
from PackageSearch.services.search import IndexSource, SearchService

if TYPE_CHECKING:
    from PackageSearch.config import AppConfig
    from PackageSearch.sources.elasticsearch.client import ElasticsearchClient


def create_search_service(config: AppConfig) -> SearchService:
    """Create a search service backed by the configured index.

    Args:
        config: Application configuration.

    Returns:
        Configured SearchService instance.
    """
    from PackageSearch.sources.elasticsearch.source import ElasticsearchSource

    return SearchService(
        source=ElasticsearchSource(
            client=_elasticsearch_client(config),
            search_index=config.elasticsearch.search_index,
            score_index=config.elasticsearch.score_index,
        ),
        settings=config.search.compiler_settings(),
        suggestions_size=config.search.suggestions_size,
        suggestions_max_size=config.search.suggestions_max_size,
    )


def create_package_service(config: AppConfig) -> PackageInfoService:
    """Create a package info service backed by the index and document store.

    Args:
        config: Application configuration.

    Returns:
        Configured PackageInfoService instance.
    """
    from PackageSearch.sources.couchdb.client import CouchdbClient
    from PackageSearch.sources.couchdb.source import CouchdbSource
    from PackageSearch.sources.elasticsearch.source import ElasticsearchSource

    return PackageInfoService(
        scores=ElasticsearchSource(
            client=_elasticsearch_client(config),
            search_index=config.elasticsearch.search_index,
            score_index=config.elasticsearch.score_index,
        ),
        metadata=CouchdbSource(
            client=CouchdbClient(
                config.couchdb.url,
                config.couchdb.database,
                timeout=config.couchdb.timeout,
                max_attempts=config.couchdb.max_attempts,
            )
        ),
    )


def _elasticsearch_client(config: AppConfig) -> ElasticsearchClient:
    from PackageSearch.sources.elasticsearch.client import ElasticsearchClient

    return ElasticsearchClient(
        config.elasticsearch.url,
        timeout=config.elasticsearch.timeout,
        max_attempts=config.elasticsearch.max_attempts,
        api_key=config.elasticsearch.api_key,
    )


__all__ = [
    "IndexSource",
    "PackageInfoService",
    "SearchService",
    "create_package_service",
    "create_search_service",
    "validate_package_name",
]
