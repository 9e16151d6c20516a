# crawler/interfaces/__init__.py
"""
Interfaces package for the short-news pipeline.
Contains adapter, cache and store contracts plus the exception hierarchy.
"""

from .news_source_interface import (
    # Core interfaces
    ISiteAdapter,
    IUrlCache,
    ISummaryCache,
    IDocumentStore,

    # Exceptions
    NewsSourceError,
    ConfigError,
    SourceDiscoveryError,
    ContentExtractionError,
    SummarizationError,
    MalformedOutputError,
    RateLimitExceededError,
    QuotaExhaustedError,
    StorageError
)

__all__ = [
    # Core interfaces
    'ISiteAdapter',
    'IUrlCache',
    'ISummaryCache',
    'IDocumentStore',

    # Exceptions
    'NewsSourceError',
    'ConfigError',
    'SourceDiscoveryError',
    'ContentExtractionError',
    'SummarizationError',
    'MalformedOutputError',
    'RateLimitExceededError',
    'QuotaExhaustedError',
    'StorageError'
]
