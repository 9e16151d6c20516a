# crawler/interfaces/news_source_interface.py
"""
Core interfaces for the short-news pipeline.
Site adapters, URL caches and document stores are injected through these
contracts so the orchestrator never depends on a concrete site or backend.
"""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List, Iterable

from crawler.models.article_models import ArticleStub


class ISiteAdapter(ABC):
    """Site-specific parsing for one news website."""

    #: Short label used in run logs (e.g. "dinamalar").
    site_name: str = "generic"

    #: True when article pages need a headless browser to render.
    requires_rendering: bool = False

    #: CSS selector to wait for on rendered pages.
    render_wait_selector: Optional[str] = None

    @abstractmethod
    def can_handle(self, url: str) -> bool:
        """Check if this adapter understands pages from the given URL."""
        pass

    @abstractmethod
    def parse_listing(self, html: str, listing_url: str, category: str,
                      language: str) -> List[ArticleStub]:
        """
        Extract article stubs from a category listing page.

        Args:
            html: Listing page HTML
            listing_url: URL the HTML was fetched from (used to resolve relative links)
            category: Category label from the language config
            language: Language label stamped on every stub

        Returns:
            List of ArticleStub objects in page order
        """
        pass

    @abstractmethod
    def parse_article(self, html: str) -> str:
        """
        Extract the raw body text of an article page.

        Returns:
            Raw text before boilerplate cleaning, empty string when nothing matched
        """
        pass


class IUrlCache(ABC):
    """Set of source URLs ingested by previous runs."""

    @abstractmethod
    def is_seen(self, url: str) -> bool:
        pass

    @abstractmethod
    def mark_seen_many(self, urls: Iterable[str]) -> None:
        pass

    @abstractmethod
    def save(self) -> bool:
        pass


class ISummaryCache(ABC):
    """Mapping of source URL to a previously generated headline and summary."""

    @abstractmethod
    def get(self, url: str) -> Optional[Dict[str, str]]:
        pass

    @abstractmethod
    def put(self, url: str, entry: Dict[str, str]) -> None:
        """Store an entry and persist it immediately."""
        pass


class IDocumentStore(ABC):
    """Remote store addressed by {namespace, category} with documents keyed by id."""

    @abstractmethod
    async def list_documents(self, namespace: str, category: str) -> List[Dict[str, Any]]:
        """
        Fetch every document in a category.

        Returns:
            List of {"id": ..., "publishedAt": ...} dictionaries
        """
        pass

    @abstractmethod
    async def set_document(self, namespace: str, category: str, doc_id: str,
                           payload: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def delete_document(self, namespace: str, category: str, doc_id: str) -> None:
        pass

    async def close(self) -> None:
        """Release client connections."""
        pass


# Custom Exceptions

class NewsSourceError(Exception):
    """Base exception for pipeline operations."""

    def __init__(self, message: str, source_name: str = "", cause: Optional[Exception] = None):
        super().__init__(message)
        self.source_name = source_name
        self.cause = cause


class ConfigError(NewsSourceError):
    """Exception raised when the language configuration cannot be used."""
    pass


class SourceDiscoveryError(NewsSourceError):
    """Exception raised when a listing page cannot be fetched or parsed."""
    pass


class ContentExtractionError(NewsSourceError):
    """Exception raised during deep content extraction."""
    pass


class SummarizationError(NewsSourceError):
    """Exception raised when the model service does not produce a usable summary."""
    pass


class MalformedOutputError(SummarizationError):
    """Model response is missing the labelled summary field."""
    pass


class RateLimitExceededError(SummarizationError):
    """Model service kept rate limiting after every retry."""
    pass


class QuotaExhaustedError(SummarizationError):
    """Billing quota is exhausted; continuing the run cannot succeed."""
    pass


class StorageError(NewsSourceError):
    """Exception raised during remote document storage."""
    pass
