"""
Listing collection: turns a category listing page into article stubs.
"""

from typing import List, Optional

import aiohttp
from loguru import logger

from crawler.adapters import default_adapters, get_adapter
from crawler.extractors.content_extractor import fetch_html, LISTING_TIMEOUT_SECONDS
from crawler.interfaces import ISiteAdapter, ContentExtractionError, SourceDiscoveryError
from crawler.models import ArticleStub

MAX_STUBS_PER_LISTING = 50


class ListingCollector:
    """Fetch listing pages and parse them with the matching site adapter."""

    def __init__(self, session: aiohttp.ClientSession,
                 adapters: Optional[List[ISiteAdapter]] = None,
                 max_stubs: int = MAX_STUBS_PER_LISTING):
        self.session = session
        self.adapters = adapters or default_adapters()
        self.max_stubs = max_stubs

    def site_name(self, listing_url: str) -> str:
        return get_adapter(listing_url, self.adapters).site_name

    async def collect(self, listing_url: str, category: str, language: str) -> List[ArticleStub]:
        """
        Collect article stubs from one listing page.

        Returns:
            Up to ``max_stubs`` stubs in page order

        Raises:
            SourceDiscoveryError: When the page cannot be fetched or parsed
        """
        adapter = get_adapter(listing_url, self.adapters)

        try:
            html = await fetch_html(self.session, listing_url, LISTING_TIMEOUT_SECONDS)
        except ContentExtractionError as e:
            raise SourceDiscoveryError(str(e), source_name=adapter.site_name, cause=e)

        try:
            stubs = adapter.parse_listing(html, listing_url, category, language)
        except Exception as e:
            raise SourceDiscoveryError(f"Unexpected page shape at {listing_url}: {e}",
                                       source_name=adapter.site_name, cause=e)

        logger.info(f"✅ {adapter.site_name} ({category}): {len(stubs)} found")
        return stubs[:self.max_stubs]
