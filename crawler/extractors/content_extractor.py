"""
Deep content extraction for individual article pages.

Static pages are fetched with aiohttp, client-side rendered pages go through
the shared RenderingSession. Extraction never raises: a failed article comes
back with empty content and the batch carries on.
"""

import asyncio
from typing import List, Optional

import aiohttp
from loguru import logger

from crawler.adapters import default_adapters, get_adapter
from crawler.extractors.rendering_session import RenderingSession, USER_AGENT
from crawler.interfaces import ISiteAdapter, ContentExtractionError
from crawler.models import Article, ArticleStub
from crawler.utils.text_cleaning import clean_article_text

LISTING_TIMEOUT_SECONDS = 30
ARTICLE_TIMEOUT_SECONDS = 20
DEFAULT_EXTRACTION_CONCURRENCY = 3


def create_http_session() -> aiohttp.ClientSession:
    """Shared HTTP session with the browser-like User-Agent the sites expect."""
    return aiohttp.ClientSession(headers={'User-Agent': USER_AGENT})


async def fetch_html(session: aiohttp.ClientSession, url: str, timeout_seconds: int) -> str:
    """
    GET a page and return its HTML.

    Raises:
        ContentExtractionError: On non-200 responses, network errors and timeouts
    """
    try:
        async with session.get(url, timeout=aiohttp.ClientTimeout(total=timeout_seconds)) as response:
            if response.status != 200:
                raise ContentExtractionError(f"HTTP {response.status} for {url}", source_name=url)
            return await response.text()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise ContentExtractionError(f"Failed to fetch {url}: {e or type(e).__name__}",
                                     source_name=url, cause=e)


class ContentExtractor:
    """Fetch and clean article bodies under a global concurrency cap."""

    def __init__(self, session: aiohttp.ClientSession,
                 rendering_session: Optional[RenderingSession] = None,
                 adapters: Optional[List[ISiteAdapter]] = None,
                 max_concurrency: int = DEFAULT_EXTRACTION_CONCURRENCY):
        self.session = session
        self.rendering_session = rendering_session
        self.adapters = adapters or default_adapters()
        self._semaphore = asyncio.Semaphore(max_concurrency)

        # Statistics
        self.extracted = 0
        self.failed = 0

    async def extract_content(self, url: str) -> str:
        """
        Extract cleaned plain text from an article URL.

        Returns:
            Cleaned text, or an empty string when the page could not be fetched or parsed
        """
        adapter = get_adapter(url, self.adapters)
        async with self._semaphore:
            try:
                html = await self._load(url, adapter)
                return clean_article_text(adapter.parse_article(html))
            except ContentExtractionError as e:
                logger.warning(f"⚠️ Deep extraction failed: {e}")
                return ""
            except Exception as e:
                logger.warning(f"⚠️ Unexpected error extracting {url}: {e}")
                return ""

    async def enrich(self, stub: ArticleStub) -> Article:
        """Attach deep content to a stub; content is empty on failure."""
        content = await self.extract_content(stub.source)
        if content:
            self.extracted += 1
            logger.info(f"   📰 Content ✓ {stub.title[:40]}...")
        else:
            self.failed += 1
            logger.warning(f"   ⚠️ Content missing for {stub.title[:40]}")
        return stub.with_content(content)

    async def enrich_many(self, stubs: List[ArticleStub]) -> List[Article]:
        """Enrich stubs concurrently; the result keeps input order."""
        return list(await asyncio.gather(*(self.enrich(stub) for stub in stubs)))

    async def _load(self, url: str, adapter: ISiteAdapter) -> str:
        if adapter.requires_rendering and self.rendering_session is not None:
            return await self.rendering_session.render(url, adapter.render_wait_selector)
        return await fetch_html(self.session, url, ARTICLE_TIMEOUT_SECONDS)
