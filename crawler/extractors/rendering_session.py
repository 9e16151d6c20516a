"""
Headless browser session for sites that render article bodies client-side.

One session is opened per run and shared by every deep extraction; it must
be closed on every exit path, so it is only usable as an async context
manager.
"""

from contextlib import AsyncExitStack
from typing import Optional

from crawl4ai import AsyncWebCrawler, BrowserConfig, CrawlerRunConfig, CacheMode
from loguru import logger

from crawler.interfaces import ContentExtractionError

USER_AGENT = ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
              "(KHTML, like Gecko) Chrome/120 Safari/537.36")

RENDER_TIMEOUT_MS = 45000


class RenderingSession:
    """Scoped wrapper around a single crawl4ai browser."""

    def __init__(self, headless: bool = True, page_timeout_ms: int = RENDER_TIMEOUT_MS):
        self.headless = headless
        self.page_timeout_ms = page_timeout_ms
        self._stack: Optional[AsyncExitStack] = None
        self._crawler: Optional[AsyncWebCrawler] = None

    async def __aenter__(self) -> 'RenderingSession':
        browser_config = BrowserConfig(
            browser_type="chromium",
            headless=self.headless,
            viewport_width=1280,
            viewport_height=720,
            user_agent=USER_AGENT,
            extra_args=[
                "--no-sandbox",
                "--disable-setuid-sandbox",
                "--disable-dev-shm-usage",
                "--disable-gpu",
            ]
        )
        self._stack = AsyncExitStack()
        try:
            self._crawler = await self._stack.enter_async_context(
                AsyncWebCrawler(config=browser_config)
            )
        except Exception:
            await self._stack.aclose()
            self._stack = None
            raise
        logger.info("🌐 Rendering session started")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self._stack is not None:
            stack, self._stack = self._stack, None
            self._crawler = None
            await stack.aclose()
            logger.info("🌐 Rendering session closed")

    @property
    def is_open(self) -> bool:
        return self._crawler is not None

    async def render(self, url: str, wait_for_selector: Optional[str] = None) -> str:
        """
        Navigate to a page and return the rendered HTML.

        Raises:
            ContentExtractionError: When the session is closed or the page did not load
        """
        if self._crawler is None:
            raise ContentExtractionError("Rendering session is not open", source_name=url)

        run_config = CrawlerRunConfig(
            cache_mode=CacheMode.BYPASS,
            page_timeout=self.page_timeout_ms,
            wait_for=f"css:{wait_for_selector}" if wait_for_selector else None,
        )
        result = await self._crawler.arun(url=url, config=run_config)

        # A missed wait-for selector still leaves usable HTML behind
        html = getattr(result, 'html', '') or ''
        if not html:
            message = getattr(result, 'error_message', '') or 'empty page'
            raise ContentExtractionError(f"Render failed for {url}: {message}", source_name=url)
        return html
