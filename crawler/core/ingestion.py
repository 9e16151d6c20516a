"""
Ingestion orchestrator: listing pages → new stubs → deep content → dedup.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set

from loguru import logger

from crawler.extractors import ContentExtractor, ListingCollector
from crawler.interfaces import IUrlCache, SourceDiscoveryError
from crawler.models import Article, ArticleStub, LanguageConfig, RunLogEntry
from crawler.utils.duplicate_detector import DEFAULT_THRESHOLD, remove_duplicates
from utils.dir_utils import RunPaths, write_json

MAX_ARTICLES_PER_CATEGORY = 50


@dataclass
class IngestionResult:
    """Deduplicated articles of one run plus the per-listing log."""
    articles: List[Article] = field(default_factory=list)
    logs: List[RunLogEntry] = field(default_factory=list)
    collected: int = 0

    @property
    def failed_listings(self) -> int:
        return sum(1 for entry in self.logs if entry.status == "error")


class IngestionOrchestrator:
    """Drive listing collection and deep extraction for every configured category."""

    def __init__(self, collector: ListingCollector, extractor: ContentExtractor,
                 url_cache: IUrlCache, paths: Optional[RunPaths] = None,
                 max_per_category: int = MAX_ARTICLES_PER_CATEGORY,
                 dedup_threshold: float = DEFAULT_THRESHOLD):
        self.collector = collector
        self.extractor = extractor
        self.url_cache = url_cache
        self.paths = paths
        self.max_per_category = max_per_category
        self.dedup_threshold = dedup_threshold

    async def run(self, config: LanguageConfig) -> IngestionResult:
        """
        Ingest every category of a language configuration.

        Listing failures are logged and skipped. Raw output and the run log are
        written before the URL cache is updated, so a crash in between only
        causes articles to be fetched again on the next run.
        """
        logger.info(f"🚀 Starting {config.language} ingestion with deep content...")
        result = IngestionResult()
        collected: List[Article] = []

        for category, listing_urls in config.categories.items():
            logger.info(f"📂 Category: {category}")
            category_articles = await self._ingest_category(
                category, listing_urls, config.namespace, result.logs
            )
            collected.extend(category_articles)
            logger.info(f"📦 Final count for {category}: {len(category_articles)}")

        result.collected = len(collected)
        result.articles = remove_duplicates(collected, self.dedup_threshold)

        if self.paths is not None:
            write_json(self.paths.run_log, [entry.to_dict() for entry in result.logs])
            write_json(self.paths.raw_output, [article.to_dict() for article in result.articles])

        self.url_cache.mark_seen_many(article.source for article in result.articles)
        self.url_cache.save()

        logger.info(f"🎯 Ingestion done: {len(result.articles)} unique articles "
                    f"({result.failed_listings} listing errors)")
        return result

    async def _ingest_category(self, category: str, listing_urls: List[str], language: str,
                               logs: List[RunLogEntry]) -> List[Article]:
        category_articles: List[Article] = []
        taken: Set[str] = set()

        for listing_url in listing_urls:
            site = self.collector.site_name(listing_url)
            logger.info(f"   🌐 Fetching from {site} ({category})")

            try:
                stubs = await self.collector.collect(listing_url, category, language)
            except SourceDiscoveryError as e:
                logger.error(f"   ❌ Scrape error ({category}): {e}")
                logs.append(RunLogEntry(site=site, category=category, status="error", message=str(e)))
                continue

            new_stubs = self._new_stubs(stubs, taken)
            articles = await self.extractor.enrich_many(new_stubs)
            category_articles.extend(articles)
            logs.append(RunLogEntry(site=site, category=category, status="success", count=len(articles)))

            if len(category_articles) >= self.max_per_category:
                break

        return category_articles[:self.max_per_category]

    def _new_stubs(self, stubs: List[ArticleStub], taken: Set[str]) -> List[ArticleStub]:
        """Stubs not ingested by an earlier run nor already taken from another listing."""
        new_stubs = []
        for stub in stubs:
            if self.url_cache.is_seen(stub.source) or stub.source in taken:
                continue
            taken.add(stub.source)
            new_stubs.append(stub)
            if len(new_stubs) >= self.max_per_category:
                break
        return new_stubs
