"""
Staged pipeline runner: ingest → group → summarize → sync.

Each stage fully materializes its output (and writes its snapshot) before
the next stage starts.
"""
from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from clients.llm_client import SummaryModelClient
from crawler.adapters import default_adapters, get_adapter
from crawler.core.ingestion import IngestionOrchestrator
from crawler.core.sync_engine import SyncEngine
from crawler.extractors import ContentExtractor, ListingCollector, RenderingSession, create_http_session
from crawler.interfaces import IDocumentStore
from crawler.models import Article, LanguageConfig, SummarizedArticle, SyncReport
from crawler.utils.seen_tracker import SeenArticleTracker
from utils.config.settings import PipelineSettings
from utils.dir_utils import RunPaths, write_json
from utils.llm.summarizer import SummarizationEngine
from utils.llm.summary_cache import SummaryCacheRepository

UNCATEGORIZED = "uncategorized"


def group_by_category(articles: List[Article]) -> Dict[str, List[Article]]:
    """Group a flat article list by category, keeping first-seen order."""
    grouped: Dict[str, List[Article]] = {}
    for article in articles:
        grouped.setdefault(article.category or UNCATEGORIZED, []).append(article)
    return grouped


@dataclass
class PipelineReport:
    """Counts gathered across the stages of one run."""
    collected: int = 0
    unique: int = 0
    failed_listings: int = 0
    categories: int = 0
    summarized: int = 0
    sync: Dict[str, SyncReport] = field(default_factory=dict)

    def log_summary(self) -> None:
        logger.info("📊 Run summary")
        logger.info(f"   📂 Categories processed: {self.categories}")
        logger.info(f"   🔎 Articles collected: {self.collected} ({self.failed_listings} listing errors)")
        logger.info(f"   🧹 Unique after dedup: {self.unique}")
        logger.info(f"   🧠 Summarized: {self.summarized}")
        if self.sync:
            added = sum(report.added for report in self.sync.values())
            deleted = sum(report.deleted for report in self.sync.values())
            failed = sum(report.failed for report in self.sync.values())
            logger.info(f"   ☁️ Synced: {added} added, {deleted} trimmed, {failed} failed")


class PipelineRunner:
    """Wire the stages together for one language configuration."""

    def __init__(self, config: LanguageConfig, settings: PipelineSettings,
                 store: Optional[IDocumentStore] = None,
                 model_client: Optional[SummaryModelClient] = None,
                 summarize: bool = True, sync: bool = True):
        self.config = config
        self.settings = settings
        self.store = store
        self.model_client = model_client
        self.summarize = summarize
        self.sync = sync and store is not None
        self.paths = RunPaths(settings.data_dir, config.namespace)
        self.adapters = default_adapters()

    @property
    def language_label(self) -> str:
        return self.config.language.strip().title()

    def needs_rendering(self) -> bool:
        """True when any configured listing belongs to a client-side rendered site."""
        return any(
            get_adapter(url, self.adapters).requires_rendering
            for urls in self.config.categories.values() for url in urls
        )

    async def run(self) -> PipelineReport:
        """
        Run every enabled stage.

        Raises:
            QuotaExhaustedError: The model quota ran out during summarization
        """
        report = PipelineReport()

        articles = await self.ingest(report)
        grouped = group_by_category(articles)
        report.categories = len(grouped)
        write_json(self.paths.grouped_output,
                   {category: [a.to_dict() for a in items] for category, items in grouped.items()})
        logger.info(f"🗂 Grouped {len(articles)} articles into {len(grouped)} categories")

        if self.summarize:
            summarized = await self.summarize_stage(grouped)
            report.summarized = sum(len(items) for items in summarized.values())

            if self.sync:
                report.sync = await SyncEngine(self.store, cap=self.settings.collection_cap).sync(
                    summarized, self.config.namespace
                )

        report.log_summary()
        return report

    async def ingest(self, report: PipelineReport) -> List[Article]:
        url_cache = SeenArticleTracker(self.paths.url_cache)

        async with AsyncExitStack() as stack:
            session = await stack.enter_async_context(create_http_session())
            rendering_session = None
            if self.needs_rendering():
                rendering_session = await stack.enter_async_context(RenderingSession())

            orchestrator = IngestionOrchestrator(
                collector=ListingCollector(session, self.adapters),
                extractor=ContentExtractor(session, rendering_session, self.adapters,
                                           max_concurrency=self.settings.extraction_concurrency),
                url_cache=url_cache,
                paths=self.paths,
                dedup_threshold=self.settings.dedup_threshold,
            )
            result = await orchestrator.run(self.config)

        report.collected = result.collected
        report.unique = len(result.articles)
        report.failed_listings = result.failed_listings
        return result.articles

    async def summarize_stage(self, grouped: Dict[str, List[Article]]) -> Dict[str, List[SummarizedArticle]]:
        engine = SummarizationEngine(
            self.model_client,
            SummaryCacheRepository(self.paths.summary_cache),
            language_label=self.language_label,
            max_chars=self.settings.summary_max_chars,
            max_concurrency=self.settings.summary_concurrency,
        )
        summarized = await engine.summarize_grouped(grouped)
        write_json(self.paths.summarized_output,
                   {category: [a.to_dict() for a in items] for category, items in summarized.items()})
        return summarized
