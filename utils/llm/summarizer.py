"""
Summarization engine: five-word headline and bounded summary per article.

Each article goes through::

    cache hit ───────────────────────────────────────────► done
    cache miss → model call → valid output ──────────────► done
                            → headline not 5 words → one rewrite call → done
                            → call failed / malformed → local fallback → done

Quota exhaustion is the only failure that escapes; it stops the run.
"""
import asyncio
from typing import Dict, List, Optional

from loguru import logger

from clients.llm_client import SummaryModelClient
from crawler.interfaces import ISummaryCache, QuotaExhaustedError, SummarizationError, MalformedOutputError
from crawler.models import Article, SummarizedArticle
from crawler.utils.text_cleaning import clean_summary_input, count_script_words
from utils.llm.local_summarizer import local_summary
from utils.llm.output_parser import (
    ParsedSummary, TITLE_WORDS, clean_headline, clip_summary, force_word_count,
    parse_summary_response
)
from utils.llm.prompts import build_regenerate_prompt, build_summary_prompt

DEFAULT_MAX_CHARS = 300
DEFAULT_CONCURRENCY = 3

# Publisher labels by URL fragment, first match wins
SOURCE_LABELS = [
    ("dinamalar", "Dinamalar"),
    ("vikatan", "Cinema Vikatan"),
    ("dailythanthi", "Daily Thanthi"),
    ("thehindu", "The Hindu Tamil"),
    ("oneindia", "OneIndia Tamil"),
    ("maalaimalar", "Maalaimalar"),
]


def detect_source_name(url: str) -> str:
    """Human-readable publisher label for an article URL."""
    lowered = (url or "").lower()
    for fragment, label in SOURCE_LABELS:
        if fragment in lowered:
            return label
    return "Unknown"


class SummarizationEngine:
    """Generate headline/summary pairs with caching, retries and a local fallback."""

    def __init__(self, model_client: Optional[SummaryModelClient], cache: ISummaryCache,
                 language_label: str = "Tamil", max_chars: int = DEFAULT_MAX_CHARS,
                 max_concurrency: int = DEFAULT_CONCURRENCY):
        """
        Args:
            model_client: Model client; None forces the local fallback for every miss
            cache: Summary cache keyed by source URL
            language_label: Language named in prompts and stamped on results
            max_chars: Upper bound on summary length
            max_concurrency: Model calls allowed in flight across all categories
        """
        if max_chars < 10:
            raise ValueError("max_chars must be at least 10")
        self.model_client = model_client
        self.cache = cache
        self.language_label = language_label
        self.max_chars = max_chars
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self.stats = {'cache_hits': 0, 'generated': 0, 'regenerated': 0, 'fallbacks': 0}

    async def summarize_grouped(self, grouped: Dict[str, List[Article]]) -> Dict[str, List[SummarizedArticle]]:
        """
        Summarize every article of every category, preserving order.

        Raises:
            QuotaExhaustedError: Remaining work is cancelled and the error propagates;
                any other failure cancels the remaining work the same way
        """
        logger.info(f"🚀 Starting batched {self.language_label} summarization (≤{self.max_chars} chars)…")
        tasks = {
            category: [asyncio.ensure_future(self.summarize_article(article)) for article in articles]
            for category, articles in grouped.items()
        }
        all_tasks = [task for category_tasks in tasks.values() for task in category_tasks]

        try:
            await asyncio.gather(*all_tasks)
        except BaseException:
            for task in all_tasks:
                task.cancel()
            await asyncio.gather(*all_tasks, return_exceptions=True)
            raise

        summarized = {}
        for category, category_tasks in tasks.items():
            summarized[category] = [task.result() for task in category_tasks]
            logger.info(f"✅ Completed {category} ({len(summarized[category])} articles)")

        logger.info(f"💾 Summaries ready: {self.stats['generated']} generated, "
                    f"{self.stats['cache_hits']} cached, {self.stats['fallbacks']} local fallbacks")
        return summarized

    async def summarize_article(self, article: Article) -> SummarizedArticle:
        """Headline and summary for one article, from the cache when available."""
        cached = self.cache.get(article.source)
        if cached:
            self.stats['cache_hits'] += 1
            logger.debug(f"⚡ [Cache] {article.title[:35]}...")
            return self._build(article, ParsedSummary(cached['title'], cached['summary']))

        async with self._semaphore:
            logger.info(f"📰 Summarizing: {article.title[:40]}...")
            result = await self._generate(article)

        self.cache.put(article.source, {'title': result.title, 'summary': result.summary})
        summarized = self._build(article, result)
        logger.info(f"✅ Done: {summarized.title} ({summarized.sourceName})")
        return summarized

    def _build(self, article: Article, result: ParsedSummary) -> SummarizedArticle:
        return SummarizedArticle.from_article(
            article,
            title=result.title,
            summary=result.summary,
            source_name=detect_source_name(article.source),
            language=self.language_label,
        )

    async def _generate(self, article: Article) -> ParsedSummary:
        content = clean_summary_input(article.content)
        if self.model_client is None:
            return self._fallback(article, content)

        try:
            text = await self.model_client.complete(
                build_summary_prompt(content, self.language_label, self.max_chars),
                temperature=0.4, max_tokens=700,
            )
            parsed = parse_summary_response(text, fallback_title=article.title)
            summary = clip_summary(parsed.summary, self.max_chars)
            if not summary:
                raise MalformedOutputError("Summary is empty after normalisation")
        except QuotaExhaustedError:
            raise
        except SummarizationError as e:
            logger.warning(f"⚠️ Summarization failed for {article.source}: {e}")
            return self._fallback(article, content)

        title = clean_headline(parsed.title)
        word_count = count_script_words(title)
        if word_count != TITLE_WORDS:
            logger.warning(f"⚠️ Title invalid ({word_count} words), regenerating...")
            title = await self._regenerate_title(title, content)

        self.stats['generated'] += 1
        return ParsedSummary(title=self._enforce_title(title, article, content), summary=summary)

    async def _regenerate_title(self, title: str, content: str) -> str:
        """One rewrite attempt; the original headline is kept when it yields too few words."""
        try:
            text = await self.model_client.complete(
                build_regenerate_prompt(title, content, self.language_label),
                temperature=0.3, max_tokens=100,
            )
        except QuotaExhaustedError:
            raise
        except SummarizationError as e:
            logger.warning(f"⚠️ Title regeneration failed: {e}")
            return title

        self.stats['regenerated'] += 1
        rewritten = clean_headline(text)
        if count_script_words(rewritten) >= TITLE_WORDS:
            return rewritten
        return title

    def _fallback(self, article: Article, content: str) -> ParsedSummary:
        self.stats['fallbacks'] += 1
        parsed = local_summary(content, fallback_title=article.title)
        summary = clip_summary(parsed.summary, self.max_chars)
        title = self._enforce_title(clean_headline(parsed.title), article, content)
        return ParsedSummary(title=title, summary=summary)

    @staticmethod
    def _enforce_title(title: str, article: Article, content: str) -> str:
        return force_word_count(title, padding=[article.title, content])
