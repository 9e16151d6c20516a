"""
Persistent tracking of ingested article URLs.
Lets a run skip deep extraction for articles seen by earlier runs.
"""
from pathlib import Path
import json
from typing import Set, Iterable
from loguru import logger

from crawler.interfaces import IUrlCache


class SeenArticleTracker(IUrlCache):
    """
    Append-only set of source URLs persisted as a JSON list.

    A corrupt or unreadable cache file is treated as empty: the run
    re-fetches some articles instead of failing.
    """

    def __init__(self, cache_file: str = 'cache/tamil-urls.json'):
        self.cache_file = Path(cache_file)
        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        self.seen: Set[str] = self._load_cache()
        logger.info(f"📋 URL cache initialized with {len(self.seen)} known articles")

    def _load_cache(self) -> Set[str]:
        """Load seen URLs from JSON file."""
        if self.cache_file.exists():
            try:
                with open(self.cache_file, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                if not isinstance(data, list):
                    raise ValueError(f"expected a JSON list, got {type(data).__name__}")
                logger.info(f"✅ Loaded {len(data)} URLs from {self.cache_file}")
                return {str(url) for url in data}
            except (OSError, ValueError) as e:
                logger.error(f"❌ Failed to load URL cache, starting empty: {e}")
                return set()

        logger.info("📝 No existing URL cache found, starting fresh")
        return set()

    def is_seen(self, url: str) -> bool:
        """Check if article URL was ingested before."""
        return url in self.seen

    def mark_seen_many(self, urls: Iterable[str]) -> None:
        for url in urls:
            self.seen.add(url)

    def save(self) -> bool:
        """Save seen URLs to JSON file."""
        try:
            with open(self.cache_file, 'w', encoding='utf-8') as f:
                json.dump(sorted(self.seen), f, indent=2, ensure_ascii=False)

            logger.debug(f"💾 Saved {len(self.seen)} URLs to {self.cache_file}")
            return True

        except OSError as e:
            logger.error(f"❌ Failed to save URL cache: {e}")
            return False
