"""
Write-through cache of generated headlines and summaries, keyed by source URL.
"""
import json
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from crawler.interfaces import ISummaryCache


def _is_valid_entry(entry: Any) -> bool:
    """Both title and summary must be non-empty strings."""
    return (
        isinstance(entry, dict)
        and all(isinstance(entry.get(key), str) and entry[key].strip() for key in ('title', 'summary'))
    )


class SummaryCacheRepository(ISummaryCache):
    """JSON object mapping source URL to ``{"title": ..., "summary": ...}``."""

    def __init__(self, cache_file: str = 'cache/tamil-summaries.json'):
        self.cache_file = Path(cache_file)
        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        self.entries: Dict[str, Dict[str, str]] = self._load()
        logger.info(f"🧠 Summary cache loaded with {len(self.entries)} entries")

    def _load(self) -> Dict[str, Dict[str, str]]:
        if not self.cache_file.exists():
            return {}
        try:
            with open(self.cache_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            entries = {
                str(url): {'title': entry['title'], 'summary': entry['summary']}
                for url, entry in data.items() if _is_valid_entry(entry)
            }
            dropped = len(data) - len(entries)
            if dropped:
                logger.warning(f"⚠️ Ignored {dropped} malformed summary cache entries")
            return entries
        except (OSError, ValueError) as e:
            logger.error(f"❌ Failed to load summary cache, starting empty: {e}")
            return {}

    def get(self, url: str) -> Optional[Dict[str, str]]:
        return self.entries.get(url)

    def put(self, url: str, entry: Dict[str, str]) -> None:
        self.entries[url] = {'title': entry.get('title', ''), 'summary': entry.get('summary', '')}
        self.save()

    def save(self) -> bool:
        try:
            with open(self.cache_file, 'w', encoding='utf-8') as f:
                json.dump(self.entries, f, indent=2, ensure_ascii=False)
            return True
        except OSError as e:
            logger.error(f"❌ Failed to save summary cache: {e}")
            return False

    def __len__(self) -> int:
        return len(self.entries)
