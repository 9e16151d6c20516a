"""
Environment-driven settings for a pipeline run.
"""
import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

# Load environment variables
load_dotenv()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"⚠️ {name}={value!r} is not an integer, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"⚠️ {name}={value!r} is not a number, using {default}")
        return default


@dataclass
class PipelineSettings:
    """Tunables and credentials for one run."""
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    summary_model: str = "gpt-4o"
    summary_max_chars: int = 300
    summary_concurrency: int = 3
    extraction_concurrency: int = 3
    dedup_threshold: float = 0.85
    collection_cap: int = 50
    qdrant_url: Optional[str] = None
    qdrant_api_key: Optional[str] = None
    qdrant_collection_name: str = "short_news"
    data_dir: str = "data"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> 'PipelineSettings':
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            summary_model=os.getenv("SUMMARY_MODEL", "gpt-4o"),
            summary_max_chars=_env_int("SUMMARY_MAX_CHARS", 300),
            summary_concurrency=_env_int("SUMMARY_CONCURRENCY", 3),
            extraction_concurrency=_env_int("EXTRACTION_CONCURRENCY", 3),
            dedup_threshold=_env_float("DEDUP_THRESHOLD", 0.85),
            collection_cap=_env_int("COLLECTION_CAP", 50),
            qdrant_url=os.getenv("QDRANT_URL") or None,
            qdrant_api_key=os.getenv("QDRANT_API_KEY") or None,
            qdrant_collection_name=os.getenv("QDRANT_COLLECTION_NAME", "short_news"),
            data_dir=os.getenv("DATA_DIR", "data"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def validate(self, summarize: bool = True, sync: bool = True) -> List[str]:
        """Validate settings for the stages that will run and return errors."""
        errors = []

        if summarize and not self.openai_api_key:
            errors.append("OPENAI_API_KEY is required for summarization")
        if sync and not self.qdrant_url:
            errors.append("QDRANT_URL is required for syncing")

        if self.summary_max_chars < 10:
            errors.append("SUMMARY_MAX_CHARS must be at least 10")
        if self.summary_concurrency < 1:
            errors.append("SUMMARY_CONCURRENCY must be at least 1")
        if self.extraction_concurrency < 1:
            errors.append("EXTRACTION_CONCURRENCY must be at least 1")
        if not 0.0 <= self.dedup_threshold <= 1.0:
            errors.append("DEDUP_THRESHOLD must be between 0 and 1")
        if self.collection_cap < 1:
            errors.append("COLLECTION_CAP must be at least 1")

        return errors
