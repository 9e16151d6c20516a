"""
Shared test configuration and fixtures for the short-news pipeline tests.

This module provides article factories, an in-memory store and a scripted
model client so no test touches the network.
"""
import os
import sys
from datetime import datetime, timedelta
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytz

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from clients.document_store import InMemoryDocumentStore
from crawler.models import Article, ArticleStub, LanguageConfig, SummarizedArticle
from utils.dir_utils import RunPaths

BASE_TIME = datetime(2025, 10, 1, 12, 0, tzinfo=pytz.utc)

SAMPLE_CONTENT = (
    "சென்னையில் இன்று தங்கம் விலை சவரனுக்கு இருநூறு ரூபாய் உயர்ந்துள்ளது. "
    "சர்வதேச சந்தையில் ஏற்பட்ட மாற்றமே இதற்கு காரணம் என வியாபாரிகள் தெரிவித்தனர். "
    "வெள்ளி விலையிலும் சிறிய அளவிலான உயர்வு பதிவாகியுள்ளது. "
    "வரும் நாட்களில் விலை மேலும் மாறக்கூடும் என கூறப்படுகிறது."
)


def make_stub(index: int = 0, category: str = "politics", title: Optional[str] = None,
              source: Optional[str] = None, minutes_ago: int = 0) -> ArticleStub:
    return ArticleStub(
        title=title or f"Test headline number {index}",
        source=source or f"https://www.dinamalar.com/news/{category}/{index}",
        category=category,
        image=f"https://img.dinamalar.com/{index}.jpg",
        language="tamil",
        published_at=BASE_TIME - timedelta(minutes=minutes_ago),
    )


def make_article(index: int = 0, category: str = "politics", content: str = SAMPLE_CONTENT,
                 **kwargs) -> Article:
    return make_stub(index, category, **kwargs).with_content(content)


def make_summarized(index: int = 0, category: str = "politics", minutes_ago: int = 0,
                    source: Optional[str] = None) -> SummarizedArticle:
    article = make_article(index, category, minutes_ago=minutes_ago, source=source)
    return SummarizedArticle.from_article(
        article,
        title="சென்னையில் இன்று தங்கம் விலை உயர்வு",
        summary="சென்னையில் தங்கம் விலை உயர்ந்தது.",
        source_name="Dinamalar",
        language="Tamil",
    )


class ScriptedModelClient:
    """Model client double returning queued responses or raising queued errors."""

    def __init__(self, responses: Optional[List] = None):
        self.responses = list(responses or [])
        self.prompts: List[str] = []
        self.complete = AsyncMock(side_effect=self._complete)

    async def _complete(self, prompt: str, temperature: float = 0.4, max_tokens: int = 700) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("unexpected model call")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def language_config():
    return LanguageConfig(
        language="Tamil",
        categories={
            "politics": ["https://www.dinamalar.com/news/politics"],
            "cinema": ["https://cinema.vikatan.com/tamil-cinema", "https://www.dinamalar.com/cinema"],
        },
    )


@pytest.fixture
def run_paths(tmp_path):
    return RunPaths(str(tmp_path), "tamil")


@pytest.fixture
def memory_store():
    return InMemoryDocumentStore()


@pytest.fixture
def mock_http_session():
    """aiohttp-style session whose responses are set per URL in ``session.pages``."""
    session = MagicMock()
    session.pages = {}

    def _get(url, timeout=None):
        status, body = session.pages.get(url, (404, ""))
        response = MagicMock()
        response.status = status
        response.text = AsyncMock(return_value=body)
        context = MagicMock()
        context.__aenter__ = AsyncMock(return_value=response)
        context.__aexit__ = AsyncMock(return_value=False)
        return context

    session.get = MagicMock(side_effect=_get)
    return session
