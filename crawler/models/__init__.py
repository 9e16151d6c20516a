# crawler/models/__init__.py
"""
Data models for the short-news pipeline.
"""

from .article_models import (
    ArticleStub,
    Article,
    SummarizedArticle,
    hash_id
)
from .run_models import (
    RunLogEntry,
    LanguageConfig,
    SyncReport
)

__all__ = [
    # Article models
    'ArticleStub',
    'Article',
    'SummarizedArticle',
    'hash_id',

    # Run models
    'RunLogEntry',
    'LanguageConfig',
    'SyncReport'
]
