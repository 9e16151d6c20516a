# crawler/models/article_models.py
"""
Article-specific data models.
"""
from dataclasses import dataclass, field, asdict, replace
from datetime import datetime
from typing import Optional, Dict, Any
import hashlib

from pydantic import BaseModel

from utils.time_utils import get_current_utc_time, parse_timestamp


def hash_id(url: str) -> str:
    """Deterministic document id for a source URL."""
    return hashlib.md5(url.encode('utf-8')).hexdigest()


@dataclass(frozen=True)
class ArticleStub:
    """Lightweight article reference discovered on a listing page."""
    title: str
    source: str
    category: str
    image: str = ""
    language: str = "tamil"
    published_at: datetime = field(default_factory=get_current_utc_time)

    def __post_init__(self):
        """Validate required fields."""
        if not self.title or not self.title.strip():
            raise ValueError("Title cannot be empty")
        if not self.source or not self.source.strip():
            raise ValueError("Source URL cannot be empty")

    @property
    def article_id(self) -> str:
        return hash_id(self.source)

    def with_content(self, content: str) -> 'Article':
        """Attach extracted body text, producing a new Article."""
        return Article(**self._fields(), content=content or "")

    def _fields(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'source': self.source,
            'category': self.category,
            'image': self.image,
            'language': self.language,
            'published_at': self.published_at,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serialise with the camelCase keys used by snapshots and the remote store."""
        data = asdict(self)
        data['publishedAt'] = data.pop('published_at').isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        published = parse_timestamp(data.get('publishedAt') or data.get('published_at'))
        kwargs = {
            'title': data.get('title', ''),
            'source': data.get('source', ''),
            'category': data.get('category') or 'uncategorized',
            'image': data.get('image') or '',
            'language': data.get('language') or 'tamil',
            'published_at': published or get_current_utc_time(),
        }
        if cls is Article:
            kwargs['content'] = data.get('content') or ''
        return cls(**kwargs)


@dataclass(frozen=True)
class Article(ArticleStub):
    """Article stub plus the plain-text body; empty when extraction failed."""
    content: str = ""

    def with_content(self, content: str) -> 'Article':
        return replace(self, content=content or "")


class SummarizedArticle(BaseModel):
    """Article with a generated headline and summary, ready for the remote store."""

    title: str
    summary: str
    source: str
    category: str
    image: str = ""
    language: str = "tamil"
    publishedAt: datetime
    content: str = ""
    sourceName: str = "Unknown"
    lastSyncedAt: Optional[str] = None

    @classmethod
    def from_article(cls, article: Article, title: str, summary: str,
                     source_name: str, language: str) -> 'SummarizedArticle':
        return cls(
            title=title,
            summary=summary,
            source=article.source,
            category=article.category,
            image=article.image,
            language=language,
            publishedAt=article.published_at,
            content=article.content,
            sourceName=source_name,
        )

    @property
    def article_id(self) -> str:
        return hash_id(self.source)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the model to a dictionary, converting datetimes to ISO strings."""
        data = {
            "title": self.title,
            "summary": self.summary,
            "source": self.source,
            "category": self.category,
            "image": self.image,
            "language": self.language,
            "publishedAt": self.publishedAt.isoformat(),
            "content": self.content,
            "sourceName": self.sourceName,
        }
        if self.lastSyncedAt:
            data["lastSyncedAt"] = self.lastSyncedAt
        return data
