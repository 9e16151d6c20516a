# crawler/models/run_models.py
"""
Data models for configuration and per-run bookkeeping.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, List, Any


@dataclass(frozen=True)
class RunLogEntry:
    """One line of the run log: outcome of a single listing fetch."""
    site: str
    category: str
    status: str
    count: int = 0
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "site": self.site,
            "category": self.category,
            "status": self.status,
        }
        if self.status == "success":
            data["count"] = self.count
        if self.message:
            data["message"] = self.message
        return data


@dataclass
class LanguageConfig:
    """Per-language configuration: categories and their listing URLs."""
    language: str
    categories: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def namespace(self) -> str:
        """Remote store namespace, e.g. 'tamil'."""
        return self.language.strip().lower()

    def validate(self) -> List[str]:
        """Validate configuration and return errors."""
        errors = []

        if not self.language.strip():
            errors.append("language must not be empty")

        if not self.categories:
            errors.append("at least one category is required")

        for category, urls in self.categories.items():
            if not urls:
                errors.append(f"category '{category}' has no listing URLs")
            for url in urls:
                if not url.startswith(('http://', 'https://')):
                    errors.append(f"category '{category}' has a non-HTTP URL: {url}")

        return errors


@dataclass
class SyncReport:
    """Outcome of syncing one category to the remote store."""
    category: str
    added: int = 0
    skipped: int = 0
    deleted: int = 0
    failed: int = 0
    remaining: int = 0
