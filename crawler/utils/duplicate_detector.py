"""
Fuzzy title deduplication for the short-news pipeline.

Titles are compared pairwise against every title kept so far, so cost is
O(n²) in the number of kept articles. That is fine for one run's capped
batch (≤50 articles per category) but will not scale to large archives.
"""
from typing import Any, Dict, List, Sequence, TypeVar

from loguru import logger
import textdistance

from crawler.utils.text_cleaning import normalize_title

DEFAULT_THRESHOLD = 0.85

# Multiset character bigrams, whitespace ignored
_BIGRAM_DICE = textdistance.Sorensen(qval=2, as_set=False, external=False)

T = TypeVar('T')


def title_similarity(a: str, b: str) -> float:
    """
    Dice coefficient over character bigrams of two normalised titles, in [0, 1].

    Word order barely matters: "India beat England" and "England beat India"
    share most of their bigrams. Titles shorter than two characters only match
    themselves.
    """
    a = "".join(a.split())
    b = "".join(b.split())
    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0
    return float(_BIGRAM_DICE(a, b))


class FuzzyDuplicateDetector:
    """Remembers kept titles and rejects near-duplicates of them."""

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        """
        Initialize fuzzy duplicate detector.

        Args:
            threshold: Similarity score at or above which a title is a duplicate
        """
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {threshold}")
        self.threshold = threshold
        self.kept_titles: List[str] = []

        # Statistics
        self.total_checks = 0
        self.duplicates_found = 0

    def is_duplicate(self, title: str) -> bool:
        """
        Check a title against every kept title; remember it when it is new.

        Returns:
            True if the title is a near-duplicate of an earlier kept title
        """
        self.total_checks += 1
        normalized = normalize_title(title)

        for previous in self.kept_titles:
            if title_similarity(normalized, previous) >= self.threshold:
                self.duplicates_found += 1
                logger.debug(f"Duplicate title detected: {title[:60]}")
                return True

        self.kept_titles.append(normalized)
        return False

    def get_statistics(self) -> Dict[str, Any]:
        duplicate_rate = (self.duplicates_found / self.total_checks * 100) if self.total_checks > 0 else 0
        return {
            'threshold': self.threshold,
            'kept_titles': len(self.kept_titles),
            'total_checks': self.total_checks,
            'duplicates_found': self.duplicates_found,
            'duplicate_rate_percent': f"{duplicate_rate:.1f}%",
        }


def remove_duplicates(articles: Sequence[T], threshold: float = DEFAULT_THRESHOLD) -> List[T]:
    """
    Drop near-duplicate articles by title similarity.

    Articles are visited in input order and the first of two near-duplicates
    survives, so callers control which copy is kept through ordering.

    Args:
        articles: Objects with a ``title`` attribute (stubs or articles)
        threshold: Similarity score at or above which an article is dropped

    Returns:
        Kept articles in their original order
    """
    detector = FuzzyDuplicateDetector(threshold)
    unique = [article for article in articles if not detector.is_duplicate(article.title)]

    logger.info(f"🧹 Fuzzy deduplication complete → kept {len(unique)}/{len(articles)} articles")
    return unique
