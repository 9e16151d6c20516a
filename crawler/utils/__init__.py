"""
Utility modules for the short-news pipeline.
"""
from .config_loader import load_language_config
from .duplicate_detector import FuzzyDuplicateDetector, remove_duplicates
from .rate_limiter import RetryPolicy, call_with_retry
from .seen_tracker import SeenArticleTracker

__all__ = [
    'load_language_config',
    'FuzzyDuplicateDetector',
    'remove_duplicates',
    'RetryPolicy',
    'call_with_retry',
    'SeenArticleTracker'
]
