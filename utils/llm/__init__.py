"""
Headline and summary generation.
"""

from .summarizer import SummarizationEngine, detect_source_name
from .summary_cache import SummaryCacheRepository

__all__ = ['SummarizationEngine', 'SummaryCacheRepository', 'detect_source_name']
