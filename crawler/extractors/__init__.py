"""
Extractors for listing pages and article bodies.
"""

from .content_extractor import ContentExtractor, create_http_session, fetch_html
from .listing_collector import ListingCollector
from .rendering_session import RenderingSession

__all__ = [
    'ContentExtractor',
    'ListingCollector',
    'RenderingSession',
    'create_http_session',
    'fetch_html'
]
