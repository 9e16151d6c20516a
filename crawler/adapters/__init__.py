# crawler/adapters/__init__.py
"""
Adapters package for the short-news pipeline.
Contains one adapter per supported news site plus a generic fallback.
"""
from typing import List, Optional

from crawler.interfaces import ISiteAdapter
from .base_adapter import BaseSiteAdapter, GenericSiteAdapter, is_placeholder_image
from .dinamalar_adapter import DinamalarAdapter
from .vikatan_adapter import VikatanCinemaAdapter


def default_adapters() -> List[ISiteAdapter]:
    """Site adapters in match order; the generic adapter comes last."""
    return [VikatanCinemaAdapter(), DinamalarAdapter(), GenericSiteAdapter()]


def get_adapter(url: str, adapters: Optional[List[ISiteAdapter]] = None) -> ISiteAdapter:
    """Pick the first adapter that can handle the URL."""
    for adapter in adapters or default_adapters():
        if adapter.can_handle(url):
            return adapter
    return GenericSiteAdapter()


__all__ = [
    'BaseSiteAdapter',
    'GenericSiteAdapter',
    'DinamalarAdapter',
    'VikatanCinemaAdapter',
    'is_placeholder_image',
    'default_adapters',
    'get_adapter'
]
