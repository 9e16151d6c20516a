# crawler/adapters/base_adapter.py
"""
Shared helpers for site adapters plus a generic adapter for unknown hosts.
"""
from typing import List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Comment

from crawler.interfaces import ISiteAdapter
from crawler.models import ArticleStub

# Image URLs that mark a card without a real picture
PLACEHOLDER_IMAGE_PATTERNS = ('dummy-noimg', 'noimage', 'placeholder')

MIN_PARAGRAPH_LENGTH = 40


def is_placeholder_image(image: str) -> bool:
    image = (image or '').lower()
    return any(pattern in image for pattern in PLACEHOLDER_IMAGE_PATTERNS)


def host_of(url: str) -> str:
    try:
        return urlparse(url).netloc.lower()
    except ValueError:
        return ''


class BaseSiteAdapter(ISiteAdapter):
    """Base adapter with stub construction and soup cleanup."""

    #: Host suffixes this adapter handles; empty matches nothing.
    hosts: tuple = ()

    def can_handle(self, url: str) -> bool:
        host = host_of(url)
        return any(host == h or host.endswith('.' + h) for h in self.hosts)

    def build_stub(self, title: Optional[str], link: Optional[str], image: Optional[str],
                   listing_url: str, category: str, language: str) -> Optional[ArticleStub]:
        """Resolve links against the listing page and apply the stub rules.

        Returns None for cards without a title or link and for cards whose
        image is a known placeholder.
        """
        title = (title or '').strip()
        link = (link or '').strip()
        image = (image or '').strip()

        if not title or not link:
            return None
        if image and is_placeholder_image(image):
            return None

        return ArticleStub(
            title=title,
            source=urljoin(listing_url, link),
            image=urljoin(listing_url, image) if image else '',
            category=category,
            language=language,
        )

    @staticmethod
    def make_soup(html: str) -> BeautifulSoup:
        soup = BeautifulSoup(html, 'html.parser')

        # Remove comments
        for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
            comment.extract()

        for element in soup(['script', 'style', 'noscript']):
            element.decompose()
        return soup

    @staticmethod
    def unique_paragraphs(paragraphs: List[str], min_length: int = MIN_PARAGRAPH_LENGTH) -> List[str]:
        """Drop short and repeated paragraphs, keeping first occurrences."""
        seen = set()
        kept = []
        for paragraph in paragraphs:
            text = ' '.join(paragraph.split())
            if len(text) < min_length or text in seen:
                continue
            seen.add(text)
            kept.append(text)
        return kept


class GenericSiteAdapter(BaseSiteAdapter):
    """Fallback adapter using common news-site markup."""

    site_name = "generic"

    listing_selectors = ['article a[href]', '.news-item a[href]', '.headline a[href]',
                         'h2 a[href]', 'h3 a[href]']
    content_selectors = ['.article-body p', '.article-content p', '.post-content p',
                         '.entry-content p', '.story-body p', 'article p']

    def can_handle(self, url: str) -> bool:
        return url.startswith(('http://', 'https://'))

    def parse_listing(self, html: str, listing_url: str, category: str,
                      language: str) -> List[ArticleStub]:
        soup = self.make_soup(html)
        stubs = []
        seen_links = set()

        for link in soup.select(', '.join(self.listing_selectors)):
            href = link.get('href', '')
            if not href or href in seen_links:
                continue
            seen_links.add(href)

            img = link.find('img')
            title = link.get('title') or link.get_text(strip=True)
            if not title and img:
                title = img.get('alt', '')
            image = img.get('src', '') if img else ''

            stub = self.build_stub(title, href, image, listing_url, category, language)
            if stub:
                stubs.append(stub)

        return stubs

    def parse_article(self, html: str) -> str:
        soup = self.make_soup(html)
        for selector in self.content_selectors:
            paragraphs = [p.get_text(' ', strip=True) for p in soup.select(selector)]
            kept = self.unique_paragraphs(paragraphs)
            if kept:
                return ' '.join(kept)
        return ''
