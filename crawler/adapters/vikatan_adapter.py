# crawler/adapters/vikatan_adapter.py
"""
Cinema Vikatan adapter. The listing mixes several card layouts, all of
them anchors carrying either an h3 headline or an aria-label.
"""
import re
from typing import List

from crawler.adapters.base_adapter import BaseSiteAdapter
from crawler.models import ArticleStub

CARD_SELECTORS = [
    'a.styles-m__first-big-card__SeFeF',
    'a.styles-m__first-big-card__1Sbya',
    'a.styles-m__line-separater__1JUZK',
    'a.card-with-image-zoom',
]

CONTENT_SELECTOR = 'div.article-content p, div.qt-content p, article p'

MIN_TITLE_LENGTH = 5

_READ_FULL_STORY = re.compile(r'^Read full story:\s*', re.IGNORECASE)


class VikatanCinemaAdapter(BaseSiteAdapter):
    """Cinema Vikatan listing and article parsing (static HTML)."""

    site_name = "vikatan"
    hosts = ('vikatan.com',)

    def parse_listing(self, html: str, listing_url: str, category: str,
                      language: str) -> List[ArticleStub]:
        soup = self.make_soup(html)
        stubs = []

        for card in soup.select(', '.join(CARD_SELECTORS)):
            link = card.get('href')

            heading = card.find('h3')
            title = heading.get_text(strip=True) if heading else ''
            if not title:
                title = _READ_FULL_STORY.sub('', card.get('aria-label', '')).strip()
            if len(title) < MIN_TITLE_LENGTH:
                continue

            img = card.find('img')
            image = ''
            if img:
                image = img.get('data-src-base') or img.get('data-src') or img.get('src') or ''

            stub = self.build_stub(title, link, image, listing_url, category, language)
            if stub:
                stubs.append(stub)

        return stubs

    def parse_article(self, html: str) -> str:
        soup = self.make_soup(html)
        paragraphs = [p.get_text(strip=True) for p in soup.select(CONTENT_SELECTOR)]
        return ' '.join(p for p in paragraphs if len(p) > 40)
