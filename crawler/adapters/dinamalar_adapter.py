# crawler/adapters/dinamalar_adapter.py
"""
Dinamalar adapter.
Listing pages are static Material-UI cards; article bodies are rendered
client-side and need the shared rendering session.
"""
from typing import List

from crawler.adapters.base_adapter import BaseSiteAdapter
from crawler.models import ArticleStub
from crawler.utils.text_cleaning import strip_css_fragments

ARTICLE_PARAGRAPH_SELECTOR = 'p.css-1oiyee6'


class DinamalarAdapter(BaseSiteAdapter):
    """Dinamalar listing and article parsing."""

    site_name = "dinamalar"
    hosts = ('dinamalar.com',)
    requires_rendering = True
    render_wait_selector = ARTICLE_PARAGRAPH_SELECTOR

    def parse_listing(self, html: str, listing_url: str, category: str,
                      language: str) -> List[ArticleStub]:
        soup = self.make_soup(html)
        stubs = []

        for card in soup.select('div.MuiCard-root'):
            anchor = card.select_one('a[href]')
            link = anchor.get('href') if anchor else None

            title_el = card.select_one('p.MuiTypography-body1') or card.select_one('p.MuiTypography-body2')
            title = title_el.get_text(strip=True) if title_el else ''

            img = card.find('img')
            image = img.get('src', '') if img else ''

            stub = self.build_stub(title, link, image, listing_url, category, language)
            if stub:
                stubs.append(stub)

        return stubs

    def parse_article(self, html: str) -> str:
        soup = self.make_soup(html)
        paragraphs = [p.get_text(strip=True) for p in soup.select(ARTICLE_PARAGRAPH_SELECTOR)]
        kept = self.unique_paragraphs(paragraphs)
        return ' '.join(strip_css_fragments(p) for p in kept).strip()
