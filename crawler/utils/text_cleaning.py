"""
Text normalisation helpers shared by extraction, dedup and summarization.
"""
import re
import unicodedata

# Tamil Unicode block
TAMIL_WORD_PATTERN = re.compile(r"[\u0B80-\u0BFF]+")

WEEKDAY_NAMES = ['திங்கள்', 'செவ்வாய்', 'புதன்', 'வியாழன்', 'வெள்ளி', 'சனி', 'ஞாயிறு']

_ADVERTISEMENT = re.compile(r'ADVERTISEMENT')
_READ_MORE = re.compile(r'இதைப் படித்தீர்களா\?.*')
_WEEKDAYS = re.compile('|'.join(WEEKDAY_NAMES))
_CSS_FRAGMENT = re.compile(r'\.css-[a-z0-9\-{}@:;().]+', re.IGNORECASE)
_WHITESPACE = re.compile(r'\s+')

# Phrases that only describe when a page was updated
_TIMESTAMP_PHRASES = [
    re.compile(r'hour\(s\)\s*ago.*$', re.IGNORECASE),
    re.compile(r'(Updated|Published|Posted|புதுப்பிக்கப்பட்டது).*', re.IGNORECASE),
    re.compile(r'[0-9]+ ?மணி(யா)?களுக்கு முன்', re.IGNORECASE),
]


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(' ', text or '').strip()


def clean_article_text(content: str) -> str:
    """Remove ad markers, read-more prompts and weekday names from extracted text."""
    if not content:
        return ""
    content = _ADVERTISEMENT.sub('', content)
    content = _READ_MORE.sub('', content)
    content = _WEEKDAYS.sub('', content)
    return collapse_whitespace(content)


def strip_css_fragments(text: str) -> str:
    """Drop stray inline CSS that some sites render into paragraph text."""
    return _CSS_FRAGMENT.sub('', text).strip()


def clean_summary_input(text: str) -> str:
    """Strip update timestamps before content is summarised."""
    text = text or ""
    for pattern in _TIMESTAMP_PHRASES:
        text = pattern.sub('', text)
    return collapse_whitespace(text)


def normalize_title(text: str) -> str:
    """Normalise a title for similarity comparison.

    Punctuation and symbols are removed, whitespace is collapsed and the
    result is case-folded. Combining marks are kept: Tamil vowel signs are
    part of the word.
    """
    kept = []
    for char in text or "":
        category = unicodedata.category(char)
        if category[0] in ('P', 'S'):
            continue
        kept.append(char)
    return collapse_whitespace(''.join(kept)).casefold()


def count_script_words(text: str, pattern: re.Pattern = TAMIL_WORD_PATTERN) -> int:
    """Count runs of target-script characters."""
    return len(pattern.findall(text or ""))
