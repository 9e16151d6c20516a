"""
Extractive summary used when the model produced nothing usable.
"""
import re
from typing import List

from crawler.utils.text_cleaning import collapse_whitespace
from utils.llm.output_parser import DEFAULT_HEADLINE, ParsedSummary, TITLE_WORDS

MIN_SENTENCE_CHARS = 20
MAX_SENTENCES = 3

_SENTENCE_SPLIT = re.compile(r'[.!?]')


def key_sentences(content: str) -> List[str]:
    sentences = [collapse_whitespace(s) for s in _SENTENCE_SPLIT.split(content or "")]
    return [s for s in sentences if len(s) > MIN_SENTENCE_CHARS][:MAX_SENTENCES]


def local_summary(content: str, fallback_title: str = "") -> ParsedSummary:
    """
    Build a headline and summary without calling the model.

    The summary joins the first three sentences longer than twenty
    characters. The headline is the first five words of the first such
    sentence. Without one, the headline is the default headline and the
    summary is ``fallback_title``.
    """
    sentences = key_sentences(content)
    summary = ". ".join(sentences)
    if summary:
        summary += "."

    first_words = sentences[0].split() if sentences else []
    title = " ".join(first_words[:TITLE_WORDS]) or DEFAULT_HEADLINE
    return ParsedSummary(title=title, summary=summary or fallback_title or DEFAULT_HEADLINE)
