"""
Parsing and enforcement for model output.

Contract: the response carries a headline labelled ``தலைப்பு`` and a summary
labelled ``சுருக்கம்``, each followed by ``:`` or the full-width ``：``.
Labels may be wrapped in markdown bold. The headline runs until the summary
label (or the end of the text); the summary runs to the end of the text.
The model is not trusted to follow the contract, so every response is
validated.
"""
import re
from dataclasses import dataclass
from typing import Iterable, List

from crawler.interfaces import MalformedOutputError
from crawler.utils.text_cleaning import TAMIL_WORD_PATTERN, collapse_whitespace
from utils.llm.prompts import HEADLINE_LABEL, SUMMARY_LABEL

TITLE_WORDS = 5
DEFAULT_HEADLINE = "செய்தி புதுப்பிப்பு"
# Filler used when a headline is shorter than five words and nothing else is available
PADDING_WORDS = ["இன்றைய", "முக்கிய", "செய்தி", "புதுப்பிப்பு", "விவரங்கள்"]

TERMINAL_PUNCTUATION = ('.', '!', '?', '。', '…')
TERMINAL_MARK = '.'

_LABEL_DELIMITER = r'\**\s*[:：]\s*\**'
_HEADLINE = re.compile(
    r'\**' + HEADLINE_LABEL + _LABEL_DELIMITER + r'(.+?)(?=\**' + SUMMARY_LABEL + r'|$)',
    re.DOTALL,
)
_SUMMARY = re.compile(r'\**' + SUMMARY_LABEL + _LABEL_DELIMITER + r'(.+)$', re.DOTALL)

_TRAILING_DIGITS = re.compile(r'[0-9]+.*$')
_QUOTES = re.compile(r'["“”]')
_TRAILING_PUNCTUATION = re.compile(r'[:!;,.]+$')
_TIME_AGO = re.compile(r'(மணி.*முன்|hour.*ago)', re.IGNORECASE)


@dataclass(frozen=True)
class ParsedSummary:
    title: str
    summary: str


def parse_summary_response(text: str, fallback_title: str = "") -> ParsedSummary:
    """
    Extract the labelled headline and summary from a model response.

    Args:
        text: Raw generated text
        fallback_title: Headline used when the headline label is missing

    Raises:
        MalformedOutputError: When the text is empty or has no summary
    """
    if not text or not text.strip():
        raise MalformedOutputError("Empty model response")

    summary_match = _SUMMARY.search(text)
    summary = collapse_whitespace(summary_match.group(1)) if summary_match else ""
    if not summary:
        raise MalformedOutputError("Model response has no summary field")

    title_match = _HEADLINE.search(text)
    title = collapse_whitespace(title_match.group(1)) if title_match else fallback_title
    return ParsedSummary(title=title, summary=summary)


def clean_headline(title: str) -> str:
    """Strip numbers, quotes, trailing punctuation and time-ago phrases from a headline."""
    title = title or ""
    title = _TRAILING_DIGITS.sub('', title)
    title = _QUOTES.sub('', title)
    title = _TIME_AGO.sub('', title)
    title = collapse_whitespace(title)
    return _TRAILING_PUNCTUATION.sub('', title).strip()


def headline_words(title: str, pattern: re.Pattern = TAMIL_WORD_PATTERN) -> List[str]:
    return pattern.findall(title or "")


def force_word_count(title: str, padding: Iterable[str] = (),
                     pattern: re.Pattern = TAMIL_WORD_PATTERN,
                     count: int = TITLE_WORDS) -> str:
    """
    Cut or pad a headline to exactly ``count`` target-script words.

    Longer headlines keep their first words. Shorter ones are padded from
    ``padding`` and then from the default filler words.
    """
    words = headline_words(title, pattern)[:count]
    for extra in list(padding) + PADDING_WORDS * count:
        if len(words) >= count:
            break
        words.extend(headline_words(extra, pattern)[:count - len(words)])
    return ' '.join(words[:count])


def clip_summary(summary: str, max_chars: int) -> str:
    """
    Bound a summary to ``max_chars`` and make it end like a sentence.

    When the summary is too long it is cut at the last sentence-terminal
    punctuation inside the budget, as long as that keeps more than two
    thirds of it; otherwise it is cut at the budget. A terminal mark is
    appended when missing, still within the budget.
    """
    summary = collapse_whitespace(_QUOTES.sub('', summary or ''))
    if not summary:
        return ""

    if len(summary) > max_chars:
        trimmed = summary[:max_chars]
        last_punctuation = max(trimmed.rfind(mark) for mark in TERMINAL_PUNCTUATION)
        if last_punctuation > max_chars * 2 // 3:
            trimmed = trimmed[:last_punctuation + 1]
        summary = trimmed.strip()

    if not summary.endswith(TERMINAL_PUNCTUATION):
        summary = summary[:max_chars - len(TERMINAL_MARK)].rstrip() + TERMINAL_MARK
    return summary
