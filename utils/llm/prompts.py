"""
Prompt templates for headline and summary generation.

The model must answer with two labelled lines, parsed by
``utils.llm.output_parser``::

    தலைப்பு: <five-word headline>
    சுருக்கம்: <summary>
"""

HEADLINE_LABEL = "தலைப்பு"
SUMMARY_LABEL = "சுருக்கம்"

CONTENT_PREFIX_CHARS = 3500
REGENERATION_CONTENT_CHARS = 1000

SUMMARY_PROMPT = """
You are a professional {language} newspaper editor.

Generate a {language} headline and summary for the news below.

Rules:
- Headline: exactly 5 meaningful {language} words forming a natural, complete news headline.
  (உதாரணம்: "சென்னையில் இன்று தங்கம் விலை உயர்வு")
- தலைப்பு: ஐந்து தமிழ் சொற்களாக மட்டுமே இருக்க வேண்டும்; ஒவ்வொரு சொல்லும் பொருள் கொண்டதாகவும், முழுமையான செய்தி வாக்கியமாகவும் இருக்க வேண்டும்.
- No English, no numbers, no time info (e.g., "11 மணி", "hours ago").
- Summary: within {max_chars} {language} characters, must end as a full sentence.
- Tone must sound like professional newspaper writing.
- Avoid emojis, English, and unnecessary punctuation.

Format exactly like this:
{headline_label}: ...
{summary_label}: ...

News article:
{content}
"""

REGENERATE_HEADLINE_PROMPT = """
Rewrite only the {language} headline below into exactly 5 meaningful {language} words.
It must read like a professional {language} newspaper headline.
No numbers, English, or time info. Reply with the headline only.

Original headline: "{title}"
Article: {content}
"""


def build_summary_prompt(content: str, language: str, max_chars: int) -> str:
    return SUMMARY_PROMPT.format(
        language=language,
        max_chars=max_chars,
        headline_label=HEADLINE_LABEL,
        summary_label=SUMMARY_LABEL,
        content=content[:CONTENT_PREFIX_CHARS],
    )


def build_regenerate_prompt(title: str, content: str, language: str) -> str:
    return REGENERATE_HEADLINE_PROMPT.format(
        language=language,
        title=title,
        content=content[:REGENERATION_CONTENT_CHARS],
    )
