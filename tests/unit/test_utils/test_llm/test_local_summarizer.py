"""
Unit tests for utils.llm.local_summarizer module.
"""
import pytest

from utils.llm.local_summarizer import local_summary
from utils.llm.output_parser import DEFAULT_HEADLINE


class TestLocalSummary:

    @pytest.mark.unit
    def test_first_three_long_sentences(self):
        content = ("சென்னையில் இன்று கனமழை பெய்தது பல இடங்களில். குறுகியது. "
                   "மாநகராட்சி ஊழியர்கள் பணியில் ஈடுபட்டுள்ளனர் இன்று. "
                   "பள்ளிகளுக்கு விடுமுறை அறிவிக்கப்பட்டுள்ளது இன்று! "
                   "நான்காவது நீண்ட வாக்கியம் இங்கே சேர்க்கப்படாது?")

        result = local_summary(content)

        assert result.summary == ("சென்னையில் இன்று கனமழை பெய்தது பல இடங்களில். "
                                  "மாநகராட்சி ஊழியர்கள் பணியில் ஈடுபட்டுள்ளனர் இன்று. "
                                  "பள்ளிகளுக்கு விடுமுறை அறிவிக்கப்பட்டுள்ளது இன்று.")
        assert result.title == "சென்னையில் இன்று கனமழை பெய்தது பல"

    @pytest.mark.unit
    def test_no_usable_sentence(self):
        result = local_summary("சிறியது.", fallback_title="மூல தலைப்பு")

        assert result.title == DEFAULT_HEADLINE
        assert result.summary == "மூல தலைப்பு"

    @pytest.mark.unit
    def test_never_empty(self):
        result = local_summary("")

        assert result.summary
        assert result.title
