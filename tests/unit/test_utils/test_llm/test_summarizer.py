"""
Unit tests for utils.llm.summarizer module.

The model client is a scripted double; the summary cache is the real JSON repository.
"""
import asyncio

import pytest

from crawler.interfaces import QuotaExhaustedError, RateLimitExceededError, SummarizationError
from crawler.utils.text_cleaning import count_script_words
from tests.conftest import ScriptedModelClient, make_article
from utils.llm.summarizer import SummarizationEngine, detect_source_name
from utils.llm.summary_cache import SummaryCacheRepository

VALID_RESPONSE = (
    "தலைப்பு: சென்னையில் இன்று தங்கம் விலை உயர்வு\n"
    "சுருக்கம்: சென்னையில் தங்கம் விலை சவரனுக்கு இருநூறு ரூபாய் உயர்ந்தது."
)

TERMINAL = (".", "!", "?", "。", "…")


@pytest.fixture
def cache(run_paths):
    return SummaryCacheRepository(run_paths.summary_cache)


def make_engine(responses, cache, **kwargs):
    client = ScriptedModelClient(responses)
    return SummarizationEngine(client, cache, **kwargs), client


class TestSummarizeArticle:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_valid_response(self, cache):
        engine, client = make_engine([VALID_RESPONSE], cache)
        article = make_article(1)

        result = await engine.summarize_article(article)

        assert result.title == "சென்னையில் இன்று தங்கம் விலை உயர்வு"
        assert result.summary.startswith("சென்னையில் தங்கம் விலை")
        assert result.sourceName == "Dinamalar"
        assert result.language == "Tamil"
        assert result.source == article.source
        assert cache.get(article.source) == {"title": result.title, "summary": result.summary}
        assert client.complete.await_count == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cache_hit_skips_model(self, cache):
        article = make_article(1)
        cache.put(article.source, {"title": "cached title", "summary": "cached summary."})
        engine, client = make_engine([], cache)

        result = await engine.summarize_article(article)

        assert (result.title, result.summary) == ("cached title", "cached summary.")
        client.complete.assert_not_awaited()
        assert engine.stats["cache_hits"] == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_summary_label_falls_back_to_content(self, cache):
        engine, _ = make_engine(["தலைப்பு: ஏதோ ஒரு தலைப்பு மட்டும்"], cache)

        result = await engine.summarize_article(make_article(1))

        assert result.summary
        assert result.summary.startswith("சென்னையில் இன்று தங்கம் விலை")
        assert count_script_words(result.title) == 5
        assert engine.stats["fallbacks"] == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_title_is_regenerated_once(self, cache):
        engine, client = make_engine([
            VALID_RESPONSE.replace("சென்னையில் இன்று தங்கம் விலை உயர்வு", "தங்கம் உயர்வு"),
            "சென்னையில் தங்கம் விலை மீண்டும் உயர்வு",
        ], cache)

        result = await engine.summarize_article(make_article(1))

        assert result.title == "சென்னையில் தங்கம் விலை மீண்டும் உயர்வு"
        assert client.complete.await_count == 2
        assert "தங்கம் உயர்வு" in client.prompts[1]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_long_regenerated_title_is_truncated(self, cache):
        engine, _ = make_engine([
            VALID_RESPONSE.replace("சென்னையில் இன்று தங்கம் விலை உயர்வு", "தங்கம்"),
            "சென்னையில் இன்று தங்கம் விலை மீண்டும் கடும் உயர்வு",
        ], cache)

        result = await engine.summarize_article(make_article(1))

        assert result.title == "சென்னையில் இன்று தங்கம் விலை மீண்டும்"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_short_regenerated_title_is_padded(self, cache):
        engine, _ = make_engine([
            VALID_RESPONSE.replace("சென்னையில் இன்று தங்கம் விலை உயர்வு", "தங்கம் விலை"),
            "உயர்வு",
        ], cache)

        result = await engine.summarize_article(make_article(1))

        assert count_script_words(result.title) == 5
        assert result.title.startswith("தங்கம் விலை")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_regeneration_keeps_enforced_title(self, cache):
        engine, _ = make_engine([
            VALID_RESPONSE.replace("சென்னையில் இன்று தங்கம் விலை உயர்வு", "தங்கம் விலை"),
            SummarizationError("connection reset"),
        ], cache)

        result = await engine.summarize_article(make_article(1))

        assert count_script_words(result.title) == 5

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_rate_limit_after_retries_falls_back(self, cache):
        engine, _ = make_engine([RateLimitExceededError("still limited")], cache)

        result = await engine.summarize_article(make_article(1))

        assert result.summary
        assert count_script_words(result.title) == 5

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_content_still_produces_output(self, cache):
        engine, _ = make_engine([SummarizationError("down")], cache)

        result = await engine.summarize_article(make_article(1, content="", title="முக்கிய செய்தி"))

        assert result.summary.startswith("முக்கிய செய்தி")
        assert count_script_words(result.title) == 5

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_quota_exhaustion_propagates(self, cache):
        engine, _ = make_engine([QuotaExhaustedError("quota")], cache)
        article = make_article(1)

        with pytest.raises(QuotaExhaustedError):
            await engine.summarize_article(article)
        assert cache.get(article.source) is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_summary_bound(self, cache):
        long_summary = "சுருக்கம்: " + "மழை பெய்தது " * 100
        engine, _ = make_engine(["தலைப்பு: சென்னையில் இன்று தங்கம் விலை உயர்வு\n" + long_summary], cache,
                                max_chars=120)

        result = await engine.summarize_article(make_article(1))

        assert len(result.summary) <= 120
        assert result.summary.endswith(TERMINAL)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_without_model_client_uses_local_summary(self, cache):
        engine = SummarizationEngine(None, cache)

        result = await engine.summarize_article(make_article(1))

        assert result.summary.startswith("சென்னையில் இன்று")
        assert count_script_words(result.title) == 5


class TestSummarizeGrouped:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_preserves_categories_and_order(self, cache):
        grouped = {
            "politics": [make_article(i, "politics") for i in range(3)],
            "cinema": [make_article(i, "cinema") for i in range(2)],
        }
        engine, _ = make_engine([VALID_RESPONSE] * 5, cache)

        summarized = await engine.summarize_grouped(grouped)

        assert list(summarized) == ["politics", "cinema"]
        for category, articles in grouped.items():
            assert [s.source for s in summarized[category]] == [a.source for a in articles]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_concurrency_is_capped_across_categories(self, cache):
        in_flight = 0
        peak = 0

        class SlowClient:
            async def complete(self, prompt, temperature=0.4, max_tokens=700):
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await asyncio.sleep(0.01)
                in_flight -= 1
                return VALID_RESPONSE

        grouped = {c: [make_article(i, c) for i in range(4)] for c in ("politics", "cinema", "sports")}
        engine = SummarizationEngine(SlowClient(), cache, max_concurrency=3)

        await engine.summarize_grouped(grouped)

        assert peak == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_quota_exhaustion_stops_the_batch(self, cache):
        grouped = {"politics": [make_article(i) for i in range(4)]}
        engine, _ = make_engine([QuotaExhaustedError("quota")] * 4, cache, max_concurrency=1)

        with pytest.raises(QuotaExhaustedError):
            await engine.summarize_grouped(grouped)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unexpected_error_cancels_remaining_work(self, cache):

        class FailingClient:
            def __init__(self):
                self.calls = 0
                self.cancelled = 0

            async def complete(self, prompt, temperature=0.4, max_tokens=700):
                self.calls += 1
                if self.calls == 1:
                    raise RuntimeError("connection pool closed")
                try:
                    await asyncio.Event().wait()
                except asyncio.CancelledError:
                    self.cancelled += 1
                    raise

        client = FailingClient()
        grouped = {c: [make_article(i, c) for i in range(2)] for c in ("politics", "cinema")}
        engine = SummarizationEngine(client, cache, max_concurrency=3)

        with pytest.raises(RuntimeError):
            await engine.summarize_grouped(grouped)

        assert client.cancelled == client.calls - 1
        assert client.cancelled >= 2


class TestDetectSourceName:

    @pytest.mark.unit
    @pytest.mark.parametrize("url,label", [
        ("https://www.dinamalar.com/news/1", "Dinamalar"),
        ("https://cinema.vikatan.com/x", "Cinema Vikatan"),
        ("https://www.dailythanthi.com/x", "Daily Thanthi"),
        ("https://www.hindutamil.in/x", "Unknown"),
        ("https://tamil.thehindu.com/x", "The Hindu Tamil"),
        ("https://tamil.oneindia.com/x", "OneIndia Tamil"),
        ("https://www.maalaimalar.com/x", "Maalaimalar"),
        ("", "Unknown"),
    ])
    def test_labels(self, url, label):
        assert detect_source_name(url) == label
