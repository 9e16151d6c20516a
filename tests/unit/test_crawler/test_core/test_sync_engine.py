"""
Unit tests for crawler.core.sync_engine module, run against the in-memory store.
"""
import pytest
from unittest.mock import AsyncMock

from crawler.core.sync_engine import SyncEngine
from crawler.interfaces import StorageError
from crawler.models import hash_id
from tests.conftest import make_summarized

NAMESPACE = "tamil"


class TestSyncEngine:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_uploads_new_documents_with_sync_stamp(self, memory_store):
        articles = [make_summarized(i, minutes_ago=i) for i in range(3)]

        reports = await SyncEngine(memory_store).sync({"politics": articles}, NAMESPACE)

        stored = memory_store.documents(NAMESPACE, "politics")
        assert reports["politics"].added == 3
        assert set(stored) == {hash_id(a.source) for a in articles}
        payload = stored[hash_id(articles[0].source)]
        assert payload["sourceName"] == "Dinamalar"
        assert payload["lastSyncedAt"]
        assert payload["publishedAt"] == articles[0].publishedAt.isoformat()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_second_sync_writes_nothing(self, memory_store):
        grouped = {"politics": [make_summarized(i, minutes_ago=i) for i in range(5)]}
        engine = SyncEngine(memory_store)
        await engine.sync(grouped, NAMESPACE)

        memory_store.set_document = AsyncMock(wraps=memory_store.set_document)
        memory_store.delete_document = AsyncMock(wraps=memory_store.delete_document)
        reports = await engine.sync(grouped, NAMESPACE)

        memory_store.set_document.assert_not_awaited()
        memory_store.delete_document.assert_not_awaited()
        assert reports["politics"].skipped == 5
        assert reports["politics"].added == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sixty_new_over_fifty_existing_keeps_newest_fifty(self, memory_store):
        # 50 older documents already stored
        existing = [make_summarized(i, minutes_ago=1000 + i, source=f"https://www.dinamalar.com/old/{i}")
                    for i in range(50)]
        await SyncEngine(memory_store).sync({"politics": existing}, NAMESPACE)
        incoming = [make_summarized(i, minutes_ago=i, source=f"https://www.dinamalar.com/new/{i}")
                    for i in range(60)]

        reports = await SyncEngine(memory_store).sync({"politics": incoming}, NAMESPACE)

        stored = memory_store.documents(NAMESPACE, "politics")
        newest_fifty = {hash_id(a.source) for a in incoming[:50]}
        assert len(stored) == 50
        assert set(stored) == newest_fifty
        assert reports["politics"].added == 60
        assert reports["politics"].deleted == 60
        assert reports["politics"].remaining == 50

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_interleaved_timestamps_keep_most_recent(self, memory_store):
        engine = SyncEngine(memory_store, cap=4)
        old = [make_summarized(i, minutes_ago=minutes, source=f"https://x.test/old/{i}")
               for i, minutes in enumerate([10, 30, 50])]
        await engine.sync({"politics": old}, NAMESPACE)
        new = [make_summarized(i, minutes_ago=minutes, source=f"https://x.test/new/{i}")
               for i, minutes in enumerate([20, 40, 5])]

        await engine.sync({"politics": new}, NAMESPACE)

        stored = memory_store.documents(NAMESPACE, "politics")
        expected = {hash_id(url) for url in [
            "https://x.test/new/2", "https://x.test/old/0", "https://x.test/new/0", "https://x.test/old/1"
        ]}
        assert set(stored) == expected

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_upload_failure_is_skipped(self, memory_store):
        articles = [make_summarized(i, minutes_ago=i) for i in range(3)]
        failing_id = hash_id(articles[1].source)
        original = memory_store.set_document

        async def flaky_set(namespace, category, doc_id, payload):
            if doc_id == failing_id:
                raise StorageError("write rejected")
            await original(namespace, category, doc_id, payload)

        memory_store.set_document = flaky_set
        report = (await SyncEngine(memory_store).sync({"politics": articles}, NAMESPACE))["politics"]

        assert report.added == 2
        assert report.failed == 1
        assert failing_id not in memory_store.documents(NAMESPACE, "politics")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unreadable_category_is_skipped(self, memory_store):
        memory_store.list_documents = AsyncMock(side_effect=StorageError("unavailable"))

        reports = await SyncEngine(memory_store).sync(
            {"politics": [make_summarized(1)], "cinema": [make_summarized(2, "cinema")]}, NAMESPACE
        )

        assert reports["politics"].failed == 1
        assert reports["cinema"].failed == 1
        assert memory_store.collections == {}

    @pytest.mark.unit
    def test_cap_must_be_positive(self, memory_store):
        with pytest.raises(ValueError):
            SyncEngine(memory_store, cap=0)
