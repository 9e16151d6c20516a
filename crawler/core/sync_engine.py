"""
Capped, idempotent sync of summarized articles into the remote store.
"""
from typing import Dict, List, Set

from loguru import logger

from crawler.interfaces import IDocumentStore, StorageError
from crawler.models import SummarizedArticle, SyncReport
from utils.time_utils import get_timestamp, sort_key

COLLECTION_CAP = 50


class SyncEngine:
    """
    Push new articles into per-category collections holding at most ``cap`` documents.

    Documents are keyed by ``hash_id(source)``; an id already present is never
    uploaded again, so syncing the same input twice changes nothing.
    """

    def __init__(self, store: IDocumentStore, cap: int = COLLECTION_CAP):
        if cap < 1:
            raise ValueError("cap must be at least 1")
        self.store = store
        self.cap = cap

    async def sync(self, grouped: Dict[str, List[SummarizedArticle]], namespace: str) -> Dict[str, SyncReport]:
        """
        Sync every category of a grouped summary snapshot.

        Args:
            grouped: Category to summarized articles
            namespace: Store namespace (lower-case language)

        Returns:
            SyncReport per category
        """
        logger.info(f"🚀 Syncing {namespace} news to the document store (cap {self.cap} per category)")
        reports = {}
        for category, articles in grouped.items():
            reports[category] = await self.sync_category(namespace, category, articles)

        added = sum(report.added for report in reports.values())
        deleted = sum(report.deleted for report in reports.values())
        logger.info(f"🎉 Sync complete: {added} added, {deleted} trimmed across {len(reports)} categories")
        return reports

    async def sync_category(self, namespace: str, category: str,
                            articles: List[SummarizedArticle]) -> SyncReport:
        report = SyncReport(category=category)
        try:
            existing = await self.store.list_documents(namespace, category)
        except StorageError as e:
            logger.error(f"❌ Cannot read {namespace}/{category}, skipping category: {e}")
            report.failed = len(articles)
            return report

        existing_ids: Set[str] = {doc['id'] for doc in existing}
        retained = list(existing)

        pending = []
        for article in articles:
            doc_id = article.article_id
            if doc_id in existing_ids:
                report.skipped += 1
                continue
            existing_ids.add(doc_id)
            pending.append(article)

        pending.sort(key=lambda a: a.publishedAt, reverse=True)
        for article in pending:
            uploaded = await self._upload(namespace, category, article)
            if uploaded:
                report.added += 1
                retained.append({'id': article.article_id, 'publishedAt': article.publishedAt.isoformat()})
            else:
                report.failed += 1

        retained.sort(key=lambda doc: sort_key(doc.get('publishedAt')), reverse=True)
        for doc in retained[self.cap:]:
            try:
                await self.store.delete_document(namespace, category, doc['id'])
                report.deleted += 1
            except StorageError as e:
                logger.error(f"❌ Failed to trim {doc['id']} from {category}: {e}")
                report.failed += 1

        report.remaining = len(retained) - report.deleted
        logger.info(f"✅ {category}: {report.added} added, {report.skipped} already present, "
                    f"{report.deleted} trimmed, {report.failed} failed")
        return report

    async def _upload(self, namespace: str, category: str, article: SummarizedArticle) -> bool:
        payload = article.model_copy(update={'lastSyncedAt': get_timestamp()}).to_dict()
        try:
            await self.store.set_document(namespace, category, article.article_id, payload)
            return True
        except StorageError as e:
            logger.error(f"❌ Failed to upload {article.source}: {e}")
            return False
