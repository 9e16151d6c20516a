import os
import uuid
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv
from loguru import logger
from qdrant_client import AsyncQdrantClient
from qdrant_client.http import models
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse

from crawler.interfaces import IDocumentStore, StorageError

# Load environment variables
load_dotenv()

DEFAULT_COLLECTION = "short_news"
SCROLL_PAGE_SIZE = 256
QDRANT_ERRORS = (UnexpectedResponse, ResponseHandlingException)


def point_id(doc_id: str) -> str:
    """Qdrant point id for a document id; md5 hex ids map one-to-one onto UUIDs."""
    try:
        return str(uuid.UUID(hex=doc_id))
    except ValueError:
        return str(uuid.uuid5(uuid.NAMESPACE_URL, doc_id))


class QdrantDocumentStore(IDocumentStore):
    """Payload-only document store on a single Qdrant collection.

    Every point carries ``namespace``, ``category`` and ``docId`` in its
    payload; a {namespace, category} pair behaves as one collection.
    """

    def __init__(self, url: Optional[str] = None, api_key: Optional[str] = None,
                 collection_name: Optional[str] = None,
                 client: Optional[AsyncQdrantClient] = None):
        """Initializes the Qdrant store.

        Args:
            url: The Qdrant URL. If None, loads from QDRANT_URL environment variable.
            api_key: The Qdrant API key. If None, loads from QDRANT_API_KEY environment variable.
            collection_name: If None, loads from QDRANT_COLLECTION_NAME (default short_news).
            client: Pre-built client (tests).
        """
        self.collection_name = collection_name or os.getenv("QDRANT_COLLECTION_NAME", DEFAULT_COLLECTION)
        self._collection_ready = False

        if client is not None:
            self.client = client
        else:
            url = url or os.getenv("QDRANT_URL")
            if not url:
                raise ValueError("QDRANT_URL environment variable is not configured.")
            self.client = AsyncQdrantClient(url=url, api_key=api_key or os.getenv("QDRANT_API_KEY"))
            logger.info(f"QdrantDocumentStore initialized for URL: {url}")
        logger.info(f"Using collection: {self.collection_name}")

    async def close(self):
        """Closes the Qdrant client."""
        await self.client.close()
        logger.info("Qdrant client closed.")

    async def ensure_collection(self) -> None:
        """Create the collection and its payload indexes when missing."""
        if self._collection_ready:
            return
        try:
            if not await self.client.collection_exists(self.collection_name):
                logger.info(f"Creating collection: {self.collection_name}")
                await self.client.create_collection(collection_name=self.collection_name, vectors_config={})
                for field_name in ("namespace", "category"):
                    await self.client.create_payload_index(
                        collection_name=self.collection_name,
                        field_name=field_name,
                        field_schema=models.PayloadSchemaType.KEYWORD,
                    )
        except QDRANT_ERRORS as e:
            raise StorageError(f"Cannot prepare collection {self.collection_name}: {e}",
                               source_name="qdrant", cause=e)
        self._collection_ready = True

    @staticmethod
    def _scope(namespace: str, category: str) -> models.Filter:
        return models.Filter(must=[
            models.FieldCondition(key="namespace", match=models.MatchValue(value=namespace)),
            models.FieldCondition(key="category", match=models.MatchValue(value=category)),
        ])

    async def list_documents(self, namespace: str, category: str) -> List[Dict[str, Any]]:
        await self.ensure_collection()
        documents: List[Dict[str, Any]] = []
        offset = None
        try:
            while True:
                points, offset = await self._scroll_page(namespace, category, offset)
                for point in points:
                    payload = point.payload or {}
                    if not payload.get('docId'):
                        logger.warning(f"⚠️ Ignoring point {point.id} in {namespace}/{category} without docId")
                        continue
                    documents.append({'id': payload['docId'], 'publishedAt': payload.get('publishedAt')})
                if offset is None:
                    break
        except QDRANT_ERRORS as e:
            raise StorageError(f"Failed to list {namespace}/{category}: {e}", source_name="qdrant", cause=e)
        return documents

    async def _scroll_page(self, namespace: str, category: str, offset) -> Tuple[list, Any]:
        return await self.client.scroll(
            collection_name=self.collection_name,
            scroll_filter=self._scope(namespace, category),
            limit=SCROLL_PAGE_SIZE,
            offset=offset,
            with_payload=["docId", "publishedAt"],
            with_vectors=False,
        )

    async def set_document(self, namespace: str, category: str, doc_id: str,
                           payload: Dict[str, Any]) -> None:
        await self.ensure_collection()
        point_payload = dict(payload, namespace=namespace, category=category, docId=doc_id)
        try:
            await self.client.upsert(
                collection_name=self.collection_name,
                points=[models.PointStruct(id=point_id(doc_id), vector={}, payload=point_payload)],
                wait=True,
            )
        except QDRANT_ERRORS as e:
            raise StorageError(f"Failed to store {doc_id}: {e}", source_name="qdrant", cause=e)

    async def delete_document(self, namespace: str, category: str, doc_id: str) -> None:
        try:
            await self.client.delete(
                collection_name=self.collection_name,
                points_selector=models.PointIdsList(points=[point_id(doc_id)]),
                wait=True,
            )
        except QDRANT_ERRORS as e:
            raise StorageError(f"Failed to delete {doc_id}: {e}", source_name="qdrant", cause=e)


class InMemoryDocumentStore(IDocumentStore):
    """Dict-backed store for dry runs and tests."""

    def __init__(self):
        self.collections: Dict[Tuple[str, str], Dict[str, Dict[str, Any]]] = {}

    def documents(self, namespace: str, category: str) -> Dict[str, Dict[str, Any]]:
        return self.collections.setdefault((namespace, category), {})

    async def list_documents(self, namespace: str, category: str) -> List[Dict[str, Any]]:
        return [
            {'id': doc_id, 'publishedAt': payload.get('publishedAt')}
            for doc_id, payload in self.documents(namespace, category).items()
        ]

    async def set_document(self, namespace: str, category: str, doc_id: str,
                           payload: Dict[str, Any]) -> None:
        self.documents(namespace, category)[doc_id] = dict(payload)

    async def delete_document(self, namespace: str, category: str, doc_id: str) -> None:
        self.documents(namespace, category).pop(doc_id, None)

    async def close(self):
        pass
