"""
Service: record_store.py
- Accès à la collection MongoDB des scores (pymongo, client asyncio).
- Append-only : insertion, comptages filtrés, lecture triée/limitée. Ni update ni delete.

Fonctions principales:
- RecordStore.insert(record): insère et renvoie le record avec son `id`.
- RecordStore.count_all / count_scores_above / count_ties_before: comptages pour le rang.
- RecordStore.find_top(limit): meilleurs scores (score desc, puis date de création asc).
- get_record_store(): dépendance FastAPI (store unique par process, créé à la demande).

Notes:
- Toute `PyMongoError` est encapsulée dans `RecordStoreError`, sans retry.
- L'index composé (PlayerScore desc, CreatedAt asc) sert le tri top-N et les deux comptages.
"""
import logging
from datetime import datetime
from threading import RLock
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING, AsyncMongoClient
from pymongo.errors import PyMongoError

from app.config.settings import ConfigurationError, Settings, resolve_connection_string, settings
from app.models.record import (
    FIELD_CREATED_AT,
    FIELD_PLAYER_SCORE,
    ScoreRecord,
)

logger = logging.getLogger(__name__)

SCORE_INDEX_NAME = "score_desc_created_asc"
TOP_SORT = [(FIELD_PLAYER_SCORE, DESCENDING), (FIELD_CREATED_AT, ASCENDING)]


class RecordStoreError(RuntimeError):
    """Erreur encapsulant un échec d'accès à MongoDB."""


class RecordStore:
    """
    Enveloppe mince autour d'une collection Mongo (AsyncCollection).
    - Traduit ScoreRecord <-> documents.
    - Journalise chaque échec avec le nom de la collection.
    """

    def __init__(self, collection: Any, *, client: Optional[AsyncMongoClient] = None) -> None:
        self.collection = collection
        self.client = client

    @property
    def collection_name(self) -> str:
        return getattr(self.collection, "name", "?")

    def _fail(self, operation: str, exc: Exception) -> RecordStoreError:
        logger.error(
            "MongoDB operation failed",
            exc_info=True,
            extra={"db_operation": operation, "db_collection": self.collection_name},
        )
        return RecordStoreError(f"{operation} failed: {type(exc).__name__}")

    async def insert(self, record: ScoreRecord) -> ScoreRecord:
        try:
            result = await self.collection.insert_one(record.to_document())
        except PyMongoError as exc:
            raise self._fail("insert", exc) from exc
        return record.model_copy(update={"id": str(result.inserted_id)})

    async def count(self, query: Dict[str, Any]) -> int:
        try:
            return int(await self.collection.count_documents(query))
        except PyMongoError as exc:
            raise self._fail("count", exc) from exc

    async def count_all(self) -> int:
        return await self.count({})

    async def count_scores_above(self, score: int) -> int:
        return await self.count({FIELD_PLAYER_SCORE: {"$gt": score}})

    async def count_ties_before(self, score: int, created_at: datetime) -> int:
        return await self.count({FIELD_PLAYER_SCORE: score, FIELD_CREATED_AT: {"$lt": created_at}})

    async def find_top(self, limit: int) -> List[ScoreRecord]:
        try:
            cursor = self.collection.find({}).sort(TOP_SORT).limit(limit)
            docs = await cursor.to_list(length=limit)
        except PyMongoError as exc:
            raise self._fail("find_top", exc) from exc
        return [ScoreRecord.from_document(doc) for doc in docs]

    async def ensure_indexes(self) -> None:
        try:
            await self.collection.create_index(TOP_SORT, name=SCORE_INDEX_NAME)
        except PyMongoError as exc:
            raise self._fail("create_index", exc) from exc

    async def ping(self) -> None:
        if self.client is None:
            raise RecordStoreError("ping failed: no client")
        try:
            await self.client.admin.command("ping")
        except PyMongoError as exc:
            raise self._fail("ping", exc) from exc

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()


def build_record_store(cfg: Settings) -> RecordStore:
    """Crée client + collection depuis la configuration (la connexion réelle est paresseuse)."""
    try:
        client: AsyncMongoClient = AsyncMongoClient(resolve_connection_string(cfg), tz_aware=True)
    except PyMongoError as exc:
        # URI invalide, options inconnues... : même traitement qu'une config absente
        raise ConfigurationError(f"Invalid MongoDB configuration: {type(exc).__name__}") from exc
    collection = client[cfg.MONGODB_DATABASE_NAME][cfg.MONGODB_COLLECTION_NAME]
    logger.info(
        "MongoDB store configured",
        extra={"db_name": cfg.MONGODB_DATABASE_NAME, "db_collection": cfg.MONGODB_COLLECTION_NAME},
    )
    return RecordStore(collection, client=client)


_STORE: Optional[RecordStore] = None
_LOCK = RLock()


def get_record_store() -> RecordStore:
    """Dépendance FastAPI : store unique, créé au premier appel."""
    global _STORE
    with _LOCK:
        if _STORE is None:
            _STORE = build_record_store(settings)
        return _STORE


async def close_record_store() -> None:
    """Ferme le client Mongo (hook shutdown)."""
    global _STORE
    with _LOCK:
        store, _STORE = _STORE, None
    if store is not None:
        await store.close()
