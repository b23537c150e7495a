"""
Module routes/health.py
Rôle:
- Endpoints de santé (service OK + ping MongoDB).

Intégrations:
- settings: nom d'app + base/collection Mongo.
- RecordStore.ping: aller-retour `ping` sur le serveur (latence).
"""
from typing import Callable

from fastapi import APIRouter, Depends
import time

from app.config.settings import settings
from app.deps.services import get_record_store_factory
from app.services.record_store import RecordStore

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
async def health():
    """Renvoie un OK minimal avec le nom de service configuré."""
    return {"ok": True, "service": settings.APP_NAME}

@router.get("/db")
async def health_db(store_factory: Callable[[], RecordStore] = Depends(get_record_store_factory)):
    """
    Vérifie la disponibilité de MongoDB en mesurant une latence simple.
    - Retourne base, collection, latence en secondes (et l'erreur si échec).
    - Le store est résolu dans le try : config Mongo absente/invalide -> ok=False, pas de 500.
    """
    t0 = time.perf_counter()
    try:
        await store_factory().ping()
        dt = time.perf_counter() - t0
        return {
            "ok": True,
            "database": settings.MONGODB_DATABASE_NAME,
            "collection": settings.MONGODB_COLLECTION_NAME,
            "latency_s": round(dt, 3),
        }
    except Exception as e:
        dt = time.perf_counter() - t0
        return {
            "ok": False,
            "database": settings.MONGODB_DATABASE_NAME,
            "collection": settings.MONGODB_COLLECTION_NAME,
            "latency_s": round(dt, 3),
            "error": str(e)
        }
