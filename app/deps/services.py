"""
Dépendances FastAPI des services de classement.

- `get_record_store` (store Mongo unique) est la racine : les tests la remplacent via
  `app.dependency_overrides[get_record_store]`.
- `get_record_store_factory` renvoie la fonction elle-même (résolution différée, voir /health/db).
- Les services sont reconstruits à chaque requête (aucun état partagé hors du store).
"""
from typing import Callable

from fastapi import Depends

from app.services.ranking_service import RankingService
from app.services.record_store import RecordStore, get_record_store
from app.services.submission_service import SubmissionHandler


def get_ranking_service(store: RecordStore = Depends(get_record_store)) -> RankingService:
    return RankingService(store)


def get_submission_handler(
    store: RecordStore = Depends(get_record_store),
    ranking: RankingService = Depends(get_ranking_service),
) -> SubmissionHandler:
    return SubmissionHandler(store, ranking)


def get_record_store_factory() -> Callable[[], RecordStore]:
    """Pour les routes qui veulent intercepter elles-mêmes une `ConfigurationError` (ex: /health/db)."""
    return get_record_store
