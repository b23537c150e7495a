"""
Service: ranking_service.py
- Calcule le rang d'un score et le nombre total de joueurs à partir du store.
- Produit le top-N du classement.

Règle de rang:
    rang = 1 + nb(scores > s) + nb(scores == s ET created_at < t)
Ordre total : à score égal, la soumission la plus ancienne est mieux classée.

Sentinelles:
- `compute_rank` et `count_total_players` renvoient `RANK_UNAVAILABLE` (-1) si le store échoue.
  Un résultat négatif signifie "indisponible", jamais un rang réel (0 joueur reste 0).
"""
import logging
from datetime import datetime
from typing import List, Optional

from app.models.record import ScoreRecord
from app.services.record_store import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)

RANK_UNAVAILABLE = -1
DEFAULT_TOP_COUNT = 10
MAX_TOP_COUNT = 1000


class InvalidCountError(ValueError):
    """`count` demandé <= 0."""


def clamp_count(count: int, maximum: int = MAX_TOP_COUNT) -> int:
    """Rejette count <= 0, plafonne silencieusement à `maximum`."""
    if count <= 0:
        raise InvalidCountError("Count must be greater than 0")
    return min(count, maximum)


class RankingService:
    def __init__(self, store: RecordStore, *, log: Optional[logging.Logger] = None) -> None:
        self.store = store
        self.log = log or logger

    async def compute_rank(self, score: int, created_at: datetime) -> int:
        try:
            higher = await self.store.count_scores_above(score)
            earlier_ties = await self.store.count_ties_before(score, created_at)
        except RecordStoreError:
            self.log.warning("Rank computation failed", extra={"player_score": score})
            return RANK_UNAVAILABLE
        return 1 + higher + earlier_ties

    async def count_total_players(self) -> int:
        try:
            return await self.store.count_all()
        except RecordStoreError:
            self.log.warning("Total players count failed")
            return RANK_UNAVAILABLE

    async def top_scores(self, count: int) -> List[ScoreRecord]:
        """
        Meilleurs scores (score desc, created_at asc), au plus `count`.
        Store vide -> liste vide. Échec du store -> RecordStoreError propagée.
        """
        if count <= 0:
            raise InvalidCountError("Count must be greater than 0")
        records = await self.store.find_top(count)
        self.log.debug("Top scores fetched", extra={"requested": count, "returned": len(records)})
        return records
