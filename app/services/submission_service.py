"""
Service: submission_service.py
- Valide une soumission (nom non vide), la persiste, puis calcule rang et total.

Contrat:
- Nom vide / espaces -> SubmissionValidationError, rien n'est écrit.
- Aucun contrôle sur le score (négatif accepté).
- Échec d'écriture -> RecordStoreError propagée telle quelle (pas de retry).
- Échec du calcul de rang après écriture -> soumission réussie, classement indisponible.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from app.models.record import ScoreRecord, utc_now_ms
from app.services.ranking_service import RankingService
from app.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class SubmissionValidationError(ValueError):
    """Soumission refusée avant toute écriture."""


@dataclass
class SubmissionResult:
    record: ScoreRecord
    rank: int
    total_players: int

    @property
    def ranking_available(self) -> bool:
        return self.rank > 0 and self.total_players > 0


class SubmissionHandler:
    def __init__(
        self,
        store: RecordStore,
        ranking: RankingService,
        *,
        clock: Callable[[], datetime] = utc_now_ms,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.store = store
        self.ranking = ranking
        self.clock = clock
        self.log = log or logger

    async def submit(self, player_name: Optional[str], player_score: int) -> SubmissionResult:
        if not player_name or not player_name.strip():
            self.log.warning("Rejected submission with empty player name")
            raise SubmissionValidationError("PlayerName is required")

        record = ScoreRecord(player_name=player_name, player_score=player_score, created_at=self.clock())
        stored = await self.store.insert(record)
        self.log.info(
            "Score stored",
            extra={"player_name": stored.player_name, "player_score": stored.player_score, "record_id": stored.id},
        )

        # rang calculé avec la date du record lui-même : il ne se compte pas comme "plus ancien"
        rank = await self.ranking.compute_rank(stored.player_score, stored.created_at)
        total = await self.ranking.count_total_players()
        result = SubmissionResult(record=stored, rank=rank, total_players=total)

        if result.ranking_available:
            self.log.info(
                "Player ranked",
                extra={"player_name": stored.player_name, "rank": rank, "total_players": total},
            )
        else:
            self.log.warning("Ranking unavailable after submission", extra={"player_name": stored.player_name})
        return result
