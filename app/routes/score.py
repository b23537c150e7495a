"""
Module routes/score.py
Rôle:
- Soumission d'un score (`POST /Score/submit-score`) avec retour du rang.
- Classement top-N (`GET /Score/get-rankings?count=N`).

Codes retour:
- 400: corps absent/invalide, `playerName` vide, `count` <= 0.
- 500: échec MongoDB ou erreur inattendue (message générique, détails en logs).
- 200 texte brut: score enregistré mais rang non calculable.

Notes:
- `count` > 1000 est plafonné à 1000 (pas d'erreur).
- Le rang des entrées du classement est leur position 1-based dans la liste.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from app.deps.services import get_ranking_service, get_submission_handler
from app.models.score import (
    GetRankingsResponse,
    LeaderboardEntry,
    ScoreSubmissionRequest,
    ScoreSubmissionResponse,
)
from app.services.ranking_service import DEFAULT_TOP_COUNT, InvalidCountError, RankingService, clamp_count
from app.services.record_store import RecordStoreError
from app.services.submission_service import SubmissionHandler, SubmissionValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/Score", tags=["score"])

SUBMIT_OK = "Score submitted successfully"
SUBMIT_OK_NO_RANK = "Score submitted successfully, but ranking could not be calculated"


@router.post("/submit-score", response_model=ScoreSubmissionResponse)
async def submit_score(
    payload: Optional[ScoreSubmissionRequest] = None,
    handler: SubmissionHandler = Depends(get_submission_handler),
):
    """Enregistre un score puis renvoie message, rang et nombre total de joueurs."""
    if payload is None:
        raise HTTPException(status_code=400, detail="Invalid request body")

    try:
        result = await handler.submit(payload.player_name, payload.player_score)
    except SubmissionValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RecordStoreError:
        raise HTTPException(status_code=500, detail="Failed")
    except Exception:
        logger.exception("Unexpected error while submitting score", extra={"player_name": payload.player_name})
        raise HTTPException(status_code=500, detail="Failed")

    if not result.ranking_available:
        return PlainTextResponse(SUBMIT_OK_NO_RANK)

    return ScoreSubmissionResponse(message=SUBMIT_OK, rank=result.rank, total_players=result.total_players)


@router.get("/get-rankings", response_model=GetRankingsResponse)
async def get_rankings(
    count: int = Query(default=DEFAULT_TOP_COUNT, description="Nombre d'entrées (max 1000)"),
    ranking: RankingService = Depends(get_ranking_service),
):
    """Top-N trié par score décroissant, à égalité le plus ancien d'abord."""
    try:
        count = clamp_count(count)
    except InvalidCountError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        top = await ranking.top_scores(count)
        total = await ranking.count_total_players()
    except RecordStoreError:
        raise HTTPException(status_code=500, detail="Failed to retrieve rankings")
    except Exception:
        logger.exception("Unexpected error while getting rankings", extra={"requested": count})
        raise HTTPException(status_code=500, detail="Failed to retrieve rankings")

    rankings = [
        LeaderboardEntry(
            rank=index + 1,
            player_name=record.player_name,
            player_score=record.player_score,
            created_at=record.created_at,
        )
        for index, record in enumerate(top)
    ]
    logger.info("Rankings served", extra={"returned": len(rankings), "requested": count})
    return GetRankingsResponse(
        rankings=rankings,
        # total indisponible -> on retombe sur la taille de la liste
        total_count=total if total > 0 else len(rankings),
        requested_count=count,
    )
