"""
Models / score.py
Rôle:
- Schémas d'entrée/sortie de l'API `/Score` (sérialisation camelCase).

Notes:
- Les noms Python restent en snake_case; `alias_generator=to_camel` produit les clés JSON
  (`playerName`, `totalPlayers`, ...). `populate_by_name` permet la construction côté code.
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SCORE_MIN = -(2**31)
SCORE_MAX = 2**31 - 1


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScoreSubmissionRequest(CamelModel):
    """Corps de POST /Score/submit-score."""
    player_name: str | None = None  # validé par le service (vide/espaces → 400)
    # bornes int32 : hors plage -> RequestValidationError (400) avant tout accès Mongo
    player_score: int = Field(default=0, ge=SCORE_MIN, le=SCORE_MAX)


class ScoreSubmissionResponse(CamelModel):
    message: str
    rank: int
    total_players: int


class LeaderboardEntry(CamelModel):
    rank: int  # position 1-based dans la liste renvoyée
    player_name: str
    player_score: int
    created_at: datetime


class GetRankingsResponse(CamelModel):
    rankings: List[LeaderboardEntry] = Field(default_factory=list)
    total_count: int
    requested_count: int
