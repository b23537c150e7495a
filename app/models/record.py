"""
Models / record.py
Rôle:
- Définir un enregistrement de score tel que persisté dans MongoDB.

Champs:
- id: identifiant opaque attribué par le store (ObjectId sérialisé en str).
- player_name: nom du joueur (non vide).
- player_score: score entier (négatif ou nul accepté).
- created_at: horodatage UTC de création, sert de départage à score égal.

Notes:
- Les clés du document Mongo gardent la casse historique (`PlayerName`, `PlayerScore`, `CreatedAt`).
- `created_at` est tronqué à la milliseconde : c'est la précision stockée par MongoDB,
  la valeur en mémoire reste donc égale à la valeur persistée.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

FIELD_ID = "_id"
FIELD_PLAYER_NAME = "PlayerName"
FIELD_PLAYER_SCORE = "PlayerScore"
FIELD_CREATED_AT = "CreatedAt"


def utc_now_ms() -> datetime:
    """Horloge serveur (UTC) à la milliseconde."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def _as_utc(value: datetime) -> datetime:
    # pymongo renvoie des datetimes naïfs (UTC) sans tz_aware=True
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ScoreRecord(BaseModel):
    """Un score soumis par un joueur (immuable une fois créé)."""
    id: Optional[str] = None  # None tant que le store ne l'a pas inséré
    player_name: str
    player_score: int
    created_at: datetime = Field(default_factory=utc_now_ms)

    def to_document(self) -> Dict[str, Any]:
        """Document Mongo à insérer (sans `_id`, attribué par le serveur)."""
        return {
            FIELD_PLAYER_NAME: self.player_name,
            FIELD_PLAYER_SCORE: self.player_score,
            FIELD_CREATED_AT: self.created_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "ScoreRecord":
        raw_id = doc.get(FIELD_ID)
        return cls(
            id=str(raw_id) if raw_id is not None else None,
            player_name=doc.get(FIELD_PLAYER_NAME, ""),
            player_score=int(doc.get(FIELD_PLAYER_SCORE, 0)),
            created_at=_as_utc(doc[FIELD_CREATED_AT]),
        )
