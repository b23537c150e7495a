"""
Configuration de l'application (Settings)
=========================================

Rôle
----
- Centraliser les paramètres du service (nom, host/port, MongoDB, CORS, logs).
- Les valeurs par défaut conviennent pour un déploiement derrière nginx.
- Les variables peuvent être surchargées via un fichier `.env` ou l'environnement.

Intégrations
------------
- `pydantic-settings` charge automatiquement les variables d'env et `.env`.
- Les services/routers importent `from app.config.settings import settings`.
- `resolve_connection_string()` est appelé une seule fois, à la création du store.

Chaîne de connexion MongoDB
---------------------------
1) fichier secret monté (`MONGODB_CONNECTION_STRING_FILE`, ex: Docker secret),
2) sinon variable d'environnement `MONGODB_CONNECTION_STRING`,
3) sinon `ConfigurationError`.

Exemples de `.env`
------------------
APP_NAME="Leaderboard API (Staging)"
ENVIRONMENT="development"
MONGODB_CONNECTION_STRING="mongodb://localhost:27017"
MONGODB_DATABASE_NAME="leaderboard"
MONGODB_COLLECTION_NAME="records"
ALLOWED_ORIGINS='["https://itch.io"]'
"""
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Configuration incomplète (ex: aucune chaîne de connexion MongoDB)."""


class Settings(BaseSettings):
    # Nom du service (apparaît dans /health)
    APP_NAME: str = "Leaderboard API"
    # Bind réseau (FastAPI / Uvicorn)
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    # "development" active la redirection HTTPS (en prod, nginx termine le SSL)
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    # MongoDB
    MONGODB_CONNECTION_STRING: Optional[str] = None
    MONGODB_CONNECTION_STRING_FILE: str = "/run/secrets/mongodb_connection_string"
    MONGODB_DATABASE_NAME: str = "leaderboard"
    MONGODB_COLLECTION_NAME: str = "records"

    # CORS : itch.io et ses sous-domaines uniquement
    ALLOWED_ORIGINS: List[str] = ["https://itch.io"]
    ALLOWED_ORIGIN_REGEX: Optional[str] = r"https://([a-z0-9-]+\.)*itch\.io"

    # Paramétrage pydantic-settings :
    # - lit le fichier .env (UTF-8) si présent
    # - ignore les clés supplémentaires pour éviter les erreurs
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "development"


def _read_secret_file(path: str) -> Optional[str]:
    """Contenu du fichier secret (strip), ou None s'il est absent/vide/illisible."""
    if not path:
        return None
    secret = Path(path)
    if not secret.is_file():
        return None
    try:
        value = secret.read_text(encoding="utf-8").strip()
    except OSError:
        return None
    return value or None


def resolve_connection_string(cfg: "Settings") -> str:
    """
    Résout la chaîne de connexion MongoDB (fichier secret puis variable d'env).
    Lève `ConfigurationError` si aucune source n'est renseignée.
    """
    from_file = _read_secret_file(cfg.MONGODB_CONNECTION_STRING_FILE)
    if from_file:
        return from_file
    from_env = (cfg.MONGODB_CONNECTION_STRING or "").strip()
    if from_env:
        return from_env
    raise ConfigurationError(
        "MongoDB connection string not found (secret file or MONGODB_CONNECTION_STRING)"
    )


# Instance unique importable partout : `settings`
settings = Settings()
