"""
Configuration des logs (stdlib `logging`).

- `configure_logging(level)` installe un handler console unique sur le logger racine.
- Chaque module utilise `logging.getLogger(__name__)` et passe le contexte via `extra={...}`.
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Idempotent : ne rajoute pas de handler si le root en a déjà un (uvicorn, pytest...)."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
