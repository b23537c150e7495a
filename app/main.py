"""
Application FastAPI : point d'entrée
====================================

Rôle
----
- Instancie l'app FastAPI, configure le CORS (itch.io + sous-domaines),
- Monte les routeurs REST (`/Score`, `/health`),
- Crée l'index du classement et liste les routes au démarrage.

Notes
-----
- ⚠️ Le middleware CORS doit être ajouté AVANT les include_router.
- La redirection HTTPS n'est active qu'en développement (nginx termine le SSL en prod).
- Les erreurs de validation FastAPI (corps absent/mal typé, `count` non entier) sont
  renvoyées en 400 et non 422.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware
from fastapi.responses import JSONResponse

from app.routes.score import router as score_router
from app.routes.health import router as health_router

from app.config.logging_setup import configure_logging
from app.config.settings import ConfigurationError, Settings, settings
from app.services.record_store import RecordStoreError, close_record_store, get_record_store

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# --- App FastAPI principale  ---
app = FastAPI(title=settings.APP_NAME)


# ===========================
# CORS / HTTPS
# ===========================
def install_middlewares(target: FastAPI, cfg: Settings) -> None:
    """
    Le dernier middleware ajouté est le plus externe : HTTPS d'abord, CORS ensuite,
    pour que les redirections de dev portent aussi les en-têtes CORS.
    """
    if cfg.is_development:
        target.add_middleware(HTTPSRedirectMiddleware)
    target.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.ALLOWED_ORIGINS,          # ← whitelist explicite
        allow_origin_regex=cfg.ALLOWED_ORIGIN_REGEX,  # ← sous-domaines *.itch.io
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


install_middlewares(app, settings)

# ===========================
# Montage des routers
# ===========================
app.include_router(score_router)
app.include_router(health_router)


# ===========================
# Gestion d'erreurs globale
# ===========================
@app.exception_handler(RequestValidationError)
async def validation_error_as_400(request: Request, exc: RequestValidationError):
    logger.warning("Invalid request", extra={"path": request.url.path, "errors": exc.errors()})
    return JSONResponse(status_code=400, content={"detail": "Invalid request"})


@app.exception_handler(ConfigurationError)
async def configuration_error_as_500(request: Request, exc: ConfigurationError):
    logger.error("Service misconfigured", extra={"path": request.url.path, "reason": str(exc)})
    return JSONResponse(status_code=500, content={"detail": "Failed"})


# --- Racine utile pour "ping" simple (sans /health) ---
@app.get("/")
async def root():
    """Ping basique : permet de vérifier que l'app tourne (sans dépendance Mongo)."""
    return {"ok": True, "service": "leaderboard-api"}


# --- Hooks de démarrage / arrêt ---
@app.on_event("startup")
async def startup():
    """
    Au démarrage:
    - crée l'index (PlayerScore desc, CreatedAt asc) si possible (échec journalisé, non bloquant),
    - liste les routes (path + méthodes) dans les logs (diagnostic).
    """
    try:
        await get_record_store().ensure_indexes()
    except (ConfigurationError, RecordStoreError) as exc:
        logger.warning("Index bootstrap skipped", extra={"reason": str(exc)})

    for r in app.routes:
        methods = getattr(r, "methods", None)
        logger.info("Route %s %s", getattr(r, "path", "?"), sorted(methods) if methods else "")


@app.on_event("shutdown")
async def shutdown():
    await close_record_store()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
