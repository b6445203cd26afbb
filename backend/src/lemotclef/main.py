"""
Le Mot Clef Backend — Point d'entrée FastAPI.

Responsabilités :
  1. Configurer le logging
  2. Créer l'app FastAPI avec métadonnées
  3. Ajouter middlewares (CORS, error handlers)
  4. Brancher le lifecycle (startup → init DB ; shutdown → close DB)
  5. Inclure les routes
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.src.lemotclef.api.routes import router

from backend.src.lemotclef.core.settings import settings
from backend.src.lemotclef.core.logger import get_logger, setup_logging
from backend.src.lemotclef.core.database import init_db, close_db
from backend.src.lemotclef.core.tracing import init_tracing


# ── Lifecycle ────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / Shutdown hooks."""
    setup_logging()
    logger = get_logger("LeMotClef")
    logger.info("🚀 Starting Le Mot Clef v%s …", settings.APP_VERSION)
    if not settings.llm_enabled:
        logger.warning("Aucune clé LLM : les personas répondront en mode [MOCK].")
    if not settings.studio_enabled:
        logger.info("Studio sans identifiants Google : clips [MOCK].")

    init_db()
    init_tracing()

    yield  # ← app is running

    close_db()
    logger.info("🛑 Le Mot Clef stopped.")


# ── App Factory ──────────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    description="Étymologie, images et scripts vidéo générés par IA pour les mots français",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# ── Middlewares ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Corps illisible → 400 au format {"error": ...}, comme les autres erreurs d'entrée."""
    logging.getLogger("LeMotClef").info("Invalid body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """503 (service indisponible), 404 de routage… au même format {"error": ...}."""
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all pour les erreurs non gérées → JSON propre."""
    logging.getLogger("LeMotClef").error(
        "Unhandled error on %s %s: %s",
        request.method, request.url.path, exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error. Please try again later."},
    )


# ── Routes ───────────────────────────────────────────────────

app.include_router(router)


# ── Standalone runner ────────────────────────────────────────
if __name__ == "__main__":
    uvicorn.run(
        "backend.src.lemotclef.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
