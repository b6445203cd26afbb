"""
Logger centralisé pour Le Mot Clef.

Trois familles de loggers, réglées ensemble par LOG_LEVEL :
  - "LeMotClef.*"            → API, cache, assets, visuels
  - "Persona.*"              → Cledor, Cora, David
  - "backend.src.lemotclef.*" → modules nommés par __name__ (graphe, RAG, core)

Usage:
    from backend.src.lemotclef.core.logger import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys
from typing import Optional

from backend.src.lemotclef.core.settings import settings

PROJECT_LOGGERS = ("LeMotClef", "Persona", "backend.src.lemotclef")

# Bavards en INFO : requêtes HTTP sortantes, files d'attente fal, accès uvicorn
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "uvicorn.access", "fal_client", "sentence_transformers")

_configured = False


def project_log_level() -> int:
    """Niveau des loggers du projet : DEBUG si settings.DEBUG, sinon LOG_LEVEL (INFO si inconnu)."""
    if settings.DEBUG:
        return logging.DEBUG
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    return level if isinstance(level, int) else logging.INFO


def _init_sentry_if_needed() -> Optional[object]:
    """Sentry si `SENTRY_DSN` est défini : breadcrumbs dès INFO, événements dès ERROR."""
    dsn = settings.SENTRY_DSN
    if not dsn:
        return None

    import sentry_sdk
    from sentry_sdk.integrations.logging import LoggingIntegration

    try:
        sentry_sdk.init(
            dsn=dsn,
            integrations=[LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)],
            environment=settings.SENTRY_ENVIRONMENT,
            release=f"lemotclef@{settings.APP_VERSION}",
        )
    except Exception as e:
        # DSN invalide : on continue sans Sentry
        logging.getLogger("LeMotClef").warning("Sentry init failed: %s", e)
        return None

    # Filtrer les erreurs par fournisseur dans Sentry (groq / azure)
    sentry_sdk.set_tag("llm_provider", settings.LLM_PROVIDER)
    logging.getLogger("LeMotClef").info("Sentry initialized (%s)", settings.SENTRY_ENVIRONMENT)
    return sentry_sdk


def setup_logging() -> None:
    """Configure le logging une seule fois, appelé au startup (API ou scripts)."""
    global _configured
    if _configured:
        return

    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE, encoding="utf-8"))

    # Racine en WARNING : seules nos familles descendent à LOG_LEVEL
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )

    level = project_log_level()
    for name in PROJECT_LOGGERS:
        logging.getLogger(name).setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _init_sentry_if_needed()
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Retourne un logger standard Python, nommé par module."""
    return logging.getLogger(name)


__all__ = ["setup_logging", "get_logger", "project_log_level", "PROJECT_LOGGERS"]
