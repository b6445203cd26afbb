"""
Database — Connexion centralisée au cache des mots (SQLAlchemy).

SQLite en local par défaut, PostgreSQL en production (DATABASE_URL).

Usage:
    from backend.src.lemotclef.core.database import get_session_factory
"""

import logging
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from backend.src.lemotclef.core.settings import settings

logger = logging.getLogger(__name__)

# ---------- Engine (créé une seule fois au démarrage) ----------

_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # Les handlers FastAPI tournent dans un thread pool
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_size": 10, "max_overflow": 20, "pool_pre_ping": True}


def init_db() -> None:
    """Initialise le moteur et la session factory. Appelé au startup FastAPI."""
    global _engine, _SessionLocal
    if _engine is not None:
        return
    if not settings.DATABASE_URL:
        logger.warning("DATABASE_URL non configurée — cache des mots désactivé.")
        return
    _engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))
    _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine, expire_on_commit=False)
    logger.info("✅ Database engine initialisé.")


def close_db() -> None:
    """Ferme proprement le pool de connexions. Appelé au shutdown FastAPI."""
    global _engine, _SessionLocal
    if _engine:
        _engine.dispose()
        logger.info("🔒 Database engine fermé.")
    _engine = None
    _SessionLocal = None


def get_session_factory() -> Optional[sessionmaker]:
    """Retourne la session factory (initialise le moteur au besoin)."""
    if _SessionLocal is None:
        init_db()
    return _SessionLocal


def check_connection() -> bool:
    """Vérifie que la base est accessible."""
    if _engine is None:
        return False
    try:
        with _engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("DB health check échoué: %s", e)
        return False
