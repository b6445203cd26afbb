"""
Core Module — Fondations transverses Le Mot Clef.

- settings  : Configuration centralisée (Pydantic Settings)
- database  : Connexion au cache des mots (SQLAlchemy)
- logger    : Logging unifié (stdlib + Sentry optionnel)
- security  : Sanitisation des entrées, masquage des clés
- tracing   : LangSmith (config injectable dans graph.invoke)
"""

from .settings import settings
from .logger import setup_logging, get_logger
from .database import init_db, close_db, get_session_factory, check_connection
from .security import sanitize_user_input, mask_secret
from .tracing import init_tracing, get_tracing_config

__all__ = [
    "settings",
    "setup_logging", "get_logger",
    "init_db", "close_db", "get_session_factory", "check_connection",
    "sanitize_user_input", "mask_secret",
    "init_tracing", "get_tracing_config",
]
