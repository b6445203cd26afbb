"""
Tracing — Intégration LangSmith pour Le Mot Clef.

- `init_tracing()`       → valide la connexion LangSmith au démarrage (main.py).
- `get_tracing_config()` → config injectable dans graph.invoke(state, config).

Usage :
    result = graph.invoke(state, get_tracing_config(run_name="search_flow.run", tags=["canape"]))
"""

import logging
from typing import Any, Dict, List, Optional

from .settings import settings

logger = logging.getLogger(__name__)

_ls_client = None


def get_ls_client():
    """Client LangSmith (singleton, lazy-init) ; None si non configuré."""
    global _ls_client
    if _ls_client is not None:
        return _ls_client
    if not settings.langsmith_enabled:
        return None

    try:
        from langsmith import Client
        _ls_client = Client()
        logger.info("✅ LangSmith client initialisé (projet: %s)", settings.LANGCHAIN_PROJECT)
    except Exception as e:
        logger.warning("⚠️  LangSmith client init échouée: %s", e)
        return None
    return _ls_client


def init_tracing() -> bool:
    if not settings.langsmith_enabled:
        logger.info("🔕 LangSmith tracing désactivé (LANGCHAIN_TRACING_V2 != true)")
        return False

    client = get_ls_client()
    if client is None:
        return False
    try:
        list(client.list_projects(limit=1))
    except Exception as e:
        logger.warning("⚠️  LangSmith health check échoué: %s", e)
        return False
    logger.info("✅ LangSmith connecté — projet: %s", settings.LANGCHAIN_PROJECT)
    return True


def get_tracing_config(
    run_name: Optional[str] = None,
    tags: Optional[List[str]] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    config: Dict[str, Any] = {"recursion_limit": 25}
    if not settings.langsmith_enabled:
        return config

    if run_name:
        config["run_name"] = run_name
    if tags:
        config["tags"] = tags
    if metadata:
        config["metadata"] = metadata
    return config


__all__ = ["get_ls_client", "init_tracing", "get_tracing_config"]
