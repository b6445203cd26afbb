"""
Archive Index — "Prior art" visuel pour la recherche d'un mot.

Interroge l'index FAISS des archives réelles (images décrites par le modèle
vision à l'ingestion) et renvoie la plus proche, si elle dépasse le score
minimal. Index absent ou RAG désactivé → None.
"""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from backend.src.lemotclef.core.settings import settings
from .components import (
    DOCSTORE_FILENAME,
    INDEX_FILENAME,
    get_storage_context,
    index_exists,
    init_settings,
)
from .config import DB_DIR, MIN_SCORE, TOP_K_RETRIEVAL

logger = logging.getLogger(__name__)


@dataclass
class ArchiveMatch:
    id: str
    url: str
    description: str
    score: float
    mood: str = ""
    era_markers: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)


class ArchiveIndex:
    def __init__(
        self,
        db_dir: Optional[Path] = None,
        min_score: Optional[float] = None,
        enabled: Optional[bool] = None,
    ):
        self.db_dir = Path(db_dir) if db_dir is not None else DB_DIR
        self.min_score = min_score if min_score is not None else MIN_SCORE
        self.enabled = enabled if enabled is not None else settings.RAG_ENABLED
        self._index = None
        # mtime des fichiers au dernier échec de chargement : pas de nouvel essai tant qu'il ne change pas
        self._failed_mtime: Optional[float] = None
        self._lock = threading.Lock()

    def _index_mtime(self) -> float:
        return max(
            (self.db_dir / name).stat().st_mtime for name in (INDEX_FILENAME, DOCSTORE_FILENAME)
        )

    def _get_index(self):
        if self._index is not None:
            return self._index
        # Index absent : re-vérifié à chaque appel, l'ingestion peut le créer à chaud
        if not index_exists(self.db_dir):
            logger.debug("Aucun index d'archives dans %s", self.db_dir)
            return None
        mtime = self._index_mtime()
        if self._failed_mtime == mtime:
            return None

        with self._lock:
            if self._index is not None or self._failed_mtime == mtime:
                return self._index
            try:
                from llama_index.core import load_index_from_storage

                init_settings()
                storage_context = get_storage_context(self.db_dir)
                self._index = load_index_from_storage(storage_context)
                self._failed_mtime = None
                logger.info("📚 Index d'archives chargé depuis %s", self.db_dir)
            except Exception as e:
                logger.warning("Error loading archive index: %s", e)
                self._failed_mtime = mtime
        return self._index

    def search_nearest(self, query: str) -> Optional[ArchiveMatch]:
        if not self.enabled or not query:
            return None
        index = self._get_index()
        if index is None:
            return None

        try:
            nodes = index.as_retriever(similarity_top_k=TOP_K_RETRIEVAL).retrieve(query)
        except Exception as e:
            logger.warning("Archive search failed for '%s': %s", query, e)
            return None
        if not nodes:
            return None

        best = nodes[0]
        score = float(best.score or 0.0)
        if score < self.min_score:
            logger.info("[Archive] Meilleur score %.3f < %.2f pour '%s'", score, self.min_score, query)
            return None

        metadata = best.node.metadata or {}
        logger.info("[Archive] Match %s (score=%.3f)", best.node.node_id, score)
        return ArchiveMatch(
            id=best.node.node_id,
            url=metadata.get("url", ""),
            description=metadata.get("description") or best.node.get_content(),
            score=score,
            mood=metadata.get("mood", ""),
            era_markers=list(metadata.get("era_markers") or []),
            tags=list(metadata.get("tags") or []),
        )


__all__ = ["ArchiveIndex", "ArchiveMatch"]
