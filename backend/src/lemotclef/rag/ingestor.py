"""
Archive Ingestor — Description des images d'archives et indexation FAISS.

Pour chaque entrée {"id", "url"} d'un manifeste :
    1. le modèle vision décrit l'image (JSON : description, mood, era_markers, tags)
    2. la description est embarquée (HuggingFace) et insérée dans l'index
    3. l'index est persisté (docstore + faiss_index.bin)

Idempotent : un id déjà indexé est ignoré.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from backend.src.lemotclef.services.llm_clients import get_sdk_client, sdk_model_name
from backend.src.lemotclef.utils.llm_json import LLMOutputError, parse_llm_json
from .components import get_storage_context, index_exists, init_settings, save_index
from .config import ARCHIVE_DOC_TYPE, DB_DIR, VISION_MODEL_NAME, VISION_PROMPT

logger = logging.getLogger(__name__)


class ArchiveIngestor:
    def __init__(self, sdk_client=None, db_dir: Optional[Path] = None, vision_model: Optional[str] = None):
        self.client = sdk_client or get_sdk_client()
        self.db_dir = Path(db_dir) if db_dir is not None else DB_DIR
        self.vision_model = sdk_model_name(vision_model or VISION_MODEL_NAME)

    def describe_image(self, image_url: str) -> Optional[Dict[str, Any]]:
        logger.info("Analyzing %s...", image_url)
        try:
            completion = self.client.chat.completions.create(
                model=self.vision_model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": VISION_PROMPT},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    }
                ],
                temperature=0.2,
                max_tokens=1024,
                response_format={"type": "json_object"},
            )
            analysis = parse_llm_json(completion.choices[0].message.content or "")
        except LLMOutputError as e:
            logger.warning("Vision output unusable for %s: %s", image_url, e)
            return None
        except Exception as e:
            logger.error("Vision model error for %s: %s", image_url, e)
            return None
        return analysis if isinstance(analysis, dict) else None

    def build_document(self, entry_id: str, image_url: str, analysis: Dict[str, Any]):
        from llama_index.core import Document

        doc = Document(
            text=analysis.get("detailed_description", ""),
            doc_id=entry_id,
            metadata={
                "url": image_url,
                "mood": analysis.get("mood", ""),
                "era_markers": [str(m) for m in analysis.get("era_markers") or []],
                "tags": [str(t) for t in analysis.get("tags") or []],
                "type": ARCHIVE_DOC_TYPE,
            },
        )
        # L'embedding porte sur la description, pas sur l'URL
        doc.excluded_embed_metadata_keys = ["url", "type"]
        return doc

    def _load_or_create_index(self):
        from llama_index.core import VectorStoreIndex, load_index_from_storage

        storage_context = get_storage_context(self.db_dir)
        if index_exists(self.db_dir):
            try:
                return load_index_from_storage(storage_context)
            except Exception as e:
                logger.info("Pas d'index exploitable (%s). Création d'un nouvel index FAISS.", e)
        return VectorStoreIndex([], storage_context=storage_context)

    def ingest(self, entries: Iterable[Dict[str, str]]) -> Dict[str, Any]:
        """
        Returns:
            {"indexed": [...ids], "skipped": [...ids], "failed": [...ids]}
        """
        init_settings()
        index = self._load_or_create_index()
        existing = set(index.ref_doc_info.keys())

        summary: Dict[str, List[str]] = {"indexed": [], "skipped": [], "failed": []}
        for entry in entries:
            entry_id, image_url = entry.get("id"), entry.get("url")
            if not entry_id or not image_url:
                logger.warning("Entrée de manifeste invalide : %s", entry)
                summary["failed"].append(str(entry_id or image_url or "?"))
                continue
            if entry_id in existing:
                summary["skipped"].append(entry_id)
                continue

            analysis = self.describe_image(image_url)
            if not analysis or not analysis.get("detailed_description"):
                summary["failed"].append(entry_id)
                continue

            index.insert(self.build_document(entry_id, image_url, analysis))
            existing.add(entry_id)
            summary["indexed"].append(entry_id)
            logger.info("Upserted %s", entry_id)

        if summary["indexed"]:
            save_index(index, self.db_dir)
            logger.info("✅ Sauvegarde terminée dans %s", self.db_dir)
        else:
            logger.info("✅ L'index est déjà à jour.")
        return summary


__all__ = ["ArchiveIngestor"]
