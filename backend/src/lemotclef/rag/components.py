"""
Composants RAG — embedding HuggingFace + FAISS (HNSW, produit scalaire).

Les imports faiss / llama_index sont faits à l'appel : l'API démarre sans
charger les modèles tant que l'index d'archives n'est pas interrogé.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .config import DB_DIR, EMBEDDING_DIM, EMBEDDING_MODEL_NAME

logger = logging.getLogger(__name__)

INDEX_FILENAME = "faiss_index.bin"
DOCSTORE_FILENAME = "docstore.json"


def _db_dir(db_dir: Optional[Path]) -> Path:
    return Path(db_dir) if db_dir is not None else DB_DIR


def index_exists(db_dir: Optional[Path] = None) -> bool:
    """True si un index persisté (docstore + FAISS) est présent."""
    path = _db_dir(db_dir)
    return (path / DOCSTORE_FILENAME).exists() and (path / INDEX_FILENAME).exists()


def get_embedding_model():
    from llama_index.embeddings.huggingface import HuggingFaceEmbedding
    return HuggingFaceEmbedding(model_name=EMBEDDING_MODEL_NAME)


def init_settings():
    from llama_index.core import Settings
    Settings.embed_model = get_embedding_model()
    # Pas de LLM llama_index : la description des images passe par le SDK
    Settings.llm = None


def get_vector_store(db_dir: Optional[Path] = None):
    """
    Returns a FaissVectorStore.
    If the index file exists, loads it. Otherwise, creates a new HNSW index.
    """
    import faiss
    from llama_index.vector_stores.faiss import FaissVectorStore

    path = _db_dir(db_dir)
    path.mkdir(parents=True, exist_ok=True)
    index_file = path / INDEX_FILENAME

    if index_file.exists():
        try:
            faiss_index = faiss.read_index(str(index_file))
            return FaissVectorStore(faiss_index=faiss_index)
        except Exception as e:
            logger.warning("Could not load existing index: %s. Creating new one.", e)

    faiss_index = faiss.IndexHNSWFlat(EMBEDDING_DIM, 32, faiss.METRIC_INNER_PRODUCT)
    return FaissVectorStore(faiss_index=faiss_index)


def get_storage_context(db_dir: Optional[Path] = None):
    from llama_index.core import StorageContext

    path = _db_dir(db_dir)
    vector_store = get_vector_store(path)
    if os.path.exists(path / DOCSTORE_FILENAME):
        return StorageContext.from_defaults(vector_store=vector_store, persist_dir=str(path))
    return StorageContext.from_defaults(vector_store=vector_store)


def save_index(index, db_dir: Optional[Path] = None):
    import faiss

    path = _db_dir(db_dir)
    index.storage_context.persist(persist_dir=str(path))
    if hasattr(index.vector_store, "client"):
        faiss.write_index(index.vector_store.client, str(path / INDEX_FILENAME))
