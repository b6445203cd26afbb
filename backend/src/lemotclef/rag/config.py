from pathlib import Path

from backend.src.lemotclef.core.settings import settings

# Dossier de l'index FAISS + docstore llama_index
DB_DIR = Path(settings.ARCHIVE_INDEX_DIR)

# Model Config — single source of truth from settings
EMBEDDING_MODEL_NAME = settings.EMBEDDING_MODEL
EMBEDDING_DIM = settings.EMBEDDING_DIM
VISION_MODEL_NAME = settings.VISION_MODEL

# Retrieval : une seule archive, et seulement si elle est assez proche
TOP_K_RETRIEVAL = 1
MIN_SCORE = settings.RAG_MIN_SCORE

ARCHIVE_DOC_TYPE = "real_archive"

VISION_PROMPT = (
    "Analyze this image for an art history archive. Return a JSON object with: "
    "1. `detailed_description`: A visual description of the scene, people, clothing, and objects. "
    "2. `mood`: The atmosphere. "
    "3. `era_markers`: Specific visual cues indicating the date. "
    "4. `tags`: A list of keywords."
)
