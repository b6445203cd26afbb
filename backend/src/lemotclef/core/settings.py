"""
Settings — Configuration centralisée Le Mot Clef (Pydantic Settings).

Toute la configuration passe par ici. Plus jamais de os.getenv() éparpillé.
Une clé absente n'empêche jamais le démarrage : le service concerné bascule
sur son chemin "mock" / fallback.

Usage:
    from backend.src.lemotclef.core.settings import settings
    print(settings.DATABASE_URL)
"""

import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration centralisée, lue depuis les variables d'env / .env."""

    # --- API ---
    APP_NAME: str = "Le Mot Clef"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    # Niveau des loggers du projet (LeMotClef.*, Persona.*, modules) ; DEBUG=true force "DEBUG"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "app.log"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: list[str] = ["*"]

    # --- LLM (Provider-agnostic) ---
    # Valeurs possibles : "groq", "azure"
    LLM_PROVIDER: str = "groq"
    LEMOTCLEF_APIKEY: str = ""
    GROQ_API_KEY: str = ""
    # Cledor / Cora / David
    LLM_MODEL: str = "llama-3.3-70b-versatile"
    # Appels courts (diagnostic)
    LLM_MODEL_FAST: str = "llama-3.1-8b-instant"
    LLM_TEMPERATURE: float = 0.7
    # Description des images d'archives (ingestion RAG)
    VISION_MODEL: str = "llama-3.2-11b-vision-preview"

    @property
    def llm_api_key(self) -> str:
        """Retourne la clé API LLM disponible (Groq ou générique)."""
        return self.LEMOTCLEF_APIKEY or self.GROQ_API_KEY

    # --- Azure OpenAI (utilisé si LLM_PROVIDER=azure) ---
    AZURE_OPENAI_API_KEY: str = ""
    AZURE_OPENAI_ENDPOINT: str = ""
    AZURE_OPENAI_DEPLOYMENT_NAME: str = "gpt-4o"
    AZURE_OPENAI_API_VERSION: str = "2024-05-01-preview"

    @property
    def llm_enabled(self) -> bool:
        """True si le provider configuré dispose de ses identifiants."""
        if self.LLM_PROVIDER == "azure":
            return bool(self.AZURE_OPENAI_API_KEY and self.AZURE_OPENAI_ENDPOINT)
        return bool(self.llm_api_key)

    # --- Génération d'images / vidéo (fal.ai) ---
    FAL_KEY: str = ""
    # Chaîne de repli : primaire → secondaire → tertiaire
    IMAGE_MODELS: list[str] = [
        "fal-ai/flux/dev",
        "fal-ai/flux/schnell",
        "fal-ai/fast-sdxl",
    ]
    IMAGE_SIZE: str = "landscape_16_9"
    VIDEO_MODEL: str = "fal-ai/minimax/video-01/image-to-video"

    # --- Recherche web d'images (SerpAPI) ---
    SERPAPI_API_KEY: str = ""
    SERPAPI_ENDPOINT: str = "https://serpapi.com/search.json"

    # --- Studio (Vertex AI / Veo) ---
    GOOGLE_CLOUD_PROJECT_ID: str = ""
    GOOGLE_CLOUD_LOCATION: str = "us-central1"
    GOOGLE_ACCESS_TOKEN: str = ""
    VEO_MODEL: str = "veo-001"
    STUDIO_CLIP_DURATION: int = 6
    STUDIO_ASPECT_RATIO: str = "9:16"

    @property
    def studio_enabled(self) -> bool:
        return bool(self.GOOGLE_CLOUD_PROJECT_ID and self.GOOGLE_ACCESS_TOKEN)

    # --- Database (cache des mots) ---
    DATABASE_URL: str = "sqlite:///./lemotclef.db"

    # --- Stockage des assets (images / vidéos persistées) ---
    ASSET_STORAGE_DIR: str = "./asset_storage"
    ASSET_PUBLIC_PREFIX: str = "/api/v1/assets"
    PLACEHOLDER_IMAGE: str = "/placeholder_history.jpg"

    # --- RAG (archives visuelles) ---
    RAG_ENABLED: bool = True
    ARCHIVE_INDEX_DIR: str = "./archive_index"
    EMBEDDING_MODEL: str = "sentence-transformers/all-MiniLM-L6-v2"
    EMBEDDING_DIM: int = 384
    RAG_MIN_SCORE: float = 0.35

    # --- HTTP (appels requests directs) ---
    HTTP_TIMEOUT: float = 30.0

    # --- LangSmith / Observabilité ---
    LANGCHAIN_TRACING_V2: bool = False
    LANGCHAIN_API_KEY: str = ""
    LANGCHAIN_PROJECT: str = "lemotclef"
    LANGCHAIN_ENDPOINT: str = "https://api.smith.langchain.com"
    LANGSMITH_API_KEY: str = ""

    @property
    def langsmith_enabled(self) -> bool:
        """True si le tracing LangSmith est activé et configuré."""
        key = self.LANGCHAIN_API_KEY or self.LANGSMITH_API_KEY
        return bool(self.LANGCHAIN_TRACING_V2 and key)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # --- Sentry (observabilité erreurs) ---
    SENTRY_DSN: str = ""
    SENTRY_ENVIRONMENT: str = "development"

# Singleton — importable partout
settings = Settings()


# ── LangSmith : exporter les variables d'environnement ───────────────
# LangChain / LangGraph lisent ces variables automatiquement.
def _bootstrap_langsmith():
    if not settings.langsmith_enabled:
        return
    _key = settings.LANGCHAIN_API_KEY or settings.LANGSMITH_API_KEY
    os.environ.setdefault("LANGCHAIN_TRACING_V2", "true")
    os.environ.setdefault("LANGCHAIN_API_KEY", _key)
    os.environ.setdefault("LANGCHAIN_PROJECT", settings.LANGCHAIN_PROJECT)
    os.environ.setdefault("LANGCHAIN_ENDPOINT", settings.LANGCHAIN_ENDPOINT)

_bootstrap_langsmith()
