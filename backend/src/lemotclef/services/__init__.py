"""
Services — Accès aux fournisseurs externes et au stockage.

- llm_clients       : clients LLM (Groq / Azure OpenAI)
- image_generation  : chaîne fal.ai (flux/dev → flux/schnell → fast-sdxl)
- video_generation  : animation image → vidéo
- web_search        : images d'archives réelles (SerpAPI)
- word_store        : cache des mots (SQLAlchemy)
- asset_storage     : persistance des images / vidéos
- studio            : clips Veo en parallèle
- mock_data         : réponses [MOCK] sans clé API
"""

from .asset_storage import AssetStorage
from .image_generation import GeneratedImage, ImageGenerator
from .llm_clients import get_chat_client, get_sdk_client, llm_available
from .mock_data import MOCK_MARKER
from .studio import Studio, parse_scenes
from .video_generation import VideoAnimator
from .web_search import WebImageSearch
from .word_store import WordStore, clean_slug

__all__ = [
    "AssetStorage",
    "GeneratedImage",
    "ImageGenerator",
    "get_chat_client",
    "get_sdk_client",
    "llm_available",
    "MOCK_MARKER",
    "Studio",
    "parse_scenes",
    "VideoAnimator",
    "WebImageSearch",
    "WordStore",
    "clean_slug",
]
