"""
Schémas Pydantic - Modèles Request/Response pour l'API Le Mot Clef

Les champs d'entrée sont optionnels : leur absence est signalée par la route
elle-même en 400 {"error": ...}, pas par une 422 de validation.
"""

from pydantic import BaseModel
from typing import Optional, Dict, Any


# ============================================
# REQUEST MODELS
# ============================================

class SearchRequest(BaseModel):
    word: Optional[str] = None


class DirectorRequest(BaseModel):
    word: Optional[str] = None
    cledor: Optional[Dict[str, Any]] = None
    cora: Optional[Dict[str, Any]] = None


class GenerateImageRequest(BaseModel):
    prompt: Optional[str] = None


class AnimateRequest(BaseModel):
    prompt: Optional[str] = None
    image_url: Optional[str] = None
    word: Optional[str] = None  # Si présent : la vidéo est rattachée au mot en cache


class ChatRequest(BaseModel):
    messages: Optional[Any] = None  # Liste de {"role", "content"}


class StudioRequest(BaseModel):
    prompts: Optional[Any] = None  # Chaîne JSON '{"scenes": [...]}'


# ============================================
# RESPONSE MODELS
# ============================================

class HealthResponse(BaseModel):
    status: str
    database: str
    llm: str
    version: str


class RootResponse(BaseModel):
    name: str = "Le Mot Clef"
    version: str = "1.0.0"
    status: str = "running"
    docs: str = "/docs"
