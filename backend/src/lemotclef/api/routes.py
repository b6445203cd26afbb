"""
Routes API — Endpoints HTTP de Le Mot Clef.

Les services (pipeline de recherche, réalisateur, générateurs, studio) sont
instanciés une seule fois (lazy singleton) et injectés via FastAPI Depends(),
ce qui permet de les remplacer dans les tests (app.dependency_overrides).

Format d'erreur unique : {"error": "<message>"} avec statut 400 / 500.
"""

import asyncio
import logging
import threading
from typing import Any, Callable, Iterator, List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse, JSONResponse, StreamingResponse

from backend.src.lemotclef.core.database import check_connection, get_session_factory
from backend.src.lemotclef.core.security import sanitize_user_input
from backend.src.lemotclef.core.settings import settings
from backend.src.lemotclef.graphs.nodes import David
from backend.src.lemotclef.graphs.prompts import CHAT_SYSTEM_PROMPT
from backend.src.lemotclef.graphs.search_flow import SearchFlow
from backend.src.lemotclef.services.asset_storage import AssetStorage
from backend.src.lemotclef.services.image_generation import ImageGenerator
from backend.src.lemotclef.services.llm_clients import get_chat_client, llm_available
from backend.src.lemotclef.services.mock_data import mock_chat_reply, mock_image, mock_video_url
from backend.src.lemotclef.services.studio import Studio
from backend.src.lemotclef.services.video_generation import VideoAnimator
from backend.src.lemotclef.services.word_store import WordStore
from .schemas import (
    AnimateRequest,
    ChatRequest,
    DirectorRequest,
    GenerateImageRequest,
    HealthResponse,
    RootResponse,
    SearchRequest,
    StudioRequest,
)

logger = logging.getLogger("LeMotClef.API")

router = APIRouter()


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# ── Dependencies : services (lazy singletons, thread-safe) ──

class _LazySingleton:
    """Instancié une seule fois, au premier appel. Un échec n'est pas mis en cache."""

    def __init__(self, name: str, factory: Callable[[], Any]):
        self.name = name
        self.factory = factory
        self._instance = None
        self._lock = threading.Lock()

    def get(self):
        if self._instance is not None:
            return self._instance
        with self._lock:
            # Double-check after acquiring lock
            if self._instance is not None:
                return self._instance
            try:
                self._instance = self.factory()
                logger.info("%s loaded successfully.", self.name)
            except Exception as e:
                logger.warning("Failed to load %s: %s", self.name, e, exc_info=True)
                return None
            return self._instance


def _build_word_store() -> WordStore:
    return WordStore(session_factory=get_session_factory(), asset_storage=_asset_storage.get())


def _build_search_flow() -> SearchFlow:
    archive_index = None
    if settings.RAG_ENABLED:
        from backend.src.lemotclef.rag.archive_index import ArchiveIndex
        archive_index = ArchiveIndex()
    return SearchFlow(word_store=_word_store.get(), archive_index=archive_index)


_asset_storage = _LazySingleton("AssetStorage", AssetStorage)
_word_store = _LazySingleton("WordStore", _build_word_store)
_search_flow = _LazySingleton("SearchFlow", _build_search_flow)
_director = _LazySingleton("David", David)
_image_generator = _LazySingleton("ImageGenerator", ImageGenerator)
_video_animator = _LazySingleton("VideoAnimator", VideoAnimator)
_studio = _LazySingleton("Studio", Studio)


def _required(singleton: _LazySingleton):
    instance = singleton.get()
    if instance is None:
        raise HTTPException(status_code=503, detail=f"{singleton.name} unavailable. Retrying on next request.")
    return instance


def get_asset_storage() -> AssetStorage:
    return _required(_asset_storage)


def get_word_store() -> Optional[WordStore]:
    """Peut être None : sans base, les assets ne sont simplement pas rattachés."""
    return _word_store.get()


def get_search_flow() -> SearchFlow:
    return _required(_search_flow)


def get_director() -> David:
    return _required(_director)


def get_image_generator() -> ImageGenerator:
    return _required(_image_generator)


def get_video_animator() -> VideoAnimator:
    return _required(_video_animator)


def get_studio() -> Studio:
    return _required(_studio)


def get_chat_llm():
    """Client LangChain du chat ; None sans clé (réponse mock)."""
    if not llm_available():
        return None
    return get_chat_client()


# ── Routes ──────────────────────────────────────────────────

@router.post("/api/search", response_model=None)
async def search_word(req: SearchRequest, flow: SearchFlow = Depends(get_search_flow)):
    """Recherche d'un mot : cache, sinon Cledor → Cora → visuels → cache."""
    word = sanitize_user_input(req.word or "", max_length=100)
    if not word:
        return _error("Word is required", 400)

    logger.info("[API/search] Processing search for: %s", word)
    try:
        return await asyncio.to_thread(flow.run, word)
    except Exception as e:
        logger.error("[API/search] Error: %s", e, exc_info=True)
        return _error(str(e), 500)


@router.post("/api/director", response_model=None)
async def direct_video(req: DirectorRequest, director: David = Depends(get_director)):
    """David : timeline vidéo 12 scènes. Une sortie illisible → 500."""
    word = sanitize_user_input(req.word or "", max_length=100)
    if not word:
        return _error("Word is required", 400)

    try:
        return await asyncio.to_thread(director.direct, word, req.cledor, req.cora)
    except Exception as e:
        logger.error("[API/director] Error: %s", e)
        return _error(str(e), 500)


@router.post("/api/generate-image", response_model=None)
async def generate_image(req: GenerateImageRequest, generator: ImageGenerator = Depends(get_image_generator)):
    prompt = sanitize_user_input(req.prompt or "")
    if not prompt:
        return _error("Prompt is required", 400)

    if not generator.enabled:
        return mock_image(settings.PLACEHOLDER_IMAGE)

    image = await asyncio.to_thread(generator.generate, prompt)
    if image is None:
        return _error("Image generation failed for every model", 500)
    return {"output": image.url, "model": image.model}


@router.post("/api/animate", response_model=None)
async def animate_image(
    req: AnimateRequest,
    animator: VideoAnimator = Depends(get_video_animator),
    word_store: Optional[WordStore] = Depends(get_word_store),
):
    if not req.prompt or not req.image_url:
        return _error("Missing prompt or image_url", 400)

    if not animator.enabled:
        return {"video_url": mock_video_url()}

    logger.info("[API/animate] Starting generation... %s", req.prompt[:60])
    try:
        video_url = await asyncio.to_thread(animator.animate, req.prompt, req.image_url)
    except Exception as e:
        logger.error("[API/animate] Error: %s", e)
        return _error(str(e), 500)
    if not video_url:
        return _error("No video returned", 500)

    if req.word and word_store is not None:
        stored = await asyncio.to_thread(word_store.update_word_asset, req.word, "video_url", video_url)
        video_url = stored or video_url
    return {"video_url": video_url}


def _to_chat_messages(messages: List[Any]) -> List[Tuple[str, str]]:
    converted = [("system", CHAT_SYSTEM_PROMPT)]
    for message in messages:
        if not isinstance(message, dict) or not message.get("content"):
            continue
        role = message.get("role", "user")
        if role not in ("user", "assistant", "system"):
            role = "user"
        converted.append((role, str(message["content"])))
    return converted


def _stream_chat(llm, messages: List[Tuple[str, str]]) -> Iterator[str]:
    try:
        for chunk in llm.stream(messages):
            if chunk.content:
                yield chunk.content
    except Exception as e:
        # Les en-têtes sont déjà partis : on ne peut que couper le flux
        logger.error("[API/chat] Stream interrompu: %s", e, exc_info=True)


@router.post("/api/chat", response_model=None)
async def chat(req: ChatRequest, llm=Depends(get_chat_llm)):
    if not req.messages or not isinstance(req.messages, list):
        return _error("Messages array is required", 400)

    if llm is None:
        return StreamingResponse(iter([mock_chat_reply()]), media_type="text/plain; charset=utf-8")

    logger.info("[API/chat] Processing %d messages", len(req.messages))
    return StreamingResponse(
        _stream_chat(llm, _to_chat_messages(req.messages)),
        media_type="text/plain; charset=utf-8",
    )


@router.post("/api/studio", response_model=None)
async def studio(req: StudioRequest, studio_service: Studio = Depends(get_studio)):
    """Clips Veo en parallèle. Toujours 200 : liste de résultats ou objet d'erreur."""
    return await asyncio.to_thread(studio_service.run, req.prompts)


# ── Assets persistés ────────────────────────────────────────

_MEDIA_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".mp4": "video/mp4",
}


@router.get("/api/v1/assets/{asset_path:path}")
async def download_asset(asset_path: str, storage: AssetStorage = Depends(get_asset_storage)):
    try:
        file_path = storage.resolve(asset_path)
    except ValueError:
        return _error("Invalid asset path", 400)

    if not file_path.exists():
        return _error("Asset not found", 404)
    return FileResponse(
        path=str(file_path),
        media_type=_MEDIA_TYPES.get(file_path.suffix.lower(), "application/octet-stream"),
    )


# ── Health / Root ───────────────────────────────────────────

@router.get("/health", response_model=HealthResponse)
def health_check():
    """Health check : base du cache + disponibilité LLM."""
    db_ok = check_connection()
    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        database="connected" if db_ok else "unavailable",
        llm="configured" if llm_available() else "mock",
        version=settings.APP_VERSION,
    )


@router.get("/", response_model=RootResponse)
def root():
    return RootResponse(name=settings.APP_NAME, version=settings.APP_VERSION)
