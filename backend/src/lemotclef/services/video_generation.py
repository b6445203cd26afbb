"""Video Generation — Animation image → vidéo via fal.ai (Minimax par défaut)."""

import logging
from typing import Optional

import fal_client

from backend.src.lemotclef.core.settings import settings

logger = logging.getLogger("LeMotClef.VideoGen")


class VideoAnimator:
    def __init__(self, model: Optional[str] = None, api_key: Optional[str] = None):
        self.model = model or settings.VIDEO_MODEL
        self.api_key = api_key if api_key is not None else settings.FAL_KEY
        self._client = None

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _get_client(self):
        if self._client is None:
            self._client = fal_client.SyncClient(key=self.api_key)
        return self._client

    def animate(self, prompt: str, image_url: str) -> Optional[str]:
        """
        Anime `image_url` selon `prompt`. Retourne l'URL de la vidéo, ou None
        si le modèle ne renvoie rien. Les erreurs SDK remontent à l'appelant
        (la route les transforme en 500).
        """
        if not self.enabled:
            return None

        logger.info("🎬 Animation en cours (%s) : %s", self.model, prompt[:60])
        result = self._get_client().subscribe(
            self.model,
            arguments={"prompt": prompt, "image_url": image_url},
            with_logs=True,
        )
        video = (result or {}).get("video") or {}
        return video.get("url")


__all__ = ["VideoAnimator"]
