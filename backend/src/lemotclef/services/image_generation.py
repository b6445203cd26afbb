"""
Image Generation — Chaîne de modèles fal.ai (primaire → secondaire → tertiaire).

Le premier modèle qui renvoie une image gagne. Chaque échec est logué puis
on passe au suivant ; si toute la chaîne échoue → None.
Sans FAL_KEY → None, aucun appel réseau.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import fal_client

from backend.src.lemotclef.core.settings import settings

logger = logging.getLogger("LeMotClef.ImageGen")

# Paramètres spécifiques par modèle (le reste reçoit le socle commun)
MODEL_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "fal-ai/flux/dev": {"num_inference_steps": 28, "guidance_scale": 3.5},
    "fal-ai/flux/schnell": {"num_inference_steps": 4},
}


@dataclass
class GeneratedImage:
    url: str
    model: str


def _log_queue_update(update) -> None:
    if isinstance(update, fal_client.InProgress):
        for log in update.logs or []:
            logger.debug("[fal] %s", log.get("message"))


class ImageGenerator:
    """Fallback chain sur settings.IMAGE_MODELS."""

    def __init__(self, models: Optional[List[str]] = None, api_key: Optional[str] = None):
        self.models = list(models or settings.IMAGE_MODELS)
        self.api_key = api_key if api_key is not None else settings.FAL_KEY
        self._client = None

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _get_client(self):
        if self._client is None:
            self._client = fal_client.SyncClient(key=self.api_key)
        return self._client

    def _arguments(self, model: str, prompt: str) -> Dict[str, Any]:
        args: Dict[str, Any] = {
            "prompt": prompt,
            "image_size": settings.IMAGE_SIZE,
            "enable_safety_checker": True,
        }
        args.update(MODEL_OVERRIDES.get(model, {}))
        return args

    def _run_model(self, model: str, prompt: str) -> Optional[str]:
        result = self._get_client().subscribe(
            model,
            arguments=self._arguments(model, prompt),
            with_logs=True,
            on_queue_update=_log_queue_update,
        )
        images = (result or {}).get("images") or []
        if images and images[0].get("url"):
            return images[0]["url"]
        return None

    def generate(self, prompt: str) -> Optional[GeneratedImage]:
        if not self.enabled:
            logger.info("FAL_KEY absent, génération d'image désactivée.")
            return None
        if not prompt:
            return None

        logger.info("🎨 Génération d'image : %s...", prompt[:30])
        for model in self.models:
            try:
                url = self._run_model(model, prompt)
            except Exception as e:
                logger.warning("Modèle %s en échec : %s", model, e)
                continue
            if url:
                logger.info("✅ Image générée par %s", model)
                return GeneratedImage(url=url, model=model)
            logger.warning("Modèle %s : aucune image renvoyée", model)

        logger.error("Toute la chaîne de génération d'image a échoué.")
        return None


__all__ = ["ImageGenerator", "GeneratedImage", "MODEL_OVERRIDES"]
