"""
Studio — Génération parallèle des clips vidéo d'un script (Vertex AI / Veo).

Entrée : une chaîne JSON produite par le réalisateur,
    '{"scenes": [{"prompt": "..."}, {"prompt": "..."}]}'
Sortie : une liste de résultats par scène (même ordre, même nombre),
ou un objet {"error": ...}. Ne lève jamais.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Tuple, Union

import requests

from backend.src.lemotclef.core.settings import settings
from backend.src.lemotclef.utils.llm_json import strip_markdown_fences
from .mock_data import mock_clip

logger = logging.getLogger("LeMotClef.Studio")

PARSE_ERROR = "Failed to parse JSON input. Ensure 'The Video Director' outputs strict JSON."
NO_SCENES_ERROR = "No scenes found in the input JSON."
MAX_WORKERS = 8


def parse_scenes(prompts: Any) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
    """
    Parse strict (pas de réparation) : un script mal formé doit être refait,
    pas deviné.

    Returns:
        (scenes, None) si OK, ([], error_object) sinon.
    """
    if not isinstance(prompts, str):
        return [], {"error": PARSE_ERROR, "details": "prompts must be a JSON string"}
    try:
        data = json.loads(strip_markdown_fences(prompts))
    except json.JSONDecodeError as e:
        return [], {"error": PARSE_ERROR, "details": str(e)}

    scenes = data.get("scenes") if isinstance(data, dict) else None
    if not scenes or not isinstance(scenes, list):
        return [], {"error": NO_SCENES_ERROR}
    return scenes, None


def _scene_prompt(scene: Any) -> str:
    if isinstance(scene, dict):
        return str(scene.get("prompt") or "")
    return str(scene)


class Studio:
    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        access_token: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.project_id = project_id if project_id is not None else settings.GOOGLE_CLOUD_PROJECT_ID
        self.location = location or settings.GOOGLE_CLOUD_LOCATION
        self.access_token = access_token if access_token is not None else settings.GOOGLE_ACCESS_TOKEN
        self.model = model or settings.VEO_MODEL
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT

    @property
    def enabled(self) -> bool:
        return bool(self.project_id and self.access_token)

    @property
    def endpoint(self) -> str:
        return (
            f"https://{self.location}-aiplatform.googleapis.com/v1/projects/{self.project_id}"
            f"/locations/{self.location}/publishers/google/models/{self.model}:predict"
        )

    def generate_clip(self, scene: Any, index: int) -> Dict[str, Any]:
        prompt = _scene_prompt(scene)
        if not self.enabled:
            return mock_clip(index, prompt)

        payload = {
            "instances": [
                {
                    "prompt": prompt,
                    "aspectRatio": settings.STUDIO_ASPECT_RATIO,
                    "durationSeconds": settings.STUDIO_CLIP_DURATION,
                }
            ],
            "parameters": {"sampleCount": 1},
        }
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json; charset=utf-8",
        }
        try:
            response = requests.post(self.endpoint, json=payload, headers=headers, timeout=self.timeout)
            if not response.ok:
                raise RuntimeError(f"API Error {response.status_code}: {response.text}")
            predictions = response.json().get("predictions") or []
            first = predictions[0] if predictions else None
            if isinstance(first, dict):
                video_uri = first.get("videoUri") or first
            else:
                video_uri = first or "Error: No URI returned"
            return {
                "scene_index": index,
                "prompt": prompt,
                "video_uri": video_uri,
                "status": "success",
            }
        except Exception as e:
            logger.error("Error generating scene %s: %s", index, e)
            return {"scene_index": index, "status": "error", "error": str(e)}

    def run(self, prompts: Any) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
        scenes, error = parse_scenes(prompts)
        if error:
            logger.warning("Studio: entrée rejetée (%s)", error["error"])
            return error

        logger.info("🎞️ Studio : %d scènes en parallèle", len(scenes))
        with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(scenes))) as executor:
            futures = [executor.submit(self.generate_clip, scene, i) for i, scene in enumerate(scenes)]
            return [future.result() for future in futures]


__all__ = ["Studio", "parse_scenes", "PARSE_ERROR", "NO_SCENES_ERROR"]
