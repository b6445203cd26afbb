"""
Web Image Search — Recherche d'une image d'archive réelle (SerpAPI, Google Images).

Retourne l'URL originale du premier résultat, None sinon.
"""

import logging
from typing import Optional

import requests

from backend.src.lemotclef.core.settings import settings

logger = logging.getLogger("LeMotClef.WebSearch")


class WebImageSearch:
    def __init__(self, api_key: Optional[str] = None, endpoint: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key if api_key is not None else settings.SERPAPI_API_KEY
        self.endpoint = endpoint or settings.SERPAPI_ENDPOINT
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def search_image(self, query: str) -> Optional[str]:
        if not self.enabled or not query:
            return None

        params = {
            "engine": "google_images",
            "q": query,
            "api_key": self.api_key,
            "hl": "fr",
        }
        try:
            response = requests.get(self.endpoint, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning("SerpAPI indisponible pour '%s' : %s", query, e)
            return None

        if data.get("error"):
            logger.warning("SerpAPI error: %s", data["error"])
            return None

        results = data.get("images_results") or []
        if not results:
            logger.info("Aucune image web pour '%s'", query)
            return None
        return results[0].get("original") or results[0].get("thumbnail")


__all__ = ["WebImageSearch"]
