"""
Asset Storage — Persistance des images / vidéos générées.

Les URLs renvoyées par fal.ai ou SerpAPI sont temporaires (ou hors de notre
contrôle). On télécharge le fichier une fois, on l'écrit sous
ASSET_STORAGE_DIR et on renvoie une URL servie par /api/v1/assets/.
"""

import logging
import re
from pathlib import Path
from typing import Optional

import requests

from backend.src.lemotclef.core.settings import settings

logger = logging.getLogger("LeMotClef.Assets")

# Chemins relatifs autorisés : words/<slug>/<fichier>.<ext>
_ASSET_PATH_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+(/[A-Za-z0-9_\-]+)*\.[A-Za-z0-9]{2,5}$")


class AssetStorage:
    """Stockage local des assets, exposé en HTTP par l'API."""

    def __init__(
        self,
        root_dir: Optional[str] = None,
        public_prefix: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.root = Path(root_dir or settings.ASSET_STORAGE_DIR).resolve()
        self.public_prefix = (public_prefix or settings.ASSET_PUBLIC_PREFIX).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self.root.mkdir(parents=True, exist_ok=True)

    def public_url(self, path: str) -> str:
        return f"{self.public_prefix}/{path}"

    def persist_asset(self, url: str, path: str) -> str:
        """
        Télécharge `url` vers `<root>/<path>` et renvoie l'URL permanente.

        - URL déjà servie par nous, ou placeholder local ("/...") : inchangée.
        - Échec (réseau, chemin invalide) : on garde l'URL temporaire.
        """
        if not url or url.startswith("/") or url.startswith(self.public_prefix):
            return url
        if not url.startswith(("http://", "https://")):
            return url

        try:
            target = self.resolve(path)
            logger.info("Persisting asset to %s...", path)
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(response.content)
        except Exception as e:
            logger.error("Asset persistence failed: %s", e)
            return url

        perm_url = self.public_url(path)
        logger.info("Asset persisted: %s", perm_url)
        return perm_url

    def resolve(self, path: str) -> Path:
        """Chemin absolu d'un asset ; ValueError si le chemin sort du stockage."""
        if not _ASSET_PATH_PATTERN.match(path or ""):
            raise ValueError(f"Invalid asset path: {path!r}")
        file_path = (self.root / path).resolve()
        if not str(file_path).startswith(str(self.root)):
            raise ValueError(f"Invalid asset path: {path!r}")
        return file_path


__all__ = ["AssetStorage"]
