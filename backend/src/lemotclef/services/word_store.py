"""
Word Store — Cache "cache-or-fetch" des mots déjà recherchés.

Un mot = un enregistrement `words/<slug>` :
    slug, term, etymology (payload complet renvoyé au client), created_at

Cycle de vie : créé à la première recherche réussie, mis à jour quand un
asset (image, vidéo) est persisté, jamais supprimé.
"""

import logging
import re
import unicodedata
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.orm import sessionmaker

from backend.src.lemotclef.core.database import get_session_factory
from .asset_storage import AssetStorage
from .models import Base, WordRecord

logger = logging.getLogger("LeMotClef.WordStore")

ASSET_TYPES = ("image_url", "video_url")

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]")
# NFKD ne décompose pas les ligatures
_LIGATURES = str.maketrans({"œ": "oe", "Œ": "OE", "æ": "ae", "Æ": "AE"})


def clean_slug(term: str) -> str:
    """
    "Canapé " → "canape" ; "Pomme de terre" → "pomme-de-terre" ; "cœur" → "coeur".

    Les accents sont repliés avant le remplacement, chaque autre caractère
    hors [a-z0-9] devient un tiret. Aucun caractère utile → "".
    """
    if not term:
        return ""
    folded = unicodedata.normalize("NFKD", term.translate(_LIGATURES))
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    slug = _NON_SLUG_CHARS.sub("-", folded.lower().strip())
    return slug if slug.strip("-") else ""


class WordStore:
    """
    Accès au cache des mots.

    Toutes les erreurs base de données sont loguées et absorbées :
    un cache indisponible ne doit jamais casser une recherche.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        asset_storage: Optional[AssetStorage] = None,
    ):
        self.SessionLocal = session_factory or get_session_factory()
        if self.SessionLocal is None:
            raise ValueError("WordStore: aucune base configurée (DATABASE_URL).")
        self.assets = asset_storage or AssetStorage()

        bind = self.SessionLocal.kw.get("bind")
        try:
            Base.metadata.create_all(bind, checkfirst=True)
        except Exception as e:
            logger.warning("DB schema sync (non-fatal): %s", e)

    # 1. Lecture du cache
    def get_cached_word(self, term: str) -> Optional[Dict[str, Any]]:
        slug = clean_slug(term)
        if not slug:
            return None

        session = self.SessionLocal()
        try:
            record = session.get(WordRecord, slug)
            if record is None:
                logger.info("[Cache Miss] Word: %s", slug)
                return None
            logger.info("[Cache Hit] Word: %s", slug)
            return record.to_dict()
        except Exception as e:
            logger.error("Error reading cache: %s", e)
            return None
        finally:
            session.close()

    # 2. Nouveau mot (persiste l'image principale d'abord)
    def save_word_to_cache(self, term: str, data: Dict[str, Any]) -> None:
        slug = clean_slug(term)
        if not slug:
            return

        etymology = dict(data)
        if etymology.get("image_url"):
            etymology["image_url"] = self.assets.persist_asset(
                etymology["image_url"], f"words/{slug}/image_main.jpg"
            )

        session = self.SessionLocal()
        try:
            session.merge(
                WordRecord(
                    slug=slug,
                    term=etymology.get("word") or term,
                    etymology=etymology,
                    created_at=datetime.now(timezone.utc),
                )
            )
            session.commit()
            logger.info("[Cache Saved] Word: %s", slug)
        except Exception as e:
            session.rollback()
            logger.error("Error saving to cache: %s", e)
        finally:
            session.close()

    # 3. Mise à jour d'un asset (image / vidéo)
    def update_word_asset(self, term: str, asset_type: str, url: str) -> Optional[str]:
        """Retourne l'URL enregistrée (permanente si persistée), None sinon."""
        if asset_type not in ASSET_TYPES:
            raise ValueError(f"asset_type must be one of {ASSET_TYPES}, got {asset_type!r}")
        slug = clean_slug(term)
        if not slug:
            return None

        perm_url = url
        if asset_type == "video_url":
            perm_url = self.assets.persist_asset(url, f"words/{slug}/video_main.mp4")

        session = self.SessionLocal()
        try:
            record = session.get(WordRecord, slug)
            if record is None:
                logger.warning("Asset update skipped, word not cached: %s", slug)
                return None
            # Réaffectation complète : la colonne JSON n'est pas mutable-tracked
            etymology = dict(record.etymology or {})
            etymology[asset_type] = perm_url
            record.etymology = etymology
            session.commit()
            logger.info("[Asset Updated] %s for %s", asset_type, slug)
            return perm_url
        except Exception as e:
            session.rollback()
            logger.error("Error updating asset: %s", e)
            return None
        finally:
            session.close()


__all__ = ["WordStore", "clean_slug", "ASSET_TYPES"]
