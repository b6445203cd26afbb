"""
Security Module — Hygiène des entrées pour Le Mot Clef.

Fournit :
- Sanitization des entrées utilisateur (mots, prompts)
- Masquage des clés API pour les logs / diagnostics
"""

import logging

logger = logging.getLogger(__name__)


def sanitize_user_input(text: str, max_length: int = 2000) -> str:
    """
    Nettoie l'entrée utilisateur :
    - Limite la longueur
    - Supprime les caractères de contrôle
    """
    if not text:
        return ""
    text = text[:max_length]
    # Supprimer les caractères de contrôle (sauf newline, tab)
    text = "".join(ch for ch in text if ch == "\n" or ch == "\t" or (ord(ch) >= 32))
    return text.strip()


def mask_secret(value: str, visible: int = 5) -> str:
    """`gsk_abcdef...` → `gsk_a…` ; chaîne vide si absent."""
    if not value:
        return ""
    return value[:visible] + "…"


__all__ = [
    "sanitize_user_input",
    "mask_secret",
]
