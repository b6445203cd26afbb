"""
LLM JSON - Nettoyage et réparation de la sortie texte des modèles
==================================================================

Les modèles renvoient souvent du JSON "presque valide" : entouré de
blocs markdown, précédé d'un commentaire, virgule traînante, guillemets
manquants. Ce module applique toujours la même séquence :

    fences ```json → premier objet complet → bloc {...} → json.loads → (json_repair)
"""

import json
import logging
import re
from typing import Any, Union

from json_repair import repair_json

logger = logging.getLogger("LeMotClef.LLMJson")

_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)
_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")
_DECODER = json.JSONDecoder()


class LLMOutputError(ValueError):
    """La sortie du modèle ne peut pas être convertie en JSON exploitable."""


def strip_markdown_fences(text: str) -> str:
    """Retire les balises ```json / ``` ajoutées par les LLM."""
    if not text:
        return ""
    return _FENCE_PATTERN.sub("", text).strip()


def extract_json_block(text: str) -> str:
    """Isole le plus grand bloc {...} du texte ; renvoie le texte tel quel sinon."""
    if text.lstrip().startswith("["):
        return text.strip()
    match = _OBJECT_PATTERN.search(text)
    return match.group(0) if match else text.strip()


def _decode_first_value(text: str) -> Any:
    """Premier objet / tableau JSON complet du texte (la prose qui suit est ignorée)."""
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return None
    # Première ouverture seulement, jamais un tableau interne d'un objet cassé
    try:
        value, _ = _DECODER.raw_decode(text, min(starts))
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, (dict, list)) else None


def parse_llm_json(text: str, repair: bool = True) -> Union[dict, list]:
    """
    Convertit la sortie d'un LLM en objet JSON.

    Args:
        text: sortie brute du modèle.
        repair: tente json_repair si json.loads échoue. Désactivé pour les
            entrées qui doivent être strictement valides (studio).

    Raises:
        LLMOutputError si rien d'exploitable n'en sort.
    """
    cleaned = strip_markdown_fences(text)
    if not cleaned:
        raise LLMOutputError("Empty model output")

    first = _decode_first_value(cleaned)
    if first is not None:
        return first

    candidate = extract_json_block(cleaned)
    try:
        parsed: Any = json.loads(candidate)
    except json.JSONDecodeError as e:
        if not repair:
            raise LLMOutputError(str(e)) from e
        logger.debug("json.loads failed (%s), trying json_repair", e)
        parsed = repair_json(candidate, return_objects=True)
        # json_repair renvoie {} / "" quand il n'a rien trouvé
        if parsed == {} or parsed == []:
            raise LLMOutputError(f"Unusable JSON from model output: {cleaned[:80]!r}")

    if not isinstance(parsed, (dict, list)):
        raise LLMOutputError(f"Unusable JSON from model output: {cleaned[:80]!r}")
    return parsed


__all__ = [
    "LLMOutputError",
    "strip_markdown_fences",
    "extract_json_block",
    "parse_llm_json",
]
