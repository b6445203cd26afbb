"""
Cledor — L'étymologiste.

Produit l'analyse structurée d'un mot (CledorResponse) en mode JSON.
Toute erreur (réseau, JSON illisible, schéma incomplet) est substituée par
mock_cledor : la recherche aboutit toujours.
"""

import json
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from backend.src.lemotclef.core.settings import settings
from backend.src.lemotclef.graphs.prompts import (
    CLEDOR_ARCHIVE_CONTEXT_TEMPLATE,
    CLEDOR_SYSTEM_PROMPT,
    CLEDOR_USER_TEMPLATE,
)
from backend.src.lemotclef.graphs.schemas import CledorResponse
from backend.src.lemotclef.services.llm_clients import get_sdk_client, llm_available, sdk_model_name
from backend.src.lemotclef.services.mock_data import mock_cledor
from backend.src.lemotclef.utils.llm_json import LLMOutputError, parse_llm_json

logger = logging.getLogger("Persona.Cledor")


class Cledor:
    def __init__(self, llm_client=None, model_name: Optional[str] = None):
        self.model = sdk_model_name(model_name)
        if llm_client is not None:
            self.llm = llm_client
        elif llm_available():
            self.llm = get_sdk_client()
        else:
            self.llm = None

    @staticmethod
    def _archive_context(prior_art: Optional[Dict[str, Any]]) -> str:
        if not prior_art or not prior_art.get("description"):
            return ""
        return CLEDOR_ARCHIVE_CONTEXT_TEMPLATE.format(
            description=prior_art["description"],
            mood=prior_art.get("mood") or "inconnue",
            era_markers=", ".join(prior_art.get("era_markers") or []) or "aucun",
        )

    def analyze(self, word: str, prior_art: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if self.llm is None:
            logger.info("Pas de clé LLM : analyse mock pour '%s'", word)
            return mock_cledor(word)

        user_prompt = CLEDOR_USER_TEMPLATE.format(
            word=word, archive_context=self._archive_context(prior_art)
        )
        try:
            completion = self.llm.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": CLEDOR_SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=settings.LLM_TEMPERATURE,
                response_format={"type": "json_object"},
            )
            raw = completion.choices[0].message.content or ""
            parsed = parse_llm_json(raw)
            return CledorResponse.model_validate(parsed).model_dump()
        except (LLMOutputError, ValidationError) as e:
            logger.warning("Cledor: sortie inexploitable pour '%s' (%s), bascule mock", word, e)
        except Exception as e:
            logger.warning("Cledor: appel LLM échoué pour '%s' (%s), bascule mock", word, e)
        return mock_cledor(word)

    @staticmethod
    def to_context(cledor: Dict[str, Any]) -> str:
        """Sérialisation passée en contexte aux personas suivantes."""
        return json.dumps(cledor, ensure_ascii=False)
