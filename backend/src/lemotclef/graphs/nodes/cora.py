"""
Cora — La curatrice visuelle.

À partir de l'analyse de Cledor : un prompt de génération d'image et des
requêtes de recherche d'images réelles (CoraResponse).
"""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from backend.src.lemotclef.core.settings import settings
from backend.src.lemotclef.graphs.prompts import CORA_SYSTEM_PROMPT, CORA_USER_TEMPLATE
from backend.src.lemotclef.graphs.schemas import CoraResponse
from backend.src.lemotclef.services.llm_clients import get_sdk_client, llm_available, sdk_model_name
from backend.src.lemotclef.services.mock_data import mock_cora
from backend.src.lemotclef.utils.llm_json import LLMOutputError, parse_llm_json
from .cledor import Cledor

logger = logging.getLogger("Persona.Cora")


def default_curation(word: str, cledor: Dict[str, Any]) -> Dict[str, Any]:
    """Curation déterministe dérivée de Cledor, utilisée quand Cora échoue."""
    root = (cledor.get("root_analysis") or {}).get("root") or word
    concept = (cledor.get("root_analysis") or {}).get("concept") or word
    prompt = cledor.get("visual_prompt") or f"authentic historical {root} artifact, museum lighting"
    return {
        "curator_comment": "",
        "flux_generation": {"concept": concept, "prompt": prompt, "aspect_ratio": "16:9"},
        "serp_search": {
            "intent": "archive",
            "queries": [f"authentic historical {root} artifact museum"],
        },
    }


class Cora:
    def __init__(self, llm_client=None, model_name: Optional[str] = None):
        self.model = sdk_model_name(model_name)
        if llm_client is not None:
            self.llm = llm_client
        elif llm_available():
            self.llm = get_sdk_client()
        else:
            self.llm = None

    def curate(self, word: str, cledor: Dict[str, Any]) -> Dict[str, Any]:
        if self.llm is None:
            return mock_cora(word, cledor)

        try:
            completion = self.llm.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": CORA_SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": CORA_USER_TEMPLATE.format(
                            word=word, cledor_json=Cledor.to_context(cledor)
                        ),
                    },
                ],
                temperature=settings.LLM_TEMPERATURE,
                response_format={"type": "json_object"},
            )
            parsed = parse_llm_json(completion.choices[0].message.content or "")
            return CoraResponse.model_validate(parsed).model_dump()
        except (LLMOutputError, ValidationError) as e:
            logger.warning("Cora: sortie inexploitable pour '%s' (%s), curation par défaut", word, e)
        except Exception as e:
            logger.warning("Cora: appel LLM échoué pour '%s' (%s), curation par défaut", word, e)
        return default_curation(word, cledor)
