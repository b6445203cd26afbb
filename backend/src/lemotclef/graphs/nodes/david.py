"""
David — Le réalisateur.

Écrit la timeline d'une vidéo verticale de 12 scènes (VideoScript) à partir
de Cledor et Cora. Contrairement aux personas de recherche, un script
inexploitable n'est PAS substitué : l'erreur remonte (LLMOutputError).
"""

import json
import logging
from typing import Any, Dict, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import ValidationError

from backend.src.lemotclef.graphs.prompts import DAVID_SYSTEM_PROMPT, DAVID_USER_TEMPLATE
from backend.src.lemotclef.graphs.schemas import VideoScript
from backend.src.lemotclef.services.llm_clients import get_chat_client, llm_available
from backend.src.lemotclef.services.mock_data import mock_video_script
from backend.src.lemotclef.utils.llm_json import LLMOutputError, parse_llm_json

logger = logging.getLogger("Persona.David")


class David:
    def __init__(self, llm=None, model_name: Optional[str] = None):
        if llm is not None:
            self.llm = llm
        elif llm_available():
            self.llm = get_chat_client(model_name=model_name)
        else:
            self.llm = None

    def direct(
        self,
        word: str,
        cledor: Optional[Dict[str, Any]] = None,
        cora: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Raises:
            LLMOutputError: JSON irréparable ou timeline non conforme.
            Exception: erreurs du provider LLM, propagées telles quelles.
        """
        if self.llm is None:
            logger.info("Pas de clé LLM : script mock pour '%s'", word)
            return mock_video_script(word)

        logger.info("🎬 [Director] Action ! Script pour : %s", word)
        user_prompt = DAVID_USER_TEMPLATE.format(
            word=word,
            cledor_json=json.dumps(cledor or {}, ensure_ascii=False),
            cora_json=json.dumps(cora or {}, ensure_ascii=False),
        )
        response = self.llm.invoke(
            [SystemMessage(content=DAVID_SYSTEM_PROMPT), HumanMessage(content=user_prompt)]
        )
        content = response.content
        text = content if isinstance(content, str) else json.dumps(content)

        try:
            script = VideoScript.model_validate(parse_llm_json(text))
        except LLMOutputError:
            logger.error("Director JSON Repair Failed for '%s'", word)
            raise
        except ValidationError as e:
            logger.error("Director timeline invalide pour '%s': %s", word, e)
            raise LLMOutputError(f"Invalid video script: {e.error_count()} validation error(s)") from e
        return script.model_dump()
