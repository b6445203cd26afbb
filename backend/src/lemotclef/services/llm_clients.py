"""
LLM Clients — Couche d'abstraction LLM multi-provider.

Pivoter de fournisseur (Groq → Azure OpenAI) se fait UNIQUEMENT ici
+ dans settings.py / .env. Aucune persona ne connaît le provider.

Usage:
    from backend.src.lemotclef.services.llm_clients import get_chat_client, get_sdk_client

Providers supportés:
    - "groq"   : Groq Cloud (Llama 3.x)
    - "azure"  : Azure OpenAI (GPT-4o, GPT-4o-mini)

Sans identifiants, les builders lèvent RuntimeError : l'appelant vérifie
`llm_available()` et prend le chemin mock.
"""

import logging
from typing import Optional

from backend.src.lemotclef.core.settings import settings

logger = logging.getLogger(__name__)


def llm_available() -> bool:
    """True si le provider configuré a une clé (sinon : données mock)."""
    return settings.llm_enabled


def _require_credentials() -> None:
    if not llm_available():
        raise RuntimeError(
            f"LLM provider '{settings.LLM_PROVIDER}' non configuré (clé API absente)."
        )


def get_chat_client(
    model_name: Optional[str] = None,
    temperature: Optional[float] = None,
):
    """
    Retourne un client LangChain Chat (Runnable).

    Utilisé pour les appels conversationnels (David, /api/chat).
    Le provider est déterminé par settings.LLM_PROVIDER.
    """
    _require_credentials()
    _temp = temperature if temperature is not None else settings.LLM_TEMPERATURE

    if settings.LLM_PROVIDER == "azure":
        from langchain_openai import AzureChatOpenAI
        return AzureChatOpenAI(
            azure_deployment=settings.AZURE_OPENAI_DEPLOYMENT_NAME,
            openai_api_version=settings.AZURE_OPENAI_API_VERSION,
            azure_endpoint=settings.AZURE_OPENAI_ENDPOINT,
            api_key=settings.AZURE_OPENAI_API_KEY,
            temperature=_temp,
        )

    from langchain_groq import ChatGroq
    return ChatGroq(
        api_key=settings.llm_api_key,
        model_name=model_name or settings.LLM_MODEL,
        temperature=_temp,
    )


def get_sdk_client():
    """
    Retourne un SDK client brut (non-LangChain), interface
    `client.chat.completions.create(...)`.

    Utilisé par Cledor / Cora (mode JSON) et l'ingestion des archives.
    """
    _require_credentials()

    if settings.LLM_PROVIDER == "azure":
        from openai import AzureOpenAI
        return AzureOpenAI(
            api_key=settings.AZURE_OPENAI_API_KEY,
            api_version=settings.AZURE_OPENAI_API_VERSION,
            azure_endpoint=settings.AZURE_OPENAI_ENDPOINT,
        )

    from groq import Groq
    return Groq(api_key=settings.llm_api_key)


def sdk_model_name(model_name: Optional[str] = None) -> str:
    """Nom de modèle à passer au SDK (déploiement Azure ou modèle Groq)."""
    if settings.LLM_PROVIDER == "azure":
        return settings.AZURE_OPENAI_DEPLOYMENT_NAME
    return model_name or settings.LLM_MODEL


__all__ = [
    "llm_available",
    "get_chat_client",
    "get_sdk_client",
    "sdk_model_name",
]
