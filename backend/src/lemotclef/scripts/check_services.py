"""
Diagnostic des services externes Le Mot Clef

Affiche les clés configurées (masquées), puis teste :
  - SerpAPI (recherche d'une image d'exemple)
  - le LLM (complétion courte)
  - la liste des modèles disponibles chez le provider

Usage :
    python -m backend.src.lemotclef.scripts.check_services
"""

import sys
from typing import Dict, List, Optional

from backend.src.lemotclef.core.security import mask_secret
from backend.src.lemotclef.core.settings import settings
from backend.src.lemotclef.services.llm_clients import get_sdk_client, llm_available, sdk_model_name
from backend.src.lemotclef.services.web_search import WebImageSearch

SAMPLE_QUERY = "authentic historical canapé mosquito net engraving"


def configured_keys() -> Dict[str, str]:
    return {
        "LLM_PROVIDER": settings.LLM_PROVIDER,
        "LLM key": mask_secret(settings.llm_api_key or settings.AZURE_OPENAI_API_KEY),
        "FAL_KEY": mask_secret(settings.FAL_KEY),
        "SERPAPI_API_KEY": mask_secret(settings.SERPAPI_API_KEY),
        "GOOGLE_CLOUD_PROJECT_ID": settings.GOOGLE_CLOUD_PROJECT_ID,
        "GOOGLE_ACCESS_TOKEN": mask_secret(settings.GOOGLE_ACCESS_TOKEN),
        "DATABASE_URL": settings.DATABASE_URL.split("@")[-1],
    }


def check_serpapi(search: Optional[WebImageSearch] = None) -> Optional[bool]:
    search = search or WebImageSearch()
    if not search.enabled:
        return None
    url = search.search_image(SAMPLE_QUERY)
    if url:
        print(f"   ✅ SerpAPI : {url[:80]}")
        return True
    print("   ❌ SerpAPI : aucun résultat (voir logs)")
    return False


def check_llm(client=None) -> Optional[bool]:
    if client is None:
        if not llm_available():
            return None
        client = get_sdk_client()
    try:
        completion = client.chat.completions.create(
            model=sdk_model_name(settings.LLM_MODEL_FAST),
            messages=[{"role": "user", "content": "Réponds simplement : OK"}],
            max_tokens=5,
        )
        print(f"   ✅ LLM : {completion.choices[0].message.content!r}")
        return True
    except Exception as e:
        print(f"   ❌ LLM : {e}")
        return False


def list_models(client=None) -> List[str]:
    if client is None:
        if not llm_available():
            return []
        client = get_sdk_client()
    try:
        return sorted(model.id for model in client.models.list().data)
    except Exception as e:
        print(f"   ❌ Liste des modèles : {e}")
        return []


def main() -> int:
    print("=" * 60)
    print("🔎 LE MOT CLEF — DIAGNOSTIC DES SERVICES")
    print("=" * 60)

    print("\n🔑 Configuration :")
    for name, value in configured_keys().items():
        print(f"   - {name}: {value or '— (absent → mode [MOCK])'}")

    print("\n🌐 Tests :")
    results = {"serpapi": check_serpapi(), "llm": check_llm()}
    for name, ok in results.items():
        if ok is None:
            print(f"   ⏭️  {name} : non configuré")

    models = list_models()
    if models:
        print(f"\n📋 Modèles disponibles ({len(models)}) :")
        for model_id in models:
            print(f"   - {model_id}")

    failed = [name for name, ok in results.items() if ok is False]
    print("\n" + "=" * 60)
    print("❌ Échecs : " + ", ".join(failed) if failed else "✅ Diagnostic terminé")
    print("=" * 60)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
