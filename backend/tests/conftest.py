"""
Configuration pytest — isole la suite de tout service externe.

Les variables d'environnement sont fixées AVANT le premier import de
`settings` : base SQLite temporaire, stockage d'assets temporaire, aucune
clé API (toutes les personas passent en mode [MOCK]), RAG désactivé.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="lemotclef-tests-")

os.environ.update(
    {
        "DATABASE_URL": f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}",
        "ASSET_STORAGE_DIR": os.path.join(_TMP_DIR, "assets"),
        "ARCHIVE_INDEX_DIR": os.path.join(_TMP_DIR, "archive_index"),
        "LLM_PROVIDER": "groq",
        "LEMOTCLEF_APIKEY": "",
        "GROQ_API_KEY": "",
        "AZURE_OPENAI_API_KEY": "",
        "AZURE_OPENAI_ENDPOINT": "",
        "FAL_KEY": "",
        "SERPAPI_API_KEY": "",
        "GOOGLE_CLOUD_PROJECT_ID": "",
        "GOOGLE_ACCESS_TOKEN": "",
        "RAG_ENABLED": "false",
        "LANGCHAIN_TRACING_V2": "false",
        "SENTRY_DSN": "",
    }
)

from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402


@pytest.fixture
def cledor_payload():
    return {
        "meta": {"word": "canapé", "ipa": "/ka.na.pe/", "part_of_speech": "nom masculin"},
        "root_analysis": {
            "root": "kônôpeion",
            "original_meaning": "moustiquaire",
            "concept": "Moustiquaire",
        },
        "narrative_chronology": [
            {
                "era": "Grèce antique",
                "form": "kônôpeion",
                "meaning": "lit entouré d'une moustiquaire",
                "story": "Le kônôps, c'est le moustique.",
            },
            {
                "era": "XVIIe siècle",
                "form": "canapé",
                "meaning": "long siège à dossier",
                "story": "Le voile disparaît, le meuble reste.",
            },
        ],
        "semantic_soul": {
            "description": "Un siège né d'une guerre contre les moustiques.",
            "mnemonic": "Canapé : on s'y cache des moustiques.",
        },
        "visual_prompt": "ancient greek bed draped with a mosquito net, engraving",
    }


@pytest.fixture
def cora_payload():
    return {
        "curator_comment": "Le voile d'abord, le meuble ensuite.",
        "flux_generation": {
            "concept": "Moustiquaire",
            "prompt": "greek daybed under a sheer conopeum, archival photo",
            "aspect_ratio": "16:9",
        },
        "serp_search": {
            "intent": "archive",
            "queries": ["conopeum engraving museum", "antique mosquito net bed"],
        },
    }


@pytest.fixture
def make_completion():
    """Fabrique de réponses SDK `chat.completions.create` minimales."""
    def _make(content: str):
        return MagicMock(choices=[MagicMock(message=MagicMock(content=content))])
    return _make
