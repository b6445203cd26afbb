"""
Mock Data — Réponses statiques quand une clé API manque ou qu'un appel échoue.

Chaque payload contient MOCK_MARKER dans un champ lisible, pour que le
client (et les tests de bout en bout) repère immédiatement une fausse réponse.
"""

from typing import Any, Dict

MOCK_MARKER = "[MOCK]"


def mock_cledor(word: str) -> Dict[str, Any]:
    return {
        "meta": {"word": word, "ipa": "", "part_of_speech": "nom"},
        "root_analysis": {
            "root": "Racine ancienne",
            "original_meaning": "Objet historique",
            "concept": "Objet historique",
        },
        "narrative_chronology": [
            {
                "era": "Antiquité",
                "form": word,
                "meaning": "Sens d'origine",
                "story": f"{MOCK_MARKER} Le mot '{word}' vient d'une racine ancienne. "
                         "(Configurez GROQ_API_KEY pour une vraie histoire.)",
            }
        ],
        "semantic_soul": {
            "description": f"{MOCK_MARKER} Le mot '{word}' vient d'une racine ancienne.",
            "mnemonic": f"{word} : un objet d'autrefois.",
        },
        "visual_prompt": f"authentic historical {word} artifact, museum lighting",
    }


def mock_cora(word: str, cledor: Dict[str, Any]) -> Dict[str, Any]:
    prompt = cledor.get("visual_prompt") or f"historical {word} artifact"
    return {
        "curator_comment": f"{MOCK_MARKER} Curation indisponible.",
        "flux_generation": {"concept": word, "prompt": prompt, "aspect_ratio": "16:9"},
        "serp_search": {
            "intent": "archive",
            "queries": [f"authentic historical {word} artifact museum"],
        },
    }


def mock_video_script(word: str, scenes: int = 12, duration: int = 8) -> Dict[str, Any]:
    timeline = [
        {
            "scene_id": i + 1,
            "duration": duration,
            "visual_source": "Text-Only" if i in (0, scenes - 1) else "Flux-Generated",
            "visual_description": f"Scene {i + 1}",
            "overlay_text": word.upper() if i == 0 else "",
            "voiceover_script": f"{MOCK_MARKER} Scène {i + 1} sur l'histoire du mot '{word}'.",
            "transition": "cut",
        }
        for i in range(scenes)
    ]
    return {
        "video_meta": {
            "title": f"{MOCK_MARKER} {word}",
            "total_duration": scenes * duration,
            "bg_music_mood": "mysterious",
        },
        "timeline": timeline,
    }


def mock_chat_reply() -> str:
    return f"{MOCK_MARKER} Assistant indisponible : configurez GROQ_API_KEY."


def mock_image(placeholder: str) -> Dict[str, Any]:
    return {"output": placeholder, "model": f"{MOCK_MARKER} placeholder (configurez FAL_KEY)"}


def mock_video_url() -> str:
    return f"{MOCK_MARKER} mock://animate/video.mp4"


def mock_clip(index: int, prompt: str) -> Dict[str, Any]:
    return {
        "scene_index": index,
        "prompt": prompt,
        "video_uri": f"{MOCK_MARKER} mock://studio/scene_{index}.mp4",
        "status": "mock",
    }


def is_mock_cledor(cledor: Dict[str, Any]) -> bool:
    """True si l'analyse vient de mock_cledor (ne doit pas être mise en cache)."""
    soul = cledor.get("semantic_soul") or {}
    return MOCK_MARKER in str(soul.get("description", ""))


__all__ = [
    "MOCK_MARKER",
    "is_mock_cledor",
    "mock_cledor",
    "mock_cora",
    "mock_video_script",
    "mock_chat_reply",
    "mock_image",
    "mock_video_url",
    "mock_clip",
]
