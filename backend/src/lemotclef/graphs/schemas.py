"""
Schémas Pydantic — Contrats de sortie des personas (Cledor, Cora, David).

Tolérants aux clés supplémentaires : un modèle qui ajoute un champ ne doit
pas faire échouer la validation, un champ structurant manquant si.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="allow")


# ============================================
# CLEDOR (Étymologiste)
# ============================================

class WordMeta(_Lenient):
    word: str
    ipa: str = ""
    part_of_speech: str = ""


class RootAnalysis(_Lenient):
    root: str
    original_meaning: str = ""
    concept: str = ""


class ChronologyEra(_Lenient):
    era: str
    form: str = ""
    meaning: str = ""
    story: str = ""


class SemanticSoul(_Lenient):
    description: str
    mnemonic: str = ""


class CledorResponse(_Lenient):
    meta: WordMeta
    root_analysis: RootAnalysis
    narrative_chronology: List[ChronologyEra]
    semantic_soul: SemanticSoul
    visual_prompt: str


# ============================================
# CORA (Curatrice visuelle)
# ============================================

class FluxGeneration(_Lenient):
    concept: str = ""
    prompt: str
    aspect_ratio: str = "16:9"


class SerpSearch(_Lenient):
    intent: str = ""
    queries: List[str]


class CoraResponse(_Lenient):
    curator_comment: str = ""
    flux_generation: FluxGeneration
    serp_search: SerpSearch


# ============================================
# DAVID (Réalisateur)
# ============================================

VisualSource = Literal[
    "Flux-Generated",
    "Stock-Video",
    "Text-Only",
    "Selfie-Mode-Avatar",
    "Text-Motion",
]


class TimelineScene(_Lenient):
    scene_id: int
    duration: float
    visual_source: VisualSource
    visual_description: str
    overlay_text: str
    voiceover_script: str
    transition: str


class VideoMeta(_Lenient):
    title: str
    total_duration: float
    bg_music_mood: str


class VideoScript(_Lenient):
    video_meta: VideoMeta
    timeline: List[TimelineScene]


# ============================================
# VISUELS
# ============================================

Provenance = Literal["generated", "web_search", "vector_store"]


class VisualAsset(BaseModel):
    url: str
    provenance: Provenance
    source: Optional[str] = None
