"""
Search Flow — Pipeline "cache-or-fetch" d'un mot
=================================================

PATTERN :
  CHECK_CACHE ─(hit)──────────────────────────────────────────────→ END
       └─(miss)→ RETRIEVE_ARCHIVE → ETYMOLOGY → CURATE → FETCH_VISUALS
                                                  → ASSEMBLE → PERSIST → END

  - RETRIEVE_ARCHIVE : archive réelle la plus proche (RAG), contexte pour Cledor.
  - ETYMOLOGY        : Cledor (analyse structurée).
  - CURATE           : Cora (prompt d'image + requêtes d'archives).
  - FETCH_VISUALS    : génération d'image ET recherche web EN PARALLÈLE
                       (fan-out / fan-in, on attend les deux, pas d'annulation).
  - PERSIST          : mise en cache, sauf données mock.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from langgraph.graph import END, StateGraph

from backend.src.lemotclef.core.settings import settings
from backend.src.lemotclef.core.tracing import get_tracing_config
from backend.src.lemotclef.graphs.nodes import Cledor, Cora
from backend.src.lemotclef.graphs.schemas import VisualAsset
from backend.src.lemotclef.graphs.state import SearchState
from backend.src.lemotclef.services.image_generation import ImageGenerator
from backend.src.lemotclef.services.mock_data import is_mock_cledor
from backend.src.lemotclef.services.web_search import WebImageSearch
from backend.src.lemotclef.services.word_store import WordStore

logger = logging.getLogger(__name__)


class SearchFlow:
    def __init__(
        self,
        word_store: Optional[WordStore] = None,
        cledor: Optional[Cledor] = None,
        cora: Optional[Cora] = None,
        image_generator: Optional[ImageGenerator] = None,
        web_search: Optional[WebImageSearch] = None,
        archive_index=None,
        placeholder_image: Optional[str] = None,
    ):
        self.word_store = word_store
        self.cledor = cledor or Cledor()
        self.cora = cora or Cora()
        self.image_generator = image_generator or ImageGenerator()
        self.web_search = web_search or WebImageSearch()
        self.archive_index = archive_index
        self.placeholder_image = placeholder_image or settings.PLACEHOLDER_IMAGE
        self.graph = self.build_graph()

    # ------------------------------------------------------------------ #
    # NODES
    # ------------------------------------------------------------------ #

    def check_cache(self, state: SearchState) -> Dict[str, Any]:
        if self.word_store is None:
            return {"cached": False, "execution_path": ["CHECK_CACHE"]}
        record = self.word_store.get_cached_word(state["word"])
        if record and record.get("etymology"):
            return {
                "cached": True,
                "payload": record["etymology"],
                "execution_path": ["CHECK_CACHE"],
            }
        return {"cached": False, "execution_path": ["CHECK_CACHE"]}

    def route_cache(self, state: SearchState) -> str:
        return "hit" if state.get("cached") else "miss"

    def retrieve_archive(self, state: SearchState) -> Dict[str, Any]:
        match = None
        if self.archive_index is not None:
            try:
                match = self.archive_index.search_nearest(state["word"])
            except Exception as e:
                logger.warning("Archive retrieval failed: %s", e)
        return {
            "archive": asdict(match) if match else None,
            "execution_path": ["RETRIEVE_ARCHIVE"],
        }

    def etymology(self, state: SearchState) -> Dict[str, Any]:
        cledor = self.cledor.analyze(state["word"], prior_art=state.get("archive"))
        return {
            "cledor": cledor,
            "is_mock": is_mock_cledor(cledor),
            "execution_path": ["ETYMOLOGY"],
        }

    def curate(self, state: SearchState) -> Dict[str, Any]:
        cora = self.cora.curate(state["word"], state["cledor"])
        return {"cora": cora, "execution_path": ["CURATE"]}

    def fetch_visuals(self, state: SearchState) -> Dict[str, Any]:
        word = state["word"]
        cledor, cora = state["cledor"], state["cora"]

        prompt = (cora.get("flux_generation") or {}).get("prompt") or cledor.get("visual_prompt") or word
        queries = (cora.get("serp_search") or {}).get("queries") or []
        image_query = queries[0] if queries else f"authentic historical {word} artifact museum"

        logger.info("🖼️ Visuels en parallèle pour '%s'", word)
        with ThreadPoolExecutor(max_workers=2) as executor:
            generated_future = executor.submit(self.image_generator.generate, prompt)
            search_future = executor.submit(self.web_search.search_image, image_query)
            generated = self._safe_result(generated_future, "image generation")
            historical = self._safe_result(search_future, "web search")

        return {
            "generated_image": {"url": generated.url, "model": generated.model} if generated else None,
            "historical_image": historical,
            "image_query": image_query,
            "execution_path": ["FETCH_VISUALS"],
        }

    @staticmethod
    def _safe_result(future, label: str):
        try:
            return future.result()
        except Exception as e:
            logger.warning("Visual task '%s' failed: %s", label, e)
            return None

    def assemble(self, state: SearchState) -> Dict[str, Any]:
        generated = state.get("generated_image")
        historical = state.get("historical_image")
        archive = state.get("archive")

        visuals: List[VisualAsset] = []
        if generated:
            visuals.append(VisualAsset(url=generated["url"], provenance="generated", source=generated["model"]))
        if historical:
            visuals.append(VisualAsset(url=historical, provenance="web_search", source="serpapi"))
        if archive and archive.get("url"):
            visuals.append(VisualAsset(url=archive["url"], provenance="vector_store", source=archive.get("id")))

        image_url = visuals[0].url if visuals else self.placeholder_image

        cora = dict(state.get("cora") or {})
        cora["generated_image"] = generated["url"] if generated else None
        cora["historical_image"] = historical

        payload = dict(state["cledor"])
        payload.update(
            {
                "word": state["word"],
                "image_url": image_url,
                "image_query": state.get("image_query", ""),
                "cora": cora,
                "visuals": [v.model_dump() for v in visuals],
                "is_mock": bool(state.get("is_mock")),
            }
        )
        return {"payload": payload, "execution_path": ["ASSEMBLE"]}

    def persist(self, state: SearchState) -> Dict[str, Any]:
        payload = state["payload"]
        if self.word_store is not None and not payload.get("is_mock"):
            self.word_store.save_word_to_cache(state["word"], payload)
        elif payload.get("is_mock"):
            logger.info("Données mock pour '%s' : pas de mise en cache", state["word"])
        return {"execution_path": ["PERSIST"]}

    # ------------------------------------------------------------------ #
    # GRAPH
    # ------------------------------------------------------------------ #

    def build_graph(self):
        workflow = StateGraph(SearchState)

        workflow.add_node("CHECK_CACHE", self.check_cache)
        workflow.add_node("RETRIEVE_ARCHIVE", self.retrieve_archive)
        workflow.add_node("ETYMOLOGY", self.etymology)
        workflow.add_node("CURATE", self.curate)
        workflow.add_node("FETCH_VISUALS", self.fetch_visuals)
        workflow.add_node("ASSEMBLE", self.assemble)
        workflow.add_node("PERSIST", self.persist)

        workflow.set_entry_point("CHECK_CACHE")
        workflow.add_conditional_edges(
            "CHECK_CACHE",
            self.route_cache,
            {"hit": END, "miss": "RETRIEVE_ARCHIVE"},
        )
        workflow.add_edge("RETRIEVE_ARCHIVE", "ETYMOLOGY")
        workflow.add_edge("ETYMOLOGY", "CURATE")
        workflow.add_edge("CURATE", "FETCH_VISUALS")
        workflow.add_edge("FETCH_VISUALS", "ASSEMBLE")
        workflow.add_edge("ASSEMBLE", "PERSIST")
        workflow.add_edge("PERSIST", END)

        return workflow.compile()

    def run(self, word: str) -> Dict[str, Any]:
        logger.info("[Search] Processing search for: %s", word)
        config = get_tracing_config(run_name="search_flow.run", tags=["search"], metadata={"word": word})
        final_state = self.graph.invoke({"word": word, "execution_path": []}, config)
        logger.debug("[Search] Path: %s", " → ".join(final_state.get("execution_path", [])))

        result = dict(final_state.get("payload") or {})
        result["cached"] = bool(final_state.get("cached"))
        return result


__all__ = ["SearchFlow"]
