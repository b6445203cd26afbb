import operator
from typing import Annotated, Any, Dict, List, Optional, TypedDict


class SearchState(TypedDict, total=False):
    # --- Input ---
    word: str

    # --- Cache ---
    cached: bool

    # --- Personas ---
    archive: Optional[Dict[str, Any]]       # ArchiveMatch sérialisé (RAG)
    cledor: Dict[str, Any]
    cora: Dict[str, Any]
    is_mock: bool

    # --- Visuels ---
    generated_image: Optional[Dict[str, Any]]   # {"url", "model"}
    historical_image: Optional[str]
    image_query: str

    # --- Output ---
    payload: Dict[str, Any]
    execution_path: Annotated[List[str], operator.add]
