"""
Graphs — Personas et pipeline de recherche (LangGraph).

- nodes/        : Cledor, Cora, David
- prompts.py    : prompts centralisés
- schemas.py    : contrats de sortie (Pydantic)
- state.py      : état du graphe de recherche
- search_flow.py: CHECK_CACHE → … → PERSIST
"""
