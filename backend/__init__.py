"""
Backend Le Mot Clef — Architecture Monolithique Modulaire.

Couches (de bas en haut) :
  core/          → Fondations (settings, database, logger, security)
  utils/         → Nettoyage / réparation du JSON produit par les LLM
  services/      → Accès externe (LLM, images, vidéo, SerpAPI, cache, stockage)
  rag/           → Archives visuelles (FAISS + LlamaIndex)
  graphs/        → Personas (Cledor, Cora, David) + flux de recherche LangGraph
  api/           → Routes HTTP (FastAPI)
  scripts/       → Outils opérateur (ingestion, diagnostic)
  main.py        → Point d'entrée FastAPI (lifecycle, middlewares, routes)

Règle d'import : chaque couche n'importe que les couches en-dessous.
"""
