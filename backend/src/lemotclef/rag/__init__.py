"""
RAG Package - Archives visuelles Le Mot Clef

Structure:
- config.py        : Paramètres RAG (chemins, modèle d'embedding, score minimal)
- components.py    : Initialisations (embedding, FAISS, storage context)
- archive_index.py : Recherche de l'archive la plus proche d'un mot
- ingestor.py      : Description des images d'archives + indexation
"""
