"""
Scripts opérateur - Le Mot Clef

- ingest_archives.py : Indexation des images d'archives (manifeste JSON → FAISS)
- check_services.py  : Diagnostic des clés et des services externes

Usage : python -m backend.src.lemotclef.scripts.<script> --help
"""
