"""
Ingestion des archives visuelles

Lit un manifeste JSON d'images d'archives :
    [{"id": "archives/canape_1890", "url": "https://..."}, ...]
décrit chaque image avec le modèle vision, puis l'indexe (FAISS).

Usage :
    python -m backend.src.lemotclef.scripts.ingest_archives manifest.json --limit 10
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from backend.src.lemotclef.core.logger import setup_logging
from backend.src.lemotclef.core.settings import settings
from backend.src.lemotclef.services.llm_clients import llm_available


def load_manifest(path: Path) -> list:
    with open(path, "r", encoding="utf-8") as f:
        entries = json.load(f)
    if not isinstance(entries, list):
        raise ValueError("Le manifeste doit être une liste de {\"id\", \"url\"}")
    return entries


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="📚 Le Mot Clef — Indexation des images d'archives",
    )
    parser.add_argument("manifest", type=Path, help="Fichier JSON [{\"id\", \"url\"}, ...]")
    parser.add_argument(
        "--index-dir",
        type=Path,
        default=Path(settings.ARCHIVE_INDEX_DIR),
        help="Dossier de l'index FAISS (défaut : ARCHIVE_INDEX_DIR)",
    )
    parser.add_argument("--limit", type=int, default=None, help="Nombre maximal d'images à traiter")
    args = parser.parse_args(argv)

    setup_logging()

    if not llm_available():
        print("❌ Clé LLM manquante (GROQ_API_KEY / LEMOTCLEF_APIKEY) : impossible de décrire les images.")
        return 1

    try:
        entries = load_manifest(args.manifest)
    except (OSError, ValueError) as e:
        print(f"❌ Manifeste illisible : {e}")
        return 1
    if args.limit is not None:
        entries = entries[: args.limit]

    from backend.src.lemotclef.rag.ingestor import ArchiveIngestor

    print("=" * 60)
    print(f"📚 INGESTION : {len(entries)} images → {args.index_dir}")
    print("=" * 60)

    summary = ArchiveIngestor(db_dir=args.index_dir).ingest(entries)

    print(f"\n✅ Indexées : {len(summary['indexed'])}")
    print(f"⏭️  Déjà présentes : {len(summary['skipped'])}")
    print(f"❌ Échecs : {len(summary['failed'])}")
    for entry_id in summary["failed"]:
        print(f"   - {entry_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
