"""
Tests unitaires — RAG des archives visuelles (index + ingestion).

Aucun modèle d'embedding n'est chargé : l'index llama_index est remplacé
par un MagicMock, seul le Document est construit pour de vrai.
"""

import json
import os

import pytest
from unittest.mock import MagicMock, patch

from backend.src.lemotclef.rag.archive_index import ArchiveIndex, ArchiveMatch
from backend.src.lemotclef.rag.components import DOCSTORE_FILENAME, INDEX_FILENAME, index_exists
from backend.src.lemotclef.rag.config import ARCHIVE_DOC_TYPE
from backend.src.lemotclef.rag.ingestor import ArchiveIngestor


def _node(node_id, score, metadata, text="Gravure d'un lit à moustiquaire"):
    node = MagicMock(node_id=node_id, metadata=metadata)
    node.get_content.return_value = text
    return MagicMock(node=node, score=score)


def _write_index_files(db_dir, mtime=None):
    for name in (INDEX_FILENAME, DOCSTORE_FILENAME):
        path = db_dir / name
        path.write_text("{}", encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))


def _index_returning(nodes):
    index = MagicMock()
    index.as_retriever.return_value.retrieve.return_value = nodes
    return index


class TestArchiveIndex:

    def test_disabled(self, tmp_path):
        archive = ArchiveIndex(db_dir=tmp_path, enabled=False)
        assert archive.search_nearest("canapé") is None

    def test_missing_index(self, tmp_path):
        archive = ArchiveIndex(db_dir=tmp_path, enabled=True)
        assert archive.search_nearest("canapé") is None
        assert index_exists(tmp_path) is False

    def test_best_match(self, tmp_path):
        archive = ArchiveIndex(db_dir=tmp_path, min_score=0.3, enabled=True)
        archive._index = _index_returning(
            [_node("archives/conopeum_1850", 0.82, {"url": "https://archives/c.jpg", "mood": "calme", "era_markers": ["1850"]})]
        )

        match = archive.search_nearest("canapé")

        assert isinstance(match, ArchiveMatch)
        assert match.id == "archives/conopeum_1850"
        assert match.url == "https://archives/c.jpg"
        assert match.description == "Gravure d'un lit à moustiquaire"
        assert match.era_markers == ["1850"]
        assert match.score == pytest.approx(0.82)

    def test_below_min_score(self, tmp_path):
        archive = ArchiveIndex(db_dir=tmp_path, min_score=0.5, enabled=True)
        archive._index = _index_returning([_node("archives/x", 0.2, {"url": "https://archives/x.jpg"})])
        assert archive.search_nearest("canapé") is None

    def test_retrieval_error(self, tmp_path):
        archive = ArchiveIndex(db_dir=tmp_path, enabled=True)
        archive._index = MagicMock()
        archive._index.as_retriever.side_effect = RuntimeError("faiss dimension mismatch")
        assert archive.search_nearest("canapé") is None


    @patch("backend.src.lemotclef.rag.archive_index.get_storage_context")
    @patch("backend.src.lemotclef.rag.archive_index.init_settings")
    def test_index_created_after_first_miss(self, mock_init, mock_storage, tmp_path):
        archive = ArchiveIndex(db_dir=tmp_path, enabled=True)
        assert archive.search_nearest("canapé") is None

        _write_index_files(tmp_path)
        loaded = _index_returning([_node("archives/c", 0.9, {"url": "https://archives/c.jpg"})])
        with patch("llama_index.core.load_index_from_storage", return_value=loaded):
            match = archive.search_nearest("canapé")

        assert match is not None
        assert match.url == "https://archives/c.jpg"

    @patch("backend.src.lemotclef.rag.archive_index.get_storage_context")
    @patch("backend.src.lemotclef.rag.archive_index.init_settings")
    def test_failed_load_retried_when_files_change(self, mock_init, mock_storage, tmp_path):
        _write_index_files(tmp_path, mtime=1_000_000)
        archive = ArchiveIndex(db_dir=tmp_path, enabled=True)

        with patch("llama_index.core.load_index_from_storage", side_effect=RuntimeError("corrupt docstore")) as load:
            assert archive.search_nearest("canapé") is None
            assert archive.search_nearest("canapé") is None
        assert load.call_count == 1

        _write_index_files(tmp_path, mtime=2_000_000)
        loaded = _index_returning([_node("archives/c", 0.9, {"url": "https://archives/c.jpg"})])
        with patch("llama_index.core.load_index_from_storage", return_value=loaded):
            assert archive.search_nearest("canapé") is not None


class TestArchiveIngestor:

    @pytest.fixture
    def vision_client(self, make_completion):
        client = MagicMock()
        client.chat.completions.create.return_value = make_completion(
            json.dumps(
                {
                    "detailed_description": "Gravure d'un lit grec entouré d'une moustiquaire.",
                    "mood": "calme",
                    "era_markers": ["Antiquité", 1850],
                    "tags": ["lit", "moustiquaire"],
                }
            )
        )
        return client

    def test_describe_image(self, vision_client, tmp_path):
        ingestor = ArchiveIngestor(sdk_client=vision_client, db_dir=tmp_path)
        analysis = ingestor.describe_image("https://archives/c.jpg")

        assert analysis["mood"] == "calme"
        kwargs = vision_client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0]["content"][1]["image_url"]["url"] == "https://archives/c.jpg"

    def test_describe_image_failure(self, tmp_path):
        client = MagicMock()
        client.chat.completions.create.side_effect = RuntimeError("vision model down")
        ingestor = ArchiveIngestor(sdk_client=client, db_dir=tmp_path)
        assert ingestor.describe_image("https://archives/c.jpg") is None

    def test_build_document(self, vision_client, tmp_path):
        ingestor = ArchiveIngestor(sdk_client=vision_client, db_dir=tmp_path)
        analysis = ingestor.describe_image("https://archives/c.jpg")

        doc = ingestor.build_document("archives/conopeum_1850", "https://archives/c.jpg", analysis)

        assert doc.doc_id == "archives/conopeum_1850"
        assert doc.metadata["url"] == "https://archives/c.jpg"
        assert doc.metadata["era_markers"] == ["Antiquité", "1850"]
        assert doc.metadata["type"] == ARCHIVE_DOC_TYPE
        assert "url" in doc.excluded_embed_metadata_keys

    @patch("backend.src.lemotclef.rag.ingestor.save_index")
    @patch("backend.src.lemotclef.rag.ingestor.init_settings")
    def test_ingest_summary(self, mock_init, mock_save, vision_client, tmp_path):
        index = MagicMock()
        index.ref_doc_info = {"archives/deja_la": object()}
        ingestor = ArchiveIngestor(sdk_client=vision_client, db_dir=tmp_path)

        with patch.object(ingestor, "_load_or_create_index", return_value=index):
            summary = ingestor.ingest(
                [
                    {"id": "archives/deja_la", "url": "https://archives/a.jpg"},
                    {"id": "archives/conopeum_1850", "url": "https://archives/c.jpg"},
                    {"id": "archives/sans_url"},
                ]
            )

        assert summary == {
            "indexed": ["archives/conopeum_1850"],
            "skipped": ["archives/deja_la"],
            "failed": ["archives/sans_url"],
        }
        index.insert.assert_called_once()
        mock_save.assert_called_once_with(index, tmp_path)

    @patch("backend.src.lemotclef.rag.ingestor.save_index")
    @patch("backend.src.lemotclef.rag.ingestor.init_settings")
    def test_nothing_new_is_not_saved(self, mock_init, mock_save, vision_client, tmp_path):
        index = MagicMock()
        index.ref_doc_info = {"archives/deja_la": object()}
        ingestor = ArchiveIngestor(sdk_client=vision_client, db_dir=tmp_path)

        with patch.object(ingestor, "_load_or_create_index", return_value=index):
            summary = ingestor.ingest([{"id": "archives/deja_la", "url": "https://archives/a.jpg"}])

        assert summary["skipped"] == ["archives/deja_la"]
        mock_save.assert_not_called()
