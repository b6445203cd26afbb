"""
Tests d'intégration — Routes API (FastAPI TestClient).

Sans clé configurée, chaque service répond en mode [MOCK] : aucun appel
réseau. Les cas "fournisseur en échec" passent par dependency_overrides.
"""

import json
import logging

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, patch

from backend.src.lemotclef.api import routes
from backend.src.lemotclef.main import app
from backend.src.lemotclef.services.asset_storage import AssetStorage
from backend.src.lemotclef.services.mock_data import MOCK_MARKER
from backend.src.lemotclef.utils.llm_json import LLMOutputError


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _override(dependency, value):
    app.dependency_overrides[dependency] = lambda: value


# ── /api/search ─────────────────────────────────────────────

class TestSearchRoute:

    def test_missing_word(self, client):
        response = client.post("/api/search", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Word is required"}

    def test_blank_word(self, client):
        response = client.post("/api/search", json={"word": "   "})
        assert response.status_code == 400

    def test_mock_search(self, client):
        response = client.post("/api/search", json={"word": "canapé"})
        assert response.status_code == 200
        data = response.json()
        assert data["word"] == "canapé"
        assert data["is_mock"] is True
        assert data["cached"] is False
        assert MOCK_MARKER in data["semantic_soul"]["description"]
        assert data["image_url"] == "/placeholder_history.jpg"

    def test_mock_search_not_cached(self, client):
        client.post("/api/search", json={"word": "fenêtre"})
        second = client.post("/api/search", json={"word": "fenêtre"})
        assert second.json()["cached"] is False

    def test_pipeline_error(self, client):
        flow = MagicMock()
        flow.run.side_effect = RuntimeError("groq unreachable")
        _override(routes.get_search_flow, flow)

        response = client.post("/api/search", json={"word": "canapé"})
        assert response.status_code == 500
        assert response.json() == {"error": "groq unreachable"}

    def test_word_is_sanitized(self, client):
        flow = MagicMock()
        flow.run.return_value = {"word": "canapé", "cached": True}
        _override(routes.get_search_flow, flow)

        client.post("/api/search", json={"word": "  canapé\x00 "})
        flow.run.assert_called_once_with("canapé")


# ── /api/director ───────────────────────────────────────────

class TestDirectorRoute:

    def test_missing_word(self, client):
        response = client.post("/api/director", json={"cledor": {}})
        assert response.status_code == 400
        assert response.json() == {"error": "Word is required"}

    def test_mock_script(self, client):
        response = client.post("/api/director", json={"word": "canapé"})
        assert response.status_code == 200
        data = response.json()
        assert len(data["timeline"]) == 12
        assert data["video_meta"]["total_duration"] == 96

    def test_invalid_script(self, client):
        director = MagicMock()
        director.direct.side_effect = LLMOutputError("Invalid video script")
        _override(routes.get_director, director)

        response = client.post("/api/director", json={"word": "canapé"})
        assert response.status_code == 500
        assert response.json() == {"error": "Invalid video script"}

    def test_context_forwarded(self, client, cledor_payload, cora_payload):
        director = MagicMock()
        director.direct.return_value = {"video_meta": {}, "timeline": []}
        _override(routes.get_director, director)

        client.post("/api/director", json={"word": "canapé", "cledor": cledor_payload, "cora": cora_payload})
        director.direct.assert_called_once_with("canapé", cledor_payload, cora_payload)


# ── /api/generate-image ─────────────────────────────────────

class TestGenerateImageRoute:

    def test_missing_prompt(self, client):
        response = client.post("/api/generate-image", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Prompt is required"}

    def test_mock_image(self, client):
        response = client.post("/api/generate-image", json={"prompt": "greek daybed"})
        assert response.status_code == 200
        data = response.json()
        assert data["output"] == "/placeholder_history.jpg"
        assert MOCK_MARKER in data["model"]

    def test_generated_image(self, client):
        generator = MagicMock(enabled=True)
        generator.generate.return_value = MagicMock(url="https://fal.media/x.jpg", model="fal-ai/flux/dev")
        _override(routes.get_image_generator, generator)

        response = client.post("/api/generate-image", json={"prompt": "greek daybed"})
        assert response.json() == {"output": "https://fal.media/x.jpg", "model": "fal-ai/flux/dev"}

    def test_every_model_failed(self, client):
        generator = MagicMock(enabled=True)
        generator.generate.return_value = None
        _override(routes.get_image_generator, generator)

        response = client.post("/api/generate-image", json={"prompt": "greek daybed"})
        assert response.status_code == 500
        assert "error" in response.json()


# ── /api/animate ────────────────────────────────────────────

class TestAnimateRoute:

    def test_missing_fields(self, client):
        response = client.post("/api/animate", json={"prompt": "slow zoom"})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing prompt or image_url"}

    def test_mock_video(self, client):
        response = client.post("/api/animate", json={"prompt": "slow zoom", "image_url": "https://x/y.jpg"})
        assert response.status_code == 200
        assert MOCK_MARKER in response.json()["video_url"]

    def test_no_video_returned(self, client):
        animator = MagicMock(enabled=True)
        animator.animate.return_value = None
        _override(routes.get_video_animator, animator)

        response = client.post("/api/animate", json={"prompt": "slow zoom", "image_url": "https://x/y.jpg"})
        assert response.status_code == 500
        assert response.json() == {"error": "No video returned"}

    def test_provider_error(self, client):
        animator = MagicMock(enabled=True)
        animator.animate.side_effect = RuntimeError("quota exceeded")
        _override(routes.get_video_animator, animator)

        response = client.post("/api/animate", json={"prompt": "slow zoom", "image_url": "https://x/y.jpg"})
        assert response.status_code == 500
        assert response.json() == {"error": "quota exceeded"}

    def test_video_attached_to_word(self, client):
        animator = MagicMock(enabled=True)
        animator.animate.return_value = "https://fal.media/v.mp4"
        word_store = MagicMock()
        word_store.update_word_asset.return_value = "/api/v1/assets/words/canape/video_main.mp4"
        _override(routes.get_video_animator, animator)
        _override(routes.get_word_store, word_store)

        response = client.post(
            "/api/animate",
            json={"prompt": "slow zoom", "image_url": "https://x/y.jpg", "word": "canapé"},
        )
        assert response.json() == {"video_url": "/api/v1/assets/words/canape/video_main.mp4"}
        word_store.update_word_asset.assert_called_once_with("canapé", "video_url", "https://fal.media/v.mp4")


# ── /api/chat ───────────────────────────────────────────────

class _FakeChatLLM:
    def __init__(self, chunks):
        self.chunks = chunks
        self.received = None

    def stream(self, messages):
        self.received = messages
        for text in self.chunks:
            yield MagicMock(content=text)


class TestChatRoute:

    def test_missing_messages(self, client):
        response = client.post("/api/chat", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Messages array is required"}

    def test_messages_not_a_list(self, client):
        response = client.post("/api/chat", json={"messages": "bonjour"})
        assert response.status_code == 400

    def test_mock_stream(self, client):
        response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "Salut"}]})
        assert response.status_code == 200
        assert response.text.startswith(MOCK_MARKER)

    def test_streamed_reply(self, client):
        llm = _FakeChatLLM(["Bon", "jour", ""])
        _override(routes.get_chat_llm, llm)

        response = client.post("/api/chat", json={"messages": [{"role": "user", "content": "Salut"}]})
        assert response.text == "Bonjour"
        assert llm.received[0][0] == "system"
        assert llm.received[-1] == ("user", "Salut")


# ── /api/studio ─────────────────────────────────────────────

class TestStudioRoute:

    def test_unparseable_prompts(self, client):
        response = client.post("/api/studio", json={"prompts": "not json"})
        assert response.status_code == 200
        assert "error" in response.json()

    def test_mock_clips(self, client):
        prompts = json.dumps({"scenes": [{"visual_prompt": "a"}, {"visual_prompt": "b"}]})
        response = client.post("/api/studio", json={"prompts": prompts})
        data = response.json()
        assert [clip["scene_index"] for clip in data] == [0, 1]
        assert all(clip["status"] == "mock" for clip in data)


# ── /api/v1/assets ──────────────────────────────────────────

class TestAssetsRoute:

    def test_serves_asset(self, client, tmp_path):
        storage = AssetStorage(root_dir=str(tmp_path))
        target = tmp_path / "words" / "canape" / "image_main.jpg"
        target.parent.mkdir(parents=True)
        target.write_bytes(b"\xff\xd8jpeg")
        _override(routes.get_asset_storage, storage)

        response = client.get("/api/v1/assets/words/canape/image_main.jpg")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        assert response.content == b"\xff\xd8jpeg"

    def test_missing_asset(self, client, tmp_path):
        _override(routes.get_asset_storage, AssetStorage(root_dir=str(tmp_path)))
        response = client.get("/api/v1/assets/words/inconnu/image_main.jpg")
        assert response.status_code == 404
        assert response.json() == {"error": "Asset not found"}

    def test_invalid_path(self, client, tmp_path):
        _override(routes.get_asset_storage, AssetStorage(root_dir=str(tmp_path)))
        response = client.get("/api/v1/assets/words/bad%20name.jpg")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid asset path"}


# ── Health / Root / erreurs génériques ──────────────────────

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["llm"] == "mock"
    assert data["database"] == "connected"
    assert data["status"] == "healthy"


def test_root(client):
    data = client.get("/").json()
    assert data["name"] == "Le Mot Clef"
    assert data["status"] == "running"


def test_unavailable_service_uses_error_shape(client):
    with patch.object(routes._studio, "get", return_value=None):
        response = client.post("/api/studio", json={"prompts": "{}"})
    assert response.status_code == 503
    assert response.json() == {"error": "Studio unavailable. Retrying on next request."}


def test_unknown_route_uses_error_shape(client):
    response = client.get("/api/inconnu")
    assert response.status_code == 404
    assert "error" in response.json()


def test_non_json_body(client):
    response = client.post("/api/search", content=b"word=canape", headers={"Content-Type": "text/plain"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}


def test_startup_reports_mock_services(caplog):
    with caplog.at_level(logging.INFO):
        with TestClient(app):
            pass
    assert "Aucune clé LLM" in caplog.text
    assert "clips [MOCK]" in caplog.text
