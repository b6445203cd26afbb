"""
Tests unitaires — Studio (clips Veo en parallèle).
"""

import json
import time
from unittest.mock import MagicMock, patch

from backend.src.lemotclef.services.mock_data import MOCK_MARKER
from backend.src.lemotclef.services.studio import NO_SCENES_ERROR, PARSE_ERROR, Studio, parse_scenes


def _scenes(*prompts):
    return json.dumps({"scenes": [{"prompt": p} for p in prompts]})


def _veo_response(prompt, ok=True):
    response = MagicMock(ok=ok, status_code=200 if ok else 429, text="quota")
    response.json.return_value = {"predictions": [{"videoUri": f"gs://veo/{prompt}.mp4"}]}
    return response


class TestParseScenes:

    def test_malformed_json_returns_error_object(self):
        scenes, error = parse_scenes("{ bad json: [")
        assert scenes == []
        assert error["error"] == PARSE_ERROR
        assert error["details"]

    def test_fenced_input_accepted(self):
        scenes, error = parse_scenes("```json\n" + _scenes("a", "b") + "\n```")
        assert error is None
        assert [s["prompt"] for s in scenes] == ["a", "b"]

    def test_no_scenes(self):
        assert parse_scenes('{"scenes": []}')[1] == {"error": NO_SCENES_ERROR}
        assert parse_scenes('{"timeline": []}')[1] == {"error": NO_SCENES_ERROR}

    def test_non_string_input(self):
        assert parse_scenes(None)[1]["error"] == PARSE_ERROR


class TestStudioRun:

    def test_malformed_input_does_not_raise(self):
        result = Studio(project_id="p", access_token="t").run("{ bad json: [")
        assert isinstance(result, dict)
        assert result["error"] == PARSE_ERROR

    @patch("backend.src.lemotclef.services.studio.requests.post")
    def test_results_keep_input_order_and_count(self, mock_post):
        prompts = [f"scene-{i}" for i in range(6)]

        def slow_first(url, json=None, headers=None, timeout=None):
            prompt = json["instances"][0]["prompt"]
            # Les premières scènes terminent en dernier
            time.sleep(0.02 * (len(prompts) - int(prompt.split("-")[1])))
            return _veo_response(prompt)

        mock_post.side_effect = slow_first
        results = Studio(project_id="p", location="us-central1", access_token="t").run(_scenes(*prompts))

        assert len(results) == len(prompts)
        assert [r["scene_index"] for r in results] == list(range(6))
        assert [r["video_uri"] for r in results] == [f"gs://veo/{p}.mp4" for p in prompts]
        assert all(r["status"] == "success" for r in results)

    @patch("backend.src.lemotclef.services.studio.requests.post")
    def test_failed_scene_reported_in_place(self, mock_post):
        mock_post.side_effect = [_veo_response("a"), _veo_response("b", ok=False), _veo_response("c")]

        with patch("backend.src.lemotclef.services.studio.MAX_WORKERS", 1):
            results = Studio(project_id="p", access_token="t").run(_scenes("a", "b", "c"))

        assert [r["status"] for r in results] == ["success", "error", "success"]
        assert results[1]["scene_index"] == 1
        assert "429" in results[1]["error"]

    @patch("backend.src.lemotclef.services.studio.requests.post")
    def test_request_payload(self, mock_post):
        mock_post.return_value = _veo_response("a")
        Studio(project_id="proj", location="europe-west4", access_token="tok", model="veo-001").run(_scenes("a"))

        url = mock_post.call_args.args[0]
        kwargs = mock_post.call_args.kwargs
        assert url == (
            "https://europe-west4-aiplatform.googleapis.com/v1/projects/proj"
            "/locations/europe-west4/publishers/google/models/veo-001:predict"
        )
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        instance = kwargs["json"]["instances"][0]
        assert instance["aspectRatio"] == "9:16"
        assert instance["durationSeconds"] == 6

    @patch("backend.src.lemotclef.services.studio.requests.post")
    def test_missing_credentials_returns_mock_without_network(self, mock_post):
        results = Studio(project_id="", access_token="").run(_scenes("a", "b"))

        mock_post.assert_not_called()
        assert len(results) == 2
        assert all(MOCK_MARKER in r["video_uri"] for r in results)
        assert [r["scene_index"] for r in results] == [0, 1]
