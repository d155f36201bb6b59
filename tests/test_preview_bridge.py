"""
Tests for the preview bridge and its sinks.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from uigen.preview.bridge import DirectoryPreviewSink, HttpPreviewSink, PreviewBridge


def make_response(status_code):
    response = MagicMock()
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return response


class TestHttpPreviewSink:
    def test_payload(self):
        sink = HttpPreviewSink("http://bundler.local/preview")
        payload = sink.build_payload("s1", {"/App.jsx": "app"})
        assert payload == {
            "sessionId": "s1",
            "entrypoint": "/App.jsx",
            "files": {"/App.jsx": "app"},
        }

    @patch("uigen.preview.bridge.requests.post")
    def test_publish_posts_json(self, mock_post):
        mock_post.return_value = make_response(200)
        sink = HttpPreviewSink("http://bundler.local/preview", timeout=5)

        sink.publish("s1", {"/App.jsx": "app"})

        mock_post.assert_called_once_with(
            "http://bundler.local/preview",
            json={"sessionId": "s1", "entrypoint": "/App.jsx", "files": {"/App.jsx": "app"}},
            timeout=5,
        )

    @patch("uigen.preview.bridge.time.sleep")
    @patch("uigen.preview.bridge.requests.post")
    def test_retries_on_rate_limit(self, mock_post, mock_sleep):
        mock_post.side_effect = [make_response(429), make_response(429), make_response(200)]
        sink = HttpPreviewSink("http://bundler.local/preview", max_retries=3)

        sink.publish("s1", {"/App.jsx": "app"})

        assert mock_post.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2]

    @patch("uigen.preview.bridge.time.sleep")
    @patch("uigen.preview.bridge.requests.post")
    def test_gives_up_after_max_retries(self, mock_post, mock_sleep):
        mock_post.return_value = make_response(429)
        sink = HttpPreviewSink("http://bundler.local/preview", max_retries=2)

        with pytest.raises(requests.HTTPError):
            sink.publish("s1", {"/App.jsx": "app"})
        assert mock_post.call_count == 2

    @patch("uigen.preview.bridge.requests.post")
    def test_zero_retries_still_attempts_once(self, mock_post):
        mock_post.return_value = make_response(200)
        sink = HttpPreviewSink("http://bundler.local/preview", max_retries=0)

        sink.publish("s1", {"/App.jsx": "app"})

        assert sink.max_retries == 1
        mock_post.assert_called_once()

    @patch("uigen.preview.bridge.time.sleep")
    @patch("uigen.preview.bridge.requests.post")
    def test_zero_retries_rate_limited_reports_through_bridge(self, mock_post, mock_sleep):
        mock_post.return_value = make_response(429)
        bridge = PreviewBridge([HttpPreviewSink("http://bundler.local/preview", max_retries=0)])

        errors = bridge.publish("s1", {"/App.jsx": "app"})

        assert len(errors) == 1
        assert isinstance(errors[0], requests.HTTPError)

    @patch("uigen.preview.bridge.requests.post")
    def test_server_error_raises(self, mock_post):
        mock_post.return_value = make_response(500)
        with pytest.raises(requests.HTTPError):
            HttpPreviewSink("http://bundler.local/preview").publish("s1", {})


class TestDirectoryPreviewSink:
    def test_writes_snapshot(self, tmp_path):
        sink = DirectoryPreviewSink(tmp_path / "preview")
        sink.publish("s1", {"/App.jsx": "app", "/components/Card.jsx": "card"})

        assert (tmp_path / "preview" / "App.jsx").read_text() == "app"
        assert (tmp_path / "preview" / "components" / "Card.jsx").read_text() == "card"

    def test_removes_stale_files(self, tmp_path):
        sink = DirectoryPreviewSink(tmp_path)
        sink.publish("s1", {"/App.jsx": "app", "/old.jsx": "old"})
        sink.publish("s1", {"/App.jsx": "app2", "/new.jsx": "new"})

        assert not (tmp_path / "old.jsx").exists()
        assert (tmp_path / "new.jsx").read_text() == "new"
        assert (tmp_path / "App.jsx").read_text() == "app2"


class TestPreviewBridge:
    def test_publishes_to_every_sink(self):
        first, second = MagicMock(), MagicMock()
        bridge = PreviewBridge([first])
        bridge.add_sink(second)

        assert bridge.publish("s1", {"/App.jsx": "app"}) == []

        first.publish.assert_called_once_with("s1", {"/App.jsx": "app"})
        second.publish.assert_called_once_with("s1", {"/App.jsx": "app"})

    def test_failing_sink_is_reported_not_raised(self):
        broken = MagicMock()
        broken.publish.side_effect = requests.ConnectionError("bundler down")
        healthy = MagicMock()
        bridge = PreviewBridge([broken, healthy])

        errors = bridge.publish("s1", {"/App.jsx": "app"})

        assert len(errors) == 1
        assert isinstance(errors[0], requests.ConnectionError)
        healthy.publish.assert_called_once()

    def test_latest_snapshot_per_session(self):
        bridge = PreviewBridge()
        bridge.publish("s1", {"/App.jsx": "one"})
        bridge.publish("s1", {"/App.jsx": "two"})
        bridge.publish("s2", {"/App.jsx": "other"})

        assert bridge.latest("s1") == {"/App.jsx": "two"}
        assert bridge.latest("s2") == {"/App.jsx": "other"}
        assert bridge.latest("s3") is None

    def test_latest_is_a_copy(self):
        bridge = PreviewBridge()
        snapshot = {"/App.jsx": "one"}
        bridge.publish("s1", snapshot)
        snapshot["/App.jsx"] = "mutated"
        bridge.latest("s1")["/App.jsx"] = "mutated too"

        assert bridge.latest("s1") == {"/App.jsx": "one"}

    def test_forget(self):
        bridge = PreviewBridge()
        bridge.publish("s1", {"/App.jsx": "one"})
        bridge.forget("s1")
        bridge.forget("never-seen")
        assert bridge.latest("s1") is None

    def test_warns_without_entrypoint(self, capsys):
        PreviewBridge().publish("s1", {"/index.js": "x"})
        assert "/App.jsx" in capsys.readouterr().out
