"""
Tests for the upload API endpoints.

Tests the FastAPI upload endpoints including:
- JSON body validation
- File presence validation
- Mapping of pin results and upstream failures to HTTP responses
- Temporary file cleanup
"""

import json
import logging
import pytest
from pathlib import Path
from fastapi.testclient import TestClient
from unittest.mock import Mock, AsyncMock

from src.pinning.manager import PinningManager
from src.pinning.providers.base import (
    PinResult, UpstreamAuthError, UpstreamNetworkError, UpstreamRejectionError,
)


def _result(cid: str) -> PinResult:
    return PinResult(cid=cid, raw={"IpfsHash": cid}, meta={"provider": "mock"})


@pytest.fixture
def pinning_manager(tmp_path):
    """Mocked pinning manager with a private upload directory."""
    manager = Mock(spec=PinningManager)
    manager.upload_dir = tmp_path / "uploads"
    manager.json_metadata_name = "test.json"
    manager.pin_json = AsyncMock(return_value=_result("Qm123abc"))
    manager.pin_file = AsyncMock(return_value=_result("QmFile456"))
    return manager


@pytest.fixture
def app(pinning_manager):
    from src.api.dependencies.pinning import get_pinning_manager
    from src.api.main import create_app

    app = create_app()
    app.dependency_overrides[get_pinning_manager] = lambda: pinning_manager
    return app


@pytest.fixture
def client(app):
    """Test client for the FastAPI app."""
    return TestClient(app)


class TestUploadJson:
    """Test the /uploadJson endpoint."""

    def test_pins_object_and_returns_cid(self, client, pinning_manager):
        response = client.post("/uploadJson", json={"name": "John Doe", "age": 30})

        assert response.status_code == 200
        assert response.text == "Qm123abc"
        pinning_manager.pin_json.assert_awaited_once_with({"name": "John Doe", "age": 30}, name=None)

    def test_name_query_overrides_metadata_name(self, client, pinning_manager):
        response = client.post("/uploadJson?name=profile.json", json={"a": 1})

        assert response.status_code == 200
        pinning_manager.pin_json.assert_awaited_once_with({"a": 1}, name="profile.json")

    def test_nested_object_forwarded_as_is(self, client, pinning_manager):
        body = {"user": {"tags": ["a", "b"], "active": True}, "score": None}
        response = client.post("/uploadJson", json=body)

        assert response.status_code == 200
        assert pinning_manager.pin_json.await_args.args[0] == body

    def test_empty_object_is_valid(self, client):
        response = client.post("/uploadJson", json={})
        assert response.status_code == 200
        assert response.text

    @pytest.mark.parametrize("body", [[1, 2, 3], "hello", 42, 3.5, True, None])
    def test_non_object_rejected(self, client, pinning_manager, body):
        response = client.post(
            "/uploadJson",
            content=json.dumps(body),
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert len(errors) >= 1
        assert errors[0]["location"] == "body"
        assert errors[0]["value"] == body
        pinning_manager.pin_json.assert_not_awaited()

    @pytest.mark.parametrize("raw", [b"{not json", b"[NaN]", b"Infinity", b"-Infinity", b'{"a": NaN}'])
    def test_malformed_json_rejected(self, client, pinning_manager, raw):
        response = client.post(
            "/uploadJson",
            content=raw,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["msg"] == "Request body is not valid JSON"
        pinning_manager.pin_json.assert_not_awaited()

    def test_empty_body_rejected(self, client, pinning_manager):
        response = client.post("/uploadJson")

        assert response.status_code == 400
        assert response.json()["errors"]
        pinning_manager.pin_json.assert_not_awaited()

    @pytest.mark.parametrize("error", [
        UpstreamAuthError("bad jwt"),
        UpstreamNetworkError("connection reset"),
        UpstreamRejectionError("payload too large"),
    ])
    def test_upstream_failure_collapses_to_generic_500(self, client, pinning_manager, error):
        pinning_manager.pin_json.side_effect = error

        response = client.post("/uploadJson", json={"name": "John Doe"})

        assert response.status_code == 500
        assert response.text == "Something broke!"
        assert str(error) not in response.text


class TestUploadFile:
    """Test the /uploadFile endpoint."""

    def test_pins_file_and_returns_cid(self, client, pinning_manager):
        response = client.post("/uploadFile", files={"file": ("notes.txt", b"hello ipfs", "text/plain")})

        assert response.status_code == 200
        assert response.text == "QmFile456"
        path, filename = pinning_manager.pin_file.await_args.args
        assert filename == "notes.txt"

    def test_staged_file_holds_upload_and_is_removed(self, client, pinning_manager):
        seen = {}

        async def fake_pin(path, filename):
            seen["path"] = Path(path)
            seen["exists"] = Path(path).exists()
            seen["content"] = Path(path).read_bytes()
            return _result("QmFile456")

        pinning_manager.pin_file.side_effect = fake_pin

        response = client.post("/uploadFile", files={"file": ("data.bin", b"\x00\x01\x02", "application/octet-stream")})

        assert response.status_code == 200
        assert seen["exists"] is True
        assert seen["content"] == b"\x00\x01\x02"
        assert not seen["path"].exists()

    def test_staged_file_removed_on_upstream_failure(self, client, pinning_manager):
        seen = {}

        async def failing_pin(path, filename):
            seen["path"] = Path(path)
            raise UpstreamNetworkError("timed out")

        pinning_manager.pin_file.side_effect = failing_pin

        response = client.post("/uploadFile", files={"file": ("a.txt", b"abc", "text/plain")})

        assert response.status_code == 500
        assert response.text == "Something broke!"
        assert not seen["path"].exists()
        assert list(pinning_manager.upload_dir.iterdir()) == []

    def test_no_file_field(self, client, pinning_manager):
        response = client.post("/uploadFile", data={"other": "value"})

        assert response.status_code == 400
        assert response.text == "No file uploaded."
        pinning_manager.pin_file.assert_not_awaited()

    def test_no_body_at_all(self, client, pinning_manager):
        response = client.post("/uploadFile")

        assert response.status_code == 400
        assert response.text == "No file uploaded."

    def test_text_value_under_file_field(self, client, pinning_manager):
        response = client.post("/uploadFile", data={"file": "not a file"})

        assert response.status_code == 400
        assert response.text == "No file uploaded."
        pinning_manager.pin_file.assert_not_awaited()

    def test_multiple_files_rejected(self, client, pinning_manager):
        response = client.post(
            "/uploadFile",
            files=[
                ("file", ("a.txt", b"a", "text/plain")),
                ("file", ("b.txt", b"b", "text/plain")),
            ],
        )

        assert response.status_code == 400
        assert response.text == "Only one file may be uploaded."
        pinning_manager.pin_file.assert_not_awaited()


class TestErrorHandling:
    """Test the catch-all error handling and response shaping."""

    def test_unexpected_error_returns_generic_500(self, app, pinning_manager):
        pinning_manager.pin_json.side_effect = KeyError("boom")
        client = TestClient(app, raise_server_exceptions=False)

        response = client.post("/uploadJson", json={"a": 1}, headers={"Origin": "http://example.com"})

        assert response.status_code == 500
        assert response.text == "Something broke!"
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_unexpected_error_is_access_logged(self, app, pinning_manager, caplog):
        pinning_manager.pin_json.side_effect = KeyError("boom")
        client = TestClient(app)

        with caplog.at_level(logging.INFO, logger="src.api.middleware"):
            response = client.post("/uploadJson", json={"a": 1})

        assert response.status_code == 500
        assert any("POST /uploadJson 500" in record.getMessage() for record in caplog.records)

    def test_security_headers_present(self, client):
        response = client.post("/uploadJson", json={"a": 1})

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"

    def test_cors_allows_any_origin(self, client):
        response = client.post("/uploadJson", json={"a": 1}, headers={"Origin": "http://example.com"})

        assert response.headers["access-control-allow-origin"] == "*"

    def test_api_docs_served(self, client):
        response = client.get("/api-docs")
        assert response.status_code == 200

        schema = client.get("/openapi.json").json()
        assert "/uploadJson" in schema["paths"]
        assert "/uploadFile" in schema["paths"]
