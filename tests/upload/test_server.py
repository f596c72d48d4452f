"""
Tests for upload.server

Test Coverage:
- POST /upload: success payload, missing file, size limit, conversion failure
- bg query parameter
- CORS allow-list
"""
import base64
import io

import pytest
from PIL import Image

from proofsheet.upload import ConversionFallbackExhausted, ServerSettings
from proofsheet.upload import server as server_module
from proofsheet.upload.converter import ConversionResult
from proofsheet.upload.server import create_app


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (12, 6), "red").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def client():
    app = create_app(ServerSettings())
    app.config["TESTING"] = True
    return app.test_client()


def _post(client, data, filename="scan.tiff", query=""):
    return client.post(
        f"/upload{query}",
        data={"file": (io.BytesIO(data), filename)},
        content_type="multipart/form-data",
    )


def test_upload_success(client, png_bytes):
    """A decodable upload returns base64 PNG and the path used."""
    # Act
    response = _post(client, png_bytes, filename="a.png")

    # Assert
    assert response.status_code == 200
    body = response.get_json()
    assert body["ok"] is True
    assert body["via"] == "primary"
    with Image.open(io.BytesIO(base64.b64decode(body["base64"]))) as img:
        assert img.format == "PNG"
        assert img.size == (12, 6)


def test_upload_without_file(client):
    """Missing file field is a 400."""
    response = client.post("/upload", data={"note": "no file"}, content_type="multipart/form-data")

    assert response.status_code == 400
    assert response.get_json() == {"error": "No file uploaded"}


def test_upload_empty_file(client):
    response = _post(client, b"")

    assert response.status_code == 400
    assert response.get_json() == {"error": "No file uploaded"}


def test_upload_too_large(png_bytes):
    """Bodies over the limit are rejected with 413."""
    app = create_app(ServerSettings(max_upload_bytes=64))

    response = _post(app.test_client(), png_bytes + b"\0" * 256)

    assert response.status_code == 413
    assert response.get_json() == {"error": "File too large"}


def test_upload_conversion_failure(client, monkeypatch):
    """Both conversion paths failing is a 500 with detail."""
    def fail(data, **kwargs):
        raise ConversionFallbackExhausted("Image processing failed: magick exited 1")

    monkeypatch.setattr(server_module, "normalize_image", fail)

    response = _post(client, b"whatever")

    assert response.status_code == 500
    body = response.get_json()
    assert body["error"] == "Image processing failed"
    assert "magick exited 1" in body["detail"]


@pytest.mark.parametrize("query,expected", [("?bg=transparent", True), ("?bg=white", False), ("", False)])
def test_upload_background_param(client, monkeypatch, query, expected):
    """bg=transparent keeps alpha; anything else flattens."""
    seen = {}

    def fake(data, **kwargs):
        seen.update(kwargs)
        return ConversionResult(png=b"png", via="fallback")

    monkeypatch.setattr(server_module, "normalize_image", fake)

    response = _post(client, b"whatever", query=query)

    assert response.status_code == 200
    assert seen["transparent"] is expected
    assert response.get_json()["via"] == "fallback"


def test_upload_cors_allowed_origin(client, png_bytes):
    """Allowed origins get an Access-Control-Allow-Origin header."""
    response = client.post(
        "/upload",
        data={"file": (io.BytesIO(png_bytes), "a.png")},
        content_type="multipart/form-data",
        headers={"Origin": "http://localhost:5173"},
    )

    assert response.headers.get("Access-Control-Allow-Origin") == "http://localhost:5173"


def test_upload_cors_other_origin(client, png_bytes):
    response = client.post(
        "/upload",
        data={"file": (io.BytesIO(png_bytes), "a.png")},
        content_type="multipart/form-data",
        headers={"Origin": "http://evil.example"},
    )

    assert "Access-Control-Allow-Origin" not in response.headers
