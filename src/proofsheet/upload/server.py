"""
Module: upload.server

Purpose:
    Flask app exposing the conversion service:
    POST /upload?bg=transparent|white (multipart field "file").

Key Functions:
    - create_app(): App factory
    - main(): Run the service (console script "proofsheet-upload")

Responses:
    200 {"ok": true, "via": "primary"|"fallback", "base64": <PNG>}
    400 {"error": "No file uploaded"}
    413 {"error": "File too large"}
    500 {"error": "Image processing failed", "detail": ...}

Dependencies:
    - flask: HTTP routing
    - flask_cors: Origin allow-list
    - upload.converter: normalize_image

Used By:
    - upload.client.UploadClient (over HTTP)
"""

from __future__ import annotations

import base64
import logging
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from proofsheet.common.logging_utils import configure_logging

from .config import ServerSettings
from .converter import ConversionFallbackExhausted, normalize_image

logger = logging.getLogger(__name__)


def create_app(settings: Optional[ServerSettings] = None) -> Flask:
    """
    Build the conversion service app.

    Example:
        >>> app = create_app(ServerSettings(max_upload_bytes=1024))
        >>> client = app.test_client()
    """
    settings = settings or ServerSettings()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_upload_bytes
    app.config["PROOFSHEET_SETTINGS"] = settings
    CORS(app, resources={r"/upload": {"origins": list(settings.cors_origins)}})

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e):
        logger.warning(f"Rejected upload over {settings.max_upload_bytes} bytes")
        return jsonify({"error": "File too large"}), 413

    @app.route("/upload", methods=["POST"])
    def upload():
        file = request.files.get("file")
        if file is None:
            return jsonify({"error": "No file uploaded"}), 400

        data = file.read()
        if not data:
            return jsonify({"error": "No file uploaded"}), 400

        transparent = request.args.get("bg") == "transparent"
        logger.info(
            f"Converting {file.filename or 'upload'} ({len(data)} bytes, "
            f"bg={'transparent' if transparent else 'white'})"
        )

        try:
            result = normalize_image(data, transparent=transparent, settings=settings)
        except ConversionFallbackExhausted as e:
            return jsonify({"error": "Image processing failed", "detail": str(e)}), 500

        logger.info(f"Converted via {result.via} ({len(result.png)} bytes)")
        return jsonify({
            "ok": True,
            "via": result.via,
            "base64": base64.b64encode(result.png).decode("ascii"),
        })

    return app


def main() -> None:
    """Run the conversion service on PORT (default 4000)."""
    configure_logging(logging.INFO)
    settings = ServerSettings.from_env()
    app = create_app(settings)
    logger.info(f"Uploader running on http://localhost:{settings.port}")
    app.run(host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
