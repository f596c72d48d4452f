"""
Unit tests for upload settings.
"""

import pytest

from proofsheet.upload import ServerSettings, UploadSettings


class TestUploadSettings:
    """Tests for UploadSettings."""

    def test_from_env_when_unset_then_localhost(self):
        assert UploadSettings.from_env({}).upload_url == "http://localhost:4000/upload"

    def test_from_env_when_set_then_trailing_slash_stripped(self):
        settings = UploadSettings.from_env({"PROOFSHEET_UPLOAD_URL": "https://convert.example/"})

        assert settings.upload_url == "https://convert.example/upload"

    def test_init_when_not_http_then_raises(self):
        with pytest.raises(ValueError, match="http"):
            UploadSettings(base_url="ftp://convert.example")


class TestServerSettings:
    """Tests for ServerSettings."""

    def test_init_when_defaults_then_limits(self):
        settings = ServerSettings()

        assert settings.max_upload_bytes == 200 * 1024 * 1024
        assert settings.max_input_pixels == 50_000_000
        assert settings.downscale_box_px == 5000
        assert settings.port == 4000

    def test_from_env_when_port_set_then_used(self):
        assert ServerSettings.from_env({"PORT": "5050"}).port == 5050

    def test_init_when_port_invalid_then_raises(self):
        with pytest.raises(ValueError, match="port"):
            ServerSettings(port=70000)

    def test_init_when_decode_ceiling_below_downscale_threshold_then_raises(self):
        with pytest.raises(ValueError, match="max_decode_pixels"):
            ServerSettings(max_decode_pixels=10, max_input_pixels=100)
