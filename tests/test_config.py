"""
Tests for configuration loading.
"""

import json

from video_store.core.config import Config, UploadConfig


def test_defaults_when_file_missing(tmp_path):
    config = Config(config_file=str(tmp_path / "missing.json"), save_defaults=False)

    assert config.upload.max_file_size_mb == 100
    assert config.upload.allowed_extensions == ("mp4", "avi", "mov")
    assert config.upload.allowed_mime_types == ("video/mp4", "video/x-msvideo", "video/quicktime")
    assert config.thumbnail.width == 256
    assert config.thumbnail.height == 256
    assert config.thumbnail.timeout_seconds == 30
    assert not (tmp_path / "missing.json").exists()


def test_missing_file_is_written_with_defaults(tmp_path):
    config_path = tmp_path / "config.json"
    Config(config_file=str(config_path))

    saved = json.loads(config_path.read_text())
    assert saved["upload"]["max_file_size_mb"] == 100
    assert saved["thumbnail"]["placeholder_text"] == "No Preview"
    assert saved["system"]["api_port"] == 5000


def test_load_overrides_and_ignores_unknown_keys(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({
        "upload": {"max_file_size_mb": 5, "allowed_extensions": ["mp4"], "unknown_key": True},
        "thumbnail": {"width": 320, "ffmpeg_path": "/opt/ffmpeg/bin/ffmpeg"},
    }))

    config = Config(config_file=str(config_path))

    assert config.upload.max_file_size_mb == 5
    assert config.upload.allowed_extensions == ("mp4",)
    assert config.upload.max_file_size_bytes == 5 * 1024 * 1024
    assert config.thumbnail.width == 320
    assert config.thumbnail.height == 256
    assert config.thumbnail.ffmpeg_path == "/opt/ffmpeg/bin/ffmpeg"
    assert config.storage.upload_path == "uploads/videos"


def test_invalid_json_falls_back_to_defaults(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text("{not json")

    config = Config(config_file=str(config_path))

    assert config.upload == UploadConfig()


def test_to_dict_round_trips_through_file(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"system": {"api_port": 8080, "cors_origins": ["http://localhost:3000"]}}))

    config = Config(config_file=str(config_path))
    config.save_config()
    reloaded = Config(config_file=str(config_path))

    assert reloaded.system.api_port == 8080
    assert reloaded.system.cors_origins == ("http://localhost:3000",)
