"""
Configuration management for the Video Store service.

This module handles all configuration settings including upload limits,
storage paths, thumbnail generation parameters, and system parameters.
"""

import json
import logging
from typing import Dict, List, Optional, Any, Tuple
from dataclasses import dataclass, asdict, fields
from pathlib import Path


@dataclass(frozen=True)
class UploadConfig:
    """Upload validation limits"""

    max_file_size_mb: int = 100
    allowed_extensions: Tuple[str, ...] = ("mp4", "avi", "mov")
    allowed_mime_types: Tuple[str, ...] = ("video/mp4", "video/x-msvideo", "video/quicktime")
    chunk_size_bytes: int = 1024 * 1024  # Copy buffer for writes and stream reads

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


@dataclass(frozen=True)
class StorageConfig:
    """Storage configuration"""

    upload_path: str = "uploads/videos"
    metadata_index_path: str = "uploads/video_index.json"


@dataclass(frozen=True)
class ThumbnailConfig:
    """Thumbnail extraction configuration"""

    upload_path: str = "uploads/thumbnails"
    width: int = 256
    height: int = 256
    ffmpeg_path: Optional[str] = None  # None resolves "ffmpeg" from PATH
    timeout_seconds: int = 30
    seek_seconds: float = 1.0
    placeholder_text: str = "No Preview"


@dataclass(frozen=True)
class SystemConfig:
    """System-wide configuration"""

    log_level: str = "INFO"
    log_file: str = "video_store.log"
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    enable_api: bool = True
    cors_origins: Tuple[str, ...] = ("*",)


def _build_section(section_cls, data: Dict[str, Any]):
    """Build a frozen section from JSON data, ignoring unknown keys"""
    known = {f.name for f in fields(section_cls)}
    values = {}
    for key, value in data.items():
        if key not in known:
            continue
        # JSON has no tuples
        values[key] = tuple(value) if isinstance(value, list) else value
    return section_cls(**values)


class Config:
    """Main configuration manager"""

    def __init__(self, config_file: Optional[str] = None, save_defaults: bool = True):
        self.config_file = config_file or "config.json"
        self.save_defaults = save_defaults
        self.logger = logging.getLogger(__name__)

        # Default configurations
        self.upload = UploadConfig()
        self.storage = StorageConfig()
        self.thumbnail = ThumbnailConfig()
        self.system = SystemConfig()

        # Load configuration
        self.load_config()

    def load_config(self) -> None:
        """Load configuration from file"""
        config_path = Path(self.config_file)

        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    config_data = json.load(f)

                if "upload" in config_data:
                    self.upload = _build_section(UploadConfig, config_data["upload"])

                if "storage" in config_data:
                    self.storage = _build_section(StorageConfig, config_data["storage"])

                if "thumbnail" in config_data:
                    self.thumbnail = _build_section(ThumbnailConfig, config_data["thumbnail"])

                if "system" in config_data:
                    self.system = _build_section(SystemConfig, config_data["system"])

                self.logger.info(f"Configuration loaded from {config_path}")

            except Exception as e:
                self.logger.error(f"Error loading config from {config_path}: {e}")
                self.upload = UploadConfig()
                self.storage = StorageConfig()
                self.thumbnail = ThumbnailConfig()
                self.system = SystemConfig()
        else:
            self.logger.info(f"Config file {config_path} not found, using defaults")
            if self.save_defaults:
                self.save_config()

    def save_config(self) -> None:
        """Save current configuration to file"""
        try:
            with open(self.config_file, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
            self.logger.info(f"Configuration saved to {self.config_file}")
        except Exception as e:
            self.logger.error(f"Error saving config to {self.config_file}: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {"upload": asdict(self.upload), "storage": asdict(self.storage), "thumbnail": asdict(self.thumbnail), "system": asdict(self.system)}
