"""
Video Store - Core Module

This module contains configuration management and logging setup shared by
the upload pipeline, the streaming endpoint and the API server.
"""

__version__ = "1.0.0"
__author__ = "Video Store Team"

from .config import Config, UploadConfig, StorageConfig, ThumbnailConfig, SystemConfig

__all__ = ["Config", "UploadConfig", "StorageConfig", "ThumbnailConfig", "SystemConfig"]
