"""
Video Infrastructure Layer.

Contains implementations of domain interfaces using external dependencies
like the file system, FFmpeg and OpenCV.
"""

from .media_store import FileSystemMediaStore
from .process_runner import ProcessRunner
from .thumbnails import FFmpegThumbnailExtractor

__all__ = [
    "FileSystemMediaStore",
    "ProcessRunner",
    "FFmpegThumbnailExtractor",
]
