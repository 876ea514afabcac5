"""
Video Application Layer.

Contains use cases and application services that orchestrate domain logic
and coordinate between domain and infrastructure layers.
"""

from .validation import FileValidator
from .sanitizer import sanitize_filename
from .upload_service import UploadService
from .streaming_service import StreamingService
from .video_service import VideoService, CategoryService, VideoDetails

__all__ = [
    "FileValidator",
    "sanitize_filename",
    "UploadService",
    "StreamingService",
    "VideoService",
    "CategoryService",
    "VideoDetails",
]
