"""
Video Domain Layer.

Contains pure business logic and domain models for video upload and streaming.
No external dependencies - only Python standard library and domain concepts.
"""

from .models import (
    VideoFormat,
    ValidationFailure,
    ValidationOutcome,
    UploadRequest,
    StoredMedia,
    ProcessExecution,
    UploadDescriptor,
    StreamRange,
    StreamHandle,
    Category,
    VideoRecord,
)
from .interfaces import MediaStore, ThumbnailExtractor, VideoRepository
from .exceptions import (
    VideoStoreError,
    UploadValidationError,
    StorageError,
    StorageWriteError,
    MediaNotFoundError,
    ThumbnailError,
    ProcessTimeoutError,
    ThumbnailGenerationError,
)

__all__ = [
    "VideoFormat",
    "ValidationFailure",
    "ValidationOutcome",
    "UploadRequest",
    "StoredMedia",
    "ProcessExecution",
    "UploadDescriptor",
    "StreamRange",
    "StreamHandle",
    "Category",
    "VideoRecord",
    "MediaStore",
    "ThumbnailExtractor",
    "VideoRepository",
    "VideoStoreError",
    "UploadValidationError",
    "StorageError",
    "StorageWriteError",
    "MediaNotFoundError",
    "ThumbnailError",
    "ProcessTimeoutError",
    "ThumbnailGenerationError",
]
