"""
Video Module for the Video Store service.

This module provides video upload validation, storage, thumbnail extraction
and range streaming following clean architecture principles.

The composition root lives in ``video_store.video.integration`` and is
imported from there.
"""

from .domain.models import StreamRange, UploadRequest, UploadDescriptor, VideoRecord, Category
from .application.upload_service import UploadService
from .application.streaming_service import StreamingService
from .application.video_service import VideoService

__all__ = ["StreamRange", "UploadRequest", "UploadDescriptor", "VideoRecord", "Category", "UploadService", "StreamingService", "VideoService"]
