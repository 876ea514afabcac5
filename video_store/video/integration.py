"""
Video Module Integration.

Composition root for the video upload and streaming pipeline. This module
handles dependency injection and service composition.
"""

import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter

from ..core.config import Config
from ..storage.manager import MetadataStore

# Domain interfaces
from .domain.interfaces import MediaStore, VideoRepository

# Infrastructure implementations
from .infrastructure.media_store import FileSystemMediaStore
from .infrastructure.process_runner import ProcessRunner
from .infrastructure.thumbnails import FFmpegThumbnailExtractor

# Application services
from .application.validation import FileValidator
from .application.upload_service import UploadService
from .application.streaming_service import StreamingService
from .application.video_service import CategoryService, VideoService

# Presentation layer
from .presentation.controllers import CategoryController, StreamingController, VideoController
from .presentation.routes import create_category_routes, create_video_routes


class VideoModule:
    """
    Main video module that provides dependency injection and service composition.

    This class follows the composition root pattern, creating and wiring up
    all dependencies for the upload, thumbnail and streaming functionality.
    """

    def __init__(
        self,
        config: Config,
        video_repository: Optional[VideoRepository] = None,
        process_runner: Optional[ProcessRunner] = None
    ):
        self.config = config
        self.logger = logging.getLogger(__name__)

        self._initialize_services(video_repository, process_runner)

        self.logger.info("Video module initialized successfully")

    def _initialize_services(self, video_repository: Optional[VideoRepository], process_runner: Optional[ProcessRunner]):
        """Initialize all video services with proper dependency injection"""

        # Infrastructure layer
        self.video_repository = video_repository or MetadataStore(self.config.storage)
        self.media_store = self._create_media_store()
        self.thumbnail_extractor = self._create_thumbnail_extractor(process_runner)

        # Application layer
        self.file_validator = FileValidator(self.config.upload)
        self.upload_service = UploadService(
            file_validator=self.file_validator,
            media_store=self.media_store,
            thumbnail_extractor=self.thumbnail_extractor
        )
        self.streaming_service = StreamingService(media_store=self.media_store)
        self.video_service = VideoService(
            upload_service=self.upload_service,
            streaming_service=self.streaming_service,
            video_repository=self.video_repository
        )
        self.category_service = CategoryService(self.video_repository)

        # Presentation layer
        self.video_controller = VideoController(self.video_service)
        self.streaming_controller = StreamingController(
            streaming_service=self.streaming_service,
            video_service=self.video_service
        )
        self.category_controller = CategoryController(self.category_service)

    def _create_media_store(self) -> MediaStore:
        """Create media store implementation"""
        return FileSystemMediaStore(self.config.storage, chunk_size_bytes=self.config.upload.chunk_size_bytes)

    def _create_thumbnail_extractor(self, process_runner: Optional[ProcessRunner]) -> FFmpegThumbnailExtractor:
        """Create thumbnail extractor implementation"""
        return FFmpegThumbnailExtractor(self.config.thumbnail, process_runner=process_runner)

    def get_api_routes(self) -> List[APIRouter]:
        """Get FastAPI routes for video and category functionality"""
        return [
            create_video_routes(
                video_controller=self.video_controller,
                streaming_controller=self.streaming_controller
            ),
            create_category_routes(self.category_controller),
        ]

    def thumbnail_directory(self) -> Path:
        return self.thumbnail_extractor.thumbnail_directory()

    def get_module_status(self) -> dict:
        """Get status information about the video module"""
        return {
            "video_repository": type(self.video_repository).__name__,
            "media_store": type(self.media_store).__name__,
            "thumbnail_extractor": type(self.thumbnail_extractor).__name__,
            "ffmpeg_available": self.thumbnail_extractor.ffmpeg_available(),
            "upload_path": str(self.config.storage.upload_path),
            "thumbnail_path": str(self.thumbnail_directory()),
            "max_file_size_mb": self.config.upload.max_file_size_mb,
            "allowed_extensions": list(self.config.upload.allowed_extensions),
        }


def create_video_module(config: Config, process_runner: Optional[ProcessRunner] = None) -> VideoModule:
    """
    Factory function to create a configured video module.

    This is the main entry point for wiring the video pipeline into the
    API server.
    """
    return VideoModule(config=config, process_runner=process_runner)
