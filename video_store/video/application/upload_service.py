"""
Upload Application Service.

Orchestrates the upload pipeline: validate, sanitize and persist, then
best-effort thumbnail extraction.
"""

import logging

from ...core.logging_config import get_performance_logger
from ..domain.exceptions import ThumbnailError
from ..domain.interfaces import MediaStore, ThumbnailExtractor
from ..domain.models import UploadDescriptor, UploadRequest, StoredMedia
from .sanitizer import sanitize_filename
from .validation import FileValidator


class UploadService:
    """Application service for the upload pipeline"""

    def __init__(
        self,
        file_validator: FileValidator,
        media_store: MediaStore,
        thumbnail_extractor: ThumbnailExtractor
    ):
        self.file_validator = file_validator
        self.media_store = media_store
        self.thumbnail_extractor = thumbnail_extractor
        self.performance_logger = get_performance_logger("upload")
        self.logger = logging.getLogger(__name__)

    async def upload(self, request: UploadRequest) -> UploadDescriptor:
        """Run the pipeline for one upload.

        Raises:
            UploadValidationError: the declared metadata was rejected; nothing was written.
            StorageWriteError: the stream could not be written, was empty or ran past the
                size limit; nothing was kept.
        """
        self.file_validator.ensure_valid(request.filename, request.content_type, request.size_bytes)

        sanitized_filename = sanitize_filename(request.filename)
        stored = await self.media_store.write(
            request.stream, sanitized_filename, max_bytes=self.file_validator.max_size_bytes()
        )

        thumbnail_path = await self._generate_thumbnail_safely(stored)

        return UploadDescriptor(
            media_id=stored.token,
            stored_path=stored.relative_path,
            thumbnail_path=thumbnail_path,
            original_filename=request.filename,
            sanitized_filename=sanitized_filename,
            content_type=request.content_type,
            size_bytes=stored.size_bytes
        )

    async def _generate_thumbnail_safely(self, stored: StoredMedia) -> str:
        """Thumbnail failures never fail the upload; they yield an empty path"""
        self.performance_logger.start_timer(f"thumbnail {stored.relative_path}")
        try:
            video_path = self.media_store.resolve(stored.relative_path)
            thumbnail_path = await self.thumbnail_extractor.extract(video_path, token=stored.token)
        except ThumbnailError as e:
            self.logger.error(f"Failed to generate thumbnail for video: {stored.relative_path}. Video will be saved without thumbnail. ({e})")
            return ""
        except Exception as e:
            self.logger.exception(f"Unexpected error generating thumbnail for {stored.relative_path}: {e}")
            return ""
        finally:
            self.performance_logger.end_timer(f"thumbnail {stored.relative_path}")

        if not (self.thumbnail_extractor.thumbnail_directory() / thumbnail_path).is_file():
            self.logger.error(f"Thumbnail {thumbnail_path} is missing on disk, recording none")
            return ""

        self.logger.info(f"Thumbnail generated successfully: {thumbnail_path}")
        return thumbnail_path
