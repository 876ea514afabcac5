"""
Video Domain Exceptions.

Hard failures (validation, storage) abort an upload. Thumbnail failures are
recovered inside the pipeline and never reach the HTTP layer.
"""

from typing import Optional

from .models import ValidationFailure, ValidationOutcome, ProcessExecution


class VideoStoreError(Exception):
    """Base error for the video store"""


class UploadValidationError(VideoStoreError):
    """Upload rejected before anything was written"""

    def __init__(self, outcome: ValidationOutcome, message: str):
        super().__init__(message)
        self.outcome = outcome
        self.message = message

    @property
    def failure(self) -> Optional[ValidationFailure]:
        return self.outcome.failure


class StorageError(VideoStoreError):
    """Media storage failure"""


class StorageWriteError(StorageError):
    """The upload stream could not be durably written"""


class MediaNotFoundError(StorageError):
    """A stored media file does not exist beneath the storage root"""

    def __init__(self, relative_path: str):
        super().__init__(f"Media file not found: {relative_path}")
        self.relative_path = relative_path


class ThumbnailError(VideoStoreError):
    """Frame extraction failed; recoverable by a placeholder"""

    def __init__(self, message: str, execution: Optional[ProcessExecution] = None):
        super().__init__(message)
        self.execution = execution


class ProcessTimeoutError(ThumbnailError):
    """The media tool ran past its timeout and was killed"""


class ThumbnailGenerationError(ThumbnailError):
    """Both frame extraction and placeholder generation failed"""
