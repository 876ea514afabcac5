"""
Video Domain Models.

Pure business entities and value objects for the upload and streaming pipeline.
These models contain no external dependencies and represent core business concepts.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Tuple


class VideoFormat(Enum):
    """Supported video formats"""
    MP4 = "mp4"
    AVI = "avi"
    MOV = "mov"

    @property
    def mime_type(self) -> str:
        return _FORMAT_MIME_TYPES[self]

    @classmethod
    def from_filename(cls, filename: str) -> Optional["VideoFormat"]:
        """Look up a format by extension, case-insensitively"""
        extension = get_extension(filename)
        try:
            return cls(extension.lower())
        except ValueError:
            return None


_FORMAT_MIME_TYPES = {
    VideoFormat.MP4: "video/mp4",
    VideoFormat.AVI: "video/x-msvideo",
    VideoFormat.MOV: "video/quicktime",
}

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def get_extension(filename: str) -> str:
    """Return the text after the last dot, without the dot ("" if none).

    A leading dot counts (".mp4" has extension "mp4"); a trailing dot does not.
    """
    if not filename:
        return ""
    index = filename.rfind(".")
    if index < 0 or index == len(filename) - 1:
        return ""
    # Dots inside a directory component are not extensions
    if "/" in filename[index:] or "\\" in filename[index:]:
        return ""
    return filename[index + 1:]


class ValidationFailure(Enum):
    """Reasons an upload is rejected before anything is written"""
    BAD_EXTENSION = "bad_extension"
    BAD_MIME_TYPE = "bad_mime_type"
    TOO_LARGE = "too_large"
    EMPTY = "empty"


@dataclass(frozen=True)
class ValidationOutcome:
    """Tagged validation result: valid, or invalid with a single failure"""
    failure: Optional[ValidationFailure] = None

    @property
    def is_valid(self) -> bool:
        return self.failure is None

    @classmethod
    def valid(cls) -> "ValidationOutcome":
        return cls()

    @classmethod
    def invalid(cls, failure: ValidationFailure) -> "ValidationOutcome":
        return cls(failure=failure)


@dataclass
class UploadRequest:
    """A single inbound upload; lives only for the duration of the call.

    ``stream`` is any object with a ``read(size)`` method, sync or async
    (a file object or a FastAPI ``UploadFile``).
    """
    filename: str
    content_type: str
    size_bytes: int
    stream: Any


@dataclass(frozen=True)
class StoredMedia:
    """A media file written beneath the storage root"""
    token: str
    sanitized_filename: str
    relative_path: str
    size_bytes: int

    def __post_init__(self):
        if not self.token:
            raise ValueError("Token cannot be empty")
        if self.size_bytes < 0:
            raise ValueError("File size cannot be negative")


@dataclass(frozen=True)
class ProcessExecution:
    """Record of one child-process invocation"""
    command: Tuple[str, ...]
    exit_code: Optional[int]
    stderr: str
    elapsed_seconds: float
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.timed_out and self.exit_code == 0


@dataclass(frozen=True)
class UploadDescriptor:
    """What the pipeline hands to metadata storage after a successful upload"""
    media_id: str
    stored_path: str
    thumbnail_path: str
    original_filename: str
    sanitized_filename: str
    content_type: str
    size_bytes: int

    @property
    def has_thumbnail(self) -> bool:
        return bool(self.thumbnail_path)


@dataclass(frozen=True)
class StreamRange:
    """HTTP range request value object"""
    start: int
    end: Optional[int] = None

    def __post_init__(self):
        if self.start < 0:
            raise ValueError("Start byte cannot be negative")
        if self.end is not None and self.end < self.start:
            raise ValueError("End byte cannot be less than start byte")

    @property
    def size(self) -> Optional[int]:
        """Get range size in bytes"""
        if self.end is not None:
            return self.end - self.start + 1
        return None

    @classmethod
    def from_header(cls, range_header: str, file_size: int) -> 'StreamRange':
        """Parse a single-range HTTP Range header"""
        if not range_header.startswith('bytes='):
            raise ValueError("Invalid range header format")

        range_spec = range_header[6:].strip()

        if ',' in range_spec:
            raise ValueError("Multiple ranges are not supported")
        if '-' not in range_spec:
            raise ValueError("Invalid range specification")

        start_str, end_str = (part.strip() for part in range_spec.split('-', 1))

        if not start_str:
            # Suffix range (e.g., "-500" means last 500 bytes)
            if not end_str:
                raise ValueError("Invalid range specification")
            suffix_length = int(end_str)
            if suffix_length <= 0:
                raise ValueError("Invalid suffix length")
            start = max(0, file_size - suffix_length)
            return cls(start=start, end=max(start, file_size - 1))

        start = int(start_str)
        if end_str:
            end = int(end_str)
            if end < start:
                raise ValueError("End byte cannot be less than start byte")
            end = min(end, max(start, file_size - 1))
        else:
            end = max(start, file_size - 1)

        return cls(start=start, end=end)


@dataclass
class StreamHandle:
    """An open stored file ready for range serving.

    The caller owns ``handle`` and must close it.
    """
    handle: Any
    content_type: str
    display_name: str
    file_size_bytes: int

    async def close(self) -> None:
        await self.handle.close()


@dataclass(frozen=True)
class Category:
    """Category entity"""
    id: int
    name: str


@dataclass
class VideoRecord:
    """Persisted video metadata"""
    id: int
    title: str
    description: str
    file_path: str
    thumbnail_path: str
    created_date: datetime
    category_ids: List[int] = field(default_factory=list)

    def __post_init__(self):
        if not self.title:
            raise ValueError("Title cannot be empty")
        if not self.file_path:
            raise ValueError("File path cannot be empty")
