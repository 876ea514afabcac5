"""
Video Domain Interfaces.

Abstract interfaces that define contracts for storage, thumbnail extraction
and metadata persistence. These interfaces allow dependency inversion - domain
logic doesn't depend on infrastructure.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from .models import StoredMedia, VideoRecord, Category


class MediaStore(ABC):
    """Owns the on-disk media tree beneath the storage root"""

    @abstractmethod
    async def write(self, stream: Any, sanitized_filename: str, max_bytes: Optional[int] = None) -> StoredMedia:
        """Write the full stream under a fresh unique name; empty or over-limit streams are not kept"""
        pass

    @abstractmethod
    async def open(self, relative_path: str) -> Tuple[Any, int]:
        """Open a stored file for reading at offset 0; returns (handle, size)"""
        pass

    @abstractmethod
    def resolve(self, relative_path: str) -> Path:
        """Resolve a relative storage path to an absolute path beneath the root"""
        pass

    @abstractmethod
    def content_type_for(self, relative_path: str) -> str:
        """Best-effort content type from the file extension"""
        pass


class ThumbnailExtractor(ABC):
    """Derives a preview image from a stored video"""

    @abstractmethod
    async def extract(self, video_path: Path, token: Optional[str] = None) -> str:
        """Extract a thumbnail; returns the path relative to the thumbnail root.

        Degrades to a placeholder on failure and raises only when the
        placeholder cannot be written either.
        """
        pass

    @abstractmethod
    def thumbnail_directory(self) -> Path:
        """Absolute thumbnail root"""
        pass


class VideoRepository(ABC):
    """Narrow record store for video and category metadata"""

    @abstractmethod
    def create_video(
        self,
        title: str,
        description: str,
        file_path: str,
        thumbnail_path: str,
        category_ids: Iterable[int] = ()
    ) -> VideoRecord:
        pass

    @abstractmethod
    def get_video(self, video_id: int) -> Optional[VideoRecord]:
        pass

    @abstractmethod
    def list_videos(self) -> List[VideoRecord]:
        """All videos, newest first"""
        pass

    @abstractmethod
    def list_categories(self) -> List[Category]:
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        pass

    @abstractmethod
    def get_categories_by_ids(self, category_ids: Iterable[int]) -> List[Category]:
        pass

    @abstractmethod
    def get_or_create_category(self, name: str) -> Category:
        """Case-insensitive lookup by trimmed name, creating it if absent"""
        pass
