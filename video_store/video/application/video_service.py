"""
Video Application Service.

Connects the upload pipeline and the stream reader to the metadata record
store: uploads become video records, record ids resolve to stored files.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from ..domain.exceptions import MediaNotFoundError
from ..domain.interfaces import VideoRepository
from ..domain.models import Category, StreamHandle, UploadDescriptor, UploadRequest, VideoRecord
from .streaming_service import StreamingService
from .upload_service import UploadService


@dataclass
class VideoDetails:
    """A video record with its categories resolved"""
    record: VideoRecord
    categories: List[Category] = field(default_factory=list)


class VideoService:
    """Application service for video management"""

    def __init__(
        self,
        upload_service: UploadService,
        streaming_service: StreamingService,
        video_repository: VideoRepository
    ):
        self.upload_service = upload_service
        self.streaming_service = streaming_service
        self.video_repository = video_repository
        self.logger = logging.getLogger(__name__)

    async def upload_video(
        self,
        title: str,
        description: str,
        request: UploadRequest,
        category_ids: Iterable[int] = (),
        new_categories: Iterable[str] = ()
    ) -> Tuple[VideoDetails, UploadDescriptor]:
        """Run the upload pipeline and record the result.

        Validation and storage errors propagate before any record is created.
        """
        descriptor = await self.upload_service.upload(request)

        categories = self._get_or_create_categories(category_ids, new_categories)
        record = self.video_repository.create_video(
            title=title,
            description=description,
            file_path=descriptor.stored_path,
            thumbnail_path=descriptor.thumbnail_path,
            category_ids=[category.id for category in categories]
        )

        self.logger.info(f"Video record created with ID: {record.id}")
        return VideoDetails(record=record, categories=categories), descriptor

    def get_all_videos(self) -> List[VideoDetails]:
        return [self._with_categories(record) for record in self.video_repository.list_videos()]

    def get_video(self, video_id: int) -> Optional[VideoDetails]:
        record = self.video_repository.get_video(video_id)
        return self._with_categories(record) if record else None

    async def get_video_stream(self, video_id: int) -> Optional[StreamHandle]:
        """Open a video's file for streaming; None if the record or file is missing"""
        record = self.video_repository.get_video(video_id)
        if record is None:
            return None

        try:
            return await self.streaming_service.open_for_streaming(record.file_path)
        except MediaNotFoundError:
            self.logger.warning(f"Video {video_id} has no file on disk: {record.file_path}")
            return None

    def get_video_file_info(self, video_id: int) -> Optional[Tuple[str, int]]:
        """(content type, size) of a video's file; None if the record or file is missing"""
        record = self.video_repository.get_video(video_id)
        if record is None:
            return None

        try:
            return self.streaming_service.describe(record.file_path)
        except MediaNotFoundError:
            self.logger.warning(f"Video {video_id} has no file on disk: {record.file_path}")
            return None

    def _get_or_create_categories(self, category_ids: Iterable[int], new_category_names: Iterable[str]) -> List[Category]:
        categories: List[Category] = []

        ids = list(category_ids)
        if ids:
            categories.extend(self.video_repository.get_categories_by_ids(ids))

        for name in new_category_names:
            if not name or not name.strip():
                continue
            category = self.video_repository.get_or_create_category(name)
            if all(existing.id != category.id for existing in categories):
                categories.append(category)

        return categories

    def _with_categories(self, record: VideoRecord) -> VideoDetails:
        return VideoDetails(record=record, categories=self.video_repository.get_categories_by_ids(record.category_ids))


class CategoryService:
    """Application service for categories"""

    def __init__(self, video_repository: VideoRepository):
        self.video_repository = video_repository

    def get_all_categories(self) -> List[Category]:
        return self.video_repository.list_categories()

    def get_category(self, category_id: int) -> Optional[Category]:
        return self.video_repository.get_category(category_id)

    def create_category(self, name: str) -> Category:
        return self.video_repository.get_or_create_category(name)
