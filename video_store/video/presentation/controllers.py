"""
Video HTTP Controllers.

Thin adapters between FastAPI and the application services: they map
requests to pipeline calls and pipeline results to status codes.
"""

import logging
import os
from typing import List, Optional
from urllib.parse import quote

from fastapi import Request, Response, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask
from starlette.datastructures import UploadFile as StarletteUploadFile

from ..application.streaming_service import StreamingService
from ..application.video_service import CategoryService, VideoDetails, VideoService
from ..domain.exceptions import StorageWriteError, UploadValidationError
from ..domain.models import StreamRange, UploadRequest, ValidationFailure
from .schemas import CategoryResponse, StreamingInfoResponse, VideoResponse, VideoUploadResponse

THUMBNAIL_URL_PREFIX = "/thumbnails"

_VALIDATION_STATUS = {
    ValidationFailure.BAD_EXTENSION: 415,
    ValidationFailure.BAD_MIME_TYPE: 415,
    ValidationFailure.TOO_LARGE: 413,
    ValidationFailure.EMPTY: 400,
}


def message_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def thumbnail_url(thumbnail_path: str) -> str:
    return f"{THUMBNAIL_URL_PREFIX}/{thumbnail_path}" if thumbnail_path else ""


def upload_size(upload: UploadFile) -> int:
    """Declared size of a multipart file, measured if the parser did not record it"""
    size = getattr(upload, "size", None)
    if size is not None:
        return size
    position = upload.file.tell()
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(position)
    return size


class VideoController:
    """Controller for video upload and metadata operations"""

    def __init__(self, video_service: VideoService):
        self.video_service = video_service
        self.logger = logging.getLogger(__name__)

    async def list_videos(self) -> List[VideoResponse]:
        return [self._convert_to_response(details) for details in self.video_service.get_all_videos()]

    async def get_video(self, video_id: int):
        details = self.video_service.get_video(video_id)
        if details is None:
            return message_response(404, f"Video {video_id} not found")
        return self._convert_to_response(details)

    async def upload_video(
        self,
        request: Request,
        title: str,
        description: str,
        category_ids: Optional[List[int]],
        new_categories: Optional[List[str]],
        video_file: Optional[UploadFile]
    ):
        """Validate, store and record an uploaded video"""
        if video_file is None or not video_file.filename:
            self.logger.warning("Upload attempt with no file")
            return message_response(400, "No video file provided")

        form = await request.form()
        file_count = sum(1 for _, value in form.multi_items() if isinstance(value, StarletteUploadFile))
        if file_count > 1:
            self.logger.warning("Upload attempt with multiple files")
            return message_response(400, "Only one file can be uploaded at a time")

        if not title or not title.strip():
            return message_response(400, "Title is required")

        upload_request = UploadRequest(
            filename=video_file.filename,
            content_type=video_file.content_type or "",
            size_bytes=upload_size(video_file),
            stream=video_file
        )

        try:
            details, descriptor = await self.video_service.upload_video(
                title=title.strip(),
                description=description or "",
                request=upload_request,
                category_ids=category_ids or [],
                new_categories=new_categories or []
            )
        except UploadValidationError as e:
            return message_response(_VALIDATION_STATUS[e.failure], e.message)
        except StorageWriteError as e:
            self.logger.error(f"Error uploading video: {e}")
            return message_response(500, "An error occurred while uploading the video")
        except Exception as e:
            self.logger.exception(f"Unexpected error uploading video: {e}")
            return message_response(500, "An error occurred while uploading the video")

        self.logger.info(f"Video uploaded successfully: {details.record.id} ({descriptor.stored_path})")
        response = VideoUploadResponse(
            id=details.record.id,
            title=details.record.title,
            message="Video uploaded successfully",
            thumbnail_url=thumbnail_url(descriptor.thumbnail_path)
        )
        return JSONResponse(
            status_code=201,
            content=response.model_dump(by_alias=True),
            headers={"Location": f"/api/videos/{details.record.id}"}
        )

    def _convert_to_response(self, details: VideoDetails) -> VideoResponse:
        record = details.record
        return VideoResponse(
            id=record.id,
            title=record.title,
            description=record.description,
            thumbnail_url=thumbnail_url(record.thumbnail_path),
            created_date=record.created_date,
            categories=[CategoryResponse(id=category.id, name=category.name) for category in details.categories]
        )


class StreamingController:
    """Controller for video streaming operations"""

    def __init__(self, streaming_service: StreamingService, video_service: VideoService):
        self.streaming_service = streaming_service
        self.video_service = video_service
        self.logger = logging.getLogger(__name__)

    async def get_streaming_info(self, video_id: int):
        file_info = self.video_service.get_video_file_info(video_id)
        if file_info is None:
            return message_response(404, "Video not found")
        content_type, file_size = file_info

        return StreamingInfoResponse(
            id=video_id,
            file_size_bytes=file_size,
            content_type=content_type,
            supports_range_requests=True,
            chunk_size_bytes=self.streaming_service.get_optimal_chunk_size(file_size)
        )

    async def stream_video(self, video_id: int, request: Request) -> Response:
        """Stream video with range request support"""
        stream = await self.video_service.get_video_stream(video_id)
        if stream is None:
            return message_response(404, "Video not found")

        file_size = stream.file_size_bytes
        headers = {
            "Accept-Ranges": "bytes",
            "Content-Disposition": f"inline; filename*=UTF-8''{quote(stream.display_name)}",
        }

        range_request = None
        range_header = request.headers.get("range")
        if range_header:
            try:
                range_request = self.streaming_service.validate_range(
                    StreamRange.from_header(range_header, file_size), file_size
                )
            except ValueError as e:
                self.logger.debug(f"Invalid range {range_header!r} for video {video_id}: {e}")
                range_request = None

            if range_request is None:
                await stream.close()
                return Response(status_code=416, headers={"Content-Range": f"bytes */{file_size}", "Accept-Ranges": "bytes"})

        status_code = 200
        if self.streaming_service.should_use_partial_content(range_request, file_size):
            status_code = 206
            headers["Content-Range"] = self.streaming_service.calculate_content_range_header(range_request, file_size)
            headers["Content-Length"] = str(range_request.size)
        else:
            headers["Content-Length"] = str(file_size)

        return StreamingResponse(
            self.streaming_service.iter_range(stream, range_request),
            status_code=status_code,
            headers=headers,
            media_type=stream.content_type,
            background=BackgroundTask(stream.close)
        )


class CategoryController:
    """Controller for category operations"""

    def __init__(self, category_service: CategoryService):
        self.category_service = category_service
        self.logger = logging.getLogger(__name__)

    async def list_categories(self) -> List[CategoryResponse]:
        return [CategoryResponse(id=c.id, name=c.name) for c in self.category_service.get_all_categories()]

    async def get_category(self, category_id: int):
        category = self.category_service.get_category(category_id)
        if category is None:
            return message_response(404, f"Category {category_id} not found")
        return CategoryResponse(id=category.id, name=category.name)

    async def create_category(self, name: str):
        try:
            category = self.category_service.create_category(name)
        except ValueError as e:
            return message_response(400, str(e))
        return JSONResponse(status_code=201, content=CategoryResponse(id=category.id, name=category.name).model_dump(by_alias=True))
