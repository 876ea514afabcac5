"""
Video API Routes.

FastAPI route definitions for video upload, streaming and categories.
"""

from typing import List, Optional

from fastapi import APIRouter, File, Form, Request, UploadFile

from .controllers import CategoryController, StreamingController, VideoController
from .schemas import (
    CategoryResponse, CreateCategoryRequest, MessageResponse,
    StreamingInfoResponse, VideoResponse, VideoUploadResponse
)

NOT_FOUND = {404: {"model": MessageResponse}}


def create_video_routes(
    video_controller: VideoController,
    streaming_controller: StreamingController
) -> APIRouter:
    """Create video API routes with dependency injection"""

    router = APIRouter(prefix="/api/videos", tags=["videos"])

    @router.get("", response_model=List[VideoResponse], response_model_by_alias=True)
    async def list_videos():
        """List all videos, newest first."""
        return await video_controller.list_videos()

    @router.get("/{video_id}", response_model=VideoResponse, response_model_by_alias=True, responses=NOT_FOUND)
    async def get_video(video_id: int):
        """
        Get a single video record.

        - **video_id**: Video identifier
        """
        return await video_controller.get_video(video_id)

    @router.post(
        "",
        status_code=201,
        response_model=VideoUploadResponse,
        responses={400: {"model": MessageResponse}, 413: {"model": MessageResponse}, 415: {"model": MessageResponse}, 500: {"model": MessageResponse}}
    )
    async def upload_video(
        request: Request,
        title: str = Form(""),
        description: str = Form(""),
        category_ids: Optional[List[int]] = Form(None, alias="categoryIds"),
        new_categories: Optional[List[str]] = Form(None, alias="newCategories"),
        file: Optional[UploadFile] = File(None)
    ):
        """
        Upload a video file.

        The file is validated (type, MIME type, size), stored under a unique
        name and given a thumbnail. A placeholder thumbnail is used when no
        frame can be extracted.
        """
        return await video_controller.upload_video(
            request=request,
            title=title,
            description=description,
            category_ids=category_ids,
            new_categories=new_categories,
            video_file=file
        )

    @router.get("/{video_id}/stream", responses=NOT_FOUND)
    async def stream_video(video_id: int, request: Request):
        """
        Stream video with HTTP range request support.

        A single ``Range: bytes=...`` header gets a 206 response with
        ``Content-Range``. Malformed or unsatisfiable ranges get 416.

        Usage in HTML5:
        ```html
        <video controls>
            <source src="/api/videos/{video_id}/stream" type="video/mp4">
        </video>
        ```
        """
        return await streaming_controller.stream_video(video_id, request)

    @router.get("/{video_id}/info", response_model=StreamingInfoResponse, response_model_by_alias=True, responses=NOT_FOUND)
    async def get_streaming_info(video_id: int):
        """
        Get streaming information for a video.

        Returns file size, content type, range support and the recommended
        chunk size.
        """
        return await streaming_controller.get_streaming_info(video_id)

    return router


def create_category_routes(category_controller: CategoryController) -> APIRouter:
    """Create category API routes"""

    router = APIRouter(prefix="/api/categories", tags=["categories"])

    @router.get("", response_model=List[CategoryResponse])
    async def list_categories():
        return await category_controller.list_categories()

    @router.get("/{category_id}", response_model=CategoryResponse, responses=NOT_FOUND)
    async def get_category(category_id: int):
        return await category_controller.get_category(category_id)

    @router.post("", status_code=201, response_model=CategoryResponse, responses={400: {"model": MessageResponse}})
    async def create_category(request: CreateCategoryRequest):
        """Create a category, or return the existing one with the same name."""
        return await category_controller.create_category(request.name)

    return router
