"""
Video Presentation Layer.

Contains HTTP controllers, request/response models, and API route definitions.
"""

from .controllers import VideoController, StreamingController, CategoryController
from .schemas import VideoResponse, VideoUploadResponse, CategoryResponse, StreamingInfoResponse
from .routes import create_video_routes, create_category_routes

__all__ = [
    "VideoController",
    "StreamingController",
    "CategoryController",
    "VideoResponse",
    "VideoUploadResponse",
    "CategoryResponse",
    "StreamingInfoResponse",
    "create_video_routes",
    "create_category_routes",
]
