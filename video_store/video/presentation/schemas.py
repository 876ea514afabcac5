"""
Video API Request/Response Schemas.

Pydantic models for API serialization and validation. Field names are
camelCase on the wire.
"""

from typing import List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategoryResponse(ApiModel):
    """Category response model"""
    id: int = Field(..., description="Category identifier")
    name: str = Field(..., description="Category name")


class CreateCategoryRequest(ApiModel):
    """Category creation request"""
    name: str = Field(..., min_length=1, max_length=100, description="Category name")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": {"name": "Tutorials"}}
    )


class VideoResponse(ApiModel):
    """Video record response"""
    id: int = Field(..., description="Video identifier")
    title: str = Field(..., description="Video title")
    description: str = Field("", description="Video description")
    thumbnail_url: str = Field("", description="Thumbnail URL, empty when no thumbnail exists")
    created_date: datetime = Field(..., description="Upload timestamp (UTC)")
    categories: List[CategoryResponse] = Field(default_factory=list, description="Assigned categories")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Holiday",
                "description": "Beach day",
                "thumbnailUrl": "/thumbnails/3f2b9c0e4a5d4e8f9a1b2c3d4e5f6a7b.jpg",
                "createdDate": "2025-08-04T14:30:22+00:00",
                "categories": [{"id": 1, "name": "Travel"}]
            }
        }
    )


class VideoUploadResponse(ApiModel):
    """Upload result"""
    id: int = Field(..., description="New video identifier")
    title: str = Field(..., description="Video title")
    message: str = Field(..., description="Status message")
    thumbnail_url: str = Field("", description="Thumbnail URL, empty when no thumbnail exists")


class StreamingInfoResponse(ApiModel):
    """Streaming information response"""
    id: int = Field(..., description="Video identifier")
    file_size_bytes: int = Field(..., description="Total file size")
    content_type: str = Field(..., description="MIME content type")
    supports_range_requests: bool = Field(..., description="Whether range requests are supported")
    chunk_size_bytes: int = Field(..., description="Recommended chunk size for streaming")


class MessageResponse(ApiModel):
    """Error or status message"""
    message: str
