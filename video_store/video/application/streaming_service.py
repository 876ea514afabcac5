"""
Video Streaming Application Service.

Opens stored media for playback and provides the range arithmetic the HTTP
layer needs to answer ``Range`` requests.
"""

import logging
from pathlib import PurePath
from typing import AsyncIterator, Optional, Tuple

from ..domain.exceptions import MediaNotFoundError
from ..domain.interfaces import MediaStore
from ..domain.models import StreamHandle, StreamRange


class StreamingService:
    """Application service for video streaming"""

    def __init__(self, media_store: MediaStore):
        self.media_store = media_store
        self.logger = logging.getLogger(__name__)

    async def open_for_streaming(self, stored_path: str) -> StreamHandle:
        """Open a stored file positioned at offset 0.

        Raises MediaNotFoundError when the file is gone. The returned handle
        must be closed by the caller.
        """
        handle, file_size = await self.media_store.open(stored_path)
        return StreamHandle(
            handle=handle,
            content_type=self.media_store.content_type_for(stored_path),
            display_name=PurePath(stored_path).name,
            file_size_bytes=file_size
        )

    def describe(self, stored_path: str) -> Tuple[str, int]:
        """Content type and size of a stored file without opening it.

        Raises MediaNotFoundError when the file is gone.
        """
        file_path = self.media_store.resolve(stored_path)
        try:
            file_size = file_path.stat().st_size
        except FileNotFoundError as e:
            raise MediaNotFoundError(stored_path) from e
        return self.media_store.content_type_for(stored_path), file_size

    async def iter_range(
        self,
        stream: StreamHandle,
        range_request: Optional[StreamRange] = None,
        chunk_size: Optional[int] = None
    ) -> AsyncIterator[bytes]:
        """Yield the bytes of ``range_request`` (whole file if None), then close the handle"""
        try:
            start = range_request.start if range_request else 0
            end = range_request.end if range_request and range_request.end is not None else stream.file_size_bytes - 1
            remaining = end - start + 1
            chunk_size = chunk_size or self.get_optimal_chunk_size(stream.file_size_bytes)

            await stream.handle.seek(start)
            while remaining > 0:
                chunk = await stream.handle.read(min(chunk_size, remaining))
                if not chunk:
                    break
                remaining -= len(chunk)
                yield chunk
        finally:
            await stream.close()

    def validate_range(self, range_request: StreamRange, file_size: int) -> Optional[StreamRange]:
        """Clamp a range to the file; None if it cannot be satisfied"""
        start = range_request.start
        end = range_request.end

        if start >= file_size:
            return None

        if end is None or end >= file_size:
            end = file_size - 1

        return StreamRange(start=start, end=end)

    def calculate_content_range_header(self, range_request: StreamRange, file_size: int) -> str:
        """Calculate Content-Range header value"""
        return f"bytes {range_request.start}-{range_request.end}/{file_size}"

    def should_use_partial_content(self, range_request: Optional[StreamRange], file_size: int) -> bool:
        """A Range header always gets 206, even when it spans the whole file"""
        return range_request is not None

    def get_optimal_chunk_size(self, file_size: int) -> int:
        """Get optimal chunk size for streaming based on file size"""
        if file_size < 1024 * 1024:  # < 1MB
            return 64 * 1024
        elif file_size < 10 * 1024 * 1024:  # < 10MB
            return 256 * 1024
        elif file_size < 100 * 1024 * 1024:  # < 100MB
            return 512 * 1024
        else:
            return 1024 * 1024
