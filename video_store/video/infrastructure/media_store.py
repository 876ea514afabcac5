"""
File System Media Store.

Owns the upload directory tree. Files are written under a fresh unique token
so concurrent uploads never share a destination, and are referenced by paths
relative to the storage root.
"""

import inspect
import logging
import uuid
from pathlib import Path
from typing import Any, Optional, Tuple

import aiofiles

from ...core.config import StorageConfig
from ..domain.exceptions import MediaNotFoundError, StorageWriteError
from ..domain.interfaces import MediaStore
from ..domain.models import DEFAULT_CONTENT_TYPE, StoredMedia, VideoFormat

DEFAULT_CHUNK_SIZE = 1024 * 1024


class FileSystemMediaStore(MediaStore):
    """File system implementation of the media store"""

    def __init__(self, storage_config: StorageConfig, chunk_size_bytes: int = DEFAULT_CHUNK_SIZE):
        self.storage_config = storage_config
        self.chunk_size_bytes = chunk_size_bytes
        self.root = Path(storage_config.upload_path).resolve()
        self.logger = logging.getLogger(__name__)

    async def write(self, stream: Any, sanitized_filename: str, max_bytes: Optional[int] = None) -> StoredMedia:
        """Stream the upload to ``{token}_{sanitized_filename}`` under the root.

        The byte count is checked as it is copied: a stream longer than
        ``max_bytes`` or with no bytes at all is removed and rejected.
        """
        token = uuid.uuid4().hex
        stored_name = f"{token}_{sanitized_filename}"
        file_path = self.root / stored_name

        try:
            self._ensure_storage_directory()
        except OSError as e:
            raise StorageWriteError(f"Could not create storage directory {self.root}: {e}") from e

        try:
            # "x" fails instead of clobbering if the name somehow exists
            f = await aiofiles.open(file_path, "xb")
        except OSError as e:
            self.logger.error(f"Error creating {file_path}: {e}")
            raise StorageWriteError(f"Could not create {stored_name}: {e}") from e

        size_bytes = 0
        try:
            try:
                while True:
                    chunk = await self._read_chunk(stream)
                    if not chunk:
                        break
                    size_bytes += len(chunk)
                    if max_bytes is not None and size_bytes > max_bytes:
                        raise StorageWriteError(f"Upload exceeds {max_bytes} bytes")
                    await f.write(chunk)
                if size_bytes == 0:
                    raise StorageWriteError("Upload stream is empty")
                await f.flush()
            finally:
                await f.close()
        except BaseException as e:
            # Failed or cancelled writes leave nothing behind
            self._remove_partial(file_path)
            if isinstance(e, Exception):
                self.logger.error(f"Error writing upload to {file_path}: {e}")
                raise StorageWriteError(f"Could not write {stored_name}: {e}") from e
            raise

        self.logger.info(f"Video file saved: {file_path} ({size_bytes} bytes)")
        return StoredMedia(
            token=token,
            sanitized_filename=sanitized_filename,
            relative_path=stored_name,
            size_bytes=size_bytes
        )

    async def open(self, relative_path: str) -> Tuple[Any, int]:
        """Open a stored file at offset 0; the caller closes the handle"""
        file_path = self.resolve(relative_path)
        if not file_path.is_file():
            self.logger.warning(f"Video file not found: {file_path}")
            raise MediaNotFoundError(relative_path)

        try:
            handle = await aiofiles.open(file_path, "rb")
        except FileNotFoundError as e:
            # Deleted between the check and the open
            raise MediaNotFoundError(relative_path) from e

        try:
            size_bytes = file_path.stat().st_size
        except OSError:
            await handle.close()
            raise

        return handle, size_bytes

    def resolve(self, relative_path: str) -> Path:
        """Resolve against the root; paths escaping the root are not found"""
        if not relative_path:
            raise MediaNotFoundError(relative_path)

        candidate = (self.root / relative_path).resolve()
        if candidate == self.root or self.root not in candidate.parents:
            self.logger.warning(f"Rejected path outside storage root: {relative_path!r}")
            raise MediaNotFoundError(relative_path)
        return candidate

    def content_type_for(self, relative_path: str) -> str:
        video_format = VideoFormat.from_filename(relative_path)
        return video_format.mime_type if video_format else DEFAULT_CONTENT_TYPE

    async def _read_chunk(self, stream: Any) -> bytes:
        chunk = stream.read(self.chunk_size_bytes)
        if inspect.isawaitable(chunk):
            chunk = await chunk
        return chunk

    def _ensure_storage_directory(self) -> None:
        if not self.root.exists():
            self.root.mkdir(parents=True, exist_ok=True)
            self.logger.info(f"Created storage directory: {self.root}")

    def _remove_partial(self, file_path: Path) -> None:
        try:
            file_path.unlink()
            self.logger.info(f"Removed partial upload: {file_path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.error(f"Could not remove partial upload {file_path}: {e}")
