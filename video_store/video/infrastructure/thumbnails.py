"""
Thumbnail Extraction.

Extracts a single downsized frame with FFmpeg. When extraction fails for any
reason (missing tool, non-zero exit without output, timeout) a placeholder
image is drawn with OpenCV instead, falling back to an FFmpeg solid-color
frame if OpenCV cannot write the file.
"""

import asyncio
import logging
import shutil
import uuid
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np

from ...core.config import ThumbnailConfig
from ..domain.exceptions import ThumbnailError, ProcessTimeoutError, ThumbnailGenerationError
from ..domain.interfaces import ThumbnailExtractor
from .process_runner import ProcessRunner

PLACEHOLDER_BACKGROUND = (64, 64, 64)  # BGR
PLACEHOLDER_HEX_COLOR = "404040"


class FFmpegThumbnailExtractor(ThumbnailExtractor):
    """FFmpeg-based thumbnail extractor with placeholder fallback"""

    def __init__(self, thumbnail_config: ThumbnailConfig, process_runner: Optional[ProcessRunner] = None):
        self.thumbnail_config = thumbnail_config
        self.process_runner = process_runner or ProcessRunner()
        self.logger = logging.getLogger(__name__)

        self._thumbnail_dir = Path(thumbnail_config.upload_path).resolve()
        self._ensure_thumbnail_directory()

        self._ffmpeg_path = thumbnail_config.ffmpeg_path or shutil.which("ffmpeg") or "ffmpeg"
        if not thumbnail_config.ffmpeg_path and shutil.which("ffmpeg") is None:
            self.logger.warning("FFmpeg not found on PATH - thumbnails will be placeholders")

    def thumbnail_directory(self) -> Path:
        return self._thumbnail_dir

    def ffmpeg_available(self) -> bool:
        return shutil.which(self._ffmpeg_path) is not None

    async def extract(self, video_path: Path, token: Optional[str] = None) -> str:
        """Extract a thumbnail; returns its path relative to the thumbnail root"""
        thumbnail_name = f"{token or uuid.uuid4().hex}.jpg"
        output_path = self._thumbnail_dir / thumbnail_name

        try:
            await self._extract_frame(Path(video_path), output_path)

            if self._is_written(output_path):
                self.logger.info(f"Thumbnail generated: {thumbnail_name}")
                return thumbnail_name

            self.logger.warning(f"FFmpeg did not generate a thumbnail for {video_path}, creating placeholder")

        except Exception as e:
            self.logger.error(f"Failed to extract thumbnail from {video_path}: {e}")

        try:
            await self._create_placeholder(output_path)
        except Exception as e:
            self.logger.error(f"Failed to create placeholder thumbnail {thumbnail_name}: {e}")
            raise ThumbnailGenerationError(f"Thumbnail extraction and placeholder creation both failed for {video_path}") from e

        self.logger.info(f"Placeholder thumbnail created: {thumbnail_name}")
        return thumbnail_name

    async def _extract_frame(self, video_path: Path, output_path: Path) -> None:
        if not video_path.exists():
            raise ThumbnailError(f"Video file not found: {video_path}")

        command = self._build_extract_command(video_path, output_path)
        execution = await self.process_runner.run(command, self.thumbnail_config.timeout_seconds)

        if execution.timed_out:
            raise ProcessTimeoutError(
                f"FFmpeg process timed out after {self.thumbnail_config.timeout_seconds} seconds",
                execution
            )

        # Only logged; whether the output file exists decides success
        if execution.exit_code != 0:
            self.logger.warning(f"FFmpeg exited with code {execution.exit_code}. Error: {execution.stderr.strip()}")
        else:
            self.logger.debug(f"FFmpeg finished in {execution.elapsed_seconds:.2f}s")

    def _build_extract_command(self, video_path: Path, output_path: Path) -> List[str]:
        """Build FFmpeg command for single-frame extraction"""
        width = self.thumbnail_config.width
        height = self.thumbnail_config.height
        video_filter = (
            f"scale={width}:{height}:force_original_aspect_ratio=decrease,"
            f"pad={width}:{height}:(ow-iw)/2:(oh-ih)/2:black"
        )
        return [
            self._ffmpeg_path,
            "-ss", self._format_timestamp(self.thumbnail_config.seek_seconds),
            "-i", str(video_path),
            "-frames:v", "1",
            "-vf", video_filter,
            "-y",
            str(output_path)
        ]

    async def _create_placeholder(self, output_path: Path) -> None:
        try:
            written = await asyncio.get_running_loop().run_in_executor(
                None, self._draw_placeholder, output_path
            )
            if written and self._is_written(output_path):
                return
            self.logger.warning("OpenCV could not write placeholder, trying FFmpeg")
        except Exception as e:
            self.logger.warning(f"OpenCV placeholder failed ({e}), trying FFmpeg")

        await self._create_placeholder_with_ffmpeg(output_path)

    def _draw_placeholder(self, output_path: Path) -> bool:
        """Draw a flat placeholder with a play glyph and caption"""
        width = self.thumbnail_config.width
        height = self.thumbnail_config.height

        image = np.full((height, width, 3), PLACEHOLDER_BACKGROUND, dtype=np.uint8)

        # Half-transparent white play triangle above the caption
        center_x, center_y = width // 2, height // 2
        triangle = np.array([
            [center_x - 15, center_y - 40],
            [center_x - 15, center_y - 10],
            [center_x + 15, center_y - 25]
        ], dtype=np.int32)
        overlay = image.copy()
        cv2.fillPoly(overlay, [triangle], (255, 255, 255))
        image = cv2.addWeighted(overlay, 0.5, image, 0.5, 0)

        text = self.thumbnail_config.placeholder_text
        font = cv2.FONT_HERSHEY_SIMPLEX
        scale = 0.6
        thickness = 2
        (text_width, text_height), _ = cv2.getTextSize(text, font, scale, thickness)
        origin = ((width - text_width) // 2, (height + text_height) // 2)
        cv2.putText(image, text, origin, font, scale, (255, 255, 255), thickness, cv2.LINE_AA)

        return bool(cv2.imwrite(str(output_path), image, [cv2.IMWRITE_JPEG_QUALITY, 85]))

    async def _create_placeholder_with_ffmpeg(self, output_path: Path) -> None:
        width = self.thumbnail_config.width
        height = self.thumbnail_config.height
        command = [
            self._ffmpeg_path,
            "-f", "lavfi",
            "-i", f"color=c=0x{PLACEHOLDER_HEX_COLOR}:s={width}x{height}:d=1",
            "-frames:v", "1",
            "-y",
            str(output_path)
        ]
        execution = await self.process_runner.run(command, self.thumbnail_config.timeout_seconds)

        if not execution.succeeded or not self._is_written(output_path):
            raise ThumbnailError("FFmpeg failed to create placeholder image", execution)

    def _ensure_thumbnail_directory(self) -> None:
        if not self._thumbnail_dir.exists():
            self._thumbnail_dir.mkdir(parents=True, exist_ok=True)
            self.logger.info(f"Created thumbnail directory: {self._thumbnail_dir}")

    @staticmethod
    def _is_written(path: Path) -> bool:
        return path.is_file() and path.stat().st_size > 0

    @staticmethod
    def _format_timestamp(seconds: float) -> str:
        whole = int(seconds)
        fraction = seconds - whole
        hours, remainder = divmod(whole, 3600)
        minutes, secs = divmod(remainder, 60)
        stamp = f"{hours:02d}:{minutes:02d}:{secs:02d}"
        if fraction:
            stamp += f"{fraction:.3f}"[1:]
        return stamp
