"""
Metadata Store for the Video Store service.

This module keeps video and category records in a JSON file index. It is the
record store behind the ``VideoRepository`` interface; media bytes are owned
by the media store and never touched here.
"""

import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..core.config import StorageConfig
from ..video.domain.interfaces import VideoRepository
from ..video.domain.models import Category, VideoRecord


class MetadataStore(VideoRepository):
    """JSON file index of video and category records"""

    def __init__(self, storage_config: StorageConfig):
        self.storage_config = storage_config
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()

        self.index_path = Path(storage_config.metadata_index_path).resolve()
        self.index = self._load_index()

    def _empty_index(self) -> Dict[str, Any]:
        return {"videos": {}, "categories": {}, "next_video_id": 1, "next_category_id": 1, "last_updated": None}

    def _load_index(self) -> Dict[str, Any]:
        """Load the index from disk"""
        try:
            if self.index_path.exists():
                with open(self.index_path, "r") as f:
                    index = json.load(f)
                empty = self._empty_index()
                for key, value in empty.items():
                    index.setdefault(key, value)
                self.logger.info(f"Loaded metadata index with {len(index['videos'])} videos from {self.index_path}")
                return index
            return self._empty_index()
        except Exception as e:
            self.logger.error(f"Error loading metadata index: {e}")
            return self._empty_index()

    def _save_index(self) -> None:
        """Save the index to disk; caller holds the lock"""
        self.index["last_updated"] = datetime.now(timezone.utc).isoformat()
        self.index_path.parent.mkdir(parents=True, exist_ok=True)

        temp_path = self.index_path.with_suffix(self.index_path.suffix + ".tmp")
        with open(temp_path, "w") as f:
            json.dump(self.index, f, indent=2)
        os.replace(temp_path, self.index_path)

    def create_video(
        self,
        title: str,
        description: str,
        file_path: str,
        thumbnail_path: str,
        category_ids: Iterable[int] = ()
    ) -> VideoRecord:
        with self._lock:
            video_id = self.index["next_video_id"]
            record = VideoRecord(
                id=video_id,
                title=title,
                description=description or "",
                file_path=file_path,
                thumbnail_path=thumbnail_path or "",
                created_date=datetime.now(timezone.utc),
                category_ids=sorted(set(category_ids))
            )

            self.index["videos"][str(video_id)] = self._video_to_dict(record)
            self.index["next_video_id"] = video_id + 1
            try:
                self._save_index()
            except Exception:
                del self.index["videos"][str(video_id)]
                self.index["next_video_id"] = video_id
                self.logger.error(f"Could not persist video {video_id}, record discarded")
                raise

        self.logger.info(f"Registered video {video_id}: {file_path}")
        return record

    def get_video(self, video_id: int) -> Optional[VideoRecord]:
        with self._lock:
            data = self.index["videos"].get(str(video_id))
        return self._video_from_dict(data) if data else None

    def list_videos(self) -> List[VideoRecord]:
        with self._lock:
            videos = [self._video_from_dict(data) for data in self.index["videos"].values()]
        videos.sort(key=lambda video: (video.created_date, video.id), reverse=True)
        return videos

    def list_categories(self) -> List[Category]:
        with self._lock:
            categories = [Category(id=data["id"], name=data["name"]) for data in self.index["categories"].values()]
        return sorted(categories, key=lambda category: category.name.lower())

    def get_category(self, category_id: int) -> Optional[Category]:
        with self._lock:
            data = self.index["categories"].get(str(category_id))
        return Category(id=data["id"], name=data["name"]) if data else None

    def get_categories_by_ids(self, category_ids: Iterable[int]) -> List[Category]:
        wanted = {str(category_id) for category_id in category_ids}
        with self._lock:
            return [
                Category(id=data["id"], name=data["name"])
                for key, data in self.index["categories"].items()
                if key in wanted
            ]

    def get_or_create_category(self, name: str) -> Category:
        normalized_name = (name or "").strip()
        if not normalized_name:
            raise ValueError("Category name cannot be empty")

        with self._lock:
            for data in self.index["categories"].values():
                if data["name"].lower() == normalized_name.lower():
                    return Category(id=data["id"], name=data["name"])

            category_id = self.index["next_category_id"]
            self.index["categories"][str(category_id)] = {"id": category_id, "name": normalized_name}
            self.index["next_category_id"] = category_id + 1
            try:
                self._save_index()
            except Exception:
                del self.index["categories"][str(category_id)]
                self.index["next_category_id"] = category_id
                self.logger.error(f"Could not persist category {normalized_name!r}, discarded")
                raise

        self.logger.info(f"Created category {category_id}: {normalized_name}")
        return Category(id=category_id, name=normalized_name)

    @staticmethod
    def _video_to_dict(record: VideoRecord) -> Dict[str, Any]:
        return {
            "id": record.id,
            "title": record.title,
            "description": record.description,
            "file_path": record.file_path,
            "thumbnail_path": record.thumbnail_path,
            "created_date": record.created_date.isoformat(),
            "category_ids": list(record.category_ids),
        }

    @staticmethod
    def _video_from_dict(data: Dict[str, Any]) -> VideoRecord:
        return VideoRecord(
            id=data["id"],
            title=data["title"],
            description=data.get("description", ""),
            file_path=data["file_path"],
            thumbnail_path=data.get("thumbnail_path", ""),
            created_date=datetime.fromisoformat(data["created_date"]),
            category_ids=list(data.get("category_ids", []))
        )
