"""
Tests for the JSON metadata index.
"""

import json
import threading
from pathlib import Path

import pytest

from video_store.storage.manager import MetadataStore


@pytest.fixture
def metadata_store(config):
    return MetadataStore(config.storage)


def test_create_and_get_video(metadata_store):
    record = metadata_store.create_video("Holiday", "Beach day", "abc_holiday.mp4", "abc.jpg", [2, 1, 2])

    assert record.id == 1
    assert record.category_ids == [1, 2]

    loaded = metadata_store.get_video(record.id)
    assert loaded.title == "Holiday"
    assert loaded.file_path == "abc_holiday.mp4"
    assert loaded.thumbnail_path == "abc.jpg"
    assert loaded.created_date == record.created_date


def test_missing_video_is_none(metadata_store):
    assert metadata_store.get_video(42) is None


def test_records_survive_reload(config, metadata_store):
    metadata_store.create_video("One", "", "a_one.mp4", "")
    metadata_store.get_or_create_category("Travel")

    reloaded = MetadataStore(config.storage)

    assert [video.title for video in reloaded.list_videos()] == ["One"]
    assert [category.name for category in reloaded.list_categories()] == ["Travel"]
    assert reloaded.create_video("Two", "", "b_two.mp4", "").id == 2


def test_list_videos_newest_first(metadata_store):
    first = metadata_store.create_video("First", "", "a.mp4", "")
    second = metadata_store.create_video("Second", "", "b.mp4", "")

    assert [video.id for video in metadata_store.list_videos()] == [second.id, first.id]


def test_categories_are_deduplicated_case_insensitively(metadata_store):
    travel = metadata_store.get_or_create_category("Travel")
    again = metadata_store.get_or_create_category("  travel ")

    assert again == travel
    assert len(metadata_store.list_categories()) == 1


def test_empty_category_name_rejected(metadata_store):
    with pytest.raises(ValueError):
        metadata_store.get_or_create_category("   ")


def test_categories_by_ids_skips_unknown(metadata_store):
    travel = metadata_store.get_or_create_category("Travel")
    family = metadata_store.get_or_create_category("Family")

    found = metadata_store.get_categories_by_ids([travel.id, family.id, 99])

    assert {category.name for category in found} == {"Travel", "Family"}
    assert [c.name for c in metadata_store.list_categories()] == ["Family", "Travel"]


def test_corrupt_index_starts_empty(config):
    index_path = Path(config.storage.metadata_index_path)
    index_path.parent.mkdir(parents=True, exist_ok=True)
    index_path.write_text("{broken")

    assert MetadataStore(config.storage).list_videos() == []


def test_index_written_atomically(config, metadata_store):
    metadata_store.create_video("Holiday", "", "a.mp4", "")

    with open(config.storage.metadata_index_path) as f:
        index = json.load(f)

    assert index["next_video_id"] == 2
    assert index["videos"]["1"]["title"] == "Holiday"
    assert not metadata_store.index_path.with_suffix(".json.tmp").exists()


def test_concurrent_creates_get_distinct_ids(metadata_store):
    ids = []

    def create(n):
        ids.append(metadata_store.create_video(f"Video {n}", "", f"{n}.mp4", "").id)

    threads = [threading.Thread(target=create, args=(n,)) for n in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(ids) == list(range(1, 11))

def fail_save():
    raise OSError("disk full")


def test_failed_save_discards_new_video(config, metadata_store, monkeypatch):
    monkeypatch.setattr(metadata_store, "_save_index", fail_save)

    with pytest.raises(OSError):
        metadata_store.create_video("Holiday", "", "a.mp4", "")

    assert metadata_store.get_video(1) is None
    assert metadata_store.list_videos() == []
    assert metadata_store.index["next_video_id"] == 1

    monkeypatch.undo()
    assert metadata_store.create_video("Holiday", "", "a.mp4", "").id == 1


def test_failed_save_discards_new_category(metadata_store, monkeypatch):
    monkeypatch.setattr(metadata_store, "_save_index", fail_save)

    with pytest.raises(OSError):
        metadata_store.get_or_create_category("Travel")

    assert metadata_store.list_categories() == []
    assert metadata_store.index["next_category_id"] == 1
