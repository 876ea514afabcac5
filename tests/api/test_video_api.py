"""
HTTP tests for the video and category endpoints.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from video_store.api.server import APIServer
from video_store.video.integration import create_video_module

MB = 1024 * 1024
VIDEO_BYTES = bytes(range(256)) * 8


def make_client(config, runner):
    module = create_video_module(config, process_runner=runner)
    return TestClient(APIServer(config, module).app), module


@pytest.fixture
def client(config, make_runner):
    test_client, _ = make_client(config, make_runner("success"))
    return test_client


def upload(client, filename="holiday.mp4", content_type="video/mp4", data=VIDEO_BYTES, **fields):
    form = {"title": "Holiday", "description": "Beach day"}
    form.update(fields)
    return client.post("/api/videos", data=form, files={"file": (filename, data, content_type)})


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_upload_creates_video(client):
    response = upload(client, newCategories=["Travel"])

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Holiday"
    assert body["message"] == "Video uploaded successfully"
    assert body["thumbnailUrl"].startswith("/thumbnails/")
    assert response.headers["location"] == f"/api/videos/{body['id']}"

    video = client.get(f"/api/videos/{body['id']}").json()
    assert video["description"] == "Beach day"
    assert video["thumbnailUrl"] == body["thumbnailUrl"]
    assert [category["name"] for category in video["categories"]] == ["Travel"]
    assert "createdDate" in video


def test_upload_with_existing_category_ids(client):
    category = client.post("/api/categories", json={"name": "Family"}).json()

    response = upload(client, categoryIds=[str(category["id"])])
    video = client.get(f"/api/videos/{response.json()['id']}").json()

    assert [c["id"] for c in video["categories"]] == [category["id"]]


def test_thumbnail_is_served(client):
    thumbnail_url = upload(client).json()["thumbnailUrl"]

    response = client.get(thumbnail_url)

    assert response.status_code == 200
    assert response.content.startswith(b"\xff\xd8")


def test_list_videos_newest_first(client):
    first = upload(client, title="First").json()["id"]
    second = upload(client, title="Second").json()["id"]

    videos = client.get("/api/videos").json()

    assert [video["id"] for video in videos] == [second, first]


def test_unknown_video_is_404(client):
    response = client.get("/api/videos/999")
    assert response.status_code == 404
    assert "message" in response.json()


def test_bad_extension_is_415_and_writes_nothing(config, client):
    response = upload(client, filename="clip.mkv", content_type="video/x-matroska")

    assert response.status_code == 415
    assert response.json()["message"] == "Invalid file type. Allowed types: MP4, AVI, MOV"
    assert client.get("/api/videos").json() == []

    upload_dir = Path(config.storage.upload_path)
    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


def test_bad_mime_type_is_415(client):
    response = upload(client, content_type="application/pdf")
    assert response.status_code == 415


def test_too_large_is_413(config_factory, make_runner):
    client, _ = make_client(config_factory(max_file_size_mb=1), make_runner("success"))

    response = upload(client, data=b"\x00" * (MB + 1))

    assert response.status_code == 413
    assert response.json()["message"] == "File size exceeds the maximum allowed size of 1 MB"


def test_empty_file_is_400(client):
    response = upload(client, data=b"")
    assert response.status_code == 400


def test_missing_file_is_400(client):
    response = client.post("/api/videos", data={"title": "No file"})
    assert response.status_code == 400
    assert response.json()["message"] == "No video file provided"


def test_multiple_files_are_400(client):
    response = client.post(
        "/api/videos",
        data={"title": "Two"},
        files=[("file", ("a.mp4", VIDEO_BYTES, "video/mp4")), ("extra", ("b.mp4", VIDEO_BYTES, "video/mp4"))]
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Only one file can be uploaded at a time"


def test_missing_title_is_400(client):
    response = upload(client, title="  ")
    assert response.status_code == 400


def test_upload_without_ffmpeg_uses_placeholder(config, make_runner):
    client, _ = make_client(config, make_runner("missing"))

    body = upload(client).json()

    assert body["thumbnailUrl"]
    assert client.get(body["thumbnailUrl"]).status_code == 200


class TestStreaming:
    @pytest.fixture
    def video_id(self, client):
        return upload(client).json()["id"]

    def test_full_stream(self, client, video_id):
        response = client.get(f"/api/videos/{video_id}/stream")

        assert response.status_code == 200
        assert response.content == VIDEO_BYTES
        assert response.headers["accept-ranges"] == "bytes"
        assert response.headers["content-type"] == "video/mp4"
        assert response.headers["content-length"] == str(len(VIDEO_BYTES))
        assert response.headers["content-disposition"].startswith("inline; filename*=UTF-8''")

    def test_bounded_range(self, client, video_id):
        response = client.get(f"/api/videos/{video_id}/stream", headers={"Range": "bytes=0-99"})

        assert response.status_code == 206
        assert response.content == VIDEO_BYTES[:100]
        assert response.headers["content-range"] == f"bytes 0-99/{len(VIDEO_BYTES)}"
        assert response.headers["content-length"] == "100"

    def test_open_range(self, client, video_id):
        response = client.get(f"/api/videos/{video_id}/stream", headers={"Range": "bytes=2000-"})

        assert response.status_code == 206
        assert response.content == VIDEO_BYTES[2000:]

    def test_suffix_range(self, client, video_id):
        response = client.get(f"/api/videos/{video_id}/stream", headers={"Range": "bytes=-48"})

        assert response.status_code == 206
        assert response.content == VIDEO_BYTES[-48:]

    @pytest.mark.parametrize("header", ["bytes=5000-", "bytes=0-10,20-30", "bytes=x-y", "pages=1-2"])
    def test_bad_ranges_are_416(self, client, video_id, header):
        response = client.get(f"/api/videos/{video_id}/stream", headers={"Range": header})

        assert response.status_code == 416
        assert response.headers["content-range"] == f"bytes */{len(VIDEO_BYTES)}"

    def test_unknown_video(self, client):
        assert client.get("/api/videos/999/stream").status_code == 404

    def test_deleted_file_is_404(self, client, config, video_id):
        for path in Path(config.storage.upload_path).iterdir():
            path.unlink()

        assert client.get(f"/api/videos/{video_id}/stream").status_code == 404

    def test_streaming_info(self, client, video_id):
        info = client.get(f"/api/videos/{video_id}/info").json()

        assert info["fileSizeBytes"] == len(VIDEO_BYTES)
        assert info["contentType"] == "video/mp4"
        assert info["supportsRangeRequests"] is True
        assert info["chunkSizeBytes"] == 64 * 1024

    def test_streaming_info_for_deleted_file_is_404(self, client, config, video_id):
        for path in Path(config.storage.upload_path).iterdir():
            path.unlink()

        assert client.get(f"/api/videos/{video_id}/info").status_code == 404


class TestCategories:
    def test_create_and_list(self, client):
        created = client.post("/api/categories", json={"name": "Travel"})
        assert created.status_code == 201

        categories = client.get("/api/categories").json()
        assert categories == [created.json()]

    def test_create_is_idempotent_by_name(self, client):
        first = client.post("/api/categories", json={"name": "Travel"}).json()
        second = client.post("/api/categories", json={"name": "travel"}).json()
        assert first == second

    def test_get_category(self, client):
        created = client.post("/api/categories", json={"name": "Travel"}).json()
        assert client.get(f"/api/categories/{created['id']}").json()["name"] == "Travel"
        assert client.get("/api/categories/999").status_code == 404

    def test_blank_name_is_rejected(self, client):
        assert client.post("/api/categories", json={"name": "   "}).status_code == 400
        assert client.post("/api/categories", json={"name": ""}).status_code == 422


def test_upload_not_listed_when_record_cannot_be_saved(config, make_runner, monkeypatch):
    client, module = make_client(config, make_runner("success"))

    def fail_save():
        raise OSError("disk full")

    monkeypatch.setattr(module.video_repository, "_save_index", fail_save)

    response = upload(client)

    assert response.status_code == 500
    assert client.get("/api/videos").json() == []
