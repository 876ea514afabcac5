"""
Shared fixtures for the Video Store test suite.
"""

import dataclasses
from pathlib import Path
from typing import List, Optional

import pytest

from video_store.core.config import Config
from video_store.video.domain.models import ProcessExecution


class FakeProcessRunner:
    """Stands in for ProcessRunner so no real FFmpeg is needed.

    ``mode`` is one of "success" (writes the output file), "fail" (non-zero
    exit, no output), "timeout" or "missing" (executable not found).
    """

    def __init__(self, mode: str = "success", payload: bytes = b"\xff\xd8\xff\xe0fake-jpeg"):
        self.mode = mode
        self.payload = payload
        self.commands: List[List[str]] = []

    async def run(self, command, timeout_seconds: float) -> ProcessExecution:
        command = [str(part) for part in command]
        self.commands.append(command)

        if self.mode == "missing":
            raise FileNotFoundError(2, "No such file or directory", command[0])

        if self.mode == "timeout":
            return ProcessExecution(command=tuple(command), exit_code=-9, stderr="", elapsed_seconds=timeout_seconds, timed_out=True)

        if self.mode == "fail":
            return ProcessExecution(command=tuple(command), exit_code=1, stderr="Invalid data found when processing input", elapsed_seconds=0.01)

        Path(command[-1]).write_bytes(self.payload)
        return ProcessExecution(command=tuple(command), exit_code=0, stderr="", elapsed_seconds=0.01)


def make_config(tmp_path: Path, max_file_size_mb: Optional[int] = None) -> Config:
    config = Config(config_file=str(tmp_path / "config.json"), save_defaults=False)
    config.storage = dataclasses.replace(
        config.storage,
        upload_path=str(tmp_path / "uploads" / "videos"),
        metadata_index_path=str(tmp_path / "uploads" / "video_index.json")
    )
    config.thumbnail = dataclasses.replace(config.thumbnail, upload_path=str(tmp_path / "uploads" / "thumbnails"))
    if max_file_size_mb is not None:
        config.upload = dataclasses.replace(config.upload, max_file_size_mb=max_file_size_mb)
    return config


@pytest.fixture
def config(tmp_path):
    return make_config(tmp_path)


@pytest.fixture
def fake_runner():
    return FakeProcessRunner("success")


@pytest.fixture
def make_runner():
    return FakeProcessRunner


@pytest.fixture
def config_factory(tmp_path):
    def factory(**overrides):
        return make_config(tmp_path, **overrides)
    return factory
