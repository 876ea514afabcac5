"""
Tests for the child process runner, using the running Python interpreter as
the child executable.
"""

import sys

import pytest

from video_store.video.infrastructure.process_runner import ProcessRunner


async def test_captures_exit_code_and_stderr():
    runner = ProcessRunner()
    execution = await runner.run(
        [sys.executable, "-c", "import sys; sys.stderr.write('bad frame'); sys.exit(3)"],
        timeout_seconds=30
    )

    assert execution.exit_code == 3
    assert "bad frame" in execution.stderr
    assert not execution.timed_out
    assert not execution.succeeded


async def test_success():
    execution = await ProcessRunner().run([sys.executable, "-c", "pass"], timeout_seconds=30)
    assert execution.succeeded
    assert execution.command[0] == sys.executable


async def test_timeout_kills_process():
    execution = await ProcessRunner().run(
        [sys.executable, "-c", "import time; time.sleep(30)"],
        timeout_seconds=0.5
    )

    assert execution.timed_out
    assert execution.exit_code is not None
    assert execution.elapsed_seconds < 10
    assert not execution.succeeded


async def test_missing_executable_raises_os_error():
    with pytest.raises(OSError):
        await ProcessRunner().run(["/nonexistent/ffmpeg-binary"], timeout_seconds=5)
