"""
Child Process Runner.

Runs an external executable with a hard timeout using asyncio subprocesses.
On timeout the process is killed and reaped before returning.
"""

import asyncio
import logging
import time
from typing import Sequence

from ..domain.models import ProcessExecution


class ProcessRunner:
    """Runs a command to completion or until its timeout expires"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    async def run(self, command: Sequence[str], timeout_seconds: float) -> ProcessExecution:
        """Run ``command`` and capture its standard error.

        Raises OSError if the executable cannot be started. A timeout is not an
        exception here; it is reported through ``ProcessExecution.timed_out``.
        """
        command = tuple(str(part) for part in command)
        self.logger.debug(f"Executing: {' '.join(command)}")

        started = time.monotonic()
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE
        )

        timed_out = False
        stderr = b""
        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout_seconds)
        except asyncio.TimeoutError:
            timed_out = True
            self.logger.warning(f"Process {command[0]} timed out after {timeout_seconds}s, killing it")
        finally:
            # Covers timeout and cancellation of the calling task
            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()

        return ProcessExecution(
            command=command,
            exit_code=process.returncode,
            stderr=(stderr or b"").decode(errors="replace"),
            elapsed_seconds=time.monotonic() - started,
            timed_out=timed_out
        )
