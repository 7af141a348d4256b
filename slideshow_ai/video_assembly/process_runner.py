"""Async wrapper around external executables (ffmpeg, ffprobe)"""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from typing import Optional, Sequence

from .errors import ProcessError, ProcessTimeout


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and captured output of one process"""
    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessRunner:
    """
    Runs one external process per call and blocks until it exits.

    Commands are argument vectors, never shell strings. Output is captured but
    not interpreted; callers decide what a non-zero exit means. A child that
    outlives its timeout, or whose awaiting task is cancelled, is killed and
    reaped before control returns.
    """

    def __init__(self, default_timeout: Optional[float] = None):
        self.default_timeout = default_timeout
        self.logger = logging.getLogger('slideshow_ai.process_runner')

    @staticmethod
    def which(command: str) -> Optional[str]:
        return shutil.which(command)

    async def run(self,
                  command: str,
                  args: Sequence[str],
                  timeout: Optional[float] = None) -> ProcessResult:
        argv = [command, *[str(a) for a in args]]
        deadline = timeout if timeout is not None else self.default_timeout
        self.logger.debug(f"Running: {' '.join(argv)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            raise ProcessError(f"Could not launch {command}: {e}", argv) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=deadline)
        except asyncio.TimeoutError:
            await self._kill(process)
            self.logger.error(f"{command} timed out after {deadline}s (pid {process.pid})")
            raise ProcessTimeout(f"{command} exceeded {deadline}s timeout", argv, deadline)
        except asyncio.CancelledError:
            await self._kill(process)
            self.logger.warning(f"{command} cancelled (pid {process.pid})")
            raise

        result = ProcessResult(
            exit_code=process.returncode,
            stdout=stdout.decode('utf-8', errors='replace'),
            stderr=stderr.decode('utf-8', errors='replace')
        )
        self.logger.debug(f"{command} exited with {result.exit_code}")
        return result

    async def _kill(self, process: asyncio.subprocess.Process) -> None:
        """Kill the child and wait for it so no zombie is left behind"""
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
        await process.wait()


def tail(text: str, lines: int = 20) -> str:
    """Last few lines of tool output, for error messages"""
    return "\n".join(text.strip().splitlines()[-lines:])


def describe_failure(tool: str, result: ProcessResult) -> str:
    detail = tail(result.stderr) or tail(result.stdout)
    return f"{tool} exited with code {result.exit_code}: {detail}" if detail else f"{tool} exited with code {result.exit_code}"
