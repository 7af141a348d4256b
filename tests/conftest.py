"""
Shared fixtures for the slideshow test suite.
"""

import shutil
import stat
import sys
from pathlib import Path
from typing import Callable, List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from slideshow_ai.utils.config import Config, PathsConfig
from slideshow_ai.video_assembly.process_runner import ProcessResult


requires_ffmpeg = pytest.mark.skipif(
    shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None,
    reason="ffmpeg/ffprobe not on PATH"
)

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses shell scripts as fake tools")


def output_arg(argv: List[str]) -> Path:
    """Output file of a compiled ffmpeg command (last positional, before -y)"""
    return Path([a for a in argv if a != "-y"][-1])


class FakeRunner:
    """
    Stands in for ProcessRunner.

    ``handler`` receives (command, args) and returns a ProcessResult; the
    default answers ffprobe with ``probe_output`` and makes ffmpeg "succeed"
    by touching its output file.
    """

    def __init__(self, probe_output: str = "9.000000\n",
                 handler: Optional[Callable[[str, List[str]], ProcessResult]] = None):
        self.probe_output = probe_output
        self.handler = handler or self._default
        self.calls: List[List[str]] = []

    @staticmethod
    def which(command: str) -> Optional[str]:
        return f"/usr/bin/{command}"

    async def run(self, command, args, timeout=None) -> ProcessResult:
        args = [str(a) for a in args]
        self.calls.append([command, *args])
        return self.handler(command, args)

    def _default(self, command: str, args: List[str]) -> ProcessResult:
        if "ffprobe" in command:
            return ProcessResult(0, self.probe_output, "")
        out = output_arg([command, *args])
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(b"\x00" * 16)
        return ProcessResult(0, "", "")


@pytest.fixture
def config(tmp_path):
    return Config(paths=PathsConfig(
        output=str(tmp_path / "output"),
        temp=str(tmp_path / "temp"),
        logs=str(tmp_path / "logs")
    ))


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def media_files(tmp_path):
    """An audio file and three images (contents irrelevant to fakes)"""
    audio = tmp_path / "audio.mp3"
    audio.write_bytes(b"ID3")
    images = []
    for i in range(3):
        image = tmp_path / f"image_{i + 1}.png"
        image.write_bytes(b"\x89PNG")
        images.append(image)
    return audio, images


@pytest.fixture
def make_script(tmp_path):
    """Write an executable shell script and return its path"""
    def _make(name: str, body: str) -> str:
        script = tmp_path / name
        script.write_text("#!/bin/sh\n" + body + "\n")
        script.chmod(script.stat().st_mode | stat.S_IEXEC | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)
    return _make
