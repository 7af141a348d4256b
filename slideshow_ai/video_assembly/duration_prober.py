"""Media duration lookup via ffprobe"""

import logging
import math
from pathlib import Path
from typing import Optional

from .errors import ProbeError
from .process_runner import ProcessRunner, describe_failure


class DurationProber:
    """Reads a media file's playback duration in seconds"""

    def __init__(self, runner: ProcessRunner, ffprobe_bin: str = 'ffprobe',
                 timeout: Optional[float] = None):
        self.runner = runner
        self.ffprobe_bin = ffprobe_bin
        self.timeout = timeout
        self.logger = logging.getLogger('slideshow_ai.duration_prober')

    def build_args(self, media_path: Path) -> list:
        return [
            '-i', str(media_path),
            '-show_entries', 'format=duration',
            '-v', 'quiet',
            '-of', 'csv=p=0'
        ]

    async def probe(self, media_path: Path) -> float:
        """
        Return the duration of ``media_path``.

        Raises ProbeError for a missing file, a non-zero ffprobe exit, or output
        that is not a single positive finite number. Zero is never accepted.
        """
        media_path = Path(media_path)
        if not media_path.is_file():
            raise ProbeError(f"Media file not found: {media_path}")

        result = await self.runner.run(self.ffprobe_bin, self.build_args(media_path), timeout=self.timeout)
        if not result.ok:
            raise ProbeError(describe_failure('ffprobe', result))

        duration = parse_duration(result.stdout)
        self.logger.info(f"Probed {media_path.name}: {duration:.3f}s")
        return duration


def parse_duration(output: str) -> float:
    text = output.strip()
    try:
        duration = float(text)
    except ValueError:
        raise ProbeError(f"Unparsable duration from ffprobe: {text!r}") from None

    if not math.isfinite(duration) or duration <= 0:
        raise ProbeError(f"Invalid duration from ffprobe: {text!r}")
    return duration
