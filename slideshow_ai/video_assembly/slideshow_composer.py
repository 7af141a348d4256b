"""Silent slideshow rendering from a concat descriptor"""

from pathlib import Path
from typing import List, Optional

import ffmpeg

from ..utils.config import VideoConfig
from ..utils.logger import LoggerMixin
from .errors import ComposeError
from .process_runner import ProcessRunner, describe_failure
from .video_models import VideoAsset, VideoKind


class SlideshowComposer(LoggerMixin):
    """Concatenates the descriptor's images into one variable-frame-rate video"""

    def __init__(self, runner: ProcessRunner, video_config: VideoConfig,
                 ffmpeg_bin: str = 'ffmpeg', timeout: Optional[float] = None):
        self.runner = runner
        self.video_config = video_config
        self.ffmpeg_bin = ffmpeg_bin
        self.timeout = timeout

    def build_command(self, descriptor_path: Path, output_path: Path) -> List[str]:
        return (
            ffmpeg
            .input(str(descriptor_path), format='concat', safe=0)
            .output(
                str(output_path),
                pix_fmt=self.video_config.pix_fmt,
                vsync=self.video_config.vsync
            )
            .overwrite_output()
            .compile(cmd=self.ffmpeg_bin)
        )

    async def compose(self, descriptor_path: Path, output_path: Path) -> VideoAsset:
        """Render the silent video. Output existence is checked, not assumed."""
        command = self.build_command(descriptor_path, output_path)
        self.logger.info(f"Composing slideshow from {descriptor_path.name} -> {output_path.name}")

        result = await self.runner.run(command[0], command[1:], timeout=self.timeout)
        if not result.ok:
            raise ComposeError(describe_failure('ffmpeg compose', result))
        if not output_path.is_file():
            raise ComposeError(f"ffmpeg reported success but {output_path} was not created")

        return VideoAsset(file_path=output_path, kind=VideoKind.SILENT)
