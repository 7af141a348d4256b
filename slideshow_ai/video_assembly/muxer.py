"""Final encode: silent slideshow + narration, trimmed to the narration length"""

import math
from pathlib import Path
from typing import List, Optional

import ffmpeg

from ..utils.config import VideoConfig
from ..utils.logger import LoggerMixin
from .errors import MuxError
from .process_runner import ProcessRunner, describe_failure
from .video_models import AudioTrack, VideoAsset, VideoKind, format_seconds


class AudioVideoMuxer(LoggerMixin):
    """
    Combines the silent video with the audio track and re-encodes to the fixed
    output profile (constant frame rate, fixed codecs and pixel format).

    The video is padded by cloning its last frame and the output is cut at the
    target duration, so per-image rounding in the composed video can never make
    the result longer or shorter than the narration.
    """

    def __init__(self, runner: ProcessRunner, video_config: VideoConfig,
                 ffmpeg_bin: str = 'ffmpeg', timeout: Optional[float] = None):
        self.runner = runner
        self.video_config = video_config
        self.ffmpeg_bin = ffmpeg_bin
        self.timeout = timeout

    def build_command(self, silent: VideoAsset, audio: AudioTrack,
                      target_duration: float, output_path: Path) -> List[str]:
        cfg = self.video_config
        video = (
            ffmpeg.input(str(silent.file_path)).video
            .filter('fps', fps=cfg.fps)
            .filter('tpad', stop_mode='clone', stop=-1)
        )
        narration = ffmpeg.input(str(audio.file_path)).audio
        return (
            ffmpeg
            .output(
                video, narration, str(output_path),
                vcodec=cfg.vcodec,
                r=cfg.fps,
                pix_fmt=cfg.pix_fmt,
                acodec=cfg.acodec,
                audio_bitrate=cfg.audio_bitrate,
                t=format_seconds(target_duration)
            )
            .overwrite_output()
            .compile(cmd=self.ffmpeg_bin)
        )

    async def mux(self, silent: VideoAsset, audio: AudioTrack,
                  target_duration: float, output_path: Path) -> VideoAsset:
        if silent.kind != VideoKind.SILENT:
            raise MuxError(f"Expected a silent video, got {silent.kind.value}: {silent.file_path}")
        if not (target_duration > 0 and math.isfinite(target_duration)):
            raise MuxError(f"Target duration must be positive and finite, got {target_duration}")

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MuxError(f"Could not create output directory {output_path.parent}: {e}") from e
        command = self.build_command(silent, audio, target_duration, output_path)
        self.logger.info(f"Muxing {silent.file_path.name} + {audio.file_path.name} "
                         f"-> {output_path.name} ({target_duration:.3f}s)")

        result = await self.runner.run(command[0], command[1:], timeout=self.timeout)
        if not result.ok:
            raise MuxError(describe_failure('ffmpeg mux', result))
        if not output_path.is_file():
            raise MuxError(f"ffmpeg reported success but {output_path} was not created")

        return VideoAsset(file_path=output_path, kind=VideoKind.FINAL)
