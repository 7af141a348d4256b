"""
Video Assembler

Turns a narration track and an ordered image set into one timed, muxed video:

- Duration probing of the narration
- Equal-share image timeline and concat descriptor
- Silent slideshow render
- Final mux, trimmed to the narration length

Stages run strictly in order, each at most once. The first failure stops the
run and is raised as PipelineFailure naming the stage; intermediates are left
on disk for diagnosis.
"""

import logging
import time
import uuid
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from ..utils.config import Config
from .duration_prober import DurationProber
from .errors import AllocationError, AssemblyError, PipelineFailure
from .muxer import AudioVideoMuxer
from .process_runner import ProcessRunner
from .slideshow_composer import SlideshowComposer
from .timeline_builder import allocate
from .video_models import (
    AssemblyStage, AudioTrack, PipelineRun, PipelineState, VideoAssemblyResult
)

T = TypeVar('T')

DESCRIPTOR_NAME = "file_list.txt"
SILENT_VIDEO_NAME = "temp_video.mp4"


class VideoAssembler:
    """Sequences probe -> allocate -> compose -> mux for one run at a time"""

    def __init__(self, config: Config, runner: Optional[ProcessRunner] = None):
        self.config = config
        self.logger = logging.getLogger('slideshow_ai.video_assembler')

        # Paths
        self.output_dir = Path(config.paths.output)
        self.temp_dir = Path(config.paths.temp) / 'video_assembly'
        self.temp_dir.mkdir(parents=True, exist_ok=True)

        process = config.process
        self.runner = runner or ProcessRunner()
        self.prober = DurationProber(self.runner, process.ffprobe_bin, process.probe_timeout_seconds)
        self.composer = SlideshowComposer(self.runner, config.video, process.ffmpeg_bin,
                                          process.compose_timeout_seconds)
        self.muxer = AudioVideoMuxer(self.runner, config.video, process.ffmpeg_bin,
                                     process.mux_timeout_seconds)

        # Last run, kept for inspection after success or failure
        self.current_run: Optional[PipelineRun] = None

    def check_dependencies(self) -> bool:
        """Log whether ffmpeg/ffprobe are reachable. Launch failures still raise later."""
        available = True
        for binary in (self.config.process.ffmpeg_bin, self.config.process.ffprobe_bin):
            found = self.runner.which(binary)
            if found:
                self.logger.info(f"Found {binary}: {found}")
            else:
                self.logger.error(f"{binary} not found - video assembly will fail")
                available = False
        return available

    async def assemble_video(self,
                             audio_path: Path,
                             image_paths: Sequence[Path],
                             output_path: Optional[Path] = None) -> VideoAssemblyResult:
        """
        Assemble the final video.

        Args:
            audio_path: Narration audio file
            image_paths: Images in presentation order
            output_path: Final video path (defaults to paths.output/video.output_filename)

        Returns:
            VideoAssemblyResult with the final asset and the timeline used

        Raises:
            PipelineFailure: carrying the failed stage and the original error
        """
        start_time = time.time()
        run = self._new_run()
        output_path = Path(output_path) if output_path else self.output_dir / self.config.video.output_filename
        images: List[Path] = [Path(p) for p in image_paths]

        self.logger.info(f"Run {run.run_id}: assembling {len(images)} images with {Path(audio_path).name}")

        track = AudioTrack(file_path=Path(audio_path))
        duration = await self._stage(run, AssemblyStage.PROBE, lambda: self.prober.probe(track.file_path))
        track = track.with_duration(duration)
        run.advance(PipelineState.PROBED)

        timeline, descriptor_path = await self._stage(
            run, AssemblyStage.ALLOCATE,
            lambda: self._allocate(images, track.duration, run.work_dir / DESCRIPTOR_NAME)
        )
        run.advance(PipelineState.ALLOCATED)
        self.logger.info(f"Timeline: {len(timeline)} x {timeline.entries[0].duration_seconds:.3f}s")

        silent = await self._stage(
            run, AssemblyStage.COMPOSE,
            lambda: self.composer.compose(descriptor_path, run.work_dir / SILENT_VIDEO_NAME)
        )
        run.advance(PipelineState.COMPOSED)

        final = await self._stage(
            run, AssemblyStage.MUX,
            lambda: self.muxer.mux(silent, track, track.duration, output_path)
        )
        run.advance(PipelineState.DONE)

        render_time = time.time() - start_time
        result = VideoAssemblyResult(
            output=final,
            timeline=timeline,
            audio_duration=track.duration,
            descriptor_path=descriptor_path,
            silent_video=silent,
            render_time_seconds=render_time,
            file_size_mb=output_path.stat().st_size / (1024**2)
        )
        self.logger.info(f"Video assembly completed in {render_time:.1f}s: {output_path}")

        if self.config.pipeline.cleanup_intermediates:
            self.cleanup_intermediates(result)
        return result

    async def _allocate(self, images: List[Path], duration: float, descriptor_path: Path):
        timeline, descriptor = allocate(images, duration, self.config.video.fps)
        try:
            descriptor.write(descriptor_path)
        except OSError as e:
            raise AllocationError(f"Could not write concat descriptor {descriptor_path}: {e}") from e
        return timeline, descriptor_path

    async def _stage(self, run: PipelineRun, stage: AssemblyStage,
                     action: Callable[[], Awaitable[T]]) -> T:
        try:
            return await action()
        except (AssemblyError, OSError) as e:
            run.fail(stage, e)
            self.logger.error(f"Run {run.run_id} failed at {stage.value}: {e}")
            raise PipelineFailure(stage, e) from e

    def _new_run(self) -> PipelineRun:
        run_id = uuid.uuid4().hex[:12]
        work_dir = self.temp_dir / run_id
        work_dir.mkdir(parents=True, exist_ok=True)
        self.current_run = PipelineRun(run_id=run_id, work_dir=work_dir)
        return self.current_run

    def cleanup_intermediates(self, result: VideoAssemblyResult) -> None:
        """Delete the silent video and descriptor of a finished run"""
        for path in result.intermediates:
            path.unlink(missing_ok=True)
        work_dir = result.descriptor_path.parent
        if work_dir.parent == self.temp_dir and not any(work_dir.iterdir()):
            work_dir.rmdir()
        self.logger.debug(f"Removed intermediates in {work_dir}")
