"""
Video Assembly Data Models

Pydantic models for the slideshow assembly pipeline.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .errors import ProbeError


def format_seconds(value: float) -> str:
    """Shortest round-trip digits of a duration, never in exponent notation"""
    return format(Decimal(repr(float(value))), "f")


class VideoKind(str, Enum):
    """Role of a rendered video file"""
    SILENT = "silent"  # image sequence, no audio stream
    FINAL = "final"    # muxed with narration


class AssemblyStage(str, Enum):
    """Pipeline stages, in execution order"""
    PROBE = "probe"
    ALLOCATE = "allocate"
    COMPOSE = "compose"
    MUX = "mux"


class PipelineState(str, Enum):
    """Orchestrator states. Strictly forward; FAILED is terminal."""
    INIT = "init"
    PROBED = "probed"
    ALLOCATED = "allocated"
    COMPOSED = "composed"
    DONE = "done"
    FAILED = "failed"


class AudioTrack(BaseModel):
    """Narration audio plus its probed duration"""
    model_config = ConfigDict(frozen=True)

    file_path: Path
    duration_seconds: Optional[float] = Field(default=None, gt=0)

    @property
    def duration(self) -> float:
        if self.duration_seconds is None:
            raise ProbeError(f"Audio duration read before probing: {self.file_path}")
        return self.duration_seconds

    def with_duration(self, seconds: float) -> "AudioTrack":
        return AudioTrack(file_path=self.file_path, duration_seconds=seconds)


class TimelineEntry(BaseModel):
    """One image held on screen for a fixed duration"""
    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    image_path: Path
    duration_seconds: float = Field(gt=0)


class Timeline(BaseModel):
    """Ordered image display durations covering the whole narration"""
    model_config = ConfigDict(frozen=True)

    entries: Tuple[TimelineEntry, ...]

    @property
    def total_duration(self) -> float:
        return sum(entry.duration_seconds for entry in self.entries)

    def __len__(self) -> int:
        return len(self.entries)


class ConcatDescriptor(BaseModel):
    """
    The on-disk contract read by ffmpeg's concat demuxer.

    One (path, duration) pair per timeline entry, rendered as a ``file`` line
    followed by a ``duration`` line. Paths are absolute, forward-slashed and
    already quoted for the descriptor format.
    """
    model_config = ConfigDict(frozen=True)

    entries: Tuple[Tuple[str, float], ...]

    def lines(self) -> List[str]:
        lines = []
        for path, duration in self.entries:
            lines.append(f"file {path}")
            lines.append(f"duration {format_seconds(duration)}")
        return lines

    def render(self) -> str:
        return "\n".join(self.lines()) + "\n"

    def write(self, descriptor_path: Path) -> Path:
        """Write the descriptor, replacing any file already at that path"""
        descriptor_path.parent.mkdir(parents=True, exist_ok=True)
        descriptor_path.write_text(self.render(), encoding="utf-8")
        return descriptor_path


class VideoAsset(BaseModel):
    """A rendered video file"""
    model_config = ConfigDict(frozen=True)

    file_path: Path
    kind: VideoKind


class VideoAssemblyResult(BaseModel):
    """Result of a successful assembly run"""
    output: VideoAsset
    timeline: Timeline
    audio_duration: float
    descriptor_path: Path
    silent_video: VideoAsset
    render_time_seconds: float = 0.0
    file_size_mb: float = 0.0
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def intermediates(self) -> List[Path]:
        return [self.silent_video.file_path, self.descriptor_path]


@dataclass
class PipelineRun:
    """Mutable record of one pipeline invocation"""
    run_id: str
    work_dir: Path
    state: PipelineState = PipelineState.INIT
    failed_stage: Optional[AssemblyStage] = None
    error: Optional[Exception] = None
    history: List[PipelineState] = field(default_factory=lambda: [PipelineState.INIT])

    def advance(self, state: PipelineState) -> None:
        self.state = state
        self.history.append(state)

    def fail(self, stage: AssemblyStage, error: Exception) -> None:
        self.failed_stage = stage
        self.error = error
        self.advance(PipelineState.FAILED)

    @property
    def is_done(self) -> bool:
        return self.state == PipelineState.DONE
