"""
Video Assembly Pipeline

This module handles the final video assembly process, combining:
- Narration audio (duration probed with ffprobe)
- Generated images, each shown for an equal share of the narration
- Silent slideshow render via ffmpeg's concat demuxer
- Final mux and trim to the narration length
"""

from .errors import (
    AllocationError, AssemblyError, ComposeError, MuxError, PipelineFailure,
    ProbeError, ProcessError, ProcessTimeout
)
from .timeline_builder import allocate
from .video_assembler import VideoAssembler
from .video_models import AssemblyStage, PipelineState, VideoAssemblyResult

__all__ = [
    'VideoAssembler',
    'VideoAssemblyResult',
    'AssemblyStage',
    'PipelineState',
    'allocate',
    'AssemblyError',
    'ProcessError',
    'ProcessTimeout',
    'ProbeError',
    'AllocationError',
    'ComposeError',
    'MuxError',
    'PipelineFailure'
]
