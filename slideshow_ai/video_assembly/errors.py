"""
Video Assembly Errors

Every failure raised by the assembly pipeline derives from AssemblyError so
callers can catch the whole family in one place. The orchestrator wraps stage
failures in PipelineFailure, which names the stage that broke.
"""

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .video_models import AssemblyStage


class AssemblyError(Exception):
    """Base class for media assembly failures"""


class ProcessError(AssemblyError):
    """An external executable could not be located or launched"""

    def __init__(self, message: str, command: Optional[List[str]] = None):
        super().__init__(message)
        self.command = command or []


class ProcessTimeout(ProcessError):
    """An external process exceeded its deadline and was killed"""

    def __init__(self, message: str, command: Optional[List[str]] = None, timeout: Optional[float] = None):
        super().__init__(message, command)
        self.timeout = timeout


class ProbeError(AssemblyError):
    """Duration could not be read, or was zero / unparsable"""


class AllocationError(AssemblyError):
    """Timeline could not be allocated (empty image set, non-positive duration)"""


class ComposeError(AssemblyError):
    """The slideshow transcode failed or produced no output"""


class MuxError(AssemblyError):
    """The audio/video mux failed or produced no output"""


class PipelineFailure(AssemblyError):
    """A pipeline stage failed; carries the stage and the original cause"""

    def __init__(self, stage: "AssemblyStage", cause: BaseException):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage.value} stage failed: {cause}")
