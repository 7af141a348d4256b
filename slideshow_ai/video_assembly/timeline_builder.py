"""Timeline Builder

Splits the narration length evenly across the image set and serializes the
result as a concat-demuxer descriptor for the slideshow transcode.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Sequence, Tuple

from .errors import AllocationError
from .video_models import ConcatDescriptor, Timeline, TimelineEntry


def allocate(image_paths: Sequence[Path],
             total_duration: float,
             fps: int = 30) -> Tuple[Timeline, ConcatDescriptor]:
    """Build the equal-share timeline and its descriptor.

    Every image gets ``total_duration / len(image_paths)`` seconds, in the
    order given. Raises AllocationError for an empty image set or a
    non-positive or non-finite duration; the division is never attempted
    in either case.
    """
    if len(image_paths) == 0:
        raise AllocationError("Cannot allocate a timeline for an empty image set")
    if not (total_duration > 0 and math.isfinite(total_duration)):
        raise AllocationError(f"Total duration must be positive and finite, got {total_duration}")
    if fps <= 0:
        raise AllocationError(f"Frame rate must be positive, got {fps}")

    per_image = total_duration / len(image_paths)
    entries = tuple(
        TimelineEntry(index=i, image_path=Path(path).resolve(), duration_seconds=per_image)
        for i, path in enumerate(image_paths)
    )
    timeline = Timeline(entries=entries)

    drift = abs(timeline.total_duration - total_duration)
    if drift > 1.0 / fps:
        raise AllocationError(f"Timeline drifts {drift:.4f}s from {total_duration}s")

    return timeline, build_descriptor(timeline)


def build_descriptor(timeline: Timeline) -> ConcatDescriptor:
    return ConcatDescriptor(entries=tuple(
        (quote_path(entry.image_path), entry.duration_seconds)
        for entry in timeline.entries
    ))


def quote_path(path: Path) -> str:
    """Absolute forward-slash path, single-quoted for the concat format.

    Inside quotes only ``'`` is special; it is closed, escaped and reopened.
    """
    posix = str(path).replace('\\', '/')
    return "'" + posix.replace("'", "'\\''") + "'"
