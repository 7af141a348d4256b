"""Data models for media generation pipeline"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field


class MediaGenerationError(Exception):
    """Base class for upstream generation failures"""


class ScriptGenerationError(MediaGenerationError):
    """Transcript or image prompt generation failed"""


class NarrationError(MediaGenerationError):
    """Text-to-speech failed"""


class ImageGenerationError(MediaGenerationError):
    """No usable images were produced"""


class GeneratedImage(BaseModel):
    """Generated image with metadata"""
    index: int
    prompt: str
    file_path: Path
    source_url: Optional[str] = None


class ImageFailure(BaseModel):
    """One prompt that did not yield an image"""
    index: int
    prompt: str
    error: str


class ImageBatchResult(BaseModel):
    """Outcome of one parallel image batch, in submission order"""
    images: List[GeneratedImage] = []
    failures: List[ImageFailure] = []
    generation_time: float = 0.0
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def image_paths(self) -> List[Path]:
        return [image.file_path for image in self.images]


class MediaGenerationResult(BaseModel):
    """Narration and images ready for assembly"""
    transcript: str
    transcript_path: Path
    audio_path: Path
    image_prompts: List[str] = []
    images: ImageBatchResult
