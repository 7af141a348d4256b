"""Configuration management for the slideshow generator"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    model_name: str = "gpt-4-turbo"
    transcript_system_prompt: str = "You generate concise summaries for the given prompt."
    image_prompt_system_prompt: str = "You generate safe image descriptions using the Transcript"
    transcript_max_tokens: int = 250
    image_prompt_max_tokens: int = 200


class TTSConfig(BaseModel):
    model: str = "tts-1"
    voice: str = "alloy"
    response_format: str = "mp3"


class ImageGenerationConfig(BaseModel):
    model: str = "dall-e-3"
    size: str = "1024x1024"
    images_per_video: int = Field(default=5, ge=1)
    max_parallel_images: int = Field(default=4, ge=1)
    download_timeout_seconds: float = 60.0


class VideoConfig(BaseModel):
    fps: int = Field(default=30, gt=0)
    vcodec: str = "libx264"
    pix_fmt: str = "yuv420p"
    acodec: str = "aac"
    audio_bitrate: str = "192k"
    vsync: str = "vfr"
    output_filename: str = "output_video.mp4"


class ProcessConfig(BaseModel):
    ffmpeg_bin: str = "ffmpeg"
    ffprobe_bin: str = "ffprobe"
    probe_timeout_seconds: Optional[float] = 30.0
    compose_timeout_seconds: Optional[float] = 600.0
    mux_timeout_seconds: Optional[float] = 600.0


class PathsConfig(BaseModel):
    """Storage paths configuration"""
    output: str = "./output"
    temp: str = "./temp"
    logs: str = "./logs"


class PipelineConfig(BaseModel):
    # Only applied after a successful run; failed runs keep everything
    cleanup_intermediates: bool = False


class Config(BaseModel):
    llm: LLMConfig = Field(default_factory=LLMConfig)
    tts: TTSConfig = Field(default_factory=TTSConfig)
    image_generation: ImageGenerationConfig = Field(default_factory=ImageGenerationConfig)
    video: VideoConfig = Field(default_factory=VideoConfig)
    process: ProcessConfig = Field(default_factory=ProcessConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    logging: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def load(cls, config_path: str) -> "Config":
        """Load configuration from YAML file"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    def save(self, config_path: str):
        """Save configuration to YAML file"""
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.model_dump(), f, default_flow_style=False)
