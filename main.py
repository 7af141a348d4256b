#!/usr/bin/env python3
"""
Prompt-to-Slideshow - Main Entry Point
Turns a text prompt into a narrated slideshow video in one run.
"""

import asyncio
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from rich.console import Console

# Load local env for API keys and the default prompt
load_dotenv()
load_dotenv(dotenv_path=Path.cwd() / ".env.local")

from slideshow_ai.utils.config import Config
from slideshow_ai.utils.logger import setup_logging
from slideshow_ai.media_generation.media_pipeline import MediaPipeline
from slideshow_ai.media_generation.media_models import MediaGenerationError
from slideshow_ai.video_assembly import PipelineFailure, VideoAssembler, VideoAssemblyResult

console = Console()

DEFAULT_CONFIG = "configs/config.yaml"


class SlideshowSystem:
    """Main system coordinator: media generation followed by video assembly"""

    def __init__(self, config: Config, client=None):
        self.config = config
        self.logger = setup_logging(self.config)

        self.media_pipeline = MediaPipeline(self.config, client)
        self.video_assembler = VideoAssembler(self.config)
        self.video_assembler.check_dependencies()

    @classmethod
    def from_file(cls, config_path: str) -> "SlideshowSystem":
        config = Config.load(config_path) if Path(config_path).exists() else Config()
        return cls(config)

    async def generate_video(self, user_prompt: str,
                             output_path: Optional[Path] = None) -> VideoAssemblyResult:
        """Generate a single narrated slideshow for the prompt"""
        console.print("[blue]🎬[/blue] Starting video generation process...")

        with console.status("[cyan]📝 Generating transcript, narration and images..."):
            media = await self.media_pipeline.generate_media(user_prompt)
        console.print(f"[green]🖼️[/green] Generated {len(media.images.images)} images")

        with console.status("[magenta]🎞️ Assembling final video..."):
            result = await self.video_assembler.assemble_video(
                media.audio_path,
                media.images.image_paths,
                output_path
            )

        console.print("\n[bold green]🎉 Video Generation Complete![/bold green]")
        console.print(f"[green]🎬[/green] Video duration: {result.audio_duration:.1f}s")
        console.print(f"[green]💾[/green] File size: {result.file_size_mb:.1f}MB")
        console.print(f"[green]✅[/green] Final video created: {result.output.file_path}")
        return result


def main(argv=None) -> int:
    """Main entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Narrated slideshow video from a text prompt")
    parser.add_argument("--prompt", type=str, default=os.getenv("USER_PROMPT"),
                        help="Prompt to summarize and illustrate (default: $USER_PROMPT)")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG,
                        help="Path to configuration file")
    parser.add_argument("--output", type=Path, default=None,
                        help="Final video path (default: <paths.output>/<video.output_filename>)")

    args = parser.parse_args(argv)

    if not args.prompt:
        console.print("[red]❌[/red] No prompt given: pass --prompt or set USER_PROMPT")
        return 2

    try:
        system = SlideshowSystem.from_file(args.config)
        asyncio.run(system.generate_video(args.prompt, args.output))
    except KeyboardInterrupt:
        console.print("\n[yellow]⏹️[/yellow] Stopped by user")
        return 130
    except PipelineFailure as e:
        console.print(f"[red]❌[/red] Video assembly failed at {e.stage.value}: {e.cause}")
        return 1
    except MediaGenerationError as e:
        console.print(f"[red]❌[/red] Media generation failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
