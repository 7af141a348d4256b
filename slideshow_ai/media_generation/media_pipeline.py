"""Media generation pipeline: transcript, narration and images for one prompt"""

import logging
from pathlib import Path
from typing import Optional

from ..content_generation.script_generator import ScriptGenerator
from .image_generator import ImageGenerator
from .media_models import ImageGenerationError, MediaGenerationResult
from .tts_engine import TTSEngine


class MediaPipeline:
    """Produces everything the video assembler consumes"""

    def __init__(self, config, client=None):
        self.config = config
        self.logger = logging.getLogger('slideshow_ai.media_pipeline')

        # Initialize engines
        self.script_generator = ScriptGenerator(config, client)
        self.tts_engine = TTSEngine(config, client)
        self.image_generator = ImageGenerator(config, client)

        self.output_dir = Path(config.paths.output)

    async def generate_media(self, user_prompt: str,
                             output_dir: Optional[Path] = None) -> MediaGenerationResult:
        output_dir = output_dir or self.output_dir
        self.logger.info(f"Starting media generation in {output_dir}")

        transcript_path = output_dir / "transcript.txt"
        transcript = await self.script_generator.generate_transcript(user_prompt, transcript_path)

        audio_path = await self.tts_engine.synthesize(
            transcript, output_dir / f"audio.{self.config.tts.response_format}"
        )

        prompts = await self.script_generator.generate_image_prompts(
            transcript, self.config.image_generation.images_per_video
        )
        images = await self.image_generator.generate_images(prompts, output_dir)
        if not images.images:
            raise ImageGenerationError(f"No images generated ({len(images.failures)} prompts failed)")
        if images.failures:
            self.logger.warning(f"{len(images.failures)} of {len(prompts)} images failed; "
                                f"continuing with {len(images.images)}")

        return MediaGenerationResult(
            transcript=transcript,
            transcript_path=transcript_path,
            audio_path=audio_path,
            image_prompts=prompts,
            images=images
        )
