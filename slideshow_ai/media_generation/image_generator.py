"""Image generation via the OpenAI images API, fetched in a bounded worker pool"""

import asyncio
import logging
import time
from pathlib import Path
from typing import List, Optional

import aiohttp

from ..llm.openai_client import get_openai_client
from .media_models import GeneratedImage, ImageBatchResult, ImageFailure


class ImageGenerator:
    """
    Generates one image per prompt.

    Up to ``max_parallel_images`` prompts are in flight at once. A failed prompt
    is recorded and skipped; the rest of the batch carries on. Results keep the
    order the prompts were submitted in, whatever order they finish in.
    """

    def __init__(self, config, client=None):
        self.config = config
        self.logger = logging.getLogger('slideshow_ai.image_generator')
        self._client = client

        settings = config.image_generation
        self.model = settings.model
        self.size = settings.size
        self.max_parallel = settings.max_parallel_images
        self.download_timeout = settings.download_timeout_seconds

    @property
    def client(self):
        if self._client is None:
            self._client = get_openai_client()
        return self._client

    async def generate_images(self, prompts: List[str], output_dir: Path) -> ImageBatchResult:
        start_time = time.time()
        output_dir.mkdir(parents=True, exist_ok=True)
        semaphore = asyncio.Semaphore(self.max_parallel)

        timeout = aiohttp.ClientTimeout(total=self.download_timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:

            async def worker(index: int, prompt: str) -> GeneratedImage:
                async with semaphore:
                    return await self._generate_one(session, index, prompt, output_dir)

            outcomes = await asyncio.gather(
                *(worker(i, prompt) for i, prompt in enumerate(prompts)),
                return_exceptions=True
            )

        result = ImageBatchResult(generation_time=time.time() - start_time)
        for index, (prompt, outcome) in enumerate(zip(prompts, outcomes)):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                self.logger.error(f"Error generating image {index + 1}: {outcome}")
                result.failures.append(ImageFailure(index=index, prompt=prompt, error=str(outcome)))
            else:
                result.images.append(outcome)

        self.logger.info(f"Generated {len(result.images)}/{len(prompts)} images "
                         f"in {result.generation_time:.1f}s")
        return result

    async def _generate_one(self, session: aiohttp.ClientSession, index: int,
                            prompt: str, output_dir: Path) -> GeneratedImage:
        response = await self.client.images.generate(
            model=self.model,
            prompt=prompt,
            size=self.size,
            n=1
        )
        image_url: Optional[str] = response.data[0].url
        if not image_url:
            raise ValueError("Image API returned no URL")

        async with session.get(image_url) as download:
            download.raise_for_status()
            data = await download.read()

        image_path = output_dir / f"image_{index + 1}.png"
        image_path.write_bytes(data)
        self.logger.debug(f"Saved image {index + 1}: {image_path}")
        return GeneratedImage(index=index, prompt=prompt, file_path=image_path, source_url=image_url)
