"""Narration transcript and image prompt generation via the OpenAI chat API"""

import logging
from pathlib import Path
from typing import List, Optional

from ..llm.openai_client import get_openai_client
from ..media_generation.media_models import ScriptGenerationError


class ScriptGenerator:
    """Writes the narration text and the visual descriptions that go with it"""

    def __init__(self, config, client=None):
        self.config = config
        self.logger = logging.getLogger('slideshow_ai.script_generator')
        self._client = client

        self.model_name = config.llm.model_name

    @property
    def client(self):
        if self._client is None:
            self._client = get_openai_client()
        return self._client

    async def generate_transcript(self, user_prompt: str,
                                  output_path: Optional[Path] = None) -> str:
        """Generate a short narration for the prompt, optionally saving it to disk"""
        if not user_prompt or not user_prompt.strip():
            raise ScriptGenerationError("Prompt is empty")

        transcript = await self._call_llm(
            self.config.llm.transcript_system_prompt,
            user_prompt,
            self.config.llm.transcript_max_tokens
        )
        if not transcript:
            raise ScriptGenerationError("LLM returned an empty transcript")

        if output_path is not None:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(transcript, encoding='utf-8')
        self.logger.info(f"Transcript generated ({len(transcript)} chars)")
        return transcript

    async def generate_image_prompts(self, transcript: str, count: int) -> List[str]:
        """Ask for ``count`` visual descriptions; one per non-blank response line"""
        content = await self._call_llm(
            self.config.llm.image_prompt_system_prompt,
            f"Extract {count} visual descriptions for images from the following transcript:\n{transcript}",
            self.config.llm.image_prompt_max_tokens
        )
        prompts = [line.strip() for line in content.split("\n") if line.strip()]
        if not prompts:
            raise ScriptGenerationError("LLM returned no image descriptions")

        self.logger.info(f"Image prompts generated: {len(prompts)}")
        return prompts

    async def _call_llm(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt}
                ],
                max_tokens=max_tokens
            )
        except Exception as e:
            self.logger.error(f"LLM call failed: {e}")
            raise ScriptGenerationError(f"LLM call failed: {e}") from e

        return (response.choices[0].message.content or "").strip()
