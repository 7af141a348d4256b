"""Text-to-Speech engine backed by the OpenAI speech API"""

import logging
from pathlib import Path

from ..llm.openai_client import get_openai_client
from .media_models import NarrationError


class TTSEngine:
    """Narrates a transcript into a single audio file"""

    def __init__(self, config, client=None):
        self.config = config
        self.logger = logging.getLogger('slideshow_ai.tts_engine')
        self._client = client

        # TTS settings
        self.model = config.tts.model
        self.voice = config.tts.voice
        self.response_format = config.tts.response_format

    @property
    def client(self):
        if self._client is None:
            self._client = get_openai_client()
        return self._client

    async def synthesize(self, text: str, output_path: Path) -> Path:
        if not text.strip():
            raise NarrationError("Nothing to narrate: transcript is empty")

        self.logger.info(f"Synthesizing narration with {self.model}/{self.voice} ({len(text)} chars)")
        try:
            response = await self.client.audio.speech.create(
                model=self.model,
                input=text,
                voice=self.voice,
                response_format=self.response_format
            )
        except Exception as e:
            self.logger.error(f"Error in TTS: {e}")
            raise NarrationError(f"Speech synthesis failed: {e}") from e

        audio = response.content
        if not audio:
            raise NarrationError("Speech synthesis returned no audio")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(audio)
        self.logger.info(f"Narration saved: {output_path} ({len(audio) / 1024:.0f} KB)")
        return output_path
