"""
Tests for transcript, narration and image generation with a mocked OpenAI client.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from slideshow_ai.content_generation.script_generator import ScriptGenerator
from slideshow_ai.media_generation.image_generator import ImageGenerator
from slideshow_ai.media_generation.media_models import (
    GeneratedImage, ImageGenerationError, NarrationError, ScriptGenerationError
)
from slideshow_ai.media_generation.media_pipeline import MediaPipeline
from slideshow_ai.media_generation.tts_engine import TTSEngine


def _chat_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    client.audio.speech.create = AsyncMock(return_value=SimpleNamespace(content=b"mp3-bytes"))
    client.images.generate = AsyncMock()
    return client


class TestScriptGenerator:

    @pytest.mark.asyncio
    async def test_transcript_is_returned_and_saved(self, config, client, tmp_path):
        client.chat.completions.create.return_value = _chat_response("  Volcanoes erupt.  ")
        generator = ScriptGenerator(config, client)

        transcript = await generator.generate_transcript("volcanoes", tmp_path / "transcript.txt")

        assert transcript == "Volcanoes erupt."
        assert (tmp_path / "transcript.txt").read_text(encoding="utf-8") == "Volcanoes erupt."
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4-turbo"
        assert kwargs["max_tokens"] == 250
        assert kwargs["messages"][1] == {"role": "user", "content": "volcanoes"}

    @pytest.mark.asyncio
    async def test_empty_prompt_fails_without_calling_llm(self, config, client):
        generator = ScriptGenerator(config, client)

        with pytest.raises(ScriptGenerationError):
            await generator.generate_transcript("   ")
        client.chat.completions.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_api_error_is_wrapped(self, config, client):
        client.chat.completions.create.side_effect = RuntimeError("rate limited")
        generator = ScriptGenerator(config, client)

        with pytest.raises(ScriptGenerationError, match="rate limited"):
            await generator.generate_transcript("volcanoes")

    @pytest.mark.asyncio
    async def test_image_prompts_split_on_lines(self, config, client):
        client.chat.completions.create.return_value = _chat_response(
            "1. A volcano at dusk\n\n2. Lava flowing\n   \n3. Ash cloud\n"
        )
        generator = ScriptGenerator(config, client)

        prompts = await generator.generate_image_prompts("Volcanoes erupt.", 3)

        assert prompts == ["1. A volcano at dusk", "2. Lava flowing", "3. Ash cloud"]
        user_message = client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert user_message.startswith("Extract 3 visual descriptions")


class TestTTSEngine:

    @pytest.mark.asyncio
    async def test_writes_audio(self, config, client, tmp_path):
        engine = TTSEngine(config, client)

        path = await engine.synthesize("Hello there", tmp_path / "audio.mp3")

        assert path.read_bytes() == b"mp3-bytes"
        kwargs = client.audio.speech.create.call_args.kwargs
        assert (kwargs["model"], kwargs["voice"], kwargs["input"]) == ("tts-1", "alloy", "Hello there")

    @pytest.mark.asyncio
    async def test_failure_raises_narration_error(self, config, client, tmp_path):
        client.audio.speech.create.side_effect = RuntimeError("boom")
        engine = TTSEngine(config, client)

        with pytest.raises(NarrationError):
            await engine.synthesize("Hello", tmp_path / "audio.mp3")
        assert not (tmp_path / "audio.mp3").exists()


class TestImageGenerator:

    @pytest.mark.asyncio
    async def test_results_follow_submission_order(self, config, client, tmp_path, monkeypatch):
        generator = ImageGenerator(config, client)
        delays = [0.05, 0.0, 0.02, 0.01]

        async def fake_one(session, index, prompt, output_dir):
            await asyncio.sleep(delays[index])
            path = output_dir / f"image_{index + 1}.png"
            path.write_bytes(b"png")
            return GeneratedImage(index=index, prompt=prompt, file_path=path)

        monkeypatch.setattr(generator, "_generate_one", fake_one)
        result = await generator.generate_images(["a", "b", "c", "d"], tmp_path)

        assert [image.prompt for image in result.images] == ["a", "b", "c", "d"]
        assert result.image_paths == [tmp_path / f"image_{i}.png" for i in range(1, 5)]

    @pytest.mark.asyncio
    async def test_failures_are_collected_not_fatal(self, config, client, tmp_path, monkeypatch):
        generator = ImageGenerator(config, client)

        async def fake_one(session, index, prompt, output_dir):
            if index == 1:
                raise RuntimeError("content policy")
            return GeneratedImage(index=index, prompt=prompt, file_path=output_dir / f"{index}.png")

        monkeypatch.setattr(generator, "_generate_one", fake_one)
        result = await generator.generate_images(["a", "b", "c"], tmp_path)

        assert [image.index for image in result.images] == [0, 2]
        assert len(result.failures) == 1
        assert result.failures[0].index == 1
        assert "content policy" in result.failures[0].error

    @pytest.mark.asyncio
    async def test_worker_pool_is_bounded(self, config, client, tmp_path, monkeypatch):
        config.image_generation.max_parallel_images = 2
        generator = ImageGenerator(config, client)
        in_flight = 0
        peak = 0

        async def fake_one(session, index, prompt, output_dir):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return GeneratedImage(index=index, prompt=prompt, file_path=output_dir / f"{index}.png")

        monkeypatch.setattr(generator, "_generate_one", fake_one)
        result = await generator.generate_images([str(i) for i in range(7)], tmp_path)

        assert len(result.images) == 7
        assert peak == 2


class TestMediaPipeline:

    @pytest.mark.asyncio
    async def test_generates_everything_in_output_dir(self, config, client, tmp_path, monkeypatch):
        client.chat.completions.create.side_effect = [
            _chat_response("A short narration."),
            _chat_response("first image\nsecond image"),
        ]
        pipeline = MediaPipeline(config, client)

        async def fake_one(session, index, prompt, output_dir):
            path = output_dir / f"image_{index + 1}.png"
            path.write_bytes(b"png")
            return GeneratedImage(index=index, prompt=prompt, file_path=path)

        monkeypatch.setattr(pipeline.image_generator, "_generate_one", fake_one)
        media = await pipeline.generate_media("volcanoes", tmp_path)

        assert media.transcript == "A short narration."
        assert media.transcript_path.read_text(encoding="utf-8") == "A short narration."
        assert media.audio_path == tmp_path / "audio.mp3"
        assert media.image_prompts == ["first image", "second image"]
        assert media.images.image_paths == [tmp_path / "image_1.png", tmp_path / "image_2.png"]

    @pytest.mark.asyncio
    async def test_no_images_is_a_hard_error(self, config, client, tmp_path, monkeypatch):
        client.chat.completions.create.side_effect = [
            _chat_response("A short narration."),
            _chat_response("first image\nsecond image"),
        ]
        pipeline = MediaPipeline(config, client)

        async def always_fail(session, index, prompt, output_dir):
            raise RuntimeError("server error")

        monkeypatch.setattr(pipeline.image_generator, "_generate_one", always_fail)

        with pytest.raises(ImageGenerationError, match="No images generated"):
            await pipeline.generate_media("volcanoes", tmp_path)
