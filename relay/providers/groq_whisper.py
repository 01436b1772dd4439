"""
Whisper transcription on Groq, shared by the providers that use it.

Groq hosts whisper-large-v3 behind an OpenAI-compatible API. It needs a file
upload in a conventional container, so the recording is first converted to
compact MP3.
"""
import asyncio
import logging
from pathlib import Path

from groq import AsyncGroq

from relay.audio.ingest import TemporaryArtifacts
from relay.audio.transcode import to_compact_mono_16k_mp3
from relay.config import GroqConfig
from relay.normalize import text_from_transcription

logger = logging.getLogger(__name__)


def create_groq_client(api_key: str, timeout: float) -> AsyncGroq:
    """Build an async Groq client for one request. Enter it with ``async with`` to close it."""
    return AsyncGroq(api_key=api_key, timeout=timeout)


async def transcribe_with_groq_whisper(
    client: AsyncGroq,
    audio_path: Path,
    config: GroqConfig,
    artifacts: TemporaryArtifacts,
) -> str:
    """Convert ``audio_path`` to MP3 and transcribe it with Groq Whisper.

    The MP3 is registered with ``artifacts`` as soon as it exists.
    """
    mp3_path = artifacts.add(await to_compact_mono_16k_mp3(audio_path))
    content = await asyncio.to_thread(Path(mp3_path).read_bytes)

    response = await client.audio.transcriptions.create(
        file=(Path(mp3_path).name, content),
        model=config.transcription_model,
        language=config.language,
        response_format="json",
        temperature=0.0,
    )
    return text_from_transcription(response)
