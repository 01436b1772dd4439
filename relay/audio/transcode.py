"""
Format adapter: recorded audio to compact mono MP3.

Providers that upload a file to a Whisper endpoint get a downsampled copy of
the recording (1 channel, 16 kHz, 64 kbit/s), which keeps uploads small while
staying adequate for speech recognition. ffmpeg runs in a worker thread so the
event loop stays free.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

import ffmpeg

from relay.audio.ingest import remove_quietly
from relay.errors import TranscodeError

logger = logging.getLogger(__name__)

MP3_BITRATE = "64k"
MP3_CHANNELS = 1
MP3_SAMPLE_RATE = 16000


def compact_output_path(input_path: Union[str, Path]) -> str:
    """Derive the MP3 path that sits next to ``input_path``."""
    path = Path(input_path)
    if path.suffix.lower() == ".mp3":
        return str(path.with_name(f"{path.stem}.compact.mp3"))
    return str(path.with_suffix(".mp3"))


def _run_ffmpeg(input_path: str, output_path: str) -> None:
    (
        ffmpeg
        .input(input_path)
        .output(
            output_path,
            format="mp3",
            audio_bitrate=MP3_BITRATE,
            ac=MP3_CHANNELS,
            ar=MP3_SAMPLE_RATE,
        )
        .overwrite_output()
        .run(capture_stdout=True, capture_stderr=True)
    )


async def to_compact_mono_16k_mp3(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
) -> str:
    """Transcode ``input_path`` to mono 16 kHz 64 kbit/s MP3.

    Args:
        input_path: Source audio (typically Opus in WebM)
        output_path: Destination; derived from the input when omitted

    Returns:
        Path of the new MP3 file. The caller owns it and must delete it.

    Raises:
        TranscodeError: If ffmpeg is unavailable or rejects the input
    """
    source = str(input_path)
    target = str(output_path) if output_path else compact_output_path(source)

    logger.info("Converting audio to MP3...")
    try:
        await asyncio.to_thread(_run_ffmpeg, source, target)
    except ffmpeg.Error as e:
        remove_quietly(target)
        stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
        detail = stderr.splitlines()[-1] if stderr else str(e)
        raise TranscodeError(f"Audio conversion failed: {detail}") from e
    except FileNotFoundError as e:
        remove_quietly(target)
        raise TranscodeError("Audio conversion failed: ffmpeg executable not found") from e

    logger.info("Conversion complete")
    return target
