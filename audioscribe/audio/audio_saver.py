"""WAV file import/export for audio payloads."""

import logging
import wave
from pathlib import Path
from typing import Union

from ..models.audio import AudioPayload

logger = logging.getLogger(__name__)


def save_to_file(payload: AudioPayload, filepath: Union[str, Path]) -> None:
    """Save a raw PCM payload to a WAV file.

    Args:
        payload: Payload assembled by AudioCapture (mime type audio/l16)
        filepath: Path to save the WAV file
    """
    if payload.mime_type != "audio/l16":
        raise ValueError(f"Only raw PCM payloads can be saved as WAV, got {payload.mime_type}")

    Path(filepath).parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(filepath), 'wb') as wf:
        wf.setnchannels(payload.channels)
        wf.setsampwidth(payload.sample_width)
        wf.setframerate(payload.sample_rate)
        wf.writeframes(payload.data)

    logger.info(f"Audio saved to {filepath}")


def load_from_file(filepath: Union[str, Path]) -> AudioPayload:
    """Load a WAV file as a raw PCM payload.

    Raises:
        FileNotFoundError: the file does not exist
        ValueError: the file is not a readable WAV file
    """
    try:
        with wave.open(str(filepath), 'rb') as wf:
            payload = AudioPayload(
                data=wf.readframes(wf.getnframes()),
                mime_type="audio/l16",
                sample_rate=wf.getframerate(),
                channels=wf.getnchannels(),
                sample_width=wf.getsampwidth(),
            )
    except (wave.Error, EOFError) as e:
        raise ValueError(f"Not a readable WAV file: {filepath} ({e})") from e

    logger.info(f"Loaded {payload.size_bytes} bytes of audio from {filepath}")
    return payload
