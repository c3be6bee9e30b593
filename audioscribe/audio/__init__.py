"""Audio capture and processing module."""

from .capture import AudioCapture
from .device import MicrophoneSource
from .encoder import AudioEncoder
from .audio_pub import AudioPublisher

__all__ = [
    'AudioCapture',
    'MicrophoneSource',
    'AudioEncoder',
    'AudioPublisher',
]
