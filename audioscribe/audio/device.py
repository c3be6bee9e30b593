"""Microphone access through PyAudio."""

import logging
from typing import Optional

import pyaudio

from ..errors import DeviceUnavailable, PermissionDenied

logger = logging.getLogger(__name__)


class MicrophoneSource:
    """Blocking PyAudio input stream.

    All methods block; AudioCapture calls them from an executor so the event
    loop keeps running while the device is opened or read.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        device_index: Optional[int] = None,
        format: int = pyaudio.paInt16,
        frames_per_buffer: int = 1024,
    ):
        self.sample_rate = sample_rate
        self.channels = channels
        self.device_index = device_index
        self.format = format
        self.frames_per_buffer = frames_per_buffer
        self.sample_width = pyaudio.get_sample_size(format)

        self.pyaudio_instance: Optional[pyaudio.PyAudio] = None
        self.stream: Optional[pyaudio.Stream] = None

    @property
    def is_open(self) -> bool:
        return self.stream is not None

    def open(self) -> None:
        """Acquire the microphone.

        Raises:
            PermissionDenied: the OS refused access to the input device
            DeviceUnavailable: no usable input device
        """
        if self.is_open:
            return

        self.pyaudio_instance = pyaudio.PyAudio()
        try:
            self.stream = self.pyaudio_instance.open(
                format=self.format,
                channels=self.channels,
                rate=self.sample_rate,
                input=True,
                input_device_index=self.device_index,
                frames_per_buffer=self.frames_per_buffer,
                stream_callback=None
            )
        except PermissionError as e:
            self._terminate()
            raise PermissionDenied(f"Microphone access denied: {e}") from e
        except OSError as e:
            self._terminate()
            raise DeviceUnavailable(f"Microphone unavailable: {e}") from e

        logger.info(f"Audio stream opened: {self.sample_rate}Hz, "
                    f"{self.channels} channel(s), device={self.device_index}")

    def read(self, frames: int) -> bytes:
        """Read `frames` frames, blocking until they are available."""
        if not self.is_open:
            raise DeviceUnavailable("Microphone stream is not open")
        try:
            return self.stream.read(frames, exception_on_overflow=False)
        except PermissionError as e:
            raise PermissionDenied(f"Microphone access revoked: {e}") from e
        except OSError as e:
            raise DeviceUnavailable(f"Microphone read failed: {e}") from e

    def read_available(self) -> bytes:
        """Read whatever the device has buffered without blocking."""
        if not self.is_open:
            return b""
        try:
            frames = self.stream.get_read_available()
        except OSError as e:
            raise DeviceUnavailable(f"Microphone read failed: {e}") from e
        if frames <= 0:
            return b""
        return self.read(frames)

    def close(self) -> None:
        """Release the device. Safe to call more than once."""
        if self.stream is not None:
            try:
                self.stream.stop_stream()
                self.stream.close()
            except OSError as e:
                logger.warning(f"Error closing audio stream: {e}")
            finally:
                self.stream = None
            logger.info("Audio stream closed")
        self._terminate()

    def _terminate(self) -> None:
        if self.pyaudio_instance is not None:
            self.pyaudio_instance.terminate()
            self.pyaudio_instance = None
