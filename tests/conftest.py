"""Pytest configuration and fixtures for audioscribe tests."""

import asyncio
import logging
import queue
import time
from typing import List, Optional
from unittest.mock import Mock, patch

import numpy as np
import pytest
from pubsub import pub

from audioscribe.errors import DeviceUnavailable
from audioscribe.models.transcription import TranscriptionResult
from audioscribe.transcription.base import AbstractTranscriptionBackend


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests with no external services")
    config.addinivalue_line("markers", "integration: tests that wire several components together")
    config.addinivalue_line("markers", "slow: tests that wait on real timers")


@pytest.fixture(autouse=True)
def reset_pubsub():
    """Drop pub/sub listeners registered by a test."""
    yield
    pub.unsubAll()


class FakeMicrophone:
    """In-memory stand-in for MicrophoneSource.

    Fragments queued with `push` are returned by `read` in order; when the
    queue is empty `read` waits briefly and returns no data, like a quiet
    device that has not filled a buffer yet.
    """

    def __init__(self, sample_rate: int = 16000, channels: int = 1):
        self.sample_rate = sample_rate
        self.channels = channels
        self.sample_width = 2
        self.fragments: "queue.Queue[bytes]" = queue.Queue()
        self.flush_data = b""
        self.open_error: Optional[Exception] = None
        self.read_error: Optional[Exception] = None
        self.is_open = False
        self.open_count = 0
        self.close_count = 0
        self.reads = 0

    def push(self, *fragments: bytes) -> None:
        for fragment in fragments:
            self.fragments.put(fragment)

    def open(self) -> None:
        self.open_count += 1
        if self.open_error is not None:
            raise self.open_error
        self.is_open = True

    def read(self, frames: int) -> bytes:
        if not self.is_open:
            raise DeviceUnavailable("Microphone stream is not open")
        self.reads += 1
        if self.read_error is not None and self.fragments.empty():
            raise self.read_error
        try:
            return self.fragments.get(timeout=0.005)
        except queue.Empty:
            return b""

    def read_available(self) -> bytes:
        data, self.flush_data = self.flush_data, b""
        return data

    def close(self) -> None:
        self.close_count += 1
        self.is_open = False


@pytest.fixture
def fake_microphone():
    return FakeMicrophone()


class FakeTranscriptionBackend(AbstractTranscriptionBackend):
    """Records every call; returns `text` or raises `error`."""

    service_name = "Fake"

    def __init__(self, text: str = "こんにちは", error: Optional[Exception] = None, delay: float = 0.0):
        super().__init__(timeout_seconds=1.0)
        self.text = text
        self.error = error
        self.delay = delay
        self.calls: List[dict] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def transcribe(self, audio_data, language, mime_type="audio/l16", sample_rate=16000, channels=1):
        self.calls.append({
            "audio_data": audio_data,
            "language": language,
            "mime_type": mime_type,
            "sample_rate": sample_rate,
            "channels": channels,
        })
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return TranscriptionResult(
                text=self.text,
                confidence=0.95,
                processing_time=self.delay,
                service=self.service_name,
                language=language,
            )
        finally:
            self.in_flight -= 1

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_backend():
    return FakeTranscriptionBackend()


class FakePromptEngine:
    """Prompt engine that answers from a list (or raises) and records prompts."""

    def __init__(self, responses=None):
        self.responses = list(responses or ["response"])
        self.prompts: List[str] = []

    async def send_prompt(self, prompt: str, **kwargs) -> str:
        self.prompts.append(prompt)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_engine():
    return FakePromptEngine()


@pytest.fixture
def sample_audio_chunk():
    """Generate a sample audio chunk for testing."""
    # Generate 1024 samples of 16-bit audio (sine wave)
    sample_rate = 16000
    duration = 1024 / sample_rate  # ~0.064 seconds
    freq = 440  # A4 note

    t = np.linspace(0, duration, 1024, False)
    wave_data = np.sin(2 * np.pi * freq * t)

    # Convert to 16-bit integers
    audio_data = (wave_data * 32767).astype(np.int16)
    return audio_data.tobytes()


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware."""
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()

        # Configure mock stream
        mock_stream.read.return_value = b'\x00' * 3200  # 100ms of silence
        mock_stream.get_read_available.return_value = 0
        mock_stream.stop_stream.return_value = None
        mock_stream.close.return_value = None

        # Configure mock PyAudio instance
        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.terminate.return_value = None

        # Configure mock PyAudio class
        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream
        }


async def wait_for(predicate, timeout: float = 2.0) -> None:
    """Yield to the event loop until `predicate()` is true."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)
