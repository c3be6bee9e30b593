"""Audio capture module: one recording cycle at a time, fragments in arrival order."""

import asyncio
import time
import logging
from datetime import datetime
from typing import Optional

import numpy as np

from .audio_pub import AudioPublisher
from ..errors import AudioTooShort, CaptureError
from ..models.audio import AudioPayload, AudioStats, RecordingSession, RecordingStatus
from ..models.events import AudioFragmentEvent, CaptureErrorEvent


logger = logging.getLogger(__name__)


def peak_level(fragment: bytes, sample_width: int = 2) -> float:
    """Peak amplitude of a 16-bit PCM fragment, normalized to 0.0-1.0."""
    if sample_width != 2 or len(fragment) < 2:
        return 0.0
    samples = np.frombuffer(fragment[:len(fragment) - len(fragment) % 2], dtype=np.int16)
    return float(np.abs(samples.astype(np.int32)).max()) / 32768.0


class AudioCapture:
    """Microphone recording with incremental fragments and a single final payload.

    The device is read in an executor, one fragment per `fragment_interval_ms`
    of audio, so partial data is available for progress reporting while the
    recording is still running.
    """

    def __init__(
        self,
        source,
        publisher: Optional[AudioPublisher] = None,
        fragment_interval_ms: int = 100,
        min_audio_bytes: int = 1000,
        mime_type: str = "audio/l16",
    ):
        """Initialize audio capture.

        Args:
            source: Microphone source (see MicrophoneSource)
            publisher: Where fragment, payload and error events are sent
            fragment_interval_ms: Amount of audio per emitted fragment
            min_audio_bytes: Payloads shorter than this are rejected
            mime_type: Descriptor attached to the assembled payload
        """
        self.source = source
        self.publisher = publisher or AudioPublisher()
        self.fragment_interval_ms = fragment_interval_ms
        self.min_audio_bytes = min_audio_bytes
        self.mime_type = mime_type

        self.sample_rate = source.sample_rate
        self.channels = source.channels
        self.sample_width = getattr(source, "sample_width", 2)
        self.frames_per_fragment = max(1, self.sample_rate * fragment_interval_ms // 1000)

        self.session = self._new_session()
        self.total_fragments = 0
        self.peak_level = 0.0

        self._stop_requested = False
        self._starting = False
        self._stopping = False
        self._reader_task: Optional[asyncio.Task] = None
        self._ticker_task: Optional[asyncio.Task] = None
        self._failure: Optional[CaptureError] = None

    @property
    def status(self) -> RecordingStatus:
        return self.session.status

    @property
    def is_recording(self) -> bool:
        return self.session.status is RecordingStatus.RECORDING

    def _new_session(self) -> RecordingSession:
        return RecordingSession(
            sample_rate=self.sample_rate,
            channels=self.channels,
            sample_width=self.sample_width,
        )

    async def start_recording(self) -> None:
        """Acquire the microphone and start a fresh recording.

        Raises:
            PermissionDenied: microphone access refused
            DeviceUnavailable: no usable input device
        """
        if self.is_recording or self._starting or self._stopping:
            logger.warning("Recording already in progress")
            return

        # Claimed before the first await so an overlapping start is a no-op
        self._starting = True
        try:
            # The previous cycle's fragments must never leak into this one
            self.session = self._new_session()
            self.total_fragments = 0
            self.peak_level = 0.0
            self._failure = None
            self._stop_requested = False

            loop = asyncio.get_running_loop()
            try:
                await loop.run_in_executor(None, self.source.open)
            except CaptureError as e:
                logger.error(f"Could not start recording: {e}")
                await loop.run_in_executor(None, self.source.close)
                raise

            logger.info("Starting audio recording")
            self.session.status = RecordingStatus.RECORDING
            self.session.started_at = datetime.now()
            self._reader_task = asyncio.create_task(self._read_fragments())
            self._ticker_task = asyncio.create_task(self._tick_elapsed())
        finally:
            self._starting = False

    def on_fragment(self, fragment: bytes) -> None:
        """Append a fragment to the current recording, preserving arrival order."""
        if not fragment:
            return
        if not self.is_recording:
            logger.debug(f"Dropping {len(fragment)} byte fragment: not recording")
            return

        self.session.chunks.append(fragment)
        self.total_fragments += 1
        self.peak_level = peak_level(fragment, self.sample_width)

        self.publisher.publish_fragment(AudioFragmentEvent(
            sequence_number=self.total_fragments,
            audio_data=fragment,
            timestamp=time.time(),
            total_bytes=self.session.total_bytes,
            peak_level=self.peak_level,
        ))

    async def stop_recording(self) -> Optional[AudioPayload]:
        """Stop recording, release the device and return the assembled payload.

        Returns None when no recording is in progress (including a repeated stop).

        Raises:
            AudioTooShort: the recording is below `min_audio_bytes`; it is discarded
            CaptureError: the device failed while recording
        """
        self._raise_pending_failure()

        if not self.is_recording or self._stopping:
            logger.debug("No recording in progress")
            return None

        logger.info("Stopping audio recording")
        # Only the first of overlapping stops assembles the payload
        self._stopping = True
        try:
            await self._halt()
        except Exception:
            self.session = self._new_session()
            raise
        finally:
            self._stopping = False
        self._raise_pending_failure()

        self.session.status = RecordingStatus.STOPPED
        data = b"".join(self.session.chunks)
        logger.info(f"Recording stopped. Fragments: {self.total_fragments}, "
                    f"bytes: {len(data)}, elapsed: {self.session.elapsed_seconds}s")

        if len(data) < self.min_audio_bytes:
            logger.warning(f"Discarding recording: {len(data)} bytes < {self.min_audio_bytes}")
            raise AudioTooShort(len(data), self.min_audio_bytes)

        payload = AudioPayload(
            data=data,
            mime_type=self.mime_type,
            sample_rate=self.sample_rate,
            channels=self.channels,
            sample_width=self.sample_width,
        )
        self.publisher.publish_payload(payload)
        return payload

    async def cleanup(self) -> None:
        """Abandon any recording in progress and release the device."""
        if self.is_recording:
            await self._halt()
            self.session = self._new_session()
        self._failure = None

    async def _halt(self) -> None:
        """Stop the reader (it flushes buffered audio), the ticker and the device."""
        self._stop_requested = True
        try:
            if self._reader_task is not None:
                await self._reader_task
        finally:
            self._reader_task = None
            await self._cancel_ticker()
            await asyncio.get_running_loop().run_in_executor(None, self.source.close)

    async def _read_fragments(self) -> None:
        loop = asyncio.get_running_loop()
        try:
            while not self._stop_requested:
                fragment = await loop.run_in_executor(
                    None, self.source.read, self.frames_per_fragment)
                self.on_fragment(fragment)
            # Flush whatever the device still holds
            remaining = await loop.run_in_executor(None, self.source.read_available)
            self.on_fragment(remaining)
        except CaptureError as e:
            await self._fail(e)

    async def _tick_elapsed(self) -> None:
        while True:
            await asyncio.sleep(1.0)
            self.session.elapsed_seconds += 1

    async def _cancel_ticker(self) -> None:
        if self._ticker_task is None:
            return
        self._ticker_task.cancel()
        try:
            await self._ticker_task
        except asyncio.CancelledError:
            pass
        self._ticker_task = None

    async def _fail(self, error: CaptureError) -> None:
        """Device failed mid-recording: discard the attempt and reset to idle."""
        logger.error(f"Recording aborted: {error}")
        self._failure = error
        self.session = self._new_session()
        await self._cancel_ticker()
        await asyncio.get_running_loop().run_in_executor(None, self.source.close)
        self.publisher.publish_error(CaptureErrorEvent(error=error, detail=str(error)))

    def _raise_pending_failure(self) -> None:
        if self._failure is not None:
            failure, self._failure = self._failure, None
            raise failure

    def get_recording_stats(self) -> AudioStats:
        """Get current recording statistics."""
        duration = 0.0
        if self.session.started_at:
            duration = (datetime.now() - self.session.started_at).total_seconds()

        return AudioStats(
            status=self.session.status,
            duration_seconds=duration,
            elapsed_seconds=self.session.elapsed_seconds,
            sample_rate=self.sample_rate,
            fragment_interval_ms=self.fragment_interval_ms,
            total_fragments=self.total_fragments,
            total_bytes=self.session.total_bytes,
            peak_level=self.peak_level,
        )
