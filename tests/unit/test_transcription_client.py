"""Unit tests for TranscriptionClient."""

import asyncio

import pytest

from audioscribe.audio.encoder import AudioEncoder
from audioscribe.errors import EmptyTranscript, InvalidInput, TranscriptionError
from audioscribe.models.audio import AudioPayload, EncodedAudio
from audioscribe.transcription.client import TranscriptionClient

from conftest import FakeTranscriptionBackend


def encode(data: bytes) -> EncodedAudio:
    return AudioEncoder().encode(AudioPayload(data=data))


@pytest.mark.unit
class TestTranscriptionClient:

    def test_transcribe_passes_decoded_bytes(self, fake_backend):
        client = TranscriptionClient(fake_backend)
        audio = bytes(range(200)) * 6

        result = asyncio.run(client.transcribe(encode(audio), "ja"))

        assert result.text == "こんにちは"
        assert len(fake_backend.calls) == 1
        call = fake_backend.calls[0]
        assert call["audio_data"] == audio
        assert call["language"] == "ja"
        assert call["mime_type"] == "audio/l16"
        assert call["sample_rate"] == 16000

    def test_too_small_rejected_without_call(self, fake_backend):
        client = TranscriptionClient(fake_backend, min_audio_bytes=1000)

        with pytest.raises(InvalidInput):
            asyncio.run(client.transcribe(encode(b"\x01" * 999), "ja"))

        assert fake_backend.calls == []

    def test_empty_rejected_without_call(self, fake_backend):
        client = TranscriptionClient(fake_backend)
        empty = EncodedAudio(data="", mime_type="audio/l16", sample_rate=16000, channels=1, byte_length=0)

        with pytest.raises(InvalidInput):
            asyncio.run(client.transcribe(empty, "ja"))
        with pytest.raises(InvalidInput):
            asyncio.run(client.transcribe(None, "ja"))

        assert fake_backend.calls == []

    def test_empty_transcript_propagates(self):
        backend = FakeTranscriptionBackend(error=EmptyTranscript("No speech detected in the recording"))
        client = TranscriptionClient(backend)

        with pytest.raises(EmptyTranscript):
            asyncio.run(client.transcribe(encode(b"\x01" * 2000), "ja"))

        assert len(backend.calls) == 1

    def test_service_error_propagates_without_retry(self):
        backend = FakeTranscriptionBackend(error=TranscriptionError("Deepgram API error: 500 - boom", status=500))
        client = TranscriptionClient(backend)

        with pytest.raises(TranscriptionError) as excinfo:
            asyncio.run(client.transcribe(encode(b"\x01" * 2000), "ja"))

        assert excinfo.value.status == 500
        assert len(backend.calls) == 1

    def test_calls_never_overlap(self):
        backend = FakeTranscriptionBackend(delay=0.05)
        client = TranscriptionClient(backend)

        async def scenario():
            return await asyncio.gather(
                client.transcribe(encode(b"\x01" * 2000), "ja"),
                client.transcribe(encode(b"\x02" * 2000), "en"),
            )

        results = asyncio.run(scenario())

        assert len(results) == 2
        assert backend.max_in_flight == 1
        assert [call["language"] for call in backend.calls] == ["ja", "en"]
