"""Unit tests for AudioEncoder."""

import base64
import os

import pytest

from audioscribe.audio.encoder import AudioEncoder
from audioscribe.errors import EncodingError
from audioscribe.models.audio import AudioPayload, EncodedAudio


@pytest.mark.unit
class TestAudioEncoder:

    def test_round_trip_is_lossless(self, sample_audio_chunk):
        encoder = AudioEncoder()
        for data in (sample_audio_chunk, os.urandom(1201), b"\x00", bytes(range(256)) * 8):
            payload = AudioPayload(data=data)
            assert encoder.decode(encoder.encode(payload)) == data

    def test_encode_is_deterministic_base64(self):
        encoder = AudioEncoder()
        payload = AudioPayload(data=b"\x00\x01\x02" * 500, sample_rate=44100, channels=2)

        first = encoder.encode(payload)
        second = encoder.encode(payload)

        assert first == second
        assert first.data == base64.b64encode(payload.data).decode("ascii")
        assert first.byte_length == 1500
        assert first.mime_type == "audio/l16"
        assert first.sample_rate == 44100
        assert first.channels == 2

    def test_encode_empty_payload(self):
        with pytest.raises(EncodingError):
            AudioEncoder().encode(AudioPayload(data=b""))

    def test_encode_none(self):
        with pytest.raises(EncodingError):
            AudioEncoder().encode(None)

    def test_decode_malformed(self):
        encoded = EncodedAudio(data="not base64!!", mime_type="audio/l16",
                               sample_rate=16000, channels=1, byte_length=9)
        with pytest.raises(EncodingError):
            AudioEncoder().decode(encoded)
