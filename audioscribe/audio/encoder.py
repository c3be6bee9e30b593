"""Transport encoding for audio payloads."""

import base64
import binascii
import logging

from ..errors import EncodingError
from ..models.audio import AudioPayload, EncodedAudio

logger = logging.getLogger(__name__)


class AudioEncoder:
    """Lossless base64 encoding of audio payloads."""

    def encode(self, payload: AudioPayload) -> EncodedAudio:
        """Encode a payload for transport.

        Raises:
            EncodingError: the payload is empty
        """
        if payload is None or not payload.data:
            raise EncodingError("Cannot encode an empty audio payload")

        encoded = base64.b64encode(payload.data).decode("ascii")
        logger.debug(f"Encoded {payload.size_bytes} bytes of {payload.mime_type} "
                     f"into {len(encoded)} base64 characters")
        return EncodedAudio(
            data=encoded,
            mime_type=payload.mime_type,
            sample_rate=payload.sample_rate,
            channels=payload.channels,
            byte_length=payload.size_bytes,
        )

    def decode(self, encoded: EncodedAudio) -> bytes:
        """Recover the exact original bytes.

        Raises:
            EncodingError: the data is not valid base64
        """
        try:
            return base64.b64decode(encoded.data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise EncodingError(f"Malformed encoded audio: {e}") from e
