"""Result publisher module for pub/sub event publishing."""

import logging
from pubsub import pub
from ..models.derivation import DerivationResult
from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)

TRANSCRIPTION_TOPIC = "transcription.result"
DERIVATION_TOPIC = "derivation.result"


class ResultPublisher:
    """Publishes transcription and derivation results using pubsub.pub."""

    def __init__(self,
                 transcription_topic: str = TRANSCRIPTION_TOPIC,
                 derivation_topic: str = DERIVATION_TOPIC):
        """Initialize result publisher.

        Args:
            transcription_topic: Pub/sub topic name for transcripts
            derivation_topic: Pub/sub topic name for derivation state changes
        """
        self.transcription_topic = transcription_topic
        self.derivation_topic = derivation_topic
        logger.info(f"ResultPublisher initialized with topics: {transcription_topic}, {derivation_topic}")

    def publish_transcription_result(self, result: TranscriptionResult) -> None:
        """Publish a transcription result to the pub/sub topic."""
        pub.sendMessage(self.transcription_topic, result=result)
        logger.debug(f"Published transcription result ({result.service}, {len(result.text)} chars)")

    def publish_derivation_result(self, result: DerivationResult) -> None:
        """Publish a derivation state change to the pub/sub topic."""
        pub.sendMessage(self.derivation_topic, result=result)
        logger.debug(f"Published {result.kind.value} result: {result.status.value}")
