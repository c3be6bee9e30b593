"""Audio publisher module for pub/sub event publishing."""

import logging
from pubsub import pub
from ..models.audio import AudioPayload
from ..models.events import AudioFragmentEvent, CaptureErrorEvent

logger = logging.getLogger(__name__)

FRAGMENT_TOPIC = "audio.fragment"
PAYLOAD_TOPIC = "audio.payload"
ERROR_TOPIC = "audio.error"


class AudioPublisher:
    """Publishes capture events using pubsub.pub for pub/sub architecture."""

    def __init__(self, topic_prefix: str = "audio"):
        """Initialize audio publisher.

        Args:
            topic_prefix: Root of the pub/sub topics ("<prefix>.fragment",
                         "<prefix>.payload", "<prefix>.error")
        """
        self.fragment_topic = f"{topic_prefix}.fragment"
        self.payload_topic = f"{topic_prefix}.payload"
        self.error_topic = f"{topic_prefix}.error"
        logger.info(f"AudioPublisher initialized with topic prefix: {topic_prefix}")

    def publish_fragment(self, event: AudioFragmentEvent) -> None:
        """Publish a fragment event, used for progress reporting."""
        pub.sendMessage(self.fragment_topic, event=event)

    def publish_payload(self, payload: AudioPayload) -> None:
        """Publish the finalized payload of a recording cycle."""
        pub.sendMessage(self.payload_topic, payload=payload)
        logger.debug(f"Published audio payload: {payload.size_bytes} bytes")

    def publish_error(self, event: CaptureErrorEvent) -> None:
        """Publish a capture failure."""
        pub.sendMessage(self.error_topic, event=event)
        logger.debug(f"Published capture error: {event.error}")
