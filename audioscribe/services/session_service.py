"""Speech session service: recording, transcription and derivations for one user."""

import logging
from typing import Optional, Sequence

from ..audio.audio_pub import AudioPublisher
from ..audio.capture import AudioCapture
from ..audio.device import MicrophoneSource
from ..audio.encoder import AudioEncoder
from ..config import AudioscribeConfig
from ..derivation import DerivationOrchestrator, SummarizationClient, TranslationClient
from ..errors import AudioscribeError
from ..llm import ChatCompletionEngine
from ..models.audio import AudioPayload
from ..models.derivation import DerivationResult
from ..models.session import SessionState
from ..models.transcription import TranscriptionResult
from ..transcription import (
    AbstractTranscriptionBackend,
    DeepgramBackend,
    GoogleSpeechBackend,
    ResultPublisher,
    TranscriptionClient,
)

logger = logging.getLogger(__name__)


def create_transcription_backend(config: AudioscribeConfig) -> AbstractTranscriptionBackend:
    """Create the configured speech-recognition backend."""
    backend_name = config.get('transcription.backend', 'deepgram')
    timeout = float(config.get('transcription.timeout_seconds', 60.0))

    logger.info(f"Initializing {backend_name} transcription backend...")
    if backend_name == 'deepgram':
        return DeepgramBackend(
            api_key=config.require('deepgram.api_key'),
            base_url=config.get('deepgram.base_url', 'https://api.deepgram.com/v1/listen'),
            model=config.get('deepgram.model', 'nova-2'),
            timeout_seconds=timeout,
        )
    if backend_name == 'google':
        return GoogleSpeechBackend(
            credentials_path=config.get_google_credentials_path(),
            use_enhanced=config.get('google_cloud.use_enhanced_model', True),
            enable_automatic_punctuation=config.get('google_cloud.enable_automatic_punctuation', True),
            timeout_seconds=timeout,
        )
    raise ValueError(f"Unknown transcription backend: {backend_name}")


def create_llm_engine(config: AudioscribeConfig) -> ChatCompletionEngine:
    """Create the language-model engine used for derivations."""
    return ChatCompletionEngine(
        api_key=config.require('llm.api_key'),
        model=config.get('llm.model', 'gpt-4o-mini'),
        base_url=config.get('llm.base_url', 'https://api.openai.com/v1'),
        temperature=float(config.get('llm.temperature', 0.3)),
        max_tokens=int(config.get('llm.max_tokens', 2000)),
        timeout_seconds=float(config.get('llm.timeout_seconds', 120.0)),
    )


def create_microphone_source(config: AudioscribeConfig) -> MicrophoneSource:
    return MicrophoneSource(
        sample_rate=config.get('audio.sample_rate', 16000),
        channels=config.get('audio.channels', 1),
        device_index=config.get('audio.device_index'),
    )


class SpeechSession:
    """Client-facing surface: submit audio for transcription, request translation or summary.

    Every operation may be retried by the caller; nothing is deduplicated and
    nothing is retried automatically.
    """

    def __init__(self,
                 capture: Optional[AudioCapture],
                 transcription_client: TranscriptionClient,
                 orchestrator: DerivationOrchestrator,
                 encoder: Optional[AudioEncoder] = None,
                 publisher: Optional[ResultPublisher] = None,
                 language: str = "ja",
                 default_target_language: str = "en",
                 summary_type: str = "medium",
                 summary_language: str = "ja"):
        self.capture = capture
        self.transcription_client = transcription_client
        self.orchestrator = orchestrator
        self.encoder = encoder or AudioEncoder()
        self.publisher = publisher or orchestrator.publisher
        self.language = language
        self.default_target_language = default_target_language
        self.summary_type = summary_type
        self.summary_language = summary_language

    @classmethod
    def from_config(cls, config: AudioscribeConfig, with_microphone: bool = True) -> "SpeechSession":
        """Wire up a session from configuration."""
        min_audio_bytes = config.get('audio.min_audio_bytes', 1000)
        encoder = AudioEncoder()
        publisher = ResultPublisher()

        capture = None
        if with_microphone:
            capture = AudioCapture(
                source=create_microphone_source(config),
                publisher=AudioPublisher(),
                fragment_interval_ms=config.get('audio.fragment_interval_ms', 100),
                min_audio_bytes=min_audio_bytes,
            )

        transcription_client = TranscriptionClient(
            backend=create_transcription_backend(config),
            encoder=encoder,
            min_audio_bytes=min_audio_bytes,
        )

        engine = create_llm_engine(config)
        orchestrator = DerivationOrchestrator(
            translation_client=TranslationClient(engine),
            summarization_client=SummarizationClient(engine),
            state=SessionState(),
            publisher=publisher,
        )

        return cls(
            capture=capture,
            transcription_client=transcription_client,
            orchestrator=orchestrator,
            encoder=encoder,
            publisher=publisher,
            language=config.get('transcription.language', 'ja'),
            default_target_language=config.get('derivation.default_target_language', 'en'),
            summary_type=config.get('derivation.summary_type', 'medium'),
            summary_language=config.get('derivation.summary_language', 'ja'),
        )

    @property
    def state(self) -> SessionState:
        return self.orchestrator.state

    # Recording

    async def start_recording(self) -> None:
        if self.capture is None:
            raise RuntimeError("Session was created without a microphone")
        await self._tracked(self.capture.start_recording())

    async def stop_recording(self) -> Optional[AudioPayload]:
        if self.capture is None:
            return None
        return await self._tracked(self.capture.stop_recording())

    async def record_and_transcribe(self, language: Optional[str] = None) -> Optional[TranscriptionResult]:
        """Stop the current recording and transcribe its payload."""
        payload = await self.stop_recording()
        if payload is None:
            return None
        return await self.submit_audio_for_transcription(payload, language)

    # Transcription

    async def submit_audio_for_transcription(self,
                                             payload: AudioPayload,
                                             language: Optional[str] = None) -> TranscriptionResult:
        """Encode and transcribe a payload, then store the result as the transcript."""
        language = language or self.language
        logger.info(f"Submitting {payload.size_bytes} bytes for transcription (language={language})")

        try:
            encoded = self.encoder.encode(payload)
            result = await self.transcription_client.transcribe(encoded, language)
        except AudioscribeError as e:
            self._record_failure(e)
            raise

        self.orchestrator.set_transcript(result)
        self.state.last_error = None
        self.publisher.publish_transcription_result(result)
        return result

    def edit_transcript(self, text: str) -> None:
        self.orchestrator.edit_transcript(text)

    # Derivations

    async def request_translation(self,
                                  target_language: Optional[str] = None,
                                  previous_translations: Sequence[str] = (),
                                  original_context: str = "") -> DerivationResult:
        return await self._tracked(self.orchestrator.request_translation(
            target_language or self.default_target_language,
            previous_translations,
            original_context,
        ))

    async def request_summary(self,
                              summary_type: Optional[str] = None,
                              summary_language: Optional[str] = None) -> DerivationResult:
        return await self._tracked(self.orchestrator.request_summary(
            summary_type or self.summary_type,
            summary_language or self.summary_language,
        ))

    async def close(self) -> None:
        """Release the microphone and backend resources."""
        if self.capture is not None:
            await self.capture.cleanup()
        await self.transcription_client.backend.close()
        logger.info("SpeechSession closed")

    async def _tracked(self, operation):
        """Await `operation`, recording any pipeline failure as the session's last error."""
        try:
            return await operation
        except AudioscribeError as e:
            self._record_failure(e)
            raise

    def _record_failure(self, error: AudioscribeError) -> None:
        self.state.last_error = error.user_message()
        logger.error(f"Operation failed: {self.state.last_error}")
