"""Derivation orchestrator: transcript -> translation / summary.

Each derivation kind runs its own state machine:

    IDLE -> PENDING -> SUCCEEDED | FAILED -> PENDING (next dispatch) ...

Kinds are independent: a translation and a summary may be pending at the
same time, and the failure of one never touches the other or the transcript.

Re-dispatching a kind while it is pending replaces the in-flight request.
When the superseded request eventually finishes, its result is handed back
to its own caller flagged `stale=True` and is never written to the session
state, so the state always reflects the most recently dispatched request.
"""

import asyncio
import itertools
import logging
from typing import Any, Dict, Optional, Sequence, Union

from .summarization import SummarizationClient
from .translation import TranslationClient
from ..errors import AudioscribeError, DerivationError, NoTranscriptAvailable
from ..models.derivation import (
    DerivationKind,
    DerivationRequest,
    DerivationResult,
    DerivationStatus,
    SummaryType,
)
from ..models.session import SessionState
from ..models.transcription import TranscriptionResult
from ..transcription.publisher import ResultPublisher

logger = logging.getLogger(__name__)

STAGE_LABELS = {
    DerivationKind.TRANSLATE: "Translation",
    DerivationKind.SUMMARIZE: "Summarization",
}


class DerivationOrchestrator:
    """Sequences derivation requests against the current transcript."""

    def __init__(self,
                 translation_client: TranslationClient,
                 summarization_client: SummarizationClient,
                 state: Optional[SessionState] = None,
                 publisher: Optional[ResultPublisher] = None):
        """Initialize the orchestrator.

        Args:
            translation_client: Client used for DerivationKind.TRANSLATE
            summarization_client: Client used for DerivationKind.SUMMARIZE
            state: Session state to own; a fresh one is created if omitted
            publisher: Where derivation state changes are published
        """
        self.translation_client = translation_client
        self.summarization_client = summarization_client
        self.state = state or SessionState()
        self.publisher = publisher or ResultPublisher()

        self._request_ids = itertools.count(1)
        self._latest_request: Dict[DerivationKind, int] = {}

    # Transcript cell

    def set_transcript(self, result: TranscriptionResult) -> None:
        """Store a successful transcription as the current transcript."""
        self.state.transcript = result.text
        self.state.transcript_source = "transcription"
        self.state.last_transcription = result
        logger.info(f"Transcript updated from {result.service} ({len(result.text)} chars)")

    def edit_transcript(self, text: str) -> None:
        """Replace the transcript with user-edited text.

        In-flight derivations keep the snapshot they were dispatched with.
        """
        self.state.transcript = text
        self.state.transcript_source = "edit"
        logger.info(f"Transcript edited ({len(text)} chars)")

    def get_result(self, kind: DerivationKind) -> DerivationResult:
        return self.state.results[kind]

    def is_pending(self, kind: DerivationKind) -> bool:
        return self.state.results[kind].status is DerivationStatus.PENDING

    # Dispatch

    async def request_derivation(self, kind: DerivationKind, parameters: Dict[str, Any]) -> DerivationResult:
        """Derive text of `kind` from the current transcript.

        Returns:
            The terminal result of this request (flagged stale if it was superseded)

        Raises:
            NoTranscriptAvailable: the transcript is empty; no client is called
        """
        if not self.state.has_transcript:
            logger.warning(f"{STAGE_LABELS[kind]} rejected: no transcript available")
            raise NoTranscriptAvailable()

        request = DerivationRequest(
            kind=kind,
            parameters=dict(parameters),
            source_text=self.state.transcript,
            request_id=next(self._request_ids),
        )
        if self.is_pending(kind):
            logger.info(f"{STAGE_LABELS[kind]} request #{request.request_id} supersedes "
                        f"#{self._latest_request.get(kind)}")
        self._latest_request[kind] = request.request_id
        self._record(DerivationResult(
            kind=kind,
            status=DerivationStatus.PENDING,
            request_id=request.request_id,
            parameters=request.parameters,
        ))

        try:
            text = await self._dispatch(request)
            outcome = DerivationResult(
                kind=kind,
                status=DerivationStatus.SUCCEEDED,
                result_text=text,
                request_id=request.request_id,
                parameters=request.parameters,
            )
        except AudioscribeError as e:
            message = str(e) if isinstance(e, DerivationError) else f"{STAGE_LABELS[kind]} failed: {e}"
            outcome = DerivationResult(
                kind=kind,
                status=DerivationStatus.FAILED,
                error_message=message,
                request_id=request.request_id,
                parameters=request.parameters,
            )
        except asyncio.CancelledError:
            if self._is_latest(request):
                self._record(DerivationResult(
                    kind=kind,
                    status=DerivationStatus.FAILED,
                    error_message=f"{STAGE_LABELS[kind]} cancelled",
                    request_id=request.request_id,
                    parameters=request.parameters,
                ))
            raise
        except Exception as e:
            # Unexpected client failure: the kind must still leave PENDING
            logger.exception(f"{STAGE_LABELS[kind]} request #{request.request_id} raised unexpectedly")
            if self._is_latest(request):
                message = f"{STAGE_LABELS[kind]} failed: {e}"
                self.state.last_error = message
                self._record(DerivationResult(
                    kind=kind,
                    status=DerivationStatus.FAILED,
                    error_message=message,
                    request_id=request.request_id,
                    parameters=request.parameters,
                ))
            raise

        if not self._is_latest(request):
            logger.debug(f"Discarding stale {kind.value} result for request #{request.request_id}")
            outcome.stale = True
            return outcome

        if outcome.status is DerivationStatus.FAILED:
            logger.error(f"{STAGE_LABELS[kind]} request #{request.request_id} failed: {outcome.error_message}")
            self.state.last_error = outcome.error_message
        self._record(outcome)
        return outcome

    async def request_translation(self,
                                  target_language: str,
                                  previous_translations: Sequence[str] = (),
                                  original_context: str = "") -> DerivationResult:
        return await self.request_derivation(DerivationKind.TRANSLATE, {
            "target_language": target_language,
            "previous_translations": list(previous_translations),
            "original_context": original_context,
        })

    async def request_summary(self,
                              summary_type: Union[str, SummaryType] = SummaryType.MEDIUM,
                              summary_language: str = "ja") -> DerivationResult:
        if isinstance(summary_type, SummaryType):
            summary_type = summary_type.value
        return await self.request_derivation(DerivationKind.SUMMARIZE, {
            "summary_type": summary_type,
            "summary_language": summary_language,
        })

    async def _dispatch(self, request: DerivationRequest) -> str:
        params = request.parameters
        if request.kind is DerivationKind.TRANSLATE:
            return await self.translation_client.translate(
                request.source_text,
                params.get("target_language", ""),
                params.get("previous_translations", ()),
                params.get("original_context", ""),
            )
        return await self.summarization_client.summarize(
            request.source_text,
            params.get("summary_type", SummaryType.MEDIUM.value),
            params.get("summary_language", "ja"),
        )

    def _is_latest(self, request: DerivationRequest) -> bool:
        return self._latest_request.get(request.kind) == request.request_id

    def _record(self, result: DerivationResult) -> None:
        self.state.results[result.kind] = result
        self.publisher.publish_derivation_result(result)
