"""Transcription stage (Stage 02) of the translation pipeline."""

from __future__ import annotations

import logging
from typing import Sequence

from app.domain.models import (
    AllRecoverableFailed,
    AttemptOutcome,
    AudioSample,
    Fallback,
    ModelCandidate,
    PipelineResult,
    Remote,
)
from app.services.fallback import ModelFallbackSequencer, summarize_errors
from app.services.inference_client import HuggingFaceInferenceClient
from app.services.mock_fallback import MockFallbackProvider
from app.telemetry import increment_fallback

logger = logging.getLogger("app.services.translation_pipeline")

_DEPRECATED_GUIDANCE = (
    "All speech recognition models are no longer available on the serverless "
    "Inference API (410 Gone); using a mock transcription. Configure "
    "HF_TRANSCRIPTION_MODELS with models that have inference enabled."
)


class TranscriptionPipeline:
    """Turn recorded audio into text, degrading to a canned transcript."""

    def __init__(
        self,
        client: HuggingFaceInferenceClient,
        candidates: Sequence[ModelCandidate],
        *,
        mock_provider: MockFallbackProvider,
        sequencer: ModelFallbackSequencer | None = None,
    ) -> None:
        self._client = client
        self._candidates = tuple(candidates)
        self._mock_provider = mock_provider
        self._sequencer = sequencer or ModelFallbackSequencer()

    @property
    def candidates(self) -> tuple[ModelCandidate, ...]:
        return self._candidates

    async def transcribe(self, audio: AudioSample, animal_label: str) -> PipelineResult[str]:
        """Return ``Remote(text)`` or ``Fallback(mock)``; fatal failures propagate."""

        async def attempt(candidate: ModelCandidate, index: int) -> AttemptOutcome:
            return await self._client.call(candidate, audio, is_first=index == 0)

        outcome = await self._sequencer.run(self._candidates, attempt)

        if isinstance(outcome, AllRecoverableFailed):
            mock_text = self._mock_provider.mock_transcript(animal_label)
            if outcome.all_gone:
                logger.warning(_DEPRECATED_GUIDANCE)
                increment_fallback("transcription", "deprecated")
            else:
                logger.error(
                    "%s\nUsing mock transcription for %s.",
                    summarize_errors("transcription", self._candidates, outcome.errors),
                    animal_label,
                )
                increment_fallback("transcription", "exhausted")
            return Fallback(mock_text, errors=outcome.errors)

        logger.info("Transcript received model=%s: %s", outcome.candidate.model_id, outcome.payload)
        return Remote(outcome.payload, model_id=outcome.candidate.model_id)


__all__ = ["TranscriptionPipeline"]
