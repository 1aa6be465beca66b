"""Completion stage (Stage 03) of the translation pipeline."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from app.domain.errors import TranslationUnavailableError
from app.domain.models import (
    AllRecoverableFailed,
    AttemptOutcome,
    ModelCandidate,
    PipelineResult,
    Remote,
    TranslationText,
)
from app.services.fallback import ModelFallbackSequencer, summarize_errors
from app.services.inference_client import HuggingFaceInferenceClient

from .prompts import build_translation_prompt, generic_translation

logger = logging.getLogger("app.services.translation_pipeline")

# No model exposes a real confidence; this range is a display heuristic only.
CONFIDENCE_RANGE = (0.70, 0.95)


class TranslationPipeline:
    """Ask a completion model to speak as the animal."""

    def __init__(
        self,
        client: HuggingFaceInferenceClient,
        candidates: Sequence[ModelCandidate],
        *,
        rng: random.Random | None = None,
        sequencer: ModelFallbackSequencer | None = None,
    ) -> None:
        self._client = client
        self._candidates = tuple(candidates)
        self._rng = rng or random.Random()
        self._sequencer = sequencer or ModelFallbackSequencer()

    @property
    def candidates(self) -> tuple[ModelCandidate, ...]:
        return self._candidates

    def synthesize_confidence(self) -> float:
        low, high = CONFIDENCE_RANGE
        return min(high, max(low, self._rng.uniform(low, high)))

    async def translate(
        self,
        transcript: str,
        animal_label: str,
    ) -> PipelineResult[TranslationText]:
        """Return ``Remote`` translation or raise; mock substitution is the caller's call.

        Raises:
            TranslationUnavailableError: every candidate failed recoverably.
            FatalPipelineError: a candidate reported an unrecoverable failure.
        """

        prompt = build_translation_prompt(transcript, animal_label)

        async def attempt(candidate: ModelCandidate, index: int) -> AttemptOutcome:
            return await self._client.call(candidate, prompt, is_first=index == 0)

        outcome = await self._sequencer.run(self._candidates, attempt)

        if isinstance(outcome, AllRecoverableFailed):
            summary = summarize_errors("translation", self._candidates, outcome.errors)
            raise TranslationUnavailableError(outcome.errors, summary)

        text = outcome.payload or generic_translation(animal_label)
        if not outcome.payload:
            logger.warning(
                "Model %s returned no completion content, using generic sentence",
                outcome.candidate.model_id,
            )

        translation = TranslationText(text=text, confidence=self.synthesize_confidence())
        logger.info(
            "Translation received model=%s confidence=%.2f: %s",
            outcome.candidate.model_id,
            translation.confidence,
            translation.text,
        )
        return Remote(translation, model_id=outcome.candidate.model_id)


__all__ = ["CONFIDENCE_RANGE", "TranslationPipeline"]
