"""End-to-end orchestration for ``POST /translate``.

Stages run in this order, one run per uploaded recording:

1. ``ingestion``: validate the upload and build the :class:`AudioSample`.
2. ``transcription``: try each speech-to-text model, else a mock transcript.
3. ``translation``: try each completion model with the same prompt.
4. ``assembly``: merge both results and provenance flags into one record.

Transcription strictly precedes translation and candidates are never tried in
parallel, so every failure is attributable to exactly one model.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence
from uuid import uuid4

import httpx

from app.config.settings import HuggingFaceConfig, settings
from app.domain.errors import FatalPipelineError, TranslationUnavailableError
from app.domain.models import (
    AudioSample,
    FailureReason,
    PipelineResult,
    TaskKind,
    TranslationRecord,
    TranslationText,
    candidates_for,
)
from app.services.inference_client import HuggingFaceInferenceClient
from app.services.mock_fallback import MockFallbackProvider
from app.telemetry import increment_fallback

from .assembly import ResultAssembler
from .transcription import TranscriptionPipeline
from .translation import TranslationPipeline

logger = logging.getLogger("app.services.translation_pipeline")
transcript_logger = logging.getLogger("app.logs.transcript")


class RunState(str, Enum):
    IDLE = "Idle"
    TRANSCRIBING = "Transcribing"
    TRANSLATING = "Translating"
    ASSEMBLED = "Assembled"


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the translation pipeline."""

    order: int
    name: str
    module: str
    summary: str


_STAGES: List[PipelineStage] = [
    PipelineStage(
        1,
        "Ingestion",
        "app.pipelines.translation.ingestion",
        "Resolve content type, read the upload into memory, normalize the animal label.",
    ),
    PipelineStage(
        2,
        "Transcription",
        "app.pipelines.translation.transcription",
        "Try each speech-to-text model in order; degrade to a canned transcript.",
    ),
    PipelineStage(
        3,
        "Translation",
        "app.pipelines.translation.translation",
        "Prompt each completion model in order to speak as the animal.",
    ),
    PipelineStage(
        4,
        "Assembly",
        "app.pipelines.translation.assembly",
        "Merge transcript, translation and provenance flags into one record.",
    ),
]


def describe_stages() -> Iterable[PipelineStage]:
    """Expose the ordered list of stages for debugging and documentation."""

    return tuple(_STAGES)


class _RunTracker:
    """Log the one-way state progression of a single run."""

    def __init__(self) -> None:
        self.run_id = uuid4().hex[:12]
        self.state = RunState.IDLE

    def advance(self, state: RunState, detail: str = "") -> None:
        logger.info("run=%s %s -> %s %s", self.run_id, self.state.value, state.value, detail)
        self.state = state


class AnimalTranslationService:
    """Run transcription, translation and assembly for one recording."""

    def __init__(
        self,
        client: HuggingFaceInferenceClient,
        *,
        transcription_models: Sequence[str],
        completion_models: Sequence[str],
        mock_provider: MockFallbackProvider | None = None,
        rng: random.Random | None = None,
    ) -> None:
        rng = rng or random.Random()
        self._client = client
        self._mock_provider = mock_provider or MockFallbackProvider(rng)
        self._assembler = ResultAssembler()
        self._transcription = TranscriptionPipeline(
            client,
            candidates_for(list(transcription_models), TaskKind.TRANSCRIPTION),
            mock_provider=self._mock_provider,
        )
        self._translation = TranslationPipeline(
            client,
            candidates_for(list(completion_models), TaskKind.COMPLETION),
            rng=rng,
        )

    @classmethod
    def from_settings(
        cls,
        config: HuggingFaceConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        rng: random.Random | None = None,
    ) -> "AnimalTranslationService":
        config = config or settings.huggingface
        return cls(
            HuggingFaceInferenceClient.from_settings(config, http_client=http_client),
            transcription_models=config.transcription_models,
            completion_models=config.completion_models,
            rng=rng,
        )

    @property
    def mock_provider(self) -> MockFallbackProvider:
        return self._mock_provider

    def describe_models(self) -> dict[str, list[str]]:
        return {
            TaskKind.TRANSCRIPTION.value: [c.model_id for c in self._transcription.candidates],
            TaskKind.COMPLETION.value: [c.model_id for c in self._translation.candidates],
        }

    async def aclose(self) -> None:
        await self._client.aclose()

    async def process_animal_sound(self, audio: AudioSample, animal_label: str) -> TranslationRecord:
        """Produce a display record for ``audio``.

        Raises:
            FatalPipelineError: the credential is missing or rejected, or the
                preferred transcription model is still loading.
        """

        run = _RunTracker()
        if not self._client.has_credential:
            logger.error("run=%s aborted: no inference credential configured", run.run_id)
            raise FatalPipelineError(
                FailureReason.UNAUTHORIZED,
                "No inference credential configured (set HF_TOKEN).",
            )

        run.advance(RunState.TRANSCRIBING, f"animal={animal_label} bytes={len(audio.data)}")
        transcript_result = await self._transcription.transcribe(audio, animal_label)
        transcript_logger.info(
            "transcript | run=%s | animal=%s | mock=%s | text=%s",
            run.run_id,
            animal_label,
            transcript_result.is_mock,
            transcript_result.value,
        )

        run.advance(RunState.TRANSLATING, "mock" if transcript_result.is_mock else "remote")
        translation_result = await self._translate_or_mock(transcript_result.value, animal_label)

        record = self._assembler.assemble(transcript_result, translation_result)
        run.advance(
            RunState.ASSEMBLED,
            f"mock_transcription={record.is_mock_transcription} "
            f"mock_translation={record.is_mock_translation}",
        )
        transcript_logger.info(
            "translation | run=%s | animal=%s | mock=%s | text=%s",
            run.run_id,
            animal_label,
            record.is_mock_translation,
            record.text,
        )
        return record

    async def _translate_or_mock(
        self,
        transcript: str,
        animal_label: str,
    ) -> PipelineResult[TranslationText]:
        try:
            return await self._translation.translate(transcript, animal_label)
        except TranslationUnavailableError as exc:
            logger.warning("Translation unavailable, using mock translation:\n%s", exc.summary)
            increment_fallback("translation", "exhausted")
        except FatalPipelineError as exc:
            log = logger.error if exc.reason is FailureReason.UNAUTHORIZED else logger.warning
            log(
                "Translation failed (%s), using mock translation: %s",
                exc.reason.value,
                exc.user_message,
            )
            increment_fallback("translation", "fatal")
        return self._assembler.mock_translation_result(
            self._mock_provider.mock_translation(animal_label)
        )

    def fallback_record(self, animal_label: str | None) -> TranslationRecord:
        """Caller-level record used when ``process_animal_sound`` raised."""

        increment_fallback("run", "caller")
        return self._assembler.caller_fallback_record(
            animal_label,
            self._mock_provider.placeholder_translation(animal_label),
        )


_DEFAULT_SERVICE: AnimalTranslationService | None = None


def get_translation_service() -> AnimalTranslationService:
    """Return a lazily-instantiated translation service singleton."""

    global _DEFAULT_SERVICE
    if _DEFAULT_SERVICE is None:
        _DEFAULT_SERVICE = AnimalTranslationService.from_settings()
    return _DEFAULT_SERVICE


async def close_translation_service() -> None:
    global _DEFAULT_SERVICE
    if _DEFAULT_SERVICE is not None:
        await _DEFAULT_SERVICE.aclose()
        _DEFAULT_SERVICE = None


__all__ = [
    "AnimalTranslationService",
    "PipelineStage",
    "RunState",
    "close_translation_service",
    "describe_stages",
    "get_translation_service",
]
