"""Result assembly stage (Stage 04) of the translation pipeline."""

from __future__ import annotations

from app.domain.models import (
    Fallback,
    PipelineResult,
    TranslationRecord,
    TranslationText,
)

MOCK_TRANSLATION_CONFIDENCE = 0.6
CALLER_FALLBACK_CONFIDENCE = 0.5


class ResultAssembler:
    """Merge stage results into the record consumed by the display layer."""

    def assemble(
        self,
        transcript_result: PipelineResult[str],
        translation_result: PipelineResult[TranslationText],
    ) -> TranslationRecord:
        # Provenance comes from the result tags, never from the text.
        translation = translation_result.value
        return TranslationRecord(
            text=translation.text,
            confidence=translation.confidence,
            transcribed_text=transcript_result.value,
            is_mock_transcription=transcript_result.is_mock,
            is_mock_translation=translation_result.is_mock,
        )

    @staticmethod
    def mock_translation_result(text: str) -> Fallback[TranslationText]:
        return Fallback(TranslationText(text=text, confidence=MOCK_TRANSLATION_CONFIDENCE))

    @staticmethod
    def caller_fallback_record(animal_label: str | None, placeholder: str) -> TranslationRecord:
        """Record shown when the run aborted before a translation existed."""

        animal = animal_label or "animal"
        return TranslationRecord(
            text=f'[Fallback] The {animal} said: "{placeholder}"',
            confidence=CALLER_FALLBACK_CONFIDENCE,
            transcribed_text="",
            is_fallback=True,
        )


__all__ = [
    "CALLER_FALLBACK_CONFIDENCE",
    "MOCK_TRANSLATION_CONFIDENCE",
    "ResultAssembler",
]
