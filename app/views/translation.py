"""Pydantic schemas for the translation endpoints."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.domain.models import TranslationRecord


class TranslationResponse(BaseModel):
    """Record rendered by the UI and read aloud by its text-to-speech player."""

    text: str = Field(..., description="First-person translation of the sound")
    confidence: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Display heuristic, not a model-derived probability",
    )
    transcribed_text: str = Field(default="", alias="transcribedText")
    is_mock_transcription: bool = Field(default=False, alias="isMockTranscription")
    is_mock_translation: bool = Field(default=False, alias="isMockTranslation")
    is_fallback: bool = Field(default=False, alias="isFallback")
    error: Optional[str] = Field(
        default=None,
        description="Actionable message when the run aborted and a fallback was returned",
    )

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_record(
        cls,
        record: TranslationRecord,
        *,
        error: str | None = None,
    ) -> "TranslationResponse":
        return cls(
            text=record.text,
            confidence=record.confidence,
            transcribed_text=record.transcribed_text,
            is_mock_transcription=record.is_mock_transcription,
            is_mock_translation=record.is_mock_translation,
            is_fallback=record.is_fallback,
            error=error,
        )


class AnimalListResponse(BaseModel):
    animals: List[str]


class ModelListResponse(BaseModel):
    models: Dict[str, List[str]]
