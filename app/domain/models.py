"""Domain types for the animal translation pipeline.

The service layer (inference client, fallback sequencer, mock provider) and the
pipeline stages both import from here so neither depends on the other.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, NamedTuple, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class AudioSample:
    """Recorded audio exactly as the browser uploaded it."""

    data: bytes
    content_type: str = "audio/webm"
    filename: str = "audio.webm"


class TaskKind(str, Enum):
    TRANSCRIPTION = "transcription"
    COMPLETION = "completion"


@dataclass(frozen=True)
class ModelCandidate:
    """One remote model identifier, tried in preference order."""

    model_id: str
    task: TaskKind


def candidates_for(model_ids: list[str] | tuple[str, ...], task: TaskKind) -> tuple[ModelCandidate, ...]:
    """Turn a configured list of model ids into ordered candidates."""

    return tuple(ModelCandidate(model_id=model_id, task=task) for model_id in model_ids)


@dataclass(frozen=True)
class ChatPrompt:
    """System instruction plus user message sent to a completion model."""

    system: str
    user: str

    def as_messages(self) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


class FailureReason(str, Enum):
    NOT_FOUND = "NotFound"
    GONE = "Gone"
    LOADING = "Loading"
    UNAUTHORIZED = "Unauthorized"
    MALFORMED_RESPONSE = "MalformedResponse"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Success:
    payload: Any


@dataclass(frozen=True)
class RecoverableFailure:
    reason: FailureReason
    detail: str = ""


@dataclass(frozen=True)
class FatalFailure:
    reason: FailureReason
    detail: str = ""
    retry_after: int | None = None


AttemptOutcome = Union[Success, RecoverableFailure, FatalFailure]


class AttemptError(NamedTuple):
    """Diagnostic entry recorded for a candidate that failed recoverably."""

    model_id: str
    reason: FailureReason
    detail: str

    def describe(self) -> str:
        return f"{self.model_id} ({self.reason.value}): {self.detail}"


@dataclass(frozen=True)
class SequenceSuccess:
    candidate: ModelCandidate
    payload: Any
    errors: tuple[AttemptError, ...] = ()


@dataclass(frozen=True)
class AllRecoverableFailed:
    errors: tuple[AttemptError, ...] = ()

    @property
    def all_gone(self) -> bool:
        """True when every candidate reported that its model was retired."""

        return bool(self.errors) and all(
            error.reason is FailureReason.GONE for error in self.errors
        )


SequenceOutcome = Union[SequenceSuccess, AllRecoverableFailed]


@dataclass(frozen=True)
class Remote(Generic[T]):
    """Value produced by a remote model."""

    value: T
    model_id: str | None = None

    @property
    def is_mock(self) -> bool:
        return False


@dataclass(frozen=True)
class Fallback(Generic[T]):
    """Canned value substituted because remote inference was unavailable."""

    value: T
    errors: tuple[AttemptError, ...] = field(default=())

    @property
    def is_mock(self) -> bool:
        return True


PipelineResult = Union[Remote[T], Fallback[T]]


@dataclass(frozen=True)
class TranslationText:
    text: str
    confidence: float


@dataclass(frozen=True)
class TranslationRecord:
    """Final output handed to the display layer."""

    text: str
    confidence: float
    transcribed_text: str
    is_mock_transcription: bool = False
    is_mock_translation: bool = False
    is_fallback: bool = False

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise ValueError("TranslationRecord.text must not be empty")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"TranslationRecord.confidence out of range: {self.confidence}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "confidence": self.confidence,
            "transcribedText": self.transcribed_text,
            "isMockTranscription": self.is_mock_transcription,
            "isMockTranslation": self.is_mock_translation,
            "isFallback": self.is_fallback,
        }


__all__ = [
    "AllRecoverableFailed",
    "AttemptError",
    "AttemptOutcome",
    "AudioSample",
    "ChatPrompt",
    "Fallback",
    "FailureReason",
    "FatalFailure",
    "ModelCandidate",
    "PipelineResult",
    "RecoverableFailure",
    "Remote",
    "SequenceOutcome",
    "SequenceSuccess",
    "Success",
    "TaskKind",
    "TranslationRecord",
    "TranslationText",
    "candidates_for",
]
