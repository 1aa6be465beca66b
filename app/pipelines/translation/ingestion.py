"""Request ingestion helpers (Stage 01 of the translation pipeline)."""

from __future__ import annotations

import mimetypes
from typing import Final

from fastapi import HTTPException, UploadFile, status

from app.domain.models import AudioSample

_DEFAULT_CONTENT_TYPE: Final[str] = "audio/webm"
_ALLOWED_CONTENT_TYPES: Final[set[str]] = {
    "audio/webm",
    "audio/ogg",
    "audio/wav",
    "audio/x-wav",
    "audio/wave",
    "audio/mpeg",
    "audio/mp3",
    "audio/mp4",
    "audio/x-m4a",
    "audio/m4a",
    "audio/flac",
    "application/octet-stream",
}


# mimetypes reports container formats under video/ (".webm" -> "video/webm").
_CONTAINER_ALIASES: Final[dict[str, str]] = {
    "video/webm": "audio/webm",
    "video/ogg": "audio/ogg",
    "video/mp4": "audio/mp4",
}


def _guess_audio_type(filename: str) -> str | None:
    guessed_type, _ = mimetypes.guess_type(filename)
    if guessed_type is None:
        return None
    return _CONTAINER_ALIASES.get(guessed_type, guessed_type)


def resolve_content_type(audio_file: UploadFile) -> str:
    """Accept the formats browser recorders emit, guessing from the filename if needed."""

    content_type = (audio_file.content_type or "").split(";", 1)[0].strip().lower()
    if (not content_type or content_type == "application/octet-stream") and audio_file.filename:
        guessed_type = _guess_audio_type(audio_file.filename)
        if guessed_type in _ALLOWED_CONTENT_TYPES:
            content_type = guessed_type

    content_type = content_type or _DEFAULT_CONTENT_TYPE

    if content_type not in _ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported audio content type: {content_type}",
        )
    return content_type


async def read_audio_sample(audio_file: UploadFile, *, max_bytes: int) -> AudioSample:
    """Load the upload fully into memory, rejecting empty or oversized payloads."""

    content_type = resolve_content_type(audio_file)
    audio_bytes = await audio_file.read()
    await audio_file.close()

    if not audio_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded audio file is empty",
        )
    if len(audio_bytes) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Uploaded audio exceeds {max_bytes} bytes",
        )
    return AudioSample(
        data=audio_bytes,
        content_type=content_type,
        filename=audio_file.filename or "audio.webm",
    )


def normalize_animal_label(value: str | None) -> str:
    """Trim and title-case the animal label (``" dog "`` -> ``"Dog"``)."""

    cleaned = " ".join((value or "").split())
    if not cleaned:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An animal label is required",
        )
    return cleaned.title()


__all__ = ["normalize_animal_label", "read_audio_sample", "resolve_content_type"]
