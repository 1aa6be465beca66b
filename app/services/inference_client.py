"""Thin Hugging Face client for transcription and chat-completion calls.

Every call returns an :data:`AttemptOutcome` instead of raising, so the
fallback sequencer can decide whether to try the next candidate.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from app.config.settings import HuggingFaceConfig, settings
from app.domain.models import (
    AttemptOutcome,
    AudioSample,
    ChatPrompt,
    FailureReason,
    FatalFailure,
    ModelCandidate,
    RecoverableFailure,
    Success,
    TaskKind,
)

logger = logging.getLogger(__name__)

_MAX_DETAIL_LENGTH = 500


def _truncate(value: str, max_length: int = _MAX_DETAIL_LENGTH) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_detail(response: httpx.Response) -> str:
    """Pull the most useful error text out of a JSON or plain-text body."""

    data = _json_or_none(response)
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            error = error.get("message")
        message = error or data.get("message")
        if message:
            return _truncate(str(message))
    text = response.text.strip()
    if text:
        return _truncate(text)
    return f"API request failed with status {response.status_code}"


def extract_transcript(data: Any) -> str | None:
    """Accept a bare string or an object exposing ``text``/``transcription``."""

    if isinstance(data, str):
        return data.strip() or None
    if isinstance(data, dict):
        for key in ("text", "transcription"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return None


def extract_completion(data: dict[str, Any]) -> str | None:
    """Return ``choices[0].message.content`` when present and non-empty."""

    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if isinstance(content, str) and content.strip():
        return content.strip()
    return None


class HuggingFaceInferenceClient:
    """Issue single attempts against named Hugging Face model endpoints."""

    def __init__(
        self,
        *,
        credential: str | None,
        inference_base_url: str = "https://api-inference.huggingface.co",
        chat_completions_url: str = "https://router.huggingface.co/v1/chat/completions",
        timeout_seconds: float = 30.0,
        max_tokens: int = 150,
        temperature: float = 0.8,
        loading_retry_seconds: int = 20,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._credential = credential
        self._inference_base_url = inference_base_url.rstrip("/")
        self._chat_completions_url = chat_completions_url
        self._timeout = httpx.Timeout(timeout_seconds)
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._loading_retry_seconds = loading_retry_seconds
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self._timeout)

    @classmethod
    def from_settings(
        cls,
        config: HuggingFaceConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> "HuggingFaceInferenceClient":
        config = config or settings.huggingface
        return cls(
            credential=config.credential,
            inference_base_url=config.inference_base_url,
            chat_completions_url=config.chat_completions_url,
            timeout_seconds=config.timeout_seconds,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            loading_retry_seconds=config.loading_retry_seconds,
            http_client=http_client,
        )

    @property
    def has_credential(self) -> bool:
        return bool(self._credential)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def call(
        self,
        candidate: ModelCandidate,
        payload: AudioSample | ChatPrompt,
        *,
        is_first: bool = False,
    ) -> AttemptOutcome:
        """Dispatch one attempt according to the candidate's task kind."""

        if not self._credential:
            return FatalFailure(
                FailureReason.UNAUTHORIZED,
                "No inference credential configured (set HF_TOKEN).",
            )

        if candidate.task is TaskKind.TRANSCRIPTION:
            if not isinstance(payload, AudioSample):
                raise TypeError("Transcription candidates require an AudioSample payload")
            return await self._transcribe(candidate, payload, is_first=is_first)

        if not isinstance(payload, ChatPrompt):
            raise TypeError("Completion candidates require a ChatPrompt payload")
        return await self._complete(candidate, payload, is_first=is_first)

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._credential}"}

    async def _transcribe(
        self,
        candidate: ModelCandidate,
        audio: AudioSample,
        *,
        is_first: bool,
    ) -> AttemptOutcome:
        url = f"{self._inference_base_url}/models/{candidate.model_id}"

        try:
            response = await self._client.post(
                url,
                content=audio.data,
                headers={
                    **self._auth_headers(),
                    "Content-Type": "application/octet-stream",
                },
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            # Timeouts are classified directly, never retried as multipart.
            logger.warning("Timeout transcribing with %s: %s", candidate.model_id, exc)
            return RecoverableFailure(FailureReason.UNKNOWN, f"Request timed out: {exc}")
        except httpx.RequestError as exc:
            logger.info(
                "Binary upload to %s failed (%s), retrying as multipart",
                candidate.model_id,
                exc,
            )
            return await self._transcribe_multipart(url, candidate, audio, is_first=is_first)

        if response.status_code == httpx.codes.UNSUPPORTED_MEDIA_TYPE:
            logger.info("%s rejected binary audio (415), retrying as multipart", candidate.model_id)
            return await self._transcribe_multipart(url, candidate, audio, is_first=is_first)

        return self._classify_transcription(candidate, response, is_first=is_first)

    async def _transcribe_multipart(
        self,
        url: str,
        candidate: ModelCandidate,
        audio: AudioSample,
        *,
        is_first: bool,
    ) -> AttemptOutcome:
        try:
            response = await self._client.post(
                url,
                files={"file": (audio.filename, audio.data, audio.content_type)},
                headers=self._auth_headers(),
                timeout=self._timeout,
            )
        except httpx.RequestError as exc:
            logger.warning("Multipart upload to %s failed: %s", candidate.model_id, exc)
            return RecoverableFailure(FailureReason.UNKNOWN, f"Request failed: {exc}")
        return self._classify_transcription(candidate, response, is_first=is_first)

    def _classify_transcription(
        self,
        candidate: ModelCandidate,
        response: httpx.Response,
        *,
        is_first: bool,
    ) -> AttemptOutcome:
        failure = self._classify_status(candidate, response, is_first=is_first)
        if failure is not None:
            return failure

        data = _json_or_none(response)
        if data is None:
            return RecoverableFailure(
                FailureReason.MALFORMED_RESPONSE,
                f"Response was not JSON: {_truncate(response.text)}",
            )
        transcript = extract_transcript(data)
        if transcript is None:
            return RecoverableFailure(
                FailureReason.MALFORMED_RESPONSE,
                "No transcription text in response",
            )
        return Success(transcript)

    async def _complete(
        self,
        candidate: ModelCandidate,
        prompt: ChatPrompt,
        *,
        is_first: bool,
    ) -> AttemptOutcome:
        body = {
            "model": candidate.model_id,
            "messages": prompt.as_messages(),
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }
        try:
            response = await self._client.post(
                self._chat_completions_url,
                json=body,
                headers=self._auth_headers(),
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            logger.warning("Timeout calling completion model %s: %s", candidate.model_id, exc)
            return RecoverableFailure(FailureReason.UNKNOWN, f"Request timed out: {exc}")
        except httpx.RequestError as exc:
            logger.warning("Completion request to %s failed: %s", candidate.model_id, exc)
            return RecoverableFailure(FailureReason.UNKNOWN, f"Request failed: {exc}")

        failure = self._classify_status(candidate, response, is_first=is_first)
        if failure is not None:
            return failure

        data = _json_or_none(response)
        if not isinstance(data, dict):
            return RecoverableFailure(
                FailureReason.MALFORMED_RESPONSE,
                f"Completion response was not a JSON object: {_truncate(response.text)}",
            )
        # A well-formed body without content is still a success; the
        # translation stage substitutes a generic sentence.
        return Success(extract_completion(data))

    def _classify_status(
        self,
        candidate: ModelCandidate,
        response: httpx.Response,
        *,
        is_first: bool,
    ) -> RecoverableFailure | FatalFailure | None:
        """Map a non-success HTTP status onto the failure taxonomy."""

        status_code = response.status_code
        if response.is_success:
            return None

        detail = _error_detail(response)
        logger.warning(
            "Model %s (%s) failed status=%s detail=%s",
            candidate.model_id,
            candidate.task.value,
            status_code,
            detail,
        )

        if status_code in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
            return FatalFailure(FailureReason.UNAUTHORIZED, detail)

        if status_code == httpx.codes.SERVICE_UNAVAILABLE:
            if is_first:
                return FatalFailure(
                    FailureReason.LOADING,
                    detail,
                    retry_after=self._estimated_wait(response),
                )
            return RecoverableFailure(
                FailureReason.LOADING,
                f"Model {candidate.model_id} is loading (503)",
            )

        if status_code == httpx.codes.GONE:
            return RecoverableFailure(
                FailureReason.GONE,
                f"Model {candidate.model_id} is no longer available (410 Gone)",
            )

        if status_code == httpx.codes.NOT_FOUND or "does not exist" in detail:
            return RecoverableFailure(FailureReason.NOT_FOUND, detail)

        return RecoverableFailure(FailureReason.UNKNOWN, f"status {status_code}: {detail}")

    def _estimated_wait(self, response: httpx.Response) -> int:
        data = _json_or_none(response)
        if isinstance(data, dict):
            estimated = data.get("estimated_time")
            try:
                return max(1, math.ceil(float(estimated)))
            except (TypeError, ValueError):
                pass
        return self._loading_retry_seconds


__all__ = [
    "HuggingFaceInferenceClient",
    "extract_completion",
    "extract_transcript",
]
