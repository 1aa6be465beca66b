"""Exceptions raised by the translation pipeline stages."""

from __future__ import annotations

from app.domain.models import AttemptError, FailureReason


class PipelineError(RuntimeError):
    """Base class for pipeline failures surfaced to callers."""


class FatalPipelineError(PipelineError):
    """Raised when a candidate reports a failure that must abort the run."""

    def __init__(
        self,
        reason: FailureReason,
        detail: str = "",
        *,
        model_id: str | None = None,
        retry_after: int | None = None,
    ) -> None:
        self.reason = reason
        self.detail = detail
        self.model_id = model_id
        self.retry_after = retry_after
        super().__init__(self.user_message)

    @property
    def user_message(self) -> str:
        """Actionable message shown next to the fallback record."""

        if self.reason is FailureReason.UNAUTHORIZED:
            return (
                "Authentication with the inference service failed. "
                "Check that HF_TOKEN is set and has Inference API permissions."
            )
        if self.reason is FailureReason.LOADING:
            wait = self.retry_after or 20
            return f"Model is loading. Please wait {wait} seconds and try again."
        suffix = f": {self.detail}" if self.detail else ""
        return f"Inference failed ({self.reason.value}){suffix}"


class TranslationUnavailableError(PipelineError):
    """Raised when every completion candidate failed recoverably."""

    def __init__(self, errors: tuple[AttemptError, ...], summary: str) -> None:
        self.errors = errors
        self.summary = summary
        super().__init__(summary)


__all__ = ["FatalPipelineError", "PipelineError", "TranslationUnavailableError"]
