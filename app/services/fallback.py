"""Ordered multi-model fallback policy.

Candidates are tried strictly in configuration order with a single attempt in
flight. A fatal outcome aborts the sequence; recoverable outcomes are recorded
and the next candidate is tried.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Sequence

from app.domain.errors import FatalPipelineError
from app.domain.models import (
    AllRecoverableFailed,
    AttemptError,
    AttemptOutcome,
    FatalFailure,
    ModelCandidate,
    RecoverableFailure,
    SequenceOutcome,
    SequenceSuccess,
    Success,
)
from app.telemetry import observe_model_attempt

logger = logging.getLogger(__name__)

AttemptFn = Callable[[ModelCandidate, int], Awaitable[AttemptOutcome]]


class ModelFallbackSequencer:
    """Run one operation over an ordered list of model candidates."""

    async def run(
        self,
        candidates: Sequence[ModelCandidate],
        attempt: AttemptFn,
    ) -> SequenceOutcome:
        errors: list[AttemptError] = []

        for index, candidate in enumerate(candidates):
            outcome = await attempt(candidate, index)
            task = candidate.task.value

            if isinstance(outcome, Success):
                observe_model_attempt(task, candidate.model_id, "success")
                logger.info("Model %s succeeded after %s failure(s)", candidate.model_id, len(errors))
                return SequenceSuccess(
                    candidate=candidate,
                    payload=outcome.payload,
                    errors=tuple(errors),
                )

            if isinstance(outcome, FatalFailure):
                observe_model_attempt(task, candidate.model_id, "fatal")
                logger.error(
                    "Model %s failed fatally reason=%s detail=%s",
                    candidate.model_id,
                    outcome.reason.value,
                    outcome.detail,
                )
                raise FatalPipelineError(
                    outcome.reason,
                    outcome.detail,
                    model_id=candidate.model_id,
                    retry_after=outcome.retry_after,
                )

            if isinstance(outcome, RecoverableFailure):
                observe_model_attempt(task, candidate.model_id, "recoverable")
                errors.append(AttemptError(candidate.model_id, outcome.reason, outcome.detail))
                logger.warning(
                    "Model %s unavailable reason=%s, trying next candidate",
                    candidate.model_id,
                    outcome.reason.value,
                )
                continue

            raise TypeError(f"Unexpected attempt outcome: {outcome!r}")

        return AllRecoverableFailed(errors=tuple(errors))


def summarize_errors(
    label: str,
    candidates: Sequence[ModelCandidate],
    errors: Sequence[AttemptError],
) -> str:
    """Render a numbered diagnostic with one entry per failed candidate."""

    tried = ", ".join(candidate.model_id for candidate in candidates) or "<none configured>"
    lines = [f"All {label} models failed.", "", f"Models tried: {tried}"]
    if errors:
        lines.append("")
        lines.append("Errors encountered:")
        lines.extend(f"  {number}. {error.describe()}" for number, error in enumerate(errors, start=1))
    return "\n".join(lines)


__all__ = ["AttemptFn", "ModelFallbackSequencer", "summarize_errors"]
