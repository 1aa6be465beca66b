"""Shared fixtures: an inference client wired to an in-process HTTP transport."""

from __future__ import annotations

import json
from pathlib import Path
import sys
from typing import Callable

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from app.services.inference_client import HuggingFaceInferenceClient  # noqa: E402

INFERENCE_BASE_URL = "https://hf.test"
CHAT_COMPLETIONS_URL = "https://router.hf.test/v1/chat/completions"

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingHandler:
    """Forward requests to ``handler`` and keep every request it saw."""

    def __init__(self, handler: Handler) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def models_called(self) -> list[str]:
        return [requested_model(request) for request in self.requests]


def requested_model(request: httpx.Request) -> str:
    """Model id addressed by either a transcription or a completion request."""

    if request.url.path.startswith("/models/"):
        return request.url.path[len("/models/"):]
    return json.loads(request.content)["model"]


def completion_body(content: str | None) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def make_client() -> Callable[..., tuple[HuggingFaceInferenceClient, RecordingHandler]]:
    def factory(
        handler: Handler,
        *,
        credential: str | None = "hf_test_token",
    ) -> tuple[HuggingFaceInferenceClient, RecordingHandler]:
        recorder = RecordingHandler(handler)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        client = HuggingFaceInferenceClient(
            credential=credential,
            inference_base_url=INFERENCE_BASE_URL,
            chat_completions_url=CHAT_COMPLETIONS_URL,
            http_client=http_client,
        )
        return client, recorder

    return factory
