"""Outcome classification for single Hugging Face attempts."""

from __future__ import annotations

import json

import httpx
import pytest

from app.domain.models import (
    AudioSample,
    ChatPrompt,
    FailureReason,
    FatalFailure,
    ModelCandidate,
    RecoverableFailure,
    Success,
    TaskKind,
)
from app.services.inference_client import extract_completion, extract_transcript
from conftest import completion_body

WHISPER = ModelCandidate("openai/whisper-large-v3", TaskKind.TRANSCRIPTION)
CHAT = ModelCandidate("meta-llama/Llama-3.2-3B-Instruct", TaskKind.COMPLETION)
AUDIO = AudioSample(data=b"\x1aE\xdf\xa3webm-bytes", content_type="audio/webm", filename="bark.webm")
PROMPT = ChatPrompt(system="You are a dog.", user="Translate: woof")


@pytest.mark.asyncio
async def test_missing_credential_is_fatal_without_network(make_client):
    client, recorder = make_client(lambda request: httpx.Response(200, json="woof"), credential=None)

    outcome = await client.call(WHISPER, AUDIO, is_first=True)

    assert isinstance(outcome, FatalFailure)
    assert outcome.reason is FailureReason.UNAUTHORIZED
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_binary_transcription_success_sends_raw_audio(make_client):
    client, recorder = make_client(lambda request: httpx.Response(200, json={"text": " woof woof "}))

    outcome = await client.call(WHISPER, AUDIO, is_first=True)

    assert outcome == Success("woof woof")
    request = recorder.requests[0]
    assert request.url.path == "/models/openai/whisper-large-v3"
    assert request.headers["authorization"] == "Bearer hf_test_token"
    assert request.headers["content-type"] == "application/octet-stream"
    assert request.content == AUDIO.data


@pytest.mark.asyncio
async def test_transport_error_retries_once_as_multipart(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers["content-type"] == "application/octet-stream":
            raise httpx.ConnectError("connection reset", request=request)
        return httpx.Response(200, json={"transcription": "bark"})

    client, recorder = make_client(handler)

    outcome = await client.call(WHISPER, AUDIO)

    assert outcome == Success("bark")
    assert len(recorder.requests) == 2
    multipart = recorder.requests[1]
    assert multipart.headers["content-type"].startswith("multipart/form-data")
    assert b'filename="bark.webm"' in multipart.content


@pytest.mark.asyncio
async def test_unsupported_media_type_retries_as_multipart(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers["content-type"] == "application/octet-stream":
            return httpx.Response(415, json={"error": "Content type not supported"})
        return httpx.Response(200, json="meow")

    client, recorder = make_client(handler)

    assert await client.call(WHISPER, AUDIO) == Success("meow")
    assert len(recorder.requests) == 2


@pytest.mark.asyncio
async def test_timeout_is_recoverable_and_not_retried(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    client, recorder = make_client(handler)

    outcome = await client.call(WHISPER, AUDIO, is_first=True)

    assert isinstance(outcome, RecoverableFailure)
    assert outcome.reason is FailureReason.UNKNOWN
    assert len(recorder.requests) == 1


@pytest.mark.asyncio
async def test_loading_on_first_candidate_is_fatal_with_wait_hint(make_client):
    client, _ = make_client(
        lambda request: httpx.Response(
            503,
            json={"error": "Model openai/whisper-large-v3 is currently loading", "estimated_time": 12.3},
        )
    )

    outcome = await client.call(WHISPER, AUDIO, is_first=True)

    assert isinstance(outcome, FatalFailure)
    assert outcome.reason is FailureReason.LOADING
    assert outcome.retry_after == 13


@pytest.mark.asyncio
async def test_loading_without_estimate_uses_default_wait(make_client):
    client, _ = make_client(lambda request: httpx.Response(503, text="Service Unavailable"))

    outcome = await client.call(WHISPER, AUDIO, is_first=True)

    assert isinstance(outcome, FatalFailure)
    assert outcome.retry_after == 20


@pytest.mark.asyncio
async def test_loading_on_later_candidate_is_recoverable(make_client):
    client, _ = make_client(lambda request: httpx.Response(503, json={"error": "loading"}))

    outcome = await client.call(WHISPER, AUDIO, is_first=False)

    assert isinstance(outcome, RecoverableFailure)
    assert outcome.reason is FailureReason.LOADING


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "body", "expected"),
    [
        (410, {"error": "gone"}, FailureReason.GONE),
        (404, {"error": "Not Found"}, FailureReason.NOT_FOUND),
        (400, {"error": {"message": "The model `x` does not exist"}}, FailureReason.NOT_FOUND),
        (500, {"message": "internal boom"}, FailureReason.UNKNOWN),
    ],
)
async def test_recoverable_statuses(make_client, status_code, body, expected):
    client, _ = make_client(lambda request: httpx.Response(status_code, json=body))

    outcome = await client.call(WHISPER, AUDIO, is_first=True)

    assert isinstance(outcome, RecoverableFailure)
    assert outcome.reason is expected


@pytest.mark.asyncio
async def test_unknown_status_detail_keeps_server_message(make_client):
    client, _ = make_client(lambda request: httpx.Response(500, json={"error": "internal boom"}))

    outcome = await client.call(CHAT, PROMPT)

    assert outcome.detail == "status 500: internal boom"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [401, 403])
async def test_rejected_credential_is_fatal_on_any_candidate(make_client, status_code):
    client, _ = make_client(lambda request: httpx.Response(status_code, json={"error": "Invalid token"}))

    outcome = await client.call(CHAT, PROMPT, is_first=False)

    assert isinstance(outcome, FatalFailure)
    assert outcome.reason is FailureReason.UNAUTHORIZED
    assert outcome.detail == "Invalid token"


@pytest.mark.asyncio
async def test_transcription_without_text_is_malformed(make_client):
    client, _ = make_client(lambda request: httpx.Response(200, json={"chunks": []}))

    outcome = await client.call(WHISPER, AUDIO)

    assert outcome == RecoverableFailure(FailureReason.MALFORMED_RESPONSE, "No transcription text in response")


@pytest.mark.asyncio
async def test_transcription_non_json_body_is_malformed(make_client):
    client, _ = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

    outcome = await client.call(WHISPER, AUDIO)

    assert isinstance(outcome, RecoverableFailure)
    assert outcome.reason is FailureReason.MALFORMED_RESPONSE


@pytest.mark.asyncio
async def test_completion_request_shape(make_client):
    client, recorder = make_client(lambda request: httpx.Response(200, json=completion_body(" Feed me now! ")))

    outcome = await client.call(CHAT, PROMPT, is_first=True)

    assert outcome == Success("Feed me now!")
    request = recorder.requests[0]
    assert str(request.url) == "https://router.hf.test/v1/chat/completions"
    body = json.loads(request.content)
    assert body == {
        "model": CHAT.model_id,
        "messages": [
            {"role": "system", "content": "You are a dog."},
            {"role": "user", "content": "Translate: woof"},
        ],
        "max_tokens": 150,
        "temperature": 0.8,
    }


@pytest.mark.asyncio
async def test_completion_without_content_is_empty_success(make_client):
    client, _ = make_client(lambda request: httpx.Response(200, json={"choices": []}))

    assert await client.call(CHAT, PROMPT) == Success(None)


@pytest.mark.asyncio
async def test_completion_transport_error_is_recoverable(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("dns failure", request=request)

    client, recorder = make_client(handler)

    outcome = await client.call(CHAT, PROMPT)

    assert isinstance(outcome, RecoverableFailure)
    assert outcome.reason is FailureReason.UNKNOWN
    assert len(recorder.requests) == 1


@pytest.mark.asyncio
async def test_payload_must_match_task(make_client):
    client, _ = make_client(lambda request: httpx.Response(200, json="woof"))

    with pytest.raises(TypeError):
        await client.call(WHISPER, PROMPT)


def test_extract_transcript_accepts_known_shapes():
    assert extract_transcript("woof") == "woof"
    assert extract_transcript({"text": "meow"}) == "meow"
    assert extract_transcript({"transcription": "moo"}) == "moo"
    assert extract_transcript({"text": "   "}) is None
    assert extract_transcript(["woof"]) is None


def test_extract_completion_reads_first_choice():
    assert extract_completion(completion_body("Hi!")) == "Hi!"
    assert extract_completion(completion_body("")) is None
    assert extract_completion({"choices": [{"message": None}]}) is None
    assert extract_completion({}) is None
