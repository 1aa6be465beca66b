"""End-to-end runs of the translation service against a fake inference API."""

from __future__ import annotations

import logging
import random

import httpx
import pytest

from app.domain.errors import FatalPipelineError
from app.domain.models import AudioSample, FailureReason
from app.pipelines.translation import AnimalTranslationService, describe_stages
from app.pipelines.translation.translation import CONFIDENCE_RANGE
from app.services.mock_fallback import MockFallbackProvider
from conftest import completion_body, requested_model

TRANSCRIPTION_MODELS = ["openai/whisper-large-v3", "facebook/wav2vec2-base-960h"]
COMPLETION_MODELS = ["meta-llama/Llama-3.2-3B-Instruct", "HuggingFaceH4/zephyr-7b-beta"]
AUDIO = AudioSample(data=b"fake-webm", content_type="audio/webm", filename="recording.webm")


def build_service(make_client, responses, *, credential="hf_test_token"):
    def handler(request: httpx.Request) -> httpx.Response:
        return responses[requested_model(request)]

    client, recorder = make_client(handler, credential=credential)
    service = AnimalTranslationService(
        client,
        transcription_models=TRANSCRIPTION_MODELS,
        completion_models=COMPLETION_MODELS,
        rng=random.Random(5),
    )
    return service, recorder


@pytest.mark.asyncio
async def test_deprecated_transcription_models_still_translate(make_client):
    gone = httpx.Response(410, json={"error": "gone"})
    service, recorder = build_service(
        make_client,
        {
            TRANSCRIPTION_MODELS[0]: gone,
            TRANSCRIPTION_MODELS[1]: gone,
            COMPLETION_MODELS[0]: httpx.Response(200, json=completion_body("Feed me now!")),
        },
    )

    record = await service.process_animal_sound(AUDIO, "Cat")

    assert record.text == "Feed me now!"
    assert record.transcribed_text == "meow meow purr"
    assert record.is_mock_transcription is True
    assert record.is_mock_translation is False
    assert record.is_fallback is False
    assert CONFIDENCE_RANGE[0] <= record.confidence <= CONFIDENCE_RANGE[1]
    assert recorder.models_called == TRANSCRIPTION_MODELS + COMPLETION_MODELS[:1]


@pytest.mark.asyncio
async def test_missing_credential_aborts_before_any_request(make_client):
    service, recorder = build_service(make_client, {}, credential=None)

    with pytest.raises(FatalPipelineError) as excinfo:
        await service.process_animal_sound(AUDIO, "Cat")

    assert excinfo.value.reason is FailureReason.UNAUTHORIZED
    assert recorder.requests == []

    fallback = service.fallback_record("Cat")
    assert fallback.is_fallback is True
    assert fallback.confidence == 0.5
    assert fallback.text == '[Fallback] The Cat said: "Meow meow! Feed me now!"'


@pytest.mark.asyncio
async def test_translation_exhaustion_substitutes_mock_translation(make_client):
    service, _ = build_service(
        make_client,
        {
            TRANSCRIPTION_MODELS[0]: httpx.Response(200, json={"text": "woof woof"}),
            COMPLETION_MODELS[0]: httpx.Response(404, json={"error": "Not Found"}),
            COMPLETION_MODELS[1]: httpx.Response(410, json={"error": "gone"}),
        },
    )

    record = await service.process_animal_sound(AUDIO, "Dog")

    assert record.transcribed_text == "woof woof"
    assert record.is_mock_transcription is False
    assert record.is_mock_translation is True
    assert record.confidence == 0.6
    assert record.text in MockFallbackProvider.translation_options("Dog")


@pytest.mark.asyncio
async def test_rejected_credential_during_translation_uses_mock(make_client, caplog):
    service, recorder = build_service(
        make_client,
        {
            TRANSCRIPTION_MODELS[0]: httpx.Response(200, json="tweet tweet"),
            COMPLETION_MODELS[0]: httpx.Response(403, json={"error": "Forbidden"}),
        },
    )

    with caplog.at_level(logging.INFO, logger="app.services.translation_pipeline"):
        record = await service.process_animal_sound(AUDIO, "Bird")

    assert record.is_mock_translation is True
    assert record.confidence == 0.6
    assert recorder.models_called == [TRANSCRIPTION_MODELS[0], COMPLETION_MODELS[0]]
    credential_errors = [
        entry.getMessage()
        for entry in caplog.records
        if entry.levelno == logging.ERROR and "HF_TOKEN" in entry.getMessage()
    ]
    assert len(credential_errors) == 1


@pytest.mark.asyncio
async def test_loading_transcription_model_aborts_the_run(make_client):
    service, recorder = build_service(
        make_client,
        {TRANSCRIPTION_MODELS[0]: httpx.Response(503, json={"error": "loading", "estimated_time": 8.5})},
    )

    with pytest.raises(FatalPipelineError) as excinfo:
        await service.process_animal_sound(AUDIO, "Dog")

    assert excinfo.value.retry_after == 9
    assert recorder.models_called == [TRANSCRIPTION_MODELS[0]]


def test_describe_models_lists_candidates_in_order(make_client):
    service, _ = build_service(make_client, {})

    assert service.describe_models() == {
        "transcription": TRANSCRIPTION_MODELS,
        "completion": COMPLETION_MODELS,
    }


def test_stages_are_ordered():
    assert [stage.name for stage in describe_stages()] == [
        "Ingestion",
        "Transcription",
        "Translation",
        "Assembly",
    ]
