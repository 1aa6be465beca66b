"""Animal sound translation endpoints.

For a stage-by-stage map see `app.pipelines.translation.flow`. The POST
`/translate` endpoint performs:

1. Validation of the uploaded recording and animal label.
2. Transcription with multi-model fallback (mock transcript when all fail).
3. Translation with multi-model fallback (mock translation when all fail).
4. Assembly of the display record, or a caller-level fallback record when
   the run aborted on a fatal error.
"""

import logging

from fastapi import APIRouter, File, Form, UploadFile

from app.config.settings import settings
from app.controllers.dependencies import TranslationServiceDep
from app.domain.errors import FatalPipelineError
from app.pipelines.translation import (
    describe_stages,
    normalize_animal_label,
    read_audio_sample,
)
from app.views import AnimalListResponse, ModelListResponse, TranslationResponse

router = APIRouter(prefix="/translate", tags=["translate"])

logger = logging.getLogger(__name__)

PIPELINE_STAGES = tuple(describe_stages())
"""Ordered pipeline metadata used for quick reference and debugging."""

_ANIMAL_FORM = Form(...)
_AUDIO_FILE_UPLOAD = File(...)


@router.post("", response_model=TranslationResponse, response_model_by_alias=True)
async def translate_animal_sound(
    service: TranslationServiceDep,
    animal: str = _ANIMAL_FORM,
    audio_file: UploadFile = _AUDIO_FILE_UPLOAD,
) -> TranslationResponse:
    """Transcribe an uploaded recording and translate it into human speech."""

    animal_label = normalize_animal_label(animal)
    audio = await read_audio_sample(audio_file, max_bytes=settings.max_upload_bytes)

    try:
        record = await service.process_animal_sound(audio, animal_label)
    except FatalPipelineError as exc:
        logger.error(
            "Translation run aborted animal=%s reason=%s model=%s: %s",
            animal_label,
            exc.reason.value,
            exc.model_id,
            exc.detail,
        )
        # Always hand the UI something to render next to the error message.
        return TranslationResponse.from_record(
            service.fallback_record(animal_label),
            error=exc.user_message,
        )

    return TranslationResponse.from_record(record)


@router.get("/animals", response_model=AnimalListResponse)
async def list_animals(service: TranslationServiceDep) -> AnimalListResponse:
    """Animals with dedicated canned transcripts and translations."""

    return AnimalListResponse(animals=service.mock_provider.known_animals())


@router.get("/models", response_model=ModelListResponse)
async def list_models(service: TranslationServiceDep) -> ModelListResponse:
    """Configured model candidates per task, in the order they are tried."""

    return ModelListResponse(models=service.describe_models())
