"""Animal translation pipeline package.

Modules are organised by the order in which `/translate` executes:

1. `ingestion`: validate the upload and build the audio sample.
2. `transcription`: speech-to-text with multi-model fallback.
3. `prompts` / `translation`: first-person translation via a completion model.
4. `assembly`: merge results and provenance flags into the output record.
5. `flow`: the orchestrating service and a description of the stages.

The FastAPI controller imports from here so contributors can jump straight
to the relevant stage.
"""

from .assembly import ResultAssembler
from .flow import (
    AnimalTranslationService,
    PipelineStage,
    RunState,
    close_translation_service,
    describe_stages,
    get_translation_service,
)
from .ingestion import normalize_animal_label, read_audio_sample, resolve_content_type
from .prompts import build_translation_prompt
from .transcription import TranscriptionPipeline
from .translation import TranslationPipeline

__all__ = [
    "AnimalTranslationService",
    "PipelineStage",
    "ResultAssembler",
    "RunState",
    "TranscriptionPipeline",
    "TranslationPipeline",
    "build_translation_prompt",
    "close_translation_service",
    "describe_stages",
    "get_translation_service",
    "normalize_animal_label",
    "read_audio_sample",
    "resolve_content_type",
]
