"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from app.pipelines.translation import AnimalTranslationService, get_translation_service

TranslationServiceDep = Annotated[AnimalTranslationService, Depends(get_translation_service)]


__all__ = ["TranslationServiceDep", "get_translation_service"]
