"""Pydantic schemas used as views in the MVC architecture."""

from .common import ErrorResponse
from .translation import AnimalListResponse, ModelListResponse, TranslationResponse

__all__ = [
    "AnimalListResponse",
    "ErrorResponse",
    "ModelListResponse",
    "TranslationResponse",
]
