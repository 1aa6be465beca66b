"""Service layer helpers for the Hugging Face integration."""

from .fallback import ModelFallbackSequencer, summarize_errors
from .inference_client import HuggingFaceInferenceClient
from .mock_fallback import MockFallbackProvider

__all__ = [
    "HuggingFaceInferenceClient",
    "MockFallbackProvider",
    "ModelFallbackSequencer",
    "summarize_errors",
]
