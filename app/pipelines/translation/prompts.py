"""Prompt construction stage for the translation pipeline.

The same prompt is sent to every completion candidate so that results stay
comparable whichever model ends up answering.
"""

from __future__ import annotations

from app.domain.models import ChatPrompt

SYSTEM_PROMPT = (
    "You translate animal sounds directly into human speech. "
    "Speak as the animal in first person. "
    "Do not add explanations, greetings, or meta-commentary. "
    "Just translate the sound into what the animal is saying."
)


def build_translation_prompt(transcript: str, animal_label: str) -> ChatPrompt:
    """Assemble the system/user messages for one translation request."""

    user_prompt = (
        f'Translate this {animal_label} sound directly into human speech: "{transcript.strip()}"\n\n'
        f"Speak AS the {animal_label} - write what they are saying in first person, "
        "directly and naturally. Do not explain or interpret. "
        "Just translate their sound into what they would say in human words. "
        "Be creative, fun, and empathetic. Keep it to 1-2 sentences."
    )
    return ChatPrompt(system=SYSTEM_PROMPT, user=user_prompt)


def generic_translation(animal_label: str) -> str:
    """Sentence used when a completion model answers without any content."""

    return (
        f"The {animal_label} seems to be communicating something, "
        "but I couldn't interpret it clearly."
    )


__all__ = ["SYSTEM_PROMPT", "build_translation_prompt", "generic_translation"]
