"""Canned transcripts and translations used when remote inference is down."""

from __future__ import annotations

import random
from typing import Mapping, Sequence

_MOCK_TRANSCRIPTS: Mapping[str, str] = {
    "Dog": "woof woof bark",
    "Cat": "meow meow purr",
    "Bird": "tweet chirp tweet",
    "Cow": "moo moo",
    "Pig": "oink oink snort",
    "Rooster": "cock-a-doodle-doo",
    "Duck": "quack quack",
    "Sheep": "baa baa",
    "Horse": "neigh whinny",
    "Lion": "roar growl",
}
_GENERIC_TRANSCRIPT = "animal sound"

_MOCK_TRANSLATIONS: Mapping[str, Sequence[str]] = {
    "Dog": (
        "I'm so excited! Can we play now? I've been waiting!",
        "Hey! I'm here and I want your attention!",
        "I love you! Give me belly rubs please!",
        "Something's happening! I need to protect you!",
    ),
    "Cat": (
        "I'm happy and content. Can I have some treats and scratches behind my ears?",
        "I'm hungry! Where's my food?",
        "I want attention right now. Pet me please!",
        "I'm feeling playful! Let's have some fun together!",
    ),
    "Bird": (
        "Good morning! I'm singing my beautiful song for you!",
        "Hey everyone! I'm here and I'm happy!",
        "Listen to my lovely voice! I'm calling to my friends!",
    ),
    "Cow": (
        "Hello! I'm calling out to my friends in the field!",
        "I'm content and happy here in the pasture!",
    ),
    "Pig": (
        "I'm so excited! Is it time for food?",
        "I'm happy and want to play!",
    ),
    "Rooster": (
        "Wake up! It's morning time!",
        "I'm announcing the new day!",
    ),
    "Duck": (
        "Hello! I'm here and I'm happy!",
        "Let's go swimming together!",
    ),
    "Sheep": (
        "I'm calling to my flock!",
        "I'm content and peaceful!",
    ),
    "Horse": (
        "I'm excited and ready to run!",
        "Hello friend! Let's go on an adventure!",
    ),
    "Lion": (
        "I'm the king! Hear my powerful voice!",
        "I'm calling to my pride!",
    ),
}
_GENERIC_TRANSLATIONS: Sequence[str] = (
    "I'm trying to tell you something important!",
    "I'm expressing my feelings to you!",
)

_PLACEHOLDERS: Mapping[str, str] = {
    "Dog": "Woof woof! I want to play!",
    "Cat": "Meow meow! Feed me now!",
    "Bird": "Tweet tweet! Beautiful day!",
    "Cow": "Moo moo! Time for grass!",
    "Pig": "Oink oink! I love mud!",
    "Rooster": "Cock-a-doodle-doo! Morning time!",
    "Duck": "Quack quack! Water is nice!",
    "Sheep": "Baa baa! I need a haircut!",
    "Horse": "Neigh neigh! Let's run!",
    "Lion": "Roar! I'm the king!",
}
_GENERIC_PLACEHOLDER = "Making animal sounds!"


def _canonical(animal_label: str | None) -> str:
    """Match labels case-insensitively against the canned table keys."""

    label = (animal_label or "").strip()
    for known in _MOCK_TRANSCRIPTS:
        if known.lower() == label.lower():
            return known
    return label


class MockFallbackProvider:
    """Deterministic-per-animal transcripts and randomly chosen translations.

    ``rng`` is the only source of randomness so tests can pin the output.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    @staticmethod
    def known_animals() -> list[str]:
        return list(_MOCK_TRANSCRIPTS)

    @staticmethod
    def mock_transcript(animal_label: str | None) -> str:
        return _MOCK_TRANSCRIPTS.get(_canonical(animal_label), _GENERIC_TRANSCRIPT)

    @staticmethod
    def translation_options(animal_label: str | None) -> Sequence[str]:
        return _MOCK_TRANSLATIONS.get(_canonical(animal_label), _GENERIC_TRANSLATIONS)

    def mock_translation(self, animal_label: str | None) -> str:
        return self._rng.choice(self.translation_options(animal_label))

    @staticmethod
    def placeholder_translation(animal_label: str | None) -> str:
        """Short sentence shown when the whole run failed before translating."""

        return _PLACEHOLDERS.get(_canonical(animal_label), _GENERIC_PLACEHOLDER)


__all__ = ["MockFallbackProvider"]
