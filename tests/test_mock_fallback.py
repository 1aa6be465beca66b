"""Canned transcripts, translations and placeholders."""

from __future__ import annotations

import random

import pytest

from app.services.mock_fallback import MockFallbackProvider


@pytest.mark.parametrize(
    ("animal", "expected"),
    [
        ("Dog", "woof woof bark"),
        ("cat", "meow meow purr"),
        (" ROOSTER ", "cock-a-doodle-doo"),
        ("Axolotl", "animal sound"),
        (None, "animal sound"),
    ],
)
def test_mock_transcript_is_deterministic_per_animal(animal, expected):
    assert MockFallbackProvider.mock_transcript(animal) == expected
    assert MockFallbackProvider.mock_transcript(animal) == expected


def test_mock_translation_draws_from_the_animal_set():
    provider = MockFallbackProvider(random.Random(3))
    options = set(provider.translation_options("Dog"))

    draws = {provider.mock_translation("Dog") for _ in range(50)}

    assert draws <= options
    assert len(options) == 4


def test_unknown_animal_uses_generic_translations():
    provider = MockFallbackProvider(random.Random(3))

    assert provider.mock_translation("Axolotl") in {
        "I'm trying to tell you something important!",
        "I'm expressing my feelings to you!",
    }


def test_seeded_provider_repeats_its_choices():
    first = MockFallbackProvider(random.Random(11))
    second = MockFallbackProvider(random.Random(11))

    assert [first.mock_translation("Cat") for _ in range(10)] == [
        second.mock_translation("Cat") for _ in range(10)
    ]


def test_placeholder_translation():
    assert MockFallbackProvider.placeholder_translation("lion") == "Roar! I'm the king!"
    assert MockFallbackProvider.placeholder_translation("Axolotl") == "Making animal sounds!"


def test_known_animals_cover_every_table():
    animals = MockFallbackProvider.known_animals()

    assert animals[:3] == ["Dog", "Cat", "Bird"]
    assert len(animals) == 10
    for animal in animals:
        assert MockFallbackProvider.mock_transcript(animal) != "animal sound"
        assert MockFallbackProvider.placeholder_translation(animal) != "Making animal sounds!"
