import json
from pathlib import Path

import pytest

from toki.toki_vocabulary import (
    DEFAULT_VOCABULARY,
    LATER_WORDS,
    PARTICLES,
    PU_WORDS,
    UCSUR_TO_LATIN,
    Vocabulary,
    VocabularyError,
)


def test_default_word_classes() -> None:
    vocabulary = DEFAULT_VOCABULARY
    assert vocabulary.is_content_word("pona")
    assert not vocabulary.is_content_word("li")
    assert vocabulary.is_preverb("wile")
    assert not vocabulary.is_preverb("moku")
    assert vocabulary.is_preposition("lon")
    assert vocabulary.is_special_subject("mi")
    assert not vocabulary.is_special_subject("ona")


def test_particles_are_not_content_words() -> None:
    assert not any(DEFAULT_VOCABULARY.is_content_word(word) for word in PARTICLES)


def test_transliteration_covers_every_word() -> None:
    assert len(PU_WORDS) == 120
    assert sorted(UCSUR_TO_LATIN.values()) == sorted(PU_WORDS + LATER_WORDS)
    assert UCSUR_TO_LATIN["\U000f1978"] == "namako"


def test_extended_adds_words() -> None:
    extended = DEFAULT_VOCABULARY.extended(content_word=["tonsi"], preverb=["alasa"])
    assert extended.is_content_word("tonsi")
    assert extended.is_preverb("alasa")
    assert extended.is_content_word("pona")


def test_extended_rejects_unknown_class() -> None:
    with pytest.raises(VocabularyError) as e:
        DEFAULT_VOCABULARY.extended(particle=["li"])
    assert e.value.problems == ["'particle' is not a word class"]


def test_from_dict_builds_on_base() -> None:
    vocabulary = Vocabulary.from_dict({"preposition": ["poka"]}, DEFAULT_VOCABULARY)
    assert vocabulary.is_preposition("poka")
    assert vocabulary.is_preposition("lon")


def test_from_dict_without_base_is_empty_otherwise() -> None:
    vocabulary = Vocabulary.from_dict({"content_word": ["jan"]})
    assert vocabulary.is_content_word("jan")
    assert not vocabulary.is_content_word("pona")


def test_from_dict_reports_problems() -> None:
    with pytest.raises(VocabularyError) as e:
        Vocabulary.from_dict({"preverb": "wile", "colour": []})
    assert e.value.problems == [
        "'preverb' must be a list of words",
        "'colour' is not a word class",
    ]


def test_load_from_json(tmp_path: Path) -> None:
    path = tmp_path / "words.json"
    path.write_text(json.dumps({"content_word": ["kijetesantakalu"]}), encoding="utf-8")
    vocabulary = Vocabulary.load_from_json(str(path), DEFAULT_VOCABULARY)
    assert vocabulary.is_content_word("kijetesantakalu")


def test_load_from_json_missing_file(tmp_path: Path) -> None:
    with pytest.raises(VocabularyError, match="Failed to load vocabulary file"):
        Vocabulary.load_from_json(str(tmp_path / "missing.json"))
