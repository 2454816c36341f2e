"""
Word-class tables and the sitelen pona transliteration table.

The parser only talks to these through small interfaces: `Vocabulary` answers
membership questions for the four word classes, and the transliteration
table maps a UCSUR glyph to its latin word (`UCSUR_TO_LATIN.get(glyph)`).

Classes:
    Vocabulary: The four word classes consulted by the grammar.
    VocabularyError: Raised when a vocabulary file cannot be used.

Exports:
    - DEFAULT_VOCABULARY: The pu word list plus common later words.
    - UCSUR_TO_LATIN: UCSUR glyph → latin word.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

# Words in UCSUR order, starting at U+F1900.
PU_WORDS: tuple[str, ...] = (
    "a", "akesi", "ala", "alasa", "ale", "anpa", "ante", "anu", "awen", "e",
    "en", "esun", "ijo", "ike", "ilo", "insa", "jaki", "jan", "jelo", "jo",
    "kala", "kalama", "kama", "kasi", "ken", "kepeken", "kili", "kiwen", "ko", "kon",
    "kule", "kulupu", "kute", "la", "lape", "laso", "lawa", "len", "lete", "li",
    "lili", "linja", "lipu", "loje", "lon", "luka", "lukin", "lupa", "ma", "mama",
    "mani", "meli", "mi", "mije", "moku", "moli", "monsi", "mu", "mun", "musi",
    "mute", "nanpa", "nasa", "nasin", "nena", "ni", "nimi", "noka", "o", "olin",
    "ona", "open", "pakala", "pali", "palisa", "pan", "pana", "pi", "pilin", "pimeja",
    "pini", "pipi", "poka", "poki", "pona", "pu", "sama", "seli", "selo", "seme",
    "sewi", "sijelo", "sike", "sin", "sina", "sinpin", "sitelen", "sona", "soweli", "suli",
    "suno", "supa", "suwi", "tan", "taso", "tawa", "telo", "tenpo", "toki", "tomo",
    "tu", "unpa", "uta", "utala", "walo", "wan", "waso", "wawa", "weka", "wile",
)  # fmt: skip

# Words in UCSUR order, starting at U+F1978.
LATER_WORDS: tuple[str, ...] = (
    "namako", "kin", "oko", "kipisi", "leko", "monsuta", "tonsi", "jasima",
    "kijetesantakalu", "soko", "meso", "epiku", "kokosila", "lanpan", "n",
    "misikeke", "ku",
)  # fmt: skip

UCSUR_TO_LATIN: dict[str, str] = {
    **{chr(0xF1900 + index): word for index, word in enumerate(PU_WORDS)},
    **{chr(0xF1978 + index): word for index, word in enumerate(LATER_WORDS)},
}

# Grammatical particles never act as content words.
PARTICLES = frozenset({"anu", "e", "en", "la", "li", "o", "pi"})


class VocabularyError(Exception):
    """Raised when a vocabulary file is malformed.

    Attributes:
        problems (list[str]): Each problem found in the file.
    """

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = problems or []


@dataclass(frozen=True)
class Vocabulary:
    """The word classes consulted by the grammar.

    Attributes:
        content_word (frozenset[str]): Words that may head or modify a phrase.
        preverb (frozenset[str]): Words that may introduce a verb phrase.
        preposition (frozenset[str]): Words that may introduce a prepositional phrase.
        special_subject (frozenset[str]): Subjects that drop "li" ("mi", "sina").
    """

    content_word: frozenset[str] = field(default_factory=frozenset)
    preverb: frozenset[str] = field(default_factory=frozenset)
    preposition: frozenset[str] = field(default_factory=frozenset)
    special_subject: frozenset[str] = field(default_factory=frozenset)

    def is_content_word(self, word: str) -> bool:
        return word in self.content_word

    def is_preverb(self, word: str) -> bool:
        return word in self.preverb

    def is_preposition(self, word: str) -> bool:
        return word in self.preposition

    def is_special_subject(self, word: str) -> bool:
        return word in self.special_subject

    def extended(self, **extra: Iterable[str]) -> Vocabulary:
        """Returns a copy with the given words added to each named class.

        Raises:
            VocabularyError: If a class name is unknown.
        """
        unknown = sorted(set(extra) - set(_CLASSES))
        if unknown:
            raise VocabularyError(
                "Unknown word class", [f"'{name}' is not a word class" for name in unknown]
            )
        return Vocabulary(
            **{
                name: getattr(self, name) | frozenset(extra.get(name, ()))
                for name in _CLASSES
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any], base: Vocabulary | None = None) -> Vocabulary:
        """Builds a vocabulary from `{class name: [words]}`, extending `base`.

        Raises:
            VocabularyError: If the data is not a mapping of word lists.
        """
        if not isinstance(data, dict):
            raise VocabularyError("Vocabulary must be a JSON object")
        problems: list[str] = []
        words: dict[str, list[str]] = {}
        for name, entries in data.items():
            if name not in _CLASSES:
                problems.append(f"'{name}' is not a word class")
            elif not isinstance(entries, list) or not all(
                isinstance(entry, str) for entry in entries
            ):
                problems.append(f"'{name}' must be a list of words")
            else:
                words[name] = entries
        if problems:
            raise VocabularyError("Invalid vocabulary", problems)
        return (base or cls()).extended(**words)

    @classmethod
    def load_from_json(cls, path: str, base: Vocabulary | None = None) -> Vocabulary:
        """Loads extra words from a JSON file.

        Example JSON structure:
            {
                "content_word": ["kin", "tonsi"],
                "preverb": ["alasa"]
            }

        Raises:
            VocabularyError: If the file cannot be read or is invalid.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise VocabularyError(f"Failed to load vocabulary file: {e}") from e
        return cls.from_dict(data, base)


_CLASSES = ("content_word", "preverb", "preposition", "special_subject")

DEFAULT_VOCABULARY = Vocabulary(
    content_word=frozenset(PU_WORDS + LATER_WORDS) - PARTICLES,
    preverb=frozenset(
        {"alasa", "awen", "kama", "ken", "lukin", "open", "pini", "sona", "wile"}
    ),
    preposition=frozenset({"kepeken", "lon", "sama", "tan", "tawa"}),
    special_subject=frozenset({"mi", "sina"}),
)
