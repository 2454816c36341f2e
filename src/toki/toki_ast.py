"""
Abstract syntax tree node types for parsed toki pona sentences.

Every node is a frozen dataclass holding tuples, so a parse forest can share
subtrees freely. Each shape is a closed set of variants joined by a type
alias and consumed with `match` statements:

    WordUnit            DefaultWord | Reduplication | XAlaX | Numbers
    Modifier            DefaultModifier | ProperWordsModifier | PiModifier
                        | NanpaModifier | QuotationModifier
    Phrase              DefaultPhrase | PreverbPhrase | PrepositionPhrase
                        | QuotationPhrase
    MultiplePhrases     SinglePhrase | ConjunctionPhrases | DisjunctionPhrases
    MultiplePredicates  SinglePredicate | AssociatedPredicates
                        | ConjunctionPredicates | DisjunctionPredicates
    Clause              PhrasesClause | VocativeClause | LiClause | OClause
                        | PrepositionsClause | QuotationClause

plus the single-variant `Preposition`, `FullClause`, `Sentence` and
`Quotation`.

Usage:
    Produced by `toki.toki_parser.parse`, consumed by the filter rules, the
    renderers and the test suite. `to_dict` serializes any node to plain
    dictionaries tagged with a "kind" key, suitable for JSON output.

Example:
    >>> to_dict(DefaultPhrase(DefaultWord("jan"), ()))
    {'kind': 'default_phrase', 'head_word': {'kind': 'default_word', 'word': 'jan'}, 'modifiers': []}
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields, is_dataclass
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class DefaultWord:
    word: str


@dataclass(frozen=True, slots=True)
class Reduplication:
    """A word repeated `count` (≥ 2) times, e.g. "suli suli"."""

    word: str
    count: int


@dataclass(frozen=True, slots=True)
class XAlaX:
    """A polar question form, e.g. "pona ala pona"."""

    word: str


@dataclass(frozen=True, slots=True)
class Numbers:
    """Number words in the order they were written, at least two."""

    numbers: tuple[str, ...]


WordUnit = Union[DefaultWord, Reduplication, XAlaX, Numbers]


@dataclass(frozen=True, slots=True)
class DefaultModifier:
    word: WordUnit


@dataclass(frozen=True, slots=True)
class ProperWordsModifier:
    words: str


@dataclass(frozen=True, slots=True)
class PiModifier:
    phrase: Phrase


@dataclass(frozen=True, slots=True)
class NanpaModifier:
    """Ordinal modifier: "nanpa" followed by a phrase."""

    nanpa: WordUnit
    phrase: Phrase


@dataclass(frozen=True, slots=True)
class QuotationModifier:
    quotation: Quotation


Modifier = Union[
    DefaultModifier, ProperWordsModifier, PiModifier, NanpaModifier, QuotationModifier
]


@dataclass(frozen=True, slots=True)
class DefaultPhrase:
    head_word: WordUnit
    modifiers: tuple[Modifier, ...]


@dataclass(frozen=True, slots=True)
class PreverbPhrase:
    preverb: WordUnit
    modifiers: tuple[Modifier, ...]
    phrase: Phrase


@dataclass(frozen=True, slots=True)
class PrepositionPhrase:
    preposition: Preposition


@dataclass(frozen=True, slots=True)
class QuotationPhrase:
    quotation: Quotation


Phrase = Union[DefaultPhrase, PreverbPhrase, PrepositionPhrase, QuotationPhrase]


@dataclass(frozen=True, slots=True)
class SinglePhrase:
    phrase: Phrase


@dataclass(frozen=True, slots=True)
class ConjunctionPhrases:
    """Groups joined by "en", "li", "o" or "e"; always two or more."""

    phrases: tuple[MultiplePhrases, ...]


@dataclass(frozen=True, slots=True)
class DisjunctionPhrases:
    """Groups joined by "anu"; always two or more."""

    phrases: tuple[MultiplePhrases, ...]


MultiplePhrases = Union[SinglePhrase, ConjunctionPhrases, DisjunctionPhrases]


@dataclass(frozen=True, slots=True)
class Preposition:
    """A prepositional phrase.

    `phrases` is a `SinglePhrase` or a `DisjunctionPhrases`, never a conjunction.
    """

    preposition: WordUnit
    modifiers: tuple[Modifier, ...]
    phrases: MultiplePhrases


@dataclass(frozen=True, slots=True)
class SinglePredicate:
    predicate: Phrase


@dataclass(frozen=True, slots=True)
class AssociatedPredicates:
    """Predicates sharing "e" objects and/or trailing prepositions."""

    predicates: MultiplePhrases
    objects: MultiplePhrases | None
    prepositions: tuple[Preposition, ...]


@dataclass(frozen=True, slots=True)
class ConjunctionPredicates:
    predicates: tuple[MultiplePredicates, ...]


@dataclass(frozen=True, slots=True)
class DisjunctionPredicates:
    predicates: tuple[MultiplePredicates, ...]


MultiplePredicates = Union[
    SinglePredicate, AssociatedPredicates, ConjunctionPredicates, DisjunctionPredicates
]


@dataclass(frozen=True, slots=True)
class PhrasesClause:
    phrases: MultiplePhrases


@dataclass(frozen=True, slots=True)
class VocativeClause:
    phrases: MultiplePhrases


@dataclass(frozen=True, slots=True)
class LiClause:
    subjects: MultiplePhrases
    predicates: MultiplePredicates


@dataclass(frozen=True, slots=True)
class OClause:
    subjects: MultiplePhrases | None
    predicates: MultiplePredicates


@dataclass(frozen=True, slots=True)
class PrepositionsClause:
    prepositions: tuple[Preposition, ...]


@dataclass(frozen=True, slots=True)
class QuotationClause:
    quotation: Quotation


Clause = Union[
    PhrasesClause, VocativeClause, LiClause, OClause, PrepositionsClause, QuotationClause
]


@dataclass(frozen=True, slots=True)
class FullClause:
    """A clause with its optional "taso" opener and "anu seme" tag."""

    taso: WordUnit | None
    anu_seme: WordUnit | None
    clause: Clause


@dataclass(frozen=True, slots=True)
class Sentence:
    """Clauses joined by "la". An empty `punctuation` means end of text."""

    la_clauses: tuple[FullClause, ...]
    punctuation: str


@dataclass(frozen=True, slots=True)
class Quotation:
    sentences: tuple[Sentence, ...]
    left_mark: str
    right_mark: str


ASTDict = dict[str, Any]


def kind_of(node: Any) -> str:
    """Snake case tag of a node type, e.g. `LiClause` → "li_clause"."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", type(node).__name__).lower()


def to_dict(node: Any) -> Any:
    """Serializes a node (or a tuple of nodes) into plain dicts and lists."""
    if isinstance(node, tuple):
        return [to_dict(item) for item in node]
    if is_dataclass(node):
        result: ASTDict = {"kind": kind_of(node)}
        for field in fields(node):
            result[field.name] = to_dict(getattr(node, field.name))
        return result
    return node
