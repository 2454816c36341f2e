"""
Grammar-validity rules that prune the parse forest.

Each rule is a pure function taking one fully built node and returning `True`
to keep it or an `OutputError` explaining why the candidate is rejected. The
grammar applies a rule table right after the rule producing that shape, so a
rejected candidate never reaches the enclosing rules.

Rule tables:
    WORD_UNIT_RULES, MODIFIER_RULES, MODIFIERS_RULES, PHRASE_RULES,
    PREPOSITION_RULES, CLAUSE_RULES, FULL_CLAUSE_RULES, SENTENCES_RULES

Functions:
    filter_rules(rules): Combines a table into a single predicate usable with
        `Parser.filter` / `Output.filter`.

Example:
    >>> check = filter_rules(FULL_CLAUSE_RULES)
    >>> check(FullClause(Reduplication("taso", 2), None, clause)).message
    '"taso taso" is unrecognized.'
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from toki.toki_ast import (
    ConjunctionPhrases,
    DefaultModifier,
    DefaultPhrase,
    DefaultWord,
    DisjunctionPhrases,
    FullClause,
    LiClause,
    Modifier,
    MultiplePhrases,
    NanpaModifier,
    Numbers,
    OClause,
    Phrase,
    PhrasesClause,
    PiModifier,
    Preposition,
    PrepositionPhrase,
    PreverbPhrase,
    ProperWordsModifier,
    QuotationModifier,
    QuotationPhrase,
    Reduplication,
    Sentence,
    SinglePhrase,
    VocativeClause,
    WordUnit,
    XAlaX,
)
from toki.toki_constants import PARTICLE_ALA, PARTICLE_SEME
from toki.toki_errors import CoveredError, OutputError, TodoError, UnrecognizedError

Rule = Callable[[Any], "bool | OutputError"]


def describe_word_unit(word_unit: WordUnit) -> str:
    match word_unit:
        case DefaultWord(word):
            return word
        case Reduplication(word, count):
            return " ".join([word] * count)
        case XAlaX(word):
            return f"{word} {PARTICLE_ALA} {word}"
        case Numbers(numbers):
            return " ".join(numbers)


# Word units


def reject_seme_ala_seme(word_unit: WordUnit) -> bool | OutputError:
    if isinstance(word_unit, XAlaX) and word_unit.word == PARTICLE_SEME:
        return UnrecognizedError(f'"{PARTICLE_SEME} {PARTICLE_ALA} {PARTICLE_SEME}"')
    return True


def reject_ala_ala_ala(word_unit: WordUnit) -> bool | OutputError:
    if isinstance(word_unit, XAlaX) and word_unit.word == PARTICLE_ALA:
        return UnrecognizedError(f'"{PARTICLE_ALA} {PARTICLE_ALA} {PARTICLE_ALA}"')
    return True


WORD_UNIT_RULES: tuple[Rule, ...] = (reject_seme_ala_seme, reject_ala_ala_ala)


# Single modifiers


def reject_pi_with_one_word(modifier: Modifier) -> bool | OutputError:
    """"pi" must be followed by at least two words; a number counts as many."""
    if isinstance(modifier, PiModifier):
        phrase = modifier.phrase
        if (
            isinstance(phrase, DefaultPhrase)
            and not phrase.modifiers
            and not isinstance(phrase.head_word, Numbers)
        ):
            return UnrecognizedError("pi followed by one word")
    return True


def reject_pi_with_preposition_or_preverb(modifier: Modifier) -> bool | OutputError:
    if isinstance(modifier, PiModifier):
        if isinstance(modifier.phrase, PrepositionPhrase):
            return UnrecognizedError("preposition inside pi")
        if isinstance(modifier.phrase, PreverbPhrase):
            return UnrecognizedError("preverb inside pi")
    return True


def reject_complex_ordinal(modifier: Modifier) -> bool | OutputError:
    if isinstance(modifier, NanpaModifier) and not isinstance(modifier.phrase, DefaultPhrase):
        return UnrecognizedError("complex phrase as ordinal")
    return True


MODIFIER_RULES: tuple[Rule, ...] = (
    reject_pi_with_one_word,
    reject_pi_with_preposition_or_preverb,
    reject_complex_ordinal,
)


# Modifier lists


def _count(modifiers: Sequence[Modifier], kind: type) -> int:
    return sum(1 for modifier in modifiers if isinstance(modifier, kind))


def reject_multiple_pi(modifiers: Sequence[Modifier]) -> bool | OutputError:
    if _count(modifiers, PiModifier) > 1:
        return TodoError("multiple pi")
    return True


def reject_multiple_nanpa(modifiers: Sequence[Modifier]) -> bool | OutputError:
    if _count(modifiers, NanpaModifier) > 1:
        return UnrecognizedError("multiple nanpa")
    return True


def reject_multiple_proper_words(modifiers: Sequence[Modifier]) -> bool | OutputError:
    if _count(modifiers, ProperWordsModifier) > 1:
        return UnrecognizedError("multiple proper words")
    return True


def reject_multiple_quotations(modifiers: Sequence[Modifier]) -> bool | OutputError:
    if _count(modifiers, QuotationModifier) > 1:
        return UnrecognizedError("multiple quotations")
    return True


MODIFIERS_RULES: tuple[Rule, ...] = (
    reject_multiple_pi,
    reject_multiple_nanpa,
    reject_multiple_proper_words,
    reject_multiple_quotations,
)


# Phrases


def _only_ala(modifiers: Sequence[Modifier]) -> bool:
    return all(modifier == DefaultModifier(DefaultWord(PARTICLE_ALA)) for modifier in modifiers)


def reject_modified_preverb(phrase: Phrase) -> bool | OutputError:
    if isinstance(phrase, PreverbPhrase) and not _only_ala(phrase.modifiers):
        return UnrecognizedError(f'"{describe_word_unit(phrase.preverb)}" with modifiers')
    return True


def reject_nested_preverb(phrase: Phrase) -> bool | OutputError:
    if isinstance(phrase, PreverbPhrase) and isinstance(phrase.phrase, PreverbPhrase):
        return TodoError("nested preverb")
    return True


def reject_quoted_preverb_phrase(phrase: Phrase) -> bool | OutputError:
    if isinstance(phrase, PreverbPhrase) and isinstance(phrase.phrase, QuotationPhrase):
        return UnrecognizedError("quotation after preverb")
    return True


PHRASE_RULES: tuple[Rule, ...] = (
    reject_modified_preverb,
    reject_nested_preverb,
    reject_quoted_preverb_phrase,
)


# Prepositions


def reject_conjunction_complement(preposition: Preposition) -> bool | OutputError:
    if isinstance(preposition.phrases, ConjunctionPhrases):
        return UnrecognizedError("conjunction as preposition complement")
    return True


def reject_modified_preposition(preposition: Preposition) -> bool | OutputError:
    if not _only_ala(preposition.modifiers):
        word = describe_word_unit(preposition.preposition)
        return UnrecognizedError(f'"{word}" with modifiers')
    return True


def reject_nested_preposition(preposition: Preposition) -> bool | OutputError:
    phrases = preposition.phrases
    if isinstance(phrases, SinglePhrase) and isinstance(phrases.phrase, PrepositionPhrase):
        return UnrecognizedError("preposition inside preposition")
    return True


PREPOSITION_RULES: tuple[Rule, ...] = (
    reject_conjunction_complement,
    reject_modified_preposition,
    reject_nested_preposition,
)


# Clauses


def _phrases_of(phrases: MultiplePhrases) -> list[Phrase]:
    match phrases:
        case SinglePhrase(phrase):
            return [phrase]
        case ConjunctionPhrases(groups) | DisjunctionPhrases(groups):
            return [phrase for group in groups for phrase in _phrases_of(group)]


def _subjects_of(clause: Any) -> MultiplePhrases | None:
    match clause:
        case LiClause(subjects, _) | OClause(subjects, _):
            return subjects
        case VocativeClause(phrases):
            return phrases
    return None


def reject_preposition_subject(clause: Any) -> bool | OutputError:
    subjects = _subjects_of(clause)
    if subjects is not None and any(
        isinstance(phrase, PrepositionPhrase) for phrase in _phrases_of(subjects)
    ):
        return UnrecognizedError("preposition as subject")
    return True


def reject_preverb_subject(clause: Any) -> bool | OutputError:
    subjects = _subjects_of(clause)
    if subjects is not None and any(
        isinstance(phrase, PreverbPhrase) for phrase in _phrases_of(subjects)
    ):
        return UnrecognizedError("preverb as subject")
    return True


def reject_single_preposition_phrase(clause: Any) -> bool | OutputError:
    """A bare prepositional phrase is already a prepositions clause."""
    if (
        isinstance(clause, PhrasesClause)
        and isinstance(clause.phrases, SinglePhrase)
        and isinstance(clause.phrases.phrase, PrepositionPhrase)
    ):
        return CoveredError("A single preposition is a prepositions clause.")
    return True


CLAUSE_RULES: tuple[Rule, ...] = (
    reject_single_preposition_phrase,
    reject_preposition_subject,
    reject_preverb_subject,
)


# Full clauses


def reject_taso_ala_taso(full_clause: FullClause) -> bool | OutputError:
    if full_clause.taso is not None and not isinstance(full_clause.taso, DefaultWord):
        return UnrecognizedError(f'"{describe_word_unit(full_clause.taso)}"')
    return True


def reject_complex_anu_seme(full_clause: FullClause) -> bool | OutputError:
    if full_clause.anu_seme is not None and not isinstance(full_clause.anu_seme, DefaultWord):
        return UnrecognizedError(f'"anu {describe_word_unit(full_clause.anu_seme)}"')
    return True


FULL_CLAUSE_RULES: tuple[Rule, ...] = (reject_taso_ala_taso, reject_complex_anu_seme)


# Sentence lists


def reject_trailing_comma(sentences: Sequence[Sentence]) -> bool | OutputError:
    if sentences and sentences[-1].punctuation == ",":
        return UnrecognizedError("comma at the end of the sentence")
    return True


SENTENCES_RULES: tuple[Rule, ...] = (reject_trailing_comma,)


RULES: dict[str, tuple[Rule, ...]] = {
    "word_unit": WORD_UNIT_RULES,
    "modifier": MODIFIER_RULES,
    "modifiers": MODIFIERS_RULES,
    "phrase": PHRASE_RULES,
    "preposition": PREPOSITION_RULES,
    "clause": CLAUSE_RULES,
    "full_clause": FULL_CLAUSE_RULES,
    "sentences": SENTENCES_RULES,
}


def filter_rules(rules: Sequence[Rule]) -> Callable[[Any], bool | OutputError]:
    """Combines rules into one predicate reporting the first rejection."""

    def check(value: Any) -> bool | OutputError:
        for rule in rules:
            verdict = rule(value)
            if verdict is not True:
                return verdict
        return True

    return check
