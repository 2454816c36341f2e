"""
Lexical analyzer for toki pona text.

Turns raw text (latin orthography or UCSUR sitelen pona glyphs) into an
ordered sequence of token trees. A quotation becomes a single token tree
holding the token trees between its marks.

Classes:
    WordToken, ProperWordsToken, PunctuationToken, CommaToken,
    MultipleAToken, XAlaXToken, QuotationToken: The token tree variants.
    Lexer: Builds the lexing rules for one configuration.

Features:
    - Punctuation, commas and the two UCSUR punctuation glyphs
    - Proper words from capitalised runs or from sitelen pona cartouches
    - "a a a" emphasis runs and "x ala x" tag questions as single tokens
    - Nested quotations with bracket-family checks

Example:
    >>> [tree for tree in lex("mi moku.").successes[0]]
    [WordToken(word='mi'), WordToken(word='moku'), PunctuationToken(punctuation='.')]

Exports:
    - TokenTree
    - Lexer
    - lex
    - quotation_marks_match
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Union

from toki.toki_combinators import (
    Parser,
    ParseState,
    all_,
    all_at_least_once,
    choice_only_one,
    error,
    lazy,
    look_ahead,
    rule,
    sequence,
)
from toki.toki_config import DEFAULT_CONFIG, ParseConfig, recursion_limit
from toki.toki_constants import (
    CLOSING_QUOTATION_MARKS,
    COMBINING_CARTOUCHE_EXTENSION,
    COMMA,
    END_OF_CARTOUCHE,
    OPENING_QUOTATION_MARKS,
    PARTICLE_A,
    PARTICLE_ALA,
    PUNCTUATION,
    QUOTATION_FAMILIES,
    START_OF_CARTOUCHE,
    UCSUR_COLON,
    UCSUR_MIDDLE_DOT,
    VOWELS,
)
from toki.toki_errors import (
    CoveredError,
    DepthError,
    OutputError,
    RecursionDepthError,
    UnexpectedError,
    UnrecognizedError,
)
from toki.toki_output import Output
from toki.toki_vocabulary import UCSUR_TO_LATIN

logger = logging.getLogger(__name__)

MORAE = re.compile(r"[aeiou]|[jklmnpstw][aeiou]|n")


@dataclass(frozen=True, slots=True)
class WordToken:
    word: str


@dataclass(frozen=True, slots=True)
class ProperWordsToken:
    words: str


@dataclass(frozen=True, slots=True)
class PunctuationToken:
    punctuation: str


@dataclass(frozen=True, slots=True)
class CommaToken:
    pass


@dataclass(frozen=True, slots=True)
class MultipleAToken:
    """The emphasis particle "a" repeated `count` (≥ 2) times."""

    count: int


@dataclass(frozen=True, slots=True)
class XAlaXToken:
    """A tag-question pair such as "pona ala pona"."""

    word: str


@dataclass(frozen=True, slots=True)
class QuotationToken:
    token_trees: tuple[TokenTree, ...]
    left_mark: str
    right_mark: str


TokenTree = Union[
    WordToken,
    ProperWordsToken,
    PunctuationToken,
    CommaToken,
    MultipleAToken,
    XAlaXToken,
    QuotationToken,
]


def quotation_marks_match(left_mark: str, right_mark: str) -> bool:
    """Returns True when `right_mark` closes a quotation opened by `left_mark`."""
    return right_mark in QUOTATION_FAMILIES.get(left_mark, frozenset())


def describe_token(token: TokenTree) -> str:
    """Short human readable description of a token tree, used in error messages."""
    match token:
        case WordToken(word):
            return f'"{word}"'
        case ProperWordsToken(words):
            return f'proper word "{words}"'
        case PunctuationToken(punctuation):
            return f'punctuation mark "{punctuation}"'
        case CommaToken():
            return "comma"
        case MultipleAToken(count):
            return f'"{" ".join([PARTICLE_A] * count)}"'
        case XAlaXToken(word):
            return f'"{word} {PARTICLE_ALA} {word}"'
        case QuotationToken():
            return "quotation"


def match(pattern: str, description: str) -> Parser[str, re.Match[str]]:
    """Parser matching `pattern` at the start of the input."""
    regex = re.compile(pattern)

    def parse_match(src: str) -> Output[ParseState[str, re.Match[str]]]:
        found = regex.match(src)
        if found is not None:
            return Output.from_successes([ParseState(found, src[found.end() :])])
        if src == "":
            return Output.from_failure(UnexpectedError("end of sentence", description))
        token = re.match(r"\S*", src).group()
        return Output.from_failure(UnexpectedError(f'"{token}"', description))

    return Parser(parse_match)


def spaces() -> Parser[str, str]:
    return match(r"\s*", "space").map(lambda found: found.group())


def eol() -> Parser[str, None]:
    """Parses the end of the text."""

    def parse_eol(src: str) -> Output[ParseState[str, None]]:
        if src == "":
            return Output.from_successes([ParseState(None, "")])
        return Output.from_failure(UnexpectedError(f'"{src}"', "end of sentence"))

    return Parser(parse_eol)


def ucsur() -> Parser[str, str]:
    """Parses a single UCSUR character and the spaces after it."""

    def parse_character(src: str) -> Output[ParseState[str, str]]:
        if src == "":
            return Output.from_failure(UnexpectedError("end of sentence", "UCSUR character"))
        return Output.from_successes([ParseState(src[0], src[1:])])

    return Parser(parse_character).skip(spaces())


def specific_ucsur(character: str, description: str) -> Parser[str, str]:
    return ucsur().filter(
        lambda found: found == character or UnexpectedError(f'"{found}"', description)
    )


def until(item: Parser[str, TokenTree], end: Parser[str, object]) -> Parser[str, tuple]:
    """Parses `item` repeatedly until `end` matches.

    Unlike `all_`, the failure of `item` is reported when `end` does not match,
    so an error deep inside a token is not hidden behind "expected end".
    """
    items: Parser[str, tuple] = choice_only_one(
        end.map(lambda _: ()),
        sequence(item, lazy(lambda: items)).map(lambda values: (values[0], *values[1])),
    )
    return items


def mora_prefix(word: str, dots: int) -> str | OutputError:
    """First `dots` morae of `word`, plus one when the word starts with a vowel."""
    if dots == 0:
        return word
    count = dots + 1 if word[0] in VOWELS else dots
    morae = MORAE.findall(word)
    if len(morae) < count:
        return UnrecognizedError("Excess dots")
    return "".join(morae[:count])


class Lexer:
    """Lexing rules for one configuration and transliteration table.

    Attributes:
        config (ParseConfig): Options such as "x ala x" folding and nesting depth.
        transliteration (Mapping[str, str]): UCSUR glyph → latin word.
    """

    def __init__(
        self,
        config: ParseConfig = DEFAULT_CONFIG,
        transliteration: Mapping[str, str] = UCSUR_TO_LATIN,
    ) -> None:
        self.config = config
        self.transliteration = transliteration
        self._rules: dict[tuple, Parser] = {}

    @rule
    def ucsur_word(self) -> Parser[str, str]:
        def transliterate(glyph: str) -> str | OutputError:
            latin = self.transliteration.get(glyph)
            return CoveredError() if latin is None else latin

        return ucsur().map(transliterate)

    @rule
    def latin_word(self) -> Parser[str, str]:
        def lowercase(found: re.Match[str]) -> str | OutputError:
            word = found.group(1)
            if any(character.isupper() for character in word):
                return UnrecognizedError(f'"{word}"')
            return word

        return match(r"([a-z][a-zA-Z]*)\s*", "word").map(lowercase)

    @rule
    def word(self) -> Parser[str, str]:
        return choice_only_one(self.ucsur_word(), self.latin_word())

    @rule
    def specific_word(self, expected: str) -> Parser[str, str]:
        return self.word().filter(
            lambda word: word == expected or UnexpectedError(f'"{word}"', f'"{expected}"')
        )

    @rule
    def proper_words(self) -> Parser[str, str]:
        return all_at_least_once(
            match(r"([A-Z][a-zA-Z]*)\s*", "proper word").map(lambda found: found.group(1))
        ).map(" ".join)

    @rule
    def multiple_a(self) -> Parser[str, int]:
        a = self.specific_word(PARTICLE_A)
        return sequence(a, all_at_least_once(a)).map(lambda values: 1 + len(values[1]))

    @rule
    def x_ala_x(self) -> Parser[str, str]:
        if self.config.x_ala_x_partial_parsing:
            return error(CoveredError())
        return self.word().then(
            lambda word: sequence(
                self.specific_word(PARTICLE_ALA), self.specific_word(word)
            ).map(lambda _: word)
        )

    @rule
    def cartouche_space(self) -> Parser[str, None]:
        return all_(
            choice_only_one(
                match(r"\s+", "space"),
                specific_ucsur(COMBINING_CARTOUCHE_EXTENSION, "combining cartouche extension"),
            )
        ).map(lambda _: None)

    @rule
    def cartouche_element(self) -> Parser[str, str]:
        space = self.cartouche_space()
        glyph = self.ucsur_word().skip(space).then(
            lambda word: choice_only_one(
                specific_ucsur(UCSUR_COLON, "colon").skip(space).map(lambda _: word),
                all_(specific_ucsur(UCSUR_MIDDLE_DOT, "middle dot").skip(space)).map(
                    lambda dots: mora_prefix(word, len(dots))
                ),
            )
        )
        letter = match(r"([a-zA-Z])\s*", "latin letter").skip(space).map(
            lambda found: found.group(1)
        )

        # A latin letter is only read when the glyph reading fails.
        def parse_element(src: str) -> Output[ParseState[str, str]]:
            output = glyph.parse(src)
            if output.is_error():
                return output.union(letter.parse(src))
            return output

        return Parser(parse_element)

    @rule
    def cartouche(self) -> Parser[str, str]:
        element = self.cartouche_element()
        end = specific_ucsur(END_OF_CARTOUCHE, "end of cartouche")
        return sequence(
            specific_ucsur(START_OF_CARTOUCHE, "start of cartouche"),
            self.cartouche_space().with_(sequence(element, until(element, end))),
        ).map(lambda values: _capitalize("".join((values[1][0], *values[1][1]))))

    @rule
    def cartouches(self) -> Parser[str, str]:
        cartouche = self.cartouche()

        # A failing cartouche after the first one is reported, not dropped.
        def parse_following(src: str) -> Output[ParseState[str, tuple[str, ...]]]:
            if src[:1] == START_OF_CARTOUCHE:
                return sequence(cartouche, Parser(parse_following)).parse(src).map(
                    lambda state: ParseState((state.value[0], *state.value[1]), state.rest)
                )
            return Output.from_successes([ParseState((), src)])

        return sequence(cartouche, Parser(parse_following)).map(
            lambda values: " ".join((values[0], *values[1]))
        )

    @rule
    def punctuation(self) -> Parser[str, str]:
        glyphs = "".join(sorted(PUNCTUATION))
        return match(f"([{re.escape(glyphs)}])\\s*", "punctuation").map(
            lambda found: found.group(1)
        )

    @rule
    def comma(self) -> Parser[str, str]:
        return match(f"{re.escape(COMMA)}\\s*", "comma").map(lambda _: COMMA)

    @rule
    def open_quotation_mark(self) -> Parser[str, str]:
        marks = re.escape("".join(sorted(OPENING_QUOTATION_MARKS)))
        return match(f"([{marks}])\\s*", "open quotation mark").map(lambda found: found.group(1))

    @rule
    def close_quotation_mark(self) -> Parser[str, str]:
        marks = re.escape("".join(sorted(CLOSING_QUOTATION_MARKS)))
        return match(f"([{marks}])\\s*", "close quotation mark").map(
            lambda found: found.group(1)
        )

    @rule
    def quotation(self, depth: int) -> Parser[str, QuotationToken]:
        limit = self.config.max_nesting_depth
        if depth >= limit:
            return self.open_quotation_mark().map(lambda _: DepthError(limit))

        def check(values: tuple) -> QuotationToken | OutputError:
            left_mark, token_trees, right_mark = values
            if not quotation_marks_match(left_mark, right_mark):
                return UnrecognizedError("Mismatched quotation marks")
            return QuotationToken(token_trees, left_mark, right_mark)

        return sequence(
            self.open_quotation_mark(),
            lazy(lambda: self.token_trees(depth + 1)),
            self.close_quotation_mark(),
        ).map(check)

    @rule
    def token_tree(self, depth: int) -> Parser[str, TokenTree]:
        others = choice_only_one(
            self.punctuation().map(PunctuationToken),
            self.comma().map(lambda _: CommaToken()),
            self.proper_words().map(ProperWordsToken),
            self.multiple_a().map(MultipleAToken),
            self.x_ala_x().map(XAlaXToken),
            self.word().map(WordToken),
        )
        quotation = lazy(lambda: self.quotation(depth))
        cartouches = self.cartouches().map(ProperWordsToken)

        # Quotations and cartouches are decided by their first character so
        # their errors are reported instead of the fallbacks'.
        def parse_token_tree(src: str) -> Output[ParseState[str, TokenTree]]:
            if src[:1] in OPENING_QUOTATION_MARKS:
                return quotation.parse(src)
            if src[:1] == START_OF_CARTOUCHE:
                return cartouches.parse(src)
            return others.parse(src)

        return Parser(parse_token_tree)

    @rule
    def token_trees(self, depth: int) -> Parser[str, tuple[TokenTree, ...]]:
        """Token trees up to the end of the text, or up to a closing mark when nested."""
        if depth == 0:
            end = eol()
        else:
            end = look_ahead(self.close_quotation_mark())
        return until(self.token_tree(depth), end)

    def lex(self, text: str) -> Output[tuple[TokenTree, ...]]:
        """Lexes `text` into every possible token tree sequence.

        Returns:
            A successful Output of token tree tuples, or the failure explaining
            why the text cannot be tokenized.
        """
        try:
            with recursion_limit(self.config.recursion_limit):
                output = spaces().with_(self.token_trees(0)).parse(text)
        except RecursionError:
            logger.debug("Recursion limit reached while lexing %r", text)
            return Output.from_failure(RecursionDepthError(self.config.recursion_limit))
        if output.is_error():
            logger.debug("Lexing failed: %s", output.error.message)
        else:
            logger.debug("Lexed %d token sequence(s)", len(output))
        return output.map(lambda state: state.value)


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def lex(text: str, config: ParseConfig | None = None) -> Output[tuple[TokenTree, ...]]:
    """Lexes `text` with the default transliteration table."""
    return Lexer(config or DEFAULT_CONFIG).lex(text)


__all__ = [
    "CommaToken",
    "Lexer",
    "MultipleAToken",
    "ProperWordsToken",
    "PunctuationToken",
    "QuotationToken",
    "TokenTree",
    "WordToken",
    "XAlaXToken",
    "describe_token",
    "lex",
    "quotation_marks_match",
]
