"""
Recursive-descent grammar for toki pona built from the parser combinators.

The grammar runs over the token trees produced by `toki.toki_lexer` and keeps
every structurally valid interpretation: each rule returns the union of its
alternatives and only the filter rules in `toki.toki_filter` prune the forest.

Grammar (informally, alternatives unioned):

    sentence      := full_clause ("la" full_clause)* (END | punctuation | ",")
    full_clause   := ["taso" [","]] clause [[","] "anu" "seme"]
    clause        := mi/sina predicates
                   | preposition ([","] preposition)*
                   | subject_phrases
                   | subject_phrases "o"
                   | subject_phrases [","] "li" predicates
                   | "o" predicates
                   | subject_phrases [","] "o" predicates
                   | quotation
    phrase        := number modifiers
                   | preverb modifiers phrase
                   | preposition
                   | content_word modifiers
                   | quotation
    modifiers     := (word_unit | proper_words | number | quotation)*
                     ("nanpa" phrase)* ("pi" phrase)*
    preposition   := preposition_word modifiers phrases(anu)

Coordinated phrases and predicates are parsed through a *nesting rule*: a
tuple of joining particles tried from the outermost grouping inwards, e.g.
`("en", "anu")` reads "A anu B en C" as en(anu(A, B), C).

Classes:
    Grammar: Builds and caches the rules for one configuration and vocabulary.

Functions:
    parse(text, config=None, vocabulary=None): The single parsing entry point.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from toki.toki_ast import (
    AssociatedPredicates,
    ConjunctionPhrases,
    ConjunctionPredicates,
    DefaultModifier,
    DefaultPhrase,
    DefaultWord,
    DisjunctionPhrases,
    DisjunctionPredicates,
    FullClause,
    LiClause,
    Modifier,
    MultiplePhrases,
    MultiplePredicates,
    NanpaModifier,
    Numbers,
    OClause,
    Phrase,
    PhrasesClause,
    PiModifier,
    Preposition,
    PrepositionPhrase,
    PrepositionsClause,
    PreverbPhrase,
    ProperWordsModifier,
    Quotation,
    QuotationClause,
    QuotationModifier,
    QuotationPhrase,
    Reduplication,
    Sentence,
    SinglePhrase,
    SinglePredicate,
    VocativeClause,
    WordUnit,
    XAlaX,
)
from toki.toki_combinators import (
    Parser,
    ParseState,
    all_at_least_once,
    choice,
    lazy,
    many,
    many_at_least_once,
    optional,
    rule,
    sequence,
)
from toki.toki_config import DEFAULT_CONFIG, ParseConfig, recursion_limit
from toki.toki_constants import (
    COMMA,
    CONJUNCTION_PARTICLES,
    NUMBER_WORDS,
    PARTICLE_A,
    PARTICLE_ALA,
    PARTICLE_ANU,
    PARTICLE_E,
    PARTICLE_EN,
    PARTICLE_LA,
    PARTICLE_LI,
    PARTICLE_NANPA,
    PARTICLE_O,
    PARTICLE_PI,
    PARTICLE_SEME,
    PARTICLE_TASO,
)
from toki.toki_errors import (
    CoveredError,
    OutputError,
    RecursionDepthError,
    UnexpectedError,
    UnrecognizedError,
)
from toki.toki_filter import (
    CLAUSE_RULES,
    FULL_CLAUSE_RULES,
    MODIFIER_RULES,
    MODIFIERS_RULES,
    PHRASE_RULES,
    PREPOSITION_RULES,
    SENTENCES_RULES,
    WORD_UNIT_RULES,
    filter_rules,
)
from toki.toki_lexer import (
    CommaToken,
    Lexer,
    MultipleAToken,
    ProperWordsToken,
    PunctuationToken,
    QuotationToken,
    TokenTree,
    WordToken,
    XAlaXToken,
    describe_token,
    quotation_marks_match,
)
from toki.toki_output import Output
from toki.toki_vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

Tokens = tuple[TokenTree, ...]


def token(kind: type, description: str) -> Parser[Tokens, Any]:
    """Parses one token tree of the given type."""

    def parse_token(src: Tokens) -> Output[ParseState[Tokens, Any]]:
        if not src:
            return Output.from_failure(UnexpectedError("end of sentence", description))
        if isinstance(src[0], kind):
            return Output.from_successes([ParseState(src[0], src[1:])])
        return Output.from_failure(UnexpectedError(describe_token(src[0]), description))

    return Parser(parse_token)


def end_of_tokens() -> Parser[Tokens, None]:
    def parse_end(src: Tokens) -> Output[ParseState[Tokens, None]]:
        if not src:
            return Output.from_successes([ParseState(None, src)])
        return Output.from_failure(UnexpectedError(describe_token(src[0]), "end of sentence"))

    return Parser(parse_end)


def _prepend(values: tuple[Any, tuple[Any, ...]]) -> tuple[Any, ...]:
    first, rest = values
    return (first, *rest)


def _group(particle: str, phrases: tuple[MultiplePhrases, ...]) -> MultiplePhrases:
    if particle in CONJUNCTION_PARTICLES:
        return ConjunctionPhrases(phrases)
    return DisjunctionPhrases(phrases)


class Grammar:
    """The toki pona grammar for one configuration and vocabulary.

    Rules are methods decorated with `rule`, so each is built once per grammar
    and shared by every rule referring to it. Mutually recursive references
    go through `lazy`.

    Attributes:
        config (ParseConfig): Parsing options.
        vocabulary (Vocabulary): Word classes consulted by `word_from`.
    """

    def __init__(
        self, config: ParseConfig = DEFAULT_CONFIG, vocabulary: Vocabulary = DEFAULT_VOCABULARY
    ) -> None:
        self.config = config
        self.vocabulary = vocabulary
        self._rules: dict[tuple, Parser] = {}
        self._quotations: dict[QuotationToken, Output[tuple[Sentence, ...]]] = {}

    # Tokens

    @rule
    def word(self) -> Parser[Tokens, str]:
        return token(WordToken, "word").map(lambda found: found.word)

    @rule
    def specific_word(self, expected: str) -> Parser[Tokens, str]:
        return self.word().filter(
            lambda word: word == expected or UnexpectedError(f'"{word}"', f'"{expected}"')
        )

    @rule
    def word_from(self, word_class: str, description: str) -> Parser[Tokens, str]:
        """Parses a word of `word_class`, e.g. "content_word" or "preverb"."""
        contains: Callable[[str], bool] = getattr(self.vocabulary, f"is_{word_class}")
        return self.word().filter(
            lambda word: contains(word) or UnrecognizedError(f'"{word}" as {description}')
        )

    @rule
    def proper_words(self) -> Parser[Tokens, str]:
        return token(ProperWordsToken, "proper words").map(lambda found: found.words)

    @rule
    def comma(self) -> Parser[Tokens, str]:
        return token(CommaToken, "comma").map(lambda _: COMMA)

    @rule
    def optional_comma(self) -> Parser[Tokens, str | None]:
        return optional(self.comma())

    @rule
    def punctuation(self) -> Parser[Tokens, str]:
        return token(PunctuationToken, "punctuation").map(lambda found: found.punctuation)

    # Words

    def _accepts(self, word_parser: Parser[Tokens, str], word: str) -> bool | OutputError:
        output = word_parser.parse((WordToken(word),))
        return True if output.error is None else output.error

    @rule
    def word_unit(self, word_parser: Parser[Tokens, str]) -> Parser[Tokens, WordUnit]:
        """Parses a word unit whose word is accepted by `word_parser`."""

        def x_ala_x_token(found: XAlaXToken) -> WordUnit | OutputError:
            accepted = self._accepts(word_parser, found.word)
            return XAlaX(found.word) if accepted is True else accepted

        def multiple_a(found: MultipleAToken) -> WordUnit | OutputError:
            accepted = self._accepts(word_parser, PARTICLE_A)
            return Reduplication(PARTICLE_A, found.count) if accepted is True else accepted

        return choice(
            word_parser.then(
                lambda word: many_at_least_once(self.specific_word(word)).map(
                    lambda repeated: Reduplication(word, len(repeated) + 1)
                )
            ),
            word_parser.then(
                lambda word: self.specific_word(PARTICLE_ALA)
                .with_(self.specific_word(word))
                .map(XAlaX)
            ),
            token(XAlaXToken, "x ala x").map(x_ala_x_token),
            token(MultipleAToken, "multiple a").map(multiple_a),
            word_parser.map(DefaultWord),
        ).filter(filter_rules(WORD_UNIT_RULES))

    @rule
    def number(self) -> Parser[Tokens, tuple[str, ...]]:
        """Number words in descending order, at least two of them."""

        def flatten(groups: tuple[tuple[str, ...], ...]) -> tuple[str, ...] | OutputError:
            numbers = tuple(word for group in groups for word in group)
            return numbers if len(numbers) >= 2 else CoveredError()

        return sequence(
            *(
                many(choice(*(self.specific_word(word) for word in words)))
                for words in NUMBER_WORDS
            )
        ).map(flatten)

    # Phrases

    @rule
    def modifiers(self) -> Parser[Tokens, tuple[Modifier, ...]]:
        modifier_rules = filter_rules(MODIFIER_RULES)
        single = choice(
            self.word_unit(self.word_from("content_word", "modifier")).map(DefaultModifier),
            self.proper_words().map(ProperWordsModifier),
            self.number().map(lambda numbers: DefaultModifier(Numbers(numbers))),
            self.quotation().map(QuotationModifier),
        ).filter(modifier_rules)
        nanpa = (
            sequence(self.word_unit(self.specific_word(PARTICLE_NANPA)), lazy(self.phrase))
            .map(lambda values: NanpaModifier(*values))
            .filter(modifier_rules)
        )
        pi = (
            self.specific_word(PARTICLE_PI)
            .with_(lazy(self.phrase))
            .map(PiModifier)
            .filter(modifier_rules)
        )
        return (
            sequence(many(single), many(nanpa), many(pi))
            .map(lambda groups: (*groups[0], *groups[1], *groups[2]))
            .filter(filter_rules(MODIFIERS_RULES))
        )

    @rule
    def phrase(self) -> Parser[Tokens, Phrase]:
        return choice(
            sequence(self.number(), lazy(self.modifiers)).map(
                lambda values: DefaultPhrase(Numbers(values[0]), values[1])
            ),
            sequence(
                self.word_unit(self.word_from("preverb", "preverb")),
                lazy(self.modifiers),
                lazy(self.phrase),
            ).map(lambda values: PreverbPhrase(*values)),
            lazy(self.preposition).map(PrepositionPhrase),
            sequence(
                self.word_unit(self.word_from("content_word", "headword")),
                lazy(self.modifiers),
            ).map(lambda values: DefaultPhrase(*values)),
            self.quotation().map(QuotationPhrase),
        ).filter(filter_rules(PHRASE_RULES))

    @rule
    def nested_phrases_only(self, nesting_rule: tuple[str, ...]) -> Parser[Tokens, MultiplePhrases]:
        """Phrases grouped by the first particle of `nesting_rule` only."""
        if not nesting_rule:
            return self.phrase().map(SinglePhrase)
        first, rest = nesting_rule[0], nesting_rule[1:]
        return sequence(
            self.nested_phrases(rest),
            many_at_least_once(
                self.optional_comma()
                .with_(self.specific_word(first))
                .with_(self.nested_phrases(rest))
            ),
        ).map(lambda values: _group(first, _prepend(values)))

    @rule
    def nested_phrases(self, nesting_rule: tuple[str, ...]) -> Parser[Tokens, MultiplePhrases]:
        if not nesting_rule:
            return self.phrase().map(SinglePhrase)
        return choice(
            self.nested_phrases_only(nesting_rule), self.nested_phrases(nesting_rule[1:])
        )

    @rule
    def subject_phrases(self) -> Parser[Tokens, MultiplePhrases]:
        return choice(
            self.nested_phrases_only((PARTICLE_EN, PARTICLE_ANU)),
            self.nested_phrases_only((PARTICLE_ANU, PARTICLE_EN)),
            self.phrase().map(SinglePhrase),
        )

    @rule
    def preposition(self) -> Parser[Tokens, Preposition]:
        return (
            sequence(
                self.word_unit(self.word_from("preposition", "preposition")),
                self.modifiers(),
                self.nested_phrases((PARTICLE_ANU,)),
            )
            .map(lambda values: Preposition(*values))
            .filter(filter_rules(PREPOSITION_RULES))
        )

    # Predicates

    @rule
    def associated_predicates(
        self, nesting_rule: tuple[str, ...]
    ) -> Parser[Tokens, MultiplePredicates]:
        """Predicates followed by "e" objects and/or prepositions."""

        def associate(values: tuple) -> MultiplePredicates | OutputError:
            predicates, objects, prepositions = values
            if objects is None and not prepositions:
                return CoveredError()
            return AssociatedPredicates(predicates, objects, prepositions)

        return sequence(
            self.nested_phrases_only(nesting_rule),
            optional(
                self.optional_comma()
                .with_(self.specific_word(PARTICLE_E))
                .with_(self.nested_phrases((PARTICLE_E, PARTICLE_ANU)))
            ),
            many(self.optional_comma().with_(self.preposition())),
        ).map(associate)

    @rule
    def multiple_predicates(
        self, nesting_rule: tuple[str, ...]
    ) -> Parser[Tokens, MultiplePredicates]:
        if not nesting_rule:
            return choice(
                self.associated_predicates(()),
                self.phrase().map(SinglePredicate),
            )
        first, rest = nesting_rule[0], nesting_rule[1:]
        group_type = (
            ConjunctionPredicates if first in CONJUNCTION_PARTICLES else DisjunctionPredicates
        )
        member = choice(
            self.associated_predicates(nesting_rule), self.multiple_predicates(rest)
        )
        return choice(
            self.associated_predicates(nesting_rule),
            sequence(
                member,
                many_at_least_once(
                    self.optional_comma().with_(self.specific_word(first)).with_(member)
                ),
            ).map(lambda values: group_type(_prepend(values))),
            self.multiple_predicates(rest),
        )

    # Clauses

    def _is_special_subject(self, phrases: MultiplePhrases) -> str | None:
        """The word when `phrases` is a bare "mi" or "sina" with no modifiers."""
        match phrases:
            case SinglePhrase(DefaultPhrase(DefaultWord(word), ())):
                if self.vocabulary.is_special_subject(word):
                    return word
        return None

    def _phrases_clause(self, phrases: MultiplePhrases) -> PhrasesClause | OutputError:
        match phrases:
            case SinglePhrase(QuotationPhrase()):
                return CoveredError("A single quotation is a quotation clause.")
            case SinglePhrase(DefaultPhrase(DefaultWord(word), modifiers)) if (
                modifiers and self.vocabulary.is_special_subject(word)
            ):
                return CoveredError(f'"{word}" followed by predicates is a li clause.')
        return PhrasesClause(phrases)

    def _li_clause(self, values: tuple) -> LiClause | OutputError:
        subjects, predicates = values
        word = self._is_special_subject(subjects)
        if word is not None:
            return UnrecognizedError(f'"{word} {PARTICLE_LI}"')
        return LiClause(subjects, predicates)

    @rule
    def clause(self) -> Parser[Tokens, Any]:
        li_predicates = self.multiple_predicates((PARTICLE_LI, PARTICLE_ANU))
        o_predicates = self.multiple_predicates((PARTICLE_O, PARTICLE_ANU))
        return choice(
            sequence(self.word_from("special_subject", "mi/sina subject"), li_predicates).map(
                lambda values: LiClause(
                    SinglePhrase(DefaultPhrase(DefaultWord(values[0]), ())), values[1]
                )
            ),
            sequence(
                self.preposition(),
                many(self.optional_comma().with_(self.preposition())),
            ).map(lambda values: PrepositionsClause(_prepend(values))),
            self.subject_phrases().map(self._phrases_clause),
            self.subject_phrases().skip(self.specific_word(PARTICLE_O)).map(VocativeClause),
            sequence(
                self.subject_phrases(),
                self.optional_comma().with_(self.specific_word(PARTICLE_LI)).with_(li_predicates),
            ).map(self._li_clause),
            self.specific_word(PARTICLE_O)
            .with_(o_predicates)
            .map(lambda predicates: OClause(None, predicates)),
            sequence(
                self.subject_phrases(),
                self.optional_comma().with_(self.specific_word(PARTICLE_O)).with_(o_predicates),
            ).map(lambda values: OClause(*values)),
            self.quotation().map(QuotationClause),
        ).filter(filter_rules(CLAUSE_RULES))

    @rule
    def full_clause(self) -> Parser[Tokens, FullClause]:
        return (
            sequence(
                optional(
                    self.word_unit(self.specific_word(PARTICLE_TASO)).skip(self.optional_comma())
                ),
                self.clause(),
                optional(
                    self.optional_comma()
                    .with_(self.specific_word(PARTICLE_ANU))
                    .with_(self.word_unit(self.specific_word(PARTICLE_SEME)))
                ),
            )
            .map(lambda values: FullClause(values[0], values[2], values[1]))
            .filter(filter_rules(FULL_CLAUSE_RULES))
        )

    @rule
    def la(self) -> Parser[Tokens, str]:
        la = self.specific_word(PARTICLE_LA)
        return choice(self.comma().with_(la), la.skip(self.comma()), la)

    @rule
    def sentence(self) -> Parser[Tokens, Sentence]:
        return sequence(
            self.full_clause(),
            many(self.la().with_(self.full_clause())),
            choice(
                end_of_tokens().map(lambda _: ""),
                self.punctuation(),
                self.comma(),
            ),
        ).map(lambda values: Sentence((values[0], *values[1]), values[2]))

    @rule
    def quotation(self) -> Parser[Tokens, Quotation]:
        """Parses a quotation token by parsing the token trees it holds."""
        sentences = (
            many(lazy(self.sentence))
            .skip(end_of_tokens())
            .filter(filter_rules(SENTENCES_RULES))
        )
        quotation_token = token(QuotationToken, "quotation")

        def parse_quotation(src: Tokens) -> Output[ParseState[Tokens, Quotation]]:
            output = quotation_token.parse(src)
            if output.error is not None:
                return Output.from_failure(output.error)
            found: QuotationToken = output.successes[0].value
            if not quotation_marks_match(found.left_mark, found.right_mark):
                return Output.from_failure(UnrecognizedError("Mismatched quotation marks"))
            # Every alternative that reaches a quotation shares one parse of it.
            contents = self._quotations.get(found)
            if contents is None:
                contents = sentences.parse(found.token_trees).map(lambda state: state.value)
                self._quotations[found] = contents
            return contents.map(
                lambda value: ParseState(
                    Quotation(value, found.left_mark, found.right_mark), src[1:]
                )
            )

        return Parser(parse_quotation)

    @rule
    def sentences(self) -> Parser[Tokens, tuple[Sentence, ...]]:
        return (
            all_at_least_once(self.sentence())
            .skip(end_of_tokens())
            .filter(filter_rules(SENTENCES_RULES))
        )

    def parse_tokens(self, tokens: Tokens) -> Output[tuple[Sentence, ...]]:
        """Parses a token tree sequence into every candidate list of sentences."""
        return self.sentences().parse(tokens).map(lambda state: state.value)


def parse(
    text: str, config: ParseConfig | None = None, vocabulary: Vocabulary | None = None
) -> Output[tuple[Sentence, ...]]:
    """Parses `text` into every grammatically valid list of sentences.

    Args:
        text: One or more sentences in latin orthography or sitelen pona glyphs.
        config: Parsing options; defaults to `ParseConfig()`.
        vocabulary: Word classes; defaults to the bundled vocabulary.

    Returns:
        An Output whose successes are the candidate sentence tuples, or the
        failure explaining why no candidate survived.
    """
    config = config or DEFAULT_CONFIG
    grammar = Grammar(config, vocabulary or DEFAULT_VOCABULARY)
    tokens = Lexer(config).lex(text)
    try:
        with recursion_limit(config.recursion_limit):
            output = tokens.flat_map(grammar.parse_tokens)
    except RecursionError:
        logger.debug("Recursion limit reached while parsing %r", text)
        return Output.from_failure(RecursionDepthError(config.recursion_limit))
    if output.is_error():
        logger.debug("No candidate for %r: %s", text, output.error.message)
    else:
        logger.debug("%d candidate(s) for %r", len(output), text)
    return output


__all__ = ["Grammar", "parse"]
