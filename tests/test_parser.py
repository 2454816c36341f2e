import time
from collections.abc import Callable

import pytest

from toki.toki_ast import (
    AssociatedPredicates,
    DefaultPhrase,
    DefaultWord,
    DisjunctionPhrases,
    DisjunctionPredicates,
    FullClause,
    LiClause,
    OClause,
    Preposition,
    PrepositionsClause,
    QuotationModifier,
    Sentence,
    SinglePhrase,
    SinglePredicate,
    XAlaX,
)
from toki.toki_config import ParseConfig
from toki.toki_errors import RecursionDepthError, UnrecognizedError
from toki.toki_lexer import PunctuationToken, QuotationToken, WordToken
from toki.toki_output import Output
from toki.toki_parser import Grammar, parse
from toki.toki_vocabulary import DEFAULT_VOCABULARY

Unwrap = Callable[[Output[tuple[Sentence, ...]]], tuple[Sentence, ...]]


def word(text: str) -> DefaultPhrase:
    return DefaultPhrase(DefaultWord(text), ())


def single(text: str) -> SinglePhrase:
    return SinglePhrase(word(text))


def sentence(clause: object, punctuation: str = ".") -> Sentence:
    return Sentence((FullClause(None, None, clause),), punctuation)


def clauses(output: Output[tuple[Sentence, ...]]) -> list[object]:
    return [
        full_clause.clause
        for candidate in output
        for sentence_ in candidate
        for full_clause in sentence_.la_clauses
    ]


def test_mi_moku(only_candidate: Unwrap) -> None:
    (result,) = only_candidate(parse("mi moku."))
    assert result == sentence(LiClause(single("mi"), SinglePredicate(word("moku"))))


def test_jan_li_pona(only_candidate: Unwrap) -> None:
    (result,) = only_candidate(parse("jan li pona."))
    assert result == sentence(LiClause(single("jan"), SinglePredicate(word("pona"))))


def test_mi_li_is_rejected() -> None:
    assert parse("mi li pona.").is_error()


def test_end_of_text_has_empty_punctuation(only_candidate: Unwrap) -> None:
    (result,) = only_candidate(parse("mi moku"))
    assert result.punctuation == ""


def test_empty_text_is_rejected() -> None:
    assert parse("").is_error()


def test_ambiguous_anu_keeps_both_readings() -> None:
    output = parse("jan li moku e kili anu telo.")
    objects = DisjunctionPhrases((single("kili"), single("telo")))
    by_objects = sentence(
        LiClause(single("jan"), AssociatedPredicates(single("moku"), objects, ()))
    )
    by_predicates = sentence(
        LiClause(
            single("jan"),
            DisjunctionPredicates(
                (
                    AssociatedPredicates(single("moku"), single("kili"), ()),
                    SinglePredicate(word("telo")),
                )
            ),
        )
    )
    assert len(output) == 2
    assert (by_objects,) in output.successes
    assert (by_predicates,) in output.successes


def test_x_ala_x_predicate(only_candidate: Unwrap) -> None:
    (result,) = only_candidate(parse("sina pona ala pona?"))
    predicate = SinglePredicate(DefaultPhrase(XAlaX("pona"), ()))
    assert result == sentence(LiClause(single("sina"), predicate), "?")


def test_x_ala_x_partial_parsing_in_grammar() -> None:
    output = parse("sina pona ala pona?", ParseConfig(x_ala_x_partial_parsing=True))
    predicate = SinglePredicate(DefaultPhrase(XAlaX("pona"), ()))
    assert LiClause(single("sina"), predicate) in clauses(output)


def test_seme_ala_seme_is_rejected() -> None:
    assert parse("sina seme ala seme?").is_error()


def test_o_clause(only_candidate: Unwrap) -> None:
    (result,) = only_candidate(parse("o moku."))
    assert result == sentence(OClause(None, SinglePredicate(word("moku"))))


def test_prepositions_clause() -> None:
    clause = PrepositionsClause((Preposition(DefaultWord("lon"), (), single("tomo")),))
    assert clause in clauses(parse("lon tomo."))


def test_la_clauses() -> None:
    output = parse("sina lape la mi pona.")
    assert not output.is_error()
    for candidate in output:
        assert len(candidate[0].la_clauses) == 2


def test_taso() -> None:
    output = parse("taso, mi moku.")
    full_clauses = [candidate[0].la_clauses[0] for candidate in output]
    assert any(full_clause.taso == DefaultWord("taso") for full_clause in full_clauses)


def test_comma_separates_sentences(only_candidate: Unwrap) -> None:
    first, second = only_candidate(parse("mi moku, sina lape."))
    assert first.punctuation == ","
    assert second.punctuation == "."


def test_trailing_comma_is_rejected() -> None:
    output = parse("mi moku,")
    assert output.error == UnrecognizedError("comma at the end of the sentence")


def test_quotation_modifier() -> None:
    output = parse("jan li toki «mi moku».")
    assert not output.is_error()
    quotations = [
        modifier
        for clause in clauses(output)
        if isinstance(clause, LiClause) and isinstance(clause.predicates, SinglePredicate)
        for modifier in getattr(clause.predicates.predicate, "modifiers", ())
        if isinstance(modifier, QuotationModifier)
    ]
    assert quotations
    quotation = quotations[0].quotation
    assert (quotation.left_mark, quotation.right_mark) == ("«", "»")
    assert quotation.sentences == (
        sentence(LiClause(single("mi"), SinglePredicate(word("moku"))), ""),
    )


def test_quotation_depth_limit() -> None:
    output = parse("«jan li toki “pona”»", ParseConfig(max_nesting_depth=1))
    assert output.error.kind == "depth"


@pytest.mark.parametrize("depth", [3, 6])  # type: ignore[misc]
def test_nested_quotations_parse_quickly(depth: int) -> None:
    text = "jan li toki " + "«" * depth + "pona" + "»" * depth
    start = time.perf_counter()
    output = parse(text)
    assert time.perf_counter() - start < 5.0
    assert not output.is_error()


def test_quotation_deeper_than_default_limit() -> None:
    output = parse("jan li toki " + "«" * 17 + "pona" + "»" * 17)
    assert output.error.kind == "depth"
    assert output.error.message == "Nesting deeper than 16 levels is not supported."


def test_stack_exhaustion_is_not_reported_as_nesting(monkeypatch: pytest.MonkeyPatch) -> None:
    def exhaust(self: Grammar, tokens: object) -> None:
        raise RecursionError

    monkeypatch.setattr(Grammar, "parse_tokens", exhaust)
    output = parse("jan jan jan")
    assert output.error == RecursionDepthError(20000)
    assert output.error.kind == "depth"
    assert "too long" in output.error.message


def test_unknown_word_is_rejected() -> None:
    assert parse("mi xyz.").is_error()


def test_extended_vocabulary(only_candidate: Unwrap) -> None:
    vocabulary = DEFAULT_VOCABULARY.extended(content_word=["xyz"])
    (result,) = only_candidate(parse("mi xyz.", vocabulary=vocabulary))
    assert result == sentence(LiClause(single("mi"), SinglePredicate(word("xyz"))))


def test_grammar_parses_tokens(only_candidate: Unwrap) -> None:
    grammar = Grammar()
    output = grammar.parse_tokens((WordToken("mi"), WordToken("moku"), PunctuationToken("!")))
    (result,) = only_candidate(output)
    assert result.punctuation == "!"


def test_grammar_rules_are_cached() -> None:
    grammar = Grammar()
    assert grammar.phrase() is grammar.phrase()
    assert grammar.specific_word("li") is grammar.specific_word("li")


def test_grammar_rejects_mismatched_quotation_token() -> None:
    token = QuotationToken((WordToken("pona"),), "«", '"')
    output = Grammar().quotation().parse((token,))
    assert output.error == UnrecognizedError("Mismatched quotation marks")


@pytest.mark.parametrize(  # type: ignore[misc]
    "text",
    [
        "mi moku.",
        "jan li pona.",
        "sina pona ala pona?",
        "o moku.",
        "lon tomo.",
        "jan Sonja li pona.",
        "mi wile moku.",
        "ona li moku e kili.",
        "jan pi ma suli li kama.",
        "a a a!",
    ],
)
def test_accepted_text_yields_candidates(text: str) -> None:
    output = parse(text)
    assert not output.is_error(), output.error
    assert len(output) >= 1
