import pytest
from hypothesis import given
from hypothesis import strategies as st

from toki.toki_config import ParseConfig
from toki.toki_constants import (
    COMBINING_CARTOUCHE_EXTENSION,
    END_OF_CARTOUCHE,
    START_OF_CARTOUCHE,
    UCSUR_COLON,
    UCSUR_MIDDLE_DOT,
)
from toki.toki_errors import CoveredError, RecursionDepthError, UnrecognizedError
from toki.toki_lexer import (
    CommaToken,
    Lexer,
    MultipleAToken,
    ProperWordsToken,
    PunctuationToken,
    QuotationToken,
    WordToken,
    XAlaXToken,
    describe_token,
    lex,
    mora_prefix,
    quotation_marks_match,
)
from toki.toki_vocabulary import PU_WORDS, UCSUR_TO_LATIN

GLYPH = {word: glyph for glyph, word in UCSUR_TO_LATIN.items()}


def only(text: str, config: ParseConfig | None = None) -> tuple:
    output = lex(text, config)
    assert not output.is_error(), output.error
    assert len(output) == 1
    return output.successes[0]


def cartouche(*parts: str) -> str:
    return START_OF_CARTOUCHE + "".join(parts) + END_OF_CARTOUCHE


def test_words_and_punctuation() -> None:
    assert only("mi moku.") == (
        WordToken("mi"),
        WordToken("moku"),
        PunctuationToken("."),
    )


def test_surrounding_spaces_are_ignored() -> None:
    assert only("  mi   moku  ") == (WordToken("mi"), WordToken("moku"))


def test_empty_text_has_no_tokens() -> None:
    assert only("") == ()


@pytest.mark.parametrize("mark", [".", ":", ";", "?", "!", UCSUR_MIDDLE_DOT, UCSUR_COLON])  # type: ignore[misc]
def test_punctuation_marks(mark: str) -> None:
    assert only(f"pona{mark}") == (WordToken("pona"), PunctuationToken(mark))


def test_comma() -> None:
    assert only("taso, mi lape") == (
        WordToken("taso"),
        CommaToken(),
        WordToken("mi"),
        WordToken("lape"),
    )


def test_proper_words_run() -> None:
    assert only("jan Sonja Lang li pona") == (
        WordToken("jan"),
        ProperWordsToken("Sonja Lang"),
        WordToken("li"),
        WordToken("pona"),
    )


def test_uppercase_inside_word_is_unrecognized() -> None:
    output = lex("moKu")
    assert isinstance(output.error, UnrecognizedError)


def test_multiple_a() -> None:
    assert only("a a a") == (MultipleAToken(3),)
    assert only("a") == (WordToken("a"),)


def test_x_ala_x() -> None:
    assert only("sina pona ala pona?") == (
        WordToken("sina"),
        XAlaXToken("pona"),
        PunctuationToken("?"),
    )


def test_x_ala_y_is_not_folded() -> None:
    assert only("pona ala suli") == (
        WordToken("pona"),
        WordToken("ala"),
        WordToken("suli"),
    )


def test_x_ala_x_partial_parsing_keeps_words() -> None:
    config = ParseConfig(x_ala_x_partial_parsing=True)
    assert only("pona ala pona", config) == (
        WordToken("pona"),
        WordToken("ala"),
        WordToken("pona"),
    )


def test_ucsur_words() -> None:
    assert only(GLYPH["toki"] + " " + GLYPH["pona"] + GLYPH["li"]) == (
        WordToken("toki"),
        WordToken("pona"),
        WordToken("li"),
    )


def test_pu_words_start_the_table() -> None:
    assert UCSUR_TO_LATIN["\U000f1900"] == "a"
    assert UCSUR_TO_LATIN[chr(0xF1900 + len(PU_WORDS) - 1)] == "wile"


def test_unmapped_glyph_fails() -> None:
    assert lex("\U000f1a50").is_error()


def test_cartouche_of_bare_glyphs() -> None:
    lexer = Lexer(ParseConfig(), {"\U000f1900": "to", "\U000f1901": "ki"})
    output = lexer.lex(cartouche("\U000f1900", "\U000f1901"))
    assert output.successes == ((ProperWordsToken("Toki"),),)


def test_cartouche_prefers_glyph_over_latin_letter() -> None:
    lexer = Lexer(ParseConfig(), {"X": "to", "Y": "ki"})
    output = lexer.lex(cartouche("X", "Y"))
    assert output.successes == ((ProperWordsToken("Toki"),),)


def test_cartouche_colon_keeps_whole_word() -> None:
    assert only(cartouche(GLYPH["jan"], UCSUR_COLON)) == (ProperWordsToken("Jan"),)


def test_cartouche_dots_take_morae() -> None:
    text = cartouche(GLYPH["kala"], UCSUR_MIDDLE_DOT, GLYPH["jan"], UCSUR_MIDDLE_DOT)
    assert only(text) == (ProperWordsToken("Kaja"),)


def test_cartouche_vowel_initial_takes_extra_mora() -> None:
    assert only(cartouche(GLYPH["ante"], UCSUR_MIDDLE_DOT)) == (ProperWordsToken("An"),)


def test_cartouche_ignores_extension_and_spaces() -> None:
    text = cartouche(
        GLYPH["kala"],
        UCSUR_MIDDLE_DOT,
        " ",
        COMBINING_CARTOUCHE_EXTENSION,
        GLYPH["jan"],
        UCSUR_MIDDLE_DOT,
    )
    assert only(text) == (ProperWordsToken("Kaja"),)


def test_cartouche_latin_letters() -> None:
    assert only(cartouche("a", "b")) == (ProperWordsToken("Ab"),)


def test_consecutive_cartouches_join_with_space() -> None:
    text = cartouche(GLYPH["jan"], UCSUR_COLON) + cartouche(GLYPH["kala"], UCSUR_MIDDLE_DOT)
    assert only(text) == (ProperWordsToken("Jan Ka"),)


def test_cartouche_excess_dots() -> None:
    output = lex(cartouche(GLYPH["ko"], UCSUR_MIDDLE_DOT, UCSUR_MIDDLE_DOT))
    assert output.error == UnrecognizedError("Excess dots")


def test_excess_dots_in_second_cartouche_is_reported() -> None:
    text = cartouche(GLYPH["jan"], UCSUR_COLON) + cartouche(
        GLYPH["ko"], UCSUR_MIDDLE_DOT, UCSUR_MIDDLE_DOT
    )
    assert lex(text).error == UnrecognizedError("Excess dots")


def test_unterminated_cartouche_fails() -> None:
    assert lex(START_OF_CARTOUCHE + GLYPH["jan"] + UCSUR_COLON).is_error()


def test_quotation() -> None:
    assert only("«mi moku»") == (
        QuotationToken((WordToken("mi"), WordToken("moku")), "«", "»"),
    )


def test_quotation_with_sentence() -> None:
    assert only('jan li toki "mi moku."') == (
        WordToken("jan"),
        WordToken("li"),
        WordToken("toki"),
        QuotationToken(
            (WordToken("mi"), WordToken("moku"), PunctuationToken(".")), '"', '"'
        ),
    )


def test_mismatched_quotation_marks() -> None:
    output = lex('«mi moku"')
    assert output.error == UnrecognizedError("Mismatched quotation marks")


def test_unterminated_quotation_fails() -> None:
    assert lex("«mi moku").is_error()


def test_nested_quotation() -> None:
    assert only("«jan li toki “pona”»") == (
        QuotationToken(
            (
                WordToken("jan"),
                WordToken("li"),
                WordToken("toki"),
                QuotationToken((WordToken("pona"),), "“", "”"),
            ),
            "«",
            "»",
        ),
    )


def test_quotation_nesting_limit() -> None:
    config = ParseConfig(max_nesting_depth=1)
    assert not lex("«mi moku»", config).is_error()
    output = lex("«jan li toki “pona”»", config)
    assert output.is_error()
    assert output.error.kind == "depth"


def test_quotation_marks_match() -> None:
    assert quotation_marks_match("«", "»")
    assert quotation_marks_match("“", '"')
    assert quotation_marks_match("「", "」")
    assert not quotation_marks_match("«", '"')
    assert not quotation_marks_match("»", "«")


def test_describe_token() -> None:
    assert describe_token(WordToken("li")) == '"li"'
    assert describe_token(MultipleAToken(2)) == '"a a"'
    assert describe_token(XAlaXToken("pona")) == '"pona ala pona"'
    assert describe_token(CommaToken()) == "comma"


def test_mora_prefix() -> None:
    assert mora_prefix("toki", 0) == "toki"
    assert mora_prefix("toki", 1) == "to"
    assert mora_prefix("alasa", 1) == "ala"
    assert mora_prefix("jan", 2) == "jan"
    assert mora_prefix("ko", 2) == UnrecognizedError("Excess dots")


def test_stack_exhaustion_while_lexing(monkeypatch: pytest.MonkeyPatch) -> None:
    def exhaust(self: Lexer, depth: int) -> None:
        raise RecursionError

    monkeypatch.setattr(Lexer, "token_trees", exhaust)
    output = Lexer(ParseConfig(recursion_limit=30000)).lex("mi moku")
    assert output.error == RecursionDepthError(30000)
    assert output.error.message == "Input is too long or too deeply nested to parse."


def test_unmapped_glyph_in_custom_table_is_covered() -> None:
    lexer = Lexer(ParseConfig(), {})
    assert isinstance(lexer.ucsur_word().parse("\U000f1900").error, CoveredError)


@given(st.lists(st.sampled_from(["mi", "sina", "moku", "pona", "telo"]), min_size=1, max_size=6))  # type: ignore[misc]
def test_lowercase_words_lex_to_word_tokens(words: list[str]) -> None:
    assert only(" ".join(words)) == tuple(WordToken(word) for word in words)
