"""
Backtracking parser combinators built on the `Output` aggregator.

A `Parser[I, T]` wraps a function from an input `I` (a string for the lexer,
a tuple of token trees for the grammar) to an `Output` of `ParseState`s. Every
combinator keeps *all* interpretations unless documented otherwise:

    choice            all alternatives, unioned
    choice_only_one   the first alternative that does not fail
    many              one success per repetition count, longest first
    all_              only the maximal run (exhaustive repetition)

Mappers and predicates passed to `Parser.map` / `Parser.filter` return an
`OutputError` to reject a value instead of raising.

Example:
    >>> digit = Parser(lambda src: Output.from_successes([ParseState(src[0], src[1:])])
    ...                if src[:1].isdigit() else Output.from_failure(UnexpectedError(src, "digit")))
    >>> [state.value for state in many(digit).parse("12x")]
    [('1', '2'), ('1',), ()]
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from toki.toki_errors import OutputError, UnreachableError
from toki.toki_output import Output

I = TypeVar("I")  # noqa: E741
T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class ParseState(Generic[I, T]):
    """A single parsing result: the parsed value and the unconsumed input."""

    value: T
    rest: I


@dataclass(frozen=True)
class Parser(Generic[I, T]):
    """Wrapper around a parsing function with chaining helpers."""

    function: Callable[[I], Output[ParseState[I, T]]]

    def parse(self, src: I) -> Output[ParseState[I, T]]:
        return self.function(src)

    def map(self, mapper: Callable[[T], U | OutputError]) -> Parser[I, U]:
        """Maps every parsed value. `mapper` may return an `OutputError`."""

        def map_state(state: ParseState[I, T]) -> ParseState[I, U] | OutputError:
            value = mapper(state.value)
            if isinstance(value, OutputError):
                return value
            return ParseState(value, state.rest)

        return Parser(lambda src: self.parse(src).map(map_state))

    def filter(self, predicate: Callable[[T], bool | OutputError]) -> Parser[I, T]:
        """Drops parsed values rejected by `predicate`."""
        return Parser(
            lambda src: self.parse(src).filter(lambda state: predicate(state.value))
        )

    def then(self, factory: Callable[[T], Parser[I, U]]) -> Parser[I, U]:
        """Continues with a parser built from the parsed value."""
        return Parser(
            lambda src: self.parse(src).flat_map(
                lambda state: factory(state.value).parse(state.rest)
            )
        )

    def with_(self, parser: Parser[I, U]) -> Parser[I, U]:
        """Parses `self` then `parser`, keeping only the second value."""
        return sequence(self, parser).map(lambda values: values[1])

    def skip(self, parser: Parser[I, Any]) -> Parser[I, T]:
        """Parses `self` then `parser`, keeping only the first value."""
        return sequence(self, parser).map(lambda values: values[0])


def nothing() -> Parser[Any, None]:
    """Parses nothing and leaves the input intact."""
    return Parser(lambda src: Output.from_successes([ParseState(None, src)]))


def error(reason: OutputError) -> Parser[Any, Any]:
    """Always fails with `reason`."""
    return Parser(lambda src: Output.from_failure(reason))


def look_ahead(parser: Parser[I, T]) -> Parser[I, T]:
    """Runs `parser` without consuming the input."""
    return Parser(
        lambda src: parser.parse(src).map(lambda state: ParseState(state.value, src))
    )


def lazy(thunk: Callable[[], Parser[I, T]]) -> Parser[I, T]:
    """Defers building a parser until it is first applied.

    Needed for mutually recursive grammar rules. The built parser is kept and
    reused on later applications.
    """
    built: list[Parser[I, T]] = []

    def parse_lazy(src: I) -> Output[ParseState[I, T]]:
        if not built:
            built.append(thunk())
        return built[0].parse(src)

    return Parser(parse_lazy)


def choice(*choices: Parser[I, T]) -> Parser[I, T]:
    """Applies every alternative to the same input and unions the outputs."""
    if not choices:
        raise UnreachableError()
    return Parser(lambda src: Output.concat(*(parser.parse(src) for parser in choices)))


def choice_only_one(*choices: Parser[I, T]) -> Parser[I, T]:
    """Returns the output of the first alternative that does not fail.

    When every alternative fails, the failure of the last one is returned.
    """
    if not choices:
        raise UnreachableError()

    def parse_first(src: I) -> Output[ParseState[I, T]]:
        for parser in choices:
            output = parser.parse(src)
            if not output.is_error():
                return output
        return output

    return Parser(parse_first)


def optional(parser: Parser[I, T]) -> Parser[I, T | None]:
    """Like `choice(parser, nothing())`: the skipped branch yields `None`."""
    return choice(parser, nothing())


def sequence(*parsers: Parser[I, Any]) -> Parser[I, tuple[Any, ...]]:
    """Applies the parsers one after another, collecting values in a tuple."""

    def parse_sequence(src: I) -> Output[ParseState[I, tuple[Any, ...]]]:
        output: Output[ParseState[I, tuple[Any, ...]]] = Output.from_successes(
            [ParseState((), src)]
        )
        for parser in parsers:
            output = output.flat_map(functools.partial(_extend, parser))
        return output

    return Parser(parse_sequence)


def _extend(
    parser: Parser[I, Any], state: ParseState[I, tuple[Any, ...]]
) -> Output[ParseState[I, tuple[Any, ...]]]:
    return parser.parse(state.rest).map(
        lambda next_state: ParseState((*state.value, next_state.value), next_state.rest)
    )


def many(parser: Parser[I, T]) -> Parser[I, tuple[T, ...]]:
    """Parses `parser` zero or more times, keeping every repetition count."""
    return choice(
        sequence(parser, lazy(lambda: many(parser))).map(
            lambda values: (values[0], *values[1])
        ),
        nothing().map(lambda _: ()),
    )


def many_at_least_once(parser: Parser[I, T]) -> Parser[I, tuple[T, ...]]:
    """Like `many` but parses at least once."""
    return sequence(parser, many(parser)).map(lambda values: (values[0], *values[1]))


def all_(parser: Parser[I, T]) -> Parser[I, tuple[T, ...]]:
    """Parses `parser` as many times as possible, keeping only that run."""
    return choice_only_one(
        sequence(parser, lazy(lambda: all_(parser))).map(
            lambda values: (values[0], *values[1])
        ),
        nothing().map(lambda _: ()),
    )


def all_at_least_once(parser: Parser[I, T]) -> Parser[I, tuple[T, ...]]:
    """Like `all_` but parses at least once."""
    return sequence(parser, all_(parser)).map(lambda values: (values[0], *values[1]))


def rule(build: Callable[..., Parser[Any, Any]]) -> Callable[..., Parser[Any, Any]]:
    """Builds a grammar rule once per grammar object.

    Decorates methods of classes that define a `_rules` dict. Arguments must
    be hashable. Only construction is cached, parse results never are.
    """

    @functools.wraps(build)
    def cached(self: Any, *args: Any) -> Parser[Any, Any]:
        key = (build.__name__, *args)
        built = self._rules.get(key)
        if built is None:
            built = build(self, *args)
            self._rules[key] = built
        return built

    return cached


__all__ = [
    "ParseState",
    "Parser",
    "all_",
    "all_at_least_once",
    "choice",
    "choice_only_one",
    "error",
    "lazy",
    "look_ahead",
    "many",
    "many_at_least_once",
    "nothing",
    "optional",
    "rule",
    "sequence",
]
