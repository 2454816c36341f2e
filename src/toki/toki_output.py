"""
The `Output` aggregator: every possible outcome of an operation.

An `Output` is either a *success*, holding an ordered, non-empty tuple of
values (one per interpretation), or a *failure*, holding exactly one
`OutputError`. Parsers return `Output`s so that ambiguity accumulates instead
of being resolved early.

Union policy for two failures:
    The left error is kept, except that a `CoveredError` yields to any other
    kind. A "covered" note only says that a sibling was expected to match, so
    a real diagnosis from the other side is more useful.

Example:
    >>> Output.from_successes([1, 2]).map(lambda x: x * 10).successes
    (10, 20)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Generic, TypeVar

from toki.toki_errors import CoveredError, OutputError, UnreachableError

T = TypeVar("T")
U = TypeVar("U")


class Output(Generic[T]):
    """Either a non-empty tuple of successes or a single failure.

    Attributes:
        successes (tuple[T, ...]): The successful values, empty on failure.
        error (OutputError | None): The failure, `None` on success.
    """

    __slots__ = ("successes", "error")

    def __init__(self, successes: Iterable[T] = (), error: OutputError | None = None):
        values = tuple(successes)
        if values and error is not None:
            raise ValueError("An Output cannot hold both successes and an error")
        if not values and error is None:
            raise ValueError("An Output needs at least one success or an error")
        self.successes: tuple[T, ...] = values
        self.error: OutputError | None = error

    @classmethod
    def from_successes(cls, values: Iterable[T]) -> Output[T]:
        """Builds a successful Output.

        Raises:
            ValueError: If `values` is empty. Use `from_failure` instead.
        """
        values = tuple(values)
        if not values:
            raise ValueError("from_successes() needs at least one value")
        return cls(values)

    @classmethod
    def from_failure(cls, error: OutputError) -> Output[T]:
        """Builds a failed Output carrying `error`."""
        return cls(error=error)

    @classmethod
    def concat(cls, *outputs: Output[T]) -> Output[T]:
        """Unions any number of Outputs from left to right."""
        if not outputs:
            raise UnreachableError()
        result = outputs[0]
        for output in outputs[1:]:
            result = result.union(output)
        return result

    def is_error(self) -> bool:
        return self.error is not None

    def union(self, other: Output[T]) -> Output[T]:
        """Sums two Outputs.

        Success + success concatenates (ambiguity accumulation); a success
        absorbs a failure; two failures keep one error (see module docstring).
        """
        if self.error is None and other.error is None:
            return Output(self.successes + other.successes)
        if self.error is None:
            return self
        if other.error is None:
            return other
        return Output(error=_pick_error(self.error, other.error))

    def map(self, mapper: Callable[[T], U | OutputError]) -> Output[U]:
        """Applies `mapper` to every success.

        `mapper` may return an `OutputError` to reject a single value. Rejected
        values are dropped silently when at least one sibling survives.
        """
        if self.error is not None:
            return Output(error=self.error)
        values: list[U] = []
        error: OutputError | None = None
        for value in self.successes:
            result = mapper(value)
            if isinstance(result, OutputError):
                error = result if error is None else _pick_error(error, result)
            else:
                values.append(result)
        if values:
            return Output(values)
        assert error is not None
        return Output(error=error)

    def flat_map(self, mapper: Callable[[T], Output[U]]) -> Output[U]:
        """Applies `mapper` to every success and unions the resulting Outputs."""
        if self.error is not None:
            return Output(error=self.error)
        values: list[U] = []
        error: OutputError | None = None
        for value in self.successes:
            output = mapper(value)
            if output.error is None:
                values.extend(output.successes)
            elif not values:
                error = output.error if error is None else _pick_error(error, output.error)
        if values:
            return Output(values)
        assert error is not None
        return Output(error=error)

    def filter(self, predicate: Callable[[T], bool | OutputError]) -> Output[T]:
        """Keeps the successes accepted by `predicate`.

        The predicate returns `True` to keep a value, or `False` / an
        `OutputError` to drop it. `False` is reported as a `CoveredError`.
        """

        def check(value: T) -> T | OutputError:
            verdict = predicate(value)
            if verdict is True:
                return value
            if isinstance(verdict, OutputError):
                return verdict
            return CoveredError(f"{value!r} was filtered out.")

        return self.map(check)

    def __iter__(self) -> Iterator[T]:
        return iter(self.successes)

    def __len__(self) -> int:
        return len(self.successes)

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Output)
            and self.successes == other.successes
            and self.error == other.error
        )

    def __repr__(self) -> str:
        if self.error is not None:
            return f"Output(error={self.error!r})"
        return f"Output({list(self.successes)!r})"


def _pick_error(left: OutputError, right: OutputError) -> OutputError:
    if isinstance(left, CoveredError) and not isinstance(right, CoveredError):
        return right
    return left


__all__ = ["Output"]
