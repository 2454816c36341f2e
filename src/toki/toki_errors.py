"""
Error kinds reported by the toki parsing engine.

Every recoverable failure is an `OutputError`. These are never raised inside
the engine: mappers and filter predicates *return* them and the combinators
fold them into the failure channel of an `Output`.

Classes:
    OutputError: Base class, carries a `kind` tag and a human readable message.
    UnexpectedError: A concrete mismatch (got X, expected Y).
    UnrecognizedError: Plausible input rejected by a vocabulary or structural check.
    CoveredError: "This alternative does not apply, a sibling covers the input."
    TodoError: A grammar feature that is deliberately not implemented.
    DepthError: Input nested deeper than the configured limit.
    RecursionDepthError: Input too long or deep for the interpreter stack.
    UnreachableError: Internal invariant violation. Raised, never folded.
"""


class OutputError(Exception):
    """Base class of the structured errors carried by a failed `Output`.

    Attributes:
        kind (str): Short tag naming the error kind.
        message (str): Human readable description.
    """

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, OutputError)
            and self.kind == other.kind
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.message))


class UnexpectedError(OutputError):
    """Raised when a token differs from what the grammar expected.

    Attributes:
        unexpected (str): Description of what was found.
        expected (str): Description of what was expected.
    """

    kind = "unexpected"

    def __init__(self, unexpected: str, expected: str) -> None:
        super().__init__(f"Unexpected {unexpected}. {expected} were expected instead.")
        self.unexpected = unexpected
        self.expected = expected


class UnrecognizedError(OutputError):
    """Raised for well-formed input that fails a vocabulary or structural check."""

    kind = "unrecognized"

    def __init__(self, token: str) -> None:
        super().__init__(f"{token} is unrecognized.")
        self.token = token


class CoveredError(OutputError):
    """Marks an alternative that is expected to be covered by a sibling."""

    kind = "covered"

    def __init__(self, message: str = "Covered by another alternative.") -> None:
        super().__init__(message)


class TodoError(OutputError):
    """Marks grammar that is recognised but not yet supported."""

    kind = "todo"

    def __init__(self, feature: str) -> None:
        super().__init__(f"{feature} is not yet implemented.")
        self.feature = feature


class DepthError(OutputError):
    """Reported when nesting exceeds the configured limit."""

    kind = "depth"

    def __init__(self, limit: int) -> None:
        super().__init__(f"Nesting deeper than {limit} levels is not supported.")
        self.limit = limit


class RecursionDepthError(DepthError):
    """Reported when the input exhausts the interpreter stack, nested or not."""

    def __init__(self, limit: int) -> None:
        OutputError.__init__(self, "Input is too long or too deeply nested to parse.")
        self.limit = limit


class UnreachableError(Exception):
    """Internal invariant violation. Always raised, never folded into an Output."""

    def __init__(self) -> None:
        super().__init__("Reached unreachable error.")


__all__ = [
    "CoveredError",
    "DepthError",
    "OutputError",
    "RecursionDepthError",
    "TodoError",
    "UnexpectedError",
    "UnreachableError",
    "UnrecognizedError",
]
