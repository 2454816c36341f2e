from collections.abc import Callable

import pytest

from toki.toki_ast import Sentence
from toki.toki_output import Output

Candidate = tuple[Sentence, ...]


@pytest.fixture  # type: ignore[misc]
def only_candidate() -> Callable[[Output[Candidate]], Candidate]:
    """Unwraps an Output that must hold exactly one candidate."""

    def unwrap(output: Output[Candidate]) -> Candidate:
        assert not output.is_error(), output.error
        assert len(output) == 1, output
        return output.successes[0]

    return unwrap
