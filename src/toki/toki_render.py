"""
Provides the `Renderer` class and emitter interfaces for printing parse forests.

Classes and Features:
    - Emitter (Protocol): Interface for all output emitters. Requires `__init__`,
      `emit_candidate` and `get_output`.
    - BracketEmitter: Re-renders each candidate as bracketed toki pona text.
    - JsonEmitter: Serializes each candidate with `toki_ast.to_dict`.
    - Renderer: Picks the emitter for a target ("bracket", "json") and feeds it
      every candidate of a parse.

Usage:
    The Renderer takes the candidates of a successful `parse` and returns text.

Example:
    >>> renderer = Renderer("bracket")
    >>> print(renderer.render(parse("jan li pona.")))
    [jan] li [pona].

Raises:
    ValueError: If the target is not supported.
    TypeError: If a candidate is not a tuple of `Sentence` nodes.
"""

import json
from collections.abc import Iterable
from typing import Protocol

from toki.emitters.text_emitter import BracketEmitter
from toki.toki_ast import Sentence, to_dict
from toki.toki_vocabulary import DEFAULT_VOCABULARY, Vocabulary


class Emitter(Protocol):  # pragma: no cover
    """Protocol for all candidate emitters.

    Methods:
        __init__(vocabulary): Initializes the emitter for a vocabulary.
        emit_candidate(sentences): Adds one parse candidate to the output.
        get_output(): Returns the complete output as a string.
    """

    def __init__(self, vocabulary: Vocabulary) -> None: ...  # pragma: no cover

    def emit_candidate(self, sentences: tuple[Sentence, ...]) -> None: ...  # pragma: no cover

    def get_output(self) -> str: ...  # pragma: no cover


class JsonEmitter:
    """Emits the candidates as a JSON list, one entry per candidate.

    The tree is serialized as parsed, so `vocabulary` is not consulted.
    """

    def __init__(
        self, vocabulary: Vocabulary = DEFAULT_VOCABULARY, indent: int | None = 2
    ) -> None:
        self.candidates: list[list[dict]] = []
        self.vocabulary = vocabulary
        self.indent = indent

    def emit_candidate(self, sentences: tuple[Sentence, ...]) -> None:
        self.candidates.append(to_dict(sentences))

    def get_output(self) -> str:
        return json.dumps(self.candidates, indent=self.indent, ensure_ascii=False)


EmitterType = type[Emitter]
"""Alias for a concrete Emitter class type."""

EMITTERS: dict[str, EmitterType] = {
    "bracket": BracketEmitter,
    "text": BracketEmitter,
    "json": JsonEmitter,
}


class Renderer:
    """Dispatches parse candidates to the emitter of the selected target.

    Attributes:
        emitter (Emitter): The selected emitter instance.
    """

    def __init__(self, target: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> None:
        """Initializes the renderer with the desired output target.

        Args:
            target: The output format ("bracket", "text" or "json").
            vocabulary: The word classes the candidates were parsed with.

        Raises:
            ValueError: If the target is not supported.
        """
        target = target.lower()
        if target not in EMITTERS:
            raise ValueError(f"Unknown output format: {target!r}")
        self.emitter: Emitter = EMITTERS[target](vocabulary)

    def render(self, candidates: Iterable[tuple[Sentence, ...]]) -> str:
        """Renders every candidate with the selected emitter.

        Args:
            candidates: Sentence tuples, e.g. a successful `Output` from `parse`.

        Returns:
            The emitted text.

        Raises:
            TypeError: If a candidate is not a tuple of Sentence nodes.
        """
        for candidate in candidates:
            if not isinstance(candidate, tuple) or not all(
                isinstance(sentence, Sentence) for sentence in candidate
            ):
                raise TypeError("Each candidate must be a tuple of Sentence instances.")
            self.emitter.emit_candidate(candidate)
        return self.emitter.get_output()
