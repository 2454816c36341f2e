"""
Renders parsed toki pona sentences back into bracketed toki pona text.

This module defines the `BracketEmitter` class, which writes one line per
parse candidate. The words are the ones that were parsed; the brackets show
how the parser grouped them, so two candidates for an ambiguous sentence can
be told apart at a glance:

    [jan] li [pona].
    [ona] li [moku] e [kili] anu [telo].
    ([jan] anu [soweli]) en [waso] li [lape].

Notation:
    - Every phrase is wrapped in square brackets.
    - A grouping nested inside another grouping is wrapped in parentheses.
    - "pi" and "nanpa" phrases are rendered inside their parent's brackets.

Behavior:
    - Maintains a line buffer (`lines`) retrieved with `get_output()`.
    - Dispatches nodes to `emit_<kind>` methods using `toki_ast.kind_of`.

Raises:
    - `NotImplementedError`: If a node has no corresponding `emit_*` method.
"""

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
    MultiplePhrases,
    MultiplePredicates,
    NanpaModifier,
    Numbers,
    OClause,
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
    XAlaX,
    kind_of,
)
from toki.toki_constants import (
    PARTICLE_ALA,
    PARTICLE_ANU,
    PARTICLE_E,
    PARTICLE_EN,
    PARTICLE_LA,
    PARTICLE_LI,
    PARTICLE_O,
    PARTICLE_PI,
)
from toki.toki_vocabulary import DEFAULT_VOCABULARY, Vocabulary


class BracketEmitter:
    """Emits bracketed toki pona text from parse candidates.

    Attributes:
        lines (list[str]): One rendered line per emitted candidate.
        vocabulary (Vocabulary): Decides which subjects drop "li".
    """

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> None:
        self.lines: list[str] = []
        self.vocabulary = vocabulary

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def emit_candidate(self, sentences: tuple[Sentence, ...]) -> None:
        """Appends one line holding every sentence of a candidate."""
        self.lines.append(" ".join(self.emit(sentence) for sentence in sentences))

    def emit(self, node: Any) -> str:
        """Renders any node by dispatching on its kind.

        Raises:
            NotImplementedError: If there is no emitter method for the node kind.
        """
        method = getattr(self, f"emit_{kind_of(node)}", None)
        if method is None:
            raise NotImplementedError(f"No emitter method for node kind '{kind_of(node)}'")
        return method(node)

    # Word units

    def emit_default_word(self, node: DefaultWord) -> str:
        return node.word

    def emit_reduplication(self, node: Reduplication) -> str:
        return " ".join([node.word] * node.count)

    def emit_x_ala_x(self, node: XAlaX) -> str:
        return f"{node.word} {PARTICLE_ALA} {node.word}"

    def emit_numbers(self, node: Numbers) -> str:
        return " ".join(node.numbers)

    # Modifiers

    def emit_default_modifier(self, node: DefaultModifier) -> str:
        return self.emit(node.word)

    def emit_proper_words_modifier(self, node: ProperWordsModifier) -> str:
        return node.words

    def emit_pi_modifier(self, node: PiModifier) -> str:
        return f"{PARTICLE_PI} {self.emit(node.phrase)}"

    def emit_nanpa_modifier(self, node: NanpaModifier) -> str:
        return f"{self.emit(node.nanpa)} {self.emit(node.phrase)}"

    def emit_quotation_modifier(self, node: QuotationModifier) -> str:
        return self.emit(node.quotation)

    # Phrases

    def _with_modifiers(self, head: str, modifiers: tuple) -> str:
        return " ".join([head, *(self.emit(modifier) for modifier in modifiers)])

    def emit_default_phrase(self, node: DefaultPhrase) -> str:
        return self._with_modifiers(self.emit(node.head_word), node.modifiers)

    def emit_preverb_phrase(self, node: PreverbPhrase) -> str:
        preverb = self._with_modifiers(self.emit(node.preverb), node.modifiers)
        return f"{preverb} {self.emit(node.phrase)}"

    def emit_preposition_phrase(self, node: PrepositionPhrase) -> str:
        return self.emit(node.preposition)

    def emit_quotation_phrase(self, node: QuotationPhrase) -> str:
        return self.emit(node.quotation)

    def emit_phrases(self, node: MultiplePhrases, particle: str, nested: bool = False) -> str:
        """
        Renders a phrase grouping.

        Parameters
        ----------
        node : MultiplePhrases
            The grouping to render.
        particle : str
            The particle joining a conjunction at this position ("en", "li", "o" or "e").
        nested : bool
            True when the grouping is a member of another grouping.

        Returns
        -------
        str
            The bracketed phrases.
        """
        match node:
            case SinglePhrase(phrase):
                return f"[{self.emit(phrase)}]"
            case ConjunctionPhrases(groups):
                joiner = particle
            case DisjunctionPhrases(groups):
                joiner = PARTICLE_ANU
        text = f" {joiner} ".join(self.emit_phrases(group, particle, True) for group in groups)
        return f"({text})" if nested else text

    def emit_preposition(self, node: Preposition) -> str:
        preposition = self._with_modifiers(self.emit(node.preposition), node.modifiers)
        return f"{preposition} {self.emit_phrases(node.phrases, PARTICLE_EN)}"

    # Predicates

    def emit_predicates(self, node: MultiplePredicates, particle: str, nested: bool = False) -> str:
        """Renders predicates; `particle` is "li" or "o"."""
        match node:
            case SinglePredicate(predicate):
                return f"[{self.emit(predicate)}]"
            case AssociatedPredicates(predicates, objects, prepositions):
                parts = [self.emit_phrases(predicates, particle)]
                if objects is not None:
                    parts.append(f"{PARTICLE_E} {self.emit_phrases(objects, PARTICLE_E)}")
                parts.extend(self.emit(preposition) for preposition in prepositions)
                text = " ".join(parts)
                return f"({text})" if nested else text
            case ConjunctionPredicates(groups):
                joiner = particle
            case DisjunctionPredicates(groups):
                joiner = PARTICLE_ANU
        text = f" {joiner} ".join(self.emit_predicates(group, particle, True) for group in groups)
        return f"({text})" if nested else text

    # Clauses

    def emit_phrases_clause(self, node: PhrasesClause) -> str:
        return self.emit_phrases(node.phrases, PARTICLE_EN)

    def emit_vocative_clause(self, node: VocativeClause) -> str:
        return f"{self.emit_phrases(node.phrases, PARTICLE_EN)} {PARTICLE_O}"

    def emit_li_clause(self, node: LiClause) -> str:
        subjects = self.emit_phrases(node.subjects, PARTICLE_EN)
        predicates = self.emit_predicates(node.predicates, PARTICLE_LI)
        # "mi" and "sina" drop the "li"
        match node.subjects:
            case SinglePhrase(DefaultPhrase(DefaultWord(word), ())) if (
                self.vocabulary.is_special_subject(word)
            ):
                return f"{subjects} {predicates}"
        return f"{subjects} {PARTICLE_LI} {predicates}"

    def emit_o_clause(self, node: OClause) -> str:
        predicates = self.emit_predicates(node.predicates, PARTICLE_O)
        if node.subjects is None:
            return f"{PARTICLE_O} {predicates}"
        return f"{self.emit_phrases(node.subjects, PARTICLE_EN)} {PARTICLE_O} {predicates}"

    def emit_prepositions_clause(self, node: PrepositionsClause) -> str:
        return " ".join(self.emit(preposition) for preposition in node.prepositions)

    def emit_quotation_clause(self, node: QuotationClause) -> str:
        return self.emit(node.quotation)

    def emit_full_clause(self, node: FullClause) -> str:
        parts = []
        if node.taso is not None:
            parts.append(self.emit(node.taso))
        parts.append(self.emit(node.clause))
        if node.anu_seme is not None:
            parts.append(f"{PARTICLE_ANU} {self.emit(node.anu_seme)}")
        return " ".join(parts)

    def emit_sentence(self, node: Sentence) -> str:
        clauses = f" {PARTICLE_LA} ".join(self.emit(clause) for clause in node.la_clauses)
        return f"{clauses}{node.punctuation}"

    def emit_quotation(self, node: Quotation) -> str:
        sentences = " ".join(self.emit(sentence) for sentence in node.sentences)
        return f"{node.left_mark}{sentences}{node.right_mark}"
