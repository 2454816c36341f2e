"""
Constants shared by the toki lexer and grammar.

Exports:
    - PUNCTUATION: Sentence-ending punctuation marks.
    - QUOTATION_FAMILIES: Opening quotation mark → accepted closing marks.
    - OPENING_QUOTATION_MARKS / CLOSING_QUOTATION_MARKS
    - NUMBER_WORDS: Number words in the order they must appear.
    - Particles used directly by the grammar.
    - UCSUR code points for sitelen pona punctuation and cartouches.
"""

# Particles
PARTICLE_A = "a"
PARTICLE_ALA = "ala"
PARTICLE_ANU = "anu"
PARTICLE_E = "e"
PARTICLE_EN = "en"
PARTICLE_LA = "la"
PARTICLE_LI = "li"
PARTICLE_NANPA = "nanpa"
PARTICLE_O = "o"
PARTICLE_PI = "pi"
PARTICLE_SEME = "seme"
PARTICLE_TASO = "taso"

# Particles that form an and-conjunction when used as a nesting rule.
CONJUNCTION_PARTICLES = frozenset({PARTICLE_EN, PARTICLE_LI, PARTICLE_O, PARTICLE_E})

# Number words, grouped by the position they may take in a number.
NUMBER_WORDS: tuple[tuple[str, ...], ...] = (
    ("ale", "ali"),
    ("mute",),
    ("luka",),
    ("tu",),
    ("wan",),
)

# UCSUR sitelen pona
START_OF_CARTOUCHE = "\U000f1990"
END_OF_CARTOUCHE = "\U000f1991"
COMBINING_CARTOUCHE_EXTENSION = "\U000f1992"
UCSUR_MIDDLE_DOT = "\U000f199c"
UCSUR_COLON = "\U000f199d"

PUNCTUATION = frozenset({".", ":", ";", "?", "!", UCSUR_MIDDLE_DOT, UCSUR_COLON})
COMMA = ","

QUOTATION_FAMILIES: dict[str, frozenset[str]] = {
    '"': frozenset({'"', "”"}),
    "“": frozenset({'"', "”"}),
    "«": frozenset({"»"}),
    "「": frozenset({"」"}),
}
OPENING_QUOTATION_MARKS = frozenset(QUOTATION_FAMILIES)
CLOSING_QUOTATION_MARKS = frozenset().union(*QUOTATION_FAMILIES.values())

VOWELS = "aeiou"
