"""
Interactive toki pona parsing session.

Each line typed at the prompt is parsed and every surviving candidate is
printed. A few words act as commands instead of text:

    exit, quit      leave the REPL
    verbose-mode    toggle candidate counts and JSON output
    tokens-mode     toggle printing the lexed token trees
    xala            toggle "x ala x" partial parsing
    # ...           comment, ignored
"""

import io
import json
import traceback
from dataclasses import dataclass, field

from toki.toki_ast import to_dict
from toki.toki_config import ParseConfig
from toki.toki_errors import UnreachableError
from toki.toki_lexer import lex
from toki.toki_parser import parse
from toki.toki_render import Renderer
from toki.toki_vocabulary import DEFAULT_VOCABULARY, Vocabulary


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


@dataclass
class ReplState:
    config: ParseConfig = field(default_factory=ParseConfig)
    verbose: bool = False
    show_tokens: bool = False
    fmt: str = "bracket"
    vocabulary: Vocabulary = DEFAULT_VOCABULARY


def handle_command(src: str, state: ReplState) -> bool:
    """Applies a mode toggle. Returns False when `src` is not a command."""
    command = src.strip().lower()
    if command == "verbose-mode":
        state.verbose = not state.verbose
        print(f"[mode] >>> Verbose mode {'ON' if state.verbose else 'OFF'}")
        return True
    if command == "tokens-mode":
        state.show_tokens = not state.show_tokens
        print(f"[mode] >>> Tokens mode {'ON' if state.show_tokens else 'OFF'}")
        return True
    if command == "xala":
        partial = not state.config.x_ala_x_partial_parsing
        state.config = state.config.with_options(x_ala_x_partial_parsing=partial)
        print(f"[mode] >>> x ala x partial parsing {'ON' if partial else 'OFF'}")
        return True
    return False


def evaluate(src: str, state: ReplState) -> None:
    """Lexes or parses one line and prints the outcome."""
    if state.show_tokens:
        tokens = lex(src, state.config)
        if tokens.is_error():
            print(f"[{tokens.error.kind}] >>> {tokens.error.message}")
            return
        for candidate in tokens:
            print(json.dumps(to_dict(candidate), ensure_ascii=False))
        return

    output = parse(src, state.config, state.vocabulary)
    if output.is_error():
        print(f"[{output.error.kind}] >>> {output.error.message}")
        return
    if state.verbose:
        print(f"[candidates] >>> {len(output)}")
        print(Renderer("json", state.vocabulary).render(output))
    print(Renderer(state.fmt, state.vocabulary).render(output))


def start_repl(
    config: ParseConfig | None = None,
    verbose: bool = False,
    fmt: str = "bracket",
    vocabulary: Vocabulary | None = None,
) -> None:
    state = ReplState(
        config or ParseConfig(), verbose, False, fmt, vocabulary or DEFAULT_VOCABULARY
    )
    print("toki REPL. Type 'exit' or 'quit' to leave.")

    while True:
        try:
            src = input(">>> ").strip()
            if src in ("exit", "quit"):
                print("Exiting toki REPL.")
                return
            if not src or src.startswith("#"):
                continue
            if handle_command(src, state):
                continue
            try:
                evaluate(src, state)
            except UnreachableError:
                print_traceback()
        except (KeyboardInterrupt, EOFError):
            print("\nExiting toki REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
