"""
toki CLI Entrypoint.

This module provides the command-line interface for parsing toki pona text.
It supports bracketed or JSON output, token dumps and an interactive REPL.

Features:
    - Read text from files or inline strings.
    - Lex and parse the text, printing every surviving candidate.
    - Output to console or file.
    - Load parse options from a JSON configuration file.
    - Extend the word classes from a JSON vocabulary file.
    - Launch an interactive REPL.

Example usage:
    toki story.txt
    toki -s "jan li pona." -f json
    toki -s "sina pona ala pona?" --x-ala-x-partial
    toki -s "jan li tonsi." --vocabulary words.json
    toki --repl --verbose

Functions:
    run_toki(source: str, is_string: bool = False, fmt: str = "bracket", out: str | None = None,
             config: ParseConfig | None = None, show_tokens: bool = False,
             vocabulary: Vocabulary | None = None) -> int:
        Runs the pipeline (lex → parse → render → output) and returns the exit status.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments and invokes the appropriate action (REPL or parse).
"""

import argparse
import json
import logging
import sys

from toki.toki_ast import to_dict
from toki.toki_config import ConfigError, ParseConfig, load_config
from toki.toki_lexer import lex
from toki.toki_output import Output
from toki.toki_parser import parse
from toki.toki_render import Renderer
from toki.toki_vocabulary import DEFAULT_VOCABULARY, Vocabulary, VocabularyError

logger = logging.getLogger(__name__)


def report_failure(output: Output) -> None:
    """Prints the error of a failed Output to stderr."""
    error = output.error
    assert error is not None
    print(f"[{error.kind}] >>> {error.message}", file=sys.stderr)


def run_toki(
    source: str,
    is_string: bool = False,
    fmt: str = "bracket",
    out: str | None = None,
    config: ParseConfig | None = None,
    show_tokens: bool = False,
    vocabulary: Vocabulary | None = None,
) -> int:
    """
    Run the toki pipeline: lex, parse, render, and print or write the result.

    Args:
        source (str): The text itself, or the path of a UTF-8 text file.
        is_string (bool): If True, treats `source` as text instead of a file path. Defaults to False.
        fmt (str): Output format, 'bracket' or 'json'. Defaults to 'bracket'.
        out (str | None): Optional path to write the output. If None, prints to stdout.
        config (ParseConfig | None): Parse options. Defaults to `ParseConfig()`.
        show_tokens (bool): If True, prints the lexed token trees instead of parsing.
        vocabulary (Vocabulary | None): Word classes. Defaults to the bundled vocabulary.

    Returns:
        0 when the text was parsed (or lexed), 1 when it was rejected.

    Side Effects:
        - May write the output to a file.
        - Prints results to stdout and errors to stderr.
    """
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()
    text = source.strip()

    # 2. Lex only, or parse and render
    if show_tokens:
        output = lex(text, config)
        if output.is_error():
            report_failure(output)
            return 1
        result = json.dumps([to_dict(tokens) for tokens in output], indent=2, ensure_ascii=False)
    else:
        output = parse(text, config, vocabulary)
        if output.is_error():
            report_failure(output)
            return 1
        logger.info("%d candidate(s)", len(output))
        result = Renderer(fmt, vocabulary or DEFAULT_VOCABULARY).render(output)

    # 3. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(result + "\n")
    else:
        print(result)
    return 0


def build_config(args: argparse.Namespace) -> ParseConfig:
    """Builds the parse options from `--config` and `--x-ala-x-partial`.

    Raises:
        ConfigError: If the configuration file is invalid.
    """
    config = load_config(args.config) if args.config else ParseConfig()
    if args.x_ala_x_partial:
        config = config.with_options(x_ala_x_partial_parsing=True)
    return config


def build_vocabulary(args: argparse.Namespace) -> Vocabulary:
    """Extends the bundled vocabulary with the words of `--vocabulary`.

    Raises:
        VocabularyError: If the vocabulary file is invalid.
    """
    if args.vocabulary:
        return Vocabulary.load_from_json(args.vocabulary, DEFAULT_VOCABULARY)
    return DEFAULT_VOCABULARY


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the toki CLI.

    Parses command-line arguments and dispatches to the appropriate mode:
    - Launches the REPL if no source is given or `--repl` is specified.
    - Otherwise, parses the source and prints every candidate.

    Supported flags:
        - `-s`, `--string`: Interpret source as text instead of a file path.
        - `-f`, `--format`: Output format ('bracket' or 'json'), default is 'bracket'.
        - `-o`, `--out`: Write the output to a file.
        - `--config`: JSON file with parse options.
        - `--vocabulary`: JSON file with extra words per word class.
        - `--x-ala-x-partial`: Leave "x ala x" to the grammar instead of the lexer.
        - `--tokens`: Print the lexed token trees instead of parsing.
        - `--verbose`: Log debug records to stderr.
        - `--repl`: Launch the interactive REPL.

    Returns:
        The process exit status.
    """
    parser = argparse.ArgumentParser(prog="toki", description="Parse toki pona text.")
    parser.add_argument("source", nargs="?", help="Filename or raw text (with -s)")
    parser.add_argument("-s", "--string", action="store_true", help="Interpret source as text")
    parser.add_argument(
        "-f",
        "--format",
        dest="fmt",
        choices=("bracket", "json"),
        default="bracket",
        help="Output format (default: bracket)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument("--config", metavar="FILE", help="JSON file with parse options")
    parser.add_argument(
        "--vocabulary", metavar="FILE", help="JSON file with extra words per word class"
    )
    parser.add_argument(
        "--x-ala-x-partial",
        action="store_true",
        help='Parse "x ala x" in the grammar instead of the lexer',
    )
    parser.add_argument("--tokens", action="store_true", help="Print token trees only")
    parser.add_argument("--verbose", action="store_true", help="Log debug records")
    parser.add_argument("--repl", action="store_true", help="Launch interactive REPL")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"[config] >>> {e}", file=sys.stderr)
        for problem in e.problems:
            print(" -", problem, file=sys.stderr)
        return 1
    try:
        vocabulary = build_vocabulary(args)
    except VocabularyError as e:
        print(f"[vocabulary] >>> {e}", file=sys.stderr)
        for problem in e.problems:
            print(" -", problem, file=sys.stderr)
        return 1

    if args.repl or args.source is None:
        from toki.toki_repl import start_repl

        start_repl(config=config, verbose=args.verbose, fmt=args.fmt, vocabulary=vocabulary)
        return 0
    try:
        return run_toki(
            source=args.source,
            is_string=args.string,
            fmt=args.fmt,
            out=args.out,
            config=config,
            show_tokens=args.tokens,
            vocabulary=vocabulary,
        )
    except OSError as e:
        print(f"[error] >>> {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
