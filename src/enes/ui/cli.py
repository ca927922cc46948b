"""Command-line interface for enes.

Usage::

    enes -m <method> -i <password file> [-o <output file>] [-v]

The report goes to stdout unless ``-o`` names a writable file; diagnostics and
logs go to stderr.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn

from enes.config import ConfigLoadError, ConfigValidationError, load_config
from enes.config.schema import LOG_LEVELS
from enes.constants import METHOD_ALIASES, OUTPUT_FORMATS, WRITE_FAILED_MESSAGE
from enes.engine import (
    METHODS,
    TypeMismatchError,
    UnknownMethodError,
    dump_document,
    estimate,
    resolve_method,
    result_document,
    run_estimation,
)
from enes.observability import (
    reset_correlation_fields,
    set_correlation_fields,
    setup_logging,
    shutdown_logging,
)
from enes.parsing import PasswordFileError, parse_password_file
from enes.ui.render import create_renderer

if TYPE_CHECKING:
    from typing import TextIO

    from enes.domain.models import InputDescriptor, PasswordType
    from enes.estimators.base import ResultSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 1
    show_help: bool = False

    def __str__(self) -> str:
        return self.message


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors as :class:`CLIError` (exit 1)."""

    def error(self, message: str) -> NoReturn:
        raise CLIError(message, exit_code=1, show_help=True)


class _StreamSink:
    """Result sink over a stream the CLI does not own; closing only flushes."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def write(self, text: str) -> int:
        return self._stream.write(text)

    def close(self) -> None:
        self._stream.flush()


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the single estimation command."""

    methods = "\n".join(f"  {name:<24}{spec.summary}" for name, spec in METHODS.items())
    aliases = ", ".join(f"{alias} -> {name}" for alias, name in sorted(METHOD_ALIASES.items()))
    parser = _ArgumentParser(
        prog="enes",
        description=(
            "enes: entropy and guesswork estimates for password sets.\n\n"
            f"Estimation methods:\n{methods}\n\n"
            f"Aliases: {aliases}\n"
        ),
        epilog=(
            "Examples:\n"
            "  enes -m text_entropy -i passwords.txt\n"
            "  enes -m gp_click_entropy_dep -i clicks.txt -v -o report.txt\n"
            "  enes -m gp_click_guesswork -i clicks.txt --format json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-m",
        "--method",
        nargs="?",
        default=None,
        const=None,
        help="Estimation method to use (see list above).",
    )
    parser.add_argument(
        "-i",
        "--input",
        dest="input_path",
        nargs="?",
        default=None,
        const=None,
        help="Path to the password file.",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="output_path",
        nargs="?",
        default=None,
        const="",
        help="Path to the output file (default: standard output).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Print the per-position breakdown (default: overall estimate only).",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Report format (default: text).",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to enes TOML config (default: ./enes.toml if present).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging threshold for stderr diagnostics (default: WARNING).",
    )
    parser.add_argument(
        "--list-methods",
        action="store_true",
        default=False,
        help="List the available estimation methods and exit.",
    )
    return parser


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def run_cli(
    argv: Sequence[str] | None = None,
    *,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Parse argv, run the estimation, and return the process exit code."""

    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr
    parser = build_parser()
    try:
        namespace = parser.parse_args(list(argv) if argv is not None else None)
        return _cmd_estimate(namespace, stdout=out, stderr=err)
    except CLIError as exc:
        print(exc, file=err)
        if exc.show_help:
            parser.print_help(err)
        return exc.exit_code


def main(argv: Sequence[str] | None = None) -> int:
    """Compatibility wrapper for main-module wiring."""

    return run_cli(argv)


# ---------------------------------------------------------------------------
# Command handler
# ---------------------------------------------------------------------------


def _cmd_estimate(args: argparse.Namespace, *, stdout: TextIO, stderr: TextIO) -> int:
    if args.list_methods:
        _render_methods(stdout)
        return 0
    if not args.method:
        raise CLIError("No estimation method specified.", show_help=True)
    if not args.input_path:
        raise CLIError("No password file specified.", show_help=True)

    try:
        spec = resolve_method(args.method)
    except UnknownMethodError as exc:
        raise CLIError(str(exc)) from exc

    config = _load_effective_config(args)
    setup_logging(config["observability"], stream=stderr)
    # CLIError is frozen; a generator context manager would assign its __traceback__.
    token = set_correlation_fields(method=spec.name, input_path=args.input_path)
    try:
        expected = spec.password_type
        descriptor = _read_descriptor(
            args.input_path, expected, encoding=config["parsing"]["encoding"]
        )
        if descriptor.password_type != expected:
            mismatch = TypeMismatchError(spec.name, expected, descriptor.password_type)
            raise CLIError(str(mismatch))

        sink = _open_output(args.output_path, stdout=stdout, stderr=stderr)
        output = config["output"]
        if output["format"] == "text":
            run_estimation(
                descriptor, spec.name, sink, verbose=output["verbose"], error_sink=stderr
            )
        else:
            estimator = estimate(descriptor, spec.name, error_sink=stderr)
            document = result_document(estimator, method=spec.name, descriptor=descriptor)
            _write_document(sink, dump_document(document, output["format"]), stderr=stderr)
    finally:
        reset_correlation_fields(token)
        shutdown_logging()
    return 0


def _render_methods(stream: TextIO) -> None:
    renderer = create_renderer(stream=stream)
    rows = [
        (name, str(spec.password_type), spec.summary) for name, spec in sorted(METHODS.items())
    ]
    renderer.table(("METHOD", "PASSWORD TYPE", "DESCRIPTION"), rows, title="Estimation methods:")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    try:
        return load_config(
            args.config_path,
            cli_overrides={
                "output.verbose": args.verbose,
                "output.format": args.output_format,
                "observability.log_level": args.log_level,
            },
        )
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc)) from exc


def _read_descriptor(path: str, prefer: PasswordType, *, encoding: str) -> InputDescriptor:
    try:
        return parse_password_file(path, prefer=prefer, encoding=encoding)
    except FileNotFoundError as exc:
        raise CLIError(f"File not found: {path}") from exc
    except OSError as exc:
        raise CLIError(f"File could not be read: {path}") from exc
    except PasswordFileError as exc:
        raise CLIError(str(exc)) from exc


def _open_output(path: str | None, *, stdout: TextIO, stderr: TextIO) -> ResultSink:
    if path is None:
        return _StreamSink(stdout)
    if not path:
        print("No output file specified: falling back to standard output", file=stderr)
        return _StreamSink(stdout)
    try:
        return Path(path).open("w", encoding="utf-8")
    except OSError:
        logger.debug("output file not writable", exc_info=True)
        print(f"Could not write to file {path}: falling back to standard output", file=stderr)
        return _StreamSink(stdout)


def _write_document(sink: ResultSink, text: str, *, stderr: TextIO) -> None:
    try:
        with closing(sink):
            sink.write(text)
    except OSError:
        logger.debug("failed writing report", exc_info=True)
        print(WRITE_FAILED_MESSAGE, file=stderr)


__all__ = ["CLIError", "build_parser", "main", "run_cli"]
