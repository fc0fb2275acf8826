"""Cyclopts CLI entry point for justify."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import structlog
from cyclopts import App, Parameter

from justify import __version__
from justify.cli.coerce import coerce_argument, consuming_specifiers, unescape
from justify.lib.batch import Justifier
from justify.lib.config.settings import JustifyConfig, load_config
from justify.lib.errors import JustifyError
from justify.lib.specifier import split_format

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = structlog.get_logger(__name__)

app = App(
    name="justify",
    help=(
        "Format and print data like printf(1), padding every column to its widest row. "
        "FORMAT is applied repeatedly until all ARGS are used; put '--' before "
        "arguments that start with a dash."
    ),
    version=__version__,
    help_formatter="plain",
)


def print_rows(
    fmt: str,
    args: Sequence[str],
    config: JustifyConfig,
    *,
    dump: bool = False,
) -> int:
    """Feed ARGS through FORMAT one row at a time and flush to stdout."""

    fmt = unescape(fmt)
    consumers = consuming_specifiers(split_format(fmt))
    justifier = Justifier(config)
    sink = sys.stdout

    if not consumers:
        if args:
            logger.warning("format has no conversions; ignoring arguments", count=len(args))
        justifier.format(sink, fmt)
    else:
        per_row = len(consumers)
        if not args or len(args) % per_row:
            raise ValueError(
                f"FORMAT consumes {per_row} argument(s) per row; got {len(args)}."
            )
        for start in range(0, len(args), per_row):
            chunk = args[start : start + per_row]
            values = [
                coerce_argument(spec, raw)
                for spec, raw in zip(consumers, chunk, strict=True)
            ]
            justifier.vformat(sink, fmt, values)

    if dump:
        print(justifier.dump(), file=sys.stderr)
    return justifier.flush()


@app.default
def root(
    fmt: Annotated[str, Parameter(help="printf-style format applied to each row.")],
    *args: Annotated[str, Parameter(help="Values consumed left to right.")],
    dump: Annotated[
        bool,
        Parameter(name="--dump", help="Describe the pending grid on stderr before printing."),
    ] = False,
    equalize_strings: Annotated[
        bool,
        Parameter(
            name="--equalize-strings",
            help="Pad string columns even when FORMAT gives them no width.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        Parameter(
            name=["--verbose", "-v"],
            help="Log batch activity to stderr; repeat for debug detail.",
        ),
    ] = False,
    log_json: Annotated[
        bool,
        Parameter(name="--log-json", help="Render log lines as JSON."),
    ] = False,
) -> None:
    """Print ARGS through FORMAT with aligned columns."""

    # verbose and log_json are read by main() before parsing; they are declared
    # here so --help lists them.
    config = load_config(Path.cwd())
    if equalize_strings:
        config = replace(config, equalize_strings=True)
    rows = print_rows(fmt, args, config, dump=dump)
    logger.info("printed rows", rows=rows)


_LOGGING_FLAGS = frozenset({"--verbose", "-v", "--log-json"})


def _extract_logging_options(args: Sequence[str]) -> tuple[list[str], int, bool]:
    """Pull logging flags out of argv ahead of the "--" separator.

    Returns the remaining tokens, the verbosity count and whether JSON was asked for.
    """

    cleaned: list[str] = []
    verbosity = 0
    json_mode = False
    for index, arg in enumerate(args):
        if arg == "--":
            cleaned.extend(args[index:])
            break
        if arg not in _LOGGING_FLAGS:
            cleaned.append(arg)
        elif arg == "--log-json":
            json_mode = True
        else:
            verbosity += 1
    return cleaned, verbosity, json_mode


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point used by `justify` and `python -m justify`."""

    from justify.lib.logging import configure_logging

    args = list(sys.argv[1:] if argv is None else argv)

    # Logging goes to stderr so it never mixes with the aligned rows on stdout.
    args, verbosity, json_mode = _extract_logging_options(args)
    configure_logging(json_mode=json_mode, verbosity=verbosity)

    try:
        app(args)
    except JustifyError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from None
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from None
