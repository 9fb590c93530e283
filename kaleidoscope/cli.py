"""
Kaleidoscope command line driver.

With no files, reads statements interactively from stdin behind a
`ready> ` prompt. With files, feeds each file line by line. Errors are
reported and the session keeps going; the exit code is 1 if any statement
failed.

Usage:
    kaleidoscope [FILES]... [--dump] [--no-jit] [--log-level LEVEL]
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Tuple

import click

from . import __version__
from .errors import KaleidoscopeError
from .session import Session, SessionConfig

PROMPT = "ready> "


def run_lines(session: Session, lines: Iterable[str], echo_prompt: bool = False) -> int:
    """Feed lines to a session, reporting results. Returns the number of failed statements."""
    failures = 0
    if echo_prompt:
        click.echo(PROMPT, nl=False, err=True)
    for line in lines:
        try:
            result = session.feed(line)
        except KaleidoscopeError as e:
            failures += 1
            click.echo(click.style(str(e), fg="red"), err=True)
        else:
            if result is not None:
                for warning in result.warnings:
                    click.echo(click.style(str(warning), fg="yellow"), err=True)
                click.echo(result.ir, err=True)
                if result.result is not None:
                    click.echo(f"Evaluated to {result.result!r}")
        if echo_prompt:
            click.echo(PROMPT, nl=False, err=True)
    return failures


@click.command()
@click.argument(
    "files",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--dump/--no-dump",
    default=False,
    help="Print the whole module when input ends.",
)
@click.option(
    "--jit/--no-jit",
    default=True,
    help="Evaluate top-level expressions.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
@click.version_option(version=__version__, prog_name="kaleidoscope")
def main(files: Tuple[Path, ...], dump: bool, jit: bool, log_level: str) -> None:
    """Compile Kaleidoscope statements to LLVM IR."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Files share one session, so later files can call earlier definitions
    session = Session(SessionConfig(enable_jit=jit))
    failures = 0
    if files:
        for path in files:
            session.start_file(str(path))
            with path.open("r", encoding="utf-8") as f:
                failures += run_lines(session, f)
    else:
        failures += run_lines(session, sys.stdin, echo_prompt=sys.stdin.isatty())

    if dump:
        click.echo(session.dump_module(), err=True)
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
