# src/typedjson/cli.py
from __future__ import annotations

import json
import logging
from typing import IO, Optional

import click

from .codec import parse, read_envelope
from .errors import MalformedEnvelopeError


def _read(stream: IO[str]) -> tuple:
    try:
        return read_envelope(stream.read())
    except MalformedEnvelopeError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group(help="typedjson — inspect JSON envelopes produced by typedjson.stringify")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
def app(verbose: bool) -> None:
    """Root click Group. Tests import this symbol."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@app.command(help="List the annotations of an envelope, one per line.")
@click.argument("source", type=click.File("r"), default="-")
def inspect(source: IO[str]) -> None:
    _, meta = _read(source)
    for entry in meta or []:
        click.echo(f"{json.dumps(entry['path'], ensure_ascii=False)}\t{entry['type']}")


@app.command(help="Print only the plain JSON member of an envelope.")
@click.argument("source", type=click.File("r"), default="-")
@click.option("--indent", type=int, default=None, help="Pretty-print with this many spaces.")
def strip(source: IO[str], indent: Optional[int]) -> None:
    tree, _ = _read(source)
    if indent:
        click.echo(json.dumps(tree, indent=indent, ensure_ascii=False))
    else:
        click.echo(json.dumps(tree, separators=(",", ":"), ensure_ascii=False))


@app.command(help="Revive an envelope fully and report whether it is well formed.")
@click.argument("source", type=click.File("r"), default="-")
def check(source: IO[str]) -> None:
    text = source.read()
    try:
        _, meta = read_envelope(text)
        parse(text)
    except MalformedEnvelopeError as exc:
        raise click.ClickException(str(exc)) from exc
    count = len(meta or [])
    click.echo(f"ok: {count} annotation(s)")


# Maintain a runnable module for manual use:
if __name__ == "__main__":
    app()
