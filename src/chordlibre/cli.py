import dataclasses
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from .codec import document_filename, dumps_song, load_song, save_song
from .exceptions import ChordLibreError, ChordParseError, UnknownKeyError
from .models import Chord, MusicalKey
from .parser import parse_chord
from .transpose import (
    should_prefer_sharps,
    transpose_chord_string,
    transpose_song,
    transpose_song_to_key,
)

__version__ = "0.1.0"

_CHORD_FIELDS = tuple(f.name for f in dataclasses.fields(Chord))


def _fail(exc: Exception) -> NoReturn:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


def _parse_key(text: str) -> MusicalKey:
    try:
        return MusicalKey.parse(text)
    except UnknownKeyError as exc:
        raise click.BadParameter(str(exc)) from exc


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="chordlibre")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Parse chord symbols and transpose chords and chordsheets."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("chord")
def parse(chord: str) -> None:
    """Show the components of CHORD, e.g. Dm7b5 or C/G."""
    try:
        parsed = parse_chord(chord)
    except ChordParseError as exc:
        _fail(exc)
    for name in _CHORD_FIELDS:
        value = getattr(parsed, name)
        click.echo(f"{name}: {value if value is not None else '-'}")


@main.command()
@click.argument("chords")
@click.option("-s", "--semitones", type=int, required=True,
              help="Semitones to move (negative moves down).")
@click.option("--key", "key_name", default="C", show_default=True,
              help="Key the chords are in; picks sharp/flat spelling.")
@click.option("--spelling", type=click.Choice(["auto", "sharps", "flats"]),
              default="auto", show_default=True,
              help="Accidental spelling; auto follows the transposed key.")
def transpose(chords: str, semitones: int, key_name: str, spelling: str) -> None:
    """Transpose a space-separated line of CHORDS, e.g. "C G Am F"."""
    if spelling == "auto":
        key = _parse_key(key_name)
        prefer_sharps = should_prefer_sharps((key.semitone + semitones) % 12)
    else:
        prefer_sharps = spelling == "sharps"
    click.echo(transpose_chord_string(chords, semitones, prefer_sharps))


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-s", "--semitones", type=int, default=None,
              help="Semitones to move (negative moves down).")
@click.option("--to-key", "to_key", default=None, metavar="KEY",
              help="Move the song up to this key's tonic instead of by --semitones.")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <title>.chordlibre)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
def song(path: Path, semitones: int | None, to_key: str | None,
         output_path: str | None, stdout: bool) -> None:
    """Transpose the chordsheet document at PATH."""
    if (semitones is None) == (to_key is None):
        raise click.UsageError("Give exactly one of --semitones or --to-key.")

    try:
        original = load_song(path)
    except (ChordLibreError, OSError, UnicodeDecodeError) as exc:
        _fail(exc)

    if to_key is not None:
        result = transpose_song_to_key(original, _parse_key(to_key))
    else:
        result = transpose_song(original, semitones)

    if stdout:
        click.echo(dumps_song(result))
        return

    dest = Path(output_path) if output_path else Path(document_filename(result.title))
    save_song(result, dest)
    click.echo(f"{original.key} -> {result.key}: written to {dest}")
