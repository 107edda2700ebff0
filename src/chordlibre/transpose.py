"""Chord and song transposition.

All functions are pure: inputs are never modified and a new value is returned.

Usage::

    from chordlibre.transpose import transpose_chord_string, transpose_song
    transpose_chord_string("C G Am", 2, prefer_sharps=True)  # "D A Bm"
    transpose_song(song, -3)
"""

import dataclasses
import logging

from .exceptions import ChordParseError
from .models import Chord, Line, MusicalKey, Section, Song
from .parser import parse_chord
from .pitch import pitch_class, should_prefer_sharps, spell

__all__ = [
    "semitones_between",
    "should_prefer_sharps",
    "transpose_chord",
    "transpose_chord_string",
    "transpose_note",
    "transpose_song",
    "transpose_song_to_key",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Notes and chords
# ---------------------------------------------------------------------------


def transpose_note(
    root: str, accidental: str | None, semitones: int, prefer_sharps: bool
) -> tuple[str, str | None]:
    """Move a note by *semitones* and respell it.

    Returns ``(letter, accidental)``.  A root that is not a natural letter name
    is returned unchanged.
    """
    current = pitch_class(root, accidental)
    if current is None:
        return root, accidental
    return spell(current + semitones, prefer_sharps)


def transpose_chord(chord: Chord, semitones: int, prefer_sharps: bool) -> Chord:
    """Return *chord* moved by *semitones*; quality and extension text are kept verbatim."""
    root, accidental = transpose_note(chord.root, chord.accidental, semitones, prefer_sharps)

    bass = chord.bass
    if bass and len(bass) > 1:
        note = bass[1:]  # drop the leading "/"
        bass_accidental = note[1] if len(note) > 1 else None
        bass_root, bass_accidental = transpose_note(
            note[0], bass_accidental, semitones, prefer_sharps
        )
        bass = "/" + bass_root + (bass_accidental or "")

    return dataclasses.replace(chord, root=root, accidental=accidental, bass=bass)


def transpose_chord_string(text: str, semitones: int, prefer_sharps: bool) -> str:
    """Transpose every chord in a space-separated chord line.

    The line is split on single spaces so runs of spaces survive unchanged.
    Tokens that are not chords ("N.C.", "x2", "|") are kept as written.  This
    never raises.
    """
    tokens = text.split(" ")
    return " ".join(_transpose_token(token, semitones, prefer_sharps) for token in tokens)


def _transpose_token(token: str, semitones: int, prefer_sharps: bool) -> str:
    trimmed = token.strip()
    if not trimmed:
        return token
    try:
        chord = parse_chord(trimmed)
    except ChordParseError:
        logger.debug("Leaving non-chord token %r untransposed", trimmed)
        return trimmed
    return transpose_chord(chord, semitones, prefer_sharps).display_string


# ---------------------------------------------------------------------------
# Songs
# ---------------------------------------------------------------------------


def transpose_song(song: Song, semitones: int) -> Song:
    """Return *song* moved by *semitones*.

    The new key keeps the song's mode.  Spelling for every chord is chosen from
    the new key with :func:`~chordlibre.pitch.should_prefer_sharps`.
    """
    new_semitone = (song.key.semitone + semitones) % 12
    prefer_sharps = should_prefer_sharps(new_semitone)
    new_key = MusicalKey.from_semitone(new_semitone, major=song.key.is_major)

    sections = tuple(
        _transpose_section(section, semitones, prefer_sharps) for section in song.sections
    )
    logger.debug(
        "Transposed %r from %s to %s (%+d semitones, %s)",
        song.title,
        song.key,
        new_key,
        semitones,
        "sharps" if prefer_sharps else "flats",
    )
    return dataclasses.replace(song, key=new_key, sections=sections)


def transpose_song_to_key(song: Song, target: MusicalKey) -> Song:
    """Return *song* moved up to the tonic of *target*, keeping the song's own mode."""
    return transpose_song(song, semitones_between(song.key, target))


def semitones_between(source: MusicalKey, target: MusicalKey) -> int:
    """Upward distance in semitones (0-11) from the tonic of *source* to that of *target*."""
    return (target.semitone - source.semitone) % 12


def _transpose_section(section: Section, semitones: int, prefer_sharps: bool) -> Section:
    lines = tuple(_transpose_line(line, semitones, prefer_sharps) for line in section.lines)
    return dataclasses.replace(section, lines=lines)


def _transpose_line(line: Line, semitones: int, prefer_sharps: bool) -> Line:
    chords = line.chords
    if chords:
        chords = transpose_chord_string(chords, semitones, prefer_sharps)
    chord = line.chord
    if chord is not None:
        chord = transpose_chord(chord, semitones, prefer_sharps)
    return dataclasses.replace(line, chords=chords, chord=chord)
