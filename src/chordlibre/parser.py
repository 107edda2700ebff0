"""Chord symbol parser.

Grammar, over the input with surrounding whitespace trimmed::

    ROOT ACCIDENTAL? BODY ("/" ROOT ACCIDENTAL?)?

    ROOT        one of A B C D E F G (uppercase only)
    ACCIDENTAL  "#" or "b"
    BODY        everything up to the first "/", possibly empty

BODY is split into quality and extension by the first matching prefix:

+-------------------+-----------------------+----------------------------+
| BODY starts with  | quality               | extension                  |
+===================+=======================+============================+
| ``maj``           | ``maj``               | remainder                  |
+-------------------+-----------------------+----------------------------+
| ``m``             | ``m``                 | remainder (``7b5``, ...)   |
+-------------------+-----------------------+----------------------------+
| ``dim``           | ``dim``               | remainder                  |
+-------------------+-----------------------+----------------------------+
| ``aug`` / ``+``   | ``aug`` / ``+``       | remainder                  |
+-------------------+-----------------------+----------------------------+
| ``sus``           | first 4 chars         | remainder                  |
|                   | (all of it if < 4)    |                            |
+-------------------+-----------------------+----------------------------+
| anything else     | none                  | whole BODY                 |
+-------------------+-----------------------+----------------------------+

Usage::

    from chordlibre.parser import parse_chord
    chord = parse_chord("Dm7b5")
    chord.quality, chord.extension  # ("m", "7b5")
"""

from .exceptions import ChordNoMatchError, EmptyChordError
from .models import Chord

ROOT_LETTERS = "ABCDEFG"
ACCIDENTALS = "#b"

# Quality prefixes that take a fixed number of characters, in priority order.
# "maj" must be tried before "m".
_FIXED_QUALITIES = ("maj", "m", "dim", "aug", "+")


def parse_chord(text: str) -> Chord:
    """Parse a chord symbol such as ``"C"``, ``"Dm7b5"``, ``"C/G"`` or ``"F#sus4"``.

    Raises:
        EmptyChordError:   *text* is blank.
        ChordNoMatchError: *text* does not follow the chord grammar.
    """
    trimmed = text.strip()
    if not trimmed:
        raise EmptyChordError()

    root, accidental, pos = _scan_note(trimmed, 0)
    if root is None:
        raise ChordNoMatchError(trimmed)

    body, slash, bass_text = trimmed[pos:].partition("/")
    bass = None
    if slash:
        bass_root, bass_accidental, end = _scan_note(bass_text, 0)
        if bass_root is None or end != len(bass_text):
            raise ChordNoMatchError(trimmed)
        bass = "/" + bass_root + (bass_accidental or "")

    quality, extension, modifications = split_quality(body)
    return Chord(
        root=root,
        accidental=accidental,
        quality=quality,
        extension=extension,
        modifications=modifications,
        bass=bass,
    )


def split_quality(body: str) -> tuple[str | None, str | None, str | None]:
    """Split the text between root and slash into ``(quality, extension, modifications)``.

    ``modifications`` is always None; modifiers stay in the extension.
    """
    if not body:
        return None, None, None

    for prefix in _FIXED_QUALITIES:
        if body.startswith(prefix):
            return prefix, body[len(prefix):] or None, None

    if body.startswith("sus"):
        # The 4th character is taken as-is: "susX7" gives quality "susX".
        if len(body) >= 4:
            return body[:4], body[4:] or None, None
        return body, None, None

    return None, body, None


def _scan_note(text: str, pos: int) -> tuple[str | None, str | None, int]:
    """Read a root letter and optional accidental at *pos*; return them and the next position."""
    if pos >= len(text) or text[pos] not in ROOT_LETTERS:
        return None, None, pos
    root = text[pos]
    pos += 1
    accidental = None
    if pos < len(text) and text[pos] in ACCIDENTALS:
        accidental = text[pos]
        pos += 1
    return root, accidental, pos
