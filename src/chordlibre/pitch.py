"""Pitch-class spelling shared by note transposition and key lookup.

The chromatic scale is indexed by semitone, C = 0.  Each slot has a sharp and a
flat spelling; naturals are spelled the same in both::

    0  1   2  3   4  5  6   7  8   9  10  11
    C  C#  D  D#  E  F  F#  G  G#  A  A#  B     (sharps)
    C  Db  D  Eb  E  F  Gb  G  Ab  A  Bb  B     (flats)
"""

NATURAL_SEMITONES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}

ACCIDENTAL_OFFSETS = {"#": 1, "b": -1}

SHARP_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
FLAT_NAMES = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")

# Target pitch classes spelled with sharps: G, D, A, E, B, F#.
SHARP_KEY_SEMITONES = frozenset({7, 2, 9, 4, 11, 6})


def pitch_class(letter: str, accidental: str | None = None) -> int | None:
    """Return the semitone (0-11) of *letter* + *accidental*, or None if the letter is unknown."""
    base = NATURAL_SEMITONES.get(letter)
    if base is None:
        return None
    return (base + ACCIDENTAL_OFFSETS.get(accidental, 0)) % 12


def note_name(semitone: int, prefer_sharps: bool) -> str:
    """Return the spelled name of *semitone*, wrapping any integer onto 0-11."""
    names = SHARP_NAMES if prefer_sharps else FLAT_NAMES
    return names[semitone % 12]


def spell(semitone: int, prefer_sharps: bool) -> tuple[str, str | None]:
    """Split the spelled name of *semitone* into ``(letter, accidental)``."""
    name = note_name(semitone, prefer_sharps)
    if len(name) == 1:
        return name, None
    return name[0], name[1]


def should_prefer_sharps(target_semitone: int) -> bool:
    """Return True if chords moving to *target_semitone* should be spelled with sharps.

    Circle-of-fifths key signatures collapsed onto the 12 pitch classes: G, D,
    A, E, B and F# take sharps, everything else takes flats.  Only the target
    pitch class matters; the mode and the original key are ignored.
    """
    return target_semitone in SHARP_KEY_SEMITONES
