import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from .exceptions import UnknownKeyError
from .pitch import note_name, pitch_class, should_prefer_sharps

MAX_PREVIOUS_KEYS = 20


@dataclass(frozen=True)
class Chord:
    """A parsed chord symbol.

    Example: "F#m7/C#" is root "F", accidental "#", quality "m", extension "7",
    bass "/C#".  ``modifications`` is part of the document schema but the parser
    folds every modifier (b5, #9, add9) into ``extension``.
    """

    root: str  # one of C D E F G A B
    accidental: str | None = None  # "#" or "b"
    quality: str | None = None  # "m", "maj", "dim", "aug", "+", "sus4", ...
    extension: str | None = None  # "7", "7b5", "9", ...
    modifications: str | None = None
    bass: str | None = None  # stored with its leading slash, e.g. "/G"

    @property
    def display_string(self) -> str:
        """Render the chord back to text, components in fixed order, no separators."""
        parts = [
            self.root,
            self.accidental,
            self.quality,
            self.extension,
            self.modifications,
            self.bass,
        ]
        return "".join(part for part in parts if part)

    def __str__(self) -> str:
        return self.display_string


def _key_name(semitone: int) -> str:
    return note_name(semitone, should_prefer_sharps(semitone))


class MusicalKey(Enum):
    """The 12 major and 12 minor keys, one canonical spelling per semitone."""

    C_MAJOR = "C"
    D_FLAT_MAJOR = "Db"
    D_MAJOR = "D"
    E_FLAT_MAJOR = "Eb"
    E_MAJOR = "E"
    F_MAJOR = "F"
    F_SHARP_MAJOR = "F#"
    G_MAJOR = "G"
    A_FLAT_MAJOR = "Ab"
    A_MAJOR = "A"
    B_FLAT_MAJOR = "Bb"
    B_MAJOR = "B"

    C_MINOR = "Cm"
    D_FLAT_MINOR = "Dbm"
    D_MINOR = "Dm"
    E_FLAT_MINOR = "Ebm"
    E_MINOR = "Em"
    F_MINOR = "Fm"
    F_SHARP_MINOR = "F#m"
    G_MINOR = "Gm"
    A_FLAT_MINOR = "Abm"
    A_MINOR = "Am"
    B_FLAT_MINOR = "Bbm"
    B_MINOR = "Bm"

    @property
    def is_major(self) -> bool:
        return "m" not in self.value

    @property
    def semitone(self) -> int:
        """Chromatic position of the tonic, C/Cm = 0."""
        letter = self.value[0]
        accidental = self.value[1] if self.value[1:2] in ("#", "b") else None
        return pitch_class(letter, accidental)

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_semitone(cls, semitone: int, major: bool) -> "MusicalKey":
        """Return the key whose tonic is *semitone* (any integer, wrapped) in the given mode."""
        name = _key_name(semitone % 12)
        return cls(name if major else f"{name}m")

    @classmethod
    def parse(cls, text: str) -> "MusicalKey":
        """Return the key named by *text*, accepting any enharmonic spelling.

        "Gb", "F#", "C#m" and "Dbm" all resolve to their canonical member.

        Raises UnknownKeyError if *text* is not a key name.
        """
        name = text.strip()
        letter, rest = name[:1], name[1:]
        accidental = None
        if rest[:1] in ("#", "b"):
            accidental, rest = rest[0], rest[1:]
        semitone = pitch_class(letter, accidental)
        if semitone is None or rest not in ("", "m"):
            raise UnknownKeyError(text)
        return cls.from_semitone(semitone, major=(rest == ""))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Line:
    """A single lyric line.

    A line carries either a structured ``chord`` or a ``chords`` chord-line
    string ("C  G  Am") as shown above the lyric on a lead sheet.
    """

    lyrics: str = ""
    chord: Chord | None = None
    chords: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class Section:
    """A labelled section of a song (verse, chorus, bridge, etc.)."""

    label: str  # e.g. "Verse 1", "Chorus"
    lines: tuple[Line, ...] = ()
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class Song:
    """A chordsheet: metadata plus ordered sections."""

    title: str
    key: MusicalKey
    artist: str | None = None
    sections: tuple[Section, ...] = ()
    tempo: int | None = None
    time_signature: str | None = None  # e.g. "4/4", "6/8"
    capo: int | None = None


@dataclass(frozen=True)
class PreviousKey:
    """A key a song was performed in, and when."""

    key: MusicalKey
    performed_at: datetime


def record_key_performed(
    history: tuple[PreviousKey, ...] | list[PreviousKey],
    key: MusicalKey,
    performed_at: datetime | None = None,
) -> tuple[PreviousKey, ...]:
    """Return a new history with *key* appended, keeping the newest MAX_PREVIOUS_KEYS entries."""
    if performed_at is None:
        performed_at = datetime.now(timezone.utc)
    keys = (*history, PreviousKey(key=key, performed_at=performed_at))
    return keys[-MAX_PREVIOUS_KEYS:]
