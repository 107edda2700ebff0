class ChordLibreError(Exception):
    """Base exception for chordlibre."""


class ChordParseError(ChordLibreError):
    """Raised when a chord symbol cannot be parsed."""


class EmptyChordError(ChordParseError):
    """Raised when the chord symbol is blank after trimming."""

    def __init__(self):
        super().__init__("Chord string is empty")


class ChordNoMatchError(ChordParseError):
    """Raised when the chord symbol does not follow the chord grammar."""

    def __init__(self, chord: str):
        self.chord = chord
        super().__init__(f"Could not parse chord: {chord}")


class UnknownKeyError(ChordLibreError):
    """Raised when a key name does not correspond to any supported key."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Unknown key: {text}")


class SongFormatError(ChordLibreError):
    """Raised when a song document cannot be decoded."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid song document: {reason}")
