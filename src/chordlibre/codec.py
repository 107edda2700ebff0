"""JSON encoding of song documents (``.chordlibre`` files) and key history.

Document shape::

    {
      "title": "Feelings",
      "artist": "Morris Albert",
      "key": "F",
      "tempo": 72,
      "timeSignature": "4/4",
      "capo": 2,
      "sections": [
        {
          "id": "8C1D...",
          "label": "Verse 1",
          "lines": [
            {"id": "...", "lyrics": "Feelings...", "chord": {"root": "F"}},
            {"id": "...", "lyrics": "", "chords": "F  Fm7  Bb"}
          ]
        }
      ]
    }

Optional fields are omitted when unset.  Chord objects use the keys ``root``,
``accidental``, ``quality``, ``ext``, ``modifications`` and ``bass``.
"""

import json
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path

from .exceptions import SongFormatError, UnknownKeyError
from .models import Chord, Line, MusicalKey, PreviousKey, Section, Song
from .parser import ACCIDENTALS, ROOT_LETTERS

DOCUMENT_EXTENSION = ".chordlibre"
UNTITLED_STEM = "untitled"

_INVALID_FILENAME_CHARS_RE = re.compile(r'[:/\\?%*|"<>]')
_BASS_RE = re.compile(r"^/[A-G][#b]?$")

_CHORD_FIELDS = (
    ("root", "root"),
    ("accidental", "accidental"),
    ("quality", "quality"),
    ("extension", "ext"),
    ("modifications", "modifications"),
    ("bass", "bass"),
)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def song_to_dict(song: Song) -> dict:
    """Return the JSON-ready document for *song*."""
    data = {
        "title": song.title,
        "key": song.key.value,
        "sections": [_section_to_dict(section) for section in song.sections],
    }
    _put_optional(data, "artist", song.artist)
    _put_optional(data, "tempo", song.tempo)
    _put_optional(data, "timeSignature", song.time_signature)
    _put_optional(data, "capo", song.capo)
    return data


def dumps_song(song: Song) -> str:
    """Return *song* as pretty-printed JSON with sorted keys."""
    return json.dumps(song_to_dict(song), indent=2, sort_keys=True, ensure_ascii=False)


def save_song(song: Song, path: Path | str) -> Path:
    """Write *song* to *path* as UTF-8 JSON and return the path."""
    dest = Path(path)
    dest.write_text(dumps_song(song) + "\n", encoding="utf-8")
    return dest


def chord_to_dict(chord: Chord) -> dict:
    data = {}
    for attr, name in _CHORD_FIELDS:
        _put_optional(data, name, getattr(chord, attr))
    return data


def _section_to_dict(section: Section) -> dict:
    return {
        "id": _format_id(section.id),
        "label": section.label,
        "lines": [_line_to_dict(line) for line in section.lines],
    }


def _line_to_dict(line: Line) -> dict:
    data = {"id": _format_id(line.id), "lyrics": line.lyrics}
    if line.chord is not None:
        data["chord"] = chord_to_dict(line.chord)
    _put_optional(data, "chords", line.chords)
    return data


def _put_optional(data: dict, name: str, value) -> None:
    if value is not None:
        data[name] = value


def _format_id(value: uuid.UUID) -> str:
    return str(value).upper()


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def song_from_dict(data: dict) -> Song:
    """Build a :class:`~chordlibre.models.Song` from a decoded document.

    Raises SongFormatError if required fields are missing or malformed.
    """
    if not isinstance(data, dict):
        raise SongFormatError("document root must be an object")
    try:
        return Song(
            title=_require_str(data, "title"),
            key=MusicalKey.parse(_require_str(data, "key")),
            artist=_optional(data, "artist", str),
            sections=tuple(_section_from_dict(s) for s in _optional_list(data, "sections")),
            tempo=_optional(data, "tempo", int),
            time_signature=_optional(data, "timeSignature", str),
            capo=_optional(data, "capo", int),
        )
    except UnknownKeyError as exc:
        raise SongFormatError(str(exc)) from exc


def loads_song(text: str) -> Song:
    """Decode a song document from JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SongFormatError(f"not valid JSON ({exc.msg})") from exc
    return song_from_dict(data)


def load_song(path: Path | str) -> Song:
    """Read and decode the song document at *path*."""
    return loads_song(Path(path).read_text(encoding="utf-8"))


def chord_from_dict(data: dict) -> Chord:
    if not isinstance(data, dict):
        raise SongFormatError("chord must be an object")
    values = {attr: _optional(data, name, str) for attr, name in _CHORD_FIELDS}
    if values["extension"] is None:
        values["extension"] = _optional(data, "extension", str)
    root = values["root"]
    if root is None or len(root) != 1 or root not in ROOT_LETTERS:
        raise SongFormatError(f"invalid chord root {root!r}")
    if values["accidental"] not in (None, *ACCIDENTALS):
        raise SongFormatError(f"invalid chord accidental {values['accidental']!r}")
    if values["bass"] is not None and not _BASS_RE.match(values["bass"]):
        raise SongFormatError(f"invalid chord bass {values['bass']!r}")
    return Chord(**values)


def _section_from_dict(data: dict) -> Section:
    if not isinstance(data, dict):
        raise SongFormatError("section must be an object")
    return Section(
        id=_parse_id(data),
        label=_require_str(data, "label"),
        lines=tuple(_line_from_dict(line) for line in _optional_list(data, "lines")),
    )


def _line_from_dict(data: dict) -> Line:
    if not isinstance(data, dict):
        raise SongFormatError("line must be an object")
    chord = data.get("chord")
    return Line(
        id=_parse_id(data),
        lyrics=_require_str(data, "lyrics"),
        chord=chord_from_dict(chord) if chord is not None else None,
        chords=_optional(data, "chords", str),
    )


def _require_str(data: dict, name: str) -> str:
    value = data.get(name)
    if not isinstance(value, str):
        raise SongFormatError(f"'{name}' must be a string")
    return value


def _optional(data: dict, name: str, kind: type):
    value = data.get(name)
    # bool is an int subclass but never a valid tempo or capo
    if value is not None and (not isinstance(value, kind) or isinstance(value, bool)):
        raise SongFormatError(f"'{name}' must be a {kind.__name__}")
    return value


def _optional_list(data: dict, name: str) -> list:
    value = data.get(name, [])
    if not isinstance(value, list):
        raise SongFormatError(f"'{name}' must be a list")
    return value


def _parse_id(data: dict) -> uuid.UUID:
    raw = data.get("id")
    if raw is None:
        return uuid.uuid4()
    try:
        return uuid.UUID(raw)
    except (TypeError, ValueError, AttributeError) as exc:
        raise SongFormatError(f"invalid id {raw!r}") from exc


# ---------------------------------------------------------------------------
# Key history
# ---------------------------------------------------------------------------


def previous_keys_to_json(history) -> str:
    """Encode a key history as a JSON list of ``{"key", "performedAt"}`` objects."""
    return json.dumps(
        [
            {"key": entry.key.value, "performedAt": _format_timestamp(entry.performed_at)}
            for entry in history
        ]
    )


def previous_keys_from_json(text: str) -> tuple[PreviousKey, ...]:
    """Decode a key history written by :func:`previous_keys_to_json`."""
    try:
        entries = json.loads(text)
        return tuple(
            PreviousKey(
                key=MusicalKey.parse(entry["key"]),
                performed_at=_parse_timestamp(entry["performedAt"]),
            )
            for entry in entries
        )
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, UnknownKeyError) as exc:
        raise SongFormatError(f"invalid key history ({exc})") from exc


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc).replace(microsecond=0)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def _parse_timestamp(text: str) -> datetime:
    value = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Filenames
# ---------------------------------------------------------------------------


def sanitize_filename(name: str) -> str:
    """Replace characters that are invalid in filenames with hyphens."""
    return _INVALID_FILENAME_CHARS_RE.sub("-", name)


def document_filename(title: str) -> str:
    """Return the default document filename for *title*; blank titles become "untitled"."""
    stem = sanitize_filename(title.strip()) or UNTITLED_STEM
    return stem + DOCUMENT_EXTENSION
