import json

from click.testing import CliRunner

from chordlibre.cli import main
from chordlibre.codec import load_song, save_song
from chordlibre.models import Line, MusicalKey, Section, Song

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_song(title="Feelings") -> Song:
    return Song(
        title=title,
        key=MusicalKey.C_MAJOR,
        sections=(Section(label="Verse 1", lines=(Line(lyrics="Feelings", chords="C Am F G7"),)),),
    )


def _invoke(*args):
    return CliRunner().invoke(main, list(args))


# ---------------------------------------------------------------------------
# --help / --version
# ---------------------------------------------------------------------------


def test_help_output():
    result = _invoke("--help")
    assert result.exit_code == 0
    assert "transpose" in result.output
    assert "parse" in result.output


def test_version_output():
    result = _invoke("--version")
    assert result.exit_code == 0
    assert "chordlibre" in result.output


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------


def test_parse_prints_components():
    result = _invoke("parse", "Dm7b5/Ab")
    assert result.exit_code == 0
    assert "root: D" in result.output
    assert "quality: m" in result.output
    assert "extension: 7b5" in result.output
    assert "bass: /Ab" in result.output
    assert "accidental: -" in result.output


def test_parse_invalid_chord_exits_1():
    result = _invoke("parse", "H7")
    assert result.exit_code == 1
    assert "Could not parse chord: H7" in result.output


# ---------------------------------------------------------------------------
# transpose
# ---------------------------------------------------------------------------


def test_transpose_follows_target_key():
    result = _invoke("transpose", "C G Am", "--semitones", "2")
    assert result.exit_code == 0
    assert result.output == "D A Bm\n"


def test_transpose_flat_target_key():
    result = _invoke("transpose", "C F G", "--semitones=-2")
    assert result.exit_code == 0
    assert result.output == "Bb Eb F\n"


def test_transpose_uses_given_key():
    # From E, up 2 is F#: sharps.
    result = _invoke("transpose", "E A", "-s", "2", "--key", "E")
    assert result.output == "F# B\n"


def test_transpose_forced_spelling():
    result = _invoke("transpose", "C", "-s", "1", "--spelling", "sharps")
    assert result.output == "C#\n"
    result = _invoke("transpose", "C", "-s", "1", "--spelling", "flats")
    assert result.output == "Db\n"


def test_transpose_bad_key():
    result = _invoke("transpose", "C", "-s", "1", "--key", "H")
    assert result.exit_code == 2
    assert "Unknown key: H" in result.output


# ---------------------------------------------------------------------------
# song
# ---------------------------------------------------------------------------


def test_song_writes_default_filename(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        save_song(_make_song(), "in.chordlibre")
        result = runner.invoke(main, ["song", "in.chordlibre", "-s", "7"])
        assert result.exit_code == 0
        assert "C -> G" in result.output
        song = load_song("Feelings.chordlibre")
    assert song.key is MusicalKey.G_MAJOR
    assert song.sections[0].lines[0].chords == "G Em C D7"


def test_song_to_key_stdout(tmp_path):
    src = save_song(_make_song(), tmp_path / "in.chordlibre")
    result = _invoke("song", str(src), "--to-key", "Bb", "--stdout")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["key"] == "Bb"
    assert data["sections"][0]["lines"][0]["chords"] == "Bb Gm Eb F7"


def test_song_output_option(tmp_path):
    src = save_song(_make_song(), tmp_path / "in.chordlibre")
    dest = tmp_path / "out.chordlibre"
    result = _invoke("song", str(src), "--semitones=-1", "-o", str(dest))
    assert result.exit_code == 0
    assert load_song(dest).key is MusicalKey.B_MAJOR


def test_song_requires_exactly_one_target(tmp_path):
    src = save_song(_make_song(), tmp_path / "in.chordlibre")
    assert _invoke("song", str(src)).exit_code == 2
    assert _invoke("song", str(src), "-s", "1", "--to-key", "D").exit_code == 2


def test_song_invalid_document(tmp_path):
    src = tmp_path / "bad.chordlibre"
    src.write_text("{}", encoding="utf-8")
    result = _invoke("song", str(src), "-s", "1")
    assert result.exit_code == 1
    assert "Invalid song document" in result.output


def test_song_wrong_field_types(tmp_path):
    src = tmp_path / "bad.chordlibre"
    src.write_text('{"title": "x", "key": "C", "sections": null}', encoding="utf-8")
    result = _invoke("song", str(src), "-s", "1", "--stdout")
    assert result.exit_code == 1
    assert "Invalid song document: 'sections' must be a list" in result.output
    assert "Traceback" not in result.output


def test_song_blank_title_default_filename(tmp_path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        save_song(_make_song(title=" "), "in.chordlibre")
        result = runner.invoke(main, ["song", "in.chordlibre", "-s", "2"])
        assert result.exit_code == 0
        assert load_song("untitled.chordlibre").key is MusicalKey.D_MAJOR
