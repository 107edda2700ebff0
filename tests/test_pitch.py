from chordlibre.pitch import (
    FLAT_NAMES,
    SHARP_NAMES,
    note_name,
    pitch_class,
    should_prefer_sharps,
    spell,
)


def test_tables_agree_on_naturals():
    for sharp, flat in zip(SHARP_NAMES, FLAT_NAMES):
        if len(sharp) == 1:
            assert sharp == flat
        else:
            assert pitch_class(sharp[0], sharp[1]) == pitch_class(flat[0], flat[1])


def test_pitch_class_wraps():
    assert pitch_class("C", "b") == 11
    assert pitch_class("B", "#") == 0
    assert pitch_class("E") == 4


def test_pitch_class_unknown_letter():
    assert pitch_class("H") is None


def test_note_name_wraps_negative():
    assert note_name(-1, prefer_sharps=True) == "B"
    assert note_name(13, prefer_sharps=False) == "Db"


def test_spell_splits_accidental():
    assert spell(1, prefer_sharps=True) == ("C", "#")
    assert spell(1, prefer_sharps=False) == ("D", "b")
    assert spell(0, prefer_sharps=False) == ("C", None)


def test_should_prefer_sharps_set():
    sharps = {s for s in range(12) if should_prefer_sharps(s)}
    assert sharps == {2, 4, 6, 7, 9, 11}


def test_should_prefer_sharps_is_repeatable():
    assert [should_prefer_sharps(6) for _ in range(3)] == [True, True, True]
    assert [should_prefer_sharps(5) for _ in range(3)] == [False, False, False]


def test_should_prefer_sharps_does_not_wrap():
    assert should_prefer_sharps(14) is False
