import pytest

from songsheet.chords import parse_chord, strip_optional
from songsheet.parser import parse_line, parse_song
from songsheet.transpose import (
    UNKNOWN_CHORD,
    canonical_form,
    key_change,
    transpose,
    transpose_line,
    transpose_song,
)

A_FLAT, A, B_FLAT, B, C, C_SHARP, D, E_FLAT, E, F, F_SHARP, G = range(12)

SAMPLE_CHORDS = ["C", "Em7", "D/F#", "(F#m)", "Bbsus4", "Caug", "G7sus4", "Ab(no3)", "Dbmaj9", "Eo"]

SONG = "Title: Amazing\nKey: G\n=====\n[Verse]\n{G}Hello {C}world"


def _root_pitch_class(chord: str) -> int:
    inner, _ = strip_optional(chord)
    return parse_chord(inner.split("/")[0]).pitch_class


# ---------------------------------------------------------------------------
# key_change
# ---------------------------------------------------------------------------


def test_key_change_is_normalised():
    assert key_change(G, E) == 9
    assert key_change(E, G) == 3
    assert key_change(C, C) == 0


# ---------------------------------------------------------------------------
# transpose: scenarios
# ---------------------------------------------------------------------------


def test_minor_seventh_down_to_sharp_key():
    assert transpose("Em7", G, E) == "C#m7"


def test_slash_chord_sides_transposed_independently():
    assert transpose("D/F#", G, E) == "B/D#"


def test_optional_chord_keeps_parentheses():
    assert transpose("(F#m)", E, G) == "(Am)"


def test_optional_slash_chord():
    assert transpose("(D/F#)", G, E) == "(B/D#)"


def test_flat_destination_uses_flats():
    assert transpose("A", E, F) == "B♭"
    assert transpose("G", C, E_FLAT) == "B♭"
    assert transpose("D", C, A_FLAT) == "B♭"


def test_sharp_destination_uses_sharps():
    assert transpose("E", C, A) == "C#"
    assert transpose("A", E, B) == "E"


def test_explicit_governing_key_overrides_destination():
    assert transpose("C", C, C_SHARP, governing_key=F) == "D♭"


# ---------------------------------------------------------------------------
# transpose: unknown chords
# ---------------------------------------------------------------------------


def test_unknown_chord_gives_sentinel():
    assert transpose("ZZ", A, B, B) == UNKNOWN_CHORD == "?"


def test_unknown_chord_drops_suffix():
    assert transpose("Hm7", A, B) == "?"


def test_unknown_side_of_slash_chord():
    assert transpose("ZZ/G", G, A) == "?/A"


def test_unknown_chord_under_null_shift():
    assert transpose("ZZ", C, C, C) == "?"


# ---------------------------------------------------------------------------
# canonical_form
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("chord, expected", [
    ("Cmin", "Cm"),
    ("Cmaj7", "C7"),
    ("Csus4", "Csus"),
    ("C7sus4", "Csus7"),
    ("Cadd9", "C9"),
    ("C(no3)", "C5"),
    ("Caug", "C+"),
    ("Cdim", "Co"),
    ("Csus2", "C2"),
])
def test_canonical_suffixes(chord, expected):
    assert canonical_form(chord, C) == expected


def test_canonical_spelling_depends_on_governing_key():
    assert canonical_form("Bb", C) == "B♭"
    assert canonical_form("Bb", E) == "A#"


# ---------------------------------------------------------------------------
# Properties over every key pair
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("chord", SAMPLE_CHORDS)
def test_null_shift_is_canonical_form(chord):
    for k in range(12):
        assert transpose(chord, k, k, k) == canonical_form(chord, k)


@pytest.mark.parametrize("chord", SAMPLE_CHORDS)
def test_shift_moves_root_by_key_difference(chord):
    original = _root_pitch_class(chord)
    for k1 in range(12):
        for k2 in range(12):
            result = transpose(chord, k1, k2, k2)
            assert _root_pitch_class(result) == (original + (k2 - k1) % 12) % 12


@pytest.mark.parametrize("chord", SAMPLE_CHORDS)
def test_there_and_back_again(chord):
    for k1 in range(12):
        for k2 in range(12):
            there = transpose(chord, k1, k2, k2)
            assert transpose(there, k2, k1, k1) == canonical_form(chord, k1)


# ---------------------------------------------------------------------------
# transpose_line / transpose_song
# ---------------------------------------------------------------------------


def test_transpose_line_returns_new_line():
    line = parse_line("{G}Hello {C}world")
    moved = transpose_line(line, key_change(G, A), A)
    assert moved.text == "{A}Hello {D}world"
    assert moved.chords == ["A", "D"]
    assert line.text == "{G}Hello {C}world"


def test_transpose_line_without_markers_is_same_line():
    line = parse_line("just words")
    assert transpose_line(line, 3, C) is line


def test_transpose_song_to_new_key():
    song = parse_song(SONG)
    moved = transpose_song(song, A)
    assert moved.main_key == A
    assert moved.original_key == G
    assert moved.sections[0].title == "Verse"
    assert moved.sections[0].lines[0].text == "{A}Hello {D}world"
    # The parsed song is untouched
    assert song.sections[0].lines[0].text == "{G}Hello {C}world"
    assert song.main_key == G


def test_transpose_song_twice_keeps_original_key():
    song = transpose_song(transpose_song(parse_song(SONG), A), C)
    assert song.original_key == G
    assert song.sections[0].lines[0].text == "{C}Hello {F}world"


def test_transpose_song_without_key_is_noop():
    song = parse_song("{G}Hello {C}world")
    assert transpose_song(song, A) is song


def test_transpose_song_with_explicit_origin():
    song = parse_song("{G}Hello {C}world")
    moved = transpose_song(song, A, from_key=G)
    assert moved.lines[0].text == "{A}Hello {D}world"


def test_transpose_song_defaults_to_own_key():
    song = parse_song("Key: G\n=====\n{Gmaj7}Hi")
    assert transpose_song(song).lines[0].text == "{G7}Hi"
