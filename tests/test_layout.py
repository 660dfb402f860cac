from songsheet.layout import (
    pad_line,
    padding_insertions,
    render_chords_above,
    render_lyrics,
    render_overlay,
    render_raw,
    render_views,
)
from songsheet.parser import parse_line
from songsheet.transpose import transpose_line


def _bold(chord: str) -> str:
    return f"<b>{chord}</b>"


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


def test_three_views():
    views = render_views(parse_line("{A}Hello {D}world"))
    assert views.raw == "{A}Hello {D}world"
    assert views.chorded == "{A}Hello {D}world"
    assert views.lyrics == "Hello world"


def test_overlay_uses_wrapper():
    line = parse_line("{A}Hello {D}world")
    assert render_overlay(line, _bold) == "<b>A</b>Hello <b>D</b>world"


def test_lyrics_view_has_no_padding():
    line = parse_line("{Am}He{C}llo")
    assert render_lyrics(line) == "Hello"


def test_raw_view_has_no_padding():
    line = parse_line("{G}{C}x")
    assert render_raw(line) == "{G}{C}x"


def test_line_without_markers_unchanged():
    line = parse_line("just words")
    assert render_overlay(line, _bold) == "just words"
    assert render_lyrics(line) == "just words"


def test_unterminated_brace_left_alone():
    line = parse_line("Hello {G world")
    assert render_overlay(line, _bold) == "Hello {G world"
    assert render_lyrics(line) == "Hello {G world"


# ---------------------------------------------------------------------------
# Padding
# ---------------------------------------------------------------------------


def test_no_padding_when_lyric_absorbs_chord():
    assert padding_insertions(parse_line("{G}Hello {C}world")) == []


def test_padding_before_marker_inside_word():
    line = parse_line("{Am}He{C}llo")
    assert padding_insertions(line) == [(6, 1)]
    assert render_overlay(line, _bold) == "<b>Am</b>He <b>C</b>llo"


def test_padding_goes_after_last_space():
    line = parse_line("{Amaj7}a b{C}c")
    assert padding_insertions(line) == [(9, 3)]
    assert pad_line(line).text == "{Amaj7}a    b{C}c"


def test_back_to_back_markers():
    line = parse_line("{G}{C}x")
    assert pad_line(line).text == "{G}  {C}x"


def test_padding_keeps_marker_count_and_order():
    line = parse_line("{G}{C}a{Dm7}b {Em}c{F}")
    assert pad_line(line).chords == line.chords == ["G", "C", "Dm7", "Em", "F"]


def test_padding_does_not_touch_original_line():
    line = parse_line("{G}{C}x")
    pad_line(line)
    assert line.text == "{G}{C}x"


def test_null_transposition_keeps_lyrics():
    line = parse_line("{Gmaj7}Hel{Cadd9}lo {(Dsus4)}world")
    for key in range(12):
        assert render_lyrics(transpose_line(line, 0, key)) == render_lyrics(line)


# ---------------------------------------------------------------------------
# render_chords_above
# ---------------------------------------------------------------------------


def test_chords_above_simple():
    assert render_chords_above(parse_line("{A}Hello {D}world")) == ("A     D", "Hello world")


def test_chords_above_padded_word():
    assert render_chords_above(parse_line("{Amaj7}a b{C}c")) == ("Amaj7 C", "a    bc")


def test_chords_above_chord_only_line():
    assert render_chords_above(parse_line("{G} {C} {D}")) == ("G C D", "")


def test_chords_above_no_chords():
    assert render_chords_above(parse_line("la la")) == ("", "la la")
