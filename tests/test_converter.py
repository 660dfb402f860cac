import pytest

from songsheet.converter import (
    LineType,
    classify_line,
    convert_chord_sheet,
    convert_lines,
    extract_chords_with_offsets,
    extract_section_title,
    merge_chord_lyric_lines,
)
from songsheet.document import join_document
from songsheet.exceptions import ConversionError
from songsheet.parser import parse_song

# ---------------------------------------------------------------------------
# classify_line
# ---------------------------------------------------------------------------


def test_classify_blank():
    assert classify_line("") == LineType.BLANK
    assert classify_line("   ") == LineType.BLANK


def test_classify_tab():
    assert classify_line("e|--0--1--2--|") == LineType.TAB
    assert classify_line("E------2--") == LineType.TAB


def test_classify_section():
    assert classify_line("[Verse 1]") == LineType.SECTION
    assert classify_line("Chorus:") == LineType.SECTION
    assert classify_line("Bridge") == LineType.SECTION


def test_classify_chord_row():
    assert classify_line("G   C   D7") == LineType.CHORD
    assert classify_line("  G/B  (Am)  Bb") == LineType.CHORD


def test_classify_lyric():
    assert classify_line("Amazing grace how sweet the sound") == LineType.LYRIC
    assert classify_line("A man of constant sorrow") == LineType.LYRIC


def test_extract_section_title():
    assert extract_section_title("[Verse 1]") == "Verse 1"
    assert extract_section_title("Chorus:") == "Chorus"
    assert extract_section_title("Bridge") == "Bridge"


# ---------------------------------------------------------------------------
# extract_chords_with_offsets / merge
# ---------------------------------------------------------------------------


def test_extract_offsets():
    assert extract_chords_with_offsets("G  C  Am7") == [(0, "G"), (3, "C"), (6, "Am7")]


def test_extract_offsets_empty_line():
    assert extract_chords_with_offsets("   ") == []


def test_merge_inserts_at_columns():
    assert merge_chord_lyric_lines("G       C", "Amazing grace") == "{G}Amazing {C}grace"


def test_merge_chord_beyond_lyric_lands_at_its_column():
    assert merge_chord_lyric_lines("            D", "Short") == "Short       {D}"


def test_merge_no_chords_returns_lyric_unchanged():
    assert merge_chord_lyric_lines("   ", "Some lyrics") == "Some lyrics"


# ---------------------------------------------------------------------------
# convert_lines / convert_chord_sheet
# ---------------------------------------------------------------------------


BODY = """[Verse 1]
G       C
Amazing grace

Chorus:
G  D
"""


def test_convert_lines():
    assert convert_lines(BODY) == [
        "[Verse 1]",
        "{G}Amazing {C}grace",
        "",
        "[Chorus]",
        "{G} {D}",
    ]


def test_convert_keeps_plain_lyrics_and_drops_tabs():
    text = "Just words\ne|--0--1--|\nB|--1--1--|\n"
    assert convert_lines(text) == ["Just words"]


def test_convert_chord_sheet_uses_crlf():
    assert convert_chord_sheet(BODY) == "[Verse 1]\r\n{G}Amazing {C}grace\r\n\r\n[Chorus]\r\n{G} {D}"


def test_convert_chord_sheet_empty_raises():
    with pytest.raises(ConversionError):
        convert_chord_sheet("\n\ne|--0--|\n")


def test_converted_body_parses():
    song = parse_song(join_document("Title: Amazing\r\nKey: G\r\n", convert_chord_sheet(BODY)))
    assert [s.title for s in song.sections] == ["Verse 1", "Chorus"]
    assert song.sections[0].lines[0].chords == ["G", "C"]
