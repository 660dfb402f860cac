"""Chord-over-lyric to inline-marker conversion.

Song bodies copied from books and websites usually put chords on their own
row, aligned over the lyric they belong to::

    [Verse 1]
    G       C         G
    Amazing grace how sweet the sound

:func:`convert_chord_sheet` rewrites such a body into the inline format the
parser reads::

    [Verse 1]
    {G}Amazing {C}grace how {G}sweet the sound

Pipeline:

  1. classify_line()               - BLANK / SECTION / CHORD / TAB / LYRIC
  2. extract_chords_with_offsets() - (column, chord) pairs from a chord row
  3. merge_chord_lyric_lines()     - insert markers into the lyric row
  4. convert_chord_sheet()         - full body, ``\\r\\n`` line endings
"""

import logging
import re
from enum import Enum, auto

from .chords import is_chord
from .exceptions import ConversionError
from .parser import section_title

logger = logging.getLogger(__name__)

# Known section-header keywords (case-insensitive)
SECTION_KEYWORDS_RE = re.compile(
    r"^(?:Verse|Chorus|Bridge|Intro|Outro|Solo|Interlude|Instrumental|"
    r"Pre-?Chorus|Tag|Coda|Refrain|Hook|Ending|Turnaround)(?:\s+\d+)?$",
    re.IGNORECASE,
)

# ASCII guitar tab line.  Two formats appear in the wild:
#   Standard:  e|---0---1---  (string name + pipe + fret chars)
#   Compact:   E---------2--  (string name + dashes, no leading pipe)
TAB_LINE_RE = re.compile(r"^[eEBGDAd](?:\|[-\d]|--)")

LINE_ENDING = "\r\n"


class LineType(Enum):
    BLANK = auto()  # empty or whitespace only
    SECTION = auto()  # section header: [Verse 1], Chorus:
    CHORD = auto()  # chord-only row: G  C  D7
    TAB = auto()  # ASCII guitar tab line: e|--0--1--
    LYRIC = auto()  # everything else


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------


def classify_line(line: str) -> LineType:
    stripped = line.strip()
    if not stripped:
        return LineType.BLANK
    if TAB_LINE_RE.match(stripped):
        return LineType.TAB
    if section_title(stripped) is not None:
        return LineType.SECTION
    if SECTION_KEYWORDS_RE.match(stripped.rstrip(":").strip()):
        return LineType.SECTION
    tokens = stripped.split()
    if all(is_chord(t) for t in tokens):
        return LineType.CHORD
    return LineType.LYRIC


def extract_section_title(line: str) -> str:
    """Return the title from ``[Verse 1]``, ``Chorus:`` or a bare ``Bridge``."""
    stripped = line.strip()
    title = section_title(stripped)
    if title is not None:
        return title
    return stripped.rstrip(":").strip()


# ---------------------------------------------------------------------------
# Chord extraction and merge
# ---------------------------------------------------------------------------


def extract_chords_with_offsets(line: str) -> list[tuple[int, str]]:
    """Return ``(column, chord)`` pairs for every chord on a chord row."""
    return [(m.start(), m.group()) for m in re.finditer(r"\S+", line) if is_chord(m.group())]


def merge_chord_lyric_lines(chord_line: str, lyric_line: str) -> str:
    """Insert the chords of *chord_line* into *lyric_line* as ``{chord}`` markers.

    Each marker goes in at the column its chord occupied.  A chord past the
    end of the lyric lands at its own column, the lyric being padded with
    spaces to reach it.

    Example::

        chord_line = "G       C"
        lyric_line = "Amazing grace"
        result     = "{G}Amazing {C}grace"
    """
    chords = extract_chords_with_offsets(chord_line)
    if not chords:
        return lyric_line

    result = lyric_line.ljust(chords[-1][0])
    inserted = 0  # characters inserted so far, shifts every later column

    for offset, chord in chords:
        marker = f"{{{chord}}}"
        pos = offset + inserted
        result = result[:pos] + marker + result[pos:]
        inserted += len(marker)

    return result.rstrip()


def chord_only_line(chord_line: str) -> str:
    return " ".join(f"{{{chord}}}" for _, chord in extract_chords_with_offsets(chord_line))


# ---------------------------------------------------------------------------
# Full conversion
# ---------------------------------------------------------------------------


def convert_lines(text: str) -> list[str]:
    """Convert a chord-over-lyric body into inline-marker lines.

    Section headers are normalised to ``[Title]`` and preceded by a blank
    line.  Blank lines and tab lines are dropped.  A chord row followed by
    a lyric row is merged; a chord row on its own becomes a chord-only line.
    """
    lines = text.splitlines()
    out: list[str] = []

    i = 0
    while i < len(lines):
        lt = classify_line(lines[i])

        if lt in (LineType.BLANK, LineType.TAB):
            i += 1
            continue

        if lt == LineType.SECTION:
            if out:
                out.append("")
            out.append(f"[{extract_section_title(lines[i])}]")
            i += 1
            continue

        if lt == LineType.CHORD:
            next_lt = classify_line(lines[i + 1]) if i + 1 < len(lines) else None
            if next_lt == LineType.LYRIC:
                out.append(merge_chord_lyric_lines(lines[i].rstrip(), lines[i + 1].rstrip()))
                i += 2
            else:
                out.append(chord_only_line(lines[i]))
                i += 1
            continue

        # LineType.LYRIC with no chord row above it
        out.append(lines[i].rstrip())
        i += 1

    return out


def convert_chord_sheet(text: str) -> str:
    """Return *text* converted to inline markers, joined with ``\\r\\n``.

    Raises ConversionError if nothing but blank or tab lines was found.
    """
    lines = convert_lines(text)
    if not any(line and section_title(line) is None for line in lines):
        raise ConversionError("no chord or lyric lines found")
    logger.debug("Converted %d body lines", len(lines))
    return LINE_ENDING.join(lines)
