"""Line layout for the three line views.

A line such as ``"{Am}He{C}llo"`` can be shown

* raw, markers intact:              ``{Am}He{C}llo``
* lyrics only, markers removed:     ``Hello``
* chord overlay, markers wrapped:   ``<b>Am</b>He <b>C</b>llo``

When chords are drawn above the lyrics a marker takes no horizontal room,
so two markers closer together than the first chord is wide would collide.
The overlay view is therefore built from a padded copy of the line: after
each marker, the following lyric characters "absorb" the chord's width
plus one gap column, and any width still owed when the next marker starts
is inserted as spaces, just after the last space seen (so whole words
move) or right before the marker.

Padding never reaches the raw or lyrics-only views.
"""

from collections.abc import Callable
from dataclasses import dataclass

from .models import Line
from .parser import MARKER_RE, parse_line

# Blank columns kept between the end of one chord and the start of the next.
CHORD_GAP = 1


def _default_wrap(chord: str) -> str:
    return f"{{{chord}}}"


@dataclass(frozen=True)
class LineViews:
    raw: str
    chorded: str
    lyrics: str


# ---------------------------------------------------------------------------
# Padding
# ---------------------------------------------------------------------------


def padding_insertions(line: Line) -> list[tuple[int, int]]:
    """Return ``(index, spaces)`` insertions, left to right, for *line*."""
    insertions: list[tuple[int, int]] = []
    markers = {m.start: m for m in line.markers}
    text = line.text

    still_needed = 0
    last_space: int | None = None
    i = 0
    while i < len(text):
        marker = markers.get(i)
        if marker is not None:
            if still_needed:
                index = last_space + 1 if last_space is not None else i
                insertions.append((index, still_needed))
            still_needed = marker.width + CHORD_GAP
            last_space = None
            i = marker.end
            continue

        if text[i] == " ":
            last_space = i
        if still_needed:
            still_needed -= 1
        i += 1

    return insertions


def pad_line(line: Line) -> Line:
    """Return a copy of *line* with alignment padding inserted."""
    text = line.text
    # Rightmost first so earlier offsets stay valid.
    for index, spaces in reversed(padding_insertions(line)):
        text = text[:index] + " " * spaces + text[index:]
    if text == line.text:
        return line
    return parse_line(text)


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


def render_raw(line: Line) -> str:
    return line.text


def render_lyrics(line: Line) -> str:
    """Return the line with every marker removed and nothing else changed."""
    return MARKER_RE.sub("", line.text)


def render_overlay(line: Line, wrap: Callable[[str], str] | None = None) -> str:
    """Return the padded line with each marker replaced by ``wrap(chord)``.

    *wrap* defaults to re-emitting the ``{chord}`` marker.
    """
    wrap = wrap or _default_wrap
    return MARKER_RE.sub(lambda m: wrap(m.group(1)), pad_line(line).text)


def render_views(line: Line, wrap: Callable[[str], str] | None = None) -> LineViews:
    return LineViews(
        raw=render_raw(line),
        chorded=render_overlay(line, wrap),
        lyrics=render_lyrics(line),
    )


def render_chords_above(line: Line) -> tuple[str, str]:
    """Return ``(chord_row, lyric_row)`` for plain-text display.

    Each chord is written in the chord row at the lyric column where its
    marker sat in the padded line.
    """
    padded = pad_line(line)
    chord_row = ""
    lyric_row = ""
    pos = 0
    for marker in padded.markers:
        lyric_row += padded.text[pos:marker.start]
        column = len(lyric_row)
        if len(chord_row) > column:
            chord_row += " "
        else:
            chord_row = chord_row.ljust(column)
        chord_row += marker.text
        pos = marker.end
    lyric_row += padded.text[pos:]
    return chord_row.rstrip(), lyric_row.rstrip()
