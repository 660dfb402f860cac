"""Chord transposition.

Shifts chord roots by a number of semitones and re-spells them for the
destination key::

    >>> transpose("Em7", resolve_key("G"), resolve_key("E"))
    'C#m7'
    >>> transpose("D/F#", resolve_key("G"), resolve_key("E"))
    'B/D#'

Each side of a slash chord is transposed on its own.  A side whose root is
not a known key becomes ``?`` with no quality suffix, so one bad chord never
stops a line or a document.
"""

import logging
from dataclasses import replace

from .chords import parse_chord, strip_optional
from .keys import PITCH_CLASSES, display_spelling
from .models import Line, Section, Song
from .parser import MARKER_RE, parse_line

logger = logging.getLogger(__name__)

UNKNOWN_CHORD = "?"


def key_change(from_key: int, to_key: int) -> int:
    """Return the upward semitone shift from *from_key* to *to_key*, in [0, 12)."""
    return (to_key - from_key) % PITCH_CLASSES


def transpose_chord(chord_text: str, delta: int, governing_key: int) -> str:
    """Shift every part of *chord_text* by *delta* semitones.

    Parentheses around the whole chord mark it optional and are kept.
    """
    inner, optional = strip_optional(chord_text.strip())
    parts = []
    for part in inner.split("/"):
        token = parse_chord(part)
        if not token.is_known:
            logger.debug("Cannot transpose chord %r: unknown root %r", chord_text, token.root)
            parts.append(UNKNOWN_CHORD)
            continue
        root = display_spelling(token.pitch_class + delta, governing_key)
        parts.append(token.render(root))
    chord = "/".join(parts)
    return f"({chord})" if optional else chord


def transpose(chord_text: str, from_key: int, to_key: int, governing_key: int | None = None) -> str:
    """Transpose *chord_text* from *from_key* to *to_key*.

    Spellings follow *governing_key*, which defaults to the destination key.
    """
    if governing_key is None:
        governing_key = to_key
    return transpose_chord(chord_text, key_change(from_key, to_key), governing_key)


def canonical_form(chord_text: str, governing_key: int) -> str:
    """Return *chord_text* with its suffix and root spelling normalised.

    ``"Cmin"`` becomes ``"Cm"`` and ``"Bb"`` becomes ``"B♭"`` or ``"A#"``
    depending on *governing_key*.
    """
    return transpose_chord(chord_text, 0, governing_key)


# ---------------------------------------------------------------------------
# Lines and songs
# ---------------------------------------------------------------------------


def transpose_text(text: str, delta: int, governing_key: int) -> str:
    """Transpose every ``{chord}`` marker in a line of raw text."""
    return MARKER_RE.sub(
        lambda m: f"{{{transpose_chord(m.group(1), delta, governing_key)}}}",
        text,
    )


def transpose_line(line: Line, delta: int, governing_key: int) -> Line:
    """Return a new :class:`Line` with every marker transposed."""
    if not line.markers:
        return line
    return parse_line(transpose_text(line.text, delta, governing_key))


def transpose_song(song: Song, to_key: int | None = None, from_key: int | None = None) -> Song:
    """Return a copy of *song* moved from *from_key* to *to_key*.

    *from_key* defaults to the song's current key and *to_key* to
    *from_key*, which normalises chord spellings without shifting them.
    With no usable origin key the song is returned unchanged.
    """
    if from_key is None:
        from_key = song.main_key
    if from_key is None:
        logger.info("Song has no resolvable key; leaving chords unchanged")
        return song
    if to_key is None:
        to_key = from_key

    delta = key_change(from_key, to_key)
    sections = tuple(
        Section(
            title=section.title,
            lines=tuple(transpose_line(line, delta, to_key) for line in section.lines),
        )
        for section in song.sections
    )
    original_key = song.original_key if song.original_key is not None else from_key
    return replace(song, sections=sections, main_key=to_key, original_key=original_key)
