"""Song text parser.

Turns a raw song document into a :class:`~songsheet.models.Song`.

Document format::

    Title: Amazing Grace
    Author: John Newton
    Key: G
    ==========
    [Verse 1]
    A{G}mazing {C}grace how {G}sweet the sound

The header runs up to a delimiter line of five or more ``=``.  Each header
line is ``Name: Value``; names are lowercased with spaces turned into
underscores (``Main Key`` becomes ``main_key``) and a repeated name
overwrites the earlier value.  A document with no delimiter line is all
body.

In the body, blank lines are skipped, ``[Title]`` starts a new section and
every other line is a lyric line whose ``{chord}`` markers are extracted
with their offsets.  Lines before the first section header go into an
untitled section.
"""

import logging
import re
from enum import Enum, auto
from types import MappingProxyType

from .chords import parse_chord
from .keys import resolve_key
from .models import Line, Marker, Section, Song

logger = logging.getLogger(__name__)

DELIMITER_RE = re.compile(r"^\s*={5,}\s*$")

# A {chord} marker.  Nested or unbalanced braces are left as literal text.
MARKER_RE = re.compile(r"\{([^{}\r\n]*)\}")

SECTION_RE = re.compile(r"^\[(.*)\]$")

KEY_METADATA_NAMES = ("key", "main_key")


class ParserState(Enum):
    HEADER = auto()
    BODY = auto()


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------


def normalize_metadata_name(name: str) -> str:
    return name.strip().lower().replace(" ", "_")


def parse_metadata_line(line: str) -> tuple[str, str] | None:
    """Split ``"Name: Value"`` on the first colon.

    Returns None for lines without a colon or with an empty name.
    """
    name, sep, value = line.partition(":")
    if not sep:
        return None
    name = normalize_metadata_name(name)
    if not name:
        return None
    return name, value.strip()


def metadata_key(metadata) -> int | None:
    """Resolve the song key from ``key`` or ``main_key`` metadata."""
    for name in KEY_METADATA_NAMES:
        value = metadata.get(name)
        if value:
            return resolve_key(value)
    return None


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------


def section_title(line: str) -> str | None:
    """Return the title if *line* is a ``[Title]`` section header, else None."""
    m = SECTION_RE.match(line.strip())
    return m.group(1).strip() if m else None


def parse_line(text: str) -> Line:
    """Build a :class:`Line`, trimming whitespace inside each marker.

    ``"{ G }Hello"`` becomes ``"{G}Hello"`` with one marker at offset 0.
    """
    text = MARKER_RE.sub(lambda m: f"{{{m.group(1).strip()}}}", text)
    markers = tuple(
        Marker(
            start=m.start(),
            end=m.end(),
            text=m.group(1),
            tokens=_marker_tokens(m.group(1)),
        )
        for m in MARKER_RE.finditer(text)
    )
    return Line(text=text, markers=markers)


def _marker_tokens(chord_text: str) -> tuple:
    tokens = tuple(parse_chord(part) for part in chord_text.split("/"))
    for token in tokens:
        if not token.is_known:
            logger.debug("Unrecognized chord root %r in marker {%s}", token.root, chord_text)
    return tokens


# ---------------------------------------------------------------------------
# Full parser
# ---------------------------------------------------------------------------


def has_delimiter(lines: list[str]) -> bool:
    return any(DELIMITER_RE.match(line) for line in lines)


def parse_song(text: str) -> Song:
    """Parse a raw song document into a :class:`Song`.

    Never raises for bad content: unknown chords become tokens with no pitch
    class and an unresolvable key leaves ``main_key`` as None.
    """
    lines = text.splitlines()
    state = ParserState.HEADER if has_delimiter(lines) else ParserState.BODY

    metadata: dict[str, str] = {}
    sections: list[tuple[str, list[Line]]] = []

    for raw in lines:
        if state == ParserState.HEADER:
            if DELIMITER_RE.match(raw):
                state = ParserState.BODY
                continue
            entry = parse_metadata_line(raw)
            if entry is not None:
                name, value = entry
                metadata[name] = value
            continue

        stripped = raw.strip()
        if not stripped:
            continue

        title = section_title(stripped)
        if title is not None:
            sections.append((title, []))
            continue

        if not sections:
            sections.append(("", []))
        sections[-1][1].append(parse_line(stripped))

    key = metadata_key(metadata)
    if key is None and any(metadata.get(n) for n in KEY_METADATA_NAMES):
        logger.warning("Could not resolve song key %r", metadata.get("key") or metadata.get("main_key"))

    return Song(
        metadata=MappingProxyType(metadata),
        sections=tuple(Section(title=t, lines=tuple(ls)) for t, ls in sections),
        main_key=key,
        original_key=key,
    )
