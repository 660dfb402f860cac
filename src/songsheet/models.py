from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .chords import ChordToken


@dataclass(frozen=True)
class Marker:
    """An inline ``{chord}`` marker inside a line.

    ``start`` is the offset of ``{`` in the line text and ``end`` the offset
    just past ``}``.  Slash chords carry one token per side.
    """

    start: int
    end: int
    text: str  # marker contents, surrounding whitespace trimmed
    tokens: tuple[ChordToken, ...] = ()

    @property
    def width(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class Line:
    """A single lyric line with inline chord markers.

    Example: "{G}Amazing {C}grace how {G}sweet the sound"
    Chord-only lines (intros, turnarounds) look like "{G} {C} {D}".
    """

    text: str
    markers: tuple[Marker, ...] = ()

    @property
    def chords(self) -> list[str]:
        return [m.text for m in self.markers]


@dataclass(frozen=True)
class Section:
    """A titled run of lines ("Verse", "Chorus 2", "" for the untitled lead-in)."""

    title: str
    lines: tuple[Line, ...] = ()


@dataclass(frozen=True)
class Song:
    """A parsed song document.

    ``original_key`` is the key the document was written in; ``main_key``
    is the key the lines are currently in.  Both are pitch classes.
    """

    metadata: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    sections: tuple[Section, ...] = ()
    main_key: int | None = None
    original_key: int | None = None

    @property
    def title(self) -> str | None:
        return self.metadata.get("title")

    @property
    def author(self) -> str | None:
        return self.metadata.get("author") or self.metadata.get("authors")

    @property
    def lines(self) -> list[Line]:
        return [line for section in self.sections for line in section.lines]
