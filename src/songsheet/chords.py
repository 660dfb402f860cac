"""Chord token parsing.

A chord such as ``F#m7`` splits into a root spelling (``F#``) and a quality
(:attr:`ChordQuality.MINOR_SEVENTH`).  Qualities are recognised by suffix,
testing :data:`QUALITY_SUFFIXES` in order; the first suffix the chord ends
with wins.  Longer suffixes sit ahead of the shorter ones they end with
(``m7`` before ``7``, ``7sus4`` before ``sus4``), otherwise ``Em7`` would
parse as a seventh chord on the unknown root ``Em``.

A chord wrapped in one pair of parentheses, ``(Am)``, is optional.
"""

from dataclasses import dataclass
from enum import Enum

from .keys import normalize_key_name, resolve_key


class ChordQuality(Enum):
    """Chord qualities; each value is the canonical suffix."""

    MAJOR = ""
    MINOR = "m"
    SUSPENDED = "sus"
    MAJOR_SIXTH = "6"
    MAJOR_SEVENTH = "7"
    MINOR_SEVENTH = "m7"
    SUSPENDED_SEVENTH = "sus7"
    MAJOR_SUSPENDED_SECOND = "2"
    MAJOR_NINTH = "maj9"
    MAJOR_ADD_NINTH = "9"
    MINOR_NINTH = "m9"
    POWER_CHORD = "5"
    AUGMENTED = "+"
    DIMINISHED = "o"

    @property
    def suffix(self) -> str:
        return self.value


# (suffix, quality) in match priority order.
QUALITY_SUFFIXES: tuple[tuple[str, ChordQuality], ...] = (
    ("7sus4", ChordQuality.SUSPENDED_SEVENTH),
    ("(no3)", ChordQuality.POWER_CHORD),
    ("sus7", ChordQuality.SUSPENDED_SEVENTH),
    ("maj7", ChordQuality.MAJOR_SEVENTH),
    ("maj9", ChordQuality.MAJOR_NINTH),
    ("add9", ChordQuality.MAJOR_ADD_NINTH),
    ("sus4", ChordQuality.SUSPENDED),
    ("sus2", ChordQuality.MAJOR_SUSPENDED_SECOND),
    ("aug", ChordQuality.AUGMENTED),
    ("dim", ChordQuality.DIMINISHED),
    ("min", ChordQuality.MINOR),
    ("sus", ChordQuality.SUSPENDED),
    ("m7", ChordQuality.MINOR_SEVENTH),
    ("M7", ChordQuality.MAJOR_SEVENTH),
    ("m9", ChordQuality.MINOR_NINTH),
    ("+", ChordQuality.AUGMENTED),
    ("o", ChordQuality.DIMINISHED),
    ("m", ChordQuality.MINOR),
    ("6", ChordQuality.MAJOR_SIXTH),
    ("7", ChordQuality.MAJOR_SEVENTH),
    ("2", ChordQuality.MAJOR_SUSPENDED_SECOND),
    ("9", ChordQuality.MAJOR_ADD_NINTH),
    ("5", ChordQuality.POWER_CHORD),
)


@dataclass(frozen=True)
class ChordToken:
    """One parsed chord (one side of a slash chord)."""

    text: str  # as written, parentheses included
    root: str  # root spelling as written, e.g. "Bb"
    quality: ChordQuality
    optional: bool = False
    pitch_class: int | None = None  # None when the root is not a known key

    @property
    def is_known(self) -> bool:
        return self.pitch_class is not None

    def render(self, root: str | None = None) -> str:
        """Return the chord in canonical form, optionally with a different root."""
        chord = f"{root if root is not None else normalize_key_name(self.root)}{self.quality.suffix}"
        return f"({chord})" if self.optional else chord


def strip_optional(text: str) -> tuple[str, bool]:
    """Remove one enclosing pair of parentheses; return ``(inner, was_wrapped)``."""
    if len(text) >= 2 and text.startswith("(") and text.endswith(")"):
        return text[1:-1].strip(), True
    return text, False


def split_quality(text: str) -> tuple[str, ChordQuality]:
    """Return ``(root, quality)`` for a chord with no parentheses."""
    for suffix, quality in QUALITY_SUFFIXES:
        if text.endswith(suffix):
            return text[: len(text) - len(suffix)], quality
    return text, ChordQuality.MAJOR


def parse_chord(text: str) -> ChordToken:
    """Parse a single chord such as ``"Bbm7"`` or ``"(Csus)"``.

    Unknown roots still produce a token; its ``pitch_class`` is None.
    """
    stripped = text.strip()
    inner, optional = strip_optional(stripped)
    root, quality = split_quality(inner)
    return ChordToken(
        text=stripped,
        root=root,
        quality=quality,
        optional=optional,
        pitch_class=resolve_key(root),
    )


def is_chord(text: str) -> bool:
    """True if every slash-separated part of *text* has a known root."""
    inner, _ = strip_optional(text.strip())
    parts = inner.split("/")
    return all(parse_chord(part).is_known for part in parts)
