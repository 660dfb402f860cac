"""Key model: the twelve pitch classes and every spelling used to name them.

A pitch class is an ``int`` in ``range(12)`` anchored at A♭ (index 0).  Each
spelling in :data:`SPELLINGS` records

* the pitch class it names,
* the key-signature :class:`Modifier` of the key with that name (``F`` is a
  flat key, ``D`` a sharp key, ``C`` natural), and
* whether the spelling may be shown when the governing key prefers sharps
  or flats.

Spelling table
--------------

+-------+----+----------+--------+-------+
| Name  | PC | Modifier | Sharps | Flats |
+=======+====+==========+========+=======+
| A♭    | 0  | ♭        | no     | yes   |
| G#    | 0  | #        | yes    | no    |
| A     | 1  | #        | yes    | yes   |
| A#    | 2  | #        | yes    | no    |
| B♭    | 2  | ♭        | no     | yes   |
| B     | 3  | #        | yes    | yes   |
| C♭    | 3  | ♭        | no     | yes   |
| B#    | 4  | #        | yes    | no    |
| C     | 4  | ♮        | yes    | yes   |
| C#    | 5  | #        | yes    | no    |
| D♭    | 5  | ♭        | no     | yes   |
| D     | 6  | #        | yes    | yes   |
| D#    | 7  | #        | yes    | no    |
| E♭    | 7  | ♭        | no     | yes   |
| E     | 8  | #        | yes    | yes   |
| F♭    | 8  | ♭        | no     | yes   |
| E#    | 9  | #        | yes    | no    |
| F     | 9  | ♭        | yes    | yes   |
| F#    | 10 | #        | yes    | no    |
| G♭    | 10 | ♭        | no     | yes   |
| G     | 11 | #        | yes    | yes   |
+-------+----+----------+--------+-------+

Usage::

    from songsheet.keys import display_spelling, resolve_key
    pc = resolve_key("Bb")          # 2
    display_spelling(pc, resolve_key("E"))   # "A#"
"""

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType

from .exceptions import SpellingTableError, UnknownKeyError

FLAT = "♭"
SHARP = "#"
DOUBLE_SHARP = "\U0001D12A"

PITCH_CLASSES = 12

# Canonical ("most common") name for each pitch class, indexed by pitch class.
KEY_NAMES: tuple[str, ...] = ("A♭", "A", "B♭", "B", "C", "C#", "D", "E♭", "E", "F", "F#", "G")


class Modifier(IntEnum):
    DOUBLE_FLAT = -2
    FLAT = -1
    NATURAL = 0
    SHARP = 1
    DOUBLE_SHARP = 2


@dataclass(frozen=True)
class KeySpelling:
    """One way of writing a pitch class."""

    name: str
    pitch_class: int
    modifier: Modifier
    use_with_sharps: bool
    use_with_flats: bool

    @property
    def is_natural_letter(self) -> bool:
        """True when the name carries no sharp or flat symbol."""
        return not any(glyph in self.name for glyph in (FLAT, SHARP, DOUBLE_SHARP))

    @property
    def is_canonical(self) -> bool:
        return KEY_NAMES[self.pitch_class] == self.name


def _spelling(name: str, pitch_class: int, modifier: Modifier, sharps: bool, flats: bool):
    return name, KeySpelling(name, pitch_class, modifier, sharps, flats)


SPELLINGS: MappingProxyType = MappingProxyType(dict([
    _spelling("A♭", 0, Modifier.FLAT, False, True),
    _spelling("A", 1, Modifier.SHARP, True, True),
    _spelling("A#", 2, Modifier.SHARP, True, False),
    _spelling("B♭", 2, Modifier.FLAT, False, True),
    _spelling("B", 3, Modifier.SHARP, True, True),
    _spelling("B#", 4, Modifier.SHARP, True, False),
    _spelling("C♭", 3, Modifier.FLAT, False, True),
    _spelling("C", 4, Modifier.NATURAL, True, True),
    _spelling("C#", 5, Modifier.SHARP, True, False),
    _spelling("D♭", 5, Modifier.FLAT, False, True),
    _spelling("D", 6, Modifier.SHARP, True, True),
    _spelling("D#", 7, Modifier.SHARP, True, False),
    _spelling("E♭", 7, Modifier.FLAT, False, True),
    _spelling("E", 8, Modifier.SHARP, True, True),
    _spelling("E#", 9, Modifier.SHARP, True, False),
    _spelling("F♭", 8, Modifier.FLAT, False, True),
    _spelling("F", 9, Modifier.FLAT, True, True),
    _spelling("F#", 10, Modifier.SHARP, True, False),
    _spelling("G♭", 10, Modifier.FLAT, False, True),
    _spelling("G", 11, Modifier.SHARP, True, True),
    _spelling("G#", 0, Modifier.SHARP, True, False),
]))


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def normalize_key_name(name: str) -> str:
    """Trim *name* and turn every lowercase ``b`` into the flat glyph."""
    return name.strip().replace("b", FLAT)


def resolve_key(name: str | None) -> int | None:
    """Return the pitch class spelled by *name*, or None if it is not a key.

    ``"Bb"``, ``"B♭"`` and ``"A#"`` all resolve to 2.  Empty input and
    anything outside the spelling table (``"H"``, ``"Am"``) give None.
    """
    if not name:
        return None
    spelling = SPELLINGS.get(normalize_key_name(name))
    return spelling.pitch_class if spelling else None


def require_key(name: str) -> int:
    """Like :func:`resolve_key` but raise UnknownKeyError instead of returning None."""
    pitch_class = resolve_key(name)
    if pitch_class is None:
        raise UnknownKeyError(name)
    return pitch_class


def key_name(pitch_class: int) -> str:
    """Return the canonical name of *pitch_class* (taken modulo 12)."""
    return KEY_NAMES[pitch_class % PITCH_CLASSES]


def spellings_for(pitch_class: int) -> list[KeySpelling]:
    return [s for s in SPELLINGS.values() if s.pitch_class == pitch_class % PITCH_CLASSES]


# ---------------------------------------------------------------------------
# Spelling choice
# ---------------------------------------------------------------------------


def choose_spelling(candidates: list[KeySpelling], governing: KeySpelling) -> KeySpelling:
    """Pick the spelling to display from *candidates* under *governing*.

    1. A lone candidate wins outright.
    2. Flat governing keys keep flat-usable spellings, sharp keys keep
       sharp-usable ones, natural keys keep everything.
    3. One survivor wins.  Of two survivors the natural-letter one wins,
       then the canonical name from :data:`KEY_NAMES`.

    Raises SpellingTableError for any other outcome.
    """
    if len(candidates) == 1:
        return candidates[0]

    if governing.modifier < Modifier.NATURAL:
        remaining = [c for c in candidates if c.use_with_flats]
    elif governing.modifier > Modifier.NATURAL:
        remaining = [c for c in candidates if c.use_with_sharps]
    else:
        remaining = list(candidates)

    if len(remaining) == 1:
        return remaining[0]

    if len(remaining) == 2:
        for preferred in (
            [c for c in remaining if c.is_natural_letter],
            [c for c in remaining if c.is_canonical],
        ):
            if len(preferred) == 1:
                return preferred[0]

    pitch_class = candidates[0].pitch_class if candidates else -1
    raise SpellingTableError(pitch_class, [c.name for c in remaining])


def _build_display_table() -> tuple[tuple[str, ...], ...]:
    """Return ``table[governing_key][pitch_class] -> name`` for all 144 pairs."""
    return tuple(
        tuple(
            choose_spelling(spellings_for(pc), SPELLINGS[KEY_NAMES[governing]]).name
            for pc in range(PITCH_CLASSES)
        )
        for governing in range(PITCH_CLASSES)
    )


_DISPLAY_TABLE = _build_display_table()


def display_spelling(pitch_class: int, governing_key: int) -> str:
    """Return the name to show for *pitch_class* in a song centred on *governing_key*."""
    return _DISPLAY_TABLE[governing_key % PITCH_CLASSES][pitch_class % PITCH_CLASSES]
