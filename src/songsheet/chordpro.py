"""ChordPro export.

Renders a :class:`~songsheet.models.Song` to ChordPro (``.cho``) text.
Inline ``{G}`` markers become ChordPro ``[G]`` chords.

Section title → ChordPro directive mapping
------------------------------------------

+--------------------------------------+------------------------------------+
| Title (case-insensitive first word)  | Directive pair                     |
+======================================+====================================+
| ``Verse``, ``Verse N``               | ``{start_of_verse: Verse N}`` /    |
|                                      | ``{end_of_verse}``                 |
+--------------------------------------+------------------------------------+
| ``Chorus``                           | ``{start_of_chorus}`` /            |
|                                      | ``{end_of_chorus}``                |
+--------------------------------------+------------------------------------+
| ``Bridge``                           | ``{start_of_bridge}`` /            |
|                                      | ``{end_of_bridge}``                |
+--------------------------------------+------------------------------------+
| anything else                        | ``{comment: <title>}``             |
+--------------------------------------+------------------------------------+
| ``""`` (untitled lead-in)            | no wrapper directive               |
+--------------------------------------+------------------------------------+

Usage::

    from songsheet.chordpro import ChordProFormatter
    text = ChordProFormatter().render(transpose_song(song, resolve_key("A")))
"""

from .keys import key_name
from .models import Line, Section, Song
from .parser import MARKER_RE

# Section titles whose directives ChordPro has standardised.
_STRUCTURED = {
    "verse": ("start_of_verse", "end_of_verse"),
    "chorus": ("start_of_chorus", "end_of_chorus"),
    "bridge": ("start_of_bridge", "end_of_bridge"),
}

# Metadata copied through as ChordPro directives, in output order.
_METADATA_DIRECTIVES = (
    ("album", "album"),
    ("copyright", "copyright"),
    ("publisher", "meta: publisher"),
)


class ChordProFormatter:
    """Render a :class:`~songsheet.models.Song` to ChordPro text."""

    def render(self, song: Song) -> str:
        """Return ChordPro text for *song*.

        The returned string ends with a single newline and uses Unix line
        endings (``\\n``) throughout.
        """
        parts: list[str] = []

        # --- Metadata block ---
        if song.title:
            parts.append(f"{{title: {song.title}}}")
        if song.author:
            parts.append(f"{{artist: {song.author}}}")
        if song.main_key is not None:
            parts.append(f"{{key: {key_name(song.main_key)}}}")
        for name, directive in _METADATA_DIRECTIVES:
            if song.metadata.get(name):
                parts.append(f"{{{directive}: {song.metadata[name]}}}")

        # --- Section blocks ---
        for section in song.sections:
            parts.append("")  # blank line before every section
            parts.extend(_render_section(section))

        return "\n".join(parts) + "\n"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _render_line(line: Line) -> str:
    return MARKER_RE.sub(lambda m: f"[{m.group(1)}]", line.text)


def _render_section(section: Section) -> list[str]:
    """Return a list of lines for one section (no trailing blank line)."""
    title = section.title
    lines = [_render_line(line) for line in section.lines]

    if not title:
        return lines

    first_word = title.lower().split()[0]  # e.g. "verse" from "Verse 1"

    if first_word in _STRUCTURED:
        start_dir, end_dir = _STRUCTURED[first_word]
        # Include the full title for verse (e.g. "Verse 1"), bare directive for chorus/bridge
        if first_word == "verse":
            start_line = f"{{{start_dir}: {title}}}"
        else:
            start_line = f"{{{start_dir}}}"
        return [start_line, *lines, f"{{{end_dir}}}"]

    return [f"{{comment: {title}}}", *lines]
