"""Song document helpers: the on-disk file contract and song summaries.

A song file is ``<metadata>`` + a line of five or more ``=`` + ``<body>``.
Files written by :func:`join_document` use a ten-character delimiter and
``\\r\\n`` after it.
"""

import logging
import re
from dataclasses import dataclass, field

from .exceptions import DocumentFormatError
from .keys import key_name
from .models import Song
from .parser import (
    KEY_METADATA_NAMES,
    metadata_key,
    parse_metadata_line,
)
from .transpose import key_change, transpose_text

logger = logging.getLogger(__name__)

HEADER_DELIMITER = "=========="

_SPLIT_RE = re.compile(r"^[ \t]*={5,}[ \t]*\r?(?:\n|\Z)", re.MULTILINE)

TITLE_PLACEHOLDER = "<<Title goes here>>"
AUTHOR_PLACEHOLDER = "<<Author goes here>>"


# ---------------------------------------------------------------------------
# File contract
# ---------------------------------------------------------------------------


def split_document(text: str, strict: bool = False) -> tuple[str, str]:
    """Split *text* into ``(metadata_text, body_text)`` at the delimiter line.

    With no delimiter the whole text is body, unless *strict* is set, in
    which case DocumentFormatError is raised.  Only the first delimiter
    line counts; later ones belong to the body.
    """
    parts = _SPLIT_RE.split(text, maxsplit=1)
    if len(parts) == 2:
        return parts[0], parts[1]
    if strict:
        raise DocumentFormatError("no header delimiter line")
    return "", text


def join_document(metadata_text: str, body_text: str) -> str:
    """Return file contents for the given header and body text."""
    if metadata_text and not metadata_text.endswith("\n"):
        metadata_text += "\r\n"
    return f"{metadata_text}{HEADER_DELIMITER}\r\n{body_text}"


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SongSummary:
    identifier: str
    title: str
    author: str
    main_key: int | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def key_name(self) -> str | None:
        return key_name(self.main_key) if self.main_key is not None else None


def summarize(song: Song, identifier: str) -> SongSummary:
    """Return the list-view summary of *song*, filling in placeholders."""
    return SongSummary(
        identifier=identifier,
        title=song.title or TITLE_PLACEHOLDER,
        author=song.author or AUTHOR_PLACEHOLDER,
        main_key=song.main_key,
        metadata=dict(song.metadata),
    )


def identifier_for(filename: str) -> str:
    """``"amazing-grace.txt"`` -> ``"amazing-grace"``."""
    return filename[:-4] if filename.endswith(".txt") else filename


# ---------------------------------------------------------------------------
# In-place transposition
# ---------------------------------------------------------------------------


def transpose_document(text: str, to_key: int, from_key: int | None = None) -> str:
    """Rewrite a raw document in *to_key*, preserving everything else.

    The header ``Key``/``Main Key`` value is replaced with the new key name
    and every body marker is transposed; blank lines, spacing and line
    endings are left exactly as they were.  Without a usable origin key the
    text is returned unchanged.
    """
    metadata_text, body_text = split_document(text)
    header_lines = metadata_text.splitlines(keepends=True)

    metadata = {}
    for line in header_lines:
        entry = parse_metadata_line(line)
        if entry is not None:
            metadata[entry[0]] = entry[1]

    if from_key is None:
        from_key = metadata_key(metadata)
    if from_key is None:
        logger.warning("No resolvable key in document; nothing transposed")
        return text

    delta = key_change(from_key, to_key)
    body = transpose_text(body_text, delta, to_key)
    new_header = "".join(_rewrite_key_line(line, to_key) for line in header_lines)
    delimiter = text[len(metadata_text):len(text) - len(body_text)]
    return f"{new_header}{delimiter}{body}"


def _rewrite_key_line(line: str, to_key: int) -> str:
    entry = parse_metadata_line(line)
    if entry is None or entry[0] not in KEY_METADATA_NAMES:
        return line
    name_part = line.partition(":")[0]
    ending = line[len(line.rstrip("\r\n")):]
    return f"{name_part}: {key_name(to_key)}{ending}"
