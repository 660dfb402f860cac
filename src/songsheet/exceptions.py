class SongsheetError(Exception):
    """Base exception for songsheet."""


class SpellingTableError(SongsheetError):
    """Raised when the key spelling table cannot pick a single spelling.

    This signals a broken table, never bad song input.
    """

    def __init__(self, pitch_class: int, candidates: list[str]):
        self.pitch_class = pitch_class
        self.candidates = candidates
        super().__init__(
            f"Cannot choose a spelling for pitch class {pitch_class} from {candidates}"
        )


class UnknownKeyError(SongsheetError):
    """Raised when a caller explicitly asks for a key that does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown key: {name!r}")


class DocumentFormatError(SongsheetError):
    """Raised when a song document is missing its header delimiter."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Malformed song document: {reason}")


class ConversionError(SongsheetError):
    """Raised when a chord-over-lyric body yields no song content."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Conversion failed: {reason}")
