# modules/errors.py


class AnalyzerError(Exception):
    """Base class for every error raised by the analyzer."""


# ─────────────────────────────────────────────
# PER-LINE ERRORS: recovered inside the parser
# ─────────────────────────────────────────────

class ParseError(AnalyzerError, ValueError):
    """
    One data line could not be turned into a Record.
    Carries where it happened so the caller can report it and move on.
    """

    def __init__(self, message: str, line_number: int = None,
                 field: str = None, raw: str = None, source_id: str = None):
        super().__init__(message)
        self.message     = message
        self.line_number = line_number
        self.field       = field
        self.raw         = raw
        self.source_id   = source_id


class LineGrammarError(ParseError):
    """Line has a separator but does not follow the record layout."""


class FieldExtractionError(ParseError):
    """Layout matched but a field could not be pulled out of it."""


class FieldConversionError(ParseError):
    """A field was extracted but is not a valid number or timestamp."""


# ─────────────────────────────────────────────
# PER-SOURCE / DATASET ERRORS
# ─────────────────────────────────────────────

class SourceReadError(AnalyzerError, OSError):
    """A whole source could not be opened or decoded."""

    def __init__(self, source_id: str, reason: str):
        super().__init__(f"Failed to read '{source_id}': {reason}")
        self.source_id = source_id
        self.reason    = reason


class EmptyDatasetError(AnalyzerError, ValueError):
    """No valid record survived parsing; analysis cannot proceed."""


class DegenerateRangeError(AnalyzerError, ValueError):
    """Price range collapsed to a point, so it cannot be split into zones."""
