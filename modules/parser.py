# modules/parser.py

import math
import re
from datetime import datetime
from typing import List, Optional, Tuple

from config import TIMESTAMP_FORMAT, FIELD_SEPARATOR, PRICE_FIELDS, ALL_FIELDS, MAX_VOLUME
from modules.diagnostics import Diagnostic, DiagnosticSink, Severity, print_diagnostic
from modules.errors import (
    ParseError, LineGrammarError, FieldExtractionError, FieldConversionError
)
from modules.models import Record


# ─────────────────────────────────────────────
# SECTION 1: LINE GRAMMAR
# ─────────────────────────────────────────────

# Timestamp with a mandatory fixed-width UTC offset, then five comma-separated
# numbers. One optional space is allowed after each comma.
_TIMESTAMP = r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}[+-]\d{2}:\d{2}"
_PRICE     = r"[+-]?\d*\.?\d+"
_VOLUME    = r"\d+"

LINE_PATTERN = re.compile(
    rf"(?P<timestamp>{_TIMESTAMP})"
    rf",[ ]?(?P<open>{_PRICE})"
    rf",[ ]?(?P<high>{_PRICE})"
    rf",[ ]?(?P<low>{_PRICE})"
    rf",[ ]?(?P<close>{_PRICE})"
    rf",[ ]?(?P<volume>{_VOLUME})"
)


def is_skippable(line: str, line_number: int) -> bool:
    """
    Headers and blank lines are not data errors.
    The first line of every source is always treated as a header.
    """
    return line_number == 1 or not line or FIELD_SEPARATOR not in line


# ─────────────────────────────────────────────
# SECTION 2: FIELD CONVERSION
# ─────────────────────────────────────────────

def _to_timestamp(text: str, line_number: int, raw: str) -> datetime:
    # strptime with numeric directives only, so the process locale does not matter
    try:
        return datetime.strptime(text, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise FieldConversionError(
            f"Timestamp '{text}' does not match format '{TIMESTAMP_FORMAT}': {e}",
            line_number=line_number, field='timestamp', raw=raw
        ) from e


def _to_price(name: str, text: str, line_number: int, raw: str) -> float:
    try:
        value = float(text)
    except ValueError as e:
        raise FieldConversionError(
            f"{name.capitalize()} value '{text}' is not a number",
            line_number=line_number, field=name, raw=raw
        ) from e

    if not math.isfinite(value):
        raise FieldConversionError(
            f"{name.capitalize()} value '{text}' is not finite",
            line_number=line_number, field=name, raw=raw
        )
    return value


def _to_volume(text: str, line_number: int, raw: str) -> int:
    try:
        value = int(text)
    except ValueError as e:
        raise FieldConversionError(
            f"Volume value '{text}' is not an integer",
            line_number=line_number, field='volume', raw=raw
        ) from e

    if value < 0:
        raise FieldConversionError(
            f"Volume value '{text}' is negative",
            line_number=line_number, field='volume', raw=raw
        )
    if value > MAX_VOLUME:
        raise FieldConversionError(
            f"Volume value '{text}' exceeds {MAX_VOLUME}",
            line_number=line_number, field='volume', raw=raw
        )
    return value


# ─────────────────────────────────────────────
# SECTION 3: SINGLE LINE
# ─────────────────────────────────────────────

def parse_line(raw: str, line_number: int) -> Optional[Record]:
    """
    Turn one line of text into a Record.

    Returns None for lines that are skipped silently (header, blank,
    no separator). Raises a ParseError subclass for everything else
    that is not a valid record:
      LineGrammarError     : layout does not match
      FieldExtractionError : a field is missing from the match
      FieldConversionError : a field is not a valid number / timestamp
    """
    line = raw.strip()
    if is_skippable(line, line_number):
        return None

    match = LINE_PATTERN.fullmatch(line)
    if match is None:
        raise LineGrammarError(
            f'Line did not match expected data pattern: "{line}"',
            line_number=line_number, raw=line
        )

    # Only reachable with a grammar whose groups may match empty
    fields = match.groupdict()
    for name in ALL_FIELDS:
        if not fields.get(name):
            raise FieldExtractionError(
                f'Could not extract {name} from line: "{line}"',
                line_number=line_number, field=name, raw=line
            )

    timestamp = _to_timestamp(fields['timestamp'], line_number, line)
    prices = {
        name: _to_price(name, fields[name], line_number, line)
        for name in PRICE_FIELDS
    }
    volume = _to_volume(fields['volume'], line_number, line)

    return Record(timestamp=timestamp, volume=volume, **prices)


# ─────────────────────────────────────────────
# SECTION 4: WHOLE SOURCE
# ─────────────────────────────────────────────

def parse_source(text: str, source_id: str,
                 sink: DiagnosticSink = print_diagnostic) -> Tuple[List[Record], List[ParseError]]:
    """
    Parse every line of one source.
    Lines are split on newline only. A trailing carriage return is trimmed with the other whitespace.
    Bad lines are reported to the sink and dropped. They never stop the loop.
    Returns (records in file order, parse failures).
    """
    records  = []
    failures = []

    for line_number, raw in enumerate(text.split('\n'), start=1):
        try:
            record = parse_line(raw, line_number)
        except ParseError as e:
            e.source_id = source_id
            failures.append(e)
            sink(Diagnostic(Severity.WARNING, source_id, e.message, line_number))
            continue

        if record is not None:
            records.append(record)

    return records, failures
