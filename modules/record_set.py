# modules/record_set.py

from dataclasses import dataclass, field
from operator import attrgetter
from pathlib import Path
from typing import Callable, Iterable, List

from modules.diagnostics import Diagnostic, DiagnosticSink, Severity, print_diagnostic
from modules.errors import EmptyDatasetError, ParseError, SourceReadError
from modules.models import Record
from modules.parser import parse_source


# Given a source id, return its raw text or raise SourceReadError
SourceReader = Callable[[str], str]


@dataclass
class RecordSet:
    """Sorted records plus everything that was dropped on the way."""
    records: List[Record]
    parse_failures: List[ParseError] = field(default_factory=list)
    source_failures: List[SourceReadError] = field(default_factory=list)


# ─────────────────────────────────────────────
# SECTION 1: LOADING
# ─────────────────────────────────────────────

def read_text_file(path: str) -> str:
    """
    Default source reader: a UTF-8 text file on disk.
    Any OS or decoding problem surfaces as SourceReadError.
    """
    try:
        return Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(path, str(e)) from e


# ─────────────────────────────────────────────
# SECTION 2: SORTING
# ─────────────────────────────────────────────

def sort_records(records: Iterable[Record]) -> List[Record]:
    """
    Chronological order by absolute instant.
    Stable: records sharing a timestamp keep their input order.
    """
    return sorted(records, key=attrgetter('timestamp'))


# ─────────────────────────────────────────────
# MASTER FUNCTION
# ─────────────────────────────────────────────

def build_record_set(sources: List[str],
                     reader: SourceReader = read_text_file,
                     sink: DiagnosticSink = print_diagnostic) -> RecordSet:
    """
    Read and parse every source, accumulate the records, sort them.
    A source that cannot be read is reported and skipped.
    Raises EmptyDatasetError when nothing valid is left.
    """
    all_records     = []
    parse_failures  = []
    source_failures = []

    for source_id in sources:
        try:
            text = reader(source_id)
        except SourceReadError as e:
            source_failures.append(e)
            sink(Diagnostic(Severity.ERROR, source_id, e.reason))
            continue

        records, failures = parse_source(text, source_id, sink=sink)
        parse_failures.extend(failures)

        if records:
            sink(Diagnostic(Severity.INFO, source_id, f"Parsed {len(records)} records"))
        elif text.strip():
            sink(Diagnostic(
                Severity.WARNING, source_id,
                "Source read but no trading data parsed. Check line format and timestamp offset."
            ))

        all_records.extend(records)

    if not all_records:
        if sources and len(source_failures) == len(sources):
            message = f"All {len(sources)} sources failed to read."
        else:
            message = "No valid trading data parsed from any source."
        sink(Diagnostic(Severity.ERROR, ",".join(sources) or "<none>",
                        f"{message} Analysis cannot proceed."))
        raise EmptyDatasetError(message)

    return RecordSet(
        records=sort_records(all_records),
        parse_failures=parse_failures,
        source_failures=source_failures,
    )
