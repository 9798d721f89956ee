# tests/test_record_set.py

import sys, os
import tempfile
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from modules.diagnostics import DiagnosticCollector, Severity
from modules.errors import EmptyDatasetError, LineGrammarError, SourceReadError
from modules.record_set import build_record_set, read_text_file, sort_records


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────

HEADER = "timestamp,open,high,low,close,volume"


def make_source(*lines):
    return "\n".join((HEADER,) + lines)


def make_reader(sources: dict):
    """In-memory source reader: unknown ids fail like a missing file."""
    def reader(source_id):
        if source_id not in sources:
            raise SourceReadError(source_id, "No such source")
        return sources[source_id]
    return reader


# ─────────────────────────────────────────────
# TESTS
# ─────────────────────────────────────────────

def test_records_from_all_sources_are_sorted():
    sources = {
        'late.csv':  make_source("2025-01-07 09:00:00+00:00,3,4,2,3,30"),
        'early.csv': make_source("2025-01-06 09:00:00+00:00,1,2,0.5,1,10",
                                 "2025-01-06 12:00:00+00:00,2,3,1,2,20"),
    }
    record_set = build_record_set(['late.csv', 'early.csv'],
                                  reader=make_reader(sources), sink=DiagnosticCollector())
    assert [r.volume for r in record_set.records] == [10, 20, 30]
    print("PASS: test_records_from_all_sources_are_sorted")


def test_sort_uses_absolute_instant_across_offsets():
    # 10:00+02:00 is 08:00 UTC, earlier than 09:00+00:00
    sources = {'mixed.csv': make_source(
        "2025-01-06 09:00:00+00:00,1,2,0.5,1,1",
        "2025-01-06 10:00:00+02:00,1,2,0.5,1,2",
    )}
    record_set = build_record_set(['mixed.csv'], reader=make_reader(sources), sink=DiagnosticCollector())
    assert [r.volume for r in record_set.records] == [2, 1]
    print("PASS: test_sort_uses_absolute_instant_across_offsets")


def test_sort_is_stable_for_equal_timestamps():
    sources = {'dupes.csv': make_source(
        "2025-01-06 09:00:00+00:00,1,2,0.5,1,1",
        "2025-01-06 08:00:00+00:00,1,2,0.5,1,2",
        "2025-01-06 09:00:00+00:00,1,2,0.5,1,3",
    )}
    record_set = build_record_set(['dupes.csv'], reader=make_reader(sources), sink=DiagnosticCollector())
    assert [r.volume for r in record_set.records] == [2, 1, 3]
    print("PASS: test_sort_is_stable_for_equal_timestamps")


def test_resorting_sorted_records_is_a_no_op():
    sources = {'s.csv': make_source(
        "2025-01-06 11:00:00+00:00,1,2,0.5,1,1",
        "2025-01-06 09:00:00+00:00,1,2,0.5,1,2",
    )}
    records = build_record_set(['s.csv'], reader=make_reader(sources), sink=DiagnosticCollector()).records
    assert sort_records(records) == records
    print("PASS: test_resorting_sorted_records_is_a_no_op")


def test_unreadable_source_is_skipped():
    collector = DiagnosticCollector()
    sources = {'good.csv': make_source("2025-01-06 09:00:00+00:00,1,2,0.5,1,10")}
    record_set = build_record_set(['missing.csv', 'good.csv'],
                                  reader=make_reader(sources), sink=collector)

    assert len(record_set.records) == 1
    assert len(record_set.source_failures) == 1
    assert record_set.source_failures[0].source_id == 'missing.csv'
    assert [d.source_id for d in collector.errors] == ['missing.csv']
    print("PASS: test_unreadable_source_is_skipped")


def test_single_unreadable_source_is_empty_dataset():
    collector = DiagnosticCollector()
    with pytest.raises(EmptyDatasetError):
        build_record_set(['missing.csv'], reader=make_reader({}), sink=collector)
    assert len(collector.errors) == 2  # the source, then the empty dataset
    print("PASS: test_single_unreadable_source_is_empty_dataset")


def test_no_valid_lines_is_empty_dataset():
    collector = DiagnosticCollector()
    sources = {'bad.csv': make_source("not,a,valid,row")}
    with pytest.raises(EmptyDatasetError):
        build_record_set(['bad.csv'], reader=make_reader(sources), sink=collector)

    # one bad line + "read but nothing parsed"
    assert len(collector.warnings) == 2
    print("PASS: test_no_valid_lines_is_empty_dataset")


def test_no_sources_is_empty_dataset():
    with pytest.raises(EmptyDatasetError):
        build_record_set([], reader=make_reader({}), sink=DiagnosticCollector())
    print("PASS: test_no_sources_is_empty_dataset")


def test_parse_failures_are_collected():
    collector = DiagnosticCollector()
    sources = {'mixed.csv': make_source("not,a,valid,row", "2025-01-06 09:00:00+00:00,1,2,0.5,1,10")}
    record_set = build_record_set(['mixed.csv'], reader=make_reader(sources), sink=collector)

    assert len(record_set.records) == 1
    assert len(record_set.parse_failures) == 1
    assert isinstance(record_set.parse_failures[0], LineGrammarError)
    assert len(collector.of_severity(Severity.INFO)) == 1
    print("PASS: test_parse_failures_are_collected")


def test_read_text_file_round_trip():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "1daysBTC.csv")
        with open(path, "w", encoding="utf-8") as f:
            f.write(make_source("2025-01-06 09:00:00+00:00,1,2,0.5,1,10"))

        record_set = build_record_set([path], sink=DiagnosticCollector())
        assert len(record_set.records) == 1
    print("PASS: test_read_text_file_round_trip")


def test_read_text_file_missing_path():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "nope.csv")
        with pytest.raises(SourceReadError) as excinfo:
            read_text_file(path)
    assert excinfo.value.source_id == path
    assert isinstance(excinfo.value, OSError)
    print("PASS: test_read_text_file_missing_path")


# ─────────────────────────────────────────────
# RUN
# ─────────────────────────────────────────────

if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v", "-s"]))
