# main.py

import os
import time

from config import DATA_DIRS, INPUT_FILE_PATTERN, INPUT_FILE_COUNT, LOG_PREFIX
from modules.analytics import analyze_sources
from modules.errors import EmptyDatasetError
from modules.presentation import print_report


def find_input_file(file_name: str, search_dirs=DATA_DIRS):
    """First existing path for file_name across search_dirs, or None."""
    for directory in search_dirs:
        path = os.path.join(directory, file_name)
        if os.path.isfile(path):
            return path
    return None


def run_batch(search_dirs=DATA_DIRS, file_count: int = INPUT_FILE_COUNT) -> dict:
    """
    Analyze each input file on its own.
    Returns {file name: report} for the files that produced a report.
    """
    file_names = [INPUT_FILE_PATTERN.format(n=n) for n in range(1, file_count + 1)]
    print(f"{LOG_PREFIX} Searching for {file_count} files like '{file_names[0]}' in {list(search_dirs)}")

    reports = {}
    failed  = 0

    for i, file_name in enumerate(file_names, start=1):
        print(f"{LOG_PREFIX} [{i}/{file_count}] Checking file: {file_name}")
        path = find_input_file(file_name, search_dirs)
        if path is None:
            failed += 1
            continue

        try:
            report = analyze_sources([path])
        except EmptyDatasetError as e:
            print(f"{LOG_PREFIX} FAILURE: Could not complete analysis for {file_name}: {e}")
            failed += 1
            continue

        print_report(report, title=file_name)
        reports[file_name] = report

    print(f"{LOG_PREFIX} Successfully analyzed: {len(reports)} files.")
    print(f"{LOG_PREFIX} Failed or skipped: {failed} files.")

    volatilities = [r.volatility for r in reports.values() if r.volatility is not None]
    if volatilities:
        print(f"{LOG_PREFIX} Overall highest average range found: {max(volatilities):.2f}")

    return reports


if __name__ == "__main__":
    start = time.perf_counter()
    print(f"\n{LOG_PREFIX} ── Trading Data Analysis Started ──\n")

    run_batch()

    print(f"\n{LOG_PREFIX} ── Analysis finished in {time.perf_counter() - start:.2f}s ──\n")
