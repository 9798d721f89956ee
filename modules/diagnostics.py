# modules/diagnostics.py

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from config import LOG_PREFIX


class Severity(Enum):
    """Severity levels for diagnostics."""
    ERROR   = "error"
    WARNING = "warning"
    INFO    = "info"


@dataclass(frozen=True)
class Diagnostic:
    """A single message about a skipped line, a failed source or a summary."""
    severity: Severity
    source_id: str
    message: str
    line_number: Optional[int] = None

    def __str__(self) -> str:
        where = self.source_id
        if self.line_number is not None:
            where = f"{where} line {self.line_number}"
        if self.severity == Severity.INFO:
            return f"{LOG_PREFIX} [{where}] {self.message}"
        return f"{LOG_PREFIX} {self.severity.name} [{where}]: {self.message}"


# Anything that accepts a Diagnostic can be used as a sink
DiagnosticSink = Callable[[Diagnostic], None]


def print_diagnostic(diagnostic: Diagnostic) -> None:
    """Default sink: one console line per diagnostic."""
    print(str(diagnostic))


class DiagnosticCollector:
    """Sink that keeps every diagnostic in memory, in emission order."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def of_severity(self, severity: Severity) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == severity]

    @property
    def warnings(self) -> List[Diagnostic]:
        return self.of_severity(Severity.WARNING)

    @property
    def errors(self) -> List[Diagnostic]:
        return self.of_severity(Severity.ERROR)
