"""MSBuild diagnostics: parsing console output and collecting errors."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DiagnosticSeverity(str, Enum):
    """MSBuild diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class BuildDiagnostic:
    """Parsed MSBuild diagnostic (error/warning)."""

    severity: DiagnosticSeverity
    code: str
    message: str
    file: str | None = None
    line: int | None = None
    column: int | None = None
    project: str | None = None

    def format(self) -> str:
        """Render as ``file(line,col): severity code: message``."""
        text = f"{self.severity.value} {self.code}: {self.message}"
        if self.file:
            return f"{self.file}({self.line or 0},{self.column or 0}): {text}"
        return text

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
        }
        if self.file:
            result["file"] = self.file
        if self.line is not None:
            result["line"] = self.line
        if self.column is not None:
            result["column"] = self.column
        if self.project:
            result["project"] = self.project
        return result


# Format: path(line,col): severity code: message [project]
MSBUILD_DIAGNOSTIC_PATTERN = re.compile(
    r"^(?P<file>.+?)\((?P<line>\d+),(?P<col>\d+)\):\s*"
    r"(?P<severity>error|warning|info)\s+(?P<code>\w+):\s*"
    r"(?P<message>.+?)(?:\s+\[(?P<project>[^\]]+)\])?$",
    re.IGNORECASE,
)

# Format without location: [source :] severity code: message [project]
MSBUILD_SIMPLE_PATTERN = re.compile(
    r"^(?:(?P<file>.+?)\s+:\s+)?(?P<severity>error|warning|info)\s+(?P<code>\w+):\s*"
    r"(?P<message>.+?)(?:\s+\[(?P<project>[^\]]+)\])?$",
    re.IGNORECASE,
)


def parse_msbuild_output(output: str) -> list[BuildDiagnostic]:
    """Parse MSBuild output into structured diagnostics.

    Args:
        output: MSBuild console output

    Returns:
        List of parsed diagnostics, in output order
    """
    diagnostics: list[BuildDiagnostic] = []

    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue

        match = MSBUILD_DIAGNOSTIC_PATTERN.match(line)
        if match:
            diagnostics.append(
                BuildDiagnostic(
                    severity=DiagnosticSeverity(match.group("severity").lower()),
                    code=match.group("code"),
                    message=match.group("message"),
                    file=match.group("file").strip(),
                    line=int(match.group("line")),
                    column=int(match.group("col")),
                    project=match.group("project"),
                )
            )
            continue

        match = MSBUILD_SIMPLE_PATTERN.match(line)
        if match:
            diagnostics.append(
                BuildDiagnostic(
                    severity=DiagnosticSeverity(match.group("severity").lower()),
                    code=match.group("code"),
                    message=match.group("message"),
                    file=match.group("file"),
                    project=match.group("project"),
                )
            )

    return diagnostics


@dataclass
class DiagnosticsSink:
    """Listener that records the errors raised during a target run."""

    diagnostics: list[BuildDiagnostic] = field(default_factory=list)

    def error_raised(self, diagnostic: BuildDiagnostic) -> None:
        if diagnostic.severity == DiagnosticSeverity.ERROR:
            self.diagnostics.append(diagnostic)

    @property
    def errors(self) -> list[str]:
        """Formatted error lines, in the order they were raised."""
        return [d.format() for d in self.diagnostics]
