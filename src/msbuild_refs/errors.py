"""Exceptions raised while evaluating MSBuild projects."""

from __future__ import annotations

from typing import Any

from .diagnostics import BuildDiagnostic


class MSBuildRefsError(Exception):
    """Base exception for project evaluation errors."""

    pass


class LoadFailure(MSBuildRefsError):
    """Raised when a project file is missing or cannot be evaluated."""

    def __init__(self, message: str, project_path: str | None = None):
        super().__init__(message)
        self.project_path = project_path


class BuildFailure(MSBuildRefsError):
    """Raised when a requested build target did not succeed.

    The message is every captured error line joined by line breaks.
    """

    def __init__(
        self,
        message: str,
        project_path: str | None = None,
        targets: list[str] | None = None,
        diagnostics: list[BuildDiagnostic] | None = None,
    ):
        super().__init__(message)
        self.project_path = project_path
        self.targets = targets or []
        self.diagnostics = diagnostics or []

    @classmethod
    def from_diagnostics(
        cls,
        project_path: str,
        targets: list[str],
        diagnostics: list[BuildDiagnostic],
    ) -> BuildFailure:
        """Build the aggregated failure report for a failed target run."""
        lines = [d.format() for d in diagnostics]
        if not lines:
            lines = [f"{project_path}: target(s) {';'.join(targets)} failed without errors"]
        return cls(
            "\n".join(lines),
            project_path=project_path,
            targets=targets,
            diagnostics=diagnostics,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "targets": list(self.targets),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
        if self.project_path:
            result["projectPath"] = self.project_path
        return result
