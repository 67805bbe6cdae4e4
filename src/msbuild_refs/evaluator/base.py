"""Evaluator contract - the build engine as seen by the resolvers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from ..diagnostics import BuildDiagnostic, DiagnosticsSink


@dataclass
class EvaluatedItem:
    """An item produced by evaluating a project against a target.

    ``value`` is the evaluated item spec and may be relative to the
    owning project's directory.
    """

    kind: str
    value: str
    metadata: dict[str, str] = field(default_factory=dict)

    def is_kind(self, kind: str) -> bool:
        """Item names compare case-insensitively, as in MSBuild."""
        return self.kind.lower() == kind.lower()


@dataclass
class EvaluationResult:
    """Outcome of running targets against a loaded project."""

    success: bool
    items: list[EvaluatedItem] = field(default_factory=list)
    diagnostics: list[BuildDiagnostic] = field(default_factory=list)

    def items_of(self, kind: str) -> list[EvaluatedItem]:
        return [item for item in self.items if item.is_kind(kind)]


@dataclass
class ProjectHandle:
    """A loaded, property-evaluated project.

    Owned by whoever loaded it for the duration of one resolution call.
    """

    project_path: str
    configuration: str
    global_properties: dict[str, str] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    sinks: list[DiagnosticsSink] = field(default_factory=list)

    def publish(self, diagnostics: list[BuildDiagnostic]) -> None:
        """Forward diagnostics to every registered sink."""
        for sink in self.sinks:
            for diagnostic in diagnostics:
                sink.error_raised(diagnostic)


class ProjectEvaluator(Protocol):
    """External build engine.

    Implementations raise :class:`~msbuild_refs.errors.LoadFailure` from
    ``load`` when the project is missing or malformed.
    """

    def load(
        self,
        project_path: str,
        configuration: str,
        build_project_references: bool = False,
    ) -> ProjectHandle: ...

    def get_property(self, handle: ProjectHandle, name: str) -> str: ...

    def evaluate(self, handle: ProjectHandle, target_names: list[str]) -> EvaluationResult: ...

    def register_diagnostics_listener(self, handle: ProjectHandle) -> DiagnosticsSink: ...
