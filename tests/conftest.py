"""Pytest fixtures for msbuild-refs tests."""

import os
import sys
from dataclasses import dataclass, field

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from msbuild_refs import config as config_module  # noqa: E402
from msbuild_refs.config import ResolverConfig  # noqa: E402
from msbuild_refs.diagnostics import BuildDiagnostic, DiagnosticsSink  # noqa: E402
from msbuild_refs.errors import LoadFailure  # noqa: E402
from msbuild_refs.evaluator import EvaluatedItem, EvaluationResult, ProjectHandle  # noqa: E402
from msbuild_refs.resolver import ReferenceResolver  # noqa: E402

pytest_plugins = ["msbuild_refs.pytest_plugin"]


@dataclass
class FakeProject:
    """Canned evaluation results for one project file."""

    properties: dict[str, str] = field(default_factory=dict)
    items: list[tuple[str, str]] = field(default_factory=list)
    failing_targets: set[str] = field(default_factory=set)
    diagnostics: list[BuildDiagnostic] = field(default_factory=list)


class FakeEvaluator:
    """In-memory evaluator returning canned items."""

    def __init__(self, build: "FakeBuild"):
        self._build = build

    def load(self, project_path, configuration, build_project_references=False):
        self._build.loads.append((project_path, configuration, build_project_references))
        if project_path not in self._build.projects:
            raise LoadFailure(f"Project file not found: {project_path}", project_path=project_path)
        project = self._build.projects[project_path]
        return ProjectHandle(
            project_path=project_path,
            configuration=configuration,
            properties=dict(project.properties),
        )

    def get_property(self, handle, name):
        return handle.properties.get(name, "")

    def evaluate(self, handle, target_names):
        self._build.evaluations.append((handle.project_path, list(target_names)))
        project = self._build.projects[handle.project_path]
        if project.failing_targets.intersection(target_names):
            handle.publish(project.diagnostics)
            return EvaluationResult(success=False, diagnostics=list(project.diagnostics))
        items = [EvaluatedItem(kind=kind, value=value) for kind, value in project.items]
        return EvaluationResult(success=True, items=items)

    def register_diagnostics_listener(self, handle):
        sink = DiagnosticsSink()
        handle.sinks.append(sink)
        return sink


@dataclass
class FakeBuild:
    """A set of fake projects plus a log of what was evaluated."""

    projects: dict[str, FakeProject] = field(default_factory=dict)
    loads: list[tuple[str, str, bool]] = field(default_factory=list)
    evaluations: list[tuple[str, list[str]]] = field(default_factory=list)
    evaluators_created: int = 0

    def add_project(self, path, items=None, failing_targets=None, diagnostics=None, **properties):
        project = FakeProject(
            properties=properties,
            items=list(items or []),
            failing_targets=set(failing_targets or []),
            diagnostics=list(diagnostics or []),
        )
        self.projects[path] = project
        return project

    def factory(self):
        self.evaluators_created += 1
        return FakeEvaluator(self)

    def resolver(self, configuration="Debug"):
        return ReferenceResolver(
            ResolverConfig(configuration=configuration),
            evaluator_factory=self.factory,
        )


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate tests from the process-wide config and environment."""
    for name in ("MSBUILD_REFS_CONFIGURATION", "MSBUILD_REFS_DOTNET", "DOTNET_HOST_PATH"):
        monkeypatch.delenv(name, raising=False)
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def fake_build():
    """Empty fake build; add projects with add_project()."""
    return FakeBuild()


@pytest.fixture
def library_project(fake_build):
    """Library project at /src/Lib/Lib.csproj with one external reference."""
    fake_build.add_project(
        "/src/Lib/Lib.csproj",
        items=[
            ("_ResolveAssemblyReferenceResolvedFiles", "/ref/System.dll"),
            ("Compile", "Library.cs"),
        ],
        OutputPath="bin\\Debug\\",
        AssemblyName="Lib",
        OutputType="Library",
    )
    return "/src/Lib/Lib.csproj"
