"""Evaluator backed by the .NET SDK's ``dotnet msbuild``.

Properties are read with ``-getProperty:`` and items with ``-getItem:``,
both of which make MSBuild print JSON instead of its usual log:

    {"Properties": {"OutputPath": "bin\\Debug\\"},
     "Items": {"Compile": [{"Identity": "Program.cs", "FullPath": "..."}]}}

A single ``-getProperty:`` prints the bare value instead, so property
queries always ask for at least two names.

Every call blocks until MSBuild exits. There is no timeout.
"""

from __future__ import annotations

import logging
import os
import subprocess

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config import ResolverConfig, get_config
from ..diagnostics import DiagnosticSeverity, DiagnosticsSink, parse_msbuild_output
from ..errors import LoadFailure
from ..policy import EvaluationPolicy
from .base import EvaluatedItem, EvaluationResult, ProjectHandle

logger = logging.getLogger(__name__)

# Evaluated by every load; enough to compute the output assembly
LOAD_PROPERTIES: tuple[str, ...] = ("OutputPath", "AssemblyName", "OutputType")

# Padding property that forces JSON output for single-property queries
JSON_PADDING_PROPERTY = "MSBuildProjectFullPath"


class MSBuildItemOutput(BaseModel):
    """One item in ``-getItem`` output; metadata arrives as extra fields."""

    model_config = ConfigDict(extra="allow")

    Identity: str


class MSBuildQueryOutput(BaseModel):
    """Top-level ``-getProperty``/``-getItem`` JSON document."""

    Properties: dict[str, str] = Field(default_factory=dict)
    Items: dict[str, list[MSBuildItemOutput]] = Field(default_factory=dict)


def parse_query_output(stdout: str) -> MSBuildQueryOutput:
    """Parse MSBuild's JSON query output.

    Raises:
        ValueError: If no JSON document can be found or validated
    """
    start = stdout.find("{")
    end = stdout.rfind("}")
    if start < 0 or end < start:
        raise ValueError("No JSON document in MSBuild output")
    try:
        return MSBuildQueryOutput.model_validate_json(stdout[start : end + 1])
    except ValidationError as e:
        raise ValueError(f"Unexpected MSBuild output: {e}") from e


class DotnetEvaluator:
    """Runs ``dotnet msbuild`` against one project at a time.

    Usage:
        evaluator = DotnetEvaluator()
        handle = evaluator.load("/src/App/App.csproj", "Debug")
        result = evaluator.evaluate(handle, ["ResolveAssemblyReferences"])
    """

    def __init__(
        self,
        config: ResolverConfig | None = None,
        policy: EvaluationPolicy | None = None,
    ):
        self._config = config or get_config()
        self._policy = policy or EvaluationPolicy()
        self._item_kinds = self._policy.validate_names(self._config.item_kinds, "item")

    @property
    def item_kinds(self) -> list[str]:
        """Item kinds requested from every target run."""
        return list(self._item_kinds)

    def load(
        self,
        project_path: str,
        configuration: str,
        build_project_references: bool = False,
    ) -> ProjectHandle:
        """Load a project and evaluate its output-related properties.

        Raises:
            LoadFailure: If the file is missing or MSBuild cannot evaluate it
        """
        try:
            project_path = self._policy.validate_project_path(project_path)
            configuration = self._policy.validate_configuration(configuration)
        except ValueError as e:
            raise LoadFailure(str(e), project_path=project_path) from e

        if not os.path.isfile(project_path):
            raise LoadFailure(f"Project file not found: {project_path}", project_path=project_path)

        handle = ProjectHandle(
            project_path=project_path,
            configuration=configuration,
            global_properties={
                "Configuration": configuration,
                "BuildProjectReferences": "true" if build_project_references else "false",
            },
        )
        handle.properties.update(self._query_properties(handle, list(LOAD_PROPERTIES)))
        logger.debug(f"Loaded {project_path} ({configuration}): {handle.properties}")
        return handle

    def get_property(self, handle: ProjectHandle, name: str) -> str:
        """Evaluated value of a property, empty string if undefined."""
        self._policy.validate_name(name, "property")
        if name not in handle.properties:
            handle.properties.update(self._query_properties(handle, [name]))
        return handle.properties.get(name, "")

    def evaluate(self, handle: ProjectHandle, target_names: list[str]) -> EvaluationResult:
        """Run targets and collect the configured item kinds.

        A failed target run is reported through ``success``, not raised.
        """
        targets = self._policy.validate_names(target_names, "target")
        command = self._base_command(handle) + [f"-t:{';'.join(targets)}"]
        command += [f"-getItem:{kind}" for kind in self._item_kinds]

        completed = self._run(command, handle)
        success = completed.returncode == 0

        output = completed.stderr if success else completed.stdout + "\n" + completed.stderr
        diagnostics = [
            d for d in parse_msbuild_output(output) if d.severity == DiagnosticSeverity.ERROR
        ]
        handle.publish(diagnostics)

        if not success:
            logger.info(
                f"Target(s) {';'.join(targets)} failed for {handle.project_path} "
                f"(exit code {completed.returncode}, {len(diagnostics)} errors)"
            )
            return EvaluationResult(success=False, diagnostics=diagnostics)

        try:
            parsed = parse_query_output(completed.stdout)
        except ValueError as e:
            raise LoadFailure(str(e), project_path=handle.project_path) from e

        return EvaluationResult(
            success=True,
            items=self._collect_items(parsed),
            diagnostics=diagnostics,
        )

    def register_diagnostics_listener(self, handle: ProjectHandle) -> DiagnosticsSink:
        """Attach a sink that receives the errors of later target runs."""
        sink = DiagnosticsSink()
        handle.sinks.append(sink)
        return sink

    def _collect_items(self, parsed: MSBuildQueryOutput) -> list[EvaluatedItem]:
        """Flatten grouped items, kinds in configured order."""
        items: list[EvaluatedItem] = []
        for kind in self._item_kinds:
            for name, entries in parsed.Items.items():
                if name.lower() != kind.lower():
                    continue
                for entry in entries:
                    metadata = {k: str(v) for k, v in (entry.model_extra or {}).items()}
                    items.append(EvaluatedItem(kind=name, value=entry.Identity, metadata=metadata))
        return items

    def _query_properties(self, handle: ProjectHandle, names: list[str]) -> dict[str, str]:
        names = self._policy.validate_names(names, "property")
        query = list(names)
        if len(query) < 2:
            query.append(JSON_PADDING_PROPERTY)

        command = self._base_command(handle) + [f"-getProperty:{n}" for n in query]
        completed = self._run(command, handle)
        if completed.returncode != 0:
            errors = [d.format() for d in parse_msbuild_output(completed.stdout + "\n" + completed.stderr)]
            detail = "\n".join(errors) or f"exit code {completed.returncode}"
            raise LoadFailure(
                f"Cannot evaluate {handle.project_path}:\n{detail}",
                project_path=handle.project_path,
            )

        try:
            parsed = parse_query_output(completed.stdout)
        except ValueError as e:
            raise LoadFailure(str(e), project_path=handle.project_path) from e

        return {name: parsed.Properties.get(name, "") for name in names}

    def _base_command(self, handle: ProjectHandle) -> list[str]:
        command = [self._config.dotnet_path, "msbuild", handle.project_path, "-nologo"]
        command += [f"-p:{name}={value}" for name, value in handle.global_properties.items()]
        return command

    def _run(self, command: list[str], handle: ProjectHandle) -> subprocess.CompletedProcess[str]:
        logger.debug(f"Running: {' '.join(command)}")
        try:
            # Never use shell=True
            return subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                cwd=os.path.dirname(handle.project_path),
                check=False,
            )
        except OSError as e:
            raise LoadFailure(
                f"Cannot run {self._config.dotnet_path}: {e}",
                project_path=handle.project_path,
            ) from e
