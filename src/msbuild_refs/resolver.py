"""Reference and source-file resolution for MSBuild projects.

Gives test fixtures the ground-truth file lists of a project under test:

- the assemblies a project references, including the outputs of the
  projects it references
- the output assembly a project builds
- the source files a project compiles

A fresh evaluator is created for every call, recursive calls included, so
no engine state is shared between resolutions.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from .config import (
    COMPILE_ITEM,
    PROJECT_REFERENCE_ITEM,
    RESOLVED_FILES_ITEM,
    ResolverConfig,
    get_config,
)
from .errors import BuildFailure
from .evaluator import DotnetEvaluator, ProjectEvaluator, ProjectHandle
from .paths import make_full_path, make_full_paths, project_directory, to_native_separators

logger = logging.getLogger(__name__)

RESOLVE_REFERENCES_TARGET = "ResolveAssemblyReferences"
BUILD_TARGET = "Build"


class ReferenceResolver:
    """Resolves assemblies and sources of MSBuild projects.

    Usage:
        resolver = ReferenceResolver()
        assemblies = resolver.get_reference_assemblies("/src/App/App.csproj")
    """

    def __init__(
        self,
        config: ResolverConfig | None = None,
        evaluator_factory: Callable[[], ProjectEvaluator] | None = None,
    ):
        """Initialize resolver.

        Args:
            config: Resolver settings (process-wide config if not provided)
            evaluator_factory: Creates one evaluator per call
                (``DotnetEvaluator`` on ``config`` if not provided)
        """
        self._config = config or get_config()
        self._evaluator_factory = evaluator_factory or (
            lambda: DotnetEvaluator(self._config)
        )

    @property
    def config(self) -> ResolverConfig:
        return self._config

    def _load(self, project_path: str) -> tuple[ProjectEvaluator, ProjectHandle]:
        evaluator = self._evaluator_factory()
        handle = evaluator.load(
            project_path,
            self._config.configuration,
            build_project_references=self._config.build_project_references,
        )
        return evaluator, handle

    def get_output_assembly(self, project_path: str) -> str:
        """Get the absolute path of the assembly a project builds.

        The file is not required to exist; the project may not be built yet.

        Args:
            project_path: Path to the project file

        Returns:
            Absolute path to the output assembly, or "" if the project has
            no AssemblyName

        Raises:
            LoadFailure: If the project cannot be loaded
        """
        project_path = os.path.abspath(project_path)
        project_dir = project_directory(project_path)

        evaluator, handle = self._load(project_path)
        output_path = to_native_separators(evaluator.get_property(handle, "OutputPath"))
        assembly_name = evaluator.get_property(handle, "AssemblyName")
        output_type = evaluator.get_property(handle, "OutputType")

        if not assembly_name:
            logger.warning(f"No AssemblyName in {project_path}, output assembly unknown")
            return ""

        if not os.path.isabs(output_path):
            output_path = os.path.join(project_dir, output_path)
        output_assembly = os.path.abspath(os.path.join(output_path, assembly_name))

        extension = ".exe" if output_type.lower() == "exe" else ".dll"
        return make_full_path(output_assembly + extension, project_dir)

    def get_reference_assemblies(
        self,
        project_path: str,
        assemblies: list[str] | None = None,
    ) -> list[str]:
        """Add the assemblies referenced by a project to ``assemblies``.

        Resolved file references are added as-is; each project reference
        contributes the output assembly of the referenced project. Entries
        already in ``assemblies`` are not added again.

        If ``ResolveAssemblyReferences`` fails nothing is added and no
        error is raised.

        Args:
            project_path: Path to the project file
            assemblies: List to add to; a new list if not provided

        Returns:
            ``assemblies``, holding absolute paths in discovery order

        Raises:
            LoadFailure: If this project or a referenced one cannot be loaded
        """
        if assemblies is None:
            assemblies = []
        project_path = os.path.abspath(project_path)
        project_dir = project_directory(project_path)

        evaluator, handle = self._load(project_path)
        result = evaluator.evaluate(handle, [RESOLVE_REFERENCES_TARGET])

        if result.success:
            for item in result.items:
                item_path = make_full_path(item.value, project_dir)

                if item.is_kind(RESOLVED_FILES_ITEM):
                    _append_unique(assemblies, item_path)
                elif item.is_kind(PROJECT_REFERENCE_ITEM):
                    output_assembly = self.get_output_assembly(item_path)
                    if output_assembly:
                        _append_unique(assemblies, output_assembly)
        else:
            logger.debug(f"{RESOLVE_REFERENCES_TARGET} failed for {project_path}, no references added")

        make_full_paths(assemblies, project_dir)
        logger.info(f"Resolved {len(assemblies)} assemblies for {project_path}")
        return assemblies

    def get_source_files(self, project_path: str) -> list[str]:
        """Get the source files a project compiles.

        Runs a full build. Items are returned in evaluation order and
        duplicates are kept.

        Args:
            project_path: Path to the project file

        Returns:
            Absolute paths of the project's Compile items

        Raises:
            LoadFailure: If the project cannot be loaded
            BuildFailure: If the build fails; the message holds every error
        """
        project_path = os.path.abspath(project_path)

        evaluator, handle = self._load(project_path)
        sink = evaluator.register_diagnostics_listener(handle)
        result = evaluator.evaluate(handle, [BUILD_TARGET])

        if not result.success:
            raise BuildFailure.from_diagnostics(project_path, [BUILD_TARGET], sink.diagnostics)

        sources = [item.value for item in result.items_of(COMPILE_ITEM)]
        make_full_paths(sources, project_directory(project_path))
        return sources


def _append_unique(assemblies: list[str], path: str) -> None:
    if path not in assemblies:
        assemblies.append(path)
    else:
        logger.debug(f"Skipping duplicate assembly {path}")


def get_output_assembly(project_path: str) -> str:
    """Output assembly of a project, using the process-wide config."""
    return ReferenceResolver().get_output_assembly(project_path)


def get_reference_assemblies(project_path: str, assemblies: list[str] | None = None) -> list[str]:
    """Referenced assemblies of a project, using the process-wide config."""
    return ReferenceResolver().get_reference_assemblies(project_path, assemblies)


def get_source_files(project_path: str) -> list[str]:
    """Compiled sources of a project, using the process-wide config."""
    return ReferenceResolver().get_source_files(project_path)
