"""Evaluation policy - validation of everything passed to ``dotnet msbuild``.

- Configuration whitelist
- MSBuild identifier syntax for target, property and item names
- UNC and device path denial for project files
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Final

ALLOWED_CONFIGURATIONS: Final[frozenset[str]] = frozenset({"Debug", "Release", "Signed"})

# Target, property and item names (e.g. Build, _ResolveAssemblyReferenceResolvedFiles)
MSBUILD_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")


@dataclass
class EvaluationPolicy:
    """Validation rules for evaluator command lines."""

    allow_unc_paths: bool = True
    allow_device_paths: bool = False
    allowed_configurations: frozenset[str] = ALLOWED_CONFIGURATIONS

    def validate_configuration(self, configuration: str) -> str:
        """Validate a build configuration name.

        Raises:
            ValueError: If the configuration is not whitelisted
        """
        if configuration not in self.allowed_configurations:
            allowed = ", ".join(sorted(self.allowed_configurations))
            raise ValueError(
                f"Configuration not allowed: {configuration!r} (allowed: {allowed})"
            )
        return configuration

    def validate_name(self, name: str, context: str = "name") -> str:
        """Validate a target, property or item name.

        Raises:
            ValueError: If the name is not a valid MSBuild identifier
        """
        if not name or not MSBUILD_NAME_PATTERN.match(name):
            raise ValueError(f"Invalid MSBuild {context}: {name!r}")
        return name

    def validate_names(self, names: list[str] | tuple[str, ...], context: str = "name") -> list[str]:
        if not names:
            raise ValueError(f"At least one {context} is required")
        return [self.validate_name(n, context) for n in names]

    def validate_project_path(self, project_path: str) -> str:
        """Validate and absolutize a project file path.

        Raises:
            ValueError: If the path is empty or a denied path form
        """
        if not project_path:
            raise ValueError("Empty project_path")

        # Device paths (\\?\, \\.\) start with \\ too, so check them first
        if project_path.startswith(("\\\\.\\", "\\\\?\\")):
            if not self.allow_device_paths:
                raise ValueError(f"Device paths not allowed in project_path: {project_path}")
        elif project_path.startswith("\\\\") and not self.allow_unc_paths:
            raise ValueError(f"UNC paths not allowed in project_path: {project_path}")

        # A leading dash would be read as a switch
        if os.path.basename(project_path).startswith("-"):
            raise ValueError(f"Project file name may not start with '-': {project_path}")

        return os.path.abspath(project_path)
