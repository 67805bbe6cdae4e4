"""Process-wide settings for project evaluation.

The build configuration is chosen once at process start (from the
environment or the pytest command line) and used for every project load.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_CONFIGURATION = "Debug"

# Item kinds the reference and source resolvers read
RESOLVED_FILES_ITEM = "_ResolveAssemblyReferenceResolvedFiles"
PROJECT_REFERENCE_ITEM = "ProjectReference"
COMPILE_ITEM = "Compile"

# Static items come first, then items created by the target run, matching
# the order the build engine lists evaluated items in
DEFAULT_ITEM_KINDS: tuple[str, ...] = (
    PROJECT_REFERENCE_ITEM,
    COMPILE_ITEM,
    RESOLVED_FILES_ITEM,
)


@dataclass
class ResolverConfig:
    """Settings shared by every evaluator created during a test run."""

    configuration: str = DEFAULT_CONFIGURATION
    """Build variant set on every loaded project (Debug, Release, Signed)."""

    dotnet_path: str = "dotnet"
    """Executable used to run ``dotnet msbuild``."""

    build_project_references: bool = False
    """Value of the BuildProjectReferences global property."""

    item_kinds: tuple[str, ...] = DEFAULT_ITEM_KINDS
    """Item kinds requested from each target run."""

    configuration_env_vars: tuple[str, ...] = field(
        default_factory=lambda: ("MSBUILD_REFS_CONFIGURATION",)
    )
    dotnet_env_vars: tuple[str, ...] = field(
        default_factory=lambda: ("MSBUILD_REFS_DOTNET", "DOTNET_HOST_PATH")
    )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> ResolverConfig:
        """Create a config from environment variables, first match wins."""
        env = os.environ if environ is None else environ
        config = cls()
        for name in config.configuration_env_vars:
            if env.get(name):
                config.configuration = env[name]
                break
        for name in config.dotnet_env_vars:
            if env.get(name):
                config.dotnet_path = env[name]
                break
        return config


_config: ResolverConfig | None = None


def configure(
    *,
    configuration: str | None = None,
    dotnet_path: str | None = None,
    build_project_references: bool | None = None,
) -> ResolverConfig:
    """Set the process-wide config, starting from the environment.

    Explicit arguments override environment values.
    """
    global _config
    config = ResolverConfig.from_env()
    if configuration:
        config.configuration = configuration
    if dotnet_path:
        config.dotnet_path = dotnet_path
    if build_project_references is not None:
        config.build_project_references = build_project_references
    _config = config
    logger.debug(
        f"Resolver configured: configuration={config.configuration}, "
        f"dotnet={config.dotnet_path}"
    )
    return config


def get_config() -> ResolverConfig:
    """Get the process-wide config, reading the environment on first use."""
    global _config
    if _config is None:
        _config = ResolverConfig.from_env()
    return _config


def reset_config() -> None:
    """Forget the process-wide config so the next lookup re-reads the environment."""
    global _config
    _config = None
