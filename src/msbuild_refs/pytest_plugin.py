"""pytest plugin exposing the resolvers as fixtures.

Enable it from a conftest:

    pytest_plugins = ["msbuild_refs.pytest_plugin"]

A failed build in ``source_files`` fails the test with every MSBuild error
in the failure message.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from .config import ResolverConfig, configure, get_config
from .errors import BuildFailure
from .resolver import ReferenceResolver


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("msbuild-refs")
    group.addoption(
        "--msbuild-configuration",
        action="store",
        default=None,
        help="Build configuration used when evaluating projects "
        "(Debug, Release or Signed). Defaults to $MSBUILD_REFS_CONFIGURATION or Debug.",
    )


def pytest_configure(config: pytest.Config) -> None:
    configuration = config.getoption("--msbuild-configuration", default=None)
    if configuration:
        configure(configuration=configuration)


@pytest.fixture
def msbuild_config() -> ResolverConfig:
    """Process-wide resolver settings."""
    return get_config()


@pytest.fixture
def reference_resolver(msbuild_config: ResolverConfig) -> ReferenceResolver:
    return ReferenceResolver(msbuild_config)


@pytest.fixture
def reference_assemblies(reference_resolver: ReferenceResolver) -> Callable[[str], list[str]]:
    """Callable returning the referenced assemblies of a project."""

    def _get(project_path: str) -> list[str]:
        return reference_resolver.get_reference_assemblies(project_path)

    return _get


@pytest.fixture
def source_files(reference_resolver: ReferenceResolver) -> Callable[[str], list[str]]:
    """Callable returning the compiled sources of a project; fails the test if the build fails."""

    def _get(project_path: str) -> list[str]:
        try:
            return reference_resolver.get_source_files(project_path)
        except BuildFailure as e:
            pytest.fail(str(e), pytrace=False)

    return _get
