"""Ground-truth reference and source lists for MSBuild projects under test.

Evaluates project files with the build engine and reports:
- referenced assemblies, including outputs of referenced projects
- the output assembly of a project
- the compiled source files of a project
"""

from .config import ResolverConfig, configure, get_config
from .errors import BuildFailure, LoadFailure, MSBuildRefsError
from .items import TaskItem, as_strings, as_task_items
from .paths import make_full_path, make_full_paths
from .resolver import (
    ReferenceResolver,
    get_output_assembly,
    get_reference_assemblies,
    get_source_files,
)

__all__ = [
    "ReferenceResolver",
    "get_output_assembly",
    "get_reference_assemblies",
    "get_source_files",
    "make_full_path",
    "make_full_paths",
    "TaskItem",
    "as_task_items",
    "as_strings",
    "ResolverConfig",
    "configure",
    "get_config",
    "MSBuildRefsError",
    "LoadFailure",
    "BuildFailure",
]
