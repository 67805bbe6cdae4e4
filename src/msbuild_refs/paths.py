"""Path normalization helpers.

MSBuild hands back item specs and property values that may be relative to
the owning project's directory. These helpers turn them into absolute paths
the same way the build engine's own test helpers did:

- relative paths are joined onto a base directory
- only paths containing ``..`` are canonicalized

The second rule means two paths that differ only in redundant segments
without ``..`` (``bin/./Foo.dll`` vs ``bin/Foo.dll``, a doubled separator)
are left as-is and will not compare equal.
"""

from __future__ import annotations

import os
from collections.abc import MutableSequence


def to_native_separators(path: str) -> str:
    """Convert MSBuild's backslash separators on non-Windows hosts."""
    if os.sep == "/" and "\\" in path:
        return path.replace("\\", "/")
    return path


def make_full_path(path: str, base_dir: str) -> str:
    """Expand ``path`` to a full path using ``base_dir`` for relative input.

    Args:
        path: File path, absolute or relative to ``base_dir``
        base_dir: Directory relative paths are resolved against

    Returns:
        Absolute path. Canonicalized only if it contains ``..``.
    """
    path = to_native_separators(path)
    if not os.path.isabs(path):
        path = os.path.join(to_native_separators(base_dir), path)
    if ".." in path:
        path = os.path.abspath(path)
    return path


def make_full_paths(paths: MutableSequence[str], base_dir: str) -> None:
    """Rewrite every entry of ``paths`` in place with :func:`make_full_path`."""
    for i in range(len(paths)):
        paths[i] = make_full_path(paths[i], base_dir)


def project_directory(project_path: str) -> str:
    """Directory containing a project file."""
    return os.path.dirname(project_path)
