"""Shared path utilities for spec scaffolding."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

SPEC_SUFFIX = "_spec"

_SOURCE_ROOTS = ("lib/", "app/")


def _normalize(file_path: str | Path) -> str:
    path_str = file_path if isinstance(file_path, str) else file_path.as_posix()
    return path_str.replace("\\", "/")


def _strip_source_root(path_str: str) -> str:
    if path_str.startswith("./"):
        path_str = path_str[2:]
    for prefix in _SOURCE_ROOTS:
        if path_str.startswith(prefix):
            return path_str[len(prefix) :]
    return path_str


def _split_extension(path_str: str) -> tuple[str, str]:
    suffix = PurePosixPath(path_str).suffix
    if not suffix:
        return path_str, ""
    return path_str[: -len(suffix)], suffix


def to_spec_path(file_path: str | Path, spec_dir: str | Path = "spec") -> str:
    """Return the spec file path for a source file.

    Examples:
        >>> to_spec_path("lib/foo/bar_baz.rb", "spec")
        'spec/foo/bar_baz_spec.rb'
        >>> to_spec_path("./app/models/user.rb", "spec/")
        'spec/models/user_spec.rb'
    """
    stem, extension = _split_extension(_strip_source_root(_normalize(file_path)))
    spec_root = _normalize(spec_dir).rstrip("/")
    return f"{spec_root}/{stem}{SPEC_SUFFIX}{extension}"


def to_require_path(file_path: str | Path) -> str:
    """Return the string a spec file requires to load the source file.

    Examples:
        >>> to_require_path("app/foo/bar_baz.rb")
        'foo/bar_baz'
        >>> to_require_path("lib/foo.rb")
        'foo'
    """
    stem, _ = _split_extension(_strip_source_root(_normalize(file_path)))
    return stem


__all__ = ["SPEC_SUFFIX", "to_require_path", "to_spec_path"]
