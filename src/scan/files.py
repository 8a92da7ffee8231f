"""Source file discovery for spec scaffolding."""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

RUBY_GLOB = "*.rb"


def _gitignore_matcher(root: Path) -> Callable[[str], bool] | None:
    """Return a matcher for the root ``.gitignore``, if there is one."""
    gitignore_path = root / ".gitignore"
    if not gitignore_path.is_file():
        return None
    return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))


def _relative_source_path(path: Path, root: Path) -> Path | None:
    """Return ``path`` relative to ``root``, or None when it is a symlink or escapes."""
    if not path.is_file() or path.is_symlink():
        return None
    try:
        return path.resolve().relative_to(root)
    except (OSError, ValueError):
        return None


def _matches_filters(
    rel_path: Path,
    skip_dir: str,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    if skip_dir and rel_path.parts[0] == skip_dir:
        return False

    rel_path_str = rel_path.as_posix()
    if include_patterns and not any(fnmatch(rel_path_str, p) for p in include_patterns):
        return False
    return not (
        exclude_patterns and any(fnmatch(rel_path_str, p) for p in exclude_patterns)
    )


def find_ruby_files(
    directory: Path,
    *,
    skip_dir: str = "spec",
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
) -> Iterator[Path]:
    """Find all Ruby files in a directory, respecting the root .gitignore.

    Args:
        directory: Directory to search for Ruby files
        skip_dir: Top-level directory name to skip (default "spec")
        include_patterns: Optional list of fnmatch patterns; if provided,
            files must match at least one pattern to be included
        exclude_patterns: Optional list of fnmatch patterns; files matching
            any pattern are excluded

    Yields:
        Paths under ``directory`` (as given, not resolved), sorted
        lexicographically by relative path for deterministic ordering.
    """
    root = directory.resolve()
    ignored = _gitignore_matcher(root)

    matched: list[Path] = []
    for path in root.rglob(RUBY_GLOB):
        rel_path = _relative_source_path(path, root)
        if rel_path is None:
            continue
        if ignored is not None and ignored(str(path)):
            continue
        if _matches_filters(rel_path, skip_dir, include_patterns, exclude_patterns):
            matched.append(rel_path)

    matched.sort(key=lambda p: p.as_posix())

    for rel_path in matched:
        yield directory / rel_path


def expand_source_paths(
    paths: Iterable[str | Path],
    *,
    skip_dir: str = "spec",
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
) -> Iterator[Path]:
    """Yield files as given and expand directories into their Ruby files.

    Paths that do not exist are passed through so the caller reports them.
    """
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            yield from find_ruby_files(
                path,
                skip_dir=skip_dir,
                include_patterns=include_patterns,
                exclude_patterns=exclude_patterns,
            )
        else:
            yield path


__all__ = ["expand_source_paths", "find_ruby_files"]
