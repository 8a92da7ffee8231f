"""Splicing of new examples into an existing spec file."""

from __future__ import annotations

import re
from dataclasses import dataclass

CLOSING_MARKER = "end"

_TRAILING_COMMENT = re.compile(r"#.+$")


@dataclass(frozen=True)
class MergeResult:
    code: str
    marker_found: bool


def _is_closing_marker(line: str, marker: str) -> bool:
    return _TRAILING_COMMENT.sub("", line).strip() == marker


def strip_closing_marker(existing: str, marker: str = CLOSING_MARKER) -> tuple[str, bool]:
    """Drop the last closing marker line and everything after it.

    Returns the remaining head and whether a marker was found. Without a
    marker the head is empty.
    """
    lines = existing.split("\n")
    for index in range(len(lines) - 1, -1, -1):
        if _is_closing_marker(lines[index], marker):
            return "\n".join(lines[:index]), True
    return "", False


def merge_fragment(
    existing: str,
    fragment: str,
    marker: str = CLOSING_MARKER,
) -> MergeResult:
    """Append ``fragment`` inside the outermost block of ``existing``.

    The last ``end`` line (trailing comments ignored) is removed together with
    anything after it, then the fragment is added and the block re-closed.
    """
    head, found = strip_closing_marker(existing, marker)
    return MergeResult(code=f"{head}\n{fragment}\n{marker}\n", marker_found=found)


__all__ = ["CLOSING_MARKER", "MergeResult", "merge_fragment", "strip_closing_marker"]
