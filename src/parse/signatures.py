"""Method signature parsing."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

_STRIP_CHARS = re.compile(r"[()\s]")


def parse_params(raw: str | None) -> list[str]:
    """Extract parameter names from a raw parameter list.

    Defaults are dropped, so nested default expressions that contain commas
    are split incorrectly. That limitation is accepted.

    Examples:
        >>> parse_params("()")
        []
        >>> parse_params("(a, b = 'foo')")
        ['a', 'b']
    """
    if not raw:
        return []

    names: list[str] = []
    for piece in raw.split(","):
        name = _STRIP_CHARS.sub("", piece).split("=", 1)[0]
        if name:
            names.append(name)
    return names


def format_params_clause(names: Sequence[str]) -> str:
    """Render ``["a", "b"]`` as ``"(a, b)"`` and an empty list as ``""``."""
    if not names:
        return ""
    return f"({', '.join(names)})"


__all__ = ["format_params_clause", "parse_params"]
