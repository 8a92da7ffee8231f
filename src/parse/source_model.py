"""Source model capability consumed by the spec generator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pathlib import Path

    from models.symbols import SymbolNode


class SourceModel(Protocol):
    """Anything that turns a source file into a symbol tree."""

    def scan(self, file_path: Path) -> SymbolNode:
        """Return the ``file`` root node for ``file_path``.

        Implementations raise ``ScanError`` when the file cannot be read.
        """
        ...


__all__ = ["SourceModel"]
