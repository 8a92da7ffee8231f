"""Symbol models for scanned source files.

A scan produces a small tree: one ``file`` root holding the modules and
classes declared in the source, each of which holds its methods and its own
nested modules/classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from parse.signatures import parse_params

SymbolKind = Literal["file", "module", "class"]

Visibility = Literal["public", "private", "protected"]


@dataclass(frozen=True)
class MethodInfo:
    """A method discovered in a module or class body."""

    name: str
    visibility: Visibility = "public"
    is_singleton: bool = False
    raw_params: str = ""
    block_params: str = ""

    @property
    def param_names(self) -> list[str]:
        return parse_params(self.raw_params)


@dataclass(eq=False)
class SymbolNode:
    """A module or class (or the file root) discovered by a scan."""

    name: str
    kind: SymbolKind
    parent: SymbolNode | None = field(default=None, repr=False)
    methods: list[MethodInfo] = field(default_factory=list)
    nested: list[SymbolNode] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name:
            msg = f"{self.kind} symbol name must be non-empty"
            raise ValueError(msg)

    @property
    def classes(self) -> list[SymbolNode]:
        return [child for child in self.nested if child.kind == "class"]

    @property
    def modules(self) -> list[SymbolNode]:
        return [child for child in self.nested if child.kind == "module"]

    def add_child(self, name: str, kind: SymbolKind) -> SymbolNode:
        """Return the child with this name and kind, creating it if needed.

        Ruby allows reopening a module or class, so a second declaration of
        the same name extends the existing node instead of adding a sibling.
        """
        for child in self.nested:
            if child.name == name and child.kind == kind:
                return child
        child = SymbolNode(name=name, kind=kind, parent=self)
        self.nested.append(child)
        return child

    def find_method(self, name: str) -> MethodInfo | None:
        return next((m for m in self.methods if m.name == name), None)


__all__ = ["MethodInfo", "SymbolKind", "SymbolNode", "Visibility"]
