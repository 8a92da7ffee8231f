"""Name resolution for spec targets."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.symbols import SymbolNode

NAMESPACE_SEPARATOR = "::"

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def resolve_qualified_name(node: SymbolNode, name: str | None = None) -> str:
    """Return the fully qualified constant name of ``node``.

    Parents are prefixed while they are named modules. A class parent or the
    file root ends the walk, so ``module A; class B; class C`` resolves ``C``
    to ``C`` while ``module A; module B; class C`` resolves to ``A::B::C``.
    """
    if name is None:
        name = node.name
    parent = node.parent
    if parent is not None and parent.kind == "module" and parent.name:
        return resolve_qualified_name(
            parent, f"{parent.name}{NAMESPACE_SEPARATOR}{name}"
        )
    return name


def resolve_instance_identifier(target: SymbolNode | str) -> str:
    """Return the snake_case identifier for a constant name.

    A node contributes its own name, which keeps the result a valid local
    variable name. Strings are converted as given, namespaces included.

    Examples:
        >>> resolve_instance_identifier("HTTPServerError")
        'http_server_error'
        >>> resolve_instance_identifier("Foo::BarBaz")
        'foo/bar_baz'
    """
    name = target if isinstance(target, str) else target.name
    name = name.replace(NAMESPACE_SEPARATOR, "/")
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return name.replace("-", "_").lower()


__all__ = [
    "NAMESPACE_SEPARATOR",
    "resolve_instance_identifier",
    "resolve_qualified_name",
]
