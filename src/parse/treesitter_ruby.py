"""Tree-sitter based symbol extraction for Ruby files."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

from tree_sitter import Language, Node, Parser
from tree_sitter_ruby import language as get_ruby_language

from errors import ScanError
from models.symbols import MethodInfo, SymbolKind, SymbolNode, Visibility

if TYPE_CHECKING:
    from collections.abc import Iterable

_PARSER: Parser | None = None

_VISIBILITY_KEYWORDS: frozenset[str] = frozenset({"public", "private", "protected"})
_CLASS_METHOD_VISIBILITY: dict[str, Visibility] = {
    "private_class_method": "private",
    "public_class_method": "public",
}
_CALL_NODE_TYPES = ("call", "method_call")
_DEFINITION_NODE_TYPES = ("method", "singleton_method", "class", "module")


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with Ruby language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_ruby_language())
        _PARSER = Parser(lang)

    return _PARSER


@dataclass
class _BodyState:
    """Visibility in effect while walking one class or module body."""

    visibility: Visibility = "public"
    module_function: bool = False


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf8", errors="replace")


def _body_statements(node: Node) -> list[Node]:
    """Return the statements of a class/module/singleton class body."""
    body = node.child_by_field_name("body")
    if body is not None:
        return list(body.named_children)

    # Older grammars put the statements directly under the definition node.
    skipped = {
        id(child)
        for child in (
            node.child_by_field_name("name"),
            node.child_by_field_name("superclass"),
            node.child_by_field_name("value"),
        )
        if child is not None
    }
    return [
        child
        for child in node.named_children
        if id(child) not in skipped and child.type != "comment"
    ]


def _declare(scope: SymbolNode, name: str, kind: SymbolKind) -> SymbolNode:
    """Declare ``name`` under ``scope``, expanding ``Foo::Bar`` into a chain."""
    parts = [part for part in name.split("::") if part]
    owner = scope
    for part in parts[:-1]:
        existing = next((c for c in owner.nested if c.name == part), None)
        owner = existing if existing is not None else owner.add_child(part, "module")
    return owner.add_child(parts[-1], kind)


def _raw_params(node: Node) -> str:
    """Return the parameter list without any ``&block`` parameter."""
    params = node.child_by_field_name("parameters")
    if params is None:
        return "()"
    pieces = [
        _text(child)
        for child in params.named_children
        if child.type not in ("block_parameter", "comment")
    ]
    return f"({', '.join(pieces)})"


def _find_yield(node: Node) -> Node | None:
    for child in node.named_children:
        if child.type == "yield":
            return child
        if child.type in _DEFINITION_NODE_TYPES or child.type == "singleton_class":
            continue
        found = _find_yield(child)
        if found is not None:
            return found
    return None


def _block_params(node: Node) -> str:
    """Return the arguments of the first ``yield`` in a method body."""
    body = node.child_by_field_name("body")
    yield_node = _find_yield(body if body is not None else node)
    if yield_node is None:
        return ""
    args = next(
        (c for c in yield_node.named_children if c.type == "argument_list"), None
    )
    if args is None:
        return ""
    return ", ".join(_text(arg) for arg in args.named_children)


def _add_method(
    scope: SymbolNode,
    node: Node,
    *,
    visibility: Visibility,
    singleton: bool,
) -> None:
    name = _text(node.child_by_field_name("name"))
    if not name:
        return

    raw_params = _raw_params(node)
    if name == "initialize" and not singleton:
        # Constructors are exposed the way callers see them: ``Klass.new``.
        name, visibility, singleton = "new", "public", True

    scope.methods.append(
        MethodInfo(
            name=name,
            visibility=visibility,
            is_singleton=singleton,
            raw_params=raw_params,
            block_params=_block_params(node),
        )
    )


def _set_visibility(
    scope: SymbolNode, name: str, visibility: Visibility, *, singleton: bool
) -> None:
    for index, method in enumerate(scope.methods):
        if method.name == name and method.is_singleton == singleton:
            scope.methods[index] = replace(method, visibility=visibility)


def _promote_to_module_function(scope: SymbolNode, name: str) -> None:
    """``module_function :name`` exposes an instance method as a public singleton."""
    for index, method in enumerate(scope.methods):
        if method.name == name and not method.is_singleton:
            scope.methods[index] = replace(
                method, visibility="public", is_singleton=True
            )


def _symbol_name(node: Node) -> str | None:
    if node.type in ("simple_symbol", "symbol"):
        return _text(node).lstrip(":").strip("\"'") or None
    if node.type == "string":
        return _text(node).strip("\"'") or None
    return None


def _handle_visibility_call(
    scope: SymbolNode,
    node: Node,
    state: _BodyState,
    *,
    singleton: bool,
) -> bool:
    """Handle ``private :a``, ``private def a`` and friends. Returns True if handled."""
    if node.child_by_field_name("receiver") is not None:
        return False

    keyword = _text(node.child_by_field_name("method"))
    if (
        keyword not in _VISIBILITY_KEYWORDS
        and keyword not in _CLASS_METHOD_VISIBILITY
        and keyword != "module_function"
    ):
        return False

    args = node.child_by_field_name("arguments")
    arguments = list(args.named_children) if args is not None else []
    if not arguments:
        if keyword in _VISIBILITY_KEYWORDS:
            state.visibility = keyword  # type: ignore[assignment]
            state.module_function = False
        elif keyword == "module_function":
            state.module_function = True
        return True

    for arg in arguments:
        if keyword == "module_function":
            name = _symbol_name(arg)
            if name:
                _promote_to_module_function(scope, name)
            continue

        if keyword in _CLASS_METHOD_VISIBILITY:
            name = _symbol_name(arg)
            if name:
                _set_visibility(
                    scope, name, _CLASS_METHOD_VISIBILITY[keyword], singleton=True
                )
            continue

        if arg.type == "method":
            _add_method(scope, arg, visibility=keyword, singleton=singleton)  # type: ignore[arg-type]
            continue
        name = _symbol_name(arg)
        if name:
            _set_visibility(scope, name, keyword, singleton=singleton)  # type: ignore[arg-type]
    return True


def _visit_statement(
    scope: SymbolNode,
    node: Node,
    state: _BodyState,
    *,
    singleton: bool,
) -> None:
    if node.type in ("class", "module"):
        name = _text(node.child_by_field_name("name"))
        if name:
            owner = _declare(scope, name, node.type)  # type: ignore[arg-type]
            _visit_body(owner, _body_statements(node), singleton=False)
        return

    if node.type == "singleton_class":
        if _text(node.child_by_field_name("value")) == "self":
            _visit_body(scope, _body_statements(node), singleton=True)
        return

    if node.type == "method":
        if state.module_function and not singleton:
            _add_method(scope, node, visibility="public", singleton=True)
        else:
            _add_method(scope, node, visibility=state.visibility, singleton=singleton)
        return

    if node.type == "singleton_method":
        # ``private`` does not apply to ``def self.x``; only private_class_method does.
        _add_method(scope, node, visibility="public", singleton=True)
        return

    if node.type == "identifier":
        keyword = _text(node)
        if keyword in _VISIBILITY_KEYWORDS:
            state.visibility = keyword  # type: ignore[assignment]
            state.module_function = False
        elif keyword == "module_function":
            state.module_function = True
        return

    if node.type in _CALL_NODE_TYPES:
        _handle_visibility_call(scope, node, state, singleton=singleton)


def _visit_body(
    scope: SymbolNode,
    statements: Iterable[Node],
    *,
    singleton: bool,
) -> None:
    state = _BodyState()
    for statement in statements:
        _visit_statement(scope, statement, state, singleton=singleton)


def scan_ruby_source(source_bytes: bytes, name: str = "<source>") -> SymbolNode:
    """Build the symbol tree for Ruby source bytes.

    Args:
        source_bytes: Raw Ruby source
        name: Name given to the ``file`` root node (usually the source path)

    Returns:
        The ``file`` root node. Top-level ``def`` statements are attached
        to it as methods.
    """
    tree = _get_parser().parse(source_bytes)
    root = SymbolNode(name=name, kind="file")
    _visit_body(root, tree.root_node.named_children, singleton=False)
    return root


class RubySourceScanner:
    """Source model backed by tree-sitter-ruby."""

    def scan(self, file_path: Path) -> SymbolNode:
        path = Path(file_path)
        try:
            source_bytes = path.read_bytes()
        except OSError as exc:
            msg = f"Cannot read source file {path}: {exc}"
            raise ScanError(msg) from exc
        return scan_ruby_source(source_bytes, name=path.as_posix())


__all__ = ["RubySourceScanner", "scan_ruby_source"]
