"""Selection of the spec target and of the methods that need examples."""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.plan import GenerationMode, GenerationPlan, TemplateFamily
from scaffold.naming import resolve_instance_identifier, resolve_qualified_name

if TYPE_CHECKING:
    from models.symbols import MethodInfo, SymbolNode


def extract_target(node: SymbolNode) -> SymbolNode | None:
    """Pick the class or module a spec file is generated for.

    The first class wins. Without one, the first module is searched the same
    way, and a module that contains no class is itself the target.
    """
    if node.classes:
        return node.classes[0]
    if node.modules:
        return extract_target(node.modules[0])
    return node if node.kind == "module" else None


def select_methods(
    node: SymbolNode,
    mode: GenerationMode,
    existing_spec: str = "",
) -> list[MethodInfo]:
    """Return the public methods of ``node`` that need examples.

    In delta mode a method counts as covered when its name occurs anywhere in
    ``existing_spec``. This is a plain substring test: a method named ``get``
    is treated as covered by a spec mentioning ``target``.
    """
    public = [m for m in node.methods if m.visibility == "public"]
    if mode is GenerationMode.DELTA:
        return [m for m in public if m.name not in existing_spec]
    return public


def build_plan(
    node: SymbolNode,
    mode: GenerationMode,
    *,
    family: TemplateFamily,
    require_path: str,
    existing_spec: str = "",
    rails_mode: bool = False,
) -> GenerationPlan:
    return GenerationPlan(
        mode=mode,
        target=node,
        qualified_name=resolve_qualified_name(node),
        instance_name=resolve_instance_identifier(node),
        methods=tuple(select_methods(node, mode, existing_spec)),
        family=family,
        require_path=require_path,
        rails_mode=rails_mode,
    )


__all__ = ["build_plan", "extract_target", "select_methods"]
