"""Rendering of generation plans into RSpec source."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

from jinja2 import TemplateError

from errors import RenderError
from parse.signatures import format_params_clause, parse_params
from scaffold.naming import resolve_instance_identifier, resolve_qualified_name
from scaffold.templates import TemplateSet

if TYPE_CHECKING:
    from models.plan import GenerationPlan
    from models.symbols import MethodInfo, SymbolNode
    from scaffold.templates import TemplateChoice

INDENT = "      "

RAILS_RESOURCE_HTTP_METHODS: dict[str, str] = {
    "index": "get",
    "new": "get",
    "create": "post",
    "show": "get",
    "edit": "get",
    "update": "put",
    "destroy": "delete",
}


def http_method(method_name: str) -> str:
    """Return the request verb for a controller action (``get`` if unknown)."""
    return RAILS_RESOURCE_HTTP_METHODS.get(method_name, "get")


def params_part(method: MethodInfo) -> str:
    return format_params_clause(parse_params(method.raw_params))


def block_code(method: MethodInfo) -> str:
    """e.g. `` { |a, b| }``"""
    if not method.block_params:
        return ""
    return f" {{ |{method.block_params}| }}"


def params_initialization_code(method: MethodInfo) -> str:
    """One ``double`` binding per parameter.

    e.g.
          a = double('a')
          b = double('b')
    """
    return "".join(f"{INDENT}{name} = double('{name}')\n" for name in method.param_names)


def instantiation_code(target: SymbolNode, method: MethodInfo) -> str:
    """Construction lines for an instance method example.

    e.g.
          a = double('a')
          bar_baz = Foo::BarBaz.new(a)
    """
    if method.is_singleton:
        return ""

    instance = resolve_instance_identifier(target)
    class_name = resolve_qualified_name(target)
    constructor = target.find_method("new")
    if constructor is None:
        return f"{INDENT}{instance} = {class_name}.new\n"
    return (
        params_initialization_code(constructor)
        + f"{INDENT}{instance} = {class_name}.new{params_part(constructor)}\n"
    )


def method_invocation_code(target: SymbolNode, method: MethodInfo) -> str:
    """e.g. ``Foo::BarBaz.do_something(a, b) { |c| }``"""
    if method.is_singleton:
        receiver = resolve_qualified_name(target)
    else:
        receiver = resolve_instance_identifier(target)
    return f"{receiver}.{method.name}{params_part(method)}{block_code(method)}"


def helper_method_invocation_code(method: MethodInfo) -> str:
    """e.g. ``do_something(a, b) { |c| }``"""
    return f"{method.name}{params_part(method)}{block_code(method)}"


def template_bindings(plan: GenerationPlan) -> dict[str, Any]:
    """Names visible to every template.

    Custom templates rely on these names; treat them as a public contract.
    """
    target = plan.target
    return {
        "plan": plan,
        "target_symbol": target,
        "methods_to_generate": list(plan.methods),
        "self_path": plan.require_path,
        "rails_mode": plan.rails_mode,
        "complete_class_name": resolve_qualified_name,
        "instance_name": resolve_instance_identifier,
        "param_names": parse_params,
        "params_part": params_part,
        "block_code": block_code,
        "http_method": http_method,
        "params_initialization_code": params_initialization_code,
        "instantiation_code": partial(instantiation_code, target),
        "method_invocation_code": partial(method_invocation_code, target),
        "helper_method_invocation_code": helper_method_invocation_code,
    }


def render(
    choice: TemplateChoice,
    plan: GenerationPlan,
    templates: TemplateSet | None = None,
) -> str:
    """Render ``plan`` with the chosen template and return the code text."""
    if templates is None:
        templates = TemplateSet()
    env = templates.environment
    try:
        if choice.override is not None:
            template = env.from_string(choice.override)
        else:
            template = env.get_template(choice.key)
        return template.render(**template_bindings(plan))
    except TemplateError as exc:
        msg = f"Failed to render template {choice.key}: {exc}"
        raise RenderError(msg) from exc


__all__ = [
    "RAILS_RESOURCE_HTTP_METHODS",
    "block_code",
    "helper_method_invocation_code",
    "http_method",
    "instantiation_code",
    "method_invocation_code",
    "params_initialization_code",
    "params_part",
    "render",
    "template_bindings",
]
