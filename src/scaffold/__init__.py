"""Spec scaffolding: target selection, rendering and merging."""

from scaffold.merge import CLOSING_MARKER, MergeResult, merge_fragment
from scaffold.naming import resolve_instance_identifier, resolve_qualified_name
from scaffold.planner import build_plan, extract_target, select_methods
from scaffold.render import render
from scaffold.templates import TemplateChoice, TemplateSet, select_template
from scaffold.write import SpecGenerator, SpecWriteResult

__all__ = [
    "CLOSING_MARKER",
    "MergeResult",
    "SpecGenerator",
    "SpecWriteResult",
    "TemplateChoice",
    "TemplateSet",
    "build_plan",
    "extract_target",
    "merge_fragment",
    "render",
    "resolve_instance_identifier",
    "resolve_qualified_name",
    "select_methods",
    "select_template",
]
