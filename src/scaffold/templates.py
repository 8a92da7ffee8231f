"""Spec templates and the rules that choose between them.

Every family has two variants: ``full`` renders a brand-new spec file and
``methods_part`` renders only the examples appended to an existing one. The
``full`` variant includes ``methods_part``, so both stay in step.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING

from jinja2 import DictLoader, Environment, StrictUndefined

from models.plan import GenerationMode, TemplateFamily

if TYPE_CHECKING:
    from collections.abc import Mapping

VARIANT_FULL = "full"
VARIANT_METHODS_PART = "methods_part"

BASIC_METHODS_PART_TEMPLATE = """\
{% for method in methods_to_generate %}

  # TODO auto-generated
  describe '#{{ method.name }}' do
    it 'works' do
{{ instantiation_code(method) }}{{ params_initialization_code(method) }}\
      result = {{ method_invocation_code(method) }}
      expect(result).not_to be_nil
    end
  end
{% endfor %}

"""

BASIC_NEW_SPEC_TEMPLATE = """\
# -*- encoding: utf-8 -*-

require 'spec_helper'
{% if not rails_mode %}
require '{{ self_path }}'
{% endif %}

describe {{ complete_class_name(target_symbol) }} do
{% include "basic/methods_part" %}
end
"""

RAILS_CONTROLLER_METHODS_PART_TEMPLATE = """\
{% for method in methods_to_generate %}

  # TODO auto-generated
  describe '{{ http_method(method.name) | upper }} {{ method.name }}' do
    it 'works' do
      {{ http_method(method.name) }} :{{ method.name }}, params: {}
      expect(response.status).to eq(200)
    end
  end
{% endfor %}

"""

RAILS_CONTROLLER_NEW_SPEC_TEMPLATE = """\
# -*- encoding: utf-8 -*-

require 'spec_helper'

describe {{ complete_class_name(target_symbol) }} do
{% include "rails_controller/methods_part" %}
end
"""

RAILS_HELPER_METHODS_PART_TEMPLATE = """\
{% for method in methods_to_generate %}

  # TODO auto-generated
  describe '#{{ method.name }}' do
    it 'works' do
{{ params_initialization_code(method) }}\
      result = {{ helper_method_invocation_code(method) }}
      expect(result).not_to be_nil
    end
  end
{% endfor %}

"""

RAILS_HELPER_NEW_SPEC_TEMPLATE = """\
# -*- encoding: utf-8 -*-

require 'spec_helper'

describe {{ complete_class_name(target_symbol) }} do
{% include "rails_helper/methods_part" %}
end
"""


def template_key(family: TemplateFamily, variant: str) -> str:
    return f"{family.value}/{variant}"


DEFAULT_TEMPLATES: dict[str, str] = {
    template_key(TemplateFamily.BASIC, VARIANT_FULL): BASIC_NEW_SPEC_TEMPLATE,
    template_key(
        TemplateFamily.BASIC, VARIANT_METHODS_PART
    ): BASIC_METHODS_PART_TEMPLATE,
    template_key(
        TemplateFamily.RAILS_CONTROLLER, VARIANT_FULL
    ): RAILS_CONTROLLER_NEW_SPEC_TEMPLATE,
    template_key(
        TemplateFamily.RAILS_CONTROLLER, VARIANT_METHODS_PART
    ): RAILS_CONTROLLER_METHODS_PART_TEMPLATE,
    template_key(
        TemplateFamily.RAILS_HELPER, VARIANT_FULL
    ): RAILS_HELPER_NEW_SPEC_TEMPLATE,
    template_key(
        TemplateFamily.RAILS_HELPER, VARIANT_METHODS_PART
    ): RAILS_HELPER_METHODS_PART_TEMPLATE,
}


class TemplateSet:
    """Template sources keyed by ``family/variant``.

    Entries passed in replace the defaults with the same key, which lets a
    project swap one variant without restating the others.
    """

    def __init__(self, templates: Mapping[str, str] | None = None) -> None:
        self._templates = {**DEFAULT_TEMPLATES, **(templates or {})}

    def source(self, family: TemplateFamily, variant: str) -> str:
        return self._templates[template_key(family, variant)]

    @cached_property
    def environment(self) -> Environment:
        return Environment(
            loader=DictLoader(self._templates),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )


@dataclass(frozen=True)
class TemplateChoice:
    """Result of template selection.

    ``override`` holds caller-supplied template text; when it is set it is
    rendered verbatim instead of the family template.
    """

    family: TemplateFamily
    variant: str
    override: str | None = None

    @property
    def key(self) -> str:
        return template_key(self.family, self.variant)


def select_family(*, rails_mode: bool, target_path: str) -> TemplateFamily:
    if rails_mode and "controllers" in target_path:
        return TemplateFamily.RAILS_CONTROLLER
    if rails_mode and "helpers" in target_path:
        return TemplateFamily.RAILS_HELPER
    return TemplateFamily.BASIC


def select_template(
    mode: GenerationMode,
    *,
    rails_mode: bool,
    target_path: str,
    full_template: str | None = None,
    delta_template: str | None = None,
) -> TemplateChoice:
    """Choose the template for one generation run.

    A caller-supplied template for the mode always wins. Otherwise, with
    rails conventions enabled, paths under ``controllers`` and ``helpers``
    get their own families, and everything else uses the basic family.
    """
    is_full = mode is GenerationMode.FULL
    variant = VARIANT_FULL if is_full else VARIANT_METHODS_PART
    override = full_template if is_full else delta_template
    family = select_family(rails_mode=rails_mode, target_path=target_path)
    return TemplateChoice(family=family, variant=variant, override=override)


__all__ = [
    "DEFAULT_TEMPLATES",
    "VARIANT_FULL",
    "VARIANT_METHODS_PART",
    "TemplateChoice",
    "TemplateSet",
    "select_family",
    "select_template",
    "template_key",
]
