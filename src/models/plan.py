"""Per-invocation generation plan."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.symbols import MethodInfo, SymbolNode


class GenerationMode(str, Enum):
    """Whether a whole spec file or only missing examples are generated."""

    FULL = "full"
    DELTA = "delta"


class TemplateFamily(str, Enum):
    """Template families, chosen from the spec target's location."""

    BASIC = "basic"
    RAILS_CONTROLLER = "rails_controller"
    RAILS_HELPER = "rails_helper"


@dataclass(frozen=True)
class GenerationPlan:
    mode: GenerationMode
    target: SymbolNode
    qualified_name: str
    instance_name: str
    methods: tuple[MethodInfo, ...]
    family: TemplateFamily
    require_path: str
    rails_mode: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.methods


__all__ = ["GenerationMode", "GenerationPlan", "TemplateFamily"]
