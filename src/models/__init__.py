"""Models for scanned symbols and generation plans."""

from models.plan import GenerationMode, GenerationPlan, TemplateFamily
from models.symbols import MethodInfo, SymbolKind, SymbolNode, Visibility

__all__ = [
    "GenerationMode",
    "GenerationPlan",
    "MethodInfo",
    "SymbolKind",
    "SymbolNode",
    "TemplateFamily",
    "Visibility",
]
