"""Parsing utilities for Ruby sources."""

from parse.signatures import format_params_clause, parse_params
from parse.source_model import SourceModel

__all__ = [
    "SourceModel",
    "format_params_clause",
    "parse_params",
]
