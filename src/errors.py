"""Exception hierarchy for spec scaffolding.

Skips and conflicts are reported as results, not raised. Only failures that
stop a single file from being processed derive from ``ScaffoldError``.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for fatal per-file scaffolding failures."""


class ScanError(ScaffoldError):
    """Raised when a source file cannot be read or scanned."""


class RenderError(ScaffoldError):
    """Raised when a template cannot be compiled or rendered."""


class SpecWriteError(ScaffoldError):
    """Raised when a spec file cannot be read, created or replaced."""


__all__ = ["RenderError", "ScaffoldError", "ScanError", "SpecWriteError"]
