"""Spec file generation: create new specs or extend existing ones."""

from __future__ import annotations

import contextlib
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from errors import SpecWriteError
from models.plan import GenerationMode
from parse.treesitter_ruby import RubySourceScanner
from scaffold.merge import merge_fragment
from scaffold.planner import build_plan, extract_target
from scaffold.render import render
from scaffold.templates import TemplateSet, select_template
from settings.logging import get_logger
from utils import to_require_path, to_spec_path

if TYPE_CHECKING:
    from models.symbols import SymbolNode
    from parse.source_model import SourceModel

logger = get_logger(__name__)

SpecStatus = Literal["created", "modified", "exists", "skipped", "conflict", "preview"]


@dataclass(frozen=True)
class SpecWriteResult:
    """Outcome of processing one source file.

    ``code`` is set whenever code was rendered, including previews and
    conflicts, so callers can show what would have been written.
    """

    source_path: str
    status: SpecStatus
    spec_path: str | None = None
    code: str | None = None
    reason: str | None = None

    @property
    def written(self) -> bool:
        return self.status in ("created", "modified")


def _default_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _atomic_write(path: Path, content: str) -> None:
    """Write content atomically: write to temp file then replace.

    An existing file keeps its permission bits; a new file gets the
    umask-based default instead of mkstemp's owner-only mode.
    """
    try:
        mode = stat.S_IMODE(path.stat().st_mode)
    except OSError:
        mode = _default_file_mode()
    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent), suffix=".tmp", prefix=f".{path.name}."
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, str(path))
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


class SpecGenerator:
    """Writes new spec files or appends missing examples to existing ones."""

    def __init__(
        self,
        spec_dir: str | Path = "spec",
        *,
        full_template: str | None = None,
        delta_template: str | None = None,
        templates: TemplateSet | None = None,
        source_model: SourceModel | None = None,
    ) -> None:
        self.spec_dir = str(spec_dir).rstrip("/") or "."
        self.full_template = full_template
        self.delta_template = delta_template
        self.templates = templates if templates is not None else TemplateSet()
        self.source_model = (
            source_model if source_model is not None else RubySourceScanner()
        )

    def write_spec(
        self,
        file_path: str | Path,
        force_write: bool = False,
        dry_run: bool = False,
        rails_mode: bool = False,
    ) -> SpecWriteResult:
        """Create the spec for ``file_path``, or extend it when ``force_write``.

        Raises:
            ScanError: If the source file cannot be read.
            RenderError: If a template fails to render.
            SpecWriteError: If the spec file cannot be read or written.
        """
        source = Path(file_path).as_posix()
        top_level = self.source_model.scan(Path(file_path))
        target = extract_target(top_level)

        if target is None:
            reason = "Class/Module not found"
            logger.info("spec_skipped", source=source, reason=reason)
            return SpecWriteResult(source_path=source, status="skipped", reason=reason)

        spec_path = to_spec_path(source, self.spec_dir)
        if force_write and Path(spec_path).exists():
            return self.append_to_existing_spec(
                target, source, spec_path, dry_run=dry_run, rails_mode=rails_mode
            )
        return self.create_new_spec(
            target, source, spec_path, dry_run=dry_run, rails_mode=rails_mode
        )

    def create_new_spec(
        self,
        target: SymbolNode,
        source: str,
        spec_path: str,
        *,
        dry_run: bool = False,
        rails_mode: bool = False,
    ) -> SpecWriteResult:
        self_path = to_require_path(source)
        choice = select_template(
            GenerationMode.FULL,
            rails_mode=rails_mode,
            target_path=self_path,
            full_template=self.full_template,
        )
        plan = build_plan(
            target,
            GenerationMode.FULL,
            family=choice.family,
            require_path=self_path,
            rails_mode=rails_mode,
        )
        code = render(choice, plan, self.templates)

        if dry_run:
            return SpecWriteResult(
                source_path=source, status="preview", spec_path=spec_path, code=code
            )

        path = Path(spec_path)
        if path.exists():
            logger.info("spec_exists", spec_path=spec_path)
            return SpecWriteResult(
                source_path=source,
                status="exists",
                spec_path=spec_path,
                code=code,
                reason="already exists",
            )

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            _atomic_write(path, code)
        except OSError as exc:
            logger.error("spec_write_failed", spec_path=spec_path, error=str(exc))
            msg = f"Cannot write {spec_path}: {exc}"
            raise SpecWriteError(msg) from exc

        logger.info("spec_created", spec_path=spec_path, examples=len(plan.methods))
        return SpecWriteResult(
            source_path=source, status="created", spec_path=spec_path, code=code
        )

    def append_to_existing_spec(
        self,
        target: SymbolNode,
        source: str,
        spec_path: str,
        *,
        dry_run: bool = False,
        rails_mode: bool = False,
    ) -> SpecWriteResult:
        path = Path(spec_path)
        try:
            existing_spec = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read {spec_path}: {exc}"
            raise SpecWriteError(msg) from exc

        choice = select_template(
            GenerationMode.DELTA,
            rails_mode=rails_mode,
            target_path=spec_path,
            delta_template=self.delta_template,
        )
        plan = build_plan(
            target,
            GenerationMode.DELTA,
            family=choice.family,
            require_path=to_require_path(source),
            existing_spec=existing_spec,
            rails_mode=rails_mode,
        )

        if plan.is_empty:
            reason = "no lacking methods"
            logger.info("spec_skipped", spec_path=spec_path, reason=reason)
            return SpecWriteResult(
                source_path=source, status="skipped", spec_path=spec_path, reason=reason
            )

        additional_spec = render(choice, plan, self.templates)
        merged = merge_fragment(existing_spec, additional_spec)

        if not merged.marker_found:
            reason = "closing 'end' not found"
            logger.warning("closing_marker_missing", spec_path=spec_path)
            return SpecWriteResult(
                source_path=source,
                status="conflict",
                spec_path=spec_path,
                code=merged.code,
                reason=reason,
            )

        if dry_run:
            return SpecWriteResult(
                source_path=source,
                status="preview",
                spec_path=spec_path,
                code=merged.code,
            )

        try:
            _atomic_write(path, merged.code)
        except OSError as exc:
            logger.error("spec_write_failed", spec_path=spec_path, error=str(exc))
            msg = f"Cannot write {spec_path}: {exc}"
            raise SpecWriteError(msg) from exc

        logger.info("spec_modified", spec_path=spec_path, examples=len(plan.methods))
        return SpecWriteResult(
            source_path=source, status="modified", spec_path=spec_path, code=merged.code
        )


__all__ = ["SpecGenerator", "SpecStatus", "SpecWriteResult"]
