"""Command-line interface for kickstart-core."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from errors import ScaffoldError
from scaffold.write import SpecGenerator, SpecWriteResult
from scan.files import expand_source_paths
from settings.config import (
    ConfigError,
    KickstartConfig,
    load_config,
    read_template,
    resolve_template_path,
)
from settings.logging import configure_logging

__version__ = "0.1.0"

_LOG_LEVELS = ("debug", "info", "warning", "error")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kickstart",
        description="Generate RSpec skeletons for Ruby source files.",
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Ruby source files or directories to scan for *.rb files",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Append examples for untested methods to existing spec files",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Print generated code instead of writing files",
    )
    parser.add_argument(
        "-r",
        "--rails",
        action="store_true",
        help="Use Rails controller/helper templates where the path matches",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        default=None,
        help="Spec output directory (default: config spec_dir)",
    )
    parser.add_argument(
        "-F",
        "--full-template",
        default=None,
        help="Template file used for new spec files",
    )
    parser.add_argument(
        "-D",
        "--delta-template",
        default=None,
        help="Template file used for examples appended to existing specs",
    )
    parser.add_argument(
        "--root",
        default=".",
        help="Project root holding kickstart.toml (default: .)",
    )
    parser.add_argument(
        "--log-level",
        choices=_LOG_LEVELS,
        default="warning",
        help="Log level for structured events on stderr (default: warning)",
    )
    parser.add_argument("-v", "--version", action="version", version=__version__)
    return parser


def _resolve_spec_dir(root: Path, output_dir: str | None, config: KickstartConfig) -> str:
    if output_dir is not None:
        return output_dir
    if root == Path.cwd().resolve():
        return config.spec_dir
    return str(root / config.spec_dir)


def _load_templates(
    root: Path,
    args: argparse.Namespace,
    config: KickstartConfig,
) -> tuple[str | None, str | None]:
    if args.full_template is not None:
        full_path: Path | None = Path(args.full_template).expanduser()
    else:
        full_path = resolve_template_path(root, config.full_template)
    if args.delta_template is not None:
        delta_path: Path | None = Path(args.delta_template).expanduser()
    else:
        delta_path = resolve_template_path(root, config.delta_template)
    return read_template(full_path), read_template(delta_path)


def _report(result: SpecWriteResult) -> None:
    if result.status == "preview":
        sys.stdout.write(f"----- {result.spec_path} -----\n{result.code}")
    elif result.status == "created":
        sys.stdout.write(f"{result.spec_path} created.\n")
    elif result.status == "modified":
        sys.stdout.write(f"{result.spec_path} modified.\n")
    elif result.status == "exists":
        sys.stdout.write(f"{result.spec_path} already exists.\n")
    elif result.status == "skipped" and result.spec_path is None:
        sys.stdout.write(f"{result.source_path} skipped ({result.reason}).\n")
    elif result.status == "skipped":
        sys.stdout.write(f"{result.spec_path} skipped.\n")
    elif result.status == "conflict":
        sys.stderr.write(f"{result.spec_path}: not modified ({result.reason})\n")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    root = Path(args.root).expanduser().resolve()
    try:
        config = load_config(root)
        full_template, delta_template = _load_templates(root, args, config)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    spec_dir = _resolve_spec_dir(root, args.output_dir, config)
    generator = SpecGenerator(
        spec_dir,
        full_template=full_template,
        delta_template=delta_template,
    )

    exit_code = 0
    for file_path in expand_source_paths(
        args.paths,
        skip_dir=Path(spec_dir).name,
        include_patterns=config.include,
        exclude_patterns=config.exclude,
    ):
        try:
            result = generator.write_spec(
                file_path,
                force_write=args.force,
                dry_run=args.dry_run,
                rails_mode=args.rails or config.rails_mode,
            )
        except ScaffoldError as exc:
            sys.stderr.write(f"{file_path}: {exc}\n")
            exit_code = 1
            continue
        _report(result)

    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
