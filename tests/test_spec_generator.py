from __future__ import annotations

import os
import shutil
import stat
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from errors import ScanError, SpecWriteError
from models.symbols import MethodInfo, SymbolNode
from scaffold.write import SpecGenerator

if TYPE_CHECKING:
    from collections.abc import Iterator

FIXTURE_ROOT = Path(__file__).parent / "fixtures" / "ruby_project"


class _StaticSourceModel:
    """Source model returning a prebuilt tree, recording scanned paths."""

    def __init__(self, root: SymbolNode) -> None:
        self.root = root
        self.scanned: list[Path] = []

    def scan(self, file_path: Path) -> SymbolNode:
        self.scanned.append(file_path)
        return self.root


def _two_method_tree() -> SymbolNode:
    root = SymbolNode(name="lib/foo/bar_baz.rb", kind="file")
    node = root.add_child("Foo", "module").add_child("BarBaz", "class")
    node.methods.extend(
        [
            MethodInfo(name="alpha", raw_params="(x)"),
            MethodInfo(name="omega"),
            MethodInfo(name="internal", visibility="private"),
        ]
    )
    return root


def _copy_fixture(root: Path) -> None:
    shutil.copytree(FIXTURE_ROOT, root)


def test_full_mode_creates_spec_file(tmp_path: Path) -> None:
    model = _StaticSourceModel(_two_method_tree())
    generator = SpecGenerator(tmp_path / "spec", source_model=model)

    result = generator.write_spec("lib/foo/bar_baz.rb")

    spec_path = tmp_path / "spec" / "foo" / "bar_baz_spec.rb"
    assert result.status == "created"
    assert result.spec_path == spec_path.as_posix()
    assert model.scanned == [Path("lib/foo/bar_baz.rb")]

    code = spec_path.read_text(encoding="utf-8")
    assert code == result.code
    assert "require 'foo/bar_baz'" in code
    assert code.count("it 'works' do") == 2
    assert code.count("expect(result).not_to be_nil") == 2
    assert code.count("bar_baz = Foo::BarBaz.new\n") == 2
    assert "internal" not in code


def test_full_mode_does_not_clobber_existing_spec(tmp_path: Path) -> None:
    spec_path = tmp_path / "spec" / "foo" / "bar_baz_spec.rb"
    spec_path.parent.mkdir(parents=True)
    spec_path.write_text("# hand written\n", encoding="utf-8")
    generator = SpecGenerator(
        tmp_path / "spec", source_model=_StaticSourceModel(_two_method_tree())
    )

    result = generator.write_spec("lib/foo/bar_baz.rb")

    assert result.status == "exists"
    assert not result.written
    assert spec_path.read_text(encoding="utf-8") == "# hand written\n"


def test_force_without_existing_spec_creates_it(tmp_path: Path) -> None:
    generator = SpecGenerator(
        tmp_path / "spec", source_model=_StaticSourceModel(_two_method_tree())
    )

    result = generator.write_spec("lib/foo/bar_baz.rb", force_write=True)

    assert result.status == "created"


def test_delta_mode_appends_only_missing_methods(tmp_path: Path) -> None:
    spec_path = tmp_path / "spec" / "foo" / "bar_baz_spec.rb"
    spec_path.parent.mkdir(parents=True)
    existing = (
        "require 'spec_helper'\n"
        "\n"
        "describe Foo::BarBaz do\n"
        "  it 'handles alpha' do\n"
        "  end\n"
        "end\n"
    )
    spec_path.write_text(existing, encoding="utf-8")
    generator = SpecGenerator(
        tmp_path / "spec", source_model=_StaticSourceModel(_two_method_tree())
    )

    result = generator.write_spec("lib/foo/bar_baz.rb", force_write=True)

    assert result.status == "modified"
    code = spec_path.read_text(encoding="utf-8")
    assert code.startswith(existing[: -len("end\n")])
    assert "  it 'handles alpha' do\n  end\n" in code
    assert "describe '#omega'" in code
    assert "describe '#alpha'" not in code
    assert code.endswith("    end\n  end\n\n\nend\n")


def test_second_delta_run_is_a_no_op(tmp_path: Path) -> None:
    spec_path = tmp_path / "spec" / "foo" / "bar_baz_spec.rb"
    spec_path.parent.mkdir(parents=True)
    spec_path.write_text(
        "describe Foo::BarBaz do\n  # alpha\nend\n", encoding="utf-8"
    )
    generator = SpecGenerator(
        tmp_path / "spec", source_model=_StaticSourceModel(_two_method_tree())
    )

    first = generator.write_spec("lib/foo/bar_baz.rb", force_write=True)
    after_first = spec_path.read_bytes()
    second = generator.write_spec("lib/foo/bar_baz.rb", force_write=True)

    assert first.status == "modified"
    assert second.status == "skipped"
    assert second.reason == "no lacking methods"
    assert spec_path.read_bytes() == after_first


def test_delta_mode_without_closing_marker_is_a_conflict(tmp_path: Path) -> None:
    spec_path = tmp_path / "spec" / "foo" / "bar_baz_spec.rb"
    spec_path.parent.mkdir(parents=True)
    spec_path.write_text("# nothing to extend\n", encoding="utf-8")
    generator = SpecGenerator(
        tmp_path / "spec", source_model=_StaticSourceModel(_two_method_tree())
    )

    result = generator.write_spec("lib/foo/bar_baz.rb", force_write=True)

    assert result.status == "conflict"
    assert spec_path.read_text(encoding="utf-8") == "# nothing to extend\n"


def test_dry_run_writes_nothing(tmp_path: Path) -> None:
    generator = SpecGenerator(
        tmp_path / "spec", source_model=_StaticSourceModel(_two_method_tree())
    )

    result = generator.write_spec("lib/foo/bar_baz.rb", dry_run=True)

    assert result.status == "preview"
    assert result.code is not None
    assert "describe Foo::BarBaz do" in result.code
    assert not (tmp_path / "spec").exists()


def test_dry_run_delta_leaves_file_untouched(tmp_path: Path) -> None:
    spec_path = tmp_path / "spec" / "foo" / "bar_baz_spec.rb"
    spec_path.parent.mkdir(parents=True)
    spec_path.write_text("describe Foo::BarBaz do\nend\n", encoding="utf-8")
    generator = SpecGenerator(
        tmp_path / "spec", source_model=_StaticSourceModel(_two_method_tree())
    )

    result = generator.write_spec("lib/foo/bar_baz.rb", force_write=True, dry_run=True)

    assert result.status == "preview"
    assert result.code is not None
    assert "describe '#omega'" in result.code
    assert spec_path.read_text(encoding="utf-8") == "describe Foo::BarBaz do\nend\n"


def test_source_without_target_is_skipped(tmp_path: Path) -> None:
    root = SymbolNode(name="lib/tasks.rb", kind="file")
    generator = SpecGenerator(tmp_path / "spec", source_model=_StaticSourceModel(root))

    result = generator.write_spec("lib/tasks.rb")

    assert result.status == "skipped"
    assert result.spec_path is None
    assert not (tmp_path / "spec").exists()


def test_unwritable_destination_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "spec"
    blocker.write_text("not a directory", encoding="utf-8")
    generator = SpecGenerator(blocker, source_model=_StaticSourceModel(_two_method_tree()))

    with pytest.raises(SpecWriteError, match="Cannot write"):
        generator.write_spec("lib/foo/bar_baz.rb")


def test_override_templates_are_used(tmp_path: Path) -> None:
    generator = SpecGenerator(
        tmp_path / "spec",
        full_template="# {{ plan.qualified_name }}: {{ methods_to_generate | length }}\n",
        source_model=_StaticSourceModel(_two_method_tree()),
    )

    result = generator.write_spec("lib/foo/bar_baz.rb", dry_run=True)

    assert result.code == "# Foo::BarBaz: 2\n"


def test_end_to_end_with_tree_sitter_scanner(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    project = tmp_path / "project"
    _copy_fixture(project)
    monkeypatch.chdir(project)
    generator = SpecGenerator("spec")

    result = generator.write_spec("lib/shop/price_calculator.rb")

    assert result.status == "created"
    assert result.spec_path == "spec/shop/price_calculator_spec.rb"
    code = (project / "spec" / "shop" / "price_calculator_spec.rb").read_text(
        encoding="utf-8"
    )
    assert "require 'shop/price_calculator'" in code
    assert "describe Shop::PriceCalculator do" in code
    assert (
        "      catalog = double('catalog')\n"
        "      currency = double('currency')\n"
        "      price_calculator = Shop::PriceCalculator.new(catalog, currency)\n"
    ) in code
    assert "result = Shop::PriceCalculator.default\n" in code
    assert "result = price_calculator.total(items, discount)\n" in code
    assert "describe '#round'" not in code


def test_end_to_end_rails_controller(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    project = tmp_path / "project"
    _copy_fixture(project)
    monkeypatch.chdir(project)

    result = SpecGenerator("spec").write_spec(
        "app/controllers/orders_controller.rb", rails_mode=True
    )

    assert result.spec_path == "spec/controllers/orders_controller_spec.rb"
    assert result.code is not None
    assert "describe 'GET index' do" in result.code
    assert "post :create, params: {}" in result.code
    assert "describe 'GET archive' do" in result.code
    assert "load_order" not in result.code


def test_missing_source_raises_scan_error(tmp_path: Path) -> None:
    generator = SpecGenerator(tmp_path / "spec")

    with pytest.raises(ScanError):
        generator.write_spec(tmp_path / "lib" / "missing.rb")


@pytest.fixture
def umask_022() -> Iterator[None]:
    previous = os.umask(0o022)
    try:
        yield
    finally:
        os.umask(previous)


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits only.")
@pytest.mark.usefixtures("umask_022")
def test_created_spec_uses_umask_default_mode(tmp_path: Path) -> None:
    generator = SpecGenerator(
        tmp_path / "spec", source_model=_StaticSourceModel(_two_method_tree())
    )

    generator.write_spec("lib/foo/bar_baz.rb")

    spec_path = tmp_path / "spec" / "foo" / "bar_baz_spec.rb"
    assert stat.S_IMODE(spec_path.stat().st_mode) == 0o644


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits only.")
def test_delta_merge_keeps_existing_mode(tmp_path: Path) -> None:
    spec_path = tmp_path / "spec" / "foo" / "bar_baz_spec.rb"
    spec_path.parent.mkdir(parents=True)
    spec_path.write_text("describe Foo::BarBaz do\nend\n", encoding="utf-8")
    spec_path.chmod(0o640)
    generator = SpecGenerator(
        tmp_path / "spec", source_model=_StaticSourceModel(_two_method_tree())
    )

    result = generator.write_spec("lib/foo/bar_baz.rb", force_write=True)

    assert result.status == "modified"
    assert stat.S_IMODE(spec_path.stat().st_mode) == 0o640


def test_existing_spec_with_invalid_utf8_raises_write_error(tmp_path: Path) -> None:
    spec_path = tmp_path / "spec" / "foo" / "bar_baz_spec.rb"
    spec_path.parent.mkdir(parents=True)
    spec_path.write_bytes(b"describe Caf\xe9 do\nend\n")
    generator = SpecGenerator(
        tmp_path / "spec", source_model=_StaticSourceModel(_two_method_tree())
    )

    with pytest.raises(SpecWriteError, match="Cannot read"):
        generator.write_spec("lib/foo/bar_baz.rb", force_write=True)

    assert spec_path.read_bytes() == b"describe Caf\xe9 do\nend\n"
