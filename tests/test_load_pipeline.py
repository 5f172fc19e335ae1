from __future__ import annotations

from pathlib import Path

import pytest

from conftest import EXAMPLE_LIB, write_file
from docsonnet.core.model import Argument, Function, Object, Value
from docsonnet.core.transform import MalformedInput, UnknownNodeKind
from docsonnet.engine.session import EvaluationError
from docsonnet.pipeline import Opts, extract, load, render_with_jsonnet, transform, write_rendered


def test_opts_from_env_appends_jsonnet_path() -> None:
    opts = Opts.from_env(["/explicit"], environ={"JSONNET_PATH": "/env/a:/env/b"})

    assert opts.jpath == ("/explicit", "/env/a", "/env/b")


def test_opts_rejects_string_jpath() -> None:
    with pytest.raises(TypeError, match=r"not a string"):
        Opts(jpath="/a")  # type: ignore[arg-type]


def test_transform_rejects_garbage_without_exiting() -> None:
    with pytest.raises(MalformedInput):
        transform(b"\x00\x01 not a tree")


def test_load_example_library(tmp_path: Path) -> None:
    pytest.importorskip("_jsonnet")
    entry = write_file(tmp_path, "main.libsonnet", EXAMPLE_LIB)

    pkg = load(entry)

    assert pkg.name == "example"
    assert pkg.import_ == "github.com/example/example/main.libsonnet"
    assert pkg.help == "Example library."
    assert list(pkg.api) == ["new", "spec", "version", "util"]
    assert pkg.api["new"] == Function(
        name="new",
        help="`new` creates a thing.",
        args=(Argument(name="name", type="string"), Argument(name="replicas", type="number", default=1)),
    )
    spec = pkg.api["spec"]
    assert isinstance(spec, Object)
    assert spec.help == "Spec helpers."
    assert list(spec.fields) == ["withReplicas"]
    assert pkg.api["version"] == Value(name="version", type="string", help="Library version.", default="1.0")
    assert pkg.api["util"] == Object(name="util", fields={"helper": Function(name="helper", help="A helper.")})


def test_doc_field_description(tmp_path: Path) -> None:
    pytest.importorskip("_jsonnet")
    entry = write_file(
        tmp_path,
        "main.jsonnet",
        "local d = import 'doc-util/main.libsonnet';\n"
        "{ '#': d.pkg(name='p', url='', help=''), '#doc':: d.val(d.T.string, 'example') }\n",
    )

    pkg = load(entry)

    assert list(pkg.api) == ["doc"]
    assert pkg.api["doc"].help == "example"


def test_extract_is_deterministic(tmp_path: Path) -> None:
    pytest.importorskip("_jsonnet")
    entry = write_file(tmp_path, "main.libsonnet", EXAMPLE_LIB)

    first = extract(entry)
    second = extract(entry)

    assert first == second
    assert transform(first) == transform(second)
    # undocumented values and functions are not part of the raw tree
    assert "not documented" not in first


def test_long_form_doc_util_import(tmp_path: Path) -> None:
    pytest.importorskip("_jsonnet")
    lib = EXAMPLE_LIB.replace("'doc-util/main.libsonnet'", "'github.com/jsonnet-libs/docsonnet/doc-util/main.libsonnet'")
    entry = write_file(tmp_path, "main.libsonnet", lib)

    assert load(entry).name == "example"


def test_library_found_on_jpath(tmp_path: Path) -> None:
    pytest.importorskip("_jsonnet")
    vendor = tmp_path / "vendor"
    write_file(vendor, "example/main.libsonnet", EXAMPLE_LIB)
    entry = write_file(tmp_path / "project", "docs.jsonnet", "(import 'example/main.libsonnet')")

    pkg = load(entry, Opts(jpath=(str(vendor),)))

    assert pkg.name == "example"


def test_missing_import_is_evaluation_error(tmp_path: Path) -> None:
    pytest.importorskip("_jsonnet")
    entry = write_file(tmp_path, "main.jsonnet", "(import 'nowhere.libsonnet')")

    with pytest.raises(EvaluationError, match=r"nowhere\.libsonnet"):
        load(entry)


def test_undocumented_field_kind_is_evaluated_then_rejected(tmp_path: Path) -> None:
    pytest.importorskip("_jsonnet")
    entry = write_file(
        tmp_path,
        "main.jsonnet",
        "{ '#': { name: 'p', 'import': '', help: '' }, '#odd':: { info: 'x' } }\n",
    )

    with pytest.raises(UnknownNodeKind, match=r"lacks one of"):
        load(entry)


def test_value_field_with_documented_children_fails_both_paths(tmp_path: Path) -> None:
    pytest.importorskip("_jsonnet")
    entry = write_file(
        tmp_path,
        "main.jsonnet",
        "local d = import 'doc-util/main.libsonnet';\n"
        "{\n"
        "  '#': d.pkg(name='p', url='', help=''),\n"
        "  '#config':: d.val(d.T.object, 'cfg'),\n"
        "  config:: { '#replicas':: d.val(d.T.number, 'r'), replicas:: 1 },\n"
        "}\n",
    )

    with pytest.raises(UnknownNodeKind, match=r"#config is not an object"):
        load(entry)
    with pytest.raises(EvaluationError, match=r"#config is not an object"):
        render_with_jsonnet(entry)


def test_render_with_jsonnet_root_readme(tmp_path: Path) -> None:
    pytest.importorskip("_jsonnet")
    entry = write_file(tmp_path, "main.libsonnet", EXAMPLE_LIB)

    files = render_with_jsonnet(entry)

    assert list(files) == ["README.md"]
    readme = files["README.md"]
    assert readme.startswith("# example\n")
    assert "jb install github.com/example/example/main.libsonnet" in readme
    assert "* [`fn new(name, replicas=1)`](#fn-new)" in readme
    assert "  * [`fn spec.withReplicas(n)`](#fn-specwithreplicas)" in readme
    assert "### val version" in readme
    assert '* default: `"1.0"`' in readme
    assert "### obj util" in readme


def test_render_with_jsonnet_sub_packages(tmp_path: Path) -> None:
    pytest.importorskip("_jsonnet")
    entry = write_file(
        tmp_path,
        "main.jsonnet",
        "local d = import 'doc-util/main.libsonnet';\n"
        "{\n"
        "  '#': d.pkg(name='root', url='', help='Root.'),\n"
        "  core: {\n"
        "    '#': d.pkg(name='core', url='', help='Core.'),\n"
        "    '#f':: d.fn('f help'),\n"
        "    v1: { '#': d.pkg(name='v1', url='', help='V1.') },\n"
        "  },\n"
        "}\n",
    )

    files = render_with_jsonnet(entry)

    assert sorted(files) == ["README.md", "core.md", "core/v1.md"]
    assert "* [core](core.md)" in files["README.md"]
    assert "* [v1](core/v1.md)" in files["core.md"]
    assert "### fn f" in files["core.md"]

    pkg = load(entry)
    assert list(pkg.sub) == ["core"]
    assert list(pkg.sub["core"].sub) == ["v1"]


def test_write_rendered(tmp_path: Path) -> None:
    out = tmp_path / "docs"

    written = write_rendered(out, {"core/v1.md": "v1\n", "README.md": "root\n"})

    assert written == [out / "README.md", out / "core" / "v1.md"]
    assert (out / "core" / "v1.md").read_text(encoding="utf-8") == "v1\n"


def test_write_rendered_refuses_escaping_paths(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match=r"outside of"):
        write_rendered(tmp_path / "docs", {"../evil.md": "x"})
