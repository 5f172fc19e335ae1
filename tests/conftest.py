"""Pytest configuration.

This repo follows the `src/` layout. Some environments may invoke a `pytest`
entrypoint from a different Python install than the one used for
`python -m pip install -e ...`, which can cause `import docsonnet` to fail.

To keep the suite robust, we ensure `src/` is on `sys.path` during tests.
"""

from __future__ import annotations

import sys
from pathlib import Path


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


# =============================================================================
# Shared Test Helpers
# =============================================================================


def fake_resource_contents(**overrides: str) -> dict[str, str]:
    """A complete set of required resources with placeholder Jsonnet."""
    contents = {
        "doc-util/main.libsonnet": "{ '#': { name: 'd', 'import': '', help: 'fake' } }",
        "doc-util/render.libsonnet": "{ render(obj):: {} }",
        "load.libsonnet": "std.extVar('main')",
        "render.libsonnet": "{}",
    }
    contents.update(overrides)
    return contents


def write_file(root: Path, rel: str, text: str) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


# Documented library used by the end-to-end tests.
EXAMPLE_LIB = """\
local d = import 'doc-util/main.libsonnet';

{
  '#': d.pkg(
    name='example',
    url='github.com/example/example/main.libsonnet',
    help='Example library.',
  ),

  '#new':: d.fn(
    '`new` creates a thing.',
    args=[d.arg('name', d.T.string), d.arg('replicas', d.T.number, 1)],
  ),
  new(name, replicas=1):: { name: name, replicas: replicas },

  '#spec':: d.obj('Spec helpers.'),
  spec:: {
    '#withReplicas':: d.fn('Set replicas.', args=[d.arg('n', d.T.number)]),
    withReplicas(n):: { spec+: { replicas: n } },
  },

  '#version':: d.val(d.T.string, 'Library version.', '1.0'),
  version:: '1.0',

  util:: {
    '#helper':: d.fn('A helper.'),
    helper():: null,
  },

  plain: 'not documented',
}
"""
