"""Pipeline entry points: extract, transform, load, render.

- `extract()` evaluates the extraction driver against an entry file and returns
  the raw metadata tree as JSON text, exactly as Jsonnet produced it.
- `transform()` converts that text into the `Package` object model.
- `load()` does both.
- `render_with_jsonnet()` evaluates the rendering driver instead and returns
  a mapping of relative output path -> Markdown, skipping the object model.

Every call builds its own Resolver and Session; only the bundled resource
store is shared, and it is read-only.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

from docsonnet.bundle.store import EXTRACT_DRIVER, RENDER_DRIVER, BundledResources, default_resources
from docsonnet.core.model import Package
from docsonnet.core.transform import MalformedInput, decode_raw
from docsonnet.core.transform import transform as _transform
from docsonnet.engine.importer import Resolver
from docsonnet.engine.session import import_expr, new_session

logger = logging.getLogger(__name__)

JSONNET_PATH_ENV = "JSONNET_PATH"

DOC_UTIL_IMPORT = "doc-util/main.libsonnet"


@dataclass(frozen=True)
class Opts:
    """Pipeline options.

    Attributes:
        jpath: search-path directories, first match wins (the importing file's
            own directory is always tried before these)
        resources: bundled resource store; defaults to the packaged one
    """

    jpath: tuple[str, ...] = ()
    resources: BundledResources | None = None

    def __post_init__(self) -> None:
        if isinstance(self.jpath, (str, bytes)):
            raise TypeError("Opts.jpath: expected a list of directories, not a string")
        object.__setattr__(self, "jpath", tuple(str(p) for p in self.jpath))

    @classmethod
    def from_env(
        cls,
        jpath: Iterable[str | Path] = (),
        *,
        resources: BundledResources | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "Opts":
        """Explicit `jpath` entries first, then those of `$JSONNET_PATH`."""
        env = os.environ if environ is None else environ
        from_env = [p for p in env.get(JSONNET_PATH_ENV, "").split(os.pathsep) if p]
        return cls(jpath=tuple(str(p) for p in jpath) + tuple(from_env), resources=resources)

    def store(self) -> BundledResources:
        return self.resources if self.resources is not None else default_resources()


def _resolver(opts: Opts) -> Resolver:
    return Resolver(opts.store(), search_paths=opts.jpath)


def extract(filename: str | Path, opts: Opts | None = None) -> str:
    """Evaluate the extraction driver for `filename`; return the raw tree as JSON.

    The raw tree is usually not useful on its own, see `transform()`.
    """
    opts = opts or Opts()
    driver = opts.store().get_text(EXTRACT_DRIVER)
    session = new_session(filename, _resolver(opts))
    return session.run(driver, EXTRACT_DRIVER)


def transform(data: str | bytes) -> Package:
    """Convert the raw result of `extract()` to the docsonnet object model."""
    return _transform(data)


def load(filename: str | Path, opts: Opts | None = None) -> Package:
    """Extract and transform the docsonnet data of `filename`."""
    return transform(extract(filename, opts))


def render_with_jsonnet(filename: str | Path, opts: Opts | None = None) -> dict[str, str]:
    """Render the docs of `filename` with the bundled Jsonnet renderer.

    Returns:
        mapping of relative output path -> Markdown text.
    """
    opts = opts or Opts()
    driver = opts.store().get_text(RENDER_DRIVER)
    session = new_session(filename, _resolver(opts), ext_code={"d": import_expr(DOC_UTIL_IMPORT)})
    data = session.run(driver, RENDER_DRIVER)

    out = decode_raw(data)
    if not isinstance(out, dict):
        raise MalformedInput(f"{RENDER_DRIVER}: expected object of path -> text, got {type(out).__name__}")
    for path, text in out.items():
        if not isinstance(text, str):
            raise MalformedInput(f"{RENDER_DRIVER}: {path}: expected string, got {type(text).__name__}")
    logger.debug("rendered %d file(s) for %s", len(out), filename)
    return out


def write_rendered(out_dir: str | Path, files: Mapping[str, str]) -> list[Path]:
    """Write a rendered output map below `out_dir`; return the written paths (sorted).

    Raises:
        ValueError: an entry would be written outside `out_dir`.
    """
    root = Path(out_dir)
    resolved_root = root.resolve()
    targets: list[tuple[Path, str]] = []
    for rel, text in files.items():
        rel_path = Path(rel)
        target = root / rel_path
        if rel_path.is_absolute() or not target.resolve().is_relative_to(resolved_root):
            raise ValueError(f"write_rendered: {rel!r} is outside of {root}")
        targets.append((target, text))

    written: list[Path] = []
    for target, text in sorted(targets, key=lambda t: str(t[0])):
        target.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps the rendered text byte-exact
        with target.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
        written.append(target)
    return written


__all__ = [
    "JSONNET_PATH_ENV",
    "Opts",
    "extract",
    "load",
    "render_with_jsonnet",
    "transform",
    "write_rendered",
]
