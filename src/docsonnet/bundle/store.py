"""Bundled resource store.

The Jsonnet sources shipped inside the `docsonnet` distribution (under
`docsonnet/bundle/data/`) are loaded once into an immutable mapping of
logical path -> text:

- `doc-util/main.libsonnet`, `doc-util/render.libsonnet`: the documentation
  helper library that entry files import as `doc-util/main.libsonnet`
- `load.libsonnet`: extraction driver
- `render.libsonnet`: rendering driver

A store lacking any of these is a broken build: construction fails with
`ResourceMissing` rather than deferring the failure to the first import.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Iterator, Mapping
from importlib import resources as importlib_resources
from types import MappingProxyType

from docsonnet.core.errors import DocsonnetError

logger = logging.getLogger(__name__)

DOC_UTIL_DIR = "doc-util"
EXTRACT_DRIVER = "load.libsonnet"
RENDER_DRIVER = "render.libsonnet"

REQUIRED_RESOURCES: tuple[str, ...] = (
    f"{DOC_UTIL_DIR}/main.libsonnet",
    f"{DOC_UTIL_DIR}/render.libsonnet",
    EXTRACT_DRIVER,
    RENDER_DRIVER,
)

_DATA_PACKAGE = "docsonnet.bundle"
_DATA_DIR = "data"
_SUFFIXES = (".libsonnet", ".jsonnet")


class ResourceMissing(DocsonnetError, RuntimeError):
    """A required bundled resource is absent (packaging defect, not bad input)."""


class ResourceNotFound(DocsonnetError, KeyError):
    """Lookup of a logical name the store does not hold."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "resource not found"


class BundledResources(Mapping[str, str]):
    """Read-only mapping of logical resource path -> Jsonnet source text."""

    def __init__(self, contents: Mapping[str, str], *, required: tuple[str, ...] = REQUIRED_RESOURCES) -> None:
        data: dict[str, str] = {}
        for name, text in contents.items():
            if not isinstance(name, str) or not name:
                raise TypeError("BundledResources: names must be non-empty strings")
            if not isinstance(text, str):
                raise TypeError(f"BundledResources[{name!r}]: expected str, got {type(text).__name__}")
            data[name] = text

        missing = sorted(set(required) - set(data))
        if missing:
            raise ResourceMissing(f"bundled resources missing: {', '.join(missing)}")

        self._data = MappingProxyType(data)

    @classmethod
    def from_package(cls) -> "BundledResources":
        """Load every Jsonnet file packaged under `docsonnet/bundle/data/`."""
        root = importlib_resources.files(_DATA_PACKAGE).joinpath(_DATA_DIR)
        if not root.is_dir():
            raise ResourceMissing(f"bundled resource directory missing: {_DATA_PACKAGE}/{_DATA_DIR}")

        contents: dict[str, str] = {}
        stack = [(root, "")]
        while stack:
            node, prefix = stack.pop()
            for entry in sorted(node.iterdir(), key=lambda t: t.name):
                rel = f"{prefix}{entry.name}"
                if entry.is_dir():
                    stack.append((entry, f"{rel}/"))
                elif entry.name.endswith(_SUFFIXES):
                    contents[rel] = entry.read_text(encoding="utf-8")

        logger.debug("loaded %d bundled resources", len(contents))
        return cls(contents)

    def get_text(self, name: str) -> str:
        """Return the content of `name` or raise `ResourceNotFound`."""
        try:
            return self._data[name]
        except KeyError:
            raise ResourceNotFound(f"{name} is not a bundled resource") from None

    def __getitem__(self, name: str) -> str:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"BundledResources({sorted(self._data)!r})"


@functools.lru_cache(maxsize=None)
def default_resources() -> BundledResources:
    """Process-wide store loaded from the installed package (read-only)."""
    return BundledResources.from_package()


__all__ = [
    "DOC_UTIL_DIR",
    "EXTRACT_DRIVER",
    "RENDER_DRIVER",
    "REQUIRED_RESOURCES",
    "BundledResources",
    "ResourceMissing",
    "ResourceNotFound",
    "default_resources",
]
