"""Import resolution for Jsonnet evaluation.

The resolver serves the bundled `doc-util` library without it existing on disk
and delegates every other import to plain search-path resolution.

Resolution order (first match wins):

1. internal prefixes, in this order:
   - `doc-util/`
   - `github.com/jsonnet-libs/docsonnet/doc-util/`
   - `./render.libsonnet` (doc-util's own relative import)

   These are answered from the bundled store by base name only, reported at
   `<internal>/doc-util/<base>`. The filesystem is never consulted for them,
   even if a same-named file exists.
2. filesystem: absolute paths as-is; otherwise the importing file's directory,
   then each search path in list order.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from docsonnet.bundle.store import DOC_UTIL_DIR, BundledResources
from docsonnet.core.errors import DocsonnetError

logger = logging.getLogger(__name__)

INTERNAL_LOCATION = "<internal>"

INTERNAL_PREFIXES: tuple[str, ...] = (
    f"{DOC_UTIL_DIR}/",
    f"github.com/jsonnet-libs/docsonnet/{DOC_UTIL_DIR}/",
    "./render.libsonnet",
)


class ResolutionError(DocsonnetError, LookupError):
    """An import could not be satisfied."""


class InternalResourceNotFound(ResolutionError):
    """An internal prefix matched but no bundled resource has that base name."""


@dataclass(frozen=True)
class Resolved:
    content: str
    found_at: str


Handler = Callable[[str, str], Resolved]
Predicate = Callable[[str], bool]


def _has_prefix(prefix: str) -> Predicate:
    def matches(requested_path: str) -> bool:
        return requested_path.startswith(prefix)

    return matches


class Resolver:
    """Resolve Jsonnet imports against the bundled store, then search paths.

    Instances are also usable directly as a `_jsonnet` import callback.
    """

    def __init__(self, resources: BundledResources, search_paths: Iterable[str | Path] = ()) -> None:
        if isinstance(search_paths, (str, bytes)):
            raise TypeError("Resolver: search_paths must be a list of directories, not a string")
        self.resources = resources
        self.search_paths: tuple[Path, ...] = tuple(Path(p) for p in search_paths)
        self.strategies: list[tuple[Predicate, Handler]] = [
            (_has_prefix(prefix), self._resolve_internal) for prefix in INTERNAL_PREFIXES
        ]

    def resolve(self, importing_file: str, requested_path: str) -> Resolved:
        """Resolve `requested_path` as imported from `importing_file`.

        Raises:
            InternalResourceNotFound: internal prefix matched, no such bundled file.
            ResolutionError: nothing found on any search path.
        """
        return self._dispatch(posixpath.dirname(importing_file), requested_path)

    def __call__(self, base_dir: str, rel: str) -> tuple[str, bytes]:
        resolved = self._dispatch(base_dir, rel)
        return resolved.found_at, resolved.content.encode("utf-8")

    def _dispatch(self, base_dir: str, requested_path: str) -> Resolved:
        for matches, handler in self.strategies:
            if matches(requested_path):
                return handler(base_dir, requested_path)
        return self._resolve_filesystem(base_dir, requested_path)

    def _resolve_internal(self, base_dir: str, requested_path: str) -> Resolved:
        base = posixpath.basename(requested_path)
        key = f"{DOC_UTIL_DIR}/{base}"
        found_at = f"{INTERNAL_LOCATION}/{key}"
        if not base or key not in self.resources:
            raise InternalResourceNotFound(f"{key} does not exist (bundled, requested as {requested_path!r})")
        logger.debug("import %r resolved to %s", requested_path, found_at)
        return Resolved(content=self.resources[key], found_at=found_at)

    def _resolve_filesystem(self, base_dir: str, requested_path: str) -> Resolved:
        requested = Path(requested_path)
        if requested.is_absolute():
            candidates = [requested]
        else:
            candidates = [Path(base_dir) / requested] + [d / requested for d in self.search_paths]

        for candidate in candidates:
            if not candidate.is_file():
                continue
            try:
                content = candidate.read_bytes().decode("utf-8")
            except UnicodeDecodeError as e:
                raise ResolutionError(f"{candidate}: not valid UTF-8 ({e})") from e
            except OSError as e:
                raise ResolutionError(f"{candidate}: {e.strerror or e}") from e
            logger.debug("import %r resolved to %s", requested_path, candidate)
            return Resolved(content=content, found_at=str(candidate))

        tried = ", ".join(str(c) for c in candidates)
        raise ResolutionError(f"couldn't find import {requested_path!r} (tried: {tried})")


__all__ = [
    "INTERNAL_LOCATION",
    "INTERNAL_PREFIXES",
    "InternalResourceNotFound",
    "Resolved",
    "ResolutionError",
    "Resolver",
]
