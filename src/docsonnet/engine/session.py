"""Single-use Jsonnet evaluation sessions.

A session binds the ext-code variable `main` to `(import "<entry file>")` and
installs a `Resolver` as the only import mechanism. Driver scripts then read
`std.extVar('main')`.

Sessions are single-shot: build a new one (and a new Resolver) per
evaluation. The bundled store is the only state shared between sessions.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping

from docsonnet.core.errors import DocsonnetError
from docsonnet.engine.importer import Resolver

logger = logging.getLogger(__name__)

MAIN_VAR = "main"


class EvaluationError(DocsonnetError, RuntimeError):
    """Jsonnet evaluation failed; the message is the engine's diagnostic verbatim."""


def import_expr(path: str | Path) -> str:
    """Return the Jsonnet expression importing `path` (string literal escaped)."""
    return f"(import {json.dumps(str(path))})"


class Session:
    def __init__(self, entry_file: str | Path, resolver: Resolver, ext_codes: Mapping[str, str]) -> None:
        self.entry_file = str(entry_file)
        self.resolver = resolver
        self.ext_codes = dict(ext_codes)
        self._used = False

    def run(self, driver_script: str, driver_name: str) -> str:
        """Evaluate `driver_script` and return its JSON output.

        Raises:
            EvaluationError: syntax/runtime error in the driver or any import,
                including import resolution failures.
            RuntimeError: the session was already used.
        """
        if self._used:
            raise RuntimeError("Session.run: sessions are single-use; create a new session per evaluation")
        self._used = True

        import _jsonnet  # local import to keep module import-light

        logger.debug("evaluating %s for %s", driver_name, self.entry_file)
        try:
            return _jsonnet.evaluate_snippet(
                driver_name,
                driver_script,
                ext_codes=self.ext_codes,
                import_callback=self.resolver,
            )
        except RuntimeError as e:
            raise EvaluationError(str(e)) from e


def new_session(
    entry_file: str | Path,
    resolver: Resolver,
    ext_code: Mapping[str, str] | None = None,
) -> Session:
    """Create a session whose `main` ext var imports `entry_file`.

    `ext_code` adds further ext-code bindings; `main` cannot be overridden.
    """
    extra = dict(ext_code or {})
    if MAIN_VAR in extra:
        raise ValueError(f"new_session: ext_code may not rebind {MAIN_VAR!r}")
    ext_codes = {MAIN_VAR: import_expr(entry_file), **extra}
    return Session(entry_file, resolver, ext_codes)


__all__ = [
    "MAIN_VAR",
    "EvaluationError",
    "Session",
    "import_expr",
    "new_session",
]
