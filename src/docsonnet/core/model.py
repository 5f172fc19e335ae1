"""Documentation object model for docsonnet.

A `Package` is the typed result of transforming the raw metadata tree that the
extraction driver emits. Fields come in three kinds:

- `Function`: a documented function with its arguments
- `Object`: a documented object holding further fields
- `Value`: a documented plain value with a type and an optional default

Nodes are frozen dataclasses. Parents own their children exclusively; there are
no back-references, so equality is structural and the model is safe to share
between threads once built.

This module must not import the engine/bundle/cli packages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

# Type names understood by doc-util (`d.T`). Jsonnet code may use any string,
# these are the ones the bundled library hands out.
TYPES: tuple[str, ...] = (
    "any",
    "array",
    "bool",
    "function",
    "null",
    "number",
    "object",
    "string",
)


@dataclass(frozen=True)
class Argument:
    """A single function argument as declared with `d.arg(...)`."""

    name: str
    type: str | None = None
    default: Any = None
    enums: tuple[Any, ...] | None = None


@dataclass(frozen=True)
class Function:
    name: str
    help: str = ""
    args: tuple[Argument, ...] = ()

    kind = "function"


@dataclass(frozen=True)
class Value:
    name: str
    type: str
    help: str = ""
    default: Any = None

    kind = "value"


@dataclass(frozen=True)
class Object:
    """A documented object; `fields` keeps the order of the raw tree."""

    name: str
    help: str = ""
    fields: dict[str, "Field"] = field(default_factory=dict)

    kind = "object"

    def field(self, name: str) -> "Field | None":
        return self.fields.get(name)


Field = Union[Function, Object, Value]


@dataclass(frozen=True)
class Package:
    """Root (or nested) docsonnet package.

    Attributes:
        name: package name, as declared by `d.pkg(name=...)`
        import_: import path users are told to use (`import` in Jsonnet)
        help: package description (Markdown)
        api: documented fields of the package, in raw-tree order
        sub: nested packages keyed by their name, in raw-tree order
        metadata: any additional keys of the package marker (e.g. `filename`,
            `version`), kept verbatim
    """

    name: str
    import_: str = ""
    help: str = ""
    api: dict[str, Field] = field(default_factory=dict)
    sub: dict[str, "Package"] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    def field(self, name: str) -> Field | None:
        return self.api.get(name)


__all__ = [
    "TYPES",
    "Argument",
    "Field",
    "Function",
    "Object",
    "Package",
    "Value",
]
