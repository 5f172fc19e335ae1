"""docsonnet core: object model and the raw-tree transform.

This package is intentionally standalone and must not import engine/bundle/cli
to avoid circular dependencies.
"""

from __future__ import annotations

from .errors import DocsonnetError
from .model import TYPES, Argument, Field, Function, Object, Package, Value
from .transform import (
    MalformedInput,
    TransformError,
    UnknownNodeKind,
    package_to_dict,
    package_to_raw,
    serialize,
    transform,
)

__all__ = [
    "TYPES",
    "Argument",
    "DocsonnetError",
    "Field",
    "Function",
    "MalformedInput",
    "Object",
    "Package",
    "TransformError",
    "UnknownNodeKind",
    "Value",
    "package_to_dict",
    "package_to_raw",
    "serialize",
    "transform",
]
