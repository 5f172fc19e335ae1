"""docsonnet: documentation extraction for Jsonnet libraries.

Jsonnet files document themselves with structured data (`'#new':: d.fn(...)`,
provided by the bundled `doc-util` library). docsonnet evaluates such a file,
extracts the documentation tree and converts it into a typed `Package` model,
or renders it to Markdown directly with the bundled Jsonnet renderer.
"""

from __future__ import annotations

from docsonnet.bundle import BundledResources, ResourceMissing
from docsonnet.core import (
    Argument,
    DocsonnetError,
    Function,
    MalformedInput,
    Object,
    Package,
    TransformError,
    UnknownNodeKind,
    Value,
)
from docsonnet.engine import EvaluationError, ResolutionError
from docsonnet.pipeline import Opts, extract, load, render_with_jsonnet, transform, write_rendered

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Argument",
    "BundledResources",
    "DocsonnetError",
    "EvaluationError",
    "Function",
    "MalformedInput",
    "Object",
    "Opts",
    "Package",
    "ResolutionError",
    "ResourceMissing",
    "TransformError",
    "UnknownNodeKind",
    "Value",
    "extract",
    "load",
    "render_with_jsonnet",
    "transform",
    "write_rendered",
]
