"""Jsonnet resources bundled with docsonnet.

- `doc-util/` standard library (`main.libsonnet`, `render.libsonnet`)
- `load.libsonnet` extraction driver
- `render.libsonnet` rendering driver
"""

from __future__ import annotations

from .store import (
    EXTRACT_DRIVER,
    RENDER_DRIVER,
    REQUIRED_RESOURCES,
    BundledResources,
    ResourceMissing,
    ResourceNotFound,
    default_resources,
)

__all__ = [
    "EXTRACT_DRIVER",
    "RENDER_DRIVER",
    "REQUIRED_RESOURCES",
    "BundledResources",
    "ResourceMissing",
    "ResourceNotFound",
    "default_resources",
]
