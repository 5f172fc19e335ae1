"""Common base for the errors raised by the docsonnet pipeline.

Concrete errors live next to the code that raises them:

- `docsonnet.bundle.store.ResourceMissing`
- `docsonnet.engine.importer.ResolutionError`
- `docsonnet.engine.session.EvaluationError`
- `docsonnet.core.transform.TransformError`
"""

from __future__ import annotations


class DocsonnetError(Exception):
    """Base class of every error the pipeline reports to its caller."""
