"""Top-level package for the classification viewer.

Front-ends (the HTML generator CLI and the Tk browser) should only depend on
the public API exposed here rather than importing internal modules directly.
"""

from .core.models import ClassificationNode, SystemConfig, TransformResult  # re-export for convenience

__version__ = "1.0.0"

__all__: list[str] = [
    "ClassificationNode",
    "SystemConfig",
    "TransformResult",
    "__version__",
]
