"""GUI-agnostic core: data model, transform, indices and services."""

from .exceptions import ClassificationViewerError, StructureError, UnknownSystemError
from .models import ClassificationNode, SystemConfig, SystemInfo, TransformResult
from .transform import transform_source

__all__ = [
    "ClassificationViewerError",
    "StructureError",
    "UnknownSystemError",
    "ClassificationNode",
    "SystemConfig",
    "SystemInfo",
    "TransformResult",
    "transform_source",
]
