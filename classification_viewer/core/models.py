from __future__ import annotations

"""Shared data structures used across the classification viewer.

This module is intentionally free of UI / I/O code so that the contained
objects can be reused in any context (unit-tests, CLI, GUI, etc.).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, NewType

__all__ = [
    "NodeId",
    "Theme",
    "THEMES",
    "ClassificationNode",
    "SystemInfo",
    "SystemConfig",
    "TransformResult",
]

NodeId = NewType("NodeId", str)

Theme = Literal["light", "dark"]
THEMES: tuple[str, ...] = ("light", "dark")


@dataclass
class ClassificationNode:
    """One item of a classification system in canonical form.

    Attributes
    ----------
    id
        Normalized identifier (whitespace and hyphens replaced with ``_``).
        Used as the key of every index and for widget addressing.
    display_id
        The original code as written in the source export. Presentation only.
    name
        Trimmed label.
    description
        Free text; the transform stage synthesizes one when the source has none.
    children
        Child items in source declaration order.
    """

    id: NodeId
    display_id: str
    name: str
    description: str = ""
    children: List["ClassificationNode"] = field(default_factory=list)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the payload shape consumed by the browser script."""
        return {
            "id": self.id,
            "id_display": self.display_id,
            "name": self.name,
            "description": self.description,
            "children": [child.to_dict() for child in self.children],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClassificationNode":
        return cls(
            id=NodeId(str(data.get("id", ""))),
            display_id=str(data.get("id_display", data.get("id", ""))),
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            children=[cls.from_dict(c) for c in data.get("children") or []],
        )


@dataclass(frozen=True)
class SystemInfo:
    """Metadata block of the source classification system."""

    name: str = "Unknown"
    version: str = ""
    description: str = ""
    source: str = ""


@dataclass(frozen=True)
class SystemConfig:
    """Presentation settings for one known classification system."""

    key: str
    title: str
    version: str
    description: str = ""
    keywords: str = ""
    icon: str = ""
    accent_color: str = "#2980b9"

    @classmethod
    def from_mapping(cls, key: str, data: Dict[str, Any]) -> "SystemConfig":
        return cls(
            key=key,
            title=str(data.get("title", key)),
            version=str(data.get("version", "")),
            description=str(data.get("description", "")),
            keywords=str(data.get("keywords", "")),
            icon=str(data.get("icon", "")),
            accent_color=str(data.get("accent_color", "#2980b9")),
        )


@dataclass
class TransformResult:
    """Output of the transform stage."""

    system_info: SystemInfo
    forest: List[ClassificationNode]
    total_items: int = 0
    top_level_count: int = 0
