from __future__ import annotations

"""Transform a classification export into the canonical forest.

The export wraps every scalar and container in a single-element list, e.g.::

    {"BuildingInformation": {"Classification": [{"System": [{
        "Name": ["Uniclass 2015"],
        "Items": [{"Item": [{"ID": ["Ac"], "Name": ["Activities"],
                             "Children": [{"Item": [...]}]}]}]
    }]}]}}

Missing per-item fields are defaulted; only a missing ``System`` container is
an error.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from classification_viewer.core.exceptions import StructureError
from classification_viewer.core.models import (
    ClassificationNode,
    NodeId,
    SystemInfo,
    TransformResult,
)

logger = logging.getLogger(__name__)

__all__ = [
    "unwrap",
    "normalize_id",
    "transform_items",
    "transform_source",
    "count_items",
    "count_descendants",
]

_ID_SEPARATORS = re.compile(r"[\s-]")


def unwrap(value: Any, default: Any = "") -> Any:
    """Return the first element of a single-element wrapper list.

    ``None``, an empty list or a ``None`` element all yield *default*.
    """
    if isinstance(value, list):
        if not value:
            return default
        value = value[0]
    return default if value is None else value


def normalize_id(raw: str) -> NodeId:
    """Replace each whitespace character and hyphen with an underscore."""
    return NodeId(_ID_SEPARATORS.sub("_", raw or ""))


def _items_of(container: Any) -> List[Any]:
    # Children/Items are stored as [{"Item": [...]}]
    block = unwrap(container, default=None)
    if not isinstance(block, dict):
        return []
    items = block.get("Item")
    return items if isinstance(items, list) else []


def transform_items(items: Any) -> List[ClassificationNode]:
    """Recursively map raw items to :class:`ClassificationNode`, preserving order."""
    if not isinstance(items, list):
        return []

    nodes: List[ClassificationNode] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        raw_id = str(unwrap(item.get("ID")))
        name = str(unwrap(item.get("Name")))
        description = str(unwrap(item.get("Description")))
        nodes.append(
            ClassificationNode(
                id=normalize_id(raw_id),
                display_id=raw_id,
                name=name.strip(),
                description=description or f"{name} classification item.",
                children=transform_items(_items_of(item.get("Children"))),
            )
        )
    return nodes


def _locate_system(data: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(data, dict):
        return None
    building = data.get("BuildingInformation")
    if not isinstance(building, dict):
        return None
    classification = unwrap(building.get("Classification"), default=None)
    if not isinstance(classification, dict):
        return None
    system = unwrap(classification.get("System"), default=None)
    return system if isinstance(system, dict) else None


def transform_source(data: Any) -> TransformResult:
    """Convert a parsed export document into a :class:`TransformResult`.

    Raises
    ------
    StructureError
        If ``BuildingInformation.Classification[0].System[0]`` is missing.
    """
    system = _locate_system(data)
    if system is None:
        raise StructureError("Invalid JSON structure - cannot find System")

    system_info = SystemInfo(
        name=str(unwrap(system.get("Name"), default="Unknown")),
        version=str(unwrap(system.get("EditionVersion"))),
        description=str(unwrap(system.get("Description"))),
        source=str(unwrap(system.get("Source"))),
    )

    forest = transform_items(_items_of(system.get("Items")))
    total = count_items(forest)
    logger.info(
        "Transformed system '%s': %d top-level items, %d total items",
        system_info.name,
        len(forest),
        total,
    )
    return TransformResult(
        system_info=system_info,
        forest=forest,
        total_items=total,
        top_level_count=len(forest),
    )


def count_items(forest: List[ClassificationNode]) -> int:
    """Count every node of *forest* at all depths."""
    count = len(forest)
    for node in forest:
        count += count_items(node.children)
    return count


def count_descendants(node: ClassificationNode) -> int:
    """Count all nodes below *node* (not including itself)."""
    return sum(1 + count_descendants(child) for child in node.children)
