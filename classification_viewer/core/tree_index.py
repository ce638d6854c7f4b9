from __future__ import annotations

"""Lookup indices over a static classification forest."""

import logging
from typing import Dict, Iterator, List, Optional

from classification_viewer.core.models import ClassificationNode, NodeId
from classification_viewer.core.transform import count_descendants

logger = logging.getLogger(__name__)

__all__ = ["TreeIndex"]


class TreeIndex:
    """Node-by-id and parent-by-id maps built by one depth-first traversal.

    Ids are expected to be unique. When they are not, the node registered
    later in traversal order replaces the earlier one in every map.
    """

    def __init__(self, forest: List[ClassificationNode]) -> None:
        self.forest: List[ClassificationNode] = list(forest)
        self.node_by_id: Dict[NodeId, ClassificationNode] = {}
        self.parent_by_id: Dict[NodeId, NodeId] = {}
        self.depth_by_id: Dict[NodeId, int] = {}
        self._register(self.forest, parent=None, depth=0)
        logger.debug("Indexed %d nodes (%d roots)", len(self.node_by_id), len(self.forest))

    def _register(
        self,
        nodes: List[ClassificationNode],
        parent: Optional[ClassificationNode],
        depth: int,
    ) -> None:
        for node in nodes:
            self.node_by_id[node.id] = node
            if parent is not None:
                self.parent_by_id[node.id] = parent.id
            else:
                self.parent_by_id.pop(node.id, None)
            self.depth_by_id[node.id] = depth
            if node.children:
                self._register(node.children, node, depth + 1)

    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self.node_by_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.node_by_id

    def get(self, node_id: str) -> Optional[ClassificationNode]:
        return self.node_by_id.get(NodeId(node_id))

    def parent_of(self, node_id: str) -> Optional[NodeId]:
        return self.parent_by_id.get(NodeId(node_id))

    def ancestors(self, node_id: str) -> List[NodeId]:
        """Return the ancestors of *node_id*, nearest first."""
        result: List[NodeId] = []
        seen = {node_id}
        current = self.parent_by_id.get(NodeId(node_id))
        while current is not None and current not in seen:
            result.append(current)
            seen.add(current)
            current = self.parent_by_id.get(current)
        return result

    def path(self, node_id: str) -> List[NodeId]:
        """Return the ancestor path from the root down to and including *node_id*."""
        if node_id not in self.node_by_id:
            return []
        return list(reversed(self.ancestors(node_id))) + [NodeId(node_id)]

    def level(self, node_id: str) -> int:
        """Hierarchy level of *node_id*; roots are level 1."""
        return len(self.path(node_id))

    def descendant_count(self, node_id: str) -> int:
        node = self.get(node_id)
        return count_descendants(node) if node is not None else 0

    def iter_depth_first(self) -> Iterator[ClassificationNode]:
        """Yield every node in render order."""
        stack = list(reversed(self.forest))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))
