from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Set

from classification_viewer.core.models import ClassificationNode, NodeId
from classification_viewer.core.tree_index import TreeIndex

__all__ = ["SearchResult", "SearchService", "node_matches"]


def node_matches(node: ClassificationNode, needle: str) -> bool:
    """Case-insensitive substring test against the code and the name.

    *needle* must already be lower-cased and stripped.
    """
    return needle in node.display_id.lower() or needle in node.name.lower()


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one filter pass.

    Attributes
    ----------
    term
        The normalized (stripped, lower-cased) term; empty when inactive.
    matched
        Nodes whose code or name contains the term.
    visible
        ``matched`` plus every ancestor of a match. Every visible node is
        auto-expanded by the viewer so each match is reachable.
    """

    term: str = ""
    matched: FrozenSet[NodeId] = field(default_factory=frozenset)
    visible: FrozenSet[NodeId] = field(default_factory=frozenset)

    @property
    def active(self) -> bool:
        return bool(self.term)

    def is_hidden(self, node_id: str) -> bool:
        return self.active and node_id not in self.visible


class SearchService:
    """Linear substring search over a :class:`TreeIndex`."""

    def __init__(self, index: TreeIndex) -> None:
        self._index = index

    def search(self, term: str) -> SearchResult:
        needle = (term or "").strip().lower()
        if not needle:
            return SearchResult()

        matched: Set[NodeId] = set()
        visible: Set[NodeId] = set()
        for node_id, node in self._index.node_by_id.items():
            if not node_matches(node, needle):
                continue
            matched.add(node_id)
            visible.add(node_id)
            for ancestor in self._index.ancestors(node_id):
                if ancestor in visible:
                    break
                visible.add(ancestor)
        return SearchResult(term=needle, matched=frozenset(matched), visible=frozenset(visible))
