from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Set

from classification_viewer.core.models import ClassificationNode, NodeId
from classification_viewer.core.services.debounce import Debouncer, ImmediateScheduler
from classification_viewer.core.services.search_service import SearchResult, SearchService
from classification_viewer.core.services.theme_service import ThemeService
from classification_viewer.core.tree_index import TreeIndex

logger = logging.getLogger(__name__)

__all__ = [
    "TreeViewerController",
    "ViewerEvent",
    "NodeState",
    "DetailView",
    "BreadcrumbSegment",
    "HierarchyEntry",
    "ChildEntry",
]

NO_DESCRIPTION = "No description available."


# ---------------------------------------------------------------------------------
# View models published to hosts
# ---------------------------------------------------------------------------------

@dataclass(frozen=True)
class ViewerEvent:
    """Notification sent to subscribers after a state change.

    ``kind`` is one of ``"tree"``, ``"expansion"``, ``"selection"``,
    ``"search"`` or ``"theme"``.
    """

    kind: str
    node_id: Optional[NodeId] = None


@dataclass(frozen=True)
class NodeState:
    expanded: bool = False
    selected: bool = False
    matched: bool = False
    hidden: bool = False


@dataclass(frozen=True)
class DetailView:
    node_id: NodeId
    code: str
    name: str
    description: str
    child_count: int
    descendant_count: int
    level: int


@dataclass(frozen=True)
class BreadcrumbSegment:
    node_id: NodeId
    label: str


@dataclass(frozen=True)
class HierarchyEntry:
    node_id: NodeId
    level: int
    code: str
    name: str
    current: bool


@dataclass(frozen=True)
class ChildEntry:
    node_id: NodeId
    code: str
    name: str
    child_count: int

    @property
    def has_children(self) -> bool:
        return self.child_count > 0


Listener = Callable[[ViewerEvent], None]


class TreeViewerController:
    """Controller owning the tree viewer state.

    The forest and its indices are built once by :meth:`initialize` and never
    mutated. Everything else (expansion, selection, search, theme) is UI state
    layered on top. Hosts subscribe to :class:`ViewerEvent` notifications and
    read the view models back; they never mutate state directly.

    Parameters
    ----------
    theme_service : ThemeService, optional
        Source and sink of the persisted theme preference.
    debouncer : Debouncer, optional
        Defers :meth:`search` evaluations. The default runs them at once on the
        calling thread; hosts with an event loop inject a deferring one (the Tk
        browser uses a :class:`TkScheduler`).
    no_description : str
        Text shown in the detail view for nodes with an empty description.
    breadcrumb_separator : str
        Non-clickable glyph placed between breadcrumb segments.

    Notes
    -----
    - No Tkinter or UI framework code should appear in this module.
    - Lookups of unknown ids are silent no-ops: ids always come from the same
      forest the indices were built from, so a miss means a stale reference.
    """

    def __init__(
        self,
        theme_service: Optional[ThemeService] = None,
        debouncer: Optional[Debouncer] = None,
        *,
        no_description: str = NO_DESCRIPTION,
        breadcrumb_separator: str = "›",
    ) -> None:
        self.theme_service: ThemeService = theme_service or ThemeService()
        self.debouncer: Debouncer = debouncer or Debouncer(0, ImmediateScheduler())
        self.no_description = no_description
        self.breadcrumb_separator = breadcrumb_separator

        self.index: TreeIndex = TreeIndex([])
        self._search_service = SearchService(self.index)
        self._listeners: List[Listener] = []

        # Transient UI-related state
        self.selected_id: Optional[NodeId] = None
        self.search_term: str = ""
        self.search_result: SearchResult = SearchResult()
        self._expanded: Set[NodeId] = set()
        # Expansion state captured when a search begins; restored when it ends
        self._baseline_expanded: Optional[Set[NodeId]] = None
        self._selected_during_search = False

        self.detail: Optional[DetailView] = None
        self.breadcrumb: List[BreadcrumbSegment] = []
        self.hierarchy: List[HierarchyEntry] = []
        self.children_grid: List[ChildEntry] = []
        self.scroll_target: Optional[NodeId] = None

    # ---------------------------------------------------------------------------------
    # Subscription
    # ---------------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _publish(self, kind: str, node_id: Optional[NodeId] = None) -> None:
        event = ViewerEvent(kind, node_id)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Viewer listener failed for %s event", kind)

    # ---------------------------------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------------------------------

    def initialize(self, forest: Iterable[ClassificationNode]) -> None:
        """Index *forest* and reset all UI state.

        After this call every node is collapsed, nothing is selected, no
        filter is active and the theme is the persisted preference (or the
        default).
        """
        self.debouncer.cancel()
        self.index = TreeIndex(list(forest))
        self._search_service = SearchService(self.index)

        self.selected_id = None
        self.search_term = ""
        self.search_result = SearchResult()
        self._expanded = set()
        self._baseline_expanded = None
        self._selected_during_search = False
        self._clear_detail()

        self.theme_service.load()
        logger.info("Viewer initialised with %d nodes", len(self.index))
        self._publish("tree")

    @property
    def forest(self) -> List[ClassificationNode]:
        return self.index.forest

    @property
    def theme(self) -> str:
        return self.theme_service.theme

    # ---------------------------------------------------------------------------------
    # Read-side helpers
    # ---------------------------------------------------------------------------------

    def is_expanded(self, node_id: str) -> bool:
        return node_id in self._expanded

    def is_visible(self, node_id: str) -> bool:
        return node_id in self.index and not self.search_result.is_hidden(node_id)

    def visible_ids(self) -> List[NodeId]:
        """Ids of nodes not hidden by the filter, in render order."""
        return [n.id for n in self.index.iter_depth_first() if not self.search_result.is_hidden(n.id)]

    def node_state(self, node_id: str) -> NodeState:
        return NodeState(
            expanded=node_id in self._expanded,
            selected=self.selected_id is not None and node_id == self.selected_id,
            matched=node_id in self.search_result.matched,
            hidden=self.search_result.is_hidden(node_id),
        )

    def expanded_ids(self) -> Set[NodeId]:
        return set(self._expanded)

    # ---------------------------------------------------------------------------------
    # Expansion
    # ---------------------------------------------------------------------------------

    def toggle(self, node_id: str, expand: Optional[bool] = None) -> bool:
        """Flip, or force with *expand*, the expanded state of one node.

        Returns the resulting state; unknown ids are a no-op returning False.
        """
        if node_id not in self.index:
            logger.debug("toggle ignored for unknown id %r", node_id)
            return False
        nid = NodeId(node_id)
        should_expand = (nid not in self._expanded) if expand is None else bool(expand)
        if should_expand:
            self._expanded.add(nid)
        else:
            self._expanded.discard(nid)
        self._publish("expansion", nid)
        return should_expand

    def expand_all(self) -> None:
        self._expanded = set(self.index.node_by_id.keys())
        self._publish("expansion")

    def collapse_all(self) -> None:
        self._expanded = set()
        self._publish("expansion")

    def expand_to_level(self, level: int) -> None:
        """Expand nodes whose depth is below *level* and collapse the rest.

        ``expand_to_level(1)`` shows the roots' children only.
        """
        self._expanded = {nid for nid, depth in self.index.depth_by_id.items() if depth < level}
        self._publish("expansion")

    # ---------------------------------------------------------------------------------
    # Selection
    # ---------------------------------------------------------------------------------

    def select(self, node_id: str) -> bool:
        """Select *node_id*, reveal it and rebuild the detail views.

        Returns False (and changes nothing) when the id is unknown.
        """
        node = self.index.get(node_id)
        if node is None:
            logger.debug("select ignored for unknown id %r", node_id)
            return False

        self.selected_id = node.id
        if self.search_result.active:
            self._selected_during_search = True

        path = self.index.path(node.id)
        # Reveal: every ancestor expanded, nothing collapsed
        self._expanded.update(path[:-1])

        self.detail = DetailView(
            node_id=node.id,
            code=node.display_id,
            name=node.name,
            description=node.description or self.no_description,
            child_count=len(node.children),
            descendant_count=self.index.descendant_count(node.id),
            level=len(path),
        )
        self.breadcrumb = [
            BreadcrumbSegment(node_id=nid, label=self.index.node_by_id[nid].display_id)
            for nid in path
        ]
        self.hierarchy = [
            HierarchyEntry(
                node_id=nid,
                level=i,
                code=self.index.node_by_id[nid].display_id,
                name=self.index.node_by_id[nid].name,
                current=(nid == node.id),
            )
            for i, nid in enumerate(path, start=1)
        ]
        self.children_grid = [
            ChildEntry(
                node_id=child.id,
                code=child.display_id,
                name=child.name,
                child_count=len(child.children),
            )
            for child in node.children
        ]
        self.scroll_target = node.id
        self._publish("selection", node.id)
        return True

    def _clear_detail(self) -> None:
        self.detail = None
        self.breadcrumb = []
        self.hierarchy = []
        self.children_grid = []
        self.scroll_target = None

    # ---------------------------------------------------------------------------------
    # Search
    # ---------------------------------------------------------------------------------

    def search(self, term: str) -> None:
        """Schedule a filter pass for *term* after the debounce delay.

        Each call supersedes the previous pending one.
        """
        self.debouncer.call(self.apply_search, term)

    def clear_search(self) -> None:
        """Drop any pending search and remove the filter immediately."""
        self.debouncer.cancel()
        self.apply_search("")

    def apply_search(self, term: str) -> SearchResult:
        """Evaluate *term* now.

        A blank term removes filtering and restores the expansion state from
        before the search began. Otherwise every matching node and all of its
        ancestors stay visible and expanded; every other node is hidden.
        """
        result = self._search_service.search(term)
        self.search_term = term or ""

        if not result.active:
            if self._baseline_expanded is not None:
                restored = set(self._baseline_expanded)
                if self._selected_during_search and self.selected_id is not None:
                    restored.update(self.index.ancestors(self.selected_id))
                self._expanded = restored
            self._baseline_expanded = None
            self._selected_during_search = False
        else:
            if self._baseline_expanded is None:
                self._baseline_expanded = set(self._expanded)
                self._selected_during_search = False
            self._expanded = set(self._baseline_expanded) | set(result.visible)
            if self._selected_during_search and self.selected_id is not None:
                self._expanded.update(self.index.ancestors(self.selected_id))

        self.search_result = result
        logger.debug(
            "Search %r: %d matched, %d visible", result.term, len(result.matched), len(result.visible)
        )
        self._publish("search")
        return result

    # ---------------------------------------------------------------------------------
    # Theme
    # ---------------------------------------------------------------------------------

    def set_theme(self, theme: str) -> None:
        """Apply and persist *theme* (``"light"`` or ``"dark"``)."""
        persisted = self.theme_service.set_theme(theme)
        if not persisted:
            logger.info("Theme '%s' applied but not persisted", theme)
        self._publish("theme")
