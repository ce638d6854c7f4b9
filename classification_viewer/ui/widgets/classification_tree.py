from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from classification_viewer.core.models import ClassificationNode


class ClassificationTreeWidget(ttk.Frame):
    """Tkinter widget that presents a classification forest in a Treeview.

    The widget renders whatever state it is handed; it never decides what is
    expanded, selected or filtered. Hosts push state with :meth:`apply_state`
    and :meth:`set_selection` and receive user intent through callbacks.

    Callbacks:
        - on_toggle: Invoked when the user opens or closes a row
          (``<<TreeviewOpen>>`` / ``<<TreeviewClose>>``). Receives the node id
          and the requested expanded state.
        - on_select: Invoked when the user selects a row (``<<TreeviewSelect>>``).
          Receives the node id. Selections made through :meth:`set_selection`
          are not reported back.

    Notes
    -----
    - Treeview item ids are generated; an internal map links them to node ids,
      so forests with duplicate ids still render every row.
    - Rows hidden by a filter are detached, not deleted, and reattached at
      their original position when they become visible again.
    """

    def __init__(
        self,
        master: "tk.Widget",
        *,
        on_toggle: Optional[Callable[[str, bool], None]] = None,
        on_select: Optional[Callable[[str], None]] = None,
    ) -> None:
        super().__init__(master)
        self._on_toggle = on_toggle
        self._on_select = on_select

        try:
            style = ttk.Style(self)
            style_name = "Classification.Treeview"
            default_bg = style.lookup("Treeview", "fieldbackground") or style.lookup("Treeview", "background") or ""
            style.map(
                style_name,
                background=[("selected", default_bg), ("!focus selected", default_bg)],
                foreground=[("selected", "#0B6BD3"), ("!focus selected", "#0B6BD3")],
            )
        except tk.TclError:
            style_name = "Treeview"

        self._tree = ttk.Treeview(self, show="tree", selectmode="browse", style=style_name, height=12)
        self._vsb = ttk.Scrollbar(self, orient="vertical", command=self._tree.yview)
        self._tree.configure(yscrollcommand=self._vsb.set)

        self._tree.grid(row=0, column=0, sticky="nsew")
        self._vsb.grid(row=0, column=1, sticky="ns")
        self.columnconfigure(0, weight=1)
        self.rowconfigure(0, weight=1)

        self._tree.tag_configure("search-match", foreground="#B7791F")
        self._tree.tag_configure("selected-row", foreground="#0B6BD3")

        # Tree item id -> node id, and node id -> last item registered for it
        self._item_to_node: Dict[str, str] = {}
        self._node_to_item: Dict[str, str] = {}
        # Original placement: parent item -> ordered child items ("" is the root)
        self._children_of: Dict[str, List[str]] = {}
        self._hidden_items: Set[str] = set()
        # Last rendered (open, tags) per item; unchanged rows are skipped
        self._rendered: Dict[str, Tuple[bool, Tuple[str, ...]]] = {}
        self._selected_node: Optional[str] = None

        self._tree.bind("<<TreeviewOpen>>", lambda e: self._on_open_close(True), add="+")
        self._tree.bind("<<TreeviewClose>>", lambda e: self._on_open_close(False), add="+")
        self._tree.bind("<<TreeviewSelect>>", self._on_select_event, add="+")

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------
    @property
    def tree(self) -> ttk.Treeview:
        return self._tree

    def populate(self, forest: Iterable[ClassificationNode]) -> None:
        """Rebuild the rows from *forest*; every row starts collapsed."""
        self.clear()
        self._insert_nodes(list(forest), "")

    def clear(self) -> None:
        children = self._tree.get_children("")
        if children:
            self._tree.delete(*children)
        # Detached rows are not children of any item
        for item in list(self._hidden_items):
            if self._tree.exists(item):
                self._tree.delete(item)
        self._item_to_node.clear()
        self._node_to_item.clear()
        self._children_of.clear()
        self._hidden_items.clear()
        self._rendered.clear()
        self._selected_node = None

    def _insert_nodes(self, nodes: List[ClassificationNode], parent: str) -> None:
        items = self._children_of.setdefault(parent, [])
        for node in nodes:
            label = " ".join(f"{node.display_id}  {node.name}".split())
            item = self._tree.insert(parent, "end", text=label, open=False)
            self._item_to_node[item] = node.id
            self._node_to_item[node.id] = item
            items.append(item)
            if node.children:
                self._insert_nodes(node.children, item)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def apply_state(self, state_of: Callable[[str], object]) -> None:
        """Render expansion, filter and highlight state.

        *state_of* maps a node id to an object with ``expanded``, ``selected``,
        ``matched`` and ``hidden`` attributes.
        """
        hidden: Set[str] = set()
        for item, node_id in self._item_to_node.items():
            state = state_of(node_id)
            if getattr(state, "hidden", False):
                hidden.add(item)
                continue
            tags: Tuple[str, ...] = ()
            if getattr(state, "matched", False):
                tags += ("search-match",)
            if getattr(state, "selected", False):
                tags += ("selected-row",)
            rendered = (bool(getattr(state, "expanded", False)), tags)
            if self._rendered.get(item) != rendered:
                self._tree.item(item, open=rendered[0], tags=tags)
                self._rendered[item] = rendered

        if hidden != self._hidden_items:
            self._hidden_items = hidden
            self._relayout()

    def _relayout(self) -> None:
        for parent, items in self._children_of.items():
            index = 0
            for item in items:
                if item in self._hidden_items:
                    self._tree.detach(item)
                else:
                    self._tree.move(item, parent, index)
                    index += 1

    def set_selection(self, node_id: Optional[str], ensure_visible: bool = True) -> None:
        """Select the row of *node_id* (or clear the selection) without reporting it."""
        self._selected_node = node_id
        item = self._node_to_item.get(node_id) if node_id is not None else None
        if item is None or item in self._hidden_items:
            self._tree.selection_set(())
            return
        self._tree.selection_set((item,))
        self._tree.focus(item)
        if ensure_visible:
            self._tree.see(item)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def find_item(self, node_id: str) -> Optional[str]:
        return self._node_to_item.get(node_id)

    def node_of(self, item: str) -> Optional[str]:
        return self._item_to_node.get(item)

    def is_attached(self, node_id: str) -> bool:
        item = self._node_to_item.get(node_id)
        return item is not None and item not in self._hidden_items

    def is_open(self, node_id: str) -> bool:
        item = self._node_to_item.get(node_id)
        return bool(item) and bool(self._tree.item(item, "open"))

    def visible_rows(self) -> List[str]:
        """Node ids of attached rows in display order, ignoring collapse."""
        rows: List[str] = []

        def walk(parent: str) -> None:
            for item in self._tree.get_children(parent):
                rows.append(self._item_to_node[item])
                walk(item)

        walk("")
        return rows

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def _on_open_close(self, expanded: bool) -> None:
        item = self._tree.focus()
        node_id = self._item_to_node.get(item)
        if node_id is None:
            return
        self._rendered[item] = (expanded, self._rendered.get(item, (False, ()))[1])
        if self._on_toggle is not None:
            self._on_toggle(node_id, expanded)

    def _on_select_event(self, _event: tk.Event) -> None:
        selection = self._tree.selection()
        if not selection:
            return
        node_id = self._item_to_node.get(selection[0])
        if node_id is None or node_id == self._selected_node:
            return
        self._selected_node = node_id
        if self._on_select is not None:
            self._on_select(node_id)
