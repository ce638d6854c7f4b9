# -*- coding: utf-8 -*-
"""DetailPanel showing the selected classification item.

Public API (UI-only, no business logic):
- show(detail, hierarchy, children) -> None
- show_empty() -> None

Callbacks:
- on_navigate: Optional[Callable[[str], None]]  # called with a node id

Notes:
- Renders the view models built by the viewer controller as they are
- Hierarchy rows and child cards are clickable and report their node id
"""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable, List, Optional, Sequence

__all__ = ["DetailPanel"]

_CHILD_COLUMNS = 3


class DetailPanel(ttk.Frame):
    """Right-hand panel with description, statistics, hierarchy and children."""

    def __init__(
        self,
        parent: tk.Widget,
        *,
        on_navigate: Optional[Callable[[str], None]] = None,
        empty_icon: str = "",
        **kwargs,
    ) -> None:
        super().__init__(parent, **kwargs)
        self.on_navigate = on_navigate
        self.columnconfigure(0, weight=1)
        self.rowconfigure(0, weight=1)

        self._configure_styles()
        # ttk style options belong to the active theme
        self.bind("<<ThemeChanged>>", lambda e: self._configure_styles(), add="+")

        # Empty state
        self._empty = ttk.Frame(self)
        ttk.Label(self._empty, text=empty_icon, font=("", 32)).pack(pady=(40, 8))
        ttk.Label(self._empty, text="Select an item", font=("", 14, "bold")).pack()
        ttk.Label(
            self._empty, text="Click on any item in the tree to view its description and details"
        ).pack(pady=(4, 0))
        ttk.Label(self._empty, text="Press / to search").pack(pady=(4, 0))

        # Detail view
        self._detail = ttk.Frame(self)
        self._detail.columnconfigure(0, weight=1)

        title = ttk.Frame(self._detail)
        title.grid(row=0, column=0, sticky="ew", pady=(0, 8))
        self._code_var = tk.StringVar()
        self._name_var = tk.StringVar()
        ttk.Label(title, textvariable=self._code_var, font=("TkFixedFont", 16, "bold")).pack(side="left")
        ttk.Label(title, textvariable=self._name_var, font=("", 14)).pack(side="left", padx=(10, 0))

        description = ttk.LabelFrame(self._detail, text="Description", padding=8)
        description.grid(row=1, column=0, sticky="ew", pady=4)
        self._description_var = tk.StringVar()
        self._description_label = ttk.Label(
            description, textvariable=self._description_var, wraplength=520, justify="left"
        )
        self._description_label.pack(fill="x")

        stats = ttk.LabelFrame(self._detail, text="Statistics", padding=8)
        stats.grid(row=2, column=0, sticky="ew", pady=4)
        self._children_var = tk.StringVar(value="0")
        self._descendants_var = tk.StringVar(value="0")
        self._level_var = tk.StringVar(value="0")
        for column, (label, var) in enumerate(
            (
                ("Direct Children", self._children_var),
                ("Total Descendants", self._descendants_var),
                ("Hierarchy Level", self._level_var),
            )
        ):
            stats.columnconfigure(column, weight=1)
            ttk.Label(stats, text=label).grid(row=0, column=column)
            ttk.Label(stats, textvariable=var, font=("", 16, "bold")).grid(row=1, column=column)

        self._hierarchy = ttk.LabelFrame(self._detail, text="Hierarchy Path", padding=8)
        self._hierarchy.grid(row=3, column=0, sticky="ew", pady=4)
        self._children = ttk.LabelFrame(self._detail, text="Child Items", padding=8)
        self._children.grid(row=4, column=0, sticky="nsew", pady=4)
        self._detail.rowconfigure(4, weight=1)

        self._showing_detail = False
        self.show_empty()

    @property
    def showing_detail(self) -> bool:
        return self._showing_detail

    @property
    def description_text(self) -> str:
        return self._description_var.get()

    def show_empty(self) -> None:
        self._detail.grid_remove()
        self._empty.grid(row=0, column=0, sticky="nsew")
        self._showing_detail = False

    def show(self, detail, hierarchy: Sequence, children: Sequence) -> None:
        """Render *detail* with its *hierarchy* entries and *children* entries."""
        self._code_var.set(detail.code)
        self._name_var.set(detail.name)
        self._description_var.set(detail.description)
        self._children_var.set(str(detail.child_count))
        self._descendants_var.set(str(detail.descendant_count))
        self._level_var.set(str(detail.level))

        self._rebuild_hierarchy(hierarchy)
        self._rebuild_children(children)

        self._empty.grid_remove()
        self._detail.grid(row=0, column=0, sticky="nsew", padx=12, pady=12)
        self._showing_detail = True

    def child_labels(self) -> List[str]:
        """Texts of the child cards currently shown."""
        return [w.cget("text") for w in self._children.winfo_children() if isinstance(w, ttk.Button)]

    # ------------------------------------------------------------------
    def _configure_styles(self) -> None:
        style = ttk.Style(self)
        style.configure("Hierarchy.Current.TLabel", font=("", 10, "bold"), foreground="#0B6BD3")

    def _rebuild_hierarchy(self, hierarchy: Sequence) -> None:
        for widget in self._hierarchy.winfo_children():
            widget.destroy()
        for row, entry in enumerate(hierarchy):
            style = "Hierarchy.Current.TLabel" if entry.current else "TLabel"
            label = ttk.Label(
                self._hierarchy,
                text=f"L{entry.level}   {entry.code}   {entry.name}",
                style=style,
                cursor="hand2",
            )
            label.grid(row=row, column=0, sticky="w", padx=((entry.level - 1) * 12, 0))
            label.bind("<Button-1>", lambda e, nid=entry.node_id: self._navigate(nid))

    def _rebuild_children(self, children: Sequence) -> None:
        for widget in self._children.winfo_children():
            widget.destroy()
        if not children:
            ttk.Label(self._children, text="No child items").grid(row=0, column=0, sticky="w")
            return
        for column in range(_CHILD_COLUMNS):
            self._children.columnconfigure(column, weight=1, uniform="child")
        for i, entry in enumerate(children):
            text = f"{entry.code}  {entry.name}"
            if entry.has_children:
                text += f"  ({entry.child_count})"
            button = ttk.Button(
                self._children,
                text=text + "  →",
                command=lambda nid=entry.node_id: self._navigate(nid),
            )
            button.grid(row=i // _CHILD_COLUMNS, column=i % _CHILD_COLUMNS, sticky="ew", padx=2, pady=2)

    def _navigate(self, node_id: str) -> None:
        if self.on_navigate is not None:
            self.on_navigate(node_id)
