# -*- coding: utf-8 -*-
"""BreadcrumbWidget for the ancestor path of the selected item.

Public API (UI-only, no business logic):
- set_path(path_items: List[BreadcrumbItem]) -> None
- clear() -> None

Callbacks:
- on_item_clicked: Optional[Callable[[str], None]]  # called with item.value

Notes:
- Every segment is clickable, including the current one
- Segments are joined by a non-clickable separator glyph
"""

from __future__ import annotations

from typing import Callable, List, NamedTuple, Optional
import tkinter as tk
from tkinter import ttk


class BreadcrumbItem(NamedTuple):
    """Represents a single breadcrumb navigation item."""
    label: str  # Display text (the item code)
    value: str  # Value passed to callback (the node id)


__all__ = ["BreadcrumbWidget", "BreadcrumbItem"]


class BreadcrumbWidget(ttk.Frame):
    """Compact breadcrumb navigation widget."""

    def __init__(
        self,
        parent: tk.Widget,
        *,
        on_item_clicked: Optional[Callable[[str], None]] = None,
        separator: str = "›",
        separator_padx: tuple[int, int] = (2, 2),
        **kwargs,
    ) -> None:
        super().__init__(parent, **kwargs)

        self.on_item_clicked: Optional[Callable[[str], None]] = on_item_clicked
        self._separator = separator
        self._separator_padx: tuple[int, int] = separator_padx

        self.columnconfigure(0, weight=1)
        self._content_frame = ttk.Frame(self)
        self._content_frame.grid(row=0, column=0, sticky="ew")

        self._path_items: List[BreadcrumbItem] = []
        self._widgets: List[tk.Widget] = []

        self._configure_styles()
        # ttk style options belong to the active theme
        self.bind("<<ThemeChanged>>", lambda e: self._configure_styles(), add="+")

    @property
    def path_items(self) -> List[BreadcrumbItem]:
        return list(self._path_items)

    def set_path(self, path_items: List[BreadcrumbItem]) -> None:
        """Set the breadcrumb path items."""
        self._path_items = path_items[:]  # Copy to avoid external mutations
        self._rebuild_widgets()

    def clear(self) -> None:
        """Clear the breadcrumb path."""
        self._path_items.clear()
        self._rebuild_widgets()

    def _rebuild_widgets(self) -> None:
        for widget in self._widgets:
            widget.destroy()
        self._widgets.clear()

        last = len(self._path_items) - 1
        for i, item in enumerate(self._path_items):
            if i > 0:
                sep = ttk.Label(self._content_frame, text=self._separator)
                sep.grid(row=0, column=len(self._widgets), padx=self._separator_padx)
                self._widgets.append(sep)

            style = "Breadcrumb.Current.TLabel" if i == last else "Breadcrumb.Link.TLabel"
            widget = ttk.Label(self._content_frame, text=item.label, style=style, cursor="hand2")
            widget.bind("<Button-1>", lambda e, value=item.value: self._on_item_click(value))
            widget.bind("<Enter>", lambda e, w=widget: self._on_hover(w, True))
            widget.bind("<Leave>", lambda e, w=widget: self._on_hover(w, False))
            widget.grid(row=0, column=len(self._widgets), sticky="w")
            self._widgets.append(widget)

    def _configure_styles(self) -> None:
        style = ttk.Style(self)
        style.configure("Breadcrumb.Link.TLabel", foreground="#0B6BD3")
        style.configure("Breadcrumb.Current.TLabel", font=("", 10, "bold"))

    def _on_item_click(self, value: str) -> None:
        callback = self.on_item_clicked
        if callable(callback):
            callback(value)

    def _on_hover(self, widget: ttk.Label, inside: bool) -> None:
        try:
            widget.configure(foreground="#0B6BD3" if inside else "")
        except tk.TclError:
            pass
