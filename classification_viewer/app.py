# -*- coding: utf-8 -*-
"""Tk-based desktop browser for classification exports.

Exposes :class:`ClassificationBrowser`, which hosts a
:class:`~classification_viewer.ui.controllers.TreeViewerController` in a Tk
window, and :func:`main`, the ``classification-browser`` entry point used by
``run.py``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import tkinter as tk
from tkinter import ttk

import sv_ttk

from classification_viewer.config import ConfigManager, get_user_config_dir
from classification_viewer.core.exceptions import ClassificationViewerError
from classification_viewer.core.models import SystemConfig, TransformResult
from classification_viewer.core.services import Debouncer, ThemeService, ThemeStore, TkScheduler
from classification_viewer.core.transform import transform_source
from classification_viewer.logging_config import setup_logging
from classification_viewer.ui.controllers import TreeViewerController, ViewerEvent
from classification_viewer.ui.widgets import (
    BreadcrumbItem,
    BreadcrumbWidget,
    ClassificationTreeWidget,
    DetailPanel,
    SearchWidget,
)

logger = logging.getLogger(__name__)

__all__ = ["ClassificationBrowser", "PREFERENCES_FILENAME", "main"]

PREFERENCES_FILENAME = "preferences.yml"


class ClassificationBrowser:
    """Main window content: search, tree controls, tree and detail panel."""

    def __init__(
        self,
        root: tk.Tk,
        controller: TreeViewerController,
        system_config: SystemConfig,
        result: Optional[TransformResult] = None,
    ) -> None:
        self.root = root
        self.controller = controller
        self.system_config = system_config
        self.result = result

        self._build_header()
        self._build_body()
        self._build_footer()

        self.root.bind("<Key-slash>", self._on_slash_key, add="+")
        self.root.bind("<Escape>", self._on_escape_key, add="+")

        controller.subscribe(self._on_viewer_event)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def _build_header(self) -> None:
        header = ttk.Frame(self.root, padding=(12, 8))
        header.pack(fill="x")
        ttk.Label(header, text=self.system_config.title, font=("", 16, "bold")).pack(side="left")
        self._configure_badge_style()
        ttk.Label(header, text=self.system_config.version, style="Badge.TLabel").pack(side="left", padx=(8, 0))

        self.dark_button = ttk.Button(header, text="🌙", width=3, command=lambda: self.controller.set_theme("dark"))
        self.dark_button.pack(side="right")
        self.light_button = ttk.Button(header, text="☀️", width=3, command=lambda: self.controller.set_theme("light"))
        self.light_button.pack(side="right", padx=(0, 4))

        # Accent stripe in the system colour
        tk.Frame(self.root, height=3, background=self.system_config.accent_color).pack(fill="x")

    def _build_body(self) -> None:
        paned = ttk.PanedWindow(self.root, orient="horizontal")
        paned.pack(fill="both", expand=True)

        sidebar = ttk.Frame(paned, padding=8)
        sidebar.columnconfigure(0, weight=1)
        sidebar.rowconfigure(2, weight=1)

        self.search = SearchWidget(
            sidebar,
            on_term_changed=self.controller.search,
            on_cleared=self.controller.clear_search,
        )
        self.search.grid(row=0, column=0, sticky="ew")

        controls = ttk.Frame(sidebar)
        controls.grid(row=1, column=0, sticky="ew", pady=6)
        for text, command in (
            ("Expand All", self.controller.expand_all),
            ("Collapse All", self.controller.collapse_all),
            ("Level 1", lambda: self.controller.expand_to_level(1)),
            ("Level 2", lambda: self.controller.expand_to_level(2)),
        ):
            ttk.Button(controls, text=text, command=command).pack(side="left", padx=(0, 4))

        self.tree = ClassificationTreeWidget(
            sidebar,
            on_toggle=lambda node_id, expand: self.controller.toggle(node_id, expand),
            on_select=self.controller.select,
        )
        self.tree.grid(row=2, column=0, sticky="nsew")
        paned.add(sidebar, weight=1)

        content = ttk.Frame(paned, padding=8)
        content.columnconfigure(0, weight=1)
        content.rowconfigure(1, weight=1)
        self.breadcrumb = BreadcrumbWidget(
            content,
            on_item_clicked=self.controller.select,
            separator=self.controller.breadcrumb_separator,
        )
        self.breadcrumb.grid(row=0, column=0, sticky="ew")
        self.detail = DetailPanel(content, on_navigate=self.controller.select, empty_icon=self.system_config.icon)
        self.detail.grid(row=1, column=0, sticky="nsew")
        paned.add(content, weight=2)

    def _build_footer(self) -> None:
        footer = ttk.Frame(self.root, padding=(12, 4))
        footer.pack(fill="x")
        self._footer_var = tk.StringVar()
        ttk.Label(footer, textvariable=self._footer_var).pack(side="left")
        if self.result is not None:
            self._footer_var.set(
                f"{self.result.total_items} items in {self.result.top_level_count} top-level groups"
            )

    # ------------------------------------------------------------------
    # Controller events
    # ------------------------------------------------------------------
    def _on_viewer_event(self, event: ViewerEvent) -> None:
        if event.kind == "tree":
            self.tree.populate(self.controller.forest)
            self._render_tree()
            self._render_selection()
            self._apply_theme()
        elif event.kind in ("expansion", "search"):
            self._render_tree()
        elif event.kind == "selection":
            self._render_tree()
            self._render_selection()
        elif event.kind == "theme":
            self._apply_theme()

    def _render_tree(self) -> None:
        self.tree.apply_state(self.controller.node_state)

    def _render_selection(self) -> None:
        controller = self.controller
        self.tree.set_selection(controller.selected_id, ensure_visible=controller.scroll_target is not None)
        if controller.detail is None:
            self.breadcrumb.clear()
            self.detail.show_empty()
            return
        self.breadcrumb.set_path([BreadcrumbItem(s.label, s.node_id) for s in controller.breadcrumb])
        self.detail.show(controller.detail, controller.hierarchy, controller.children_grid)

    def _apply_theme(self) -> None:
        theme = self.controller.theme
        sv_ttk.set_theme(theme)
        # set_theme switches the ttk theme, which drops per-theme style options
        self._configure_badge_style()
        self.light_button.state(["pressed"] if theme == "light" else ["!pressed"])
        self.dark_button.state(["pressed"] if theme == "dark" else ["!pressed"])

    def _configure_badge_style(self) -> None:
        ttk.Style(self.root).configure(
            "Badge.TLabel",
            foreground="#FFFFFF",
            background=self.system_config.accent_color,
            padding=(6, 1),
            font=("", 9, "bold"),
        )

    # ------------------------------------------------------------------
    # Keyboard shortcuts
    # ------------------------------------------------------------------
    def _on_slash_key(self, event: tk.Event) -> Optional[str]:
        if self.search.has_focus():
            return None
        self.search.focus_entry()
        return "break"

    def _on_escape_key(self, event: tk.Event) -> str:
        # The entry clears itself when it has focus
        if self.search.get_search_term() or not self.search.has_focus():
            self.search.clear()
        self.tree.tree.focus_set()
        return "break"


def _load_export(path: Path) -> TransformResult:
    source = json.loads(path.read_text(encoding="utf-8"))
    return transform_source(source)


def main(argv: Optional[List[str]] = None) -> int:
    """Open a classification export in the desktop browser."""
    setup_logging()
    config_manager = ConfigManager()

    parser = argparse.ArgumentParser(
        prog="classification-browser",
        description="Browse a classification JSON export in a desktop window.",
    )
    parser.add_argument("input", help="Path to the classification JSON export")
    parser.add_argument("system", choices=config_manager.system_keys(), help="Classification system key")
    args = parser.parse_args(argv)

    system_config = config_manager.get_system_config(args.system)
    try:
        result = _load_export(Path(args.input))
    except (OSError, json.JSONDecodeError, ClassificationViewerError) as exc:
        logger.error("Could not load %s: %s", args.input, exc)
        print(f"Error: could not load {args.input}: {exc}", file=sys.stderr)
        return 1

    settings = config_manager.get_viewer_settings()
    theme_settings = settings.get("theme") or {}
    detail_settings = settings.get("detail") or {}

    root = tk.Tk()
    root.title(f"{system_config.title} {system_config.version}")
    root.geometry("1200x760")

    store = ThemeStore(
        get_user_config_dir() / PREFERENCES_FILENAME,
        key=str(theme_settings.get("storage_key", "theme")),
    )
    controller = TreeViewerController(
        ThemeService(store, default=str(theme_settings.get("default", "light"))),
        Debouncer(config_manager.search_debounce_ms(), TkScheduler(root)),
        no_description=str(detail_settings.get("no_description", "No description available.")),
        breadcrumb_separator=str(detail_settings.get("breadcrumb_separator", "›")),
    )
    ClassificationBrowser(root, controller, system_config, result)
    controller.initialize(result.forest)

    logger.info("===== Browser started (%s, %d items) =====", system_config.key, result.total_items)
    root.mainloop()
    logger.info("===== Browser closed =====")
    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())
