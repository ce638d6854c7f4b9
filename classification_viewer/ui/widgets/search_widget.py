from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional


class SearchWidget(ttk.Frame):
    """Search entry with a clear button.

    Parameters
    ----------
    master : tk.Widget
        Parent Tkinter widget.
    on_term_changed : Optional[Callable[[str], None]], optional
        Invoked with the current term whenever the text changes. Identical
        consecutive values are reported once. Debouncing is the receiver's
        job (the viewer controller debounces its filter pass).
    on_cleared : Optional[Callable[[], None]], optional
        Invoked when the term is cleared with Escape or the clear button.
        When omitted, clearing reports ``on_term_changed("")`` instead.

    Notes
    -----
    - Keyboard bindings:
        * Escape: clears the term and triggers ``on_cleared``.
    - The clear button (×) behaves like Escape.
    """

    def __init__(
        self,
        master: "tk.Widget",
        *,
        on_term_changed: Optional[Callable[[str], None]] = None,
        on_cleared: Optional[Callable[[], None]] = None,
        placeholder: str = "Search codes or names... (Press /)",
        entry_width: Optional[int] = None,
    ) -> None:
        super().__init__(master)

        self._on_term_changed = on_term_changed
        self._on_cleared = on_cleared

        self._term_var = tk.StringVar(value="")
        self._last_notified_term: Optional[str] = None
        self._clearing = False

        self.columnconfigure(0, weight=1)

        entry_kwargs = {"textvariable": self._term_var}
        if isinstance(entry_width, int) and entry_width > 0:
            entry_kwargs["width"] = entry_width
        self._entry = ttk.Entry(self, **entry_kwargs)
        self._entry.grid(row=0, column=0, padx=(0, 4), pady=0, sticky="ew")

        self._clear_btn = ttk.Button(self, text="×", width=2, command=self.clear)
        self._clear_btn.grid(row=0, column=1, pady=0, sticky="nsew")

        self._configure_styles()
        self.bind("<<ThemeChanged>>", lambda e: self._configure_styles(), add="+")

        self._hint = ttk.Label(self, text=placeholder, style="Hint.TLabel")
        self._hint.grid(row=1, column=0, columnspan=2, sticky="w")

        # Variable trace catches programmatic and user edits
        self._term_var.trace_add("write", self._on_term_var_changed)
        self._entry.bind("<Escape>", self._on_escape, add="+")

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    @property
    def entry(self) -> ttk.Entry:
        return self._entry

    def set_search_term(self, term: str) -> None:
        self._term_var.set(term or "")

    def get_search_term(self) -> str:
        return self._term_var.get()

    def focus_entry(self) -> None:
        """Give focus to the search entry with the cursor at the end."""
        self._entry.focus_set()
        self._entry.icursor("end")

    def has_focus(self) -> bool:
        try:
            return self.focus_get() is self._entry
        except (KeyError, tk.TclError):
            return False

    def clear(self) -> None:
        """Empty the entry and notify ``on_cleared`` (or ``on_term_changed``)."""
        self._clearing = True
        try:
            self.set_search_term("")
        finally:
            self._clearing = False
        self._last_notified_term = ""
        if self._on_cleared is not None:
            self._on_cleared()
        elif self._on_term_changed is not None:
            self._on_term_changed("")

    # ---------------------------------------------------------------------
    # Internal handlers
    # ---------------------------------------------------------------------
    def _configure_styles(self) -> None:
        ttk.Style(self).configure("Hint.TLabel", foreground="#6B7280", font=("", 8))

    def _on_term_var_changed(self, *args) -> None:
        if self._clearing or self._on_term_changed is None:
            return
        term = self.get_search_term()
        if term == self._last_notified_term:
            return
        self._last_notified_term = term
        self._on_term_changed(term)

    def _on_escape(self, event: tk.Event) -> None:
        # Not "break": toplevel Escape bindings still run
        self.clear()
