"""Service layer for the classification viewer.

This sub-package hosts toolkit-agnostic services used by the viewer
controller and both hosts (browser document, Tk browser).
"""

from .debounce import Debouncer, ImmediateScheduler, ThreadingScheduler, TkScheduler
from .search_service import SearchResult, SearchService
from .theme_service import ThemeService, ThemeStore

__all__ = [
    "Debouncer",
    "ImmediateScheduler",
    "ThreadingScheduler",
    "TkScheduler",
    "SearchResult",
    "SearchService",
    "ThemeService",
    "ThemeStore",
]
