"""UI controllers package.

Contains controllers that coordinate between UI widgets and the core
services. No toolkit code lives here.
"""

from .tree_viewer_controller import TreeViewerController, ViewerEvent

__all__ = [
    "TreeViewerController",
    "ViewerEvent",
]
