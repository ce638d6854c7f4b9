"""Shared fixtures for the classification viewer tests.

Every test runs with the user configuration and log directories redirected to
a temporary folder, and with a fresh :class:`ConfigManager`.
"""

import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from classification_viewer.config import ConfigManager
from classification_viewer.core.models import ClassificationNode, NodeId


# ---------------------------
# Environment isolation
# ---------------------------

@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point config/log directories at tmp_path and reset cached state."""
    config_dir = tmp_path / "user_config"
    monkeypatch.setenv("CLASSVIEW_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("CLASSVIEW_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("CLASSVIEW_DEBUG_MODULES", raising=False)
    ConfigManager.reset()
    root_logger = logging.getLogger()
    root_handlers, root_level = list(root_logger.handlers), root_logger.level
    yield config_dir
    ConfigManager.reset()
    # setup_logging replaces handlers via dictConfig; put the previous ones back
    for handler in list(root_logger.handlers):
        if handler not in root_handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in root_handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(root_level)
    package_logger = logging.getLogger("classification_viewer")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


# ---------------------------
# Data fixtures
# ---------------------------

def make_node(node_id: str, name: Optional[str] = None, children=None, description: str = "") -> ClassificationNode:
    return ClassificationNode(
        id=NodeId(node_id),
        display_id=node_id,
        name=name if name is not None else f"Node {node_id}",
        description=description,
        children=list(children or []),
    )


@pytest.fixture
def forest() -> List[ClassificationNode]:
    """A -> [A1 -> [A1a], A2], B"""
    return [
        make_node(
            "A",
            "Alpha",
            [
                make_node("A1", "Alpha one", [make_node("A1a", "Alpha one a")], description="First child"),
                make_node("A2", "Alpha two"),
            ],
            description="Root A",
        ),
        make_node("B", "Beta", description="Root B"),
    ]


@pytest.fixture
def sample_export() -> dict:
    """A small export in the single-element-list wrapped shape."""
    return {
        "BuildingInformation": {
            "Classification": [
                {
                    "System": [
                        {
                            "Name": ["Uniclass 2015"],
                            "EditionVersion": ["v1.22"],
                            "Description": ["Unified classification for the UK industry"],
                            "Source": ["NBS"],
                            "Items": [
                                {
                                    "Item": [
                                        {
                                            "ID": ["Ac"],
                                            "Name": ["Activities"],
                                            "Description": ["Activity tables"],
                                            "Children": [
                                                {
                                                    "Item": [
                                                        {
                                                            "ID": ["Ac_05"],
                                                            "Name": ["Project management activities"],
                                                            "Description": [""],
                                                            "Children": [
                                                                {
                                                                    "Item": [
                                                                        {
                                                                            "ID": ["Ac_05_10"],
                                                                            "Name": ["Briefing"],
                                                                        }
                                                                    ]
                                                                }
                                                            ],
                                                        },
                                                        {
                                                            "ID": ["Ac 10"],
                                                            "Name": ["  Planning  "],
                                                            "Description": ["Planning work"],
                                                        },
                                                    ]
                                                }
                                            ],
                                        },
                                        {
                                            "ID": ["EF-20"],
                                            "Name": ["Structural elements"],
                                            "Description": [None],
                                        },
                                    ]
                                }
                            ],
                        }
                    ]
                }
            ]
        }
    }


# ---------------------------
# Fakes
# ---------------------------

class ManualHandle:
    def __init__(self, scheduler: "ManualScheduler", callback: Callable[[], None], due: int) -> None:
        self.scheduler = scheduler
        self.callback = callback
        self.due = due
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by an explicit clock, in milliseconds."""

    def __init__(self) -> None:
        self.now = 0
        self.handles: List[ManualHandle] = []

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self, callback, self.now + delay_ms)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, ms: int) -> None:
        self.now += ms
        due = [h for h in self.pending if h.due <= self.now]
        for handle in sorted(due, key=lambda h: h.due):
            self.handles.remove(handle)
            handle.callback()


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def node_factory() -> Callable[..., ClassificationNode]:
    return make_node
