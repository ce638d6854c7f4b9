import threading
import pytest
from typing import List

from classification_viewer.core.services.debounce import Debouncer
from classification_viewer.core.services.theme_service import ThemeService, ThemeStore
from classification_viewer.ui.controllers.tree_viewer_controller import (
    BreadcrumbSegment,
    HierarchyEntry,
    TreeViewerController,
    ViewerEvent,
)


# ---------------------------
# Fixtures
# ---------------------------

class EventRecorder:
    def __init__(self):
        self.events: List[ViewerEvent] = []

    def __call__(self, event: ViewerEvent) -> None:
        self.events.append(event)

    @property
    def kinds(self) -> List[str]:
        return [e.kind for e in self.events]


@pytest.fixture
def theme_store(tmp_path):
    return ThemeStore(tmp_path / "preferences.yml")


@pytest.fixture
def controller(forest, manual_scheduler, theme_store):
    ctrl = TreeViewerController(ThemeService(theme_store), Debouncer(200, manual_scheduler))
    ctrl.initialize(forest)
    return ctrl


@pytest.fixture
def recorder(controller):
    rec = EventRecorder()
    controller.subscribe(rec)
    return rec


# ---------------------------
# Initialization
# ---------------------------

def test_initialize_starts_collapsed_and_unselected(controller):
    assert controller.expanded_ids() == set()
    assert controller.selected_id is None
    assert controller.detail is None
    assert controller.breadcrumb == []
    assert controller.search_result.active is False
    assert controller.visible_ids() == ["A", "A1", "A1a", "A2", "B"]
    assert controller.theme == "light"


def test_initialize_restores_persisted_theme(forest, manual_scheduler, theme_store):
    theme_store.write("dark")
    ctrl = TreeViewerController(ThemeService(theme_store), Debouncer(200, manual_scheduler))

    ctrl.initialize(forest)

    assert ctrl.theme == "dark"


def test_initialize_resets_previous_state(controller, forest, recorder):
    controller.toggle("A")
    controller.select("A1a")
    controller.apply_search("beta")

    controller.initialize(forest)

    assert controller.expanded_ids() == set()
    assert controller.selected_id is None
    assert controller.search_term == ""
    assert recorder.kinds[-1] == "tree"


def test_initialize_with_empty_forest(manual_scheduler):
    ctrl = TreeViewerController(ThemeService(), Debouncer(200, manual_scheduler))
    ctrl.initialize([])

    assert ctrl.visible_ids() == []
    assert ctrl.select("anything") is False
    assert ctrl.apply_search("x").visible == frozenset()


# ---------------------------
# Expansion
# ---------------------------

def test_toggle_flips_state_and_publishes(controller, recorder):
    assert controller.toggle("A") is True
    assert controller.is_expanded("A")
    assert controller.toggle("A") is False
    assert not controller.is_expanded("A")
    assert recorder.events == [ViewerEvent("expansion", "A"), ViewerEvent("expansion", "A")]


def test_toggle_with_explicit_state_is_idempotent(controller):
    controller.toggle("A", expand=True)
    controller.toggle("A", expand=True)
    assert controller.is_expanded("A")

    controller.toggle("A", expand=False)
    assert not controller.is_expanded("A")


def test_toggle_unknown_id_is_noop(controller, recorder):
    assert controller.toggle("missing") is False
    assert controller.expanded_ids() == set()
    assert recorder.events == []


def test_toggle_leaf_is_allowed(controller):
    assert controller.toggle("B") is True
    assert controller.is_expanded("B")


def test_expand_all_and_collapse_all(controller):
    controller.expand_all()
    assert controller.expanded_ids() == {"A", "A1", "A1a", "A2", "B"}

    controller.collapse_all()
    assert controller.expanded_ids() == set()


def test_expand_to_level(controller):
    controller.expand_to_level(1)
    assert controller.expanded_ids() == {"A", "B"}

    controller.expand_to_level(2)
    assert controller.expanded_ids() == {"A", "A1", "A2", "B"}

    controller.expand_to_level(0)
    assert controller.expanded_ids() == set()


# ---------------------------
# Selection
# ---------------------------

def test_select_reveals_ancestors_and_builds_detail(controller, recorder):
    assert controller.select("A1a") is True

    assert controller.selected_id == "A1a"
    assert {"A", "A1"} <= controller.expanded_ids()
    assert "A1a" not in controller.expanded_ids()
    assert controller.scroll_target == "A1a"
    assert recorder.events == [ViewerEvent("selection", "A1a")]

    detail = controller.detail
    assert detail.code == "A1a"
    assert detail.name == "Alpha one a"
    assert detail.child_count == 0
    assert detail.descendant_count == 0
    assert detail.level == 3


def test_select_uses_placeholder_for_empty_description(controller):
    controller.select("A2")

    assert controller.detail.description == "No description available."


def test_custom_placeholder_text(forest, manual_scheduler):
    ctrl = TreeViewerController(ThemeService(), Debouncer(200, manual_scheduler), no_description="n/a")
    ctrl.initialize(forest)
    ctrl.select("A2")

    assert ctrl.detail.description == "n/a"


def test_select_builds_breadcrumb_and_hierarchy(controller):
    controller.select("A1a")

    assert controller.breadcrumb == [
        BreadcrumbSegment("A", "A"),
        BreadcrumbSegment("A1", "A1"),
        BreadcrumbSegment("A1a", "A1a"),
    ]
    assert controller.hierarchy == [
        HierarchyEntry("A", 1, "A", "Alpha", False),
        HierarchyEntry("A1", 2, "A1", "Alpha one", False),
        HierarchyEntry("A1a", 3, "A1a", "Alpha one a", True),
    ]


def test_select_builds_children_grid_and_counts(controller):
    controller.select("A")

    assert [c.node_id for c in controller.children_grid] == ["A1", "A2"]
    assert controller.children_grid[0].child_count == 1
    assert controller.children_grid[0].has_children
    assert not controller.children_grid[1].has_children
    assert controller.detail.child_count == 2
    assert controller.detail.descendant_count == 3
    assert controller.detail.level == 1


def test_select_does_not_collapse_anything(controller):
    controller.expand_all()
    controller.select("B")

    assert controller.expanded_ids() == {"A", "A1", "A1a", "A2", "B"}


def test_select_unknown_id_keeps_previous_selection(controller, recorder):
    controller.select("A1")
    recorder.events.clear()

    assert controller.select("missing") is False
    assert controller.selected_id == "A1"
    assert controller.detail.code == "A1"
    assert recorder.events == []


def test_node_state_reflects_selection(controller):
    controller.select("A1")

    assert controller.node_state("A1").selected
    assert not controller.node_state("A").selected
    assert controller.node_state("A").expanded


# ---------------------------
# Search
# ---------------------------

def test_search_is_debounced(controller, manual_scheduler, recorder):
    controller.search("a")
    controller.search("al")
    controller.search("alpha one a")

    assert controller.search_result.active is False
    manual_scheduler.advance(199)
    assert recorder.events == []

    manual_scheduler.advance(1)
    assert recorder.kinds == ["search"]
    assert controller.search_result.matched == {"A1a"}


def test_apply_search_hides_non_matching_and_expands_visible(controller):
    result = controller.apply_search("alpha one a")

    assert result.visible == {"A", "A1", "A1a"}
    assert controller.visible_ids() == ["A", "A1", "A1a"]
    assert controller.is_visible("A1")
    assert not controller.is_visible("A2")
    assert not controller.is_visible("B")
    assert {"A", "A1", "A1a"} <= controller.expanded_ids()
    assert controller.node_state("A1a").matched
    assert controller.node_state("B").hidden


def test_clearing_search_restores_pre_search_expansion(controller):
    controller.toggle("A")
    before = controller.expanded_ids()

    controller.apply_search("alpha one a")
    controller.apply_search("beta")
    controller.apply_search("")

    assert controller.expanded_ids() == before
    assert controller.visible_ids() == ["A", "A1", "A1a", "A2", "B"]
    assert not controller.node_state("A1a").matched


def test_toggles_during_search_are_discarded_on_clear(controller):
    controller.apply_search("beta")
    controller.toggle("B")

    controller.apply_search("   ")

    assert controller.expanded_ids() == set()


def test_selection_during_search_keeps_its_ancestors_expanded(controller):
    controller.apply_search("alpha one a")
    controller.select("A1a")

    controller.apply_search("")

    assert controller.expanded_ids() == {"A", "A1"}
    assert controller.selected_id == "A1a"


def test_selection_ancestors_survive_term_change(controller):
    controller.apply_search("alpha one a")
    controller.select("A1a")

    controller.apply_search("beta")

    assert {"A", "A1"} <= controller.expanded_ids()
    assert controller.expanded_ids() >= {"B"}


def test_selection_hidden_by_filter_is_kept(controller):
    controller.select("A2")

    controller.apply_search("beta")

    assert controller.selected_id == "A2"
    assert controller.detail.code == "A2"
    assert controller.node_state("A2").hidden


def test_clear_search_cancels_pending_and_applies_immediately(controller, manual_scheduler):
    controller.apply_search("beta")
    controller.search("alpha")

    controller.clear_search()
    manual_scheduler.advance(1000)

    assert controller.search_term == ""
    assert controller.search_result.active is False
    assert controller.visible_ids() == ["A", "A1", "A1a", "A2", "B"]


def test_search_without_matches_hides_all(controller):
    controller.apply_search("zzz")

    assert controller.visible_ids() == []


def test_default_debouncer_applies_search_on_calling_thread(forest):
    ctrl = TreeViewerController(ThemeService())
    ctrl.initialize(forest)
    threads = []
    ctrl.subscribe(lambda event: threads.append((event.kind, threading.current_thread())))

    ctrl.search("alpha two")

    assert threads == [("search", threading.current_thread())]
    assert ctrl.visible_ids() == ["A", "A2"]
    assert not ctrl.debouncer.pending


# ---------------------------
# Theme and subscriptions
# ---------------------------

def test_set_theme_persists_and_publishes(controller, recorder, theme_store):
    controller.set_theme("dark")

    assert controller.theme == "dark"
    assert theme_store.read() == "dark"
    assert recorder.kinds == ["theme"]


def test_set_theme_rejects_invalid_value(controller, recorder):
    with pytest.raises(ValueError):
        controller.set_theme("blue")
    assert recorder.events == []


def test_failing_listener_does_not_block_others(controller):
    seen = []

    def broken(event):
        raise RuntimeError("listener failure")

    controller.subscribe(broken)
    controller.subscribe(seen.append)
    controller.toggle("A")

    assert seen == [ViewerEvent("expansion", "A")]


def test_unsubscribe_stops_notifications(controller, recorder):
    controller.unsubscribe(recorder)
    controller.unsubscribe(recorder)
    controller.toggle("A")

    assert recorder.events == []
