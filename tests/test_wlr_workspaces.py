import pytest

from barkit.wlr_workspaces import (
    PROTOCOL_STATE_ACTIVE,
    PROTOCOL_STATE_HIDDEN,
    PROTOCOL_STATE_URGENT,
    Workspace,
    WorkspaceGroup,
    WorkspaceState,
    persistent_workspace_names,
    sort_workspaces,
)


CONFIG = {"persistent_workspaces": {"1": [], "2": ["DP-1"], "3": ["HDMI-A-1"]}}


def test_persistent_names_for_output():
    assert persistent_workspace_names(CONFIG, "DP-1") == ["1", "2"]
    assert persistent_workspace_names(CONFIG, "HDMI-A-1") == ["1", "3"]


def test_persistent_names_all_outputs_empty():
    assert persistent_workspace_names(CONFIG, "DP-1", all_outputs=True) == []
    assert persistent_workspace_names({}, "DP-1") == []


def test_sort_by_number():
    spaces = [Workspace(1, "10"), Workspace(2, "2"), Workspace(3, "1")]
    result = sort_workspaces(spaces, sort_by_number=True)
    assert [w.name for w in result] == ["1", "2", "10"]


def test_sort_by_name_default_is_lexicographic():
    spaces = [Workspace(1, "10"), Workspace(2, "2"), Workspace(3, "1")]
    result = sort_workspaces(spaces)
    assert [w.name for w in result] == ["1", "10", "2"]


def test_sort_by_id_without_flags():
    spaces = [Workspace(3, "a"), Workspace(1, "c"), Workspace(2, "b")]
    result = sort_workspaces(spaces, sort_by_name=False, sort_by_coordinates=False)
    assert [w.id for w in result] == [1, 2, 3]


def test_sort_by_coordinates_breaks_name_ties():
    first, second = Workspace(1, "x"), Workspace(2, "x")
    first.coordinates = [2, 0]
    second.coordinates = [1, 0]
    assert sort_workspaces([first, second]) == [second, first]


def test_handle_state_and_classes():
    ws = Workspace(1, "main")
    ws.handle_state([PROTOCOL_STATE_ACTIVE, PROTOCOL_STATE_URGENT])
    assert ws.is_active and ws.is_urgent and not ws.is_hidden
    assert ws.css_classes() == {"active", "urgent"}
    ws.handle_state([PROTOCOL_STATE_HIDDEN])
    assert ws.css_classes() == {"hidden"}


def test_persistent_placeholder_is_empty():
    ws = Workspace(1, "3", persistent=True)
    assert ws.state == WorkspaceState.EMPTY
    assert ws.css_classes() == {"persistent"}


def test_icon_fallbacks():
    icons = {"active": "A", "web": "W", "persistent": "P", "default": "D"}
    ws = Workspace(1, "web")
    assert ws.icon(icons) == "W"
    ws.handle_state([PROTOCOL_STATE_ACTIVE])
    assert ws.icon(icons) == "A"
    assert Workspace(2, "x", persistent=True).icon(icons) == "P"
    assert Workspace(3, "x").icon(icons) == "D"
    assert Workspace(4, "x").icon({}) == "x"


def test_label_uses_format_and_config_icons():
    assert Workspace(1, "main").label() == "main"
    ws = Workspace(1, "main", {"format": "{icon} {name}", "format-icons": {"main": "M"}})
    assert ws.label() == "M main"


def test_click_action():
    ws = Workspace(1, "a", {"on-click": "activate", "on-click-right": "close",
                             "on-click-middle": "dance"})
    assert ws.click_action(1) == "activate"
    assert ws.click_action(3) == "close"
    assert ws.click_action(2) is None
    assert Workspace(2, "b").click_action(1) is None


def test_group_creates_placeholders_once():
    group = WorkspaceGroup(CONFIG, "DP-1")
    group.create_workspace()
    group.create_workspace()
    names = sorted(w.name for w in group.workspaces)
    assert names == ["", "", "1", "2"]
    assert group.persistent_workspaces == ["1", "2"]


def test_rename_replaces_placeholder():
    group = WorkspaceGroup(CONFIG, "DP-1")
    ws = group.create_workspace("1")
    assert ws.persistent
    assert [w.name for w in group.workspaces].count("1") == 1
    assert ws in group.workspaces
    assert group.need_to_sort


def test_handle_remove_persistent_keeps_workspace():
    group = WorkspaceGroup(CONFIG, "DP-1")
    ws = group.create_workspace("2")
    ws.handle_state([PROTOCOL_STATE_ACTIVE])
    assert group.handle_remove(ws.id) is False
    assert ws in group.workspaces
    assert ws.is_empty and not ws.is_active


def test_handle_remove_ordinary_workspace():
    group = WorkspaceGroup({}, "DP-1")
    ws = group.create_workspace("web")
    assert group.handle_remove(ws.id) is True
    assert ws not in group.workspaces
    assert group.remove_workspace(ws.id) is False


def test_rename_unknown_raises():
    group = WorkspaceGroup({}, "DP-1")
    with pytest.raises(KeyError):
        group.rename(-5, "x")