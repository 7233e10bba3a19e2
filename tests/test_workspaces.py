import json

import pytest

from barkit.workspaces import (
    NO_AUTO_BACK_AND_FORTH,
    Workspaces,
    convert_workspace_name_to_num,
    trim_workspace_name,
)

PAYLOAD = [
    {"name": "3", "num": 3, "output": "DP-1"},
    {"name": "1", "num": 1, "output": "DP-1", "focused": True},
    {"name": "mail", "num": -1, "output": "DP-1"},
    {"name": "x", "num": 2, "output": "HDMI-A-1"},
]


def names(workspaces):
    return [w["name"] for w in workspaces]


@pytest.mark.parametrize(
    "name, expected",
    [("1", 1), ("10:web", 10), ("web", -1), ("", -1), ("99999999999", -1), ("2147483647", 2147483647)],
)
def test_convert_workspace_name_to_num(name, expected):
    assert convert_workspace_name_to_num(name) == expected


def test_trim_workspace_name():
    assert trim_workspace_name("1:web") == "web"
    assert trim_workspace_name("plain") == "plain"
    assert trim_workspace_name("a:b:c") == "b:c"


def test_filters_by_output_and_sorts():
    ws = Workspaces({}, "DP-1")
    assert names(ws.on_workspaces(PAYLOAD)) == ["1", "3", "mail"]


def test_all_outputs_keeps_every_workspace():
    ws = Workspaces({"all-outputs": True}, "DP-1")
    result = ws.on_workspaces(json.dumps(PAYLOAD))
    assert sorted(names(result)) == sorted(w["name"] for w in PAYLOAD)
    assert names(result)[-1] == "mail"


def test_alphabetical_sort():
    ws = Workspaces({"alphabetical_sort": True, "all-outputs": True}, "DP-1")
    result = names(ws.on_workspaces(PAYLOAD))
    assert result == sorted(result)


def test_persistent_workspaces():
    config = {"persistent_workspaces": {"5": [], "2": ["DP-1"], "9": ["HDMI-A-1"], "3": []}}
    ws = Workspaces(config, "DP-1")
    result = ws.on_workspaces(PAYLOAD)
    assert names(result) == ["1", "2", "3", "5", "mail"]
    by_name = {w["name"]: w for w in result}
    assert by_name["2"]["target_output"] == "DP-1"
    assert by_name["5"]["target_output"] == ""
    assert "target_output" not in by_name["3"]


def test_sort_values_are_unique_for_unnumbered():
    ws = Workspaces({}, "DP-1")
    payload = [
        {"name": "b", "num": -1, "output": "DP-1"},
        {"name": "a", "num": -1, "output": "DP-1"},
    ]
    result = ws.on_workspaces(payload)
    assert names(result) == ["b", "a"]
    assert len({w["sort"] for w in result}) == len(result)


def test_icon_for_state_and_default():
    ws = Workspaces({"format-icons": {"focused": "F", "default": "D"}}, "DP-1")
    assert ws.icon_for("1", {"focused": True}) == "F"
    assert ws.icon_for("1", {"focused": False}) == "D"


def test_icon_for_trimmed_name_and_fallback():
    ws = Workspaces({"format-icons": {"web": "W"}}, "DP-1")
    assert ws.icon_for("1:web", {}) == "W"
    assert ws.icon_for("2:mail", {}) == "2:mail"


def test_icon_for_persistent():
    config = {"format-icons": {"persistent": "P"}, "format_icons": {"persistent": "P"}}
    ws = Workspaces(config, "DP-1")
    assert ws.icon_for("4", {"target_output": ""}) == "P"


def test_button_label():
    ws = Workspaces({"format": "{index}: {name} {icon}", "format-icons": {"web": "W"}}, "DP-1")
    assert ws.button_label({"name": "1:web", "num": 1}) == "1: web W"
    assert Workspaces({}, "DP-1").button_label({"name": "1:web"}) == "1:web"


def test_button_classes():
    ws = Workspaces({}, "DP-1")
    node = {"name": "1", "focused": True, "urgent": True, "output": "DP-1"}
    assert ws.button_classes(node) == {"focused", "urgent", "current_output"}
    assert ws.button_classes({"name": "2", "target_output": ""}) == {"persistent"}


def test_cycle_wraps():
    ws = Workspaces({}, "DP-1")
    ws.on_workspaces(PAYLOAD)
    assert ws.cycle_workspace(0, True) == "mail"
    assert ws.cycle_workspace(2, False) == "1"
    assert ws.cycle_workspace(1, True) == "1"
    assert ws.cycle_workspace(1, False) == "mail"


def test_cycle_without_wraparound():
    ws = Workspaces({"disable-scroll-wraparound": True}, "DP-1")
    ws.on_workspaces(PAYLOAD)
    assert ws.cycle_workspace(0, True) == "1"
    assert ws.cycle_workspace(2, False) == "mail"


def test_scroll_target():
    ws = Workspaces({}, "DP-1")
    ws.on_workspaces(PAYLOAD)
    assert ws.scroll_target(False) == f'workspace {NO_AUTO_BACK_AND_FORTH} "3"'
    assert ws.scroll_target(True) == f'workspace {NO_AUTO_BACK_AND_FORTH} "mail"'


def test_scroll_target_none_without_focus_or_move():
    ws = Workspaces({"disable-scroll-wraparound": True}, "DP-1")
    ws.on_workspaces(PAYLOAD)
    assert ws.scroll_target(True) is None
    ws.on_workspaces([{"name": "1", "output": "DP-1"}])
    assert ws.scroll_target(False) is None


def test_click_command():
    ws = Workspaces({}, "DP-1")
    assert ws.click_command({"name": "1"}) == 'workspace  "1"'
    flagged = Workspaces({"disable-auto-back-and-forth": True}, "DP-1")
    assert flagged.click_command({"name": "1"}) == f'workspace {NO_AUTO_BACK_AND_FORTH} "1"'
    persistent = ws.click_command({"name": "2", "target_output": "DP-1"})
    assert persistent == (
        f'workspace {NO_AUTO_BACK_AND_FORTH} "2"; move workspace to output "DP-1"; '
        f'workspace {NO_AUTO_BACK_AND_FORTH} "2"'
    )


def test_click_disabled():
    assert Workspaces({"disable-click": True}, "DP-1").click_command({"name": "1"}) is None


def test_is_button_shown():
    ws = Workspaces({"current-only": True}, "DP-1")
    assert ws.is_button_shown({"focused": True}) is True
    assert ws.is_button_shown({"focused": False}) is False
    assert Workspaces({}, "DP-1").is_button_shown({}) is True