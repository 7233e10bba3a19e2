import json

from barkit.scratchpad import Scratchpad


def tree(windows):
    return {"nodes": [{"nodes": [{"name": "__i3_scratch", "floating_nodes": windows}]}]}


WINDOWS = [
    {"app_id": "foot", "name": "shell"},
    {"app_id": None, "name": "notes"},
]


def test_count_and_tooltip():
    module = Scratchpad()
    assert module.on_tree(tree(WINDOWS)) == 2
    assert module.tooltip_text == "foot: shell\n: notes"


def test_json_payload():
    module = Scratchpad()
    assert module.on_tree(json.dumps(tree(WINDOWS[:1]))) == 1


def test_missing_nodes_gives_zero():
    module = Scratchpad()
    assert module.on_tree({"nodes": []}) == 0
    assert module.tooltip_text == ""


def test_update_label_with_icons():
    module = Scratchpad({"format-icons": ["", "A", "B"]})
    module.on_tree(tree(WINDOWS))
    assert module.update() == "B 2"
    assert module.tooltip == module.tooltip_text
    assert "empty" not in module.classes


def test_icon_index_clamped():
    module = Scratchpad({"format-icons": ["X", "Y"], "format": "{icon}"})
    module.on_tree(tree(WINDOWS * 3))
    assert module.update() == "Y"


def test_hidden_when_empty():
    module = Scratchpad()
    module.on_tree(tree([]))
    assert module.update() is None
    assert module.visible is False
    assert "empty" in module.classes


def test_show_empty():
    module = Scratchpad({"show-empty": True, "format": "{count}"})
    module.on_tree(tree([]))
    assert module.update() == "0"
    assert module.visible is True


def test_tooltip_disabled():
    module = Scratchpad({"tooltip": False, "tooltip-format": "{title}"})
    module.on_tree(tree(WINDOWS))
    module.update()
    assert module.tooltip is None
    assert module.tooltip_text == ""


def test_custom_tooltip_format():
    module = Scratchpad({"tooltip-format": "{title}"})
    module.on_tree(tree(WINDOWS))
    assert module.tooltip_text.split("\n") == ["shell", "notes"]


def test_bad_payload_keeps_state():
    module = Scratchpad()
    module.on_tree(tree(WINDOWS))
    assert module.on_tree("not json") == 2