import json

from barkit.mode import Mode


def test_default_mode_hidden():
    mode = Mode()
    mode.on_event(json.dumps({"change": "default"}))
    assert mode.update() is None
    assert mode.visible is False


def test_mode_shown_with_format():
    mode = Mode({"format": "[{}]"})
    mode.on_event({"change": "resize"})
    assert mode.update() == "[resize]"
    assert mode.tooltip == "resize"
    assert mode.visible


def test_mode_escaped_without_markup():
    mode = Mode()
    assert mode.on_event({"change": "a & b"}) == "a &amp; b"


def test_mode_raw_with_markup():
    mode = Mode()
    assert mode.on_event({"change": "<b>x</b>", "pango_markup": True}) == "<b>x</b>"


def test_back_to_default_clears():
    mode = Mode()
    mode.on_event({"change": "resize"})
    mode.on_event({"change": "default"})
    assert mode.mode == ""
    assert mode.update() is None


def test_bad_payload_keeps_mode():
    mode = Mode()
    mode.on_event({"change": "resize"})
    assert mode.on_event("not json") == "resize"


def test_tooltip_disabled():
    mode = Mode({"tooltip": False})
    mode.on_event({"change": "resize"})
    mode.update()
    assert mode.tooltip is None