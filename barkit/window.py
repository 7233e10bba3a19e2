"""Sway window module: the focused window's title and the bar's style classes."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, List, Mapping, Optional, Set, Tuple, Union

log = logging.getLogger(__name__)

DEFAULT_FORMAT = "{}"

_MODE_CLASSES = (
    ("empty", 1),
    ("solo", 2),
    ("floating", 4),
    ("tabbed", 8),
    ("stacked", 16),
    ("tiled", 32),
)

_MARKUP_ESCAPES = str.maketrans(
    {"&": "&amp;", "<": "&lt;", ">": "&gt;", "'": "&#39;", '"': "&quot;"}
)


def _escape_markup(text: str) -> str:
    return text.translate(_MARKUP_ESCAPES)


def _get(node: Any, key: str) -> Any:
    return node.get(key) if isinstance(node, Mapping) else None


def _str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _int(value: Any) -> int:
    if isinstance(value, (bool, int, float)):
        return int(value)
    return 0


def _children(node: Any, key: str) -> List[Any]:
    value = _get(node, key)
    return list(value) if isinstance(value, list) else []


@dataclass(frozen=True)
class FocusedNode:
    """What the tree search found: window counts, id, title and app details."""

    count: int = 0
    floating_count: int = 0
    id: int = -1
    name: str = ""
    app_id: str = ""
    app_class: str = ""
    shell: str = ""
    layout: str = ""
    output: str = ""


def leaf_nodes_in_workspace(node: Mapping[str, Any]) -> Tuple[int, int]:
    """Return (tiled, floating) leaf window counts below ``node``."""
    nodes = _children(node, "nodes")
    floating_nodes = _children(node, "floating_nodes")
    if not nodes and not floating_nodes:
        node_type = _str(_get(node, "type"))
        if node_type == "workspace":
            return 0, 0
        if node_type == "floating_con":
            return 0, 1
        return 1, 0
    tiled = 0
    floating = 0
    for child in nodes + floating_nodes:
        child_tiled, child_floating = leaf_nodes_in_workspace(child)
        tiled += child_tiled
        floating += child_floating
    return tiled, floating


class _Search:
    """Depth-first search of the layout tree sharing output and workspace state."""

    def __init__(self, config: Mapping[str, Any], output_name: str) -> None:
        self.config = config
        self.output_name = output_name
        self.output = ""
        self.parent_workspace: Optional[Mapping[str, Any]] = None

    def find(self, nodes: List[Any], immediate_parent: Any) -> FocusedNode:
        config = self.config
        for node in nodes:
            node_type = _str(_get(node, "type"))
            if node_type == "output":
                if (not config.get("all-outputs") or config.get("offscreen-css")) and _str(
                    _get(node, "name")
                ) != self.output_name:
                    continue
                self.output = _str(_get(node, "name"))
            elif node_type == "workspace":
                if _str(_get(node, "name")) != _str(_get(immediate_parent, "current_workspace")):
                    continue
                if _get(node, "focused"):
                    tiled, floating = leaf_nodes_in_workspace(node)
                    show_name = (tiled > 0 or floating > 0) and bool(
                        config.get("show-focused-workspace-name")
                    )
                    return FocusedNode(
                        count=tiled,
                        floating_count=floating,
                        id=_int(_get(node, "id")),
                        name=_str(_get(node, "name")) if show_name else "",
                        layout=_str(_get(node, "layout")),
                    )
                self.parent_workspace = node
            elif node_type in ("con", "floating_con") and _get(node, "focused"):
                log.debug(
                    "actual output %s, output found %s, node (focused) found %s",
                    self.output_name, self.output, _str(_get(node, "name")),
                )
                properties = _get(node, "window_properties")
                app_id = _get(node, "app_id")
                if not isinstance(app_id, str):
                    app_id = _str(_get(properties, "instance"))
                app_class = _get(properties, "class")
                shell = _get(node, "shell")
                count = len(node) if isinstance(node, Mapping) else 0
                floating_count = 0
                layout = ""
                if self.parent_workspace is not None:
                    count, floating_count = leaf_nodes_in_workspace(self.parent_workspace)
                    layout = _str(_get(self.parent_workspace, "layout"))
                return FocusedNode(
                    count=count,
                    floating_count=floating_count,
                    id=_int(_get(node, "id")),
                    name=_escape_markup(_str(_get(node, "name"))),
                    app_id=app_id,
                    app_class=app_class if isinstance(app_class, str) else "",
                    shell=shell if isinstance(shell, str) else "",
                    layout=layout,
                )

            tiled = self.find(_children(node, "nodes"), node)
            floating = self.find(_children(node, "floating_nodes"), node)
            if tiled.id > 0 or (floating.id < 0 and tiled.id > -1):
                return tiled
            if floating.id > 0 and floating.name:
                # The class of the tiled branch is kept, as the bar has always done.
                return replace(floating, app_class=tiled.app_class)

        if (
            config.get("all-outputs")
            and config.get("offscreen-css")
            and _str(_get(immediate_parent, "type")) == "workspace"
        ):
            tiled, floating = leaf_nodes_in_workspace(immediate_parent)
            return FocusedNode(
                count=tiled,
                floating_count=floating,
                id=0,
                name=_str(config.get("offscreen-css-text")) if (tiled > 0 or floating > 0) else "",
                layout=_str(_get(immediate_parent, "layout")),
            )
        return FocusedNode()


def find_focused_node(
    nodes: List[Mapping[str, Any]],
    config: Optional[Mapping[str, Any]] = None,
    output_name: str = "",
) -> FocusedNode:
    """Search the outputs in ``nodes`` for the focused window or workspace."""
    search = _Search(config or {}, output_name)
    result = search.find(list(nodes or []), None)
    return replace(result, output=search.output)


class Window:
    """State of the window module for one bar output."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None, output_name: str = "") -> None:
        self.config = dict(config or {})
        fmt = self.config.get("format")
        self.format = fmt if isinstance(fmt, str) else DEFAULT_FORMAT
        self.output_name = output_name
        self.output = ""
        self.focused = FocusedNode()
        self.classes: Set[str] = set()
        self.label = ""
        self.tooltip: Optional[str] = None
        self._old_app_id = ""

    @property
    def tooltip_enabled(self) -> bool:
        tooltip = self.config.get("tooltip")
        return tooltip if isinstance(tooltip, bool) else True

    def on_tree(self, payload: Union[str, bytes, Mapping[str, Any]]) -> FocusedNode:
        """Apply a layout tree reply and return what was found."""
        try:
            data = json.loads(payload) if isinstance(payload, (str, bytes)) else payload
            output = data.get("output")
            result = find_focused_node(
                _children(data, "nodes"), self.config, self.output_name
            )
        except (ValueError, TypeError, AttributeError) as exc:
            log.error("Window: %s", exc)
            return self.focused
        self.output = result.output or (output if isinstance(output, str) else "")
        self.focused = result
        return result

    def _set_class(self, name: str, enable: bool) -> None:
        if enable:
            self.classes.add(name)
        else:
            self.classes.discard(name)

    def update(self) -> str:
        """Recompute the bar classes and the label; return the label."""
        focused = self.focused
        app_id = focused.app_id
        log.debug(
            "workspace layout %s, tiled count %s, floating count %s",
            focused.layout, focused.count, focused.floating_count,
        )
        if focused.count == 0:
            mode = 1 if focused.floating_count == 0 else 4
        elif focused.count == 1:
            mode = 2
        else:
            if focused.layout == "tabbed":
                mode = 8
            elif focused.layout == "stacked":
                mode = 16
            else:
                mode = 32
            if app_id and app_id not in self.classes:
                self.classes.add(app_id)
                self._old_app_id = app_id

        if (
            self._old_app_id
            and (not mode & 2 or self._old_app_id != app_id)
            and self._old_app_id in self.classes
        ):
            log.debug("Removing app_id class: %s", self._old_app_id)
            self.classes.discard(self._old_app_id)
            self._old_app_id = ""

        for name, bit in _MODE_CLASSES:
            self._set_class(name, bool(mode & bit))

        if mode & 2 and app_id and app_id not in self.classes:
            log.debug("Adding app_id class: %s", app_id)
            self.classes.add(app_id)
            self._old_app_id = app_id

        self.label = self.format.format(
            focused.name, title=focused.name, app_id=app_id, shell=focused.shell
        )
        self.tooltip = focused.name if self.tooltip_enabled else None
        return self.label