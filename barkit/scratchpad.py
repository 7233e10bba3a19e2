"""Sway scratchpad module: count of hidden windows and their titles."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Set, Union

log = logging.getLogger(__name__)

DEFAULT_FORMAT = "{icon} {count}"
DEFAULT_TOOLTIP_FORMAT = "{app}: {title}"


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _first(value: Any, key: str) -> Any:
    if not isinstance(value, Mapping):
        return None
    children = value.get(key)
    if isinstance(children, list) and children:
        return children[0]
    return None


class Scratchpad:
    """State of the scratchpad module."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None) -> None:
        self.config: Dict[str, Any] = dict(config or {})
        fmt = self.config.get("format")
        self.format = fmt if isinstance(fmt, str) else DEFAULT_FORMAT
        tooltip_format = self.config.get("tooltip-format")
        self.tooltip_format = (
            tooltip_format if isinstance(tooltip_format, str) else DEFAULT_TOOLTIP_FORMAT
        )
        show_empty = self.config.get("show-empty")
        self.show_empty = show_empty if isinstance(show_empty, bool) else False
        tooltip = self.config.get("tooltip")
        self.tooltip_enabled = tooltip if isinstance(tooltip, bool) else True
        self.count = 0
        self.tooltip_text = ""
        self.visible = False
        self.label = ""
        self.tooltip: Optional[str] = None
        self.classes: Set[str] = set()

    def on_tree(self, tree: Union[str, bytes, Mapping[str, Any]]) -> int:
        """Apply a layout tree reply; return the number of scratchpad windows."""
        try:
            data = json.loads(tree) if isinstance(tree, (str, bytes)) else tree
            scratch = _first(_first(data, "nodes"), "nodes")
            windows = scratch.get("floating_nodes") if isinstance(scratch, Mapping) else None
            windows = windows if isinstance(windows, list) else []
            self.count = len(windows)
            if self.tooltip_enabled:
                self.tooltip_text = "\n".join(
                    self.tooltip_format.format(
                        app=_str(window.get("app_id")), title=_str(window.get("name"))
                    )
                    for window in windows
                    if isinstance(window, Mapping)
                )
        except (ValueError, TypeError, AttributeError, KeyError, IndexError) as exc:
            log.error("Scratchpad: %s", exc)
        return self.count

    def _icon(self) -> str:
        icons = self.config.get("format-icons")
        if isinstance(icons, str):
            return icons
        if isinstance(icons, list) and icons:
            return _str(icons[max(0, min(self.count, len(icons) - 1))])
        return ""

    def update(self) -> Optional[str]:
        """Recompute the label; return it, or None when the module is hidden."""
        self.visible = bool(self.count) or self.show_empty
        if self.count:
            self.classes.discard("empty")
        else:
            self.classes.add("empty")
        if not self.visible:
            return None
        self.label = self.format.format(icon=self._icon(), count=self.count)
        self.tooltip = self.tooltip_text if self.tooltip_enabled else None
        return self.label