"""Sway binding mode module."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Union

log = logging.getLogger(__name__)

DEFAULT_FORMAT = "{}"

_MARKUP_ESCAPES = str.maketrans(
    {"&": "&amp;", "<": "&lt;", ">": "&gt;", "'": "&#39;", '"': "&quot;"}
)


class Mode:
    """Shows the current binding mode, hidden in the default mode."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None) -> None:
        self.config = dict(config or {})
        fmt = self.config.get("format")
        self.format = fmt if isinstance(fmt, str) else DEFAULT_FORMAT
        tooltip = self.config.get("tooltip")
        self.tooltip_enabled = tooltip if isinstance(tooltip, bool) else True
        self.mode = ""
        self.visible = False
        self.label = ""
        self.tooltip: Optional[str] = None

    def on_event(self, payload: Union[str, bytes, Mapping[str, Any]]) -> str:
        """Apply a mode event and return the mode text."""
        try:
            data = json.loads(payload) if isinstance(payload, (str, bytes)) else payload
            change = data.get("change")
            if change != "default":
                text = change if isinstance(change, str) else ""
                self.mode = text if data.get("pango_markup") else text.translate(_MARKUP_ESCAPES)
            else:
                self.mode = ""
        except (ValueError, TypeError, AttributeError) as exc:
            log.error("Mode: %s", exc)
        return self.mode

    def update(self) -> Optional[str]:
        """Recompute the label; return it, or None when hidden."""
        if not self.mode:
            self.visible = False
            return None
        self.label = self.format.format(self.mode)
        if self.tooltip_enabled:
            self.tooltip = self.mode
        self.visible = True
        return self.label