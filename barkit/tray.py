"""System tray module: the ordered set of tray items shown in the bar."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional


class Tray:
    """Items of the tray in display order."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None) -> None:
        self.config = dict(config or {})
        spacing = self.config.get("spacing")
        self.spacing = (
            spacing if isinstance(spacing, int) and not isinstance(spacing, bool) and spacing >= 0 else 0
        )
        self.reverse = self.config.get("reverse-direction") is True
        self.items: List[Any] = []
        self.visible = False

    def on_add(self, item: Any) -> None:
        """Show a new item at the start, or at the end when the direction is reversed."""
        if self.reverse:
            self.items.insert(0, item)
        else:
            self.items.append(item)

    def on_remove(self, item: Any) -> None:
        """Stop showing ``item``."""
        if item in self.items:
            self.items.remove(item)

    def update(self) -> bool:
        """The tray is shown only when it holds items; return whether it is."""
        self.visible = bool(self.items)
        return self.visible