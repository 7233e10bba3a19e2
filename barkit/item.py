"""Status notifier item: properties, icon selection and input handling of a tray entry."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

log = logging.getLogger(__name__)

DEFAULT_ICON_SIZE = 16
UPDATE_DEBOUNCE_TIME_MS = 10
MENU = "menu"

SIGNAL_PROPERTIES: Dict[str, Tuple[str, ...]] = {
    "NewTitle": ("Title",),
    "NewIcon": ("IconName", "IconPixmap"),
    "NewIconThemePath": ("IconThemePath",),
    "NewToolTip": ("ToolTip",),
    "NewStatus": ("Status",),
}

Pixmap = Tuple[int, int, bytes]


@dataclass(frozen=True)
class ToolTip:
    """Icon name and markup text of an item's tooltip."""

    icon_name: str = ""
    text: str = ""


def parse_tooltip(value: Sequence[Any]) -> ToolTip:
    """Build a tooltip from an (icon name, pixmaps, title, description) tuple."""
    icon_name, _pixmaps, title, description = value
    if not all(isinstance(part, str) for part in (icon_name, title, description)):
        raise TypeError("tooltip fields must be strings")
    text = title
    if description:
        text = f"<b>{title}</b>\n{description}"
    return ToolTip(icon_name=icon_name, text=text)


def argb_to_rgba(data: bytes) -> bytes:
    """Move the leading alpha byte of every 4-byte pixel to the end."""
    out = bytearray(data)
    for start in range(0, len(out) - len(out) % 4, 4):
        alpha = out[start]
        out[start:start + 3] = out[start + 1:start + 4]
        out[start + 3] = alpha
    return bytes(out)


def largest_pixmap(pixmaps: Optional[Iterable[Pixmap]]) -> Optional[Pixmap]:
    """Return the largest well-formed ARGB pixmap, converted to RGBA, or None."""
    if pixmaps is None:
        return None
    best: Optional[Pixmap] = None
    best_area = 0
    for width, height, data in pixmaps:
        if width <= 0 or height <= 0 or data is None:
            continue
        area = width * height
        if area > best_area and len(data) == 4 * area:
            best = (width, height, bytes(data))
            best_area = area
    if best is None:
        return None
    width, height, data = best
    return width, height, argb_to_rgba(data)


def pick_icon_size(sizes: Iterable[int], request_size: int) -> int:
    """Choose the icon size to load among the sizes a theme offers (-1 means scalable)."""
    chosen = 0
    for size in sizes:
        if size == request_size or size == -1:
            chosen = request_size
            break
        if size < request_size:
            chosen = size
        elif size > chosen and chosen > 0:
            chosen = request_size
            break
    return chosen if chosen != 0 else request_size


def _lround(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _expect(value: Any, kind: type) -> Any:
    if not isinstance(value, kind):
        raise TypeError(f"expected {kind.__name__}, got {type(value).__name__}")
    return value


class Item:
    """One tray item and the state shown for it."""

    def __init__(
        self,
        bus_name: str,
        object_path: str,
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        config = config or {}
        self.bus_name = bus_name
        self.object_path = object_path
        self.icon_size = DEFAULT_ICON_SIZE
        icon_size = config.get("icon-size")
        if isinstance(icon_size, int) and not isinstance(icon_size, bool) and icon_size >= 0:
            self.icon_size = icon_size
        self.scroll_threshold = 0.0
        threshold = config.get("smooth-scrolling-threshold")
        if isinstance(threshold, (int, float)) and not isinstance(threshold, bool):
            self.scroll_threshold = float(threshold)
        show_passive = config.get("show-passive-items")
        self.show_passive = show_passive if isinstance(show_passive, bool) else False

        self.category = ""
        self.id = ""
        self.title = ""
        self.status = ""
        self.icon_name = ""
        self.icon_pixmap: Optional[Pixmap] = None
        self.overlay_icon_name = ""
        self.attention_icon_name = ""
        self.attention_movie_name = ""
        self.tooltip = ToolTip()
        self.icon_theme_path = ""
        self.menu = ""
        self.item_is_menu = False

        self.visible = self.show_passive
        self.classes: Set[str] = set()
        self.tooltip_markup: Optional[str] = None
        self._pending: Set[str] = set()
        self._scrolled_x = 0.0
        self._scrolled_y = 0.0

    @property
    def is_valid(self) -> bool:
        """An item needs both an id and a category."""
        return bool(self.id) and bool(self.category)

    def set_property(self, name: str, value: Any) -> bool:
        """Apply one property; return False if the value had the wrong shape."""
        try:
            if name == "Category":
                self.category = _expect(value, str)
            elif name == "Id":
                self.id = _expect(value, str)
            elif name == "Title":
                self.title = _expect(value, str)
                if not self.tooltip.text:
                    self.tooltip_markup = self.title
            elif name == "Status":
                self.set_status(_expect(value, str))
            elif name == "IconName":
                self.icon_name = _expect(value, str)
            elif name == "IconPixmap":
                self.icon_pixmap = largest_pixmap(value)
            elif name == "OverlayIconName":
                self.overlay_icon_name = _expect(value, str)
            elif name == "AttentionIconName":
                self.attention_icon_name = _expect(value, str)
            elif name == "AttentionMovieName":
                self.attention_movie_name = _expect(value, str)
            elif name == "ToolTip":
                self.tooltip = parse_tooltip(value)
                if self.tooltip.text:
                    self.tooltip_markup = self.tooltip.text
            elif name == "IconThemePath":
                self.icon_theme_path = _expect(value, str)
            elif name == "Menu":
                self.menu = _expect(value, str)
            elif name == "ItemIsMenu":
                self.item_is_menu = _expect(value, bool)
        except (TypeError, ValueError) as exc:
            log.warning(
                "Failed to set tray item property: %s.%s, value = %r, err = %s",
                self.id or self.bus_name, name, value, exc,
            )
            return False
        return True

    def set_status(self, value: str) -> None:
        """Apply a status: it decides visibility and the single style class."""
        lower = value.lower()
        self.status = value
        self.visible = self.show_passive or lower != "passive"
        if lower == "needsattention":
            lower = "needs-attention"
        self.classes = {lower}

    def on_signal(self, signal_name: str) -> bool:
        """Note properties a signal may have changed; True if a refresh must be scheduled."""
        changed = SIGNAL_PROPERTIES.get(signal_name)
        if changed is None:
            return False
        schedule = not self._pending
        self._pending.update(changed)
        return schedule

    def take_pending(self) -> Set[str]:
        """Return and clear the properties awaiting a refresh."""
        pending, self._pending = self._pending, set()
        return pending

    def scroll(self, direction: str, delta_x: float = 0.0, delta_y: float = 0.0) -> List[Tuple[int, str]]:
        """Return the (delta, orientation) Scroll calls a scroll event produces."""
        dx = dy = 0
        if direction == "up":
            dy = -1
        elif direction == "down":
            dy = 1
        elif direction == "left":
            dx = -1
        elif direction == "right":
            dx = 1
        elif direction == "smooth":
            self._scrolled_x += delta_x
            self._scrolled_y += delta_y
            threshold = self.scroll_threshold
            if self._scrolled_x > threshold:
                dx = _lround(max(self._scrolled_x, 1.0))
                self._scrolled_x = 0.0
            elif self._scrolled_x < -threshold:
                dx = _lround(min(self._scrolled_x, -1.0))
                self._scrolled_x = 0.0
            if self._scrolled_y > threshold:
                dy = _lround(max(self._scrolled_y, 1.0))
                self._scrolled_y = 0.0
            elif self._scrolled_y < -threshold:
                dy = _lround(min(self._scrolled_y, -1.0))
                self._scrolled_y = 0.0
        calls = []
        if dx:
            calls.append((dx, "horizontal"))
        if dy:
            calls.append((dy, "vertical"))
        return calls

    def click_method(self, button: int, has_menu: bool) -> Optional[str]:
        """Return what a click does: MENU, a method name to call, or None."""
        if (button == 1 and self.item_is_menu) or button == 3:
            return MENU if has_menu else "ContextMenu"
        if button == 1:
            return "Activate"
        if button == 2:
            return "SecondaryActivate"
        return None