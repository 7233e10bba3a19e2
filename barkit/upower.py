"""Power devices module: battery state and remaining time in a label."""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from barkit.upower_tooltip import MISSING_ICON, TooltipRow, tooltip_rows

log = logging.getLogger(__name__)

DEFAULT_ICON_SIZE = 20
DEFAULT_TOOLTIP_SPACING = 4
DEFAULT_TOOLTIP_PADDING = 4
DEFAULT_FORMAT = "{percentage}"
DEFAULT_FORMAT_ALT = "{percentage} {time}"


class DeviceState(enum.IntEnum):
    """Charge state of a power device."""

    UNKNOWN = 0
    CHARGING = 1
    DISCHARGING = 2
    EMPTY = 3
    FULLY_CHARGED = 4
    PENDING_CHARGE = 5
    PENDING_DISCHARGE = 6


class DeviceKind(str, enum.Enum):
    """Kind of a power device."""

    UNKNOWN = "unknown"
    LINE_POWER = "line-power"
    BATTERY = "battery"
    UPS = "ups"
    MONITOR = "monitor"
    MOUSE = "mouse"
    KEYBOARD = "keyboard"
    PDA = "pda"
    PHONE = "phone"
    MEDIA_PLAYER = "media-player"
    TABLET = "tablet"
    COMPUTER = "computer"
    GAMING_INPUT = "gaming-input"
    PEN = "pen"
    TOUCHPAD = "touchpad"
    MODEM = "modem"
    NETWORK = "network"
    HEADSET = "headset"
    SPEAKERS = "speakers"
    HEADPHONES = "headphones"
    VIDEO = "video"
    OTHER_AUDIO = "other-audio"
    REMOTE_CONTROL = "remote-control"
    PRINTER = "printer"
    SCANNER = "scanner"
    CAMERA = "camera"
    WEARABLE = "wearable"
    TOY = "toy"
    BLUETOOTH_GENERIC = "bluetooth-generic"


@dataclass(frozen=True)
class Device:
    """A snapshot of one power device's properties."""

    object_path: str = ""
    kind: DeviceKind = DeviceKind.UNKNOWN
    state: DeviceState = DeviceState.UNKNOWN
    percentage: float = 0.0
    native_path: Optional[str] = None
    model: Optional[str] = None
    icon_name: Optional[str] = None
    time_to_empty: int = 0
    time_to_full: int = 0


_CHARGING = (DeviceState.CHARGING, DeviceState.PENDING_CHARGE)
_DISCHARGING = (DeviceState.DISCHARGING, DeviceState.PENDING_DISCHARGE)


def device_status(state: DeviceState) -> str:
    """Return the CSS status class for a charge state."""
    if state in _CHARGING:
        return "charging"
    if state in _DISCHARGING:
        return "discharging"
    if state == DeviceState.FULLY_CHARGED:
        return "full"
    if state == DeviceState.EMPTY:
        return "empty"
    return "unknown-status"


def _format_number(value: float) -> str:
    text = repr(value)
    return text[:-2] if text.endswith(".0") else text


def time_to_string(seconds: int) -> str:
    """Render a remaining time as hours, or minutes when under one hour."""
    if seconds == 0:
        return ""
    hours = seconds / 3600
    hours_fixed = int(hours * 10) / 10
    minutes = int(hours * 60 * 10) / 10
    if hours_fixed >= 1:
        return f"{_format_number(hours_fixed)} h"
    return f"{_format_number(minutes)} min"


def _config_uint(config: Mapping[str, Any], key: str, default: int) -> int:
    value = config.get(key)
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return default


def _config_bool(config: Mapping[str, Any], key: str, default: bool) -> bool:
    value = config.get(key)
    return value if isinstance(value, bool) else default


def _config_str(config: Mapping[str, Any], key: str, default: str) -> str:
    value = config.get(key)
    return value if isinstance(value, str) else default


class UPower:
    """State of the power devices module."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None) -> None:
        self.config: Dict[str, Any] = dict(config or {})
        self.icon_size = _config_uint(self.config, "icon-size", DEFAULT_ICON_SIZE)
        self.hide_if_empty = _config_bool(self.config, "hide-if-empty", True)
        self.format = _config_str(self.config, "format", DEFAULT_FORMAT)
        self.format_alt = _config_str(self.config, "format-alt", DEFAULT_FORMAT_ALT)
        self.tooltip_spacing = _config_uint(self.config, "tooltip-spacing", DEFAULT_TOOLTIP_SPACING)
        self.tooltip_padding = _config_uint(self.config, "tooltip-padding", DEFAULT_TOOLTIP_PADDING)
        self.tooltip_enabled = _config_bool(self.config, "tooltip", True)
        self.devices: Dict[str, Device] = {}
        self.show_alt_text = False
        self.running = True
        self.visible = True
        self.classes: Set[str] = set()
        self.label = ""
        self.icon_name = MISSING_ICON
        self.has_tooltip = self.tooltip_enabled
        self.tooltip: List[TooltipRow] = []
        self._last_status = ""
        self._lock = threading.Lock()

    def add_device(self, device: Device) -> None:
        """Add a device, replacing any earlier one at the same object path."""
        with self._lock:
            self.devices[device.object_path] = device

    def remove_device(self, object_path: str) -> bool:
        """Forget the device at ``object_path``; True if it was known."""
        with self._lock:
            return self.devices.pop(object_path, None) is not None

    def reset_devices(self, devices: Iterable[Optional[Device]]) -> None:
        """Replace all known devices with ``devices``."""
        with self._lock:
            self.devices.clear()
        for device in devices:
            if device is not None:
                self.add_device(device)

    def toggle(self) -> bool:
        """Switch between the normal and the alternative format."""
        with self._lock:
            self.show_alt_text = not self.show_alt_text
            return self.show_alt_text

    def update(self, display_device: Device) -> str:
        """Recompute the widget from the display device; return the label."""
        with self._lock:
            if not self.running:
                return self.label

            valid = display_device.kind in (DeviceKind.BATTERY, DeviceKind.UPS)
            status = device_status(display_device.state)
            if self._last_status:
                self.classes.discard(self._last_status)
            self.classes.add(status)
            self._last_status = status

            if not self.devices and not valid and self.hide_if_empty:
                self.visible = False
                return self.label
            self.visible = True

            if self.tooltip_enabled:
                self.tooltip = tooltip_rows(self.devices)
                self.has_tooltip = bool(self.devices) and len(self.tooltip) > 0

            percent = f"{int(display_device.percentage + 0.5)}%" if valid else ""
            if display_device.state in _CHARGING:
                time_text = time_to_string(display_device.time_to_full)
            elif display_device.state in _DISCHARGING:
                time_text = time_to_string(display_device.time_to_empty)
            else:
                time_text = ""

            template = self.format_alt if self.show_alt_text else self.format
            text = template.format(percentage=percent, time=time_text)
            self.label = "" if all(ch == " " for ch in text) else text
            self.icon_name = display_device.icon_name or MISSING_ICON
            return self.label