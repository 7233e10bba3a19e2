"""Rows shown in the power devices tooltip."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Union

FALLBACK_DEVICE_ICON = "battery-symbolic"
MISSING_ICON = "battery-missing-symbolic"

_DEVICE_ICONS = {
    "line-power": "ac-adapter-symbolic",
    "battery": "battery",
    "ups": "uninterruptible-power-supply-symbolic",
    "monitor": "video-display-symbolic",
    "mouse": "input-mouse-symbolic",
    "keyboard": "input-keyboard-symbolic",
    "pda": "pda-symbolic",
    "phone": "phone-symbolic",
    "media-player": "multimedia-player-symbolic",
    "tablet": "computer-apple-ipad-symbolic",
    "computer": "computer-symbolic",
    "gaming-input": "input-gaming-symbolic",
    "pen": "input-tablet-symbolic",
    "touchpad": "input-touchpad-symbolic",
    "modem": "modem-symbolic",
    "network": "network-wired-symbolic",
    "headset": "audio-headset-symbolic",
    "headphones": "audio-headphones-symbolic",
    "other-audio": "audio-speakers-symbolic",
    "speakers": "audio-speakers-symbolic",
    "video": "camera-web-symbolic",
    "printer": "printer-symbolic",
    "scanner": "scanner-symbolic",
    "camera": "camera-photo-symbolic",
    "bluetooth-generic": "bluetooth-active-symbolic",
}


@dataclass(frozen=True)
class TooltipRow:
    """One device line of the tooltip."""

    object_path: str
    device_icon: str
    model: str
    icon_name: str
    percentage: str


def _kind_key(kind: Any) -> Any:
    return getattr(kind, "value", kind)


def device_icon(kind: Any) -> str:
    """Return the icon name for a device kind such as ``"mouse"``."""
    return _DEVICE_ICONS.get(_kind_key(kind), FALLBACK_DEVICE_ICON)


def tooltip_rows(devices: Union[Mapping[str, Any], Iterable[Any]]) -> List[TooltipRow]:
    """Build tooltip rows, skipping line power and the main battery."""
    if isinstance(devices, Mapping):
        entries = list(devices.items())
    else:
        entries = [(getattr(d, "object_path", ""), d) for d in devices]
    rows = []
    for object_path, device in entries:
        if device is None:
            continue
        kind = getattr(device, "kind", None)
        native_path = getattr(device, "native_path", None)
        if _kind_key(kind) == "line-power" or not native_path or native_path == "BAT0":
            continue
        model = getattr(device, "model", None) or ""
        icon_name = getattr(device, "icon_name", None) or MISSING_ICON
        percentage = float(getattr(device, "percentage", 0.0) or 0.0)
        rows.append(
            TooltipRow(
                object_path=object_path,
                device_icon=device_icon(kind),
                model=model,
                icon_name=icon_name,
                percentage=f"{int(percentage + 0.5)}%",
            )
        )
    return rows