"""Temperature module: reads a thermal sensor and renders it in several units."""

from __future__ import annotations

import math
import os
import re
from typing import Any, Dict, Mapping, Optional, Set

DEFAULT_FORMAT = "{temperatureC}°C"
DEFAULT_TOOLTIP_FORMAT = "{temperatureC}°C"
THERMAL_ZONE_PATH = "/sys/class/thermal/thermal_zone{}/temp"
DEFAULT_INTERVAL = 10

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _round(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def resolve_sensor_path(config: Optional[Mapping[str, Any]]) -> str:
    """Return the file the temperature is read from."""
    config = config or {}
    hwmon_path = config.get("hwmon-path")
    if isinstance(hwmon_path, str):
        return hwmon_path
    hwmon_abs = config.get("hwmon-path-abs")
    input_filename = config.get("input-filename")
    if isinstance(hwmon_abs, str) and isinstance(input_filename, str):
        entries = sorted(os.listdir(hwmon_abs))
        if not entries:
            raise RuntimeError(f"No entries in {hwmon_abs}")
        return os.path.join(hwmon_abs, entries[0]) + "/" + input_filename
    zone = config.get("thermal-zone")
    return THERMAL_ZONE_PATH.format(zone if _is_int(zone) else 0)


class Temperature:
    """State of the temperature module."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None) -> None:
        self.config: Dict[str, Any] = dict(config or {})
        fmt = self.config.get("format")
        self.format = fmt if isinstance(fmt, str) else DEFAULT_FORMAT
        interval = self.config.get("interval")
        self.interval = interval if _is_int(interval) else DEFAULT_INTERVAL
        self.file_path = resolve_sensor_path(self.config)
        self._check_readable()
        self.visible = True
        self.label = ""
        self.tooltip: Optional[str] = None
        self.classes: Set[str] = set()

    def _check_readable(self) -> None:
        try:
            with open(self.file_path, encoding="utf-8"):
                pass
        except OSError as exc:
            raise RuntimeError(f"Can't open {self.file_path}") from exc

    def read_celsius(self) -> float:
        """Read the sensor; it reports millidegrees Celsius."""
        try:
            with open(self.file_path, encoding="utf-8") as handle:
                line = handle.readline()
        except OSError as exc:
            raise RuntimeError(f"Can't open {self.file_path}") from exc
        match = _LEADING_INT.match(line)
        value = int(match.group(1)) if match else 0
        return value / 1000.0

    def is_critical(self, temperature_c: int) -> bool:
        threshold = self.config.get("critical-threshold")
        return _is_int(threshold) and temperature_c >= threshold

    @property
    def tooltip_enabled(self) -> bool:
        tooltip = self.config.get("tooltip")
        return tooltip if isinstance(tooltip, bool) else True

    def _icon(self, temperature_c: int, max_temp: int) -> str:
        icons = self.config.get("format-icons")
        if isinstance(icons, str):
            return icons
        if isinstance(icons, list) and icons:
            top = max_temp if max_temp else 100
            index = int(temperature_c * len(icons) / top) if top else 0
            return str(icons[max(0, min(index, len(icons) - 1))])
        return ""

    def update(self) -> Optional[str]:
        """Read the sensor and recompute the label; None when the module is hidden."""
        temperature = self.read_celsius()
        celsius = _round(temperature)
        fahrenheit = _round(temperature * 1.8 + 32)
        kelvin = _round(temperature + 273.15)
        fmt = self.format
        if self.is_critical(celsius):
            critical = self.config.get("format-critical")
            if isinstance(critical, str):
                fmt = critical
            self.classes.add("critical")
        else:
            self.classes.discard("critical")

        if not fmt:
            self.visible = False
            return None
        self.visible = True

        threshold = self.config.get("critical-threshold")
        max_temp = threshold if _is_int(threshold) else 0
        values = {"temperatureC": celsius, "temperatureF": fahrenheit, "temperatureK": kelvin}
        self.label = fmt.format(icon=self._icon(celsius, max_temp), **values)
        if self.tooltip_enabled:
            tooltip_format = self.config.get("tooltip-format")
            if not isinstance(tooltip_format, str):
                tooltip_format = DEFAULT_TOOLTIP_FORMAT
            self.tooltip = tooltip_format.format(**values)
        else:
            self.tooltip = None
        return self.label