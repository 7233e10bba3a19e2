"""Visibility of a sway bar driven by bar configuration and IPC events."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from barkit.ipc import IpcError, IpcType

log = logging.getLogger(__name__)

MODE_INVISIBLE = "invisible"
MODULE_SECTIONS = ("modules-left", "modules-center", "modules-right")

Payload = Union[str, bytes, Mapping[str, Any]]


@dataclass(frozen=True)
class BarConfig:
    """The parts of a sway bar configuration that decide visibility."""

    id: str = ""
    mode: str = ""
    hidden_state: str = ""


def _load(payload: Any) -> Any:
    if isinstance(payload, (str, bytes)):
        return json.loads(payload)
    return payload


def parse_bar_config(payload: Payload) -> BarConfig:
    """Extract id, mode and hidden state from a bar config payload."""
    data = _load(payload)
    fields = {}
    for key in ("id", "mode", "hidden_state"):
        value = data.get(key)
        if isinstance(value, str):
            fields[key] = value
    return BarConfig(**fields)


def is_module_enabled(config: Mapping[str, Any], name: str) -> bool:
    """Return True if any module in the bar sections starts with ``name``."""
    for section in MODULE_SECTIONS:
        modules = config.get(section)
        if not isinstance(modules, list):
            continue
        if any(isinstance(module, str) and module.startswith(name) for module in modules):
            return True
    return False


def subscribed_events(config: Mapping[str, Any]) -> List[str]:
    """Return the event names the bar client subscribes to."""
    events = ["bar_state_update", "barconfig_update"]
    has_mode = is_module_enabled(config, "sway/mode")
    has_workspaces = is_module_enabled(config, "sway/workspaces")
    if has_mode:
        events.append("mode")
    if has_workspaces:
        events.append("workspace")
    if has_mode or has_workspaces:
        events.append("binding")
    return events


class BarVisibility:
    """Decides whether a bar is shown, following sway's swaybar rules."""

    def __init__(
        self,
        bar_id: str,
        modifier_reset: str = "press",
        set_mode: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.bar_id = bar_id
        self.modifier_reset = modifier_reset
        self._set_mode = set_mode
        self.config = BarConfig()
        self.visible_by_modifier = False
        self.visible_by_mode = False
        self.visible_by_urgency = False
        self.modifier_no_action = False
        self.mode = ""

    def on_initial_config(self, payload: Payload) -> BarConfig:
        """Apply the reply to the initial bar config request."""
        data = _load(payload)
        if not data.get("success", True):
            raise IpcError(str(data.get("error", "Unknown error")))
        config = parse_bar_config(data)
        self.on_config_update(config)
        return config

    def on_ipc_event(self, event_type: int, payload: Payload) -> Optional[IpcType]:
        """Handle one event; return a command to send when one is needed."""
        request: Optional[IpcType] = None
        try:
            data = _load(payload)
            if event_type == IpcType.EVENT_WORKSPACE:
                if "change" in data:
                    if data["change"] == "urgent":
                        current = data.get("current") or {}
                        if current.get("urgent"):
                            self.on_urgency_update(True)
                        elif self.visible_by_urgency:
                            request = IpcType.GET_WORKSPACES
                    self.modifier_no_action = False
            elif event_type == IpcType.EVENT_MODE:
                if "change" in data:
                    self.on_mode_update(data["change"] != "default")
                    self.modifier_no_action = False
            elif event_type == IpcType.EVENT_BINDING:
                self.modifier_no_action = False
            elif event_type in (IpcType.EVENT_BAR_STATE_UPDATE, IpcType.EVENT_BARCONFIG_UPDATE):
                bar_id = data.get("id")
                if isinstance(bar_id, str) and bar_id != self.bar_id:
                    log.debug("swaybar ipc: ignore event for %s", bar_id)
                    return None
                if "visible_by_modifier" in data:
                    self.on_visibility_update(bool(data["visible_by_modifier"]))
                else:
                    self.on_config_update(parse_bar_config(data))
        except (ValueError, TypeError, AttributeError, KeyError) as exc:
            log.error("BarVisibility.on_ipc_event %s", exc)
        return request

    def on_workspaces(self, workspaces: Union[str, bytes, Iterable[Mapping[str, Any]]]) -> None:
        """Apply a workspace list: urgency stays only if one is still urgent."""
        data = _load(workspaces)
        for workspace in data:
            if workspace.get("urgent"):
                log.debug("Found workspace %s with urgency set", workspace.get("name"))
                self.on_urgency_update(True)
                return
        self.on_urgency_update(False)

    def on_config_update(self, config: BarConfig) -> None:
        log.info(
            "config update for %s: id %s, mode %s, hidden_state %s",
            self.bar_id, config.id, config.mode, config.hidden_state,
        )
        self.config = config
        self.update()

    def on_mode_update(self, visible_by_mode: bool) -> None:
        self.visible_by_mode = visible_by_mode
        self.update()

    def on_visibility_update(self, visible_by_modifier: bool) -> None:
        self.visible_by_modifier = visible_by_modifier
        if visible_by_modifier:
            self.modifier_no_action = True
        if (self.modifier_reset == "press" and self.visible_by_modifier) or (
            self.modifier_reset == "release"
            and not self.visible_by_modifier
            and self.modifier_no_action
        ):
            self.visible_by_urgency = False
            self.visible_by_mode = False
        self.update()

    def on_urgency_update(self, visible_by_urgency: bool) -> None:
        self.visible_by_urgency = visible_by_urgency
        self.update()

    def update(self) -> str:
        """Recompute and apply the bar mode; return it."""
        visible = self.visible_by_modifier or self.visible_by_mode or self.visible_by_urgency
        if self.config.mode == "invisible":
            visible = False
        elif self.config.mode != "hide" or self.config.hidden_state != "hide":
            visible = True
        self.mode = self.config.mode if visible else MODE_INVISIBLE
        if self._set_mode is not None:
            self._set_mode(self.mode)
        return self.mode