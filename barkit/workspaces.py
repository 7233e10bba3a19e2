"""Sway workspaces module: ordering, labels and commands for workspace buttons."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Mapping, Optional, Set, Union

WORKSPACE_SWITCH_CMD = 'workspace {} "{}"'
PERSISTENT_WORKSPACE_SWITCH_CMD = (
    'workspace {} "{}"; move workspace to output "{}"; workspace {} "{}"'
)
NO_AUTO_BACK_AND_FORTH = "--no-auto-back-and-forth"
_INT32_MAX = 2**31 - 1
_LEADING_DIGITS = re.compile(r"[0-9]+")


def convert_workspace_name_to_num(name: str) -> int:
    """Return the number sway assigns to a workspace name, or -1."""
    match = _LEADING_DIGITS.match(name)
    if match is None:
        return -1
    value = int(match.group())
    if value > _INT32_MAX:
        return -1
    return value


def trim_workspace_name(name: str) -> str:
    """Return the part of a name after the first colon, if any."""
    index = name.find(":")
    if index >= 0:
        return name[index + 1:]
    return name


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_int(value: Any) -> int:
    if isinstance(value, (bool, int, float)):
        return int(value)
    return 0


class Workspaces:
    """Workspace list for one bar output, kept in sway's order."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None, output_name: str = "") -> None:
        self.config: Dict[str, Any] = dict(config or {})
        self.output_name = output_name
        self.workspaces: List[Dict[str, Any]] = []

    @property
    def _icons(self) -> Mapping[str, Any]:
        icons = self.config.get("format-icons")
        return icons if isinstance(icons, Mapping) else {}

    def on_workspaces(self, payload: Union[str, bytes, List[Mapping[str, Any]]]) -> List[Dict[str, Any]]:
        """Apply a workspace list reply and return the ordered workspaces."""
        data = json.loads(payload) if isinstance(payload, (str, bytes)) else payload
        all_outputs = bool(self.config.get("all-outputs"))
        workspaces = [
            dict(workspace)
            for workspace in data
            if all_outputs or _as_str(workspace.get("output")) == self.output_name
        ]

        persistent = self.config.get("persistent_workspaces")
        if isinstance(persistent, Mapping):
            known = {_as_str(node.get("name")) for node in data}
            for name in sorted(persistent):
                if name in known:
                    continue
                outputs = persistent[name]
                if isinstance(outputs, list) and outputs:
                    if any(_as_str(output) == self.output_name for output in outputs):
                        workspaces.append({
                            "name": name,
                            "target_output": self.output_name,
                            "num": convert_workspace_name_to_num(name),
                        })
                else:
                    workspaces.append({
                        "name": name,
                        "target_output": "",
                        "num": convert_workspace_name_to_num(name),
                    })

        max_num = max((_as_int(w.get("num")) for w in workspaces), default=-1)
        max_num = max(max_num, -1)
        for workspace in workspaces:
            num = _as_int(workspace.get("num"))
            if num > -1:
                workspace["sort"] = num
            else:
                max_num += 1
                workspace["sort"] = max_num

        if self.config.get("alphabetical_sort"):
            workspaces.sort(key=lambda w: _as_str(w.get("name")))
        else:
            workspaces.sort(key=lambda w: (_as_int(w.get("sort")), _as_str(w.get("name"))))
        self.workspaces = workspaces
        return workspaces

    def icon_for(self, name: str, node: Mapping[str, Any]) -> str:
        """Return the icon for a workspace, falling back to its name."""
        icons = self._icons
        misnamed = self.config.get("format_icons")
        for key in (name, "urgent", "focused", "visible", "default"):
            if key in ("focused", "visible", "urgent"):
                if isinstance(icons.get(key), str) and node.get(key):
                    return icons[key]
            elif (
                isinstance(misnamed, Mapping)
                and isinstance(misnamed.get("persistent"), str)
                and isinstance(node.get("target_output"), str)
            ):
                return _as_str(icons.get("persistent"))
            elif isinstance(icons.get(key), str):
                return icons[key]
            elif isinstance(icons.get(trim_workspace_name(key)), str):
                return icons[trim_workspace_name(key)]
        return name

    def button_classes(self, node: Mapping[str, Any]) -> Set[str]:
        """Return the style classes of a workspace button."""
        classes = {key for key in ("focused", "visible", "urgent") if node.get(key)}
        if isinstance(node.get("target_output"), str):
            classes.add("persistent")
        output = node.get("output")
        if isinstance(output, str) and output == self.output_name:
            classes.add("current_output")
        return classes

    def button_label(self, node: Mapping[str, Any]) -> str:
        """Return the text of a workspace button."""
        name = _as_str(node.get("name"))
        fmt = self.config.get("format")
        if not isinstance(fmt, str):
            return name
        return fmt.format(
            icon=self.icon_for(name, node),
            value=name,
            name=trim_workspace_name(name),
            index=_as_str(node.get("num")),
        )

    def cycle_workspace(self, index: int, prev: bool) -> str:
        """Return the name of the workspace before or after ``index``."""
        wraparound = not self.config.get("disable-scroll-wraparound")
        last = len(self.workspaces) - 1
        if prev:
            if index == 0:
                if wraparound:
                    return _as_str(self.workspaces[last].get("name"))
            else:
                index -= 1
        else:
            index += 1
            if index > last:
                if not wraparound:
                    index = last
                else:
                    return _as_str(self.workspaces[0].get("name"))
        return _as_str(self.workspaces[index].get("name"))

    def scroll_target(self, prev: bool) -> Optional[str]:
        """Return the command that scrolling should send, or None."""
        focused = next(
            (i for i, workspace in enumerate(self.workspaces) if workspace.get("focused")), None
        )
        if focused is None:
            return None
        name = self.cycle_workspace(focused, prev)
        if name == _as_str(self.workspaces[focused].get("name")):
            return None
        return WORKSPACE_SWITCH_CMD.format(NO_AUTO_BACK_AND_FORTH, name)

    def click_command(self, node: Mapping[str, Any]) -> Optional[str]:
        """Return the command a click on the button sends, or None."""
        if self.config.get("disable-click"):
            return None
        name = _as_str(node.get("name"))
        target = node.get("target_output")
        if isinstance(target, str):
            return PERSISTENT_WORKSPACE_SWITCH_CMD.format(
                NO_AUTO_BACK_AND_FORTH, name, target, NO_AUTO_BACK_AND_FORTH, name
            )
        flag = NO_AUTO_BACK_AND_FORTH if self.config.get("disable-auto-back-and-forth") else ""
        return WORKSPACE_SWITCH_CMD.format(flag, name)

    def is_button_shown(self, node: Mapping[str, Any]) -> bool:
        """Return whether the button for ``node`` is shown."""
        if self.config.get("current-only"):
            return bool(node.get("focused"))
        return True